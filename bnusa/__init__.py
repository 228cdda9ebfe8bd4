"""Bnusa Kteb Nus: serialized books, chapters, comments and likes."""
