import re

from bnusa.services.slug import generate_book_slug, is_valid_slug, slugify


def test_slugify_ascii_title():
    assert slugify("  The Mountain   Road! ") == "the-mountain-road"


def test_slugify_folds_accents():
    assert slugify("Café Déjà Vu") == "cafe-deja-vu"


def test_generated_slug_has_seven_digit_suffix():
    slug = generate_book_slug("My First Book")
    assert re.fullmatch(r"my-first-book-\d{7}", slug)
    assert is_valid_slug(slug)


def test_kurdish_title_falls_back_to_book():
    slug = generate_book_slug("چیرۆکی شاخ")
    assert re.fullmatch(r"book-\d{7}", slug)


def test_is_valid_slug_rejects_bad_shapes():
    assert not is_valid_slug("no-suffix")
    assert not is_valid_slug("Upper-1234567")
    assert not is_valid_slug("")
