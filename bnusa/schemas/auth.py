from pydantic import BaseModel


class AuthUser(BaseModel):
    """Identity extracted from a verified bearer token"""

    uid: str
    email: str | None = None
    display_name: str = ""
    photo_url: str = ""

    @property
    def name_or_email(self) -> str:
        return self.display_name or self.email or ""
