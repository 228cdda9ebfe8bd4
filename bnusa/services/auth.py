from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from bnusa.core.config import settings
from bnusa.schemas.auth import AuthUser

DEV_USER = AuthUser(
    uid="dev-user",
    email="dev@bnusa.local",
    display_name="Development User",
    photo_url="",
)


class AuthService:
    """Bearer token handling.

    Tokens are issued by the identity provider; this service only checks the
    signature and reads the standard claims (`sub`, `email`, `name`, `picture`).
    """

    @staticmethod
    def create_access_token(
        uid: str,
        email: str | None = None,
        name: str | None = None,
        picture: str | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a signed token (local development and tests)"""
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        claims = {
            "sub": uid,
            "exp": datetime.now(timezone.utc) + expires_delta,
        }
        if email:
            claims["email"] = email
        if name:
            claims["name"] = name
        if picture:
            claims["picture"] = picture
        return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def verify_token(token: str) -> AuthUser | None:
        """Verify and decode a token; None when it is invalid or expired"""
        if not token or not isinstance(token, str):
            return None
        if token.startswith("Bearer "):
            token = token[len("Bearer "):]

        try:
            payload = jwt.decode(
                token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
            )
        except JWTError:
            return None

        uid = payload.get("sub")
        if not uid:
            return None
        return AuthUser(
            uid=uid,
            email=payload.get("email"),
            display_name=payload.get("name") or "",
            photo_url=payload.get("picture") or "",
        )
