import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from jose.utils import base64url_decode, base64url_encode
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError

from medpal.core.config import INSECURE_DEFAULT_SECRET_KEY, Settings
from medpal.schemas.auth import ClaimFields, IdentityClaim

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12


class PasswordHasher:
    """Salted bcrypt hashing. Every ``hash`` call draws a fresh salt."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def verify(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        if not hashed_password:
            return False
        try:
            return self.pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            # Unrecognised or corrupted digest
            return False


def _is_canonical(token: str) -> bool:
    """True when every segment is exactly the base64url its bytes encode to.

    The decoder ignores trailing bits in the last character, so several
    spellings of one signature would otherwise verify.
    """
    segments = token.split(".")
    if len(segments) != 3:
        return False
    for segment in segments:
        try:
            raw = base64url_decode(segment.encode("ascii"))
        except ValueError:
            return False
        if base64url_encode(raw).decode("ascii") != segment:
            return False
    return True


class TokenService:
    """Issues and verifies signed identity tokens (JWT).

    A token is either valid (good signature, not expired) or it is not;
    ``verify`` reports every failure the same way, as ``None``.
    """

    def __init__(self, settings: Settings):
        if settings.SECRET_KEY:
            self.secret_key = settings.SECRET_KEY
        else:
            logger.warning("⚠️ SECRET_KEY is not set; signing tokens with the insecure default key")
            self.secret_key = INSECURE_DEFAULT_SECRET_KEY
        self.algorithm = settings.ALGORITHM
        self.expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    def issue(self, claim: ClaimFields, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        to_encode = {
            "id": claim.id,
            "name": claim.name,
            "email": claim.email,
            "phone": claim.phone,
            "iat": issued_at,
            "exp": issued_at + self.expires_delta,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: Optional[str]) -> Optional[IdentityClaim]:
        if not token or not isinstance(token, str) or not _is_canonical(token):
            return None
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
            return IdentityClaim(**payload)
        except (JWTError, PydanticValidationError, TypeError):
            return None


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None
