import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from medpal.core.config import Settings
from medpal.core.exceptions import DuplicateUserError, InvalidCredentialsError, ValidationError
from medpal.core.security import PasswordHasher, TokenService
from medpal.crud.user import UserStore
from medpal.reminders.metrics import auth_events_total
from medpal.schemas.auth import AuthResult, ClaimFields, IdentityClaim
from medpal.schemas.user import UserCreate, UserInDBCreate, UserRecord

logger = logging.getLogger(__name__)


def _claim_for(user: UserRecord) -> ClaimFields:
    return ClaimFields(id=user.id, name=user.name, email=user.email, phone=user.phone)


class AuthService:
    def __init__(self, store: UserStore, hasher: PasswordHasher, tokens: TokenService, settings: Settings):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self.membership_type = settings.DEFAULT_MEMBERSHIP_TYPE

    async def register(self, fields: UserCreate | Dict[str, Any]) -> AuthResult:
        """Create an account and sign the new user in.

        The uniqueness check runs before anything is written, and the record
        is only persisted once the password hash exists.
        """
        if not isinstance(fields, UserCreate):
            try:
                fields = UserCreate.model_validate(fields)
            except PydanticValidationError as e:
                bad = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
                raise ValidationError("Missing or invalid required fields", details={"fields": bad}) from e

        existing_user = await self.store.find_user_by_email(fields.email)
        if existing_user:
            auth_events_total.labels(operation="register", outcome="duplicate").inc()
            logger.info(f"Registration rejected, email already registered: {fields.email}")
            raise DuplicateUserError()

        hashed_password = self.hasher.hash(fields.password)
        user = await self.store.create_user(
            UserInDBCreate(
                **fields.model_dump(exclude={"password"}),
                password_hash=hashed_password,
                membership_type=self.membership_type,
            )
        )

        token = self.tokens.issue(_claim_for(user))
        auth_events_total.labels(operation="register", outcome="success").inc()
        logger.info(f"✅ Registered user {user.id} ({user.email})")
        return AuthResult(user=user, token=token)

    async def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        """Verify credentials and issue a token.

        Unknown email and wrong password both raise the same
        ``InvalidCredentialsError`` so callers cannot tell which accounts exist.
        """
        if not email or not email.strip() or not password:
            raise ValidationError("Email and password are required")

        user = await self.store.find_user_by_email(email.strip())
        if user is None or not self.hasher.verify(password, user.password_hash):
            auth_events_total.labels(operation="login", outcome="invalid_credentials").inc()
            logger.info(f"Login failed for {email.strip()}")
            raise InvalidCredentialsError()

        token = self.tokens.issue(_claim_for(user))
        auth_events_total.labels(operation="login", outcome="success").inc()
        logger.info(f"✅ Login successful for user {user.id}")
        return AuthResult(user=user, token=token)

    def authenticate(self, token: Optional[str]) -> Optional[IdentityClaim]:
        return self.tokens.verify(token)
