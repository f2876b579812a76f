"""Authentication service layer.

Business logic for:
- User registration and login
- User lookups (used by the comment service for author details)
"""

from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from src.auth.models import User
from src.auth.schemas import RegisterRequest
from src.auth.security import create_access_token, hash_password, verify_password


if TYPE_CHECKING:
    from cassandra.cluster import Session


logger = structlog.get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class AuthError(Exception):
    """Base authentication error."""

    def __init__(self, message: str, code: str = "auth_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """Invalid email or password."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, "invalid_credentials")


class UserExistsError(AuthError):
    """Email already registered."""

    def __init__(self, message: str = "User already exists"):
        super().__init__(message, "user_exists")


class UserNotFoundError(AuthError):
    """User not found."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message, "user_not_found")


# ==============================================================================
# Auth Service
# ==============================================================================


class AuthService:
    """Account registration, login and user lookups."""

    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for better performance."""
        self._get_user_by_id = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.users WHERE id = ?"
        )
        self._get_user_by_email = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.users WHERE email = ?"
        )
        self._insert_user = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.users
            (id, email, name, avatar_url, password_hash, is_active,
             created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """)

    async def get_user_by_id(self, user_id: UUID) -> User | None:
        """Find user by ID."""
        result = await self.session.aexecute(self._get_user_by_id, [user_id])
        row = result.one()
        return User.from_row(row) if row else None

    async def get_user_by_email(self, email: str) -> User | None:
        """Find user by email address (case-insensitive)."""
        result = await self.session.aexecute(
            self._get_user_by_email, [email.lower().strip()]
        )
        row = result.one()
        return User.from_row(row) if row else None

    async def register_user(self, data: RegisterRequest) -> User:
        """Create an account.

        Raises:
            UserExistsError: If the email is already registered
        """
        if await self.get_user_by_email(data.email):
            raise UserExistsError

        user = User(
            email=data.email,
            name=data.name,
            avatar_url=data.avatar_url,
            password_hash=hash_password(data.password),
        )

        await self.session.aexecute(
            self._insert_user,
            [
                user.id,
                user.email,
                user.name,
                user.avatar_url,
                user.password_hash,
                user.is_active,
                user.created_at,
                user.updated_at,
            ],
        )
        logger.info("user_registered", user_id=str(user.id))
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """Check credentials and return the matching active user.

        Unknown email, wrong password and inactive accounts all raise the same
        error so the response does not reveal which one it was.
        """
        user = await self.get_user_by_email(email)
        if user is None or not user.is_active:
            raise InvalidCredentialsError
        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError
        return user

    @staticmethod
    def issue_token(user: User) -> str:
        """Create the bearer token for a user."""
        return create_access_token({"sub": str(user.id), "email": user.email})
