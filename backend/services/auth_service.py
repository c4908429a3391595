"""
Account registration and login backed by the users table
"""

from typing import Callable

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.database import User
from shared.auth_models import AuthResponse, RegisterRequest, UserProfile
from shared.errors import ConflictError, UnauthorizedError
from shared.logging_utils import setup_logging
from shared.security import hash_password_async, verify_password_async
from shared.time_utils import ensure_utc, utcnow

logger = setup_logging("auth-service")


def to_profile(user: User) -> UserProfile:
    return UserProfile(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        permissions=list(user.permissions or []),
        avatar=user.avatar,
        last_login_at=ensure_utc(user.last_login_at),
        created_at=ensure_utc(user.created_at),
    )


class AuthService:
    """Register users, check credentials and issue tokens"""

    def __init__(self, session: AsyncSession, token_factory: Callable[[dict[str, str]], str]):
        self.session = session
        self.token_factory = token_factory

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(func.lower(User.email) == email.lower()))
        return result.scalar_one_or_none()

    def _issue(self, user: User) -> AuthResponse:
        token = self.token_factory(
            {"sub": user.id, "email": user.email, "name": user.name, "role": user.role}
        )
        return AuthResponse(user=to_profile(user), access_token=token)

    async def register(self, request: RegisterRequest) -> AuthResponse:
        """Register a new user; emails are unique regardless of case."""
        email = request.email.lower()
        if await self.get_by_email(email):
            raise ConflictError("Email is already registered")

        user = User(
            name=request.name,
            email=email,
            hashed_password=await hash_password_async(request.password),
            role="user",
            permissions=[],
            is_active=True,
        )
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("Email is already registered") from e

        logger.info(f"Registered new user: {user.id}")
        return self._issue(user)

    async def authenticate(self, email: str, password: str) -> User | None:
        """Return the user when the credentials match an active account."""
        user = await self.get_by_email(email)
        if not user or not user.is_active:
            return None
        if not await verify_password_async(password, user.hashed_password):
            return None
        return user

    async def login(self, email: str, password: str) -> AuthResponse:
        user = await self.authenticate(email, password)
        if not user:
            raise UnauthorizedError("Invalid credentials")

        user.last_login_at = utcnow()
        await self.session.commit()
        logger.info(f"User logged in: {user.id}")
        return self._issue(user)

    async def get_profile(self, user_id: str) -> UserProfile:
        user = await self.session.get(User, user_id)
        if user is None:
            raise UnauthorizedError("User not found")
        return to_profile(user)
