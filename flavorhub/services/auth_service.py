import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from flavorhub.errors import AuthenticationError, ConflictError
from flavorhub.metrics import USERS_REGISTERED
from flavorhub.models.user import User
from flavorhub.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from flavorhub.security import create_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        user=UserResponse.model_validate(user),
        token=create_access_token(user),
    )


async def _find_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalars().first()


async def register_user(db: AsyncSession, data: RegisterRequest) -> AuthResponse:
    email = str(data.email).lower()
    if await _find_by_email(db, email) is not None:
        raise ConflictError("User with this email already exists")

    user = User(
        email=email,
        password_hash=get_password_hash(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        phone=data.phone,
        role=data.role,
    )
    db.add(user)
    await db.commit()

    USERS_REGISTERED.labels(data.role.value).inc()
    logger.info("User registered", extra={"user_id": user.id, "role": user.role.value})
    return _auth_response(user)


async def login_user(db: AsyncSession, data: LoginRequest) -> AuthResponse:
    user = await _find_by_email(db, str(data.email))
    # Same message for unknown email and wrong password
    if user is None or not verify_password(data.password, user.password_hash):
        logger.info("Rejected login attempt", extra={"email": str(data.email)})
        raise AuthenticationError("Invalid credentials")

    logger.info("User logged in", extra={"user_id": user.id})
    return _auth_response(user)


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    return await db.get(User, user_id)
