"""User account database operations."""

from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tripplanner.db.models import User
from tripplanner.db.queries import apply_changes
from tripplanner.models.admin import AdminUserUpdate
from tripplanner.models.users import ProfileUpdate, RegisterRequest

# Columns that must never be cleared by a partial update
REQUIRED_USER_FIELDS = ("first_name", "last_name", "email", "is_admin")


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user(session: AsyncSession, user_id: int) -> User | None:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(
        select(User).where(func.lower(User.email) == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def create_user(
    session: AsyncSession, data: RegisterRequest, password_hash: str, *, is_admin: bool = False
) -> User:
    """Insert a new user account."""
    user = User(
        **data.model_dump(exclude={"password", "email"}),
        email=normalize_email(data.email),
        password_hash=password_hash,
        is_admin=is_admin,
    )
    session.add(user)
    await session.flush()
    return user


async def update_user(
    session: AsyncSession, user: User, data: ProfileUpdate | AdminUserUpdate
) -> User:
    """Apply a partial profile update."""
    changes = data.model_dump(exclude_unset=True)
    if changes.get("email"):
        changes["email"] = normalize_email(changes["email"])
    apply_changes(user, changes, required=REQUIRED_USER_FIELDS)
    user.updated_at = datetime.now(UTC)
    await session.flush()
    return user


async def list_users(session: AsyncSession) -> list[User]:
    result = await session.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
    return list(result.scalars().all())
