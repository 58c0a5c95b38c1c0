"""Database operations for User entity."""

from typing import Any

from sqlalchemy import select, or_, func
from sqlalchemy.exc import IntegrityError

from src.data.postgres.connection import db_connection
from src.data.models.db_entity.user import User
from src.data.models.enum.user_role import UserRole
from src.utils.logger import get_current_logger


class DuplicateEmailError(ValueError):
    """Raised when an email address is already registered."""


async def get_user_by_id(user_id: int) -> User | None:
    session = db_connection.get_session()
    async with session:
        result = await session.execute(select(User).filter(User.id == user_id))
        return result.scalar_one_or_none()


async def get_user_by_email(email: str) -> User | None:
    """Case-insensitive lookup by email."""
    session = db_connection.get_session()
    async with session:
        result = await session.execute(
            select(User).filter(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()


async def get_user_by_login(login: str) -> User | None:
    """
    Find a user by email (case-insensitive) or exact username.

    Email matches win when both could apply.
    """
    session = db_connection.get_session()
    async with session:
        result = await session.execute(
            select(User).where(
                or_(
                    func.lower(User.email) == login.strip().lower(),
                    User.username == login.strip(),
                )
            )
        )
        users = list(result.scalars().all())
        for user in users:
            if user.email.lower() == login.strip().lower():
                return user
        return users[0] if users else None


async def create_user(
    username: str,
    email: str,
    hashed_password: str,
    address: str | None = None,
    contact: str | None = None,
    role: UserRole = UserRole.USER,
) -> User:
    """
    Insert a new user.

    Raises:
        DuplicateEmailError: If the email is already registered
    """
    logger = get_current_logger()
    session = db_connection.get_session()
    async with session:
        existing = await session.execute(
            select(User.id).filter(func.lower(User.email) == email.lower())
        )
        if existing.first():
            raise DuplicateEmailError(f"Email '{email}' is already registered")

        user = User(
            username=username,
            email=email.lower(),
            hashed_password=hashed_password,
            address=address,
            contact=contact,
            role=role,
        )
        session.add(user)
        try:
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            raise DuplicateEmailError(f"Email '{email}' is already registered") from e
        await session.refresh(user)
        logger.info(f"Created user id={user.id} email={user.email} role={user.role.value}")
        return user


async def update_user(user_id: int, fields: dict[str, Any]) -> User | None:
    """
    Update the given columns of a user.

    Returns:
        The updated User, or None if not found

    Raises:
        DuplicateEmailError: If the new email belongs to someone else
    """
    logger = get_current_logger()
    session = db_connection.get_session()
    async with session:
        result = await session.execute(select(User).filter(User.id == user_id))
        user = result.scalar_one_or_none()
        if not user:
            return None

        if "email" in fields and fields["email"]:
            fields = {**fields, "email": fields["email"].strip().lower()}

        for key, value in fields.items():
            setattr(user, key, value)

        try:
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            raise DuplicateEmailError(f"Email '{fields.get('email')}' is already in use") from e
        await session.refresh(user)
        logger.info(f"Updated user {user_id}: {sorted(k for k in fields if k != 'hashed_password')}")
        return user


async def list_users() -> list[User]:
    """All users, newest first."""
    session = db_connection.get_session()
    async with session:
        result = await session.execute(select(User).order_by(User.id.desc()))
        return list(result.scalars().all())


async def delete_user(user_id: int) -> bool:
    """Delete a user. Their past orders remain (orders keep an email snapshot)."""
    logger = get_current_logger()
    session = db_connection.get_session()
    async with session:
        result = await session.execute(select(User).filter(User.id == user_id))
        user = result.scalar_one_or_none()
        if not user:
            return False
        await session.delete(user)
        await session.commit()
        logger.info(f"Deleted user {user_id}")
        return True
