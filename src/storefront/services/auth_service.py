from typing import Optional

from passlib.context import CryptContext

from src.config import CONTACT_MIN_LENGTH, JWT_EXPIRE_MINUTES, PASSWORD_MIN_LENGTH
from src.data.models.db_entity.user import User
from src.data.models.enum.user_role import UserRole
from src.data.postgres.user_ops import create_user, get_user_by_login, update_user
from src.storefront.services.session_store import SessionStore
from src.utils.jwt_utils import create_access_token
from src.utils.logger import get_current_logger

# hex_sha1 covers accounts created before bcrypt; they are rehashed on next login
pwd_context = CryptContext(schemes=["bcrypt", "hex_sha1"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def validate_registration(username: str, email: str, password: str, address: str, contact: str) -> list[str]:
    """Human-readable problems with a registration form; empty when valid."""
    errors = []
    if not all(v and v.strip() for v in (username, email, password, address, contact)):
        errors.append("All fields are required.")
    if password and len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password should be at least {PASSWORD_MIN_LENGTH} or more characters long")
    if contact and len(contact.strip()) < CONTACT_MIN_LENGTH:
        errors.append(f"Contact number must be at least {CONTACT_MIN_LENGTH} digits")
    return errors


async def register_user(username: str, email: str, password: str, address: str, contact: str) -> User:
    """
    Create a USER account.

    Raises:
        ValueError: If validation fails
        DuplicateEmailError: If the email is taken
    """
    errors = validate_registration(username, email, password, address, contact)
    if errors:
        raise ValueError(" ".join(errors))

    return await create_user(
        username=username.strip(),
        email=email.strip(),
        hashed_password=hash_password(password),
        address=address.strip(),
        contact=contact.strip(),
        role=UserRole.USER,
    )


async def authenticate_user(login: str, password: str, store: SessionStore) -> Optional[dict]:
    """
    Check credentials, open a shop session and issue a token bound to it.

    Returns:
        Dict with access_token and user info, or None if the credentials are wrong
    """
    logger = get_current_logger()

    user = await get_user_by_login(login)
    if not user:
        logger.warning(f"Login failed: user not found - {login}")
        return None

    valid, new_hash = pwd_context.verify_and_update(password, user.hashed_password)
    if not valid:
        logger.warning(f"Login failed: invalid password - {login}")
        return None

    if new_hash:
        await update_user(user.id, {"hashed_password": new_hash})
        logger.info(f"Upgraded password hash for user_id={user.id}")

    shop_session = await store.create(user.id)
    access_token = create_access_token(
        user_id=user.id,
        username=user.username,
        role=user.role.value,
        session_id=shop_session.session_id,
    )
    logger.info(f"Login successful: user_id={user.id}, username={user.username}, sid={shop_session.session_id}")

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user_id": user.id,
        "username": user.username,
        "role": user.role.value,
        "expires_in": JWT_EXPIRE_MINUTES * 60,
    }


async def logout(session_id: str, store: SessionStore) -> bool:
    logger = get_current_logger()
    deleted = await store.delete(session_id)
    logger.info(f"Logout: sid={session_id} deleted={deleted}")
    return deleted


async def update_profile(user_id: int, fields: dict) -> Optional[User]:
    """
    Update the caller's own profile.

    Only username, email, address, contact and password may change; a new
    password is hashed before storing.

    Raises:
        ValueError: If a provided value is invalid
        DuplicateEmailError: If the new email belongs to someone else
    """
    changes = {}
    for key in ("username", "email", "address", "contact"):
        value = fields.get(key)
        if value is not None:
            if not str(value).strip():
                raise ValueError(f"{key} cannot be empty")
            changes[key] = str(value).strip()

    if "contact" in changes and len(changes["contact"]) < CONTACT_MIN_LENGTH:
        raise ValueError(f"Contact number must be at least {CONTACT_MIN_LENGTH} digits")

    password = fields.get("password")
    if password:
        if len(password) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password should be at least {PASSWORD_MIN_LENGTH} or more characters long")
        changes["hashed_password"] = hash_password(password)

    if not changes:
        raise ValueError("Nothing to update")

    return await update_user(user_id, changes)
