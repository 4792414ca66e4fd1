# aqua/services/auth_service.py

from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from datetime import datetime
from loguru import logger
import uuid

from aqua.core.config import settings
from aqua.core.roles import UserRole
from aqua.models.customer import Customer
from aqua.models.user import User
from aqua.core.security import (
    hash_password,
    verify_password,
    create_access_token,
    password_needs_rehash,
)
from aqua.schemas.auth import TokenWithUser
from aqua.schemas.user import UserRead
from aqua.services.numbering import next_sequence_number


def _as_uuid(value) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


# ============================================================================
# FETCH USER BY EMAIL
# ============================================================================
async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


# ============================================================================
# FETCH USER BY ID
# ============================================================================
async def get_user_by_id(session: AsyncSession, user_id) -> User | None:
    user_uuid = _as_uuid(user_id)
    if user_uuid is None:
        return None
    result = await session.execute(select(User).where(User.id == user_uuid))
    return result.scalar_one_or_none()


# ============================================================================
# CREATE USER
# ============================================================================
async def create_user(
    session: AsyncSession,
    full_name: str,
    email: str,
    password: str,
    role: UserRole,
    phone: str | None = None,
    department: str | None = None,
    employee_id: str | None = None,
    address: str | None = None,
    is_active: bool = True,
    commit: bool = True,
) -> User:

    user = User(
        id=uuid.uuid4(),
        full_name=full_name,
        email=email.lower(),
        password_hash=hash_password(password),
        role=role,
        phone=phone,
        department=department,
        employee_id=employee_id,
        address=address,
        is_active=is_active,
    )

    session.add(user)

    if not commit:
        await session.flush()
        return user

    try:
        await session.commit()
        await session.refresh(user)
        return user

    except IntegrityError:
        await session.rollback()
        raise ValueError("A user with this email already exists")


# ============================================================================
# CUSTOMER SELF SIGN-UP (user + customer record in one transaction)
# ============================================================================
async def signup_customer(
    session: AsyncSession,
    full_name: str,
    email: str,
    password: str,
    phone: str | None = None,
    address: str | None = None,
    business_name: str | None = None,
) -> User:
    if await get_user_by_email(session, email):
        raise ValueError("A user with this email already exists")

    try:
        user = await create_user(
            session,
            full_name=full_name,
            email=email,
            password=password,
            role=UserRole.Customer,
            phone=phone,
            address=address,
            commit=False,
        )

        customer = Customer(
            user_id=user.id,
            customer_code=await next_sequence_number(session, Customer.customer_code, "CUST"),
            business_name=business_name,
            contact_person=full_name,
            billing_address=address or "",
        )
        session.add(customer)

        await session.commit()
        await session.refresh(user)

    except IntegrityError:
        await session.rollback()
        raise ValueError("A user with this email already exists")

    logger.info(f"Customer signed up: {user.email}")
    return user


# ============================================================================
# AUTHENTICATE
# ============================================================================
async def authenticate_user(session: AsyncSession, email: str, password: str) -> User | None:
    user = await get_user_by_email(session, email)
    if not user:
        return None

    if not verify_password(password, user.password_hash):
        return None

    # Deactivated accounts keep their data but cannot sign in
    if not user.is_active:
        return None

    if password_needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        session.add(user)
        await session.commit()
        await session.refresh(user)

    return user


# ============================================================================
# CREATE LOGIN RESPONSE
# ============================================================================
def create_login_response(user: User) -> TokenWithUser:
    token = create_access_token(subject=user.id, role=user.role)

    return TokenWithUser(
        access_token=token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserRead.model_validate(user),
    )


# ============================================================================
# SELF-SERVICE
# ============================================================================
async def change_password(session: AsyncSession, user: User, old_password: str, new_password: str) -> None:
    if not verify_password(old_password, user.password_hash):
        raise ValueError("Old password incorrect")

    if old_password == new_password:
        raise ValueError("New password must be different")

    user.password_hash = hash_password(new_password)
    user.updated_at = datetime.utcnow()
    session.add(user)
    await session.commit()


async def update_profile(session: AsyncSession, user: User, changes: dict) -> User:
    # role / is_active / email are not reachable from here
    for field in ("full_name", "phone", "address"):
        if changes.get(field) is not None:
            setattr(user, field, changes[field])

    user.updated_at = datetime.utcnow()
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user
