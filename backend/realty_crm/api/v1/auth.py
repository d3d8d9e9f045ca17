"""
Authentication and account management API endpoints
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from realty_crm.api.deps import get_current_user, require_permission
from realty_crm.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from realty_crm.core.permissions import Action, Resource, ensure_not_self
from realty_crm.core.security import create_access_token, get_password_hash, verify_password
from realty_crm.database import get_db, utcnow
from realty_crm.models.user import AuthProvider, User, UserRole
from realty_crm.schemas.user import (
    AdminLogin,
    PasswordChange,
    ProfileUpdate,
    StaffCreate,
    TokenResponse,
    UserListResponse,
    UserLogin,
    UserRegister,
    UserResponse,
    UserStatusUpdate,
    UserUpdate,
)


router = APIRouter()

logger = logging.getLogger(__name__)


async def _get_user(db: AsyncSession, user_id: UUID) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError("User not found")
    return user


async def _ensure_email_free(db: AsyncSession, email: str, exclude_id: Optional[UUID] = None) -> None:
    stmt = select(User.id).where(User.email == email)
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    if (await db.execute(stmt)).first():
        raise ConflictError("User with this email already exists", field="email")


async def _issue_token(db: AsyncSession, user: User) -> TokenResponse:
    user.last_login = utcnow()
    await db.commit()
    await db.refresh(user)
    access_token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    return TokenResponse(access_token=access_token, user=UserResponse.model_validate(user))


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_in: UserRegister,
    db: AsyncSession = Depends(get_db),
):
    """
    Register a new end user

    Args:
        user_in: Registration data
        db: Database session

    Returns:
        Access token and the created user

    Raises:
        ConflictError: If the email is already registered
    """
    await _ensure_email_free(db, user_in.email)

    user = User(
        name=user_in.name,
        email=user_in.email,
        hashed_password=get_password_hash(user_in.password),
        phone=user_in.phone,
        address=user_in.address,
        role=UserRole.USER,
        auth_provider=AuthProvider.EMAIL,
    )
    db.add(user)
    await db.flush()

    logger.info(f"Registered user {user.email}")
    return await _issue_token(db, user)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db),
):
    """
    End-user login. Staff accounts must use the admin login.
    """
    result = await db.execute(select(User).where(User.email == credentials.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.hashed_password):
        logger.info(f"Failed login for {credentials.email}")
        raise AuthenticationError("Incorrect email or password")

    if user.role != UserRole.USER:
        raise AuthorizationError("Please use the admin login for staff accounts")

    if not user.is_active:
        raise AuthorizationError("Inactive user")

    return await _issue_token(db, user)


@router.post("/admin/login", response_model=TokenResponse)
async def admin_login(
    credentials: AdminLogin,
    db: AsyncSession = Depends(get_db),
):
    """
    Staff login; the account must hold the requested role

    Raises:
        AuthenticationError: Unknown email/role pair or wrong password
        AuthorizationError: The account is deactivated
    """
    result = await db.execute(
        select(User).where(User.email == credentials.email, User.role == UserRole(credentials.role))
    )
    user = result.scalar_one_or_none()

    if not user:
        logger.info(f"Failed staff login for {credentials.email} as {credentials.role}")
        raise AuthenticationError("Invalid credentials or role")

    if not user.is_active:
        raise AuthorizationError("Your account has been deactivated")

    if not verify_password(credentials.password, user.hashed_password):
        logger.info(f"Failed staff login for {credentials.email} as {credentials.role}")
        raise AuthenticationError("Invalid credentials or role")

    return await _issue_token(db, user)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user),
):
    """Get current user information"""
    return current_user


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    profile_in: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update name, phone or address of the caller"""
    for field, value in profile_in.model_dump(exclude_unset=True).items():
        setattr(current_user, field, value)

    await db.commit()
    await db.refresh(current_user)
    return current_user


@router.put("/change-password")
async def change_password(
    password_in: PasswordChange,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Change the caller's password

    Raises:
        AuthenticationError: If the current password does not match
    """
    if not verify_password(password_in.current_password, current_user.hashed_password):
        raise AuthenticationError("Current password is incorrect")

    current_user.hashed_password = get_password_hash(password_in.new_password)
    await db.commit()
    return {"message": "Password changed successfully"}


@router.get("/users", response_model=UserListResponse)
async def list_users(
    role: Optional[UserRole] = Query(None),
    is_active: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.USER, Action.READ)),
):
    """
    List accounts, newest first (used to pick assignees)
    """
    conditions = []
    if role is not None:
        conditions.append(User.role == role)
    if is_active is not None:
        conditions.append(User.is_active.is_(is_active))

    total = await db.scalar(select(func.count(User.id)).where(*conditions))
    result = await db.execute(
        select(User).where(*conditions).order_by(User.created_at.desc())
    )
    return UserListResponse(total=total or 0, items=result.scalars().all())


@router.post("/create-staff", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_staff(
    staff_in: StaffCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.USER, Action.MANAGE)),
):
    """
    Create an admin or agent account

    Raises:
        ConflictError: If the email is already registered
    """
    await _ensure_email_free(db, staff_in.email)

    user = User(
        name=staff_in.name,
        email=staff_in.email,
        hashed_password=get_password_hash(staff_in.password),
        phone=staff_in.phone,
        address=staff_in.address,
        role=UserRole(staff_in.role),
        auth_provider=AuthProvider.JWT,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info(f"{current_user.email} created {user.role.value} account {user.email}")
    return user


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    user_in: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.USER, Action.MANAGE)),
):
    """Edit any account"""
    user = await _get_user(db, user_id)
    update_data = user_in.model_dump(exclude_unset=True)

    if update_data.get("is_active") is False:
        ensure_not_self(current_user, user, "deactivate")
    if update_data.get("email") and update_data["email"] != user.email:
        await _ensure_email_free(db, update_data["email"], exclude_id=user.id)

    password = update_data.pop("password", None)
    if password:
        user.hashed_password = get_password_hash(password)

    for field, value in update_data.items():
        setattr(user, field, value)
    if user.requires_password and not user.hashed_password:
        raise ValidationError("Password required for staff accounts", field="password")

    await db.commit()
    await db.refresh(user)

    logger.info(f"{current_user.email} updated account {user.email}: {sorted(update_data)}")
    return user


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.USER, Action.MANAGE)),
):
    """
    Delete an account

    Raises:
        ValidationError: When deleting one's own account
        ConflictError: When the account still owns records
    """
    user = await _get_user(db, user_id)
    ensure_not_self(current_user, user, "delete")

    email = user.email
    try:
        await db.delete(user)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("User still owns records; deactivate the account instead")

    logger.info(f"{current_user.email} deleted account {email}")
    return {"message": "User deleted successfully"}


@router.patch("/users/{user_id}/status", response_model=UserResponse)
async def set_user_status(
    user_id: UUID,
    status_in: UserStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Resource.USER, Action.MANAGE)),
):
    """Activate or deactivate an account"""
    user = await _get_user(db, user_id)
    ensure_not_self(current_user, user, "activate or deactivate")

    user.is_active = status_in.is_active
    await db.commit()
    await db.refresh(user)

    logger.info(
        f"{current_user.email} {'activated' if user.is_active else 'deactivated'} account {user.email}"
    )
    return user
