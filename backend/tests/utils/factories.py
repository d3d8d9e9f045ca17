"""Test data factories using Faker."""

from datetime import datetime
from functools import lru_cache
from typing import Optional
from uuid import uuid4

from faker import Faker

from realty_crm.core.security import create_access_token, get_password_hash
from realty_crm.database import Database
from realty_crm.models.agent import Agent
from realty_crm.models.customer import Customer
from realty_crm.models.notification import Notification, NotificationType
from realty_crm.models.property import Property, PropertyType
from realty_crm.models.task import Task
from realty_crm.models.user import AuthProvider, User, UserRole

fake = Faker()

DEFAULT_PASSWORD = "secret123"


@lru_cache
def _default_hash() -> str:
    # bcrypt is slow on purpose; hash the shared password once
    return get_password_hash(DEFAULT_PASSWORD)


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}.{uuid4().hex[:10]}@realtycrm.com"


def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


async def _save(database: Database, obj):
    async with database.session_factory() as session:
        session.add(obj)
        await session.commit()
        await session.refresh(obj)
    return obj


async def create_user(
    database: Database,
    role: UserRole = UserRole.AGENT,
    is_active: bool = True,
    email: Optional[str] = None,
    **kwargs,
) -> User:
    """Create an account that can log in with DEFAULT_PASSWORD."""
    user = User(
        name=kwargs.pop("name", fake.name()),
        email=email or unique_email(role.value),
        hashed_password=kwargs.pop("hashed_password", _default_hash()),
        role=role,
        auth_provider=AuthProvider.EMAIL if role == UserRole.USER else AuthProvider.JWT,
        is_active=is_active,
        **kwargs,
    )
    return await _save(database, user)


async def create_agent_profile(database: Database, user: User, **kwargs) -> Agent:
    agent = Agent(user_id=user.id, specialization=["residential"], **kwargs)
    return await _save(database, agent)


async def create_property(
    database: Database,
    uploaded_by: User,
    created_at: Optional[datetime] = None,
    **kwargs,
) -> Property:
    data = {
        "name": f"{fake.street_name()} Residence",
        "property_type": PropertyType.APARTMENT,
        "price": fake.random_int(min=1_000_000, max=9_000_000),
        "location": fake.city(),
        "square_feet": fake.random_int(min=600, max=3000),
        "bedrooms": 3,
        "bathrooms": 2,
    }
    data.update(kwargs)
    if created_at is not None:
        data["created_at"] = created_at
    return await _save(database, Property(uploaded_by_id=uploaded_by.id, **data))


async def create_customer(
    database: Database,
    added_by: User,
    budget_max: float = 200_000,
    created_at: Optional[datetime] = None,
    **kwargs,
) -> Customer:
    data = {
        "name": fake.name(),
        "phone": fake.numerify("01#########"),
        "budget_min": 0,
        "budget_max": budget_max,
    }
    data.update(kwargs)
    if created_at is not None:
        data["created_at"] = created_at
    return await _save(database, Customer(added_by_id=added_by.id, **data))


async def create_task(database: Database, created_by: User, assigned_to: Optional[User] = None, **kwargs) -> Task:
    task = Task(
        title=kwargs.pop("title", fake.sentence(nb_words=4)),
        created_by_id=created_by.id,
        assigned_to_id=(assigned_to or created_by).id,
        **kwargs,
    )
    return await _save(database, task)


async def create_notification(
    database: Database,
    recipient: User,
    is_read: bool = False,
    created_at: Optional[datetime] = None,
    **kwargs,
) -> Notification:
    data = {
        "type": NotificationType.TASK_ASSIGNED,
        "title": "New Task Assigned",
        "message": fake.sentence(),
        "is_read": is_read,
    }
    data.update(kwargs)
    if created_at is not None:
        data["created_at"] = created_at
    return await _save(database, Notification(recipient_id=recipient.id, **data))
