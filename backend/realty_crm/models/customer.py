"""
Customer (lead) model and its communication log
"""
import uuid
import enum
from sqlalchemy import (
    Column, String, Text, Numeric, DateTime, Enum, ForeignKey, Index, Table, Uuid
)
from sqlalchemy.orm import relationship

from realty_crm.database import Base, JSONType, utcnow


class CustomerStatus(str, enum.Enum):
    """Lead pipeline status"""
    NEW = "new"
    CONTACTED = "contacted"
    INTERESTED = "interested"
    NEGOTIATING = "negotiating"
    CLOSED = "closed"
    LOST = "lost"
    NEED_FLAT = "need flat"


class CustomerPriority(str, enum.Enum):
    """Lead priority"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class LeadSource(str, enum.Enum):
    """Where the lead came from"""
    WEBSITE = "website"
    REFERRAL = "referral"
    SOCIAL_MEDIA = "social_media"
    WALK_IN = "walk_in"
    CALL = "call"
    OTHER = "other"


customer_interested_properties = Table(
    "customer_interested_properties",
    Base.metadata,
    Column("customer_id", Uuid, ForeignKey("customers.id", ondelete="CASCADE"), primary_key=True),
    Column("property_id", Uuid, ForeignKey("properties.id", ondelete="CASCADE"), primary_key=True),
)


class Customer(Base):
    """Customer model"""

    __tablename__ = "customers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Contact
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=False)
    address = Column(String(500), nullable=True)

    # Requirements
    budget_min = Column(Numeric(14, 2), nullable=False, default=0)
    budget_max = Column(Numeric(14, 2), nullable=False, default=0)
    preferred_locations = Column(JSONType, nullable=False, default=list)
    property_types = Column(JSONType, nullable=False, default=list)

    # Assignment tracking
    assigned_agent_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    added_by_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    # Pipeline
    status = Column(Enum(CustomerStatus), nullable=False, default=CustomerStatus.NEW)
    priority = Column(Enum(CustomerPriority), nullable=False, default=CustomerPriority.MEDIUM)
    source = Column(Enum(LeadSource), nullable=False, default=LeadSource.WEBSITE)
    last_contact_date = Column(DateTime, nullable=True)
    next_follow_up_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    notes = relationship(
        "CustomerNote",
        back_populates="customer",
        cascade="all, delete-orphan",
        order_by="CustomerNote.added_at",
        lazy="selectin",
    )
    interested_properties = relationship(
        "Property",
        secondary=customer_interested_properties,
        lazy="selectin",
    )

    __table_args__ = (
        Index('idx_customer_status_priority', 'status', 'priority'),
    )

    @property
    def budget(self) -> dict:
        return {"min": self.budget_min, "max": self.budget_max}

    @property
    def interested_property_ids(self) -> list:
        return [p.id for p in self.interested_properties]

    def __repr__(self) -> str:
        return f"<Customer {self.name or self.phone}>"


class CustomerNote(Base):
    """Append-only communication log entry"""

    __tablename__ = "customer_notes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_id = Column(Uuid, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    note = Column(Text, nullable=False)
    added_by_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    added_at = Column(DateTime, default=utcnow, nullable=False)

    customer = relationship("Customer", back_populates="notes")

    def __repr__(self) -> str:
        return f"<CustomerNote {self.customer_id} - {self.added_at}>"
