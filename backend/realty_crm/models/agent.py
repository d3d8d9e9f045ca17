"""
Agent profile model

An Agent is the professional profile of a User with role agent. Its
membership lists are the authoritative record of what the agent has been
assigned.
"""
import uuid
import enum
from sqlalchemy import (
    Column, String, Text, Numeric, Integer, DateTime, Enum, ForeignKey, Table, Uuid
)
from sqlalchemy.orm import relationship

from realty_crm.database import Base, JSONType, utcnow


class Specialization(str, enum.Enum):
    """Market segment an agent works in"""
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    LAND = "land"
    LUXURY = "luxury"
    RENTAL = "rental"


class AgentAvailability(str, enum.Enum):
    """Agent availability"""
    AVAILABLE = "available"
    BUSY = "busy"
    UNAVAILABLE = "unavailable"


agent_properties = Table(
    "agent_properties",
    Base.metadata,
    Column("agent_id", Uuid, ForeignKey("agents.id", ondelete="CASCADE"), primary_key=True),
    Column("property_id", Uuid, ForeignKey("properties.id", ondelete="CASCADE"), primary_key=True),
    Column("assigned_at", DateTime, default=utcnow, nullable=False),
)

agent_customers = Table(
    "agent_customers",
    Base.metadata,
    Column("agent_id", Uuid, ForeignKey("agents.id", ondelete="CASCADE"), primary_key=True),
    Column("customer_id", Uuid, ForeignKey("customers.id", ondelete="CASCADE"), primary_key=True),
    Column("assigned_at", DateTime, default=utcnow, nullable=False),
)


class Agent(Base):
    """Agent model"""

    __tablename__ = "agents"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    # Professional details
    license_number = Column(String(100), nullable=True)
    specialization = Column(JSONType, nullable=False, default=list)  # list of Specialization values
    experience = Column(Integer, default=0, nullable=False)  # years
    bio = Column(Text, nullable=True)

    # Management
    managed_by_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # Performance metrics (set by hand, not derived from deals)
    total_sales = Column(Numeric(14, 2), default=0, nullable=False)
    total_commission = Column(Numeric(14, 2), default=0, nullable=False)
    closed_deals = Column(Integer, default=0, nullable=False)
    active_deals = Column(Integer, default=0, nullable=False)
    customer_satisfaction_rating = Column(Numeric(3, 2), default=0, nullable=False)

    # Availability
    availability = Column(Enum(AgentAvailability), default=AgentAvailability.AVAILABLE, nullable=False, index=True)
    working_hours = Column(JSONType, nullable=True)  # {"start": "09:00", "end": "18:00"}
    commission_rate = Column(Numeric(5, 2), default=0, nullable=False)
    social_media = Column(JSONType, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    user = relationship("User", foreign_keys=[user_id], lazy="selectin")
    assigned_properties = relationship("Property", secondary=agent_properties, lazy="selectin")
    assigned_customers = relationship("Customer", secondary=agent_customers, lazy="selectin")

    @property
    def assigned_property_ids(self) -> list:
        return [p.id for p in self.assigned_properties]

    @property
    def assigned_customer_ids(self) -> list:
        return [c.id for c in self.assigned_customers]

    def __repr__(self) -> str:
        return f"<Agent {self.user_id}>"
