"""
Agent profile Schemas
"""
from typing import Optional, List, Dict
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

from realty_crm.models.agent import AgentAvailability, Specialization
from realty_crm.schemas.base import UpdateSchema
from realty_crm.schemas.user import UserResponse


class WorkingHours(BaseModel):
    start: Optional[str] = None  # "09:00"
    end: Optional[str] = None    # "18:00"


class AgentBase(BaseModel):
    license_number: Optional[str] = None
    specialization: List[Specialization] = Field(default_factory=list)
    experience: int = Field(0, ge=0)
    bio: Optional[str] = None
    availability: AgentAvailability = AgentAvailability.AVAILABLE
    working_hours: Optional[WorkingHours] = None
    commission_rate: float = Field(0, ge=0, le=100)
    social_media: Optional[Dict[str, str]] = None


class AgentCreate(AgentBase):
    """Create the profile of an existing user with role agent"""
    user_id: UUID


class AgentUpdate(UpdateSchema):
    """Schema for updating an agent profile"""
    not_nullable = frozenset({
        "specialization", "experience", "availability", "commission_rate", "total_sales",
        "total_commission", "closed_deals", "active_deals", "customer_satisfaction_rating",
    })

    license_number: Optional[str] = None
    specialization: Optional[List[Specialization]] = None
    experience: Optional[int] = Field(None, ge=0)
    bio: Optional[str] = None
    availability: Optional[AgentAvailability] = None
    working_hours: Optional[WorkingHours] = None
    commission_rate: Optional[float] = Field(None, ge=0, le=100)
    social_media: Optional[Dict[str, str]] = None
    # Performance counters are entered by hand
    total_sales: Optional[float] = Field(None, ge=0)
    total_commission: Optional[float] = Field(None, ge=0)
    closed_deals: Optional[int] = Field(None, ge=0)
    active_deals: Optional[int] = Field(None, ge=0)
    customer_satisfaction_rating: Optional[float] = Field(None, ge=0, le=5)


class AgentResponse(BaseModel):
    """Agent response schema"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    user: Optional[UserResponse] = None
    license_number: Optional[str] = None
    specialization: List[Specialization]
    experience: int
    bio: Optional[str] = None
    managed_by_id: Optional[UUID] = None
    total_sales: float
    total_commission: float
    closed_deals: int
    active_deals: int
    customer_satisfaction_rating: float
    availability: AgentAvailability
    working_hours: Optional[WorkingHours] = None
    commission_rate: float
    social_media: Optional[Dict[str, str]] = None
    assigned_property_ids: List[UUID]
    assigned_customer_ids: List[UUID]
    created_at: datetime
    updated_at: Optional[datetime] = None


class AgentListResponse(BaseModel):
    """Paginated agent list"""
    total: int
    skip: int
    limit: int
    items: List[AgentResponse]


class AgentStats(BaseModel):
    total_properties: int
    total_customers: int
    total_sales: float
    total_commission: float
    closed_deals: int
    active_deals: int
    customer_satisfaction_rating: float
