"""
Customer Schemas
"""
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from realty_crm.models.customer import CustomerStatus, CustomerPriority, LeadSource
from realty_crm.models.property import PropertyType
from realty_crm.schemas.base import UpdateSchema


class Budget(BaseModel):
    """Budget range in the base currency unit"""
    model_config = ConfigDict(from_attributes=True)

    min: float = Field(0, ge=0)
    max: float = Field(0, ge=0)

    @model_validator(mode="after")
    def check_range(self):
        if self.max and self.min > self.max:
            raise ValueError("budget.min cannot exceed budget.max")
        return self


class CustomerCreate(BaseModel):
    """Schema for creating a customer"""
    name: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: str = Field(..., min_length=1, max_length=50)
    address: Optional[str] = None
    budget: Budget = Field(default_factory=Budget)
    preferred_locations: List[str] = Field(default_factory=list)
    property_types: List[PropertyType] = Field(default_factory=list)
    interested_property_ids: List[UUID] = Field(default_factory=list)
    assigned_agent_id: Optional[UUID] = None
    status: CustomerStatus = CustomerStatus.NEW
    priority: CustomerPriority = CustomerPriority.MEDIUM
    source: LeadSource = LeadSource.WEBSITE
    last_contact_date: Optional[datetime] = None
    next_follow_up_date: Optional[datetime] = None


class CustomerUpdate(UpdateSchema):
    """Schema for updating a customer"""
    not_nullable = frozenset({"phone", "preferred_locations", "status", "priority", "source"})

    name: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=50)
    address: Optional[str] = None
    budget: Optional[Budget] = None
    preferred_locations: Optional[List[str]] = None
    property_types: Optional[List[PropertyType]] = None
    interested_property_ids: Optional[List[UUID]] = None
    assigned_agent_id: Optional[UUID] = None
    status: Optional[CustomerStatus] = None
    priority: Optional[CustomerPriority] = None
    source: Optional[LeadSource] = None
    last_contact_date: Optional[datetime] = None
    next_follow_up_date: Optional[datetime] = None


class NoteCreate(BaseModel):
    note: str = Field(..., min_length=1)


class CustomerNoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    note: str
    added_by_id: Optional[UUID] = None
    added_at: datetime


class CustomerResponse(BaseModel):
    """Customer response schema"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: Optional[str] = None
    email: Optional[str] = None
    phone: str
    address: Optional[str] = None
    budget: Budget
    preferred_locations: List[str]
    property_types: List[str]
    interested_property_ids: List[UUID]
    assigned_agent_id: Optional[UUID] = None
    added_by_id: UUID
    status: CustomerStatus
    priority: CustomerPriority
    source: LeadSource
    last_contact_date: Optional[datetime] = None
    next_follow_up_date: Optional[datetime] = None
    notes: List[CustomerNoteResponse]
    created_at: datetime
    updated_at: Optional[datetime] = None


class CustomerListResponse(BaseModel):
    """Paginated customer list"""
    total: int
    skip: int
    limit: int
    items: List[CustomerResponse]
