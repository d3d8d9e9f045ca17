"""
Property Schemas
"""
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from realty_crm.models.property import PropertyType, PropertyStatus, ListingState
from realty_crm.schemas.base import UpdateSchema


def _canonical_type(v):
    # Legacy clients send "Apartment" / "House"; the enum is lower case
    if isinstance(v, str):
        return v.strip().lower()
    return v


class PropertyCreate(BaseModel):
    """Schema for creating a property"""
    name: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    location: str = Field(..., min_length=1, max_length=500)
    address: Optional[str] = None
    city: Optional[str] = None
    state: ListingState = ListingState.SELL
    property_type: PropertyType = Field(..., alias="type")
    square_feet: float = Field(..., ge=0)
    bedrooms: int = Field(0, ge=0)
    bathrooms: int = Field(0, ge=0)
    parking_spaces: int = Field(0, ge=0)
    year_built: Optional[int] = None
    images: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    amenities: List[str] = Field(default_factory=list)
    status: PropertyStatus = PropertyStatus.AVAILABLE

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("property_type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        return _canonical_type(v)


class PropertyUpdate(UpdateSchema):
    """Schema for updating a property"""
    not_nullable = frozenset({
        "name", "price", "location", "state", "property_type", "square_feet",
        "bedrooms", "bathrooms", "parking_spaces", "images", "features", "amenities", "status",
    })

    name: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    location: Optional[str] = Field(None, min_length=1, max_length=500)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[ListingState] = None
    property_type: Optional[PropertyType] = Field(None, alias="type")
    square_feet: Optional[float] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    parking_spaces: Optional[int] = Field(None, ge=0)
    year_built: Optional[int] = None
    images: Optional[List[str]] = None
    features: Optional[List[str]] = None
    amenities: Optional[List[str]] = None
    status: Optional[PropertyStatus] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("property_type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        return _canonical_type(v)


class AssignAgentRequest(BaseModel):
    """Body of the assign-agent endpoints (the agent's user id)"""
    agent_id: UUID


class PropertyResponse(BaseModel):
    """Property response schema"""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    name: str
    description: Optional[str] = None
    price: float
    location: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: ListingState
    property_type: PropertyType = Field(
        ..., validation_alias=AliasChoices("property_type", "type"), serialization_alias="type"
    )
    square_feet: float
    bedrooms: int
    bathrooms: int
    parking_spaces: int
    year_built: Optional[int] = None
    images: List[str]
    features: List[str]
    amenities: List[str]
    status: PropertyStatus
    uploaded_by_id: UUID
    assigned_agent_id: Optional[UUID] = None
    published_to_frontend: bool
    view_count: int
    inquiry_count: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class PropertyListResponse(BaseModel):
    """Paginated property list"""
    total: int
    skip: int
    limit: int
    items: List[PropertyResponse]
