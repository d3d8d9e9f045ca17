"""
Property model for real estate listings
"""
import uuid
import enum
from sqlalchemy import (
    Column, String, Text, Numeric, Integer, DateTime, Enum, Boolean,
    ForeignKey, Index, Uuid
)

from realty_crm.database import Base, JSONType, utcnow


class PropertyType(str, enum.Enum):
    """Type of property (canonical lower case)"""
    LAND = "land"
    BUILDING = "building"
    HOUSE = "house"
    APARTMENT = "apartment"
    COMMERCIAL = "commercial"
    VILLA = "villa"
    PENTHOUSE = "penthouse"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"

    @classmethod
    def _missing_(cls, value):
        # "Apartment", "APARTMENT" and "apartment" are the same type
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class ListingState(str, enum.Enum):
    """How the listing is offered"""
    SOLD = "sold"
    PREMIUM = "premium"
    SELL = "sell"
    RENT = "rent"


class PropertyStatus(str, enum.Enum):
    """Property status"""
    AVAILABLE = "available"
    UNDER_CONTRACT = "under_contract"
    SOLD = "sold"
    RENTED = "rented"


class Property(Base):
    """Property model"""

    __tablename__ = "properties"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Listing details
    name = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    property_type = Column(Enum(PropertyType), nullable=False, index=True)
    state = Column(Enum(ListingState), nullable=False, default=ListingState.SELL)
    status = Column(Enum(PropertyStatus), nullable=False, default=PropertyStatus.AVAILABLE, index=True)

    # Pricing
    price = Column(Numeric(14, 2), nullable=False, index=True)

    # Location
    location = Column(String(500), nullable=False)
    address = Column(String(500), nullable=True)
    city = Column(String(255), nullable=True, index=True)

    # Characteristics
    square_feet = Column(Numeric(10, 2), nullable=False)
    bedrooms = Column(Integer, default=0, nullable=False)
    bathrooms = Column(Integer, default=0, nullable=False)
    parking_spaces = Column(Integer, default=0, nullable=False)
    year_built = Column(Integer, nullable=True)
    images = Column(JSONType, nullable=False, default=list)  # list of image URLs
    features = Column(JSONType, nullable=False, default=list)
    amenities = Column(JSONType, nullable=False, default=list)

    # Back-office tracking
    uploaded_by_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    assigned_agent_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    published_to_frontend = Column(Boolean, default=False, nullable=False, index=True)
    view_count = Column(Integer, default=0, nullable=False)
    inquiry_count = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index('idx_property_type_state_status', 'property_type', 'state', 'status'),
    )

    def __repr__(self) -> str:
        return f"<Property {self.name[:50]}>"
