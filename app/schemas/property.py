from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from app.models.property import UnitStatus

class UnitBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=100)
    size: Optional[float] = Field(None, ge=0, description="Living space in m², defaults to 0")
    status: UnitStatus = UnitStatus.verfuegbar
    rent: Optional[float] = Field(None, ge=0, description="Monthly rent, only kept for occupied units")

class UnitCreate(UnitBase):
    pass

class UnitResponse(BaseModel):
    id: int
    property_id: int
    name: str
    type: str
    size: float
    status: UnitStatus
    rent: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PropertyBase(BaseModel):
    address: str = Field(..., min_length=1, max_length=255)
    property_type: str = Field(..., min_length=1, max_length=100)

class PropertyCreate(PropertyBase):
    units: List[UnitCreate] = Field(default_factory=list)

class PropertyUpdate(PropertyBase):
    # Full replace: the submitted list becomes the property's unit set
    units: List[UnitCreate]

class PropertyResponse(PropertyBase):
    id: int
    total_rent: float
    units: List[UnitResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
