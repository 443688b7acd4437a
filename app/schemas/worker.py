from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from app.schemas.common import blank_to_none

class SkillResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True

class WorkerSkillAssignment(BaseModel):
    id: int = Field(..., description="Skill ID")
    experience_years: Optional[int] = Field(None, ge=0)

class WorkerSkillResponse(BaseModel):
    id: int
    name: Optional[str] = None
    experience_years: Optional[int] = None

class WorkerBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    hourly_rate: Optional[float] = Field(None, ge=0)

    @field_validator("phone", "email", mode="before")
    @classmethod
    def empty_string_is_none(cls, v):
        return blank_to_none(v)

class WorkerCreate(WorkerBase):
    skills: List[WorkerSkillAssignment] = Field(default_factory=list)

class WorkerUpdate(WorkerBase):
    # Full replace: the submitted list becomes the worker's skill set
    skills: List[WorkerSkillAssignment] = Field(default_factory=list)
    active: bool = True

class WorkerResponse(WorkerBase):
    id: int
    email: Optional[str] = None
    active: bool
    skills: List[WorkerSkillResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
