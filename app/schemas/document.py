from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime


def normalize_tag_names(names: List[str]) -> List[str]:
    """Drop blanks and duplicates, keep submission order."""
    seen = []
    for name in names:
        name = name.strip()
        if name and name not in seen:
            seen.append(name)
    return seen


class DocumentCategoryResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True

class DocumentTenantSummary(BaseModel):
    id: int
    first_name: str
    last_name: str

    class Config:
        from_attributes = True

class DocumentCreate(BaseModel):
    """Metadata accompanying an uploaded file."""
    category_id: int
    tenant_id: Optional[int] = None
    description: Optional[str] = None
    is_confidential: bool = False
    created_by: str = "system"
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v):
        return normalize_tag_names(v)

class DocumentUpdate(BaseModel):
    """Partial update; only the fields present in the request are written."""
    model_config = ConfigDict(populate_by_name=True)

    category_id: Optional[int] = Field(None, alias="categoryId")
    description: Optional[str] = None
    is_confidential: Optional[bool] = Field(None, alias="isConfidential")
    tags: Optional[List[str]] = None

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v):
        if v is None:
            return v
        return normalize_tag_names(v)

class DocumentFilter(BaseModel):
    tenant_id: Optional[int] = None
    category_id: Optional[int] = None
    is_confidential: Optional[bool] = None
    tags: Optional[List[str]] = None

class DocumentResponse(BaseModel):
    id: int
    filename: str
    original_filename: str
    mime_type: str
    file_size: int
    category_id: int
    category_name: Optional[str] = None
    tenant_id: Optional[int] = None
    tenant: Optional[DocumentTenantSummary] = None
    description: Optional[str] = None
    is_confidential: bool
    created_by: str
    file_path: str
    tags: List[str] = []
    upload_date: Optional[datetime] = None
    last_modified: Optional[datetime] = None

    class Config:
        from_attributes = True

class DocumentCreatedResponse(BaseModel):
    id: int
