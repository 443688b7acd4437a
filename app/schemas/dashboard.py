from pydantic import BaseModel, Field
from typing import Optional, List, Dict

class VacantUnit(BaseModel):
    id: int
    name: str
    property_address: str
    type: str
    size: float

class DashboardStats(BaseModel):
    total_properties: int = 0
    total_units: int = 0
    monthly_rent: float = 0
    vacant_units: List[VacantUnit] = Field(default_factory=list)
    active_workers: int = 0

class ServerDiagnostic(BaseModel):
    status: str
    timestamp: str
    environment: str

class DatabaseDiagnostic(BaseModel):
    status: str = "unknown"
    connected: bool = False
    tables: Dict[str, int] = Field(default_factory=dict)
    error: Optional[str] = None

class DiagnosticResponse(BaseModel):
    server: ServerDiagnostic
    database: DatabaseDiagnostic
