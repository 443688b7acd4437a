from app.crud.base import CRUDBase
from app.crud.property import property, unit
from .tenant import tenant
from .worker import worker, skill
from .document import document, document_category

__all__ = ["CRUDBase", "property", "unit", "tenant", "worker", "skill", "document", "document_category"]
