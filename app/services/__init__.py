from app.services.property import property_service
from app.services.tenant import tenant_service
from .worker import worker_service
from .document import document_service
from .dashboard import dashboard_service

__all__ = ["property_service", "tenant_service", "worker_service", "document_service", "dashboard_service"]
