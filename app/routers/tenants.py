from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.schemas.tenant import TenantCreate, TenantUpdate, TenantResponse
from app.services.tenant import tenant_service
from app.core.logging_config import logger

router = APIRouter()


@router.get("", response_model=List[TenantResponse])
def get_tenants(db: Session = Depends(get_db)):
    """
    Retrieve all tenants with unit and property details.
    """
    return tenant_service.get_tenants(db=db)


@router.get("/{tenant_id}", response_model=TenantResponse)
def get_tenant(tenant_id: int, db: Session = Depends(get_db)):
    return tenant_service.get_tenant(db=db, tenant_id=tenant_id)


@router.post("", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
def create_tenant(
    tenant_data: TenantCreate,
    db: Session = Depends(get_db)
):
    """
    Create a new tenant.

    When a unit is given it is marked occupied. A unit that already has
    an active tenant is rejected.

    Args:
        tenant_data: Tenant creation data
        db: Database session

    Returns:
        Created tenant
    """
    try:
        logger.info(f"Creating tenant: last_name={tenant_data.last_name}, unit_id={tenant_data.unit_id}")
        result = tenant_service.create_tenant(db=db, tenant_data=tenant_data)
        logger.info(f"Tenant created successfully: id={result.id}")
        return result
    except Exception as e:
        logger.error(f"Error creating tenant: {type(e).__name__}: {str(e)}")
        raise


@router.put("/{tenant_id}", response_model=TenantResponse)
def update_tenant(
    tenant_id: int,
    tenant_data: TenantUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a tenant (all fields).

    Moving out or deactivating frees the previous unit.

    Args:
        tenant_id: Tenant ID
        tenant_data: Tenant data
        db: Database session

    Returns:
        Updated tenant

    Raises:
        NotFoundError 404: If tenant not found
        ConflictError 400: If the new unit is already occupied
    """
    try:
        logger.info(f"Updating tenant: id={tenant_id}, unit_id={tenant_data.unit_id}, active={tenant_data.active}")
        result = tenant_service.update_tenant(db=db, tenant_id=tenant_id, tenant_data=tenant_data)
        logger.info(f"Tenant updated successfully: id={tenant_id}")
        return result
    except Exception as e:
        logger.error(f"Error updating tenant {tenant_id}: {type(e).__name__}: {str(e)}")
        raise
