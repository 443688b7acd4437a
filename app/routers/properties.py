from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.schemas.common import MessageResponse
from app.schemas.property import PropertyCreate, PropertyUpdate, PropertyResponse
from app.services.property import property_service
from app.core.logging_config import logger

router = APIRouter()


@router.get("", response_model=List[PropertyResponse])
def get_properties(db: Session = Depends(get_db)):
    """
    Retrieve all properties with their units and total rent.
    """
    return property_service.get_properties(db=db)


@router.get("/{property_id}", response_model=PropertyResponse)
def get_property(property_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a specific property by ID.

    Args:
        property_id: Property ID
        db: Database session

    Returns:
        Property with units

    Raises:
        NotFoundError 404: If property not found
    """
    return property_service.get_property(db=db, property_id=property_id)


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
def create_property(
    property_data: PropertyCreate,
    db: Session = Depends(get_db)
):
    """
    Create a property together with its units.

    Size defaults to 0 and rent is only kept for occupied units.

    Args:
        property_data: Property creation data
        db: Database session

    Returns:
        Created property
    """
    try:
        logger.info(f"Creating property: address={property_data.address}, units={len(property_data.units)}")
        result = property_service.create_property(db=db, property_data=property_data)
        logger.info(f"Property created successfully: id={result.id}")
        return result
    except Exception as e:
        logger.error(f"Error creating property: {type(e).__name__}: {str(e)}")
        raise


@router.put("/{property_id}", response_model=PropertyResponse)
def update_property(
    property_id: int,
    property_data: PropertyUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a property and replace its units with the submitted list.

    Args:
        property_id: Property ID
        property_data: Property fields and complete unit list
        db: Database session

    Returns:
        Updated property

    Raises:
        NotFoundError 404: If property not found
    """
    try:
        logger.info(f"Updating property: id={property_id}, units={len(property_data.units)}")
        result = property_service.update_property(
            db=db,
            property_id=property_id,
            property_data=property_data
        )
        logger.info(f"Property updated successfully: id={property_id}")
        return result
    except Exception as e:
        logger.error(f"Error updating property {property_id}: {type(e).__name__}: {str(e)}")
        raise


@router.delete("/{property_id}", response_model=MessageResponse)
def delete_property(property_id: int, db: Session = Depends(get_db)):
    """
    Delete a property and all of its units.
    """
    try:
        logger.info(f"Deleting property: id={property_id}")
        property_service.delete_property(db=db, property_id=property_id)
        return {"message": "Immobilie erfolgreich gelöscht"}
    except Exception as e:
        logger.error(f"Error deleting property {property_id}: {type(e).__name__}: {str(e)}")
        raise
