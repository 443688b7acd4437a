from typing import List
from sqlalchemy.orm import Session
from app.crud import property as property_crud
from app.core.exceptions import NotFoundError
from app.core.transaction import transaction
from app.schemas.property import PropertyCreate, PropertyUpdate
from app.models.property import Property


class PropertyService:
    """
    Service layer for properties and their units.

    Every write runs in a single transaction: a property is never stored
    without its units, and a failed unit insert rolls back the property.
    """

    def __init__(self):
        self.crud = property_crud

    def get_property(self, db: Session, property_id: int) -> Property:
        """
        Get a property with its units.

        Raises:
            NotFoundError: If property not found
        """
        property_obj = self.crud.get_with_units(db=db, id=property_id)

        if not property_obj:
            raise NotFoundError("Immobilie nicht gefunden")

        return property_obj

    def get_properties(self, db: Session) -> List[Property]:
        """
        Get all properties with their units and total rent.
        """
        return self.crud.get_multi_with_units(db=db)

    def create_property(self, db: Session, property_data: PropertyCreate) -> Property:
        """
        Create a property together with its units.

        Args:
            db: Database session
            property_data: Property creation data including units

        Returns:
            Created Property instance

        Raises:
            WriteError: If any insert fails (nothing is stored)
        """
        with transaction(db, "Fehler beim Erstellen"):
            property_obj = self.crud.create_with_units(db=db, obj_in=property_data)

        return self.get_property(db=db, property_id=property_obj.id)

    def update_property(
        self,
        db: Session,
        property_id: int,
        property_data: PropertyUpdate
    ) -> Property:
        """
        Update a property and replace its whole unit set.

        Args:
            db: Database session
            property_id: Property ID
            property_data: New property fields and the complete unit list

        Returns:
            Updated Property instance

        Raises:
            NotFoundError: If property not found (no unit is touched)
            WriteError: If any write fails
        """
        with transaction(db, "Fehler beim Aktualisieren"):
            property_obj = self.crud.get(db=db, id=property_id)
            if not property_obj:
                raise NotFoundError("Immobilie nicht gefunden")

            self.crud.update(
                db=db,
                db_obj=property_obj,
                obj_in={"address": property_data.address, "property_type": property_data.property_type}
            )
            self.crud.replace_units(db=db, db_obj=property_obj, units_in=property_data.units)

        return self.get_property(db=db, property_id=property_id)

    def delete_property(self, db: Session, property_id: int) -> None:
        """
        Delete a property; its units are removed with it.

        Raises:
            NotFoundError: If property not found
        """
        with transaction(db, "Fehler beim Löschen"):
            deleted = self.crud.delete(db=db, id=property_id)
            if not deleted:
                raise NotFoundError("Immobilie nicht gefunden")


# Create a singleton instance
property_service = PropertyService()
