from decimal import Decimal
from typing import Optional, List
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, func
from app.crud.base import CRUDBase
from app.models.property import Property, Unit, UnitStatus
from app.schemas.property import PropertyCreate, PropertyUpdate, UnitCreate


def build_unit(unit_in: UnitCreate) -> Unit:
    """
    Build a Unit row from submitted data.

    Size defaults to 0; rent is only kept for occupied units and
    forced to 0 for every other status.
    """
    size = unit_in.size if unit_in.size is not None else 0
    rent = unit_in.rent if unit_in.rent is not None else 0
    if unit_in.status != UnitStatus.besetzt:
        rent = 0
    return Unit(
        name=unit_in.name,
        type=unit_in.type,
        size=size,
        status=unit_in.status,
        rent=rent,
    )


class CRUDProperty(CRUDBase[Property, PropertyCreate, PropertyUpdate]):
    """
    CRUD operations for Property model.

    Units are owned by their property and always written through it.
    """

    def get_with_units(self, db: Session, id: int) -> Optional[Property]:
        stmt = (
            select(Property)
            .where(Property.id == id)
            .options(selectinload(Property.units))
        )
        result = db.execute(stmt)
        return result.scalar_one_or_none()

    def get_multi_with_units(self, db: Session) -> List[Property]:
        stmt = (
            select(Property)
            .options(selectinload(Property.units))
            .order_by(Property.id)
        )
        result = db.execute(stmt)
        return list(result.scalars().all())

    def create_with_units(
        self,
        db: Session,
        *,
        obj_in: PropertyCreate
    ) -> Property:
        """
        Create a property together with its units.
        """
        db_obj = Property(address=obj_in.address, property_type=obj_in.property_type)
        db_obj.units = [build_unit(unit_in) for unit_in in obj_in.units]
        db.add(db_obj)
        db.flush()
        return db_obj

    def replace_units(
        self,
        db: Session,
        *,
        db_obj: Property,
        units_in: List[UnitCreate]
    ) -> Property:
        """
        Replace the whole unit set of a property.

        Existing units are deleted first, then the submitted list is
        inserted. Unit IDs are not preserved.
        """
        db_obj.units.clear()
        db.flush()
        db_obj.units.extend(build_unit(unit_in) for unit_in in units_in)
        db.flush()
        return db_obj


class CRUDUnit(CRUDBase[Unit, UnitCreate, UnitCreate]):
    """
    CRUD operations for Unit model.
    """

    def get_for_update(self, db: Session, id: int) -> Optional[Unit]:
        """
        Fetch a unit and lock its row until the end of the transaction.
        """
        stmt = select(Unit).where(Unit.id == id).with_for_update()
        result = db.execute(stmt)
        return result.scalar_one_or_none()

    def set_status(self, db: Session, *, db_obj: Unit, status: UnitStatus) -> Unit:
        """
        Change the occupancy status of a unit.

        A unit that becomes available no longer carries rent.
        """
        db_obj.status = status
        if status == UnitStatus.verfuegbar:
            db_obj.rent = 0
        db.add(db_obj)
        db.flush()
        return db_obj

    def sum_occupied_rent(self, db: Session) -> Decimal:
        stmt = select(func.coalesce(func.sum(Unit.rent), 0)).where(Unit.status == UnitStatus.besetzt)
        return db.execute(stmt).scalar_one()

    def get_vacant_with_address(self, db: Session) -> List[dict]:
        """
        List available units joined with the address of their property.
        """
        stmt = (
            select(Unit.id, Unit.name, Unit.type, Unit.size, Property.address.label("property_address"))
            .join(Property, Unit.property_id == Property.id)
            .where(Unit.status == UnitStatus.verfuegbar)
            .order_by(Unit.id)
        )
        return [dict(row._mapping) for row in db.execute(stmt)]


# Create singleton instances
property = CRUDProperty(Property)
unit = CRUDUnit(Unit)
