from typing import Optional, List
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import select
from app.crud.base import CRUDBase
from app.models.property import Unit
from app.models.tenant import Tenant
from app.schemas.tenant import TenantCreate, TenantUpdate


class CRUDTenant(CRUDBase[Tenant, TenantCreate, TenantUpdate]):
    """
    CRUD operations for Tenant model.

    Read methods load the occupied unit and its property so responses can
    show unit name and property address without further queries.
    """

    def _with_unit(self):
        return joinedload(Tenant.unit).joinedload(Unit.property)

    def get_with_unit(self, db: Session, id: int) -> Optional[Tenant]:
        stmt = select(Tenant).where(Tenant.id == id).options(self._with_unit())
        result = db.execute(stmt)
        return result.unique().scalar_one_or_none()

    def get_multi_with_unit(self, db: Session) -> List[Tenant]:
        """
        All tenants ordered by last name, first name.
        """
        stmt = (
            select(Tenant)
            .options(self._with_unit())
            .order_by(Tenant.last_name, Tenant.first_name, Tenant.id)
        )
        result = db.execute(stmt)
        return list(result.unique().scalars().all())

    def get_active_for_unit(
        self,
        db: Session,
        *,
        unit_id: int,
        exclude_id: Optional[int] = None
    ) -> Optional[Tenant]:
        """
        Get the active tenant occupying a unit, if any.

        Args:
            db: Database session
            unit_id: Unit ID
            exclude_id: Tenant ID to ignore (the tenant being updated)

        Returns:
            Tenant instance or None
        """
        stmt = select(Tenant).where(
            Tenant.unit_id == unit_id,
            Tenant.active.is_(True)
        )
        if exclude_id is not None:
            stmt = stmt.where(Tenant.id != exclude_id)
        result = db.execute(stmt.limit(1))
        return result.scalar_one_or_none()


# Create singleton instance
tenant = CRUDTenant(Tenant)
