from contextlib import contextmanager
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.crud import tenant as tenant_crud, unit as unit_crud
from app.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from app.core.transaction import transaction
from app.models.property import Unit, UnitStatus
from app.models.tenant import Tenant
from app.schemas.tenant import TenantCreate, TenantUpdate

UNIT_OCCUPIED = "Diese Wohneinheit hat bereits einen aktiven Mieter"


class TenantService:
    """
    Service layer for tenants and unit occupancy.

    A unit has at most one active tenant. The check locks the unit row
    before looking for an occupant, and the partial unique index on
    ``tenants.unit_id WHERE active`` rejects anything that slips past it.
    Tenant writes drive the unit status: an active tenant makes the unit
    ``besetzt``, leaving or deactivating makes it ``verfügbar`` again.
    """

    def __init__(self):
        self.crud = tenant_crud
        self.unit_crud = unit_crud

    def get_tenant(self, db: Session, tenant_id: int) -> Tenant:
        """
        Get a tenant with unit and property details.

        Raises:
            NotFoundError: If tenant not found
        """
        tenant = self.crud.get_with_unit(db=db, id=tenant_id)

        if not tenant:
            raise NotFoundError("Mieter nicht gefunden")

        return tenant

    def get_tenants(self, db: Session) -> List[Tenant]:
        return self.crud.get_multi_with_unit(db=db)

    def create_tenant(self, db: Session, tenant_data: TenantCreate) -> Tenant:
        """
        Create an active tenant, occupying the given unit if any.

        Raises:
            InvalidInputError: If the unit does not exist
            ConflictError: If the unit already has an active tenant
        """
        with transaction(db, "Fehler beim Erstellen des Mieters"):
            unit = None
            if tenant_data.unit_id is not None:
                unit = self._lock_unit(db, tenant_data.unit_id)
                self._ensure_unit_free(db, unit_id=unit.id)

            obj_data = tenant_data.model_dump()
            obj_data["active"] = True
            with self._occupancy_guard():
                tenant = self.crud.create(db=db, obj_in=obj_data)

            if unit is not None:
                self.unit_crud.set_status(db=db, db_obj=unit, status=UnitStatus.besetzt)

        return self.get_tenant(db=db, tenant_id=tenant.id)

    def update_tenant(self, db: Session, tenant_id: int, tenant_data: TenantUpdate) -> Tenant:
        """
        Replace all fields of a tenant and update unit occupancy.

        The previous unit becomes available when the tenant moves out of it
        or is deactivated; the new unit becomes occupied while the tenant
        is active. Unit status changes only after the tenant row is written.

        Raises:
            NotFoundError: If tenant not found (no unit is touched)
            InvalidInputError: If the new unit does not exist
            ConflictError: If the new unit already has another active tenant
        """
        with transaction(db, "Fehler beim Aktualisieren des Mieters"):
            tenant = self.crud.get(db=db, id=tenant_id)
            if not tenant:
                raise NotFoundError("Mieter nicht gefunden")

            old_unit_id = tenant.unit_id
            new_unit_id = tenant_data.unit_id

            new_unit = None
            if new_unit_id is not None:
                new_unit = self._lock_unit(db, new_unit_id)
                if tenant_data.active:
                    self._ensure_unit_free(db, unit_id=new_unit_id, exclude_id=tenant_id)

            with self._occupancy_guard():
                self.crud.update(db=db, db_obj=tenant, obj_in=tenant_data.model_dump())

            if old_unit_id is not None and (old_unit_id != new_unit_id or not tenant_data.active):
                self._release_unit(db, unit_id=old_unit_id, tenant_id=tenant_id)

            if new_unit is not None and tenant_data.active:
                self.unit_crud.set_status(db=db, db_obj=new_unit, status=UnitStatus.besetzt)

        return self.get_tenant(db=db, tenant_id=tenant_id)

    def _lock_unit(self, db: Session, unit_id: int) -> Unit:
        unit = self.unit_crud.get_for_update(db=db, id=unit_id)
        if not unit:
            raise InvalidInputError("Wohneinheit nicht gefunden")
        return unit

    def _ensure_unit_free(self, db: Session, *, unit_id: int, exclude_id: Optional[int] = None) -> None:
        occupant = self.crud.get_active_for_unit(db=db, unit_id=unit_id, exclude_id=exclude_id)
        if occupant:
            raise ConflictError(UNIT_OCCUPIED)

    @contextmanager
    def _occupancy_guard(self):
        """Report a hit on the active-unit index as an occupancy conflict."""
        try:
            yield
        except IntegrityError as e:
            message = str(e.orig)
            if "uq_tenants_active_unit" in message or "tenants.unit_id" in message:
                raise ConflictError(UNIT_OCCUPIED) from e
            raise

    def _release_unit(self, db: Session, *, unit_id: int, tenant_id: int) -> None:
        """
        Make a unit available unless another active tenant still holds it.
        """
        if self.crud.get_active_for_unit(db=db, unit_id=unit_id, exclude_id=tenant_id):
            return
        unit = self.unit_crud.get_for_update(db=db, id=unit_id)
        if unit:
            self.unit_crud.set_status(db=db, db_obj=unit, status=UnitStatus.verfuegbar)


# Create a singleton instance
tenant_service = TenantService()
