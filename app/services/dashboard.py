from datetime import datetime, timezone
from typing import Callable, TypeVar
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.logging_config import logger
from app.crud import property as property_crud, unit as unit_crud, tenant as tenant_crud
from app.crud import worker as worker_crud, document as document_crud
from app.schemas.dashboard import (
    DashboardStats,
    DatabaseDiagnostic,
    DiagnosticResponse,
    ServerDiagnostic,
    VacantUnit,
)

T = TypeVar("T")


class DashboardService:
    """
    Read-only aggregation for the dashboard and the diagnostic endpoint.

    Each query runs on its own: a failing query is logged and its value
    falls back to zero or an empty list while the others still report.
    When the database cannot be reached at all every value is a default.
    """

    def _is_reachable(self, db: Session) -> bool:
        try:
            db.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database unreachable: {type(e).__name__}: {str(e)}")
            db.rollback()
            return False

    def _safe(self, db: Session, label: str, query: Callable[[], T], default: T) -> T:
        try:
            return query()
        except SQLAlchemyError as e:
            logger.warning(f"Dashboard query '{label}' failed: {type(e).__name__}: {str(e)}")
            # a failed statement aborts the transaction on PostgreSQL
            db.rollback()
            return default

    def get_stats(self, db: Session) -> DashboardStats:
        if not self._is_reachable(db):
            return DashboardStats()

        vacant_rows = self._safe(db, "vacant_units", lambda: unit_crud.get_vacant_with_address(db=db), [])

        return DashboardStats(
            total_properties=self._safe(db, "total_properties", lambda: property_crud.count(db=db), 0),
            total_units=self._safe(db, "total_units", lambda: unit_crud.count(db=db), 0),
            monthly_rent=float(self._safe(db, "monthly_rent", lambda: unit_crud.sum_occupied_rent(db=db), 0)),
            vacant_units=[
                VacantUnit(
                    id=row["id"],
                    name=row["name"],
                    property_address=row["property_address"],
                    type=row["type"],
                    size=float(row["size"] or 0),
                )
                for row in vacant_rows
            ],
            active_workers=self._safe(db, "active_workers", lambda: worker_crud.count_active(db=db), 0),
        )

    def get_diagnostic(self, db: Session) -> DiagnosticResponse:
        """
        Server and database health snapshot.

        Database status is ``ok`` when every table count succeeds,
        ``partial`` when some fail and ``error`` when the database
        cannot be reached.
        """
        server = ServerDiagnostic(
            status="running",
            timestamp=datetime.now(timezone.utc).isoformat(),
            environment=settings.ENVIRONMENT,
        )
        database = DatabaseDiagnostic()

        if not self._is_reachable(db):
            database.status = "error"
            database.error = "Datenbank nicht erreichbar"
            return DiagnosticResponse(server=server, database=database)

        database.connected = True
        counters = {
            "properties": property_crud,
            "units": unit_crud,
            "tenants": tenant_crud,
            "workers": worker_crud,
            "documents": document_crud,
        }
        failed = []
        for table, crud in counters.items():
            count = self._safe(db, f"count {table}", lambda crud=crud: crud.count(db=db), None)
            if count is None:
                failed.append(table)
            else:
                database.tables[table] = count

        if failed:
            database.status = "partial"
            database.error = f"Tabellen nicht lesbar: {', '.join(failed)}"
        else:
            database.status = "ok"

        return DiagnosticResponse(server=server, database=database)

    def ping(self, db: Session) -> bool:
        return self._is_reachable(db)


# Create a singleton instance
dashboard_service = DashboardService()
