from typing import List
from sqlalchemy.orm import Session
from app.crud import worker as worker_crud, skill as skill_crud
from app.core.exceptions import InvalidInputError, NotFoundError
from app.core.transaction import transaction
from app.models.worker import Skill, Worker
from app.schemas.worker import WorkerCreate, WorkerUpdate, WorkerSkillAssignment


class WorkerService:
    """
    Service layer for workers (Handwerker) and their skills.

    Workers are never removed: deleting one only clears its active flag,
    so history referring to it stays intact.
    """

    def __init__(self):
        self.crud = worker_crud
        self.skill_crud = skill_crud

    def get_worker(self, db: Session, worker_id: int) -> Worker:
        worker = self.crud.get_with_skills(db=db, id=worker_id)

        if not worker:
            raise NotFoundError("Handwerker nicht gefunden")

        return worker

    def get_active_workers(self, db: Session) -> List[Worker]:
        return self.crud.get_active(db=db)

    def get_skills(self, db: Session) -> List[Skill]:
        return self.skill_crud.get_multi_by_name(db=db)

    def create_worker(self, db: Session, worker_data: WorkerCreate) -> Worker:
        """
        Create an active worker with skill assignments.

        Raises:
            InvalidInputError: If a skill ID is unknown or repeated
        """
        with transaction(db, "Fehler beim Erstellen des Handwerkers"):
            self._validate_skills(db, worker_data.skills)
            worker = self.crud.create_with_skills(db=db, obj_in=worker_data)

        return self.get_worker(db=db, worker_id=worker.id)

    def update_worker(self, db: Session, worker_id: int, worker_data: WorkerUpdate) -> Worker:
        """
        Replace the fields and the complete skill set of a worker.

        Raises:
            NotFoundError: If worker not found
            InvalidInputError: If a skill ID is unknown or repeated
        """
        with transaction(db, "Fehler beim Aktualisieren des Handwerkers"):
            worker = self.crud.get(db=db, id=worker_id)
            if not worker:
                raise NotFoundError("Handwerker nicht gefunden")

            self._validate_skills(db, worker_data.skills)
            self.crud.update(
                db=db,
                db_obj=worker,
                obj_in=worker_data.model_dump(exclude={"skills"})
            )
            self.crud.replace_skills(db=db, db_obj=worker, skills_in=worker_data.skills)

        return self.get_worker(db=db, worker_id=worker_id)

    def delete_worker(self, db: Session, worker_id: int) -> None:
        """
        Deactivate a worker.

        Raises:
            NotFoundError: If worker not found
        """
        with transaction(db, "Fehler beim Löschen des Handwerkers"):
            worker = self.crud.get(db=db, id=worker_id)
            if not worker:
                raise NotFoundError("Handwerker nicht gefunden")
            self.crud.update(db=db, db_obj=worker, obj_in={"active": False})

    def _validate_skills(self, db: Session, skills: List[WorkerSkillAssignment]) -> None:
        skill_ids = [s.id for s in skills]
        if len(skill_ids) != len(set(skill_ids)):
            raise InvalidInputError("Fähigkeit mehrfach angegeben")

        unknown = set(skill_ids) - self.skill_crud.get_existing_ids(db=db, ids=skill_ids)
        if unknown:
            raise InvalidInputError(f"Unbekannte Fähigkeit: {', '.join(str(i) for i in sorted(unknown))}")


# Create a singleton instance
worker_service = WorkerService()
