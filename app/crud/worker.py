from typing import Optional, List
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, func
from app.crud.base import CRUDBase
from app.models.worker import Worker, Skill, WorkerSkill
from app.schemas.worker import WorkerCreate, WorkerUpdate, WorkerSkillAssignment

WORKER_FIELDS = ("first_name", "last_name", "phone", "email", "hourly_rate")


class CRUDWorker(CRUDBase[Worker, WorkerCreate, WorkerUpdate]):
    """
    CRUD operations for Worker model.

    Skill assignments live in the worker_skills association table and
    are written through the worker.
    """

    def get_with_skills(self, db: Session, id: int) -> Optional[Worker]:
        stmt = (
            select(Worker)
            .where(Worker.id == id)
            .options(selectinload(Worker.skill_links))
        )
        result = db.execute(stmt)
        return result.scalar_one_or_none()

    def get_active(self, db: Session) -> List[Worker]:
        """
        Active workers ordered by last name, first name, with their skills.
        """
        stmt = (
            select(Worker)
            .where(Worker.active.is_(True))
            .options(selectinload(Worker.skill_links))
            .order_by(Worker.last_name, Worker.first_name, Worker.id)
        )
        result = db.execute(stmt)
        return list(result.scalars().all())

    def count_active(self, db: Session) -> int:
        stmt = select(func.count()).select_from(Worker).where(Worker.active.is_(True))
        return db.execute(stmt).scalar_one()

    def create_with_skills(
        self,
        db: Session,
        *,
        obj_in: WorkerCreate
    ) -> Worker:
        db_obj = Worker(**obj_in.model_dump(include=set(WORKER_FIELDS)), active=True)
        db_obj.skill_links = self._build_links(obj_in.skills)
        db.add(db_obj)
        db.flush()
        return db_obj

    def replace_skills(
        self,
        db: Session,
        *,
        db_obj: Worker,
        skills_in: List[WorkerSkillAssignment]
    ) -> Worker:
        """
        Replace all skill assignments of a worker.

        Existing rows are deleted first, then the submitted list is inserted.
        """
        db_obj.skill_links.clear()
        db.flush()
        db_obj.skill_links.extend(self._build_links(skills_in))
        db.flush()
        return db_obj

    def _build_links(self, skills_in: List[WorkerSkillAssignment]) -> List[WorkerSkill]:
        return [
            WorkerSkill(skill_id=skill_in.id, experience_years=skill_in.experience_years)
            for skill_in in skills_in
        ]


class CRUDSkill(CRUDBase[Skill, WorkerSkillAssignment, WorkerSkillAssignment]):
    """
    CRUD operations for Skill model.
    """

    def get_multi_by_name(self, db: Session) -> List[Skill]:
        stmt = select(Skill).order_by(Skill.name)
        result = db.execute(stmt)
        return list(result.scalars().all())

    def get_existing_ids(self, db: Session, *, ids: List[int]) -> set:
        """
        Return which of the given skill IDs exist.
        """
        if not ids:
            return set()
        stmt = select(Skill.id).where(Skill.id.in_(ids))
        return set(db.execute(stmt).scalars().all())


# Create singleton instances
worker = CRUDWorker(Worker)
skill = CRUDSkill(Skill)
