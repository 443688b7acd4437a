from sqlalchemy import Column, Integer, String, Boolean, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base, TimestampMixin

class Skill(Base):
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=True)

class WorkerSkill(Base):
    __tablename__ = "worker_skills"

    worker_id = Column(Integer, ForeignKey("workers.id", ondelete="CASCADE"), primary_key=True)
    skill_id = Column(Integer, ForeignKey("skills.id", ondelete="CASCADE"), primary_key=True)
    experience_years = Column(Integer, nullable=True)

    skill = relationship("Skill", lazy="joined")

class Worker(Base, TimestampMixin):
    __tablename__ = "workers"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    hourly_rate = Column(Numeric(10, 2), nullable=True)
    active = Column(Boolean, nullable=False, default=True)

    skill_links = relationship(
        "WorkerSkill",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="WorkerSkill.skill_id",
    )

    @property
    def skills(self):
        """Assigned skills with the experience stored on the association."""
        return [
            {
                "id": link.skill_id,
                "name": link.skill.name if link.skill else None,
                "experience_years": link.experience_years,
            }
            for link in self.skill_links
        ]
