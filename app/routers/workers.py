from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.schemas.common import MessageResponse
from app.schemas.worker import WorkerCreate, WorkerUpdate, WorkerResponse, SkillResponse
from app.services.worker import worker_service
from app.core.logging_config import logger

router = APIRouter()


@router.get("", response_model=List[WorkerResponse])
def get_workers(db: Session = Depends(get_db)):
    """
    Retrieve all active workers with their skills.
    """
    return worker_service.get_active_workers(db=db)


# Must stay above "/{worker_id}"
@router.get("/skills", response_model=List[SkillResponse])
def get_skills(db: Session = Depends(get_db)):
    return worker_service.get_skills(db=db)


@router.get("/{worker_id}", response_model=WorkerResponse)
def get_worker(worker_id: int, db: Session = Depends(get_db)):
    return worker_service.get_worker(db=db, worker_id=worker_id)


@router.post("", response_model=WorkerResponse, status_code=status.HTTP_201_CREATED)
def create_worker(
    worker_data: WorkerCreate,
    db: Session = Depends(get_db)
):
    """
    Create a new worker with skill assignments.

    Args:
        worker_data: Worker creation data
        db: Database session

    Returns:
        Created worker
    """
    try:
        logger.info(f"Creating worker: last_name={worker_data.last_name}, skills={len(worker_data.skills)}")
        result = worker_service.create_worker(db=db, worker_data=worker_data)
        logger.info(f"Worker created successfully: id={result.id}")
        return result
    except Exception as e:
        logger.error(f"Error creating worker: {type(e).__name__}: {str(e)}")
        raise


@router.put("/{worker_id}", response_model=WorkerResponse)
def update_worker(
    worker_id: int,
    worker_data: WorkerUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a worker and replace its skills with the submitted list.

    Raises:
        NotFoundError 404: If worker not found
    """
    try:
        logger.info(f"Updating worker: id={worker_id}")
        result = worker_service.update_worker(db=db, worker_id=worker_id, worker_data=worker_data)
        logger.info(f"Worker updated successfully: id={worker_id}")
        return result
    except Exception as e:
        logger.error(f"Error updating worker {worker_id}: {type(e).__name__}: {str(e)}")
        raise


@router.delete("/{worker_id}", response_model=MessageResponse)
def delete_worker(worker_id: int, db: Session = Depends(get_db)):
    """
    Deactivate a worker. The row and its skills are kept.
    """
    try:
        logger.info(f"Deactivating worker: id={worker_id}")
        worker_service.delete_worker(db=db, worker_id=worker_id)
        return {"message": "Handwerker erfolgreich gelöscht"}
    except Exception as e:
        logger.error(f"Error deleting worker {worker_id}: {type(e).__name__}: {str(e)}")
        raise
