import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel

from bikeshop.domain.validation import ValidationResult


logger = logging.getLogger(__name__)


def ensure_valid(result: ValidationResult) -> None:
    """
    Turns a failed data-entry validation into a 422 response.

    Raises:
        HTTPException: 422 status with the field -> message map as detail.
    """
    if not result.is_valid:
        raise HTTPException(
            status_code=422,
            detail={"message": "Validation failed", "errors": result.errors},
        )


def save(session: Session, record: SQLModel, entity: str) -> SQLModel:
    """
    Commits one new or changed record and refreshes it.

    Raises:
        HTTPException: 500 status if the database rejects the write.
    """
    try:
        session.add(record)
        session.commit()
        session.refresh(record)
        return record
    except Exception as e:
        session.rollback()
        logger.error(f"Failed to save {entity}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Internal database error while saving {entity}."
        )


def remove(session: Session, record: SQLModel, entity: str) -> None:
    """
    Deletes one record.

    Raises:
        HTTPException: 409 status if other records still reference it.
    """
    try:
        session.delete(record)
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.error(f"Failed to delete {entity}: {e}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"{entity} is still referenced by existing sales."
        )
