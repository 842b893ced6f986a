"""Shared HTTP exceptions for entity features."""

from fastapi import HTTPException, status


class EntityNotFound(HTTPException):
    """Raised when an entity is not found."""

    def __init__(self, entity: str = "Entity"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=f"{entity} not found")
