from sqlalchemy.orm import Session
from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
from fastapi import Depends
from apps.parts.models import Part
from apps.parts.schemas import PartPayload, PartResponse
from core.database import get_db
from core.exceptions import NotFound, ServerError
import logging

logger = logging.getLogger(__name__)

parts_table = Part.__table__

# part_id is a signed BIGINT; nothing larger can be stored
MAX_PART_ID = 2 ** 63 - 1


def part_key(part_id: str) -> Optional[int]:
    """Primary key for a validated id string, or None when no row can carry it"""
    key = int(part_id)
    if key > MAX_PART_ID:
        return None
    return key


class PartService:
    def __init__(self, db: Session):
        self.db = db

    def _fail(self, message: str) -> ServerError:
        self.db.rollback()
        logger.exception(message)
        return ServerError(message)

    def list_parts(self) -> List[Part]:
        """Get every part, newest first"""
        try:
            return self.db.query(Part).order_by(Part.part_id.desc()).all()
        except SQLAlchemyError:
            raise self._fail("Server error while fetching parts.")

    def get_part(self, part_id: str) -> Part:
        """Get part by ID"""
        key = part_key(part_id)
        part = None
        if key is not None:
            try:
                part = self.db.query(Part).filter(Part.part_id == key).first()
            except SQLAlchemyError:
                raise self._fail("Server error while fetching specific part.")
        if part is None:
            raise NotFound(f"Part with ID: {part_id} not found.")
        return part

    def create_part(self, payload: PartPayload) -> PartResponse:
        """Insert a new part; the database stamps created_at/updated_at"""
        values = payload.model_dump()
        stmt = insert(parts_table).values(**values, created_at=func.now(), updated_at=func.now())
        try:
            result = self.db.execute(stmt)
            inserted = result.inserted_primary_key
            if result.rowcount != 1 or not inserted or inserted[0] is None:
                self.db.rollback()
                logger.error(f"Insert failed or no ID returned (rowcount={result.rowcount})")
                raise ServerError("Failed to create part in database.")
            self.db.commit()
        except SQLAlchemyError:
            raise self._fail("Server error while creating part.")

        new_id = inserted[0]
        logger.info(f"Created part: {payload.name} (ID: {new_id})")
        return PartResponse(part_id=new_id, **values)

    def update_part(self, part_id: str, payload: PartPayload) -> PartResponse:
        """Replace every mutable field of a part"""
        key = part_key(part_id)
        if key is None:
            raise NotFound(f"Part with ID: {part_id} not found for update.")

        values = payload.model_dump()
        stmt = (
            update(parts_table)
            .where(parts_table.c.part_id == key)
            .values(**values, updated_at=func.now())
        )
        try:
            result = self.db.execute(stmt)
            affected = result.rowcount
            if affected == 1:
                self.db.commit()
                logger.info(f"Updated part: {payload.name} (ID: {part_id})")
                return PartResponse(part_id=key, **values)

            self.db.rollback()
            if affected != 0:
                logger.error(f"Unexpected number of rows affected during update of {part_id}: {affected}")
                raise ServerError("Server error while updating part.")

            # Not atomic with the UPDATE above; a concurrent writer may slip in between
            count = self.db.execute(
                select(func.count()).select_from(parts_table).where(parts_table.c.part_id == key)
            ).scalar_one()
        except SQLAlchemyError:
            raise self._fail("Server error while updating part.")

        if count == 0:
            raise NotFound(f"Part with ID: {part_id} not found for update.")

        # Echoes the request, not a re-read of the stored row
        logger.info(f"Part data identical, no changes made for ID: {part_id}")
        return PartResponse(part_id=key, **values)

    def delete_part(self, part_id: str) -> str:
        """Hard delete a part"""
        key = part_key(part_id)
        affected = 0
        if key is not None:
            try:
                result = self.db.execute(delete(parts_table).where(parts_table.c.part_id == key))
                affected = result.rowcount
                if affected == 1:
                    self.db.commit()
                else:
                    self.db.rollback()
            except SQLAlchemyError:
                raise self._fail("Server error while deleting part.")

        if affected != 1:
            raise NotFound(f"Part with ID: {part_id} not found for deletion.")

        logger.info(f"Deleted part ID: {part_id}")
        return f"Part ID: {part_id} deleted successfully."


# Dependency injection
def get_part_service(db: Session = Depends(get_db)) -> PartService:
    return PartService(db)
