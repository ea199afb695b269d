"""
POS persistence
SQLAlchemy-backed store for POS records. The unique constraint on
``pos.name`` is the only guard against duplicate names.
"""
import logging
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_coffee.exceptions import DuplicatePosName, PosNotFound
from campus_coffee.models import PosRecord
from campus_coffee.schemas.pos import Pos, PosDraft

logger = logging.getLogger(__name__)


class PosStore:
    """Store over the ``pos`` table, bound to one session"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self) -> List[Pos]:
        result = await self.db.execute(select(PosRecord).order_by(PosRecord.id))
        return [Pos.model_validate(record) for record in result.scalars().all()]

    async def get_by_id(self, pos_id: int) -> Pos:
        return Pos.model_validate(await self._get_record(pos_id))

    async def upsert(self, pos: PosDraft) -> Pos:
        """
        Insert when ``pos.id`` is None, otherwise overwrite the existing row.

        Raises:
            PosNotFound: the row to update does not exist
            DuplicatePosName: another row already has this name
        """
        if pos.id is None:
            record = PosRecord()
            self.db.add(record)
        else:
            record = await self._get_record(pos.id)

        for field, value in pos.model_dump(mode="json", exclude={"id"}).items():
            setattr(record, field, value)

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning("Unique constraint violated for POS name '%s': %s", pos.name, e.orig)
            raise DuplicatePosName(pos.name) from e

        await self.db.refresh(record)
        return Pos.model_validate(record)

    async def clear(self) -> int:
        result = await self.db.execute(delete(PosRecord))
        await self.db.commit()
        return result.rowcount

    async def _get_record(self, pos_id: int) -> PosRecord:
        result = await self.db.execute(select(PosRecord).where(PosRecord.id == pos_id))
        record = result.scalar_one_or_none()
        if record is None:
            raise PosNotFound(pos_id)
        return record
