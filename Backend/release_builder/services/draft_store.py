"""
Per-session drafts of the wizard sections that keep local state.

Drafts survive a reload of the builder. They are written through on every
field change, merged into whatever was stored before, and cleared once the
release is submitted.
"""
import enum
import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from release_builder.models.wizard import WizardDraft

logger = logging.getLogger(__name__)


class DraftKey(str, enum.Enum):
    BASIC_INFO = "basicInfoData"
    PUBLISHING = "publishingData"
    TERRITORIES_SERVICES = "territoriesAndServicesData"


class DraftStore:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def _get(self, session_id: uuid.UUID, key: DraftKey) -> Optional[WizardDraft]:
        result = await self.db.execute(
            select(WizardDraft).where(WizardDraft.session_id == session_id, WizardDraft.key == key.value)
        )
        return result.scalars().first()

    async def read(self, session_id: uuid.UUID, key: DraftKey) -> Dict[str, Any]:
        draft = await self._get(session_id, key)
        return dict(draft.payload or {}) if draft else {}

    async def read_all(self, session_id: uuid.UUID) -> Dict[DraftKey, Dict[str, Any]]:
        result = await self.db.execute(select(WizardDraft).where(WizardDraft.session_id == session_id))
        drafts = {}
        for draft in result.scalars().all():
            try:
                drafts[DraftKey(draft.key)] = dict(draft.payload or {})
            except ValueError:
                logger.warning(f"Ignoring unknown draft key '{draft.key}' in session {session_id}")
        return drafts

    async def write(self, session_id: uuid.UUID, key: DraftKey, values: Dict[str, Any]) -> Dict[str, Any]:
        """Merge `values` into the stored draft and return the merged payload. Does not commit."""
        draft = await self._get(session_id, key)
        if draft is None:
            draft = WizardDraft(session_id=session_id, key=key.value, payload={})
            self.db.add(draft)
        # Reassign, JSON columns do not track in-place mutation
        draft.payload = {**(draft.payload or {}), **values}
        await self.db.flush()
        return dict(draft.payload)

    async def clear(self, session_id: uuid.UUID) -> None:
        await self.db.execute(delete(WizardDraft).where(WizardDraft.session_id == session_id))
        logger.info(f"Cleared drafts for wizard session {session_id}")
