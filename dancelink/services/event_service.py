"""
이벤트 관련 비즈니스 로직
- 이벤트 목록 / 등록 / 삭제
- 소유권 검증 (organizer_id == 현재 사용자)
"""
import logging
from typing import List

from fastapi import HTTPException

from dancelink.schemas.event import Event, EventCreate
from dancelink.schemas.session import SessionContext
from dancelink.services.store import DataStore

logger = logging.getLogger(__name__)


class EventService:

    def __init__(self, store: DataStore):
        self.store = store

    async def list_events(self) -> List[Event]:
        try:
            return await self.store.list_events()
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail={"message": "events_fetch_failed", "detail": str(e)},
            )

    async def list_organizer_events(self, ctx: SessionContext) -> List[Event]:
        try:
            return await self.store.list_events_by_organizer(ctx.user_id)
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail={"message": "events_fetch_failed", "detail": str(e)},
            )

    async def get_event(self, event_id: str) -> Event:
        try:
            event = await self.store.get_event(event_id)
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail={"message": "event_fetch_failed", "detail": str(e)},
            )
        if event is None:
            raise HTTPException(status_code=404, detail={"message": "event_not_found"})
        return event

    async def get_owned_event(self, ctx: SessionContext, event_id: str) -> Event:
        """
        이벤트 조회 (소유권 검증 포함)

        Raises:
            HTTPException: 404 (없음), 403 (권한 없음)
        """
        event = await self.get_event(event_id)
        if event.organizer_id != ctx.user_id:
            raise HTTPException(
                status_code=403,
                detail={"message": "forbidden", "detail": "Not the organizer of this event"},
            )
        return event

    async def create_event(self, ctx: SessionContext, payload: EventCreate) -> Event:
        data = payload.model_dump()
        data["organizer_id"] = ctx.user_id

        try:
            event = await self.store.create_event(data)
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail={"message": "event_creation_failed", "detail": str(e)},
            )
        logger.info("[EVENT] created id=%s organizer=%s", event.id, ctx.user_id)
        return event

    async def delete_event(self, ctx: SessionContext, event_id: str) -> None:
        await self.get_owned_event(ctx, event_id)
        try:
            await self.store.delete_event(event_id)
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail={"message": "event_deletion_failed", "detail": str(e)},
            )
        logger.info("[EVENT] deleted id=%s organizer=%s", event_id, ctx.user_id)

    async def list_applied_event_ids(self, ctx: SessionContext) -> List[str]:
        try:
            return await self.store.list_applied_event_ids(ctx.user_id)
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail={"message": "applications_fetch_failed", "detail": str(e)},
            )
