"""
지원서 관련 비즈니스 로직
- 지원 (이벤트당 댄서 1건, 사전 조회로만 막음)
- 승인 / 거절 (pending -> approved | rejected, 이후 변경 불가)
- 결과 메일 발송 (best-effort, 실패해도 상태 변경은 유지)
"""
import logging
from datetime import datetime, timezone
from typing import List

from fastapi import HTTPException

from dancelink.schemas.application import (
    Applicant,
    Application,
    ApplicationStatus,
    ApplicationWithEvent,
    can_transition,
)
from dancelink.schemas.event import Event
from dancelink.schemas.notification import NotificationPayload
from dancelink.schemas.session import SessionContext
from dancelink.services.event_service import EventService
from dancelink.services.notification_service import NotificationSender
from dancelink.services.store import DataStore

logger = logging.getLogger(__name__)

DEFAULT_ORGANIZER_NAME = "Event Organizer"


class ApplicationService:

    def __init__(self, store: DataStore, notifier: NotificationSender):
        self.store = store
        self.notifier = notifier
        self.events = EventService(store)

    async def _get_application(self, application_id: str) -> Application:
        try:
            application = await self.store.get_application(application_id)
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail={"message": "application_fetch_failed", "detail": str(e)},
            )
        if application is None:
            raise HTTPException(status_code=404, detail={"message": "application_not_found"})
        return application

    async def submit_application(self, ctx: SessionContext, event_id: str) -> Application:
        """
        이벤트 지원

        - 기존 지원 여부를 먼저 조회하고 없을 때만 insert
        - 조회와 insert 가 원자적이지 않아서 동시 요청이면 중복 행이 생길 수 있음

        Raises:
            HTTPException: 404 (이벤트 없음), 409 (이미 지원함)
        """
        await self.events.get_event(event_id)

        try:
            applied = await self.store.list_applied_event_ids(ctx.user_id)
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail={"message": "applications_fetch_failed", "detail": str(e)},
            )

        if event_id in applied:
            raise HTTPException(
                status_code=409,
                detail={"message": "already_applied", "detail": "You have already applied to this event"},
            )

        try:
            application = await self.store.create_application(event_id, ctx.user_id)
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail={"message": "application_creation_failed", "detail": str(e)},
            )

        logger.info("[APPLICATION] submitted id=%s event=%s dancer=%s", application.id, event_id, ctx.user_id)
        return application

    def _parse_status(self, new_status: str) -> ApplicationStatus:
        try:
            target = ApplicationStatus(new_status)
        except ValueError:
            target = None
        if target not in (ApplicationStatus.approved, ApplicationStatus.rejected):
            raise HTTPException(
                status_code=400,
                detail={"message": "invalid_status", "detail": "status must be one of ['approved', 'rejected']"},
            )
        return target

    async def set_status(
        self,
        ctx: SessionContext,
        application_id: str,
        dancer_id: str,
        new_status: str,
        dancer_email: str,
        dancer_name: str,
        event_name: str,
    ) -> Application:
        """
        승인 / 거절

        순서: 상태 변경 커밋 -> 주최자 이름 조회 -> 알림 발송.
        알림이 실패해도 롤백하지 않는다 (로그만 남김).

        Raises:
            HTTPException: 400 (잘못된 상태), 403 (이벤트 주최자 아님),
                           404 (없음), 409 (이미 처리된 지원서)
        """
        target = self._parse_status(new_status)

        application = await self._get_application(application_id)
        if application.dancer_id != dancer_id:
            raise HTTPException(
                status_code=400,
                detail={"message": "dancer_mismatch", "detail": "Application does not belong to this dancer"},
            )

        event = await self.events.get_owned_event(ctx, application.event_id)
        return await self._apply_status(ctx, application, event, target, dancer_email, dancer_name, event_name)

    async def decide(self, ctx: SessionContext, application_id: str, new_status: str) -> Application:
        # HTTP 용: 메일에 필요한 값(댄서 이메일/이름, 이벤트명)을 직접 채움. 지원서/이벤트는 한 번씩만 조회
        target = self._parse_status(new_status)
        application = await self._get_application(application_id)
        event = await self.events.get_owned_event(ctx, application.event_id)

        try:
            dancer = await self.store.get_profile(application.dancer_id)
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail={"message": "profile_fetch_failed", "detail": str(e)},
            )
        if dancer is None:
            raise HTTPException(status_code=404, detail={"message": "dancer_not_found"})

        return await self._apply_status(ctx, application, event, target, dancer.email, dancer.name, event.name)

    async def _apply_status(
        self,
        ctx: SessionContext,
        application: Application,
        event: Event,
        target: ApplicationStatus,
        dancer_email: str,
        dancer_name: str,
        event_name: str,
    ) -> Application:
        if not can_transition(application.status, target):
            raise HTTPException(
                status_code=409,
                detail={
                    "message": "invalid_transition",
                    "detail": f"Application is already {application.status.value}",
                },
            )

        try:
            updated = await self.store.update_application(
                application.id,
                {"status": target.value, "updated_at": datetime.now(timezone.utc).isoformat()},
            )
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail={"message": "status_update_failed", "detail": str(e)},
            )
        if updated is None:
            raise HTTPException(status_code=404, detail={"message": "application_not_found"})

        logger.info("[APPLICATION] %s id=%s by organizer=%s", target.value, application.id, ctx.user_id)

        organizer_name = await self._organizer_name(event.organizer_id)
        await self._notify(
            dancer_email=dancer_email,
            dancer_name=dancer_name,
            event_name=event_name,
            status=target.value,
            organizer_name=organizer_name,
        )
        return updated

    async def _organizer_name(self, organizer_id: str) -> str:
        try:
            organizer = await self.store.get_organizer(organizer_id)
            if organizer is not None and organizer.name:
                return organizer.name
            profile = await self.store.get_profile(organizer_id)
            if profile is not None and profile.name:
                return profile.name
        except Exception:
            logger.exception("[APPLICATION] organizer lookup failed id=%s", organizer_id)
        return DEFAULT_ORGANIZER_NAME

    async def _notify(
        self,
        dancer_email: str,
        dancer_name: str,
        event_name: str,
        status: str,
        organizer_name: str,
    ) -> None:
        try:
            payload = NotificationPayload(
                dancerEmail=dancer_email,
                dancerName=dancer_name,
                eventName=event_name,
                status=status,
                organizerName=organizer_name,
            )
            await self.notifier.send(payload)
        except Exception:
            # 메일 실패는 상태 변경을 막지 않음
            logger.exception("[NOTIFY] failed to send notification to=%s", dancer_email)

    async def list_my_applications(self, ctx: SessionContext) -> List[ApplicationWithEvent]:
        try:
            return await self.store.list_applications_by_dancer(ctx.user_id)
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail={"message": "applications_fetch_failed", "detail": str(e)},
            )

    async def list_applicants(self, ctx: SessionContext, event_id: str) -> List[Applicant]:
        await self.events.get_owned_event(ctx, event_id)
        try:
            return await self.store.list_applications_by_event(event_id)
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail={"message": "applications_fetch_failed", "detail": str(e)},
            )
