"""
지원서별 1:1 메시지
- 스레드 조회 (created_at 오름차순)
- 전송 (받는 사람 = 상대방)
- 읽음 처리 (내가 받은 안 읽은 메시지 id 를 한 번에 update)
- realtime INSERT 신호가 오면 스레드 전체 재조회
"""
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, Tuple

from fastapi import HTTPException

from dancelink.schemas.message import Message
from dancelink.schemas.session import SessionContext
from dancelink.services.realtime_feed import RealtimeFeed, Subscription
from dancelink.services.store import DataStore

logger = logging.getLogger(__name__)

MESSAGES_TABLE = "messages"

# 42P01: postgres undefined_table, PGRST205: PostgREST schema cache 에 테이블 없음
MISSING_RELATION_CODES = {"42P01", "PGRST205"}


def is_missing_relation(error: Exception) -> bool:
    code = getattr(error, "code", None)
    message = getattr(error, "message", None) or str(error)
    return code in MISSING_RELATION_CODES or f'relation "{MESSAGES_TABLE}" does not exist' in message


def channel_name(application_id: str) -> str:
    return f"messages-{application_id}"


class MessagingService:

    def __init__(self, store: DataStore, feed: RealtimeFeed):
        self.store = store
        self.feed = feed

    async def resolve_participants(self, ctx: SessionContext, application_id: str) -> Tuple[str, str]:
        """
        (dancer_id, organizer_id) 반환. 둘 중 한 명이 아니면 403.
        """
        try:
            application = await self.store.get_application(application_id)
            event = await self.store.get_event(application.event_id) if application else None
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail={"message": "application_fetch_failed", "detail": str(e)},
            )
        if application is None or event is None:
            raise HTTPException(status_code=404, detail={"message": "application_not_found"})

        if ctx.user_id not in (application.dancer_id, event.organizer_id):
            raise HTTPException(
                status_code=403,
                detail={"message": "forbidden", "detail": "Not a participant of this application"},
            )
        return application.dancer_id, event.organizer_id

    async def list_thread(self, application_id: str) -> List[Message]:
        try:
            messages = await self.store.list_messages(application_id)
        except Exception as e:
            if is_missing_relation(e):
                # 아직 messages 테이블이 없는 배포 -> 빈 스레드
                logger.warning("[MESSAGES] relation missing, returning empty thread: %s", e)
                return []
            logger.error("[MESSAGES] fetch failed application=%s: %r", application_id, e)
            raise HTTPException(
                status_code=500,
                detail={"message": "messages_fetch_failed", "detail": str(e)},
            )
        return sorted(messages, key=lambda m: m.created_at)

    async def mark_incoming_read(self, current_user_id: str, messages: List[Message]) -> List[str]:
        """
        내가 받은 메시지 중 read_at 이 비어있는 것만 한 번에 읽음 처리.
        넘겨받은 스냅샷에도 read_at 을 반영하므로 두 번째 호출은 아무 것도 하지 않는다.
        """
        unread = [m for m in messages if m.receiver_id == current_user_id and m.read_at is None]
        if not unread:
            return []

        now = datetime.now(timezone.utc)
        ids = [m.id for m in unread]
        try:
            await self.store.mark_messages_read(ids, now)
        except Exception as e:
            logger.warning("[MESSAGES] mark read failed ids=%s: %r", ids, e)
            return []

        for m in unread:
            m.read_at = now
        return ids

    async def load_thread(self, application_id: str, current_user_id: str) -> List[Message]:
        # (재)조회할 때마다 읽음 처리까지
        messages = await self.list_thread(application_id)
        await self.mark_incoming_read(current_user_id, messages)
        return messages

    async def send(
        self,
        application_id: str,
        sender_id: str,
        dancer_id: str,
        organizer_id: str,
        text: Optional[str],
    ) -> List[Message]:
        if text is None or not text.strip():
            raise HTTPException(
                status_code=400,
                detail={"message": "empty_message", "detail": "Message text is required"},
            )

        receiver_id = organizer_id if sender_id == dancer_id else dancer_id

        try:
            await self.store.create_message(
                {
                    "application_id": application_id,
                    "sender_id": sender_id,
                    "receiver_id": receiver_id,
                    "message": text.strip(),
                }
            )
        except Exception as e:
            if is_missing_relation(e):
                raise HTTPException(
                    status_code=503,
                    detail={
                        "message": "messaging_not_configured",
                        "detail": "Messaging system is not set up yet. Please contact support.",
                    },
                )
            logger.error("[MESSAGES] send failed application=%s: %r", application_id, e)
            raise HTTPException(
                status_code=500,
                detail={"message": "message_send_failed", "detail": str(e)},
            )

        logger.info("[MESSAGES] sent application=%s sender=%s receiver=%s", application_id, sender_id, receiver_id)
        return await self.load_thread(application_id, sender_id)

    async def watch(
        self,
        application_id: str,
        current_user_id: str,
        on_thread: Callable[[List[Message]], Awaitable[None]],
    ) -> "ThreadWatcher":
        watcher = ThreadWatcher(self, application_id, current_user_id, on_thread)
        await watcher.start()
        return watcher


class ThreadWatcher:
    """
    realtime 구독 1개 = 열린 스레드 화면 1개.
    신호마다 스레드 전체를 다시 읽어 on_thread 로 넘긴다 (증분 병합 없음).
    """

    def __init__(
        self,
        service: MessagingService,
        application_id: str,
        current_user_id: str,
        on_thread: Callable[[List[Message]], Awaitable[None]],
    ):
        self.service = service
        self.application_id = application_id
        self.current_user_id = current_user_id
        self.on_thread = on_thread
        self.subscription: Optional[Subscription] = None

    async def start(self) -> None:
        self.subscription = await self.service.feed.subscribe(
            channel_name(self.application_id),
            MESSAGES_TABLE,
            f"application_id=eq.{self.application_id}",
            self.reload,
        )

    async def reload(self) -> None:
        try:
            thread = await self.service.load_thread(self.application_id, self.current_user_id)
        except HTTPException as e:
            # 화면 상태는 그대로 두고 넘어감
            logger.warning("[MESSAGES] realtime reload failed application=%s: %s", self.application_id, e.detail)
            return
        await self.on_thread(thread)

    async def stop(self) -> None:
        if self.subscription is not None:
            await self.service.feed.unsubscribe(self.subscription)
            self.subscription = None
