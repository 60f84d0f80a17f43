# dancelink/deps.py
import logging

from fastapi import Depends, Header, HTTPException
from fastapi.requests import HTTPConnection
from supabase import AsyncClient

from dancelink.schemas.session import SessionContext
from dancelink.services.application_service import ApplicationService
from dancelink.services.event_service import EventService
from dancelink.services.messaging_service import MessagingService
from dancelink.services.notification_service import NotificationSender
from dancelink.services.profile_service import ProfileService
from dancelink.services.realtime_feed import RealtimeFeed, SupabaseRealtimeFeed
from dancelink.services.storage_service import StorageService
from dancelink.services.store import DataStore
from dancelink.services.supa_auth import verify_bearer
from dancelink.services.supabase_client import SupabaseStore

logger = logging.getLogger(__name__)

# ----------------------------
# Supabase 클라이언트 / 외부 협력자
# ----------------------------
def get_supabase(conn: HTTPConnection) -> AsyncClient:
    # main.lifespan 에서 만든 async client
    return conn.app.state.supabase


def get_store(client: AsyncClient = Depends(get_supabase)) -> DataStore:
    return SupabaseStore(client)


def get_storage(client: AsyncClient = Depends(get_supabase)) -> StorageService:
    return StorageService(client)


def get_notifier(client: AsyncClient = Depends(get_supabase)) -> NotificationSender:
    return NotificationSender(client)


def get_feed(conn: HTTPConnection) -> RealtimeFeed:
    # 구독 태스크를 앱 단위로 관리하기 위해 app.state 에 하나만 둠
    feed = getattr(conn.app.state, "realtime_feed", None)
    if feed is None:
        feed = SupabaseRealtimeFeed(conn.app.state.supabase)
        conn.app.state.realtime_feed = feed
    return feed


# ----------------------------
# 현재 사용자 가져오기
# ----------------------------
async def authenticate(authorization: str | None, store: DataStore) -> SessionContext:
    try:
        claims = await verify_bearer(authorization)
    except Exception as e:
        logger.warning("verify_bearer failed >>> %r", e)
        raise HTTPException(status_code=401, detail="unauthorized")

    try:
        role = await store.get_user_role(claims["user_id"])
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail={"message": "role_lookup_failed", "detail": str(e)},
        )

    return SessionContext(user_id=claims["user_id"], email=claims.get("email"), role=role)


async def get_current_user(
    authorization: str | None = Header(None),
    store: DataStore = Depends(get_store),
) -> SessionContext:
    return await authenticate(authorization, store)


def require_dancer(ctx: SessionContext = Depends(get_current_user)) -> SessionContext:
    if not ctx.is_dancer:
        raise HTTPException(
            status_code=403,
            detail={"message": "forbidden", "detail": "Dancer account required"},
        )
    return ctx


def require_organizer(ctx: SessionContext = Depends(get_current_user)) -> SessionContext:
    if not ctx.is_organizer:
        raise HTTPException(
            status_code=403,
            detail={"message": "forbidden", "detail": "Organizer account required"},
        )
    return ctx


# ----------------------------
# 서비스
# ----------------------------
def get_profile_service(
    store: DataStore = Depends(get_store),
    storage: StorageService = Depends(get_storage),
) -> ProfileService:
    return ProfileService(store, storage)


def get_event_service(store: DataStore = Depends(get_store)) -> EventService:
    return EventService(store)


def get_application_service(
    store: DataStore = Depends(get_store),
    notifier: NotificationSender = Depends(get_notifier),
) -> ApplicationService:
    return ApplicationService(store, notifier)


def get_messaging_service(
    store: DataStore = Depends(get_store),
    feed: RealtimeFeed = Depends(get_feed),
) -> MessagingService:
    return MessagingService(store, feed)
