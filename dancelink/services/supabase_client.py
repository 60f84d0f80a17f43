from datetime import datetime
from typing import Dict, List, Optional

from supabase import AsyncClient, acreate_client

from dancelink.config import settings
from dancelink.schemas.application import Applicant, Application, ApplicationWithEvent
from dancelink.schemas.event import Event, Organizer
from dancelink.schemas.message import Message
from dancelink.schemas.profile import Profile
from dancelink.services.store import DataStore

APPLICATION_WITH_EVENT = "*, event:events(*, organizer:organizers(*))"
APPLICANT_WITH_DANCER = "id, event_id, status, created_at, dancer:profiles(name, email, dance_style, gender, video_url)"
MESSAGE_WITH_PARTIES = (
    "*, "
    "sender:profiles!messages_sender_id_fkey(id, name), "
    "receiver:profiles!messages_receiver_id_fkey(id, name)"
)


# supabase async client 생성 (앱 시작 시 1회)
async def create_supabase() -> AsyncClient:
    if not settings.supabase_url or not settings.supabase_server_key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY (or SUPABASE_ANON_KEY) must be set in .env")
    return await acreate_client(settings.supabase_url, settings.supabase_server_key)


def _first(response) -> Optional[Dict]:
    return response.data[0] if response.data else None


def _rows(response) -> List[Dict]:
    return response.data if response.data else []


class SupabaseStore(DataStore):
    """PostgREST 쿼리로 구현한 DataStore. 결과는 전부 스키마로 검증해서 반환."""

    def __init__(self, client: AsyncClient):
        self.client = client

    # --profiles table--

    # 프로필 조회 (ID로)
    async def get_profile(self, user_id: str) -> Optional[Profile]:
        response = await self.client.table("profiles").select("*").eq("id", user_id).execute()
        row = _first(response)
        return Profile.model_validate(row) if row else None

    # 프로필 수정 (부분 업데이트)
    async def update_profile(self, user_id: str, fields: Dict) -> Optional[Profile]:
        response = await self.client.table("profiles").update(fields).eq("id", user_id).execute()
        row = _first(response)
        return Profile.model_validate(row) if row else None

    # 주최자 조회
    async def get_organizer(self, organizer_id: str) -> Optional[Organizer]:
        response = await self.client.table("organizers").select("*").eq("id", organizer_id).execute()
        row = _first(response)
        return Organizer.model_validate(row) if row else None

    # 역할 조회 (dancer / organizer)
    async def get_user_role(self, user_id: str) -> Optional[str]:
        response = await self.client.table("user_roles").select("role").eq("user_id", user_id).limit(1).execute()
        row = _first(response)
        return row["role"] if row else None

    # --events table--

    # 전체 이벤트 (최신순)
    async def list_events(self) -> List[Event]:
        response = await self.client.table("events").select("*").order("created_at", desc=True).execute()
        return [Event.model_validate(r) for r in _rows(response)]

    # 주최자별 이벤트 (최신순)
    async def list_events_by_organizer(self, organizer_id: str) -> List[Event]:
        response = (
            await self.client.table("events")
            .select("*")
            .eq("organizer_id", organizer_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [Event.model_validate(r) for r in _rows(response)]

    async def get_event(self, event_id: str) -> Optional[Event]:
        response = await self.client.table("events").select("*").eq("id", event_id).execute()
        row = _first(response)
        return Event.model_validate(row) if row else None

    async def create_event(self, data: Dict) -> Event:
        response = await self.client.table("events").insert(data).execute()
        return Event.model_validate(_first(response))

    async def delete_event(self, event_id: str) -> bool:
        response = await self.client.table("events").delete().eq("id", event_id).execute()
        return len(_rows(response)) > 0

    # --applications table--

    # 댄서가 지원한 이벤트 id 목록 (중복 지원 사전 체크용)
    async def list_applied_event_ids(self, dancer_id: str) -> List[str]:
        response = await self.client.table("applications").select("event_id").eq("dancer_id", dancer_id).execute()
        return [r["event_id"] for r in _rows(response)]

    # 지원서 저장 (status 는 DB 기본값 pending)
    async def create_application(self, event_id: str, dancer_id: str) -> Application:
        response = (
            await self.client.table("applications")
            .insert({"event_id": event_id, "dancer_id": dancer_id})
            .execute()
        )
        return Application.model_validate(_first(response))

    async def get_application(self, application_id: str) -> Optional[Application]:
        response = await self.client.table("applications").select("*").eq("id", application_id).execute()
        row = _first(response)
        return Application.model_validate(row) if row else None

    async def update_application(self, application_id: str, fields: Dict) -> Optional[Application]:
        response = await self.client.table("applications").update(fields).eq("id", application_id).execute()
        row = _first(response)
        return Application.model_validate(row) if row else None

    # 내 지원 목록 (event -> organizer 조인, 최신순)
    async def list_applications_by_dancer(self, dancer_id: str) -> List[ApplicationWithEvent]:
        response = (
            await self.client.table("applications")
            .select(APPLICATION_WITH_EVENT)
            .eq("dancer_id", dancer_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [ApplicationWithEvent.model_validate(r) for r in _rows(response)]

    # 이벤트별 지원자 (dancer 조인)
    async def list_applications_by_event(self, event_id: str) -> List[Applicant]:
        response = (
            await self.client.table("applications")
            .select(APPLICANT_WITH_DANCER)
            .eq("event_id", event_id)
            .execute()
        )
        return [Applicant.model_validate(r) for r in _rows(response)]

    # --messages table--

    # 스레드 조회 (오래된 순 = 화면 순서)
    async def list_messages(self, application_id: str) -> List[Message]:
        response = (
            await self.client.table("messages")
            .select(MESSAGE_WITH_PARTIES)
            .eq("application_id", application_id)
            .order("created_at", desc=False)
            .execute()
        )
        return [Message.model_validate(r) for r in _rows(response)]

    async def create_message(self, data: Dict) -> Message:
        response = await self.client.table("messages").insert(data).execute()
        return Message.model_validate(_first(response))

    # 읽음 처리 (id 목록으로 한 번에)
    async def mark_messages_read(self, message_ids: List[str], read_at: datetime) -> int:
        if not message_ids:
            return 0
        response = (
            await self.client.table("messages")
            .update({"read_at": read_at.isoformat()})
            .in_("id", message_ids)
            .execute()
        )
        return len(_rows(response))
