"""Data access interface (repository pattern).

Services depend only on this interface; the Supabase implementation lives in
``supabase_client.py`` and tests swap in an in-memory one.
Every method returns validated records from ``dancelink.schemas``.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from dancelink.schemas.application import Applicant, Application, ApplicationWithEvent
from dancelink.schemas.event import Event, Organizer
from dancelink.schemas.message import Message
from dancelink.schemas.profile import Profile


class DataStore(ABC):
    """profiles / organizers / events / applications / messages 접근."""

    # -- profiles --

    @abstractmethod
    async def get_profile(self, user_id: str) -> Optional[Profile]:
        ...

    @abstractmethod
    async def update_profile(self, user_id: str, fields: Dict) -> Optional[Profile]:
        """Partial update; returns the updated row or None if missing."""
        ...

    @abstractmethod
    async def get_organizer(self, organizer_id: str) -> Optional[Organizer]:
        ...

    @abstractmethod
    async def get_user_role(self, user_id: str) -> Optional[str]:
        """Role from user_roles ("dancer" | "organizer"), None if unassigned."""
        ...

    # -- events --

    @abstractmethod
    async def list_events(self) -> List[Event]:
        """All events ordered by created_at descending."""
        ...

    @abstractmethod
    async def list_events_by_organizer(self, organizer_id: str) -> List[Event]:
        ...

    @abstractmethod
    async def get_event(self, event_id: str) -> Optional[Event]:
        ...

    @abstractmethod
    async def create_event(self, data: Dict) -> Event:
        ...

    @abstractmethod
    async def delete_event(self, event_id: str) -> bool:
        ...

    # -- applications --

    @abstractmethod
    async def list_applied_event_ids(self, dancer_id: str) -> List[str]:
        ...

    @abstractmethod
    async def create_application(self, event_id: str, dancer_id: str) -> Application:
        """Insert a pending application. No uniqueness guarantee."""
        ...

    @abstractmethod
    async def get_application(self, application_id: str) -> Optional[Application]:
        ...

    @abstractmethod
    async def update_application(self, application_id: str, fields: Dict) -> Optional[Application]:
        ...

    @abstractmethod
    async def list_applications_by_dancer(self, dancer_id: str) -> List[ApplicationWithEvent]:
        """Dancer's applications with event and organizer expanded, newest first."""
        ...

    @abstractmethod
    async def list_applications_by_event(self, event_id: str) -> List[Applicant]:
        ...

    # -- messages --

    @abstractmethod
    async def list_messages(self, application_id: str) -> List[Message]:
        """Thread ordered by created_at ascending."""
        ...

    @abstractmethod
    async def create_message(self, data: Dict) -> Message:
        ...

    @abstractmethod
    async def mark_messages_read(self, message_ids: List[str], read_at: datetime) -> int:
        """One batched update of read_at keyed by ids; returns rows touched."""
        ...
