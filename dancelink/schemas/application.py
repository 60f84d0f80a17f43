from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel

from dancelink.schemas.event import EventWithOrganizer
from dancelink.schemas.profile import DancerSummary


class ApplicationStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


# pending 에서만 나갈 수 있고, approved / rejected 는 종료 상태
ALLOWED_TRANSITIONS = {
    ApplicationStatus.pending: {ApplicationStatus.approved, ApplicationStatus.rejected},
    ApplicationStatus.approved: set(),
    ApplicationStatus.rejected: set(),
}


def can_transition(current: ApplicationStatus, new: ApplicationStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


class Application(BaseModel):
    id: str
    event_id: str
    dancer_id: str
    status: ApplicationStatus
    created_at: datetime
    updated_at: Optional[datetime] = None


# 댄서의 "내 지원 목록" (event + organizer 조인)
class ApplicationWithEvent(Application):
    event: EventWithOrganizer


# 주최자의 지원자 목록 (dancer 조인)
class Applicant(BaseModel):
    id: str
    event_id: Optional[str] = None
    status: Optional[ApplicationStatus] = None
    created_at: Optional[datetime] = None
    dancer: Optional[DancerSummary] = None


# 승인/거절 - 요청
class StatusUpdateIn(BaseModel):
    status: Literal["approved", "rejected"]
