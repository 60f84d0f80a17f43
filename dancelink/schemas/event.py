from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from dancelink.schemas.options import EVENT_DANCE_STYLES, GENDER_PREFERENCES, ensure_choice


# 이벤트 주최자 (organizers 테이블)
class Organizer(BaseModel):
    id: str
    name: str
    email: Optional[str] = None


# 이벤트 (organizer_id 는 생성 시 고정)
class Event(BaseModel):
    id: str
    name: str
    dance_style: str
    gender_preference: str
    organizer_id: str
    created_at: datetime


class EventWithOrganizer(Event):
    organizer: Optional[Organizer] = None


# 이벤트 등록 - 요청 (organizer_id 는 토큰에서)
class EventCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="이벤트명")
    dance_style: str = Field(..., description="요구 장르")
    gender_preference: str = Field(..., description="선호 성별")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("이벤트명은 비워둘 수 없습니다.")
        return v

    @field_validator("dance_style")
    @classmethod
    def check_dance_style(cls, v: str) -> str:
        return ensure_choice(v, EVENT_DANCE_STYLES, "dance_style")

    @field_validator("gender_preference")
    @classmethod
    def check_gender_preference(cls, v: str) -> str:
        return ensure_choice(v, GENDER_PREFERENCES, "gender_preference")
