from pydantic import BaseModel, Field, field_validator
from typing import Optional

from dancelink.schemas.options import DANCE_STYLES, GENDERS, HEIGHTS, SKIN_TONES, ensure_choice

# -- Record --

# 댄서 프로필 (profiles 테이블, id = auth.users.id)
class Profile(BaseModel):
    id: str
    name: str
    email: str
    dance_style: str
    gender: str
    age: Optional[int] = None
    height: Optional[str] = None
    skin_tone: Optional[str] = None
    experience: Optional[str] = None
    about: Optional[str] = None
    video_url: Optional[str] = None
    certification_document_url: Optional[str] = None


# 지원자 목록에 붙는 댄서 요약
class DancerSummary(BaseModel):
    name: str
    email: str
    dance_style: Optional[str] = None
    gender: Optional[str] = None
    video_url: Optional[str] = None


# -- Request --

# 프로필 수정 - 요청 (id, email, 파일 URL 은 여기서 못 바꿈)
class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100, description="이름")
    dance_style: Optional[str] = Field(None, description="주 장르")
    gender: Optional[str] = Field(None, description="성별")
    age: Optional[int] = Field(None, ge=1, le=120, description="나이")
    height: Optional[str] = Field(None, description="키 구간")
    skin_tone: Optional[str] = Field(None, description="피부톤")
    experience: Optional[str] = Field(None, max_length=5000, description="댄스 경력")
    about: Optional[str] = Field(None, max_length=5000, description="자기소개")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("이름은 비워둘 수 없습니다.")
        return v

    @field_validator("dance_style")
    @classmethod
    def check_dance_style(cls, v):
        return ensure_choice(v, DANCE_STYLES, "dance_style")

    @field_validator("gender")
    @classmethod
    def check_gender(cls, v):
        return ensure_choice(v, GENDERS, "gender")

    @field_validator("height")
    @classmethod
    def check_height(cls, v):
        return ensure_choice(v, HEIGHTS, "height")

    @field_validator("skin_tone")
    @classmethod
    def check_skin_tone(cls, v):
        return ensure_choice(v, SKIN_TONES, "skin_tone")
