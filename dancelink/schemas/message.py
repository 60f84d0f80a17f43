from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PartySummary(BaseModel):
    id: str
    name: Optional[str] = None


# 메시지 (append-only, read_at 만 1회 기록)
class Message(BaseModel):
    id: str
    application_id: str
    sender_id: str
    receiver_id: str
    message: str
    created_at: datetime
    read_at: Optional[datetime] = None
    sender: Optional[PartySummary] = None
    receiver: Optional[PartySummary] = None


# 메시지 전송 - 요청 (공백 검사는 서비스에서, 스토어 호출 전에)
class MessageIn(BaseModel):
    message: str = Field(..., max_length=5000, description="메시지 본문")
