from typing import Literal

from pydantic import BaseModel, EmailStr


# Edge Function 으로 보내는 JSON 그대로 (camelCase 유지)
class NotificationPayload(BaseModel):
    dancerEmail: EmailStr
    dancerName: str
    eventName: str
    status: Literal["approved", "rejected"]
    organizerName: str
