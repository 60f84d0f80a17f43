# dancelink/services/notification_service.py
# 지원 결과 이메일 발송 요청 (Edge Function 호출)
import logging

from supabase import AsyncClient

from dancelink.config import settings
from dancelink.schemas.notification import NotificationPayload

logger = logging.getLogger(__name__)


class NotificationSender:

    def __init__(self, client: AsyncClient, function_name: str | None = None):
        self.client = client
        self.function_name = function_name or settings.notification_function

    async def send(self, payload: NotificationPayload):
        """
        실패 시 예외를 그대로 올린다.
        삼킬지 말지는 호출 측(ApplicationService)이 결정.
        """
        body = payload.model_dump(mode="json")
        logger.info(
            "[NOTIFY] invoke %s to=%s status=%s",
            self.function_name, body["dancerEmail"], body["status"],
        )
        return await self.client.functions.invoke(
            self.function_name,
            invoke_options={"body": body},
        )
