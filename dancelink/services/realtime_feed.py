"""
Realtime 피드
- 테이블 INSERT 중 filter("column=eq.value")에 맞는 행이 들어오면 observer 호출
- payload 는 넘기지 않음 (호출 측이 다시 조회)
- 재연결/백오프는 realtime 클라이언트 내부 동작에 맡김
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Set

from supabase import AsyncClient

logger = logging.getLogger(__name__)

Observer = Callable[[], Awaitable[None]]


@dataclass
class Subscription:
    channel_name: str
    table: str
    filter: str
    channel: Any = None
    active: bool = True


class RealtimeFeed(ABC):

    @abstractmethod
    async def subscribe(self, channel_name: str, table: str, filter: str, observer: Observer) -> Subscription:
        ...

    @abstractmethod
    async def unsubscribe(self, subscription: Subscription) -> None:
        ...


@dataclass
class SupabaseRealtimeFeed(RealtimeFeed):
    client: AsyncClient
    schema: str = "public"
    _tasks: Set[asyncio.Task] = field(default_factory=set)

    async def subscribe(self, channel_name: str, table: str, filter: str, observer: Observer) -> Subscription:
        loop = asyncio.get_running_loop()

        def _on_insert(_payload: Optional[dict] = None) -> None:
            # payload 무시, observer 만 루프에 올림
            task = loop.create_task(observer())
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

        channel = self.client.channel(channel_name)
        channel.on_postgres_changes(
            "INSERT",
            callback=_on_insert,
            table=table,
            schema=self.schema,
            filter=filter,
        )
        await channel.subscribe()
        logger.info("[REALTIME] subscribed channel=%s table=%s filter=%s", channel_name, table, filter)
        return Subscription(channel_name=channel_name, table=table, filter=filter, channel=channel)

    async def unsubscribe(self, subscription: Subscription) -> None:
        if not subscription.active:
            return
        subscription.active = False
        if subscription.channel is not None:
            await self.client.remove_channel(subscription.channel)
        logger.info("[REALTIME] unsubscribed channel=%s", subscription.channel_name)
