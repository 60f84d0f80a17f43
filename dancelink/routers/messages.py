import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect

from dancelink.deps import authenticate, get_current_user, get_messaging_service, get_store
from dancelink.schemas.message import Message, MessageIn
from dancelink.schemas.session import SessionContext
from dancelink.services.messaging_service import MessagingService
from dancelink.services.store import DataStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/applications", tags=["messages"])


# 스레드 조회 (+ 내가 받은 메시지 읽음 처리)
@router.get("/{application_id}/messages", response_model=List[Message])
async def get_thread(
    application_id: str,
    ctx: SessionContext = Depends(get_current_user),
    svc: MessagingService = Depends(get_messaging_service),
):
    await svc.resolve_participants(ctx, application_id)
    return await svc.load_thread(application_id, ctx.user_id)


# 메시지 전송 -> 갱신된 스레드 반환
@router.post("/{application_id}/messages", response_model=List[Message], status_code=201)
async def send_message(
    application_id: str,
    payload: MessageIn,
    ctx: SessionContext = Depends(get_current_user),
    svc: MessagingService = Depends(get_messaging_service),
):
    dancer_id, organizer_id = await svc.resolve_participants(ctx, application_id)
    return await svc.send(application_id, ctx.user_id, dancer_id, organizer_id, payload.message)


# realtime: 새 메시지가 INSERT 될 때마다 스레드 전체를 push
# 예: ws://host/api/applications/{id}/messages/ws?token=<access_token>
@router.websocket("/{application_id}/messages/ws")
async def thread_updates(
    websocket: WebSocket,
    application_id: str,
    token: Optional[str] = Query(None, description="Supabase access token"),
    store: DataStore = Depends(get_store),
    svc: MessagingService = Depends(get_messaging_service),
):
    # accept 전에 인증 / 참여자 확인
    try:
        ctx = await authenticate(f"Bearer {token}" if token else None, store)
        await svc.resolve_participants(ctx, application_id)
    except HTTPException as e:
        code = 4001 if e.status_code == 401 else 4003
        logger.warning("[MESSAGES] websocket rejected application=%s status=%s", application_id, e.status_code)
        await websocket.close(code=code)
        return

    await websocket.accept()

    async def push(thread: List[Message]) -> None:
        try:
            await websocket.send_json(
                {"type": "thread", "messages": [m.model_dump(mode="json") for m in thread]}
            )
        except Exception as e:
            logger.warning("[MESSAGES] websocket push failed application=%s: %r", application_id, e)

    # 구독 먼저 걸고 초기 스레드 push (사이에 들어온 INSERT 도 놓치지 않게)
    watcher = await svc.watch(application_id, ctx.user_id, push)
    try:
        await push(await svc.load_thread(application_id, ctx.user_id))
    except HTTPException as e:
        await watcher.stop()
        await websocket.send_json({"type": "error", "detail": e.detail})
        await websocket.close(code=1011)
        return

    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        await watcher.stop()
