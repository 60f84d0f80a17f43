from typing import List

from fastapi import APIRouter, Depends

from dancelink.deps import (
    get_application_service,
    get_event_service,
    get_current_user,
    require_dancer,
    require_organizer,
)
from dancelink.schemas.application import Applicant, Application
from dancelink.schemas.event import Event, EventCreate
from dancelink.schemas.options import all_options
from dancelink.schemas.session import SessionContext
from dancelink.services.application_service import ApplicationService
from dancelink.services.event_service import EventService

router = APIRouter(prefix="/api", tags=["events"])


# 폼 선택지 (장르/성별/키/피부톤)
@router.get("/options")
def get_options():
    return all_options()


# 1) 댄서: 전체 이벤트 목록 (최신순)
@router.get("/events", response_model=List[Event])
async def list_events(
    ctx: SessionContext = Depends(get_current_user),
    svc: EventService = Depends(get_event_service),
):
    return await svc.list_events()


# 2) 댄서: 내가 지원한 이벤트 id 목록 ("Already Applied" 표시용)
@router.get("/events/applied", response_model=List[str])
async def list_applied_events(
    ctx: SessionContext = Depends(require_dancer),
    svc: EventService = Depends(get_event_service),
):
    return await svc.list_applied_event_ids(ctx)


# 3) 주최자: 내 이벤트 목록
@router.get("/events/mine", response_model=List[Event])
async def list_my_events(
    ctx: SessionContext = Depends(require_organizer),
    svc: EventService = Depends(get_event_service),
):
    return await svc.list_organizer_events(ctx)


# 4) 주최자: 이벤트 등록
@router.post("/events", response_model=Event, status_code=201)
async def create_event(
    payload: EventCreate,
    ctx: SessionContext = Depends(require_organizer),
    svc: EventService = Depends(get_event_service),
):
    return await svc.create_event(ctx, payload)


# 5) 주최자: 이벤트 삭제
@router.delete("/events/{event_id}", status_code=204)
async def delete_event(
    event_id: str,
    ctx: SessionContext = Depends(require_organizer),
    svc: EventService = Depends(get_event_service),
):
    await svc.delete_event(ctx, event_id)


# 6) 주최자: 지원자 보기
@router.get("/events/{event_id}/applicants", response_model=List[Applicant])
async def list_applicants(
    event_id: str,
    ctx: SessionContext = Depends(require_organizer),
    svc: ApplicationService = Depends(get_application_service),
):
    return await svc.list_applicants(ctx, event_id)


# 7) 댄서: 이벤트 지원
@router.post("/events/{event_id}/applications", response_model=Application, status_code=201)
async def apply_to_event(
    event_id: str,
    ctx: SessionContext = Depends(require_dancer),
    svc: ApplicationService = Depends(get_application_service),
):
    return await svc.submit_application(ctx, event_id)
