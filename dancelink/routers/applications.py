from typing import List

from fastapi import APIRouter, Depends

from dancelink.deps import get_application_service, require_dancer, require_organizer
from dancelink.schemas.application import Application, ApplicationWithEvent, StatusUpdateIn
from dancelink.schemas.session import SessionContext
from dancelink.services.application_service import ApplicationService

router = APIRouter(prefix="/api/applications", tags=["applications"])


# 댄서: 내 지원 목록 (이벤트/주최자 포함)
@router.get("/mine", response_model=List[ApplicationWithEvent])
async def list_my_applications(
    ctx: SessionContext = Depends(require_dancer),
    svc: ApplicationService = Depends(get_application_service),
):
    return await svc.list_my_applications(ctx)


# 주최자: 승인 / 거절 (+ 결과 메일)
@router.patch("/{application_id}/status", response_model=Application)
async def update_application_status(
    application_id: str,
    payload: StatusUpdateIn,
    ctx: SessionContext = Depends(require_organizer),
    svc: ApplicationService = Depends(get_application_service),
):
    return await svc.decide(ctx, application_id, payload.status)
