# dancelink/routers/profiles.py

from fastapi import APIRouter, Depends, File, UploadFile

from dancelink.deps import get_current_user, get_profile_service
from dancelink.schemas.profile import Profile, ProfileUpdate
from dancelink.schemas.session import SessionContext
from dancelink.services.profile_service import ProfileService
from dancelink.services.storage_service import validate_certification, validate_video

router = APIRouter(prefix="/api/me", tags=["me"])


# ---- 내 프로필 조회 ----

@router.get("/profile", response_model=Profile)
async def get_my_profile(
    ctx: SessionContext = Depends(get_current_user),
    svc: ProfileService = Depends(get_profile_service),
):
    return await svc.get_profile(ctx)


# ---- 내 프로필 수정 (이메일/파일 URL 제외) ----

@router.patch("/profile", response_model=Profile)
async def update_my_profile(
    payload: ProfileUpdate,
    ctx: SessionContext = Depends(get_current_user),
    svc: ProfileService = Depends(get_profile_service),
):
    return await svc.update_profile(ctx, payload)


# ---- 공연 영상 업로드 (video/*, 최대 50MB) ----

@router.post("/profile/video", response_model=Profile)
async def upload_my_video(
    file: UploadFile = File(...),
    ctx: SessionContext = Depends(get_current_user),
    svc: ProfileService = Depends(get_profile_service),
):
    # 본문 읽기 전에 크기/형식부터 (file.size 는 multipart 파서가 채움)
    validate_video(file.size or 0, file.content_type)
    content = await file.read()
    return await svc.upload_video(ctx, file.filename, content, file.content_type)


# ---- 자격증 업로드 (PDF/JPG/PNG, 최대 10MB) ----

@router.post("/profile/certification", response_model=Profile)
async def upload_my_certification(
    file: UploadFile = File(...),
    ctx: SessionContext = Depends(get_current_user),
    svc: ProfileService = Depends(get_profile_service),
):
    validate_certification(file.size or 0, file.content_type, file.filename)
    content = await file.read()
    return await svc.upload_certification(ctx, file.filename, content, file.content_type)
