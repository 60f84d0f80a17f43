# dancelink/services/profile_service.py
# 댄서 프로필 조회/수정 + 영상/자격증 업로드
import logging
from typing import Optional

from fastapi import HTTPException

from dancelink.schemas.profile import Profile, ProfileUpdate
from dancelink.schemas.session import SessionContext
from dancelink.services.storage_service import StorageService
from dancelink.services.store import DataStore

logger = logging.getLogger(__name__)


class ProfileService:

    def __init__(self, store: DataStore, storage: StorageService):
        self.store = store
        self.storage = storage

    async def get_profile(self, ctx: SessionContext) -> Profile:
        try:
            profile = await self.store.get_profile(ctx.user_id)
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail={"message": "profile_fetch_failed", "detail": str(e)},
            )
        if profile is None:
            raise HTTPException(status_code=404, detail={"message": "profile_not_found"})
        return profile

    async def _update(self, ctx: SessionContext, fields: dict) -> Profile:
        # 본인 행만 (id 는 토큰의 sub)
        try:
            profile = await self.store.update_profile(ctx.user_id, fields)
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail={"message": "profile_update_failed", "detail": str(e)},
            )
        if profile is None:
            raise HTTPException(status_code=404, detail={"message": "profile_not_found"})
        return profile

    async def update_profile(self, ctx: SessionContext, payload: ProfileUpdate) -> Profile:
        fields = payload.model_dump(exclude_unset=True)
        if not fields:
            return await self.get_profile(ctx)
        profile = await self._update(ctx, fields)
        logger.info("[PROFILE] updated user=%s fields=%s", ctx.user_id, sorted(fields))
        return profile

    async def upload_video(
        self, ctx: SessionContext, filename: Optional[str], data: bytes, content_type: str
    ) -> Profile:
        # 크기/형식 검증은 업로드 전에 storage 쪽에서
        url = await self.storage.upload_video(ctx.user_id, filename, data, content_type)
        return await self._update(ctx, {"video_url": url})

    async def upload_certification(
        self, ctx: SessionContext, filename: Optional[str], data: bytes, content_type: str
    ) -> Profile:
        url = await self.storage.upload_certification(ctx.user_id, filename, data, content_type)
        return await self._update(ctx, {"certification_document_url": url})
