# dancelink/services/storage_service.py
import logging
import re
import time
from typing import Optional

from fastapi import HTTPException
from supabase import AsyncClient

from dancelink.config import settings

logger = logging.getLogger(__name__)

MB = 1024 * 1024

CERTIFICATION_TYPES = {
    "application/pdf": "pdf",
    "image/jpeg": "jpg",
    "image/png": "png",
}
CERTIFICATION_EXTENSIONS = {"pdf", "jpg", "jpeg", "png"}

# 확장자는 영문 소문자/숫자만 (경로 구분자, 점 등은 fallback 으로)
EXTENSION_RE = re.compile(r"[a-z0-9]+")


def _extension(filename: Optional[str], fallback: str) -> str:
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[-1].lower()
        if EXTENSION_RE.fullmatch(ext):
            return ext
    return fallback


def build_object_path(user_id: str, filename: Optional[str], fallback_ext: str) -> str:
    # {user_id}/{epoch_ms}.{ext}
    if not EXTENSION_RE.fullmatch(fallback_ext or ""):
        fallback_ext = "bin"
    return f"{user_id}/{int(time.time() * 1000)}.{_extension(filename, fallback_ext)}"


def validate_video(size: int, content_type: Optional[str]) -> None:
    """
    영상 업로드 사전 검증 (네트워크 호출 전)
    - video/* 만 허용
    - 최대 MAX_VIDEO_MB
    """
    if not content_type or not content_type.startswith("video/"):
        raise HTTPException(
            status_code=415,
            detail={"message": "unsupported_file_type", "detail": "Video file required"},
        )
    if size > settings.max_video_mb * MB:
        raise HTTPException(
            status_code=413,
            detail={"message": "file_too_large", "detail": f"Video file must be under {settings.max_video_mb}MB"},
        )


def validate_certification(size: int, content_type: Optional[str], filename: Optional[str]) -> None:
    """
    자격증 업로드 사전 검증
    - 확장자는 PDF / JPG / JPEG / PNG 중 하나 (파일명이 없으면 MIME 에서)
    - MIME 이 있으면 그것도 PDF / JPEG / PNG 여야 함
    - 최대 MAX_CERTIFICATION_MB
    """
    ext = _extension(filename, CERTIFICATION_TYPES.get(content_type, ""))
    if ext not in CERTIFICATION_EXTENSIONS or (content_type and content_type not in CERTIFICATION_TYPES):
        raise HTTPException(
            status_code=415,
            detail={"message": "unsupported_file_type", "detail": "PDF, JPG, or PNG required"},
        )
    if size > settings.max_certification_mb * MB:
        raise HTTPException(
            status_code=413,
            detail={
                "message": "file_too_large",
                "detail": f"File size must be less than {settings.max_certification_mb}MB",
            },
        )


class StorageService:
    """Supabase Storage 업로드 + public URL 발급"""

    def __init__(self, client: AsyncClient):
        self.client = client

    async def upload(self, bucket: str, path: str, data: bytes, content_type: str, upsert: bool = True) -> str:
        await self.client.storage.from_(bucket).upload(
            path,
            data,
            {
                "content-type": content_type or "application/octet-stream",
                "upsert": "true" if upsert else "false",
            },
        )
        return path  # 버킷 내 경로

    async def get_public_url(self, bucket: str, path: str) -> str:
        return await self.client.storage.from_(bucket).get_public_url(path)

    async def _upload_public(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        try:
            await self.upload(bucket, path, data, content_type, upsert=True)
            url = await self.get_public_url(bucket, path)
        except Exception as e:
            logger.exception("[STORAGE] upload failed bucket=%s path=%s", bucket, path)
            raise HTTPException(
                status_code=500,
                detail={"message": "upload_failed", "detail": str(e)},
            )
        logger.info("[STORAGE] uploaded bucket=%s path=%s size=%d", bucket, path, len(data))
        return url

    async def upload_video(self, user_id: str, filename: Optional[str], data: bytes, content_type: str) -> str:
        validate_video(len(data), content_type)
        fallback = content_type.split("/", 1)[-1] if content_type else "mp4"
        path = build_object_path(user_id, filename, fallback)
        return await self._upload_public(settings.supabase_video_bucket, path, data, content_type)

    async def upload_certification(self, user_id: str, filename: Optional[str], data: bytes, content_type: str) -> str:
        validate_certification(len(data), content_type, filename)
        path = build_object_path(user_id, filename, CERTIFICATION_TYPES.get(content_type, "pdf"))
        return await self._upload_public(settings.supabase_cert_bucket, path, data, content_type)
