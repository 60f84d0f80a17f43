# dancelink/main.py

# ------------------------
# 환경 변수 로드
# ------------------------
from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager

# ------------------------
# FastAPI, CORS 미들웨어 import
# ------------------------
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dancelink.config import settings
from dancelink.routers import applications as applications_router
from dancelink.routers import events as events_router
from dancelink.routers import messages as messages_router
from dancelink.routers import profiles as profiles_router
from dancelink.services.supabase_client import create_supabase

# ------------------------
# 0) 로깅
# ------------------------
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("dancelink")


# ------------------------
# 1) 앱 수명주기
#    - 시작 시 supabase async client 1개 생성
#    - 종료 시 열린 realtime 채널 정리
# ------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.supabase = await create_supabase()
    logger.info("[APP] started env=%s supabase=%s", settings.app_env, settings.supabase_url)

    yield

    try:
        await app.state.supabase.remove_all_channels()
    except Exception:
        logger.exception("[APP] realtime cleanup failed")
    logger.info("[APP] shutdown")


# ------------------------
# 2) FastAPI 앱 생성
# ------------------------
app = FastAPI(title="DanceLink API", lifespan=lifespan)

# ------------------------
# 3) CORS 미들웨어 추가
#    - 프론트(Vite) 개발용 전체 허용
# ------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,  # 쿠키 안 쓰면 False
    allow_methods=["*"],
    allow_headers=["*"],
)

# ------------------------
# 4) 라우터 등록
# ------------------------
app.include_router(profiles_router.router)
app.include_router(events_router.router)
app.include_router(applications_router.router)
app.include_router(messages_router.router)

# ------------------------
# 5) Root 엔드포인트 (health check)
# ------------------------
@app.get("/")
def root():
    return {"ok": True}
