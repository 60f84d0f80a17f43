# dancelink/config.py


from dotenv import load_dotenv
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()  # .env 파일 먼저 읽기

BASE_DIR = Path(__file__).resolve().parent.parent

class Settings(BaseSettings):
    # 환경 구분
    app_env: str = "local"
    log_level: str = "INFO"

    # Supabase 필수 설정
    supabase_url: str                        # SUPABASE_URL
    supabase_anon_key: str                   # SUPABASE_ANON_KEY
    supabase_service_role_key: str | None = None
    supabase_jwt_secret: str | None = None   # SUPABASE_JWT_SECRET
    supabase_jwt_audience: str = "authenticated"
    supabase_issuer: str | None = None       # 예: https://<project>.supabase.co/auth/v1

    # Storage 버킷 / 업로드 제한 (MB)
    supabase_video_bucket: str = "dancer-videos"
    supabase_cert_bucket: str = "certifications"
    max_video_mb: int = 50
    max_certification_mb: int = 10

    # 지원 결과 알림 (Edge Function + Resend)
    notification_function: str = "send-application-notification"
    resend_api_key: str | None = None
    resend_api_url: str = "https://api.resend.com"
    email_from: str = "DanceLink <onboarding@resend.dev>"

    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),  # 루트 .env 절대경로
        env_file_encoding="utf-8",
        extra="ignore",                   # 필요 없는 env 무시
    )

    @property
    def supabase_server_key(self) -> str:
        # 서버에서는 service role 키 우선, 없으면 anon 키
        return self.supabase_service_role_key or self.supabase_anon_key

settings = Settings()

if __name__ == "__main__":
    print("BASE_DIR:", BASE_DIR)
    print("SUPABASE_URL:", settings.supabase_url)
    print("SUPABASE_ANON_KEY 앞 10글자:", settings.supabase_anon_key[:10], "...")
