from dataclasses import dataclass
from typing import Optional


# 요청 단위로 명시적으로 넘기는 로그인 사용자 정보
@dataclass(frozen=True)
class SessionContext:
    user_id: str
    email: Optional[str] = None
    role: Optional[str] = None  # dancer | organizer | None

    @property
    def is_dancer(self) -> bool:
        return self.role == "dancer"

    @property
    def is_organizer(self) -> bool:
        return self.role == "organizer"
