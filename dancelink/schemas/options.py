# dancelink/schemas/options.py
# 프로필/이벤트 폼에서 사용하는 선택지 목록

DANCE_STYLES = [
    "Hip Hop",
    "Contemporary",
    "Ballet",
    "Jazz",
    "Salsa",
    "Ballroom",
    "Breakdancing",
    "Tap",
    "Modern",
    "Latin",
    "Other",
]

# 이벤트는 "Other" 대신 "All Styles"
EVENT_DANCE_STYLES = DANCE_STYLES[:-1] + ["All Styles"]

GENDERS = ["Male", "Female", "Non-binary", "Prefer not to say"]

GENDER_PREFERENCES = ["Male", "Female", "Any", "Non-binary"]

HEIGHTS = [
    "Under 5'0\"", "5'0\" - 5'2\"", "5'3\" - 5'5\"", "5'6\" - 5'8\"",
    "5'9\" - 5'11\"", "6'0\" - 6'2\"", "Over 6'2\"",
]

SKIN_TONES = ["Fair", "Light", "Medium", "Tan", "Brown", "Dark"]


def all_options() -> dict:
    return {
        "dance_styles": DANCE_STYLES,
        "event_dance_styles": EVENT_DANCE_STYLES,
        "genders": GENDERS,
        "gender_preferences": GENDER_PREFERENCES,
        "heights": HEIGHTS,
        "skin_tones": SKIN_TONES,
    }


def ensure_choice(value, choices: list, field: str):
    # None 은 "변경 안 함"으로 통과
    if value is not None and value not in choices:
        raise ValueError(f"{field} must be one of: {', '.join(choices)}")
    return value
