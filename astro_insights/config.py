from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ─── App ──────────────────────────────
    APP_NAME: str = "astro-insights"
    ENV: str = "local"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # ─── Geocoding (Nominatim) ────────────
    GEOCODER_URL: str = "https://nominatim.openstreetmap.org/search"
    GEOCODER_USER_AGENT: str = "AstroInsights/1.0"
    GEOCODER_TIMEOUT: float = 10.0

    # ─── Prokerala ────────────────────────
    PROKERALA_CLIENT_ID: str = ""
    PROKERALA_CLIENT_SECRET: str = ""
    PROKERALA_BASE_URL: str = "https://api.prokerala.com/v2/astrology"
    PROKERALA_TOKEN_URL: str = "https://api.prokerala.com/token"
    PROKERALA_TIMEOUT: float = 30.0
    PROKERALA_AYANAMSA: int = 1  # Lahiri
    BIRTH_UTC_OFFSET: str = "+05:30"  # birth times are entered in IST
    TOKEN_SAFETY_MARGIN: int = 600

    # ─── LLM (OpenAI-compatible) ──────────
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: Optional[str] = None
    OPENAI_MODEL: str = "meta-llama/Llama-3-70b-chat-hf"
    OPENAI_TEMPERATURE: float = 0.7
    OPENAI_MAX_TOKENS: int = 1500
    OPENAI_TIMEOUT: float = 30.0
    OPENAI_RETRIES: int = 3

    # ─── Insight generation ───────────────
    INSIGHT_MAX_ATTEMPTS: int = 3
    INSIGHT_MIN_COMPLETION_TOKENS: int = 300
    INSIGHT_TOKEN_STEP: int = 1000
    INSIGHT_MAX_TOKENS_CAP: int = 4000
    INSIGHT_SIMPLIFIED_MAX_TOKENS: int = 800
    VEDIC_CHART_MAX_TOKENS: int = 4000
    VEDIC_CHART_TEMPERATURE: float = 0.2

    # ─── Retry / backoff ──────────────────
    RETRY_ATTEMPTS: int = 3
    RETRY_BASE_DELAY: float = 1.0
    RETRY_FACTOR: float = 2.0
    RETRY_JITTER: float = 0.5


    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
