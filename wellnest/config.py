"""
Application configuration
"""
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings"""

    DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL", "")
    SUPABASE_SSLMODE: Optional[str] = os.getenv("SUPABASE_SSLMODE")

    # Supabase auth - access tokens are HS256 JWTs signed with the project secret
    SUPABASE_JWT_SECRET: Optional[str] = os.getenv("SUPABASE_JWT_SECRET")
    SUPABASE_JWT_AUDIENCE: str = os.getenv("SUPABASE_JWT_AUDIENCE", "authenticated")
    ALLOW_UNVERIFIED_TOKENS: bool = _env_flag("ALLOW_UNVERIFIED_TOKENS")

    # External model service (EPDS scoring + maternal risk prediction)
    SCORING_SERVICE_URL: str = os.getenv("SCORING_SERVICE_URL", "https://wellnest-51u4.onrender.com")
    EPDS_ENDPOINT: str = os.getenv("EPDS_ENDPOINT", "/epds")
    PREDICT_ENDPOINT: str = os.getenv("PREDICT_ENDPOINT", "/predict")
    SCORING_TIMEOUT: float = float(os.getenv("SCORING_TIMEOUT", "30"))
    EPDS_LOCAL_FALLBACK: bool = _env_flag("EPDS_LOCAL_FALLBACK")

    # Blood sugar is sent to the model in mmol/L, bounds follow the model's input range
    BLOOD_SUGAR_MIN: float = float(os.getenv("BLOOD_SUGAR_MIN", "6.0"))
    BLOOD_SUGAR_MAX: float = float(os.getenv("BLOOD_SUGAR_MAX", "20.0"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS settings
    CORS_ORIGINS: list = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list = ["*"]
    CORS_ALLOW_HEADERS: list = ["*"]


settings = Settings()
