from pydantic_settings import BaseSettings
from typing import List, Any
import json


def parse_cors_origins(v: Any) -> List[str]:
    """Parse CORS origins from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        # Try JSON parsing first
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        # Fall back to comma-separated
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "VibeCoding"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    API_V1_PREFIX: str = "/api/v1"

    # CORS (stored as comma-separated string, parsed to list)
    CORS_ORIGINS_STR: str = "http://localhost:3000,http://127.0.0.1:3000"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    # ==========================================
    # DeepSeek (OpenAI-compatible chat completions)
    # ==========================================
    DEEPSEEK_API_KEY: str = ""  # Checked lazily, only LLM calls need it
    DEEPSEEK_API_URL: str = "https://api.deepseek.com"
    DEEPSEEK_MODEL: str = "deepseek-chat"
    LLM_TEMPERATURE: float = 0.7
    LLM_CHAT_MAX_TOKENS: int = 2000
    LLM_CODE_MAX_TOKENS: int = 8000
    LLM_TITLE_MAX_TOKENS: int = 50
    LLM_REQUEST_TIMEOUT: int = 120  # seconds, code generation is slow
    LLM_CONNECT_TIMEOUT: int = 30  # seconds
    LLM_MAX_RETRIES: int = 3
    LLM_RETRY_BASE_DELAY: float = 1.0  # seconds
    LLM_RETRY_MAX_DELAY: float = 15.0  # seconds

    # ==========================================
    # Generation
    # ==========================================
    STREAM_CONTENT_SOFT_LIMIT: int = 100000  # characters per file before warning
    TITLE_MAX_LENGTH: int = 15

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""  # Empty disables the file handler

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings


# Create settings instance
settings = Settings()
