from pathlib import Path

from pydantic_settings import BaseSettings

# .env lookup: backend/.env, then project root/.env
_backend_dir = Path(__file__).resolve().parent.parent
_env_candidates = [_backend_dir / ".env", _backend_dir.parent / ".env"]
_env_file = next((p for p in _env_candidates if p.exists()), ".env")


class Settings(BaseSettings):
    model_config = {"env_file": str(_env_file), "env_file_encoding": "utf-8", "extra": "ignore"}

    # Application
    app_env: str = "development"
    debug: bool = True

    # Database
    database_url: str = "sqlite+aiosqlite:///./aqar.db"

    # Model provider: "openai" (any chat-completions endpoint) or "anthropic"
    llm_provider: str = "openai"
    llm_api_key: str = ""
    llm_base_url: str = "https://api.openai.com/v1"
    llm_timeout_seconds: float = 60.0

    # Anthropic
    anthropic_api_key: str = ""
    llm_max_retries: int = 2
    llm_max_tokens: int = 2048

    # Cheap model for structured extraction, richer model for prose.
    # Set both to Claude model names when llm_provider is "anthropic".
    llm_fast_model: str = "gpt-4.1-nano"
    llm_rich_model: str = "gpt-4o-mini"

    recommendation_temperature: float = 0.7
    smart_search_temperature: float = 0.1
    market_temperature: float = 0.3
    chat_temperature: float = 0.7
    chat_max_tokens: int = 1000

    # Image storage
    upload_dir: str = "./uploads"
    media_base_url: str = "/media"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:5173"]


settings = Settings()
