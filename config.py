from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Social Support Application API"
    debug: bool = False
    log_level: str = "INFO"

    database_url: str = "sqlite+aiosqlite:///./social_support.db"
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    # Local single-slot draft (one JSON file)
    draft_store_path: str = "./data/application_draft.json"

    # Suggestion backend
    openai_api_key: str = ""
    openai_model: str = "gpt-3.5-turbo"
    suggestion_max_tokens: int = 200
    suggestion_temperature: float = 0.7

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def has_openai_key(self) -> bool:
        return bool(self.openai_api_key.strip())


settings = Settings()
