from functools import lru_cache
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./teamfood.db"
    jwt_secret: str = "dev-secret-key"
    jwt_algorithm: str = "HS256"
    token_ttl_hours: int = 24
    allow_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    seed_demo_data: bool = True
    log_level: str = "INFO"
    line_channel_access_token: str | None = None
    line_target_ids: list[str] = Field(default_factory=list)

    class Config:
        env_file = ".env"

    @field_validator("line_target_ids", mode="before")
    @classmethod
    def split_line_targets(cls, value):
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if value is None:
            return []
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
