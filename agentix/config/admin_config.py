from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ENV: str = "dev"                # "dev" / "staging" / "prod"
    SERVICE_NAME: str = "agentix"
    LOG_LEVEL: Optional[str] = None  # overrides the per-env default when set

    class Config:
        env_file = ".env"
        extra="ignore"

admin_config = Settings()
