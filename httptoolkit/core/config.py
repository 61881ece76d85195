from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "HTTP Toolkit"
    app_env: str = "development"
    api_prefix: str = "/v1"
    sentry_dsn: str = ""

    upload_dir: str = "./uploads"
    static_dir: str = "./static"

    # Zero means "use the library default" (1 MiB for JSON, 1 GiB for uploads).
    max_json_size: int = Field(default=0, ge=0)
    max_file_size: int = Field(default=0, ge=0)
    allowed_file_types: str = ""
    allow_unknown_fields: bool = False
    rename_uploads: bool = True

    remote_timeout_seconds: float = 15.0

    @property
    def allowed_file_type_list(self) -> list[str]:
        types: list[str] = []
        seen: set[str] = set()
        for item in self.allowed_file_types.split(","):
            item = item.strip()
            if not item or item.lower() in seen:
                continue
            seen.add(item.lower())
            types.append(item)
        return types


@lru_cache
def get_settings() -> Settings:
    return Settings()
