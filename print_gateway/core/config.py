from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    PRINT_API_KEY: str = Field(default="1234")
    BIND_HOST: str = Field(default="127.0.0.1")
    PORT: int = Field(default=9900)
    CORS_ORIGINS: str = Field(default="*")
    MAX_BODY_BYTES: int = Field(default=10 * 1024 * 1024)
    LOG_LEVEL: str = Field(default="INFO")

    # OS spooler
    TMP_DIR: Optional[str] = Field(default=None)
    LP_COMMAND: str = Field(default="lp")
    LPSTAT_COMMAND: str = Field(default="lpstat")
    # Windows PDF printing; unset searches the standard install folders and PATH
    SUMATRA_PDF: Optional[str] = Field(default=None)

    # Raw socket (JetDirect / AppSocket)
    RAW_PORT: int = Field(default=9100)
    RAW_TIMEOUT: Optional[float] = Field(default=None)

    # IPP
    IPP_PORT: int = Field(default=631)
    IPP_PATH: str = Field(default="/ipp/print")
    IPP_REQUESTING_USER: str = Field(default="print-gateway")
    JOB_NAME: str = Field(default="print-gateway-job")

    # Remote document fetch; None keeps the requests default (no timeout)
    FETCH_TIMEOUT: Optional[float] = Field(default=None)

    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


def _load_settings() -> Settings:
    return Settings()


settings = _load_settings()
