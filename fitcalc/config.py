from pathlib import Path

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FITCALC_",
        env_file=Path(__file__).parent.parent / ".env",
        extra="ignore",
    )

    title: str = "FitCalc API"
    version: str = "0.1.0"
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]
    svg_width: int | None = None
    svg_height: int | None = None

    def __repr__(self):
        return f"AppSettings({self})"


settings = AppSettings()


if __name__ == "__main__":
    logger.info("🚲 App settings loaded: {}", repr(settings))
