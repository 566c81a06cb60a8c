"""
Configuration helpers for the TrainHub backend.

Settings are read from environment variables once and cached; tests clear the
cache (``get_settings.cache_clear()``) or hand a Settings instance straight to
``create_app``.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    port: int
    data_dir: Path
    users_file: Path
    trainings_file: Path
    uploads_dir: Path
    client_dir: Path
    cors_origins: tuple[str, ...]
    log_level: str
    log_json: bool
    max_video_bytes: int
    max_image_bytes: int
    barcode_api_url: str
    barcode_api_key: str
    barcode_timeout_seconds: float

    @property
    def is_production(self) -> bool:
        return self.app_env == "prod"

    @property
    def video_uploads_dir(self) -> Path:
        return self.uploads_dir / "videos"

    @property
    def image_uploads_dir(self) -> Path:
        return self.uploads_dir / "images"


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _float(value: str | None, default: float = 0.0) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    app_env = (os.getenv("APP_ENV") or "dev").lower()
    data_dir = Path(os.getenv("DATA_DIR") or "data")
    origins = tuple(o.strip() for o in (os.getenv("CORS_ORIGINS") or "").split(",") if o.strip())
    if not origins and app_env != "prod":
        origins = ("*",)

    return Settings(
        app_env=app_env,
        port=_int(os.getenv("PORT", "3000"), 3000),
        data_dir=data_dir,
        users_file=Path(os.getenv("USERS_FILE") or data_dir / "users.json"),
        trainings_file=Path(os.getenv("TRAININGS_FILE") or data_dir / "trainings.json"),
        uploads_dir=Path(os.getenv("UPLOADS_DIR") or "uploads"),
        client_dir=Path(os.getenv("CLIENT_DIR") or "client"),
        cors_origins=origins,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_json=_bool(os.getenv("LOG_JSON"), app_env == "prod"),
        max_video_bytes=_int(os.getenv("MAX_VIDEO_BYTES"), 50 << 20),
        max_image_bytes=_int(os.getenv("MAX_IMAGE_BYTES"), 10 << 20),
        barcode_api_url=(os.getenv("BARCODE_API_URL") or "https://searchupcdata.com/api").rstrip("/"),
        barcode_api_key=os.getenv("SEARCHUPCDATA_API_KEY", ""),
        barcode_timeout_seconds=_float(os.getenv("BARCODE_TIMEOUT_SECONDS"), 10.0),
    )
