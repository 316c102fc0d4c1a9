from functools import lru_cache
from pathlib import Path
from typing import List, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Convertly 애플리케이션 설정"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    # 서버
    ENV: Literal["development", "production", "testing"] = "development"
    HOST: str = "0.0.0.0"
    PORT: int = 4000
    LOG_LEVEL: str = "INFO"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["*"]

    # 파일 제한
    MAX_FILE_SIZE_MB: int = 200

    # 경로
    UPLOAD_DIR: Path = Path("./uploads")
    OUTPUT_DIR: Path = Path("./converted")

    # 잔여 파일 정리
    FILE_RETENTION_HOURS: int = 24
    CLEANUP_INTERVAL_MINUTES: int = 10  # 0이면 비활성화

    # ffmpeg (동영상 변환)
    FFMPEG_BINARY: str = "ffmpeg"

    # poppler (PDF → JPG)
    PDF_RASTER_DPI: int = 200
    POPPLER_PATH: str | None = None

    # Pillow 인코딩 품질 (jpg/jpeg/webp)
    JPEG_QUALITY: int = 90

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """문자열 CORS origins을 리스트로 파싱"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def MAX_FILE_SIZE_BYTES(self) -> int:
        """파일당 최대 크기 (bytes)"""
        return self.MAX_FILE_SIZE_MB * 1024 * 1024

    @property
    def is_development(self) -> bool:
        """개발 환경 여부"""
        return self.ENV == "development"

    @property
    def is_production(self) -> bool:
        """프로덕션 환경 여부"""
        return self.ENV == "production"

    @property
    def is_cleanup_enabled(self) -> bool:
        """잔여 파일 정리 스케줄러 사용 여부"""
        return self.CLEANUP_INTERVAL_MINUTES > 0


@lru_cache
def get_settings() -> Settings:
    """설정 싱글톤 반환 (캐싱)"""
    return Settings()


# 기본 설정 인스턴스 (get_settings()와 동일 인스턴스 사용)
settings = get_settings()
