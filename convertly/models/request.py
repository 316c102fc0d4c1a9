from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from convertly.core.exceptions import MissingInputException


class UploadedFile(BaseModel):
    """업로드된 파일 메타데이터"""

    original_name: str = Field(..., min_length=1, description="원본 파일명")
    mime_type: Optional[str] = Field(default=None, description="클라이언트가 보낸 MIME 타입")

    @property
    def extension(self) -> str:
        """소문자 확장자 (점 제외, 없으면 빈 문자열)"""
        return Path(self.original_name).suffix.lstrip(".").lower()


class ConversionRequest(BaseModel):
    """변환 요청 (파일 + 대상 형식)"""

    uploaded_file: UploadedFile
    target_format: str = Field(..., min_length=1, description="대상 형식")

    @field_validator("target_format", mode="before")
    @classmethod
    def normalize_target_format(cls, v):
        """대상 형식 정규화 (공백 제거 + 소문자)"""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def source_format(self) -> str:
        return self.uploaded_file.extension

    @classmethod
    def from_form(
        cls,
        filename: Optional[str],
        content_type: Optional[str],
        target_format: Optional[str],
    ) -> "ConversionRequest":
        """
        폼 필드로부터 요청 생성

        Args:
            filename: 업로드 파일명 (파일 필드가 없으면 None)
            content_type: 업로드 MIME 타입
            target_format: targetFormat 필드 값

        Returns:
            정규화된 ConversionRequest

        Raises:
            MissingInputException: 파일 또는 대상 형식이 비어 있는 경우
        """
        normalized_target = (target_format or "").strip().lower()
        if not filename or not normalized_target:
            raise MissingInputException()

        return cls(
            uploaded_file=UploadedFile(original_name=filename, mime_type=content_type),
            target_format=normalized_target,
        )
