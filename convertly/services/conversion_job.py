import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, FrozenSet, Optional

from convertly.models import ConversionRequest, JobStatus

# 허용 상태 전이
_TRANSITIONS: Dict[JobStatus, FrozenSet[JobStatus]] = {
    "received": frozenset({"validated", "failed"}),
    "validated": frozenset({"dispatched", "failed"}),
    "dispatched": frozenset({"succeeded", "failed"}),
    "succeeded": frozenset({"streaming", "failed"}),
    "streaming": frozenset({"cleaned"}),
    "failed": frozenset({"cleaned"}),
    "cleaned": frozenset(),
}


@dataclass
class ConversionJob:
    """
    요청 단위 변환 작업

    received → validated → dispatched → succeeded → streaming → cleaned
    실패 시: (임의 단계) → failed → cleaned
    """

    original_filename: str
    source_format: str
    target_format: str
    mime_type: Optional[str] = None
    job_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    status: JobStatus = "received"
    input_path: Optional[Path] = None
    output_path: Optional[Path] = None
    error: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @classmethod
    def from_request(cls, request: ConversionRequest) -> "ConversionJob":
        return cls(
            original_filename=request.uploaded_file.original_name,
            source_format=request.source_format,
            target_format=request.target_format,
            mime_type=request.uploaded_file.mime_type,
        )

    @property
    def download_filename(self) -> str:
        """다운로드 파일명 (원본 이름 + 대상 확장자)"""
        original_stem = Path(self.original_filename).stem or "converted"
        return f"{original_stem}.{self.target_format}"

    @property
    def is_finished(self) -> bool:
        return self.status == "cleaned"

    def advance(self, status: JobStatus) -> "ConversionJob":
        """
        상태 전이

        Raises:
            ValueError: 허용되지 않는 전이
        """
        if status not in _TRANSITIONS[self.status]:
            raise ValueError(f"잘못된 상태 전이: {self.status} → {status}")

        self.status = status
        if status in ("succeeded", "failed"):
            self.completed_at = datetime.now()
        return self

    def fail(self, error: str) -> "ConversionJob":
        """실패 처리 (이미 실패/정리된 작업은 그대로 둠)"""
        if self.status in ("failed", "cleaned", "streaming"):
            return self
        self.error = error
        return self.advance("failed")

    def to_dict(self) -> dict:
        """딕셔너리 변환 (로그용)"""
        return {
            "job_id": self.job_id,
            "status": self.status,
            "source_format": self.source_format,
            "target_format": self.target_format,
            "filename": self.original_filename,
            "error": self.error,
        }
