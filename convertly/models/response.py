from typing import Dict, List

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="healthy", description="서버 상태")


class SupportedConversionsResponse(BaseModel):
    """지원 변환 목록 응답"""

    conversions: Dict[str, List[str]] = Field(
        ..., description="원본 형식별 변환 가능한 대상 형식 목록"
    )
