from convertly.models.types import JobStatus
from convertly.models.request import ConversionRequest, UploadedFile
from convertly.models.response import (
    HealthResponse,
    SupportedConversionsResponse,
)

__all__ = [
    "JobStatus",
    "ConversionRequest",
    "UploadedFile",
    "HealthResponse",
    "SupportedConversionsResponse",
]
