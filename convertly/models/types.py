"""공용 타입 정의"""

from typing import FrozenSet, Literal

JobStatus = Literal[
    "received",
    "validated",
    "dispatched",
    "succeeded",
    "streaming",
    "failed",
    "cleaned",
]

# 형식 그룹 (소문자, 점 없음)
DOCUMENT_FORMATS: FrozenSet[str] = frozenset({"docx"})
MARKUP_FORMATS: FrozenSet[str] = frozenset({"html"})
VIDEO_FORMATS: FrozenSet[str] = frozenset({"mp4", "avi", "mov", "mkv"})
IMAGE_FORMATS: FrozenSet[str] = frozenset({"jpg", "jpeg", "png", "webp"})
PDF_EMBEDDABLE_IMAGE_FORMATS: FrozenSet[str] = frozenset({"jpg", "jpeg", "png"})
PDF_FORMATS: FrozenSet[str] = frozenset({"pdf"})
RASTER_PAGE_FORMATS: FrozenSet[str] = frozenset({"jpg"})
