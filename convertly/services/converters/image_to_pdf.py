from pathlib import Path
from typing import FrozenSet

from PIL import Image

from convertly.models.types import PDF_EMBEDDABLE_IMAGE_FORMATS, PDF_FORMATS
from convertly.services.converters.base import BaseConverter

# PDF 사용자 공간 단위 = 1/72인치 → 72 dpi로 저장하면 1px = 1pt
PDF_UNIT_RESOLUTION = 72.0


class ImageToPdfConverter(BaseConverter):
    """이미지 → PDF 변환기 (Pillow PDF writer)"""

    @property
    def source_formats(self) -> FrozenSet[str]:
        return PDF_EMBEDDABLE_IMAGE_FORMATS

    @property
    def target_formats(self) -> FrozenSet[str]:
        return PDF_FORMATS

    @property
    def name(self) -> str:
        return "image-to-pdf"

    def _convert_sync(
        self, input_path: Path, output_path: Path, target_format: str
    ) -> None:
        """
        이미지를 단일 페이지 PDF로 변환

        페이지 크기는 이미지 픽셀 크기와 동일 (배율 1:1),
        이미지는 원점에서 페이지 전체를 채운다.
        """
        with Image.open(input_path) as img:
            if img.mode not in ("RGB", "L", "CMYK"):
                img = img.convert("RGB")

            img.save(output_path, format="PDF", resolution=PDF_UNIT_RESOLUTION)
