import logging
import re
from pathlib import Path
from typing import FrozenSet, List

from convertly.core.config import settings
from convertly.core.exceptions import ConversionFailedException
from convertly.models.types import PDF_FORMATS, RASTER_PAGE_FORMATS
from convertly.services.converters.base import BaseConverter

logger = logging.getLogger(__name__)

# pdftoppm 출력 파일명 끝의 페이지 번호 (예: page-<id>0001-03.jpg)
_PAGE_NUMBER_PATTERN = re.compile(r"-(\d+)$")


def _page_sort_key(path: Path) -> tuple[int, str]:
    match = _PAGE_NUMBER_PATTERN.search(path.stem)
    page = int(match.group(1)) if match else 0
    return page, path.name


class PdfToJpgConverter(BaseConverter):
    """PDF → JPG 변환기 (pdf2image / poppler)"""

    OUTPUT_PREFIX = "page"

    @property
    def source_formats(self) -> FrozenSet[str]:
        return PDF_FORMATS

    @property
    def target_formats(self) -> FrozenSet[str]:
        return RASTER_PAGE_FORMATS

    @property
    def name(self) -> str:
        return "pdf-to-jpg"

    def collect_pages(self, output_dir: Path, prefix: str) -> List[Path]:
        """접두사가 일치하는 페이지 이미지를 페이지 순서로 정렬하여 반환"""
        pages = [p for p in output_dir.glob(f"{prefix}*.jpg") if p.is_file()]
        return sorted(pages, key=_page_sort_key)

    def _convert_sync(
        self, input_path: Path, output_path: Path, target_format: str
    ) -> Path:
        """
        PDF 전체 페이지를 래스터화하고 첫 페이지 이미지를 반환

        나머지 페이지 이미지는 즉시 삭제한다.
        """
        try:
            from pdf2image import convert_from_path
        except ImportError:
            raise ConversionFailedException(
                "pdf2image 라이브러리가 설치되지 않았습니다. "
                "pip install pdf2image를 실행하세요."
            )

        output_dir = output_path.parent
        prefix = output_path.stem

        try:
            convert_from_path(
                str(input_path),
                dpi=settings.PDF_RASTER_DPI,
                output_folder=str(output_dir),
                fmt="jpeg",
                output_file=prefix,
                paths_only=True,
                poppler_path=settings.POPPLER_PATH,
            )
        except Exception as e:
            self._remove_pages(self.collect_pages(output_dir, prefix))
            raise ConversionFailedException(f"PDF 래스터화 실패: {str(e)}")

        pages = self.collect_pages(output_dir, prefix)
        if not pages:
            raise ConversionFailedException("PDF에서 JPG 이미지가 생성되지 않았습니다")

        first_page, extra_pages = pages[0], pages[1:]
        if extra_pages:
            logger.info(
                f"첫 페이지만 반환, 나머지 {len(extra_pages)}개 페이지 이미지 삭제: {prefix}"
            )
            self._remove_pages(extra_pages)

        return first_page

    @staticmethod
    def _remove_pages(pages: List[Path]) -> None:
        for page in pages:
            page.unlink(missing_ok=True)
