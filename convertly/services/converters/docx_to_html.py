import logging
from pathlib import Path
from typing import FrozenSet

from convertly.core.exceptions import ConversionFailedException
from convertly.models.types import DOCUMENT_FORMATS, MARKUP_FORMATS
from convertly.services.converters.base import BaseConverter

logger = logging.getLogger(__name__)


class DocxToHtmlConverter(BaseConverter):
    """DOCX → HTML 변환기 (mammoth)"""

    @property
    def source_formats(self) -> FrozenSet[str]:
        return DOCUMENT_FORMATS

    @property
    def target_formats(self) -> FrozenSet[str]:
        return MARKUP_FORMATS

    @property
    def name(self) -> str:
        return "docx-to-html"

    def _convert_sync(
        self, input_path: Path, output_path: Path, target_format: str
    ) -> None:
        """DOCX를 HTML로 변환"""
        try:
            import mammoth
        except ImportError:
            raise ConversionFailedException(
                "mammoth 라이브러리가 설치되지 않았습니다. "
                "pip install mammoth를 실행하세요."
            )

        try:
            with open(input_path, "rb") as docx_file:
                result = mammoth.convert_to_html(docx_file)
        except Exception as e:
            raise ConversionFailedException(f"DOCX 변환 실패: {str(e)}")

        for message in result.messages:
            logger.warning(f"mammoth 경고 ({input_path.name}): {message}")

        output_path.write_text(result.value, encoding="utf-8")
