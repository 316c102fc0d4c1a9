from pathlib import Path
from typing import FrozenSet

from PIL import Image

from convertly.core.config import settings
from convertly.models.types import IMAGE_FORMATS
from convertly.services.converters.base import BaseConverter

# 형식 문자열 → Pillow 형식명
PIL_FORMATS = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
    "webp": "WEBP",
}

# PNG로 바로 저장 가능한 모드 (그 외 CMYK 등은 RGB로 변환)
PNG_MODES = frozenset({"1", "L", "LA", "I", "P", "RGB", "RGBA"})


def get_pil_format(format_str: str) -> str:
    """형식 문자열을 Pillow 형식명으로 변환"""
    return PIL_FORMATS.get(format_str.lower(), format_str.upper())


class ImageConverter(BaseConverter):
    """이미지 ↔ 이미지 변환기 (Pillow)"""

    # 확장자와 실제 내용이 달라도 Pillow가 읽을 수 있는 이미지면 허용
    SNIFF_CONTENT = True

    @property
    def source_formats(self) -> FrozenSet[str]:
        return IMAGE_FORMATS

    @property
    def target_formats(self) -> FrozenSet[str]:
        return IMAGE_FORMATS

    @property
    def name(self) -> str:
        return "image-to-image"

    def _convert_sync(
        self, input_path: Path, output_path: Path, target_format: str
    ) -> None:
        """이미지 형식 변환"""
        fmt = target_format.lower()

        with Image.open(input_path) as img:
            # JPEG는 알파 채널 미지원
            if fmt in ("jpg", "jpeg") and img.mode not in ("RGB", "L", "CMYK"):
                img = img.convert("RGB")
            elif fmt == "png" and img.mode not in PNG_MODES:
                img = img.convert("RGB")

            save_kwargs: dict[str, object] = {}
            if fmt in ("jpg", "jpeg", "webp"):
                save_kwargs["quality"] = settings.JPEG_QUALITY
            if fmt == "png":
                save_kwargs["optimize"] = True

            img.save(output_path, format=get_pil_format(fmt), **save_kwargs)
