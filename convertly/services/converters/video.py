import asyncio
import logging
from pathlib import Path
from typing import FrozenSet

from convertly.core.config import settings
from convertly.core.exceptions import ConversionFailedException
from convertly.models.types import VIDEO_FORMATS
from convertly.services.converters.base import BaseConverter

logger = logging.getLogger(__name__)

# 로그에 남길 ffmpeg stderr 최대 길이
STDERR_TAIL_CHARS = 2000


class VideoConverter(BaseConverter):
    """동영상 컨테이너 변환기 (ffmpeg 외부 프로세스)"""

    @property
    def source_formats(self) -> FrozenSet[str]:
        return VIDEO_FORMATS

    @property
    def target_formats(self) -> FrozenSet[str]:
        return VIDEO_FORMATS

    @property
    def name(self) -> str:
        return "video-transcode"

    def build_command(self, input_path: Path, output_path: Path) -> list[str]:
        """ffmpeg 명령행 생성 (코덱은 ffmpeg 기본값 사용)"""
        return [
            settings.FFMPEG_BINARY,
            "-hide_banner",
            "-nostdin",
            "-y",
            "-i",
            str(input_path),
            str(output_path),
        ]

    async def _convert(
        self, input_path: Path, output_path: Path, target_format: str
    ) -> Path:
        """ffmpeg 프로세스를 실행하고 종료를 기다림"""
        cmd = self.build_command(input_path, output_path)
        logger.info(f"ffmpeg 실행: {' '.join(cmd)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            raise ConversionFailedException(
                "ffmpeg가 설치되지 않았습니다. "
                "apt install ffmpeg (Ubuntu) 또는 brew install ffmpeg (Mac)를 실행하세요."
            )

        _, stderr = await process.communicate()

        if process.returncode != 0:
            stderr_text = (stderr or b"").decode("utf-8", errors="replace")
            logger.error(
                f"ffmpeg 실패 (exit={process.returncode}): "
                f"{stderr_text[-STDERR_TAIL_CHARS:]}"
            )
            output_path.unlink(missing_ok=True)
            raise ConversionFailedException("동영상 변환에 실패했습니다")

        return output_path
