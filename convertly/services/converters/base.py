import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import FrozenSet, Optional

from convertly.core.config import settings
from convertly.core.exceptions import ConversionFailedException
from convertly.utils.file_validator import validate_file_for_conversion

logger = logging.getLogger(__name__)


class BaseConverter(ABC):
    """변환기 추상 베이스 클래스"""

    # 출력 파일명 접두사 (converted-<job_id>.<형식>)
    OUTPUT_PREFIX = "converted"

    # True면 확장자별 시그니처 대신 허용 형식 중 하나와 일치하는지만 확인
    SNIFF_CONTENT = False

    @property
    @abstractmethod
    def source_formats(self) -> FrozenSet[str]:
        """허용 원본 형식 (예: {'docx'})"""
        pass

    @property
    @abstractmethod
    def target_formats(self) -> FrozenSet[str]:
        """허용 대상 형식 (예: {'html'})"""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """변환기 이름 (예: 'docx-to-html')"""
        pass

    def validate_input(self, input_path: Path) -> None:
        """입력 파일 검증 (확장자 + 시그니처)"""
        is_valid, error_msg = validate_file_for_conversion(
            input_path, self.source_formats, sniff_content=self.SNIFF_CONTENT
        )
        if not is_valid:
            raise ConversionFailedException(error_msg)

        # 입력 파일이 uploads 디렉토리 내에 있는지 확인 (심볼릭 링크 탈출 방지)
        try:
            resolved = input_path.resolve()
            upload_dir_resolved = settings.UPLOAD_DIR.resolve()
        except (OSError, ValueError):
            raise ConversionFailedException("파일 경로를 확인할 수 없습니다")

        if not resolved.is_relative_to(upload_dir_resolved):
            raise ConversionFailedException("잘못된 파일 경로입니다")

    def get_output_path(self, output_dir: Path, job_id: str, target_format: str) -> Path:
        """출력 파일 경로 생성 (작업 ID 기반 고유 파일명)"""
        return output_dir / f"{self.OUTPUT_PREFIX}-{job_id}.{target_format}"

    def _convert_sync(
        self, input_path: Path, output_path: Path, target_format: str
    ) -> Optional[Path]:
        """
        동기 변환 실행 (스레드에서 실행되는 변환기가 구현)

        Returns:
            실제 결과 파일 경로 (None이면 output_path)
        """
        raise NotImplementedError

    async def _convert(
        self, input_path: Path, output_path: Path, target_format: str
    ) -> Path:
        """변환 실행 (기본: 동기 변환을 워커 스레드에서 실행)"""
        result_path = await asyncio.to_thread(
            self._convert_sync, input_path, output_path, target_format
        )
        return result_path or output_path

    async def convert(
        self,
        input_path: Path,
        output_dir: Path,
        target_format: str,
        job_id: str,
    ) -> Path:
        """
        비동기 변환 실행

        Args:
            input_path: 입력 파일 경로
            output_dir: 출력 디렉토리 경로
            target_format: 대상 형식 (소문자)
            job_id: 작업 ID (출력 파일명에 사용)

        Returns:
            출력 파일 경로

        Raises:
            ConversionFailedException: 검증 실패, 라이브러리 오류, 결과 파일 없음
        """
        self.validate_input(input_path)

        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = self.get_output_path(output_dir, job_id, target_format)

        # 출력 경로가 출력 디렉토리 내에 있는지 확인
        if not output_path.resolve().is_relative_to(output_dir.resolve()):
            raise ConversionFailedException("잘못된 출력 경로입니다")

        try:
            result_path = await self._convert(input_path, output_path, target_format)
        except ConversionFailedException:
            raise
        except Exception as e:
            logger.exception(f"{self.name} 변환 중 오류 (job_id={job_id})")
            raise ConversionFailedException(f"변환 중 오류 발생: {str(e)}")

        if not result_path.exists():
            raise ConversionFailedException("변환 결과 파일이 생성되지 않았습니다")

        return result_path
