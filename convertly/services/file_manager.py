import asyncio
import logging
import re
import shutil
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from pathlib import Path
from typing import AsyncIterator, BinaryIO, Optional, Tuple

import aiofiles

from convertly.core.config import settings
from convertly.core.exceptions import FileTooLargeException
from convertly.services.conversion_job import ConversionJob

logger = logging.getLogger(__name__)


class FileManager:
    """
    파일 관리자

    - 업로드 파일 저장
    - 작업 단위 임시 파일 정리 (입력/출력)
    - 오래된 잔여 파일 주기적 정리
    """

    # 파일명 최대 길이
    MAX_FILENAME_LENGTH = 200

    def __init__(
        self,
        upload_dir: Optional[Path] = None,
        output_dir: Optional[Path] = None,
    ):
        self.upload_dir = upload_dir or settings.UPLOAD_DIR
        self.output_dir = output_dir or settings.OUTPUT_DIR
        self._cleanup_task: Optional[asyncio.Task] = None

    def _sanitize_filename(self, filename: str) -> str:
        """
        파일명 정제 (보안)

        - 경로 구분자 제거
        - 위험 문자 제거
        - 길이 제한
        """
        if not filename:
            return "unnamed"

        # 경로 구분자 및 위험 문자 제거
        sanitized = re.sub(r'[<>:"/\\|?*\x00-\x1f]', "_", filename)

        # '..' 시퀀스 제거
        sanitized = sanitized.replace("..", "_")

        # 앞뒤 공백 및 점 제거
        sanitized = sanitized.strip(". ")

        if not sanitized:
            return "unnamed"

        return sanitized[-self.MAX_FILENAME_LENGTH:]

    def _generate_unique_filename(self, original_filename: str, job_id: str) -> str:
        """고유 파일명 생성 (작업 ID 접두사)"""
        sanitized = self._sanitize_filename(original_filename)
        return f"{job_id}_{sanitized}"

    async def save_upload(
        self,
        file: BinaryIO,
        filename: str,
        job_id: str,
        max_size: Optional[int] = None,
    ) -> Tuple[Path, int]:
        """
        업로드 파일 저장

        Args:
            file: 파일 객체 (read() 메서드 필요)
            filename: 원본 파일명
            job_id: 작업 ID (저장 파일명 접두사)
            max_size: 최대 크기 (bytes), None이면 설정값 사용

        Returns:
            (저장 경로, 파일 크기)

        Raises:
            FileTooLargeException: 파일 크기 초과
        """
        max_size = max_size or settings.MAX_FILE_SIZE_BYTES
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        save_path = self.upload_dir / self._generate_unique_filename(filename, job_id)

        total_size = 0
        chunk_size = 1024 * 1024  # 1MB 청크
        size_exceeded = False

        try:
            async with aiofiles.open(save_path, "wb") as f:
                while True:
                    # 동기 read를 비동기로 실행
                    chunk = await asyncio.to_thread(file.read, chunk_size)
                    if not chunk:
                        break

                    total_size += len(chunk)

                    if total_size > max_size:
                        size_exceeded = True
                        break

                    await f.write(chunk)
        except BaseException:
            save_path.unlink(missing_ok=True)
            raise

        if size_exceeded:
            save_path.unlink(missing_ok=True)
            raise FileTooLargeException(max_size // (1024 * 1024))

        return save_path, total_size

    def delete_file(self, file_path: Optional[Path]) -> bool:
        """
        파일 삭제

        Args:
            file_path: 삭제할 파일 경로

        Returns:
            삭제 성공 여부
        """
        if file_path is None:
            return False
        try:
            if file_path.exists():
                file_path.unlink()
                return True
            return False
        except OSError as e:
            logger.warning(f"파일 삭제 실패: {file_path} ({e})")
            return False

    def delete_job_outputs(self, job_id: str) -> int:
        """
        작업 ID가 포함된 출력 파일 모두 삭제 (부분 결과 포함)

        Returns:
            삭제된 파일 수
        """
        if not self.output_dir.exists():
            return 0

        deleted_count = 0
        for item in self.output_dir.glob(f"*{job_id}*"):
            if item.is_file() and self.delete_file(item):
                deleted_count += 1
        return deleted_count

    @asynccontextmanager
    async def job_scope(self, job: ConversionJob) -> AsyncIterator[ConversionJob]:
        """
        작업 단위 임시 파일 수명 관리

        - 입력 파일: 성공/실패와 관계없이 항상 삭제
        - 출력 파일: 실패 시 삭제 (성공 시 응답 전송 후 release_output에서 삭제)
        """
        try:
            yield job
        except BaseException as e:
            job.fail(str(getattr(e, "detail", e)) or type(e).__name__)
            self.delete_job_outputs(job.job_id)
            if job.status == "failed":
                job.advance("cleaned")
            raise
        finally:
            self.delete_file(job.input_path)

    def release_output(self, job: ConversionJob) -> None:
        """응답 전송 완료 후 출력 파일 삭제"""
        self.delete_file(job.output_path)
        if job.status == "streaming":
            job.advance("cleaned")
        logger.info(f"작업 정리 완료: {job.to_dict()}")

    def cleanup_old_files(
        self,
        directory: Optional[Path] = None,
        max_age_hours: Optional[int] = None,
    ) -> int:
        """
        오래된 파일 정리

        Args:
            directory: 정리할 디렉토리 (None이면 upload/output 둘 다)
            max_age_hours: 최대 보관 시간

        Returns:
            삭제된 파일 수
        """
        max_age = max_age_hours if max_age_hours is not None else settings.FILE_RETENTION_HOURS
        cutoff_time = datetime.now() - timedelta(hours=max_age)
        deleted_count = 0

        directories = [directory] if directory else [self.upload_dir, self.output_dir]

        for dir_path in directories:
            if not dir_path.exists():
                continue

            for item in dir_path.iterdir():
                try:
                    mtime = datetime.fromtimestamp(item.stat().st_mtime)
                    if mtime < cutoff_time:
                        if item.is_file():
                            item.unlink()
                            deleted_count += 1
                        elif item.is_dir():
                            shutil.rmtree(item)
                            deleted_count += 1
                except OSError as e:
                    logger.warning(f"잔여 파일 정리 실패: {item} ({e})")
                    continue

        return deleted_count

    async def start_cleanup_scheduler(self, interval_minutes: int = 10) -> None:
        """
        주기적 정리 스케줄러 시작

        Args:
            interval_minutes: 정리 간격 (분)
        """
        async def cleanup_loop():
            while True:
                await asyncio.sleep(interval_minutes * 60)
                count = await asyncio.to_thread(self.cleanup_old_files)
                if count > 0:
                    logger.info(f"[FileManager] 오래된 파일 {count}개 삭제됨")

        self._cleanup_task = asyncio.create_task(cleanup_loop())

    def stop_cleanup_scheduler(self) -> None:
        """정리 스케줄러 중지"""
        if self._cleanup_task:
            self._cleanup_task.cancel()
            self._cleanup_task = None


# 전역 FileManager 인스턴스
file_manager = FileManager()
