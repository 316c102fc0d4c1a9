"""FileManager 테스트"""

import io
import os
import time

import pytest

from convertly.core.exceptions import ConversionFailedException, FileTooLargeException
from convertly.services import ConversionJob, FileManager, file_manager


def make_job(**kwargs) -> ConversionJob:
    defaults = dict(original_filename="photo.png", source_format="png", target_format="jpg")
    defaults.update(kwargs)
    return ConversionJob(**defaults)


class TestSanitizeFilename:
    """파일명 정제 테스트"""

    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("photo.png", "photo.png"),
            ("../../etc/passwd", "____etc_passwd"),
            ('a<b>c:"d".png', "a_b_c__d_.png"),
            ("", "unnamed"),
            ("...", "_"),
            (" . ", "unnamed"),
        ],
    )
    def test_sanitize(self, filename, expected):
        assert file_manager._sanitize_filename(filename) == expected

    def test_length_limit_keeps_extension(self):
        """긴 파일명은 잘라내되 확장자 유지"""
        sanitized = file_manager._sanitize_filename("a" * 500 + ".docx")
        assert len(sanitized) == FileManager.MAX_FILENAME_LENGTH
        assert sanitized.endswith(".docx")

    def test_unique_filename_prefixed_with_job_id(self):
        assert file_manager._generate_unique_filename("a.png", "job42") == "job42_a.png"


@pytest.mark.asyncio
class TestSaveUpload:
    """업로드 저장 테스트"""

    async def test_save(self, isolated_dirs):
        """업로드 디렉토리에 저장 (없으면 생성)"""
        upload_dir, _ = isolated_dirs

        path, size = await file_manager.save_upload(io.BytesIO(b"12345"), "a.png", "job1")

        assert path == upload_dir / "job1_a.png"
        assert path.read_bytes() == b"12345"
        assert size == 5

    async def test_too_large(self, isolated_dirs):
        """크기 초과시 예외 + 부분 파일 삭제"""
        upload_dir, _ = isolated_dirs
        data = io.BytesIO(b"x" * (2 * 1024 * 1024 + 1))

        with pytest.raises(FileTooLargeException) as exc_info:
            await file_manager.save_upload(data, "big.mp4", "job2", max_size=2 * 1024 * 1024)

        assert exc_info.value.status_code == 413
        assert list(upload_dir.iterdir()) == []


@pytest.mark.asyncio
class TestJobScope:
    """작업 단위 임시 파일 수명 테스트"""

    async def test_input_deleted_on_success(self, isolated_dirs):
        upload_dir, _ = isolated_dirs
        upload_dir.mkdir(parents=True)
        job = make_job()
        job.input_path = upload_dir / f"{job.job_id}_photo.png"
        job.input_path.write_bytes(b"data")
        job.advance("validated").advance("dispatched")

        async with file_manager.job_scope(job):
            job.advance("succeeded")

        assert not job.input_path.exists()
        assert job.status == "succeeded"

    async def test_failure_cleans_input_and_outputs(self, isolated_dirs):
        """실패시 입력과 작업 출력 삭제, 다른 작업 출력은 유지"""
        upload_dir, output_dir = isolated_dirs
        upload_dir.mkdir(parents=True)
        output_dir.mkdir(parents=True)

        job = make_job().advance("validated")
        job.input_path = upload_dir / f"{job.job_id}_photo.png"
        job.input_path.write_bytes(b"data")
        partial = output_dir / f"converted-{job.job_id}.jpg"
        partial.write_bytes(b"partial")
        unrelated = output_dir / "converted-someoneelse.jpg"
        unrelated.write_bytes(b"other")

        with pytest.raises(ConversionFailedException):
            async with file_manager.job_scope(job):
                job.advance("dispatched")
                raise ConversionFailedException("실패")

        assert not job.input_path.exists()
        assert not partial.exists()
        assert unrelated.exists()
        assert job.status == "cleaned"
        assert job.error == "실패"

    async def test_release_output(self, isolated_dirs):
        """응답 후 출력 삭제 + cleaned 상태"""
        _, output_dir = isolated_dirs
        output_dir.mkdir(parents=True)
        job = make_job().advance("validated").advance("dispatched").advance("succeeded")
        job.output_path = output_dir / f"converted-{job.job_id}.jpg"
        job.output_path.write_bytes(b"out")
        job.advance("streaming")

        file_manager.release_output(job)

        assert not job.output_path.exists()
        assert job.status == "cleaned"


class TestDeleteHelpers:
    def test_delete_missing_file(self, tmp_path):
        assert file_manager.delete_file(tmp_path / "missing") is False
        assert file_manager.delete_file(None) is False

    def test_delete_job_outputs_without_dir(self):
        """출력 디렉토리가 없어도 오류 없음"""
        assert file_manager.delete_job_outputs("nothing") == 0


class TestCleanupOldFiles:
    """오래된 파일 정리 테스트"""

    def test_removes_only_old_files(self, isolated_dirs):
        upload_dir, output_dir = isolated_dirs
        upload_dir.mkdir(parents=True)
        output_dir.mkdir(parents=True)

        old_input = upload_dir / "old.png"
        old_output = output_dir / "old.jpg"
        fresh = output_dir / "fresh.jpg"
        for path in (old_input, old_output, fresh):
            path.write_bytes(b"x")

        two_days_ago = time.time() - 48 * 3600
        for path in (old_input, old_output):
            os.utime(path, (two_days_ago, two_days_ago))

        deleted = file_manager.cleanup_old_files(max_age_hours=24)

        assert deleted == 2
        assert not old_input.exists()
        assert not old_output.exists()
        assert fresh.exists()

    def test_missing_directories(self):
        assert file_manager.cleanup_old_files() == 0


@pytest.mark.asyncio
class TestCleanupScheduler:
    async def test_start_and_stop(self):
        manager = FileManager()
        await manager.start_cleanup_scheduler(interval_minutes=60)
        assert manager._cleanup_task is not None

        manager.stop_cleanup_scheduler()
        assert manager._cleanup_task is None
