import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from convertly.api.deps import SettingsDep
from convertly.core.exceptions import ConversionFailedException, FileTooLargeException
from convertly.models import ConversionRequest, SupportedConversionsResponse
from convertly.services import ConversionJob, ConverterFactory, file_manager
from convertly.utils.file_validator import get_mime_type

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_content_disposition(filename: str) -> str:
    """Content-Disposition 헤더 생성 (비ASCII 파일명 지원)"""
    # RFC 5987 인코딩
    encoded_filename = quote(filename)
    return f"attachment; filename*=UTF-8''{encoded_filename}"


@router.post("/convert")
async def convert_file(
    settings: SettingsDep,
    file: Optional[UploadFile] = File(None, description="변환할 파일"),
    target_format: Optional[str] = Form(
        None, alias="targetFormat", description="대상 형식 (예: html, mp4, png, pdf, jpg)"
    ),
):
    """
    파일 변환 API

    - **file**: 변환할 파일
    - **targetFormat**: 대상 형식

    지원 조합:
      - `docx` → `html`
      - `mp4/avi/mov/mkv` ↔ `mp4/avi/mov/mkv`
      - `jpg/jpeg/png/webp` ↔ `jpg/jpeg/png/webp`
      - `jpg/jpeg/png` → `pdf`
      - `pdf` → `jpg` (첫 페이지)

    변환 결과 파일을 바로 다운로드로 반환하며, 임시 파일은 응답 후 삭제됩니다.
    """
    # 1. 입력 검증 (임시 파일 생성 전)
    request = ConversionRequest.from_form(
        filename=file.filename if file is not None else None,
        content_type=file.content_type if file is not None else None,
        target_format=target_format,
    )
    logger.info(
        f"변환 요청: file={request.uploaded_file.original_name}, "
        f"type={request.uploaded_file.mime_type}, target={request.target_format}"
    )

    # 2. 변환기 선택 (지원하지 않는 조합은 여기서 400)
    converter = ConverterFactory.get_converter(
        request.source_format, request.target_format
    )

    # 3. Content-Length 헤더로 사전 크기 검증 (있는 경우)
    if file.size and file.size > settings.MAX_FILE_SIZE_BYTES:
        raise FileTooLargeException(settings.MAX_FILE_SIZE_MB)

    job = ConversionJob.from_request(request).advance("validated")

    # 4. 파일 저장
    try:
        job.input_path, _ = await file_manager.save_upload(
            file=file.file,
            filename=request.uploaded_file.original_name,
            job_id=job.job_id,
            max_size=settings.MAX_FILE_SIZE_BYTES,
        )
    except FileTooLargeException:
        raise
    except OSError as e:
        raise ConversionFailedException(f"파일 저장 실패: {str(e)}")

    # 5. 변환 실행 (입력 파일은 항상 삭제, 실패 시 출력 파일도 삭제)
    async with file_manager.job_scope(job):
        job.advance("dispatched")
        job.output_path = await converter.convert(
            input_path=job.input_path,
            output_dir=file_manager.output_dir,
            target_format=request.target_format,
            job_id=job.job_id,
        )
        job.advance("succeeded")

    # 6. 결과 파일 전송 후 삭제
    job.advance("streaming")
    download_filename = job.download_filename

    return FileResponse(
        path=job.output_path,
        filename=download_filename,
        media_type=get_mime_type(job.output_path.suffix),
        headers={"Content-Disposition": _get_content_disposition(download_filename)},
        background=BackgroundTask(file_manager.release_output, job),
    )


@router.get("/formats", response_model=SupportedConversionsResponse)
async def get_supported_formats():
    """
    지원 변환 목록 조회

    원본 형식별로 변환 가능한 대상 형식 목록을 반환합니다.
    """
    return SupportedConversionsResponse(
        conversions=ConverterFactory.get_supported_conversions()
    )
