from pathlib import Path
from typing import Iterable, Optional

# 파일 시그니처 (매직 바이트)
FILE_SIGNATURES = {
    ".pdf": [b"%PDF"],
    ".png": [b"\x89PNG\r\n\x1a\n"],
    ".jpg": [b"\xff\xd8\xff"],
    ".jpeg": [b"\xff\xd8\xff"],
    ".webp": [b"RIFF"],  # 8번째 바이트부터 'WEBP' 추가 확인
    ".docx": [b"PK\x03\x04"],  # OOXML = ZIP 컨테이너
    # 동영상 컨테이너는 시그니처가 다양하므로 검증하지 않음
    ".mp4": None,
    ".avi": None,
    ".mov": None,
    ".mkv": None,
}

# MIME 타입 매핑
MIME_TYPES = {
    ".pdf": "application/pdf",
    ".html": "text/html; charset=utf-8",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".mp4": "video/mp4",
    ".avi": "video/x-msvideo",
    ".mov": "video/quicktime",
    ".mkv": "video/x-matroska",
}


def _normalize_extension(extension: str) -> str:
    extension = extension.lower()
    return extension if extension.startswith(".") else f".{extension}"


def validate_file_signature(file_path: Path, expected_extension: str) -> bool:
    """
    파일 시그니처(매직 바이트) 검증

    Args:
        file_path: 검증할 파일 경로
        expected_extension: 예상 확장자 (예: '.pdf')

    Returns:
        시그니처가 유효하면 True
    """
    extension = _normalize_extension(expected_extension)
    signatures = FILE_SIGNATURES.get(extension)

    # 시그니처가 정의되지 않은 확장자는 통과
    if signatures is None:
        return True

    try:
        with open(file_path, "rb") as f:
            header = f.read(16)

        if extension == ".webp":
            return header.startswith(b"RIFF") and header[8:12] == b"WEBP"

        for sig in signatures:
            if header.startswith(sig):
                return True

        return False
    except (IOError, OSError):
        return False


def get_mime_type(extension: str) -> Optional[str]:
    """확장자에 해당하는 MIME 타입 반환"""
    return MIME_TYPES.get(_normalize_extension(extension))


def validate_file_for_conversion(
    file_path: Path, allowed_extensions: Iterable[str], sniff_content: bool = False
) -> tuple[bool, str]:
    """
    변환을 위한 파일 검증

    Args:
        file_path: 검증할 파일 경로
        allowed_extensions: 허용 확장자 목록 (점 포함/미포함 모두 가능)
        sniff_content: True면 내용이 허용 확장자 중 하나의 시그니처와 일치하면 통과
            (예: 확장자가 .jpg인 PNG 파일)

    Returns:
        (유효 여부, 에러 메시지)
    """
    if not file_path.exists():
        return False, "파일이 존재하지 않습니다"

    if not file_path.is_file():
        return False, "유효한 파일이 아닙니다"

    # 확장자 검증
    allowed = {_normalize_extension(ext) for ext in allowed_extensions}
    suffix = file_path.suffix.lower()
    if suffix not in allowed:
        return False, f"잘못된 파일 확장자입니다: {suffix or '(없음)'}"

    # 시그니처 검증
    if sniff_content:
        candidates = [suffix] + sorted(allowed - {suffix})
    else:
        candidates = [suffix]

    if not any(validate_file_signature(file_path, ext) for ext in candidates):
        return False, f"유효한 {suffix.lstrip('.').upper()} 파일이 아닙니다"

    return True, ""
