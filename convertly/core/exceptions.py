from fastapi import HTTPException, status


class ConvertlyException(HTTPException):
    """Convertly 기본 예외"""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "서버 오류가 발생했습니다",
    ):
        super().__init__(status_code=status_code, detail=detail)


class MissingInputException(ConvertlyException):
    """파일 또는 대상 형식 누락 예외"""

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="파일 또는 대상 형식이 누락되었습니다",
        )


class UnsupportedConversionException(ConvertlyException):
    """지원하지 않는 변환 조합 예외"""

    def __init__(self, source_format: str, target_format: str):
        self.source_format = source_format
        self.target_format = target_format
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"지원하지 않는 변환입니다: "
                f"{source_format or '(확장자 없음)'} → {target_format}"
            ),
        )


class FileTooLargeException(ConvertlyException):
    """파일 크기 초과 예외"""

    def __init__(self, max_size_mb: int):
        super().__init__(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"파일 크기가 {max_size_mb}MB를 초과합니다",
        )


class ConversionFailedException(ConvertlyException):
    """변환 실패 예외 (라이브러리/외부 프로세스 오류)"""

    def __init__(self, message: str = "파일 변환에 실패했습니다"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=message,
        )
