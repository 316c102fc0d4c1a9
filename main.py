import logging
import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from convertly.api.routes import convert
from convertly.core.config import settings
from convertly.core.exceptions import ConvertlyException, MissingInputException
from convertly.models import HealthResponse
from convertly.services import file_manager

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기 관리"""
    # 시작시 실행 (출력 디렉토리는 첫 변환 시 생성)
    settings.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)

    # 잔여 파일 정리 스케줄러 시작
    if settings.is_cleanup_enabled:
        await file_manager.start_cleanup_scheduler(
            interval_minutes=settings.CLEANUP_INTERVAL_MINUTES
        )

    yield

    # 종료시 실행
    file_manager.stop_cleanup_scheduler()


app = FastAPI(
    title="Convertly",
    description="문서·동영상·이미지·PDF 형식 변환 서비스",
    version="0.1.0",
    lifespan=lifespan,
    # 프로덕션에서는 docs/openapi 비활성화
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    openapi_url="/openapi.json" if settings.is_development else None,
)


# =============================================================================
# 미들웨어 설정
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],  # 필요한 메서드만
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    expose_headers=["X-Request-ID", "Content-Disposition"],
    max_age=600,  # preflight 캐시 10분
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """보안 헤더 추가 미들웨어"""
    # Request ID 생성/전달
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    response = await call_next(request)

    # 보안 헤더 추가
    response.headers["X-Request-ID"] = request_id
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-XSS-Protection"] = "1; mode=block"

    # 프로덕션에서 추가 보안 헤더
    if settings.is_production:
        response.headers["Strict-Transport-Security"] = (
            "max-age=31536000; includeSubDomains"
        )

    return response


# =============================================================================
# 에러 핸들러 (모든 오류는 일반 텍스트 본문으로 응답)
# =============================================================================

@app.exception_handler(ConvertlyException)
async def convertly_exception_handler(request: Request, exc: ConvertlyException):
    """커스텀 예외 핸들러"""
    if exc.status_code >= 500:
        logger.error(f"변환 실패 ({request.url.path}): {exc.detail}")
    else:
        logger.info(f"요청 거부 ({exc.status_code}): {exc.detail}")

    return PlainTextResponse(
        status_code=exc.status_code,
        content=exc.detail,
        headers={"X-Request-ID": request.headers.get("X-Request-ID", "")},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """요청 검증 실패 핸들러 (파일 자리에 일반 폼 값이 온 경우 등은 입력 누락으로 처리)"""
    logger.info(f"요청 검증 실패 ({request.url.path}): {exc.errors()}")

    detail = MissingInputException().detail
    return PlainTextResponse(
        status_code=400,
        content=detail,
        headers={"X-Request-ID": request.headers.get("X-Request-ID", "")},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """일반 예외 핸들러 (프로덕션에서 상세 에러 숨김)"""
    logger.exception(f"처리되지 않은 오류 ({request.url.path})", exc_info=exc)

    if settings.is_development:
        detail = f"변환에 실패했습니다: {exc}"
    else:
        detail = "변환에 실패했습니다"

    return PlainTextResponse(
        status_code=500,
        content=detail,
        headers={"X-Request-ID": request.headers.get("X-Request-ID", "")},
    )


# =============================================================================
# 엔드포인트
# =============================================================================

@app.get("/health", response_model=HealthResponse)
async def health_check():
    """헬스 체크 엔드포인트"""
    return HealthResponse(status="healthy")


# API 라우터 등록
app.include_router(convert.router, tags=["convert"])


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT)
