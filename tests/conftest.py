"""공용 테스트 픽스처"""

import io
import zipfile
from pathlib import Path
from typing import Iterable, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image

from convertly.core.config import settings
from convertly.services import ConverterFactory, file_manager
from main import app


# =============================================================================
# 픽스처 파일 생성
# =============================================================================

def make_image_bytes(
    size: Tuple[int, int] = (40, 30),
    fmt: str = "PNG",
    mode: str = "RGB",
) -> bytes:
    """단색 이미지 바이트 생성"""
    color = (200, 30, 60, 128) if mode == "RGBA" else (200, 30, 60)
    if mode == "L":
        color = 128
    elif mode == "CMYK":
        color = (0, 200, 150, 30)
    img = Image.new(mode, size, color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


def make_pdf_bytes(pages: int = 3, size: Tuple[int, int] = (60, 80)) -> bytes:
    """여러 페이지 PDF 바이트 생성 (페이지마다 다른 색)"""
    images = [
        Image.new("RGB", size, (40 * i % 256, 80, 120)) for i in range(pages)
    ]
    buffer = io.BytesIO()
    images[0].save(buffer, format="PDF", save_all=True, append_images=images[1:])
    return buffer.getvalue()


def make_docx_bytes(paragraphs: Iterable[str] = ("Hello",)) -> bytes:
    """최소 구성 DOCX 바이트 생성"""
    body = "".join(
        f"<w:p><w:r><w:t>{text}</w:t></w:r></w:p>" for text in paragraphs
    )
    content_types = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
        '<Default Extension="rels" '
        'ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
        '<Default Extension="xml" ContentType="application/xml"/>'
        '<Override PartName="/word/document.xml" '
        'ContentType="application/vnd.openxmlformats-officedocument.'
        'wordprocessingml.document.main+xml"/>'
        "</Types>"
    )
    rels = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
        '<Relationship Id="rId1" '
        'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" '
        'Target="word/document.xml"/>'
        "</Relationships>"
    )
    document = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
        f"<w:body>{body}</w:body>"
        "</w:document>"
    )

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as docx:
        docx.writestr("[Content_Types].xml", content_types)
        docx.writestr("_rels/.rels", rels)
        docx.writestr("word/document.xml", document)
    return buffer.getvalue()


def list_files(directory: Path) -> list[Path]:
    """디렉토리 내 파일 목록 (없으면 빈 목록)"""
    if not directory.exists():
        return []
    return [p for p in directory.iterdir() if p.is_file()]


# =============================================================================
# 공용 픽스처
# =============================================================================

@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch) -> Tuple[Path, Path]:
    """업로드/출력 디렉토리를 테스트별 임시 디렉토리로 교체"""
    upload_dir = tmp_path / "uploads"
    output_dir = tmp_path / "converted"

    monkeypatch.setattr(settings, "UPLOAD_DIR", upload_dir)
    monkeypatch.setattr(settings, "OUTPUT_DIR", output_dir)
    monkeypatch.setattr(file_manager, "upload_dir", upload_dir)
    monkeypatch.setattr(file_manager, "output_dir", output_dir)

    return upload_dir, output_dir


@pytest.fixture(autouse=True)
def reset_converter_factory():
    """테스트 간 변환기 캐시 초기화"""
    ConverterFactory.clear_instances()
    yield
    ConverterFactory.clear_instances()


@pytest_asyncio.fixture
async def client():
    """ASGI 테스트 클라이언트"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
