import threading
from typing import Dict, List, Optional, Tuple, Type

from convertly.core.exceptions import UnsupportedConversionException
from convertly.services.converters.base import BaseConverter
from convertly.services.converters.docx_to_html import DocxToHtmlConverter
from convertly.services.converters.image import ImageConverter
from convertly.services.converters.image_to_pdf import ImageToPdfConverter
from convertly.services.converters.pdf_to_jpg import PdfToJpgConverter
from convertly.services.converters.video import VideoConverter

ConversionKey = Tuple[str, str]


class ConverterFactory:
    """변환기 팩토리 (우선순위 기반 결정 테이블 + 싱글톤 인스턴스)"""

    # 우선순위 순서: 같은 (원본, 대상) 조합은 먼저 등록된 변환기가 처리
    _converters: Tuple[Type[BaseConverter], ...] = (
        DocxToHtmlConverter,
        VideoConverter,
        ImageConverter,
        ImageToPdfConverter,
        PdfToJpgConverter,
    )

    # 인스턴스 캐시 (싱글톤)
    _instances: Dict[Type[BaseConverter], BaseConverter] = {}
    _table: Optional[Dict[ConversionKey, Type[BaseConverter]]] = None
    _lock = threading.Lock()

    @classmethod
    def _get_instance(cls, converter_cls: Type[BaseConverter]) -> BaseConverter:
        # 스레드 안전한 싱글톤
        if converter_cls not in cls._instances:
            with cls._lock:
                # Double-check locking
                if converter_cls not in cls._instances:
                    cls._instances[converter_cls] = converter_cls()
        return cls._instances[converter_cls]

    @classmethod
    def _get_table(cls) -> Dict[ConversionKey, Type[BaseConverter]]:
        """(원본, 대상) → 변환기 클래스 테이블 (최초 일치 우선)"""
        if cls._table is None:
            table: Dict[ConversionKey, Type[BaseConverter]] = {}
            for converter_cls in cls._converters:
                converter = cls._get_instance(converter_cls)
                for source in converter.source_formats:
                    for target in converter.target_formats:
                        table.setdefault((source, target), converter_cls)
            cls._table = table
        return cls._table

    @classmethod
    def find_converter(
        cls, source_format: str, target_format: str
    ) -> Optional[BaseConverter]:
        """
        형식 조합에 맞는 변환기 조회

        Args:
            source_format: 원본 형식 (소문자, 점 제외)
            target_format: 대상 형식 (소문자)

        Returns:
            BaseConverter 인스턴스 또는 None
        """
        converter_cls = cls._get_table().get((source_format, target_format))
        if converter_cls is None:
            return None
        return cls._get_instance(converter_cls)

    @classmethod
    def get_converter(cls, source_format: str, target_format: str) -> BaseConverter:
        """
        형식 조합에 맞는 변환기 인스턴스 반환

        Raises:
            UnsupportedConversionException: 지원하지 않는 조합
        """
        converter = cls.find_converter(source_format, target_format)
        if converter is None:
            raise UnsupportedConversionException(source_format, target_format)
        return converter

    @classmethod
    def get_supported_conversions(cls) -> Dict[str, List[str]]:
        """원본 형식별 대상 형식 목록 반환 (정렬됨)"""
        conversions: Dict[str, List[str]] = {}
        for source, target in cls._get_table():
            conversions.setdefault(source, []).append(target)
        return {source: sorted(targets) for source, targets in sorted(conversions.items())}

    @classmethod
    def clear_instances(cls) -> None:
        """인스턴스 캐시 및 테이블 초기화 (테스트용)"""
        with cls._lock:
            cls._instances.clear()
            cls._table = None
