from convertly.services.conversion_job import ConversionJob
from convertly.services.converter_factory import ConverterFactory
from convertly.services.file_manager import FileManager, file_manager

__all__ = [
    "ConversionJob",
    "ConverterFactory",
    "FileManager",
    "file_manager",
]
