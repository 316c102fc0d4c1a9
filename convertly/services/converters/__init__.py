from convertly.services.converters.base import BaseConverter
from convertly.services.converters.docx_to_html import DocxToHtmlConverter
from convertly.services.converters.image import ImageConverter
from convertly.services.converters.image_to_pdf import ImageToPdfConverter
from convertly.services.converters.pdf_to_jpg import PdfToJpgConverter
from convertly.services.converters.video import VideoConverter

__all__ = [
    "BaseConverter",
    "DocxToHtmlConverter",
    "VideoConverter",
    "ImageConverter",
    "ImageToPdfConverter",
    "PdfToJpgConverter",
]
