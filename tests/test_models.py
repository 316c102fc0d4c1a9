"""요청 모델 테스트"""

import pytest

from convertly.core.exceptions import MissingInputException
from convertly.models import ConversionRequest


class TestConversionRequest:
    def test_normalizes_formats(self):
        request = ConversionRequest.from_form("Photo.JPEG", "image/jpeg", "  WebP\n")
        assert request.source_format == "jpeg"
        assert request.target_format == "webp"

    def test_no_extension(self):
        request = ConversionRequest.from_form("README", None, "html")
        assert request.source_format == ""

    @pytest.mark.parametrize(
        "filename,target",
        [(None, "png"), ("", "png"), ("a.png", None), ("a.png", ""), ("a.png", "  ")],
    )
    def test_missing_input(self, filename, target):
        with pytest.raises(MissingInputException) as exc_info:
            ConversionRequest.from_form(filename, None, target)
        assert exc_info.value.status_code == 400
