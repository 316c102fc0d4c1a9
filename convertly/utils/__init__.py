from convertly.utils.file_validator import (
    validate_file_for_conversion,
    validate_file_signature,
    get_mime_type,
)

__all__ = [
    "validate_file_for_conversion",
    "validate_file_signature",
    "get_mime_type",
]
