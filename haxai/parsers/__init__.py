"""Parsers for extracting structured content from AI responses and binary files."""

from haxai.parsers.binary_reader import (
    FileCategory,
    ReadResult,
    classify_file,
    read_file,
)
from haxai.parsers.response_parser import ParsedResponse, parse_ai_response

__all__ = [
    "parse_ai_response",
    "ParsedResponse",
    "classify_file",
    "read_file",
    "ReadResult",
    "FileCategory",
]
