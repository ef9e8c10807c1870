"""Data layer utilities for loading JSON definitions and save records."""

from .errors import DataLoadError, DataReferenceError, DataValidationError
from .paths import get_definitions_path

__all__ = [
    "DataLoadError",
    "DataReferenceError",
    "DataValidationError",
    "get_definitions_path",
]
