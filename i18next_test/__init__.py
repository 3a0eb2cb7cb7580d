"""Checks i18next locale files for missing translations and broken markers."""
from i18next_test.locale_validator import (
    Diagnostic,
    ProhibitedPattern,
    ValidationContext,
    check_locale_file,
    validate_entry,
    validate_locale_file,
)

__version__ = '1.0.0'

__all__ = [
    'Diagnostic',
    'ProhibitedPattern',
    'ValidationContext',
    'check_locale_file',
    'validate_entry',
    'validate_locale_file',
]
