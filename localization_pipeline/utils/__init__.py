"""Utility modules."""

from .colors import Colors
from .config import Config, BucketConfig, LocaleConfig, create_default_config
from .key_matching import matches_key_pattern, filter_entries_by_pattern, format_display_value

__all__ = [
    'Colors',
    'Config',
    'BucketConfig',
    'LocaleConfig',
    'create_default_config',
    'matches_key_pattern',
    'filter_entries_by_pattern',
    'format_display_value',
]
