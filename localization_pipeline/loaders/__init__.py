"""Pipeline stages and built-in bucket pipelines."""

from .code_placeholder import CodePlaceholderLoader
from .flat import FlatLoader, flatten, unflatten
from .json_loader import JsonLoader
from .key_filters import IgnoredKeysLoader, LockedKeysLoader
from .locked_patterns import LockedPatternsLoader, compile_locked_patterns
from .plural_icu import PluralIcuLoader
from .sections import SectionsLoader
from .text_file import TextFileLoader
from .factory import create_bucket_loader, create_loaders_for_bucket

__all__ = [
    'CodePlaceholderLoader',
    'FlatLoader',
    'flatten',
    'unflatten',
    'JsonLoader',
    'IgnoredKeysLoader',
    'LockedKeysLoader',
    'LockedPatternsLoader',
    'compile_locked_patterns',
    'PluralIcuLoader',
    'SectionsLoader',
    'TextFileLoader',
    'create_bucket_loader',
    'create_loaders_for_bucket',
]
