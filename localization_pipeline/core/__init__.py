"""Loader contract, composition and pipeline errors."""

from .loader import Loader, BaseLoader, LoaderState, NOT_CAPTURED
from .composer import ComposedLoader, compose_loaders
from .errors import (
    LoaderError,
    DefaultLocaleError,
    MissingPullStateError,
    PluralConversionError,
    IcuParseError,
    PluralWriteError,
    FormatError,
)

__all__ = [
    'Loader',
    'BaseLoader',
    'LoaderState',
    'NOT_CAPTURED',
    'ComposedLoader',
    'compose_loaders',
    'LoaderError',
    'DefaultLocaleError',
    'MissingPullStateError',
    'PluralConversionError',
    'IcuParseError',
    'PluralWriteError',
    'FormatError',
]
