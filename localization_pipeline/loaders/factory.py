"""Built-in pipelines per bucket type."""

from pathlib import Path
from typing import List, Optional, Union

from ..core.composer import ComposedLoader, compose_loaders
from ..utils.config import BUCKET_TYPES, BucketConfig
from .code_placeholder import CodePlaceholderLoader
from .flat import FlatLoader
from .json_loader import JsonLoader
from .key_filters import IgnoredKeysLoader, LockedKeysLoader
from .locked_patterns import LockedPatternsLoader
from .plural_icu import PluralIcuLoader
from .sections import SectionsLoader
from .text_file import TextFileLoader


def create_bucket_loader(
    bucket_type: str,
    path_pattern: str,
    default_locale: str,
    locked_keys: Optional[List[str]] = None,
    ignored_keys: Optional[List[str]] = None,
    locked_patterns: Optional[List[str]] = None,
    base_dir: Optional[Union[str, Path]] = None,
) -> ComposedLoader:
    """
    Build the pipeline for one resource file pattern.

    Args:
        bucket_type: ``json`` or ``markdown``
        path_pattern: File path containing ``[locale]``
        default_locale: Source locale of the bucket
        locked_keys: Key patterns kept out of translation
        ignored_keys: Key patterns dropped in both directions
        locked_patterns: Regexes whose matches are protected in the raw file
        base_dir: Directory ``path_pattern`` is relative to (default: cwd)

    Returns:
        Composed pipeline with its default locale set

    Raises:
        ValueError: If the bucket type has no built-in pipeline
    """
    if bucket_type == 'json':
        pipeline = compose_loaders(
            TextFileLoader(path_pattern, base_dir),
            LockedPatternsLoader(locked_patterns),
            JsonLoader(),
            PluralIcuLoader(),
            FlatLoader(),
            LockedKeysLoader(locked_keys),
            IgnoredKeysLoader(ignored_keys),
        )
    elif bucket_type == 'markdown':
        pipeline = compose_loaders(
            TextFileLoader(path_pattern, base_dir),
            LockedPatternsLoader(locked_patterns),
            CodePlaceholderLoader(),
            SectionsLoader(),
            LockedKeysLoader(locked_keys),
            IgnoredKeysLoader(ignored_keys),
        )
    else:
        raise ValueError(
            f"Unsupported bucket type: '{bucket_type}'. Valid options: {', '.join(BUCKET_TYPES)}"
        )

    return pipeline.set_default_locale(default_locale)


def create_loaders_for_bucket(
    bucket: BucketConfig,
    default_locale: str,
    base_dir: Optional[Union[str, Path]] = None,
) -> List[ComposedLoader]:
    """One pipeline per include path of a configured bucket."""
    return [
        create_bucket_loader(
            bucket.type,
            path_pattern,
            default_locale,
            locked_keys=bucket.locked_keys,
            ignored_keys=bucket.ignored_keys,
            locked_patterns=bucket.locked_patterns,
            base_dir=base_dir,
        )
        for path_pattern in bucket.include
    ]
