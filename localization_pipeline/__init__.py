"""
Localization Pipeline
=====================

Composable loaders that turn localization files into flat records ready
for translation and write translated records back, keeping code, locked
values and plural structure intact.

Usage:
    from localization_pipeline import create_bucket_loader

    pipeline = create_bucket_loader('json', 'locales/[locale].json', 'en')
    record = await pipeline.pull('en')
    await pipeline.pull('es')
    await pipeline.push('es', translated_record)

CLI:
    localization-pipeline init --type json
    localization-pipeline show locked-keys
    localization-pipeline pull --locale es
"""

from .__version__ import __version__, __author__, __description__

# Loader contract
from .core.loader import BaseLoader, Loader
from .core.composer import ComposedLoader, compose_loaders
from .core.errors import LoaderError

# Features
from .features.placeholders import PlaceholderMap, restore_placeholders
from .features.markup import protect_markup
from .features.plurals import PluralObject, plural_forms_to_icu, icu_to_plural_forms

# Pipelines
from .loaders.factory import create_bucket_loader

__all__ = [
    '__version__',
    '__author__',
    '__description__',
    'BaseLoader',
    'Loader',
    'ComposedLoader',
    'compose_loaders',
    'LoaderError',
    'PlaceholderMap',
    'restore_placeholders',
    'protect_markup',
    'PluralObject',
    'plural_forms_to_icu',
    'icu_to_plural_forms',
    'create_bucket_loader',
]
