"""Content protection and plural conversion."""

from .placeholders import (
    KIND_CODE,
    KIND_INLINE_CODE,
    KIND_LOCKED_PATTERN,
    PlaceholderMap,
    make_placeholder,
    find_placeholders,
    protect_patterns,
    restore_placeholders,
)
from .markup import protect_markup
from .plurals import (
    PluralObject,
    plural_forms_to_icu,
    icu_to_plural_forms,
    is_icu_plural_object,
    is_plural_forms_object,
    get_required_plural_categories,
)

__all__ = [
    'KIND_CODE',
    'KIND_INLINE_CODE',
    'KIND_LOCKED_PATTERN',
    'PlaceholderMap',
    'make_placeholder',
    'find_placeholders',
    'protect_patterns',
    'restore_placeholders',
    'protect_markup',
    'PluralObject',
    'plural_forms_to_icu',
    'icu_to_plural_forms',
    'is_icu_plural_object',
    'is_plural_forms_object',
    'get_required_plural_categories',
]
