"""Stage converting platform plural dictionaries to ICU plural objects."""

from typing import Any

from ..core.errors import PluralConversionError, PluralWriteError
from ..core.loader import BaseLoader
from ..features.plurals import (
    PluralObject,
    icu_to_plural_forms,
    is_icu_plural_object,
    is_plural_forms_object,
    plural_forms_to_icu,
)
from ..utils.logging import get_logger

logger = get_logger().get_logger('loaders.plural_icu')

KEY_SEPARATOR = '/'


class PluralIcuLoader(BaseLoader):
    """
    Nested record -> nested record with plural forms as ICU plural objects.

    Plural dictionaries are found at any depth. Pull converts them with the
    pulled locale's CLDR rules; a dictionary that fails to convert is logged
    and passed through unchanged. Push converts every plural object back and
    fails loudly, since a broken plural would otherwise reach the file.
    """

    async def _pull(self, locale: str, input_data: Any) -> Any:
        return self._to_icu(input_data, locale, '')

    async def _push(
        self,
        locale: str,
        data: Any,
        original_input: Any,
        original_locale: str,
        pull_input: Any,
        pull_output: Any,
    ) -> Any:
        return self._to_forms(data, locale, '')

    def _to_icu(self, value: Any, locale: str, path: str) -> Any:
        # the record root is a container, never a plural value
        if path and is_plural_forms_object(value):
            try:
                return plural_forms_to_icu(value, locale)
            except PluralConversionError as e:
                logger.error('Failed to convert plural forms for key "%s" (locale: %s): %s', path, locale, e)
                return value
        if isinstance(value, list):
            return [self._to_icu(item, locale, _child_path(path, index)) for index, item in enumerate(value)]
        if isinstance(value, dict) and not is_icu_plural_object(value):
            return {key: self._to_icu(child, locale, _child_path(path, key)) for key, child in value.items()}
        return value

    def _to_forms(self, value: Any, locale: str, path: str) -> Any:
        if path and is_icu_plural_object(value):
            try:
                return icu_to_plural_forms(PluralObject.from_value(value))
            except (PluralConversionError, KeyError, TypeError) as e:
                raise PluralWriteError(path, locale, e) from e
        if isinstance(value, list):
            return [self._to_forms(item, locale, _child_path(path, index)) for index, item in enumerate(value)]
        if isinstance(value, dict):
            return {key: self._to_forms(child, locale, _child_path(path, key)) for key, child in value.items()}
        return value


def _child_path(path: str, key: Any) -> str:
    return f"{path}{KEY_SEPARATOR}{key}" if path else str(key)
