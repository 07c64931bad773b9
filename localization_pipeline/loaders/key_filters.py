"""Stages filtering flat records by key pattern."""

from typing import Any, Dict, List, Optional

from ..core.loader import BaseLoader
from ..utils.key_matching import matches_key_pattern


class LockedKeysLoader(BaseLoader):
    """
    Keeps locked keys out of translation.

    Pull drops every matching key. Push puts the default locale's value back
    for each of them, following the key order of the default locale's record.
    """

    def __init__(self, locked_keys: Optional[List[str]] = None):
        super().__init__()
        self.locked_keys = list(locked_keys or [])

    async def _pull(self, locale: str, input_data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            key: value
            for key, value in (input_data or {}).items()
            if not matches_key_pattern(key, self.locked_keys)
        }

    async def _push(
        self,
        locale: str,
        data: Any,
        original_input: Any,
        original_locale: str,
        pull_input: Any,
        pull_output: Any,
    ) -> Dict[str, Any]:
        data = data or {}
        result = {}

        for key, value in (original_input or {}).items():
            if matches_key_pattern(key, self.locked_keys):
                result[key] = value
            elif key in data:
                result[key] = data[key]

        for key, value in data.items():
            if key not in result:
                result[key] = value

        return result


class IgnoredKeysLoader(BaseLoader):
    """Drops ignored keys in both directions."""

    def __init__(self, ignored_keys: Optional[List[str]] = None):
        super().__init__()
        self.ignored_keys = list(ignored_keys or [])

    def _omit(self, record: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            key: value
            for key, value in (record or {}).items()
            if not matches_key_pattern(key, self.ignored_keys)
        }

    async def _pull(self, locale: str, input_data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        return self._omit(input_data)

    async def _push(
        self,
        locale: str,
        data: Any,
        original_input: Any,
        original_locale: str,
        pull_input: Any,
        pull_output: Any,
    ) -> Dict[str, Any]:
        return self._omit(data)
