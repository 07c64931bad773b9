"""Stage locking user-defined regex matches against translation."""

import re
from typing import Any, List, Optional, Pattern

from ..core.loader import BaseLoader
from ..features.placeholders import (
    KIND_LOCKED_PATTERN,
    PlaceholderMap,
    protect_patterns,
    restore_placeholders,
)
from ..utils.logging import get_logger

logger = get_logger().get_logger('loaders.locked_patterns')


def compile_locked_patterns(patterns: Optional[List[str]]) -> List[Pattern]:
    """
    Compile pattern strings in multiline mode.

    Invalid expressions are reported and skipped; the remaining patterns keep
    their order.
    """
    compiled = []
    for pattern in patterns or []:
        try:
            compiled.append(re.compile(pattern, re.MULTILINE))
        except re.error as e:
            logger.warning("Invalid regex pattern: %s (%s)", pattern, e)
    return compiled


class LockedPatternsLoader(BaseLoader):
    """
    Raw text -> raw text with regex matches replaced by placeholders.

    Works on any text format. For structured formats the patterns should
    only match inside values, never syntax, or the next stage cannot parse
    the result.

    Example:
        LockedPatternsLoader([r'\\{\\{\\w+\\}\\}', r'https?://\\S+'])
    """

    def __init__(self, patterns: Optional[List[str]] = None):
        super().__init__()
        self.patterns = list(patterns or [])
        self._compiled = compile_locked_patterns(self.patterns)
        self.placeholders = PlaceholderMap()

    async def _pull(self, locale: str, input_data: Optional[str]) -> str:
        text, mapping = protect_patterns(input_data or '', self._compiled, KIND_LOCKED_PATTERN)
        self.placeholders.record(locale, mapping)
        return text

    async def _push(
        self,
        locale: str,
        data: Any,
        original_input: Any,
        original_locale: str,
        pull_input: Any,
        pull_output: Any,
    ) -> str:
        mapping = self.placeholders.for_locales(locale, original_locale)
        return restore_placeholders(data or '', mapping)
