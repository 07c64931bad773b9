"""JSON stage."""

import json
import re
from typing import Any, Optional, Union

from ..core.errors import FormatError
from ..core.loader import BaseLoader

DEFAULT_INDENT = 2
INDENT_REGEX = re.compile(r'^([ \t]+)\S', re.MULTILINE)


def detect_indent(text: Optional[str]) -> Union[int, str]:
    """Return the indentation of the first indented line (spaces as a count, tabs as-is)."""
    match = INDENT_REGEX.search(text or '')
    if not match:
        return DEFAULT_INDENT
    indent = match.group(1)
    if '\t' in indent:
        return indent
    return len(indent)


class JsonLoader(BaseLoader):
    """
    Raw JSON text <-> parsed object.

    Push serializes with the indentation of the default locale's file and
    keeps its trailing newline, so untouched files diff cleanly.
    """

    async def _pull(self, locale: str, input_data: Optional[str]) -> Any:
        if not input_data or not input_data.strip():
            return {}
        try:
            return json.loads(input_data)
        except json.JSONDecodeError as e:
            raise FormatError('JSON', locale, e) from e

    async def _push(
        self,
        locale: str,
        data: Any,
        original_input: Any,
        original_locale: str,
        pull_input: Any,
        pull_output: Any,
    ) -> str:
        text = json.dumps({} if data is None else data, indent=detect_indent(original_input), ensure_ascii=False)
        if isinstance(original_input, str) and original_input.endswith('\n'):
            text += '\n'
        return text
