"""Markdown sectioning stage."""

from typing import Any, Dict, Optional

from ..core.loader import BaseLoader

SECTION_SEPARATOR = '\n\n'


class SectionsLoader(BaseLoader):
    """
    Markdown text <-> ``{"0": section, "1": section, ...}``.

    Sections are separated by a blank line. Push joins them back in index
    order, so an untouched record reproduces the text exactly.
    """

    async def _pull(self, locale: str, input_data: Optional[str]) -> Dict[str, str]:
        if not input_data:
            return {}
        return {str(index): section for index, section in enumerate(input_data.split(SECTION_SEPARATOR))}

    async def _push(
        self,
        locale: str,
        data: Any,
        original_input: Any,
        original_locale: str,
        pull_input: Any,
        pull_output: Any,
    ) -> str:
        data = data or {}
        keys = list(data)
        if all(key.isdigit() for key in keys):
            keys.sort(key=int)
        return SECTION_SEPARATOR.join(str(data[key]) for key in keys)
