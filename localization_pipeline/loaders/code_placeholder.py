"""Stage protecting fenced code, inline code and image spacing in markdown."""

from typing import Any, Optional

from ..core.loader import BaseLoader
from ..features.markup import protect_markup
from ..features.placeholders import PlaceholderMap, restore_placeholders


class CodePlaceholderLoader(BaseLoader):
    """
    Markdown text -> markdown text with code replaced by placeholders.

    Push restores tokens from the pushed locale's own pull together with the
    default locale's pull, so a locale whose file carries its own code
    (a translated identifier, a localized snippet) gets that code back.
    """

    def __init__(self):
        super().__init__()
        self.placeholders = PlaceholderMap()

    async def _pull(self, locale: str, input_data: Optional[str]) -> str:
        text, mapping = protect_markup(input_data or '')
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
