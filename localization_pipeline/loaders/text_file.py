"""Stage reading and writing per-locale resource files."""

from pathlib import Path
from typing import Any, Optional, Union

from ..core.errors import FormatError
from ..core.loader import BaseLoader
from ..utils.config import LOCALE_PLACEHOLDER
from ..utils.logging import get_logger

logger = get_logger().get_logger('loaders.text_file')


class TextFileLoader(BaseLoader):
    """
    File on disk <-> raw text.

    ``path_pattern`` contains ``[locale]`` (``locales/[locale].json``).
    Pulling a locale whose file does not exist yet yields an empty string.
    Push writes the file, creating missing directories, and returns its path.
    """

    def __init__(self, path_pattern: str, base_dir: Optional[Union[str, Path]] = None):
        super().__init__()
        self.path_pattern = path_pattern
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()

    def get_path(self, locale: str) -> Path:
        return self.base_dir / self.path_pattern.replace(LOCALE_PLACEHOLDER, locale)

    async def _pull(self, locale: str, input_data: Any) -> str:
        path = self.get_path(locale)
        if not path.exists():
            logger.debug("No file for locale '%s' at %s", locale, path)
            return ''
        try:
            return path.read_text(encoding='utf-8')
        except UnicodeDecodeError as e:
            raise FormatError('text', locale, e) from e

    async def _push(
        self,
        locale: str,
        data: Any,
        original_input: Any,
        original_locale: str,
        pull_input: Any,
        pull_output: Any,
    ) -> Path:
        path = self.get_path(locale)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(data or '', encoding='utf-8')
        logger.info("Wrote %s", path)
        return path
