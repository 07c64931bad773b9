"""Exceptions raised by pipeline stages."""

from typing import Optional


class LoaderError(Exception):
    """Base class for pipeline failures that the caller must handle."""


class DefaultLocaleError(LoaderError):
    """Raised when the default locale is missing, changed, or not pulled first."""


class MissingPullStateError(LoaderError):
    """Raised when push is called before the stage captured a pull."""

    def __init__(self, stage: str, locale: str):
        self.stage = stage
        self.locale = locale
        super().__init__(
            f"{stage}: cannot push locale '{locale}' without pulling the default locale first"
        )


class PluralConversionError(LoaderError):
    """Raised when plural forms cannot be converted to ICU MessageFormat."""


class IcuParseError(PluralConversionError):
    """Raised for malformed ICU plural strings. Carries the text around the failure."""

    def __init__(self, message: str, icu: str, context: Optional[str] = None):
        self.icu = icu
        self.context = context
        details = [message]
        if context is not None:
            details.append(f"Context: ...{context}...")
        details.append(f"Full ICU: {icu}")
        super().__init__('\n'.join(details))


class PluralWriteError(LoaderError):
    """Raised when a translated plural object cannot be written back."""

    def __init__(self, key: str, locale: str, cause: Exception):
        self.key = key
        self.locale = locale
        super().__init__(
            f"Failed to write plural translation for key \"{key}\" (locale: {locale}).\n{cause}"
        )


class FormatError(LoaderError):
    """Raised when a resource file cannot be parsed in its declared format."""

    def __init__(self, format_name: str, locale: str, cause: Exception):
        self.format_name = format_name
        self.locale = locale
        super().__init__(f"Invalid {format_name} for locale '{locale}': {cause}")
