"""
Loader contract.

Every pipeline stage converts between an input type (closer to the file on
disk) and an output type (closer to the flat record sent for translation):

    pull(locale, input)  -> output
    push(locale, output) -> input

A stage remembers what it saw during ``pull`` so that ``push`` can rebuild
structure the translated payload no longer carries (formatting, locked
values, protected spans). Stages are chained with
:func:`localization_pipeline.core.composer.compose_loaders`.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from .errors import DefaultLocaleError, MissingPullStateError


class _NotCaptured:
    """Sentinel for capture slots that no pull has filled yet."""

    _instance: Optional['_NotCaptured'] = None

    def __new__(cls) -> '_NotCaptured':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return '<not captured>'

    def __bool__(self) -> bool:
        return False


NOT_CAPTURED = _NotCaptured()


@dataclass
class LoaderState:
    """
    Per-stage state.

    ``original_input`` is what the default locale pulled; ``pull_*`` describe
    the most recent pull of any locale. Only ``pull`` writes these fields.
    """
    default_locale: Optional[str] = None
    original_input: Any = NOT_CAPTURED
    pull_locale: Optional[str] = None
    pull_input: Any = NOT_CAPTURED
    pull_output: Any = NOT_CAPTURED
    init_context: Any = NOT_CAPTURED

    @property
    def has_capture(self) -> bool:
        return self.original_input is not NOT_CAPTURED


class Loader(ABC):
    """Interface shared by single stages and composed pipelines."""

    @abstractmethod
    def set_default_locale(self, locale: str) -> 'Loader':
        pass

    @abstractmethod
    async def init(self) -> Any:
        pass

    @abstractmethod
    async def pull(self, locale: str, input_data: Any = None) -> Any:
        pass

    @abstractmethod
    async def push(self, locale: str, data: Any) -> Any:
        pass


class BaseLoader(Loader):
    """
    Stateful pipeline stage.

    Subclasses implement ``_pull`` and ``_push``; this class handles the
    default-locale bookkeeping and the capture lifecycle.
    """

    def __init__(self):
        self.state = LoaderState()

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def default_locale(self) -> Optional[str]:
        return self.state.default_locale

    def set_default_locale(self, locale: str) -> 'BaseLoader':
        """
        Declare the authoritative locale for structural reconstruction.

        Raises:
            DefaultLocaleError: If a different default locale was already set
        """
        current = self.state.default_locale
        if current is not None and current != locale:
            raise DefaultLocaleError(
                f"{self.name}: default locale already set to '{current}', cannot change it to '{locale}'"
            )
        self.state.default_locale = locale
        return self

    async def init(self) -> Any:
        """Run one-time setup and cache its result."""
        if self.state.init_context is NOT_CAPTURED:
            self.state.init_context = await self._init()
        return self.state.init_context

    async def _init(self) -> Any:
        return None

    async def pull(self, locale: str, input_data: Any = None) -> Any:
        """
        Transform ``input_data`` for ``locale`` and capture the call.

        The first pull of a stage must be for the default locale.

        Raises:
            DefaultLocaleError: If no default locale is set, or the first pull
                is for another locale
        """
        default_locale = self._require_default_locale()

        if not self.state.has_capture and locale != default_locale:
            raise DefaultLocaleError(
                f"{self.name}: the first pull must be for the default locale "
                f"'{default_locale}', got '{locale}'"
            )

        if locale == default_locale:
            self.state.original_input = input_data
        self.state.pull_locale = locale
        self.state.pull_input = input_data

        output = await self._pull(locale, input_data)

        self.state.pull_output = output
        return output

    async def push(
        self,
        locale: str,
        data: Any,
        original_input: Any = NOT_CAPTURED,
        original_locale: Optional[str] = None,
        pull_input: Any = NOT_CAPTURED,
        pull_output: Any = NOT_CAPTURED,
    ) -> Any:
        """
        Rebuild this stage's input type from ``data``.

        Arguments left out fall back to the stage's own capture.

        Raises:
            DefaultLocaleError: If no default locale is set
            MissingPullStateError: If nothing was captured and no
                ``original_input`` was given
        """
        default_locale = self._require_default_locale()

        if original_input is NOT_CAPTURED:
            if not self.state.has_capture:
                raise MissingPullStateError(self.name, locale)
            original_input = self.state.original_input
        if pull_input is NOT_CAPTURED:
            pull_input = self.state.pull_input
        if pull_output is NOT_CAPTURED:
            pull_output = self.state.pull_output

        return await self._push(
            locale,
            data,
            original_input,
            original_locale or default_locale,
            _or_none(pull_input),
            _or_none(pull_output),
        )

    def _require_default_locale(self) -> str:
        if self.state.default_locale is None:
            raise DefaultLocaleError(f"{self.name}: default locale is not set")
        return self.state.default_locale

    @abstractmethod
    async def _pull(self, locale: str, input_data: Any) -> Any:
        pass

    @abstractmethod
    async def _push(
        self,
        locale: str,
        data: Any,
        original_input: Any,
        original_locale: str,
        pull_input: Any,
        pull_output: Any,
    ) -> Any:
        pass


def _or_none(value: Any) -> Any:
    return None if value is NOT_CAPTURED else value
