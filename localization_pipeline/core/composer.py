"""Pipeline composition."""

from typing import Any, List

from .loader import Loader


class ComposedLoader(Loader):
    """
    Chain of stages behaving as a single loader.

    ``pull`` runs the stages left to right, ``push`` runs them right to left.
    Each stage pushes with its own captured state. Errors propagate unchanged.
    """

    def __init__(self, *loaders: Loader):
        if not loaders:
            raise ValueError("compose_loaders() needs at least one loader")
        self.loaders: List[Loader] = list(loaders)

    def set_default_locale(self, locale: str) -> 'ComposedLoader':
        for loader in self.loaders:
            loader.set_default_locale(locale)
        return self

    async def init(self) -> 'ComposedLoader':
        for loader in self.loaders:
            await loader.init()
        return self

    async def pull(self, locale: str, input_data: Any = None) -> Any:
        result = input_data
        for loader in self.loaders:
            result = await loader.pull(locale, result)
        return result

    async def push(self, locale: str, data: Any) -> Any:
        result = data
        for loader in reversed(self.loaders):
            result = await loader.push(locale, result)
        return result

    def __len__(self) -> int:
        return len(self.loaders)

    def __repr__(self) -> str:
        names = ' -> '.join(type(loader).__name__ for loader in self.loaders)
        return f"ComposedLoader({names})"


def compose_loaders(*loaders: Loader) -> ComposedLoader:
    """
    Compose stages into one pipeline.

    Example:
        pipeline = compose_loaders(
            TextFileLoader('locales/[locale].json'),
            JsonLoader(),
            FlatLoader(),
        )
        pipeline.set_default_locale('en')
        record = await pipeline.pull('en')
    """
    return ComposedLoader(*loaders)
