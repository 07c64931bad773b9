"""Tests for the loader contract and pipeline composition."""

import pytest

from localization_pipeline.core.composer import ComposedLoader, compose_loaders
from localization_pipeline.core.errors import DefaultLocaleError, MissingPullStateError
from localization_pipeline.core.loader import NOT_CAPTURED, BaseLoader


class RecordingLoader(BaseLoader):
    """Appends a marker on pull, strips it on push and records every call."""

    def __init__(self, marker: str, calls: list):
        super().__init__()
        self.marker = marker
        self.calls = calls
        self.pushed_with = None

    async def _init(self):
        self.calls.append(('init', self.marker))
        return {'ready': self.marker}

    async def _pull(self, locale, input_data):
        self.calls.append(('pull', self.marker, locale))
        return f"{input_data or ''}{self.marker}"

    async def _push(self, locale, data, original_input, original_locale, pull_input, pull_output):
        self.calls.append(('push', self.marker, locale))
        self.pushed_with = (original_input, original_locale, pull_input, pull_output)
        assert data.endswith(self.marker)
        return data[:-len(self.marker)]


class TestBaseLoader:
    """Test cases for BaseLoader state handling."""

    @pytest.mark.asyncio
    async def test_pull_requires_default_locale(self):
        """Pulling before a default locale is set should fail."""
        loader = RecordingLoader('a', [])
        with pytest.raises(DefaultLocaleError, match="default locale is not set"):
            await loader.pull('en', 'x')

    @pytest.mark.asyncio
    async def test_push_requires_default_locale(self):
        """Pushing before a default locale is set should fail."""
        loader = RecordingLoader('a', [])
        with pytest.raises(DefaultLocaleError):
            await loader.push('en', 'xa')

    @pytest.mark.asyncio
    async def test_first_pull_must_be_default_locale(self):
        """The first pull should be for the default locale."""
        loader = RecordingLoader('a', []).set_default_locale('en')
        with pytest.raises(DefaultLocaleError, match="first pull must be for the default locale 'en'"):
            await loader.pull('es', 'x')

    def test_default_locale_cannot_change(self):
        """Setting a different default locale should fail; the same one is fine."""
        loader = RecordingLoader('a', []).set_default_locale('en')
        loader.set_default_locale('en')
        with pytest.raises(DefaultLocaleError, match="cannot change it to 'fr'"):
            loader.set_default_locale('fr')
        assert loader.default_locale == 'en'

    @pytest.mark.asyncio
    async def test_push_without_pull(self):
        """Pushing before any pull should fail loudly."""
        loader = RecordingLoader('a', []).set_default_locale('en')
        with pytest.raises(MissingPullStateError) as exc_info:
            await loader.push('es', 'xa')
        assert exc_info.value.locale == 'es'
        assert exc_info.value.stage == 'RecordingLoader'

    @pytest.mark.asyncio
    async def test_push_with_explicit_original_input(self):
        """An explicit original input should replace the missing capture."""
        loader = RecordingLoader('a', []).set_default_locale('en')
        assert await loader.push('es', 'ya', original_input='x') == 'y'
        assert loader.pushed_with == ('x', 'en', None, None)

    @pytest.mark.asyncio
    async def test_capture_lifecycle(self):
        """Default pulls set the original input; every pull sets the pull fields."""
        loader = RecordingLoader('a', []).set_default_locale('en')

        await loader.pull('en', 'source')
        assert loader.state.original_input == 'source'
        assert loader.state.pull_locale == 'en'

        await loader.pull('es', 'target')
        assert loader.state.original_input == 'source'
        assert loader.state.pull_input == 'target'
        assert loader.state.pull_output == 'targeta'
        assert loader.state.pull_locale == 'es'

    @pytest.mark.asyncio
    async def test_push_uses_capture(self):
        """Omitted push arguments should come from the capture."""
        loader = RecordingLoader('a', []).set_default_locale('en')
        await loader.pull('en', 'source')
        await loader.pull('es', 'target')
        await loader.push('es', 'translateda')
        assert loader.pushed_with == ('source', 'en', 'target', 'targeta')

    @pytest.mark.asyncio
    async def test_push_explicit_arguments_win(self):
        """Explicit push arguments should override the capture."""
        loader = RecordingLoader('a', []).set_default_locale('en')
        await loader.pull('en', 'source')
        await loader.push('es', 'xa', original_input='other', original_locale='de', pull_input='pi', pull_output='po')
        assert loader.pushed_with == ('other', 'de', 'pi', 'po')

    @pytest.mark.asyncio
    async def test_push_does_not_touch_capture(self):
        """Push should never modify the captured state."""
        loader = RecordingLoader('a', []).set_default_locale('en')
        await loader.pull('en', 'source')
        await loader.push('es', 'changeda')
        assert loader.state.original_input == 'source'
        assert loader.state.pull_output == 'sourcea'

    @pytest.mark.asyncio
    async def test_init_cached(self):
        """init should run once and return the cached result."""
        calls = []
        loader = RecordingLoader('a', calls)
        assert await loader.init() == {'ready': 'a'}
        assert await loader.init() == {'ready': 'a'}
        assert calls == [('init', 'a')]

    def test_not_captured_sentinel(self):
        """The sentinel should be falsy and distinct from None."""
        assert not NOT_CAPTURED
        assert NOT_CAPTURED is not None
        assert repr(NOT_CAPTURED) == '<not captured>'


class TestComposeLoaders:
    """Test cases for compose_loaders."""

    @pytest.mark.asyncio
    async def test_pull_left_to_right_push_right_to_left(self):
        """Pull should run stages in order and push in reverse."""
        calls = []
        pipeline = compose_loaders(RecordingLoader('a', calls), RecordingLoader('b', calls))
        pipeline.set_default_locale('en')

        assert await pipeline.pull('en', 'x') == 'xab'
        assert await pipeline.push('en', 'yab') == 'y'
        assert calls == [
            ('pull', 'a', 'en'),
            ('pull', 'b', 'en'),
            ('push', 'b', 'en'),
            ('push', 'a', 'en'),
        ]

    @pytest.mark.asyncio
    async def test_each_stage_uses_own_capture(self):
        """Every stage should push with the input it saw during pull."""
        calls = []
        first, second = RecordingLoader('a', calls), RecordingLoader('b', calls)
        pipeline = compose_loaders(first, second).set_default_locale('en')

        await pipeline.pull('en', 'x')
        await pipeline.push('es', 'zab')

        assert first.pushed_with[0] == 'x'
        assert second.pushed_with[0] == 'xa'

    def test_set_default_locale_fans_out(self):
        """The default locale should reach every stage."""
        stages = [RecordingLoader('a', []), RecordingLoader('b', [])]
        compose_loaders(*stages).set_default_locale('de')
        assert [stage.default_locale for stage in stages] == ['de', 'de']

    @pytest.mark.asyncio
    async def test_init_fans_out(self):
        """init should run on every stage."""
        calls = []
        pipeline = compose_loaders(RecordingLoader('a', calls), RecordingLoader('b', calls))
        await pipeline.init()
        assert calls == [('init', 'a'), ('init', 'b')]

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        """Stage errors should reach the caller unchanged."""
        pipeline = compose_loaders(RecordingLoader('a', [])).set_default_locale('en')
        with pytest.raises(MissingPullStateError):
            await pipeline.push('es', 'xa')

    @pytest.mark.asyncio
    async def test_nested_composition(self):
        """A composed pipeline should itself be usable as a stage."""
        calls = []
        inner = compose_loaders(RecordingLoader('b', calls), RecordingLoader('c', calls))
        pipeline = compose_loaders(RecordingLoader('a', calls), inner).set_default_locale('en')
        assert await pipeline.pull('en', '') == 'abc'
        assert await pipeline.push('en', 'Zabc') == 'Z'

    def test_requires_loaders(self):
        """Composing nothing should fail."""
        with pytest.raises(ValueError):
            compose_loaders()

    def test_repr_and_len(self):
        """The composed pipeline should describe its stages."""
        pipeline = compose_loaders(RecordingLoader('a', []), RecordingLoader('b', []))
        assert isinstance(pipeline, ComposedLoader)
        assert len(pipeline) == 2
        assert repr(pipeline) == 'ComposedLoader(RecordingLoader -> RecordingLoader)'
