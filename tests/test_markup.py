"""Tests for markdown code protection and the code placeholder stage."""

import hashlib
import re

import pytest

from localization_pipeline.core.errors import MissingPullStateError
from localization_pipeline.features.markup import protect_markup, split_blocks
from localization_pipeline.features.placeholders import restore_placeholders
from localization_pipeline.loaders.code_placeholder import CodePlaceholderLoader

CODE_TOKEN_REGEX = re.compile(r'---CODE-PLACEHOLDER-[0-9a-f]+---')
INLINE_TOKEN_REGEX = re.compile(r'---INLINE-CODE-PLACEHOLDER-[0-9a-f]+---')


def md5(text: str) -> str:
    return hashlib.md5(text.encode('utf-8')).hexdigest()


@pytest.fixture
def loader():
    """Code placeholder stage with English as default locale."""
    return CodePlaceholderLoader().set_default_locale('en')


async def round_trip(loader, text: str, locale: str = 'es') -> str:
    pulled = await loader.pull('en', text)
    return await loader.push(locale, pulled)


class TestProtectMarkup:
    """Test cases for protect_markup."""

    def test_fenced_code_replaced(self):
        """A fenced block should become a single CODE token hashed over the whole fence."""
        fence = '```js\nconsole.log("foo");\n```'
        protected, mapping = protect_markup(f"Paragraph with some code:\n\n{fence}")
        token = f"---CODE-PLACEHOLDER-{md5(fence)}---"
        assert protected == f"Paragraph with some code:\n\n{token}"
        assert mapping == {token: fence}

    def test_inline_code_replaced(self):
        """Inline code spans should become INLINE-CODE tokens including the backticks."""
        protected, mapping = protect_markup("This is some `inline()` code.")
        assert protected == f"This is some ---INLINE-CODE-PLACEHOLDER-{md5('`inline()`')}--- code."

    def test_identical_snippets_share_token(self):
        """The same snippet should always get the same token."""
        protected, mapping = protect_markup("Repeat `x` and `x` again.")
        assert len(INLINE_TOKEN_REGEX.findall(protected)) == 2
        assert len(mapping) == 1

    def test_unterminated_fence_untouched(self):
        """A fence without a closing line is plain text."""
        protected, mapping = protect_markup("```js\nno close")
        assert protected == "```js\nno close"
        assert mapping == {}

    def test_tilde_fence(self):
        """Tilde fences should be protected like backtick fences."""
        protected, mapping = protect_markup("Intro\n~~~\ncode\n~~~")
        assert CODE_TOKEN_REGEX.fullmatch(protected.split('\n')[-1])
        assert list(mapping.values()) == ["~~~\ncode\n~~~"]

    def test_closing_fence_must_match(self):
        """A shorter or different closing fence does not close the block."""
        protected, mapping = protect_markup("````\na\n```\nb\n````")
        assert list(mapping.values()) == ["````\na\n```\nb\n````"]

    def test_adjacent_fences_separated(self):
        """A closing fence directly followed by an opening fence should yield separate tokens."""
        text = "```typescript\nfunction example() {\n  return true;\n}\n```\n\n```typescript\nimport { Something } from 'somewhere';\n```"
        protected, mapping = protect_markup(text)
        assert not re.search(r'---CODE-PLACEHOLDER-[a-f0-9]+---typescript', protected)
        assert re.fullmatch(r'---CODE-PLACEHOLDER-[a-f0-9]+---\n\n---CODE-PLACEHOLDER-[a-f0-9]+---', protected)

    def test_placeholders_keep_section_breaks(self):
        """Every block token should be surrounded by blank lines for section splitting."""
        text = "Text before.\n\n```typescript\ncode1\n```\n\nText between.\n\n```javascript\ncode2\n```\n\nText after."
        protected, mapping = protect_markup(text)
        sections = [s for s in protected.split('\n\n') if s]
        assert len(sections) == 5
        assert all(CODE_TOKEN_REGEX.fullmatch(sections[i]) for i in (1, 3))

    def test_quoted_fence_kept_in_place(self):
        """Fences inside quotes are replaced without touching their spacing."""
        text = "> Quote start\n> ```ts\n> let x = 42;\n> ```\n> Quote end"
        protected, mapping = protect_markup(text)
        lines = protected.split('\n')
        assert lines[0] == "> Quote start"
        assert CODE_TOKEN_REGEX.fullmatch(lines[1])
        assert lines[2] == "> Quote end"

    def test_inline_code_inside_fence_not_double_protected(self):
        """Backticks inside a fenced block belong to the block token."""
        protected, mapping = protect_markup("```js\nconst s = `x`;\n```")
        assert INLINE_TOKEN_REGEX.search(protected) is None
        assert len(mapping) == 1

    def test_empty_text(self):
        """Empty input should produce empty output."""
        assert protect_markup("") == ("", {})

    def test_split_blocks_kinds(self):
        """split_blocks should classify fences, images and text."""
        mapping = {}
        blocks = split_blocks("Intro\n![](a.png)\n```\nx\n```\nOutro", mapping)
        assert [block.kind for block in blocks] == ['text', 'image', 'fence', 'text']
        assert len(mapping) == 1


class TestCodePlaceholderRoundTrip:
    """Round trips through the code placeholder stage."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize('text', [
        "Example:\n\n```js\nconsole.log()\n```",
        "Intro:\n\n```\ngeneric code\n```",
        'Meta:\n\n```js {1,2} title="Sample"\nline1\nline2\n```',
        "> Quote start\n> ```ts\n> let x = 42;\n> ```\n> Quote end",
        "A:\n\n```js\n1\n```\n\nB:\n\n```js\n2\n```",
        "# Title\n\n```bash\necho hi\n```",
        "- item:\n\n  ```js\n  io()\n  ```",
        "<Component>\n\n```js\nx\n```\n\n</Component>",
        '```shell\n{ "key": [1,2,3] }\n```',
        "> Code snippet inside quote:\n>\n> ```shell\n> npx -y mucho@latest install\n> ```",
        "Text above.\n\n![](https://example.com/img.png)\n\nText below.",
        "> ![](https://example.com/img.png)",
        "Text above.\n\n![](https://example.com/image(with)parentheses.jpg)\n\nText below.",
        "Text above.\n\n![Alt text](https://example.com/image(with(nested)parentheses).jpg)\n\nText below.",
        "> ![Blockquote image](https://example.com/image(in)blockquote.jpg)",
        "Use `a` and `b` and `c`.",
        "Repeat `x` and `x` again.",
        "```js\nno close",
        "</Tabs>\n\n// Attach to button click\ndocument.getElementById('executeBtn')?.addEventListener('click', run);\n\n<Callout type=\"warning\">\n  Content here\n</Callout>",
        "\n\nLeading and trailing blank lines\n\n",
    ])
    async def test_round_trip_unchanged(self, loader, text):
        """Well-spaced documents should survive pull and push byte-exact."""
        assert await round_trip(loader, text) == text

    @pytest.mark.asyncio
    @pytest.mark.parametrize('text, expected', [
        (
            "```\na()\n```\n```\nb()\n```",
            "```\na()\n```\n\n```\nb()\n```",
        ),
        (
            "<Component>\n```js\nx\n```\n</Component>",
            "<Component>\n\n```js\nx\n```\n\n</Component>",
        ),
        (
            "First paragraph:\n\n```shell\necho \"hello world\"\n```\n\nSecond paragraph:\n```shell\necho \"hello world\"\n```",
            "First paragraph:\n\n```shell\necho \"hello world\"\n```\n\nSecond paragraph:\n\n```shell\necho \"hello world\"\n```",
        ),
        (
            "Text above.\n![](https://example.com/img.png)\nText below.",
            "Text above.\n\n![](https://example.com/img.png)\n\nText below.",
        ),
        (
            "Before.\n\n![alt](https://example.com/i.png)\nAfter.",
            "Before.\n\n![alt](https://example.com/i.png)\n\nAfter.",
        ),
        (
            "Before.\n![alt](https://example.com/i.png)\n\nAfter.",
            "Before.\n\n![alt](https://example.com/i.png)\n\nAfter.",
        ),
        (
            "![](a.png)\n![](b.png)",
            "![](a.png)\n\n![](b.png)",
        ),
        (
            "<Wrapper>\n![](pic.png)\n</Wrapper>",
            "<Wrapper>\n\n![](pic.png)\n\n</Wrapper>",
        ),
        (
            "<Component>\n![Component image](https://example.com/image(in)component.jpg)\n</Component>",
            "<Component>\n\n![Component image](https://example.com/image(in)component.jpg)\n\n</Component>",
        ),
        (
            "Text\n```\nx\n```\n\n\n\nMore",
            "Text\n\n```\nx\n```\n\nMore",
        ),
    ])
    async def test_round_trip_normalizes_spacing(self, loader, text, expected):
        """Blocks and image lines should get exactly one blank line around them."""
        assert await round_trip(loader, text) == expected

    @pytest.mark.asyncio
    async def test_translated_text_restored(self, loader):
        """Translated prose should keep the restored code."""
        pulled = await loader.pull('en', 'Paragraph with some code:\n\n```js\nconsole.log("foo");\n```')
        pushed = await loader.push('es', pulled.replace("Paragraph", "Párrafo"))
        assert pushed == 'Párrafo with some code:\n\n```js\nconsole.log("foo");\n```'

    @pytest.mark.asyncio
    async def test_inline_code_restored(self, loader):
        """Inline code should come back after translation."""
        pulled = await loader.pull('en', "Some `code` here.")
        assert await loader.push('es', pulled.replace("Some", "Algún")) == "Algún `code` here."

    @pytest.mark.asyncio
    async def test_mixed_blocks_and_raw_code(self, loader):
        """Code outside fences should be left as prose."""
        text = (
            "Here's a code block:\n\n```typescript\nconst x = 1;\n```\n\n"
            "Now some raw code outside:\n// This is outside\nconst y = 2;\n\n"
            "And another block:\n\n```javascript\nconst z = 3;\n```"
        )
        pushed = await round_trip(loader, text, locale='en')
        assert pushed == text


class TestCodePlaceholderLocales:
    """Placeholder maps across locales."""

    @pytest.mark.asyncio
    async def test_target_locale_keeps_own_inline_code(self, loader):
        """A locale's own inline code should be restored on its push."""
        await loader.pull('en', "Use `foo` function.")
        ru_pulled = await loader.pull('ru', "Используйте `бар` функцию.")
        pushed = await loader.push('ru', ru_pulled.replace("Используйте", "Примените"))
        assert pushed == "Примените `бар` функцию."

    @pytest.mark.asyncio
    async def test_target_placeholders_restored(self, loader):
        """Every placeholder of the pushed locale should be replaced."""
        await loader.pull('en', "Use the `getData()` function.")
        ar_pulled = await loader.pull('ar', "استخدم `الحصول_على_البيانات()` الدالة.")
        pushed = await loader.push('ar', ar_pulled.replace("استخدم", "قم بتطبيق"))
        assert not INLINE_TOKEN_REGEX.search(pushed)
        assert not CODE_TOKEN_REGEX.search(pushed)
        assert "`الحصول_على_البيانات()`" in pushed
        assert "قم بتطبيق" in pushed

    @pytest.mark.asyncio
    async def test_later_default_pull_keeps_target_placeholders(self, loader):
        """Pulling the default locale again should not lose another locale's map."""
        await loader.pull('en', "Use the `getData()` function.")
        ar_pulled = await loader.pull('ar', "استخدم `الحصول_على_البيانات()` الدالة.")
        await loader.pull('en', "Use the `getData()` function.")
        pushed = await loader.push('ar', ar_pulled)
        assert not INLINE_TOKEN_REGEX.search(pushed)
        assert "`الحصول_على_البيانات()`" in pushed

    @pytest.mark.asyncio
    async def test_source_placeholders_restored_for_target(self, loader):
        """A target that never pulled should get the source locale's code back."""
        pulled = await loader.pull('en', "Call `init()` first.")
        assert await loader.push('de', pulled.replace("Call", "Rufe")) == "Rufe `init()` first."

    @pytest.mark.asyncio
    async def test_extra_blank_lines_in_target(self, loader):
        """Code blocks should be restored for a target whose file has different spacing."""
        await loader.pull('en', '<Tab value="npm">\n  ```bash\n  npm install\n  ```\n</Tab>')
        de_pulled = await loader.pull('de', '<Tab value="npm">\n\n  ```bash\n  npm install\n  ```\n\n</Tab>')
        pushed = await loader.push('de', de_pulled)
        assert "```bash" in pushed
        assert "npm install" in pushed
        assert not CODE_TOKEN_REGEX.search(pushed)

    @pytest.mark.asyncio
    async def test_push_before_pull(self, loader):
        """Pushing before the default locale was pulled should fail."""
        with pytest.raises(MissingPullStateError):
            await loader.push('es', "text")


class TestDollarSequences:
    """Dollar sequences must never be read as substitution syntax."""

    @pytest.mark.asyncio
    async def test_dollar_in_fenced_code(self, loader):
        """Special $ sequences inside fenced code should survive."""
        text = (
            "Text before.\n\n```js\nconst price = \"$100\";\nconst template = \"$`text`\";\n"
            "const special = \"$&$'$`\";\n```\n\nText after."
        )
        pulled = await loader.pull('en', text)
        pushed = await loader.push('en', pulled.replace("Text before", "Texto antes"))

        assert not CODE_TOKEN_REGEX.search(pushed)
        assert 'const price = "$100";' in pushed
        assert 'const template = "$`text`";' in pushed
        assert "const special = \"$&$'$`\";" in pushed
        assert "Texto antes" in pushed

    @pytest.mark.asyncio
    async def test_dollar_in_inline_code(self, loader):
        """Special $ sequences inside inline code should survive."""
        pulled = await loader.pull('en', "Use `$price` and `$&` and `\\1` in your code.")
        pushed = await loader.push('en', pulled.replace("Use", "Utilize"))
        assert pushed == "Utilize `$price` and `$&` and `\\1` in your code."

    @pytest.mark.asyncio
    async def test_dollar_next_to_unspaced_fence(self, loader):
        """Re-spacing a fence should not alter $ sequences inside it."""
        text = (
            "Some text\n```js\nconsole.log('Current period cost: $' + amount);\n"
            "const template = `Price: $${price}`;\n```\nMore text"
        )
        pushed = await round_trip(loader, text, locale='en')
        assert "console.log('Current period cost: $' + amount);" in pushed
        assert "const template = `Price: $${price}`;" in pushed

    @pytest.mark.asyncio
    async def test_dollar_in_image_line(self, loader):
        """Re-spacing an image line should not alter $ sequences in it."""
        text = "Here is an image:\n![Price: $100](https://api.example.com/chart?price=$500&currency=$USD)\nEnd of text"
        pushed = await round_trip(loader, text, locale='en')
        assert "![Price: $100]" in pushed
        assert "price=$500&currency=$USD" in pushed
