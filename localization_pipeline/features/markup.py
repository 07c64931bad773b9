"""
Markdown-aware code protection.

Scans a document line by line for fenced code blocks and standalone image
lines, gives each of them exactly one blank line of separation from the
surrounding text, swaps fenced blocks and inline code spans for placeholders,
and leaves anything inside block quotes where it is.

Unterminated fences are ordinary text: nothing is protected or re-spaced.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .placeholders import KIND_CODE, KIND_INLINE_CODE, make_placeholder

QUOTE_PREFIX_REGEX = re.compile(r'^[ \t]*(?:>[ \t]?)+')
FENCE_OPEN_REGEX = re.compile(r'^[ \t]*(?P<fence>`{3,}|~{3,})(?P<info>.*)$')
FENCE_CLOSE_REGEX = re.compile(r'^[ \t]*(?P<fence>`{3,}|~{3,})[ \t]*$')

# ![alt](url) alone on its line; the url may hold two levels of parentheses
IMAGE_LINE_REGEX = re.compile(
    r'^[ \t]*!\[[^\]]*\]\((?:[^()]|\((?:[^()]|\([^()]*\))*\))*\)[ \t]*$'
)

INLINE_CODE_REGEX = re.compile(r'(?<!`)`([^`\r\n]+?)`(?!`)')

BLOCK_FENCE = 'fence'
BLOCK_IMAGE = 'image'
BLOCK_TEXT = 'text'


@dataclass
class Block:
    """A run of lines: plain text, a fenced code block or an image line."""
    kind: str
    lines: List[str] = field(default_factory=list)

    @property
    def standalone(self) -> bool:
        return self.kind in (BLOCK_FENCE, BLOCK_IMAGE)


def _split_quote(line: str) -> Tuple[str, str]:
    """Split a line into its block-quote prefix and the rest."""
    match = QUOTE_PREFIX_REGEX.match(line)
    if not match:
        return '', line
    return match.group(0), line[match.end():]


def _find_fence_close(lines: List[str], start: int, fence: str, quoted: bool) -> Optional[int]:
    """
    Return the index of the line closing a fence opened before ``start``.

    A closing fence uses the same character and is at least as long as the
    opening one. Inside a quote, the block ends with the quote.
    """
    for index in range(start, len(lines)):
        prefix, body = _split_quote(lines[index]) if quoted else ('', lines[index])
        if quoted and not prefix:
            return None
        match = FENCE_CLOSE_REGEX.match(body)
        if match:
            closing = match.group('fence')
            if closing[0] == fence[0] and len(closing) >= len(fence):
                return index
    return None


def _is_fence_open(body: str) -> Optional[str]:
    match = FENCE_OPEN_REGEX.match(body)
    if not match:
        return None
    fence = match.group('fence')
    # CommonMark: a backtick fence's info string cannot contain backticks
    if fence[0] == '`' and '`' in match.group('info'):
        return None
    return fence


def split_blocks(text: str, mapping: Dict[str, str]) -> List[Block]:
    """
    Split ``text`` into blocks, protecting fenced code on the way.

    Fenced blocks outside quotes become ``fence`` blocks holding a single
    placeholder line. Quoted fences are replaced in place inside the
    surrounding text so their spacing stays untouched.
    """
    lines = text.split('\n')
    blocks: List[Block] = []

    def _append_text(line: str):
        if blocks and blocks[-1].kind == BLOCK_TEXT:
            blocks[-1].lines.append(line)
        else:
            blocks.append(Block(BLOCK_TEXT, [line]))

    index = 0
    while index < len(lines):
        line = lines[index]
        prefix, body = _split_quote(line)
        quoted = bool(prefix)

        fence = _is_fence_open(body)
        if fence:
            close = _find_fence_close(lines, index + 1, fence, quoted)
            if close is not None:
                original = '\n'.join(lines[index:close + 1])
                token = make_placeholder(KIND_CODE, original)
                mapping[token] = original
                if quoted:
                    _append_text(token)
                else:
                    blocks.append(Block(BLOCK_FENCE, [token]))
                index = close + 1
                continue

        if not quoted and IMAGE_LINE_REGEX.match(line):
            blocks.append(Block(BLOCK_IMAGE, [line]))
        else:
            _append_text(line)
        index += 1

    return blocks


def _is_blank(line: str) -> bool:
    return not line.strip()


def join_blocks(blocks: List[Block]) -> str:
    """
    Join blocks back into a document.

    Every standalone block is separated from its neighbours by exactly one
    blank line. Blank lines at the very start or end of the document are kept.
    """
    output: List[str] = []
    last = len(blocks) - 1

    for position, block in enumerate(blocks):
        previous_standalone = position > 0 and blocks[position - 1].standalone
        next_standalone = position < last and blocks[position + 1].standalone

        if block.standalone:
            if previous_standalone:
                output.append('')
            output.extend(block.lines)
            continue

        lines = list(block.lines)
        if previous_standalone:
            while lines and _is_blank(lines[0]):
                lines.pop(0)
        if next_standalone:
            while lines and _is_blank(lines[-1]):
                lines.pop()

        if not lines:
            if position == 0 or position == last:
                output.extend(block.lines)
            else:
                # only blank lines between two standalone blocks
                output.append('')
            continue

        if previous_standalone:
            output.append('')
        output.extend(lines)
        if next_standalone:
            output.append('')

    return '\n'.join(output)


def protect_inline_code(text: str, mapping: Dict[str, str]) -> str:
    """Swap every single-line inline code span for a placeholder."""

    def _substitute(match) -> str:
        original = match.group(0)
        token = make_placeholder(KIND_INLINE_CODE, original)
        mapping[token] = original
        return token

    return INLINE_CODE_REGEX.sub(_substitute, text)


def protect_markup(text: str) -> Tuple[str, Dict[str, str]]:
    """
    Protect code in a markdown document.

    Returns:
        (text with normalized block spacing and placeholders, {token: original})
    """
    mapping: Dict[str, str] = {}
    if not text:
        return text, mapping

    blocks = split_blocks(text, mapping)
    normalized = join_blocks(blocks)
    return protect_inline_code(normalized, mapping), mapping
