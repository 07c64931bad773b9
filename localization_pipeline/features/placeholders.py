"""
Content-addressed placeholders.

Protected spans are swapped for tokens of the form
``---<KIND>-PLACEHOLDER-<md5>---`` before translation and swapped back
afterwards. The hash is taken over the exact protected text, so the same span
always produces the same token, in any document and any locale.
"""

import hashlib
import re
from typing import Dict, Iterable, List, Optional, Pattern, Tuple

from ..utils.logging import get_logger

logger = get_logger().get_logger('placeholders')

KIND_CODE = 'CODE'
KIND_INLINE_CODE = 'INLINE-CODE'
KIND_LOCKED_PATTERN = 'LOCKED-PATTERN'

PLACEHOLDER_KINDS = (KIND_CODE, KIND_INLINE_CODE, KIND_LOCKED_PATTERN)

# INLINE-CODE is listed before CODE so the alternation never stops at the shorter kind
PLACEHOLDER_REGEX = re.compile(
    r'---(INLINE-CODE|CODE|LOCKED-PATTERN)-PLACEHOLDER-([0-9a-f]{32})---'
)


def fingerprint(text: str) -> str:
    """Return the lowercase hex MD5 digest of ``text``."""
    return hashlib.md5(text.encode('utf-8')).hexdigest()


def make_placeholder(kind: str, text: str) -> str:
    """Build the placeholder token for ``text``."""
    if kind not in PLACEHOLDER_KINDS:
        raise ValueError(f"Unknown placeholder kind: {kind}")
    return f"---{kind}-PLACEHOLDER-{fingerprint(text)}---"


def find_placeholders(text: str, kind: Optional[str] = None) -> List[str]:
    """Return every placeholder token in ``text``, optionally of one kind."""
    return [
        match.group(0)
        for match in PLACEHOLDER_REGEX.finditer(text)
        if kind is None or match.group(1) == kind
    ]


class PlaceholderMap:
    """
    Token -> original text, recorded per locale.

    Owned by a single stage instance. Entries accumulate across pulls and are
    never pruned, so a later pull of the default locale cannot drop the tokens
    another locale still needs for its push.
    """

    def __init__(self):
        self._by_locale: Dict[str, Dict[str, str]] = {}

    def record(self, locale: str, mapping: Dict[str, str]) -> None:
        self._by_locale.setdefault(locale, {}).update(mapping)

    def for_locale(self, locale: str) -> Dict[str, str]:
        return dict(self._by_locale.get(locale, {}))

    def for_locales(self, *locales: Optional[str]) -> Dict[str, str]:
        """Union of the maps of the given locales, earlier locales first."""
        merged: Dict[str, str] = {}
        for locale in locales:
            if locale is None:
                continue
            for token, text in self._by_locale.get(locale, {}).items():
                merged.setdefault(token, text)
        return merged

    @property
    def locales(self) -> List[str]:
        return list(self._by_locale)

    def __len__(self) -> int:
        return len({token for mapping in self._by_locale.values() for token in mapping})

    def __contains__(self, token: str) -> bool:
        return any(token in mapping for mapping in self._by_locale.values())


def protect_patterns(
    text: str,
    patterns: Iterable[Pattern],
    kind: str = KIND_LOCKED_PATTERN
) -> Tuple[str, Dict[str, str]]:
    """
    Replace every match of every pattern with a placeholder.

    Patterns run in order, each over the text already rewritten by the
    previous ones. Empty matches are left alone.

    Returns:
        (protected text, {token: original text})
    """
    mapping: Dict[str, str] = {}

    def _substitute(match) -> str:
        matched = match.group(0)
        if not matched:
            return matched
        token = make_placeholder(kind, matched)
        mapping[token] = matched
        return token

    for pattern in patterns:
        text = pattern.sub(_substitute, text)

    return text, mapping


def restore_placeholders(text: str, mapping: Dict[str, str]) -> str:
    """
    Put the original text back in place of every known token.

    The replacement is inserted literally (no backreference expansion), so
    ``$&`` or ``\\1`` inside protected code survive untouched. Tokens missing
    from ``mapping`` are kept as they are.
    """
    if not mapping or not text:
        return text

    def _substitute(match) -> str:
        return mapping.get(match.group(0), match.group(0))

    # A restored span may itself contain tokens of this map (inline code
    # inside a protected block), hence the bounded repeat.
    restored = text
    for _ in range(len(PLACEHOLDER_KINDS)):
        updated = PLACEHOLDER_REGEX.sub(_substitute, restored)
        if updated == restored:
            break
        restored = updated

    unknown = [token for token in find_placeholders(restored) if token not in mapping]
    if unknown:
        logger.debug("Left %d unknown placeholder(s) in place: %s", len(unknown), ', '.join(unknown))

    return restored
