"""
Plural forms <-> ICU MessageFormat.

Platform plural dictionaries (``{"one": "1 item", "other": "%d items"}``)
are turned into a single ICU plural expression for translation::

    {count, plural, one {1 item} other {# items}}

The printf specifiers the ICU string cannot express are kept in side
metadata so the reverse conversion restores them exactly::

    {"icu": "...", "_meta": {"variables": {"count": {"format": "%d", "role": "plural"}}}}

Known limitation: specifiers of each form are matched to variables by
position, using the form with the most specifiers as reference. Forms with a
different number of specifiers convert on a best-effort basis.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from babel import Locale, UnknownLocaleError

from ..core.errors import IcuParseError, PluralConversionError
from ..utils.logging import get_logger

logger = get_logger().get_logger('plurals')

CLDR_PLURAL_CATEGORIES = ('zero', 'one', 'two', 'few', 'many', 'other')
FALLBACK_PLURAL_CATEGORIES = ['one', 'other']

CATEGORY_TO_EXACT = {'zero': 0, 'one': 1, 'two': 2}
EXACT_TO_CATEGORY = {number: category for category, number in CATEGORY_TO_EXACT.items()}

ROLE_PLURAL = 'plural'
ROLE_OTHER = 'other'

PLURAL_VARIABLE_NAME = 'count'
DEFAULT_PLURAL_FORMAT = '%lld'
DEFAULT_ARGUMENT_FORMAT = '%@'

# %[position$][flags][width][.precision][length]conversion, e.g. %d %lld %.2f %@ %1$@
FORMAT_SPECIFIER_REGEX = re.compile(
    r'(%(?:(\d+)\$)?(?:[+-])?(?:\d+)?(?:\.(\d+))?([lhqLzjt]*)([diuoxXfFeEgGaAcspn@]))'
)
NUMERIC_CONVERSIONS = frozenset('diuoxXfFeE')

# literal text quoted with apostrophes inside a plural form body
ICU_SYNTAX_CHARS = frozenset('{}#')
ICU_QUOTABLE_CHARS = frozenset('{}#|')

ICU_PLURAL_REGEX = re.compile(r'^\{(\w+),\s*plural,\s*(.+)\}$', re.DOTALL)

CONTEXT_RADIUS = 50


class PluralObject(dict):
    """
    ICU plural value of a translatable record.

    A plain ``dict`` on the wire (``icu`` plus optional ``_meta``) whose type
    marks it as a plural object without inspecting its content. Values that
    went through JSON lose the type and are recognized structurally by
    :func:`is_icu_plural_object`.
    """

    def __init__(self, icu: str, variables: Optional[Dict[str, Dict[str, str]]] = None):
        super().__init__(icu=icu)
        if variables:
            self['_meta'] = {'variables': variables}

    @property
    def icu(self) -> str:
        return self['icu']

    @property
    def variables(self) -> Dict[str, Dict[str, str]]:
        return self.get('_meta', {}).get('variables', {})

    @classmethod
    def from_value(cls, value: Dict[str, Any]) -> 'PluralObject':
        """Re-tag an untyped plural object (e.g. parsed from JSON)."""
        if isinstance(value, cls):
            return value
        return cls(value['icu'], (value.get('_meta') or {}).get('variables'))


def is_icu_plural_object(value: Any) -> bool:
    """
    Tell plural objects apart from arbitrary record data.

    Tagged :class:`PluralObject` instances pass immediately. Other dicts must
    carry an ``icu`` string shaped like ``{name, plural, ...}`` and, when
    present, a ``_meta.variables`` map of ``{format: str, role: plural|other}``.
    """
    if isinstance(value, PluralObject):
        return True

    if not isinstance(value, dict):
        return False

    icu = value.get('icu')
    if not isinstance(icu, str) or not ICU_PLURAL_REGEX.match(icu):
        return False

    if '_meta' in value:
        meta = value['_meta']
        if not isinstance(meta, dict) or not isinstance(meta.get('variables'), dict):
            return False

        for variable in meta['variables'].values():
            if (
                not isinstance(variable, dict)
                or not isinstance(variable.get('format'), str)
                or variable.get('role') not in (ROLE_PLURAL, ROLE_OTHER)
            ):
                return False

    return True


def is_plural_forms_object(value: Any) -> bool:
    """
    Check for a platform plural dictionary.

    Every key must be a CLDR category, every value a string, and ``other``
    must be present since every language requires it.
    """
    if not isinstance(value, dict) or not value:
        return False

    if not all(key in CLDR_PLURAL_CATEGORIES for key in value):
        return False

    if not all(isinstance(text, str) for text in value.values()):
        return False

    return 'other' in value


def get_required_plural_categories(locale: str) -> List[str]:
    """
    Return the CLDR categories a language requires, in CLDR order.

    English needs ``one``/``other``, Russian ``one``/``few``/``many``/``other``,
    Chinese only ``other``. Unknown locales fall back to ``one``/``other``.
    """
    try:
        parsed = Locale.parse(locale.replace('-', '_'))
        tags = set(parsed.plural_form.tags) | {'other'}
    except (UnknownLocaleError, ValueError, TypeError, AttributeError) as e:
        logger.warning(
            'Failed to resolve plural categories for locale "%s". Using fallback %s. Error: %s',
            locale, FALLBACK_PLURAL_CATEGORIES, e
        )
        return list(FALLBACK_PLURAL_CATEGORIES)

    return [category for category in CLDR_PLURAL_CATEGORIES if category in tags]


def _analyze_variables(plural_forms: Dict[str, Any]) -> Dict[str, Dict[str, str]]:
    """Name the specifiers of the reference form (the one with the most)."""
    reference: List[re.Match] = []
    for form, text in plural_forms.items():
        if not isinstance(text, str):
            logger.warning('Plural form "%s" has non-string value: %r', form, text)
            continue
        matches = list(FORMAT_SPECIFIER_REGEX.finditer(text))
        if len(matches) > len(reference):
            reference = matches

    plural_index = -1
    for index, match in enumerate(reference):
        if match.group(5) in NUMERIC_CONVERSIONS:
            plural_index = index

    variables: Dict[str, Dict[str, str]] = {}
    counter = 0
    for index, match in enumerate(reference):
        if index == plural_index:
            variables[PLURAL_VARIABLE_NAME] = {'format': match.group(1), 'role': ROLE_PLURAL}
        else:
            variables[f'var{counter}'] = {'format': match.group(1), 'role': ROLE_OTHER}
            counter += 1

    return variables


def _quote_literal(text: str) -> str:
    """
    Quote ICU syntax characters in literal text.

    Runs of ``{``, ``}`` and ``#`` become ``'...'``. An apostrophe that could
    be read as the start or end of a quote is doubled.
    """
    result = []
    index = 0
    after_quote = False

    while index < len(text):
        char = text[index]
        if char in ICU_SYNTAX_CHARS:
            end = index
            while end < len(text) and text[end] in ICU_SYNTAX_CHARS:
                end += 1
            result.append(f"'{text[index:end]}'")
            index = end
            after_quote = True
            continue

        if char == "'":
            following = text[index + 1] if index + 1 < len(text) else ''
            # a body always continues with syntax after the literal
            if after_quote or not following or following in ICU_QUOTABLE_CHARS or following == "'":
                result.append("''")
            else:
                result.append("'")
        else:
            result.append(char)
        after_quote = False
        index += 1

    return ''.join(result)


def _to_icu_body(text: str, variables: Dict[str, Dict[str, str]]) -> str:
    names = list(variables)
    parts = []
    last = 0

    for position, match in enumerate(FORMAT_SPECIFIER_REGEX.finditer(text)):
        parts.append(_quote_literal(text[last:match.start()]))
        if position >= len(names) or variables[names[position]]['role'] == ROLE_PLURAL:
            parts.append('#')
        else:
            parts.append('{' + names[position] + '}')
        last = match.end()

    parts.append(_quote_literal(text[last:]))
    return ''.join(parts)


def plural_forms_to_icu(plural_forms: Dict[str, Any], source_locale: str = 'en') -> PluralObject:
    """
    Convert platform plural forms to an ICU plural object.

    Optional ``zero``/``one``/``two`` forms (not required by the locale)
    become exact matches ``=0``/``=1``/``=2``.

    Examples:
        plural_forms_to_icu({"one": "1 mile", "other": "%.1f miles"}, "en")
        -> {"icu": "{count, plural, one {1 mile} other {# miles}}",
            "_meta": {"variables": {"count": {"format": "%.1f", "role": "plural"}}}}

        plural_forms_to_icu({"zero": "No items", "one": "1 item", "other": "%d items"}, "en")
        -> icu "{count, plural, =0 {No items} one {1 item} other {# items}}"

    Raises:
        PluralConversionError: If ``plural_forms`` is empty
    """
    if not plural_forms:
        raise PluralConversionError("pluralForms cannot be empty")

    required = get_required_plural_categories(source_locale)
    variables = _analyze_variables(plural_forms)

    parts = []
    for form, text in plural_forms.items():
        if not isinstance(text, str):
            continue
        if form not in required and form in CATEGORY_TO_EXACT:
            key = f'={CATEGORY_TO_EXACT[form]}'
        else:
            key = form
        parts.append(f'{key} {{{_to_icu_body(text, variables)}}}')

    plural_name = next(
        (name for name, meta in variables.items() if meta['role'] == ROLE_PLURAL),
        PLURAL_VARIABLE_NAME
    )

    return PluralObject(f"{{{plural_name}, plural, {' '.join(parts)}}}", variables)


@dataclass
class IcuElement:
    """Piece of a plural form body: ``literal`` text, ``pound`` or an ``argument``."""
    type: str
    value: str = ''


@dataclass
class IcuPlural:
    """Parsed ``{name, plural, ...}`` expression."""
    variable: str
    options: Dict[str, List[IcuElement]]


def _context(text: str, position: int) -> str:
    return text[max(0, position - CONTEXT_RADIUS):min(len(text), position + CONTEXT_RADIUS)]


def _read_apostrophe(text: str, index: int) -> Tuple[str, int]:
    """
    Read the apostrophe at ``index``: ``''``, a quoted run or a plain ``'``.

    Returns the literal text and the index after it. A quote left open runs
    to the end of ``text``.
    """
    following = text[index + 1] if index + 1 < len(text) else ''
    if following == "'":
        return "'", index + 2
    if not following or following not in ICU_QUOTABLE_CHARS:
        return "'", index + 1

    value = ''
    index += 1
    while index < len(text):
        if text[index] == "'":
            if index + 1 < len(text) and text[index + 1] == "'":
                value += "'"
                index += 2
                continue
            return value, index + 1
        value += text[index]
        index += 1
    return value, index


def parse_form_body(text: str, icu: str = '') -> List[IcuElement]:
    """Split a form body into literals, ``#`` and ``{argument}`` references."""
    elements: List[IcuElement] = []
    literal = ''
    index = 0

    while index < len(text):
        char = text[index]
        if char == "'":
            value, index = _read_apostrophe(text, index)
            literal += value
        elif char == '#':
            if literal:
                elements.append(IcuElement('literal', literal))
                literal = ''
            elements.append(IcuElement('pound'))
            index += 1
        elif char == '{':
            if literal:
                elements.append(IcuElement('literal', literal))
                literal = ''
            depth = 1
            end = index + 1
            while end < len(text) and depth > 0:
                if text[end] == '{':
                    depth += 1
                elif text[end] == '}':
                    depth -= 1
                end += 1
            if depth != 0:
                raise IcuParseError("Unclosed variable reference", icu or text, _context(text, index))
            elements.append(IcuElement('argument', text[index + 1:end - 1]))
            index = end
        else:
            literal += char
            index += 1

    if literal:
        elements.append(IcuElement('literal', literal))

    return elements


def parse_icu_plural(icu: str) -> IcuPlural:
    """
    Parse an ICU plural expression with a brace-aware scanner.

    Raises:
        IcuParseError: If the ``plural`` keyword is missing, braces do not
            balance, or a form has no body
    """
    match = ICU_PLURAL_REGEX.match(icu.strip())
    if not match:
        raise IcuParseError("Invalid ICU plural format", icu, _context(icu, 0))

    variable, forms_text = match.group(1), match.group(2)
    options: Dict[str, List[IcuElement]] = {}
    length = len(forms_text)
    index = 0

    while index < length:
        while index < length and forms_text[index].isspace():
            index += 1
        if index >= length:
            break

        start = index
        if forms_text[index] == '=':
            index += 1
            while index < length and forms_text[index].isdigit():
                index += 1
        else:
            while index < length and (forms_text[index].isalnum() or forms_text[index] == '_'):
                index += 1
        form = forms_text[start:index]

        if not form or form == '=':
            raise IcuParseError(
                f"Unexpected character {forms_text[start]!r} where a plural form was expected",
                icu, _context(forms_text, start)
            )

        while index < length and forms_text[index].isspace():
            index += 1

        if index >= length or forms_text[index] != '{':
            raise IcuParseError(f"Expected '{{' after form name '{form}'", icu, _context(forms_text, index))

        index += 1
        depth = 1
        body_start = index
        while index < length and depth > 0:
            if forms_text[index] == "'":
                index = _read_apostrophe(forms_text, index)[1]
                continue
            if forms_text[index] == '{':
                depth += 1
            elif forms_text[index] == '}':
                depth -= 1
            index += 1

        if depth != 0:
            raise IcuParseError(
                f"Unclosed brace for form '{form}' in ICU MessageFormat.\n"
                f"Expected {depth} more closing brace(s).",
                icu, _context(forms_text, index)
            )

        options[form] = parse_form_body(forms_text[body_start:index - 1], icu)

    return IcuPlural(variable=variable, options=options)


def icu_to_plural_forms(data: Dict[str, Any]) -> Dict[str, str]:
    """
    Convert an ICU plural object back to platform plural forms.

    ``#`` becomes the plural variable's recorded format (``%lld`` without
    metadata) and ``{name}`` the named variable's format (``%@`` without
    metadata). ``=0``/``=1``/``=2`` map back to ``zero``/``one``/``two``.

    Example:
        icu_to_plural_forms({
            "icu": "{count, plural, one {# километр} other {# километров}}",
            "_meta": {"variables": {"count": {"format": "%.1f", "role": "plural"}}},
        })
        -> {"one": "%.1f километр", "other": "%.1f километров"}

    Raises:
        PluralConversionError: If the ICU string is missing
        IcuParseError: If the ICU string is malformed
    """
    icu = data.get('icu') if isinstance(data, dict) else None
    if not icu:
        raise PluralConversionError("ICU string is required")

    variables = (data.get('_meta') or {}).get('variables') or {}
    plural_format = next(
        (meta['format'] for meta in variables.values() if meta.get('role') == ROLE_PLURAL),
        DEFAULT_PLURAL_FORMAT
    )

    parsed = parse_icu_plural(icu)
    forms: Dict[str, str] = {}

    for form, elements in parsed.options.items():
        text = ''
        for element in elements:
            if element.type == 'literal':
                text += element.value
            elif element.type == 'pound':
                text += plural_format
            else:
                meta = variables.get(element.value)
                text += meta['format'] if meta else DEFAULT_ARGUMENT_FORMAT

        forms[_form_name(form)] = text

    return forms


def _form_name(form: str) -> str:
    if form.startswith('=') and form[1:].isdigit():
        return EXACT_TO_CATEGORY.get(int(form[1:]), form)
    return form

