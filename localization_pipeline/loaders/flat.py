"""Flattening stage: nested objects <-> slash-delimited flat records."""

from typing import Any, Dict, List, Optional, Tuple

from ..core.loader import BaseLoader
from ..features.plurals import is_icu_plural_object

KEY_SEPARATOR = '/'


def _is_leaf(value: Any) -> bool:
    if is_icu_plural_object(value):
        return True
    if isinstance(value, (dict, list)):
        return not value
    return True


def flatten(data: Any, paths: Optional[Dict[str, Tuple[str, ...]]] = None) -> Dict[str, Any]:
    """
    Flatten nested dicts and lists into ``{"a/b/0": value}``.

    Plural objects and empty containers are kept as leaves. When ``paths`` is
    given it receives the original key path of every flat key.
    """
    result: Dict[str, Any] = {}

    def _walk(value: Any, path: Tuple[str, ...]):
        if path and _is_leaf(value):
            key = KEY_SEPARATOR.join(path)
            result[key] = value
            if paths is not None:
                paths[key] = path
            return

        items = enumerate(value) if isinstance(value, list) else value.items()
        for key, child in items:
            _walk(child, path + (str(key),))

    if isinstance(data, (dict, list)):
        _walk(data, ())
    return result


def unflatten(
    record: Dict[str, Any],
    paths: Optional[Dict[str, Tuple[str, ...]]] = None,
    template: Any = None,
) -> Dict[str, Any]:
    """
    Rebuild nested dicts from a flat record.

    Keys are split on ``/`` unless ``paths`` knows their original path. Where
    ``template`` holds a list at the same path, the rebuilt dict becomes a
    list again.
    """
    root: Dict[str, Any] = {}

    for key, value in record.items():
        path = (paths or {}).get(key) or tuple(key.split(KEY_SEPARATOR))
        node = root
        for part in path[:-1]:
            child = node.get(part)
            if not isinstance(child, dict) or is_icu_plural_object(child):
                child = {}
                node[part] = child
            node = child
        node[path[-1]] = value

    return _restore_lists(root, template)


def _restore_lists(value: Any, template: Any) -> Any:
    if not isinstance(value, dict) or is_icu_plural_object(value):
        return value

    if isinstance(template, list) and all(key.isdigit() for key in value):
        items: List[Any] = []
        for key in sorted(value, key=int):
            index = int(key)
            child_template = template[index] if index < len(template) else None
            items.append(_restore_lists(value[key], child_template))
        return items

    return {
        key: _restore_lists(child, template.get(key) if isinstance(template, dict) else None)
        for key, child in value.items()
    }


class FlatLoader(BaseLoader):
    """
    Nested object -> flat record keyed by ``/``-joined paths.

    Example:
        {"nav": {"home": "Home"}, "tags": ["a", "b"]}
        -> {"nav/home": "Home", "tags/0": "a", "tags/1": "b"}

    Keys that themselves contain ``/`` are mapped back to their original
    nesting as long as they were seen during a pull.
    """

    def __init__(self):
        super().__init__()
        self._paths: Dict[str, Tuple[str, ...]] = {}

    async def _pull(self, locale: str, input_data: Any) -> Dict[str, Any]:
        return flatten(input_data or {}, self._paths)

    async def _push(
        self,
        locale: str,
        data: Any,
        original_input: Any,
        original_locale: str,
        pull_input: Any,
        pull_output: Any,
    ) -> Dict[str, Any]:
        return unflatten(data or {}, self._paths, original_input)
