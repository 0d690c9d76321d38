"""URL-encoded form decoding: flat pairs or extended bracket syntax.

Extended syntax nests values under bracketed keys::

    user[name]=Asha&user[tags][]=trek&user[tags][]=stay
    -> {"user": {"name": "Asha", "tags": ["trek", "stay"]}}

Numeric indices up to the array limit build lists (sparse indices are
compacted); larger indices become plain object keys. The array limit is
the larger of MIN_ARRAY_LIMIT and the number of fields in the body. Keys
nesting deeper than MAX_DEPTH are rejected.
"""

import re
from urllib.parse import parse_qsl

from yatra.errors import FormDepthError, TooManyParametersError

MAX_DEPTH = 32
MIN_ARRAY_LIMIT = 100

_BRACKETS = re.compile(r"\[([^\[\]]*)\]")


def parse_form(
    text: str,
    extended: bool = True,
    parameter_limit: int = 1000,
    encoding: str = "utf-8",
) -> dict:
    """Decode an ``application/x-www-form-urlencoded`` body."""
    if not text:
        return {}

    param_count = text.count("&") + 1
    if param_count > parameter_limit:
        raise TooManyParametersError(parameter_limit)

    pairs = parse_qsl(text, keep_blank_values=True, encoding=encoding, errors="replace")

    result: dict = {}
    if not extended:
        for key, value in pairs:
            _merge_leaf(result, key, value)
        return result

    array_limit = max(MIN_ARRAY_LIMIT, param_count)
    for key, value in pairs:
        segments = split_key(key)
        if segments[0]:
            _assign(result, segments, value, array_limit)
    return {key: _finalize(value) for key, value in result.items()}


def split_key(key: str, depth: int = MAX_DEPTH) -> list[str]:
    """Split ``a[b][]`` into ``["a", "b", ""]``.

    A key opening with a bracket takes its first bracket as the name, so
    ``[a]`` is ``["a"]``. A key without any balanced bracket stays whole.
    """
    first = _BRACKETS.search(key)
    if first is None:
        return [key]

    parent = key[:first.start()]
    children = _BRACKETS.findall(key, first.start())
    if len(children) > depth:
        raise FormDepthError(depth)
    return ([parent] if parent else []) + children


def _as_index(segment: str, array_limit: int) -> int | str:
    if segment.isascii() and segment.isdigit() and str(int(segment)) == segment:
        index = int(segment)
        if index <= array_limit:
            return index
    return segment


def _next_index(node: dict) -> int:
    indices = [key for key in node if isinstance(key, int)]
    return max(indices) + 1 if indices else 0


def _as_container(value) -> dict:
    if value is None:
        return {}
    if isinstance(value, list):
        return dict(enumerate(value))
    return {0: value}


def _merge_leaf(node: dict, key, value: str) -> None:
    existing = node.get(key)
    if key not in node:
        node[key] = value
    elif isinstance(existing, dict):
        existing[_next_index(existing)] = value
    elif isinstance(existing, list):
        existing.append(value)
    else:
        node[key] = [existing, value]


def _assign(result: dict, segments: list[str], value: str, array_limit: int) -> None:
    # Top-level keys are always names, never list indices
    head, *tail = segments
    if not tail:
        _merge_leaf(result, head, value)
        return

    node = result
    key: int | str = head
    for segment in tail:
        child = node.get(key)
        if not isinstance(child, dict):
            child = _as_container(child)
            node[key] = child
        node = child
        key = _next_index(node) if segment == "" else _as_index(segment, array_limit)
    _merge_leaf(node, key, value)


def _finalize(value):
    if isinstance(value, dict):
        if value and all(isinstance(key, int) for key in value):
            return [_finalize(value[key]) for key in sorted(value)]
        return {str(key): _finalize(item) for key, item in value.items()}
    return value
