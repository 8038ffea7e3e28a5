"""Bracketed query string handling for facet navigation.

Facet links carry two families of parameters:

    filter[Category][]=News&filter[Category][]="Press release"
    aggregation[tags]=Sport            (or aggregation[tags][]=Sport)

``parse_query_string`` turns a query string into nested dicts and lists,
``build_query_string`` turns that structure back into an identical query
string, and the ``with_*`` helpers add a selection without duplicating it
or dropping anything already active.

A key repeated without brackets (``Tag=a&Tag=b``) is kept as a
``RepeatedValue`` list and written back the same way.
"""

import re
from typing import Any
from urllib.parse import parse_qsl, quote

FILTER_PARAM = "filter"
AGGREGATION_PARAM = "aggregation"

_KEY_PATTERN = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")
_SEGMENT_PATTERN = re.compile(r"\[([^\[\]]*)\]")

Params = dict[str, Any]


class RepeatedValue(list):
    """Values of a key given more than once without a trailing ``[]``."""


def _split_key(key: str) -> list[str]:
    match = _KEY_PATTERN.match(key)
    if not match:
        return [key]
    return [match.group(1)] + _SEGMENT_PATTERN.findall(match.group(2))


def _assign(target: Params, path: list[str], value: str) -> None:
    head, rest = path[0], path[1:]
    if not rest:
        existing = target.get(head)
        if isinstance(existing, RepeatedValue):
            existing.append(value)
        elif isinstance(existing, str):
            target[head] = RepeatedValue([existing, value])
        else:
            target[head] = value
        return
    if rest == [""]:
        existing = target.get(head)
        if isinstance(existing, RepeatedValue):
            existing = list(existing)
        elif not isinstance(existing, list):
            existing = [] if existing is None else [existing]
        existing.append(value)
        target[head] = existing
        return
    child = target.get(head)
    if not isinstance(child, dict):
        child = {}
        target[head] = child
    _assign(child, rest, value)


def parse_query_string(query_string: str) -> Params:
    """Parse a query string, expanding ``a[b][]=c`` into nested containers."""
    params: Params = {}
    for key, value in parse_qsl(query_string.lstrip("?"), keep_blank_values=True):
        _assign(params, _split_key(key), value)
    return params


def _flatten(prefix: str, value: Any) -> list[tuple[str, str]]:
    if isinstance(value, dict):
        pairs: list[tuple[str, str]] = []
        for key, child in value.items():
            pairs.extend(_flatten(f"{prefix}[{key}]", child))
        return pairs
    if isinstance(value, RepeatedValue):
        return [(prefix, str(item)) for item in value]
    if isinstance(value, (list, tuple)):
        return [(f"{prefix}[]", str(item)) for item in value]
    return [(prefix, "" if value is None else str(value))]


def build_query_string(params: Params) -> str:
    """Inverse of ``parse_query_string``; brackets are left unescaped."""
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        pairs.extend(_flatten(key, value))
    return "&".join(f"{quote(k, safe='[]')}={quote(v, safe='')}" for k, v in pairs)


def link(base: str, query: str) -> str:
    """Append a query string to a base link."""
    if not query:
        return base
    separator = "&" if "?" in base else "?"
    return f"{base}{separator}{query}"


def with_filter(query_string: str, term: str, value: str) -> str:
    """Add ``filter[term][]=value`` unless that exact value is already active."""
    params = parse_query_string(query_string)
    filters = params.get(FILTER_PARAM)
    if not isinstance(filters, dict):
        filters = {}
    values = filters.get(term, [])
    if not isinstance(values, list):
        values = [values]
    if value not in values:
        values.append(value)
    filters[term] = values
    params[FILTER_PARAM] = filters
    return build_query_string(params)


def quoted(value: str) -> str:
    return f'"{value}"'


def with_aggregation(query_string: str, field: str, value: str) -> str:
    """Replace any aggregation selection with ``aggregation[field]=value``.

    Every other active parameter is kept.
    """
    params = parse_query_string(query_string)
    params.pop(AGGREGATION_PARAM, None)
    params[AGGREGATION_PARAM] = {field: value}
    return build_query_string(params)


def without(query_string: str, *names: str) -> str:
    params = parse_query_string(query_string)
    for name in names:
        params.pop(name, None)
    return build_query_string(params)


def active_filters(params: Params) -> dict[str, list[str]]:
    """``filter[...]`` selections as field to list of values."""
    raw = params.get(FILTER_PARAM)
    if not isinstance(raw, dict):
        return {}
    result: dict[str, list[str]] = {}
    for term, values in raw.items():
        if isinstance(values, dict):
            values = list(values.values())
        elif not isinstance(values, list):
            values = [values]
        cleaned = [str(v) for v in values if str(v).strip()]
        if cleaned:
            result[term] = cleaned
    return result


def active_aggregations(params: Params) -> dict[str, list[str]]:
    """``aggregation[...]`` selections as field to list of values."""
    raw = params.get(AGGREGATION_PARAM)
    if not isinstance(raw, dict):
        return {}
    result: dict[str, list[str]] = {}
    for field, values in raw.items():
        if isinstance(values, dict):
            values = list(values.values())
        elif not isinstance(values, list):
            values = [values]
        cleaned = [str(v) for v in values if str(v)]
        if cleaned:
            result[field] = cleaned
    return result
