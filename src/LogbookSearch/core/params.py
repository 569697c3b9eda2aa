"""Search parameter normalization and term extraction.

Search parameters arrive as a decoded query string: a mapping of key to an
ordered list of raw values. Keys are matched case-insensitively after
trimming. Values are split into terms using one of two delimiter sets:

- free text (description/title/level/owner): ``|`` ``,`` ``;`` and whitespace
- structured (tags/logbooks/properties): ``|`` ``,`` ``;`` only, since names
  may contain spaces
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Mapping, Sequence, Union
from urllib.parse import parse_qsl

from dateutil import tz

from LogbookSearch.core.errors import MalformedInputError
from LogbookSearch.core.models import PropertyPattern

RawParameters = Mapping[str, Union[str, Sequence[str]]]
SearchParameters = Mapping[str, tuple[str, ...]]

TIMESTAMP_PATTERN = "yyyy-MM-dd HH:mm:ss.SSS"

_FREE_TEXT_SPLIT_RE = re.compile(r"[|,;\s]+")
_STRUCTURED_SPLIT_RE = re.compile(r"[|,;]")
_TIMESTAMP_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}\.[0-9]{3}")
_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


def normalize_parameters(raw: RawParameters) -> dict[str, tuple[str, ...]]:
    """Normalize keys and drop parameters without values.

    Keys that collide after normalization (e.g. ``Tags`` and ``tags``) have
    their values concatenated in input order.

    Args:
        raw: Mapping of parameter name to one value or a list of values.

    Returns:
        Mapping of trimmed, lower-cased key to a non-empty value tuple.
    """
    normalized: dict[str, tuple[str, ...]] = {}
    for key, values in raw.items():
        if isinstance(values, str):
            values = (values,)
        values = tuple(str(value) for value in values)
        if not values:
            continue
        name = str(key).strip().lower()
        normalized[name] = normalized.get(name, ()) + values
    return normalized


def parse_query_string(text: str) -> dict[str, list[str]]:
    """Decode an HTTP query string into a multi-value mapping.

    Blank values are kept so bare flags such as ``fuzzy`` register.
    """
    params: dict[str, list[str]] = {}
    for key, value in parse_qsl(text.lstrip("?"), keep_blank_values=True):
        params.setdefault(key, []).append(value)
    return params


def split_free_text(value: str) -> list[str]:
    """Split a raw value on free-text delimiters into lower-cased terms."""
    return _clean_terms(_FREE_TEXT_SPLIT_RE.split(value))


def split_structured(value: str) -> list[str]:
    """Split a raw value on structured delimiters into lower-cased terms."""
    return _clean_terms(_STRUCTURED_SPLIT_RE.split(value))


def parse_property_pattern(term: str) -> PropertyPattern | None:
    """Parse ``name.attribute.value`` into a `PropertyPattern`.

    Missing or empty trailing segments leave that level unconstrained;
    segments beyond the third are ignored. A value without an attribute
    cannot be scoped and is dropped.

    Returns:
        Parsed pattern, or None when neither name nor attribute is given.
    """
    segments = [segment.strip() or None for segment in term.split(".")[:3]]
    segments += [None] * (3 - len(segments))
    name, attribute, value = segments
    if name is None and attribute is None:
        return None
    if attribute is None:
        value = None
    return PropertyPattern(name=name, attribute=attribute, value=value)


def parse_timestamp(key: str, value: str) -> datetime:
    """Parse a ``yyyy-MM-dd HH:mm:ss.SSS`` value in the local time zone.

    Raises:
        MalformedInputError: If the value does not match the pattern exactly.
    """
    if not _TIMESTAMP_RE.fullmatch(value):
        raise MalformedInputError(key, value, f"expected {TIMESTAMP_PATTERN}")
    try:
        parsed = datetime.strptime(value, _TIMESTAMP_FORMAT)
    except ValueError as error:
        raise MalformedInputError(key, value, str(error)) from error
    return parsed.replace(tzinfo=tz.tzlocal())


def _clean_terms(parts: Sequence[str]) -> list[str]:
    terms: list[str] = []
    for part in parts:
        term = part.strip().lower()
        if term:
            terms.append(term)
    return terms
