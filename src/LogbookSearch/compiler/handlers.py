"""Parameter handlers for the search query compiler.

Every recognized parameter key maps to exactly one handler. A handler takes
the criteria collected so far plus the raw values of its key and returns new
criteria; criteria are immutable, so a compile call folds handlers over the
parameters without any shared state.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional, Sequence

from LogbookSearch.core.models import MatchMode, PropertyPattern
from LogbookSearch.core.params import (
    parse_property_pattern,
    parse_timestamp,
    split_free_text,
    split_structured,
)
from LogbookSearch.utils.log import log

_LIMIT_RE = re.compile(r"[+-]?[0-9]+")
_INT32_MAX = 2**31 - 1


@dataclass(frozen=True, slots=True)
class SearchCriteria:
    """Search intent collected from one parameter map.

    Attributes:
        description: Free-text terms for the description field.
        title: Free-text terms for the title field.
        level: Free-text terms for the level field.
        match_mode: Matching applied to description/title/level terms.
        phrases: Exact phrases required in the description.
        owners: Owner name patterns.
        tags: Tag name patterns.
        logbooks: Logbook name patterns.
        properties: Parsed property patterns.
        start: Earliest requested start, None when not given.
        end: Latest requested end, None when not given.
        include_events: Also match event timestamps in the temporal filter.
        limit: Requested page size, None to use the configured default.
    """

    description: tuple[str, ...] = ()
    title: tuple[str, ...] = ()
    level: tuple[str, ...] = ()
    match_mode: MatchMode = MatchMode.WILDCARD
    phrases: tuple[str, ...] = ()
    owners: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    logbooks: tuple[str, ...] = ()
    properties: tuple[PropertyPattern, ...] = ()
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    include_events: bool = False
    limit: Optional[int] = None

    @property
    def is_temporal(self) -> bool:
        """True when a start or end parameter was supplied."""
        return self.start is not None or self.end is not None


ParameterHandler = Callable[[SearchCriteria, str, Sequence[str]], SearchCriteria]


def free_text_terms(values: Sequence[str]) -> tuple[str, ...]:
    return tuple(term for value in values for term in split_free_text(value))


def structured_terms(values: Sequence[str]) -> tuple[str, ...]:
    return tuple(term for value in values for term in split_structured(value))


def _description(criteria: SearchCriteria, key: str, values: Sequence[str]) -> SearchCriteria:
    return replace(criteria, description=criteria.description + free_text_terms(values))


def _title(criteria: SearchCriteria, key: str, values: Sequence[str]) -> SearchCriteria:
    return replace(criteria, title=criteria.title + free_text_terms(values))


def _level(criteria: SearchCriteria, key: str, values: Sequence[str]) -> SearchCriteria:
    return replace(criteria, level=criteria.level + free_text_terms(values))


def _fuzzy(criteria: SearchCriteria, key: str, values: Sequence[str]) -> SearchCriteria:
    return replace(criteria, match_mode=MatchMode.FUZZY)


def _phrase(criteria: SearchCriteria, key: str, values: Sequence[str]) -> SearchCriteria:
    phrases = tuple(phrase for phrase in (value.strip().lower() for value in values) if phrase)
    return replace(criteria, phrases=criteria.phrases + phrases)


def _owner(criteria: SearchCriteria, key: str, values: Sequence[str]) -> SearchCriteria:
    return replace(criteria, owners=criteria.owners + free_text_terms(values))


def _tags(criteria: SearchCriteria, key: str, values: Sequence[str]) -> SearchCriteria:
    return replace(criteria, tags=criteria.tags + structured_terms(values))


def _logbooks(criteria: SearchCriteria, key: str, values: Sequence[str]) -> SearchCriteria:
    return replace(criteria, logbooks=criteria.logbooks + structured_terms(values))


def _properties(criteria: SearchCriteria, key: str, values: Sequence[str]) -> SearchCriteria:
    patterns = [parse_property_pattern(term) for term in structured_terms(values)]
    return replace(
        criteria,
        properties=criteria.properties + tuple(pattern for pattern in patterns if pattern is not None),
    )


def _start(criteria: SearchCriteria, key: str, values: Sequence[str]) -> SearchCriteria:
    # Earliest start wins.
    instants = [parse_timestamp(key, value) for value in values]
    if criteria.start is not None:
        instants.append(criteria.start)
    return replace(criteria, start=min(instants))


def _end(criteria: SearchCriteria, key: str, values: Sequence[str]) -> SearchCriteria:
    # Latest end wins.
    instants = [parse_timestamp(key, value) for value in values]
    if criteria.end is not None:
        instants.append(criteria.end)
    return replace(criteria, end=max(instants))


def _include_events(criteria: SearchCriteria, key: str, values: Sequence[str]) -> SearchCriteria:
    return replace(criteria, include_events=True)


def _limit(criteria: SearchCriteria, key: str, values: Sequence[str]) -> SearchCriteria:
    value = values[0]
    if not _LIMIT_RE.fullmatch(value):
        log.warning("Encountered unparsable 'limit' value: %r", value)
        return criteria
    limit = int(value)
    if not 0 <= limit <= _INT32_MAX:
        log.warning("Encountered out-of-range 'limit' value: %s", value)
        return criteria
    return replace(criteria, limit=limit)


def parameter_handlers() -> dict[str, ParameterHandler]:
    """Return the handler registry keyed by normalized parameter name."""
    return {
        "description": _description,
        "desc": _description,
        "title": _title,
        "level": _level,
        "fuzzy": _fuzzy,
        "phrase": _phrase,
        "owner": _owner,
        "tags": _tags,
        "logbooks": _logbooks,
        "properties": _properties,
        "start": _start,
        "end": _end,
        "includeevents": _include_events,
        "includeevent": _include_events,
        "limit": _limit,
    }


def supported_parameter_names() -> tuple[str, ...]:
    """Return every parameter key the compiler recognizes."""
    return tuple(parameter_handlers().keys())
