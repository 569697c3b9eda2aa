"""Search query compiler.

Turns a multi-value search parameter map into a `CompiledSearchRequest`.

Compilation runs in two passes:

1. categorize: fold the parameter handlers over the normalized parameters
   into an immutable `SearchCriteria`; unknown keys are ignored
2. assemble: build one ``bool.must`` conjunction from the criteria, in the
   order temporal, description, title, level, phrase, owner, tags, logbooks,
   properties

The compiler holds only its immutable configuration, so concurrent calls
need no locking.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Sequence

from dateutil import tz

from LogbookSearch.compiler.handlers import SearchCriteria, parameter_handlers
from LogbookSearch.core.models import (
    EPOCH,
    CompiledSearchRequest,
    MatchMode,
    PropertyPattern,
    SortField,
    TemporalRange,
)
from LogbookSearch.core.params import RawParameters, normalize_parameters
from LogbookSearch.core.query import (
    BoolQuery,
    DisMaxQuery,
    FuzzyQuery,
    MatchPhraseQuery,
    NestedQuery,
    Query,
    RangeQuery,
    WildcardQuery,
)
from LogbookSearch.utils.log import log

if TYPE_CHECKING:
    from LogbookSearch.config import SearchConfig

CREATED_DATE_FIELD = "createdDate"
EVENTS_PATH = "events"
EVENT_INSTANT_FIELD = "events.instant"
SEARCH_TIMEOUT_SECONDS = 60

_HANDLERS = parameter_handlers()


@dataclass(frozen=True, slots=True)
class SearchQueryCompiler:
    """Compile search parameters against a fixed index and page-size policy.

    Attributes:
        index: Base index name; requests target ``<index>*``.
        default_size: Page size used when no valid ``limit`` is given.
        max_size: Upper bound applied to every page size.
    """

    index: str
    default_size: int = 100
    max_size: int = 1000

    @classmethod
    def from_config(cls, config: SearchConfig) -> SearchQueryCompiler:
        """Create a compiler from the search section of the app config."""
        return cls(index=config.index, default_size=config.default_size, max_size=config.max_size)

    def compile(self, params: RawParameters, *, now: datetime | None = None) -> CompiledSearchRequest:
        """Compile search parameters into a search request.

        Args:
            params: Mapping of parameter name to one or more raw values.
            now: Evaluation time used as the default range end. Defaults to
                the current local time.

        Returns:
            Immutable compiled request.

        Raises:
            MalformedInputError: If a ``start`` or ``end`` value is malformed.
        """
        criteria = self.collect(params)
        now = _resolve_now(now)

        clauses: list[Query] = []
        temporal = _temporal_clause(criteria, now)
        if temporal is not None:
            clauses.append(temporal)

        for field, terms in (
            ("description", criteria.description),
            ("title", criteria.title),
            ("level", criteria.level),
        ):
            if terms:
                clauses.append(_text_clause(field, terms, criteria.match_mode))

        if criteria.phrases:
            clauses.append(DisMaxQuery(tuple(MatchPhraseQuery("description", phrase) for phrase in criteria.phrases)))
        if criteria.owners:
            clauses.append(DisMaxQuery(tuple(WildcardQuery("owner", owner) for owner in criteria.owners)))
        if criteria.tags:
            clauses.append(_nested_name_clause("tags", criteria.tags))
        if criteria.logbooks:
            clauses.append(_nested_name_clause("logbooks", criteria.logbooks))
        if criteria.properties:
            clauses.append(DisMaxQuery(tuple(_property_clause(pattern) for pattern in criteria.properties)))

        size = min(self.default_size if criteria.limit is None else criteria.limit, self.max_size)
        log.debug("Compiled search: clauses=%d size=%d", len(clauses), size)
        return CompiledSearchRequest(
            index=f"{self.index}*",
            query=BoolQuery(must=tuple(clauses)),
            sort=(SortField(CREATED_DATE_FIELD, "desc"),),
            offset=0,
            size=size,
            timeout_seconds=SEARCH_TIMEOUT_SECONDS,
        )

    @staticmethod
    def collect(params: RawParameters) -> SearchCriteria:
        """Categorize parameters into `SearchCriteria` (first compile pass)."""
        criteria = SearchCriteria()
        for key, values in normalize_parameters(params).items():
            handler = _HANDLERS.get(key)
            if handler is None:
                log.debug("Ignoring unsupported search parameter: %s", key)
                continue
            criteria = handler(criteria, key, values)
        return criteria


def _resolve_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(tz.tzlocal())
    if now.tzinfo is None:
        return now.replace(tzinfo=tz.tzlocal())
    return now


def _temporal_clause(criteria: SearchCriteria, now: datetime) -> Query | None:
    """Build the temporal filter, or None when it does not apply.

    An inverted or empty range (start not strictly before end) adds no
    constraint rather than failing the request.
    """
    if not criteria.is_temporal:
        return None
    window = TemporalRange(
        start=criteria.start if criteria.start is not None else EPOCH,
        end=criteria.end if criteria.end is not None else now,
    )
    if not window.is_ordered:
        log.debug("Dropping temporal filter: start=%s is not before end=%s", window.start, window.end)
        return None

    created = RangeQuery(CREATED_DATE_FIELD, gte=window.start_millis, lte=window.end_millis)
    if not criteria.include_events:
        return created
    events = NestedQuery(
        EVENTS_PATH,
        RangeQuery(EVENT_INSTANT_FIELD, gte=window.start_millis, lte=window.end_millis),
    )
    return DisMaxQuery((created, events))


def _text_clause(field: str, terms: Sequence[str], mode: MatchMode) -> DisMaxQuery:
    if mode is MatchMode.FUZZY:
        return DisMaxQuery(tuple(FuzzyQuery(field, term) for term in terms))
    return DisMaxQuery(tuple(WildcardQuery(field, term) for term in terms))


def _nested_name_clause(path: str, names: Sequence[str]) -> NestedQuery:
    return NestedQuery(path, DisMaxQuery(tuple(WildcardQuery(f"{path}.name", name) for name in names)))


def _property_clause(pattern: PropertyPattern) -> NestedQuery:
    """Build the two-level nested constraint for one property pattern.

    Attribute name and value constraints apply to the same attribute
    sub-document. Without a property name the attribute constraint matches
    across any property.
    """
    must: list[Query] = []
    if pattern.name is not None:
        must.append(WildcardQuery("properties.name", pattern.name))
    if pattern.attribute is not None:
        attribute_must: list[Query] = [WildcardQuery("properties.attributes.name", pattern.attribute)]
        if pattern.value is not None:
            attribute_must.append(WildcardQuery("properties.attributes.value", pattern.value))
        must.append(NestedQuery("properties.attributes", BoolQuery(must=tuple(attribute_must))))
    return NestedQuery("properties", BoolQuery(must=tuple(must)))
