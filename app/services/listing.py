"""
In-memory filtering and sorting of record lists.

List endpoints load a venue's rows and run them through apply_query, so every
resource gets the same search/filter/sort semantics regardless of its table.
Records can be ORM objects or plain dicts.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from functools import cmp_to_key
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

_MISSING = object()

NumericRange = Tuple[Optional[float], Optional[float]]
DateRange = Tuple[Optional[date], Optional[date]]


@dataclass
class RecordQuery:
    """
    Filter and sort criteria for a list of records.

    Attributes:
        search: Case-insensitive substring to look for
        search_fields: Fields the search term is matched against
        memberships: field -> allowed values (empty collection means no filter)
        tags: Keep records whose tags_field shares at least one of these
        tags_field: Name of the record's tag list
        numeric_ranges: field -> inclusive (min, max); either bound may be None
        date_ranges: field -> inclusive (start, end); either bound may be None
        flags: field -> True keeps only records where the field is truthy
        sort_by: Field to sort on (None keeps input order)
        sort_order: "asc" or "desc"
    """
    search: Optional[str] = None
    search_fields: Sequence[str] = ()
    memberships: Dict[str, Iterable[Any]] = field(default_factory=dict)
    tags: Sequence[str] = ()
    tags_field: str = "tags"
    numeric_ranges: Dict[str, NumericRange] = field(default_factory=dict)
    date_ranges: Dict[str, DateRange] = field(default_factory=dict)
    flags: Dict[str, bool] = field(default_factory=dict)
    sort_by: Optional[str] = None
    sort_order: str = "asc"


def get_field(record: Any, name: str, default: Any = None) -> Any:
    """Read a field from a mapping key or an object attribute."""
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def _plain(value: Any) -> Any:
    # Enum members compare by their value
    return getattr(value, "value", value)


def _matches_search(record: Any, term: str, fields: Sequence[str]) -> bool:
    needle = term.lower()
    for name in fields:
        value = get_field(record, name, _MISSING)
        if value is _MISSING or value is None:
            continue
        if needle in str(_plain(value)).lower():
            return True
    return False


def _as_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value).date()
        except ValueError:
            return None
    return None


def filter_records(records: Iterable[Any], query: RecordQuery) -> List[Any]:
    """
    Apply the query's predicates in order and return the surviving records.

    Input order is preserved. Never raises for missing fields; a record
    without the field simply fails a search or range predicate. Records with
    no date are kept by date-range filters.
    """
    result = list(records)

    if query.search:
        result = [r for r in result if _matches_search(r, query.search, query.search_fields)]

    for name, allowed in query.memberships.items():
        allowed_values = {_plain(v) for v in allowed or ()}
        if not allowed_values:
            continue
        result = [r for r in result if _plain(get_field(r, name)) in allowed_values]

    if query.tags:
        wanted = set(query.tags)
        result = [r for r in result if wanted.intersection(get_field(r, query.tags_field) or ())]

    for name, (low, high) in query.numeric_ranges.items():
        if low is None and high is None:
            continue
        kept = []
        for r in result:
            value = get_field(r, name)
            if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
                continue
            if low is not None and value < low:
                continue
            if high is not None and value > high:
                continue
            kept.append(r)
        result = kept

    for name, (start, end) in query.date_ranges.items():
        if start is None and end is None:
            continue
        kept = []
        for r in result:
            value = _as_date(get_field(r, name))
            if value is None:
                kept.append(r)
                continue
            if start is not None and value < start:
                continue
            if end is not None and value > end:
                continue
            kept.append(r)
        result = kept

    for name, wanted_flag in query.flags.items():
        if wanted_flag:
            result = [r for r in result if get_field(r, name)]

    return result


def compare_values(a: Any, b: Any) -> int:
    """
    Three-way comparison used for sorting.

    Strings compare case-insensitively, numbers numerically and dates
    chronologically. Mixed or missing values compare equal.
    """
    a, b = _plain(a), _plain(b)
    if isinstance(a, str) and isinstance(b, str):
        a, b = a.lower(), b.lower()
    elif isinstance(a, (int, float)) and isinstance(b, (int, float)) \
            and not isinstance(a, bool) and not isinstance(b, bool):
        pass
    elif isinstance(a, datetime) and isinstance(b, datetime):
        pass
    elif isinstance(a, date) and isinstance(b, date) \
            and not isinstance(a, datetime) and not isinstance(b, datetime):
        pass
    else:
        return 0
    try:
        return (a > b) - (a < b)
    except TypeError:
        # naive vs aware datetimes
        return 0


def sort_records(records: Iterable[Any], sort_by: Optional[str], sort_order: str = "asc") -> List[Any]:
    """
    Stable sort on one field.

    Descending negates the comparison instead of reversing the list, so
    records that compare equal keep their input order either way.
    """
    items = list(records)
    if not sort_by:
        return items
    if sort_order not in ("asc", "desc"):
        raise ValueError(f"Invalid sort order: {sort_order}")
    sign = -1 if sort_order == "desc" else 1

    def _cmp(x, y):
        return sign * compare_values(get_field(x, sort_by), get_field(y, sort_by))

    return sorted(items, key=cmp_to_key(_cmp))


def apply_query(records: Iterable[Any], query: RecordQuery) -> List[Any]:
    """Filter, then sort."""
    return sort_records(filter_records(records, query), query.sort_by, query.sort_order)


def paginate(records: Sequence[Any], skip: int = 0, limit: int = 100) -> List[Any]:
    return list(records[skip:skip + limit])


APPLICATION_SEARCH_FIELDS = ("applicant_name", "applicant_email", "applicant_phone")

DATE_RANGE_WINDOWS = {
    "week": relativedelta(days=7),
    "month": relativedelta(months=1),
}


def date_range_cutoff(date_range: Optional[str], now: datetime) -> Optional[datetime]:
    """
    Earliest applied_at kept by a named window.

    "today" starts at midnight of now's day, "week" reaches back 7 days and
    "month" one calendar month. "all" or None disables the filter.
    """
    if not date_range or date_range == "all":
        return None
    if date_range == "today":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if date_range not in DATE_RANGE_WINDOWS:
        raise ValueError(f"Invalid date range: {date_range}")
    return now - DATE_RANGE_WINDOWS[date_range]


def filter_applications(
    applications: Iterable[Any],
    now: datetime,
    status: Optional[Iterable[str]] = None,
    department: Optional[str] = None,
    job_posting_id: Optional[Any] = None,
    date_range: Optional[str] = None,
    has_resume: bool = False,
    has_cover_letter: bool = False,
    min_rating: Optional[int] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = "applied_at",
    sort_order: str = "desc",
) -> List[Any]:
    """
    Application review filters.

    Department is read from the application's job posting. The date window is
    compared against applied_at as a full timestamp, unlike the day-granular
    date_ranges of RecordQuery. Applications without a rating are dropped
    when min_rating is set.
    """
    query = RecordQuery(
        search=search,
        search_fields=APPLICATION_SEARCH_FIELDS,
        memberships={"status": list(status or [])},
        flags={"resume_url": has_resume, "cover_letter": has_cover_letter},
        numeric_ranges={"rating": (min_rating, None)} if min_rating is not None else {},
        sort_by=sort_by,
        sort_order=sort_order,
    )
    result = filter_records(applications, query)

    if department:
        result = [
            a for a in result
            if get_field(get_field(a, "job_posting"), "department") == department
        ]
    if job_posting_id is not None:
        result = [a for a in result if str(get_field(a, "job_posting_id")) == str(job_posting_id)]

    cutoff = date_range_cutoff(date_range, now)
    if cutoff is not None:
        kept = []
        for a in result:
            applied_at = get_field(a, "applied_at")
            if applied_at is None:
                continue
            if (applied_at.tzinfo is None) != (cutoff.tzinfo is None):
                # SQLite hands back naive timestamps; compare wall-clock values
                applied_at = applied_at.replace(tzinfo=None)
                bound = cutoff.replace(tzinfo=None)
            else:
                bound = cutoff
            if applied_at >= bound:
                kept.append(a)
        result = kept

    return sort_records(result, query.sort_by, query.sort_order)
