"""
Filter Translator - query string -> backend-agnostic QuerySpec.

Supported query language (same for every resource):

    ?title=Backend Intern            equality
    ?minSalary=50                    catalog default (minSalary -> ">=")
    ?durationWeeks[lte]=12           comparison suffix: gt, gte, lt, lte, ne, in
    ?skills[in]=Python,SQL           in-set over a comma-separated list
    ?department=IT&department=Data   repeated key -> in-set
    ?select=title,minSalary          field selection
    ?sort=-minSalary,title           sort, leading "-" for descending
    ?page=2&limit=10                 pagination

The result never contains storage syntax. Translating is pure: no I/O and
no side effects. See internhub.services.mongo_query for the MongoDB adapter.
"""

import math
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from internhub.core.errors import InvalidQuery, UnsupportedResource


# ============================================================
# ENUMS
# ============================================================

class ResourceKind(str, Enum):
    companies = "companies"
    internships = "internships"


class Operator(str, Enum):
    eq = "eq"
    ne = "ne"
    gt = "gt"
    gte = "gte"
    lt = "lt"
    lte = "lte"
    in_ = "in"


class Direction(str, Enum):
    asc = "asc"
    desc = "desc"


class FieldType(str, Enum):
    string = "string"
    number = "number"
    boolean = "boolean"
    date = "date"


COMPARISONS = {Operator.gt, Operator.gte, Operator.lt, Operator.lte}


# ============================================================
# QUERY SPEC
# ============================================================

@dataclass(frozen=True)
class Condition:
    field: str
    operator: Operator
    value: Any


@dataclass(frozen=True)
class SortKey:
    field: str
    direction: Direction = Direction.asc


@dataclass(frozen=True)
class QuerySpec:
    conditions: Tuple[Condition, ...] = ()
    select: Tuple[str, ...] = ()
    sort: Tuple[SortKey, ...] = ()
    page: int = 1
    limit: int = 25

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def filter_fields(self) -> set:
        return {c.field for c in self.conditions}


@dataclass(frozen=True)
class FieldSpec:
    type: FieldType = FieldType.string
    default_operator: Operator = Operator.eq


# ============================================================
# FIELD CATALOG
# Declares operand types and default comparisons per resource.
# Fields outside the catalog are still accepted.
# ============================================================

FIELD_CATALOG: Dict[ResourceKind, Dict[str, FieldSpec]] = {
    ResourceKind.internships: {
        "jobId": FieldSpec(),
        "title": FieldSpec(),
        "description": FieldSpec(),
        "department": FieldSpec(),
        "address": FieldSpec(),
        "skills": FieldSpec(),
        "companyName": FieldSpec(),
        "minSalary": FieldSpec(FieldType.number, Operator.gte),
        "maxSalary": FieldSpec(FieldType.number, Operator.lte),
        "durationWeeks": FieldSpec(FieldType.number),
        "isRemote": FieldSpec(FieldType.boolean),
        "createdAt": FieldSpec(FieldType.date),
    },
    ResourceKind.companies: {
        "companyName": FieldSpec(),
        "description": FieldSpec(),
        "website": FieldSpec(),
        "email": FieldSpec(),
        "phone": FieldSpec(),
        "address": FieldSpec(),
        "industry": FieldSpec(),
        "size": FieldSpec(),
        "createdAt": FieldSpec(FieldType.date),
    },
}

RESERVED_KEYS = frozenset({"select", "sort", "page", "limit"})

DEFAULT_SORT = (SortKey("createdAt", Direction.desc),)
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 25
MAX_LIMIT = 100

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")
_SUFFIXED_KEY = re.compile(r"^(?P<field>[^\[\]]+)\[(?P<op>[^\[\]]*)\]$")
_TRUE = {"true", "1", "yes"}
_FALSE = {"false", "0", "no"}

RawValue = Union[str, Sequence[str]]


# ============================================================
# PUBLIC API
# ============================================================

def translate(raw_params: Mapping[str, RawValue], resource_kind: Union[ResourceKind, str]) -> QuerySpec:
    """
    Translate request query parameters into a QuerySpec.

    Args:
        raw_params: key -> string, or list of strings when the key repeats
        resource_kind: "companies" or "internships"

    Raises:
        UnsupportedResource: unknown resource kind
        InvalidQuery: malformed key, operand or pagination value
    """
    kind = resource_kind_of(resource_kind)
    catalog = FIELD_CATALOG[kind]

    conditions = []
    for key, raw in raw_params.items():
        if key in RESERVED_KEYS:
            continue
        field_name, operator = _split_key(key)
        if field_name in RESERVED_KEYS:
            raise InvalidQuery(f"Control parameter '{field_name}' does not take an operator")
        conditions.append(_condition(field_name, operator, raw, catalog.get(field_name)))

    limit = _positive_int(raw_params.get("limit"), "limit", DEFAULT_LIMIT)
    if limit > MAX_LIMIT:
        raise InvalidQuery(f"limit must not exceed {MAX_LIMIT}")

    return QuerySpec(
        conditions=tuple(conditions),
        select=tuple(_field_list(raw_params.get("select"), "select")),
        sort=_sort_keys(raw_params.get("sort")) or DEFAULT_SORT,
        page=_positive_int(raw_params.get("page"), "page", DEFAULT_PAGE),
        limit=limit,
    )


def resource_kind_of(value: Union[ResourceKind, str]) -> ResourceKind:
    try:
        return ResourceKind(value)
    except ValueError:
        raise UnsupportedResource(f"Resource '{value}' is not supported") from None


# ============================================================
# HELPERS
# ============================================================

def _split_key(key: str) -> Tuple[str, Optional[Operator]]:
    match = _SUFFIXED_KEY.match(key)
    if match:
        field_name, suffix = match.group("field"), match.group("op")
        try:
            operator = Operator(suffix)
        except ValueError:
            raise InvalidQuery(f"Unknown operator '{suffix}' on '{field_name}'") from None
    else:
        field_name, operator = key, None

    _check_field_name(field_name)
    return field_name, operator


def _check_field_name(name: str) -> None:
    if not _FIELD_NAME.match(name):
        raise InvalidQuery(f"Invalid field name '{name}'")


def _condition(field_name: str, operator: Optional[Operator], raw: RawValue,
               spec: Optional[FieldSpec]) -> Condition:
    if not isinstance(raw, str):
        values = list(raw)
        if operator in (None, Operator.in_):
            return Condition(field_name, Operator.in_,
                             [_coerce(field_name, v, spec, Operator.in_) for v in values])
        if len(values) != 1:
            raise InvalidQuery(f"'{field_name}[{operator.value}]' takes a single value")
        raw = values[0]

    if operator is Operator.in_:
        values = [v for v in raw.split(",") if v != ""]
        return Condition(field_name, operator, [_coerce(field_name, v, spec, operator) for v in values])

    if operator is None:
        operator = spec.default_operator if spec else Operator.eq

    return Condition(field_name, operator, _coerce(field_name, raw, spec, operator))


def _coerce(field_name: str, raw: str, spec: Optional[FieldSpec], operator: Operator) -> Any:
    if spec is None:
        if operator in COMPARISONS:
            number = _number(raw)
            return raw if number is None else number
        return raw

    if spec.type is FieldType.number:
        number = _number(raw)
        if number is None:
            raise InvalidQuery(f"'{field_name}' expects a number, got '{raw}'")
        return number

    if spec.type is FieldType.boolean:
        lowered = raw.lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise InvalidQuery(f"'{field_name}' expects true or false, got '{raw}'")

    if spec.type is FieldType.date:
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            raise InvalidQuery(f"'{field_name}' expects an ISO date, got '{raw}'") from None

    return raw


def _number(raw: str) -> Optional[Union[int, float]]:
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _single(raw: Optional[RawValue]) -> Optional[str]:
    if raw is None or isinstance(raw, str):
        return raw
    values = list(raw)
    return values[-1] if values else None


def _positive_int(raw: Optional[RawValue], name: str, default: int) -> int:
    raw = _single(raw)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise InvalidQuery(f"{name} must be a positive integer, got '{raw}'") from None
    if value < 1:
        raise InvalidQuery(f"{name} must be a positive integer, got '{raw}'")
    return value


def _field_list(raw: Optional[RawValue], name: str) -> List[str]:
    if raw is None:
        return []
    text = raw if isinstance(raw, str) else ",".join(raw)
    fields = [part.strip() for part in text.split(",") if part.strip()]
    for f in fields:
        _check_field_name(f[1:] if name == "sort" and f.startswith("-") else f)
    return fields


def _sort_keys(raw: Optional[RawValue]) -> Tuple[SortKey, ...]:
    keys = []
    for item in _field_list(raw, "sort"):
        if item.startswith("-"):
            keys.append(SortKey(item[1:], Direction.desc))
        else:
            keys.append(SortKey(item, Direction.asc))
    return tuple(keys)
