"""Tests for query-string to QuerySpec translation."""

from datetime import datetime

import pytest

from internhub.core.errors import InvalidQuery, UnsupportedResource
from internhub.services.query_filter import (
    DEFAULT_LIMIT,
    DEFAULT_SORT,
    Condition,
    Direction,
    Operator,
    ResourceKind,
    SortKey,
    translate,
)


def _only(spec):
    assert len(spec.conditions) == 1
    return spec.conditions[0]


def test_plain_key_is_equality():
    spec = translate({"title": "Backend Intern"}, "internships")
    assert _only(spec) == Condition("title", Operator.eq, "Backend Intern")


def test_min_salary_defaults_to_greater_or_equal():
    spec = translate({"minSalary": "50"}, ResourceKind.internships)
    assert _only(spec) == Condition("minSalary", Operator.gte, 50)


def test_max_salary_defaults_to_less_or_equal():
    spec = translate({"maxSalary": "90.5"}, "internships")
    assert _only(spec) == Condition("maxSalary", Operator.lte, 90.5)


@pytest.mark.parametrize("suffix,operator", [
    ("gt", Operator.gt),
    ("gte", Operator.gte),
    ("lt", Operator.lt),
    ("lte", Operator.lte),
    ("ne", Operator.ne),
])
def test_comparison_suffix(suffix, operator):
    spec = translate({f"durationWeeks[{suffix}]": "12"}, "internships")
    assert _only(spec) == Condition("durationWeeks", operator, 12)


def test_explicit_suffix_overrides_catalog_default():
    spec = translate({"minSalary[lt]": "30"}, "internships")
    assert _only(spec) == Condition("minSalary", Operator.lt, 30)


def test_repeated_key_is_in_set():
    spec = translate({"department": ["IT", "Data"]}, "internships")
    assert _only(spec) == Condition("department", Operator.in_, ["IT", "Data"])


def test_in_suffix_splits_on_commas():
    spec = translate({"skills[in]": "Python,SQL"}, "internships")
    assert _only(spec) == Condition("skills", Operator.in_, ["Python", "SQL"])


def test_unknown_field_with_comparison_becomes_number():
    spec = translate({"rating[gte]": "4"}, "companies")
    assert _only(spec) == Condition("rating", Operator.gte, 4)


def test_unknown_field_equality_stays_string():
    spec = translate({"zip": "02139"}, "companies")
    assert _only(spec).value == "02139"


def test_boolean_and_date_fields_are_coerced():
    spec = translate({"isRemote": "true", "createdAt[gte]": "2024-01-01"}, "internships")
    values = {c.field: c.value for c in spec.conditions}
    assert values["isRemote"] is True
    assert values["createdAt"] == datetime(2024, 1, 1)


def test_reserved_keys_never_reach_the_predicate():
    spec = translate(
        {"select": "title,minSalary", "sort": "-minSalary", "page": "2", "limit": "10", "title": "x"},
        "internships",
    )
    assert spec.filter_fields == {"title"}
    assert spec.select == ("title", "minSalary")
    assert spec.sort == (SortKey("minSalary", Direction.desc),)
    assert spec.page == 2
    assert spec.limit == 10
    assert spec.skip == 10


def test_reserved_key_with_operator_is_rejected():
    with pytest.raises(InvalidQuery):
        translate({"page[gte]": "2"}, "internships")


def test_defaults_without_controls():
    spec = translate({}, "companies")
    assert spec.conditions == ()
    assert spec.select == ()
    assert spec.sort == DEFAULT_SORT
    assert spec.page == 1
    assert spec.limit == DEFAULT_LIMIT


def test_sort_mixes_directions():
    spec = translate({"sort": "-minSalary,title"}, "internships")
    assert spec.sort == (SortKey("minSalary", Direction.desc), SortKey("title", Direction.asc))


@pytest.mark.parametrize("params", [
    {"page": "two"},
    {"limit": "ten"},
    {"page": "0"},
    {"limit": "-5"},
    {"limit": "1000"},
])
def test_malformed_pagination(params):
    with pytest.raises(InvalidQuery):
        translate(params, "internships")


@pytest.mark.parametrize("params", [
    {"$where": "1"},
    {"title[regex]": "x"},
    {"minSalary": "lots"},
    {"isRemote": "maybe"},
    {"createdAt": "yesterday"},
    {"sort": "$natural"},
    {"durationWeeks[gte]": ["1", "2"]},
])
def test_malformed_filters(params):
    with pytest.raises(InvalidQuery):
        translate(params, "internships")


def test_unknown_resource():
    with pytest.raises(UnsupportedResource):
        translate({}, "students")


def test_translation_does_not_touch_its_input():
    params = {"minSalary": "50", "department": ["IT", "Data"], "sort": "title"}
    snapshot = {k: list(v) if isinstance(v, list) else v for k, v in params.items()}
    first = translate(params, "internships")
    second = translate(params, "internships")
    assert first == second
    assert params == snapshot
