"""Tests for the QuerySpec -> MongoDB adapter."""

from pymongo import ASCENDING, DESCENDING

from internhub.services.mongo_query import build_filter, to_mongo
from internhub.services.query_filter import translate


def test_catalog_default_becomes_gte():
    query = to_mongo(translate({"minSalary": "50"}, "internships"))
    assert query.filter == {"minSalary": {"$gte": 50}}


def test_equality_is_a_bare_value():
    query = to_mongo(translate({"title": "Data Intern"}, "internships"))
    assert query.filter == {"title": "Data Intern"}


def test_conditions_on_one_field_merge():
    spec = translate({"minSalary[gte]": "50", "minSalary[lte]": "90"}, "internships")
    assert build_filter(spec) == {"minSalary": {"$gte": 50, "$lte": 90}}


def test_in_set():
    spec = translate({"skills": ["Python", "SQL"]}, "internships")
    assert build_filter(spec) == {"skills": {"$in": ["Python", "SQL"]}}


def test_projection_sort_and_paging():
    spec = translate({"select": "title,minSalary", "sort": "-minSalary,title",
                      "page": "3", "limit": "5"}, "internships")
    query = to_mongo(spec)
    assert query.projection == {"title": 1, "minSalary": 1}
    assert query.sort == [("minSalary", DESCENDING), ("title", ASCENDING)]
    assert query.skip == 10
    assert query.limit == 5


def test_no_select_means_no_projection():
    assert to_mongo(translate({}, "companies")).projection is None


def test_pipeline_stages_order():
    spec = translate({"title": "x", "select": "title"}, "internships")
    stages = to_mongo(spec).pipeline_stages()
    assert [next(iter(stage)) for stage in stages] == ["$match", "$sort", "$skip", "$limit", "$project"]
