"""Tests for the query string helpers."""

from farmos_client.api_clients.query_builder import (
    append_array_of_params,
    append_param,
    array_param,
    compose,
    param,
    resource_path,
)


class TestAppendParam:
    def test_none_value_leaves_endpoint_unchanged(self):
        assert append_param("/log.json?", "done", None) == "/log.json?"
        assert append_param("/log.json?type[0]=a", "done", None) == "/log.json?type[0]=a"

    def test_no_separator_after_question_mark(self):
        assert append_param("/log.json?", "log_owner", 3) == "/log.json?log_owner=3"

    def test_ampersand_after_existing_params(self):
        assert (
            append_param("/log.json?log_owner=3", "page", 2)
            == "/log.json?log_owner=3&page=2"
        )

    def test_booleans_render_as_one_and_zero(self):
        assert append_param("/log.json?", "done", True) == "/log.json?done=1"
        assert append_param("/log.json?", "done", False) == "/log.json?done=0"

    def test_zero_is_a_defined_value(self):
        assert append_param("/farm_asset.json?", "page", 0) == "/farm_asset.json?page=0"


class TestAppendArrayOfParams:
    def test_indexes_each_element(self):
        assert (
            append_array_of_params("/log.json?", "type", ["farm_seeding", "farm_harvest"])
            == "/log.json?type[0]=farm_seeding&type[1]=farm_harvest"
        )

    def test_none_leaves_endpoint_unchanged(self):
        assert append_array_of_params("/log.json?", "type", None) == "/log.json?"

    def test_empty_list_leaves_endpoint_unchanged(self):
        assert append_array_of_params("/log.json?", "id", []) == "/log.json?"


class TestCompose:
    def test_applies_right_to_left(self):
        query = compose(
            param("log_owner", 1),
            param("done", False),
            array_param("type", ["farm_activity"]),
        )("/log.json?")
        assert query == "/log.json?type[0]=farm_activity&done=0&log_owner=1"

    def test_each_pair_appears_once_in_any_order(self):
        builders = [param("vocabulary", 2), param("name", "Corn"), param("page", 1)]
        forward = compose(*builders)("/taxonomy_term.json?")
        backward = compose(*reversed(builders))("/taxonomy_term.json?")

        def pairs(query):
            return sorted(query.split("?", 1)[1].split("&"))

        assert pairs(forward) == pairs(backward) == ["name=Corn", "page=1", "vocabulary=2"]

    def test_skipped_params_do_not_leave_separators(self):
        query = compose(param("name", None), param("vocabulary", 2))("/taxonomy_term.json?")
        assert query == "/taxonomy_term.json?vocabulary=2"


def test_resource_path():
    assert resource_path("farm_asset", 42) == "/farm_asset/42.json"
    assert resource_path("farm_asset") == "/farm_asset.json"
