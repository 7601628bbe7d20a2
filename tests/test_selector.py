from __future__ import annotations

from httpdimmer.core.selector import parse_document, resolve


def test_dotted_path() -> None:
    assert resolve({"a": {"b": 5}}, "a.b") == 5


def test_dotted_path_stops_at_null() -> None:
    assert resolve({"a": None}, "a.b") is None


def test_dotted_path_through_scalar_and_missing() -> None:
    assert resolve({"a": 3}, "a.b") is None
    assert resolve({"a": {}}, "a.b.c") is None


def test_dotted_path_trims_and_drops_empty_segments() -> None:
    assert resolve({"state": {"on": True}}, " state. .on ") is True


def test_dotted_path_indexes_arrays() -> None:
    doc = {"lights": [{"level": 10}, {"level": 20}]}
    assert resolve(doc, "lights.1.level") == 20
    assert resolve(doc, "lights.5.level") is None
    assert resolve(doc, "lights.x") is None


def test_jsonpath_query() -> None:
    assert resolve({"on": True}, "$.on") is True
    assert resolve({"state": {"brightness": 40}}, "$.state.brightness") == 40
    assert resolve({"lights": [{"on": "ON"}]}, "$.lights[0].on") == "ON"


def test_jsonpath_without_match_is_none() -> None:
    assert resolve({"other": 1}, "$.on") is None


def test_jsonpath_multiple_matches_returns_first_in_document_order() -> None:
    doc = {"lights": [{"on": "off"}, {"on": "on"}]}
    assert resolve(doc, "$.lights[*].on") == "off"


def test_empty_selector() -> None:
    assert resolve({"on": True}, "") is None
    assert resolve({"on": True}, "   ") is None
    assert resolve({"on": True}, None) is None


def test_parse_document() -> None:
    assert parse_document('{"on": true}') == (True, {"on": True})
    assert parse_document("128") == (True, 128)
    assert parse_document("ON") == (False, None)
    assert parse_document("") == (False, None)


def test_dotted_path_non_ascii_digit_is_not_an_index() -> None:
    assert resolve({"a": [1, 2]}, "a.²") is None
    assert resolve({"a": [1, 2]}, "a.١") is None
