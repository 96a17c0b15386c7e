from __future__ import annotations

import pytest

from automator.core.context import (
    child_context,
    ensure_parameters,
    extract_attributes,
    merge_context,
)
from automator.facade import Automator
from automator.util.errors import MissingParameterError


def test_extract_attributes_keeps_only_requested_defined_keys() -> None:
    config = {"x": 1, "y": 2, "z": None}
    assert extract_attributes(config, ["x", "z", "w"]) == {"x": 1}


def test_extract_attributes_keeps_falsy_but_defined_values() -> None:
    config = {"title": "", "private": False, "content": 0}
    assert extract_attributes(config, ["title", "private", "content"]) == {
        "title": "",
        "private": False,
        "content": 0,
    }


def test_extract_attributes_returns_new_mapping() -> None:
    config = {"x": 1}
    extracted = extract_attributes(config, ["x"])
    extracted["x"] = 2
    assert config == {"x": 1}


def test_ensure_parameters_returns_config_unchanged() -> None:
    config = {"a": 1, "b": 2}
    assert ensure_parameters(config, "a", "b") is config


def test_ensure_parameters_reports_missing_key() -> None:
    config = {"a": 1}
    with pytest.raises(MissingParameterError) as excinfo:
        ensure_parameters(config, "a", "b")

    err = excinfo.value
    assert err.key == "b"
    assert err.type == "KeyError"
    assert str(err) == "Missing `b` key in config"
    assert err.data["config"] == {"a": 1}


def test_ensure_parameters_reports_first_missing_key_in_argument_order() -> None:
    # Named keys are checked one by one and the first miss is reported;
    # missing keys are not aggregated.
    with pytest.raises(MissingParameterError) as excinfo:
        ensure_parameters({"b": 1}, "c", "a", "b")
    assert excinfo.value.key == "c"


def test_ensure_parameters_treats_none_as_missing_and_is_a_key_error() -> None:
    with pytest.raises(KeyError):
        ensure_parameters({"storage": None}, "storage")


def test_ensure_parameters_without_keys_accepts_anything() -> None:
    assert ensure_parameters({}) == {}


def test_automator_exposes_helpers() -> None:
    assert Automator.extract_attributes({"a": 1, "b": 2}, ["a"]) == {"a": 1}
    with pytest.raises(MissingParameterError):
        Automator.ensure_parameters({}, "a")


def test_merge_context_prefers_override_keys() -> None:
    default = {"a": 1, "b": 1}
    merged = merge_context(default, {"b": 2, "c": 3})
    assert merged == {"a": 1, "b": 2, "c": 3}
    assert default == {"a": 1, "b": 1}


def test_merge_context_accepts_missing_sides() -> None:
    assert merge_context(None, None) == {}
    assert merge_context({"a": 1}, None) == {"a": 1}


def test_child_context_deep_copies_and_records_result() -> None:
    context = {"collab": {"id": 1}, "items": [1]}
    sub = child_context(context, "nav", "result")

    sub["collab"]["id"] = 2
    sub["items"].append(2)

    assert sub["nav"] == "result"
    assert context == {"collab": {"id": 1}, "items": [1]}
