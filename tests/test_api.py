"""Tests for the boundary entry points."""

from __future__ import annotations

import json

import numpy as np
import pytest

from diffai import (
    ComputationFailure,
    InvalidConfiguration,
    UnsupportedVariant,
    ValidationFailure,
    WireRecord,
    diff,
    diff_paths,
    diff_records_to_dicts,
    format_output,
)
from diffai.api import render_diff_paths
from diffai.core.decoder import decode_record
from diffai.core.options import OutputFormat
from diffai.core.results import Added, Modified, TensorShapeChanged
from diffai.core.wire import ABSENT


class TestScenarios:
    def test_scalar_modification(self):
        records = diff({"a": 1}, {"a": 2})
        assert len(records) == 1
        record = records[0]
        assert record.diff_type == "Modified"
        assert record.path == "a"
        assert record.old_value == 1
        assert record.new_value == 2
        assert record.value is ABSENT
        for name in ("old_shape", "new_shape", "old_stats", "new_stats", "old_mean", "new_mean",
                     "change_magnitude", "old_string", "new_string", "old_float", "new_float"):
            assert getattr(record, name) is None

    def test_addition_round_trip(self):
        (record,) = diff({}, {"b": 5})
        assert record.diff_type == "Added"
        assert record.path == "b"
        assert record.new_value == 5
        assert decode_record(record) == Added("b", 5)

    def test_shape_change_round_trip(self):
        (record,) = diff({"w": np.ones((2, 3))}, {"w": np.ones((2, 4))})
        assert record.diff_type == "TensorShapeChanged"
        assert record.old_shape == [2, 3]
        assert record.new_shape == [2, 4]
        assert decode_record(record) == TensorShapeChanged("w", (2, 3), (2, 4))

    def test_unsupported_format_with_empty_records(self, counting_engine):
        with pytest.raises(InvalidConfiguration):
            format_output([], "xml", engine=counting_engine)
        assert counting_engine.calls == []

    def test_identical_values(self):
        assert diff({"a": 1, "b": 2}, {"a": 1, "b": 2}) == []

    def test_options_flow_to_engine(self):
        assert len(diff({"value": 1.0}, {"value": 1.0001})) == 1
        assert diff({"value": 1.0}, {"value": 1.0001}, {"epsilon": 0.001}) == []
        records = diff({"a": 1, "b": 2}, {"a": 2, "b": 3}, {"pathFilter": "a"})
        assert [r.path for r in records] == ["a"]


class TestFailFast:
    def test_invalid_regex_never_reaches_engine(self, counting_engine):
        with pytest.raises(InvalidConfiguration, match="Invalid regex"):
            diff({"a": 1}, {"a": 2}, {"ignore_keys_regex": "(("}, engine=counting_engine)
        assert counting_engine.calls == []

    def test_invalid_regex_diff_paths(self, counting_engine):
        with pytest.raises(InvalidConfiguration):
            diff_paths("a.json", "b.json", {"ignore_keys_regex": "*"}, engine=counting_engine)
        assert counting_engine.calls == []

    def test_invalid_output_format_option(self, counting_engine):
        with pytest.raises(InvalidConfiguration):
            diff(1, 2, {"output_format": "xml"}, engine=counting_engine)
        assert counting_engine.calls == []

    def test_valid_options_reach_engine_once(self, counting_engine):
        diff(1, 2, {"ignore_keys_regex": "^_", "epsilon": 0.1}, engine=counting_engine)
        assert len(counting_engine.calls) == 1
        _, options = counting_engine.calls[0]
        assert options.ignore_keys_regex.pattern == "^_"
        assert options.epsilon == 0.1

    def test_no_options_passes_none(self, counting_engine):
        diff(1, 2, engine=counting_engine)
        assert counting_engine.calls == [("compute_diff", None)]


class TestEngineFailures:
    def test_diff_error_wrapped(self, engine_factory):
        engine = engine_factory(fail="boom")
        with pytest.raises(ComputationFailure, match="^Diff error: boom$") as exc_info:
            diff(1, 2, engine=engine)
        assert exc_info.value.__cause__ is not None

    def test_diff_paths_error_wrapped(self, engine_factory):
        with pytest.raises(ComputationFailure, match="^Diff error: "):
            diff_paths("x", "y", engine=engine_factory(fail="missing"))

    def test_format_error_wrapped(self, engine_factory):
        with pytest.raises(ComputationFailure, match="^Format error: bad"):
            format_output([], "json", engine=engine_factory(fail="bad"))

    def test_missing_path_with_default_engine(self, tmp_path):
        with pytest.raises(ComputationFailure, match="does not exist"):
            diff_paths(str(tmp_path / "nope.json"), str(tmp_path / "nope2.json"))

    def test_non_string_keys_with_default_engine(self):
        with pytest.raises(ComputationFailure, match="^Diff error: Mapping keys must be strings"):
            diff({1: "a", "b": 2}, {"b": 3})

    def test_results_preserve_engine_order(self, engine_factory):
        canned = [Modified("z", 1, 2), Added("a", 1), Modified("m", 0, 1)]
        records = diff(None, None, engine=engine_factory(results=canned))
        assert [r.path for r in records] == ["z", "a", "m"]


class TestFormatOutput:
    def test_decodes_then_delegates(self, counting_engine):
        records = diff({"a": 1}, {"a": 2, "b": 3})
        assert format_output(records, "yaml", engine=counting_engine) == "yaml:2"
        assert counting_engine.calls == [("format", OutputFormat.YAML)]

    def test_json_output_parses(self):
        text = format_output(diff({"a": 1}, {"a": 2}), "json")
        assert json.loads(text) == [{"Modified": ["a", 1, 2]}]

    def test_accepts_plain_dicts(self):
        text = format_output([{"diffType": "Added", "path": "b", "newValue": 5}], "diffai")
        assert text == "+ b: 5"

    def test_unsupported_record_fails_whole_call(self, counting_engine):
        records = [
            WireRecord(diff_type="Added", path="a", new_value=1),
            WireRecord(diff_type="OptimizerChanged", path="o", old_string="sgd", new_string="adam"),
        ]
        with pytest.raises(UnsupportedVariant):
            format_output(records, "json", engine=counting_engine)
        assert counting_engine.calls == []

    def test_malformed_record_fails(self):
        with pytest.raises(ValidationFailure, match="Modified result must have old_value"):
            format_output([WireRecord(diff_type="Modified", path="a", new_value=2)], "json")

    def test_non_mapping_record_fails(self, counting_engine):
        with pytest.raises(ValidationFailure, match="Malformed diff record"):
            format_output(["oops"], "json", engine=counting_engine)
        assert counting_engine.calls == []

    def test_bad_record_reported_before_bad_format(self):
        with pytest.raises(UnsupportedVariant):
            format_output([WireRecord(diff_type="Nope", path="")], "xml")


def test_records_to_dicts_omits_absent():
    dicts = diff_records_to_dicts(diff({"a": 1}, {"a": 2}))
    assert dicts == [{"diff_type": "Modified", "path": "a", "old_value": 1, "new_value": 2}]


def test_wire_dicts_round_trip_through_json():
    records = diff({"lr": 0.1, "w": np.zeros(3)}, {"lr": 0.01, "w": np.zeros(4)})
    payload = json.loads(json.dumps(diff_records_to_dicts(records)))
    assert format_output(payload, "json") == format_output(records, "json")


def test_render_diff_paths_handles_encode_only_variants(tmp_path):
    (tmp_path / "a.json").write_text(json.dumps({"optimizer": "sgd"}), encoding="utf-8")
    (tmp_path / "b.json").write_text(json.dumps({"optimizer": "adam"}), encoding="utf-8")
    text = render_diff_paths(str(tmp_path / "a.json"), str(tmp_path / "b.json"), "diffai")
    assert text == "~ optimizer: optimizer sgd -> adam"


def test_render_diff_paths_rejects_bad_format_first(counting_engine):
    with pytest.raises(InvalidConfiguration):
        render_diff_paths("a", "b", "xml", engine=counting_engine)
    assert counting_engine.calls == []
