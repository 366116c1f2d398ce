"""Tests for host option translation."""

from __future__ import annotations

import re

import pytest

from diffai.core.options import DiffOptions, HostOptions, OutputFormat, build_diff_options
from diffai.errors import InvalidConfiguration


def test_none_means_engine_defaults():
    assert build_diff_options(None) is None


def test_empty_mapping_gives_all_absent():
    assert build_diff_options({}) == DiffOptions()


def test_fields_copied_through():
    opts = build_diff_options({"epsilon": 0.001, "array_id_key": "id", "path_filter": "layers"})
    assert opts.epsilon == 0.001
    assert opts.array_id_key == "id"
    assert opts.path_filter == "layers"
    assert opts.ignore_keys_regex is None
    assert opts.output_format is None


def test_camel_case_keys():
    opts = build_diff_options({"arrayIdKey": "name", "pathFilter": "a", "ignoreKeysRegex": "^_"})
    assert opts.array_id_key == "name"
    assert opts.path_filter == "a"
    assert opts.ignore_keys_regex.pattern == "^_"


def test_host_options_dataclass():
    opts = build_diff_options(HostOptions(epsilon=-5, output_format="JSON"))
    assert opts.epsilon == -5
    assert opts.output_format is OutputFormat.JSON


def test_regex_compiled_eagerly():
    opts = build_diff_options({"ignore_keys_regex": r"^(timestamp|run_id)$"})
    assert isinstance(opts.ignore_keys_regex, re.Pattern)
    assert opts.ignore_keys_regex.search("timestamp")


def test_invalid_regex_fails():
    with pytest.raises(InvalidConfiguration, match="Invalid regex"):
        build_diff_options({"ignore_keys_regex": "[unclosed"})


def test_invalid_output_format_fails():
    with pytest.raises(InvalidConfiguration, match="Invalid output format"):
        build_diff_options({"output_format": "xml"})


@pytest.mark.parametrize(
    "config",
    [
        {"epsilon": "0.1"},
        {"epsilon": True},
        {"array_id_key": 3},
        {"path_filter": ["a"]},
        {"unknown_option": 1},
    ],
)
def test_wrongly_typed_options_rejected(config):
    with pytest.raises(InvalidConfiguration):
        build_diff_options(config)


def test_non_mapping_rejected():
    with pytest.raises(InvalidConfiguration):
        build_diff_options(["epsilon", 0.1])  # type: ignore[arg-type]


def test_options_are_immutable():
    opts = build_diff_options({"epsilon": 0.5})
    with pytest.raises(AttributeError):
        opts.epsilon = 1.0  # type: ignore[misc]


class TestOutputFormat:
    @pytest.mark.parametrize("name", ["json", "JSON", " yaml ", "diffai"])
    def test_parse_known(self, name):
        assert OutputFormat.parse(name).value == name.strip().lower()

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="xml"):
            OutputFormat.parse("xml")
