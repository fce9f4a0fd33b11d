"""Tests for property parsing."""

import pytest
from prometheus_client import REGISTRY
from structlog.testing import capture_logs

from tracing_bootstrap.errors import PropertyParseError
from tracing_bootstrap.sources import MappingSource
from tracing_bootstrap.tracing import properties as props


def _errors(logs):
    return [entry for entry in logs if entry["log_level"] == "error"]


class TestParseInt:
    @pytest.mark.parametrize("value, expected", [("6831", 6831), ("+5", 5), ("-5", -5), ("0", 0)])
    def test_valid(self, value, expected):
        assert props.parse_int("P", value) == expected

    @pytest.mark.parametrize("value", ["abc", "1.5", " 42", "1_000", "", "2147483648"])
    def test_invalid(self, value):
        with pytest.raises(PropertyParseError) as exc_info:
            props.parse_int("P", value)
        assert exc_info.value.name == "P"
        assert exc_info.value.value == value

    def test_port_range(self):
        assert props.parse_port("P", "65535") == 65535
        with pytest.raises(PropertyParseError):
            props.parse_port("P", "0")
        with pytest.raises(PropertyParseError):
            props.parse_port("P", "70000")

    def test_positive(self):
        with pytest.raises(PropertyParseError):
            props.parse_positive_int("P", "-1")


class TestParseBool:
    @pytest.mark.parametrize("value", ["true", "TRUE", "True"])
    def test_true(self, value):
        assert props.parse_bool("P", value) is True

    @pytest.mark.parametrize("value", ["false", "yes", "1", "on"])
    def test_anything_else_is_false(self, value):
        assert props.parse_bool("P", value) is False


class TestParseNumber:
    def test_valid(self):
        assert props.parse_number("P", "0.25") == 0.25
        assert props.parse_number("P", "2") == 2.0

    def test_digit_group_underscores_are_accepted(self):
        assert props.parse_number("P", "1_000") == 1000.0

    @pytest.mark.parametrize("value", ["abc", "nan", "inf", "0.5x"])
    def test_invalid(self, value):
        with pytest.raises(PropertyParseError):
            props.parse_number("P", value)


class TestGetProperty:
    def test_empty_is_unset(self):
        source = MappingSource({"JAEGER_AGENT_HOST": ""})
        assert props.get_property(source, "JAEGER_AGENT_HOST") is None

    def test_absent_int_is_unset_without_logging(self):
        with capture_logs() as logs:
            assert props.get_property_as_int(MappingSource({}), "JAEGER_AGENT_PORT") is None
        assert logs == []

    def test_malformed_int_is_logged_and_counted(self):
        labels = {"property": "JAEGER_REPORTER_MAX_QUEUE_SIZE", "kind": "integer"}
        before = REGISTRY.get_sample_value("tracing_bootstrap_property_errors_total", labels) or 0.0
        source = MappingSource({"JAEGER_REPORTER_MAX_QUEUE_SIZE": "lots"})

        with capture_logs() as logs:
            value = props.get_property_as_int(source, "JAEGER_REPORTER_MAX_QUEUE_SIZE")

        assert value is None
        errors = _errors(logs)
        assert len(errors) == 1
        assert errors[0]["property"] == "JAEGER_REPORTER_MAX_QUEUE_SIZE"
        assert errors[0]["value"] == "lots"
        after = REGISTRY.get_sample_value("tracing_bootstrap_property_errors_total", labels)
        assert after == before + 1

    def test_bool_empty_is_unset(self):
        source = MappingSource({"JAEGER_REPORTER_LOG_SPANS": ""})
        assert props.get_property_as_bool(source, "JAEGER_REPORTER_LOG_SPANS") is None


class TestTags:
    def test_parses_pairs(self):
        source = MappingSource({"JAEGER_TAGS": "region=eu, tier = web"})
        assert props.get_property_as_tags(source, "JAEGER_TAGS") == {"region": "eu", "tier": "web"}

    def test_skips_malformed_entries(self):
        source = MappingSource({"JAEGER_TAGS": "region=eu,broken,a=b=c"})
        with capture_logs() as logs:
            tags = props.get_property_as_tags(source, "JAEGER_TAGS")
        assert tags == {"region": "eu"}
        assert len(_errors(logs)) == 2

    def test_expands_environment_references(self, monkeypatch):
        monkeypatch.setenv("POD_NAME", "web-1")
        monkeypatch.delenv("MISSING_VAR", raising=False)
        source = MappingSource({"JAEGER_TAGS": "pod=${POD_NAME},zone=${MISSING_VAR:local}"})
        assert props.get_property_as_tags(source, "JAEGER_TAGS") == {"pod": "web-1", "zone": "local"}

    def test_absent(self):
        assert props.get_property_as_tags(MappingSource({}), "JAEGER_TAGS") == {}
