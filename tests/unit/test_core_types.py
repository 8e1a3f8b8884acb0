"""Unit tests for core data types (LoadRule, LoadOutcome, flags).

Tests cover:
- Rule validation and immutability
- Source directory composition
- Flag evaluation
- Tenant attribute parsing
"""

import dataclasses

import pytest

from tenant_loader.core.types import (
    IdStrategy,
    LoadOutcome,
    LoadRule,
    flags_from_tenant_attributes,
    is_flag_enabled,
)


class TestLoadRule:
    """Test LoadRule data type."""

    def test_rule_defaults(self):
        rule = LoadRule(key="loadReference", lead="ref-data", file_path="groups", uri_path="groups")
        assert rule.strategy is IdStrategy.CONTENT
        assert rule.id_property == "id"
        assert rule.content_filter is None
        assert rule.accept_status == frozenset()

    def test_rule_is_frozen(self):
        rule = LoadRule(key="k", lead="", file_path="a", uri_path="a")
        with pytest.raises(dataclasses.FrozenInstanceError):
            rule.key = "other"

    def test_rule_requires_key(self):
        with pytest.raises(ValueError, match="key"):
            LoadRule(key="", lead="", file_path="a", uri_path="a")

    def test_rule_requires_uri_path(self):
        with pytest.raises(ValueError, match="uri_path"):
            LoadRule(key="k", lead="", file_path="a", uri_path="")

    def test_strategy_given_as_string(self):
        rule = LoadRule(key="k", lead="", file_path="a", uri_path="a", strategy="raw_post")
        assert rule.strategy is IdStrategy.RAW_POST
        assert rule.strategy.is_raw

    def test_accept_status_is_frozen_copy(self):
        codes = {409}
        rule = LoadRule(key="k", lead="", file_path="a", uri_path="a", accept_status=codes)
        codes.add(422)
        assert rule.accept_status == frozenset({409})

    @pytest.mark.parametrize(
        "lead,file_path,expected",
        [
            ("ref-data", "groups", "ref-data/groups"),
            ("ref-data", "", "ref-data"),
            ("", "groups", "groups"),
            ("/ref-data/", "/groups/", "ref-data/groups"),
        ],
    )
    def test_source_directory(self, lead, file_path, expected):
        rule = LoadRule(key="k", lead=lead, file_path=file_path, uri_path="x")
        assert rule.source_directory == expected

    def test_is_triggered(self):
        rule = LoadRule(key="loadSample", lead="", file_path="a", uri_path="a")
        assert rule.is_triggered({"loadSample": "true"})
        assert not rule.is_triggered({"loadSample": "false"})
        assert not rule.is_triggered({"loadReference": True})
        assert not rule.is_triggered({})


class TestLoadOutcome:
    def test_success(self):
        outcome = LoadOutcome.success(3)
        assert outcome.succeeded
        assert outcome.to_dict() == {"succeeded": True, "count": 3, "error": None}

    def test_failure_keeps_partial_count(self):
        outcome = LoadOutcome.failure("PUT x returned status 500", count=2)
        assert not outcome.succeeded
        assert outcome.count == 2
        assert outcome.error == "PUT x returned status 500"


class TestFlags:
    @pytest.mark.parametrize(
        "value,expected",
        [(True, True), ("true", True), (" True ", True), (False, False), ("1", False), (1, False)],
    )
    def test_is_flag_enabled(self, value, expected):
        assert is_flag_enabled(value) is expected

    def test_flags_from_tenant_attributes(self):
        attributes = {
            "module_to": "mod-users-1.0.0",
            "parameters": [
                {"key": "loadReference", "value": "true"},
                {"key": "loadSample", "value": "false"},
            ],
        }
        assert flags_from_tenant_attributes(attributes) == {
            "loadReference": "true",
            "loadSample": "false",
        }

    def test_flags_from_empty_attributes(self):
        assert flags_from_tenant_attributes(None) == {}
        assert flags_from_tenant_attributes({"module_to": "m"}) == {}

    def test_flags_from_malformed_attributes(self):
        with pytest.raises(ValueError, match="parameters"):
            flags_from_tenant_attributes({"parameters": {"key": "x"}})
        with pytest.raises(ValueError, match=r"parameters\[0\]"):
            flags_from_tenant_attributes({"parameters": [{"value": "true"}]})
