"""Tests for deprecated-field normalization."""

import logging

import pytest

from captable_ledger.conversion import (
    EntityKind,
    check_deprecated_fields,
    get_deprecated_field_mappings,
    normalize_deprecated_fields,
    normalize_singular_to_array,
)


# =============================================================================
# Singular → Array
# =============================================================================

@pytest.mark.parametrize(
    "singular, array, expected",
    [
        ("x", None, ["x"]),
        ("x", ["y"], ["y"]),
        (None, None, []),
        ("", [], []),
        ("x", [], ["x"]),
        (None, ["a", "b"], ["a", "b"]),
        ("x", ("y",), ["y"]),
        ("x", "abc", ["x"]),
    ],
)
def test_normalize_singular_to_array(singular, array, expected):
    assert normalize_singular_to_array(singular, array) == expected


class TestStockPlanNormalization:
    """stock_class_id → stock_class_ids."""

    def test_singular_only(self):
        result = normalize_deprecated_fields("stock_plan", {"id": "p", "stock_class_id": "x"})
        assert result == {"id": "p", "stock_class_ids": ["x"]}

    def test_array_wins(self):
        result = normalize_deprecated_fields(
            "stock_plan", {"id": "p", "stock_class_id": "x", "stock_class_ids": ["y"]}
        )
        assert result == {"id": "p", "stock_class_ids": ["y"]}

    def test_neither_present(self):
        assert normalize_deprecated_fields("stock_plan", {}) == {"stock_class_ids": []}

    def test_both_empty(self):
        result = normalize_deprecated_fields(
            "stock_plan", {"stock_class_id": "", "stock_class_ids": []}
        )
        assert result == {"stock_class_ids": []}

    def test_input_is_not_modified(self):
        payload = {"id": "p", "stock_class_id": "x"}
        normalize_deprecated_fields("stock_plan", payload)
        assert payload == {"id": "p", "stock_class_id": "x"}

    def test_accepts_enum_kind(self):
        result = normalize_deprecated_fields(EntityKind.STOCK_PLAN, {"stock_class_id": "x"})
        assert result["stock_class_ids"] == ["x"]

    def test_string_array_is_left_for_validation(self):
        result = normalize_deprecated_fields("stock_plan", {"id": "p", "stock_class_ids": "sc-common"})
        assert result == {"id": "p", "stock_class_ids": "sc-common"}

    def test_malformed_array_emits_no_notice(self):
        notices = []
        result = normalize_deprecated_fields(
            "stock_plan", {"stock_class_id": "x", "stock_class_ids": "sc-common"}, notices.append
        )
        assert result == {"stock_class_ids": "sc-common"}
        assert notices == []


class TestNotices:
    """A notice is emitted only when a legacy value was actually used."""

    def test_notice_when_legacy_value_used(self):
        notices = []
        normalize_deprecated_fields("stock_plan", {"stock_class_id": "x"}, notices.append)
        assert len(notices) == 1
        assert notices[0].deprecated_field == "stock_class_id"
        assert notices[0].replacement_field == "stock_class_ids"
        assert notices[0].deprecated_value == "x"
        assert notices[0].kind == "stock_plan"

    def test_no_notice_when_array_wins(self):
        notices = []
        normalize_deprecated_fields(
            "stock_plan", {"stock_class_id": "x", "stock_class_ids": ["y"]}, notices.append
        )
        assert notices == []

    def test_no_notice_for_empty_legacy_value(self):
        notices = []
        normalize_deprecated_fields("stock_plan", {"stock_class_id": ""}, notices.append)
        assert notices == []

    def test_default_handler_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            normalize_deprecated_fields("stock_plan", {"stock_class_id": "x"})
        assert "stock_class_id" in caplog.text
        assert "stock_class_ids" in caplog.text

    def test_warn_false_is_silent(self, caplog):
        with caplog.at_level(logging.WARNING):
            normalize_deprecated_fields("stock_plan", {"stock_class_id": "x"}, warn=False)
        assert caplog.records == []


class TestRenamedField:
    """option_grant_type → compensation_type."""

    def test_legacy_value_is_mapped(self):
        result = normalize_deprecated_fields(
            "equity_compensation_issuance", {"option_grant_type": "NSO"}, warn=False
        )
        assert result == {"compensation_type": "OPTION_NSO"}

    def test_current_field_wins(self):
        result = normalize_deprecated_fields(
            "equity_compensation_issuance",
            {"option_grant_type": "NSO", "compensation_type": "RSU"},
            warn=False,
        )
        assert result == {"compensation_type": "RSU"}

    def test_absent_legacy_field_adds_nothing(self):
        result = normalize_deprecated_fields("equity_compensation_issuance", {"id": "x"})
        assert result == {"id": "x"}


def test_kinds_without_deprecations_pass_through():
    payload = {"id": "sh-1", "stock_class_id": "not-deprecated-here"}
    assert normalize_deprecated_fields("stakeholder", payload) == payload


def test_check_deprecated_fields():
    usage = check_deprecated_fields("stock_plan", {"stock_class_id": "x", "plan_name": "Plan"})
    assert usage.has_deprecated_fields
    assert usage.deprecated_fields_used == ["stock_class_id"]

    assert not check_deprecated_fields("stock_plan", {"stock_class_id": ""}).has_deprecated_fields
    assert not check_deprecated_fields("stakeholder", {"id": "x"}).has_deprecated_fields


def test_get_deprecated_field_mappings():
    mappings = get_deprecated_field_mappings("stock_plan")
    assert [m.deprecated_field for m in mappings] == ["stock_class_id"]
    assert mappings[0].deprecation_type == "singular_to_array"
    assert get_deprecated_field_mappings("document") == []
