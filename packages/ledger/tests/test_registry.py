"""Tests for the entity conversion registry.

Tests cover:
- decode(encode(x)) == x for every entity kind
- Native value conventions (dates, decimals, enum tags, optionals)
- Natural-key validation with field paths
- Deprecated fields folded in before validation
- Decode failures on unknown tags and missing fields
"""

import json
from datetime import date
from decimal import Decimal

import pytest

from captable_ledger.conversion import (
    CONVERTERS,
    EntityKind,
    decode,
    encode,
    find_unsafe_value,
    get_converter,
)
from captable_ledger.errors import ErrorCode, ValidationError


# =============================================================================
# Round Trip
# =============================================================================

@pytest.mark.parametrize("kind", list(EntityKind), ids=lambda k: k.value)
def test_round_trip(kind, sample_payloads):
    payload = sample_payloads[kind]
    native = encode(kind, payload)
    assert decode(kind, native) == payload


@pytest.mark.parametrize("kind", list(EntityKind), ids=lambda k: k.value)
def test_encoded_payload_is_json_safe(kind, sample_payloads):
    native = encode(kind, sample_payloads[kind])
    assert find_unsafe_value(native) is None
    json.dumps(native)


def test_every_kind_is_registered():
    assert set(CONVERTERS) == set(EntityKind)


def test_round_trip_from_plain_dict(stakeholder_data):
    native = encode("stakeholder", stakeholder_data)
    decoded = decode("stakeholder", native)
    assert decoded.id == "sh-alice"
    assert decoded.name.first_name == "Alice"
    assert decoded.current_relationships == ["FOUNDER"]


# =============================================================================
# Native Conventions
# =============================================================================

class TestNativeConventions:
    """Values change shape; keys keep their OCF names."""

    def test_dates_become_ledger_time(self, sample_payloads):
        native = encode(EntityKind.STOCK_ISSUANCE, sample_payloads[EntityKind.STOCK_ISSUANCE])
        assert native["date"] == "2020-02-01T00:00:00.000Z"

    def test_decimals_become_plain_strings(self, sample_payloads):
        native = encode(EntityKind.STOCK_CLASS, sample_payloads[EntityKind.STOCK_CLASS])
        assert native["votes_per_share"] == "1"
        assert native["par_value"] == {"amount": "0.00001", "currency": "USD"}

    def test_enums_become_tags(self, sample_payloads):
        native = encode(EntityKind.STAKEHOLDER, sample_payloads[EntityKind.STAKEHOLDER])
        assert native["stakeholder_type"] == "OcfStakeholderTypeIndividual"
        assert native["current_relationships"] == ["OcfRelFounder", "OcfRelBoardMember"]
        assert native["current_status"] == "OcfStakeholderStatusActive"

    def test_irregular_tags(self, sample_payloads):
        valuation = encode(EntityKind.VALUATION, sample_payloads[EntityKind.VALUATION])
        assert valuation["valuation_type"] == "OcfValuationType409A"
        grant = encode(
            EntityKind.EQUITY_COMPENSATION_ISSUANCE,
            sample_payloads[EntityKind.EQUITY_COMPENSATION_ISSUANCE],
        )
        assert grant["compensation_type"] == "OcfCompensationTypeOptionISO"

    def test_absent_optionals_become_none(self, sample_payloads):
        native = encode(EntityKind.STOCK_PLAN, sample_payloads[EntityKind.STOCK_PLAN])
        assert native["board_approval_date"] is None

    def test_shares_authorized_variants(self, sample_payloads):
        numeric = encode(EntityKind.STOCK_CLASS, sample_payloads[EntityKind.STOCK_CLASS])
        assert numeric["initial_shares_authorized"] == {
            "tag": "OcfInitialSharesNumeric",
            "value": "10000000",
        }
        unlimited = encode(
            EntityKind.ISSUER_AUTHORIZED_SHARES_ADJUSTMENT,
            sample_payloads[EntityKind.ISSUER_AUTHORIZED_SHARES_ADJUSTMENT],
        )
        assert unlimited["new_shares_authorized"] == {
            "tag": "OcfInitialSharesEnum",
            "value": "OcfAuthorizedSharesUnlimited",
        }

    def test_blank_comments_are_dropped(self, stakeholder_data):
        stakeholder_data["comments"] = ["kept", "", "   "]
        assert encode("stakeholder", stakeholder_data)["comments"] == ["kept"]


def test_tags():
    assert get_converter("stock_class").tag("create") == "OcfCreateStockClass"
    assert get_converter("issuer").tag("edit") == "OcfEditIssuer"
    assert (
        get_converter(EntityKind.STOCK_PLAN_POOL_ADJUSTMENT).tag("delete")
        == "OcfDeleteStockPlanPoolAdjustment"
    )


def test_issuer_is_edit_only():
    spec = get_converter("issuer")
    assert not spec.allows("create")
    assert not spec.allows("delete")
    assert spec.allows("edit")


# =============================================================================
# Natural Key Validation
# =============================================================================

class TestIdValidation:
    """An empty id is treated as absent, with a field path in the error."""

    def test_encode_rejects_empty_id(self, stakeholder_data):
        stakeholder_data["id"] = ""
        with pytest.raises(ValidationError) as exc_info:
            encode("stakeholder", stakeholder_data)
        assert exc_info.value.field_path == "stakeholder.id"
        assert exc_info.value.code == ErrorCode.REQUIRED_FIELD_MISSING

    def test_encode_rejects_missing_id(self, stakeholder_data):
        del stakeholder_data["id"]
        with pytest.raises(ValidationError) as exc_info:
            encode("stakeholder", stakeholder_data)
        assert exc_info.value.field_path == "stakeholder.id"

    def test_encode_rejects_model_with_empty_id(self, sample_payloads):
        payload = sample_payloads[EntityKind.DOCUMENT].model_copy(update={"id": ""})
        with pytest.raises(ValidationError) as exc_info:
            encode(EntityKind.DOCUMENT, payload)
        assert exc_info.value.field_path == "document.id"

    def test_encode_rejects_non_string_id(self, stakeholder_data):
        stakeholder_data["id"] = 42
        with pytest.raises(ValidationError) as exc_info:
            encode("stakeholder", stakeholder_data)
        assert exc_info.value.code == ErrorCode.INVALID_TYPE

    def test_decode_rejects_empty_id(self, sample_payloads):
        native = encode(EntityKind.STOCK_CLASS, sample_payloads[EntityKind.STOCK_CLASS])
        native["id"] = ""
        with pytest.raises(ValidationError) as exc_info:
            decode(EntityKind.STOCK_CLASS, native)
        assert exc_info.value.field_path == "stock_class.id"


# =============================================================================
# Validation Failures
# =============================================================================

def test_unknown_kind():
    with pytest.raises(ValidationError) as exc_info:
        encode("stock_option_thing", {"id": "x"})
    assert exc_info.value.field_path == "kind"
    assert exc_info.value.code == ErrorCode.UNKNOWN_ENUM_VALUE


def test_pydantic_errors_carry_dotted_path(stakeholder_data):
    stakeholder_data["name"] = {"first_name": "Alice"}
    with pytest.raises(ValidationError) as exc_info:
        encode("stakeholder", stakeholder_data)
    assert exc_info.value.field_path == "stakeholder.name.legal_name"
    assert exc_info.value.code == ErrorCode.REQUIRED_FIELD_MISSING


def test_invalid_enum_value_is_rejected(stakeholder_data):
    stakeholder_data["stakeholder_type"] = "ROBOT"
    with pytest.raises(ValidationError) as exc_info:
        encode("stakeholder", stakeholder_data)
    assert exc_info.value.field_path == "stakeholder.stakeholder_type"
    assert exc_info.value.code == ErrorCode.UNKNOWN_ENUM_VALUE


def test_payload_must_be_mapping_or_model():
    with pytest.raises(ValidationError) as exc_info:
        encode("stakeholder", ["sh-1"])
    assert exc_info.value.code == ErrorCode.INVALID_TYPE


def test_decode_unknown_tag(sample_payloads):
    native = encode(EntityKind.STAKEHOLDER, sample_payloads[EntityKind.STAKEHOLDER])
    native["stakeholder_type"] = "OcfStakeholderTypeRobot"
    with pytest.raises(ValidationError) as exc_info:
        decode(EntityKind.STAKEHOLDER, native)
    assert exc_info.value.field_path == "stakeholder.stakeholder_type"
    assert exc_info.value.code == ErrorCode.UNKNOWN_ENUM_VALUE


def test_decode_missing_required_field(sample_payloads):
    native = encode(EntityKind.STOCK_PLAN, sample_payloads[EntityKind.STOCK_PLAN])
    del native["plan_name"]
    with pytest.raises(ValidationError) as exc_info:
        decode(EntityKind.STOCK_PLAN, native)
    assert exc_info.value.field_path == "stock_plan.plan_name"


def test_decode_malformed_date(sample_payloads):
    native = encode(EntityKind.VALUATION, sample_payloads[EntityKind.VALUATION])
    native["effective_date"] = "March 1st"
    with pytest.raises(ValidationError) as exc_info:
        decode(EntityKind.VALUATION, native)
    assert exc_info.value.field_path == "valuation.effective_date"
    assert exc_info.value.code == ErrorCode.INVALID_FORMAT


# =============================================================================
# Deprecated Fields Through the Registry
# =============================================================================

def test_stock_plan_legacy_field_is_encoded_as_array():
    native = encode(
        "stock_plan",
        {
            "id": "plan-1",
            "plan_name": "2019 Plan",
            "initial_shares_reserved": "1000000",
            "stock_class_id": "sc-common",
        },
        warn=False,
    )
    assert native["stock_class_ids"] == ["sc-common"]
    assert "stock_class_id" not in native


def test_option_grant_type_is_encoded_as_compensation_type():
    native = encode(
        "equity_compensation_issuance",
        {
            "id": "opt-1",
            "date": date(2020, 5, 1),
            "security_id": "EC-1",
            "custom_id": "EC-1",
            "stakeholder_id": "sh-bob",
            "option_grant_type": "ISO",
            "quantity": Decimal("1000"),
        },
        warn=False,
    )
    assert native["compensation_type"] == "OcfCompensationTypeOptionISO"


def test_string_stock_class_ids_is_rejected():
    with pytest.raises(ValidationError) as exc_info:
        encode(
            "stock_plan",
            {
                "id": "plan-1",
                "plan_name": "2019 Plan",
                "initial_shares_reserved": "1000000",
                "stock_class_ids": "sc-common",
            },
        )
    assert exc_info.value.field_path == "stock_plan.stock_class_ids"
    assert exc_info.value.code == ErrorCode.INVALID_TYPE
