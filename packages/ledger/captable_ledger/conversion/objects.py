"""Encoders and decoders for cap table objects (issuer, stakeholders, classes, plans...).

Every pair here satisfies ``decode(encode(x)) == x`` for a validated payload.
Native argument keys keep the OCF field names; only values change shape.
"""

from typing import Any, Dict

from ..schemas.base import Address, Email, Name, Phone, TaxId
from ..schemas.objects import (
    ContactInfo,
    DocumentPayload,
    IssuerPayload,
    ObjectReference,
    StakeholderPayload,
    StockClassPayload,
    StockLegendTemplatePayload,
    StockPlanPayload,
    ValuationPayload,
    VestingCondition,
    VestingTermsPayload,
    VestingTrigger,
)
from .primitives import (
    EnumCodec,
    as_list,
    date_to_ledger,
    decimal_to_ledger,
    ledger_to_date,
    ledger_to_decimal,
    ledger_to_monetary,
    ledger_to_shares_authorized,
    monetary_to_ledger,
    optional,
    shares_authorized_to_ledger,
)

NativeArgs = Dict[str, Any]


# =============================================================================
# Enum Codecs
# =============================================================================

ADDRESS_TYPE = EnumCodec("OcfAddressType", ["LEGAL", "CONTACT", "OTHER"])
EMAIL_TYPE = EnumCodec("OcfEmailType", ["PERSONAL", "BUSINESS", "OTHER"])
PHONE_TYPE = EnumCodec("OcfPhone", ["HOME", "MOBILE", "BUSINESS", "OTHER"])

STAKEHOLDER_TYPE = EnumCodec("OcfStakeholderType", ["INDIVIDUAL", "INSTITUTION"])
STAKEHOLDER_RELATIONSHIP = EnumCodec(
    "OcfRel",
    ["EMPLOYEE", "ADVISOR", "INVESTOR", "FOUNDER", "BOARD_MEMBER", "OFFICER", "OTHER"],
)
STAKEHOLDER_STATUS = EnumCodec(
    "OcfStakeholderStatus",
    [
        "ACTIVE",
        "LEAVE_OF_ABSENCE",
        "TERMINATION_VOLUNTARY_OTHER",
        "TERMINATION_VOLUNTARY_GOOD_CAUSE",
        "TERMINATION_VOLUNTARY_RETIREMENT",
        "TERMINATION_INVOLUNTARY_OTHER",
        "TERMINATION_INVOLUNTARY_DEATH",
        "TERMINATION_INVOLUNTARY_DISABILITY",
        "TERMINATION_INVOLUNTARY_WITH_CAUSE",
    ],
)

STOCK_CLASS_TYPE = EnumCodec("OcfStockClassType", ["COMMON", "PREFERRED"])
PLAN_CANCELLATION_BEHAVIOR = EnumCodec(
    "OcfPlanCancel",
    ["RETIRE", "RETURN_TO_POOL", "HOLD_AS_CAPITAL_STOCK", "DEFINED_PER_PLAN_SECURITY"],
)

VESTING_TRIGGER_TYPE = EnumCodec(
    "OcfVesting",
    [
        "VESTING_START_DATE",
        "VESTING_SCHEDULE_ABSOLUTE",
        "VESTING_SCHEDULE_RELATIVE",
        "VESTING_EVENT",
    ],
    overrides={
        "VESTING_START_DATE": "OcfVestingStartTrigger",
        "VESTING_SCHEDULE_ABSOLUTE": "OcfVestingScheduleAbsoluteTrigger",
        "VESTING_SCHEDULE_RELATIVE": "OcfVestingScheduleRelativeTrigger",
        "VESTING_EVENT": "OcfVestingEventTrigger",
    },
)
PERIOD_TYPE = EnumCodec("OcfPeriod", ["DAYS", "MONTHS", "YEARS"])
ALLOCATION_TYPE = EnumCodec(
    "OcfAllocation",
    [
        "CUMULATIVE_ROUNDING",
        "CUMULATIVE_ROUND_DOWN",
        "FRONT_LOADED",
        "BACK_LOADED",
        "FRONT_LOADED_TO_SINGLE_TRANCHE",
        "BACK_LOADED_TO_SINGLE_TRANCHE",
        "FRACTIONAL",
    ],
)
VALUATION_TYPE = EnumCodec(
    "OcfValuationType", ["409A"], overrides={"409A": "OcfValuationType409A"}
)


# =============================================================================
# Shared Value Objects
# =============================================================================

def name_to_ledger(name: Name) -> NativeArgs:
    return {
        "legal_name": name.legal_name,
        "first_name": name.first_name,
        "last_name": name.last_name,
    }


def ledger_to_name(native: NativeArgs) -> Name:
    return Name(
        legal_name=native["legal_name"],
        first_name=native.get("first_name"),
        last_name=native.get("last_name"),
    )


def address_to_ledger(address: Address, path: str) -> NativeArgs:
    return {
        "address_type": ADDRESS_TYPE.encode(address.address_type, f"{path}.address_type"),
        "country": address.country,
        "street_suite": address.street_suite,
        "city": address.city,
        "country_subdivision": address.country_subdivision,
        "postal_code": address.postal_code,
    }


def ledger_to_address(native: NativeArgs, path: str) -> Address:
    return Address(
        address_type=ADDRESS_TYPE.decode(native["address_type"], f"{path}.address_type"),
        country=native["country"],
        street_suite=native.get("street_suite"),
        city=native.get("city"),
        country_subdivision=native.get("country_subdivision"),
        postal_code=native.get("postal_code"),
    )


def email_to_ledger(email: Email, path: str) -> NativeArgs:
    return {
        "email_type": EMAIL_TYPE.encode(email.email_type, f"{path}.email_type"),
        "email_address": email.email_address,
    }


def ledger_to_email(native: NativeArgs, path: str) -> Email:
    return Email(
        email_type=EMAIL_TYPE.decode(native["email_type"], f"{path}.email_type"),
        email_address=native["email_address"],
    )


def phone_to_ledger(phone: Phone, path: str) -> NativeArgs:
    return {
        "phone_type": PHONE_TYPE.encode(phone.phone_type, f"{path}.phone_type"),
        "phone_number": phone.phone_number,
    }


def ledger_to_phone(native: NativeArgs, path: str) -> Phone:
    return Phone(
        phone_type=PHONE_TYPE.decode(native["phone_type"], f"{path}.phone_type"),
        phone_number=native["phone_number"],
    )


def tax_id_to_ledger(tax_id: TaxId) -> NativeArgs:
    return {"country": tax_id.country, "tax_id": tax_id.tax_id}


def ledger_to_tax_id(native: NativeArgs) -> TaxId:
    return TaxId(country=native["country"], tax_id=native["tax_id"])


# =============================================================================
# Issuer
# =============================================================================

def encode_issuer(payload: IssuerPayload) -> NativeArgs:
    return {
        "id": payload.id,
        "legal_name": payload.legal_name,
        "formation_date": date_to_ledger(payload.formation_date),
        "country_of_formation": payload.country_of_formation,
        "dba": payload.dba,
        "country_subdivision_of_formation": payload.country_subdivision_of_formation,
        "tax_ids": [tax_id_to_ledger(t) for t in payload.tax_ids],
        "email": optional(payload.email, lambda e: email_to_ledger(e, "issuer.email")),
        "phone": optional(payload.phone, lambda p: phone_to_ledger(p, "issuer.phone")),
        "address": optional(payload.address, lambda a: address_to_ledger(a, "issuer.address")),
        "initial_shares_authorized": optional(
            payload.initial_shares_authorized,
            lambda v: shares_authorized_to_ledger(v, "issuer.initial_shares_authorized"),
        ),
        "comments": list(payload.comments),
    }


def decode_issuer(native: NativeArgs) -> IssuerPayload:
    return IssuerPayload(
        id=native["id"],
        legal_name=native["legal_name"],
        formation_date=ledger_to_date(native["formation_date"], "issuer.formation_date"),
        country_of_formation=native["country_of_formation"],
        dba=native.get("dba"),
        country_subdivision_of_formation=native.get("country_subdivision_of_formation"),
        tax_ids=[ledger_to_tax_id(t) for t in as_list(native.get("tax_ids"))],
        email=optional(native.get("email"), lambda e: ledger_to_email(e, "issuer.email")),
        phone=optional(native.get("phone"), lambda p: ledger_to_phone(p, "issuer.phone")),
        address=optional(native.get("address"), lambda a: ledger_to_address(a, "issuer.address")),
        initial_shares_authorized=optional(
            native.get("initial_shares_authorized"),
            lambda v: ledger_to_shares_authorized(v, "issuer.initial_shares_authorized"),
        ),
        comments=as_list(native.get("comments")),
    )


# =============================================================================
# Stakeholder
# =============================================================================

def _contact_to_ledger(contact: ContactInfo) -> NativeArgs:
    path = "stakeholder.primary_contact"
    return {
        "name": name_to_ledger(contact.name),
        "phone_numbers": [phone_to_ledger(p, f"{path}.phone_numbers") for p in contact.phone_numbers],
        "emails": [email_to_ledger(e, f"{path}.emails") for e in contact.emails],
    }


def _ledger_to_contact(native: NativeArgs) -> ContactInfo:
    path = "stakeholder.primary_contact"
    return ContactInfo(
        name=ledger_to_name(native["name"]),
        phone_numbers=[
            ledger_to_phone(p, f"{path}.phone_numbers") for p in as_list(native.get("phone_numbers"))
        ],
        emails=[ledger_to_email(e, f"{path}.emails") for e in as_list(native.get("emails"))],
    )


def encode_stakeholder(payload: StakeholderPayload) -> NativeArgs:
    return {
        "id": payload.id,
        "name": name_to_ledger(payload.name),
        "stakeholder_type": STAKEHOLDER_TYPE.encode(
            payload.stakeholder_type, "stakeholder.stakeholder_type"
        ),
        "issuer_assigned_id": payload.issuer_assigned_id,
        "primary_contact": optional(payload.primary_contact, _contact_to_ledger),
        "addresses": [address_to_ledger(a, "stakeholder.addresses") for a in payload.addresses],
        "tax_ids": [tax_id_to_ledger(t) for t in payload.tax_ids],
        "current_relationships": [
            STAKEHOLDER_RELATIONSHIP.encode(r, "stakeholder.current_relationships")
            for r in payload.current_relationships
        ],
        "current_status": STAKEHOLDER_STATUS.encode_optional(
            payload.current_status, "stakeholder.current_status"
        ),
        "comments": list(payload.comments),
    }


def decode_stakeholder(native: NativeArgs) -> StakeholderPayload:
    return StakeholderPayload(
        id=native["id"],
        name=ledger_to_name(native["name"]),
        stakeholder_type=STAKEHOLDER_TYPE.decode(
            native["stakeholder_type"], "stakeholder.stakeholder_type"
        ),
        issuer_assigned_id=native.get("issuer_assigned_id"),
        primary_contact=optional(native.get("primary_contact"), _ledger_to_contact),
        addresses=[
            ledger_to_address(a, "stakeholder.addresses") for a in as_list(native.get("addresses"))
        ],
        tax_ids=[ledger_to_tax_id(t) for t in as_list(native.get("tax_ids"))],
        current_relationships=[
            STAKEHOLDER_RELATIONSHIP.decode(r, "stakeholder.current_relationships")
            for r in as_list(native.get("current_relationships"))
        ],
        current_status=STAKEHOLDER_STATUS.decode_optional(
            native.get("current_status"), "stakeholder.current_status"
        ),
        comments=as_list(native.get("comments")),
    )


# =============================================================================
# Stock Class and Stock Plan
# =============================================================================

def encode_stock_class(payload: StockClassPayload) -> NativeArgs:
    return {
        "id": payload.id,
        "name": payload.name,
        "class_type": STOCK_CLASS_TYPE.encode(payload.class_type, "stock_class.class_type"),
        "default_id_prefix": payload.default_id_prefix,
        "initial_shares_authorized": shares_authorized_to_ledger(
            payload.initial_shares_authorized, "stock_class.initial_shares_authorized"
        ),
        "votes_per_share": decimal_to_ledger(payload.votes_per_share),
        "seniority": decimal_to_ledger(payload.seniority),
        "board_approval_date": optional(payload.board_approval_date, date_to_ledger),
        "stockholder_approval_date": optional(payload.stockholder_approval_date, date_to_ledger),
        "par_value": optional(payload.par_value, monetary_to_ledger),
        "price_per_share": optional(payload.price_per_share, monetary_to_ledger),
        "liquidation_preference_multiple": optional(
            payload.liquidation_preference_multiple, decimal_to_ledger
        ),
        "participation_cap_multiple": optional(payload.participation_cap_multiple, decimal_to_ledger),
        "comments": list(payload.comments),
    }


def decode_stock_class(native: NativeArgs) -> StockClassPayload:
    p = "stock_class"
    return StockClassPayload(
        id=native["id"],
        name=native["name"],
        class_type=STOCK_CLASS_TYPE.decode(native["class_type"], f"{p}.class_type"),
        default_id_prefix=native["default_id_prefix"],
        initial_shares_authorized=ledger_to_shares_authorized(
            native["initial_shares_authorized"], f"{p}.initial_shares_authorized"
        ),
        votes_per_share=ledger_to_decimal(native["votes_per_share"], f"{p}.votes_per_share"),
        seniority=ledger_to_decimal(native["seniority"], f"{p}.seniority"),
        board_approval_date=optional(
            native.get("board_approval_date"), lambda v: ledger_to_date(v, f"{p}.board_approval_date")
        ),
        stockholder_approval_date=optional(
            native.get("stockholder_approval_date"),
            lambda v: ledger_to_date(v, f"{p}.stockholder_approval_date"),
        ),
        par_value=optional(native.get("par_value"), lambda v: ledger_to_monetary(v, f"{p}.par_value")),
        price_per_share=optional(
            native.get("price_per_share"), lambda v: ledger_to_monetary(v, f"{p}.price_per_share")
        ),
        liquidation_preference_multiple=optional(
            native.get("liquidation_preference_multiple"),
            lambda v: ledger_to_decimal(v, f"{p}.liquidation_preference_multiple"),
        ),
        participation_cap_multiple=optional(
            native.get("participation_cap_multiple"),
            lambda v: ledger_to_decimal(v, f"{p}.participation_cap_multiple"),
        ),
        comments=as_list(native.get("comments")),
    )


def encode_stock_plan(payload: StockPlanPayload) -> NativeArgs:
    return {
        "id": payload.id,
        "plan_name": payload.plan_name,
        "initial_shares_reserved": decimal_to_ledger(payload.initial_shares_reserved),
        "stock_class_ids": list(payload.stock_class_ids),
        "board_approval_date": optional(payload.board_approval_date, date_to_ledger),
        "stockholder_approval_date": optional(payload.stockholder_approval_date, date_to_ledger),
        "default_cancellation_behavior": PLAN_CANCELLATION_BEHAVIOR.encode_optional(
            payload.default_cancellation_behavior, "stock_plan.default_cancellation_behavior"
        ),
        "comments": list(payload.comments),
    }


def decode_stock_plan(native: NativeArgs) -> StockPlanPayload:
    p = "stock_plan"
    return StockPlanPayload(
        id=native["id"],
        plan_name=native["plan_name"],
        initial_shares_reserved=ledger_to_decimal(
            native["initial_shares_reserved"], f"{p}.initial_shares_reserved"
        ),
        stock_class_ids=as_list(native.get("stock_class_ids")),
        board_approval_date=optional(
            native.get("board_approval_date"), lambda v: ledger_to_date(v, f"{p}.board_approval_date")
        ),
        stockholder_approval_date=optional(
            native.get("stockholder_approval_date"),
            lambda v: ledger_to_date(v, f"{p}.stockholder_approval_date"),
        ),
        default_cancellation_behavior=PLAN_CANCELLATION_BEHAVIOR.decode_optional(
            native.get("default_cancellation_behavior"), f"{p}.default_cancellation_behavior"
        ),
        comments=as_list(native.get("comments")),
    )


# =============================================================================
# Stock Legend Template
# =============================================================================

def encode_stock_legend_template(payload: StockLegendTemplatePayload) -> NativeArgs:
    return {
        "id": payload.id,
        "name": payload.name,
        "text": payload.text,
        "comments": list(payload.comments),
    }


def decode_stock_legend_template(native: NativeArgs) -> StockLegendTemplatePayload:
    return StockLegendTemplatePayload(
        id=native["id"],
        name=native["name"],
        text=native["text"],
        comments=as_list(native.get("comments")),
    )


# =============================================================================
# Vesting Terms
# =============================================================================

def _trigger_to_ledger(trigger: VestingTrigger) -> NativeArgs:
    p = "vesting_terms.vesting_conditions.trigger"
    return {
        "type": VESTING_TRIGGER_TYPE.encode(trigger.type, f"{p}.type"),
        "date": optional(trigger.date, date_to_ledger),
        "period_length": trigger.period_length,
        "period_type": PERIOD_TYPE.encode_optional(trigger.period_type, f"{p}.period_type"),
        "occurrences": trigger.occurrences,
        "relative_to_condition_id": trigger.relative_to_condition_id,
    }


def _ledger_to_trigger(native: NativeArgs) -> VestingTrigger:
    p = "vesting_terms.vesting_conditions.trigger"
    return VestingTrigger(
        type=VESTING_TRIGGER_TYPE.decode(native["type"], f"{p}.type"),
        date=optional(native.get("date"), lambda v: ledger_to_date(v, f"{p}.date")),
        period_length=native.get("period_length"),
        period_type=PERIOD_TYPE.decode_optional(native.get("period_type"), f"{p}.period_type"),
        occurrences=native.get("occurrences"),
        relative_to_condition_id=native.get("relative_to_condition_id"),
    )


def _condition_to_ledger(condition: VestingCondition) -> NativeArgs:
    return {
        "id": condition.id,
        "trigger": _trigger_to_ledger(condition.trigger),
        "description": condition.description,
        "quantity": optional(condition.quantity, decimal_to_ledger),
        "next_condition_ids": list(condition.next_condition_ids),
    }


def _ledger_to_condition(native: NativeArgs) -> VestingCondition:
    return VestingCondition(
        id=native["id"],
        trigger=_ledger_to_trigger(native["trigger"]),
        description=native.get("description"),
        quantity=optional(
            native.get("quantity"),
            lambda v: ledger_to_decimal(v, "vesting_terms.vesting_conditions.quantity"),
        ),
        next_condition_ids=as_list(native.get("next_condition_ids")),
    )


def encode_vesting_terms(payload: VestingTermsPayload) -> NativeArgs:
    return {
        "id": payload.id,
        "name": payload.name,
        "description": payload.description,
        "allocation_type": ALLOCATION_TYPE.encode(
            payload.allocation_type, "vesting_terms.allocation_type"
        ),
        "vesting_conditions": [_condition_to_ledger(c) for c in payload.vesting_conditions],
        "comments": list(payload.comments),
    }


def decode_vesting_terms(native: NativeArgs) -> VestingTermsPayload:
    return VestingTermsPayload(
        id=native["id"],
        name=native["name"],
        description=native["description"],
        allocation_type=ALLOCATION_TYPE.decode(
            native["allocation_type"], "vesting_terms.allocation_type"
        ),
        vesting_conditions=[_ledger_to_condition(c) for c in native["vesting_conditions"]],
        comments=as_list(native.get("comments")),
    )


# =============================================================================
# Valuation
# =============================================================================

def encode_valuation(payload: ValuationPayload) -> NativeArgs:
    return {
        "id": payload.id,
        "stock_class_id": payload.stock_class_id,
        "price_per_share": monetary_to_ledger(payload.price_per_share),
        "effective_date": date_to_ledger(payload.effective_date),
        "valuation_type": VALUATION_TYPE.encode(payload.valuation_type, "valuation.valuation_type"),
        "provider": payload.provider,
        "board_approval_date": optional(payload.board_approval_date, date_to_ledger),
        "stockholder_approval_date": optional(payload.stockholder_approval_date, date_to_ledger),
        "comments": list(payload.comments),
    }


def decode_valuation(native: NativeArgs) -> ValuationPayload:
    p = "valuation"
    return ValuationPayload(
        id=native["id"],
        stock_class_id=native["stock_class_id"],
        price_per_share=ledger_to_monetary(native["price_per_share"], f"{p}.price_per_share"),
        effective_date=ledger_to_date(native["effective_date"], f"{p}.effective_date"),
        valuation_type=VALUATION_TYPE.decode(native["valuation_type"], f"{p}.valuation_type"),
        provider=native.get("provider"),
        board_approval_date=optional(
            native.get("board_approval_date"), lambda v: ledger_to_date(v, f"{p}.board_approval_date")
        ),
        stockholder_approval_date=optional(
            native.get("stockholder_approval_date"),
            lambda v: ledger_to_date(v, f"{p}.stockholder_approval_date"),
        ),
        comments=as_list(native.get("comments")),
    )


# =============================================================================
# Document
# =============================================================================

def encode_document(payload: DocumentPayload) -> NativeArgs:
    return {
        "id": payload.id,
        "md5": payload.md5,
        "path": payload.path,
        "uri": payload.uri,
        "related_objects": [
            {"object_type": r.object_type, "object_id": r.object_id}
            for r in payload.related_objects
        ],
        "comments": list(payload.comments),
    }


def decode_document(native: NativeArgs) -> DocumentPayload:
    return DocumentPayload(
        id=native["id"],
        md5=native["md5"],
        path=native.get("path"),
        uri=native.get("uri"),
        related_objects=[
            ObjectReference(object_type=r["object_type"], object_id=r["object_id"])
            for r in as_list(native.get("related_objects"))
        ],
        comments=as_list(native.get("comments")),
    )
