"""Shared fixtures for the captable_ledger test suite."""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

import pytest

from captable_ledger.config import LedgerSettings
from captable_ledger.conversion import EntityKind
from captable_ledger.conversion.primitives import pascal_case
from captable_ledger.errors import ConflictError, NotFoundError, ProtocolError
from captable_ledger.state import ENTITY_FIELDS
from captable_ledger.schemas import (
    Address,
    AggregateHandle,
    CompiledRequest,
    ContactInfo,
    ConvertibleIssuancePayload,
    CreationEvent,
    DocumentPayload,
    Email,
    EquityCompensationExercisePayload,
    EquityCompensationIssuancePayload,
    ExecutionResult,
    ExercisedEvent,
    IssuerAuthorizedSharesAdjustmentPayload,
    IssuerPayload,
    Monetary,
    Name,
    ObjectReference,
    Phone,
    StakeholderPayload,
    StockCancellationPayload,
    StockClassAuthorizedSharesAdjustmentPayload,
    StockClassPayload,
    StockIssuancePayload,
    StockLegendTemplatePayload,
    StockPlanPayload,
    StockPlanPoolAdjustmentPayload,
    StockRepurchasePayload,
    StockTransferPayload,
    TaxId,
    ValuationPayload,
    ValueResource,
    VestingCondition,
    VestingTermsPayload,
    VestingTrigger,
    WarrantIssuancePayload,
)

CAP_TABLE_KIND = "Fairmint.OpenCapTable.CapTable:CapTable"
ISSUER_PARTY = "issuer::1220aa"

# Tag suffix (e.g. "StockClass") -> cap table record field
RECORD_FIELDS = {pascal_case(kind.value): field for field, kind in ENTITY_FIELDS.items()}


def usd(amount: str) -> Monetary:
    return Monetary(amount=Decimal(amount), currency="USD")


# ---------------------------------------------------------------------------
# In-memory ledger
# ---------------------------------------------------------------------------

class LedgerRejected(Exception):
    """Business-level rejection by the fake ledger (e.g. duplicate id)."""


class FakeLedger:
    """In-memory versioned ledger implementing the LedgerClient protocol.

    Every accepted submission consumes the targeted cap table version and
    creates a new one. All operations of a submission are checked before any
    is applied, so a rejected submission changes nothing.
    """

    def __init__(self, aggregate_kind: str = CAP_TABLE_KIND, embed_proofs: bool = True):
        self.aggregate_kind = aggregate_kind
        self.embed_proofs = embed_proofs
        self.version = 0
        self.current_id = self._version_id()
        self.entities: Dict[Tuple[str, str], dict] = {}
        self.resource_ids: Dict[Tuple[str, str], str] = {}
        self.submissions: List[CompiledRequest] = []
        self.lookups: List[str] = []
        self.optional_lookups: List[str] = []
        self.value_resources: Dict[str, List[ValueResource]] = {}
        self.context_resources: Dict[str, CreationEvent] = {}
        self.optional_resources: Dict[str, CreationEvent] = {}
        self.optional_failure: Optional[Exception] = None
        self._created: Dict[str, CreationEvent] = {
            self.current_id: self._event(self.current_id, with_proof=True)
        }

    def _version_id(self) -> str:
        return f"00captable{self.version:04d}"

    def _arguments(self) -> dict:
        arguments: dict = {field: {} for field in ENTITY_FIELDS}
        for (suffix, entity_id), resource_id in self.resource_ids.items():
            if suffix == "Issuer":
                arguments["issuer"] = resource_id
            else:
                arguments[RECORD_FIELDS[suffix]][entity_id] = resource_id
        return arguments

    def _event(self, resource_id: str, with_proof: bool) -> CreationEvent:
        return CreationEvent(
            resource_id=resource_id,
            resource_kind=self.aggregate_kind,
            provenance_blob=f"blob-{resource_id}" if with_proof else "",
            shard_id="sync::global",
            arguments=self._arguments(),
        )

    def handle(self) -> AggregateHandle:
        event = self._created[self.current_id]
        return AggregateHandle(
            resource_id=event.resource_id,
            resource_kind=event.resource_kind,
            provenance_blob=event.provenance_blob,
            shard_id=event.shard_id,
        )

    # --- LedgerClient ---

    async def submit(self, request: CompiledRequest) -> ExecutionResult:
        self.submissions.append(request)
        command = request.command
        if command.resource_id != self.current_id:
            raise ConflictError(
                f"Contract {command.resource_id} is not active", resource_id=command.resource_id
            )
        for proof in request.disclosed_contracts:
            if not proof.provenance_blob:
                raise ProtocolError(f"Empty disclosure for {proof.resource_id}")

        staged = dict(self.entities)
        staged_ids = dict(self.resource_ids)
        created_ids: List[str] = []
        edited_ids: List[str] = []
        next_version = self.version + 1

        for item in command.argument["creates"]:
            key = (item["tag"][len("OcfCreate"):], item["value"]["id"])
            if key in staged:
                raise LedgerRejected(f"Duplicate id {key}")
            staged[key] = item["value"]
            staged_ids[key] = f"{key[0]}:{key[1]}@{next_version}"
            created_ids.append(staged_ids[key])
        for item in command.argument["edits"]:
            key = (item["tag"][len("OcfEdit"):], item["value"]["id"])
            if key not in staged and key[0] != "Issuer":
                raise LedgerRejected(f"Unknown id {key}")
            staged[key] = item["value"]
            staged_ids[key] = f"{key[0]}:{key[1]}@{next_version}"
            edited_ids.append(staged_ids[key])
        for item in command.argument["deletes"]:
            key = (item["tag"][len("OcfDelete"):], item["value"])
            if key not in staged:
                raise LedgerRejected(f"Unknown id {key}")
            del staged[key]
            staged_ids.pop(key, None)

        consumed = self.current_id
        self.entities = staged
        self.resource_ids = staged_ids
        self.version = next_version
        self.current_id = self._version_id()
        self._created[self.current_id] = self._event(self.current_id, with_proof=True)

        return ExecutionResult(
            update_id=f"update-{self.version}",
            created_events=[self._event(self.current_id, with_proof=self.embed_proofs)],
            exercised_events=[
                ExercisedEvent(
                    resource_id=consumed,
                    resource_kind=self.aggregate_kind,
                    choice=command.choice,
                    result={"created_ids": created_ids, "edited_ids": edited_ids},
                )
            ],
        )

    async def lookup_by_id(self, resource_id: str) -> Optional[CreationEvent]:
        self.lookups.append(resource_id)
        return self._created.get(resource_id)

    async def list_active_resources(self, party: str, resource_kind: str) -> List[CreationEvent]:
        if resource_kind != self.aggregate_kind:
            return []
        return [self._created[self.current_id]]

    async def list_value_resources(self, principal: str) -> List[ValueResource]:
        return list(self.value_resources.get(principal, []))

    async def lookup_optional_resource(self, key: str) -> Optional[CreationEvent]:
        self.optional_lookups.append(key)
        if self.optional_failure is not None:
            raise self.optional_failure
        return self.optional_resources.get(key)

    async def fetch_context_resource(self, key: str) -> CreationEvent:
        try:
            return self.context_resources[key]
        except KeyError:
            raise NotFoundError(f"Context resource {key} not found", resource_kind=key)


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def ledger_without_proofs() -> FakeLedger:
    """Ledger whose execution results omit the successor's provenance blob."""
    return FakeLedger(embed_proofs=False)


@pytest.fixture
def settings() -> LedgerSettings:
    return LedgerSettings()


def context_event(resource_id: str, kind: str, blob: str = "") -> CreationEvent:
    return CreationEvent(
        resource_id=resource_id,
        resource_kind=kind,
        provenance_blob=blob or f"blob-{resource_id}",
        shard_id="sync::global",
    )


@pytest.fixture
def funded_ledger(ledger: FakeLedger) -> FakeLedger:
    """Ledger with pricing resources and three value resources for the payer."""
    ledger.context_resources = {
        "amulet_rules": context_event("rules-1", "Splice.AmuletRules:AmuletRules"),
        "open_mining_round": context_event("round-42", "Splice.Round:OpenMiningRound"),
    }
    ledger.value_resources["payer::1"] = [
        ValueResource(id="coin-10", effective_amount=Decimal("10"), provenance_blob="blob-coin-10"),
        ValueResource(id="coin-100", effective_amount=Decimal("100"), provenance_blob="blob-coin-100"),
        ValueResource(id="coin-60", effective_amount=Decimal("60"), provenance_blob="blob-coin-60"),
    ]
    return ledger


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------

@pytest.fixture
def stakeholder_data() -> dict:
    return {
        "id": "sh-alice",
        "name": {"legal_name": "Alice Founder", "first_name": "Alice", "last_name": "Founder"},
        "stakeholder_type": "INDIVIDUAL",
        "current_relationships": ["FOUNDER"],
    }


@pytest.fixture
def stock_class_data() -> dict:
    return {
        "id": "sc-common",
        "name": "Common Stock",
        "class_type": "COMMON",
        "default_id_prefix": "CS-",
        "initial_shares_authorized": "10000000",
        "votes_per_share": "1",
        "seniority": "1",
    }


@pytest.fixture
def sample_payloads() -> dict:
    """One valid, richly populated payload per entity kind."""
    return {
        EntityKind.ISSUER: IssuerPayload(
            id="issuer-1",
            legal_name="Acme Robotics, Inc.",
            formation_date=date(2020, 1, 15),
            country_of_formation="US",
            country_subdivision_of_formation="DE",
            tax_ids=[TaxId(country="US", tax_id="12-3456789")],
            email=Email(email_type="BUSINESS", email_address="legal@acme.test"),
            address=Address(address_type="LEGAL", country="US", city="Wilmington"),
            initial_shares_authorized=Decimal("10000000"),
            comments=["Delaware C-corp"],
        ),
        EntityKind.STAKEHOLDER: StakeholderPayload(
            id="sh-alice",
            name=Name(legal_name="Alice Founder", first_name="Alice", last_name="Founder"),
            stakeholder_type="INDIVIDUAL",
            primary_contact=ContactInfo(
                name=Name(legal_name="Alice Founder"),
                emails=[Email(email_type="PERSONAL", email_address="alice@acme.test")],
                phone_numbers=[Phone(phone_type="MOBILE", phone_number="+1 555 0100")],
            ),
            addresses=[Address(address_type="CONTACT", country="US", postal_code="94107")],
            current_relationships=["FOUNDER", "BOARD_MEMBER"],
            current_status="ACTIVE",
        ),
        EntityKind.STOCK_CLASS: StockClassPayload(
            id="sc-common",
            name="Common Stock",
            class_type="COMMON",
            default_id_prefix="CS-",
            initial_shares_authorized=Decimal("10000000"),
            votes_per_share=Decimal("1"),
            seniority=Decimal("1"),
            board_approval_date=date(2020, 1, 20),
            par_value=usd("0.00001"),
        ),
        EntityKind.STOCK_PLAN: StockPlanPayload(
            id="plan-2020",
            plan_name="2020 Equity Incentive Plan",
            initial_shares_reserved=Decimal("1500000"),
            stock_class_ids=["sc-common"],
            default_cancellation_behavior="RETURN_TO_POOL",
        ),
        EntityKind.STOCK_LEGEND_TEMPLATE: StockLegendTemplatePayload(
            id="legend-144",
            name="Rule 144",
            text="THESE SECURITIES HAVE NOT BEEN REGISTERED UNDER THE SECURITIES ACT.",
        ),
        EntityKind.VESTING_TERMS: VestingTermsPayload(
            id="vt-4y-1y-cliff",
            name="4 year, 1 year cliff",
            description="25% after twelve months, then monthly",
            allocation_type="CUMULATIVE_ROUNDING",
            vesting_conditions=[
                VestingCondition(
                    id="start",
                    trigger=VestingTrigger(type="VESTING_START_DATE"),
                    quantity=Decimal("0"),
                    next_condition_ids=["cliff"],
                ),
                VestingCondition(
                    id="cliff",
                    description="one-year cliff",
                    trigger=VestingTrigger(
                        type="VESTING_SCHEDULE_RELATIVE",
                        period_length=12,
                        period_type="MONTHS",
                        occurrences=1,
                        relative_to_condition_id="start",
                    ),
                ),
            ],
        ),
        EntityKind.VALUATION: ValuationPayload(
            id="val-2021",
            stock_class_id="sc-common",
            price_per_share=usd("0.25"),
            effective_date=date(2021, 3, 1),
            provider="Acme Valuations LLC",
        ),
        EntityKind.DOCUMENT: DocumentPayload(
            id="doc-coi",
            md5="d41d8cd98f00b204e9800998ecf8427e",
            path="charter/certificate-of-incorporation.pdf",
            related_objects=[ObjectReference(object_type="ISSUER", object_id="issuer-1")],
        ),
        EntityKind.STOCK_ISSUANCE: StockIssuancePayload(
            id="iss-alice",
            date=date(2020, 2, 1),
            security_id="CS-1",
            custom_id="CS-1",
            stakeholder_id="sh-alice",
            stock_class_id="sc-common",
            share_price=usd("0.00001"),
            quantity=Decimal("4000000"),
            vesting_terms_id="vt-4y-1y-cliff",
            issuance_type="FOUNDERS_STOCK",
            stock_legend_ids=["legend-144"],
        ),
        EntityKind.STOCK_TRANSFER: StockTransferPayload(
            id="transfer-1",
            date=date(2022, 6, 1),
            security_id="CS-1",
            quantity=Decimal("100000"),
            resulting_security_ids=["CS-7"],
            balance_security_id="CS-8",
        ),
        EntityKind.STOCK_CANCELLATION: StockCancellationPayload(
            id="cancel-1",
            date=date(2022, 7, 1),
            security_id="CS-2",
            quantity=Decimal("5000"),
            reason_text="Forfeited on termination",
        ),
        EntityKind.STOCK_REPURCHASE: StockRepurchasePayload(
            id="repurchase-1",
            date=date(2022, 8, 1),
            security_id="CS-3",
            quantity=Decimal("2500"),
            price=usd("0.10"),
        ),
        EntityKind.CONVERTIBLE_ISSUANCE: ConvertibleIssuancePayload(
            id="safe-seed-1",
            date=date(2021, 5, 10),
            security_id="SAFE-1",
            custom_id="SAFE-1",
            stakeholder_id="sh-fund",
            investment_amount=usd("500000"),
            convertible_type="SAFE",
            seniority=1,
            pro_rata=Decimal("0.05"),
        ),
        EntityKind.WARRANT_ISSUANCE: WarrantIssuancePayload(
            id="warrant-1",
            date=date(2021, 5, 10),
            security_id="W-1",
            custom_id="W-1",
            stakeholder_id="sh-bank",
            purchase_price=usd("0"),
            quantity=Decimal("20000"),
            exercise_price=usd("0.25"),
            warrant_expiration_date=date(2031, 5, 10),
        ),
        EntityKind.EQUITY_COMPENSATION_ISSUANCE: EquityCompensationIssuancePayload(
            id="opt-bob",
            date=date(2021, 7, 1),
            security_id="EC-1",
            custom_id="EC-1",
            stakeholder_id="sh-bob",
            compensation_type="OPTION_ISO",
            quantity=Decimal("50000"),
            exercise_price=usd("0.25"),
            stock_plan_id="plan-2020",
            vesting_terms_id="vt-4y-1y-cliff",
            expiration_date=date(2031, 7, 1),
            early_exercisable=False,
        ),
        EntityKind.EQUITY_COMPENSATION_EXERCISE: EquityCompensationExercisePayload(
            id="exercise-bob-1",
            date=date(2023, 1, 5),
            security_id="EC-1",
            quantity=Decimal("12500"),
            resulting_security_ids=["CS-9"],
        ),
        EntityKind.STOCK_CLASS_AUTHORIZED_SHARES_ADJUSTMENT: StockClassAuthorizedSharesAdjustmentPayload(
            id="adj-sc-1",
            date=date(2022, 1, 1),
            stock_class_id="sc-common",
            new_shares_authorized=Decimal("15000000"),
            board_approval_date=date(2021, 12, 15),
        ),
        EntityKind.ISSUER_AUTHORIZED_SHARES_ADJUSTMENT: IssuerAuthorizedSharesAdjustmentPayload(
            id="adj-issuer-1",
            date=date(2022, 1, 1),
            issuer_id="issuer-1",
            new_shares_authorized="UNLIMITED",
        ),
        EntityKind.STOCK_PLAN_POOL_ADJUSTMENT: StockPlanPoolAdjustmentPayload(
            id="adj-pool-1",
            date=date(2022, 3, 1),
            stock_plan_id="plan-2020",
            shares_reserved=Decimal("2000000"),
            stockholder_approval_date=date(2022, 2, 20),
        ),
    }
