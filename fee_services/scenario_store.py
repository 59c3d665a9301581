"""
fee_services.scenario_store -- Slot-addressed scenario envelopes.

Responsibility:
    Holds up to three scenario envelopes (slots A, B, C). Each envelope
    bundles the editable view model, the CDIO derived from it, the CDOO
    produced by the Truth Engine and the compute status. The store is the
    only place the engine is invoked for interactive editing.

Architecture position:
    Services -- stateful orchestration over engines + kernel.
    Composes the view mapper (fee_services.view_model), the Truth Engine
    (fee_engines.truth_engine) and the compare view builder.

Invariants enforced:
    - Slot A (the baseline) always exists and cannot be removed.
    - Envelopes are iterated in A, B, C order regardless of insertion order.
    - Stored scenario names are normalized (trimmed, whitespace collapsed)
      and never empty; an empty name takes the slot label.
    - The CDIO is always the mapping of the current view; an envelope is
      replaced as one unit so the two never disagree.
    - cdoo is set only by a successful compute; last_successful_output is
      retained across failures.
    - A compute failure in one slot never touches another slot.

Failure modes:
    - SlotNotFoundError: operation names a slot that is not present.
    - BaselineSlotError: add/remove attempted on slot A.
    - UnknownViewFieldError: update patch names a field the view lacks.
    Engine validation errors are captured on the envelope, not raised.

Audit relevance:
    Every mutation emits a structured log event (scenario_slot_added,
    scenario_slot_removed, scenario_view_updated, scenario_compute_failed)
    with the slot and scenario id bound into LogContext.

Usage:
    store = ScenarioEnvelopeStore.create_baseline("Analyst", DEFAULT_SCENARIO_VIEW)
    store.add_slot(Slot.B)
    store.update_view(Slot.B, {"fee_pct": "9.00"})
    view = store.compare()
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from fee_engines import truth_engine
from fee_engines.compare_view import GOLD_LAYOUT, CompareView, LayoutBlock, build_compare_view
from fee_kernel.domain.documents import CDIO, CDOO
from fee_kernel.domain.slots import BASELINE_SLOT, MAX_SLOTS, Slot
from fee_kernel.exceptions import BaselineSlotError, FeeKernelError, SlotNotFoundError
from fee_kernel.logging_config import LogContext, get_logger
from fee_services.view_model import (
    ScenarioView,
    normalize_scenario_name,
    scenario_name_key,
    view_to_cdio,
)

logger = get_logger("services.scenario_store")


class ComputeStatus(str, Enum):
    """Outcome of the most recent compute for a slot."""

    IDLE = "idle"
    OK = "ok"
    ERROR = "error"


@dataclass(frozen=True)
class ComputeState:
    status: ComputeStatus = ComputeStatus.IDLE
    error: str | None = None
    error_code: str | None = None


@dataclass(frozen=True)
class ScenarioEnvelope:
    """
    Everything the workbench knows about one slot.

    Attributes:
        slot: Slot identifier (A is the baseline)
        label: Tab label; fallback for an empty scenario name
        owner: Workspace owner, carried for display only
        view: Raw user inputs
        cdio: Canonical input derived from view
        cdoo: Output of the latest compute; None if it failed or never ran
        last_successful_output: Most recent successful CDOO, kept on failure
        compute: Status of the latest compute
    """

    slot: Slot
    label: str
    owner: str
    view: ScenarioView
    cdio: CDIO
    cdoo: CDOO | None = None
    last_successful_output: CDOO | None = None
    compute: ComputeState = ComputeState()

    @property
    def is_stale(self) -> bool:
        """True when the latest compute failed but an older output exists."""
        return self.cdoo is None and self.last_successful_output is not None

    @property
    def display_output(self) -> CDOO | None:
        return self.cdoo if self.cdoo is not None else self.last_successful_output

    @property
    def scenario_name(self) -> str:
        return self.cdio.scenario_id


def _computed(envelope: ScenarioEnvelope) -> ScenarioEnvelope:
    """Run the Truth Engine for an envelope and return the updated copy."""
    with LogContext.bind(slot=envelope.slot.value, scenario_id=envelope.cdio.scenario_id):
        try:
            cdoo = truth_engine.compute(envelope.cdio)
        except FeeKernelError as exc:
            logger.warning("scenario_compute_failed", extra={
                "slot": envelope.slot.value,
                "error_code": exc.code,
                "error": str(exc),
            })
            return replace(
                envelope,
                cdoo=None,
                compute=ComputeState(ComputeStatus.ERROR, str(exc), exc.code),
            )
    return replace(
        envelope,
        cdoo=cdoo,
        last_successful_output=cdoo,
        compute=ComputeState(ComputeStatus.OK),
    )


def _free_name(label: str, taken: set[str]) -> str:
    """label, or "label 2", "label 3", ... whichever is not already taken."""
    name, suffix = label, 2
    while scenario_name_key(name) in taken:
        name = f"{label} {suffix}"
        suffix += 1
    return name


class ScenarioEnvelopeStore:
    """
    Fixed-capacity, slot-addressed collection of scenario envelopes.

    Contract:
        Mutations are synchronous and total: each either replaces exactly
        one envelope (or, for set_owner, each envelope) or raises before
        changing anything.

    Non-goals:
        - No persistence; the store lives for one session.
        - No undo history.
    """

    def __init__(
        self,
        owner_name: str,
        *,
        slot_labels: Mapping[Slot, str] | None = None,
    ):
        self._owner = owner_name
        self._labels: dict[Slot, str] = {slot: slot.default_label for slot in Slot}
        if slot_labels:
            self._labels.update({Slot.parse(k): v for k, v in slot_labels.items()})
        self._envelopes: dict[Slot, ScenarioEnvelope] = {}

    @classmethod
    def create_baseline(
        cls,
        owner_name: str,
        initial_view: ScenarioView,
        *,
        slot_labels: Mapping[Slot, str] | None = None,
    ) -> ScenarioEnvelopeStore:
        """Create a store holding only the baseline slot, already computed."""
        store = cls(owner_name, slot_labels=slot_labels)
        store._install(BASELINE_SLOT, initial_view)
        return store

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def slots(self) -> tuple[Slot, ...]:
        return tuple(slot for slot in Slot if slot in self._envelopes)

    def __len__(self) -> int:
        return len(self._envelopes)

    def __contains__(self, slot: object) -> bool:
        try:
            return Slot.parse(slot) in self._envelopes
        except SlotNotFoundError:
            return False

    def __iter__(self) -> Iterator[ScenarioEnvelope]:
        return iter(self.envelopes())

    def get(self, slot: Slot | str) -> ScenarioEnvelope:
        slot = Slot.parse(slot)
        try:
            return self._envelopes[slot]
        except KeyError:
            raise SlotNotFoundError(slot.value) from None

    def envelopes(self) -> tuple[ScenarioEnvelope, ...]:
        """Active envelopes in A, B, C order."""
        return tuple(self._envelopes[slot] for slot in self.slots)

    def next_free_slot(self) -> Slot | None:
        """First unused alternate slot (B before C), or None when full."""
        for slot in Slot:
            if slot not in self._envelopes:
                return slot
        return None

    def scenario_name_error(self, slot: Slot | str, candidate: str | None = None) -> str | None:
        """
        Validation message for a slot's scenario name, or None if it is fine.

        Names must be non-empty and unique across active slots, ignoring
        case and surrounding or repeated whitespace. Pass candidate to
        check text as typed in the editor before it is committed; stored
        names are normalized and never empty.
        """
        envelope = self.get(slot)
        name = envelope.view.scenario_name if candidate is None else candidate
        key = scenario_name_key(name)
        if not key:
            return "Scenario name is required."
        for other in self.envelopes():
            if other.slot is envelope.slot:
                continue
            if scenario_name_key(other.view.scenario_name) == key:
                return f"Scenario name must be unique (conflicts with Scenario {other.slot.value})."
        return None

    def compare(
        self,
        baseline: Slot | str = BASELINE_SLOT,
        layout: Sequence[LayoutBlock] = GOLD_LAYOUT,
    ) -> CompareView:
        """Build the compare view over the active envelopes."""
        return build_compare_view(layout, self.envelopes(), baseline)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_slot(self, slot: Slot | str) -> ScenarioEnvelope | None:
        """
        Add an alternate scenario cloned from the baseline's current view.

        Returns the new envelope, or None when the slot already exists or
        the store is full. If the cloned name collides with an existing
        scenario name, the slot's label is used instead.

        Raises:
            BaselineSlotError: If slot is A.
        """
        slot = Slot.parse(slot)
        if slot.is_baseline:
            raise BaselineSlotError(slot.value, "add")
        if slot in self._envelopes or len(self._envelopes) >= MAX_SLOTS:
            return None

        base_view = self._envelopes[BASELINE_SLOT].view
        taken = {scenario_name_key(e.view.scenario_name) for e in self._envelopes.values()}
        name = base_view.scenario_name
        if scenario_name_key(name) in taken:
            name = _free_name(self._labels[slot], taken)

        envelope = self._install(slot, replace(base_view, scenario_name=name))
        logger.info("scenario_slot_added", extra={
            "slot": slot.value,
            "scenario_id": envelope.cdio.scenario_id,
            "status": envelope.compute.status.value,
        })
        return envelope

    def remove_slot(self, slot: Slot | str) -> None:
        """
        Remove an alternate scenario. Removing an absent slot is a no-op.

        Raises:
            BaselineSlotError: If slot is A.
        """
        slot = Slot.parse(slot)
        if slot.is_baseline:
            raise BaselineSlotError(slot.value, "remove")
        if self._envelopes.pop(slot, None) is not None:
            logger.info("scenario_slot_removed", extra={"slot": slot.value})

    def update_view(self, slot: Slot | str, patch: Mapping[str, Any]) -> ScenarioEnvelope:
        """
        Merge a patch into a slot's view, re-derive its CDIO and recompute.

        A patched scenario name is normalized before it is stored.

        On engine failure the envelope records the error, clears cdoo and
        keeps last_successful_output; no exception is raised.

        Raises:
            SlotNotFoundError: If the slot is not active.
            UnknownViewFieldError: If the patch names unknown fields.
            InvalidContractTypeError: If the patch sets an unknown contract type.
        """
        current = self.get(slot)
        view = current.view.with_patch(patch)
        if "scenario_name" in patch:
            name = normalize_scenario_name(view.scenario_name, current.label)
            view = replace(view, scenario_name=name)
        envelope = _computed(replace(
            current,
            view=view,
            cdio=view_to_cdio(view, slot=current.slot, fallback_name=current.label),
        ))
        self._envelopes[current.slot] = envelope
        logger.info("scenario_view_updated", extra={
            "slot": current.slot.value,
            "fields": sorted(patch),
            "status": envelope.compute.status.value,
        })
        return envelope

    def rename(self, slot: Slot | str, label: str) -> ScenarioEnvelope:
        """Change a slot's tab label. Does not trigger a recompute."""
        current = self.get(slot)
        envelope = replace(current, label=label)
        self._labels[current.slot] = label
        self._envelopes[current.slot] = envelope
        return envelope

    def set_owner(self, owner_name: str) -> None:
        """Set the owner on every envelope. Owner never affects computation."""
        self._owner = owner_name
        for slot, envelope in list(self._envelopes.items()):
            self._envelopes[slot] = replace(envelope, owner=owner_name)

    def recompute(self, slot: Slot | str) -> ScenarioEnvelope:
        """Re-run the engine from the slot's current CDIO."""
        current = self.get(slot)
        envelope = _computed(current)
        self._envelopes[current.slot] = envelope
        return envelope

    def recompute_all(self) -> tuple[ScenarioEnvelope, ...]:
        return tuple(self.recompute(slot) for slot in self.slots)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _install(self, slot: Slot, view: ScenarioView) -> ScenarioEnvelope:
        label = self._labels[slot]
        view = replace(view, scenario_name=normalize_scenario_name(view.scenario_name, label))
        envelope = _computed(ScenarioEnvelope(
            slot=slot,
            label=label,
            owner=self._owner,
            view=view,
            cdio=view_to_cdio(view, slot=slot, fallback_name=label),
        ))
        self._envelopes[slot] = envelope
        return envelope
