from __future__ import annotations

"""
Plan Slots
----------
Caller-side storage for a user's saved plans: three named slots, each empty
or holding one plan. A plan goes to its tier's slot, then to `additional`.
The engine never evicts a plan on its own; when both are taken, `save`
answers `replace_required` and the caller either confirms a replacement or
cancels.
"""

from typing import Dict, List, Literal, Optional

from loguru import logger
from pydantic import BaseModel

from gymovoo.engine.versioner import merge_policy
from gymovoo.models.schemas import WorkoutPlan


SLOT_NAMES = ("basic", "smart", "additional")

SlotName = Literal["basic", "smart", "additional"]


class SlotResult(BaseModel):
    outcome: Literal["saved", "skipped", "replace_required", "replaced", "cancelled"]
    slot: Optional[str] = None
    replaced_plan_id: Optional[str] = None
    matching_plan_id: Optional[str] = None


class PlanSlots:
    """Three plan slots with a save / confirm-replace / cancel flow.

    A `save` that hits a full set of slots parks the plan as pending until
    `confirm_replace` or `cancel` is called.
    """

    def __init__(self, plans: Optional[Dict[str, WorkoutPlan]] = None) -> None:
        self._slots: Dict[str, Optional[WorkoutPlan]] = {name: None for name in SLOT_NAMES}
        for name, plan in (plans or {}).items():
            self._check_slot(name)
            self._slots[name] = plan
        self.pending: Optional[WorkoutPlan] = None

    @staticmethod
    def _check_slot(slot: str) -> None:
        if slot not in SLOT_NAMES:
            raise ValueError(f"Unknown plan slot '{slot}', expected one of {SLOT_NAMES}")

    def get(self, slot: str) -> Optional[WorkoutPlan]:
        self._check_slot(slot)
        return self._slots[slot]

    def occupied(self) -> Dict[str, WorkoutPlan]:
        return {name: plan for name, plan in self._slots.items() if plan is not None}

    def plans(self) -> List[WorkoutPlan]:
        return list(self.occupied().values())

    def is_full(self) -> bool:
        return all(plan is not None for plan in self._slots.values())

    def save(self, plan: WorkoutPlan) -> SlotResult:
        """Store `plan` in its tier's slot, or in `additional` when that is taken.

        A plan generated from the same answers as a stored plan of the same
        tier is skipped. When neither slot is free the plan is held as
        `pending`, even if the other tier's slot is empty.
        """
        decision = merge_policy(self.plans(), plan, max_plans=len(SLOT_NAMES))
        if decision.action == "skip":
            logger.info(f"Plan {plan.id} matches stored plan {decision.matching_plan_id}; not saved")
            return SlotResult(outcome="skipped", matching_plan_id=decision.matching_plan_id)

        for name in (plan.tier.value, "additional"):
            if self._slots[name] is None:
                self._slots[name] = plan
                self.pending = None
                logger.info(f"Saved {plan.tier.value} plan {plan.id} to slot '{name}'")
                return SlotResult(outcome="saved", slot=name)

        self.pending = plan
        logger.info(f"Slots for {plan.tier.value} plans occupied; plan {plan.id} awaits replacement choice")
        return SlotResult(outcome="replace_required")


    def confirm_replace(self, slot: str, plan: Optional[WorkoutPlan] = None) -> SlotResult:
        """Overwrite `slot` with `plan` (or the pending plan)."""
        self._check_slot(slot)
        new_plan = plan or self.pending
        if new_plan is None:
            raise ValueError("No plan to place: pass one or call save() first")
        old = self._slots[slot]
        self._slots[slot] = new_plan
        self.pending = None
        logger.info(f"Replaced slot '{slot}' ({old.id if old else 'empty'}) with plan {new_plan.id}")
        return SlotResult(outcome="replaced", slot=slot, replaced_plan_id=old.id if old else None)

    def cancel(self) -> SlotResult:
        """Drop the pending plan and leave every slot as it was."""
        if self.pending is not None:
            logger.info(f"Discarded pending plan {self.pending.id}")
        self.pending = None
        return SlotResult(outcome="cancelled")
