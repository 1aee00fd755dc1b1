"""
Fasting plan registry.

Plans are immutable fasting/eating hour pairs. Six plans are built in; plans
derived from a past fast ("repeat") are synthetic and tagged as such so they
are never confused with a registry hit.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..utils.time import hours_to_ms

_PLAN_ID_PATTERN = re.compile(r"^(\d+):(-?\d+)$")


class PlanKind(str, Enum):
    """Where a plan comes from."""
    REGISTERED = "registered"
    SYNTHETIC = "synthetic"


@dataclass(frozen=True)
class Plan:
    """A named fast/eat hour split."""

    id: str
    fast_hours: int
    eat_hours: int
    kind: PlanKind = PlanKind.REGISTERED

    @property
    def target_ms(self) -> int:
        """Fasting target in milliseconds."""
        return hours_to_ms(self.fast_hours)

    @property
    def is_synthetic(self) -> bool:
        return self.kind == PlanKind.SYNTHETIC

    @classmethod
    def synthetic(cls, fast_hours: int, eat_hours: int) -> "Plan":
        """Create a plan outside the registry, identified as ``fast:eat``."""
        return cls(
            id=f"{fast_hours}:{eat_hours}",
            fast_hours=fast_hours,
            eat_hours=eat_hours,
            kind=PlanKind.SYNTHETIC
        )


PRESETS: tuple[Plan, ...] = (
    Plan("12:12", 12, 12),
    Plan("14:10", 14, 10),
    Plan("16:8", 16, 8),
    Plan("18:6", 18, 6),
    Plan("20:4", 20, 4),
    Plan("OMAD", 23, 1),
)

FALLBACK_PLAN_ID = "16:8"

_PRESETS_BY_ID = {plan.id: plan for plan in PRESETS}


def get_registered(plan_id: str) -> Optional[Plan]:
    """Return the built-in plan with this id, or None."""
    return _PRESETS_BY_ID.get(plan_id)


def lookup(plan_id: str) -> Plan:
    """
    Look up a built-in plan.

    Unknown identifiers silently resolve to the fallback ``16:8`` plan.

    Args:
        plan_id: Plan identifier such as ``"18:6"`` or ``"OMAD"``

    Returns:
        The matching built-in plan, or the fallback plan
    """
    return _PRESETS_BY_ID.get(plan_id, _PRESETS_BY_ID[FALLBACK_PLAN_ID])


def resolve(plan_id: str) -> Plan:
    """
    Resolve a stored plan identifier.

    Built-in ids resolve to the registry entry. Other ``fast:eat`` ids, as
    produced by repeating a past fast, resolve to a synthetic plan carrying
    their own hours. Anything else falls back like :func:`lookup`.
    """
    registered = get_registered(plan_id)
    if registered is not None:
        return registered

    match = _PLAN_ID_PATTERN.match(plan_id or "")
    if match:
        fast_hours = int(match.group(1))
        if fast_hours > 0:
            return Plan.synthetic(fast_hours, int(match.group(2)))

    return lookup(plan_id)


def describe(plan: Plan) -> str:
    """Display label such as ``16:8 – 16h fast / 8h eat``."""
    return f"{plan.id} – {plan.fast_hours}h fast / {plan.eat_hours}h eat"
