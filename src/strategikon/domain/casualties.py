"""Damage to casualty conversion via fractional bucket accumulation."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from strategikon.domain.models import CasualtyBucket, Unit, UnitID
from strategikon.domain.rules_config import DEFAULT_RULES, RulesConfig
from strategikon.utils.rounding import round_half_up

# Float sums such as ten chips of 0.1 land a hair under 1.0.
FILL_TOLERANCE = 1e-9


@dataclass(frozen=True, slots=True)
class CasualtyConversion:
    """Bucket fill before and after one damage value, with the batch it popped."""

    damage: float
    scaled_damage: float
    fill_before: float
    fill_after: float
    casualties: int

    @property
    def overflowed(self) -> bool:
        return self.casualties > 0


def convert_damage(
    fill: float, damage: float, rules: RulesConfig = DEFAULT_RULES
) -> CasualtyConversion:
    """Add ``|damage|`` (scaled) to a bucket and pop a casualty batch on overflow.

    The batch covers the whole overflowing fill, and whatever exceeds the
    next whole point stays in the bucket.
    """

    cfg = rules.casualties
    scaled = abs(damage) * cfg.damage_scale_factor
    total = fill + scaled
    casualties = 0
    if total >= 1.0 - FILL_TOLERANCE:
        overflow = max(0.0, total - 1.0)
        casualties = round_half_up((1.0 + overflow) * cfg.casualties_per_batch)
        total = math.fmod(overflow, 1.0)
        if total >= 1.0 - FILL_TOLERANCE:
            total = 0.0
    return CasualtyConversion(
        damage=damage,
        scaled_damage=scaled,
        fill_before=fill,
        fill_after=total,
        casualties=casualties,
    )


def apply_damage_to_bucket(
    bucket: CasualtyBucket, damage: float, rules: RulesConfig = DEFAULT_RULES
) -> CasualtyConversion:
    conversion = convert_damage(bucket.fill, damage, rules)
    bucket.fill = conversion.fill_after
    bucket.total_casualties += conversion.casualties
    return conversion


def distribute_casualties(units: Sequence[Unit], casualties: int) -> dict[UnitID, int]:
    """Split losses over living units in proportion to their current strength.

    Uses largest remainders so the parts add up, and never takes more
    from a unit than it has left.
    """

    living = [unit for unit in units if unit.is_alive]
    available = sum(unit.current_strength for unit in living)
    casualties = min(max(0, casualties), available)
    if casualties == 0:
        return {}

    shares = [(unit, casualties * unit.current_strength / available) for unit in living]
    allocation = {unit.id: int(share) for unit, share in shares}
    remaining = casualties - sum(allocation.values())
    by_remainder = sorted(shares, key=lambda item: item[1] - int(item[1]), reverse=True)
    for unit, _ in by_remainder:
        if remaining <= 0:
            break
        if allocation[unit.id] < unit.current_strength:
            allocation[unit.id] += 1
            remaining -= 1

    return {unit_id: lost for unit_id, lost in allocation.items() if lost > 0}
