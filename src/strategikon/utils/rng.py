"""Seed-driven dice for chaos rolls.

A roll is a pure function of its seed string, and seeds are built from
battle state (``battle_id:turn:side:context``).  Replaying a stored
battle therefore reproduces every roll, and two battles resolved side by
side never draw from a shared generator.

Examples:
    >>> seed = generate_seed(battle_id=7, turn=3, side="attacker", context="chaos")
    >>> seed
    '7:3:attacker:chaos'
    >>> roll_dice(seed, "1d6").seed == seed
    True
"""

from __future__ import annotations

import hashlib
import random
import re
from dataclasses import dataclass

_NOTATION = re.compile(r"^(\d+)d(\d+)$")


@dataclass(frozen=True, slots=True)
class DiceRoll:
    notation: str
    rolls: tuple[int, ...]
    seed: str

    @property
    def total(self) -> int:
        return sum(self.rolls)


def generate_seed(battle_id: int, turn: int, side: str, context: str) -> str:
    """Build the seed for one roll of one side in one turn of a battle.

    Raises:
        ValueError: If battle_id or turn is negative
    """
    if battle_id < 0:
        raise ValueError(f"battle_id must be non-negative, got {battle_id}")
    if turn < 0:
        raise ValueError(f"turn must be non-negative, got {turn}")
    return f"{battle_id}:{turn}:{side}:{context}"


def _generator(seed: str) -> random.Random:
    # First 8 bytes of the digest; stable across processes, unlike hash().
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return random.Random(int.from_bytes(digest[:8], "big", signed=False))


def _parse_notation(notation: str) -> tuple[int, int]:
    match = _NOTATION.match(notation.lower())
    if not match:
        raise ValueError(
            f"Invalid dice notation: '{notation}'. Expected format: NdM (e.g., '2d6', '1d10')"
        )
    count, sides = int(match.group(1)), int(match.group(2))
    if count <= 0:
        raise ValueError(f"Number of dice must be positive, got {count}")
    if sides <= 0:
        raise ValueError(f"Number of sides must be positive, got {sides}")
    return count, sides


def roll_dice(seed: str, notation: str = "1d6") -> DiceRoll:
    """Roll ``NdM`` dice from ``seed``; the same seed always yields the same faces."""

    count, sides = _parse_notation(notation)
    rng = _generator(seed)
    return DiceRoll(
        notation=notation,
        rolls=tuple(rng.randint(1, sides) for _ in range(count)),
        seed=seed,
    )
