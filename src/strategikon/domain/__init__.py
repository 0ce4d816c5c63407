"""Pure combat rules for Strategikon.

This package hosts the combat engine.  It exposes:

* Dataclasses describing the combat-relevant projection of units and
  battle conditions (see :mod:`models`).
* Enumerations, including the closed set of situational flags.
* Rule configuration objects (see :mod:`rules_config`).
* Pure calculators (attack, defense, chaos, preparation, culture,
  breakthrough, casualties, morale) and the turn resolver built on them.

Nothing here performs I/O; per-battle running state is passed in and
returned explicitly.
"""

from . import (
    attack,
    breakthrough,
    casualties,
    chaos,
    culture,
    defense,
    enums,
    invariants,
    models,
    morale,
    preparation,
    rating_tables,
    resolution,
    rules_config,
)

__all__ = [
    "attack",
    "breakthrough",
    "casualties",
    "chaos",
    "culture",
    "defense",
    "enums",
    "invariants",
    "models",
    "morale",
    "preparation",
    "rating_tables",
    "resolution",
    "rules_config",
]
