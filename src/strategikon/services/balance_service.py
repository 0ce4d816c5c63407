"""Balance testing harness for the combat engine.

Runs many seeded battles per scenario and reports how evenly matched
the two sides are.  Battles within a run differ only in their chaos
rolls, which are seeded from the iteration number, so a report is
reproducible.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field

from strategikon.domain.attack import is_ranged_weapon
from strategikon.domain.enums import BattleStatus, Formation, Role, TroopQuality
from strategikon.domain.models import Army, ArmyID, BattleID, CombatContext, Unit, UnitID
from strategikon.domain.rating_tables import TWO_HANDED_WEAPONS
from strategikon.domain.rules_config import DEFAULT_RULES, RulesConfig
from strategikon.services.battle_service import BattleSession

logger = logging.getLogger(__name__)

COMPETITIVE_THRESHOLD = 0.80

UnitSpec = tuple[str, list[str], str, str, bool]


@dataclass(frozen=True, slots=True)
class CheeseStrategy:
    key: str
    name: str
    description: str
    detect: Callable[[Army], bool]


@dataclass(frozen=True, slots=True)
class BalanceScenario:
    key: str
    name: str
    description: str
    attacker_culture: str | None
    attacker_units: tuple[UnitSpec, ...]
    defender_culture: str | None
    defender_units: tuple[UnitSpec, ...]
    attacker_name: str | None = None
    defender_name: str | None = None
    attacker_formation: str = Formation.LINE
    defender_formation: str = Formation.LINE
    context: CombatContext = field(default_factory=CombatContext)

    def build_armies(self) -> tuple[Army, Army]:
        """Build fresh rosters; every battle gets its own copies."""

        attacker = _build_army(
            ArmyID(1), self.attacker_culture, self.attacker_units, self.attacker_formation, 100
        )
        defender = _build_army(
            ArmyID(2), self.defender_culture, self.defender_units, self.defender_formation, 200
        )
        attacker.name = self.attacker_name or self.attacker_culture
        defender.name = self.defender_name or self.defender_culture
        return attacker, defender


@dataclass(slots=True)
class CheeseDetection:
    role: Role
    strategy: str
    name: str


@dataclass(slots=True)
class BalanceReport:
    scenario: str
    name: str
    iterations: int
    attacker_wins: int
    defender_wins: int
    draws: int
    average_turns: float
    cheese: list[CheeseDetection] = field(default_factory=list)

    @property
    def attacker_win_rate(self) -> float:
        return self.attacker_wins / self.iterations

    @property
    def defender_win_rate(self) -> float:
        return self.defender_wins / self.iterations

    @property
    def draw_rate(self) -> float:
        return self.draws / self.iterations

    @property
    def balance_score(self) -> float:
        """1.0 for a coin flip, 0.0 when one side always wins."""
        return 1 - abs(self.attacker_win_rate - 0.5) * 2

    @property
    def competitive(self) -> bool:
        return self.balance_score >= COMPETITIVE_THRESHOLD


def _build_army(
    army_id: ArmyID,
    culture: str | None,
    specs: Iterable[UnitSpec],
    formation: str,
    first_unit_id: int,
) -> Army:
    units = []
    for offset, (quality, weapons, armor, shield, mounted) in enumerate(specs):
        units.append(
            Unit(
                id=UnitID(first_unit_id + offset),
                weapons=list(weapons),
                armor=armor,
                shield=shield,
                quality=quality,
                formation=formation,
                mounted=mounted,
            )
        )
    return Army(id=army_id, units=units, culture=culture)


def _all_units(predicate: Callable[[Unit], bool]) -> Callable[[Army], bool]:
    def detect(army: Army) -> bool:
        return bool(army.units) and all(predicate(unit) for unit in army.units)

    return detect


CHEESE_STRATEGIES: tuple[CheeseStrategy, ...] = (
    CheeseStrategy(
        key="heavy_armor_spam",
        name="Heavy Armor Spam",
        description="All units in maximum armor",
        detect=_all_units(lambda unit: unit.armor == "heavy_armor"),
    ),
    CheeseStrategy(
        key="ranged_only",
        name="Pure Ranged Army",
        description="No melee capabilities",
        detect=_all_units(
            lambda unit: bool(unit.weapons) and all(is_ranged_weapon(w) for w in unit.weapons)
        ),
    ),
    CheeseStrategy(
        key="elite_spam",
        name="All Elite Units",
        description="Only veteran or better quality",
        detect=_all_units(
            lambda unit: unit.quality
            in {TroopQuality.VETERAN_MERCENARY, TroopQuality.ELITE_GUARD, TroopQuality.LEGENDARY}
        ),
    ),
    CheeseStrategy(
        key="two_handed_spam",
        name="Two-Handed Weapon Spam",
        description="All units with two-handed weapons, no defense",
        detect=_all_units(
            lambda unit: unit.shield == "no_shield"
            and any(weapon in TWO_HANDED_WEAPONS for weapon in unit.weapons)
        ),
    ),
)


def detect_cheese_strategies(army: Army) -> list[CheeseStrategy]:
    return [strategy for strategy in CHEESE_STRATEGIES if strategy.detect(army)]


BUILTIN_SCENARIOS: Mapping[str, BalanceScenario] = {
    scenario.key: scenario
    for scenario in (
        BalanceScenario(
            key="basic_professional",
            name="Roman Professional vs Celtic Warriors",
            description="Balanced professional troops engagement",
            attacker_culture="Roman Republic",
            attacker_units=(
                ("professional", ["roman_gladius"], "medium_armor", "medium_shield", False),
                (
                    "professional",
                    ["roman_pilum", "roman_pugio"],
                    "medium_armor",
                    "medium_shield",
                    False,
                ),
                ("professional", ["spear_professional"], "light_armor", "heavy_shield", False),
            ),
            defender_culture="Celtic Tribes",
            defender_units=(
                ("tribal_warriors", ["celtic_longsword"], "light_armor", "medium_shield", False),
                ("tribal_warriors", ["battle_axe"], "light_armor", "light_shield", False),
                ("tribal_warriors", ["spear_basic"], "no_armor", "medium_shield", False),
            ),
        ),
        BalanceScenario(
            key="cavalry_vs_infantry",
            name="Sarmatian Cavalry vs Macedonian Phalanx",
            description="Mobile cavalry against defensive formation",
            attacker_culture="Sarmatian Confederations",
            attacker_units=(
                ("professional", ["sword_standard"], "medium_armor", "light_shield", True),
                ("professional", ["mace"], "light_armor", "light_shield", True),
                ("veteran_mercenary", ["sword_standard"], "heavy_armor", "medium_shield", True),
            ),
            defender_culture="Macedonian Kingdoms",
            defender_formation=Formation.PHALANX,
            defender_units=(
                ("professional", ["macedonian_sarissa"], "medium_armor", "no_shield", False),
                ("professional", ["macedonian_sarissa"], "medium_armor", "no_shield", False),
                ("professional", ["greek_xiphos"], "heavy_armor", "medium_shield", False),
            ),
        ),
        BalanceScenario(
            key="ranged_vs_melee",
            name="Han Crossbows vs Germanic Heavy Infantry",
            description="Ranged dominance versus heavy melee",
            attacker_culture="Han Dynasty",
            attacker_units=(
                (
                    "professional",
                    ["han_chinese_crossbow", "chinese_dao"],
                    "light_armor",
                    "medium_shield",
                    False,
                ),
                (
                    "professional",
                    ["han_chinese_crossbow", "daggers"],
                    "light_armor",
                    "light_shield",
                    False,
                ),
                (
                    "militia",
                    ["self_bow_professional", "daggers"],
                    "light_armor",
                    "light_shield",
                    False,
                ),
            ),
            # Germanic tribes have no cultural modifier set.
            defender_culture=None,
            defender_name="Germanic Tribes",
            defender_units=(
                ("professional", ["germanic_framea"], "heavy_armor", "no_shield", False),
                ("tribal_warriors", ["great_axe"], "medium_armor", "no_shield", False),
                ("tribal_warriors", ["battle_axe"], "medium_armor", "medium_shield", False),
            ),
        ),
        BalanceScenario(
            key="elite_vs_numbers",
            name="Roman Veterans vs Celtic Levy Swarm",
            description="Quality versus quantity balance",
            attacker_culture="Roman Republic",
            attacker_units=(
                ("veteran_mercenary", ["roman_gladius"], "heavy_armor", "medium_shield", False),
                (
                    "veteran_mercenary",
                    ["roman_pilum", "roman_pugio"],
                    "heavy_armor",
                    "medium_shield",
                    False,
                ),
            ),
            defender_culture="Celtic Tribes",
            defender_units=(
                ("levy", ["spear_basic"], "light_armor", "light_shield", False),
                ("levy", ["clubs"], "no_armor", "light_shield", False),
                ("levy", ["sickle"], "light_armor", "no_shield", False),
                ("tribal_warriors", ["battle_axe"], "light_armor", "medium_shield", False),
            ),
        ),
    )
}


class BalanceService:
    """Run seeded battle batches and compute balance metrics."""

    def __init__(
        self,
        *,
        rules: RulesConfig = DEFAULT_RULES,
        scenarios: Mapping[str, BalanceScenario] | None = None,
    ) -> None:
        self.rules = rules
        self.scenarios = dict(scenarios if scenarios is not None else BUILTIN_SCENARIOS)

    def get_scenario(self, key: str) -> BalanceScenario:
        try:
            return self.scenarios[key]
        except KeyError as exc:
            raise ValueError(f"Unknown balance scenario: {key}") from exc

    def run_scenario(self, key: str, iterations: int) -> BalanceReport:
        if iterations <= 0:
            raise ValueError(f"iterations must be positive, got {iterations}")
        scenario = self.get_scenario(key)

        wins = {BattleStatus.ATTACKER_WON: 0, BattleStatus.DEFENDER_WON: 0, BattleStatus.DRAW: 0}
        total_turns = 0
        cheese: list[CheeseDetection] = []

        for iteration in range(iterations):
            attacker, defender = scenario.build_armies()
            if iteration == 0:
                for role, army in ((Role.ATTACKER, attacker), (Role.DEFENDER, defender)):
                    cheese.extend(
                        CheeseDetection(role=role, strategy=strategy.key, name=strategy.name)
                        for strategy in detect_cheese_strategies(army)
                    )
            session = BattleSession(
                BattleID(iteration + 1),
                attacker,
                defender,
                scenario.context,
                rules=self.rules,
                derive_conditions=True,
            )
            report = session.run()
            wins[report.status] += 1
            total_turns += report.turns

        result = BalanceReport(
            scenario=scenario.key,
            name=scenario.name,
            iterations=iterations,
            attacker_wins=wins[BattleStatus.ATTACKER_WON],
            defender_wins=wins[BattleStatus.DEFENDER_WON],
            draws=wins[BattleStatus.DRAW],
            average_turns=total_turns / iterations,
            cheese=cheese,
        )
        logger.info(
            "balance %s: %d/%d/%d (A/D/draw) score %.2f over %d battles",
            key,
            result.attacker_wins,
            result.defender_wins,
            result.draws,
            result.balance_score,
            iterations,
        )
        return result

    def run_all(self, iterations: int) -> list[BalanceReport]:
        return [self.run_scenario(key, iterations) for key in self.scenarios]
