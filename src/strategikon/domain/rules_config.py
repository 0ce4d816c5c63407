"""Declarative rule configuration for the combat engine."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class ChaosRules:
    """Bounds for the battlefield chaos level."""

    minimum_level: int = 2
    maximum_level: int = 10


@dataclass(frozen=True, slots=True)
class PreparationRules:
    """Preparation (chaos mitigation) constants."""

    base_level: float = 1.0
    flag_increment: float = 0.3
    fortified_increment: float = 0.4
    cultural_point_weight: float = 0.3
    minimum_level: float = 0.5
    maximum_level: float = 4.0
    chaos_attrition_per_point: float = 0.05


@dataclass(frozen=True, slots=True)
class BreakthroughRules:
    """Stalemate detection and breakthrough multiplier tuning."""

    start_turn: int = 3
    history_window: int = 3
    min_damage_threshold: float = 5.0
    progression_per_turn: float = 0.1
    progression_cap: float = 0.5
    formation_weight: float = 0.1
    desperation_ratio: float = 0.3
    desperation_multiplier: float = 4.0
    wavering_ratio: float = 0.5
    wavering_multiplier: float = 1.5
    minimum_multiplier: float = 0.5
    matchup_weight: float = 0.1
    closing_distance_rate: float = 1.5
    closing_distance_step: float = 0.05
    closing_distance_cap: float = 0.5
    berserker_formation_ignore: float = 0.5


@dataclass(frozen=True, slots=True)
class CasualtyRules:
    """Damage-to-casualty conversion constants."""

    damage_scale_factor: float = 0.5
    casualties_per_batch: int = 5


@dataclass(frozen=True, slots=True)
class MoraleRules:
    """Break thresholds and morale swing tuning."""

    minimum_break_threshold: float = 0.05
    cultural_point_threshold: float = 0.05
    routed_defense_factor: float = 0.5


@dataclass(frozen=True, slots=True)
class ResolutionRules:
    """Turn-level orchestration parameters."""

    max_turns: int = 15
    major_victory_margin: float = 4.0
    victory_margin: float = 2.0
    advantage_margin: float = 0.5


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Top-level configuration container for all combat subsystems."""

    chaos: ChaosRules = ChaosRules()
    preparation: PreparationRules = PreparationRules()
    breakthrough: BreakthroughRules = BreakthroughRules()
    casualties: CasualtyRules = CasualtyRules()
    morale: MoraleRules = MoraleRules()
    resolution: ResolutionRules = ResolutionRules()

    def with_damage_scale(self, scale: float) -> RulesConfig:
        """Return a copy using a different damage scale factor."""

        return replace(self, casualties=replace(self.casualties, damage_scale_factor=scale))

    def with_max_turns(self, max_turns: int) -> RulesConfig:
        """Return a copy with a different turn limit."""

        return replace(self, resolution=replace(self.resolution, max_turns=max_turns))


DEFAULT_RULES = RulesConfig()
