"""Stateful orchestration built on the pure combat rules."""

from strategikon.services.balance_service import BalanceReport, BalanceService
from strategikon.services.battle_service import BattleReport, BattleSession

__all__ = [
    "BalanceReport",
    "BalanceService",
    "BattleReport",
    "BattleSession",
]
