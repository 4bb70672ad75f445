"""Debtfreeo debt payoff engine."""

from __future__ import annotations

from .config import BaseConfig, DevConfig
from .models import Debt, OneTimeFunding
from .services.scenario import ScenarioResult, calculate_scenario
from .services.strategies import STRATEGIES, get_strategy
from .services.timeline import TimelineResult, calculate_timeline

__all__ = [
    "BaseConfig",
    "Debt",
    "DevConfig",
    "OneTimeFunding",
    "STRATEGIES",
    "ScenarioResult",
    "TimelineResult",
    "calculate_scenario",
    "calculate_timeline",
    "get_strategy",
]
