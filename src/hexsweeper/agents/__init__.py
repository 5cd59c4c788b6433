"""
Automated players for hex minesweeper.

Provides agents that play through the gymnasium environment:
- RandomAgent: Baseline random selection
- LogicAgent: Constraint propagation over the neighbor graph
"""
from .base_agent import BaseAgent
from .random_agent import RandomAgent
from .logic_agent import LogicAgent
from .evaluation import Evaluator

__all__ = [
    "BaseAgent",
    "RandomAgent",
    "LogicAgent",
    "Evaluator",
]
