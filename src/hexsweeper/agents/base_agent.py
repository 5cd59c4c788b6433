"""
Base agent interface for hex minesweeper players.

Defines the abstract interface that all agents must implement.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

import numpy as np

from ..cell import OBS_HIDDEN


# ============================================================================
# Base Agent Interface
# ============================================================================

class BaseAgent(ABC):
    """
    Abstract base class for hex minesweeper agents.

    Agents see the board as a per-cell observation vector and know the
    neighbor graph, which is public information in this game.
    """

    def __init__(self, neighbors: Sequence[Sequence[int]]) -> None:
        """
        Initialize the agent.

        Args:
            neighbors: Neighbor id list per cell.
        """
        self.neighbors: List[List[int]] = [list(ids) for ids in neighbors]
        self.total_cells = len(self.neighbors)

    @abstractmethod
    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Select an action based on the current observation.

        Args:
            observation: 1D array of cell observations.
            valid_actions: Optional mask of valid actions.

        Returns:
            Id of the cell to reveal.
        """
        pass

    def get_valid_actions_from_obs(self, observation: np.ndarray) -> np.ndarray:
        """
        Get valid actions mask from observation.

        Returns:
            Boolean mask where True = valid action.
        """
        return np.asarray(observation).flatten() == OBS_HIDDEN

    def reset(self) -> None:
        """Reset agent state for new episode."""
        pass
