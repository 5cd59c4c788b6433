"""
Random agent for hex minesweeper.

Serves as a baseline by selecting random valid actions.
"""
from typing import Optional, Sequence

import numpy as np

from .base_agent import BaseAgent


# ============================================================================
# Random Agent
# ============================================================================

class RandomAgent(BaseAgent):
    """
    Agent that selects actions uniformly at random.

    This provides a baseline for comparing the logic agent.
    """

    def __init__(
        self,
        neighbors: Sequence[Sequence[int]],
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize the random agent.

        Args:
            neighbors: Neighbor id list per cell.
            seed: Random seed for reproducibility.
        """
        super().__init__(neighbors)
        self.rng = np.random.default_rng(seed)

    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Select a random valid action.

        Returns:
            Random cell id from valid actions, 0 if there is none.
        """
        if valid_actions is None:
            valid_actions = self.get_valid_actions_from_obs(observation)

        valid_indices = np.where(valid_actions)[0]

        if len(valid_indices) == 0:
            return 0

        return int(self.rng.choice(valid_indices))
