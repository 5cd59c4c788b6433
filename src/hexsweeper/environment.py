"""
Gymnasium environment wrapper for hex minesweeper.

Provides a standard RL interface for automated players on a loaded grid.
"""
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import Board, DEFAULT_THRESHOLD
from .cell import OBS_FLAGGED, OBS_HIDDEN, OBS_INERT, OBS_MINE
from .registry import CellRegistry


# ============================================================================
# Hex Minesweeper Environment
# ============================================================================

class HexMinesweeperEnv(gym.Env):
    """
    Gymnasium environment for hex minesweeper.

    Observation:
        1D array indexed by cell id where:
        - -1 = hidden cell
        - -2 = flagged cell
        - -3 = inert cell
        - -4 = revealed mine
        - 0+ = revealed cell with adjacent mine count

    Actions:
        Discrete action space with one reveal action per cell.

    Rewards:
        - +1 for revealing a safe cell
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for invalid action (inert, revealed or flagged)
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        registry: CellRegistry,
        threshold: float = DEFAULT_THRESHOLD,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the environment.

        Args:
            registry: Loaded cells with their neighbor graph.
            threshold: Mine threshold for every episode.
            render_mode: How to render the environment.
        """
        super().__init__()

        self.board = Board(registry, threshold=threshold)
        self.render_mode = render_mode

        self.observation_space = spaces.Box(
            low=OBS_MINE,
            high=max(self.board.max_observation(), 1),
            shape=(self.board.num_cells,),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(self.board.num_cells)

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new episode.

        Args:
            seed: Random seed for reproducibility.
            options: May carry a new "threshold".

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        threshold = (options or {}).get("threshold")
        self.board.assign_mines(threshold)
        self._steps = 0

        return self.board.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Reveal the cell with the given id.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        self._steps += 1
        reward = self._calculate_reward(int(action))

        observation = self.board.get_observation()
        terminated = not self.board.is_playing
        truncated = False

        return observation, reward, terminated, truncated, self._get_info()

    def _calculate_reward(self, cell_id: int) -> float:
        """Perform the reveal and score its outcome."""
        if not self.board.reveal(cell_id):
            return -0.1

        if self.board.is_won:
            return 10.0
        if self.board.is_lost:
            return -10.0
        return 1.0

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        return {
            "steps": self._steps,
            "revealed": self.board.revealed_count,
            "total_safe": self.board.total_safe,
            "game_state": self.board.game_state.name,
            "valid_actions": len(self.board.get_valid_actions()),
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return self._render_ansi()
        if self.render_mode == "human":
            print(self._render_ansi())
        return None

    def _render_ansi(self, per_line: int = 32) -> str:
        """Render cells in id order as rows of symbols."""
        symbols = {
            OBS_HIDDEN: ".",
            OBS_FLAGGED: "F",
            OBS_INERT: " ",
            OBS_MINE: "*",
        }
        obs = self.board.get_observation()
        chars = [symbols.get(int(val), str(min(int(val), 9))) for val in obs]

        lines = [self.board.status_text()]
        for start in range(0, len(chars), per_line):
            lines.append(" ".join(chars[start:start + per_line]))
        return "\n".join(lines)

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions.

        Returns:
            Boolean array where True = valid action.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        mask[self.board.get_valid_actions()] = True
        return mask
