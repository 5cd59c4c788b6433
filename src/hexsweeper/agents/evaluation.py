"""
Evaluation of automated players on a loaded grid.
"""
from typing import Dict, Optional

import structlog

from ..board import DEFAULT_THRESHOLD
from ..environment import HexMinesweeperEnv
from ..registry import CellRegistry
from .base_agent import BaseAgent

logger = structlog.get_logger()


class Evaluator:
    """
    Evaluate and compare multiple agents.

    Mines are fixed by the threshold, so episodes differ only in the
    choices the agent makes.
    """

    def __init__(
        self,
        registry: CellRegistry,
        threshold: float = DEFAULT_THRESHOLD,
        num_episodes: int = 100,
        max_steps: Optional[int] = None,
    ) -> None:
        """
        Initialize the evaluator.

        Args:
            registry: Loaded cells with their neighbor graph.
            threshold: Mine threshold for all episodes.
            num_episodes: Number of evaluation episodes.
            max_steps: Maximum steps per episode (default: number of cells).
        """
        self.env = HexMinesweeperEnv(registry, threshold=threshold)
        self.num_episodes = num_episodes
        self.max_steps = max_steps or len(registry)

    def evaluate(self, agent: BaseAgent) -> Dict[str, float]:
        """
        Evaluate a single agent.

        Returns:
            Dictionary with evaluation metrics.
        """
        wins = 0
        total_reward = 0.0
        total_steps = 0
        total_revealed = 0

        for _ in range(self.num_episodes):
            observation, info = self.env.reset()
            agent.reset()
            episode_reward = 0.0

            for _ in range(self.max_steps):
                valid_actions = self.env.get_action_mask()
                if not valid_actions.any():
                    break

                action = agent.select_action(observation, valid_actions)
                observation, reward, terminated, truncated, info = self.env.step(action)

                episode_reward += reward
                total_steps += 1

                if terminated or truncated:
                    break

            if info.get("game_state") == "WON":
                wins += 1
            total_revealed += info.get("revealed", 0)
            total_reward += episode_reward

        return {
            "win_rate": wins / self.num_episodes,
            "avg_reward": total_reward / self.num_episodes,
            "avg_steps": total_steps / self.num_episodes,
            "avg_revealed": total_revealed / self.num_episodes,
        }

    def compare(
        self, agents: Dict[str, BaseAgent]
    ) -> Dict[str, Dict[str, float]]:
        """
        Compare multiple agents.

        Args:
            agents: Dictionary of agent_name -> agent.

        Returns:
            Dictionary of agent_name -> evaluation metrics.
        """
        results = {}
        for name, agent in agents.items():
            logger.info("Evaluating agent", agent=name, episodes=self.num_episodes)
            results[name] = self.evaluate(agent)
        return results
