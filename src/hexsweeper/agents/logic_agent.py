"""
Logic-based agent for hex minesweeper.

Uses constraint propagation over the neighbor graph to make deductions
without guessing when possible.
"""
from typing import Optional, Set, Tuple, Dict, List, FrozenSet, Sequence
from dataclasses import dataclass
from collections import defaultdict

import numpy as np

from ..cell import OBS_FLAGGED, OBS_HIDDEN
from .base_agent import BaseAgent


# ============================================================================
# Constraint Types
# ============================================================================

@dataclass(frozen=True)
class Constraint:
    """
    A constraint representing: sum of cells in 'cells' == mine_count.

    For example, if a revealed "2" has 3 hidden neighbors and 0 flagged,
    the constraint is: cells={A, B, C}, mine_count=2
    """
    cells: FrozenSet[int]
    mine_count: int


@dataclass
class CellInfo:
    """Information about a revealed cell for constraint analysis."""

    cell_id: int
    adjacent_mines: int
    hidden_neighbors: Set[int]
    flagged_neighbors: Set[int]

    @property
    def remaining_mines(self) -> int:
        """Mines still to be found among hidden neighbors."""
        return self.adjacent_mines - len(self.flagged_neighbors)


# ============================================================================
# Logic Agent
# ============================================================================

class LogicAgent(BaseAgent):
    """
    Agent that propagates constraints from revealed counts.

    Strategy:
        1. Build constraints from all revealed cells
        2. Propagate until no cell can be decided anymore
        3. Apply subset reduction for advanced deductions
        4. If no certain moves, pick the cell with the lowest mine estimate

    Cells do not all have six neighbors here: border cells and cells next
    to inert cells have fewer, so constraints are built from the actual
    neighbor lists.
    """

    def __init__(
        self,
        neighbors: Sequence[Sequence[int]],
        seed: Optional[int] = None,
        max_iterations: int = 100,
    ) -> None:
        """
        Initialize the logic agent.

        Args:
            neighbors: Neighbor id list per cell.
            seed: Random seed for the opening move.
            max_iterations: Propagation rounds per decision.
        """
        super().__init__(neighbors)
        self.rng = np.random.default_rng(seed)
        self.max_iterations = max_iterations
        self._first_move = True

    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Select the best action using constraint propagation.

        Returns:
            Best cell id based on analysis.
        """
        if valid_actions is None:
            valid_actions = self.get_valid_actions_from_obs(observation)

        valid_indices = np.where(valid_actions)[0]

        if len(valid_indices) == 0:
            return 0

        if self._first_move:
            self._first_move = False
            return self._select_first_move(valid_indices)

        safe_cells, mine_cells = self._solve_constraints(observation)

        valid_set = set(int(index) for index in valid_indices)
        for cell_id in sorted(safe_cells):
            if cell_id in valid_set:
                return cell_id

        return self._select_by_probability(observation, valid_indices, mine_cells)

    def _select_first_move(self, valid_indices: np.ndarray) -> int:
        """Open on the cell with the most neighbors (best cascade chance)."""
        degrees = np.array([len(self.neighbors[i]) for i in valid_indices])
        best = valid_indices[degrees == degrees.max()]
        return int(self.rng.choice(best))

    def _build_constraints(self, observation: np.ndarray) -> List[Constraint]:
        """
        Build constraints from revealed cells.

        Each revealed count N with hidden neighbors creates a constraint:
        "exactly (N - flagged_count) of these hidden cells are mines"
        """
        constraints = []

        for cell_id, value in enumerate(observation):
            if value < 0:
                continue

            info = self._get_cell_info(observation, cell_id)

            if not info.hidden_neighbors:
                continue
            if info.remaining_mines < 0:
                continue
            if info.remaining_mines > len(info.hidden_neighbors):
                continue

            constraints.append(Constraint(
                cells=frozenset(info.hidden_neighbors),
                mine_count=info.remaining_mines
            ))

        return constraints

    def _solve_constraints(
        self, observation: np.ndarray
    ) -> Tuple[Set[int], Set[int]]:
        """
        Propagate constraints to find definite safe/mine cells.

        Returns:
            Tuple of (safe_cells, mine_cells) sets.
        """
        safe_cells: Set[int] = set()
        mine_cells: Set[int] = set()

        constraints = self._build_constraints(observation)

        changed = True
        iterations = 0

        while changed and iterations < self.max_iterations:
            changed = False
            iterations += 1

            new_constraints = []
            for constraint in constraints:
                remaining_cells = constraint.cells - safe_cells - mine_cells
                remaining_mines = constraint.mine_count - len(constraint.cells & mine_cells)

                if not remaining_cells:
                    continue

                if remaining_mines == 0:
                    safe_cells.update(remaining_cells)
                    changed = True
                    continue

                if remaining_mines == len(remaining_cells):
                    mine_cells.update(remaining_cells)
                    changed = True
                    continue

                new_constraints.append(Constraint(
                    cells=frozenset(remaining_cells),
                    mine_count=remaining_mines
                ))

            constraints = new_constraints

            subset_safe, subset_mines, constraints = self._subset_reduction(constraints)
            if (subset_safe - safe_cells) or (subset_mines - mine_cells):
                safe_cells.update(subset_safe)
                mine_cells.update(subset_mines)
                changed = True

        return safe_cells, mine_cells

    def _subset_reduction(
        self, constraints: List[Constraint]
    ) -> Tuple[Set[int], Set[int], List[Constraint]]:
        """
        Apply subset reduction to find additional deductions.

        If constraint A's cells are a subset of constraint B's cells, the
        difference (B - A) has (B.mines - A.mines) mines.

        Example:
            A: {X, Y} has 1 mine
            B: {X, Y, Z} has 1 mine
            → Z must be safe
        """
        safe_cells: Set[int] = set()
        mine_cells: Set[int] = set()
        new_constraints: List[Constraint] = []

        for i, c1 in enumerate(constraints):
            for c2 in constraints[i + 1:]:
                if c1.cells < c2.cells:
                    smaller, larger = c1, c2
                elif c2.cells < c1.cells:
                    smaller, larger = c2, c1
                else:
                    continue

                diff_cells = larger.cells - smaller.cells
                diff_mines = larger.mine_count - smaller.mine_count

                if diff_mines == 0:
                    safe_cells.update(diff_cells)
                elif diff_mines == len(diff_cells):
                    mine_cells.update(diff_cells)
                elif 0 < diff_mines < len(diff_cells):
                    new_constraints.append(Constraint(
                        cells=frozenset(diff_cells),
                        mine_count=diff_mines
                    ))

        # Deduplicate constraints
        seen = set()
        result_constraints = []
        for c in constraints + new_constraints:
            if c not in seen:
                seen.add(c)
                result_constraints.append(c)

        return safe_cells, mine_cells, result_constraints

    def _get_cell_info(self, observation: np.ndarray, cell_id: int) -> CellInfo:
        """Get analysis info for a revealed cell."""
        hidden_neighbors: Set[int] = set()
        flagged_neighbors: Set[int] = set()

        for neighbor_id in self.neighbors[cell_id]:
            val = observation[neighbor_id]
            if val == OBS_HIDDEN:
                hidden_neighbors.add(neighbor_id)
            elif val == OBS_FLAGGED:
                flagged_neighbors.add(neighbor_id)

        return CellInfo(
            cell_id=cell_id,
            adjacent_mines=int(observation[cell_id]),
            hidden_neighbors=hidden_neighbors,
            flagged_neighbors=flagged_neighbors,
        )

    def _select_by_probability(
        self,
        observation: np.ndarray,
        valid_indices: np.ndarray,
        known_mines: Set[int],
    ) -> int:
        """Select the cell with the lowest estimated mine probability."""
        probabilities = self._estimate_mine_probabilities(observation, known_mines)

        best_action = int(valid_indices[0])
        best_prob = 1.0

        for action in valid_indices:
            cell_id = int(action)
            if cell_id in known_mines:
                continue

            prob = probabilities.get(cell_id, 0.5)
            if prob < best_prob:
                best_prob = prob
                best_action = cell_id

        return best_action

    def _estimate_mine_probabilities(
        self,
        observation: np.ndarray,
        known_mines: Set[int],
    ) -> Dict[int, float]:
        """
        Estimate mine probability for each constrained hidden cell.

        Returns:
            Dict mapping cell id to probability of being a mine.
        """
        probabilities: Dict[int, List[float]] = defaultdict(list)

        for cell_id, value in enumerate(observation):
            if value < 1:
                continue

            info = self._get_cell_info(observation, cell_id)
            unknown_neighbors = info.hidden_neighbors - known_mines
            remaining = info.remaining_mines - len(info.hidden_neighbors & known_mines)

            if not unknown_neighbors or remaining < 0:
                continue

            prob = remaining / len(unknown_neighbors)
            for neighbor in unknown_neighbors:
                probabilities[neighbor].append(prob)

        # Most conservative estimate across constraints
        return {cell: max(probs) for cell, probs in probabilities.items()}

    def reset(self) -> None:
        """Reset for new game."""
        self._first_move = True
