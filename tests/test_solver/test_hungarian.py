"""
Tests for the Hungarian solver driver.

This module tests the public ``solve`` contract: bijective output,
optimality against brute force, the reference scenarios, determinism,
error surfacing and configuration handling.
"""

import numpy as np
import pytest
import torch

from kuhnmunkres.configs import get_default_config
from kuhnmunkres.engine.hooks import ImageExportHook, LoggingHook
from kuhnmunkres.solver import (
    Assignment,
    DimensionError,
    HungarianSolver,
    InternalInvariantError,
    SolverState,
    reduce_cost_matrix,
    solve,
    total_cost,
)


class TestScenarios:
    """Small hand-checked problems."""

    def test_single_cell(self):
        """1x1 matrix assigns row 0 to column 0."""
        result = solve([[5.0]])

        assert result.as_dict() == {0: 0}
        assert result.cost == 5.0

    def test_two_by_two_prefers_diagonal(self, two_by_two):
        """Cost 2 diagonal beats cost 4 anti-diagonal."""
        result = solve(two_by_two)

        assert result.row_to_col == (0, 1)
        assert result.cost == 2.0

    def test_all_ties(self, assert_bijection):
        """Any permutation is optimal when all costs are equal."""
        result = solve([[1.0, 1.0], [1.0, 1.0]])

        assert_bijection(result.row_to_col, 2)
        assert result.cost == 2.0

    def test_incomplete_greedy_selection(self, incomplete_greedy_matrix, brute_force_cost):
        """Greedy start is repaired by adjustments and one augmentation."""
        result = solve(incomplete_greedy_matrix)

        assert result.row_to_col == (3, 1, 0, 2)
        assert result.cost == 13.0
        assert result.cost == brute_force_cost(incomplete_greedy_matrix)
        assert result.augmentations == 1
        assert result.iterations == 3

    def test_positive_adjustment_needed(self, rank_one_matrix):
        """Anti-diagonal is optimal for a rank-one matrix."""
        result = solve(rank_one_matrix)

        assert result.row_to_col == (2, 1, 0)
        assert result.cost == 10.0
        assert result.offset == 9.0

    def test_repeated_rows(self, repeated_rows_matrix, brute_force_cost):
        """Identical rows compete for the same cheap columns."""
        result = solve(repeated_rows_matrix)

        assert result.row_to_col == (1, 2, 3, 0)
        assert result.cost == brute_force_cost(repeated_rows_matrix) == 16.0

    def test_negative_costs(self, brute_force_cost):
        """Negative entries are valid costs."""
        costs = [[-3.0, 2.0, 0.0], [1.0, -5.0, 4.0], [0.5, 0.0, -1.0]]
        result = solve(costs)

        assert result.cost == pytest.approx(brute_force_cost(costs))
        assert result.row_to_col == (0, 1, 2)


class TestOptimality:
    """Properties checked on random matrices."""

    @pytest.mark.parametrize("size", [1, 2, 3, 4, 5, 6, 7])
    def test_matches_brute_force(self, size, random_matrix, brute_force_cost, assert_bijection):
        """Returned cost equals the minimum over all permutations."""
        for seed in range(5):
            costs = random_matrix(size, seed)
            result = solve(costs)

            assert_bijection(result.row_to_col, size)
            assert result.cost == brute_force_cost(costs)

    def test_matches_brute_force_size_eight(self, random_matrix, brute_force_cost):
        """Largest size covered by enumeration."""
        costs = random_matrix(8, 123)
        assert solve(costs).cost == brute_force_cost(costs)

    def test_many_ties(self, brute_force_cost, assert_bijection):
        """Matrices with few distinct values produce many zeros."""
        generator = torch.Generator().manual_seed(7)
        for _ in range(10):
            costs = torch.randint(0, 3, (6, 6), generator=generator).to(torch.float64)
            result = solve(costs)

            assert_bijection(result.row_to_col, 6)
            assert result.cost == brute_force_cost(costs)

    def test_real_valued_costs(self, brute_force_cost):
        """Non-integer costs are solved to optimality."""
        generator = torch.Generator().manual_seed(11)
        for _ in range(5):
            costs = torch.rand(6, 6, generator=generator, dtype=torch.float64)
            assert solve(costs).cost == pytest.approx(brute_force_cost(costs))

    def test_large_matrix_is_bijection(self, random_matrix, assert_bijection):
        """Bigger problems still yield a permutation."""
        result = solve(random_matrix(30, 0))
        assert_bijection(result.row_to_col, 30)

    def test_reduction_preserves_optimal_cost(self, random_matrix):
        """Solving the reduced matrix gives an equally cheap assignment."""
        for seed in range(5):
            costs = random_matrix(6, seed)
            direct = solve(costs)
            via_reduced = solve(reduce_cost_matrix(costs))

            assert total_cost(costs, via_reduced.row_to_col) == direct.cost

    def test_deterministic(self, random_matrix):
        """Independent copies of the same input give identical results."""
        costs = random_matrix(7, 3)

        first = solve(costs.clone())
        second = solve(costs.clone())

        assert first == second


class TestInputs:
    """Tests for accepted input containers."""

    def test_numpy_input(self, two_by_two):
        """ndarray input is accepted and left unchanged."""
        costs = np.array(two_by_two)
        before = costs.copy()

        result = solve(costs)

        assert result.row_to_col == (0, 1)
        np.testing.assert_array_equal(costs, before)

    def test_tensor_input_not_mutated(self, rank_one_matrix):
        """Tensor input is copied before reduction."""
        costs = torch.tensor(rank_one_matrix)
        before = costs.clone()

        solve(costs)

        assert torch.equal(costs, before)

    def test_non_square_raises_before_mutation(self):
        """3x2 input raises DimensionError and is left as given."""
        costs = [[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]]

        with pytest.raises(DimensionError):
            solve(costs)

        assert costs == [[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]]

    def test_nan_raises(self):
        """NaN costs surface as an invariant error."""
        with pytest.raises(InternalInvariantError):
            solve([[1.0, float("nan")], [2.0, 3.0]])


class TestErrorSurfacing:
    """Invariant failures are reported with context."""

    def test_iteration_ceiling(self, incomplete_greedy_matrix):
        """Exceeding the ceiling raises with state and snapshot attached."""
        solver = HungarianSolver(max_iterations=0)

        with pytest.raises(InternalInvariantError) as exc_info:
            solver.solve(incomplete_greedy_matrix)

        error = exc_info.value
        assert error.state is SolverState.SELECT
        assert error.snapshot is not None
        assert error.snapshot.num_selected == 3
        assert error.snapshot.matrix.shape == (4, 4)
        assert "SELECT" in str(error)

    def test_complete_greedy_needs_no_iteration(self, two_by_two):
        """A perfect initial selection finishes without iterating."""
        result = HungarianSolver(max_iterations=0).solve(two_by_two)

        assert result.iterations == 0
        assert result.augmentations == 0


class TestAssignment:
    """Tests for the result object."""

    def test_accessors(self):
        """Mapping helpers agree with row_to_col."""
        result = Assignment(row_to_col=(2, 0, 1), cost=3.0)

        assert len(result) == 3
        assert result[0] == 2
        assert list(result) == [2, 0, 1]
        assert result.pairs() == [(0, 2), (1, 0), (2, 1)]
        assert result.as_dict() == {0: 2, 1: 0, 2: 1}
        assert result.col_to_row == (1, 2, 0)

    def test_total_cost(self, two_by_two):
        """total_cost evaluates any permutation."""
        assert total_cost(two_by_two, [1, 0]) == 4.0
        assert total_cost(two_by_two, (0, 1)) == 2.0


class TestSolverConfig:
    """Tests for configuration-driven solver settings."""

    def test_no_hooks_without_config(self):
        """Plain solver has no observers."""
        assert HungarianSolver().hooks == []

    def test_hooks_from_config(self, tmp_path):
        """Enabled logging and export sections create hooks."""
        config = get_default_config()
        config.set("logging.enabled", True)
        config.set("export.enabled", True)
        config.set("export.output_dir", str(tmp_path))

        solver = HungarianSolver(config=config)

        assert [type(hook) for hook in solver.hooks] == [LoggingHook, ImageExportHook]
        assert solver.hooks[1].output_dir == tmp_path

    def test_max_iterations_from_config(self, incomplete_greedy_matrix):
        """Ceiling is read from solver.max_iterations."""
        config = get_default_config()
        config.set("solver.max_iterations", 1)

        with pytest.raises(InternalInvariantError):
            HungarianSolver(config=config).solve(incomplete_greedy_matrix)

    def test_solver_is_reusable(self, two_by_two, rank_one_matrix):
        """State from one solve does not leak into the next."""
        solver = HungarianSolver()

        assert solver.solve(rank_one_matrix).cost == 10.0
        assert solver.solve(two_by_two).cost == 2.0
        assert solver.solve(rank_one_matrix).cost == 10.0
