"""
Tests for the Gaussian elimination solver.
"""

import pytest

from calcsolver.models import LinearSystem
from calcsolver.solvers.linear import (
    NO_UNIQUE_SOLUTION,
    solve,
    solve_coefficient_form,
    solve_linear_system,
)
from calcsolver.utils.errors import InvalidCoefficientError, ParseError


def residual(matrix, constants, solution):
    return max(
        abs(sum(a * v for a, v in zip(row, solution)) - b)
        for row, b in zip(matrix, constants)
    )


class TestSolveLinearSystem:
    """Tests for solve_linear_system()."""

    def test_two_by_two(self):
        result = solve_linear_system([[2, 3], [1, -1]], [8, 1])
        assert result.success
        assert result.solution == pytest.approx([2.2, 1.2])

    def test_three_by_three(self):
        matrix = [[1, 1, 1], [2, -1, 1], [1, 2, -1]]
        constants = [6, 3, 2]
        result = solve_linear_system(matrix, constants)
        assert result.success
        assert result.solution == pytest.approx([1, 2, 3])

    @pytest.mark.parametrize(
        "matrix,constants",
        [
            ([[4, -2], [1, 1]], [2, 3]),
            ([[0.001, 1], [1, 1]], [1, 2]),
            ([[3, 2, -1], [2, -2, 4], [-1, 0.5, -1]], [1, -2, 0]),
            ([[1e-3, 2, 3], [4, 5, 6], [7, 8, 10]], [1, 2, 3]),
            ([[10, -7, 0], [-3, 2, 6], [5, -1, 5]], [7, 4, 6]),
        ],
    )
    def test_residual_is_small(self, matrix, constants):
        """A returned solution satisfies every equation."""
        result = solve_linear_system(matrix, constants)
        assert result.success
        assert residual(matrix, constants, result.solution) < 1e-8

    def test_zero_leading_pivot_needs_row_swap(self):
        result = solve_linear_system([[0, 1], [1, 0]], [5, 7])
        assert result.success
        assert result.solution == pytest.approx([7, 5])

    def test_row_order_does_not_change_solution(self):
        matrix = [[3, 2, -1], [2, -2, 4], [-1, 0.5, -1]]
        constants = [1, -2, 0]
        first = solve_linear_system(matrix, constants)
        permuted = solve_linear_system(
            [matrix[2], matrix[0], matrix[1]], [constants[2], constants[0], constants[1]]
        )
        assert permuted.solution == pytest.approx(first.solution)
        assert first.solution == pytest.approx([1, -2, -2])

    def test_zero_row_has_no_unique_solution(self):
        result = solve_linear_system([[1, 2], [0, 0]], [3, 0])
        assert not result.success
        assert result.solution is None
        assert result.error_message == NO_UNIQUE_SOLUTION

    def test_dependent_rows_have_no_unique_solution(self):
        result = solve_linear_system([[1, 1], [2, 2]], [2, 4])
        assert not result.success

    def test_inconsistent_rows_have_no_unique_solution(self):
        result = solve_linear_system([[1, 1], [1, 1]], [2, 3])
        assert not result.success

    def test_dependent_three_by_three(self):
        matrix = [[1, 2, 3], [4, 5, 6], [7, 8, 9]]
        assert not solve_linear_system(matrix, [1, 2, 3]).success

    def test_inputs_are_not_modified(self):
        matrix = [[0.0, 1.0], [2.0, 0.0]]
        constants = [3.0, 4.0]
        solve_linear_system(matrix, constants)
        assert matrix == [[0.0, 1.0], [2.0, 0.0]]
        assert constants == [3.0, 4.0]

    @pytest.mark.parametrize(
        "matrix,constants",
        [
            ([[1, 2], [3, 4]], [1, 2, 3]),
            ([[1, 2, 3], [4, 5, 6]], [1, 2]),
            ([[1], [2]], [1, 2]),
        ],
    )
    def test_shape_mismatch_raises(self, matrix, constants):
        with pytest.raises(ValueError):
            solve_linear_system(matrix, constants)

    def test_solve_linear_system_dataclass(self):
        system = LinearSystem(matrix=[[1, 1], [1, -1]], constants=[3, 1])
        assert system.size == 2
        assert solve(system).solution == pytest.approx([2, 1])


class TestCoefficientForm:
    """Tests for the text-field equation form."""

    def test_two_variables(self):
        result = solve_coefficient_form([["1", "1", "3"], ["1", "-1", "1"]])
        assert result.solution == pytest.approx([2, 1])

    def test_whitespace_and_exponents(self):
        result = solve_coefficient_form([[" 2 ", "3", "8"], ["1", "-1", "1e0"]])
        assert result.solution == pytest.approx([2.2, 1.2])

    def test_singular_is_a_failed_result(self):
        result = solve_coefficient_form([["1", "1", "2"], ["2", "2", "4"]])
        assert not result.success
        assert result.error_message == NO_UNIQUE_SOLUTION

    def test_invalid_field_names_the_cell(self):
        with pytest.raises(InvalidCoefficientError) as exc_info:
            solve_coefficient_form([["1", "1", "3"], ["1", "abc", "1"]])
        err = exc_info.value
        assert (err.row, err.column) == (1, 1)
        assert "Equation 2, field 2" in err.user_message
        assert isinstance(err, ParseError)

    def test_empty_field_is_invalid(self):
        with pytest.raises(InvalidCoefficientError) as exc_info:
            solve_coefficient_form([["1", "", "3"], ["1", "1", "1"]])
        assert exc_info.value.column == 1

    @pytest.mark.parametrize("cell", ["nan", "inf", "-inf"])
    def test_non_finite_field_is_invalid(self, cell):
        with pytest.raises(InvalidCoefficientError):
            solve_coefficient_form([[cell, "1", "3"], ["1", "1", "1"]])

    def test_validation_happens_before_solving(self):
        """A bad field is reported even when the other rows are singular."""
        with pytest.raises(InvalidCoefficientError):
            solve_coefficient_form([["0", "0", "0"], ["0", "0", "x"]])
