"""Tests for the edge-connectivity generator."""

import random

import pytest

from jigsaw_shapes import EdgeSign, check_connectivity, generate_edge_grid


class TestConnectivity:
    """Shared edges must be complementary and borders flat."""

    @pytest.mark.parametrize("seed", [42, 123, 456, 789, 1000])
    @pytest.mark.parametrize("rows,cols", [(2, 2), (3, 3), (5, 5), (8, 8), (2, 6), (6, 2)])
    def test_interior_edges_are_negated(self, rows: int, cols: int, seed: int) -> None:
        """Test that every interior edge is the negation of its neighbor's."""
        grid = generate_edge_grid(rows, cols, seed=seed)

        for y in range(rows):
            for x in range(cols - 1):
                right = grid.piece_edges(x, y).right
                assert right != EdgeSign.FLAT
                assert right == -grid.piece_edges(x + 1, y).left
        for y in range(rows - 1):
            for x in range(cols):
                bottom = grid.piece_edges(x, y).bottom
                assert bottom != EdgeSign.FLAT
                assert bottom == -grid.piece_edges(x, y + 1).top

    @pytest.mark.parametrize("rows,cols", [(1, 1), (1, 4), (4, 1), (3, 5)])
    def test_border_edges_are_flat(self, rows: int, cols: int) -> None:
        """Test that every edge on the grid boundary is flat."""
        grid = generate_edge_grid(rows, cols, seed=1)

        for x in range(cols):
            assert grid.piece_edges(x, 0).top == EdgeSign.FLAT
            assert grid.piece_edges(x, rows - 1).bottom == EdgeSign.FLAT
        for y in range(rows):
            assert grid.piece_edges(0, y).left == EdgeSign.FLAT
            assert grid.piece_edges(cols - 1, y).right == EdgeSign.FLAT

    @pytest.mark.parametrize("seed", range(10))
    def test_check_connectivity_finds_no_problems(self, seed: int) -> None:
        """Test that generated grids pass the connectivity check."""
        assert check_connectivity(generate_edge_grid(4, 6, seed=seed)) == []

    def test_single_piece_is_all_flat(self) -> None:
        """Test that a 1x1 grid has four flat edges."""
        grid = generate_edge_grid(1, 1, seed=0)
        assert list(grid.piece_edges(0, 0)) == [EdgeSign.FLAT] * 4


class TestGeneration:
    """Reproducibility and input validation."""

    def test_same_seed_same_grid(self) -> None:
        """Test that a seeded generator is reproducible."""
        assert generate_edge_grid(5, 5, seed=99) == generate_edge_grid(5, 5, seed=99)

    def test_injected_rng_is_used(self) -> None:
        """Test that an injected random source drives the tab directions."""
        first = generate_edge_grid(5, 5, rng=random.Random(3))
        second = generate_edge_grid(5, 5, rng=random.Random(3))
        assert first == second

    def test_both_directions_occur(self) -> None:
        """Test that tabs and blanks are both generated."""
        grid = generate_edge_grid(8, 8, seed=5)
        signs = {edges.right for _, _, edges in grid} | {edges.bottom for _, _, edges in grid}
        assert EdgeSign.OUT in signs
        assert EdgeSign.IN in signs

    def test_matrix_shape(self) -> None:
        """Test that the matrix is rows x cols."""
        grid = generate_edge_grid(3, 7, seed=0)
        assert len(grid.cells) == 3
        assert all(len(row) == 7 for row in grid.cells)
        assert len(list(grid)) == 21

    @pytest.mark.parametrize("rows,cols", [(0, 3), (3, 0), (-1, 2)])
    def test_invalid_size_raises(self, rows: int, cols: int) -> None:
        """Test that non-positive grid sizes are rejected."""
        with pytest.raises(ValueError):
            generate_edge_grid(rows, cols)

    def test_out_of_range_lookup_raises(self) -> None:
        """Test that lookups outside the grid fail."""
        grid = generate_edge_grid(2, 2, seed=0)
        with pytest.raises(IndexError):
            grid.piece_edges(2, 0)
