import random

import pytest

from route_optimizer.services.routing.models import TravelMatrix
from route_optimizer.services.routing.sequence_solver import solve_sequence, summarize_path


class UntouchableMatrix:
    """Reports a size but fails if any row is read."""

    def __init__(self, size: int) -> None:
        self.size = size

    def __len__(self) -> int:
        return self.size

    def __getitem__(self, index):
        raise AssertionError("matrix should not be consulted")


@pytest.mark.parametrize(("size", "expected"), [(0, []), (1, [0]), (2, [0, 1])])
def test_small_inputs_do_not_read_matrix(size, expected):
    assert solve_sequence(UntouchableMatrix(size)) == expected


def test_picks_nearest_unvisited_interior_stop():
    times = [
        [0, 50, 10, 30, 1],
        [40, 0, 40, 40, 40],
        [40, 40, 0, 5, 40],
        [20, 7, 40, 0, 40],
        [1, 1, 1, 1, 0],
    ]

    assert solve_sequence(times) == [0, 2, 3, 1, 4]


def test_end_stop_stays_last_even_when_closest():
    times = [
        [0, 90, 80, 1],
        [90, 0, 10, 1],
        [80, 10, 0, 1],
        [1, 1, 1, 0],
    ]

    assert solve_sequence(times) == [0, 2, 1, 3]


def test_ties_go_to_first_candidate_in_iteration_order():
    times = [
        [0, 10, 10, 10, 0],
        [10, 0, 10, 10, 0],
        [10, 10, 0, 10, 0],
        [10, 10, 10, 0, 0],
        [0, 0, 0, 0, 0],
    ]

    assert solve_sequence(times) == [0, 1, 2, 3, 4]


def test_unknown_times_are_skipped_when_any_candidate_is_known():
    times = [
        [0, None, 20, None],
        [None, 0, None, None],
        [None, None, 0, None],
        [None, None, None, 0],
    ]

    assert solve_sequence(times) == [0, 2, 1, 3]


def test_all_unknown_row_falls_back_to_first_remaining_candidate():
    times = [
        [0, None, None, None, 5],
        [None, 0, 50, 5, None],
        [None, None, 0, None, None],
        [None, None, None, 0, None],
        [None, None, None, None, 0],
    ]

    assert solve_sequence(times) == [0, 1, 3, 2, 4]


def test_random_matrices_yield_fixed_endpoint_permutations():
    rng = random.Random(7)
    for size in range(3, 15):
        times = [
            [None if rng.random() < 0.2 else rng.uniform(0, 3600) for _ in range(size)]
            for _ in range(size)
        ]

        order = solve_sequence(times)

        assert len(order) == size
        assert sorted(order) == list(range(size))
        assert order[0] == 0
        assert order[-1] == size - 1


def test_summarize_path_sums_consecutive_cells_and_zeroes_unknowns():
    matrix = TravelMatrix(
        distances=[
            [0, 1000, 2500],
            [1000, 0, None],
            [2500, 700, 0],
        ],
        times=[
            [0, 60, 200],
            [60, 0, 45],
            [200, None, 0],
        ],
    )

    summary = summarize_path(matrix, [0, 2, 1])

    assert summary.total_distance == 2500 + 700
    assert summary.total_time == 200 + 0


def test_summarize_path_of_single_stop_is_zero():
    matrix = TravelMatrix(distances=[[0]], times=[[0]])

    summary = summarize_path(matrix, [0])

    assert summary.total_distance == 0
    assert summary.total_time == 0
