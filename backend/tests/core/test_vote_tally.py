"""Vote Tally — tests for integer percentage math and the quorum threshold.

Tests cover:
    - compute_percent floors and scales by 10**precision
    - compute_percent rejects a zero denominator
    - quorum_reached at, below and above 50%, and with no contributors
"""

import pytest

from crowdvault.core.errors import DivisionByZeroError
from crowdvault.core.vote_tally import compute_percent, quorum_reached


# ─── compute_percent ─────────────────────────────────────────────

def test_one_third_floors_to_33():
    assert compute_percent(1, 3, 2) == 33


def test_two_of_two_is_100():
    assert compute_percent(2, 2, 2) == 100


def test_precision_scales_result():
    assert compute_percent(1, 3, 0) == 0
    assert compute_percent(1, 3, 4) == 3333
    assert compute_percent(2, 3, 2) == 66


def test_zero_numerator_is_zero():
    assert compute_percent(0, 7, 2) == 0


def test_zero_denominator_raises():
    with pytest.raises(DivisionByZeroError) as exc_info:
        compute_percent(5, 0, 2)
    assert exc_info.value.code == "DIVISION_BY_ZERO"


def test_zero_over_zero_raises():
    with pytest.raises(DivisionByZeroError):
        compute_percent(0, 0, 2)


# ─── quorum_reached ──────────────────────────────────────────────

def test_exactly_half_reaches_quorum():
    assert quorum_reached(1, 2)
    assert quorum_reached(2, 4)


def test_just_below_half_fails():
    # 49.99...% floors to 49
    assert not quorum_reached(4999, 10000)
    assert not quorum_reached(1, 3)


def test_majority_reaches_quorum():
    assert quorum_reached(2, 3)
    assert quorum_reached(3, 3)


def test_no_contributors_never_reaches_quorum():
    assert not quorum_reached(0, 0)


def test_no_votes_fails():
    assert not quorum_reached(0, 5)
