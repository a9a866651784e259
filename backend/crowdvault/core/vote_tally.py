"""Vote Tally — integer percentage math and the majority threshold.

Invariants:
    - All functions are PURE: no IO, no side effects
    - compute_percent never uses floats: floor(numerator * 10**precision / denominator)
    - No contributors means quorum can never be met

Design Decisions:
    - Integer arithmetic over Fraction/Decimal: results must be exact and
      directly comparable against QUORUM_PERCENT
"""

from crowdvault.core.domain_types import QUORUM_PERCENT, QUORUM_PRECISION
from crowdvault.core.errors import DivisionByZeroError


def compute_percent(numerator: int, denominator: int, precision: int) -> int:
    """Ratio scaled by 10**precision, floored. precision=2 yields whole percent."""
    if denominator == 0:
        raise DivisionByZeroError()
    return (numerator * 10 ** precision) // denominator


def quorum_reached(vote_count: int, number_of_contributors: int) -> bool:
    """Whether at least half of the current contributors approved."""
    if number_of_contributors == 0:
        return False
    percent = compute_percent(vote_count, number_of_contributors, QUORUM_PRECISION)
    return percent >= QUORUM_PERCENT
