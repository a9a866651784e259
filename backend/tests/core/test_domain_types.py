"""Domain Types — verifies type wrappers, constants and enum values.

Tests:
    - NewType wrappers are transparent at runtime
    - Minimum contribution and quorum constants
    - Enums have expected members and compare equal to their string values
"""

from crowdvault.core.domain_types import (
    Address, Amount, Timestamp, RequestIndex,
    MINIMUM_CONTRIBUTION, QUORUM_PERCENT, QUORUM_PRECISION,
    CampaignStatus, EventType,
)


def test_wrappers_are_transparent():
    assert Address("alice") == "alice"
    assert Amount(100) + Amount(5) == 105
    assert Timestamp(10) < Timestamp(11)
    assert RequestIndex(0) == 0


def test_constants():
    assert MINIMUM_CONTRIBUTION == 100
    assert QUORUM_PERCENT == 50
    assert QUORUM_PRECISION == 2


def test_campaign_status_has_three_phases():
    assert {s.value for s in CampaignStatus} == {
        "funding", "goal_reached", "goal_missed",
    }


def test_event_types():
    assert {e.value for e in EventType} == {
        "campaign_created", "contribution", "refund",
        "request_created", "vote_cast", "payment",
    }


def test_enums_compare_to_strings():
    assert CampaignStatus.GOAL_MISSED == "goal_missed"
    assert EventType.VOTE_CAST.value == "vote_cast"
