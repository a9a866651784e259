"""Shared constants and fakes for API tests."""

from crowdvault.core.domain_types import Timestamp

START = 1_700_000_000
DEADLINE_OFFSET = 3600

CAMPAIGN_URL = "/api/v1/campaign"
REQUESTS_URL = "/api/v1/campaign/requests"

ADMIN_HEADERS = {"X-Caller-Address": "admin"}
ALICE_HEADERS = {"X-Caller-Address": "alice"}
BOB_HEADERS = {"X-Caller-Address": "bob"}
CAROL_HEADERS = {"X-Caller-Address": "carol"}


class FakeClock:
    """Clock capability with test-controlled time."""

    def __init__(self, now: int = START):
        self.current = now

    def now(self) -> Timestamp:
        return Timestamp(self.current)

    def advance(self, seconds: int) -> None:
        self.current += seconds

    def pass_deadline(self) -> None:
        self.current = START + DEADLINE_OFFSET + 1
