"""System Clock — wall-clock implementation of the core Clock protocol."""

import time

from crowdvault.core.domain_types import Timestamp


class SystemClock:
    """Integer Unix seconds from the host clock."""

    def now(self) -> Timestamp:
        return Timestamp(int(time.time()))
