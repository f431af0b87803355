import logging
import random

from prometheus_client import Histogram

logger = logging.getLogger(__name__)

poll_interval_seconds = Histogram(
    'poll_interval_seconds',
    'Poll intervals suggested to devices',
    buckets=(5, 10, 15, 20, 30, 45, 60),
)

class IntervalAdvisor:
    """Suggests how long the device should sleep before its next report."""

    def __init__(self, min_seconds: int = 4, max_seconds: int = 60):
        if min_seconds > max_seconds:
            raise ValueError(f"min_seconds ({min_seconds}) > max_seconds ({max_seconds})")
        self.min_seconds = min_seconds
        self.max_seconds = max_seconds

    def next_poll_interval(self) -> int:
        seconds = random.randint(self.min_seconds, self.max_seconds)
        poll_interval_seconds.observe(seconds)
        logger.info(f"Solicitud de tiempo recibida. Respondiendo: {seconds}s")
        return seconds
