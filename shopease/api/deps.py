import time

from shopease.config import get_settings

settings = get_settings()


def request_deadline() -> float:
    """Deadline (time.monotonic()) for the data access call of one request."""
    return time.monotonic() + settings.REQUEST_TIMEOUT_SECONDS
