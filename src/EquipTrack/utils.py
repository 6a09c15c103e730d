import time
import uuid

DAY_MS = 24 * 60 * 60 * 1000


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def generate_id() -> str:
    return str(uuid.uuid4())


def days_to_ms(days: int) -> int:
    return days * DAY_MS
