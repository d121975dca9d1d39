"""Fix-time estimates for findings and severity totals."""

import math
from typing import Dict, Iterable, Optional, Tuple

from .severity import to_display

# Minutes per finding, keyed by display severity
FIX_MINUTES_BY_SEVERITY: Dict[str, float] = {
    "critical": 60,
    "serious": 30,
    "moderate": 15,
    "minor": 5,
}
DEFAULT_FIX_MINUTES = 30

# First matching keyword group wins
MESSAGE_MULTIPLIERS: Tuple[Tuple[Tuple[str, ...], float], ...] = (
    (("color contrast", "contrast"), 0.2),
    (("alt", "alternative text"), 0.05),
    (("heading", "structure"), 1.0),
    (("keyboard", "focus"), 3.0),
    (("aria", "role"), 2.0),
)

STRICT_COMPLIANCE_TAGS = ("wcag2aaa", "section508")
STRICT_COMPLIANCE_MULTIPLIER = 1.1

# Dashboard totals use flat per-severity minutes
DASHBOARD_MINUTES = {"critical": 30, "serious": 20, "moderate": 10, "minor": 5}

WORKDAY_MINUTES = 480


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_duration(minutes: float) -> str:
    """Render minutes as ``45m``, ``2h 30m`` or ``3d 2h`` (8-hour days)."""
    if minutes < 60:
        return f"{_round_half_up(minutes)}m"
    if minutes < WORKDAY_MINUTES:
        hours = int(minutes // 60)
        mins = _round_half_up(minutes % 60)
        return f"{hours}h {mins}m" if mins > 0 else f"{hours}h"
    days = int(minutes // WORKDAY_MINUTES)
    hours = int((minutes % WORKDAY_MINUTES) // 60)
    return f"{days}d {hours}h" if hours > 0 else f"{days}d"


def estimate_fix_minutes(
    severity: str, message: Optional[str], tags: Iterable[str] = ()
) -> float:
    minutes = FIX_MINUTES_BY_SEVERITY.get(to_display(severity), DEFAULT_FIX_MINUTES)

    text = (message or "").lower()
    for keywords, multiplier in MESSAGE_MULTIPLIERS:
        if any(k in text for k in keywords):
            minutes *= multiplier
            break

    tags = list(tags)
    if any(tag in tags for tag in STRICT_COMPLIANCE_TAGS):
        minutes *= STRICT_COMPLIANCE_MULTIPLIER
    return minutes


def estimate_fix_time(
    severity: str, message: Optional[str], tags: Iterable[str] = ()
) -> str:
    """Formatted estimate for fixing one finding."""
    return format_duration(estimate_fix_minutes(severity, message, tags))


def calculate_estimated_time(
    critical: int, serious: int, moderate: int, minor: int
) -> str:
    """Formatted estimate for fixing a batch of findings by severity count."""
    minutes = (
        critical * DASHBOARD_MINUTES["critical"]
        + serious * DASHBOARD_MINUTES["serious"]
        + moderate * DASHBOARD_MINUTES["moderate"]
        + minor * DASHBOARD_MINUTES["minor"]
    )
    return format_duration(minutes)
