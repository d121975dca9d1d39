"""Severity and scan-type vocabulary translation.

Results are stored with internal severities (``Critical``, ``High``, ...)
while clients speak the display vocabulary (``critical``, ``serious``, ...).
Every translation between the two goes through the tables below.
"""

from typing import Dict, FrozenSet, Optional, Union

from .models import ScanType, Severity

DISPLAY_TO_INTERNAL: Dict[str, str] = {
    "critical": Severity.CRITICAL.value,
    "serious": Severity.HIGH.value,
    "moderate": Severity.MEDIUM.value,
    "minor": Severity.LOW.value,
    "info": Severity.INFO.value,
}

INTERNAL_TO_DISPLAY: Dict[str, str] = {v: k for k, v in DISPLAY_TO_INTERNAL.items()}

# Urgency rank; the enum names do not sort in this order lexically
SEVERITY_RANK: Dict[str, int] = {
    Severity.CRITICAL.value: 1,
    Severity.HIGH.value: 2,
    Severity.MEDIUM.value: 3,
    Severity.LOW.value: 4,
    Severity.INFO.value: 5,
}
UNKNOWN_SEVERITY_RANK = 6

SCAN_TYPE_TOKENS: Dict[str, str] = {
    "accessibility": ScanType.ACCESSIBILITY.value,
    "security": ScanType.SECURITY.value,
    "seo": ScanType.SEO.value,
    "performance": ScanType.PERFORMANCE.value,
    "uptime": ScanType.UPTIME.value,
    "ssl": ScanType.SSLTLS.value,
}

# Severities implied by a security sub-category, used only when
# CATEGORY_FILTER_MODE is "severity_range".
CATEGORY_SEVERITY_RANGES: Dict[str, FrozenSet[Severity]] = {
    "headers": frozenset({Severity.HIGH, Severity.MEDIUM}),
    "tls": frozenset({Severity.HIGH, Severity.MEDIUM}),
    "csp": frozenset({Severity.HIGH, Severity.MEDIUM}),
    "cors": frozenset({Severity.MEDIUM, Severity.LOW}),
    "auth": frozenset({Severity.CRITICAL, Severity.HIGH}),
    "injection": frozenset({Severity.CRITICAL, Severity.HIGH}),
    "xss": frozenset({Severity.CRITICAL, Severity.HIGH}),
    "sqli": frozenset({Severity.CRITICAL, Severity.HIGH}),
    "info-leak": frozenset({Severity.MEDIUM, Severity.LOW, Severity.INFO}),
    "owasp": frozenset({Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM}),
}


def _value(severity: Union[str, Severity]) -> str:
    return severity.value if isinstance(severity, Severity) else severity


def to_internal(display: str) -> str:
    """Map a display severity (``serious``) to its internal name (``High``)."""
    mapped = DISPLAY_TO_INTERNAL.get(display.lower())
    if mapped is not None:
        return mapped
    return display[:1].upper() + display[1:]


def to_display(internal: Union[str, Severity]) -> str:
    """Map an internal severity (``High``) to its display name (``serious``)."""
    value = _value(internal)
    return INTERNAL_TO_DISPLAY.get(value, value.lower())


def severity_rank(severity: Union[str, Severity]) -> int:
    return SEVERITY_RANK.get(_value(severity), UNKNOWN_SEVERITY_RANK)


def to_scan_type(token: str) -> str:
    """Map a UI scan-type token (``ssl``) to the stored scan type (``SSLTLS``)."""
    return SCAN_TYPE_TOKENS.get(token.lower(), token)


def display_scan_type(scan_type: Optional[Union[str, ScanType]]) -> str:
    """Collapse the owning scan's type into ``security`` or ``wcag``."""
    if scan_type is None:
        return "wcag"
    value = scan_type.value if isinstance(scan_type, ScanType) else scan_type
    return "security" if value == ScanType.SECURITY.value else "wcag"


def category_severities(category: str) -> Optional[FrozenSet[Severity]]:
    """Severities implied by a category, or None if the category is unknown."""
    return CATEGORY_SEVERITY_RANGES.get(category.lower())
