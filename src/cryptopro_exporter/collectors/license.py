"""CryptoPro license collector."""

import re
from dataclasses import dataclass
from typing import Callable

from ..errors import ParseError

# Reported in place of a day count for licenses that never expire
PERMANENT_LICENSE_DAYS = 9999999

# Months are counted as 30 days, so month-based expiry is approximate
DAYS_PER_MONTH = 30

_MONTHS_PATTERN = re.compile(r"Expires:\s*(?P<months>\d+)\s+month\s+(?P<days>\d+)\s+day")
_DAYS_PATTERN = re.compile(r"Expires:\s*(?P<days>\d+)\s+day")


@dataclass(frozen=True)
class LicenseInfo:
    """License state reported by cpconfig."""

    is_permanent: bool
    is_active: bool
    expires_in_days: int


def parse_license_info(output: str) -> LicenseInfo:
    """
    Extract license state from ``cpconfig -license -view`` output.

    The output is loosely structured, so only marker substrings and the
    ``Expires:`` clause are inspected. Checks run in a fixed order:

    1. "expired" anywhere makes the license inactive.
    2. "permanent" makes it permanent.
    3. Otherwise the ``Expires:`` clause gives the remaining days, either as
       ``N month(s) M day(s)`` or ``N day(s)``.

    Raises:
        ParseError: If a time-bounded license has no recognizable expiry clause
    """
    if "expired" in output:
        return LicenseInfo(is_permanent=False, is_active=False, expires_in_days=0)

    if "permanent" in output:
        return LicenseInfo(
            is_permanent=True, is_active=True, expires_in_days=PERMANENT_LICENSE_DAYS
        )

    text = output.replace("(s)", "")

    # Month form goes first: its text also contains "<N> day"
    match = _MONTHS_PATTERN.search(text)
    if match:
        days = int(match.group("months")) * DAYS_PER_MONTH + int(match.group("days"))
        return LicenseInfo(is_permanent=False, is_active=True, expires_in_days=days)

    match = _DAYS_PATTERN.search(text)
    if match:
        return LicenseInfo(
            is_permanent=False, is_active=True, expires_in_days=int(match.group("days"))
        )

    raise ParseError("expiry clause not found", output)


def collect_license_info(run: Callable[..., str], cpconfig: str) -> LicenseInfo:
    """Run cpconfig and return the current license state."""
    return parse_license_info(run(cpconfig, "-license", "-view"))
