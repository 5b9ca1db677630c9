"""User certificates collector."""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..errors import ParseError

# certmgr prints dates as day/month/year regardless of locale
DATE_FORMAT = "%d/%m/%Y"

SECONDS_PER_DAY = 86400

# certmgr opens each certificate with a "1-------" style line
_BLOCK_SEPARATOR = re.compile(r"^[ \t]*\d+-{3,}[ \t]*$", re.MULTILINE)

# e.g. "Container : HDIMAGE\\alice.000\4C2B" -> "alice"
_CONTAINER_PATTERN = re.compile(r"\\(?P<container>[\w-]+)\.\d{3}(?!\d)")
# e.g. "Not valid after : 21/03/2025  10:56:00 UTC" -> "21/03/2025"
_NOT_VALID_AFTER_PATTERN = re.compile(
    r"Not valid after\s*:\s*(?P<date>\d{2}/\d{2}/\d{4})(?!\d)"
)


@dataclass(frozen=True)
class CertificateExpiry:
    """Expiry of the certificate stored in one key container."""

    container_name: str
    expires_in_days: float


def days_until(date: datetime, now: datetime) -> float:
    """Fractional number of days from ``now`` to ``date``."""
    return (date - now).total_seconds() / SECONDS_PER_DAY


def parse_certificates(
    output: str, now: Optional[datetime] = None
) -> List[CertificateExpiry]:
    """
    Extract per-container certificate expiry from ``certmgr -list`` output.

    The output is split into per-certificate blocks on certmgr's numbered
    separator lines, and each block's container name is paired with the
    "Not valid after" date of the same block. Within a block (or the whole
    text, if it has no separators) names and dates are paired by order of
    appearance. A block whose container and date counts differ rejects the
    whole output instead of guessing an alignment.

    Expiry dates are taken at midnight UTC. ``now`` defaults to the current
    time; a naive ``now`` is treated as UTC.

    Raises:
        ParseError: If names or dates are missing, their counts differ, or
            a date is not a valid calendar date
    """
    names = _CONTAINER_PATTERN.findall(output)
    if not names:
        raise ParseError("containers not found", output)

    dates = _NOT_VALID_AFTER_PATTERN.findall(output)
    if not dates:
        raise ParseError("certificate valid date not found", output)

    pairs = []
    for number, block in enumerate(_BLOCK_SEPARATOR.split(output)):
        block_names = _CONTAINER_PATTERN.findall(block)
        block_dates = _NOT_VALID_AFTER_PATTERN.findall(block)
        if len(block_names) != len(block_dates):
            raise ParseError(
                f"certificate block {number} has {len(block_names)} containers"
                f" but {len(block_dates)} expiry dates",
                output,
            )
        pairs.extend(zip(block_names, block_dates))

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    certificates = []
    for name, raw_date in pairs:
        try:
            expires = datetime.strptime(raw_date, DATE_FORMAT).replace(tzinfo=timezone.utc)
        except ValueError as e:
            raise ParseError(f"invalid expiry date {raw_date!r}: {e}", output)

        certificates.append(CertificateExpiry(name, days_until(expires, now)))

    return certificates


def collect_certificates(run: Callable[..., str], certmgr: str) -> List[CertificateExpiry]:
    """Run certmgr and return expiry of every user certificate."""
    return parse_certificates(run(certmgr, "-list"))
