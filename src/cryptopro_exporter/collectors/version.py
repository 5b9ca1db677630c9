"""CryptoPro version collector."""

import re
from typing import Callable

from ..errors import ParseError


def _version_pattern(product: str) -> "re.Pattern[str]":
    # Both sides of the decimal point must carry at least one digit
    return re.compile(re.escape(product) + r"\s+(?P<version>\d+\.\d+)(?=\s|$)")


def parse_version(output: str, product: str = "CryptCP") -> float:
    """
    Extract the version number from ``cryptcp -sn`` output.

    Example input: ``CryptCP 5.0 (c) "Crypto-Pro", 2002-2020.``
    """
    match = _version_pattern(product).search(output)
    if not match:
        raise ParseError("version number not found", output)

    try:
        return float(match.group("version"))
    except ValueError as e:
        raise ParseError(f"can not extract version number: {e}", output)


def collect_version(run: Callable[..., str], cryptcp: str) -> float:
    """Run cryptcp and return the installed CryptoPro version."""
    return parse_version(run(cryptcp, "-sn"))
