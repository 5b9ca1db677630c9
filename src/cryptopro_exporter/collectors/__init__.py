"""Fact collectors for CryptoPro command-line tools."""

from .version import collect_version, parse_version
from .license import (
    LicenseInfo,
    PERMANENT_LICENSE_DAYS,
    collect_license_info,
    parse_license_info,
)
from .certificates import CertificateExpiry, collect_certificates, parse_certificates

__all__ = [
    "collect_version",
    "parse_version",
    "LicenseInfo",
    "PERMANENT_LICENSE_DAYS",
    "collect_license_info",
    "parse_license_info",
    "CertificateExpiry",
    "collect_certificates",
    "parse_certificates",
]
