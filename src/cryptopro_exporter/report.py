"""One-shot check report."""

from typing import Callable

from .collectors import collect_certificates, collect_license_info, collect_version
from .config import ExporterConfig
from .errors import ExporterError


def run_checks(config: ExporterConfig, run: Callable[..., str]) -> int:
    """
    Run every check once and print the results.

    Stops at the first failing check.

    Returns:
        0 if all checks succeeded, 1 otherwise
    """
    try:
        version = collect_version(run, config.cryptcp)
    except ExporterError as e:
        print(f"An error occurred while running version check: {e}")
        return 1
    print(f"Version: {version}\n")

    try:
        license_info = collect_license_info(run, config.cpconfig)
    except ExporterError as e:
        print(f"An error occurred while running license check: {e}")
        return 1
    print(f"License is active: {license_info.is_active}")
    print(f"License is permanent: {license_info.is_permanent}")
    print(f"License expires in {license_info.expires_in_days} days\n")

    try:
        certificates = collect_certificates(run, config.certmgr)
    except ExporterError as e:
        print(f"An error occurred while running user certificates check: {e}")
        return 1
    for cert in certificates:
        print(f"Certificate {cert.container_name} expires in {cert.expires_in_days:.1f} days")
    print()

    return 0
