"""Prometheus metrics published by the exporter."""

from typing import List

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge

from .collectors import CertificateExpiry, LicenseInfo


class ExporterMetrics:
    """
    Gauges and counters for all CryptoPro checks.

    Every metric is written by exactly one check: version, license and
    certificate publishers each own their gauges and error counter. Only the
    global error counter is shared, and it is only ever incremented.
    """

    def __init__(self, registry: CollectorRegistry = REGISTRY):
        self.version = Gauge(
            "cryptopro_version",
            "Current cryptopro version",
            registry=registry,
        )
        self.license_active = Gauge(
            "cryptopro_license_active",
            "Shows if license is active or not",
            registry=registry,
        )
        self.license_permanent = Gauge(
            "cryptopro_license_permanent",
            "Shows if license is permanent or not",
            registry=registry,
        )
        self.license_expires_in = Gauge(
            "cryptopro_license_expires_in",
            "Days before license expiry",
            registry=registry,
        )
        self.user_certificate_expires_in = Gauge(
            "cryptopro_user_certificate_expires_in",
            "Days before user certificate expire",
            ["container"],
            registry=registry,
        )

        self.errors_total = Counter(
            "cryptopro_exporter_errors_total",
            "Total errors during runtime. Check logs if value is greater than 0",
            registry=registry,
        )
        self.errors_version = Counter(
            "cryptopro_exporter_errors_version",
            "Version check errors. Check logs if value is greater than 0",
            registry=registry,
        )
        self.errors_license = Counter(
            "cryptopro_exporter_errors_license",
            "License check errors. Check logs if value is greater than 0",
            registry=registry,
        )
        self.errors_user_certificates = Counter(
            "cryptopro_exporter_errors_user_certificates",
            "User certificates check errors. Check logs if value is greater than 0",
            registry=registry,
        )

    def reset_version(self) -> None:
        self.version.set(0)

    def publish_version(self, version: float) -> None:
        self.version.set(version)

    def reset_license(self) -> None:
        self.license_permanent.set(0)
        self.license_active.set(0)
        self.license_expires_in.set(0)

    def publish_license(self, info: LicenseInfo) -> None:
        self.license_permanent.set(int(info.is_permanent))
        self.license_active.set(int(info.is_active))
        self.license_expires_in.set(info.expires_in_days)

    def reset_certificates(self) -> None:
        # Drops containers that disappeared since the previous cycle
        self.user_certificate_expires_in.clear()

    def publish_certificates(self, certificates: List[CertificateExpiry]) -> None:
        for cert in certificates:
            self.user_certificate_expires_in.labels(container=cert.container_name).set(
                cert.expires_in_days
            )
