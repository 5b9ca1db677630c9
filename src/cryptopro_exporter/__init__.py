"""Prometheus exporter for CryptoPro CSP version, license and certificates."""

__version__ = "0.1.0"
