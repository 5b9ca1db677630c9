from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Union

import pytest
from prometheus_client import CollectorRegistry

from cryptopro_exporter.config import ExporterConfig
from cryptopro_exporter.errors import CommandError
from cryptopro_exporter.metrics import ExporterMetrics

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)

CRYPTCP_OUTPUT = 'CryptCP 5.0 (c) "Crypto-Pro", 2002-2020.\nCommand prompt Utility for file signature and encryption.\n'

CPCONFIG_OUTPUT = (
    "License validity:\n"
    "5050A-Q0000-0000-0000-00000\n"
    "Expires: 2 month(s) 15 day(s)\n"
    "License type: Server.\n"
)

CERTMGR_OUTPUT = r"""Certmgr 1.1 (c) "Crypto-Pro",  2007-2020.
program for managing certificates, CRLs and stores

=============================================================================
1-------
Issuer              : E=ca@example.org, CN=Test CA
Subject             : CN=Alice
Serial              : 0x120035E2F0A26AAF1A32DFD9BC000100357C59
SHA1 Hash           : 0x4c2b6d6fdf34a49a4db1e1a3aa4f86d3f7d11e23
Not valid before    : 01/01/2023  10:46:00 UTC
Not valid after     : 31/01/2024  10:56:00 UTC
PrivateKey Link     : Yes
Container           : HDIMAGE\\alice.000\4C2B
Provider Name       : Crypto-Pro GOST R 34.10-2012 KC1 CSP
2-------
Issuer              : E=ca@example.org, CN=Test CA
Subject             : CN=Bob
Serial              : 0x120035E2F0A26AAF1A32DFD9BC000100357C60
SHA1 Hash           : 0x9a6b6d6fdf34a49a4db1e1a3aa4f86d3f7d11e24
Not valid before    : 01/06/2022  10:46:00 UTC
Not valid after     : 22/12/2023  10:56:00 UTC
PrivateKey Link     : Yes
Container           : HDIMAGE\\bob.000\9A6B
Provider Name       : Crypto-Pro GOST R 34.10-2012 KC1 CSP
=============================================================================

[ErrorCode: 0x00000000]
"""


class FakeRunner:
    """Maps tool paths to canned output, or to an exception to raise."""

    def __init__(self, outputs: Dict[str, Union[str, Exception]]):
        self.outputs = outputs
        self.calls = []

    def __call__(self, path: str, *args: str) -> str:
        self.calls.append((path, *args))
        result = self.outputs[path]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def registry() -> CollectorRegistry:
    return CollectorRegistry()


@pytest.fixture
def metrics(registry: CollectorRegistry) -> ExporterMetrics:
    return ExporterMetrics(registry)


@pytest.fixture
def config() -> ExporterConfig:
    return ExporterConfig(cpconfig="cpconfig", certmgr="certmgr", cryptcp="cryptcp", period=1)


@pytest.fixture
def healthy_runner() -> FakeRunner:
    return FakeRunner(
        {
            "cryptcp": CRYPTCP_OUTPUT,
            "cpconfig": CPCONFIG_OUTPUT,
            "certmgr": CERTMGR_OUTPUT,
        }
    )


@pytest.fixture
def tool_failure() -> CommandError:
    return CommandError("certmgr exited with status 1", ["certmgr", "-list"], returncode=1)
