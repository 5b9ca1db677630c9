"""Configuration management for CryptoPro exporter."""

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple


@dataclass
class ExporterConfig:
    """Exporter configuration."""

    listen_address: str = ":9189"
    cpconfig: str = "/opt/cprocsp/sbin/amd64/cpconfig"
    certmgr: str = "/opt/cprocsp/bin/amd64/certmgr"
    cryptcp: str = "/opt/cprocsp/bin/amd64/cryptcp"
    period: float = 720  # minutes
    command_timeout: Optional[float] = None  # seconds, None waits forever

    def __post_init__(self):
        if self.period <= 0:
            raise ValueError(f"period must be positive, got {self.period}")
        if self.command_timeout is not None and self.command_timeout <= 0:
            raise ValueError(f"command_timeout must be positive, got {self.command_timeout}")

    def override(self, **values: Any) -> "ExporterConfig":
        """Return a copy with every non-None value replaced."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data.update({k: v for k, v in values.items() if v is not None})
        return ExporterConfig(**data)


class ConfigManager:
    """Loads exporter configuration from a JSON file."""

    def __init__(self, config_path: str = "/etc/cryptopro-exporter/config.json"):
        self.config_path = Path(config_path)

    def load(self) -> ExporterConfig:
        """Load configuration from file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, "r") as f:
            data: Dict[str, Any] = json.load(f)

        known = {f.name for f in fields(ExporterConfig)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys in {self.config_path}: {', '.join(unknown)}")

        return ExporterConfig(**data)

    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()


def parse_listen_address(address: str) -> Tuple[str, int]:
    """Split ``host:port`` into its parts. An empty host binds all interfaces."""
    host, sep, port = address.rpartition(":")
    if not sep:
        host, port = "", address

    try:
        port_number = int(port)
    except ValueError:
        raise ValueError(f"Invalid listen address: {address!r}")
    if not 0 < port_number < 65536:
        raise ValueError(f"Invalid port in listen address: {address!r}")

    return host.strip("[]") or "0.0.0.0", port_number
