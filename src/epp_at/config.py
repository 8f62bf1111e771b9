"""
Session Configuration

Connection and login settings, loadable from YAML with named profiles.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from epp_at.builders.base import DEFAULT_EXT_URIS, DEFAULT_OBJ_URIS


# Default config locations
DEFAULT_CONFIG_PATHS = [
    Path.home() / ".epp-at" / "config.yaml",
    Path.home() / ".epp-at" / "config.yml",
    Path("epp_at.yaml"),
]


@dataclass
class SessionConfig:
    """Settings for one EPP session."""
    host: str
    client_id: Optional[str] = None
    password: Optional[str] = None
    port: int = 700
    timeout: float = 30
    cert_file: Optional[str] = None
    key_file: Optional[str] = None
    ca_file: Optional[str] = None
    verify_server: bool = True
    version: str = "1.0"
    lang: str = "en"
    obj_uris: List[str] = field(default_factory=lambda: list(DEFAULT_OBJ_URIS))
    ext_uris: List[str] = field(default_factory=lambda: list(DEFAULT_EXT_URIS))
    trid_prefix: str = "epp-at"
    profile: str = "default"

    def __repr__(self):
        # Keep the password out of logs and tracebacks
        return (
            f"SessionConfig(host={self.host!r}, port={self.port}, "
            f"client_id={self.client_id!r}, profile={self.profile!r})"
        )

    @classmethod
    def from_dict(cls, data: dict, profile: str = "default") -> "SessionConfig":
        """
        Create config from dictionary.

        Args:
            data: Configuration dictionary
            profile: Profile name to use

        Returns:
            SessionConfig instance
        """
        # Get profile-specific config or use root
        if "profiles" in data and profile in data["profiles"]:
            profile_data = data["profiles"][profile]
        else:
            profile_data = data

        server = profile_data.get("server") or {}
        if not server.get("host"):
            raise ValueError("Server host is required in configuration")

        certs = profile_data.get("certs") or {}
        credentials = profile_data.get("credentials") or {}
        login = profile_data.get("login") or {}

        return cls(
            host=server["host"],
            port=server.get("port", 700),
            timeout=server.get("timeout", 30),
            verify_server=server.get("verify_server", True),
            cert_file=_expand_path(certs.get("cert_file")),
            key_file=_expand_path(certs.get("key_file")),
            ca_file=_expand_path(certs.get("ca_file")),
            client_id=credentials.get("client_id"),
            password=credentials.get("password"),
            version=login.get("version", "1.0"),
            lang=login.get("lang", "en"),
            obj_uris=login.get("obj_uris", list(DEFAULT_OBJ_URIS)),
            ext_uris=login.get("ext_uris", list(DEFAULT_EXT_URIS)),
            trid_prefix=login.get("trid_prefix", "epp-at"),
            profile=profile,
        )

    @classmethod
    def from_file(cls, path: Path, profile: str = "default") -> "SessionConfig":
        """Load config from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {}, profile)

    @classmethod
    def find_and_load(cls, profile: str = "default") -> Optional["SessionConfig"]:
        """Load config from the first default location that exists."""
        for path in DEFAULT_CONFIG_PATHS:
            if path.exists():
                return cls.from_file(path, profile)
        return None


def _expand_path(path: Optional[str]) -> Optional[str]:
    """Expand ~ in path."""
    if path is None:
        return None
    return os.path.expanduser(path)


def create_sample_config() -> str:
    """
    Generate sample configuration YAML.

    Returns:
        Sample config as YAML string
    """
    return """# nic.at EPP client configuration
# Copy to ~/.epp-at/config.yaml

server:
  host: epp.nic.at
  port: 700
  timeout: 30
  verify_server: true

certs:
  # Optional client certificate
  # cert_file: ~/.epp-at/client.crt
  # key_file: ~/.epp-at/client.key
  # ca_file: ~/.epp-at/ca.crt

credentials:
  client_id: your_registrar_id
  # password: your_password  # Optional, will prompt if not set

login:
  version: "1.0"
  lang: en

profiles:
  test:
    server:
      host: epp.test.nic.at
      port: 700
    credentials:
      client_id: test_registrar
"""
