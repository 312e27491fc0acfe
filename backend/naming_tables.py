"""
Naming Tables — static code → meaning maps behind the server naming scheme.

Four tables, all keyed by lowercase code:
- datacenters:     "den" → "Denver Data Centre"
- domain_suffixes: "d"   → "Dev"   (trailing -D / -T / -TZ / -Z on a host label)
- environments:    "acm" → "Acme Holdings"  (client/tenant designation)
- roles:           "ad"  → "Active Directory Domain Controller"

Tables are built once at startup and never mutated. An optional YAML file can
merge site-specific codes over the built-ins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


DEFAULT_DATACENTER = "Legacy Data Centre"
MAIN_DOMAIN = "Main"

DATACENTERS: dict[str, str] = {
    "den": "Denver Data Centre",
    "cin": "Cincinnati Data Centre",
    "phx": "Phoenix Data Centre",
    "atl": "Atlanta Data Centre",
    "lon": "London Data Centre",
    "aze": "Azure East US",
    "azw": "Azure West US",
}

# Longer codes must win over their prefixes ("tz" before "t")
DOMAIN_SUFFIXES: dict[str, str] = {
    "d": "Dev",
    "t": "Test",
    "tz": "TestDMZ",
    "z": "DMZ",
}

ENVIRONMENTS: dict[str, str] = {
    "acm": "Acme Holdings",
    "glb": "Globex Corporation",
    "ini": "Initech",
    "umb": "Umbrella Health",
    "hoo": "Hooli",
    "int": "Internal",
    "shr": "Shared Services",
}

ROLES: dict[str, str] = {
    "ad": "Active Directory Domain Controller",
    "dc": "Domain Controller",
    "aerp": "Acumentica ERP",
    "app": "Application Server",
    "ca": "Certificate Authority",
    "dns": "DNS Server",
    "dhcp": "DHCP Server",
    "exc": "Exchange Server",
    "fs": "File Server",
    "iis": "IIS Web Server",
    "web": "Web Server",
    "jmp": "Jump Host",
    "ntp": "NTP Server",
    "prt": "Print Server",
    "rds": "Remote Desktop Session Host",
    "sftp": "SFTP Server",
    "sql": "SQL Server",
    "ssrs": "SQL Reporting Services",
    "tf": "Terraform Build Agent",
    "util": "Utility Server",
    "wsus": "Windows Update Server",
}


def _freeze(table: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType({str(k).lower(): str(v) for k, v in table.items()})


class TablesFile(BaseModel):
    """Shape of the optional naming-tables YAML override."""
    datacenters: dict[str, str] = Field(default_factory=dict)
    domain_suffixes: dict[str, str] = Field(default_factory=dict)
    environments: dict[str, str] = Field(default_factory=dict)
    roles: dict[str, str] = Field(default_factory=dict)
    default_datacenter: Optional[str] = None
    base_domain: Optional[str] = None


@dataclass(frozen=True)
class LookupTables:
    """Read-only lookup tables shared by every decode call."""
    datacenters: Mapping[str, str] = field(default_factory=lambda: _freeze(DATACENTERS))
    domain_suffixes: Mapping[str, str] = field(default_factory=lambda: _freeze(DOMAIN_SUFFIXES))
    environments: Mapping[str, str] = field(default_factory=lambda: _freeze(ENVIRONMENTS))
    roles: Mapping[str, str] = field(default_factory=lambda: _freeze(ROLES))
    default_datacenter: str = DEFAULT_DATACENTER
    base_domain: Optional[str] = None   # e.g. "example.com"; used to build FQDNs for bare labels

    def __post_init__(self):
        # Normalize keys even when callers hand in plain dicts
        for name in ("datacenters", "domain_suffixes", "environments", "roles"):
            object.__setattr__(self, name, _freeze(getattr(self, name)))
        if self.base_domain:
            object.__setattr__(self, "base_domain", self.base_domain.strip(".").lower())

    @classmethod
    def from_mapping(cls, raw: Optional[dict]) -> "LookupTables":
        """Merge a parsed override document over the built-in tables."""
        spec = TablesFile.model_validate(raw or {})
        return cls(
            datacenters={**DATACENTERS, **_lower_keys(spec.datacenters)},
            domain_suffixes={**DOMAIN_SUFFIXES, **_lower_keys(spec.domain_suffixes)},
            environments={**ENVIRONMENTS, **_lower_keys(spec.environments)},
            roles={**ROLES, **_lower_keys(spec.roles)},
            default_datacenter=spec.default_datacenter or DEFAULT_DATACENTER,
            base_domain=spec.base_domain,
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "LookupTables":
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
        if raw is not None and not isinstance(raw, dict):
            raise ValueError(f"{path}: expected a mapping at the top level")
        tables = cls.from_mapping(raw)
        logger.info(
            "Loaded naming tables from %s (%d datacenters, %d roles, %d environments)",
            path, len(tables.datacenters), len(tables.roles), len(tables.environments),
        )
        return tables

    def to_dict(self) -> dict:
        return {
            "datacenters": dict(self.datacenters),
            "domain_suffixes": dict(self.domain_suffixes),
            "environments": dict(self.environments),
            "roles": dict(self.roles),
            "default_datacenter": self.default_datacenter,
            "base_domain": self.base_domain,
        }


def _lower_keys(table: dict[str, str]) -> dict[str, str]:
    return {k.lower(): v for k, v in table.items()}


def load_tables(path: Optional[str | Path]) -> LookupTables:
    """
    Load tables from an override file, falling back to the built-ins.

    A missing path is normal (no overrides). An unreadable or malformed file is
    logged and ignored so the service still starts.
    """
    if path is None or not Path(path).exists():
        return LookupTables()
    try:
        return LookupTables.from_yaml(path)
    except Exception as e:
        logger.warning("Could not load naming tables from %s: %s", path, e)
        return LookupTables()
