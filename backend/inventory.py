"""
Inventory Loader — read server names from an Ansible YAML inventory and decode them.

Supports the nested children format:
  all → children → {group} → children → {subgroup} → hosts
and the flat form, where a top-level `hosts:` holds a mapping or a list.

Builds:
1. hosts: InventoryHost entries in file order (first group wins on duplicates)
2. report: decoded records plus counts by datacenter / role / domain / environment
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from hostname_decoder import DecodeResult, HostnameDecoder, decode_many

logger = logging.getLogger(__name__)


@dataclass
class InventoryHost:
    """Host entry as listed in the inventory file."""
    hostname: str
    group: str = ""            # innermost group the host was listed under
    groups: list[str] = field(default_factory=list)   # full path from "all"
    ansible_host: Optional[str] = None
    vars: dict = field(default_factory=dict)


@dataclass
class DecodedHost:
    host: InventoryHost
    result: DecodeResult


@dataclass
class InventoryReport:
    """Decoded inventory grouped for reporting."""
    hosts: list[DecodedHost] = field(default_factory=list)
    by_datacenter: dict[str, int] = field(default_factory=dict)
    by_role: dict[str, int] = field(default_factory=dict)
    by_domain: dict[str, int] = field(default_factory=dict)
    by_environment: dict[str, int] = field(default_factory=dict)

    @property
    def decoded(self) -> list[DecodedHost]:
        return [h for h in self.hosts if h.result.ok]

    @property
    def failures(self) -> list[DecodedHost]:
        return [h for h in self.hosts if not h.result.ok]

    def get_host(self, hostname: str) -> Optional[DecodedHost]:
        for h in self.hosts:
            if h.host.hostname == hostname:
                return h
        return None

    def hosts_in_datacenter(self, datacenter: str) -> list[DecodedHost]:
        return [h for h in self.decoded if h.result.record.datacenter == datacenter]

    def hosts_with_role(self, role: str) -> list[DecodedHost]:
        return [h for h in self.decoded if h.result.record.role == role]

    def to_dict(self) -> dict:
        return {
            "total": len(self.hosts),
            "decoded": len(self.decoded),
            "failed": len(self.failures),
            "by_datacenter": self.by_datacenter,
            "by_role": self.by_role,
            "by_domain": self.by_domain,
            "by_environment": self.by_environment,
            "hosts": [
                {
                    "hostname": h.host.hostname,
                    "group": h.host.group,
                    "record": h.result.record.to_dict() if h.result.record else None,
                    "error": h.result.error,
                    "error_kind": h.result.error_kind,
                }
                for h in self.hosts
            ],
        }


def load_inventory_hosts(path: str | Path) -> list[InventoryHost]:
    """
    Parse an Ansible YAML inventory into host entries.

    Raises FileNotFoundError if the file is missing. An empty file, or one
    without recognizable groups, yields an empty list.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    hosts: dict[str, InventoryHost] = {}
    if not isinstance(raw, dict):
        return []

    if "all" in raw and isinstance(raw["all"], dict):
        _walk_group(hosts, "all", raw["all"], ["all"])
    else:
        # Ungrouped file: treat each top-level key as a group
        for group_name, group_data in raw.items():
            if group_name == "hosts":
                _add_hosts(hosts, "all", ["all"], group_data)
            else:
                _walk_group(hosts, group_name, group_data, [group_name])

    logger.info("Loaded %d hosts from %s", len(hosts), path)
    return list(hosts.values())


def _walk_group(hosts: dict[str, InventoryHost], group_name: str, group_data, path: list[str]):
    if not isinstance(group_data, dict):
        return

    _add_hosts(hosts, group_name, path, group_data.get("hosts"))

    children = group_data.get("children") or {}
    if not isinstance(children, dict):
        return
    for child_name, child_data in children.items():
        _walk_group(hosts, child_name, child_data, path + [child_name])


def _add_hosts(hosts: dict[str, InventoryHost], group_name: str, path: list[str], raw_hosts):
    if not raw_hosts:
        return

    # hosts: may be a mapping (hostname → vars) or a plain list of names
    if isinstance(raw_hosts, list):
        items = [(h, None) for h in raw_hosts]
    elif isinstance(raw_hosts, dict):
        items = list(raw_hosts.items())
    else:
        logger.warning("Ignoring hosts entry of type %s in group %s", type(raw_hosts).__name__, group_name)
        return

    for hostname, host_data in items:
        hostname = str(hostname)
        if hostname in hosts:
            continue
        host_data = host_data if isinstance(host_data, dict) else {}
        hosts[hostname] = InventoryHost(
            hostname=hostname,
            group=group_name,
            groups=list(path),
            ansible_host=host_data.get("ansible_host"),
            vars={k: v for k, v in host_data.items() if k != "ansible_host"},
        )


def build_report(
    hosts: list[InventoryHost],
    decoder: Optional[HostnameDecoder] = None,
    max_workers: Optional[int] = None,
) -> InventoryReport:
    """Decode every inventory host and tally the results."""
    results = decode_many([h.hostname for h in hosts], decoder=decoder, max_workers=max_workers)

    report = InventoryReport()
    datacenters: Counter = Counter()
    roles: Counter = Counter()
    domains: Counter = Counter()
    environments: Counter = Counter()

    for host, result in zip(hosts, results):
        report.hosts.append(DecodedHost(host=host, result=result))
        if not result.ok:
            logger.warning("Could not decode %s (group %s): %s", host.hostname, host.group, result.error)
            continue
        record = result.record
        datacenters[record.datacenter] += 1
        roles[record.role] += 1
        domains[record.domain] += 1
        environments[record.environment] += 1

    report.by_datacenter = dict(datacenters.most_common())
    report.by_role = dict(roles.most_common())
    report.by_domain = dict(domains.most_common())
    report.by_environment = dict(environments.most_common())
    return report


def report_from_inventory(
    path: str | Path,
    decoder: Optional[HostnameDecoder] = None,
) -> InventoryReport:
    return build_report(load_inventory_hosts(path), decoder=decoder)
