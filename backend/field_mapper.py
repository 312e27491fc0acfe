"""
Field Mapper — turn raw captured codes into display values.

Every lookup has a fallback, so mapping never fails:
- unknown datacenter        → tables.default_datacenter
- no domain suffix          → "Main"
- absent/unknown environment → "None"
- unknown role abbreviation → the raw code itself
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from naming_rules import RawMatch
from naming_tables import LookupTables, MAIN_DOMAIN

NONE_VALUE = "None"


@dataclass(frozen=True)
class MappedFields:
    datacenter: str
    domain: str            # "Main", "Dev", "Test", "TestDMZ", "DMZ"
    environment: str
    server_count_id: str
    role: str


def resolve_datacenter(code: str, tables: LookupTables) -> str:
    return tables.datacenters.get(code.lower(), tables.default_datacenter)


def resolve_domain(suffix: Optional[str], tables: LookupTables) -> str:
    if not suffix:
        return MAIN_DOMAIN
    return tables.domain_suffixes.get(suffix.lower(), MAIN_DOMAIN)


def resolve_environment(code: Optional[str], tables: LookupTables) -> str:
    if not code:
        return NONE_VALUE
    return tables.environments.get(code.lower(), NONE_VALUE)


def resolve_role(code: str, tables: LookupTables) -> str:
    """Describe a role abbreviation, or hand the abbreviation back if it is not in the table."""
    return tables.roles.get(code.lower(), code)


def compose_server_count_id(number: Optional[str], set_letter: Optional[str]) -> str:
    """
    Build the instance discriminator.

    01 + b → "01-B",  01 → "01",  b → "B",  neither → "None"
    """
    if number and set_letter:
        return f"{number}-{set_letter.upper()}"
    if number:
        return number
    if set_letter:
        return set_letter.upper()
    return NONE_VALUE


def map_fields(raw: RawMatch, tables: LookupTables) -> MappedFields:
    return MappedFields(
        datacenter=resolve_datacenter(raw.datacenter, tables),
        domain=resolve_domain(raw.domain_suffix, tables),
        environment=resolve_environment(raw.environment, tables),
        server_count_id=compose_server_count_id(raw.number, raw.set_letter),
        role=resolve_role(raw.role, tables),
    )
