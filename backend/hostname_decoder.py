"""
Hostname Decoder — recover datacenter, role, tenant, instance and domain from a server name.

    decode("DENAERP01-D")
    → HostNameRecord(datacenter="Denver Data Centre", name="DENAERP01-D", domain="dev",
                     fqdn="denaerp01-d", server_count_id="01", environment="None",
                     role="Acumentica ERP")

Pipeline: normalize → first matching rule → map codes through the lookup tables.
Decoding is pure: no I/O, no logging, no state kept between calls. The two
failure modes are raised (InvalidInputError, UnrecognizedNamingConventionError);
callers decide whether to skip, log or stop.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, Optional

from field_mapper import map_fields
from naming_rules import (
    HostnameDecodeError,
    Rule,
    UnrecognizedNamingConventionError,
    build_rule_catalog,
    match_label,
)
from naming_tables import LookupTables, MAIN_DOMAIN


class InvalidInputError(HostnameDecodeError):
    """Empty, whitespace-only or non-string input."""
    kind = "InvalidInput"


@dataclass(frozen=True)
class NormalizedName:
    label: str                  # leftmost dot-delimited segment, as given
    fqdn: Optional[str] = None  # lowercased input when it contained a dot


@dataclass(frozen=True)
class HostNameRecord:
    """Decoded server name."""
    datacenter: str
    name: str
    domain: str
    fqdn: str
    server_count_id: str
    environment: str
    role: str

    def to_dict(self) -> dict:
        """External field names, as inventory scripts and reports expect them."""
        return {
            "Datacenter": self.datacenter,
            "Name": self.name,
            "Domain": self.domain,
            "FQDN": self.fqdn,
            "ServerCountID": self.server_count_id,
            "Environment": self.environment,
            "Role": self.role,
        }


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of one name in a batch."""
    name: str
    record: Optional[HostNameRecord] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record is not None


def normalize_name(name: str) -> NormalizedName:
    """Split a bare label or FQDN into the label used for matching and the FQDN, if any."""
    if not isinstance(name, str):
        raise InvalidInputError(f"Expected a string, got {type(name).__name__}")
    text = name.strip()
    if not text:
        raise InvalidInputError("Name is empty")

    if "." not in text:
        return NormalizedName(label=text)

    label = text.split(".", 1)[0]
    if not label:
        raise InvalidInputError(f"'{text}' has no host label before the first '.'")
    return NormalizedName(label=label, fqdn=text.lower())


def compose_fqdn(label: str, domain: str, base_domain: Optional[str]) -> str:
    """FQDN for a bare label: label[.domain].base_domain, or just the label with no base domain."""
    label = label.lower()
    if not base_domain:
        return label
    if domain.lower() == MAIN_DOMAIN.lower():
        return f"{label}.{base_domain}"
    return f"{label}.{domain.lower()}.{base_domain}"


class HostnameDecoder:
    """
    Decoder bound to one set of lookup tables.

    The rule catalog is compiled once here; decode() only reads it, so one
    instance can serve any number of threads.
    """

    def __init__(self, tables: Optional[LookupTables] = None):
        self.tables = tables or LookupTables()
        self.rules: tuple[Rule, ...] = build_rule_catalog(self.tables)

    def decode(self, name: str) -> HostNameRecord:
        normalized = normalize_name(name)
        canonical = normalized.label.upper()

        raw = match_label(canonical, self.rules)
        fields = map_fields(raw, self.tables)

        fqdn = normalized.fqdn or compose_fqdn(canonical, fields.domain, self.tables.base_domain)
        return HostNameRecord(
            datacenter=fields.datacenter,
            name=canonical,
            domain=fields.domain.lower(),
            fqdn=fqdn,
            server_count_id=fields.server_count_id,
            environment=fields.environment,
            role=fields.role,
        )

    def try_decode(self, name: str) -> DecodeResult:
        try:
            record = self.decode(name)
        except HostnameDecodeError as e:
            return DecodeResult(name=name, error=str(e), error_kind=e.kind)
        return DecodeResult(name=name, record=record)


_default_decoder: Optional[HostnameDecoder] = None
_default_lock = threading.Lock()


def get_default_decoder() -> HostnameDecoder:
    global _default_decoder
    if _default_decoder is None:
        with _default_lock:
            if _default_decoder is None:
                _default_decoder = HostnameDecoder()
    return _default_decoder


def decode(name: str) -> HostNameRecord:
    """Decode with the built-in tables."""
    return get_default_decoder().decode(name)


def decode_many(
    names: Iterable[str],
    decoder: Optional[HostnameDecoder] = None,
    max_workers: Optional[int] = None,
) -> list[DecodeResult]:
    """
    Decode a batch of names on a thread pool.

    Results come back in input order. A name that fails to decode yields a
    failed DecodeResult; it does not stop the rest of the batch.
    """
    names = list(names)
    if not names:
        return []
    decoder = decoder or get_default_decoder()
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(decoder.try_decode, names))


__all__ = [
    "DecodeResult",
    "HostNameRecord",
    "HostnameDecodeError",
    "HostnameDecoder",
    "InvalidInputError",
    "NormalizedName",
    "UnrecognizedNamingConventionError",
    "compose_fqdn",
    "decode",
    "decode_many",
    "get_default_decoder",
    "normalize_name",
]
