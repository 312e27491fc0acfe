"""
Naming Rules — ordered catalog of host-label shapes across the naming eras.

Label grammar (case-insensitive):
    DC    datacenter code: a table code of any    den, cin, ny
          length, else any three letters
    ROLE  role abbreviation (letters)           ad, sql, aerp
    -ENV  client/tenant code, 2-6 letters       -acm, -glb
    NN    two-digit instance number             01, 12
    SET   set letter a-d                        b
    -SUF  network-domain suffix code            -d, -t, -tz, -z

Catalog, most specific first:
     1  DC ROLE -ENV NN -SUF      DENWEB-ACM01-T
     2  DC ROLE -ENV -SET -SUF    DENWEB-ACM-B-T
     3  DC ROLE NN SET -SUF       DENSQL01B-T
     4  DC ROLE NN -SUF           DENAERP01-D
     5  DC ROLE -SET -SUF         DENFS-B-D
     6  DC ROLE -SUF              DENDC-T
     7  DC ROLE -ENV NN           DENWEB-ACM01
     8  DC ROLE -ENV -SET         DENWEB-ACM-B
     9  DC ROLE NN                DENDC01
    10  DC ROLE                   DENDC

Patterns are anchored at the start of the label and end at a token boundary,
so trailing segments ("-old", "_ilom") are tolerated. That also means a general
rule will happily match the front of a more specific label; DENAERP01-D satisfies
rule 9 as well as rule 4. Order is what resolves it: first match wins.

Rule 10 has nothing but letters to go on, so its datacenter slot only accepts
codes present in the datacenter table.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from naming_tables import LookupTables


SLOT_NAMES = ("datacenter", "role", "environment", "number", "set_letter", "domain_suffix")

# Token boundary: end of label or any non-alphanumeric character
_END = r"(?![a-z0-9])"

# (rule name, shape template) in precedence order
RULE_SHAPES: tuple[tuple[str, str], ...] = (
    ("env_number_suffix", "{dc}{role}-{env}{num}-{suf}"),
    ("env_set_suffix", "{dc}{role}-{env}-{set}-{suf}"),
    ("number_set_suffix", "{dc}{role}{num}{set}-{suf}"),
    ("number_suffix", "{dc}{role}{num}-{suf}"),
    ("set_suffix", "{dc}{role}-{set}-{suf}"),
    ("suffix", "{dc}{role}-{suf}"),
    ("env_number", "{dc}{role}-{env}{num}"),
    ("env_set", "{dc}{role}-{env}-{set}"),
    ("number", "{dc}{role}{num}"),
    ("bare", "{known_dc}{role}"),
)


class HostnameDecodeError(ValueError):
    """Base for the two ways a decode can fail."""
    kind = "HostnameDecodeError"


class UnrecognizedNamingConventionError(HostnameDecodeError):
    """No rule in the catalog matches the host label."""
    kind = "UnrecognizedNamingConvention"

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"'{label}' does not match any known naming convention")


@dataclass(frozen=True)
class RawMatch:
    """Uninterpreted codes captured by a rule. Optional slots are None when absent."""
    rule: str
    datacenter: str
    role: str
    environment: Optional[str] = None
    number: Optional[str] = None
    set_letter: Optional[str] = None
    domain_suffix: Optional[str] = None


@dataclass(frozen=True)
class Rule:
    """One structural shape in the catalog."""
    order: int
    name: str
    pattern: re.Pattern

    @property
    def slots(self) -> frozenset[str]:
        return frozenset(self.pattern.groupindex)

    @property
    def has_domain_suffix(self) -> bool:
        return "domain_suffix" in self.slots

    def match(self, label: str) -> Optional[RawMatch]:
        m = self.pattern.match(label)
        if not m:
            return None
        return RawMatch(rule=self.name, **m.groupdict())

    def to_dict(self) -> dict:
        return {
            "order": self.order,
            "name": self.name,
            "slots": [s for s in SLOT_NAMES if s in self.slots],
            "pattern": self.pattern.pattern,
        }


def _alternation(codes) -> str:
    # Longest first so "tz" is tried before "t"
    return "|".join(re.escape(c) for c in sorted(codes, key=lambda c: (-len(c), c)))


def _fragments(tables: LookupTables) -> dict[str, str]:
    known = _alternation(tables.datacenters)
    # Known codes of any length first, then any three letters for the legacy fallback
    return {
        "dc": rf"(?P<datacenter>{known}|[a-z]{{3}})",
        "known_dc": rf"(?P<datacenter>{known})",
        "role": r"(?P<role>[a-z]+)",
        "env": r"(?P<environment>[a-z]{2,6})",
        "num": r"(?P<number>\d{2})",
        "set": r"(?P<set_letter>[a-d])",
        "suf": rf"(?P<domain_suffix>{_alternation(tables.domain_suffixes)})",
    }


def check_catalog_order(rules: Sequence[Rule]) -> None:
    """Raise ValueError if any rule precedes a rule that captures strictly more slots."""
    for i, earlier in enumerate(rules):
        for later in rules[i + 1:]:
            if earlier.slots < later.slots:
                raise ValueError(
                    f"Rule '{earlier.name}' ({earlier.order}) would shadow "
                    f"more specific rule '{later.name}' ({later.order})"
                )


def build_rule_catalog(
    tables: LookupTables,
    shapes: Sequence[tuple[str, str]] = RULE_SHAPES,
) -> tuple[Rule, ...]:
    """Compile the shape templates against the given tables, in precedence order."""
    if not tables.domain_suffixes:
        raise ValueError("Domain-suffix table is empty; suffix rules cannot be built")
    if not tables.datacenters:
        raise ValueError("Datacenter table is empty; the bare rule cannot be built")

    frags = _fragments(tables)
    rules = tuple(
        Rule(
            order=i,
            name=name,
            pattern=re.compile(template.format(**frags) + _END, re.IGNORECASE | re.ASCII),
        )
        for i, (name, template) in enumerate(shapes, start=1)
    )
    check_catalog_order(rules)
    return rules


def match_label(label: str, rules: Sequence[Rule]) -> RawMatch:
    """Return the match from the first rule whose shape fits the label."""
    for rule in rules:
        raw = rule.match(label)
        if raw is not None:
            return raw
    raise UnrecognizedNamingConventionError(label)
