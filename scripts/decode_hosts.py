#!/usr/bin/env python3
"""
Decode server names from the command line or an inventory file.

Usage: python3 scripts/decode_hosts.py [names...] [--inventory PATH] [--tables PATH] [--json]
"""

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from hostname_decoder import DecodeResult, HostnameDecoder, decode_many
from inventory import load_inventory_hosts
from naming_tables import load_tables

DEFAULT_TABLES = Path(__file__).parent.parent / "config" / "naming-tables.yml"


def print_result(result: DecodeResult):
    """Pretty-print one decoded name."""
    if not result.ok:
        print(f"  ✗ {result.name}: {result.error}")
        return
    rec = result.record
    print(f"  {rec.name}")
    print(f"           Datacenter:  {rec.datacenter}")
    print(f"           Role:        {rec.role}")
    print(f"           Domain:      {rec.domain}")
    print(f"           FQDN:        {rec.fqdn}")
    if rec.server_count_id != "None":
        print(f"           Instance:    {rec.server_count_id}")
    if rec.environment != "None":
        print(f"           Environment: {rec.environment}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Decode server names into datacenter, role and domain.")
    parser.add_argument("names", nargs="*", help="host labels or FQDNs")
    parser.add_argument("--inventory", help="Ansible YAML inventory to read host names from")
    parser.add_argument("--tables", default=str(DEFAULT_TABLES), help="naming-tables YAML override")
    parser.add_argument("--json", action="store_true", help="print a JSON array instead of text")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING)

    names = list(args.names)
    if args.inventory:
        names.extend(h.hostname for h in load_inventory_hosts(args.inventory))
    if not names:
        parser.error("no names given (pass names or --inventory)")

    decoder = HostnameDecoder(load_tables(args.tables))
    results = decode_many(names, decoder=decoder)

    if args.json:
        print(json.dumps(
            [
                r.record.to_dict() if r.ok else {"Name": r.name, "Error": r.error, "ErrorKind": r.error_kind}
                for r in results
            ],
            indent=2,
        ))
    else:
        for r in results:
            print_result(r)
        failed = sum(1 for r in results if not r.ok)
        print(f"\n{len(results) - failed} decoded, {failed} failed")

    return 1 if any(not r.ok for r in results) else 0


if __name__ == "__main__":
    sys.exit(main())
