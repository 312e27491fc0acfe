"""Server Name Decoder API."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

import yaml
from fastapi import FastAPI, HTTPException

from hostname_decoder import (
    DecodeResult,
    HostnameDecoder,
    InvalidInputError,
    UnrecognizedNamingConventionError,
    decode_many,
)
from inventory import build_report, load_inventory_hosts
from models import (
    BatchDecodeQuery,
    BatchDecodeResult,
    DecodeOutcome,
    DecodeQuery,
    HostNameRecordModel,
    InventoryReportQuery,
    RuleInfo,
    TablesInfo,
)
from naming_tables import load_tables

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

VERSION = "1.4.0"

app = FastAPI(title="Server Name Decoder", description="Decode server names into site, role and domain", version=VERSION)

backend_dir = Path(__file__).parent
project_dir = backend_dir.parent
tables_path = Path(os.environ.get("NAMING_TABLES_PATH", project_dir / "config" / "naming-tables.yml"))

inventory_dir = Path(os.environ.get("INVENTORY_DIR", project_dir / "inventories"))

decoder = HostnameDecoder(load_tables(tables_path))


def _resolve_inventory_path(requested: str) -> Path:
    """Resolve a requested inventory (relative to inventory_dir) and refuse anything outside it."""
    base = inventory_dir.resolve()
    path = (base / requested).resolve()
    if not path.is_relative_to(base):
        raise HTTPException(403, f"Inventory '{requested}' is outside {inventory_dir}")
    return path


@app.post("/api/decode", response_model=HostNameRecordModel)
async def decode_name(query: DecodeQuery):
    try:
        record = decoder.decode(query.name)
    except InvalidInputError as e:
        raise HTTPException(400, {"error_kind": e.kind, "message": str(e)})
    except UnrecognizedNamingConventionError as e:
        raise HTTPException(422, {"error_kind": e.kind, "message": str(e), "label": e.label})
    return HostNameRecordModel(**record.to_dict())


@app.post("/api/decode/batch", response_model=BatchDecodeResult)
async def decode_batch(query: BatchDecodeQuery):
    loop = asyncio.get_event_loop()
    results = await loop.run_in_executor(None, lambda: decode_many(query.names, decoder, query.max_workers))
    outcomes = [_serialize_outcome(r) for r in results]
    decoded = sum(1 for o in outcomes if o.ok)
    return BatchDecodeResult(results=outcomes, decoded=decoded, failed=len(outcomes) - decoded)


@app.post("/api/inventory/report")
async def inventory_report(query: InventoryReportQuery):
    path = _resolve_inventory_path(query.path)
    if not path.is_file():
        raise HTTPException(404, f"Inventory '{query.path}' not found")
    try:
        hosts = load_inventory_hosts(path)
    except yaml.YAMLError as e:
        raise HTTPException(400, f"Inventory is not valid YAML: {e}")
    except UnicodeDecodeError as e:
        raise HTTPException(400, f"Inventory is not UTF-8 text: {e}")
    except OSError as e:
        raise HTTPException(400, f"Inventory could not be read: {e}")
    loop = asyncio.get_event_loop()
    report = await loop.run_in_executor(None, build_report, hosts, decoder)
    return report.to_dict()


@app.get("/api/tables", response_model=TablesInfo)
async def get_tables():
    return TablesInfo(**decoder.tables.to_dict())


@app.get("/api/rules", response_model=list[RuleInfo])
async def get_rules():
    return [RuleInfo(**rule.to_dict()) for rule in decoder.rules]


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": VERSION, "rules": len(decoder.rules)}


def _serialize_outcome(result: DecodeResult) -> DecodeOutcome:
    return DecodeOutcome(
        name=result.name,
        ok=result.ok,
        record=HostNameRecordModel(**result.record.to_dict()) if result.record else None,
        error=result.error,
        error_kind=result.error_kind,
    )
