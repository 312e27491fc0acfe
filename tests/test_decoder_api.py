import sys
from pathlib import Path

from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import main

INVENTORY_PATH = str(Path(__file__).parent.parent / "inventories" / "example.yml")

client = TestClient(main.app)


def test_decode_endpoint():
    resp = client.post("/api/decode", json={"name": "cinad02-z.dmz.example.com"})
    assert resp.status_code == 200
    assert resp.json() == {
        "Datacenter": "Cincinnati Data Centre",
        "Name": "CINAD02-Z",
        "Domain": "dmz",
        "FQDN": "cinad02-z.dmz.example.com",
        "ServerCountID": "02",
        "Environment": "None",
        "Role": "Active Directory Domain Controller",
    }


def test_decode_invalid_input():
    resp = client.post("/api/decode", json={"name": "  "})
    assert resp.status_code == 400
    assert resp.json()["detail"]["error_kind"] == "InvalidInput"


def test_decode_unrecognized():
    resp = client.post("/api/decode", json={"name": "XYZQQQ"})
    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert detail["error_kind"] == "UnrecognizedNamingConvention"
    assert detail["label"] == "XYZQQQ"


def test_decode_batch():
    resp = client.post("/api/decode/batch", json={"names": ["DENAERP01-D", "", "XYZQQQ"], "max_workers": 2})
    assert resp.status_code == 200
    body = resp.json()
    assert body["decoded"] == 1
    assert body["failed"] == 2
    assert body["results"][0]["record"]["Role"] == "Acumentica ERP"
    assert body["results"][1]["error_kind"] == "InvalidInput"
    assert body["results"][2]["ok"] is False


def test_inventory_report():
    resp = client.post("/api/inventory/report", json={"path": INVENTORY_PATH})
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 7
    assert body["decoded"] == 6
    assert body["by_datacenter"]["Denver Data Centre"] == 4


def test_inventory_report_missing(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(main, "inventory_dir", tmp_path)
    resp = client.post("/api/inventory/report", json={"path": "missing.yml"})
    assert resp.status_code == 404


def test_inventory_report_bad_yaml(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(main, "inventory_dir", tmp_path)
    (tmp_path / "bad.yml").write_text("all: [unclosed\n")
    resp = client.post("/api/inventory/report", json={"path": "bad.yml"})
    assert resp.status_code == 400


def test_inventory_report_not_utf8(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(main, "inventory_dir", tmp_path)
    (tmp_path / "latin1.yml").write_bytes(b"\xff\xfe\x00garbage")
    resp = client.post("/api/inventory/report", json={"path": "latin1.yml"})
    assert resp.status_code == 400


def test_inventory_report_relative_path():
    resp = client.post("/api/inventory/report", json={"path": "example.yml"})
    assert resp.status_code == 200
    assert resp.json()["total"] == 7


def test_inventory_report_outside_inventory_dir(tmp_path: Path, monkeypatch):
    inventories = tmp_path / "inventories"
    inventories.mkdir()
    secret = tmp_path / "secret.yml"
    secret.write_text("all:\n  hosts:\n    DENDC01:\n")
    monkeypatch.setattr(main, "inventory_dir", inventories)

    assert client.post("/api/inventory/report", json={"path": "../secret.yml"}).status_code == 403
    assert client.post("/api/inventory/report", json={"path": str(secret)}).status_code == 403


def test_rules_and_tables():
    rules = client.get("/api/rules").json()
    assert [r["order"] for r in rules] == list(range(1, 11))
    assert rules[3]["name"] == "number_suffix"

    tables = client.get("/api/tables").json()
    assert tables["roles"]["ad"] == "Active Directory Domain Controller"
    assert tables["default_datacenter"] == "Legacy Data Centre"


def test_health():
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["rules"] == 10
