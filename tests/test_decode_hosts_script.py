import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

import decode_hosts

INVENTORY_PATH = str(Path(__file__).parent.parent / "inventories" / "example.yml")


def test_json_output(capsys, tmp_path: Path):
    code = decode_hosts.main(["DENAERP01-D", "--json", "--tables", str(tmp_path / "none.yml")])
    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out[0]["Role"] == "Acumentica ERP"
    assert out[0]["Domain"] == "dev"


def test_failure_sets_exit_code(capsys, tmp_path: Path):
    code = decode_hosts.main(["DENDC01", "XYZQQQ", "--tables", str(tmp_path / "none.yml")])
    assert code == 1
    out = capsys.readouterr().out
    assert "Domain Controller" in out
    assert "XYZQQQ" in out
    assert "1 decoded, 1 failed" in out


def test_inventory_names(capsys, tmp_path: Path):
    code = decode_hosts.main(["--inventory", INVENTORY_PATH, "--json", "--tables", str(tmp_path / "none.yml")])
    assert code == 1
    out = json.loads(capsys.readouterr().out)
    assert len(out) == 7
    assert out[-1]["ErrorKind"] == "UnrecognizedNamingConvention"


def test_tables_override(capsys, tmp_path: Path):
    tables = tmp_path / "tables.yml"
    tables.write_text("base_domain: corp.example.com\nroles:\n  zzz: Test Role\n")
    code = decode_hosts.main(["DENZZZ01-T", "--json", "--tables", str(tables)])
    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out[0]["Role"] == "Test Role"
    assert out[0]["FQDN"] == "denzzz01-t.test.corp.example.com"
