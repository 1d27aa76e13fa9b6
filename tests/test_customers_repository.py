import json
from pathlib import Path

import pytest

from fieldroute.data.customers_repository import load_customers, resolve_customers


@pytest.fixture(autouse=True)
def clear_customer_cache():
    load_customers.cache_clear()
    yield
    load_customers.cache_clear()


def _write(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_customers_parses_crm_records(tmp_path: Path):
    source = _write(
        tmp_path / "customers.json",
        [
            {
                "id": 1700000000000,
                "name": "Dana",
                "company": "Prairie Ag",
                "address": "",
                "city": "Sioux Falls ",
                "state": "SD",
                "leadStage": "Hot",
                "active": False,
                "contacts": [{"name": "Dana", "phone": "605-555-0100"}],
            },
            {"id": "2", "name": "Lee", "city": "Canton", "state": "SD"},
        ],
    )

    customers = load_customers(source)

    first, second = customers
    assert first.id == "1700000000000"
    assert first.address is None
    assert first.city == "Sioux Falls "
    assert first.active is False
    assert first.lead_stage == "Hot"
    assert first.contacts[0].phone == "605-555-0100"
    assert second.active is True
    assert second.zip is None
    assert second.contacts == []


def test_load_customers_accepts_wrapped_export(tmp_path: Path):
    source = _write(tmp_path / "export.json", {"customers": [{"id": "9", "name": "X", "city": "A", "state": "B"}]})

    assert [customer.id for customer in load_customers(source)] == ["9"]


def test_load_customers_errors(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_customers(tmp_path / "missing.json")
    with pytest.raises(ValueError):
        load_customers(_write(tmp_path / "bad.json", {"oops": True}))


def test_resolve_customers_skips_stale_ids(tmp_path: Path):
    customers = load_customers(
        _write(tmp_path / "customers.json", [{"id": cid, "name": cid} for cid in ("a", "b", "c")])
    )

    assert [c.id for c in resolve_customers(["c", "zzz", "a"], customers)] == ["a", "c"]
