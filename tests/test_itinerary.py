from fieldroute.models.domain import OUT_AND_BACK, ROUND_TRIP, Contact, Customer, Itinerary
from fieldroute.services.address import directions_url, resolve_address
from fieldroute.services.itinerary import build_stop_list, format_duration
from fieldroute.services.outputs.routing_formatter import itinerary_to_csv, itinerary_to_json


def _customer(cid: str, **overrides) -> Customer:
    values = dict(id=cid, name=f"Customer {cid}", city="Canton", state="SD", address="1 Main St", zip="57013")
    values.update(overrides)
    return Customer(**values)


def _itinerary(mode: str, *customers: Customer) -> Itinerary:
    return Itinerary(mode=mode, ordered_customers=customers, total_distance_miles="12.5", total_time_minutes=75)


def test_resolve_address_full_and_partial():
    assert resolve_address(_customer("1")) == "1 Main St Canton, SD 57013"
    assert resolve_address(_customer("2", address=None, zip=None)) == "Canton, SD"
    assert resolve_address(_customer("3", address="  9 Elm ", city=" Lennox ", zip=None)) == "9 Elm Lennox, SD"
    assert resolve_address(_customer("4", address=None, city=None, zip="57013")) == "SD 57013"


def test_directions_url_encodes_address():
    assert directions_url("1 Main St Canton, SD") == (
        "https://www.google.com/maps/dir/?api=1&destination=1%20Main%20St%20Canton%2C%20SD"
    )


def test_round_trip_stop_list_has_start_and_end():
    stops = build_stop_list(_itinerary(ROUND_TRIP, _customer("A"), _customer("B")), "Canton, SD")

    assert [stop.label for stop in stops] == ["START", "1", "2", "END"]
    assert stops[0].address == stops[-1].address == "Canton, SD"
    assert [stop.customer_id for stop in stops[1:3]] == ["A", "B"]


def test_out_and_back_stop_list_has_no_end():
    stops = build_stop_list(_itinerary(OUT_AND_BACK, _customer("A")), "Canton, SD")

    assert [stop.kind for stop in stops] == ["start", "customer"]


def test_stop_phone_prefers_first_contact():
    with_contact = _customer("A", primary_phone="555-0000", contacts=[Contact(name="Pat", phone="555-1111")])
    without_contact = _customer("B", primary_phone="555-0000")

    stops = build_stop_list(_itinerary(OUT_AND_BACK, with_contact, without_contact), "Home")

    assert [stop.phone for stop in stops[1:]] == ["555-1111", "555-0000"]


def test_format_duration():
    assert format_duration(75) == "1h 15m"
    assert format_duration(0) == "0h 0m"


def test_printable_exports():
    itinerary = _itinerary(ROUND_TRIP, _customer("A", company="Acme"))
    stops = build_stop_list(itinerary, "Canton, SD")

    payload = itinerary_to_json(itinerary, stops)
    assert payload["total_time_display"] == "1h 15m"
    assert payload["customer_count"] == 1
    assert [stop["label"] for stop in payload["stops"]] == ["START", "1", "END"]
    assert payload["ordered_customer_ids"] == ["A"]
    assert payload["stops"][0]["directions_url"] is None
    assert payload["stops"][1]["directions_url"] == directions_url(stops[1].address)

    csv_text = itinerary_to_csv(stops)
    lines = csv_text.strip().splitlines()
    assert lines[0] == "stop,name,company,address,phone,customer_id"
    assert lines[2].startswith("1,Customer A,Acme,")
    assert len(lines) == 4
