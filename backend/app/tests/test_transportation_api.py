"""
Tests for transportation endpoints.
"""
import pytest

TRAVEL_DATE = "2026-01-26"


def _plan(**fields):
    plan = {"is_travelling": True, "travel_date": TRAVEL_DATE, "pin_state": "Kerala"}
    plan.update(fields)
    return plan


@pytest.fixture
def seeded(register):
    """Five alumni travellers across two pincode areas, plus two that must be ignored."""
    return {
        "biju": register("Biju", _plan(
            mode_of_transport="car", vehicle_capacity=3, start_pincode="682001",
            pin_district="Ernakulam", need_parking=True, ready_for_ride_share=True
        ), whatsapp_number="9847000001"),
        "cini": register("Cini", _plan(
            mode_of_transport="car", vehicle_capacity=2, start_pincode="682020",
            pin_district="Ernakulam"
        )),
        "anu": register("Anu", _plan(
            mode_of_transport="looking-for-transport", group_size=4, start_pincode="682011",
            pin_district="Ernakulam"
        )),
        "dev": register("Dev", _plan(
            mode_of_transport="looking-for-transport", group_size=2, start_pincode="686001",
            pin_district="Kottayam", starting_location="Pala"
        ), contact_number="9847000004"),
        "eva": register("Eva", _plan(
            mode_of_transport="two-wheeler", vehicle_capacity=1, start_pincode="686101",
            pin_district="Kottayam"
        )),
        "staff": register("Gopan", _plan(
            mode_of_transport="car", vehicle_capacity=4, start_pincode="686001",
            pin_district="Idukki"
        ), registration_type="Staff"),
        "home": register("Hari", {"is_travelling": False, "start_pincode": "686001"}),
    }


def test_stats(client, seeded):
    """Test dashboard counters over travelling alumni."""
    response = client.get("/api/transportation/stats")
    assert response.status_code == 200
    stats = response.json()

    assert stats["total_travellers"] == 5
    assert stats["vehicle_providers"] == {"count": 3, "total_capacity": 6, "need_parking": 1}
    assert stats["ride_seekers"] == {"count": 2, "total_needed": 6}
    assert stats["mode_breakdown"]["car"] == {"count": 2, "total_capacity": 5}


def test_stats_filters(client, seeded):
    """Test district and mode filters narrow the snapshot."""
    response = client.get("/api/transportation/stats", params={"district": "Kottayam"})
    assert response.json()["total_travellers"] == 2

    response = client.get("/api/transportation/stats", params={"mode_of_transport": "car"})
    assert response.json()["total_travellers"] == 2

    response = client.get("/api/transportation/stats", params={"mode_of_transport": "all"})
    assert response.json()["total_travellers"] == 5

    response = client.get("/api/transportation/stats", params={"search": "pala"})
    assert response.json()["total_travellers"] == 1


def test_stats_invalid_mode(client, seeded):
    """Test an unknown mode filter is a bad request."""
    response = client.get("/api/transportation/stats", params={"mode_of_transport": "rocket"})
    assert response.status_code == 400


def test_empty_database(client, db_session):
    """Test empty results are successful responses."""
    stats = client.get("/api/transportation/stats").json()
    assert stats["total_travellers"] == 0
    assert stats["mode_breakdown"] == {}

    groups = client.get("/api/transportation/proximity-groups").json()
    assert groups["groups"] == []
    assert groups["total_groups"] == 0


def test_proximity_groups(client, seeded):
    """Test groups by pincode area with self-sufficiency."""
    response = client.get("/api/transportation/proximity-groups", params={"min_group_size": 2})
    assert response.status_code == 200
    report = response.json()

    assert [g["pincode_base"] for g in report["groups"]] == ["682", "686"]
    ernakulam, kottayam = report["groups"]
    assert ernakulam["total_capacity"] == 5
    assert ernakulam["total_seekers"] == 4
    assert ernakulam["can_self_sustain"] is True
    assert kottayam["total_capacity"] == 1
    assert kottayam["total_seekers"] == 2
    assert kottayam["can_self_sustain"] is False
    assert report["summary"]["self_sustainable_groups"] == 1


def test_proximity_groups_invalid_size(client, seeded):
    """Test a zero minimum group size is a bad request."""
    response = client.get("/api/transportation/proximity-groups", params={"min_group_size": 0})
    assert response.status_code == 400


def test_compatible_rides(client, seeded):
    """Test providers from another area ranked for a seeker."""
    response = client.get(
        "/api/transportation/compatible-rides", params={"seeker_id": seeded["dev"]}
    )
    assert response.status_code == 200
    data = response.json()

    assert data["seeker"]["id"] == seeded["dev"]
    assert [r["provider"]["name"] for r in data["compatible_rides"]] == ["Cini", "Biju"]
    assert data["compatible_rides"][0]["distance_km"] == 30.0
    assert data["compatible_rides"][0]["compatibility_score"] == 64.0
    assert data["total_matches"] == 2


def test_compatible_rides_none_available(client, seeded):
    """Test a seeker nobody can carry gets an empty list, not an error."""
    response = client.get(
        "/api/transportation/compatible-rides", params={"seeker_id": seeded["anu"]}
    )
    assert response.status_code == 200
    assert response.json()["compatible_rides"] == []
    assert response.json()["total_matches"] == 0


def test_compatible_rides_unknown_seeker(client, seeded):
    """Test unknown ids and non-seekers return 404."""
    response = client.get("/api/transportation/compatible-rides", params={"seeker_id": 9999})
    assert response.status_code == 404

    response = client.get(
        "/api/transportation/compatible-rides", params={"seeker_id": seeded["biju"]}
    )
    assert response.status_code == 404


@pytest.mark.parametrize("max_distance_km", ["-5", "nan", "inf"])
def test_compatible_rides_invalid_options(client, seeded, max_distance_km):
    """Test a negative or non-finite distance is a bad request."""
    response = client.get(
        "/api/transportation/compatible-rides",
        params={"seeker_id": seeded["dev"], "max_distance_km": max_distance_km}
    )
    assert response.status_code == 400


def test_providers_and_seekers(client, seeded):
    """Test paginated provider and seeker listings."""
    response = client.get(
        "/api/transportation/providers",
        params={"limit": 2, "sort_by": "name", "sort_order": "asc"}
    )
    assert response.status_code == 200
    data = response.json()
    assert [t["name"] for t in data["travellers"]] == ["Biju", "Cini"]
    assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}

    response = client.get("/api/transportation/seekers")
    assert {t["name"] for t in response.json()["travellers"]} == {"Anu", "Dev"}

    response = client.get("/api/transportation/seekers", params={"sort_by": "email"})
    assert response.status_code == 400


def test_districts_and_states(client, seeded):
    """Test distinct filter values come from travelling alumni only."""
    assert client.get("/api/transportation/districts").json() == ["Ernakulam", "Kottayam"]
    assert client.get("/api/transportation/states").json() == ["Kerala"]


def test_export(client, seeded):
    """Test CSV download of providers."""
    response = client.get("/api/transportation/export", params={"type": "providers"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "transportation_providers_" in response.headers["content-disposition"]

    lines = response.text.strip().split("\n")
    assert lines[0].startswith('"Name","Email"')
    assert len(lines) == 4

    response = client.get("/api/transportation/export", params={"type": "everyone"})
    assert response.status_code == 400


def test_contact_link(client, seeded):
    """Test the WhatsApp link goes to the provider when the seeker writes."""
    response = client.get(
        "/api/transportation/contact-link",
        params={"seeker_id": seeded["dev"], "provider_id": seeded["biju"]}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["phone_number"] == "919847000001"
    assert data["whatsapp_url"].startswith("https://wa.me/919847000001?text=Hi%20Biju")
    assert "ride from Pala" in data["message"]

    response = client.get(
        "/api/transportation/contact-link",
        params={"seeker_id": seeded["dev"], "provider_id": seeded["biju"], "from_seeker": False}
    )
    assert response.json()["phone_number"] == "919847000004"


def test_contact_link_unknown_provider(client, seeded):
    """Test a seeker id used as provider returns 404."""
    response = client.get(
        "/api/transportation/contact-link",
        params={"seeker_id": seeded["dev"], "provider_id": seeded["anu"]}
    )
    assert response.status_code == 404


def test_health(client):
    """Test health check endpoints."""
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").status_code == 200
