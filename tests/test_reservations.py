from bson import ObjectId


def test_create_reservation_defaults(reservation):
    assert reservation["status"] == "Pending"
    assert reservation["userStatus"] == "Good"
    assert reservation["games"] == ["Lego", "Chess"]
    assert reservation["kidAge"] == 7
    assert reservation["review"] is None


def test_create_reservation_forces_user_status(client):
    resp = client.post("/api/reservations", json={"adultName": "Lee", "userStatus": "Bad"})
    assert resp.status_code == 201
    assert resp.json()["userStatus"] == "Good"


def test_create_reservation_ignores_review_and_unknown_fields(client, db):
    resp = client.post("/api/reservations", json={"adultName": "Lee", "review": "great", "coupon": "X"})
    assert resp.status_code == 201
    stored = db["reservation"].find_one()
    assert stored["review"] is None
    assert "coupon" not in stored


def test_create_reservation_coerces_numbers(client):
    resp = client.post("/api/reservations", json={"adultAge": "41", "duration": "1.5"})
    assert resp.status_code == 201
    assert resp.json()["adultAge"] == 41
    assert resp.json()["duration"] == 1.5


def test_create_reservation_rejects_bad_values(client, db):
    resp = client.post("/api/reservations", json={"status": "Booked"})
    assert resp.status_code == 500
    assert "Reservation validation failed" in resp.json()["message"]

    resp = client.post("/api/reservations", json={"kidAge": "seven"})
    assert resp.status_code == 500
    assert db["reservation"].count_documents({}) == 0


def test_same_slot_can_be_booked_twice(client):
    slot = {"bookingDate": "2026-10-20", "bookingHour": "16:00"}
    assert client.post("/api/reservations", json=slot).status_code == 201
    assert client.post("/api/reservations", json=slot).status_code == 201
    assert len(client.get("/api/reservations").json()) == 2


def test_list_reservations(client, reservation):
    resp = client.get("/api/reservations")
    assert resp.status_code == 200
    assert [r["_id"] for r in resp.json()] == [reservation["_id"]]


def test_update_status_and_price(client, reservation):
    resp = client.patch(
        f"/api/reservations/{reservation['_id']}/status",
        json={"status": "Completed", "price": 50},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "Completed"
    assert data["price"] == 50
    assert data["adultName"] == "Dana"


def test_update_status_unknown_id(client):
    resp = client.patch(f"/api/reservations/{ObjectId()}/status", json={"status": "Completed", "price": 50})
    assert resp.status_code == 404
    assert resp.json() == {"message": "Reservation not found"}


def test_update_status_malformed_id(client):
    resp = client.patch("/api/reservations/123/status", json={"status": "Cancelled"})
    assert resp.status_code == 404


def test_update_status_outside_enum(client, db, reservation):
    resp = client.patch(f"/api/reservations/{reservation['_id']}/status", json={"status": "Done"})
    assert resp.status_code == 500
    assert db["reservation"].find_one()["status"] == "Pending"


def test_update_price_only(client, reservation):
    resp = client.patch(f"/api/reservations/{reservation['_id']}/status", json={"price": 20})
    assert resp.status_code == 200
    assert resp.json()["status"] == "Pending"
    assert resp.json()["price"] == 20


def test_update_user_status(client, reservation):
    resp = client.patch(f"/api/reservations/{reservation['_id']}/userstatus", json={"userStatus": "Bad"})
    assert resp.status_code == 200
    assert resp.json()["userStatus"] == "Bad"
    assert resp.json()["status"] == "Pending"


def test_update_user_status_outside_enum(client, reservation):
    resp = client.patch(f"/api/reservations/{reservation['_id']}/userstatus", json={"userStatus": "Ugly"})
    assert resp.status_code == 500
    assert resp.json() == {"message": "Server error"}


def test_update_user_status_unknown_id(client):
    resp = client.patch(f"/api/reservations/{ObjectId()}/userstatus", json={"userStatus": "Bad"})
    assert resp.status_code == 404


def test_update_review(client, reservation):
    resp = client.patch(f"/api/reservations/{reservation['_id']}/review", json={"review": "Loved it"})
    assert resp.status_code == 200
    assert resp.json()["review"] == "Loved it"
    assert resp.json()["userStatus"] == "Good"


def test_update_review_unknown_id(client):
    resp = client.patch(f"/api/reservations/{ObjectId()}/review", json={"review": "?"})
    assert resp.status_code == 404


def test_update_status_with_non_object_body(client, reservation):
    resp = client.patch(f"/api/reservations/{reservation['_id']}/status", json=["Completed"])
    assert resp.status_code == 500
    assert "StatusUpdate validation failed" in resp.json()["message"]
