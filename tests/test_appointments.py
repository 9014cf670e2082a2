from datetime import datetime, timedelta

from barberflow.models import Appointment, Client, User

DAY = "2030-06-10"


def at(hhmm, day=DAY):
    return f"{day}T{hhmm}:00"


def _barber_id(db, email="sam@fadehouse.com"):
    return db.query(User.id).filter(User.email == email).scalar()


def test_booking_derives_end_time_and_price_from_service(auth_headers, create_service, book):
    service = create_service(auth_headers, name="Skin Fade", duration=45, price=35.0)

    response = book(auth_headers, service["id"], at("10:00"), notes="First visit")

    assert response.status_code == 201
    body = response.json()
    assert body["startTime"] == "2030-06-10T10:00:00"
    assert body["endTime"] == "2030-06-10T10:45:00"
    assert body["price"] == 35.0
    assert body["status"] == "confirmed"
    assert body["notes"] == "First visit"
    assert body["service"]["name"] == "Skin Fade"


def test_timezone_aware_start_is_stored_as_utc(auth_headers, create_service, book):
    service = create_service(auth_headers)

    response = book(auth_headers, service["id"], "2030-06-10T12:00:00+02:00")

    assert response.json()["startTime"] == "2030-06-10T10:00:00"


def test_overlapping_booking_is_rejected(auth_headers, create_service, book):
    service = create_service(auth_headers, duration=60)
    assert book(auth_headers, service["id"], at("10:00")).status_code == 201

    for start in (at("10:00"), at("10:30"), at("09:30")):
        response = book(auth_headers, service["id"], start, client_email="other@mail.com")
        assert response.status_code == 400
        assert response.json() == {"message": "Time slot is already booked"}


def test_back_to_back_bookings_are_allowed(auth_headers, create_service, book):
    service = create_service(auth_headers, duration=30)

    assert book(auth_headers, service["id"], at("10:00")).status_code == 201
    assert book(auth_headers, service["id"], at("10:30")).status_code == 201
    assert book(auth_headers, service["id"], at("09:30")).status_code == 201


def test_other_barbers_calendars_do_not_conflict(auth_headers, other_headers, create_service, book):
    mine = create_service(auth_headers)
    theirs = create_service(other_headers)

    assert book(auth_headers, mine["id"], at("10:00")).status_code == 201
    assert book(other_headers, theirs["id"], at("10:00")).status_code == 201


def test_cancelled_appointment_frees_its_slot(client, auth_headers, create_service, book):
    service = create_service(auth_headers)
    first = book(auth_headers, service["id"], at("10:00")).json()

    cancelled = client.patch(
        f"/api/appointments/{first['id']}", json={"status": "cancelled"}, headers=auth_headers
    )
    assert cancelled.json()["status"] == "cancelled"

    assert book(auth_headers, service["id"], at("10:00"), client_email="next@mail.com").status_code == 201


def test_reactivating_into_a_rebooked_slot_is_rejected(client, auth_headers, create_service, book):
    service = create_service(auth_headers)
    first = book(auth_headers, service["id"], at("10:00")).json()
    client.patch(f"/api/appointments/{first['id']}", json={"status": "cancelled"}, headers=auth_headers)
    book(auth_headers, service["id"], at("10:15"), client_email="next@mail.com")

    response = client.patch(
        f"/api/appointments/{first['id']}", json={"status": "confirmed"}, headers=auth_headers
    )

    assert response.status_code == 400
    current = client.get("/api/appointments", headers=auth_headers).json()
    assert [a["status"] for a in current] == ["cancelled", "confirmed"]


def test_unknown_or_foreign_service_is_rejected(auth_headers, other_headers, create_service, book):
    theirs = create_service(other_headers)

    assert book(auth_headers, 9999, at("10:00")).status_code == 404
    response = book(auth_headers, theirs["id"], at("10:00"))
    assert response.status_code == 404
    assert response.json() == {"message": "Service not found"}


def test_new_appointments_cannot_start_completed(auth_headers, create_service, book):
    service = create_service(auth_headers)

    response = book(auth_headers, service["id"], at("10:00"), status="completed")

    assert response.status_code == 400


def test_list_appointments_in_range(client, auth_headers, create_service, book):
    service = create_service(auth_headers)
    book(auth_headers, service["id"], at("15:00"))
    book(auth_headers, service["id"], at("09:00"))
    book(auth_headers, service["id"], at("09:00", day="2030-06-12"))

    everything = client.get("/api/appointments", headers=auth_headers).json()
    assert [a["startTime"] for a in everything] == [
        "2030-06-10T09:00:00",
        "2030-06-10T15:00:00",
        "2030-06-12T09:00:00",
    ]

    one_day = client.get(
        "/api/appointments",
        params={"start": "2030-06-10T00:00:00", "end": "2030-06-10T23:59:59"},
        headers=auth_headers,
    ).json()
    assert len(one_day) == 2


def test_appointments_are_scoped_to_their_shop(client, auth_headers, other_headers, create_service, book):
    service = create_service(auth_headers)
    appointment = book(auth_headers, service["id"], at("10:00")).json()

    assert client.get("/api/appointments", headers=other_headers).json() == []
    patched = client.patch(
        f"/api/appointments/{appointment['id']}", json={"status": "cancelled"}, headers=other_headers
    )
    assert patched.status_code == 404
    assert client.delete(f"/api/appointments/{appointment['id']}", headers=other_headers).status_code == 404


def test_delete_appointment(client, auth_headers, create_service, book):
    service = create_service(auth_headers)
    appointment = book(auth_headers, service["id"], at("10:00")).json()

    response = client.delete(f"/api/appointments/{appointment['id']}", headers=auth_headers)

    assert response.json() == {"message": "Appointment removed"}
    assert client.get("/api/appointments", headers=auth_headers).json() == []


def test_deleting_a_service_keeps_its_appointments(client, auth_headers, create_service, book):
    service = create_service(auth_headers)
    book(auth_headers, service["id"], at("10:00"))

    client.delete(f"/api/services/{service['id']}", headers=auth_headers)

    appointments = client.get("/api/appointments", headers=auth_headers).json()
    assert len(appointments) == 1
    assert appointments[0]["service"] is None
    assert appointments[0]["price"] == 25.0


# ============================================================================
# CLIENT STATS
# ============================================================================


def test_booking_creates_and_counts_the_client(client, db, auth_headers, create_service, book):
    service = create_service(auth_headers, price=30.0)
    first = book(auth_headers, service["id"], at("10:00"), client_email="Casey@Mail.com", client_name="Casey")
    book(auth_headers, service["id"], at("11:00"), client_email="casey@mail.com", client_name="Casey")

    clients = client.get("/api/clients", headers=auth_headers).json()
    assert len(clients) == 1
    assert clients[0]["email"] == "casey@mail.com"
    assert clients[0]["totalBookings"] == 2
    assert clients[0]["totalSpent"] == 0.0

    client.patch(f"/api/appointments/{first.json()['id']}", json={"status": "completed"}, headers=auth_headers)

    stats = client.get("/api/clients", headers=auth_headers).json()[0]
    assert stats["totalSpent"] == 30.0
    assert stats["lastVisit"] == "2030-06-10T10:00:00"

    # Undoing the completion takes the spend back out
    client.patch(f"/api/appointments/{first.json()['id']}", json={"status": "confirmed"}, headers=auth_headers)
    assert client.get("/api/clients", headers=auth_headers).json()[0]["totalSpent"] == 0.0


def test_deleting_appointments_updates_client_totals(client, auth_headers, create_service, book):
    service = create_service(auth_headers, price=30.0)
    done = book(auth_headers, service["id"], at("10:00")).json()
    upcoming = book(auth_headers, service["id"], at("11:00")).json()
    client.patch(f"/api/appointments/{done['id']}", json={"status": "completed"}, headers=auth_headers)

    client.delete(f"/api/appointments/{done['id']}", headers=auth_headers)

    stats = client.get("/api/clients", headers=auth_headers).json()[0]
    assert stats["totalBookings"] == 1
    assert stats["totalSpent"] == 0.0

    client.delete(f"/api/appointments/{upcoming['id']}", headers=auth_headers)

    stats = client.get("/api/clients", headers=auth_headers).json()[0]
    assert stats["totalBookings"] == 0
    assert stats["totalSpent"] == 0.0


def test_rejected_booking_does_not_create_a_client(client, db, auth_headers, create_service, book):
    service = create_service(auth_headers)
    book(auth_headers, service["id"], at("10:00"))

    book(auth_headers, service["id"], at("10:00"), client_email="walkin@mail.com")

    db.expire_all()
    assert db.query(Client).filter(Client.email == "walkin@mail.com").count() == 0


# ============================================================================
# PLAN LIMITS
# ============================================================================


def _fill_month(db, barber_id, count, month_start=datetime(2030, 6, 1, 8, 0)):
    for i in range(count):
        start = month_start + timedelta(hours=i)
        db.add(
            Appointment(
                barber_id=barber_id,
                client_name="Filler",
                client_email=f"filler{i}@mail.com",
                start_time=start,
                end_time=start + timedelta(minutes=30),
                status="confirmed",
                price=10.0,
            )
        )
    db.commit()


def test_free_plan_is_capped_at_fifty_appointments_a_month(db, auth_headers, create_service, book):
    service = create_service(auth_headers)
    _fill_month(db, _barber_id(db), 50)

    blocked = book(auth_headers, service["id"], at("10:00", day="2030-06-28"))
    assert blocked.status_code == 403
    assert "monthly limit of 50" in blocked.json()["message"]

    # The allowance resets with the calendar month
    assert book(auth_headers, service["id"], at("10:00", day="2030-07-01")).status_code == 201


def test_cancelled_appointments_do_not_count_toward_the_cap(db, auth_headers, create_service, book):
    service = create_service(auth_headers)
    barber_id = _barber_id(db)
    _fill_month(db, barber_id, 50)
    filler = db.query(Appointment).filter(Appointment.barber_id == barber_id).first()
    filler.status = "cancelled"
    db.commit()

    assert book(auth_headers, service["id"], at("10:00", day="2030-06-28")).status_code == 201


def test_paid_plans_are_not_capped(db, auth_headers, create_service, book, set_plan):
    service = create_service(auth_headers)
    _fill_month(db, _barber_id(db), 50)
    set_plan("sam@fadehouse.com", "pro")

    assert book(auth_headers, service["id"], at("10:00", day="2030-06-28")).status_code == 201
