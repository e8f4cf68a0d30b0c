from randevu.models.appointment_model import Appointment

from tests.conftest import FUTURE_DATE, auth_headers, make_user


def book(client, customer, barber, service, time="14:00", employee=None):
    body = {
        "barber_id": barber.id,
        "service_id": service.id,
        "date": FUTURE_DATE,
        "time": time,
        "notes": "Kısa olsun",
    }
    if employee is not None:
        body["employee_id"] = employee.id
    return client.post("/api/appointments", json=body, headers=auth_headers(customer))


def set_status(client, user, appointment_id, new_status):
    return client.patch(
        f"/api/appointments/{appointment_id}/status",
        json={"status": new_status},
        headers=auth_headers(user),
    )


def is_available(client, barber, time="14:00"):
    response = client.get(
        "/api/availability",
        params={"barber_id": barber.id, "date": FUTURE_DATE, "time": time},
    )
    assert response.status_code == 200
    return response.json()["available"]


def test_full_booking_lifecycle(client, customer, other_customer, barber, haircut):
    # First booking succeeds as pending
    response = book(client, customer, barber, haircut)
    assert response.status_code == 201
    appointment = response.json()
    assert appointment["status"] == "pending"
    assert appointment["service_name"] == "Saç Kesimi"
    assert appointment["service_price"] == "250.00"
    assert appointment["is_reviewed"] is False

    # Second customer is turned away
    response = book(client, other_customer, barber, haircut)
    assert response.status_code == 409

    # Confirmed appointments keep the slot
    response = set_status(client, barber, appointment["id"], "confirmed")
    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"
    assert not is_available(client, barber)

    response = set_status(client, barber, appointment["id"], "completed")
    assert response.status_code == 200

    response = client.post(
        "/api/reviews",
        json={"appointment_id": appointment["id"], "rating": 5, "comment": "Harika"},
        headers=auth_headers(customer),
    )
    assert response.status_code == 201
    assert response.json()["rating"] == 5

    response = client.get(f"/api/appointments/{appointment['id']}", headers=auth_headers(customer))
    assert response.json()["is_reviewed"] is True

    response = client.post(
        "/api/reviews",
        json={"appointment_id": appointment["id"], "rating": 1},
        headers=auth_headers(customer),
    )
    assert response.status_code == 409

    # Completed appointments cannot be cancelled
    response = set_status(client, customer, appointment["id"], "cancelled")
    assert response.status_code == 409
    response = client.get(f"/api/appointments/{appointment['id']}", headers=auth_headers(customer))
    assert response.json()["status"] == "completed"

    # Completed appointments release the slot
    assert is_available(client, barber)


def test_same_status_is_a_no_op(client, db, customer, barber, haircut):
    appointment_id = book(client, customer, barber, haircut).json()["id"]
    assert set_status(client, barber, appointment_id, "confirmed").status_code == 200
    before = client.get("/api/notifications", headers=auth_headers(customer)).json()

    response = set_status(client, barber, appointment_id, "confirmed")

    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"
    after = client.get("/api/notifications", headers=auth_headers(customer)).json()
    assert len(after) == len(before)


def test_pending_cannot_jump_to_completed(client, customer, barber, haircut):
    appointment_id = book(client, customer, barber, haircut).json()["id"]

    response = set_status(client, barber, appointment_id, "completed")

    assert response.status_code == 409
    assert "pending" in response.json()["detail"]


def test_customer_cannot_confirm(client, customer, barber, haircut):
    appointment_id = book(client, customer, barber, haircut).json()["id"]

    assert set_status(client, customer, appointment_id, "confirmed").status_code == 409


def test_customer_cancels_pending_and_slot_frees(client, customer, other_customer, barber, haircut):
    appointment_id = book(client, customer, barber, haircut).json()["id"]

    response = set_status(client, customer, appointment_id, "cancelled")

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert is_available(client, barber)
    assert book(client, other_customer, barber, haircut).status_code == 201


def test_provider_rejects_request(client, customer, barber, haircut):
    appointment_id = book(client, customer, barber, haircut).json()["id"]

    response = set_status(client, barber, appointment_id, "rejected")

    assert response.status_code == 200
    assert set_status(client, barber, appointment_id, "confirmed").status_code == 409


def test_assigned_employee_acts_as_provider(client, customer, barber, employee, haircut):
    appointment_id = book(client, customer, barber, haircut, employee=employee).json()["id"]

    response = set_status(client, employee, appointment_id, "confirmed")

    assert response.status_code == 200
    response = client.get("/api/appointments", headers=auth_headers(employee))
    assert [a["id"] for a in response.json()] == [appointment_id]


def test_stranger_cannot_touch_appointment(client, db, customer, other_customer, barber, haircut):
    appointment_id = book(client, customer, barber, haircut).json()["id"]
    other_barber = make_user(db, "barber", first_name="Kemal")

    assert set_status(client, other_barber, appointment_id, "confirmed").status_code == 403
    assert set_status(client, other_customer, appointment_id, "cancelled").status_code == 403
    response = client.get(f"/api/appointments/{appointment_id}", headers=auth_headers(other_customer))
    assert response.status_code == 403


def test_unknown_appointment(client, barber):
    assert set_status(client, barber, "does-not-exist", "confirmed").status_code == 404


def test_unknown_status_value(client, customer, barber, haircut):
    appointment_id = book(client, customer, barber, haircut).json()["id"]
    assert set_status(client, barber, appointment_id, "archived").status_code == 422


def test_barber_cannot_book(client, db, barber, haircut):
    other_barber = make_user(db, "barber", first_name="Kemal")
    assert book(client, other_barber, barber, haircut).status_code == 403


def test_booking_requires_login(client, barber, haircut):
    response = client.post("/api/appointments", json={
        "barber_id": barber.id, "service_id": haircut.id, "date": FUTURE_DATE, "time": "14:00",
    })
    assert response.status_code == 401


def test_booking_validates_date_and_time(client, customer, barber, haircut):
    for date, time in [("02.03.2099", "14:00"), (FUTURE_DATE, "25:00"), (FUTURE_DATE, "2pm")]:
        response = client.post("/api/appointments", json={
            "barber_id": barber.id, "service_id": haircut.id, "date": date, "time": time,
        }, headers=auth_headers(customer))
        assert response.status_code == 422


def test_booking_past_slot_is_unavailable(client, customer, barber, haircut):
    response = client.post("/api/appointments", json={
        "barber_id": barber.id, "service_id": haircut.id, "date": "2000-01-01", "time": "10:00",
    }, headers=auth_headers(customer))
    assert response.status_code == 409


def test_service_of_another_barber_is_rejected(client, db, customer, barber, haircut):
    other_barber = make_user(db, "barber", first_name="Kemal")
    response = client.post("/api/appointments", json={
        "barber_id": other_barber.id, "service_id": haircut.id, "date": FUTURE_DATE, "time": "14:00",
    }, headers=auth_headers(customer))
    assert response.status_code == 404


def test_appointment_keeps_service_snapshot(client, db, customer, barber, haircut):
    appointment_id = book(client, customer, barber, haircut).json()["id"]
    client.patch(
        f"/api/services/{haircut.id}", json={"price": "300.00"}, headers=auth_headers(barber)
    )

    response = client.get(f"/api/appointments/{appointment_id}", headers=auth_headers(customer))

    assert response.json()["service_price"] == "250.00"


def test_list_filters_by_status_and_date(client, customer, barber, haircut):
    first = book(client, customer, barber, haircut, time="10:00").json()["id"]
    book(client, customer, barber, haircut, time="11:00")
    set_status(client, barber, first, "confirmed")
    headers = auth_headers(customer)

    assert len(client.get("/api/appointments", headers=headers).json()) == 2
    confirmed = client.get("/api/appointments", params={"status": "confirmed"}, headers=headers).json()
    assert [a["id"] for a in confirmed] == [first]
    other_day = client.get("/api/appointments", params={"date": "2099-03-03"}, headers=headers).json()
    assert other_day == []


def test_barber_sees_incoming_appointments(client, db, customer, other_customer, barber, haircut):
    book(client, customer, barber, haircut, time="10:00")
    book(client, other_customer, barber, haircut, time="11:00")

    response = client.get("/api/appointments", headers=auth_headers(barber))

    assert response.status_code == 200
    assert [a["time"] for a in response.json()] == ["11:00", "10:00"]
    assert db.query(Appointment).count() == 2


def test_available_slots_endpoint(client, customer, barber, beard_trim):
    day_of_week = 1  # 2099-03-02 is a Monday
    response = client.put("/api/working-hours", json=[{
        "day_of_week": day_of_week, "start_time": "09:00", "end_time": "11:00",
    }], headers=auth_headers(barber))
    assert response.status_code == 200

    book(client, customer, barber, beard_trim, time="09:30")
    response = client.get(
        f"/api/barbers/{barber.id}/available-slots",
        params={"date": FUTURE_DATE, "service_id": beard_trim.id},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["duration_minutes"] == 60
    assert body["slots"] == ["09:00", "10:00"]


def test_availability_rejects_bad_time(client, barber):
    response = client.get(
        "/api/availability",
        params={"barber_id": barber.id, "date": FUTURE_DATE, "time": "9:00"},
    )
    assert response.status_code == 422


def test_rejected_transition_leaves_appointment_unchanged(client, customer, barber, haircut):
    appointment_id = book(client, customer, barber, haircut).json()["id"]

    assert set_status(client, barber, appointment_id, "completed").status_code == 409
    assert set_status(client, customer, appointment_id, "confirmed").status_code == 409

    response = client.get(f"/api/appointments/{appointment_id}", headers=auth_headers(customer))
    assert response.json()["status"] == "pending"
    assert not is_available(client, barber)


def test_availability_for_unknown_barber(client):
    response = client.get(
        "/api/availability",
        params={"barber_id": "no-such-barber", "date": FUTURE_DATE, "time": "10:00"},
    )
    assert response.status_code == 404
