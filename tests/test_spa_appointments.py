"""Tests for appointment writes and the billing records derived from them."""

import re

from sqlalchemy.exc import SQLAlchemyError

from hotel_backoffice.domain.spa.repository import SpaBillingRepository


def get_billing(client, appointment_pk):
    return client.get(f"/spa/billing/appointment/{appointment_pk}")


class TestCreateAppointment:
    def test_creates_billing_with_tax(self, client, create_appointment):
        """Service 100 + therapist 50 gives subtotal 150, tax 15, total 165."""
        appointment = create_appointment()

        response = get_billing(client, appointment["id"])
        assert response.status_code == 200
        billing = response.json()
        assert billing["subtotal"] == 150
        assert billing["tax"] == 15
        assert billing["total"] == 165
        assert billing["amountPaid"] == 0
        assert billing["amountDue"] == 165
        assert billing["paymentStatus"] == "pending"
        assert [item["description"] for item in billing["items"]] == [
            "Deep Tissue Massage",
            "Therapist: Nadia Silva",
        ]

    def test_generated_identifiers(self, client, create_appointment):
        appointment = create_appointment()
        billing = get_billing(client, appointment["id"]).json()

        assert re.fullmatch(r"APT-\d+-[0-9a-z]{9}", appointment["appointmentId"])
        assert re.fullmatch(r"BIL-\d+-[0-9a-z]{9}", billing["billingId"])

    def test_snapshots_filled_from_references(self, create_appointment):
        appointment = create_appointment()

        assert appointment["guestName"] == "Amara Perera"
        assert appointment["roomNumber"] == "204"
        assert appointment["serviceName"] == "Deep Tissue Massage"
        assert appointment["therapistName"] == "Nadia Silva"
        assert appointment["service"]["basePrice"] == 100
        assert appointment["therapist"]["hourlyRate"] == 50
        assert appointment["spaRoom"] is None

    def test_billing_guest_and_due_date(self, client, create_appointment, guest):
        appointment = create_appointment()
        billing = get_billing(client, appointment["id"]).json()

        assert billing["guestId"] == guest.id
        assert billing["guestName"] == "Amara Perera"
        assert billing["appointment"]["appointmentId"] == appointment["appointmentId"]
        assert billing["dueDate"] > billing["invoiceDate"]

    def test_room_charge_adds_line_item(self, client, create_appointment, spa_room):
        appointment = create_appointment(spaRoom=spa_room.id, roomPrice=30)
        billing = get_billing(client, appointment["id"]).json()

        assert billing["subtotal"] == 180
        assert billing["items"][-1]["description"] == "Spa Room: S-101"

    def test_unknown_guest_is_rejected(self, client, auth_headers, appointment_payload):
        response = client.post(
            "/spa/appointments", json={**appointment_payload, "guestId": 999}, headers=auth_headers
        )
        assert response.status_code == 404

    def test_unknown_service_is_rejected(self, client, auth_headers, appointment_payload):
        response = client.post(
            "/spa/appointments", json={**appointment_payload, "service": 999}, headers=auth_headers
        )
        assert response.status_code == 404

    def test_invalid_body_is_400(self, client, auth_headers, appointment_payload):
        response = client.post(
            "/spa/appointments", json={**appointment_payload, "startTime": "25:99"}, headers=auth_headers
        )
        assert response.status_code == 400

    def test_billing_failure_does_not_fail_booking(self, client, auth_headers, appointment_payload, monkeypatch):
        """A persistence error while billing is logged; the appointment still stands."""

        def failing_create(db, **billing_data):
            raise SQLAlchemyError("billing store unavailable")

        monkeypatch.setattr(SpaBillingRepository, "create_billing", staticmethod(failing_create))

        response = client.post("/spa/appointments", json=appointment_payload, headers=auth_headers)
        assert response.status_code == 201
        appointment = response.json()
        assert appointment["servicePrice"] == 100

        monkeypatch.undo()
        assert client.get(f"/spa/appointments/{appointment['id']}").status_code == 200
        assert get_billing(client, appointment["id"]).status_code == 404

    def test_large_discount_gives_negative_total(self, client, create_appointment):
        appointment = create_appointment(discount=200)
        billing = get_billing(client, appointment["id"]).json()

        assert billing["total"] == -35
        assert billing["amountDue"] == -35


class TestUpdateAppointment:
    def test_discount_recomputes_billing(self, client, auth_headers, create_appointment):
        appointment = create_appointment()

        response = client.put(f"/spa/appointments/{appointment['id']}", json={"discount": 20}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["discount"] == 20

        billing = get_billing(client, appointment["id"]).json()
        assert billing["subtotal"] == 150
        assert billing["tax"] == 15
        assert billing["total"] == 145
        assert billing["amountDue"] == 145

    def test_amount_paid_carried_over(self, client, auth_headers, create_appointment):
        appointment = create_appointment()
        billing = get_billing(client, appointment["id"]).json()
        client.put(f"/spa/billing/{billing['id']}", json={"amountPaid": 45}, headers=auth_headers)

        client.put(f"/spa/appointments/{appointment['id']}", json={"discount": 20}, headers=auth_headers)

        billing = get_billing(client, appointment["id"]).json()
        assert billing["amountPaid"] == 45
        assert billing["amountDue"] == 100

    def test_payment_status_only_copied_when_supplied(self, client, auth_headers, create_appointment):
        appointment = create_appointment()
        billing = get_billing(client, appointment["id"]).json()
        client.put(f"/spa/billing/{billing['id']}", json={"paymentStatus": "partial"}, headers=auth_headers)

        client.put(f"/spa/appointments/{appointment['id']}", json={"notes": "Window seat"}, headers=auth_headers)
        assert get_billing(client, appointment["id"]).json()["paymentStatus"] == "partial"

        client.put(f"/spa/appointments/{appointment['id']}", json={"paymentStatus": "paid"}, headers=auth_headers)
        assert get_billing(client, appointment["id"]).json()["paymentStatus"] == "paid"

    def test_removing_therapist_charge_drops_line_item(self, client, auth_headers, create_appointment):
        appointment = create_appointment()

        client.put(f"/spa/appointments/{appointment['id']}", json={"therapistPrice": 0}, headers=auth_headers)

        billing = get_billing(client, appointment["id"]).json()
        assert len(billing["items"]) == 1
        assert billing["total"] == 110

    def test_billing_failure_does_not_fail_update(self, client, auth_headers, create_appointment, monkeypatch):
        """A persistence error while regenerating the invoice is logged; the edit still stands."""
        appointment = create_appointment()

        def failing_update(db, billing, **updates):
            raise SQLAlchemyError("billing store unavailable")

        monkeypatch.setattr(SpaBillingRepository, "update_billing", staticmethod(failing_update))

        response = client.put(f"/spa/appointments/{appointment['id']}", json={"discount": 20}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["discount"] == 20

        monkeypatch.undo()
        assert client.get(f"/spa/appointments/{appointment['id']}").json()["discount"] == 20
        assert get_billing(client, appointment["id"]).json()["total"] == 165

    def test_billing_only_fields_survive_edit(self, client, auth_headers, create_appointment):
        appointment = create_appointment()
        billing = get_billing(client, appointment["id"]).json()
        client.put(
            f"/spa/billing/{billing['id']}",
            json={"paymentMethod": "card", "notes": "Charged to room 204"},
            headers=auth_headers,
        )

        client.put(f"/spa/appointments/{appointment['id']}", json={"discount": 20}, headers=auth_headers)

        billing = get_billing(client, appointment["id"]).json()
        assert billing["total"] == 145
        assert billing["paymentMethod"] == "card"
        assert billing["notes"] == "Charged to room 204"

    def test_clearing_therapist_clears_name_and_charge_label(self, client, auth_headers, create_appointment):
        appointment = create_appointment()

        response = client.put(
            f"/spa/appointments/{appointment['id']}", json={"therapist": None}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["therapist"] is None
        assert response.json()["therapistName"] is None
        billing = get_billing(client, appointment["id"]).json()
        assert [item["description"] for item in billing["items"]] == [
            "Deep Tissue Massage",
            "Therapist: Professional",
        ]

    def test_update_without_billing_creates_none(
        self, client, auth_headers, appointment_payload, monkeypatch
    ):
        def failing_create(db, **billing_data):
            raise SQLAlchemyError("billing store unavailable")

        monkeypatch.setattr(SpaBillingRepository, "create_billing", staticmethod(failing_create))
        appointment = client.post("/spa/appointments", json=appointment_payload, headers=auth_headers).json()
        monkeypatch.undo()

        response = client.put(f"/spa/appointments/{appointment['id']}", json={"discount": 5}, headers=auth_headers)
        assert response.status_code == 200
        assert get_billing(client, appointment["id"]).status_code == 404

    def test_missing_appointment(self, client, auth_headers):
        response = client.put("/spa/appointments/999", json={"discount": 5}, headers=auth_headers)
        assert response.status_code == 404


class TestAppointmentStatus:
    def test_status_patch_is_idempotent(self, client, auth_headers, create_appointment):
        appointment = create_appointment()
        url = f"/spa/appointments/{appointment['id']}/status"

        first = client.patch(url, json={"status": "confirmed"}, headers=auth_headers)
        second = client.patch(url, json={"status": "confirmed"}, headers=auth_headers)

        assert first.status_code == second.status_code == 200
        assert first.json()["message"] == "Appointment status updated"
        first_state = {k: v for k, v in first.json()["appointment"].items() if k != "updatedAt"}
        second_state = {k: v for k, v in second.json()["appointment"].items() if k != "updatedAt"}
        assert first_state == second_state
        assert second_state["status"] == "confirmed"

    def test_any_transition_is_allowed(self, client, auth_headers, create_appointment):
        appointment = create_appointment()
        url = f"/spa/appointments/{appointment['id']}/status"

        client.patch(url, json={"status": "completed"}, headers=auth_headers)
        response = client.patch(url, json={"status": "pending"}, headers=auth_headers)

        assert response.json()["appointment"]["status"] == "pending"

    def test_status_does_not_touch_billing(self, client, auth_headers, create_appointment):
        appointment = create_appointment()
        before = get_billing(client, appointment["id"]).json()

        client.patch(f"/spa/appointments/{appointment['id']}/status", json={"status": "cancelled"}, headers=auth_headers)

        assert get_billing(client, appointment["id"]).json() == before

    def test_unknown_status_is_400(self, client, auth_headers, create_appointment):
        appointment = create_appointment()
        response = client.patch(
            f"/spa/appointments/{appointment['id']}/status", json={"status": "lost"}, headers=auth_headers
        )
        assert response.status_code == 400


class TestDeleteAppointment:
    def test_deletes_appointment_and_billing(self, client, auth_headers, create_appointment):
        appointment = create_appointment()

        response = client.delete(f"/spa/appointments/{appointment['id']}", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Appointment and associated billing permanently deleted"
        assert body["appointment"]["appointmentId"] == appointment["appointmentId"]
        assert client.get(f"/spa/appointments/{appointment['id']}").status_code == 404
        assert get_billing(client, appointment["id"]).status_code == 404
        assert client.get("/spa/billing").json() == []

    def test_billing_failure_does_not_fail_delete(self, client, auth_headers, create_appointment, monkeypatch):
        appointment = create_appointment()

        def failing_delete(db, appointment_id):
            raise SQLAlchemyError("billing store unavailable")

        monkeypatch.setattr(SpaBillingRepository, "delete_billings_for_appointment", staticmethod(failing_delete))

        response = client.delete(f"/spa/appointments/{appointment['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert client.get(f"/spa/appointments/{appointment['id']}").status_code == 404

    def test_missing_appointment(self, client, auth_headers):
        assert client.delete("/spa/appointments/999", headers=auth_headers).status_code == 404


class TestAppointmentReads:
    def test_list_newest_date_first(self, client, create_appointment):
        create_appointment(appointmentDate="2026-03-01T00:00:00")
        create_appointment(appointmentDate="2026-04-01T00:00:00")

        dates = [a["appointmentDate"] for a in client.get("/spa/appointments").json()]
        assert dates == ["2026-04-01T00:00:00", "2026-03-01T00:00:00"]
