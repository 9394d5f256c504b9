"""Tests for the Python API client, run against the application in-process."""

import pytest

from hotel_backoffice.client import (
    ApiError,
    ApiSession,
    AuthenticationRequired,
    GuestFound,
    GuestNotFound,
    HotelApiClient,
    TokenMissing,
    TokenPresent,
    build_appointment_payload,
    end_time_for,
    resolve_guest,
)


@pytest.fixture
def api(client, auth_token):
    return HotelApiClient(ApiSession(auth_token), http=client)


class TestApiSession:
    def test_token_state(self):
        assert isinstance(ApiSession().token_state(), TokenMissing)
        state = ApiSession("Bearer abc").token_state()
        assert isinstance(state, TokenPresent)
        assert state.token == "abc"

    def test_headers_without_token(self):
        with pytest.raises(AuthenticationRequired):
            ApiSession().headers()

    def test_clear(self):
        session = ApiSession("abc")
        session.clear()
        assert isinstance(session.token_state(), TokenMissing)


class TestPayloadBuilding:
    def test_resolve_guest(self):
        guests = [{"id": 3, "firstName": "Amara", "lastName": "Perera"}]

        found = resolve_guest(guests, 3)
        assert isinstance(found, GuestFound)
        assert found.full_name == "Amara Perera"
        assert isinstance(resolve_guest(guests, 4), GuestNotFound)

    def test_end_time_wraps_midnight(self):
        assert end_time_for("23:30", 60) == "00:30"
        assert end_time_for("10:15", 90) == "11:45"

    def test_prices_default_from_catalog(self):
        guest = GuestFound(guest={"id": 1, "firstName": "Amara", "roomNumber": "204"})
        service = {"id": 7, "serviceName": "Facial", "duration": 45, "basePrice": 80}
        therapist = {"id": 2, "name": "Nadia", "hourlyRate": 50}

        payload = build_appointment_payload(guest, service, "2026-03-14", "09:00", therapist=therapist, discount=5)

        assert payload["endTime"] == "09:45"
        assert payload["servicePrice"] == 80
        assert payload["therapistPrice"] == 50
        assert payload["roomPrice"] == 0
        assert payload["discount"] == 5
        assert payload["roomNumber"] == "204"


class TestHotelApiClient:
    def test_book_appointment_creates_billing(self, api, guest, spa_service, therapist):
        service = api.list_catalog("services")[0]
        chosen_therapist = api.list_catalog("therapists")[0]

        appointment = api.book_appointment(
            guest.id, service, "2026-03-14T00:00:00", "10:00", therapist=chosen_therapist
        )

        billing = api.get_billing_for_appointment(appointment["id"])
        assert appointment["endTime"] == "11:00"
        assert billing["total"] == 165

    def test_book_for_unknown_guest(self, api, spa_service):
        service = api.list_catalog("services")[0]
        with pytest.raises(ApiError) as exc_info:
            api.book_appointment(999, service, "2026-03-14T00:00:00", "10:00")
        assert exc_info.value.status_code == 404

    def test_missing_token_raises_before_request(self, client, appointment_payload):
        api = HotelApiClient(ApiSession(), http=client)
        with pytest.raises(AuthenticationRequired):
            api.create_appointment(appointment_payload)

    def test_rejected_token_clears_session(self, client, appointment_payload):
        session = ApiSession("expired-or-forged")
        api = HotelApiClient(session, http=client)

        with pytest.raises(AuthenticationRequired):
            api.create_appointment(appointment_payload)
        assert isinstance(session.token_state(), TokenMissing)

    def test_not_found_raises_api_error(self, api):
        with pytest.raises(ApiError) as exc_info:
            api.get_billing(12345)
        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "Billing record not found"

    def test_record_payment_and_summary(self, api, create_appointment):
        appointment = create_appointment()
        billing = api.get_billing_for_appointment(appointment["id"])

        paid = api.record_payment(billing["id"], 100, payment_method="card", payment_status="partial")

        assert paid["amountDue"] == 65
        assert paid["paymentStatus"] == "partial"
        assert api.billing_summary() == {"invoiceCount": 1, "totalRevenue": 100, "pendingPayments": 65}

    def test_concierge_flow(self, api):
        request = api.create_concierge_request(
            {"guestName": "Amara", "guestId": "1", "roomNumber": "204", "requestType": "luggage"}
        )
        api.assign_concierge_request(request["id"], "Kamal")
        api.set_concierge_status(request["id"], "completed")

        completed = api.list_concierge_requests(status="completed")
        assert [r["id"] for r in completed] == ["CR0001"]
