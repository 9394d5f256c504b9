"""
Python client for the Hotel Back Office API.

The bearer token lives in an explicit ApiSession rather than ambient storage,
so callers can check for it before sending anything. A 401 from the server
clears the session.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Any, Optional, Union

import httpx
from pydantic import BaseModel

from .config import API_BASE_URL

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class ApiError(Exception):
    """Non-success response from the API"""

    def __init__(self, status_code: int, detail: Any):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"API request failed ({status_code}): {detail}")


class AuthenticationRequired(ApiError):
    """No usable token: none was stored, or the server rejected it"""

    def __init__(self, detail: Any = "Please login to continue"):
        super().__init__(401, detail)


class TokenPresent(BaseModel):
    token: str


class TokenMissing(BaseModel):
    pass


TokenState = Union[TokenPresent, TokenMissing]


class ApiSession:
    """Holds the staff member's bearer token"""

    def __init__(self, token: Optional[str] = None):
        self._token = None
        if token:
            self.login(token)

    def login(self, token: str) -> None:
        """Store a token, with or without its ``Bearer`` prefix"""
        if token.startswith(BEARER_PREFIX):
            token = token[len(BEARER_PREFIX) :]
        self._token = token.strip() or None

    def clear(self) -> None:
        self._token = None

    def token_state(self) -> TokenState:
        if self._token:
            return TokenPresent(token=self._token)
        return TokenMissing()

    def headers(self) -> dict[str, str]:
        """Authorization header for the stored token; raises when there is none"""
        state = self.token_state()
        if isinstance(state, TokenMissing):
            raise AuthenticationRequired()
        return {"Authorization": f"{BEARER_PREFIX}{state.token}"}


class GuestFound(BaseModel):
    guest: dict[str, Any]

    @property
    def guest_id(self) -> int:
        return self.guest["id"]

    @property
    def full_name(self) -> str:
        return f"{self.guest.get('firstName', '')} {self.guest.get('lastName') or ''}".strip()


class GuestNotFound(BaseModel):
    guest_id: int


GuestLookup = Union[GuestFound, GuestNotFound]


def resolve_guest(guests: list[dict[str, Any]], guest_id: int) -> GuestLookup:
    """Find a guest in an already fetched list"""
    for guest in guests:
        if guest.get("id") == guest_id:
            return GuestFound(guest=guest)
    return GuestNotFound(guest_id=guest_id)


def end_time_for(start_time: str, duration: int) -> str:
    """``HH:MM`` after ``duration`` minutes, wrapping past midnight"""
    start = datetime.strptime(start_time, "%H:%M")
    return (start + timedelta(minutes=duration)).strftime("%H:%M")


def build_appointment_payload(
    guest: GuestFound,
    service: dict[str, Any],
    appointment_date: Union[date, datetime, str],
    start_time: str,
    therapist: Optional[dict[str, Any]] = None,
    spa_room: Optional[dict[str, Any]] = None,
    package: Optional[dict[str, Any]] = None,
    **overrides: Any,
) -> dict[str, Any]:
    """
    Build a create-appointment body from a resolved guest and catalog records.

    The end time follows from the service duration. Unless overridden, the
    service price is the service's base price, the therapist price is the
    therapist's hourly rate and the room price is zero. Keyword overrides use
    the camelCase wire names (``discount``, ``notes``, ``roomPrice``...).
    """
    if not isinstance(appointment_date, str):
        appointment_date = appointment_date.isoformat()

    duration = service["duration"]
    payload = {
        "guestId": guest.guest_id,
        "guestName": guest.full_name,
        "guestPhone": guest.guest.get("phone") or "",
        "guestEmail": guest.guest.get("email") or "",
        "roomNumber": guest.guest.get("roomNumber") or "",
        "service": service["id"],
        "serviceName": service.get("serviceName"),
        "therapist": therapist["id"] if therapist else None,
        "therapistName": therapist.get("name", "") if therapist else "",
        "spaRoom": spa_room["id"] if spa_room else None,
        "spaRoomNumber": spa_room.get("roomNumber", "") if spa_room else "",
        "package": package["id"] if package else None,
        "packageName": package.get("packageName", "") if package else "",
        "appointmentDate": appointment_date,
        "startTime": start_time,
        "endTime": end_time_for(start_time, duration),
        "duration": duration,
        "status": "pending",
        "servicePrice": service.get("basePrice") or 0,
        "therapistPrice": (therapist or {}).get("hourlyRate") or 0,
        "roomPrice": 0,
        "discount": 0,
        "totalPrice": service.get("basePrice") or 0,
        "paymentStatus": "pending",
    }
    payload.update(overrides)
    return payload


class HotelApiClient:
    """Thin synchronous wrapper over the REST routes"""

    def __init__(
        self,
        session: ApiSession,
        base_url: str = API_BASE_URL,
        http: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self.session = session
        self.http = http if http is not None else httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _request(self, method: str, path: str, auth: bool = False, **kwargs) -> Any:
        headers = self.session.headers() if auth else {}
        response = self.http.request(method, path, headers=headers, **kwargs)

        if response.status_code == 401:
            self.session.clear()
            logger.warning(f"Session rejected by API on {method} {path}; token cleared")
            raise AuthenticationRequired(self._detail(response))
        if response.is_error:
            raise ApiError(response.status_code, self._detail(response))
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _detail(response: httpx.Response) -> Any:
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict):
            return body.get("detail") or body.get("message") or body
        return body

    # Guests
    def list_guests(self) -> list[dict]:
        return self._request("GET", "/guests")

    def get_guest(self, guest_id: int) -> dict:
        return self._request("GET", f"/guests/{guest_id}")

    def create_guest(self, data: dict) -> dict:
        return self._request("POST", "/guests", auth=True, json=data)

    def find_guest(self, guest_id: int) -> GuestLookup:
        """Fetch the guest list once and look the guest up in it"""
        return resolve_guest(self.list_guests(), guest_id)

    # Catalog
    def list_catalog(self, kind: str) -> list[dict]:
        """``kind`` is one of services, therapists, rooms, packages"""
        return self._request("GET", f"/spa/{kind}")

    def create_catalog_entry(self, kind: str, data: dict) -> dict:
        return self._request("POST", f"/spa/{kind}", auth=True, json=data)

    def update_catalog_entry(self, kind: str, record_id: int, data: dict) -> dict:
        return self._request("PUT", f"/spa/{kind}/{record_id}", auth=True, json=data)

    def toggle_catalog_entry(self, kind: str, record_id: int) -> dict:
        return self._request("PATCH", f"/spa/{kind}/{record_id}/toggle", auth=True)

    def delete_catalog_entry(self, kind: str, record_id: int) -> dict:
        return self._request("DELETE", f"/spa/{kind}/{record_id}", auth=True)

    # Appointments
    def list_appointments(self) -> list[dict]:
        return self._request("GET", "/spa/appointments")

    def get_appointment(self, appointment_id: int) -> dict:
        return self._request("GET", f"/spa/appointments/{appointment_id}")

    def create_appointment(self, data: dict) -> dict:
        return self._request("POST", "/spa/appointments", auth=True, json=data)

    def update_appointment(self, appointment_id: int, data: dict) -> dict:
        return self._request("PUT", f"/spa/appointments/{appointment_id}", auth=True, json=data)

    def set_appointment_status(self, appointment_id: int, status: str) -> dict:
        return self._request(
            "PATCH", f"/spa/appointments/{appointment_id}/status", auth=True, json={"status": status}
        )

    def delete_appointment(self, appointment_id: int) -> dict:
        return self._request("DELETE", f"/spa/appointments/{appointment_id}", auth=True)

    def book_appointment(
        self,
        guest_id: int,
        service: dict[str, Any],
        appointment_date: Union[date, datetime, str],
        start_time: str,
        **kwargs: Any,
    ) -> dict:
        """Resolve the guest, build the payload and create the appointment"""
        lookup = self.find_guest(guest_id)
        if isinstance(lookup, GuestNotFound):
            raise ApiError(404, f"Guest {guest_id} not found")
        payload = build_appointment_payload(lookup, service, appointment_date, start_time, **kwargs)
        return self.create_appointment(payload)

    # Billing
    def list_billing(self) -> list[dict]:
        return self._request("GET", "/spa/billing")

    def get_billing(self, billing_id: int) -> dict:
        return self._request("GET", f"/spa/billing/{billing_id}")

    def get_billing_for_appointment(self, appointment_id: int) -> dict:
        return self._request("GET", f"/spa/billing/appointment/{appointment_id}")

    def create_billing(self, data: dict) -> dict:
        return self._request("POST", "/spa/billing", auth=True, json=data)

    def update_billing(self, billing_id: int, data: dict) -> dict:
        return self._request("PUT", f"/spa/billing/{billing_id}", auth=True, json=data)

    def record_payment(
        self,
        billing_id: int,
        amount_paid: float,
        payment_method: Optional[str] = None,
        payment_status: Optional[str] = None,
    ) -> dict:
        """Store the amount paid so far; the server rebalances total and amount due"""
        body = {"amountPaid": amount_paid}
        if payment_method is not None:
            body["paymentMethod"] = payment_method
        if payment_status is not None:
            body["paymentStatus"] = payment_status
        return self._request("PATCH", f"/spa/billing/{billing_id}/payment", auth=True, json=body)

    def billing_summary(self) -> dict:
        """``invoiceCount``, ``totalRevenue`` (collected) and ``pendingPayments`` (due)"""
        return self._request("GET", "/spa/billing/summary")

    def delete_billing(self, billing_id: int) -> dict:
        return self._request("DELETE", f"/spa/billing/{billing_id}", auth=True)

    # Concierge
    def list_concierge_requests(self, status: Optional[str] = None) -> list[dict]:
        path = f"/concierge/requests/status/{status}" if status else "/concierge/requests"
        return self._request("GET", path)

    def create_concierge_request(self, data: dict) -> dict:
        return self._request("POST", "/concierge/requests", auth=True, json=data)

    def assign_concierge_request(self, request_id: str, assigned_to: str) -> dict:
        return self._request(
            "PATCH", f"/concierge/requests/{request_id}/assign", auth=True, json={"assignedTo": assigned_to}
        )

    def set_concierge_status(self, request_id: str, status: str) -> dict:
        return self._request(
            "PATCH", f"/concierge/requests/{request_id}/status", auth=True, json={"status": status}
        )
