"""Spa service - Business logic for catalog, appointments and billing"""

import logging

from fastapi import HTTPException
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from ...auth import AuthenticatedUser
from ...models import Guest, utcnow
from ...models_spa import SpaAppointment, SpaBilling, SpaPackage, SpaRoom, SpaService, Therapist
from ...shared.identifiers import generate_record_id
from ...shared.schemas import CamelModel
from .invoicing import InvoiceMaterializer
from .pricing import BillingSummary, package_final_price, settle_balance, summarize_billings
from .repository import SpaBillingRepository, SpaRepository
from .schemas import (
    BillingPaymentRecord,
    SpaAppointmentCreate,
    SpaAppointmentResponse,
    SpaAppointmentUpdate,
    SpaBillingCreate,
    SpaBillingUpdate,
)

logger = logging.getLogger(__name__)

# Nested documents stored in JSON columns keep the camelCase wire format
_JSON_DOCUMENT_FIELDS = ("certifications", "availability", "items")

# Billing fields whose change rebalances total and amount due
_BALANCE_INPUTS = {"subtotal", "tax", "discount", "amount_paid"}

# Appointment reference fields -> (column, model, snapshot column, snapshot attribute, label)
_APPOINTMENT_REFERENCES = {
    "service": ("service_id", SpaService, "service_name", "service_name", "Service"),
    "therapist": ("therapist_id", Therapist, "therapist_name", "name", "Therapist"),
    "spa_room": ("spa_room_id", SpaRoom, "spa_room_number", "room_number", "Room"),
    "package": ("package_id", SpaPackage, "package_name", "package_name", "Package"),
}


def column_values(data: CamelModel, exclude_unset: bool = False) -> dict:
    """Flatten a request schema into model column values"""
    values = data.model_dump(exclude_unset=exclude_unset)
    documents = data.model_dump(mode="json", by_alias=True, exclude_unset=exclude_unset)
    for field in _JSON_DOCUMENT_FIELDS:
        if field in values:
            values[field] = documents[to_camel(field)]
    return values


class SpaCatalogService:
    """Generic CRUD plus active toggle for services, therapists, rooms and packages"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SpaRepository()

    def list_records(self, model) -> list:
        return self.repo.list_all(self.db, model)

    def get(self, model, record_id: int, label: str):
        record = self.repo.get_by_id(self.db, model, record_id)
        if not record:
            raise HTTPException(status_code=404, detail=f"{label} not found")
        return record

    def _package_lines(self, lines: list[dict]) -> list[dict]:
        """Validate that every packaged service exists"""
        for line in lines:
            if not self.repo.get_by_id(self.db, SpaService, line["service_id"]):
                raise HTTPException(status_code=404, detail=f"Service {line['service_id']} not found")
        return lines

    def create(self, model, data: CamelModel, user: AuthenticatedUser):
        values = column_values(data)
        lines = values.pop("services", None) if model is SpaPackage else None

        if model is SpaPackage and values.get("final_price") is None:
            values["final_price"] = package_final_price(
                values["original_price"], values["discount_type"], values["discount_value"]
            )

        if lines is None:
            record = self.repo.create(self.db, model, **values)
        else:
            record = model(**values)
            self.repo.replace_package_services(self.db, record, self._package_lines(lines))
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)

        logger.info(f"✅ {model.__name__} {record.id} created by {user.id}")
        return record

    def update(self, model, record_id: int, data: CamelModel, label: str):
        record = self.get(model, record_id, label)
        updates = column_values(data, exclude_unset=True)

        if model is SpaPackage:
            lines = updates.pop("services", None)
            if lines is not None:
                self.repo.replace_package_services(self.db, record, self._package_lines(lines))
            repriced = {"original_price", "discount_type", "discount_value"} & updates.keys()
            if repriced and updates.get("final_price") is None:
                updates["final_price"] = package_final_price(
                    updates.get("original_price", record.original_price),
                    updates.get("discount_type", record.discount_type),
                    updates.get("discount_value", record.discount_value),
                )

        return self.repo.update(self.db, record, **updates)

    def toggle(self, model, record_id: int, label: str):
        """Flip isActive; returns the record and a human message"""
        record = self.get(model, record_id, label)
        record = self.repo.update(self.db, record, is_active=not record.is_active)
        state = "activated" if record.is_active else "deactivated"
        logger.info(f"{model.__name__} {record_id} {state}")
        return record, f"{label} {state} successfully"

    def delete(self, model, record_id: int, label: str, response_schema: type[CamelModel]):
        """Delete permanently; returns a snapshot taken before deletion"""
        record = self.get(model, record_id, label)
        snapshot = response_schema.model_validate(record)
        self.repo.delete(self.db, record)
        logger.info(f"🗑️ {model.__name__} {record_id} permanently deleted")
        return snapshot, f"{label} permanently deleted"


class SpaAppointmentService:
    """Appointment writes and their billing side effects"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SpaRepository()
        self.invoices = InvoiceMaterializer(db)

    def get_appointments(self) -> list[SpaAppointment]:
        return self.repo.get_appointments(self.db)

    def get_appointment(self, appointment_id: int) -> SpaAppointment:
        appointment = self.repo.get_appointment_by_id(self.db, appointment_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        return appointment

    def _resolve_guest(self, guest_id: int) -> Guest:
        guest = self.repo.get_guest_by_id(self.db, guest_id)
        if not guest:
            raise HTTPException(status_code=404, detail="Guest not found")
        return guest

    def _resolve_references(self, values: dict) -> dict:
        """
        Map reference fields to FK columns, filling name snapshots the caller
        left out. A cleared reference clears its snapshot too.
        """
        for field, (column, model, snapshot, attribute, label) in _APPOINTMENT_REFERENCES.items():
            if field not in values:
                continue
            record_id = values.pop(field)
            values[column] = record_id
            if record_id is None:
                values[snapshot] = None
                continue
            record = self.repo.get_by_id(self.db, model, record_id)
            if not record:
                raise HTTPException(status_code=404, detail=f"{label} not found")
            if not values.get(snapshot):
                values[snapshot] = getattr(record, attribute)
        return values

    def create_appointment(self, data: SpaAppointmentCreate, user: AuthenticatedUser) -> SpaAppointment:
        """Book an appointment, then create its invoice"""
        guest = self._resolve_guest(data.guest_id)
        values = self._resolve_references(data.model_dump())
        values["guest_name"] = values.get("guest_name") or guest.full_name
        values["guest_phone"] = values.get("guest_phone") or guest.phone
        values["guest_email"] = values.get("guest_email") or guest.email
        values["room_number"] = values.get("room_number") or guest.room_number

        appointment = self.repo.create(
            self.db, SpaAppointment, appointment_id=generate_record_id("APT"), **values
        )
        logger.info(f"📅 Appointment {appointment.appointment_id} booked by {user.id}")

        self.invoices.create_for_appointment(appointment)
        return self.get_appointment(appointment.id)

    def update_appointment(
        self, appointment_id: int, data: SpaAppointmentUpdate, user: AuthenticatedUser
    ) -> SpaAppointment:
        """Apply an edit, then regenerate the invoice's derived fields"""
        appointment = self.get_appointment(appointment_id)
        updates = data.model_dump(exclude_unset=True)
        if updates.get("guest_id") is not None:
            self._resolve_guest(updates["guest_id"])
        updates = self._resolve_references(updates)

        appointment = self.repo.update(self.db, appointment, **updates)
        logger.info(f"📅 Appointment {appointment.appointment_id} updated by {user.id}")

        self.invoices.refresh_for_appointment(appointment, payment_status=updates.get("payment_status"))
        return self.get_appointment(appointment_id)

    def update_status(self, appointment_id: int, status: str) -> SpaAppointment:
        """Set the status unconditionally; any enum value may follow any other"""
        appointment = self.get_appointment(appointment_id)
        self.repo.update(self.db, appointment, status=status)
        return self.get_appointment(appointment_id)

    def delete_appointment(self, appointment_id: int, user: AuthenticatedUser) -> SpaAppointmentResponse:
        """Delete an appointment, then its invoice; returns the deleted appointment"""
        appointment = self.get_appointment(appointment_id)
        snapshot = SpaAppointmentResponse.model_validate(appointment)
        code = appointment.appointment_id

        self.repo.delete(self.db, appointment)
        logger.info(f"🗑️ Appointment {code} deleted by {user.id}")

        self.invoices.remove_for_appointment(appointment_id, code)
        return snapshot


class SpaBillingService:
    """Direct access to billing records"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SpaBillingRepository()

    def get_billings(self) -> list[SpaBilling]:
        return self.repo.get_billings(self.db)

    def get_billing(self, billing_id: int) -> SpaBilling:
        billing = self.repo.get_billing_by_id(self.db, billing_id)
        if not billing:
            raise HTTPException(status_code=404, detail="Billing record not found")
        return billing

    def get_billing_for_appointment(self, appointment_id: int) -> SpaBilling:
        billing = self.repo.get_billing_by_appointment(self.db, appointment_id)
        if not billing:
            raise HTTPException(status_code=404, detail="Billing record not found for this appointment")
        return billing

    def create_billing(self, data: SpaBillingCreate, user: AuthenticatedUser) -> SpaBilling:
        values = column_values(data)
        values["invoice_date"] = values.get("invoice_date") or utcnow()
        billing = self.repo.create_billing(self.db, billing_id=generate_record_id("BIL"), **values)
        logger.info(f"🧾 Billing record {billing.billing_id} created manually by {user.id}")
        return self.get_billing(billing.id)

    def update_billing(
        self, billing_id: int, data: SpaBillingUpdate, user: AuthenticatedUser
    ) -> SpaBilling:
        """
        Edit a billing record directly. When any of the money inputs change,
        total and amount due are rebalanced unless the edit sets them itself.
        """
        billing = self.get_billing(billing_id)
        updates = column_values(data, exclude_unset=True)
        if _BALANCE_INPUTS & updates.keys():
            updates = self._rebalanced(billing, updates)
        self.repo.update_billing(self.db, billing, **updates)
        logger.info(f"🧾 Billing record {billing_id} edited by {user.id}")
        return self.get_billing(billing_id)

    def record_payment(
        self, billing_id: int, data: BillingPaymentRecord, user: AuthenticatedUser
    ) -> SpaBilling:
        """Store the amount paid so far and rebalance the invoice"""
        billing = self.get_billing(billing_id)
        updates = self._rebalanced(billing, data.model_dump(exclude_none=True))
        self.repo.update_billing(self.db, billing, **updates)
        logger.info(
            f"💳 Payment recorded on {billing.billing_id}: paid {updates['amount_paid']}, "
            f"due {updates['amount_due']} (by {user.id})"
        )
        return self.get_billing(billing_id)

    def summarize(self) -> BillingSummary:
        return summarize_billings(self.repo.get_billings(self.db))

    @staticmethod
    def _rebalanced(billing: SpaBilling, updates: dict) -> dict:
        """Merge updates over the stored values and recompute total and amount due"""

        def current(field):
            return updates[field] if updates.get(field) is not None else getattr(billing, field)

        totals = settle_balance(
            current("subtotal"), current("tax"), current("discount"), current("amount_paid")
        )
        updates = dict(updates)
        if updates.get("total") is None:
            updates["total"] = totals.total
        if updates.get("amount_due") is None:
            updates["amount_due"] = round(updates["total"] - totals.amount_paid, 2)
        return updates

    def delete_billing(self, billing_id: int, user: AuthenticatedUser) -> dict:
        billing = self.get_billing(billing_id)
        self.repo.delete_billing(self.db, billing)
        logger.info(f"🗑️ Billing record {billing_id} deleted by {user.id}")
        return {"message": "Billing record deleted"}
