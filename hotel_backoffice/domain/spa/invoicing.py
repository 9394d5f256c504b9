"""
Invoice materializer - keeps a SpaBilling record in step with its appointment.

Billing writes are side effects of appointment writes. They run after the
appointment has been committed, in their own commit, and any failure is
logged and swallowed: the appointment operation has already succeeded and
is reported to the caller as such. The pair can therefore drift.
"""

import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...models import utcnow
from ...models_spa import SpaAppointment, SpaBilling
from ...shared.identifiers import generate_record_id
from .pricing import InvoiceTotals, price_appointment
from .repository import SpaBillingRepository

logger = logging.getLogger(__name__)

BILLING_DUE_DAYS = 7


class InvoiceMaterializer:
    """Creates, regenerates and removes the invoice paired with an appointment"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SpaBillingRepository()

    def _warn_if_negative(self, totals: InvoiceTotals, appointment: SpaAppointment) -> None:
        # Known defect: discounts are not capped, so totals can go below zero
        if totals.total < 0:
            logger.warning(
                f"⚠️ Negative invoice total {totals.total} for appointment {appointment.appointment_id} "
                f"(discount {totals.discount} exceeds subtotal + tax)"
            )

    def create_for_appointment(self, appointment: SpaAppointment) -> Optional[SpaBilling]:
        """Create a fresh invoice for a newly booked appointment; None if creation failed"""
        try:
            charges, totals = price_appointment(appointment, amount_paid=0)
            self._warn_if_negative(totals, appointment)

            now = utcnow()
            billing = self.repo.create_billing(
                self.db,
                billing_id=generate_record_id("BIL"),
                appointment_id=appointment.id,
                guest_id=appointment.guest_id,
                guest_name=appointment.guest_name,
                guest_email=appointment.guest_email,
                guest_phone=appointment.guest_phone,
                invoice_date=now,
                items=charges.items,
                subtotal=totals.subtotal,
                tax=totals.tax,
                discount=totals.discount,
                total=totals.total,
                amount_paid=totals.amount_paid,
                amount_due=totals.amount_due,
                payment_status=appointment.payment_status or "pending",
                notes="",
                due_date=now + timedelta(days=BILLING_DUE_DAYS),
            )
            logger.info(
                f"🧾 Billing record {billing.billing_id} created for appointment {appointment.appointment_id}"
            )
            return billing
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error creating billing record for appointment {appointment.appointment_id}: {e}")
            return None

    def refresh_for_appointment(
        self, appointment: SpaAppointment, payment_status: Optional[str] = None
    ) -> Optional[SpaBilling]:
        """
        Recompute the derived fields of an existing invoice after an edit.

        amountPaid, payment method and notes are left alone; paymentStatus is
        only copied when the edit supplied one. No invoice is created when the
        appointment has none.
        """
        try:
            billing = self.repo.get_billing_by_appointment(self.db, appointment.id)
            if not billing:
                logger.info(f"No billing record to refresh for appointment {appointment.appointment_id}")
                return None

            charges, totals = price_appointment(appointment, amount_paid=billing.amount_paid)
            self._warn_if_negative(totals, appointment)

            updates = {
                "items": charges.items,
                "subtotal": totals.subtotal,
                "tax": totals.tax,
                "discount": totals.discount,
                "total": totals.total,
                "amount_due": totals.amount_due,
            }
            if payment_status is not None:
                updates["payment_status"] = payment_status

            billing = self.repo.update_billing(self.db, billing, **updates)
            logger.info(
                f"🧾 Billing record {billing.billing_id} updated for appointment {appointment.appointment_id}"
            )
            return billing
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error updating billing record for appointment {appointment.appointment_id}: {e}")
            return None

    def remove_for_appointment(self, appointment_pk: int, appointment_code: str) -> int:
        """Delete the invoice(s) of a deleted appointment; returns how many were removed"""
        try:
            deleted = self.repo.delete_billings_for_appointment(self.db, appointment_pk)
            logger.info(f"🗑️ Deleted {deleted} billing record(s) for appointment {appointment_code}")
            return deleted
        except Exception as e:
            self.db.rollback()
            logger.warning(f"⚠️ Could not delete billing for appointment {appointment_code}: {e}")
            return 0
