"""
Appointment pricing - line items, subtotal, tax, discount and amount due.

Pure functions over an appointment's priced components. The invoice
materializer feeds their results into a billing record.
"""

from typing import Optional

from pydantic import BaseModel

# Flat rate applied on every invoice; not configurable per invoice
SPA_TAX_RATE = 0.10


class PricedCharges(BaseModel):
    """Line items for the non-zero charges plus the subtotal of all charges"""

    items: list[dict]
    subtotal: float


class InvoiceTotals(BaseModel):
    subtotal: float
    tax: float
    discount: float
    total: float
    amount_paid: float
    amount_due: float


def _line_item(description: str, amount: float) -> dict:
    return {
        "description": description,
        "quantity": 1,
        "unitPrice": amount,
        "subtotal": amount,
    }


def aggregate_charges(
    service_price: Optional[float],
    therapist_price: Optional[float],
    room_price: Optional[float],
    service_name: Optional[str] = None,
    therapist_name: Optional[str] = None,
    spa_room_number: Optional[str] = None,
) -> PricedCharges:
    """
    Combine the service, therapist and room charges.

    Only charges strictly greater than zero become line items, but the
    subtotal always sums all three components.
    """
    service_price = service_price or 0
    therapist_price = therapist_price or 0
    room_price = room_price or 0

    items = []
    if service_price > 0:
        items.append(_line_item(service_name or "Spa Service", service_price))
    if therapist_price > 0:
        items.append(_line_item(f"Therapist: {therapist_name or 'Professional'}", therapist_price))
    if room_price > 0:
        items.append(_line_item(f"Spa Room: {spa_room_number or 'Spa Room'}", room_price))

    return PricedCharges(items=items, subtotal=service_price + therapist_price + room_price)


def apply_tax_and_discount(
    subtotal: float, discount: Optional[float] = None, amount_paid: Optional[float] = None
) -> InvoiceTotals:
    """
    Apply the flat tax rate and a discount amount.

    The total is not clamped: a discount larger than subtotal plus tax yields
    a negative total and a negative amount due.
    """
    discount = discount or 0
    amount_paid = amount_paid or 0

    tax = round(subtotal * SPA_TAX_RATE, 2)
    total = round(subtotal + tax - discount, 2)

    return InvoiceTotals(
        subtotal=subtotal,
        tax=tax,
        discount=discount,
        total=total,
        amount_paid=amount_paid,
        amount_due=round(total - amount_paid, 2),
    )


def price_appointment(appointment, amount_paid: Optional[float] = None) -> tuple[PricedCharges, InvoiceTotals]:
    """Run both pricing steps against a SpaAppointment row"""
    charges = aggregate_charges(
        appointment.service_price,
        appointment.therapist_price,
        appointment.room_price,
        service_name=appointment.service_name,
        therapist_name=appointment.therapist_name,
        spa_room_number=appointment.spa_room_number,
    )
    totals = apply_tax_and_discount(charges.subtotal, appointment.discount, amount_paid)
    return charges, totals


def package_final_price(original_price: float, discount_type: str, discount_value: Optional[float]) -> float:
    """
    Price a package when no explicit final price is given.

    Percentage discounts reduce the original price; a "price" discount is the
    package's fixed selling price.
    """
    discount_value = discount_value or 0
    if discount_value <= 0:
        return original_price
    if discount_type == "percentage":
        return round(original_price * (1 - discount_value / 100), 2)
    return discount_value


def settle_balance(
    subtotal: float, tax: Optional[float], discount: Optional[float], amount_paid: Optional[float]
) -> InvoiceTotals:
    """
    Rebalance an existing invoice after a payment or a manual adjustment.

    Unlike apply_tax_and_discount the stored tax is kept as entered rather
    than recomputed from the flat rate.
    """
    tax = tax or 0
    discount = discount or 0
    amount_paid = amount_paid or 0
    total = round(subtotal + tax - discount, 2)

    return InvoiceTotals(
        subtotal=subtotal,
        tax=tax,
        discount=discount,
        total=total,
        amount_paid=amount_paid,
        amount_due=round(total - amount_paid, 2),
    )


class BillingSummary(BaseModel):
    invoice_count: int
    total_revenue: float
    pending_payments: float


def summarize_billings(billings) -> BillingSummary:
    """Collected revenue is the sum of amounts paid; pending is the sum of amounts due"""
    billings = list(billings)
    return BillingSummary(
        invoice_count=len(billings),
        total_revenue=round(sum(b.amount_paid or 0 for b in billings), 2),
        pending_payments=round(sum(b.amount_due or 0 for b in billings), 2),
    )
