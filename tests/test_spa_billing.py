"""Tests for direct billing record access."""


def manual_billing(guest, appointment_pk=1, **overrides):
    return {
        "appointmentId": appointment_pk,
        "guestId": guest.id,
        "guestName": "Amara Perera",
        "items": [{"description": "Aromatherapy", "quantity": 1, "unitPrice": 40, "subtotal": 40}],
        "subtotal": 40,
        "tax": 4,
        "total": 44,
        "amountDue": 44,
        **overrides,
    }


class TestBillingRoutes:
    def test_manual_create(self, client, auth_headers, guest):
        response = client.post("/spa/billing", json=manual_billing(guest), headers=auth_headers)

        assert response.status_code == 201
        billing = response.json()
        assert billing["billingId"].startswith("BIL-")
        assert billing["items"][0]["unitPrice"] == 40
        assert billing["invoiceDate"] is not None
        assert billing["appointment"] is None

    def test_manual_create_rejects_negative_total(self, client, auth_headers, guest):
        response = client.post("/spa/billing", json=manual_billing(guest, total=-1), headers=auth_headers)
        assert response.status_code == 400

    def test_list_and_get(self, client, auth_headers, create_appointment):
        appointment = create_appointment()

        billings = client.get("/spa/billing").json()
        assert len(billings) == 1
        assert billings[0]["appointmentId"] == appointment["id"]
        assert billings[0]["guest"]["firstName"] == "Amara"

        single = client.get(f"/spa/billing/{billings[0]['id']}")
        assert single.status_code == 200
        assert single.json()["billingId"] == billings[0]["billingId"]

    def test_direct_edit_does_not_touch_appointment(self, client, auth_headers, create_appointment):
        appointment = create_appointment()
        billing = client.get(f"/spa/billing/appointment/{appointment['id']}").json()

        response = client.put(
            f"/spa/billing/{billing['id']}",
            json={"paymentStatus": "paid", "paymentMethod": "card", "amountPaid": 165, "amountDue": 0},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["paymentMethod"] == "card"
        assert client.get(f"/spa/appointments/{appointment['id']}").json()["paymentStatus"] == "pending"

    def test_delete(self, client, auth_headers, guest):
        billing = client.post("/spa/billing", json=manual_billing(guest), headers=auth_headers).json()

        response = client.delete(f"/spa/billing/{billing['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Billing record deleted"}
        assert client.get(f"/spa/billing/{billing['id']}").status_code == 404
        assert client.delete(f"/spa/billing/{billing['id']}", headers=auth_headers).status_code == 404

    def test_missing_billing_for_appointment(self, client):
        response = client.get("/spa/billing/appointment/12345")

        assert response.status_code == 404
        assert response.json()["detail"] == "Billing record not found for this appointment"


class TestPayments:
    def test_direct_edit_of_amount_paid_rebalances(self, client, auth_headers, create_appointment):
        appointment = create_appointment()
        billing = client.get(f"/spa/billing/appointment/{appointment['id']}").json()

        response = client.put(f"/spa/billing/{billing['id']}", json={"amountPaid": 45}, headers=auth_headers)

        assert response.json()["total"] == 165
        assert response.json()["amountPaid"] == 45
        assert response.json()["amountDue"] == 120

    def test_direct_edit_of_tax_and_discount_rebalances(self, client, auth_headers, create_appointment):
        appointment = create_appointment()
        billing = client.get(f"/spa/billing/appointment/{appointment['id']}").json()

        response = client.put(
            f"/spa/billing/{billing['id']}", json={"tax": 0, "discount": 10}, headers=auth_headers
        )

        assert response.json()["total"] == 140
        assert response.json()["amountDue"] == 140

    def test_explicit_totals_are_kept(self, client, auth_headers, create_appointment):
        appointment = create_appointment()
        billing = client.get(f"/spa/billing/appointment/{appointment['id']}").json()

        response = client.put(
            f"/spa/billing/{billing['id']}", json={"amountPaid": 100, "amountDue": 0}, headers=auth_headers
        )

        assert response.json()["total"] == 165
        assert response.json()["amountDue"] == 0

    def test_record_payment(self, client, auth_headers, create_appointment):
        appointment = create_appointment()
        billing = client.get(f"/spa/billing/appointment/{appointment['id']}").json()

        response = client.patch(
            f"/spa/billing/{billing['id']}/payment",
            json={"amountPaid": 165, "paymentMethod": "cash", "paymentStatus": "paid"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        paid = response.json()
        assert paid["amountDue"] == 0
        assert paid["paymentMethod"] == "cash"
        assert paid["paymentStatus"] == "paid"

    def test_record_payment_requires_auth(self, client, create_appointment):
        appointment = create_appointment()
        billing = client.get(f"/spa/billing/appointment/{appointment['id']}").json()

        response = client.patch(f"/spa/billing/{billing['id']}/payment", json={"amountPaid": 10})
        assert response.status_code == 401

    def test_record_payment_on_missing_billing(self, client, auth_headers):
        response = client.patch("/spa/billing/999/payment", json={"amountPaid": 10}, headers=auth_headers)
        assert response.status_code == 404


class TestBillingSummary:
    def test_empty(self, client):
        assert client.get("/spa/billing/summary").json() == {
            "invoiceCount": 0,
            "totalRevenue": 0,
            "pendingPayments": 0,
        }

    def test_revenue_and_pending(self, client, auth_headers, create_appointment):
        first = create_appointment()
        create_appointment()
        billing = client.get(f"/spa/billing/appointment/{first['id']}").json()
        client.patch(f"/spa/billing/{billing['id']}/payment", json={"amountPaid": 65}, headers=auth_headers)

        summary = client.get("/spa/billing/summary").json()

        assert summary["invoiceCount"] == 2
        assert summary["totalRevenue"] == 65
        assert summary["pendingPayments"] == 265
