"""Tests for the JSON/CSV API blueprints."""

from __future__ import annotations

import csv
import io
import logging
from datetime import date

from ledgerbook import create_app
from ledgerbook.config import TestConfig
from ledgerbook.extensions import get_summary_cache
from tests.conftest import OTHER_USER_ID


def test_customer_statement_json(client, customer_factory, loan_factory, loan_payment_factory):
    customer = customer_factory()
    loan = loan_factory(customer, 1000, date(2024, 1, 5))
    loan_payment_factory(loan, 300, date(2024, 1, 10))
    loan_payment_factory(loan, 200, date(2024, 1, 10))

    response = client.get(f"/api/customers/{customer.id}/statement")

    assert response.status_code == 200
    payload = response.get_json()
    assert [row["balance"] for row in payload["statement"]] == ["1000.00", "700.00", "500.00"]
    assert payload["statement"][1]["credit"] == "300.00"
    assert payload["summary"]["outstanding_balance"] == "500.00"
    assert payload["skipped"] == 0


def test_statement_window_and_inverted_range(client, customer_factory, loan_factory, loan_payment_factory):
    customer = customer_factory()
    loan = loan_factory(customer, 1000, date(2024, 1, 5))
    loan_payment_factory(loan, 300, date(2024, 2, 10))

    windowed = client.get(
        f"/api/customers/{customer.id}/statement?from=2024-02-01&to=2024-02-28"
    ).get_json()
    inverted = client.get(
        f"/api/customers/{customer.id}/statement?from=2024-02-01&to=2024-01-01"
    ).get_json()

    assert [row["balance"] for row in windowed["statement"]] == ["-300.00"]
    assert windowed["summary"]["outstanding_balance"] == "700.00"
    assert inverted["statement"] == []
    assert inverted["summary"]["avg_event_amount"] == "0.00"
    assert inverted["summary"]["outstanding_balance"] == "700.00"


def test_bad_date_is_a_400(client, customer_factory):
    customer = customer_factory()

    response = client.get(f"/api/customers/{customer.id}/statement?from=yesterday")

    assert response.status_code == 400
    assert response.get_json()["details"] == [{"from": "yesterday"}]


def test_missing_customer_is_a_404(client):
    response = client.get("/api/customers/999/statement")

    assert response.status_code == 404
    assert response.get_json()["kind"] == "customer"


def test_user_header_scopes_data(client, customer_factory, loan_factory):
    customer = customer_factory()
    loan_factory(customer, 100)

    foreign = client.get(
        f"/api/customers/{customer.id}/statement", headers={"X-User-Id": str(OTHER_USER_ID)}
    )
    garbage = client.get(f"/api/customers/{customer.id}/statement", headers={"X-User-Id": "abc"})

    assert foreign.status_code == 404
    assert garbage.status_code == 400


def test_statement_csv_download(client, customer_factory, loan_factory):
    customer = customer_factory()
    loan_factory(customer, 1000, date(2024, 1, 5), loan_number="L-9")

    response = client.get(f"/api/customers/{customer.id}/statement.csv")

    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    rows = list(csv.DictReader(io.StringIO(response.get_data(as_text=True))))
    assert rows == [
        {
            "date": "2024-01-05",
            "reference": "L-9",
            "description": "Loan - L-9",
            "debit": "1000.00",
            "credit": "",
            "balance": "1000.00",
        }
    ]


def test_customer_summary_and_refresh(client, customer_factory, loan_factory):
    small = customer_factory("Small")
    big = customer_factory("Big")
    loan_factory(small, 100)
    loan_factory(big, 900)

    first = client.get("/api/customers/summary").get_json()
    loan_factory(small, 5000)
    cached = client.get("/api/customers/summary").get_json()
    refreshed = client.get("/api/customers/summary?refresh=1").get_json()

    assert [row["name"] for row in first["customers"]] == ["Big", "Small"]
    assert cached == first
    assert [row["name"] for row in refreshed["customers"]] == ["Small", "Big"]


def test_customer_summary_csv(client, customer_factory, loan_factory):
    loan_factory(customer_factory("Only"), 10)

    response = client.get("/api/customers/summary.csv?status=active")

    rows = list(csv.DictReader(io.StringIO(response.get_data(as_text=True))))
    assert [r["name"] for r in rows] == ["Only"]


def test_customer_outstanding(client, customer_factory, loan_factory):
    customer = customer_factory()
    loan_factory(customer, 1000, date(2024, 1, 1), interest_rate=12, interest_type="daily")

    payload = client.get(f"/api/customers/{customer.id}/outstanding?as_of=2024-01-31").get_json()

    (loan,) = payload["loans"]
    assert loan["balance"] == "1000.00"
    assert loan["interest"] == "9.86"
    assert loan["total_due"] == "1009.86"


def test_mahajan_payment_and_reminders(client, mahajan_factory, bill_factory):
    mahajan = mahajan_factory()
    bill_factory(
        mahajan,
        1000,
        date(2024, 1, 1),
        due_date=date(2024, 1, 15),
        interest_rate=18,
        interest_type="simple",
    )

    reminders = client.get("/api/bills/reminders?as_of=2024-03-14").get_json()
    paid = client.post(
        f"/api/mahajans/{mahajan.id}/payments",
        json={"amount": "1100", "payment_date": "2024-03-14", "payment_mode": "bank"},
    )
    statement = client.get(f"/api/mahajans/{mahajan.id}/statement").get_json()
    after = client.get("/api/bills/reminders?as_of=2024-03-14").get_json()

    assert reminders["bills"][0]["outstanding_balance"] == "1000.00"
    assert paid.status_code == 201
    assert paid.get_json()["lines"][0]["interest"] == "36.00"
    assert paid.get_json()["unallocated"] == "64.00"
    assert statement["summary"]["outstanding_balance"] == "0.00"
    assert after["bills"] == []


def test_mahajan_summary_refresh_and_payment(client, mahajan_factory, bill_factory):
    gupta = mahajan_factory("Gupta")
    jain = mahajan_factory("Jain")
    bill_factory(gupta, 900, date(2024, 1, 1))
    bill_factory(jain, 100, date(2024, 1, 2))

    first = client.get("/api/mahajans/summary").get_json()
    bill_factory(jain, 5000, date(2024, 1, 3))
    cached = client.get("/api/mahajans/summary").get_json()
    refreshed = client.get("/api/mahajans/summary?refresh=1").get_json()
    client.post(
        f"/api/mahajans/{jain.id}/payments",
        json={"amount": "5100", "payment_date": "2024-01-10"},
    )
    after_payment = client.get("/api/mahajans/summary").get_json()

    assert [row["name"] for row in first["mahajans"]] == ["Gupta", "Jain"]
    assert first["skipped"] == 0
    assert cached == first
    assert [row["name"] for row in refreshed["mahajans"]] == ["Jain", "Gupta"]
    assert [row["name"] for row in after_payment["mahajans"]] == ["Gupta", "Jain"]
    assert after_payment["mahajans"][1]["summary"]["outstanding_balance"] == "0.00"


def test_mahajan_summary_csv(client, mahajan_factory, bill_factory):
    bill_factory(mahajan_factory("Only"), 10, date(2024, 1, 1))

    response = client.get("/api/mahajans/summary.csv")

    assert response.headers["Content-Disposition"].endswith("mahajan_summary.csv")
    rows = list(csv.DictReader(io.StringIO(response.get_data(as_text=True))))
    assert [r["name"] for r in rows] == ["Only"]


def test_bill_customer_statement(
    client, bill_customer_factory, sale_factory, sale_transaction_factory
):
    buyer = bill_customer_factory()
    sale = sale_factory(buyer, 1000, date(2024, 1, 1), sale_number="S-7")
    sale_transaction_factory(sale, 400, date(2024, 1, 5))
    sale_transaction_factory(sale, 100, date(2024, 1, 6), transaction_type="refund")

    payload = client.get(f"/api/bill-customers/{buyer.id}/statement").get_json()
    csv_response = client.get(f"/api/bill-customers/{buyer.id}/statement.csv")
    missing = client.get("/api/bill-customers/999/statement")

    assert [row["balance"] for row in payload["statement"]] == ["1000.00", "600.00", "700.00"]
    assert payload["statement"][2]["debit"] == "100.00"
    assert payload["summary"]["outstanding_balance"] == "700.00"
    assert csv_response.status_code == 200
    assert csv_response.mimetype == "text/csv"
    assert missing.status_code == 404
    assert missing.get_json()["kind"] == "bill customer"


def test_mahajan_payment_validation(client, mahajan_factory):
    mahajan = mahajan_factory()

    missing_body = client.post(f"/api/mahajans/{mahajan.id}/payments", data="x")
    bad_amount = client.post(f"/api/mahajans/{mahajan.id}/payments", json={"amount": "-5"})

    assert missing_body.status_code == 400
    assert bad_amount.status_code == 400


def test_partner_transfer_and_statements(client, partner_factory, partner_transaction_factory):
    a = partner_factory("A")
    b = partner_factory("B")
    partner_transaction_factory(a, 100, date(2024, 1, 1))

    response = client.post(
        "/api/partners/transfers",
        json={"from_partner_id": a.id, "to_partner_id": b.id, "amount": 250, "payment_date": "2024-01-02"},
    )
    a_statement = client.get(f"/api/partners/{a.id}/statement").get_json()

    assert response.status_code == 201
    assert response.get_json()["reference"].startswith("TRF-")
    assert a_statement["summary"]["outstanding_balance"] == "-150.00"
    assert a_statement["summary"]["semantics"] == "net"


def test_partner_transfer_requires_ids(client):
    response = client.post("/api/partners/transfers", json={"amount": 5})
    assert response.status_code == 400


def test_firm_account_statement(client, firm_account_factory, firm_transaction_factory):
    account = firm_account_factory()
    firm_transaction_factory(account, "sale", 500, date(2024, 1, 1))
    firm_transaction_factory(account, "refund", 50, date(2024, 1, 2))

    payload = client.get(f"/api/firm-accounts/{account.id}/statement").get_json()

    assert [row["kind"] for row in payload["statement"]] == ["DEBIT", "CREDIT"]
    assert payload["summary"]["outstanding_balance"] == "450.00"


class TestChequeRoutes:
    def test_summary_and_reminders(self, client, cheque_factory):
        cheque_factory("C-1", 100, date(2024, 1, 1))
        cheque_factory("C-2", 50, date(2024, 1, 25), status="processing")
        cheque_factory("C-3", 70, date(2024, 1, 1), status="cleared")

        summary = client.get("/api/cheques/summary").get_json()
        reminders = client.get("/api/cheques/reminders?as_of=2024-01-31&days=7").get_json()

        assert summary["pending"] == {"count": 1, "total": "100.00"}
        assert summary["bounced"] == {"count": 0, "total": "0.00"}
        assert [c["cheque_number"] for c in reminders["cheques"]] == ["C-1"]
        assert reminders["cheques"][0]["days_pending"] == 30

    def test_status_update(self, client, cheque_factory):
        cheque = cheque_factory("C-1", 100, date(2024, 1, 1))

        ok = client.post(f"/api/cheques/{cheque.id}/status", json={"status": "Cleared"})
        bad = client.post(f"/api/cheques/{cheque.id}/status", json={"status": "stopped"})
        missing = client.post("/api/cheques/999/status", json={"status": "bounced"})

        assert ok.get_json() == {"id": cheque.id, "status": "cleared"}
        assert bad.status_code == 400
        assert missing.status_code == 404

    def test_bad_days_parameter(self, client):
        response = client.get("/api/cheques/reminders?days=-1")
        assert response.status_code == 400


def test_per_user_caches_are_bounded(monkeypatch, tmp_path):
    monkeypatch.setenv("LEDGERBOOK_DATA_DIR", str(tmp_path / "instance"))
    monkeypatch.setenv("LEDGERBOOK_SUMMARY_CACHE_USERS", "2")
    app = create_app(config=TestConfig())

    try:
        with app.app_context():
            first = get_summary_cache(1)
            assert get_summary_cache(1) is first
            get_summary_cache(2)
            get_summary_cache(3)

            caches = app.extensions["ledgerbook"]["caches"]
            assert len(caches) == 2
            assert 1 not in caches
            assert get_summary_cache(1) is not first
    finally:
        app.extensions["ledgerbook"]["engine"].dispose()
        package_logger = logging.getLogger("ledgerbook")
        for handler in list(package_logger.handlers):
            package_logger.removeHandler(handler)
            handler.close()
