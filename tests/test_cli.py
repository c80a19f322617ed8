"""Tests for the flask CLI commands."""

from __future__ import annotations

import csv
from datetime import date


def test_statement_command_writes_csv(app, tmp_path, customer_factory, loan_factory, loan_payment_factory):
    customer = customer_factory()
    loan = loan_factory(customer, 1000, date(2024, 1, 5))
    loan_payment_factory(loan, 400, date(2024, 2, 1))
    output = tmp_path / "exports" / "statement.csv"

    result = app.test_cli_runner().invoke(
        args=["ledgerbook-statement", str(customer.id), "--from", "2024-01-01", "--output", str(output)]
    )

    assert result.exit_code == 0, result.output
    assert "2 rows" in result.output
    with output.open(newline="", encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))
    assert [r["balance"] for r in rows] == ["1000.00", "600.00"]


def test_statement_command_writes_pdf(app, tmp_path, customer_factory, loan_factory):
    customer = customer_factory("Ramesh")
    loan_factory(customer, 250)
    output = tmp_path / "statement.pdf"

    result = app.test_cli_runner().invoke(
        args=["ledgerbook-statement", str(customer.id), "--output", str(output)]
    )

    assert result.exit_code == 0, result.output
    assert output.read_bytes().startswith(b"%PDF")


def test_statement_command_reports_missing_customer(app, tmp_path):
    result = app.test_cli_runner().invoke(
        args=["ledgerbook-statement", "404", "--output", str(tmp_path / "x.csv")]
    )

    assert result.exit_code != 0
    assert "customer" in result.output
    assert not (tmp_path / "x.csv").exists()


def test_statement_command_rejects_bad_dates(app, tmp_path, customer_factory):
    customer = customer_factory()

    result = app.test_cli_runner().invoke(
        args=["ledgerbook-statement", str(customer.id), "--from", "01/02/2024", "--output", str(tmp_path / "x.csv")]
    )

    assert result.exit_code != 0


def test_preview_csv(app, tmp_path):
    source = tmp_path / "events.csv"
    source.write_text(
        "date,kind,amount,description\n"
        "2024-01-01,debit,500,Opening\n"
        "2024-01-03,credit,120.5,Cash\n"
        "oops,credit,1,Broken\n",
        encoding="utf-8",
    )

    result = app.test_cli_runner().invoke(args=["ledgerbook-preview-csv", str(source)])

    assert result.exit_code == 0, result.output
    assert "Opening" in result.output
    assert "Outstanding: 379.50" in result.output
    assert "Skipped: 1" in result.output
