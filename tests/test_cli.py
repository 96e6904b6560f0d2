"""Tests for CLI commands."""

import json

import pytest

from t212taxes.cli.main import cli


@pytest.fixture
def ledger_file(tmp_path, ledger_records):
    path = tmp_path / "transactions.json"
    path.write_text(json.dumps(ledger_records), encoding="utf-8")
    return str(path)


def test_yearly(cli_runner, ledger_file):
    result = cli_runner.invoke(cli, ["yearly", ledger_file])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert [r["year"] for r in data["yearly_reports"]] == [2023, 2024]
    assert data["yearly_reports"][0]["total_deposits"] == "2000.00"
    assert data["yearly_reports"][0]["dividends"] == "8.50"
    assert data["yearly_reports"][1]["capital_gains"] == "120.00"
    assert data["overall"]["years"] == [2023, 2024]
    assert data["overall"]["currency"] == "EUR"


def test_gains(cli_runner, ledger_file):
    result = cli_runner.invoke(cli, ["gains", ledger_file])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["total_gains"] == "120.00"
    assert data["total_losses"] == "0"
    assert data["oversold_shares"] == {}


def test_portfolio_single_year(cli_runner, ledger_file):
    result = cli_runner.invoke(cli, ["portfolio", "--year", "2023", ledger_file])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["year"] == 2023
    assert data["as_of_date"] == "2023-12-31T23:59:59"
    [position] = data["positions"]
    assert position["ticker"] == "MSFT"
    assert position["shares"] == "10"
    assert data["yearly_deposits"] == "2000.00"


def test_portfolio_all_years(cli_runner, ledger_file):
    result = cli_runner.invoke(cli, ["portfolio", ledger_file])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["data_source"] == "Trading 212 CSV Export"
    assert [p["year"] for p in data["yearly_portfolios"]] == [2023, 2024]


def test_income(cli_runner, ledger_file):
    result = cli_runner.invoke(cli, ["income", "--top-payers", "1", ledger_file])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["report"]["dividends"]["net_dividends"] == "7.00"
    assert data["report"]["interest"]["by_source"] == {"Cash": "3.25"}
    assert data["report"]["total_income"] == "10.25"
    assert data["top_dividend_payers"] == [{"security": "MSFT", "amount": "7.00"}]
    assert set(data["monthly_breakdown"]) == {"2023-06", "2024-04"}


def test_summary(cli_runner, ledger_file):
    result = cli_runner.invoke(cli, ["summary", ledger_file])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["total_transactions"] == 5
    assert data["unique_instruments"] == 1


def test_currency_option(cli_runner, tmp_path):
    path = tmp_path / "usd.json"
    path.write_text(
        json.dumps(
            {
                "transactions": [
                    {
                        "action": "Deposit",
                        "time": "2024-01-01 10:00:00",
                        "total": "100",
                        "currency_total": "GBP",
                        "exchange_rate": "0.8",
                    }
                ]
            }
        ),
        encoding="utf-8",
    )

    result = cli_runner.invoke(cli, ["--currency", "usd", "yearly", str(path)])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["overall"]["currency"] == "USD"
    assert data["overall"]["total_deposits"] == "125"


def test_invalid_currency(cli_runner, ledger_file):
    result = cli_runner.invoke(cli, ["--currency", "euro", "yearly", ledger_file])

    assert result.exit_code != 0
    assert "Invalid currency code" in result.output


def test_invalid_json(cli_runner, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    result = cli_runner.invoke(cli, ["yearly", str(path)])

    assert result.exit_code == 1
    assert "Error: Invalid JSON" in result.output


def test_invalid_records_reported(cli_runner, tmp_path, ledger_records):
    path = tmp_path / "partial.json"
    path.write_text(json.dumps(ledger_records + [{"Action": "Deposit"}]), encoding="utf-8")

    result = cli_runner.invoke(cli, ["summary", str(path)])

    assert result.exit_code == 0
    assert "Skipped 1 invalid records" in result.output
    assert "Record 6: Missing time" in result.output


def test_non_utf8_file(cli_runner, tmp_path):
    path = tmp_path / "binary.json"
    path.write_bytes(b"[\xff\xfe]")

    result = cli_runner.invoke(cli, ["summary", str(path)])

    assert result.exit_code == 1
    assert "Error: Invalid JSON" in result.output


@pytest.mark.parametrize("year", ["0", "10000"])
def test_portfolio_year_out_of_range(cli_runner, ledger_file, year):
    result = cli_runner.invoke(cli, ["portfolio", "--year", year, ledger_file])

    assert result.exit_code == 2
    assert "Invalid value for '--year'" in result.output
