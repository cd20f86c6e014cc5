# tests/test_finance.py

from decimal import Decimal

from casedesk.services.finance import compute_totals, FinanceLedgerView
from casedesk.services.search_select import Option


def test_totals_margin_over_sales():
    rows = [
        {"quantity": 2, "purchase_price": 10, "sales_price": 15},
        {"quantity": 1, "purchase_price": 5, "sales_price": 5},
    ]
    t = compute_totals(rows)

    assert t.total_purchase == Decimal("25")
    assert t.total_sales == Decimal("35")
    assert t.profit == Decimal("10")
    assert round(t.margin, 1) == Decimal("28.6")
    assert t.to_dict()["margin"] == "28.57"


def test_totals_without_rows_or_sales():
    empty = compute_totals([])
    assert empty.total_sales == Decimal("0")
    assert empty.margin == Decimal("0")

    # solo compra, nada vendido: margen 0, no división por cero
    only_cost = compute_totals([{"quantity": 3, "purchase_price": "100", "sales_price": None}])
    assert only_cost.total_purchase == Decimal("300")
    assert only_cost.profit == Decimal("-300")
    assert only_cost.margin == Decimal("0")


def test_ledger_add_update_and_totals(gateway, make_case, master_data):
    case = make_case()
    ledger = FinanceLedgerView(case, gateway, default_currency="EUR")
    assert ledger.load() == []

    row = ledger.add_row()
    assert row["quantity"] == 1
    assert row["purchase_currency"] == "EUR"
    assert row["sales_currency"] == "EUR"
    assert Decimal(row["purchase_price"]) == Decimal("0")

    ledger.update_row(row["id"], "quantity", "2")
    ledger.update_row(row["id"], "purchase_price", "10")
    ledger.update_row(row["id"], "sales_price", "15")

    assert ledger.totals.total_purchase == Decimal("20")
    assert ledger.totals.total_sales == Decimal("30")

    # recarga desde el store: mismos totales
    ledger.load()
    assert len(ledger.rows) == 1
    assert ledger.totals.profit == Decimal("10")


def test_ledger_quantity_never_negative(gateway, make_case):
    ledger = FinanceLedgerView(make_case(), gateway)
    row = ledger.add_row()

    updated = ledger.update_row(row["id"], "quantity", "-4")
    assert updated["quantity"] == 0


def test_ledger_service_prefills_defaults(gateway, make_case, master_data):
    ledger = FinanceLedgerView(make_case(), gateway)
    ledger.load_master_data()
    row = ledger.add_row()

    freight = next(o for o in ledger.service_options() if o.label == "Ocean Freight")
    updated = ledger.select_service(row["id"], freight.label, freight)

    assert updated["service_id"] == master_data["freight"]["id"]
    assert updated["service"]["service_name"] == "Ocean Freight"
    assert Decimal(updated["purchase_price"]) == Decimal("1200")
    assert Decimal(updated["sales_price"]) == Decimal("1450")


def test_ledger_service_without_defaults_keeps_prices(gateway, make_case, master_data):
    ledger = FinanceLedgerView(make_case(), gateway)
    ledger.load_master_data()
    row = ledger.add_row()
    ledger.update_row(row["id"], "purchase_price", "80")

    trucking = next(o for o in ledger.service_options() if o.label == "Trucking")
    updated = ledger.select_service(row["id"], trucking.label, trucking)

    assert updated["service_id"] == master_data["trucking"]["id"]
    assert Decimal(updated["purchase_price"]) == Decimal("80")

    # tecleo libre (sin opción) no toca la fila
    assert ledger.select_service(row["id"], "Truck", None) is None


def test_ledger_customer_options_show_code(gateway, make_case, master_data):
    ledger = FinanceLedgerView(make_case(), gateway)
    ledger.load_master_data()

    opts = ledger.customer_options()
    assert [(o.label, o.subtitle) for o in opts] == [("Nordsee Import GmbH", "NORDSEEIMP")]
    assert isinstance(opts[0], Option)


def test_ledger_delete_requires_confirmation(gateway, make_case):
    ledger = FinanceLedgerView(make_case(), gateway)
    row = ledger.add_row()

    assert ledger.delete_row(row["id"]) is False
    assert len(ledger.load()) == 1

    assert ledger.delete_row(row["id"], confirm=True) is True
    assert ledger.rows == []
    assert ledger.load() == []
