# casedesk/services/finance.py

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from casedesk.models.case_finance import FINANCE_RELATIONS
from casedesk.services.gateway import DataGateway
from casedesk.services.search_select import (
    Option, customer_options, service_options, supplier_options,
)
from casedesk.utils.money import parse_money, parse_quantity
from casedesk.utils.logging import get_logger

logger = get_logger("finance")

ROW_FIELDS = (
    "quantity",
    "service_id",
    "additional_text",
    "purchase_price",
    "purchase_currency",
    "supplier_id",
    "sales_price",
    "sales_currency",
    "customer_id",
)


@dataclass
class FinanceTotals:
    total_purchase: Decimal
    total_sales: Decimal
    profit: Decimal
    margin: Decimal  # porcentaje, 0 si no hay ventas

    def to_dict(self) -> dict:
        return {
            "total_purchase": str(self.total_purchase),
            "total_sales": str(self.total_sales),
            "profit": str(self.profit),
            "margin": str(self.margin.quantize(Decimal("0.01"))),
        }


def compute_totals(rows: Iterable[Dict[str, Any]]) -> FinanceTotals:
    """
    Recalcula desde cero sobre las filas cargadas:
      compra = Σ purchase_price × quantity
      venta  = Σ sales_price × quantity
      margen = (venta - compra) / venta × 100
    """
    total_purchase = Decimal("0")
    total_sales = Decimal("0")

    for r in rows:
        qty = parse_money(r.get("quantity"))
        total_purchase += parse_money(r.get("purchase_price")) * qty
        total_sales += parse_money(r.get("sales_price")) * qty

    profit = total_sales - total_purchase
    margin = (profit / total_sales * 100) if total_sales > 0 else Decimal("0")

    return FinanceTotals(
        total_purchase=total_purchase,
        total_sales=total_sales,
        profit=profit,
        margin=margin,
    )


class FinanceLedgerView:
    """
    Filas de costo/ingreso de un case. Cada edición es un request;
    los totales se recalculan cada vez que cambia la colección.
    """

    section = "finance"

    def __init__(self, case: Dict[str, Any], gateway: DataGateway, default_currency: str = "EUR"):
        self.case = dict(case)
        self.gateway = gateway
        self.default_currency = default_currency

        self.rows: List[Dict[str, Any]] = []
        self.totals = compute_totals([])

        self.services: List[Dict[str, Any]] = []
        self.suppliers: List[Dict[str, Any]] = []
        self.customers: List[Dict[str, Any]] = []

    def sync(self, case: Dict[str, Any]) -> None:
        self.case = dict(case)

    def _set_rows(self, rows: List[Dict[str, Any]]) -> None:
        self.rows = rows
        self.totals = compute_totals(rows)

    # ----------------------------
    # carga
    # ----------------------------
    def load(self) -> List[Dict[str, Any]]:
        result = self.gateway.select(
            "case_finance",
            filters={"case_id": self.case["id"]},
            expand=FINANCE_RELATIONS,
            order_by="created_at",
        )
        self._set_rows(result.unwrap(action="loading finance data"))
        return self.rows

    def load_master_data(self) -> None:
        self.services = self.gateway.select("services", order_by="service_name").unwrap(action="loading master data")
        self.suppliers = self.gateway.select("suppliers", order_by="company_name").unwrap(action="loading master data")
        self.customers = self.gateway.select("customers", order_by="company_name").unwrap(action="loading master data")

    def service_options(self) -> List[Option]:
        return service_options(self.services)

    def supplier_options(self) -> List[Option]:
        return supplier_options(self.suppliers)

    def customer_options(self) -> List[Option]:
        # en el ledger el subtítulo es solo el código
        return [
            Option(id=o.id, label=o.label, subtitle=o.data.get("customer_code"), data=o.data)
            for o in customer_options(self.customers)
        ]

    # ----------------------------
    # edición
    # ----------------------------
    def add_row(self) -> Dict[str, Any]:
        result = self.gateway.insert("case_finance", {
            "case_id": self.case["id"],
            "quantity": 1,
            "purchase_price": 0,
            "purchase_currency": self.default_currency,
            "sales_price": 0,
            "sales_currency": self.default_currency,
        }, expand=FINANCE_RELATIONS)
        row = result.unwrap(action="adding finance entry")
        self._set_rows(self.rows + [row])
        return row

    def update_row(self, row_id: str, field: str, value: Any) -> Dict[str, Any]:
        if field not in ROW_FIELDS:
            raise ValueError(f"finance: field not editable: {field}")
        if field == "quantity":
            value = parse_quantity(value, minimum=0)

        result = self.gateway.update("case_finance", row_id, {field: value}, expand=FINANCE_RELATIONS)
        row = result.unwrap(action="updating finance entry")
        self._set_rows([row if r["id"] == row_id else r for r in self.rows])
        return row

    def delete_row(self, row_id: str, confirm: bool = False) -> bool:
        """Sin confirmación explícita no se envía nada."""
        if not confirm:
            return False
        self.gateway.delete("case_finance", row_id).unwrap(action="deleting finance entry")
        self._set_rows([r for r in self.rows if r["id"] != row_id])
        logger.info(f"Finance entry deleted case={self.case['id']} row={row_id}")
        return True

    def select_service(self, row_id: str, text: str, option: Optional[Option] = None) -> Optional[Dict[str, Any]]:
        """
        Elegir un servicio fija service_id y prellena los precios por
        defecto que tenga (los que son 0 o vacíos no se tocan).
        """
        if option is None:
            return None

        service = option.data or {}
        row = self.update_row(row_id, "service_id", option.id)

        if parse_money(service.get("default_purchase_price")):
            row = self.update_row(row_id, "purchase_price", service["default_purchase_price"])
        if parse_money(service.get("default_sales_price")):
            row = self.update_row(row_id, "sales_price", service["default_sales_price"])
        return row
