# casedesk/services/record_views.py

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from casedesk.models.case import (
    CASE_RELATIONS, STATUS_OPTIONS, CONTAINER_TYPES, INCOTERMS,
)
from casedesk.services.gateway import DataGateway
from casedesk.services.ports import create_adhoc_port
from casedesk.services.search_select import (
    Option, SearchSelect, customer_options, port_options,
)
from casedesk.services.window_manager import PanelController
from casedesk.utils.dates import parse_date
from casedesk.utils.money import parse_money, parse_quantity
from casedesk.utils.logging import get_logger

logger = get_logger("record_views")

CaseCallback = Callable[[Dict[str, Any]], None]

DATE_FIELDS = (
    "pickup_date",
    "delivery_date",
    "standard_closing",
    "vwm_closing",
    "cy_closing",
    "dock_closing_carrier",
    "dock_closing_customer",
    "validity_from",
    "validity_to",
)


def format_status(status: Optional[str]) -> str:
    return status.replace("_", " ").upper() if status else "UNKNOWN"


class CaseRecordView:
    """
    Vista que edita campos de un case, uno por request:
      draft local -> update de un campo -> reemplazar draft con la respuesta
      (con relaciones expandidas) -> avisar hacia arriba (on_update)

    Cada campo lleva un contador de requests; una respuesta que ya no es
    la última emitida para ese campo se descarta.
    """

    section = ""
    FIELDS: tuple = ()

    def __init__(self, case: Dict[str, Any], gateway: DataGateway, on_update: Optional[CaseCallback] = None):
        self.case = dict(case)
        self.gateway = gateway
        self.on_update = on_update
        self._seq: Dict[str, int] = {}

    def sync(self, case: Dict[str, Any]) -> None:
        self.case = dict(case)

    # ----------------------------
    # secuencia por campo
    # ----------------------------
    def begin_request(self, field: str) -> int:
        token = self._seq.get(field, 0) + 1
        self._seq[field] = token
        return token

    def is_current(self, field: str, token: int) -> bool:
        return self._seq.get(field) == token

    def apply_response(self, field: str, token: int, updated: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if not self.is_current(field, token):
            logger.info(f"Stale response discarded case={self.case.get('id')} field={field} token={token}")
            return None
        self.case = updated
        if self.on_update:
            self.on_update(updated)
        return updated

    # ----------------------------
    # edición
    # ----------------------------
    def clean(self, field: str, value: Any) -> Any:
        return value

    def update_field(self, field: str, value: Any) -> Optional[Dict[str, Any]]:
        if field not in self.FIELDS:
            raise ValueError(f"{self.section}: field not editable here: {field}")

        value = self.clean(field, value)
        previous = self.case.get(field)
        self.case[field] = value
        token = self.begin_request(field)

        result = self.gateway.update("cases", self.case["id"], {field: value}, expand=CASE_RELATIONS)
        if not result.ok and self.is_current(field, token):
            # el draft vuelve a lo que está guardado
            self.case[field] = previous
        updated = result.unwrap(action="updating case")
        return self.apply_response(field, token, updated)


class OverviewView(CaseRecordView):
    section = "overview"
    FIELDS = (
        "customer_id",
        "customer_reference",
        "cargo_description",
        "incoterms",
        "payment_terms",
        "notes",
    )

    def __init__(self, case, gateway, panels: PanelController, on_update=None):
        super().__init__(case, gateway, on_update)
        self.panels = panels
        self.customers: List[Dict[str, Any]] = []

    def clean(self, field, value):
        if field == "incoterms" and value and value not in INCOTERMS:
            raise ValueError(f"Invalid incoterms: {value}")
        return value

    def load_customers(self) -> List[Dict[str, Any]]:
        result = self.gateway.select("customers", order_by="company_name")
        self.customers = result.unwrap(action="loading customers")
        return self.customers

    def selected_customer(self) -> Optional[Dict[str, Any]]:
        customer_id = self.case.get("customer_id")
        return next((c for c in self.customers if c["id"] == customer_id), None)

    def customer_picker(self) -> SearchSelect:
        selected = self.selected_customer()
        return SearchSelect(
            options=customer_options(self.customers),
            value=selected["company_name"] if selected else "",
            on_change=self.select_customer,
            on_create=self.create_customer,
        )

    def select_customer(self, text: str, option: Optional[Option] = None):
        return self.update_field("customer_id", option.id if option else None)

    def create_customer(self, company_name: str):
        # el alta real ocurre en el panel de cliente
        return self.panels.open_customer({"company_name": company_name}, False)


class GoodsView(CaseRecordView):
    section = "goods"
    FIELDS = (
        "container_type",
        "container_quantity",
        "weight_kg",
        "volume_cbm",
        "cargo_description",
    )

    def clean(self, field, value):
        if field == "container_type" and value not in CONTAINER_TYPES:
            raise ValueError(f"Invalid container type: {value}")
        if field == "container_quantity":
            return parse_quantity(value, minimum=1)
        if field in ("weight_kg", "volume_cbm"):
            if value is None or str(value).strip() == "":
                return None
            return max(parse_money(value), 0)
        return value


class RouteView(CaseRecordView):
    section = "route"
    FIELDS = (
        "loading_port_id",
        "discharge_port_id",
        "loading_terminal",
        "discharge_terminal",
        "vessel_name",
        "carrier",
        "voyage_number",
    )
    PORT_FIELDS = ("loading_port_id", "discharge_port_id")

    def __init__(self, case, gateway, on_update=None):
        super().__init__(case, gateway, on_update)
        self.ports: List[Dict[str, Any]] = []

    def load_ports(self) -> List[Dict[str, Any]]:
        result = self.gateway.select("ports", order_by="port_name")
        self.ports = result.unwrap(action="loading ports")
        return self.ports

    def selected_port(self, field: str) -> Optional[Dict[str, Any]]:
        port_id = self.case.get(field)
        return next((p for p in self.ports if p["id"] == port_id), None)

    def port_picker(self, field: str) -> SearchSelect:
        if field not in self.PORT_FIELDS:
            raise ValueError(f"Not a port field: {field}")
        selected = self.selected_port(field)
        return SearchSelect(
            options=port_options(self.ports),
            value=selected["port_name"] if selected else "",
            on_change=lambda text, option: self.select_port(field, text, option),
            on_create=self.create_port,
        )

    def select_port(self, field: str, text: str, option: Optional[Option] = None):
        if field not in self.PORT_FIELDS:
            raise ValueError(f"Not a port field: {field}")
        return self.update_field(field, option.id if option else None)

    def create_port(self, port_name: str) -> Dict[str, Any]:
        port = create_adhoc_port(self.gateway, port_name)
        self.load_ports()
        return port


class SettingsView(CaseRecordView):
    section = "settings"
    FIELDS = ("case_type", "status") + DATE_FIELDS

    def __init__(
        self,
        case,
        gateway,
        on_update=None,
        changed_by: str = "System User",
        change_reason: str = "Status updated via settings",
    ):
        super().__init__(case, gateway, on_update)
        self.changed_by = changed_by
        self.change_reason = change_reason

    def clean(self, field, value):
        if field in DATE_FIELDS:
            return parse_date(value)
        return value

    def update_field(self, field, value):
        if field == "status":
            return self.change_status(value)
        return super().update_field(field, value)

    def change_status(self, new_status: str) -> Optional[Dict[str, Any]]:
        """
        Dos pasos: alta en case_status_history y luego update del case.
        Si el segundo paso falla, la fila de historial queda sin su cambio
        de estado (no hay compensación).
        """
        if new_status not in STATUS_OPTIONS:
            raise ValueError(f"Invalid status: {new_status}")

        old_status = self.case.get("status")
        if new_status == old_status:
            return None

        token = self.begin_request("status")

        history = self.gateway.insert("case_status_history", {
            "case_id": self.case["id"],
            "old_status": old_status,
            "new_status": new_status,
            "changed_by": self.changed_by,
            "change_reason": self.change_reason,
        }).unwrap(action="updating status")

        result = self.gateway.update("cases", self.case["id"], {"status": new_status}, expand=CASE_RELATIONS)
        if not result.ok:
            logger.warning(
                f"Status history id={history['id']} written but case={self.case['id']} "
                f"kept status={old_status}"
            )
        updated = result.unwrap(action="updating status")

        logger.info(f"Case status changed case={self.case['id']} {old_status} -> {new_status}")
        return self.apply_response("status", token, updated)


class HistoryView:
    """Solo lectura: historial de estados, más reciente primero."""

    section = "history"

    def __init__(self, case: Dict[str, Any], gateway: DataGateway):
        self.case = dict(case)
        self.gateway = gateway
        self.entries: List[Dict[str, Any]] = []

    def sync(self, case: Dict[str, Any]) -> None:
        self.case = dict(case)

    def load(self) -> List[Dict[str, Any]]:
        result = self.gateway.select(
            "case_status_history",
            filters={"case_id": self.case["id"]},
            order_by="created_at",
            descending=True,
        )
        self.entries = result.unwrap(action="loading history")
        return self.entries
