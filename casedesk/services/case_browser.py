# casedesk/services/case_browser.py

from __future__ import annotations

import time
from typing import Any, Dict, List

from casedesk.models.case import CASE_RELATIONS, STATUS_OPTIONS
from casedesk.services.events import EventBus, CASE_UPDATED
from casedesk.services.gateway import DataGateway
from casedesk.services.window_manager import PanelController
from casedesk.utils.strings import contains_ci
from casedesk.utils.logging import get_logger

logger = get_logger("case_browser")


def new_case_number() -> str:
    return f"CASE-{int(time.time() * 1000)}"


def filter_cases(cases: List[Dict[str, Any]], search: str = "", status: str = "all") -> List[Dict[str, Any]]:
    """
    search: substring sin mayúsculas en número, cliente o carga.
    status: 'all' o uno de STATUS_OPTIONS.
    """
    out = cases
    search = (search or "").strip()

    if search:
        out = [
            c for c in out
            if contains_ci(c.get("case_number"), search)
            or contains_ci((c.get("customer") or {}).get("company_name"), search)
            or contains_ci(c.get("cargo_description"), search)
        ]

    if status and status != "all":
        out = [c for c in out if c.get("status") == status]

    return out


class CaseBrowser:
    """Vista raíz: lista, filtra y crea cases; abre paneles."""

    def __init__(self, gateway: DataGateway, panels: PanelController, bus: EventBus):
        self.gateway = gateway
        self.panels = panels
        self.cases: List[Dict[str, Any]] = []
        self.loaded = False
        bus.subscribe(CASE_UPDATED, self._on_case_updated)

    def _on_case_updated(self, case: Dict[str, Any]) -> None:
        self.cases = [case if c["id"] == case["id"] else c for c in self.cases]

    def load(self) -> List[Dict[str, Any]]:
        result = self.gateway.select("cases", expand=CASE_RELATIONS, order_by="created_at", descending=True)
        self.cases = result.unwrap(action="loading cases")
        self.loaded = True
        return self.cases

    def search(self, search: str = "", status: str = "all") -> List[Dict[str, Any]]:
        if status not in ("all", *STATUS_OPTIONS):
            raise ValueError(f"Invalid status filter: {status}")
        return filter_cases(self.cases, search, status)

    def create_case(self) -> Dict[str, Any]:
        result = self.gateway.insert("cases", {
            "case_number": new_case_number(),
            "case_type": "booking",
            "direction": "export",
            "status": "draft",
        }, expand=CASE_RELATIONS)
        case = result.unwrap(action="creating case")
        self.cases = [case] + self.cases
        logger.info(f"Case created id={case['id']} number={case['case_number']}")
        self.panels.open_case(case)
        return case

    def open(self, case_id: str):
        case = next((c for c in self.cases if c["id"] == case_id), None)
        if case is None:
            case = self.gateway.get("cases", case_id, expand=CASE_RELATIONS).unwrap(action="opening case")
        return self.panels.open_case(case)
