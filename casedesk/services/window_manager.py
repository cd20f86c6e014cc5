# casedesk/services/window_manager.py

from __future__ import annotations

import itertools
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Protocol

from casedesk.services.events import EventBus, CASE_UPDATED, CUSTOMER_UPDATED, DOCUMENT_CREATED
from casedesk.utils.logging import get_logger

logger = get_logger("window_manager")

PANEL_KINDS = ("case", "customer", "document")


@dataclass
class Panel:
    id: str
    kind: str  # case / customer / document
    payload: Dict[str, Any] = field(default_factory=dict)
    minimized: bool = False
    maximized: bool = False

    def __post_init__(self):
        if self.kind not in PANEL_KINDS:
            raise ValueError(f"Unknown panel kind: {self.kind}")

    @property
    def case_id(self) -> Optional[str]:
        if self.kind == "case":
            return self.payload.get("id")
        return None

    def to_dict(self) -> dict:
        return asdict(self)


class PanelController(Protocol):
    """Lo que las vistas anidadas pueden pedir sin conocer el WindowManager."""

    def open_case(self, case: Dict[str, Any]) -> Panel: ...

    def open_customer(self, customer: Optional[Dict[str, Any]] = None, is_edit: bool = False) -> Panel: ...

    def open_document(self, case: Dict[str, Any]) -> Panel: ...


class WindowManager:
    """
    Lista ordenada de paneles abiertos (orden = orden de apertura;
    el último es el que está al frente).

    Invariante: como máximo un panel kind=case por case id.
    Los paneles de cliente y de documento no se deduplican.
    """

    def __init__(self, bus: EventBus):
        self.bus = bus
        self.panels: List[Panel] = []
        self._seq = itertools.count(1)

    def _new_id(self, kind: str, ref: Optional[str] = None) -> str:
        n = next(self._seq)
        return f"{kind}-{ref}-{n}" if ref else f"{kind}-{n}"

    # ----------------------------
    # apertura
    # ----------------------------
    def open_case(self, case: Dict[str, Any]) -> Panel:
        case_id = case["id"]
        existing = self.find_case_panel(case_id)
        if existing:
            # traer al frente: mover al final y des-minimizar
            self.panels.remove(existing)
            existing.minimized = False
            self.panels.append(existing)
            logger.info(f"Case panel brought to front id={existing.id} case={case_id}")
            return existing

        panel = Panel(id=self._new_id("case", case_id), kind="case", payload=dict(case))
        self.panels.append(panel)
        logger.info(f"Opened case panel id={panel.id} case={case_id}")
        return panel

    def open_customer(self, customer: Optional[Dict[str, Any]] = None, is_edit: bool = False) -> Panel:
        panel = Panel(
            id=self._new_id("customer"),
            kind="customer",
            payload={"customer": dict(customer or {}), "is_edit": bool(is_edit)},
        )
        self.panels.append(panel)
        logger.info(f"Opened customer panel id={panel.id} edit={is_edit}")
        return panel

    def open_document(self, case: Dict[str, Any]) -> Panel:
        panel = Panel(id=self._new_id("document", case["id"]), kind="document", payload=dict(case))
        self.panels.append(panel)
        logger.info(f"Opened document panel id={panel.id} case={case['id']}")
        return panel

    # ----------------------------
    # estado de ventana
    # ----------------------------
    def get(self, panel_id: str) -> Optional[Panel]:
        for p in self.panels:
            if p.id == panel_id:
                return p
        return None

    def find_case_panel(self, case_id: str) -> Optional[Panel]:
        for p in self.panels:
            if p.kind == "case" and p.case_id == case_id:
                return p
        return None

    def close(self, panel_id: str) -> bool:
        before = len(self.panels)
        self.panels = [p for p in self.panels if p.id != panel_id]
        closed = len(self.panels) < before
        if closed:
            logger.info(f"Closed panel id={panel_id}")
        return closed

    def minimize(self, panel_id: str) -> Optional[Panel]:
        panel = self.get(panel_id)
        if panel:
            panel.minimized = True
        return panel

    def restore(self, panel_id: str) -> Optional[Panel]:
        panel = self.get(panel_id)
        if panel:
            panel.minimized = False
        return panel

    def toggle_maximize(self, panel_id: str) -> Optional[Panel]:
        panel = self.get(panel_id)
        if panel:
            panel.maximized = not panel.maximized
        return panel

    # ----------------------------
    # propagación
    # ----------------------------
    def handle_case_update(self, case: Dict[str, Any]) -> None:
        case_id = case["id"]
        for p in self.panels:
            if p.kind == "case" and p.case_id == case_id:
                p.payload = dict(case)
        self.bus.publish(CASE_UPDATED, case)

    def handle_customer_saved(self, customer: Dict[str, Any]) -> None:
        self.bus.publish(CUSTOMER_UPDATED, customer)

    def handle_document_created(self) -> None:
        self.bus.publish(DOCUMENT_CREATED)

    def to_list(self) -> List[dict]:
        return [p.to_dict() for p in self.panels]
