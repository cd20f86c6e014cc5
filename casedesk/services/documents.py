# casedesk/services/documents.py

from __future__ import annotations

from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

from werkzeug.utils import secure_filename

from casedesk.services.events import EventBus, DOCUMENT_CREATED
from casedesk.services.gateway import DataGateway
from casedesk.utils.dates import format_date
from casedesk.utils.logging import get_logger

logger = get_logger("documents")


def _text(value) -> str:
    return "" if value is None else str(value)


def build_replacements(case: Dict[str, Any], today: Optional[date] = None) -> Dict[str, str]:
    """Valores para los marcadores {{key}} de una plantilla."""
    customer = case.get("customer") or {}
    loading_port = case.get("loading_port") or {}
    discharge_port = case.get("discharge_port") or {}
    qty = case.get("container_quantity")

    return {
        "case_number": _text(case.get("case_number")),
        "customer_name": _text(customer.get("company_name")),
        "customer_reference": _text(case.get("customer_reference")),
        "cargo_description": _text(case.get("cargo_description")),
        "container_type": _text(case.get("container_type")),
        "container_quantity": _text(qty) if qty else "1",
        "weight_kg": _text(case.get("weight_kg")),
        "loading_port": _text(loading_port.get("port_name")),
        "discharge_port": _text(discharge_port.get("port_name")),
        "vessel_name": _text(case.get("vessel_name")),
        "carrier": _text(case.get("carrier")),
        "current_date": format_date(today or date.today()),
        "standard_closing": format_date(case.get("standard_closing")),
        "vwm_closing": format_date(case.get("vwm_closing")),
        "cy_closing": format_date(case.get("cy_closing")),
        "pickup_date": format_date(case.get("pickup_date")),
        "delivery_date": format_date(case.get("delivery_date")),
    }


def render_document(template_content: str, case: Dict[str, Any], today: Optional[date] = None) -> str:
    # reemplazo literal; marcadores desconocidos quedan tal cual
    content = template_content or ""
    for key, value in build_replacements(case, today).items():
        content = content.replace("{{" + key + "}}", value)
    return content


def export_filename(document_name: str) -> str:
    name = secure_filename(document_name or "") or "document"
    return f"{name}.html"


def export_document(document: Dict[str, Any]) -> Tuple[str, bytes]:
    """(nombre de archivo, bytes) para descargar el HTML renderizado."""
    content = document.get("html_content") or ""
    return export_filename(document.get("document_name")), content.encode("utf-8")


class DocumentCreation:
    """
    Estado del panel de creación de documentos para un case:
    plantilla elegida, nombre propuesto y contenido renderizado (editable).
    """

    def __init__(self, case: Dict[str, Any], gateway: DataGateway, on_created: Optional[Callable[[], None]] = None):
        self.case = dict(case)
        self.gateway = gateway
        self.on_created = on_created

        self.templates: List[Dict[str, Any]] = []
        self.selected: Optional[Dict[str, Any]] = None
        self.document_name = ""
        self.content = ""

    def load_templates(self) -> List[Dict[str, Any]]:
        result = self.gateway.select("document_templates", order_by="template_name")
        self.templates = result.unwrap(action="loading templates")
        return self.templates

    def select_template(self, template_id: str, today: Optional[date] = None) -> Dict[str, Any]:
        template = next((t for t in self.templates if t["id"] == template_id), None)
        if template is None:
            raise ValueError(f"Unknown template: {template_id}")

        self.selected = template
        self.document_name = f"{template['template_name']} - {self.case.get('case_number', '')}"
        self.content = render_document(template["html_content"], self.case, today)
        return template

    def download(self) -> Tuple[str, bytes]:
        return export_document({"document_name": self.document_name, "html_content": self.content})

    def save(self) -> Dict[str, Any]:
        if not self.selected or not self.document_name.strip():
            raise ValueError("Please select a template and enter a document name")

        result = self.gateway.insert("case_documents", {
            "case_id": self.case["id"],
            "document_name": self.document_name.strip(),
            "document_type": self.selected["template_type"],
            "html_content": self.content,
        })
        document = result.unwrap(action="saving document")
        logger.info(f"Document created case={self.case['id']} id={document['id']}")

        if self.on_created:
            self.on_created()
        return document


class DocumentsView:
    """Lista de documentos de un case; se recarga con documentCreated."""

    section = "documents"

    def __init__(self, case: Dict[str, Any], gateway: DataGateway, bus: Optional[EventBus] = None):
        self.case = dict(case)
        self.gateway = gateway
        self.documents: List[Dict[str, Any]] = []
        self._unsubscribe = bus.subscribe(DOCUMENT_CREATED, self._on_document_created) if bus else None

    def sync(self, case: Dict[str, Any]) -> None:
        self.case = dict(case)

    def _on_document_created(self, _payload=None) -> None:
        self.load()

    def detach(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def load(self) -> List[Dict[str, Any]]:
        result = self.gateway.select(
            "case_documents",
            filters={"case_id": self.case["id"]},
            order_by="created_at",
            descending=True,
        )
        self.documents = result.unwrap(action="loading documents")
        return self.documents

    def get(self, document_id: str) -> Optional[Dict[str, Any]]:
        return next((d for d in self.documents if d["id"] == document_id), None)

    def delete(self, document_id: str, confirm: bool = False) -> bool:
        """Sin confirmación explícita no se envía nada."""
        if not confirm:
            return False
        self.gateway.delete("case_documents", document_id).unwrap(action="deleting document")
        self.documents = [d for d in self.documents if d["id"] != document_id]
        logger.info(f"Document deleted case={self.case['id']} id={document_id}")
        return True

    def export(self, document_id: str) -> Tuple[str, bytes]:
        document = self.get(document_id)
        if document is None:
            raise ValueError(f"Unknown document: {document_id}")
        return export_document(document)
