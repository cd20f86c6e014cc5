# casedesk/services/customers.py

from typing import Any, Dict, Optional

from casedesk.services.gateway import DataGateway
from casedesk.utils.strings import derive_code
from casedesk.utils.logging import get_logger

logger = get_logger("customers")

CUSTOMER_FIELDS = (
    "company_name",
    "address_line1",
    "address_line2",
    "city",
    "postal_code",
    "country",
    "primary_contact_name",
    "primary_contact_email",
    "primary_contact_phone",
    "secondary_contact_name",
    "secondary_contact_email",
    "secondary_contact_phone",
    "website",
    "opening_hours",
    "internal_notes",
)


def generate_customer_code(company_name: str) -> str:
    """UPPER, solo A-Z0-9, máximo 10: 'Acme Shipping & Co.' -> 'ACMESHIPPI'."""
    return derive_code(company_name, "A-Z0-9", 10)


def save_customer(
    gateway: DataGateway,
    form_data: Dict[str, Any],
    initial: Optional[Dict[str, Any]] = None,
    is_edit: bool = False,
) -> Dict[str, Any]:
    """
    Crea o edita un cliente desde el panel de cliente.
    - alta: deriva customer_code del nombre
    - edición: actualiza por id, el código no se regenera
    Lanza ValueError si falta el nombre y GatewayError si el store falla.
    """
    company_name = (form_data.get("company_name") or "").strip()
    if not company_name:
        raise ValueError("Company name is required")

    values = {f: form_data.get(f) for f in CUSTOMER_FIELDS if f in form_data}
    values["company_name"] = company_name

    initial = initial or {}
    if is_edit and initial.get("id"):
        result = gateway.update("customers", initial["id"], values)
        customer = result.unwrap(action="saving customer")
        logger.info(f"Customer updated id={customer['id']} code={customer['customer_code']}")
        return customer

    values["customer_code"] = generate_customer_code(company_name)
    result = gateway.insert("customers", values)
    customer = result.unwrap(action="saving customer")
    logger.info(f"Customer created id={customer['id']} code={customer['customer_code']}")
    return customer
