# casedesk/services/ports.py

from typing import Any, Dict

from casedesk.services.gateway import DataGateway
from casedesk.utils.strings import derive_code
from casedesk.utils.logging import get_logger

logger = get_logger("ports")

UNKNOWN_COUNTRY = "Unknown"


def derive_port_code(port_name: str) -> str:
    """Solo letras, UPPER, máximo 5: 'Rotterdam' -> 'ROTTE'."""
    return derive_code(port_name, "A-Z", 5)


def create_adhoc_port(gateway: DataGateway, port_name: str) -> Dict[str, Any]:
    """
    Alta rápida desde el buscador de puertos. El país queda como
    'Unknown' hasta que alguien lo corrija a mano.
    """
    name = (port_name or "").strip()
    if not name:
        raise ValueError("Port name is required")

    result = gateway.insert("ports", {
        "port_code": derive_port_code(name),
        "port_name": name,
        "city": name,
        "country": UNKNOWN_COUNTRY,
    })
    port = result.unwrap(action="creating port")
    logger.info(f"Ad-hoc port created id={port['id']} code={port['port_code']}")
    return port
