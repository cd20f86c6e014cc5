# casedesk/blueprints/api/routes.py

from flask import Blueprint, jsonify, request

from casedesk.services.finance import compute_totals
from casedesk.services.gateway import DataGateway, GatewayError
from casedesk.services.search_select import (
    filter_options, customer_options, port_options, service_options, supplier_options,
)
from casedesk.services.workspace import current_workspace

api_bp = Blueprint("api", __name__)

# kind -> (tabla, orden, builder)
OPTION_SOURCES = {
    "customers": ("customers", "company_name", customer_options),
    "ports": ("ports", "port_name", port_options),
    "services": ("services", "service_name", service_options),
    "suppliers": ("suppliers", "company_name", supplier_options),
}


@api_bp.errorhandler(GatewayError)
def _gateway_error(e: GatewayError):
    return jsonify({"error": e.user_message, "detail": str(e)}), 502


@api_bp.route("/ping")
def ping():
    return jsonify({"status": "ok"})


@api_bp.route("/panels")
def panels():
    ws = current_workspace()
    return jsonify({"panels": ws.windows.to_list()})


@api_bp.route("/options/<kind>")
def options(kind: str):
    """Candidatos del search-select filtrados por ?q= (substring, sin mayúsculas)."""
    source = OPTION_SOURCES.get(kind)
    if source is None:
        return jsonify({"error": f"Unknown option source: {kind}"}), 404

    table, order_by, builder = source
    rows = DataGateway().select(table, order_by=order_by).unwrap(action=f"loading {kind}")
    matches = filter_options(builder(rows), request.args.get("q", ""))
    return jsonify({"options": [o.to_dict() for o in matches]})


@api_bp.route("/cases/<case_id>/finance/totals")
def finance_totals(case_id: str):
    rows = DataGateway().select(
        "case_finance", filters={"case_id": case_id},
    ).unwrap(action="loading finance data")
    return jsonify({"case_id": case_id, "rows": len(rows), **compute_totals(rows).to_dict()})
