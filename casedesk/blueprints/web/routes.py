# casedesk/blueprints/web/routes.py

import io

from flask import (
    Blueprint, render_template, request, redirect, url_for,
    flash, send_file, abort,
)

from casedesk.models import STATUS_OPTIONS, CASE_TYPES, CURRENCY_OPTIONS, CONTAINER_TYPES, INCOTERMS
from casedesk.blueprints.web.forms import CustomerForm, DocumentForm
from casedesk.services.case_panel import SECTIONS
from casedesk.services.customers import CUSTOMER_FIELDS
from casedesk.services.gateway import GatewayError
from casedesk.services.workspace import current_workspace


web_bp = Blueprint("web", __name__)


def _panel_or_404(ws, panel_id: str):
    try:
        return ws.panel(panel_id)
    except KeyError:
        abort(404)


def _case_panel_or_404(ws, panel_id: str):
    try:
        return ws.case_panel(panel_id)
    except KeyError:
        abort(404)


def _back_to_panel(panel_id: str, section: str = None):
    return redirect(url_for("web.panel_view", panel_id=panel_id, section=section))


def _html_download(filename: str, content: bytes):
    return send_file(
        io.BytesIO(content),
        mimetype="text/html",
        as_attachment=True,
        download_name=filename,
    )


# ----------------------------
# case browser
# ----------------------------
@web_bp.route("/")
def home():
    ws = current_workspace()

    q = request.args.get("q", "")
    status = request.args.get("status", "all")
    if status not in ("all", *STATUS_OPTIONS):
        status = "all"

    try:
        ws.browser.load()
    except GatewayError as e:
        flash(e.user_message, "error")

    return render_template(
        "cases.html",
        cases=ws.browser.search(q, status),
        total=len(ws.browser.cases),
        q=q,
        status=status,
        statuses=STATUS_OPTIONS,
        panels=ws.windows.panels,
    )


@web_bp.route("/cases/new", methods=["POST"])
def new_case():
    ws = current_workspace()
    try:
        case = ws.browser.create_case()
    except GatewayError as e:
        flash(e.user_message, "error")
        return redirect(url_for("web.home"))

    panel = ws.windows.find_case_panel(case["id"])
    return _back_to_panel(panel.id)


@web_bp.route("/cases/<case_id>/open", methods=["POST"])
def open_case(case_id: str):
    ws = current_workspace()
    try:
        panel = ws.browser.open(case_id)
    except GatewayError as e:
        flash(e.user_message, "error")
        return redirect(url_for("web.home"))
    return _back_to_panel(panel.id)


@web_bp.route("/panels/customer/new", methods=["POST"])
def new_customer_panel():
    ws = current_workspace()
    panel = ws.windows.open_customer({"company_name": request.form.get("company_name", "")}, False)
    return _back_to_panel(panel.id)


# ----------------------------
# paneles: ventana
# ----------------------------
@web_bp.route("/panels/<panel_id>")
def panel_view(panel_id: str):
    ws = current_workspace()
    panel = _panel_or_404(ws, panel_id)

    if panel.kind == "customer":
        form = CustomerForm(data=panel.payload.get("customer") or {})
        return render_template("panel_customer.html", panel=panel, form=form, panels=ws.windows.panels)

    if panel.kind == "document":
        return _render_document_panel(ws, panel)

    cp = ws.case_panel(panel_id)
    section = request.args.get("section") or cp.active_section
    if section not in SECTIONS:
        abort(404)
    cp.activate(section)

    try:
        if section == "overview":
            cp.overview.load_customers()
        elif section == "route":
            cp.route.load_ports()
        elif section == "finance":
            cp.finance.load()
            cp.finance.load_master_data()
        elif section == "documents":
            cp.documents.load()
        elif section == "history":
            cp.history.load()
    except GatewayError as e:
        flash(e.user_message, "error")

    return render_template(
        "panel_case.html",
        panel=panel,
        cp=cp,
        case=cp.case,
        section=section,
        sections=SECTIONS,
        panels=ws.windows.panels,
        statuses=STATUS_OPTIONS,
        case_types=CASE_TYPES,
        currencies=CURRENCY_OPTIONS,
        container_types=CONTAINER_TYPES,
        incoterms=INCOTERMS,
    )


@web_bp.route("/panels/<panel_id>/close", methods=["POST"])
def panel_close(panel_id: str):
    ws = current_workspace()
    ws.close(panel_id)
    return redirect(url_for("web.home"))


@web_bp.route("/panels/<panel_id>/minimize", methods=["POST"])
def panel_minimize(panel_id: str):
    ws = current_workspace()
    ws.windows.minimize(panel_id)
    return redirect(url_for("web.home"))


@web_bp.route("/panels/<panel_id>/restore", methods=["POST"])
def panel_restore(panel_id: str):
    ws = current_workspace()
    _panel_or_404(ws, panel_id)
    ws.windows.restore(panel_id)
    return _back_to_panel(panel_id)


@web_bp.route("/panels/<panel_id>/maximize", methods=["POST"])
def panel_maximize(panel_id: str):
    ws = current_workspace()
    _panel_or_404(ws, panel_id)
    ws.windows.toggle_maximize(panel_id)
    return _back_to_panel(panel_id)


# ----------------------------
# paneles de case: edición
# ----------------------------
@web_bp.route("/panels/<panel_id>/field", methods=["POST"])
def panel_field(panel_id: str):
    ws = current_workspace()
    cp = _case_panel_or_404(ws, panel_id)

    section = request.form.get("section", "overview")
    field = request.form.get("field", "")
    value = request.form.get("value", "")

    try:
        cp.update_field(section, field, value)
    except GatewayError as e:
        flash(e.user_message, "error")
    except ValueError as e:
        flash(str(e), "error")

    return _back_to_panel(panel_id, section)


@web_bp.route("/panels/<panel_id>/pick", methods=["POST"])
def panel_pick(panel_id: str):
    """
    Search-select del lado servidor:
      - option_id presente -> elegir ese candidato
      - si no, se teclea `text` y Enter (crea si nada coincide)
    target: customer / loading_port_id / discharge_port_id
    """
    ws = current_workspace()
    cp = _case_panel_or_404(ws, panel_id)

    target = request.form.get("target", "customer")
    option_id = request.form.get("option_id", "")
    text = request.form.get("text", "")
    section = "overview" if target == "customer" else "route"
    panels_before = len(ws.windows.panels)

    try:
        if target == "customer":
            cp.overview.load_customers()
            picker = cp.overview.customer_picker()
        else:
            cp.route.load_ports()
            picker = cp.route.port_picker(target)

        ports_before = len(cp.route.ports)
        picker.focus()
        if option_id:
            option = next((o for o in picker.options if o.id == option_id), None)
        else:
            # texto igual a un candidato (p.ej. el valor pre-cargado): se elige, no se desvincula
            option = picker.exact_match(text)
        if option:
            picker.click_option(option)
        else:
            picker.type(text)
            picker.key("Enter")
            if target != "customer" and len(cp.route.ports) > ports_before:
                flash(f'Port "{text}" has been created successfully!', "success")
    except GatewayError as e:
        flash(e.user_message, "error")
    except ValueError as e:
        flash(str(e), "error")

    # alta de cliente: se abrió un panel nuevo
    if len(ws.windows.panels) > panels_before and ws.windows.panels[-1].kind == "customer":
        return _back_to_panel(ws.windows.panels[-1].id)
    return _back_to_panel(panel_id, section)


@web_bp.route("/panels/<panel_id>/finance/add", methods=["POST"])
def finance_add(panel_id: str):
    ws = current_workspace()
    cp = _case_panel_or_404(ws, panel_id)
    try:
        cp.finance.load()
        cp.finance.add_row()
    except GatewayError as e:
        flash(e.user_message, "error")
    return _back_to_panel(panel_id, "finance")


@web_bp.route("/panels/<panel_id>/finance/<row_id>", methods=["POST"])
def finance_update(panel_id: str, row_id: str):
    ws = current_workspace()
    cp = _case_panel_or_404(ws, panel_id)
    try:
        cp.finance.load()
        cp.finance.update_row(row_id, request.form.get("field", ""), request.form.get("value", ""))
    except GatewayError as e:
        flash(e.user_message, "error")
    except ValueError as e:
        flash(str(e), "error")
    return _back_to_panel(panel_id, "finance")


@web_bp.route("/panels/<panel_id>/finance/<row_id>/service", methods=["POST"])
def finance_service(panel_id: str, row_id: str):
    ws = current_workspace()
    cp = _case_panel_or_404(ws, panel_id)
    try:
        cp.finance.load()
        cp.finance.load_master_data()
        option_id = request.form.get("option_id", "")
        option = next((o for o in cp.finance.service_options() if o.id == option_id), None)
        cp.finance.select_service(row_id, option.label if option else "", option)
    except GatewayError as e:
        flash(e.user_message, "error")
    return _back_to_panel(panel_id, "finance")


@web_bp.route("/panels/<panel_id>/finance/<row_id>/delete", methods=["POST"])
def finance_delete(panel_id: str, row_id: str):
    ws = current_workspace()
    cp = _case_panel_or_404(ws, panel_id)
    confirm = request.form.get("confirm") == "yes"
    try:
        cp.finance.load()
        if not cp.finance.delete_row(row_id, confirm=confirm):
            flash("Please confirm the deletion.", "warn")
    except GatewayError as e:
        flash(e.user_message, "error")
    return _back_to_panel(panel_id, "finance")


@web_bp.route("/panels/<panel_id>/documents/new", methods=["POST"])
def document_new(panel_id: str):
    ws = current_workspace()
    cp = _case_panel_or_404(ws, panel_id)
    panel = cp.open_document_panel()
    return _back_to_panel(panel.id)


@web_bp.route("/panels/<panel_id>/documents/<document_id>/delete", methods=["POST"])
def document_delete(panel_id: str, document_id: str):
    ws = current_workspace()
    cp = _case_panel_or_404(ws, panel_id)
    confirm = request.form.get("confirm") == "yes"
    try:
        cp.documents.load()
        if not cp.documents.delete(document_id, confirm=confirm):
            flash("Are you sure you want to delete this document? Tick confirm to delete.", "warn")
    except GatewayError as e:
        flash(e.user_message, "error")
    return _back_to_panel(panel_id, "documents")


@web_bp.route("/panels/<panel_id>/documents/<document_id>/download")
def document_download(panel_id: str, document_id: str):
    ws = current_workspace()
    cp = _case_panel_or_404(ws, panel_id)
    try:
        cp.documents.load()
        filename, content = cp.documents.export(document_id)
    except GatewayError as e:
        flash(e.user_message, "error")
        return _back_to_panel(panel_id, "documents")
    except ValueError:
        abort(404)
    return _html_download(filename, content)


# ----------------------------
# panel de cliente
# ----------------------------
@web_bp.route("/panels/<panel_id>/customer/save", methods=["POST"])
def customer_save(panel_id: str):
    ws = current_workspace()
    panel = _panel_or_404(ws, panel_id)
    if panel.kind != "customer":
        abort(404)

    form = CustomerForm()
    if not form.validate_on_submit():
        for errors in form.errors.values():
            for msg in errors:
                flash(msg, "error")
        return render_template("panel_customer.html", panel=panel, form=form, panels=ws.windows.panels)

    data = {f: getattr(form, f).data for f in CUSTOMER_FIELDS}
    try:
        customer = ws.save_customer_panel(panel_id, data)
    except GatewayError as e:
        flash(e.user_message, "error")
        return render_template("panel_customer.html", panel=panel, form=form, panels=ws.windows.panels)

    flash(f"Customer {customer['company_name']} saved ({customer['customer_code']}).", "success")
    return redirect(url_for("web.home"))


# ----------------------------
# panel de documento
# ----------------------------
def _render_document_panel(ws, panel, form=None):
    dc = ws.document_panel(panel.id)
    try:
        dc.load_templates()
    except GatewayError as e:
        flash(e.user_message, "error")

    template_id = request.args.get("template_id")
    if template_id:
        try:
            dc.select_template(template_id)
        except ValueError as e:
            flash(str(e), "error")

    if form is None:
        form = DocumentForm(data={
            "template_id": dc.selected["id"] if dc.selected else "",
            "document_name": dc.document_name,
            "html_content": dc.content,
        })
    form.template_id.choices = [(t["id"], t["template_name"]) for t in dc.templates]

    return render_template("panel_document.html", panel=panel, dc=dc, form=form, panels=ws.windows.panels)


def _document_from_form(ws, panel_id: str):
    dc = ws.document_panel(panel_id)
    dc.load_templates()

    form = DocumentForm()
    form.template_id.choices = [(t["id"], t["template_name"]) for t in dc.templates]
    if not form.validate_on_submit():
        return dc, form, False

    if not dc.selected or dc.selected["id"] != form.template_id.data:
        dc.select_template(form.template_id.data)
    dc.document_name = form.document_name.data or ""
    if form.html_content.data is not None:
        dc.content = form.html_content.data
    return dc, form, True


@web_bp.route("/panels/<panel_id>/document/save", methods=["POST"])
def document_save(panel_id: str):
    ws = current_workspace()
    panel = _panel_or_404(ws, panel_id)
    if panel.kind != "document":
        abort(404)

    try:
        dc, form, valid = _document_from_form(ws, panel_id)
        if not valid:
            flash("Please select a template and enter a document name", "error")
            return _render_document_panel(ws, panel, form)
        ws.save_document_panel(panel_id)
    except GatewayError as e:
        flash(e.user_message, "error")
        return _render_document_panel(ws, panel)
    except ValueError as e:
        flash(str(e), "error")
        return _render_document_panel(ws, panel)

    flash("Document saved.", "success")
    case_panel = ws.windows.find_case_panel(panel.payload["id"])
    if case_panel:
        return _back_to_panel(case_panel.id, "documents")
    return redirect(url_for("web.home"))


@web_bp.route("/panels/<panel_id>/document/download", methods=["POST"])
def document_preview_download(panel_id: str):
    ws = current_workspace()
    panel = _panel_or_404(ws, panel_id)
    if panel.kind != "document":
        abort(404)

    try:
        dc, form, valid = _document_from_form(ws, panel_id)
    except GatewayError as e:
        flash(e.user_message, "error")
        return _render_document_panel(ws, panel)
    except ValueError as e:
        flash(str(e), "error")
        return _render_document_panel(ws, panel)

    if not valid:
        flash("Please select a template and enter a document name", "error")
        return _render_document_panel(ws, panel, form)

    filename, content = dc.download()
    return _html_download(filename, content)
