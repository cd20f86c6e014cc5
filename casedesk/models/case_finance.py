# casedesk/models/case_finance.py

from datetime import datetime
from casedesk.extensions import db
from casedesk.models.base import RecordMixin, new_id

FINANCE_RELATIONS = ("service", "supplier", "customer")


class CaseFinance(RecordMixin, db.Model):
    __tablename__ = "case_finance"

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    case_id = db.Column(
        db.String(36),
        db.ForeignKey("cases.id"),
        nullable=False,
        index=True,
    )

    quantity = db.Column(db.Integer, nullable=False, default=1)
    service_id = db.Column(db.String(36), db.ForeignKey("services.id"))
    additional_text = db.Column(db.Text)

    purchase_price = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    purchase_currency = db.Column(db.String(3), nullable=False, default="EUR")
    supplier_id = db.Column(db.String(36), db.ForeignKey("suppliers.id"))

    sales_price = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    sales_currency = db.Column(db.String(3), nullable=False, default="EUR")
    customer_id = db.Column(db.String(36), db.ForeignKey("customers.id"))

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    service = db.relationship("Service")
    supplier = db.relationship("Supplier")
    customer = db.relationship("Customer")
