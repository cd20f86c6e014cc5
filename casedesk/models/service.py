# casedesk/models/service.py

from datetime import datetime
from casedesk.extensions import db
from casedesk.models.base import RecordMixin, new_id


class Service(RecordMixin, db.Model):
    __tablename__ = "services"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    service_code = db.Column(db.String(30), nullable=False, index=True)
    service_name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(60), nullable=False)
    unit = db.Column(db.String(30), nullable=False)  # per container / per shipment / ...
    description = db.Column(db.Text)

    # precios sugeridos para prellenar filas del ledger
    default_purchase_price = db.Column(db.Numeric(14, 2))
    default_sales_price = db.Column(db.Numeric(14, 2))
    currency = db.Column(db.String(3), nullable=False, default="EUR")

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
