# casedesk/models/port.py

from datetime import datetime
from casedesk.extensions import db
from casedesk.models.base import RecordMixin, new_id


class Port(RecordMixin, db.Model):
    __tablename__ = "ports"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    port_code = db.Column(db.String(10), nullable=False, index=True)
    port_name = db.Column(db.String(120), nullable=False)
    city = db.Column(db.String(120), nullable=False)
    country = db.Column(db.String(120), nullable=False)  # "Unknown" en puertos ad-hoc
    region = db.Column(db.String(120))

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
