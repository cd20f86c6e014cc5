# casedesk/models/document_template.py

from datetime import datetime
from casedesk.extensions import db
from casedesk.models.base import RecordMixin, new_id


class DocumentTemplate(RecordMixin, db.Model):
    __tablename__ = "document_templates"

    # solo lectura desde la aplicación (se cargan con scripts/seed_dev.py)
    INSERTABLE = False
    UPDATABLE = False
    DELETABLE = False

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    template_name = db.Column(db.String(255), nullable=False)
    template_type = db.Column(db.String(60), nullable=False)
    html_content = db.Column(db.Text, nullable=False)  # con marcadores {{case_number}} etc.
    variables = db.Column(db.JSON, default=dict)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
