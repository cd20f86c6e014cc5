# casedesk/blueprints/web/forms.py

from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SelectField, SubmitField
from wtforms.validators import DataRequired, Length, Optional


class CustomerForm(FlaskForm):
    company_name = StringField(
        "Company Name",
        validators=[DataRequired(message="Company name is required"), Length(max=255)],
    )
    website = StringField("Website", validators=[Optional(), Length(max=255)])

    address_line1 = StringField("Address Line 1", validators=[Optional(), Length(max=255)])
    address_line2 = StringField("Address Line 2", validators=[Optional(), Length(max=255)])
    city = StringField("City", validators=[Optional(), Length(max=120)])
    postal_code = StringField("Postal Code", validators=[Optional(), Length(max=30)])
    country = StringField("Country", validators=[Optional(), Length(max=120)])

    primary_contact_name = StringField("Contact Name", validators=[Optional(), Length(max=255)])
    primary_contact_email = StringField("Email", validators=[Optional(), Length(max=255)])
    primary_contact_phone = StringField("Phone", validators=[Optional(), Length(max=60)])
    secondary_contact_name = StringField("Secondary Contact", validators=[Optional(), Length(max=255)])
    secondary_contact_email = StringField("Secondary Email", validators=[Optional(), Length(max=255)])
    secondary_contact_phone = StringField("Secondary Phone", validators=[Optional(), Length(max=60)])

    opening_hours = StringField("Opening Hours", validators=[Optional(), Length(max=120)])
    internal_notes = TextAreaField("Internal Notes", validators=[Optional()])

    submit = SubmitField("Save Customer")


class DocumentForm(FlaskForm):
    template_id = SelectField("Template", choices=[], validators=[DataRequired()])
    document_name = StringField(
        "Document Name",
        validators=[DataRequired(message="Please select a template and enter a document name"), Length(max=255)],
    )
    html_content = TextAreaField("Content")

    submit = SubmitField("Save Document")
