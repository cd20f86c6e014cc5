# casedesk/models/__init__.py

from .customer import Customer
from .port import Port
from .supplier import Supplier
from .service import Service

from .case import Case, STATUS_OPTIONS, CASE_TYPES, CURRENCY_OPTIONS, CONTAINER_TYPES, INCOTERMS
from .case_finance import CaseFinance
from .case_document import CaseDocument
from .case_status_history import CaseStatusHistory
from .document_template import DocumentTemplate
