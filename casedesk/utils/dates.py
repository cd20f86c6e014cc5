# casedesk/utils/dates.py

from datetime import datetime, date

# formatos que llegan desde <input type="date"> y de copiar/pegar
_FORMATS = [
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d.%m.%Y",
]


def parse_date(value):
    """
    Convierte strings/datetimes a date. Vacío -> None.
    Lanza ValueError si el texto no es una fecha reconocible.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    s = str(value).strip()
    if not s:
        return None

    # timestamps ISO: nos quedamos con la parte de fecha
    if "T" in s:
        s = s.split("T", 1)[0]

    for fmt in _FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue

    raise ValueError(f"Invalid date: {value!r}")


def format_date(value) -> str:
    """Fecha para documentos: dd/mm/YYYY. None -> ''."""
    if value is None or value == "":
        return ""
    d = parse_date(value)
    return d.strftime("%d/%m/%Y") if d else ""
