# casedesk/utils/money.py

import re
from decimal import Decimal, InvalidOperation


def parse_money(value) -> Decimal:
    """
    Convierte precios tecleados en el ledger ('€1,234.50', '1.234,50', '1200')
    a Decimal. Vacío o basura -> 0.
      - negativos con paréntesis: (1,234.50) -> -1234.50
      - el último separador se toma como decimal
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, (int, float)):
        try:
            return Decimal(str(value))
        except InvalidOperation:
            return Decimal("0")

    s = str(value).strip()
    if s == "" or s.lower() in ("nan", "none", "null"):
        return Decimal("0")

    negative = False
    if s.startswith("(") and s.endswith(")"):
        negative = True
        s = s[1:-1].strip()

    # Quitar moneda/letras, dejar dígitos, separadores y signo
    s = re.sub(r"[^\d,.\-]", "", s)
    if s.startswith("-"):
        negative = not negative
        s = s[1:]

    if s in ("", "-"):
        return Decimal("0")

    if "," in s and "." in s:
        if s.rfind(",") > s.rfind("."):
            s = s.replace(".", "").replace(",", ".")
        else:
            s = s.replace(",", "")
    elif s.count(",") == 1:
        s = s.replace(",", ".")
    elif s.count(".") > 1 or s.count(",") > 1:
        s = s.replace(".", "").replace(",", "")

    try:
        val = Decimal(s)
    except InvalidOperation:
        return Decimal("0")
    return -val if negative else val


def parse_quantity(value, minimum: int = 0) -> int:
    """Entero >= minimum; lo que no se pueda leer cae en minimum."""
    try:
        qty = int(Decimal(str(value).strip()))
    except (InvalidOperation, ValueError, TypeError):
        return minimum
    return max(qty, minimum)
