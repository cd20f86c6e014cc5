# casedesk/utils/strings.py

import re


def norm_text(value) -> str:
    """
    Normaliza texto para búsquedas:
    - string
    - trim
    - colapsa espacios
    - lower
    """
    if value is None:
        return ""
    s = re.sub(r"\s+", " ", str(value).strip())
    return s.lower()


def contains_ci(haystack, needle) -> bool:
    """Substring sin distinguir mayúsculas. Needle vacío siempre coincide."""
    if haystack is None:
        return False
    return str(needle or "").lower() in str(haystack).lower()


def derive_code(value, keep: str, length: int) -> str:
    """
    UPPER, elimina todo lo que no entre en la clase `keep` y recorta.
    Ej: derive_code("Acme Shipping & Co.", "A-Z0-9", 10) -> "ACMESHIPPI"
    """
    s = str(value or "").upper()
    s = re.sub(f"[^{keep}]", "", s)
    return s[:length]
