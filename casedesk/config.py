# casedesk/config.py

import os

class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

    # PostgreSQL (Render / local)
    # Render a veces entrega DATABASE_URL como postgres:// (deprecated)
    uri = os.getenv("DATABASE_URL", "postgresql://localhost/casedesk")
    if uri.startswith("postgres://"):
        uri = uri.replace("postgres://", "postgresql://", 1)

    # Forzar driver pg8000; si ya viene con driver, no lo tocamos
    if uri.startswith("postgresql://") and "+pg8000" not in uri:
        uri = uri.replace("postgresql://", "postgresql+pg8000://", 1)

    SQLALCHEMY_DATABASE_URI = uri
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Valores por defecto de las filas de finanzas
    DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "EUR")

    # Quién firma los cambios de estado en el historial
    STATUS_CHANGED_BY = os.getenv("STATUS_CHANGED_BY", "System User")
    STATUS_CHANGE_REASON = os.getenv("STATUS_CHANGE_REASON", "Status updated via settings")

    # Workspaces en memoria: inactividad máxima (s) y tope por proceso
    WORKSPACE_TTL_SECONDS = int(os.getenv("WORKSPACE_TTL_SECONDS", "3600"))
    WORKSPACE_MAX = int(os.getenv("WORKSPACE_MAX", "500"))


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    WTF_CSRF_ENABLED = False
