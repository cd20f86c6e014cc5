# casedesk/__init__.py

from flask import Flask
from .config import Config
from .extensions import db, migrate, csrf

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Inicializar extensiones
    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)

    # Workspaces por sesión (WindowManager + paneles)
    from .services.workspace import WorkspaceRegistry, REGISTRY_KEY
    app.extensions[REGISTRY_KEY] = WorkspaceRegistry(
        ttl_seconds=app.config["WORKSPACE_TTL_SECONDS"],
        max_items=app.config["WORKSPACE_MAX"],
    )

    from .services.record_views import format_status
    app.jinja_env.filters["status_label"] = format_status

    # Registrar blueprints
    from .blueprints.web.routes import web_bp
    from .blueprints.api.routes import api_bp
    from .blueprints.health.routes import health_bp

    csrf.exempt(api_bp)

    app.register_blueprint(web_bp)
    app.register_blueprint(api_bp, url_prefix="/api")
    app.register_blueprint(health_bp, url_prefix="/health")

    return app
