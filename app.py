import logging

import click
from flask import Flask
from flask_cors import CORS
from flask_migrate import Migrate

from config import Config
from routes import health_bp, payments_bp, callbacks_bp

from models import db
from services.appointments import AppointmentStore
from services.gateway import SSLCommerzGateway

logger = logging.getLogger(__name__)


def configure_logging(level_name):
    logging.basicConfig(
        level=getattr(logging, str(level_name).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def create_app(config_object=Config, gateway=None, appointment_store=None):
    app = Flask(__name__)
    app.config.from_object(config_object)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    if app.config.get("CALLBACK_STATE_MODE") not in ("signed", "segments"):
        raise ValueError(f"Unknown CALLBACK_STATE_MODE: {app.config.get('CALLBACK_STATE_MODE')}")
    if not app.config.get("STORE_ID") or not app.config.get("STORE_PASSWD"):
        logger.warning("STORE_ID/STORE_PASSWD not set; payment initiation will fail")

    CORS(app, origins=app.config.get("CORS_ORIGINS", "*"))

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(payments_bp)
    app.register_blueprint(callbacks_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    # External collaborators, built once from config
    app.extensions["payment_gateway"] = gateway or SSLCommerzGateway.from_config(app.config)
    app.extensions["appointment_store"] = appointment_store or AppointmentStore()

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        return resp

    register_cli(app)

    return app

#-------------------------

def register_cli(app):
    @app.cli.command("init-db")
    @click.option("--drop", is_flag=True, help="Drop existing tables first.")
    def init_db(drop):
        """Create the appointments and audit tables (local development)."""
        if drop:
            db.drop_all()
        db.create_all()
        click.echo("Database tables created")

#-------------------------


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
