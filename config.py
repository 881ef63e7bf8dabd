import os

from dotenv import load_dotenv

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

load_dotenv(os.path.join(BASE_DIR, ".env"))


class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to the app as clinic.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "clinic.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # SSLCommerz store credentials
    STORE_ID = os.getenv("STORE_ID")
    STORE_PASSWD = os.getenv("STORE_PASSWD")
    SSLCOMMERZ_IS_LIVE = os.getenv("SSLCOMMERZ_IS_LIVE", "false").lower() == "true"
    PAYMENT_CURRENCY = os.getenv("PAYMENT_CURRENCY", "BDT")

    # Public base URL of this API (gateway callbacks) and of the frontend (browser redirects)
    API_URL = os.getenv("API_URL", "http://localhost:5002").rstrip("/")
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173").rstrip("/")

    # "signed" carries the booking as one tamper-evident token,
    # "segments" as one percent-encoded path segment per field
    CALLBACK_STATE_MODE = os.getenv("CALLBACK_STATE_MODE", "signed")
    CALLBACK_STATE_MAX_AGE_SECONDS = int(os.getenv("CALLBACK_STATE_MAX_AGE_SECONDS", "86400"))

    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Basic app settings
    DEBUG = False
