import pytest

from app import create_app
from config import Config
from models import db
from services.gateway import InitResult

CHECKOUT_URL = "https://sandbox.sslcommerz.com/EasyCheckOut/testcde"


class TestConfig(Config):
    __test__ = False

    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    STORE_ID = "teststore"
    STORE_PASSWD = "teststore@ssl"
    API_URL = "http://api.test"
    FRONTEND_URL = "http://front.test"
    CALLBACK_STATE_MODE = "signed"
    CORS_ORIGINS = "*"
    LOG_LEVEL = "WARNING"


class SegmentsConfig(TestConfig):
    CALLBACK_STATE_MODE = "segments"


class FakeGateway:
    """Stands in for SSLCommerzGateway; records what the app asked of it."""

    def __init__(self):
        self.sessions = []
        self.validated = []
        self.init_result = InitResult(url=CHECKOUT_URL, response={"status": "SUCCESS", "GatewayPageURL": CHECKOUT_URL})
        self.init_error = None
        self.valid = True

    def init_session(self, session):
        self.sessions.append(session)
        if self.init_error:
            raise self.init_error
        return self.init_result

    def validate(self, payload, expected_tran_id=None, expected_amount=None):
        self.validated.append({
            "payload": payload,
            "expected_tran_id": expected_tran_id,
            "expected_amount": expected_amount,
        })
        return self.valid


def booking_payload(**overrides):
    data = {
        "patient_id": "p1",
        "department": "cardiology",
        "doctor_id": "d7",
        "appointment_date": "2026-10-20",
        "appointment_time": "10:30",
        "patient_name": "Rahim Uddin",
        "patient_phone": "01700000000",
        "patient_email": None,
        "patient_age": "42",
        "health_issues": "chest pain & shortness of breath",
        "appointment_status": "pending",
        "fee": "500.50",
    }
    data.update(overrides)
    return data


def payment_payload(**overrides):
    data = {
        "tran_id": "tx-1",
        "val_id": "val-1",
        "amount": "500.50",
        "card_type": "BKASH-BKash",
        "status": "VALID",
    }
    data.update(overrides)
    return data


@pytest.fixture
def gateway():
    return FakeGateway()


def _make_app(config, gateway):
    app = create_app(config, gateway=gateway)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app(gateway):
    yield from _make_app(TestConfig, gateway)


@pytest.fixture
def segments_app(gateway):
    yield from _make_app(SegmentsConfig, gateway)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def segments_client(segments_app):
    return segments_app.test_client()
