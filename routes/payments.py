import logging
import uuid

from flask import Blueprint, request, jsonify, current_app

from services.booking import BookingRequest, BookingValidationError
from services.callback_state import encode_segments, sign_state
from services.gateway import GatewayError, PaymentSession
from utils.audit import log_event
from utils.urls import api_url

logger = logging.getLogger(__name__)

payments_bp = Blueprint("payments", __name__, url_prefix="/api")


def request_fields() -> dict:
    """Booking forms post either JSON or urlencoded bodies."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def _success_url(booking: BookingRequest, tran_id: str) -> str:
    if current_app.config.get("CALLBACK_STATE_MODE") == "segments":
        return api_url(f"/payment-success/{encode_segments(booking)}")
    token = sign_state(booking, tran_id, current_app.config["SECRET_KEY"])
    return api_url(f"/payment-success/{token}")


def build_payment_session(booking: BookingRequest, tran_id: str) -> PaymentSession:
    return PaymentSession(
        tran_id=tran_id,
        total_amount=booking.fee,
        currency=current_app.config.get("PAYMENT_CURRENCY", "BDT"),
        success_url=_success_url(booking, tran_id),
        fail_url=api_url("/payment-fail"),
        cancel_url=api_url("/payment-cancel"),
        ipn_url=api_url("/ipn"),
        cus_name=booking.patient_name,
        cus_email=booking.patient_email,
        cus_phone=booking.patient_phone,
        value_a=booking.doctor_id,
    )


@payments_bp.post("/pay")
def start_payment():
    try:
        booking = BookingRequest.from_payload(request_fields())
    except BookingValidationError as exc:
        return jsonify(error="Invalid booking request", details=exc.errors), 400

    tran_id = str(uuid.uuid4())
    gateway = current_app.extensions["payment_gateway"]

    try:
        session = build_payment_session(booking, tran_id)
        result = gateway.init_session(session)
    except GatewayError:
        logger.exception("SSLCommerz session init raised for %s", tran_id)
        return jsonify(error="Payment initiation failed"), 500
    except Exception:
        logger.exception("Unexpected error starting payment %s", tran_id)
        return jsonify(error="Payment initiation failed"), 500

    if not result.ok:
        logger.error("SSLCommerz init error for %s: %s", tran_id, result.response)
        return jsonify(error="Failed to initiate payment", details=result.response), 500

    log_event(
        "PAYMENT_SESSION_CREATED",
        entity="payment",
        entity_id=tran_id,
        metadata={"patient_id": booking.patient_id, "doctor_id": booking.doctor_id, "fee": booking.fee},
    )
    return jsonify(url=result.url), 200
