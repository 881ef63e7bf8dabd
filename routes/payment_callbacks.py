import logging

from flask import Blueprint, current_app, redirect

from routes.payments import request_fields
from services.appointments import APPOINTMENTS_TABLE, AppointmentMappingError, build_appointment_record
from services.callback_state import (
    SEGMENT_ORDER,
    CallbackStateError,
    decode_segments,
    load_signed_state,
)
from utils.audit import log_event
from utils.urls import frontend_url

logger = logging.getLogger(__name__)

callbacks_bp = Blueprint("payment_callbacks", __name__)

SEGMENT_RULE = "/payment-success/" + "/".join(f"<{name}>" for name in SEGMENT_ORDER)


def _fail_redirect(**params):
    return redirect(frontend_url("/payment-fail", **params))


def _complete_payment(booking: dict, payment_info: dict, expected_tran_id=None):
    gateway = current_app.extensions["payment_gateway"]
    tran_id = payment_info.get("tran_id") or expected_tran_id

    if not gateway.validate(payment_info, expected_tran_id=expected_tran_id, expected_amount=booking.get("fee")):
        logger.error("Invalid payment callback for %s: %s", tran_id, payment_info)
        log_event("PAYMENT_VALIDATION_FAILED", entity="payment", entity_id=tran_id, metadata=payment_info)
        return _fail_redirect(error="validation")

    try:
        record = build_appointment_record(booking, payment_info)
    except AppointmentMappingError as exc:
        logger.critical(
            "Paid booking %s could not be mapped, manual follow-up needed: %s booking=%s payment=%s",
            tran_id, exc, booking, payment_info,
        )
        return _fail_redirect(error="database", code=exc.code)

    store = current_app.extensions["appointment_store"]
    result = store.insert(APPOINTMENTS_TABLE, [record])
    if result.error:
        logger.critical(
            "DB insert failed for paid booking %s, manual follow-up needed: %s (code=%s) record=%s payment=%s",
            tran_id, result.error.message, result.error.code, record, payment_info,
        )
        return _fail_redirect(error="database", code=result.error.code)

    appointment = result.data[0] if result.data else {}
    log_event(
        "APPOINTMENT_CREATED",
        entity="appointment",
        entity_id=appointment.get("id"),
        metadata={"tran_id": tran_id, "payment_method": record["payment_method"]},
    )
    return redirect(frontend_url("/payment-success"))


@callbacks_bp.post(SEGMENT_RULE)
def payment_success(**segments):
    try:
        payment_info = request_fields()
        logger.info("Payment success callback: %s", payment_info)
        try:
            booking = decode_segments(segments)
        except CallbackStateError:
            logger.exception("Undecodable success URL")
            return _fail_redirect(error="validation")
        return _complete_payment(booking, payment_info)
    except Exception:
        logger.exception("Success handler error")
        return _fail_redirect()


@callbacks_bp.post("/payment-success/<token>")
def payment_success_signed(token):
    try:
        payment_info = request_fields()
        logger.info("Payment success callback: %s", payment_info)
        try:
            state = load_signed_state(
                token,
                current_app.config["SECRET_KEY"],
                current_app.config.get("CALLBACK_STATE_MAX_AGE_SECONDS", 86400),
            )
        except CallbackStateError as exc:
            logger.error("Rejected callback state: %s", exc)
            log_event("PAYMENT_VALIDATION_FAILED", entity="payment", metadata={"reason": str(exc)})
            return _fail_redirect(error="validation")
        tran_id = state.pop("tran_id", None)
        return _complete_payment(state, payment_info, expected_tran_id=tran_id)
    except Exception:
        logger.exception("Success handler error")
        return _fail_redirect()


@callbacks_bp.post("/payment-fail")
def payment_fail():
    try:
        payment_info = request_fields()
        logger.warning("Payment failed: %s", payment_info)
        log_event("PAYMENT_FAILED", entity="payment", entity_id=payment_info.get("tran_id"), metadata=payment_info)
    except Exception:
        logger.exception("Fail handler error")
    return _fail_redirect()


@callbacks_bp.post("/payment-cancel")
def payment_cancel():
    try:
        payment_info = request_fields()
        logger.warning("Payment cancelled: %s", payment_info)
        log_event("PAYMENT_CANCELLED", entity="payment", entity_id=payment_info.get("tran_id"), metadata=payment_info)
    except Exception:
        logger.exception("Cancel handler error")
    return redirect(frontend_url("/payment-cancel"))


@callbacks_bp.post("/ipn")
def ipn():
    try:
        payment_info = request_fields()
        logger.info("IPN received: %s", payment_info)
        log_event("IPN_RECEIVED", entity="payment", entity_id=payment_info.get("tran_id"), metadata=payment_info)
    except Exception:
        logger.exception("IPN handler error")
    return "IPN received successfully.", 200
