"""
Booking state carried through the gateway redirect.

There is no server-side session between ``/api/pay`` and the gateway calling
back, so the booking travels inside the success URL. Two encodings exist:

``segments``
    One path segment per field, in ``SEGMENT_ORDER``. Each value is
    percent-encoded twice: the hosting server decodes the path once before
    routing, and a value that still contained a raw ``/`` at that point would
    split into two segments. An absent email is written as ``EMAIL_SENTINEL``.

``signed``
    A single URL-safe token signed with the app secret. Tampering or expiry
    surfaces as ``CallbackStateError``.
"""
from urllib.parse import quote, unquote

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from services.booking import BookingRequest, EMAIL_SENTINEL

SEGMENT_ORDER = [
    "patient_id",
    "department",
    "doctor_id",
    "appointment_date",
    "appointment_time",
    "patient_name",
    "patient_phone",
    "patient_email",
    "patient_age",
    "health_issues",
    "appointment_status",
    "fee",
]

STATE_SALT = "booking-callback-state"


class CallbackStateError(ValueError):
    pass


def encode_segment(value) -> str:
    if value is None:
        value = EMAIL_SENTINEL
    encoded = quote(str(value), safe="")
    # "." and ".." would be collapsed as dot segments by browsers and servers
    if not encoded.strip("."):
        encoded = encoded.replace(".", "%2E")
    return quote(encoded, safe="")


def decode_segment(segment: str) -> str:
    """Reverse the encoding left on a segment after the server's own decode pass."""
    return unquote(segment)


def encode_segments(booking: BookingRequest) -> str:
    values = booking.to_dict()
    return "/".join(encode_segment(values[name]) for name in SEGMENT_ORDER)


def decode_segments(params: dict) -> dict:
    """
    Turn routed path parameters back into booking fields.

    ``params`` maps field names to the values Flask routed, i.e. after the
    server's decode pass.
    """
    missing = [name for name in SEGMENT_ORDER if name not in params]
    if missing:
        raise CallbackStateError(f"missing segments: {', '.join(missing)}")

    decoded = {name: decode_segment(params[name]) for name in SEGMENT_ORDER}
    if decoded["patient_email"] == EMAIL_SENTINEL:
        decoded["patient_email"] = None
    return decoded


def _serializer(secret_key: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret_key, salt=STATE_SALT)


def sign_state(booking: BookingRequest, tran_id: str, secret_key: str) -> str:
    payload = booking.to_dict()
    payload["tran_id"] = tran_id
    return _serializer(secret_key).dumps(payload)


def load_signed_state(token: str, secret_key: str, max_age: int) -> dict:
    """Return the booking fields plus ``tran_id`` stored in ``token``."""
    try:
        payload = _serializer(secret_key).loads(token, max_age=max_age)
    except SignatureExpired as exc:
        raise CallbackStateError("callback state expired") from exc
    except BadSignature as exc:
        raise CallbackStateError("callback state signature mismatch") from exc

    if not isinstance(payload, dict) or any(name not in payload for name in SEGMENT_ORDER):
        raise CallbackStateError("callback state incomplete")
    return payload
