import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.appointment import Appointment, PAYMENT_STATUS_COMPLETED

logger = logging.getLogger(__name__)

APPOINTMENTS_TABLE = "appointments"

# gateway response fields that may name the payment method, in order of preference
PAYMENT_METHOD_FIELDS = ("payment_method", "card_type", "card_issuer", "card_brand")


class AppointmentMappingError(ValueError):
    code = "invalid_number"


@dataclass
class InsertError:
    message: str
    code: Optional[str] = None


@dataclass
class InsertResult:
    data: Optional[list] = None
    error: Optional[InsertError] = None


def payment_method_from(payment_info: dict) -> Optional[str]:
    for name in PAYMENT_METHOD_FIELDS:
        value = (payment_info or {}).get(name)
        if value:
            return str(value)
    return None


def build_appointment_record(booking: dict, payment_info: dict) -> dict:
    try:
        patient_age = int(booking["patient_age"])
    except (TypeError, ValueError) as exc:
        raise AppointmentMappingError(f"patient_age is not a number: {booking.get('patient_age')!r}") from exc

    try:
        fee = Decimal(str(booking["fee"]))
    except InvalidOperation as exc:
        raise AppointmentMappingError(f"fee is not a number: {booking.get('fee')!r}") from exc
    if not fee.is_finite():
        raise AppointmentMappingError(f"fee is not a number: {booking.get('fee')!r}")

    return {
        "patient_id": booking["patient_id"],
        "department": booking["department"],
        "doctor_id": booking["doctor_id"],
        "appointment_date": booking["appointment_date"],
        "appointment_time": booking["appointment_time"],
        "patient_name": booking["patient_name"],
        "patient_phone": booking["patient_phone"],
        "patient_email": booking.get("patient_email"),
        "patient_age": patient_age,
        "health_issues": booking["health_issues"],
        "payment_method": payment_method_from(payment_info),
        "payment_status": PAYMENT_STATUS_COMPLETED,
        "appointment_status": booking["appointment_status"],
        "fee": fee,
        "transaction_id": (payment_info or {}).get("tran_id"),
    }


def _error_code(exc: SQLAlchemyError) -> Optional[str]:
    orig = getattr(exc, "orig", None)
    return (
        getattr(orig, "pgcode", None)
        or getattr(orig, "sqlite_errorname", None)
        or getattr(exc, "code", None)
    )


class AppointmentStore:
    """Insert-only access to the appointments table."""

    def insert(self, table: str, records: list) -> InsertResult:
        if table != APPOINTMENTS_TABLE:
            raise ValueError(f"Unsupported table: {table}")

        rows = [Appointment(**record) for record in records]
        try:
            db.session.add_all(rows)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            return InsertResult(error=InsertError(message=str(exc), code=_error_code(exc)))

        return InsertResult(data=[row.to_dict() for row in rows])
