"""
Booking submissions accepted by ``POST /api/pay``.

A ``BookingRequest`` is the validated form of the flat field bag the booking
form posts. Numeric fields stay strings, normalised so that the amount sent
to the gateway is exactly the amount the appointments table can store.
"""
import re
from dataclasses import dataclass, asdict
from decimal import Decimal
from typing import Optional

EMAIL_SENTINEL = "null"
DEFAULT_APPOINTMENT_STATUS = "pending"
MAX_PATIENT_AGE = 150

# fits Numeric(10, 2): up to 8 integer digits, at most 2 decimals, no exponent
FEE_PATTERN = re.compile(r"^[0-9]{1,8}(\.[0-9]{1,2})?\Z")

# column widths of the appointments table
MAX_LENGTHS = {
    "patient_id": 64,
    "department": 120,
    "doctor_id": 64,
    "appointment_date": 32,
    "appointment_time": 32,
    "patient_name": 120,
    "patient_phone": 30,
    "patient_email": 255,
    "appointment_status": 30,
}


class BookingValidationError(ValueError):
    """Raised when a submission cannot be turned into a BookingRequest."""

    def __init__(self, errors: dict):
        super().__init__("Invalid booking request")
        self.errors = errors


@dataclass(frozen=True)
class BookingRequest:
    patient_id: str
    department: str
    doctor_id: str
    appointment_date: str
    appointment_time: str
    patient_name: str
    patient_phone: str
    patient_email: Optional[str]
    patient_age: str
    health_issues: str
    appointment_status: str
    fee: str

    @classmethod
    def from_payload(cls, data: dict) -> "BookingRequest":
        data = data or {}
        errors = {}
        values = {}

        for name in REQUIRED_FIELDS:
            value = _clean(data.get(name))
            if value is None:
                errors[name] = "required"
            values[name] = value

        email = _clean(data.get("patient_email"))
        if email is not None and email.lower() == EMAIL_SENTINEL:
            email = None
        if email is not None and not _is_valid_email(email):
            errors["patient_email"] = "invalid email"
        values["patient_email"] = email

        values["appointment_status"] = _clean(data.get("appointment_status")) or DEFAULT_APPOINTMENT_STATUS

        age = values.get("patient_age")
        if age is not None:
            try:
                parsed_age = int(age)
            except ValueError:
                errors["patient_age"] = "must be a whole number"
            else:
                if parsed_age < 0 or parsed_age > MAX_PATIENT_AGE:
                    errors["patient_age"] = "out of range"
                else:
                    values["patient_age"] = str(parsed_age)

        fee = values.get("fee")
        if fee is not None:
            if not FEE_PATTERN.match(fee):
                errors["fee"] = "must be a plain amount with at most 2 decimal places"
            else:
                parsed_fee = Decimal(fee)
                if parsed_fee <= 0:
                    errors["fee"] = "must be greater than zero"
                else:
                    values["fee"] = format(parsed_fee, "f")

        for name, limit in MAX_LENGTHS.items():
            value = values.get(name)
            if value is not None and len(value) > limit:
                errors.setdefault(name, f"at most {limit} characters")

        if errors:
            raise BookingValidationError(errors)
        return cls(**values)

    @property
    def amount(self) -> Decimal:
        return Decimal(self.fee)

    def to_dict(self) -> dict:
        return asdict(self)


REQUIRED_FIELDS = [
    "patient_id",
    "department",
    "doctor_id",
    "appointment_date",
    "appointment_time",
    "patient_name",
    "patient_phone",
    "patient_age",
    "health_issues",
    "fee",
]


def _clean(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _is_valid_email(email: str) -> bool:
    return "@" in email and len(email) <= 255
