from datetime import datetime
from models.db import db

PAYMENT_STATUS_COMPLETED = "completed"


class Appointment(db.Model):
    __tablename__ = "appointments"

    id = db.Column(db.Integer, primary_key=True)

    patient_id = db.Column(db.String(64), nullable=False, index=True)
    department = db.Column(db.String(120), nullable=False)
    doctor_id = db.Column(db.String(64), nullable=False, index=True)

    # carried as the strings the booking form submitted
    appointment_date = db.Column(db.String(32), nullable=False)
    appointment_time = db.Column(db.String(32), nullable=False)

    patient_name = db.Column(db.String(120), nullable=False)
    patient_phone = db.Column(db.String(30), nullable=False)
    patient_email = db.Column(db.String(255), nullable=True)
    patient_age = db.Column(db.Integer, nullable=False)
    health_issues = db.Column(db.Text, nullable=False)

    payment_method = db.Column(db.String(60), nullable=True)
    payment_status = db.Column(db.String(20), nullable=False, default=PAYMENT_STATUS_COMPLETED)
    appointment_status = db.Column(db.String(30), nullable=False)
    fee = db.Column(db.Numeric(10, 2), nullable=False)

    transaction_id = db.Column(db.String(64), nullable=True, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "patient_id": self.patient_id,
            "department": self.department,
            "doctor_id": self.doctor_id,
            "appointment_date": self.appointment_date,
            "appointment_time": self.appointment_time,
            "patient_name": self.patient_name,
            "patient_phone": self.patient_phone,
            "patient_email": self.patient_email,
            "patient_age": self.patient_age,
            "health_issues": self.health_issues,
            "payment_method": self.payment_method,
            "payment_status": self.payment_status,
            "appointment_status": self.appointment_status,
            "fee": self.fee,
            "transaction_id": self.transaction_id,
        }
