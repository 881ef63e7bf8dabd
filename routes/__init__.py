from .health import health_bp
from .payments import payments_bp
from .payment_callbacks import callbacks_bp
