"""
SSLCommerz adapter.

The gateway SDK is the only component that talks to SSLCommerz. Routes never
import the SDK directly; they use the ``SSLCommerzGateway`` registered on
``app.extensions["payment_gateway"]`` so that tests can swap in a fake.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Optional

from sslcommerz_lib import SSLCOMMERZ

logger = logging.getLogger(__name__)

VALID_STATUSES = {"VALID", "VALIDATED"}


class GatewayError(Exception):
    """The gateway SDK raised while talking to SSLCommerz."""


@dataclass
class PaymentSession:
    tran_id: str
    total_amount: str
    currency: str
    success_url: str
    fail_url: str
    cancel_url: str
    ipn_url: str
    cus_name: str
    cus_phone: str
    cus_email: Optional[str] = None
    value_a: Optional[str] = None
    shipping_method: str = "NO"
    product_name: str = "Appointment"
    product_category: str = "Clinic"
    product_profile: str = "non-physical-goods"
    cus_add1: str = "N/A"
    cus_city: str = "N/A"
    cus_postcode: str = "N/A"
    cus_country: str = "Bangladesh"

    def to_post_body(self) -> dict:
        body = {k: v for k, v in self.__dict__.items() if v is not None}
        # SSLCommerz rejects sessions without a customer email
        body.setdefault("cus_email", "N/A")
        return body


@dataclass
class InitResult:
    url: Optional[str]
    response: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return bool(self.url)


class SSLCommerzGateway:
    def __init__(self, store_id, store_passwd, is_live=False, currency="BDT", client=None):
        self.store_id = store_id
        self.store_passwd = store_passwd
        self.is_live = is_live
        self.currency = currency
        self._client = client

    @classmethod
    def from_config(cls, config) -> "SSLCommerzGateway":
        return cls(
            store_id=config.get("STORE_ID"),
            store_passwd=config.get("STORE_PASSWD"),
            is_live=config.get("SSLCOMMERZ_IS_LIVE", False),
            currency=config.get("PAYMENT_CURRENCY", "BDT"),
        )

    @property
    def client(self):
        if self._client is None:
            self._client = SSLCOMMERZ({
                "store_id": self.store_id,
                "store_pass": self.store_passwd,
                "issandbox": not self.is_live,
            })
        return self._client

    def init_session(self, session: PaymentSession) -> InitResult:
        try:
            response = self.client.createSession(session.to_post_body())
        except Exception as exc:
            raise GatewayError(f"session init failed for {session.tran_id}") from exc

        response = response if isinstance(response, dict) else {"response": response}
        return InitResult(url=response.get("GatewayPageURL") or None, response=response)

    def validate(self, payload: dict, expected_tran_id=None, expected_amount=None) -> bool:
        """
        Ask SSLCommerz whether ``payload`` describes a real, completed payment.

        The payload's ``val_id`` is checked against the validation API; the
        validated transaction must match the payload's ``tran_id`` and, when
        given, ``expected_tran_id`` and ``expected_amount``.
        """
        val_id = (payload or {}).get("val_id")
        if not val_id:
            logger.warning("Gateway payload without val_id")
            return False

        try:
            result = self.client.validationTransactionOrder(val_id)
        except Exception as exc:
            raise GatewayError(f"validation failed for val_id {val_id}") from exc

        if not isinstance(result, dict) or result.get("status") not in VALID_STATUSES:
            logger.warning("Validation API rejected val_id %s: %s", val_id, result)
            return False

        tran_id = result.get("tran_id")
        if payload.get("tran_id") and payload.get("tran_id") != tran_id:
            logger.warning("tran_id mismatch for val_id %s", val_id)
            return False
        if expected_tran_id is not None and expected_tran_id != tran_id:
            logger.warning("Validated tran_id %s does not match booking %s", tran_id, expected_tran_id)
            return False

        # non-BDT payments report the converted BDT figure in "amount" and the
        # charged figure in "currency_amount"
        currency_type = result.get("currency_type")
        if currency_type and self.currency and currency_type != self.currency:
            logger.warning("Validated currency %s does not match %s", currency_type, self.currency)
            return False
        reported = result.get("currency_amount") if currency_type else result.get("amount")

        if expected_amount is not None and not _same_amount(reported, expected_amount):
            logger.warning("Validated amount %s does not match booking fee %s", reported, expected_amount)
            return False
        return True


def _same_amount(reported, expected) -> bool:
    try:
        return Decimal(str(reported)) == Decimal(str(expected))
    except InvalidOperation:
        return False
