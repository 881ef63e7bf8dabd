import pytest

from services.gateway import GatewayError, PaymentSession, SSLCommerzGateway


class FakeSDK:
    def __init__(self, session_response=None, validation=None, error=None):
        self.session_response = session_response
        self.validation = validation
        self.error = error
        self.posted = []
        self.validated = []

    def createSession(self, post_body):
        self.posted.append(post_body)
        if self.error:
            raise self.error
        return self.session_response

    def validationTransactionOrder(self, validation_id):
        self.validated.append(validation_id)
        if self.error:
            raise self.error
        return self.validation


def _session(**overrides):
    fields = dict(
        tran_id="tx-1",
        total_amount="500.50",
        currency="BDT",
        success_url="http://api.test/payment-success/tok",
        fail_url="http://api.test/payment-fail",
        cancel_url="http://api.test/payment-cancel",
        ipn_url="http://api.test/ipn",
        cus_name="Rahim",
        cus_phone="01700000000",
    )
    fields.update(overrides)
    return PaymentSession(**fields)


def _gateway(sdk):
    return SSLCommerzGateway("store", "pass", is_live=False, client=sdk)


def test_init_session_returns_gateway_page_url():
    sdk = FakeSDK(session_response={"status": "SUCCESS", "GatewayPageURL": "https://pay.test/x"})
    result = _gateway(sdk).init_session(_session(value_a="d7"))

    assert result.ok
    assert result.url == "https://pay.test/x"
    body = sdk.posted[0]
    assert body["tran_id"] == "tx-1"
    assert body["product_profile"] == "non-physical-goods"
    assert body["value_a"] == "d7"
    assert body["cus_email"] == "N/A"


def test_init_session_without_url_is_not_ok():
    sdk = FakeSDK(session_response={"status": "FAILED", "failedreason": "Store Credential Error"})
    result = _gateway(sdk).init_session(_session())
    assert not result.ok
    assert result.response["failedreason"] == "Store Credential Error"


def test_init_session_wraps_sdk_errors():
    sdk = FakeSDK(error=ConnectionError("down"))
    with pytest.raises(GatewayError):
        _gateway(sdk).init_session(_session())


def test_validate_accepts_valid_status():
    sdk = FakeSDK(validation={"status": "VALID", "tran_id": "tx-1", "amount": "500.50"})
    gateway = _gateway(sdk)
    assert gateway.validate({"val_id": "v1", "tran_id": "tx-1"}, expected_tran_id="tx-1", expected_amount="500.5")
    assert sdk.validated == ["v1"]


@pytest.mark.parametrize("payload,validation,kwargs", [
    ({"tran_id": "tx-1"}, {"status": "VALID", "tran_id": "tx-1"}, {}),
    ({"val_id": "v1"}, {"status": "INVALID_TRANSACTION"}, {}),
    ({"val_id": "v1", "tran_id": "tx-2"}, {"status": "VALID", "tran_id": "tx-1"}, {}),
    ({"val_id": "v1"}, {"status": "VALIDATED", "tran_id": "tx-1"}, {"expected_tran_id": "tx-9"}),
    ({"val_id": "v1"}, {"status": "VALID", "tran_id": "tx-1", "amount": "10.00"}, {"expected_amount": "500.50"}),
])
def test_validate_rejects(payload, validation, kwargs):
    sdk = FakeSDK(validation=validation)
    assert _gateway(sdk).validate(payload, **kwargs) is False


def test_validate_wraps_sdk_errors():
    sdk = FakeSDK(error=TimeoutError("slow"))
    with pytest.raises(GatewayError):
        _gateway(sdk).validate({"val_id": "v1"})


def test_validate_compares_charged_amount_for_foreign_currency():
    sdk = FakeSDK(validation={
        "status": "VALID",
        "tran_id": "tx-1",
        "amount": "6050.00",
        "currency_type": "USD",
        "currency_amount": "50.00",
    })
    gateway = SSLCommerzGateway("store", "pass", currency="USD", client=sdk)
    assert gateway.validate({"val_id": "v1", "tran_id": "tx-1"}, expected_amount="50.00")


def test_validate_rejects_other_currency():
    sdk = FakeSDK(validation={
        "status": "VALID",
        "tran_id": "tx-1",
        "amount": "500.50",
        "currency_type": "USD",
        "currency_amount": "500.50",
    })
    assert _gateway(sdk).validate({"val_id": "v1"}, expected_amount="500.50") is False


def test_from_config_uses_payment_currency():
    gateway = SSLCommerzGateway.from_config({"STORE_ID": "s", "STORE_PASSWD": "p", "PAYMENT_CURRENCY": "USD"})
    assert gateway.currency == "USD"
