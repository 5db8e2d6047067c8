import unittest

import httpx
from fastapi.testclient import TestClient

from checkout_api.core.errors import ConfigurationError, GatewayRejected, GatewayUnavailable
from checkout_api.core.signature import generate_payment_signature
from checkout_api.main import create_app
from checkout_api.services.payments.mock import MockGateway
from checkout_api.services.payments.razorpay import RazorpayGateway
from tests.utils import KEY_ID, SECRET, make_settings, tamper

CREATE_ORDER = "/api/create-order"
VERIFY_PAYMENT = "/api/verify-payment"
INVALID_AMOUNT = "Invalid amount. Amount must be greater than 0"


class CheckoutApiTestCase(unittest.TestCase):
    raise_server_exceptions = True

    def setUp(self):
        self.gateway = MockGateway(SECRET)
        self.app = create_app(make_settings(), gateway=self.gateway, make_receipt=lambda: "rcpt_test_1")
        self.client = TestClient(self.app, raise_server_exceptions=self.raise_server_exceptions)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def create_order(self, amount=500, **extra) -> dict:
        resp = self.client.post(CREATE_ORDER, json={"amount": amount, **extra})
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()["order"]

    def verify(self, order_id, payment_id, signature):
        return self.client.post(
            VERIFY_PAYMENT,
            json={
                "razorpay_order_id": order_id,
                "razorpay_payment_id": payment_id,
                "razorpay_signature": signature,
            },
        )


class CreateOrderEndpointTests(CheckoutApiTestCase):
    def test_creates_order_in_paise(self):
        resp = self.client.post(CREATE_ORDER, json={"amount": 500})

        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertTrue(data["success"])
        self.assertEqual(data["key_id"], KEY_ID)
        order = data["order"]
        self.assertTrue(order["id"].startswith("order_"))
        self.assertEqual(order["amount"], 50000)
        self.assertEqual(order["currency"], "INR")
        self.assertEqual(order["receipt"], "rcpt_test_1")
        self.assertEqual(order["status"], "created")

        name, (amount_minor, currency, receipt, auto_capture, _notes) = self.gateway.calls[0]
        self.assertEqual((name, amount_minor, currency, receipt, auto_capture), ("create_order", 50000, "INR", "rcpt_test_1", True))

    def test_currency_and_notes_are_forwarded(self):
        order = self.create_order(amount=20, currency="usd", notes={"userEmail": "a@example.com"})
        self.assertEqual(order["currency"], "USD")
        self.assertEqual(self.gateway.orders[order["id"]].notes["userEmail"], "a@example.com")

    def test_invalid_amounts_are_rejected_without_gateway_call(self):
        for body in ({"amount": 0}, {"amount": -10}, {"amount": "abc"}, {"amount": None}, {}, {"amount": 0.5}):
            with self.subTest(body=body):
                resp = self.client.post(CREATE_ORDER, json=body)
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(resp.json(), {"success": False, "error": INVALID_AMOUNT})
        self.assertEqual(self.gateway.calls, [])

    def test_missing_body_is_an_invalid_amount(self):
        resp = self.client.post(CREATE_ORDER)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], INVALID_AMOUNT)
        self.assertEqual(self.gateway.calls, [])

    def test_invalid_currency(self):
        resp = self.client.post(CREATE_ORDER, json={"amount": 10, "currency": "rupees"})
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["success"])
        self.assertEqual(self.gateway.calls, [])

    def test_gateway_failure_is_500_with_detail_but_no_secret(self):
        self.gateway.fail_with = GatewayUnavailable("Authentication failed", http_status=401)
        resp = self.client.post(CREATE_ORDER, json={"amount": 500})

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(
            resp.json(),
            {"success": False, "error": "Failed to create order", "message": "Authentication failed"},
        )
        self.assertNotIn(SECRET, resp.text)


class VerifyPaymentEndpointTests(CheckoutApiTestCase):
    def test_end_to_end_captured_payment(self):
        order = self.create_order(amount=500)
        self.assertEqual(order["amount"], 50000)
        payment = self.gateway.add_payment(order["id"], method="upi")

        resp = self.verify(order["id"], payment.id, self.gateway.sign(order["id"], payment.id))

        self.assertEqual(resp.status_code, 200, resp.text)
        data = resp.json()
        self.assertTrue(data["success"])
        self.assertEqual(data["payment"]["id"], payment.id)
        self.assertEqual(data["payment"]["order_id"], order["id"])
        self.assertEqual(data["payment"]["amount"], 50000)
        self.assertEqual(data["payment"]["currency"], "INR")
        self.assertEqual(data["payment"]["status"], "captured")
        self.assertEqual(data["payment"]["method"], "upi")

    def test_resubmission_gives_same_answer(self):
        order = self.create_order()
        payment = self.gateway.add_payment(order["id"])
        signature = self.gateway.sign(order["id"], payment.id)

        first = self.verify(order["id"], payment.id, signature)
        second = self.verify(order["id"], payment.id, signature)
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json(), second.json())

    def test_end_to_end_altered_signature(self):
        order = self.create_order(amount=500)
        payment = self.gateway.add_payment(order["id"])
        signature = tamper(self.gateway.sign(order["id"], payment.id))

        resp = self.verify(order["id"], payment.id, signature)

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"success": False, "error": "Invalid signature"})
        # no fetch happens after a bad signature
        self.assertEqual([name for name, _ in self.gateway.calls], ["create_order"])

    def test_short_signature_is_invalid_not_500(self):
        order = self.create_order()
        payment = self.gateway.add_payment(order["id"])
        resp = self.verify(order["id"], payment.id, "abc")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Invalid signature")

    def test_missing_fields(self):
        resp = self.client.post(VERIFY_PAYMENT, json={"razorpay_order_id": "order_abc"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(
            resp.json(),
            {
                "success": False,
                "error": "Missing required fields",
                "fields": ["razorpay_payment_id", "razorpay_signature"],
            },
        )

    def test_missing_body_names_every_field(self):
        resp = self.client.post(VERIFY_PAYMENT)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(len(resp.json()["fields"]), 3)

    def test_not_captured_reports_status(self):
        order = self.create_order()
        payment = self.gateway.add_payment(order["id"], status="authorized")

        resp = self.verify(order["id"], payment.id, self.gateway.sign(order["id"], payment.id))

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"success": False, "error": "Payment not captured", "status": "authorized"})

    def test_amount_mismatch_reports_both_amounts(self):
        self.gateway.add_order("order_abc", amount=10000)
        payment = self.gateway.add_payment("order_abc", amount=9999)

        resp = self.verify("order_abc", payment.id, self.gateway.sign("order_abc", payment.id))

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(
            resp.json(),
            {"success": False, "error": "Payment amount mismatch", "order_amount": 10000, "payment_amount": 9999},
        )

    def test_gateway_error_is_generic_500(self):
        order = self.create_order()
        payment = self.gateway.add_payment(order["id"])
        signature = self.gateway.sign(order["id"], payment.id)
        self.gateway.fail_with = GatewayRejected("internal boom detail", http_status=500)

        resp = self.verify(order["id"], payment.id, signature)

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"success": False, "error": "Payment verification failed"})
        self.assertNotIn("boom", resp.text)

    def test_non_string_field_is_bad_request(self):
        resp = self.client.post(
            VERIFY_PAYMENT,
            json={"razorpay_order_id": 123, "razorpay_payment_id": "pay_1", "razorpay_signature": "x"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"success": False, "error": "Invalid request body"})


class RoutingTests(CheckoutApiTestCase):
    def test_get_on_post_routes_is_405(self):
        for path in (CREATE_ORDER, VERIFY_PAYMENT):
            with self.subTest(path=path):
                resp = self.client.get(path)
                self.assertEqual(resp.status_code, 405)
                self.assertEqual(resp.json(), {"success": False, "error": "Method not allowed"})

    def test_plain_options_is_200(self):
        for path in (CREATE_ORDER, VERIFY_PAYMENT):
            with self.subTest(path=path):
                resp = self.client.options(path)
                self.assertEqual(resp.status_code, 200)
                self.assertIn("POST", resp.headers["allow"])
        self.assertEqual(self.gateway.calls, [])

    def test_unknown_route_is_404(self):
        resp = self.client.post("/api/refund")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"success": False, "error": "Not found"})

    def test_malformed_json_is_400(self):
        resp = self.client.post(CREATE_ORDER, content=b"{not json", headers={"Content-Type": "application/json"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"success": False, "error": "Invalid request body"})

    def test_health_and_index(self):
        for path in ("/health", "/api"):
            with self.subTest(path=path):
                resp = self.client.get(path)
                self.assertEqual(resp.status_code, 200)
                data = resp.json()
                self.assertEqual(data["status"], "healthy")
                self.assertEqual(data["gateway"]["provider"], "mock")
                self.assertEqual(
                    data["endpoints"],
                    {"createOrder": CREATE_ORDER, "verifyPayment": VERIFY_PAYMENT},
                )
                self.assertNotIn(SECRET, resp.text)

    def test_openapi_documents_error_bodies(self):
        resp = self.client.get("/openapi.json")
        self.assertEqual(resp.status_code, 200)
        responses = resp.json()["paths"][VERIFY_PAYMENT]["post"]["responses"]
        self.assertIn("400", responses)
        self.assertIn("ErrorResponse", resp.json()["components"]["schemas"])

    def test_cors_preflight(self):
        resp = self.client.options(
            CREATE_ORDER,
            headers={"Origin": "https://shop.example", "Access-Control-Request-Method": "POST"},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.headers["access-control-allow-origin"], "*")


class UnexpectedErrorTests(CheckoutApiTestCase):
    raise_server_exceptions = False

    def test_unexpected_exception_during_verification(self):
        async def explode(payment_id):
            raise RuntimeError("kaboom with internals")

        self.gateway.fetch_payment = explode
        order = self.create_order()
        payment = self.gateway.add_payment(order["id"])

        resp = self.verify(order["id"], payment.id, self.gateway.sign(order["id"], payment.id))

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"success": False, "error": "Payment verification failed"})
        self.assertNotIn("kaboom", resp.text)

    def test_unexpected_exception_elsewhere_is_internal_error(self):
        async def explode(*args, **kwargs):
            raise RuntimeError("kaboom with internals")

        self.gateway.create_order = explode
        resp = self.client.post(CREATE_ORDER, json={"amount": 500})

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"success": False, "error": "Internal server error"})
        self.assertNotIn("kaboom", resp.text)


class StartupTests(unittest.TestCase):
    def test_refuses_to_start_without_secret(self):
        app = create_app(make_settings(RAZORPAY_KEY_SECRET=""), gateway=MockGateway())
        with self.assertRaises(ConfigurationError):
            with TestClient(app):
                pass

    def test_builds_gateway_from_settings(self):
        app = create_app(make_settings(PAYMENTS_PROVIDER="mock"))
        with TestClient(app) as client:
            self.assertIsInstance(app.state.gateway, MockGateway)
            resp = client.post(CREATE_ORDER, json={"amount": 1})
            self.assertEqual(resp.status_code, 200)
            self.assertEqual(resp.json()["order"]["amount"], 100)
            self.assertTrue(resp.json()["order"]["receipt"].startswith("order_rcpt_"))


class GatewayTransportErrorTests(unittest.TestCase):
    def setUp(self):
        def refuse(request):
            raise httpx.ConnectError("[Errno 111] Connection refused to 10.0.0.5:443", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="https://api.razorpay.test/v1")
        gateway = RazorpayGateway(KEY_ID, SECRET, client=client)
        app = create_app(make_settings(PAYMENTS_PROVIDER="razorpay"), gateway=gateway)
        self.client = TestClient(app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def test_create_order_hides_transport_detail(self):
        resp = self.client.post(CREATE_ORDER, json={"amount": 500})

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(
            resp.json(),
            {"success": False, "error": "Failed to create order", "message": "Payment gateway unavailable"},
        )
        for leaked in ("ConnectError", "Errno", "10.0.0.5"):
            self.assertNotIn(leaked, resp.text)

    def test_verify_payment_hides_transport_detail(self):
        resp = self.client.post(
            VERIFY_PAYMENT,
            json={
                "razorpay_order_id": "order_1",
                "razorpay_payment_id": "pay_1",
                "razorpay_signature": generate_payment_signature("order_1", "pay_1", SECRET),
            },
        )
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"success": False, "error": "Payment verification failed"})
