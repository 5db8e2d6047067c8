from typing import Any, Dict, Optional

from checkout_api.models.gateway import GatewayOrder, GatewayPayment


class PaymentGateway:
    """base payment gateway interface.

    Implementations return plain records or raise a ``GatewayError``
    subclass; they never raise transport-library exceptions.
    """

    name = "base"

    async def create_order(
        self,
        amount_minor: int,
        currency: str,
        receipt: str,
        auto_capture: bool = True,
        notes: Optional[Dict[str, str]] = None,
    ) -> GatewayOrder:  # pragma: no cover
        raise NotImplementedError

    async def fetch_order(self, order_id: str) -> GatewayOrder:  # pragma: no cover
        raise NotImplementedError

    async def fetch_payment(self, payment_id: str) -> GatewayPayment:  # pragma: no cover
        raise NotImplementedError

    async def aclose(self) -> None:
        return None

    def health_check(self) -> Dict[str, Any]:
        return {"status": "unknown", "provider": self.name}
