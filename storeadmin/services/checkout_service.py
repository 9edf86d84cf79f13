"""
Checkout Service.

Client for the purchase flow: start a checkout session, confirm payment
(simulated or through Mercado Pago) and poll its status.
"""

import logging
from typing import Optional

from storeadmin.errors import NotAuthenticated
from storeadmin.models.checkout import (
    CheckoutSession,
    CheckoutStatus,
    PaymentConfirmation,
    ProductType,
    ProviderPreference,
    ProviderResult,
    SaleRecord,
)
from storeadmin.services.auth import AuthProvider
from storeadmin.services.http_client import ApiClient
import config.settings as settings

logger = logging.getLogger(__name__)


class CheckoutService:
    """
    Forwards checkout calls and types their responses.

    Every call needs a bearer token except mp_result, which the payment
    provider's return page uses before the user is known.
    """

    def __init__(
        self,
        client: ApiClient,
        auth: AuthProvider,
        checkout_path: str = settings.CHECKOUT_PATH,
        sale_path: str = settings.SALE_PATH
    ):
        self.client = client
        self.auth = auth
        self.checkout_path = checkout_path.rstrip("/")
        self.sale_path = sale_path.rstrip("/")

    def _token(self) -> str:
        token = self.auth.get_token()
        if not token:
            raise NotAuthenticated()
        return token

    def start_checkout(self, product_type: ProductType, product_id: int) -> CheckoutSession:
        """Open a pending checkout session for one product."""
        token = self._token()
        tipo = ProductType(product_type).value
        data = self.client.post(
            f"{self.checkout_path}/start",
            json={"tipo": tipo, "id": product_id},
            token=token
        )
        session = CheckoutSession.from_dict(data)
        logger.info(f"Started checkout {session.session_id} for {tipo} {product_id}")
        return session

    def simulate_success(self, session_id: str) -> PaymentConfirmation:
        """Mark a session as paid without a payment provider (test/demo flow)."""
        token = self._token()
        data = self.client.post(
            f"{self.checkout_path}/simulate-success",
            json={"sessionId": session_id},
            token=token
        )
        confirmation = PaymentConfirmation.from_dict(data)
        logger.info(f"Checkout {session_id} paid, sale {confirmation.sale.id}")
        return confirmation

    def get_status(self, session_id: str) -> CheckoutStatus:
        token = self._token()
        data = self.client.get(
            f"{self.checkout_path}/status",
            params={"sessionId": session_id},
            token=token
        )
        return CheckoutStatus.from_dict(data)

    def mp_start_preference(self, product_type: ProductType, product_id: int) -> ProviderPreference:
        """Create a Mercado Pago preference; redirect the buyer to init_point."""
        token = self._token()
        data = self.client.post(
            f"{self.checkout_path}/mp/start",
            json={"tipo": ProductType(product_type).value, "id": product_id},
            token=token
        )
        preference = ProviderPreference.from_dict(data)
        logger.info(f"Created Mercado Pago preference {preference.id}")
        return preference

    def mp_confirm(self, payment_id: str) -> PaymentConfirmation:
        token = self._token()
        data = self.client.get(
            f"{self.checkout_path}/mp/confirm",
            params={"payment_id": payment_id},
            token=token
        )
        return PaymentConfirmation.from_dict(data)

    def mp_result(self, payment_id: str) -> ProviderResult:
        """Look up a Mercado Pago payment outcome. No credential required."""
        data = self.client.get(
            f"{self.checkout_path}/mp/result",
            params={"payment_id": payment_id}
        )
        return ProviderResult.from_dict(data)

    def get_sale(self, sale_id: int) -> SaleRecord:
        token = self._token()
        data = self.client.get(f"{self.sale_path}/{sale_id}", token=token)
        return SaleRecord.from_dict(data)
