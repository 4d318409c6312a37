import base64
import hashlib
import hmac
import logging

import requests

from craftlance.utils.exceptions import GatewayError

logger = logging.getLogger(__name__)


class PaymentGateway:
    """Client for the SPWorlds card payment API.

    Webhook bodies are signed with HMAC-SHA256 keyed by the card token and
    sent base64-encoded in the ``X-Body-Hash`` header.
    """

    SIGNATURE_HEADER = "X-Body-Hash"

    def __init__(self, card_id, token, api_url, timeout=10, http=None):
        self.card_id = card_id
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()

    @classmethod
    def from_config(cls, config):
        return cls(
            card_id=config.get("SPWORLDS_ID"),
            token=config.get("SPWORLDS_TOKEN"),
            api_url=config["SPWORLDS_API_URL"],
            timeout=config.get("PAYMENT_TIMEOUT", 10),
        )

    def sign(self, body: bytes) -> str:
        digest = hmac.new((self.token or "").encode(), body, hashlib.sha256).digest()
        return base64.b64encode(digest).decode()

    def validate_hash(self, body: bytes, signature) -> bool:
        if not self.token or not signature:
            return False
        return hmac.compare_digest(self.sign(body), signature)

    def _auth_header(self):
        key = base64.b64encode(f"{self.card_id}:{self.token}".encode()).decode()
        return {"Authorization": f"Bearer {key}"}

    def create_payment(self, amount, redirect_url, webhook_url, data) -> str:
        try:
            res = self.http.post(
                f"{self.api_url}/payment",
                json={
                    "amount": float(amount),
                    "redirectUrl": redirect_url,
                    "webhookUrl": webhook_url,
                    "data": data,
                },
                headers=self._auth_header(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Payment init request failed: %s", e)
            raise GatewayError() from e

        if not res.ok:
            logger.error("Payment init failed with %s: %s", res.status_code, res.text)
            raise GatewayError(f"Payment init failed: {res.status_code}")

        try:
            return res.json()["url"]
        except (ValueError, KeyError) as e:
            logger.error("Unexpected payment init response: %s", res.text)
            raise GatewayError() from e
