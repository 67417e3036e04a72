"""Payment intent issuance.

Live mode talks to the Stripe REST API; without a usable secret key every
intent is a local mock so checkout flows keep working in development.

Configuration via environment variables:
  STRIPE_SECRET_KEY     = sk_...                      (live mode only when it starts with sk_)
  STRIPE_API_BASE       = https://api.stripe.com/v1
  PAYMENT_TIMEOUT_S     = 20
  PLATFORM_FEE_PERCENT  = 5                           (applied when a destination account is set)
"""

from __future__ import annotations

import logging
import math
import os
import uuid
from dataclasses import dataclass
from typing import Any

import requests

from marketplace.errors import UpstreamError

logger = logging.getLogger(__name__)

STRIPE_API_BASE = "https://api.stripe.com/v1"


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if math.isfinite(value) else default


def platform_fee_cents(amount_cents: int, fee_percent: float) -> int:
    """Fee rounded half up, matching how amounts are rounded at checkout."""
    return int(math.floor(amount_cents * fee_percent / 100 + 0.5))


@dataclass
class PaymentConfig:
    secret_key: str = ""
    api_base: str = STRIPE_API_BASE
    timeout_s: float = 20.0
    platform_fee_percent: float = 5.0

    @property
    def live(self) -> bool:
        return self.secret_key.startswith("sk_")

    @classmethod
    def from_env(cls) -> "PaymentConfig":
        return cls(
            secret_key=os.environ.get("STRIPE_SECRET_KEY", "").strip(),
            api_base=os.environ.get("STRIPE_API_BASE", "").strip().rstrip("/") or STRIPE_API_BASE,
            timeout_s=_env_float("PAYMENT_TIMEOUT_S", 20.0),
            platform_fee_percent=_env_float("PLATFORM_FEE_PERCENT", 5.0),
        )


@dataclass
class PaymentIntent:
    client_secret: str
    mode: str
    intent_id: str | None = None
    application_fee_cents: int | None = None


def _form_fields(prefix: str, values: dict[str, Any]) -> dict[str, str]:
    return {f"{prefix}[{key}]": str(value) for key, value in values.items() if value is not None}


class PaymentIntentIssuer:
    def __init__(self, config: PaymentConfig | None = None) -> None:
        self.config = config or PaymentConfig.from_env()
        logger.info("payments_mode mode=%s", self.mode)

    @property
    def mode(self) -> str:
        return "live" if self.config.live else "mock"

    def create_intent(
        self,
        *,
        amount_cents: int,
        currency: str = "eur",
        receipt_email: str | None = None,
        destination_account: str | None = None,
        platform_fee_percent: float | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> PaymentIntent:
        fee_percent = self.config.platform_fee_percent if platform_fee_percent is None else platform_fee_percent
        fee = platform_fee_cents(amount_cents, fee_percent) if destination_account else None
        if not self.config.live:
            return PaymentIntent(
                client_secret=f"pi_mock_{uuid.uuid4().hex[:16]}",
                mode="mock",
                application_fee_cents=fee,
            )

        form: dict[str, str] = {
            "amount": str(int(amount_cents)),
            "currency": currency,
            "automatic_payment_methods[enabled]": "true",
        }
        if receipt_email:
            form["receipt_email"] = receipt_email
        form.update(_form_fields("metadata", metadata or {}))
        if destination_account:
            form["application_fee_amount"] = str(fee)
            form["transfer_data[destination]"] = destination_account

        try:
            response = requests.post(
                f"{self.config.api_base}/payment_intents",
                data=form,
                auth=(self.config.secret_key, ""),
                timeout=self.config.timeout_s,
            )
        except requests.exceptions.Timeout as e:
            raise UpstreamError(f"payment provider timed out: {e}", code="PAYMENT_UPSTREAM_TIMEOUT") from e
        except requests.exceptions.RequestException as e:
            raise UpstreamError(f"payment provider unreachable: {e}", code="PAYMENT_UPSTREAM_UNAVAILABLE") from e

        if response.status_code >= 400:
            raise UpstreamError(
                f"payment provider rejected intent with status {response.status_code}: {response.text[:200]}"
            )
        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError("payment provider returned invalid JSON") from e
        client_secret = body.get("client_secret") if isinstance(body, dict) else None
        if not client_secret:
            raise UpstreamError("payment provider response missing client_secret")
        return PaymentIntent(
            client_secret=str(client_secret),
            mode="live",
            intent_id=str(body.get("id") or "") or None,
            application_fee_cents=fee,
        )
