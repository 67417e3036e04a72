from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime

from marketplace.documents import DocumentStore, create_document_store_from_env
from marketplace.payments import PaymentConfig, PaymentIntentIssuer
from marketplace.security import AuthPrincipal, JwtAuthConfig, issue_token
from marketplace.store_orders import StoreOrdersMixin
from marketplace.store_suppliers import StoreSuppliersMixin


class MarketplaceStore(StoreSuppliersMixin, StoreOrdersMixin):
    """Marketplace operations over one persisted document.

    Every mutating call loads the full document, changes one collection and
    writes the full document back inside ``documents.transaction()``.
    """

    def __init__(
        self,
        *,
        documents: DocumentStore,
        payments: PaymentIntentIssuer | None = None,
        auth_config: JwtAuthConfig | None = None,
    ) -> None:
        self.documents = documents
        self.payments = payments or PaymentIntentIssuer(PaymentConfig.from_env())
        self.auth_config = auth_config or JwtAuthConfig.from_env()

    def reset(self, environ: Mapping[str, str] | None = None) -> None:
        self.documents = create_document_store_from_env(environ)
        self.payments = PaymentIntentIssuer(PaymentConfig.from_env())
        self.auth_config = JwtAuthConfig.from_env()

    @staticmethod
    def _utcnow_iso() -> str:
        return datetime.now(UTC).isoformat()

    def _issue_token(self, principal: AuthPrincipal) -> str:
        return issue_token(principal, cfg=self.auth_config)


def create_store_from_env(environ: Mapping[str, str] | None = None) -> MarketplaceStore:
    return MarketplaceStore(documents=create_document_store_from_env(environ))


store = create_store_from_env()
