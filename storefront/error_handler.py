"""Error handling helpers for the HTTP adapters."""
from typing import Any, Dict, Optional
import logging

from storefront.integrations.contracts.shopify import ShopifyError

logger = logging.getLogger(__name__)


class ErrorHandler:
    def handle_exception(self, exc: Exception, fallback: str, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Log an unexpected failure and build the JSON error body for a 500 response."""
        if isinstance(exc, ShopifyError):
            logger.error(
                "Shopify operation failed: status=%s cause=%s message=%s context=%s",
                exc.status,
                exc.cause,
                exc.message,
                context or {},
            )
            message = exc.message
        else:
            logger.error("Unhandled exception in storefront API: %s", exc, exc_info=True)
            message = str(exc)
        return {"error": message or fallback}
