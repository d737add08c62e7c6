"""HttpHandoffGateway: httpx client for the trade-offer service.

POST {HANDOFF_BASE_URL}/notify_sale   sale settled, seller should confirm
POST {HANDOFF_BASE_URL}/create_offer  send the Steam trade offer; replies
                                      {"tradeOfferId": "..."}
"""
import logging
from typing import Any

import httpx

from config.settings import settings
from src.sm_common.errors import HandoffGatewayError
from src.sm_order.domain.models import Order

logger = logging.getLogger(__name__)


class HttpHandoffGateway:
    """Lazily opens one AsyncClient; call aclose() on shutdown."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        notify_timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url or settings.HANDOFF_BASE_URL
        self._timeout = timeout if timeout is not None else settings.HANDOFF_TIMEOUT_SECONDS
        self._notify_timeout = (
            notify_timeout if notify_timeout is not None
            else settings.HANDOFF_NOTIFY_TIMEOUT_SECONDS
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _post(
        self, path: str, payload: dict[str, Any], timeout: float | None = None
    ) -> dict[str, Any]:
        try:
            resp = await self._get_client().post(
                path,
                json=payload,
                timeout=httpx.USE_CLIENT_DEFAULT if timeout is None else timeout,
            )
            resp.raise_for_status()
            data = resp.json() if resp.content else {}
        except httpx.HTTPStatusError as exc:
            raise HandoffGatewayError(
                f"{path} returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise HandoffGatewayError(f"{path} unreachable: {exc!r}") from exc
        except ValueError as exc:
            raise HandoffGatewayError(f"{path} returned a non-JSON body") from exc
        if not isinstance(data, dict):
            raise HandoffGatewayError(f"{path} returned an unexpected payload")
        return data

    async def notify_sale(self, order: Order) -> None:
        await self._post(
            "/notify_sale",
            {
                "orderId": order.id,
                "sellerId": order.seller_id,
                "buyerId": order.buyer_id,
                "assetId": order.asset_id,
                "price": order.price,
            },
            timeout=self._notify_timeout,
        )
        logger.info("Sale notified: order=%s asset=%s", order.id, order.asset_id)

    async def create_offer(self, order: Order) -> str:
        data = await self._post(
            "/create_offer",
            {
                "sellerId": order.seller_id,
                "buyerId": order.buyer_id,
                "assetId": order.asset_id,
            },
        )
        trade_offer_id = data.get("tradeOfferId")
        if not trade_offer_id:
            raise HandoffGatewayError("/create_offer reply carried no tradeOfferId")
        logger.info("Offer created: order=%s trade_offer=%s", order.id, trade_offer_id)
        return str(trade_offer_id)


_gateway: HttpHandoffGateway | None = None


def get_handoff_gateway() -> HttpHandoffGateway:
    """Process-wide gateway instance shared by settlement and order routers."""
    global _gateway  # noqa: PLW0603
    if _gateway is None:
        _gateway = HttpHandoffGateway()
    return _gateway


async def close_handoff_gateway() -> None:
    global _gateway  # noqa: PLW0603
    if _gateway is not None:
        await _gateway.aclose()
        _gateway = None
