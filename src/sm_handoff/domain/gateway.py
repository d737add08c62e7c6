"""HandoffGateway Protocol: the external item-transfer collaborator.

The gateway resolves the buyer's trade URL and the seller's delegated Steam
session on its side; callers only pass the order. Implementations raise
HandoffGatewayError for every failure mode (unreachable, timeout, non-2xx,
malformed reply) so callers can log and continue.
"""
from typing import Protocol

from src.sm_order.domain.models import Order


class HandoffGatewayProtocol(Protocol):
    async def notify_sale(self, order: Order) -> None: ...

    async def create_offer(self, order: Order) -> str: ...
