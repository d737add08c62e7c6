"""Request helpers shared by the integration flows."""

import uuid
from typing import Any

from httpx import AsyncClient


def unique_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:10]}"


async def fund(client: AsyncClient, user_id: str, amount_cents: int) -> None:
    resp = await client.post(
        "/api/v1/deposit", json={"user_id": user_id, "amount_cents": amount_cents}
    )
    assert resp.status_code == 200, resp.text


async def publish(
    client: AsyncClient, owner_id: str, asset_id: str, price_cents: int
) -> dict[str, Any]:
    resp = await client.post(
        "/api/v1/publish_item",
        json={
            "owner_id": owner_id,
            "asset_id": asset_id,
            "name": "M4A4 | Howl",
            "image_url": "https://community.cloudflare.steamstatic.com/economy/image/x",
            "price_cents": price_cents,
        },
    )
    assert resp.status_code == 200, resp.text
    return dict(resp.json()["data"])


async def balance(client: AsyncClient, user_id: str) -> int:
    """Current balance; also creates the account on first call."""
    resp = await client.get(f"/api/v1/balance/{user_id}")
    return int(resp.json()["data"]["balance_cents"])
