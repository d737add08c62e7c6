import urllib.request
import urllib.error
import json
import uuid

BASE = "http://localhost:8000/api/v1"
RUN = uuid.uuid4().hex[:6]

def call(method, path, body=None):
    data = json.dumps(body).encode() if body is not None else None
    req = urllib.request.Request(
        f"{BASE}{path}",
        data=data,
        method=method,
        headers={"Content-Type": "application/json"}
    )
    try:
        with urllib.request.urlopen(req) as r:
            return json.loads(r.read())
    except urllib.error.HTTPError as e:
        return json.loads(e.read())

def post(path, body):
    return call("POST", path, body)

def put(path, body=None):
    return call("PUT", path, body)

def get(path):
    return call("GET", path)

def delete(path):
    return call("DELETE", path)

def section(title):
    print(f"\n{'='*60}")
    print(f"### {title} ###")
    print('='*60)

def label(name):
    print(f"\n--- {name} ---")

def out(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))

BUYER = f"buyer_{RUN}"
SELLER = f"seller_{RUN}"
ASSET = f"asset_{RUN}"
ASSET2 = f"asset2_{RUN}"

# ── Ledger ─────────────────────────────────────────────────────
section("T1: LEDGER")

label("T1-1: New user balance (lazily created)")
out(get(f"/balance/{SELLER}"))

label("T1-2: Deposit 100 cents to buyer")
out(post("/deposit", {"user_id": BUYER, "amount_cents": 100}))

label("T1-3: Deposit zero (expect 422)")
out(post("/deposit", {"user_id": BUYER, "amount_cents": 0}))

label("T1-4: Withdraw more than balance (expect 2001)")
out(post("/withdraw", {"user_id": BUYER, "amount_cents": 1000}))

# ── Listings ───────────────────────────────────────────────────
section("T2: LISTINGS")

label("T2-1: Publish item at 40 cents")
out(post("/publish_item", {
    "owner_id": SELLER, "asset_id": ASSET, "name": "AK-47 | Redline",
    "image_url": "https://img.example/ak.png", "price_cents": 40,
}))

label("T2-2: Publish same asset again (expect 3002)")
out(post("/publish_item", {
    "owner_id": SELLER, "asset_id": ASSET, "name": "AK-47 | Redline",
    "image_url": "https://img.example/ak.png", "price_cents": 50,
}))

label("T2-3: Publish a second item at 500 cents")
out(post("/publish_item", {
    "owner_id": SELLER, "asset_id": ASSET2, "name": "AWP | Asiimov",
    "image_url": "https://img.example/awp.png", "price_cents": 500,
}))

label("T2-4: Change price of second item")
out(put(f"/change_price/{ASSET2}", {"price_cents": 450}))

label("T2-5: Seller's active listings")
out(get(f"/selling_items/{SELLER}"))

# ── Settlement ─────────────────────────────────────────────────
section("T3: BUY")

label("T3-1: Self-trade (expect 1002)")
out(post("/buy", {"buyer_id": SELLER, "seller_id": SELLER, "item_id": ASSET, "price_cents": 40}))

label("T3-2: Wrong price (expect 3002)")
out(post("/buy", {"buyer_id": BUYER, "seller_id": SELLER, "item_id": ASSET, "price_cents": 30}))

label("T3-3: Not enough funds for second item (expect 2001)")
out(post("/buy", {"buyer_id": BUYER, "seller_id": SELLER, "item_id": ASSET2, "price_cents": 450}))

label("T3-4: Buy first item")
r = post("/buy", {"buyer_id": BUYER, "seller_id": SELLER, "item_id": ASSET, "price_cents": 40})
out(r)
ORDER_ID = r.get("data", {}).get("order", {}).get("id", "")

label("T3-5: Buy it again (expect 3001)")
out(post("/buy", {"buyer_id": BUYER, "seller_id": SELLER, "item_id": ASSET, "price_cents": 40}))

label("T3-6: Balances after sale (buyer 60, seller 40)")
out(get(f"/balance/{BUYER}"))
out(get(f"/balance/{SELLER}"))

# ── Orders ─────────────────────────────────────────────────────
section("T4: ORDERS")

label("T4-1: Buyer's orders")
out(get(f"/orders/{BUYER}"))

label("T4-2: Outsider cancel (expect 1001)")
out(put(f"/order/cancel/{ORDER_ID}", {"actor_id": f"ghost_{RUN}"}))

label("T4-3: Confirm")
out(put(f"/order/confirm/{ORDER_ID}"))

label("T4-4: Confirm again (changed=false)")
out(put(f"/order/confirm/{ORDER_ID}"))

label("T4-5: Cancel after confirm (expect 4006)")
out(put(f"/order/cancel/{ORDER_ID}", {"actor_id": BUYER}))

label("T4-6: Complete")
out(put(f"/order/complete/{ORDER_ID}"))

# ── Cleanup + admin ────────────────────────────────────────────
section("T5: CLEANUP")

label("T5-1: Remove second item")
out(delete(f"/remove_item/{ASSET2}"))

label("T5-2: Remove it again (expect 3001)")
out(delete(f"/remove_item/{ASSET2}"))

label("T5-3: Ledger conservation")
out(get("/admin/conservation"))

print("\nDone.")
