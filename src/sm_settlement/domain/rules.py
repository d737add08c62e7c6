"""Settlement preconditions.

Pure functions over already-loaded state so the same checks run twice: once
on a plain read before any write, and again on the rows locked inside the
settlement transaction. Each raises the first failed condition.
"""
from src.sm_account.domain.models import Account
from src.sm_common.cents import validate_amount
from src.sm_common.errors import (
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidRequestError,
    ListingConflictError,
    ListingNotFoundError,
    SelfTradeError,
)
from src.sm_listing.domain.models import Listing
from src.sm_settlement.domain.models import SettlementRequest


def check_request(req: SettlementRequest) -> None:
    missing = [
        name
        for name, value in (
            ("buyer_id", req.buyer_id),
            ("seller_id", req.seller_id),
            ("item_id", req.asset_id),
        )
        if not value
    ]
    if missing:
        raise InvalidRequestError(f"missing fields: {', '.join(missing)}")
    try:
        validate_amount(req.price, "price_cents")
    except ValueError as exc:
        raise InvalidRequestError(str(exc)) from None
    if req.buyer_id == req.seller_id:
        raise SelfTradeError()


def check_accounts(accounts: dict[str, Account], req: SettlementRequest) -> None:
    for user_id in (req.buyer_id, req.seller_id):
        if user_id not in accounts:
            raise AccountNotFoundError(user_id)


def check_listing(listing: Listing | None, req: SettlementRequest) -> Listing:
    if listing is None or not listing.published:
        raise ListingNotFoundError(req.asset_id)
    if listing.owner_id != req.seller_id:
        raise ListingConflictError(req.asset_id, "listed by a different seller")
    if listing.price != req.price:
        raise ListingConflictError(
            req.asset_id, f"price is {listing.price} cents, request offered {req.price}"
        )
    return listing


def check_funds(buyer: Account, price: int) -> None:
    if buyer.balance < price:
        raise InsufficientFundsError(price, buyer.balance)
