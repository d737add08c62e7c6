"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Request validation
  2xxx: Account / ledger
  3xxx: Listing
  4xxx: Order
  6xxx: External hand-off / provider
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Request ---

class InvalidRequestError(AppError):
    def __init__(self, detail: str, code: int = 1001) -> None:
        super().__init__(code, f"Invalid request: {detail}", 400)


class SelfTradeError(InvalidRequestError):
    def __init__(self) -> None:
        super().__init__("buyer and seller must be different users", code=1002)


# --- 2xxx: Account ---

class InsufficientFundsError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required} cents, available {available} cents",
            422,
        )


class AccountNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(2002, f"Account not found for user {user_id}", 404)


# --- 3xxx: Listing ---

class ListingNotFoundError(AppError):
    def __init__(self, asset_id: str) -> None:
        super().__init__(3001, f"No active listing for asset {asset_id}", 404)


class ListingConflictError(AppError):
    def __init__(self, asset_id: str, detail: str) -> None:
        super().__init__(3002, f"Listing conflict for asset {asset_id}: {detail}", 409)


class AssetTradeBannedError(AppError):
    def __init__(self, asset_id: str, unban_at: str) -> None:
        super().__init__(3003, f"Asset {asset_id} is trade-banned until {unban_at}", 409)


# --- 4xxx: Order ---

class OrderNotFoundError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(4004, f"Order not found: {order_id}", 404)


class OrderStateConflictError(AppError):
    def __init__(self, order_id: str, status: str, action: str) -> None:
        super().__init__(
            4006, f"Order {order_id} in status {status} cannot be {action}", 409
        )


# --- 6xxx: External hand-off ---

class HandoffGatewayError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(6001, f"External gateway failure: {detail}", 502)


class InventoryUnavailableError(AppError):
    def __init__(self, steam_id: str) -> None:
        super().__init__(6002, f"Inventory provider unavailable for {steam_id}", 502)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
