"""Ledger conservation checks.

Conservation law:
    sum(balances) + sum(PENDING withdrawals)
        == sum(COMPLETED deposits) - sum(COMPLETED withdrawals)

Settlement pairing: every PURCHASE has a SALE of the same amount, so the
two totals must match.
"""
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

_TOTAL_BALANCE_SQL = text("SELECT COALESCE(SUM(balance), 0) FROM accounts")

_SUM_BY_KIND_SQL = text("""
    SELECT COALESCE(SUM(amount), 0)
    FROM account_transactions
    WHERE kind = :kind AND status = :status
""")


async def _sum(db: AsyncSession, kind: str, status: str) -> int:
    result = await db.execute(_SUM_BY_KIND_SQL, {"kind": kind, "status": status})
    return int(result.scalar_one())


async def verify_conservation(db: AsyncSession) -> list[str]:
    """Check the ledger conservation law. Returns a list of violation strings."""
    violations: list[str] = []
    balances = int((await db.execute(_TOTAL_BALANCE_SQL)).scalar_one())
    pending_withdrawals = await _sum(db, "WITHDRAWAL", "PENDING")
    deposits = await _sum(db, "DEPOSIT", "COMPLETED")
    completed_withdrawals = await _sum(db, "WITHDRAWAL", "COMPLETED")
    purchases = await _sum(db, "PURCHASE", "COMPLETED")
    sales = await _sum(db, "SALE", "COMPLETED")

    held = balances + pending_withdrawals
    net_deposits = deposits - completed_withdrawals
    if held != net_deposits:
        msg = (
            f"Conservation violated: balances({balances}) + "
            f"pending_withdrawals({pending_withdrawals}) = {held} != "
            f"deposits({deposits}) - completed_withdrawals({completed_withdrawals}) "
            f"= {net_deposits}"
        )
        violations.append(msg)
        logger.error(msg)
    if purchases != sales:
        msg = f"Settlement pairing violated: purchases({purchases}) != sales({sales})"
        violations.append(msg)
        logger.error(msg)
    return violations
