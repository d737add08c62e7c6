"""Admin application service: read-only ledger health checks."""
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_account.domain.invariants import verify_conservation


class AdminService:
    async def check_conservation(self, db: AsyncSession) -> dict[str, Any]:
        violations = await verify_conservation(db)
        return {"balanced": not violations, "violations": violations}
