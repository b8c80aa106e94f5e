"""Two-tier ledger of intentions that are not implemented yet."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..constants import DEFAULT_TIMEFRAMES, FUTURE_TIERS, TIER_DESCRIPTIONS
from ..errors import InvalidTierError
from ..persistence import FutureItem, StateStore

logger = logging.getLogger(__name__)


class FutureStateLedger:
    """Records ``planned`` and ``aspirational`` items in the state document.

    Planned items get placeholders prepared during bootstrap; aspirational
    items are documentation only.
    """

    def __init__(self, store: StateStore) -> None:
        self._store = store

    async def record(
        self,
        tier: str,
        category: str,
        intention: str,
        timeframe: Optional[str] = None,
        fluxframe_impact: Optional[str] = None,
        placeholder: Optional[str] = None,
        step_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        if tier not in FUTURE_TIERS:
            raise InvalidTierError(tier, FUTURE_TIERS)

        state = await self._store.load()
        items = getattr(state.future_state, tier)
        total = len(state.future_state.planned) + len(state.future_state.aspirational)
        item = FutureItem(
            id=f"FUT-{total + 1:03d}",
            step_id=step_id or state.current_step,
            tier=tier,
            category=category,
            intention=intention,
            timeframe=timeframe or DEFAULT_TIMEFRAMES[tier],
            fluxframe_impact=fluxframe_impact,
            placeholder=placeholder,
        )
        items.append(item)
        await self._store.save(state)
        logger.info(f"Logged {tier} future item {item.id} in category '{category}'")
        return {
            "success": True,
            "item": item.to_payload(),
            "tierCount": len(items),
        }

    async def query(self, tier: Optional[str] = None) -> Dict[str, Any]:
        if tier is not None and tier not in FUTURE_TIERS:
            raise InvalidTierError(tier, FUTURE_TIERS)

        state = await self._store.load()
        if tier is not None:
            items = getattr(state.future_state, tier)
            return {
                "success": True,
                "tier": tier,
                "description": TIER_DESCRIPTIONS[tier],
                "count": len(items),
                "items": [item.to_payload() for item in items],
            }

        result: Dict[str, Any] = {"success": True}
        for name in FUTURE_TIERS:
            items = getattr(state.future_state, name)
            result[name] = {
                "description": TIER_DESCRIPTIONS[name],
                "count": len(items),
                "items": [item.to_payload() for item in items],
            }
        return result
