"""Single-slot local cache of the last generated plan."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


logger = logging.getLogger(__name__)


class CachedPlan(BaseModel):
    """The last plan the client generated, with the inputs that produced it."""
    model_config = ConfigDict(populate_by_name=True)

    business_name: str = Field(alias="businessName")
    industry: str
    target_market: str | None = Field(default=None, alias="targetMarket")
    usps: str | None = None
    plan: str


class PlanCache:
    """JSON file holding at most one CachedPlan; ``save`` replaces it."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def save(self, entry: CachedPlan) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(entry.model_dump_json(by_alias=True, indent=2), encoding="utf-8")

    def load(self) -> CachedPlan | None:
        if not self.path.exists():
            return None
        try:
            return CachedPlan.model_validate(json.loads(self.path.read_text(encoding="utf-8")))
        except ValueError as e:  # bad JSON or schema
            logger.warning(f"Ignoring unreadable plan cache at {self.path}: {e}")
            return None

    def clear(self) -> bool:
        """Remove the cached plan. Returns False if there was none."""
        if not self.path.exists():
            return False
        self.path.unlink()
        return True
