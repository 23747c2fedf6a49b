"""Pydantic models for the settlement pass summary.

Serialized with camelCase keys: the cron caller reads
{checked, closed, skippedNoMatch, skippedNoPrice, skippedUnsupported, priceMapSize}.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResolvedMarketItem(_CamelModel):
    id: str
    title: str
    category: str
    symbol: str
    target_price: float
    current_price: float
    winning_option: str


class SettlementRunSummary(_CamelModel):
    checked: int = 0
    closed: int = 0
    skipped_no_match: int = 0
    skipped_no_price: int = 0
    skipped_unsupported: int = 0
    price_map_size: int = 0
    resolved: int = 0
    expired: int = 0
    already_settled: int = 0
    failed: int = 0
    items: list[ResolvedMarketItem] = Field(default_factory=list)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
