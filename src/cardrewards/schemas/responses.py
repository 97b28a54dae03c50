from decimal import Decimal

from pydantic import BaseModel

from cardrewards.domain.models import Bank, CreditCard, RankedResult, RewardRule, RewardType
from cardrewards.engine.formatting import format_reward_amount, format_reward_rate, format_rule_limits


class RankedCard(BaseModel):
    card_id: str
    card_name: str
    bank_name: str | None
    reward_rate: Decimal
    reward_amount: Decimal
    reward_type: RewardType | None
    rule_id: str | None
    reward_rate_display: str
    reward_amount_display: str

    @classmethod
    def from_result(cls, result: RankedResult, rule: RewardRule | None) -> "RankedCard":
        return cls(
            **result.model_dump(),
            reward_rate_display=format_reward_rate(rule),
            reward_amount_display=format_reward_amount(result.reward_amount, result.reward_type),
        )


class CalculateResponse(BaseModel):
    best_card: RankedCard | None
    ranked_cards: list[RankedCard]


class RuleView(BaseModel):
    rule: RewardRule
    category_name: str
    sub_category_name: str | None = None
    reward_rate_display: str
    limits: list[str]
    summary: str


class CardRewardsResponse(BaseModel):
    card: CreditCard
    bank: Bank | None
    rules: list[RuleView]


class ComparisonCell(BaseModel):
    card_id: str
    rule: RewardRule | None
    display: str
    limits: list[str]

    @classmethod
    def from_rule(cls, card_id: str, rule: RewardRule | None) -> "ComparisonCell":
        return cls(card_id=card_id, rule=rule, display=format_reward_rate(rule), limits=format_rule_limits(rule))


class ComparisonRow(BaseModel):
    category_id: str
    category_name: str
    cells: list[ComparisonCell]


class CompareResponse(BaseModel):
    cards: list[CreditCard]
    rows: list[ComparisonRow]


class MessageResponse(BaseModel):
    message: str
