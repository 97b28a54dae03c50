from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from cardrewards.domain.models import RewardType, TransactionType


class CalculateRequest(BaseModel):
    amount: Decimal
    category_id: str
    sub_category_id: str | None = None
    transaction_type: TransactionType = TransactionType.BOTH


class CompareRequest(BaseModel):
    card_ids: list[str] = Field(min_length=2, max_length=3)


class CreateRewardRuleRequest(BaseModel):
    credit_card_id: str
    category_id: str
    sub_category_id: str | None = None
    transaction_type: TransactionType | None = None
    reward_type: RewardType
    reward_value: Decimal = Field(ge=0)
    monthly_cap: Decimal | None = Field(default=None, ge=0)
    minimum_spend: Decimal | None = Field(default=None, ge=0)


class UpdateRewardRuleRequest(BaseModel):
    credit_card_id: str | None = None
    category_id: str | None = None
    sub_category_id: str | None = None
    transaction_type: TransactionType | None = None
    reward_type: RewardType | None = None
    reward_value: Decimal | None = Field(default=None, ge=0)
    monthly_cap: Decimal | None = Field(default=None, ge=0)
    minimum_spend: Decimal | None = Field(default=None, ge=0)


class AddUserCardRequest(BaseModel):
    credit_card_id: str
    card_number: str | None = None
    expiry_date: date | None = None
