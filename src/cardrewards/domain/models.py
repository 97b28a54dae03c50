from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TransactionType(str, Enum):
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"
    BOTH = "BOTH"


class RewardType(str, Enum):
    CASHBACK = "CASHBACK"
    POINTS = "POINTS"
    MILES = "MILES"


class Role(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class CatalogEntity(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str


class Bank(CatalogEntity):
    name: str
    logo: str | None = None


class CreditCard(CatalogEntity):
    name: str
    bank_id: str
    image: str | None = None
    annual_fee: Decimal = Field(default=Decimal("0"), ge=0)


class SubCategory(CatalogEntity):
    name: str
    category_id: str


class Category(CatalogEntity):
    name: str
    sub_categories: list[SubCategory] = Field(default_factory=list)


class RewardRule(CatalogEntity):
    credit_card_id: str
    category_id: str
    sub_category_id: str | None = None
    transaction_type: TransactionType = TransactionType.BOTH
    reward_type: RewardType
    reward_value: Decimal = Field(ge=0)
    monthly_cap: Decimal | None = Field(default=None, ge=0)
    minimum_spend: Decimal | None = Field(default=None, ge=0)


class UserCard(CatalogEntity):
    user_id: str
    credit_card_id: str
    card_number: str | None = None
    expiry_date: date | None = None


class AuthorizedCaller(BaseModel):
    """Identity already checked by the adapter layer."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class RewardQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    category_id: str
    sub_category_id: str | None = None
    transaction_type: TransactionType = TransactionType.BOTH


class RewardOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    rate: Decimal
    reward_amount: Decimal
    reward_type: RewardType | None = None


class CardWithRules(BaseModel):
    """A card together with its bank and every reward rule attached to it."""

    model_config = ConfigDict(frozen=True)

    card: CreditCard
    bank: Bank | None = None
    rules: list[RewardRule] = Field(default_factory=list)


class RankedResult(BaseModel):
    card_id: str
    card_name: str
    bank_name: str | None
    reward_rate: Decimal
    reward_amount: Decimal
    reward_type: RewardType | None
    rule_id: str | None


class ComparisonMatrix(BaseModel):
    categories: list[Category]
    cards: list[CreditCard]
    matrix: dict[tuple[str, str], RewardRule | None]

    def cell(self, category_id: str, card_id: str) -> RewardRule | None:
        return self.matrix.get((category_id, card_id))
