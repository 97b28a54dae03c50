from decimal import Decimal

import pytest

from cardrewards.domain.errors import NotFoundError
from cardrewards.domain.models import CardWithRules, Category, CreditCard, RewardRule, RewardType
from cardrewards.engine.comparison import project_comparison

CATEGORIES = {
    "dining": Category(id="dining", name="Dining"),
    "travel": Category(id="travel", name="Travel"),
    "shopping": Category(id="shopping", name="Shopping"),
}


def _rule(rule_id: str, card_id: str, category_id: str, value, sub_category_id=None) -> RewardRule:
    return RewardRule(
        id=rule_id,
        credit_card_id=card_id,
        category_id=category_id,
        sub_category_id=sub_category_id,
        reward_type=RewardType.CASHBACK,
        reward_value=Decimal(str(value)),
    )


@pytest.fixture
def cards() -> list[CardWithRules]:
    first = CardWithRules(
        card=CreditCard(id="a", name="Card A", bank_id="bank"),
        rules=[
            _rule("a-1", "a", "dining", 2),
            _rule("a-2", "a", "dining", 5, sub_category_id="restaurants"),
            _rule("a-3", "a", "travel", 1),
        ],
    )
    second = CardWithRules(
        card=CreditCard(id="b", name="Card B", bank_id="bank"),
        rules=[_rule("b-1", "b", "shopping", 3), _rule("b-2", "b", "dining", 1)],
    )
    return [first, second]


def test_categories_follow_first_appearance(cards) -> None:
    projection = project_comparison(cards, CATEGORIES)

    assert [category.name for category in projection.categories] == ["Dining", "Travel", "Shopping"]
    assert [card.id for card in projection.cards] == ["a", "b"]


def test_cells_hold_the_best_rule_or_none(cards) -> None:
    projection = project_comparison(cards, CATEGORIES)

    assert projection.cell("dining", "a").id == "a-2"
    assert projection.cell("dining", "b").id == "b-2"
    assert projection.cell("travel", "b") is None
    assert projection.cell("shopping", "a") is None
    assert projection.cell("shopping", "b").reward_value == 3
    assert len(projection.matrix) == 6


def test_unknown_category_is_reported(cards) -> None:
    with pytest.raises(NotFoundError):
        project_comparison(cards, {"dining": CATEGORIES["dining"]})


def test_no_cards_no_rows() -> None:
    projection = project_comparison([], CATEGORIES)

    assert projection.categories == []
    assert projection.matrix == {}
