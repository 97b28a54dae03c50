from decimal import Decimal

import pytest

from cardrewards.domain.catalog import Catalog
from cardrewards.domain.errors import DuplicateEntityError, InvalidReferenceError
from cardrewards.domain.models import (
    Bank,
    Category,
    CreditCard,
    RewardRule,
    RewardType,
    SubCategory,
    UserCard,
)


@pytest.fixture
def catalog() -> Catalog:
    """A small consistent catalog: one bank, one card, two categories."""
    return Catalog(
        banks=[Bank(id="hdfc", name="HDFC Bank")],
        cards=[CreditCard(id="millennia", name="Millennia", bank_id="hdfc")],
        categories=[
            Category(
                id="dining",
                name="Dining",
                sub_categories=[SubCategory(id="restaurants", name="Restaurants", category_id="dining")],
            ),
            Category(id="travel", name="Travel"),
        ],
        sub_categories=[SubCategory(id="hotels", name="Hotels", category_id="travel")],
        rules=[
            RewardRule(
                id="r1",
                credit_card_id="millennia",
                category_id="dining",
                sub_category_id="restaurants",
                reward_type=RewardType.CASHBACK,
                reward_value=Decimal("5"),
            )
        ],
        user_cards=[UserCard(id="uc1", user_id="u1", credit_card_id="millennia")],
    )


def _rule(**overrides) -> RewardRule:
    fields = {
        "id": "r2",
        "credit_card_id": "millennia",
        "category_id": "dining",
        "reward_type": RewardType.POINTS,
        "reward_value": Decimal("2"),
    }
    fields.update(overrides)
    return RewardRule(**fields)


def test_nested_subcategories_are_indexed(catalog) -> None:
    assert set(catalog.sub_categories) == {"restaurants", "hotels"}
    assert [sub.name for sub in catalog.nested_category("dining").sub_categories] == ["Restaurants"]


def test_subcategory_needs_existing_category(catalog) -> None:
    with pytest.raises(InvalidReferenceError):
        catalog.add_sub_category(SubCategory(id="x", name="Cafes", category_id="missing"))


def test_nested_subcategory_must_declare_its_parent() -> None:
    with pytest.raises(InvalidReferenceError):
        Catalog(
            categories=[
                Category(
                    id="dining",
                    name="Dining",
                    sub_categories=[SubCategory(id="cafes", name="Cafes", category_id="travel")],
                )
            ]
        )


def test_rule_subcategory_must_belong_to_rule_category(catalog) -> None:
    with pytest.raises(InvalidReferenceError):
        catalog.add_rule(_rule(category_id="dining", sub_category_id="hotels"))


@pytest.mark.parametrize(
    "overrides",
    [
        {"credit_card_id": "missing"},
        {"category_id": "missing"},
        {"sub_category_id": "missing"},
    ],
)
def test_rule_with_dangling_reference_is_rejected(catalog, overrides) -> None:
    with pytest.raises(InvalidReferenceError):
        catalog.add_rule(_rule(**overrides))
    assert "r2" not in catalog.rules


def test_card_needs_existing_bank(catalog) -> None:
    with pytest.raises(InvalidReferenceError):
        catalog.add_card(CreditCard(id="c2", name="Atlas", bank_id="axis"))


def test_uniqueness_constraints(catalog) -> None:
    with pytest.raises(DuplicateEntityError):
        catalog.add_bank(Bank(id="b2", name="HDFC Bank"))
    with pytest.raises(DuplicateEntityError):
        catalog.add_card(CreditCard(id="c2", name="Millennia", bank_id="hdfc"))
    with pytest.raises(DuplicateEntityError):
        catalog.add_category(Category(id="c3", name="Dining"))
    with pytest.raises(DuplicateEntityError):
        catalog.add_sub_category(SubCategory(id="s2", name="Restaurants", category_id="dining"))
    with pytest.raises(DuplicateEntityError):
        catalog.add_user_card(UserCard(id="uc2", user_id="u1", credit_card_id="millennia"))


def test_subcategory_name_may_repeat_across_categories(catalog) -> None:
    catalog.add_sub_category(SubCategory(id="travel-restaurants", name="Restaurants", category_id="travel"))

    assert catalog.sub_categories["travel-restaurants"].category_id == "travel"


def test_duplicate_rules_for_same_scope_are_allowed(catalog) -> None:
    catalog.add_rule(_rule(id="r3", sub_category_id="restaurants"))

    assert len(catalog.rules_for_card("millennia")) == 2


def test_removing_a_card_removes_its_rules_and_links(catalog) -> None:
    catalog.remove_card("millennia")

    assert catalog.rules == {}
    assert catalog.user_cards == {}


def test_removing_a_category_removes_subcategories_and_rules(catalog) -> None:
    catalog.remove_category("dining")

    assert "restaurants" not in catalog.sub_categories
    assert catalog.rules == {}
    assert "hotels" in catalog.sub_categories


def test_removing_a_bank_removes_its_cards(catalog) -> None:
    catalog.remove_bank("hdfc")

    assert catalog.cards == {}
    assert catalog.rules == {}
