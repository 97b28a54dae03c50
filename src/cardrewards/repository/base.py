from typing import Protocol

from cardrewards.domain.models import Bank, Category, CreditCard, RewardRule, SubCategory, UserCard


class RuleRepository(Protocol):
    def get_rule(self, rule_id: str) -> RewardRule:
        """Return the rule or raise NotFoundError."""

    def list_rules(self) -> list[RewardRule]:
        ...

    def list_by_card(self, card_id: str) -> list[RewardRule]:
        """Rules attached to a card; NotFoundError when the card is unknown."""

    def list_by_category(self, category_id: str) -> list[RewardRule]:
        """Rules of every card for a category; NotFoundError when the category is unknown."""

    def create_rule(self, **fields) -> RewardRule:
        ...

    def update_rule(self, rule_id: str, **changes) -> RewardRule:
        ...

    def delete_rule(self, rule_id: str) -> None:
        ...


class CardRepository(Protocol):
    def get_card(self, card_id: str) -> CreditCard:
        ...

    def get_bank(self, bank_id: str) -> Bank:
        ...

    def list_banks(self) -> list[Bank]:
        ...

    def list_cards(self) -> list[CreditCard]:
        ...

    def list_accessible_to(self, user_id: str) -> list[CreditCard]:
        """Cards the user saved to their profile."""

    def list_user_cards(self, user_id: str) -> list[UserCard]:
        ...

    def add_user_card(self, user_id: str, credit_card_id: str, **details) -> UserCard:
        """Save a card to the profile; DuplicateEntityError when already saved."""

    def remove_user_card(self, user_id: str, user_card_id: str) -> None:
        ...


class CategoryRepository(Protocol):
    def get_category(self, category_id: str) -> Category:
        ...

    def get_sub_category(self, sub_category_id: str) -> SubCategory:
        ...

    def list_all(self) -> list[Category]:
        """Every category with its sub-categories nested."""


class RewardsRepository(RuleRepository, CardRepository, CategoryRepository, Protocol):
    """Everything the rewards service reads and writes."""
