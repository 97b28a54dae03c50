from typing import Iterable

from cardrewards.domain.errors import DuplicateEntityError, InvalidReferenceError
from cardrewards.domain.models import (
    Bank,
    Category,
    CreditCard,
    RewardRule,
    SubCategory,
    UserCard,
)


class Catalog:
    """In-memory set of banks, cards, categories and reward rules.

    Every entity is checked against its parents when it enters the catalog, so
    a constructed catalog is always referentially consistent. Removal cascades
    to the children of the removed entity.
    """

    def __init__(
        self,
        banks: Iterable[Bank] = (),
        cards: Iterable[CreditCard] = (),
        categories: Iterable[Category] = (),
        sub_categories: Iterable[SubCategory] = (),
        rules: Iterable[RewardRule] = (),
        user_cards: Iterable[UserCard] = (),
    ):
        self.banks: dict[str, Bank] = {}
        self.cards: dict[str, CreditCard] = {}
        self.categories: dict[str, Category] = {}
        self.sub_categories: dict[str, SubCategory] = {}
        self.rules: dict[str, RewardRule] = {}
        self.user_cards: dict[str, UserCard] = {}

        for bank in banks:
            self.add_bank(bank)
        for card in cards:
            self.add_card(card)
        for category in categories:
            self.add_category(category)
        for sub_category in sub_categories:
            self.add_sub_category(sub_category)
        for rule in rules:
            self.add_rule(rule)
        for user_card in user_cards:
            self.add_user_card(user_card)

    def snapshot(self) -> tuple[dict, ...]:
        return tuple(dict(index) for index in self._indexes())

    def restore(self, snapshot: tuple[dict, ...]) -> None:
        for index, saved in zip(self._indexes(), snapshot):
            index.clear()
            index.update(saved)

    def _indexes(self) -> tuple[dict, ...]:
        return (self.banks, self.cards, self.categories, self.sub_categories, self.rules, self.user_cards)

    # --- banks and cards ---

    def add_bank(self, bank: Bank) -> Bank:
        self._ensure_new_id(self.banks, bank.id, "Bank")
        self._ensure_bank_name_free(bank)
        self.banks[bank.id] = bank
        return bank

    def replace_bank(self, bank: Bank) -> Bank:
        self._ensure_bank_name_free(bank)
        self.banks[bank.id] = bank
        return bank

    def add_card(self, card: CreditCard) -> CreditCard:
        self._ensure_new_id(self.cards, card.id, "Credit card")
        self._check_card(card)
        self.cards[card.id] = card
        return card

    def replace_card(self, card: CreditCard) -> CreditCard:
        self._check_card(card)
        self.cards[card.id] = card
        return card

    def remove_bank(self, bank_id: str) -> None:
        for card in [c for c in self.cards.values() if c.bank_id == bank_id]:
            self.remove_card(card.id)
        self.banks.pop(bank_id, None)

    def remove_card(self, card_id: str) -> None:
        self._drop(self.rules, lambda rule: rule.credit_card_id == card_id)
        self._drop(self.user_cards, lambda link: link.credit_card_id == card_id)
        self.cards.pop(card_id, None)

    # --- categories ---

    def add_category(self, category: Category) -> Category:
        self._ensure_new_id(self.categories, category.id, "Category")
        self._ensure_category_name_free(category)
        self.categories[category.id] = category.model_copy(update={"sub_categories": []})
        for sub_category in category.sub_categories:
            if sub_category.category_id != category.id:
                raise InvalidReferenceError(
                    f"Sub-category {sub_category.name!r} is nested under category {category.id} "
                    f"but declares category {sub_category.category_id}"
                )
            self.add_sub_category(sub_category)
        return self.nested_category(category.id)

    def add_sub_category(self, sub_category: SubCategory) -> SubCategory:
        self._ensure_new_id(self.sub_categories, sub_category.id, "Sub-category")
        if sub_category.category_id not in self.categories:
            raise InvalidReferenceError(
                f"Sub-category {sub_category.name!r} references unknown category {sub_category.category_id}"
            )
        for existing in self.sub_categories.values():
            if existing.category_id == sub_category.category_id and existing.name == sub_category.name:
                raise DuplicateEntityError(
                    f"Sub-category with name '{sub_category.name}' already exists in this category"
                )
        self.sub_categories[sub_category.id] = sub_category
        return sub_category

    def remove_category(self, category_id: str) -> None:
        self._drop(self.rules, lambda rule: rule.category_id == category_id)
        self._drop(self.sub_categories, lambda sub: sub.category_id == category_id)
        self.categories.pop(category_id, None)

    def remove_sub_category(self, sub_category_id: str) -> None:
        self._drop(self.rules, lambda rule: rule.sub_category_id == sub_category_id)
        self.sub_categories.pop(sub_category_id, None)

    def nested_category(self, category_id: str) -> Category:
        subs = [sub for sub in self.sub_categories.values() if sub.category_id == category_id]
        return self.categories[category_id].model_copy(update={"sub_categories": subs})

    # --- rules ---

    def add_rule(self, rule: RewardRule) -> RewardRule:
        self._ensure_new_id(self.rules, rule.id, "Reward rule")
        self.check_rule_references(rule)
        self.rules[rule.id] = rule
        return rule

    def replace_rule(self, rule: RewardRule) -> RewardRule:
        self.check_rule_references(rule)
        self.rules[rule.id] = rule
        return rule

    def remove_rule(self, rule_id: str) -> None:
        self.rules.pop(rule_id, None)

    def check_rule_references(self, rule: RewardRule) -> None:
        if rule.credit_card_id not in self.cards:
            raise InvalidReferenceError(f"Credit card with ID {rule.credit_card_id} not found")
        if rule.category_id not in self.categories:
            raise InvalidReferenceError(f"Category with ID {rule.category_id} not found")
        if rule.sub_category_id is None:
            return
        sub_category = self.sub_categories.get(rule.sub_category_id)
        if sub_category is None:
            raise InvalidReferenceError(f"Sub-category with ID {rule.sub_category_id} not found")
        if sub_category.category_id != rule.category_id:
            raise InvalidReferenceError("Sub-category does not belong to the specified category")

    def rules_for_card(self, card_id: str) -> list[RewardRule]:
        return [rule for rule in self.rules.values() if rule.credit_card_id == card_id]

    # --- user cards ---

    def add_user_card(self, user_card: UserCard) -> UserCard:
        self._ensure_new_id(self.user_cards, user_card.id, "User card")
        if user_card.credit_card_id not in self.cards:
            raise InvalidReferenceError(f"Credit card with ID {user_card.credit_card_id} not found")
        for existing in self.user_cards.values():
            if existing.user_id == user_card.user_id and existing.credit_card_id == user_card.credit_card_id:
                raise DuplicateEntityError("User already has this credit card")
        self.user_cards[user_card.id] = user_card
        return user_card

    def remove_user_card(self, user_card_id: str) -> None:
        self.user_cards.pop(user_card_id, None)

    # --- helpers ---

    def _check_card(self, card: CreditCard) -> None:
        if card.bank_id not in self.banks:
            raise InvalidReferenceError(f"Bank with ID {card.bank_id} not found")
        for existing in self.cards.values():
            if existing.id != card.id and existing.name == card.name and existing.bank_id == card.bank_id:
                raise DuplicateEntityError("Credit card with this name already exists for this bank")

    def _ensure_bank_name_free(self, bank: Bank) -> None:
        for existing in self.banks.values():
            if existing.id != bank.id and existing.name == bank.name:
                raise DuplicateEntityError(f"Bank with name '{bank.name}' already exists")

    def _ensure_category_name_free(self, category: Category) -> None:
        for existing in self.categories.values():
            if existing.id != category.id and existing.name == category.name:
                raise DuplicateEntityError(f"Category with name '{category.name}' already exists")

    @staticmethod
    def _ensure_new_id(index: dict, entity_id: str, label: str) -> None:
        if entity_id in index:
            raise DuplicateEntityError(f"{label} with ID {entity_id} already exists")

    @staticmethod
    def _drop(index: dict, predicate) -> None:
        for key in [key for key, value in index.items() if predicate(value)]:
            del index[key]
