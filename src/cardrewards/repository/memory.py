import logging
import threading
import uuid
from contextlib import contextmanager
from datetime import date
from decimal import Decimal

from cardrewards.domain.catalog import Catalog
from cardrewards.domain.errors import NotFoundError
from cardrewards.domain.models import (
    Bank,
    CatalogEntity,
    Category,
    CreditCard,
    RewardRule,
    SubCategory,
    UserCard,
)
from cardrewards.repository.catalog_store import CatalogStore

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def _without_nulls(model: type[CatalogEntity], fields: dict) -> dict:
    """Drop None values for fields the model does not allow to be None."""

    def nullable(name: str) -> bool:
        field = model.model_fields.get(name)
        return field is not None and not field.is_required() and field.default is None

    return {name: value for name, value in fields.items() if value is not None or nullable(name)}


def _merge(current: CatalogEntity, changes: dict) -> CatalogEntity:
    model = type(current)
    return model.model_validate({**current.model_dump(), **_without_nulls(model, changes), "id": current.id})


class InMemoryRepository:
    """Catalog repository held in memory, optionally written through to a JSON store.

    Implements the rule, card and category repository protocols plus the admin
    write operations. Reads and writes are serialised with a lock. A write that
    fails, including a failed save to the store, leaves the catalog as it was.
    """

    def __init__(self, catalog: Catalog | None = None, store: CatalogStore | None = None):
        self.catalog = catalog or Catalog()
        self.store = store
        self._lock = threading.RLock()

    @classmethod
    def from_store(cls, store: CatalogStore) -> "InMemoryRepository":
        return cls(store.load_catalog(), store)

    @contextmanager
    def _writing(self):
        with self._lock:
            snapshot = self.catalog.snapshot()
            try:
                yield self.catalog
                if self.store is not None:
                    self.store.save_catalog(self.catalog)
            except Exception:
                self.catalog.restore(snapshot)
                raise

    # --- banks ---

    def list_banks(self) -> list[Bank]:
        with self._lock:
            return list(self.catalog.banks.values())

    def get_bank(self, bank_id: str) -> Bank:
        bank = self.catalog.banks.get(bank_id)
        if bank is None:
            raise NotFoundError("Bank", bank_id)
        return bank

    def create_bank(self, name: str, logo: str | None = None) -> Bank:
        with self._writing() as catalog:
            bank = catalog.add_bank(Bank(id=_new_id(), name=name, logo=logo))
        logger.info("Created bank %s (%s)", bank.name, bank.id)
        return bank

    def update_bank(self, bank_id: str, **changes) -> Bank:
        with self._writing() as catalog:
            bank = catalog.replace_bank(_merge(self.get_bank(bank_id), changes))
        logger.info("Updated bank %s: %s", bank_id, sorted(changes))
        return bank

    def delete_bank(self, bank_id: str) -> None:
        with self._writing() as catalog:
            self.get_bank(bank_id)
            catalog.remove_bank(bank_id)
        logger.info("Deleted bank %s with its cards", bank_id)

    # --- credit cards ---

    def list_cards(self) -> list[CreditCard]:
        with self._lock:
            return list(self.catalog.cards.values())

    def get_card(self, card_id: str) -> CreditCard:
        card = self.catalog.cards.get(card_id)
        if card is None:
            raise NotFoundError("Credit card", card_id)
        return card

    def create_card(
        self,
        name: str,
        bank_id: str,
        image: str | None = None,
        annual_fee: Decimal = Decimal("0"),
    ) -> CreditCard:
        with self._writing() as catalog:
            card = catalog.add_card(
                CreditCard(id=_new_id(), name=name, bank_id=bank_id, image=image, annual_fee=annual_fee)
            )
        logger.info("Created credit card %s (%s)", card.name, card.id)
        return card

    def update_card(self, card_id: str, **changes) -> CreditCard:
        with self._writing() as catalog:
            card = catalog.replace_card(_merge(self.get_card(card_id), changes))
        logger.info("Updated credit card %s: %s", card_id, sorted(changes))
        return card

    def delete_card(self, card_id: str) -> None:
        with self._writing() as catalog:
            self.get_card(card_id)
            catalog.remove_card(card_id)
        logger.info("Deleted credit card %s with its reward rules", card_id)

    def list_accessible_to(self, user_id: str) -> list[CreditCard]:
        with self._lock:
            return [self.catalog.cards[link.credit_card_id] for link in self.list_user_cards(user_id)]

    # --- categories ---

    def list_all(self) -> list[Category]:
        with self._lock:
            return [self.catalog.nested_category(category_id) for category_id in self.catalog.categories]

    def get_category(self, category_id: str) -> Category:
        with self._lock:
            if category_id not in self.catalog.categories:
                raise NotFoundError("Category", category_id)
            return self.catalog.nested_category(category_id)

    def get_sub_category(self, sub_category_id: str) -> SubCategory:
        sub_category = self.catalog.sub_categories.get(sub_category_id)
        if sub_category is None:
            raise NotFoundError("Sub-category", sub_category_id)
        return sub_category

    def create_category(self, name: str) -> Category:
        with self._writing() as catalog:
            category = catalog.add_category(Category(id=_new_id(), name=name))
        logger.info("Created category %s (%s)", category.name, category.id)
        return category

    def create_sub_category(self, category_id: str, name: str) -> SubCategory:
        with self._writing() as catalog:
            self.get_category(category_id)
            sub_category = catalog.add_sub_category(SubCategory(id=_new_id(), name=name, category_id=category_id))
        logger.info("Created sub-category %s under %s", sub_category.name, category_id)
        return sub_category

    def delete_category(self, category_id: str) -> None:
        with self._writing() as catalog:
            self.get_category(category_id)
            catalog.remove_category(category_id)
        logger.info("Deleted category %s with its sub-categories and rules", category_id)

    def delete_sub_category(self, sub_category_id: str) -> None:
        with self._writing() as catalog:
            self.get_sub_category(sub_category_id)
            catalog.remove_sub_category(sub_category_id)
        logger.info("Deleted sub-category %s with its rules", sub_category_id)

    # --- reward rules ---

    def list_rules(self) -> list[RewardRule]:
        with self._lock:
            return list(self.catalog.rules.values())

    def get_rule(self, rule_id: str) -> RewardRule:
        rule = self.catalog.rules.get(rule_id)
        if rule is None:
            raise NotFoundError("Reward rule", rule_id)
        return rule

    def list_by_card(self, card_id: str) -> list[RewardRule]:
        with self._lock:
            self.get_card(card_id)
            return self.catalog.rules_for_card(card_id)

    def list_by_category(self, category_id: str) -> list[RewardRule]:
        with self._lock:
            self.get_category(category_id)
            return [rule for rule in self.catalog.rules.values() if rule.category_id == category_id]

    def create_rule(self, **fields) -> RewardRule:
        # An unset transaction_type falls back to the model default (BOTH).
        fields = _without_nulls(RewardRule, fields)
        with self._writing() as catalog:
            rule = catalog.add_rule(RewardRule.model_validate({**fields, "id": _new_id()}))
        logger.info(
            "Created reward rule %s: card=%s category=%s sub_category=%s %s %s",
            rule.id,
            rule.credit_card_id,
            rule.category_id,
            rule.sub_category_id,
            rule.reward_type.value,
            rule.reward_value,
        )
        return rule

    def update_rule(self, rule_id: str, **changes) -> RewardRule:
        """Apply changes to a rule and re-check its references.

        A None for a field that cannot be None (card, category, transaction
        type, reward type or value) leaves that field unchanged. A None for
        sub_category_id, monthly_cap or minimum_spend clears it.
        """
        with self._writing() as catalog:
            rule = catalog.replace_rule(_merge(self.get_rule(rule_id), changes))
        logger.info("Updated reward rule %s: %s", rule_id, sorted(changes))
        return rule

    def delete_rule(self, rule_id: str) -> None:
        with self._writing() as catalog:
            self.get_rule(rule_id)
            catalog.remove_rule(rule_id)
        logger.info("Deleted reward rule %s", rule_id)

    # --- user cards ---

    def list_user_cards(self, user_id: str) -> list[UserCard]:
        with self._lock:
            return [link for link in self.catalog.user_cards.values() if link.user_id == user_id]

    def add_user_card(
        self,
        user_id: str,
        credit_card_id: str,
        card_number: str | None = None,
        expiry_date: date | None = None,
    ) -> UserCard:
        with self._writing() as catalog:
            self.get_card(credit_card_id)
            link = catalog.add_user_card(
                UserCard(
                    id=_new_id(),
                    user_id=user_id,
                    credit_card_id=credit_card_id,
                    card_number=card_number,
                    expiry_date=expiry_date,
                )
            )
        logger.info("User %s saved credit card %s", user_id, credit_card_id)
        return link

    def remove_user_card(self, user_id: str, user_card_id: str) -> None:
        with self._writing() as catalog:
            link = catalog.user_cards.get(user_card_id)
            if link is None or link.user_id != user_id:
                raise NotFoundError("User credit card", user_card_id)
            catalog.remove_user_card(user_card_id)
        logger.info("User %s removed saved card %s", user_id, user_card_id)
