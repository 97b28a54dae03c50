import logging
from decimal import Decimal

from cardrewards.domain.errors import NotFoundError, PermissionDeniedError
from cardrewards.domain.models import (
    AuthorizedCaller,
    CardWithRules,
    Category,
    ComparisonMatrix,
    CreditCard,
    RankedResult,
    RewardQuery,
    RewardRule,
    SubCategory,
)
from cardrewards.engine.comparison import project_comparison
from cardrewards.engine.selectors import rank_cards
from cardrewards.repository.base import RewardsRepository

logger = logging.getLogger(__name__)


class RewardsService:
    def __init__(self, repository: RewardsRepository):
        self.repository = repository

    def _with_rules(self, card: CreditCard) -> CardWithRules:
        return CardWithRules(
            card=card,
            bank=self.repository.get_bank(card.bank_id),
            rules=self.repository.list_by_card(card.id),
        )

    def _ensure_admin(self, caller: AuthorizedCaller) -> None:
        if not caller.is_admin:
            raise PermissionDeniedError(f"User {caller.user_id} is not allowed to manage reward rules")

    # --- end-user operations ---

    def card_rewards(self, card_id: str) -> CardWithRules:
        return self._with_rules(self.repository.get_card(card_id))

    def best_cards(self, caller: AuthorizedCaller, query: RewardQuery, amount: Decimal) -> list[RankedResult]:
        """Rank the caller's saved cards for one purchase, best first."""
        self.repository.get_category(query.category_id)
        if query.sub_category_id is not None:
            self.repository.get_sub_category(query.sub_category_id)

        cards = [self._with_rules(card) for card in self.repository.list_accessible_to(caller.user_id)]
        ranked = rank_cards(cards, query, amount)
        if ranked:
            logger.info(
                "Best card for user %s: %s (%s)", caller.user_id, ranked[0].card_name, ranked[0].reward_amount
            )
        else:
            logger.info("No saved card of user %s earns rewards for %s", caller.user_id, query)
        return ranked

    def compare(self, card_ids: list[str]) -> ComparisonMatrix:
        cards = [self._with_rules(self.repository.get_card(card_id)) for card_id in card_ids]
        categories = {category.id: category for category in self.repository.list_all()}
        return project_comparison(cards, categories)

    def find_category(self, name: str) -> Category:
        for category in self.repository.list_all():
            if category.name.lower() == name.strip().lower():
                return category
        raise NotFoundError("Category", name)

    @staticmethod
    def find_sub_category(category: Category, name: str) -> SubCategory:
        for sub_category in category.sub_categories:
            if sub_category.name.lower() == name.strip().lower():
                return sub_category
        raise NotFoundError("Sub-category", name)

    # --- admin operations ---

    def create_rule(self, caller: AuthorizedCaller, **fields) -> RewardRule:
        self._ensure_admin(caller)
        return self.repository.create_rule(**fields)

    def update_rule(self, caller: AuthorizedCaller, rule_id: str, **changes) -> RewardRule:
        self._ensure_admin(caller)
        return self.repository.update_rule(rule_id, **changes)

    def delete_rule(self, caller: AuthorizedCaller, rule_id: str) -> None:
        self._ensure_admin(caller)
        self.repository.delete_rule(rule_id)
