import logging
from typing import Iterable

from cardrewards.domain.models import RewardQuery, RewardRule, TransactionType

logger = logging.getLogger(__name__)


def _transaction_type_matches(rule: RewardRule, transaction_type: TransactionType) -> bool:
    return rule.transaction_type in (TransactionType.BOTH, transaction_type)


def _most_rewarding(candidates: Iterable[RewardRule]) -> RewardRule | None:
    # Highest reward value wins; equal values fall back to the smallest id.
    best: RewardRule | None = None
    for rule in candidates:
        if best is None:
            best = rule
        elif rule.reward_value > best.reward_value:
            best = rule
        elif rule.reward_value == best.reward_value and rule.id < best.id:
            best = rule
    return best


def match_rule(rules: Iterable[RewardRule], query: RewardQuery) -> RewardRule | None:
    """Pick the single rule of a card that applies to a transaction.

    A rule scoped to the queried subcategory beats a category-level rule. A
    subcategory rule never applies to a query that does not name that
    subcategory. Returns None when no rule applies.
    """
    candidates = [
        rule
        for rule in rules
        if rule.category_id == query.category_id
        and _transaction_type_matches(rule, query.transaction_type)
    ]

    general = [rule for rule in candidates if rule.sub_category_id is None]
    if query.sub_category_id is not None:
        specific = [rule for rule in candidates if rule.sub_category_id == query.sub_category_id]
        if specific:
            matched = _most_rewarding(specific)
            logger.debug("Matched sub-category rule %s for %s", matched.id, query)
            return matched

    matched = _most_rewarding(general)
    logger.debug("Matched category rule %s for %s", matched.id if matched else None, query)
    return matched


def best_rule_for_category(rules: Iterable[RewardRule], category_id: str) -> RewardRule | None:
    """Most rewarding rule of a category, whatever its sub-category or channel."""
    return _most_rewarding(rule for rule in rules if rule.category_id == category_id)
