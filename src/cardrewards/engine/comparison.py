from typing import Mapping

from cardrewards.domain.errors import NotFoundError
from cardrewards.domain.models import CardWithRules, Category, ComparisonMatrix, RewardRule
from cardrewards.engine.matcher import best_rule_for_category


def project_comparison(cards: list[CardWithRules], categories: Mapping[str, Category]) -> ComparisonMatrix:
    """Build the category x card grid of best rules for side-by-side display.

    Rows are the categories any selected card has a rule for, in order of first
    appearance. A cell is None when the card has no rule in that category.
    """
    category_ids: list[str] = []
    for entry in cards:
        for rule in entry.rules:
            if rule.category_id not in category_ids:
                category_ids.append(rule.category_id)

    rows: list[Category] = []
    for category_id in category_ids:
        category = categories.get(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        rows.append(category)

    matrix: dict[tuple[str, str], RewardRule | None] = {}
    for category_id in category_ids:
        for entry in cards:
            matrix[(category_id, entry.card.id)] = best_rule_for_category(entry.rules, category_id)

    return ComparisonMatrix(categories=rows, cards=[entry.card for entry in cards], matrix=matrix)
