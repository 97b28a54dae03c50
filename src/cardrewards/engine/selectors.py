import logging

from cardrewards.domain.models import CardWithRules, RankedResult, RewardQuery
from cardrewards.engine.calculator import calculate, to_amount
from cardrewards.engine.matcher import match_rule

logger = logging.getLogger(__name__)


def evaluate_card(entry: CardWithRules, query: RewardQuery, amount) -> RankedResult:
    rule = match_rule(entry.rules, query)
    outcome = calculate(rule, amount)
    return RankedResult(
        card_id=entry.card.id,
        card_name=entry.card.name,
        bank_name=entry.bank.name if entry.bank else None,
        reward_rate=outcome.rate,
        reward_amount=outcome.reward_amount,
        reward_type=outcome.reward_type,
        rule_id=rule.id if rule else None,
    )


def rank_cards(cards: list[CardWithRules], query: RewardQuery, amount) -> list[RankedResult]:
    """Rank cards best-first for one transaction, dropping those that earn nothing."""
    value = to_amount(amount)

    evaluations = [evaluate_card(entry, query, value) for entry in cards]
    ranked = [item for item in evaluations if item.reward_amount > 0]
    ranked.sort(key=lambda item: (-item.reward_amount, item.card_name))

    logger.debug(
        "Ranked %d of %d cards for %s on %s", len(ranked), len(evaluations), query, value
    )
    return ranked
