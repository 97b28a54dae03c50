from decimal import Decimal

from cardrewards.domain.models import Category, RewardRule, RewardType, SubCategory, TransactionType

NOT_AVAILABLE = "N/A"
CURRENCY = "₹"

_UNITS = {
    RewardType.POINTS: "points",
    RewardType.MILES: "miles",
}


def _plain(value: Decimal) -> str:
    # 5.00 -> "5", 1.50 -> "1.5", 100 -> "100"
    return format(value.normalize(), "f")


def format_reward_rate(rule: RewardRule | None) -> str:
    if rule is None:
        return NOT_AVAILABLE
    if rule.reward_type == RewardType.CASHBACK:
        return f"{_plain(rule.reward_value)}% cashback"
    return f"{_plain(rule.reward_value)} {_UNITS[rule.reward_type]} per {CURRENCY}1"


def format_reward_amount(amount: Decimal, reward_type: RewardType | None) -> str:
    if reward_type in _UNITS:
        return f"{_plain(amount)} {_UNITS[reward_type]}"
    return f"{CURRENCY}{amount:.2f}"


def format_rule_limits(rule: RewardRule | None) -> list[str]:
    if rule is None:
        return []
    limits: list[str] = []
    if rule.monthly_cap:
        limits.append(f"Cap: {CURRENCY}{rule.monthly_cap:,}/month")
    if rule.minimum_spend:
        limits.append(f"Min: {CURRENCY}{rule.minimum_spend:,}")
    return limits


def describe_rule(rule: RewardRule, category: Category, sub_category: SubCategory | None = None) -> str:
    scope = category.name if sub_category is None else f"{category.name} / {sub_category.name}"
    line = f"{scope}: {format_reward_rate(rule)}"
    if rule.transaction_type != TransactionType.BOTH:
        line += f" ({rule.transaction_type.value.lower()} only)"
    limits = format_rule_limits(rule)
    if limits:
        line += f" [{', '.join(limits)}]"
    return line
