from decimal import Decimal, InvalidOperation

from cardrewards.domain.errors import InvalidAmountError
from cardrewards.domain.models import RewardOutcome, RewardRule, RewardType

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_amount(amount) -> Decimal:
    """Coerce a transaction amount to Decimal, rejecting unusable values."""
    if isinstance(amount, bool):
        raise InvalidAmountError(f"Amount must be a number, got {amount!r}")
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise InvalidAmountError(f"Amount must be a number, got {amount!r}") from exc

    if not value.is_finite():
        raise InvalidAmountError(f"Amount must be finite, got {amount!r}")
    if value < 0:
        raise InvalidAmountError(f"Amount must not be negative, got {amount!r}")
    return value


def calculate(rule: RewardRule | None, amount) -> RewardOutcome:
    value = to_amount(amount)

    if rule is None:
        return RewardOutcome(rate=ZERO, reward_amount=ZERO, reward_type=None)

    if rule.minimum_spend is not None and value < rule.minimum_spend:
        return RewardOutcome(rate=rule.reward_value, reward_amount=ZERO, reward_type=rule.reward_type)

    # Cashback is a percentage; points and miles are earned per unit of currency.
    if rule.reward_type == RewardType.CASHBACK:
        reward = value * rule.reward_value / HUNDRED
    else:
        reward = value * rule.reward_value

    if rule.monthly_cap is not None:
        reward = min(reward, rule.monthly_cap)

    return RewardOutcome(rate=rule.reward_value, reward_amount=reward, reward_type=rule.reward_type)
