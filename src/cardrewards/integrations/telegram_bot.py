import logging
from decimal import Decimal, InvalidOperation

from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from cardrewards.config import settings
from cardrewards.domain.errors import CardRewardsError
from cardrewards.domain.models import AuthorizedCaller, RankedResult, RewardQuery, TransactionType
from cardrewards.engine.formatting import format_reward_amount
from cardrewards.repository.catalog_store import CatalogStore
from cardrewards.repository.memory import InMemoryRepository
from cardrewards.services.rewards import RewardsService

logger = logging.getLogger(__name__)

USAGE = "Send '<amount> <category> [/ <subcategory>] [online|offline]', e.g. '2000 Dining / Restaurants'"


class QueryParseError(ValueError):
    pass


def parse_query(text: str) -> tuple[Decimal, str, str | None, TransactionType]:
    tokens = text.split()
    if len(tokens) < 2:
        raise QueryParseError(USAGE)

    transaction_type = TransactionType.BOTH
    if tokens[-1].lower() in ("online", "offline"):
        transaction_type = TransactionType(tokens.pop().upper())

    raw_amount = tokens[0].lstrip("₹").replace(",", "")
    try:
        amount = Decimal(raw_amount)
    except InvalidOperation as exc:
        raise QueryParseError(f"Could not read an amount from {tokens[0]!r}") from exc

    scope = " ".join(tokens[1:])
    if not scope:
        raise QueryParseError(USAGE)
    category, _, sub_category = scope.partition("/")
    return amount, category.strip(), sub_category.strip() or None, transaction_type


def format_reply(ranked: list[RankedResult]) -> str:
    if not ranked:
        return "None of your saved cards earns a reward for this purchase."

    best = ranked[0]
    lines = [
        f"Best card: {best.bank_name} - {best.card_name}",
        f"Reward: {format_reward_amount(best.reward_amount, best.reward_type)}",
    ]
    if len(ranked) > 1:
        lines.append("Other cards:")
        lines.extend(
            f"- {item.card_name}: {format_reward_amount(item.reward_amount, item.reward_type)}" for item in ranked[1:]
        )
    return "\n".join(lines)


def answer(service: RewardsService, user_id: str, text: str) -> str:
    amount, category_name, sub_category_name, transaction_type = parse_query(text)
    category = service.find_category(category_name)
    sub_category = service.find_sub_category(category, sub_category_name) if sub_category_name else None
    query = RewardQuery(
        category_id=category.id,
        sub_category_id=sub_category.id if sub_category else None,
        transaction_type=transaction_type,
    )
    ranked = service.best_cards(AuthorizedCaller(user_id=user_id), query, amount)
    return format_reply(ranked)


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(USAGE)


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    text = update.message.text or ""
    service: RewardsService = context.bot_data["service"]
    try:
        reply = answer(service, str(update.effective_user.id), text)
    except (QueryParseError, CardRewardsError) as exc:
        logger.info("Rejected chat query %r: %s", text, exc)
        reply = f"Could not calculate: {exc}"
    await update.message.reply_text(reply)


def main() -> None:
    if not settings.telegram_bot_token:
        raise ValueError("TELEGRAM_BOT_TOKEN is required.")

    repository = InMemoryRepository.from_store(CatalogStore(settings.catalog_file))

    app = Application.builder().token(settings.telegram_bot_token).build()
    app.bot_data["service"] = RewardsService(repository)
    app.add_handler(CommandHandler("start", start))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_message))

    app.run_polling()


if __name__ == "__main__":
    main()
