from fastapi import APIRouter, Depends

from cardrewards.api.dependencies import get_caller, get_service, http_error
from cardrewards.domain.errors import CardRewardsError
from cardrewards.domain.models import Bank, Category, CreditCard
from cardrewards.engine.formatting import describe_rule, format_reward_rate, format_rule_limits
from cardrewards.schemas.responses import CardRewardsResponse, RuleView
from cardrewards.services.rewards import RewardsService

router = APIRouter(tags=["catalog"], dependencies=[Depends(get_caller)])


@router.get("/banks", response_model=list[Bank])
def list_banks(service: RewardsService = Depends(get_service)) -> list[Bank]:
    return service.repository.list_banks()


@router.get("/credit-cards", response_model=list[CreditCard])
def list_cards(service: RewardsService = Depends(get_service)) -> list[CreditCard]:
    return service.repository.list_cards()


@router.get("/credit-cards/{card_id}", response_model=CreditCard)
def get_card(card_id: str, service: RewardsService = Depends(get_service)) -> CreditCard:
    try:
        return service.repository.get_card(card_id)
    except CardRewardsError as exc:
        raise http_error(exc) from exc


@router.get("/credit-cards/{card_id}/rewards", response_model=CardRewardsResponse)
def card_rewards(card_id: str, service: RewardsService = Depends(get_service)) -> CardRewardsResponse:
    try:
        entry = service.card_rewards(card_id)
    except CardRewardsError as exc:
        raise http_error(exc) from exc

    repository = service.repository
    views = []
    for rule in entry.rules:
        category = repository.get_category(rule.category_id)
        sub_category = repository.get_sub_category(rule.sub_category_id) if rule.sub_category_id else None
        views.append(
            RuleView(
                rule=rule,
                category_name=category.name,
                sub_category_name=sub_category.name if sub_category else None,
                reward_rate_display=format_reward_rate(rule),
                limits=format_rule_limits(rule),
                summary=describe_rule(rule, category, sub_category),
            )
        )
    return CardRewardsResponse(card=entry.card, bank=entry.bank, rules=views)


@router.get("/categories", response_model=list[Category])
def list_categories(service: RewardsService = Depends(get_service)) -> list[Category]:
    return service.repository.list_all()
