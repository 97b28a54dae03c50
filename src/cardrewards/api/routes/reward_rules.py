from fastapi import APIRouter, Depends, status

from cardrewards.api.dependencies import get_caller, get_service, http_error
from cardrewards.domain.errors import CardRewardsError
from cardrewards.domain.models import AuthorizedCaller, RewardRule
from cardrewards.schemas.requests import CreateRewardRuleRequest, UpdateRewardRuleRequest
from cardrewards.schemas.responses import MessageResponse
from cardrewards.services.rewards import RewardsService

router = APIRouter(prefix="/reward-rules", tags=["reward-rules"], dependencies=[Depends(get_caller)])


@router.get("", response_model=list[RewardRule])
def list_rules(service: RewardsService = Depends(get_service)) -> list[RewardRule]:
    return service.repository.list_rules()


@router.get("/credit-card/{card_id}", response_model=list[RewardRule])
def list_rules_by_card(card_id: str, service: RewardsService = Depends(get_service)) -> list[RewardRule]:
    try:
        return service.repository.list_by_card(card_id)
    except CardRewardsError as exc:
        raise http_error(exc) from exc


@router.get("/category/{category_id}", response_model=list[RewardRule])
def list_rules_by_category(category_id: str, service: RewardsService = Depends(get_service)) -> list[RewardRule]:
    try:
        return service.repository.list_by_category(category_id)
    except CardRewardsError as exc:
        raise http_error(exc) from exc


@router.get("/{rule_id}", response_model=RewardRule)
def get_rule(rule_id: str, service: RewardsService = Depends(get_service)) -> RewardRule:
    try:
        return service.repository.get_rule(rule_id)
    except CardRewardsError as exc:
        raise http_error(exc) from exc


@router.post("", response_model=RewardRule, status_code=status.HTTP_201_CREATED)
def create_rule(
    request: CreateRewardRuleRequest,
    caller: AuthorizedCaller = Depends(get_caller),
    service: RewardsService = Depends(get_service),
) -> RewardRule:
    try:
        return service.create_rule(caller, **request.model_dump())
    except CardRewardsError as exc:
        raise http_error(exc) from exc


@router.patch("/{rule_id}", response_model=RewardRule)
def update_rule(
    rule_id: str,
    request: UpdateRewardRuleRequest,
    caller: AuthorizedCaller = Depends(get_caller),
    service: RewardsService = Depends(get_service),
) -> RewardRule:
    try:
        return service.update_rule(caller, rule_id, **request.model_dump(exclude_unset=True))
    except CardRewardsError as exc:
        raise http_error(exc) from exc


@router.delete("/{rule_id}", response_model=MessageResponse)
def delete_rule(
    rule_id: str,
    caller: AuthorizedCaller = Depends(get_caller),
    service: RewardsService = Depends(get_service),
) -> MessageResponse:
    try:
        service.delete_rule(caller, rule_id)
    except CardRewardsError as exc:
        raise http_error(exc) from exc
    return MessageResponse(message="Reward rule deleted successfully")
