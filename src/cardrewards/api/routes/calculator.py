from fastapi import APIRouter, Depends

from cardrewards.api.dependencies import get_caller, get_service, http_error
from cardrewards.domain.errors import CardRewardsError
from cardrewards.domain.models import AuthorizedCaller, RewardQuery
from cardrewards.schemas.requests import CalculateRequest
from cardrewards.schemas.responses import CalculateResponse, RankedCard
from cardrewards.services.rewards import RewardsService

router = APIRouter(tags=["calculator"])


@router.post("/calculate", response_model=CalculateResponse)
def calculate(
    request: CalculateRequest,
    caller: AuthorizedCaller = Depends(get_caller),
    service: RewardsService = Depends(get_service),
) -> CalculateResponse:
    query = RewardQuery(
        category_id=request.category_id,
        sub_category_id=request.sub_category_id,
        transaction_type=request.transaction_type,
    )
    try:
        ranked = service.best_cards(caller, query, request.amount)
    except CardRewardsError as exc:
        raise http_error(exc) from exc

    cards = [
        RankedCard.from_result(item, service.repository.get_rule(item.rule_id) if item.rule_id else None)
        for item in ranked
    ]
    return CalculateResponse(best_card=cards[0] if cards else None, ranked_cards=cards)
