from fastapi import APIRouter, Depends

from cardrewards.api.dependencies import get_caller, get_service, http_error
from cardrewards.domain.errors import CardRewardsError
from cardrewards.domain.models import AuthorizedCaller
from cardrewards.schemas.requests import CompareRequest
from cardrewards.schemas.responses import ComparisonCell, ComparisonRow, CompareResponse
from cardrewards.services.rewards import RewardsService

router = APIRouter(tags=["comparison"])


@router.post("/compare", response_model=CompareResponse)
def compare(
    request: CompareRequest,
    caller: AuthorizedCaller = Depends(get_caller),
    service: RewardsService = Depends(get_service),
) -> CompareResponse:
    try:
        projection = service.compare(request.card_ids)
    except CardRewardsError as exc:
        raise http_error(exc) from exc

    rows = [
        ComparisonRow(
            category_id=category.id,
            category_name=category.name,
            cells=[ComparisonCell.from_rule(card.id, projection.cell(category.id, card.id)) for card in projection.cards],
        )
        for category in projection.categories
    ]
    return CompareResponse(cards=projection.cards, rows=rows)
