from fastapi import APIRouter, Depends, status

from cardrewards.api.dependencies import get_caller, get_service, http_error
from cardrewards.domain.errors import CardRewardsError
from cardrewards.domain.models import AuthorizedCaller, UserCard
from cardrewards.schemas.requests import AddUserCardRequest
from cardrewards.schemas.responses import MessageResponse
from cardrewards.services.rewards import RewardsService

router = APIRouter(prefix="/users/me", tags=["users"])


@router.get("/credit-cards", response_model=list[UserCard])
def list_saved_cards(
    caller: AuthorizedCaller = Depends(get_caller),
    service: RewardsService = Depends(get_service),
) -> list[UserCard]:
    return service.repository.list_user_cards(caller.user_id)


@router.post("/credit-cards", response_model=UserCard, status_code=status.HTTP_201_CREATED)
def add_saved_card(
    request: AddUserCardRequest,
    caller: AuthorizedCaller = Depends(get_caller),
    service: RewardsService = Depends(get_service),
) -> UserCard:
    try:
        return service.repository.add_user_card(caller.user_id, **request.model_dump())
    except CardRewardsError as exc:
        raise http_error(exc) from exc


@router.delete("/credit-cards/{user_card_id}", response_model=MessageResponse)
def remove_saved_card(
    user_card_id: str,
    caller: AuthorizedCaller = Depends(get_caller),
    service: RewardsService = Depends(get_service),
) -> MessageResponse:
    try:
        service.repository.remove_user_card(caller.user_id, user_card_id)
    except CardRewardsError as exc:
        raise http_error(exc) from exc
    return MessageResponse(message="Credit card removed successfully")
