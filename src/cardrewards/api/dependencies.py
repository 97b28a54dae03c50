from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status

from cardrewards.config import settings
from cardrewards.domain.errors import (
    CardRewardsError,
    DuplicateEntityError,
    InvalidAmountError,
    InvalidReferenceError,
    NotFoundError,
    PermissionDeniedError,
)
from cardrewards.domain.models import AuthorizedCaller, Role
from cardrewards.repository.catalog_store import CatalogStore
from cardrewards.repository.memory import InMemoryRepository
from cardrewards.services.rewards import RewardsService

_STATUS_BY_ERROR = {
    InvalidAmountError: status.HTTP_400_BAD_REQUEST,
    InvalidReferenceError: status.HTTP_400_BAD_REQUEST,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateEntityError: status.HTTP_409_CONFLICT,
}


def http_error(exc: CardRewardsError) -> HTTPException:
    status_code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=status_code, detail=str(exc))


@lru_cache()
def get_repository() -> InMemoryRepository:
    return InMemoryRepository.from_store(CatalogStore(settings.catalog_file))


def get_service(repository: InMemoryRepository = Depends(get_repository)) -> RewardsService:
    return RewardsService(repository)


def get_caller(
    x_user_id: str = Header(..., alias="X-User-Id"),
    x_user_role: Role = Header(Role.USER, alias="X-User-Role"),
) -> AuthorizedCaller:
    """
    Caller identity as forwarded by the authenticating gateway.
    Token validation happens upstream; this only shapes the headers.
    """
    return AuthorizedCaller(user_id=x_user_id, role=x_user_role)
