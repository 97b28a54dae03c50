class CardRewardsError(Exception):
    """Base class for every error raised by the rewards core."""


class InvalidReferenceError(CardRewardsError):
    """An entity points at a parent that is missing or belongs elsewhere."""


class InvalidAmountError(CardRewardsError):
    """A transaction amount is negative, NaN, infinite or not a number."""


class NotFoundError(CardRewardsError):
    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID {entity_id} not found")


class DuplicateEntityError(CardRewardsError):
    """A uniqueness constraint of the catalog would be violated."""


class PermissionDeniedError(CardRewardsError):
    pass
