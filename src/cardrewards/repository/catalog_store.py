import json
import logging
from pathlib import Path

from cardrewards.domain.catalog import Catalog
from cardrewards.domain.models import Bank, Category, CreditCard, RewardRule, UserCard

logger = logging.getLogger(__name__)


class CatalogStore:
    """Reads and writes the whole catalog as one JSON document."""

    def __init__(self, catalog_file: str):
        self.catalog_file = Path(catalog_file)

    def load_catalog(self) -> Catalog:
        if not self.catalog_file.exists():
            raise FileNotFoundError(f"Catalog file not found: {self.catalog_file}")

        with self.catalog_file.open("r", encoding="utf-8") as fh:
            data = json.load(fh)

        catalog = Catalog(
            banks=[Bank.model_validate(item) for item in data.get("banks", [])],
            cards=[CreditCard.model_validate(item) for item in data.get("credit_cards", [])],
            categories=[Category.model_validate(item) for item in data.get("categories", [])],
            rules=[RewardRule.model_validate(item) for item in data.get("reward_rules", [])],
            user_cards=[UserCard.model_validate(item) for item in data.get("user_cards", [])],
        )
        logger.info(
            "Loaded catalog from %s: %d banks, %d cards, %d categories, %d rules",
            self.catalog_file,
            len(catalog.banks),
            len(catalog.cards),
            len(catalog.categories),
            len(catalog.rules),
        )
        return catalog

    def save_catalog(self, catalog: Catalog) -> None:
        payload = {
            "banks": [bank.model_dump(mode="json") for bank in catalog.banks.values()],
            "credit_cards": [card.model_dump(mode="json") for card in catalog.cards.values()],
            "categories": [
                catalog.nested_category(category_id).model_dump(mode="json")
                for category_id in catalog.categories
            ],
            "reward_rules": [rule.model_dump(mode="json") for rule in catalog.rules.values()],
            "user_cards": [link.model_dump(mode="json") for link in catalog.user_cards.values()],
        }

        self.catalog_file.parent.mkdir(parents=True, exist_ok=True)
        with self.catalog_file.open("w", encoding="utf-8") as fh:
            json.dump(payload, fh, ensure_ascii=False, indent=2)
        logger.info("Saved catalog to %s", self.catalog_file)
