import logging
import random
import re
from decimal import Decimal

from cardrewards.config import settings
from cardrewards.domain.catalog import Catalog
from cardrewards.domain.models import (
    Bank,
    Category,
    CreditCard,
    RewardRule,
    RewardType,
    SubCategory,
)
from cardrewards.repository.catalog_store import CatalogStore

logger = logging.getLogger(__name__)

CATEGORIES = {
    "Dining": ["Restaurants", "Fast Food", "Cafes", "Bars"],
    "Travel": ["Airlines", "Hotels", "Car Rentals", "Cruises", "Travel Agencies"],
    "Groceries": ["Supermarkets", "Specialty Food Stores", "Farmers Markets"],
    "Entertainment": ["Movies", "Concerts", "Streaming Services", "Theme Parks"],
    "Shopping": ["Department Stores", "Clothing", "Electronics", "Online Retailers"],
    "Transportation": ["Gas Stations", "Public Transit", "Rideshare", "Parking"],
    "Health": ["Pharmacies", "Gyms", "Doctor Visits", "Hospitals"],
    "Utilities": ["Electricity", "Water", "Internet", "Phone", "Cable TV"],
}

CARDS = {
    "HDFC Bank": [("Millennia", "1000"), ("Regalia Gold", "2500")],
    "ICICI Bank": [("Amazon Pay", "0"), ("Sapphiro", "3500")],
    "Axis Bank": [("Atlas", "5000"), ("Flipkart", "500")],
    "SBI Card": [("SimplyCLICK", "499")],
}


def _slug(*parts: str) -> str:
    return "-".join(re.sub(r"[^a-z0-9]+", "-", part.lower()).strip("-") for part in parts)


def build_catalog(rng: random.Random) -> Catalog:
    """Every card gets a 1-2% rule per category and, half of the time, a 3-5% sub-category bonus."""
    categories = [
        Category(
            id=_slug("cat", name),
            name=name,
            sub_categories=[
                SubCategory(id=_slug("sub", name, sub_name), name=sub_name, category_id=_slug("cat", name))
                for sub_name in sub_names
            ],
        )
        for name, sub_names in CATEGORIES.items()
    ]
    banks = [Bank(id=_slug("bank", name), name=name) for name in CARDS]
    cards = [
        CreditCard(id=_slug("card", bank_name, card_name), name=card_name, bank_id=_slug("bank", bank_name), annual_fee=Decimal(fee))
        for bank_name, bank_cards in CARDS.items()
        for card_name, fee in bank_cards
    ]

    rules: list[RewardRule] = []
    for card in cards:
        for category in categories:
            rules.append(
                RewardRule(
                    id=f"rule-{len(rules) + 1:04d}",
                    credit_card_id=card.id,
                    category_id=category.id,
                    reward_type=rng.choice(list(RewardType)),
                    reward_value=Decimal(f"{rng.uniform(1, 2):.2f}"),
                )
            )
            if rng.random() > 0.5 and category.sub_categories:
                sub_category = rng.choice(category.sub_categories)
                rules.append(
                    RewardRule(
                        id=f"rule-{len(rules) + 1:04d}",
                        credit_card_id=card.id,
                        category_id=category.id,
                        sub_category_id=sub_category.id,
                        reward_type=rng.choice(list(RewardType)),
                        reward_value=Decimal(f"{rng.uniform(3, 5):.2f}"),
                    )
                )

    return Catalog(banks=banks, cards=cards, categories=categories, rules=rules)


def main(output: str | None = None) -> None:
    target = output or settings.catalog_file
    catalog = build_catalog(random.Random(settings.seed))
    CatalogStore(target).save_catalog(catalog)
    logger.info(
        "Seeded %d categories, %d cards and %d reward rules into %s",
        len(catalog.categories),
        len(catalog.cards),
        len(catalog.rules),
        target,
    )


if __name__ == "__main__":
    main()
