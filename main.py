import argparse
import logging

from cardrewards.api.app import run as run_api
from cardrewards.config import settings
from cardrewards.integrations.telegram_bot import main as run_bot
from cardrewards.repository.seed import main as run_seed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Card Rewards unified entrypoint")
    parser.add_argument(
        "mode",
        nargs="?",
        choices=["api", "bot", "seed"],
        default="api",
        help="Run mode: api (default), bot, seed",
    )
    parser.add_argument("-o", "--output", help="Catalog file written by the seed mode.")
    return parser


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s - %(levelname)s - %(message)s")

    if args.mode == "api":
        run_api()
        return

    if args.mode == "bot":
        run_bot()
        return

    run_seed(args.output)


if __name__ == "__main__":
    main()
