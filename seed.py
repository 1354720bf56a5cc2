"""Terminal helper that prepares the database using the in-process schema."""
from __future__ import annotations

import argparse
import logging

from storefront.config import settings
from storefront.database import drop_db, init_db, product_count, seed_products
from storefront.storage import get_engine, redact_url

GREEN = "\033[92m"
RESET = "\033[0m"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the storefront schema and seed fake products")
    parser.add_argument("--init", action="store_true", help="Create missing tables and categories")
    parser.add_argument("--reset", action="store_true", help="Drop every table before anything else")
    parser.add_argument("--products", type=int, default=0, help="Number of fake products to insert")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    engine = get_engine()

    if args.reset:
        drop_db(engine)
        print("Dropped all tables")
    if args.init or args.reset or args.products:
        init_db(engine)
    if args.products:
        seed_products(engine, args.products, seed=args.seed)
    print(f"{GREEN}products: {product_count(engine)}{RESET} ({redact_url(settings.database_url)})")


if __name__ == "__main__":
    main()
