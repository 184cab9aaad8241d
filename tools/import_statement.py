"""Import a bank statement from disk for a given user.

    python tools/import_statement.py statement.xlsx --user_id <uuid> [--password ...] [--dry-run]

Runs the same ingestion engine as the API: header sniffing, normalization,
AI categorization (when GEMINI_API_KEY is set) with the regex fallback, and
per-row commits through the service-role Supabase client.
"""

import argparse
import asyncio
import logging
import os
import sys

from dotenv import load_dotenv
from supabase import Client, create_client
from tabulate import tabulate

from apps.api.domains.transactions.repository import SupabaseTransactionStore
from packages.categorization import Categorizer, GeminiTextGenerator
from packages.categorization.text_generation import DEFAULT_GEMINI_URL
from packages.ingestion_engine import HeaderNotFound, StatementIngestor, UnreadableStatement

# Load env
load_dotenv()


def get_env_value(*names: str) -> str | None:
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return None


def build_service_client() -> Client:
    # Supports both legacy and dashboard env naming
    url = get_env_value("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL")
    key = get_env_value("SUPABASE_SERVICE_KEY", "SUPABASE_SERVICE_ROLE_KEY")
    if not url or not key:
        print(
            "❌ Missing Supabase env vars. Set SUPABASE_URL/NEXT_PUBLIC_SUPABASE_URL and "
            "SUPABASE_SERVICE_KEY/SUPABASE_SERVICE_ROLE_KEY.",
        )
        sys.exit(1)
    return create_client(url, key)


def build_categorizer() -> Categorizer:
    api_key = get_env_value("GEMINI_API_KEY")
    generator = None
    if api_key:
        generator = GeminiTextGenerator(
            api_key=api_key,
            api_url=get_env_value("GEMINI_API_URL") or DEFAULT_GEMINI_URL,
            timeout=float(get_env_value("AI_TIMEOUT_SECONDS") or 30.0),
        )
    return Categorizer(
        generator=generator,
        max_descriptors=int(get_env_value("CATEGORIZER_MAX_DESCRIPTORS") or 120),
    )


def print_batch(transactions) -> None:
    rows = [
        [tx.date, tx.description[:48], f"{tx.amount:,.2f}", tx.kind.value, tx.category]
        for tx in transactions
    ]
    print(tabulate(rows, headers=["Date", "Description", "Amount", "Type", "Category"], tablefmt="simple"))


async def import_statement(args) -> int:
    with open(args.file, "rb") as f:
        content = f.read()

    print(f"📂 Reading file: {args.file}")
    store = None if args.dry_run else SupabaseTransactionStore(build_service_client())
    ingestor = StatementIngestor(
        store=store,
        categorizer=build_categorizer(),
        dedupe_uploads=args.dedupe,
    )

    try:
        result = await ingestor.ingest(content, args.user_id, password=args.password)
    except HeaderNotFound as e:
        print(f"❌ Could not detect columns (best row {e.best_row}, score {e.best_score})")
        return 1
    except UnreadableStatement as e:
        print(f"❌ Error reading file: {e}")
        return 1

    print_batch(result.transactions)
    print()
    print(f"   Categorized via: {result.categorization_source}")
    if result.skipped:
        print(f"   Skipped rows: {result.skipped}")
    if args.dry_run:
        print(f"🧪 Dry run: {result.count} transactions parsed, nothing stored.")
    else:
        print(f"🚀 Stored {result.count} transactions for User {args.user_id}")
        if result.failed_commits:
            print(f"⚠️ {result.failed_commits} rows failed to store")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Ingest a bank statement")
    parser.add_argument("file", help="Path to CSV/XLS/XLSX statement")
    parser.add_argument("--user_id", required=True, help="Target Supabase User ID (UUID)")
    parser.add_argument("--password", default=None, help="Password for an encrypted workbook")
    parser.add_argument("--dry-run", action="store_true", help="Parse and categorize only")
    parser.add_argument("--dedupe", action="store_true", help="Skip rows already stored for the user")
    parser.add_argument("--verbose", action="store_true")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if not os.path.exists(args.file):
        print(f"❌ File not found: {args.file}")
        return 1

    return asyncio.run(import_statement(args))


if __name__ == "__main__":
    sys.exit(main())
