"""Batch Duplicate Analysis Example.

This example runs the leadres duplicate detector over a JSON file of
business-lead accounts and stores the results in a SQLite database, the way
the dashboard's nightly job does.

Steps:
1. **Load**: read accounts from a JSON fixture into the SQLite store
2. **Analyze**: compare every pair, group matches, flag accounts
3. **Inspect**: print candidate, score and group reports
4. **Report**: read dashboard statistics and the largest groups back

Usage:
    python examples/deduplication_example.py accounts.json

Configuration is read from LEADRES_* environment variables or a .env file
(see leadres.settings.Settings), e.g.:
    LEADRES_DATABASE_PATH: SQLite file to write (default: leads.db)
    LEADRES_MERGE_STRATEGY: "transitive" or "first_match"
"""

import logging
import sys
from pathlib import Path

from leadres.core.blockers import AllPairsBlocker
from leadres.core.detector import DuplicateDetector
from leadres.settings import Settings
from leadres.storage import SQLiteAccountStore, load_accounts_json

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def main() -> None:
    """Main execution function."""
    if len(sys.argv) != 2:
        logger.error("Usage: %s <accounts.json>", sys.argv[0])
        sys.exit(1)

    settings = Settings()
    accounts = load_accounts_json(Path(sys.argv[1]))

    with SQLiteAccountStore(settings.database_path, settings.max_accounts) as store:
        store.insert_accounts(accounts)
        detector = DuplicateDetector.from_settings(settings, store)

        # ==================================================================================
        # STEP 1: Analyze and persist
        # ==================================================================================
        summary = detector.run(clear_previous=True)
        logger.info(
            "Flagged %d of %d accounts in %d groups",
            summary.accounts_flagged,
            summary.total_accounts,
            summary.duplicate_groups,
        )

        # ==================================================================================
        # STEP 2: Inspect each stage
        # ==================================================================================
        blocker = AllPairsBlocker()
        candidates = list(blocker.stream(accounts))
        matches = list(detector.module.forward(candidates))
        groups = detector.clusterer.cluster(matches)

        print(blocker.inspect_candidates(candidates, accounts, sample_size=3).to_markdown())
        print()
        print(detector.module.inspect_scores(matches, sample_size=3).to_markdown())
        print()
        print(detector.clusterer.inspect_groups(groups, accounts, sample_size=3).to_markdown())

        # ==================================================================================
        # STEP 3: Dashboard figures
        # ==================================================================================
        stats = detector.get_deduplication_stats()
        print("\n" + "=" * 60)
        print(f"Total leads:      {stats.total_leads}")
        print(f"Duplicate leads:  {stats.duplicate_leads}")
        print(f"Duplicate groups: {stats.duplicate_groups}")
        print(f"Rate:             {stats.deduplication_rate}")
        print("=" * 60)

        for group_id, count in store.get_all_duplicate_groups()[:5]:
            print(f"\nGroup {group_id} ({count} matches)")
            for row in store.get_duplicates_by_group_id(group_id):
                print(
                    f"  {row.account_id_a} <-> {row.account_id_b}  "
                    f"{row.overall_similarity_score:.2f}  {row.match_reason}"
                )


if __name__ == "__main__":
    main()
