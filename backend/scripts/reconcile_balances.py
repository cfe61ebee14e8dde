"""
Compare cached account balances with their journal history.

    python scripts/reconcile_balances.py          # report only
    python scripts/reconcile_balances.py --fix    # rewrite drifted balances
"""
import argparse
import sys
import os
import logging
from dotenv import load_dotenv

load_dotenv()

# Add the parent directory to sys.path to allow imports from backend
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import SessionLocal
import models  # noqa: F401
from crud.journal_entry import reconcile_account_balances

# Setup logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger("reconcile")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Reconcile account balances against journal lines")
    parser.add_argument("--fix", action="store_true", help="rewrite cached balances from journal history")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        rows = reconcile_account_balances(db, fix=args.fix, user_id="reconcile-script")
    finally:
        db.close()

    for row in rows:
        logger.info(
            f"{row['code']}: cached {row['cached_balance']}, "
            f"journal {row['computed_balance']}, difference {row['difference']}"
        )
    if not rows:
        logger.info("All account balances agree with the journal")
    # Non-zero exit lets cron/CI flag drift when not fixing
    return 1 if rows and not args.fix else 0


if __name__ == "__main__":
    sys.exit(main())
