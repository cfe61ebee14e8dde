import sys
import os
import logging
from dotenv import load_dotenv

load_dotenv()

# Add the parent directory to sys.path to allow imports from backend
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import Base, SessionLocal, engine
import models  # noqa: F401
from models.categories import Category
from models.customers import Customer
from models.warehouses import Warehouse
from crud.chart_of_accounts import initialize_default_accounts, verify_posting_accounts
from crud.customers import WALK_IN_CUSTOMER
from crud.sequences import ensure_sequences
from crud.warehouses import DEFAULT_WAREHOUSE

# Setup logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger("seed")

DEFAULT_CATEGORIES = [
    ("Electronics", "Electronic devices and accessories"),
    ("Office Supplies", "Stationery and office consumables"),
    ("Furniture", "Office and home furniture"),
    ("Raw Materials", "Materials used in production"),
]


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        created = initialize_default_accounts(db)
        logger.info(f"Chart of accounts: {created} accounts added")

        if not db.query(Warehouse).filter(Warehouse.name == DEFAULT_WAREHOUSE).first():
            db.add(Warehouse(name=DEFAULT_WAREHOUSE, location="Head office"))
            logger.info(f"Created warehouse {DEFAULT_WAREHOUSE}")

        if not db.query(Customer).filter(Customer.name == WALK_IN_CUSTOMER).first():
            db.add(Customer(name=WALK_IN_CUSTOMER, credit_limit=0, balance=0))
            logger.info(f"Created customer {WALK_IN_CUSTOMER}")

        for name, description in DEFAULT_CATEGORIES:
            if not db.query(Category).filter(Category.name == name).first():
                db.add(Category(name=name, description=description))
        db.commit()

        ensure_sequences(db)

        missing = verify_posting_accounts(db)
        if missing:
            logger.error(f"Posting accounts still missing: {missing}")
            return 1
        logger.info("Seed complete")
        return 0
    except Exception as e:
        db.rollback()
        logger.error(f"Seeding failed: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(seed())
