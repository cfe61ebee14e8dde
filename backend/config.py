"""
Application settings.

All values are read from the environment (a local .env file is loaded first)
so the same code runs against a developer database, CI and production.
"""

from dotenv import load_dotenv
import os

# Load environment variables from .env file
load_dotenv()

# Database connection settings
# DATABASE_URL wins when set; otherwise the URL is assembled from the POSTGRES_* parts
POSTGRES_USER = os.getenv("POSTGRES_USER", "postgres")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
POSTGRES_SERVER = os.getenv("POSTGRES_SERVER", "localhost")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")
POSTGRES_DB = os.getenv("POSTGRES_DB", "erp_db")

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+psycopg2://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_SERVER}:{POSTGRES_PORT}/{POSTGRES_DB}",
)

# Token validation (tokens are issued by the auth service)
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

CORS_ALLOWED_ORIGINS = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000"
)

LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

TIMEZONE = os.getenv("APP_TIMEZONE", "Africa/Nairobi")

# Chart-of-accounts codes used by automatic postings.
# These accounts must exist before any sale or purchase can be recorded.
CASH_ACCOUNT_CODE = os.getenv("CASH_ACCOUNT_CODE", "1100")
RECEIVABLE_ACCOUNT_CODE = os.getenv("RECEIVABLE_ACCOUNT_CODE", "1200")
INVENTORY_ACCOUNT_CODE = os.getenv("INVENTORY_ACCOUNT_CODE", "1300")
PAYABLE_ACCOUNT_CODE = os.getenv("PAYABLE_ACCOUNT_CODE", "2100")
SALES_ACCOUNT_CODE = os.getenv("SALES_ACCOUNT_CODE", "4000")

POSTING_ACCOUNT_CODES = {
    "cash": CASH_ACCOUNT_CODE,
    "receivable": RECEIVABLE_ACCOUNT_CODE,
    "inventory": INVENTORY_ACCOUNT_CODE,
    "payable": PAYABLE_ACCOUNT_CODE,
    "sales": SALES_ACCOUNT_CODE,
}
