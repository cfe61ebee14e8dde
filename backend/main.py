from contextlib import asynccontextmanager
from datetime import datetime
import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse

from config import CORS_ALLOWED_ORIGINS, LOG_DIR, LOG_LEVEL
from database import Base, SessionLocal, engine
from exceptions import LedgerCoreError
import models  # noqa: F401  registers every table on Base.metadata
import routers.accounts as accounts
import routers.activity_log as activity_log
import routers.categories as categories
import routers.customers as customers
import routers.journal_entry as journal_entry
import routers.products as products
import routers.purchase_orders as purchase_orders
import routers.sales_orders as sales_orders
import routers.stock as stock
import routers.suppliers as suppliers
import routers.warehouses as warehouses
from crud.chart_of_accounts import verify_posting_accounts
from crud.sequences import ensure_sequences


os.makedirs(LOG_DIR, exist_ok=True) # Create the log directory if it doesn't exist

# Create a unique log file name based on current date/time
current_time_str = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
LOG_FILE = os.path.join(LOG_DIR, f"app_{current_time_str}.log")

# Configure the root logger
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    filename=LOG_FILE,
    filemode='a'
)

# Also log to the console
console_handler = logging.StreamHandler()
console_handler.setLevel(LOG_LEVEL)
console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
logging.getLogger().addHandler(console_handler)

logger = logging.getLogger(__name__)
logger.info("Application starting up...")
# --- End Logging Configuration ---


# Create database tables
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    db = SessionLocal()
    try:
        ensure_sequences(db)
        missing = verify_posting_accounts(db)
        if missing:
            logger.error(
                f"Posting accounts {missing} are missing from the chart of accounts; "
                f"sales and purchases will be refused until they exist (run scripts/seed_data.py)"
            )
    finally:
        db.close()
    yield


app = FastAPI(lifespan=lifespan)

# Split the comma-separated origins, stripping any whitespace
allowed_origins = [origin.strip() for origin in CORS_ALLOWED_ORIGINS.split(',')]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LedgerCoreError)
async def ledger_core_error_handler(request: Request, exc: LedgerCoreError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} refused: {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "code": exc.code})


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="ERP Ledger API",
        version="1.0.0",
        description="Accounting, sales, purchasing and inventory API",
        routes=app.routes,
    )
    openapi_schema["components"]["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
    }
    # Apply security globally to all endpoints
    openapi_schema["security"] = [{"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi


app.include_router(accounts.router)
app.include_router(journal_entry.router)
app.include_router(sales_orders.router)
app.include_router(purchase_orders.router)
app.include_router(stock.router)
app.include_router(customers.router)
app.include_router(suppliers.router)
app.include_router(products.router)
app.include_router(warehouses.router)
app.include_router(categories.router)
app.include_router(activity_log.router)


@app.get("/health", include_in_schema=False)
async def health():
    return {"status": "ok"}
