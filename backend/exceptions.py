"""
Typed errors raised by the ledger, document and stock engines.

Every error carries a machine-readable ``code`` and the HTTP status the API
layer answers with, plus whatever structured data explains the failure.
Callers catch by type, never by message text.

    LedgerCoreError
    +-- ValidationError                 400
    |   +-- UnbalancedEntryError
    |   +-- InvalidAmountError
    |   +-- AccountHierarchyError
    +-- NotFoundError                   404
    |   +-- UnknownAccountError
    |   +-- UnknownProductError
    |   +-- UnknownPartyError
    |   +-- UnknownWarehouseError
    |   +-- UnknownCategoryError
    |   +-- OrderNotFoundError
    +-- StateConflictError              409
    |   +-- InsufficientStockError
    |   +-- AlreadyReceivedError
    |   +-- AccountInactiveError
    |   +-- AccountInUseError
    |   +-- DuplicateCodeError
    |   +-- CategoryInUseError
    |   +-- WarehouseInUseError
    |   +-- WarehouseInactiveError
    +-- PostingConfigurationError       500
    +-- PersistenceError                500
"""

from decimal import Decimal


class LedgerCoreError(Exception):
    """Base class for every error raised by the core."""

    code: str = "LEDGER_CORE_ERROR"
    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# Validation


class ValidationError(LedgerCoreError):
    """Input rejected before any state was touched."""

    code = "VALIDATION_ERROR"
    status_code = 400


class UnbalancedEntryError(ValidationError):
    code = "UNBALANCED_ENTRY"

    def __init__(self, total_debit: Decimal, total_credit: Decimal):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            f"Debits must equal credits: debit total {total_debit}, credit total {total_credit}"
        )


class InvalidAmountError(ValidationError):
    code = "INVALID_AMOUNT"

    def __init__(self, value, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid amount {value!r}: {reason}")


class AccountHierarchyError(ValidationError):
    code = "ACCOUNT_HIERARCHY"

    def __init__(self, account_id: int, parent_id: int):
        self.account_id = account_id
        self.parent_id = parent_id
        super().__init__(
            f"Account {parent_id} cannot be the parent of account {account_id}: it would create a cycle"
        )


# Missing references


class NotFoundError(LedgerCoreError):
    """A referenced record does not exist."""

    code = "NOT_FOUND"
    status_code = 404
    entity = "Record"

    def __init__(self, entity_id):
        self.entity_id = entity_id
        super().__init__(f"{self.entity} {entity_id} not found")


# The Unknown* errors are raised when a request body points at a missing record;
# lookups by URL id answer 404 from the router instead.


class UnknownAccountError(NotFoundError):
    code = "UNKNOWN_ACCOUNT"
    status_code = 400
    entity = "Account"


class UnknownProductError(NotFoundError):
    code = "UNKNOWN_PRODUCT"
    status_code = 400
    entity = "Product"


class UnknownPartyError(NotFoundError):
    code = "UNKNOWN_PARTY"
    status_code = 400

    def __init__(self, party_type: str, party_id):
        self.entity = party_type
        super().__init__(party_id)


class UnknownWarehouseError(NotFoundError):
    code = "UNKNOWN_WAREHOUSE"
    status_code = 400
    entity = "Warehouse"


class UnknownCategoryError(NotFoundError):
    code = "UNKNOWN_CATEGORY"
    status_code = 400
    entity = "Category"


class OrderNotFoundError(NotFoundError):
    code = "ORDER_NOT_FOUND"

    def __init__(self, order_type: str, order_id):
        self.entity = order_type
        super().__init__(order_id)


# State conflicts


class StateConflictError(LedgerCoreError):
    """The request is valid but current state does not allow it."""

    code = "STATE_CONFLICT"
    status_code = 409


class InsufficientStockError(StateConflictError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: int, warehouse_id: int, available: int, requested: int):
        self.product_id = product_id
        self.warehouse_id = warehouse_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for product {product_id} in warehouse {warehouse_id}. "
            f"Available: {available}, Requested: {requested}"
        )


class AlreadyReceivedError(StateConflictError):
    code = "ALREADY_RECEIVED"

    def __init__(self, order_number: str):
        self.order_number = order_number
        super().__init__(f"Purchase order {order_number} has already been received")


class AccountInactiveError(StateConflictError):
    code = "ACCOUNT_INACTIVE"

    def __init__(self, account_code: str):
        self.account_code = account_code
        super().__init__(f"Account {account_code} is inactive and cannot be posted to")


class AccountInUseError(StateConflictError):
    code = "ACCOUNT_IN_USE"

    def __init__(self, account_code: str, reason: str):
        self.account_code = account_code
        super().__init__(f"Account {account_code} is in use: {reason}")


class DuplicateCodeError(StateConflictError):
    code = "DUPLICATE_CODE"

    def __init__(self, entity: str, value: str):
        self.entity = entity
        self.value = value
        super().__init__(f"{entity} '{value}' already exists")


class CategoryInUseError(StateConflictError):
    code = "CATEGORY_IN_USE"

    def __init__(self, name: str, product_count: int):
        self.name = name
        self.product_count = product_count
        super().__init__(f"Category '{name}' is still assigned to {product_count} product(s)")


class WarehouseInUseError(StateConflictError):
    code = "WAREHOUSE_IN_USE"

    def __init__(self, name: str, quantity: int):
        self.name = name
        self.quantity = quantity
        super().__init__(f"Warehouse '{name}' still holds {quantity} unit(s) of stock")


class WarehouseInactiveError(StateConflictError):
    code = "WAREHOUSE_INACTIVE"

    def __init__(self, warehouse_id: int):
        self.warehouse_id = warehouse_id
        super().__init__(f"Warehouse {warehouse_id} is inactive and cannot move stock")


# Configuration and storage


class PostingConfigurationError(LedgerCoreError):
    """An account required for automatic posting is missing from the chart."""

    code = "POSTING_CONFIGURATION"
    status_code = 500

    def __init__(self, missing_codes):
        self.missing_codes = list(missing_codes)
        super().__init__(
            f"Required posting accounts are missing from the chart of accounts: {', '.join(self.missing_codes)}"
        )


class PersistenceError(LedgerCoreError):
    code = "PERSISTENCE_ERROR"
    status_code = 500
