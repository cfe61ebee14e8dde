from models.accounts import Account, AccountType
from models.journal_entry import JournalEntry, JournalEntryType
from models.journal_entry_line import JournalEntryLine
from models.categories import Category
from models.products import Product
from models.warehouses import Warehouse
from models.stock import Stock
from models.stock_movements import StockMovement, MovementType
from models.customers import Customer
from models.suppliers import Supplier
from models.sales_orders import SalesOrder, SalesOrderStatus, PaymentMethod
from models.sales_order_items import SalesOrderItem
from models.purchase_orders import PurchaseOrder, PurchaseOrderStatus
from models.purchase_order_items import PurchaseOrderItem
from models.document_sequences import DocumentSequence
from models.activity_log import ActivityLog

__all__ = ['Account', 'AccountType', 'ActivityLog', 'Category', 'Customer', 'DocumentSequence', 'JournalEntry', 'JournalEntryLine', 'JournalEntryType', 'MovementType', 'PaymentMethod', 'Product', 'PurchaseOrder', 'PurchaseOrderItem', 'PurchaseOrderStatus', 'SalesOrder', 'SalesOrderItem', 'SalesOrderStatus', 'Stock', 'StockMovement', 'Supplier', 'Warehouse',]
