import logging
from sqlalchemy.orm import Session
from models.document_sequences import DocumentSequence

logger = logging.getLogger(__name__)

JOURNAL_PREFIX = "JE"
SALES_ORDER_PREFIX = "SO"
PURCHASE_ORDER_PREFIX = "PO"
DOCUMENT_PREFIXES = (JOURNAL_PREFIX, SALES_ORDER_PREFIX, PURCHASE_ORDER_PREFIX)


def format_document_number(prefix: str, value: int) -> str:
    return f"{prefix}-{value:06d}"


def next_document_number(db: Session, prefix: str) -> str:
    """
    Hand out the next number for a document type, e.g. "JE-000042".

    Must be called inside the transaction that persists the document. The
    counter row stays locked until that transaction ends, so concurrent
    writers queue behind each other, and a rollback gives the number back.
    """
    sequence = db.query(DocumentSequence).filter(
        DocumentSequence.prefix == prefix
    ).with_for_update().first()

    if sequence is None:
        sequence = DocumentSequence(prefix=prefix, last_value=0)
        db.add(sequence)

    sequence.last_value += 1
    db.flush()
    return format_document_number(prefix, sequence.last_value)


def ensure_sequences(db: Session):
    """Create the counter rows up front so the first documents never race on the insert."""
    existing = {row.prefix for row in db.query(DocumentSequence).all()}
    for prefix in DOCUMENT_PREFIXES:
        if prefix not in existing:
            logger.info(f"Creating document sequence for prefix {prefix}")
            db.add(DocumentSequence(prefix=prefix, last_value=0))
    db.commit()
