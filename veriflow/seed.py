"""Sample data for a fresh store."""

from __future__ import annotations

import logging
from typing import Any

from veriflow.store.base import TableStore
from veriflow.types import utc_now_iso

logger = logging.getLogger(__name__)

SAMPLE_CUSTOMERS = [
    ("Alice", "Smith", "alice.smith@example.com"),
    ("Bob", "Johnson", "bob.j@example.com"),
    ("Charlie", "Brown", "charlie.b@example.com"),
    ("Diana", "Davis", "diana.davis@sample.net"),
]

# (CustomerID, Product, Amount)
SAMPLE_TRANSACTIONS = [
    (1, "Laptop", 1200.50),
    (2, "Keyboard", 75.00),
    (1, "Mouse", 25.99),
    (3, "Monitor", 300.00),
    (4, "Webcam", 55.50),
    (2, "Docking Station", 150.75),
]


def sample_document(timestamp: str | None = None) -> dict[str, Any]:
    """Build the sample document with IDs numbered from 1.

    Args:
        timestamp: ISO timestamp for SignupDate / TransactionDate (now if None)
    """
    stamp = timestamp or utc_now_iso()
    customers = [
        {
            "CustomerID": i,
            "FirstName": first,
            "LastName": last,
            "Email": email,
            "SignupDate": stamp,
        }
        for i, (first, last, email) in enumerate(SAMPLE_CUSTOMERS, start=1)
    ]
    transactions = [
        {
            "TransactionID": i,
            "CustomerID": customer_id,
            "Product": product,
            "Amount": amount,
            "TransactionDate": stamp,
        }
        for i, (customer_id, product, amount) in enumerate(SAMPLE_TRANSACTIONS, start=1)
    ]
    return {"Customers": customers, "Transactions": transactions, "Views": {}}


async def seed_store(store: TableStore, force: bool = False) -> bool:
    """Populate an empty store with the sample data and save it.

    Args:
        store: Loaded table store
        force: Overwrite existing customers, transactions and views

    Returns:
        True if data was written, False if the store already had data
    """
    if not force and (store.get("Customers") or store.get("Transactions")):
        logger.info("Store already contains data, skipping population")
        return False

    sample = sample_document()
    for name, value in sample.items():
        store.document[name] = value
    await store.save()
    logger.info(
        "Wrote %d customers and %d transactions to %s",
        len(sample["Customers"]),
        len(sample["Transactions"]),
        store.location,
    )
    return True


__all__ = ["seed_store", "sample_document", "SAMPLE_CUSTOMERS", "SAMPLE_TRANSACTIONS"]
