"""Shared fixtures: a small sales document, stores and a scripted LLM."""

import logging

import pytest

from veriflow.log import LOGGER_NAME
from veriflow.store import MemoryBackend, TableStore

STAMP = "2024-01-01T00:00:00.000Z"


def make_document():
    return {
        "Customers": [
            {
                "CustomerID": 1,
                "FirstName": "Alice",
                "LastName": "Smith",
                "Email": "alice.smith@example.com",
                "SignupDate": STAMP,
            },
            {
                "CustomerID": 2,
                "FirstName": "Bob",
                "LastName": "Johnson",
                "Email": "bob.j@example.com",
                "SignupDate": STAMP,
            },
        ],
        "Transactions": [
            {
                "TransactionID": 1,
                "CustomerID": 1,
                "Product": "Laptop",
                "Amount": 10,
                "TransactionDate": STAMP,
            },
        ],
        "Views": {},
    }


class FakeLLM:
    """Returns canned replies in order and records prompts."""

    model = "fake-model"

    def __init__(self, *replies, error=None):
        self.replies = list(replies)
        self.error = error
        self.prompts = []

    async def generate(self, prompt, system=None):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.replies.pop(0)


@pytest.fixture
def document():
    return make_document()


@pytest.fixture
def backend(document):
    return MemoryBackend(document)


@pytest.fixture
async def store(backend):
    return await TableStore(backend).load()


@pytest.fixture(autouse=True)
def _reset_package_logger():
    # The CLI installs a non-propagating handler; caplog needs propagation
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
