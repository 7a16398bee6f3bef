"""
Pytest configuration and shared fixtures.

Provides:
    - In-memory doubles for the Motor collection calls the stores use
    - Fake Gemini, Vonage Verify and Vonage messaging clients
    - Seeded users and stores
"""

import copy
import itertools
from datetime import date, datetime
from types import SimpleNamespace

import pytest
from bson import Decimal128, ObjectId
from pymongo.errors import DuplicateKeyError

from app.services.expense_store import ExpenseStore
from app.services.otp_store import OtpChallengeStore


# =============================================================================
# Collection doubles
# =============================================================================

def _matches(doc, query):
    for key, expected in query.items():
        value = doc.get(key)
        if isinstance(expected, dict):
            for op, operand in expected.items():
                if op == "$gt" and not (value is not None and value > operand):
                    return False
                if op == "$lt" and not (value is not None and value < operand):
                    return False
        elif value != expected:
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def sort(self, key, direction):
        self.docs = sorted(self.docs, key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def limit(self, count):
        self.docs = self.docs[:count]
        return self

    async def to_list(self, length=None):
        return [copy.deepcopy(d) for d in self.docs[:length]]


class FakeCollection:
    """Just enough of AsyncIOMotorCollection for the stores."""

    def __init__(self, unique=None):
        self.docs = []
        self.unique = unique

    def _check_unique(self, doc, ignore=None):
        if not self.unique:
            return
        for other in self.docs:
            if other is not ignore and other.get(self.unique) == doc.get(self.unique):
                raise DuplicateKeyError(f"duplicate {self.unique}")

    async def find_one(self, query):
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query):
        return FakeCursor([d for d in self.docs if _matches(d, query)])

    async def insert_one(self, doc):
        doc = copy.deepcopy(doc)
        doc.setdefault("_id", ObjectId())
        self._check_unique(doc)
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    async def update_one(self, query, update, upsert=False):
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(copy.deepcopy(update.get("$set", {})))
                return SimpleNamespace(matched_count=1, modified_count=1, upserted_id=None)

        if not upsert:
            return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None)

        doc = {k: v for k, v in query.items() if not isinstance(v, dict)}
        doc.update(copy.deepcopy(update.get("$set", {})))
        doc["_id"] = ObjectId()
        self.docs.append(doc)
        return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=doc["_id"])

    async def delete_one(self, query):
        for doc in self.docs:
            if _matches(doc, query):
                self.docs.remove(doc)
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def count_documents(self, query):
        return sum(1 for d in self.docs if _matches(d, query))


# =============================================================================
# Provider doubles
# =============================================================================

class FakeAI:
    """Returns queued responses in order; records every call."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    async def generate(self, prompt, system_instruction=None, response_mime_type="text/plain"):
        self.calls.append(
            {"prompt": prompt, "system_instruction": system_instruction, "mime": response_mime_type}
        )
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeVerifyProvider:
    def __init__(self, valid_code="1234"):
        self.valid_code = valid_code
        self._ids = itertools.count(1)
        self.started = []
        self.completed = set()

    async def start(self, phone):
        request_id = f"req-{next(self._ids)}"
        self.started.append((phone, request_id))
        return request_id

    async def check(self, request_id, code):
        # A request is completed by its first successful check
        if request_id in self.completed or code != self.valid_code:
            return False
        self.completed.add(request_id)
        return True


class FakeMessenger:
    def __init__(self, success=True):
        self.success = success
        self.sent = []

    async def send_message(self, to_phone, message):
        self.sent.append((to_phone, message))
        if self.success:
            return {"success": True, "message_uuid": "uuid-1"}
        return {"success": False, "error": "Vonage API error: 500"}


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def users_collection():
    return FakeCollection(unique="whatsapp_number")


@pytest.fixture
def expenses_collection():
    return FakeCollection()


@pytest.fixture
def otp_collection():
    return FakeCollection(unique="phone_number")


@pytest.fixture
def store(users_collection, expenses_collection):
    return ExpenseStore(users_collection, expenses_collection)


@pytest.fixture
def otp_store(otp_collection):
    return OtpChallengeStore(otp_collection, ttl_minutes=10)


@pytest.fixture
async def user(store):
    return await store.create_user("+15551230000", "Ann", "USD")


@pytest.fixture
def fixed_today():
    return date(2024, 5, 15)


def make_expense_doc(user_id, description, amount, day, category="Food", sub_category="Groceries"):
    return {
        "_id": ObjectId(),
        "user_id": ObjectId(user_id),
        "description": description,
        "amount": Decimal128(str(amount)),
        "category": category,
        "sub_category": sub_category,
        "date": datetime(day.year, day.month, day.day),
    }


@pytest.fixture
def expense_doc():
    return make_expense_doc
