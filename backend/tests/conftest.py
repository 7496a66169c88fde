"""
Shared fixtures. Everything here is offline: the Supabase client is replaced
by an in-memory table store that understands the handful of query-builder
calls the services make, and the LLM client is a MagicMock.
"""
import sys
import os
import re
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

# Ensure backend/ is on sys.path when running from project root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from app.models.profile import Actor

WORKSHEET_MARKDOWN = """# Fracciones

> 💡 **Resumen Rápido**:
> Una fracción representa partes de un todo.

---

## 🧠 Ejemplo Resuelto
La mitad de una pizza es 1/2.

---

## ✍️ Ejercicios Prácticos
1. ¿Cuánto es la mitad de 10? ________
2. Escribe tres cuartos como fracción. ________

---

### ✅ Soluciones (Para el profesor)
*1. Cinco  2. 3/4*
"""


# ---------------------------------------------------------------------------
# In-memory Supabase double
# ---------------------------------------------------------------------------

_TABLE_DEFAULTS = {
    "resources": {"is_public": False, "description": None},
}


def _like_to_regex(pattern: str) -> re.Pattern:
    """Translate a SQL ILIKE pattern (% _ and backslash escapes) to a regex."""
    parts = []
    chars = iter(pattern)
    for char in chars:
        if char == "\\":
            parts.append(re.escape(next(chars, "\\")))
        elif char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self._db = db
        self._table = table
        self._op = "select"
        self._payload = None
        self._filters: list = []
        self._order: tuple[str, bool] | None = None
        self._limit: int | None = None
        self._count = None

    def select(self, columns="*", count=None):
        self._op = "select"
        self._count = count
        return self

    def insert(self, payload):
        self._op = "insert"
        self._payload = payload
        return self

    def update(self, payload):
        self._op = "update"
        self._payload = payload
        return self

    def delete(self):
        self._op = "delete"
        return self

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def ilike(self, column, pattern):
        regex = _like_to_regex(pattern)
        self._filters.append(lambda row: regex.fullmatch(row.get(column) or "") is not None)
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def limit(self, n):
        self._limit = n
        return self

    def _matches(self, row: dict) -> bool:
        return all(check(row) for check in self._filters)

    def execute(self):
        self._db.calls.append((self._table, self._op, self._payload))
        failure = self._db.failures.get((self._table, self._op))
        if failure is not None:
            raise failure

        rows = self._db.tables.setdefault(self._table, [])

        if self._op == "insert":
            payloads = self._payload if isinstance(self._payload, list) else [self._payload]
            inserted = []
            for payload in payloads:
                row = dict(_TABLE_DEFAULTS.get(self._table, {}))
                row.update(payload)
                row.setdefault("id", str(uuid.uuid4()))
                row.setdefault("created_at", self._db.next_timestamp())
                rows.append(row)
                inserted.append(dict(row))
            return FakeResponse(inserted)

        matched = [row for row in rows if self._matches(row)]

        if self._op == "update":
            for row in matched:
                row.update(self._payload)
            return FakeResponse([dict(row) for row in matched])

        if self._op == "delete":
            self._db.tables[self._table] = [row for row in rows if not self._matches(row)]
            return FakeResponse([dict(row) for row in matched])

        result = [dict(row) for row in matched]
        if self._order:
            column, desc = self._order
            result.sort(key=lambda r: r.get(column) or "", reverse=desc)
        count = len(result) if self._count == "exact" else None
        if self._limit is not None:
            result = result[: self._limit]
        return FakeResponse(result, count=count)


class FakeAuth:
    def __init__(self):
        self.users: dict[str, SimpleNamespace] = {}

    def get_user(self, token):
        user = self.users.get(token)
        if user is None:
            raise Exception("invalid JWT")
        return SimpleNamespace(user=user)


class FakeSupabase:
    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.failures: dict[tuple[str, str], Exception] = {}
        self.calls: list[tuple[str, str, object]] = []
        self.auth = FakeAuth()
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def next_timestamp(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def fail(self, table: str, op: str, exc: Exception | None = None) -> None:
        self.failures[(table, op)] = exc or Exception(f"{table}.{op} failed")

    def writes(self, table: str) -> list[tuple[str, str, object]]:
        return [c for c in self.calls if c[0] == table and c[1] != "select"]

    def add_profile(self, user_id: str, email: str, plan: str = "free", generated_count: int = 0, **extra) -> dict:
        row = {
            "id": user_id,
            "email": email,
            "name": email.split("@")[0],
            "role": "profesor",
            "plan": plan,
            "generated_count": generated_count,
        }
        row.update(extra)
        self.tables.setdefault("profiles", []).append(row)
        return row

    def add_resource(self, user_id: str, title: str, is_public: bool = False, **extra) -> dict:
        row = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "title": title,
            "content": f"# {title}",
            "type": "worksheet",
            "is_public": is_public,
            "created_at": self.next_timestamp(),
        }
        row.update(extra)
        self.tables.setdefault("resources", []).append(row)
        return row


def make_llm_client(text: str | None = WORKSHEET_MARKDOWN, error: Exception | None = None) -> MagicMock:
    """An OpenAI-shaped client whose completion returns ``text`` or raises ``error``."""
    client = MagicMock()
    if error is not None:
        client.chat.completions.create.side_effect = error
    else:
        client.chat.completions.create.return_value = MagicMock(
            choices=[MagicMock(message=MagicMock(content=text))]
        )
    return client


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def member():
    return Actor(id="user-123", email="ana@colegio.es", can_persist=True)
