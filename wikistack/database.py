"""
Postgres-backed database layer for WikiStack.

Documents are stored as JSONB rows, one table per collection, behind a small
collection-style API (find, find_one, insert_one, count_documents) used by the
services. Filters understand plain equality plus $ne, $in, $all and $overlap,
the last two being JSONB array membership tests.
"""

from __future__ import annotations

import asyncio
import datetime as dt
import json
import re
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import asyncpg
from loguru import logger

from . import config

TABLE_PREFIX = "wikistack_"
COLLECTIONS = ("pages", "users")
# Expressions match the ones built by _text_field/_json_field so the planner can use them
INDEX_SPECS = {
    "pages": [
        ("url_title", "((doc->>'url_title'))"),
        ("title", "((doc->>'title'))"),
        ("created_at", "((doc->>'created_at'))"),
        ("author_id", "((doc->>'author_id'))"),
        ("tags_gin", "USING gin ((doc->'tags'))"),
    ],
    "users": [
        ("email", "((doc->>'email'))"),
        ("name", "((doc->>'name'))"),
    ],
}

_FIELD_PATTERN = re.compile(r"^\w+$")

Sort = Tuple[str, int]


@dataclass
class InsertOneResult:
    inserted_id: str


def _jsonable(value: Any) -> Any:
    if isinstance(value, dt.datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=dt.timezone.utc)
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _decode_doc(raw: Any) -> Dict[str, Any]:
    # asyncpg hands JSONB back as text unless a codec is registered
    if isinstance(raw, str):
        return json.loads(raw)
    return dict(raw)


def _as_text(value: Any) -> str:
    """The text Postgres' ->> operator yields for a JSON scalar."""
    if isinstance(value, str):
        return value
    return json.dumps(_jsonable(value))


def _text_field(field: str) -> str:
    if field == "_id":
        return "id"
    if not _FIELD_PATTERN.match(field):
        raise ValueError(f"Invalid field name '{field}'")
    return f"(doc->>'{field}')"


def _json_field(field: str) -> str:
    if not _FIELD_PATTERN.match(field):
        raise ValueError(f"Invalid field name '{field}'")
    return f"(doc->'{field}')"


class PostgresCursor:
    def __init__(self, collection: "PostgresCollection", filt: Optional[Dict[str, Any]]):
        self._collection = collection
        self._filt = filt or {}
        self._sorts: List[Sort] = []

    def sort(self, key: str, direction: int = 1) -> "PostgresCursor":
        self._sorts.append((key, direction))
        return self

    async def to_list(self, length: Optional[int]) -> List[Dict[str, Any]]:
        """Run the query. ``length=None`` returns every match."""
        return await self._collection._find_docs(self._filt, self._sorts, length)


class PostgresCollection:
    def __init__(self, name: str, table_name: str, db: "Database"):
        self.name = name
        self._table_name = table_name
        self._db = db

    @staticmethod
    def _param(params: List[Any], value: Any, cast: str = "text") -> str:
        params.append(value)
        return f"${len(params)}::{cast}"

    def _build_where_clause(self, filt: Optional[Dict[str, Any]], params: List[Any]) -> str:
        clauses: List[str] = []
        for field, condition in (filt or {}).items():
            if not isinstance(condition, dict):
                condition = {"$eq": condition}
            for op, expected in condition.items():
                clauses.append(self._build_condition(field, op, expected, params))
        return " AND ".join(clauses)

    def _build_condition(self, field: str, op: str, expected: Any, params: List[Any]) -> str:
        if op in ("$all", "$overlap"):
            # ?& needs every value in the array, ?| any of them
            array = _json_field(field)
            values = [_as_text(v) for v in expected]
            operator = "?&" if op == "$all" else "?|"
            placeholder = self._param(params, values, "text[]")
            return f"(jsonb_typeof({array}) = 'array' AND {array} {operator} {placeholder})"

        expr = _text_field(field)
        if op == "$in":
            placeholder = self._param(params, [_as_text(v) for v in expected], "text[]")
            return f"{expr} = ANY({placeholder})"
        if op == "$eq":
            if expected is None:
                return f"{expr} IS NULL"
            return f"{expr} = {self._param(params, _as_text(expected))}"
        if op == "$ne":
            if expected is None:
                return f"{expr} IS NOT NULL"
            return f"{expr} IS DISTINCT FROM {self._param(params, _as_text(expected))}"
        raise ValueError(f"Unsupported filter operator '{op}' on '{field}'")

    def _build_order_clause(self, sorts: List[Sort]) -> str:
        return ", ".join(
            f"{_text_field(key)} {'DESC' if direction < 0 else 'ASC'}" for key, direction in sorts
        )

    def find(self, filt: Optional[Dict[str, Any]] = None) -> PostgresCursor:
        return PostgresCursor(self, filt)

    async def _find_docs(
        self,
        filt: Optional[Dict[str, Any]],
        sorts: List[Sort],
        limit: Optional[int],
    ) -> List[Dict[str, Any]]:
        params: List[Any] = []
        query = f"SELECT id, doc FROM {self._table_name}"
        where_clause = self._build_where_clause(filt, params)
        if where_clause:
            query += f" WHERE {where_clause}"
        order_clause = self._build_order_clause(sorts)
        if order_clause:
            query += f" ORDER BY {order_clause}"
        if limit is not None:
            query += f" LIMIT {self._param(params, limit, 'int')}"

        docs = []
        for row in await self._db.fetch(query, *params):
            doc = _decode_doc(row["doc"])
            doc["_id"] = row["id"]
            docs.append(doc)
        return docs

    async def find_one(self, filt: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        docs = await self._find_docs(filt, [], 1)
        return docs[0] if docs else None

    async def insert_one(self, document: Dict[str, Any]) -> InsertOneResult:
        doc_id = str(document.get("_id") or uuid.uuid4())
        body = {k: v for k, v in document.items() if k != "_id"}
        await self._db.execute(
            f"INSERT INTO {self._table_name} (id, doc) VALUES ($1, $2::jsonb)",
            doc_id,
            json.dumps(_jsonable(body), ensure_ascii=False),
        )
        return InsertOneResult(inserted_id=doc_id)

    async def count_documents(self, filt: Optional[Dict[str, Any]] = None) -> int:
        params: List[Any] = []
        query = f"SELECT COUNT(*) AS count FROM {self._table_name}"
        where_clause = self._build_where_clause(filt, params)
        if where_clause:
            query += f" WHERE {where_clause}"
        rows = await self._db.fetch(query, *params)
        return int(rows[0]["count"]) if rows else 0


class Database:
    """Owns the asyncpg pool and hands out collections while connected."""

    def __init__(self, dsn: str = config.POSTGRES_DSN):
        self._dsn = dsn
        self.pool: Optional[asyncpg.Pool] = None
        self.is_connected = False
        self._connection_lock = asyncio.Lock()
        self._wrapped_collections: Dict[str, PostgresCollection] = {}
        self._monitor_task: Optional[asyncio.Task] = None

    def _reset_state(self, *, keep_monitor: bool = False) -> None:
        self.pool = None
        self.is_connected = False
        self._wrapped_collections.clear()
        if self._monitor_task and not keep_monitor:
            self._monitor_task.cancel()
            self._monitor_task = None

    async def connect(self, retries: int = config.DB_CONNECT_RETRIES, initial_delay: float = 1.0) -> None:
        """Open the pool and create the schema, retrying with exponential backoff."""
        async with self._connection_lock:
            delay = initial_delay
            for attempt in range(1, retries + 2):
                if self.is_connected:
                    return
                try:
                    logger.info("Connecting to Postgres at {}", self._dsn)
                    self.pool = await asyncpg.create_pool(self._dsn, min_size=1, max_size=10)
                    await self._ensure_schema()
                    self.is_connected = True
                    logger.info("Connected to Postgres and storage tables ensured")
                    self._start_monitor()
                    return
                except Exception:
                    logger.exception("Failed to connect to Postgres (attempt {})", attempt)
                    if self.pool is not None:
                        await self.pool.close()
                    self._reset_state(keep_monitor=True)
                    if attempt <= retries:
                        await asyncio.sleep(delay)
                        delay = min(delay * 2, 30)

    async def _ensure_schema(self) -> None:
        for collection in COLLECTIONS:
            table_name = f"{TABLE_PREFIX}{collection}"
            await self.execute(
                f"CREATE TABLE IF NOT EXISTS {table_name} (id TEXT PRIMARY KEY, doc JSONB NOT NULL)"
            )
            for suffix, expression in INDEX_SPECS.get(collection, []):
                await self.execute(
                    f"CREATE INDEX IF NOT EXISTS {table_name}_{suffix}_idx ON {table_name} {expression}"
                )

    def _start_monitor(self) -> None:
        if self._monitor_task and not self._monitor_task.done():
            return
        self._monitor_task = asyncio.create_task(self._monitor_connection())

    async def _monitor_connection(self) -> None:
        try:
            while True:
                await asyncio.sleep(5)
                if self.pool is None:
                    await self.connect()
                    continue
                try:
                    await self.execute("SELECT 1")
                except Exception:
                    logger.warning("Lost connection to Postgres, attempting to reconnect")
                    try:
                        await self.pool.close()
                    except Exception:
                        logger.debug("Error while closing pool during reconnect", exc_info=True)
                    self._reset_state(keep_monitor=True)
                    await self.connect()
        except asyncio.CancelledError:
            return

    async def disconnect(self) -> None:
        async with self._connection_lock:
            if self.pool:
                await self.pool.close()
            self._reset_state()

    def get_collection(self, name: str) -> Optional[PostgresCollection]:
        if not self.is_connected:
            return None
        if name not in COLLECTIONS:
            raise ValueError(f"Unknown collection '{name}'")
        if name not in self._wrapped_collections:
            self._wrapped_collections[name] = PostgresCollection(
                name, f"{TABLE_PREFIX}{name}", self
            )
        return self._wrapped_collections[name]

    async def execute(self, query: str, *args: Any) -> None:
        if self.pool is None:
            raise RuntimeError("Database not connected")
        async with self.pool.acquire() as conn:
            await conn.execute(query, *args)

    async def fetch(self, query: str, *args: Any) -> List[asyncpg.Record]:
        if self.pool is None:
            raise RuntimeError("Database not connected")
        async with self.pool.acquire() as conn:
            return await conn.fetch(query, *args)


db_instance = Database()


def get_pages_collection():
    return db_instance.get_collection("pages")


def get_users_collection():
    return db_instance.get_collection("users")


async def init_database() -> None:
    await db_instance.connect()
    if not db_instance.is_connected:
        logger.error("Database unavailable after startup retries; serving in offline mode")
