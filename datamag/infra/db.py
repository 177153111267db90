from __future__ import annotations
from typing import Any, Dict, List, Optional
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, Result
from datamag.core.config import settings
from datamag.core.logging import db_logger

# -----------------------------------------------------------------------------
# 1) Engine (connection pool)
# -----------------------------------------------------------------------------

_engine: Optional[Engine] = None


def build_engine(url: str) -> Engine:
    db_logger.info("Creating engine", dialect=url.split(":", 1)[0])
    if url.startswith("sqlite"):
        # connections are used from executor threads
        return create_engine(url, connect_args={"check_same_thread": False}, future=True)
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        future=True,
    )


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = build_engine(settings.DATABASE_URL)
    return _engine


# -----------------------------------------------------------------------------
# 2) Health check (used by /readyz)
# -----------------------------------------------------------------------------

def health_check(engine: Optional[Engine] = None) -> Dict[str, Any]:
    eng = engine or get_engine()
    with eng.connect() as conn:
        conn.execute(text("SELECT 1"))
        return {
            "ok": True,
            "dialect": eng.dialect.name,
            "database": eng.url.database,
        }


# -----------------------------------------------------------------------------
# 3) Query helpers (SELECT)
# -----------------------------------------------------------------------------

def fetch_all(sql: str, params: Optional[Dict[str, Any]] = None,
              timeout_ms: Optional[int] = None,
              engine: Optional[Engine] = None) -> List[Dict[str, Any]]:
    eng = engine or get_engine()
    with eng.connect() as conn:
        if timeout_ms and eng.dialect.name == "postgresql":
            conn.execute(text(f"SET LOCAL statement_timeout = {int(timeout_ms)}"))
        result: Result = conn.execute(text(sql), params or {})
        rows = result.mappings().all()
        return [dict(r) for r in rows]


def fetch_one(sql: str, params: Optional[Dict[str, Any]] = None,
              timeout_ms: Optional[int] = None,
              engine: Optional[Engine] = None) -> Optional[Dict[str, Any]]:
    rows = fetch_all(sql, params=params, timeout_ms=timeout_ms, engine=engine)
    return rows[0] if rows else None
