import os
import sys

# Add the parent directory (backend) to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
import sqlite3
import tempfile
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from main import app


class FakeLLM:
    """Stands in for GeminiClient: replays canned responses and records prompts."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp

    def __enter__(self):
        return self

    def __exit__(self, *_):
        return False


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fake_llm():
    return FakeLLM


@pytest.fixture
def temp_sqlite_db():
    fd, path = tempfile.mkstemp(suffix=".db")
    try:
        conn = sqlite3.connect(path)
        cur = conn.cursor()
        cur.executescript("""
            CREATE TABLE customers (
                id          INTEGER PRIMARY KEY,
                name        TEXT NOT NULL,
                email       TEXT UNIQUE,
                created_at  TIMESTAMP
            );
            CREATE TABLE orders (
                id          INTEGER PRIMARY KEY,
                customer_id INTEGER REFERENCES customers(id),
                amount      NUMERIC(10, 2),
                status      TEXT,
                created_at  TIMESTAMP
            );
            CREATE TABLE order_items (
                id          INTEGER PRIMARY KEY,
                order_id    INTEGER REFERENCES orders(id),
                quantity    INTEGER NOT NULL,
                unit_price  REAL NOT NULL
            );
            CREATE TABLE employees (
                id          INTEGER PRIMARY KEY,
                full_name   TEXT,
                manager_id  INTEGER REFERENCES employees(id)
            );
        """)
        cur.executemany(
            "INSERT INTO customers (id, name, email, created_at) VALUES (?, ?, ?, ?)",
            [(1, "Ada", "ada@example.com", "2024-01-02 09:00:00"),
             (2, "Grace", "grace@example.com", "2024-02-11 12:30:00")],
        )
        cur.executemany(
            "INSERT INTO orders (id, customer_id, amount, status, created_at) VALUES (?, ?, ?, ?, ?)",
            [(i, 1 + i % 2, 10.0 * i, "SHIPPED" if i % 3 else "PENDING", f"2024-03-0{i} 10:00:00")
             for i in range(1, 8)],
        )
        cur.execute("INSERT INTO order_items (id, order_id, quantity, unit_price) VALUES (1, 1, 2, 5.0)")
        conn.commit()
        conn.close()
        yield path
    finally:
        os.close(fd)
        os.remove(path)


@pytest.fixture
def sqlite_engine(temp_sqlite_db):
    engine = create_engine(f"sqlite:///{temp_sqlite_db}")
    yield engine
    engine.dispose()
