"""Shared pytest fixtures and test utilities for Folio tests."""

import os
import tempfile
from pathlib import Path
from typing import Any, Generator

import pytest
import yaml

from folio.services.content_service import ContentService
from folio.storage.database import Database, reset_db


class ContentFactory:
    """Utility class for building Markdown documents on disk."""

    @staticmethod
    def document_text(title: str | None = "Untitled", body: str = "Body text.\n", **fields: Any) -> str:
        """Render a YAML front-matter document. Fields set to None are omitted."""
        data = {}
        if title is not None:
            data["title"] = title
        data.update({key: value for key, value in fields.items() if value is not None})
        block = yaml.safe_dump(data, sort_keys=False, allow_unicode=True) if data else ""
        return f"---\n{block}---\n\n{body}"

    @staticmethod
    def write(root: Path, name: str, text: str) -> Path:
        """Write text to root/name, creating directories as needed."""
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path


SAMPLE_DOCUMENTS = {
    "posts/awaiting.md": ContentFactory.document_text(
        "Awaiting the unawaitable",
        description="What co_await does with a type that has no awaiter",
        date="2023-06-11",
        tags=["cpp", "coroutines"],
        body="The compiler looks for `operator co_await` first.\n",
    ),
    "posts/generators-by-hand.md": ContentFactory.document_text(
        "Generators by hand",
        description="Writing a generator<T> without a library",
        date="2023-03-02",
        tags=["cpp"],
    ),
    "posts/symmetric.md": ContentFactory.document_text(
        "Symmetric transfer",
        date="2023-09-20",
        tags=["cpp", "coroutines"],
        draft=True,
    ),
    "about.md": ContentFactory.document_text(
        "About",
        description="Who writes this blog",
        nav={"key": "About", "order": 1},
    ),
    "notes/index.md": ContentFactory.document_text(
        "Notes",
        date="2022-12-01",
        tags="misc",
        nav={"key": "Notes", "order": 2},
    ),
    ".hidden/secret.md": ContentFactory.document_text("Secret"),
    "notes/readme.txt": "not a document",
}


@pytest.fixture(scope="function")
def temp_db() -> Generator[Database, None, None]:
    """
    Create a temporary SQLite index database for testing.

    Yields:
        Database instance with tables created
    """
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    reset_db()

    database = Database(f"sqlite:///{db_path}")
    database.create_tables()

    yield database

    database.drop_tables()
    database.dispose()
    reset_db()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def db_session(temp_db):
    """Get a database session from temp_db."""
    with temp_db.session() as session:
        yield session


@pytest.fixture
def content_dir(tmp_path) -> Path:
    """A content directory populated with the sample documents."""
    root = tmp_path / "content"
    for name, text in SAMPLE_DOCUMENTS.items():
        ContentFactory.write(root, name, text)
    return root


@pytest.fixture
def content_service(db_session, content_dir) -> ContentService:
    """Content service over the sample directory, collecting parse errors."""
    return ContentService(db_session, content_dir=content_dir, strict=False)


@pytest.fixture
def indexed_service(content_service) -> ContentService:
    """Content service whose index already holds the sample documents."""
    content_service.scan()
    return content_service


@pytest.fixture
def content_factory():
    """Provide ContentFactory."""
    return ContentFactory
