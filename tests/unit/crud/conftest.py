"""Shared fixtures for crud unit tests"""

import pytest
from sqlmodel import SQLModel

from pagemigrate.core.models import Page
from pagemigrate.crud.database import init_db, make_engine
from pagemigrate.crud.memory_store import MemoryContentStore
from pagemigrate.crud.sql_store import SQLContentStore


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = make_engine("sqlite://")
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="sql_store")
def sql_store_fixture(engine):
    return SQLContentStore(engine, max_versions=3)


@pytest.fixture(name="memory_store")
def memory_store_fixture():
    return MemoryContentStore()


@pytest.fixture(name="page")
def page_fixture():
    return Page(slug="intro", title="Intro", content_path="pages/intro")
