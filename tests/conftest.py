import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from acceleraqa.api.dependencies import get_retrieval_service
from acceleraqa.core.config import Settings
from acceleraqa.database.connection import build_engine, create_db_and_tables
from acceleraqa.main import app
from acceleraqa.services.document_store import SQLDocumentStore
from acceleraqa.services.retrieval_service import RetrievalService

from fakes import InMemoryDocumentStore, StubEmbeddingProvider


@pytest.fixture
def test_settings():
    return Settings(
        DATABASE_URL="sqlite://",
        CHUNK_SIZE=200,
        CHUNK_OVERLAP=20,
        EMBEDDING_API_KEY="test-key",
        PLACEHOLDER_ON_EMPTY_UPLOAD=False,
    )


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    create_db_and_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(engine):
    return SQLDocumentStore(sessionmaker(bind=engine, autocommit=False, autoflush=False))


@pytest.fixture
def memory_store():
    return InMemoryDocumentStore()


@pytest.fixture
def embedder():
    return StubEmbeddingProvider()


@pytest.fixture
def service(sql_store, embedder, test_settings):
    return RetrievalService(document_store=sql_store, embedding_provider=embedder, config=test_settings)


@pytest.fixture
def client(service):
    app.dependency_overrides[get_retrieval_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()
