# acceleraqa/database/connection.py
from sqlalchemy import (
    create_engine, event, Column, String, Integer, Text, DateTime, JSON, ForeignKey, Index, UniqueConstraint,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base, relationship
from acceleraqa.core.config import settings
import uuid


def build_engine(database_url: str, echo: bool = False, **engine_kwargs) -> Engine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
    engine = create_engine(database_url, echo=echo, connect_args=connect_args, **engine_kwargs)
    if engine.dialect.name == "sqlite":
        # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# SQLAlchemy Engine
engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

class DocumentRow(Base):
    __tablename__ = "rag_documents"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(255), nullable=False)
    filename = Column(String(500), nullable=False)
    file_type = Column(String(8), nullable=False, default="txt")
    size_bytes = Column(Integer, nullable=False, default=0)
    text_preview = Column(Text, nullable=False, default="")
    category = Column(String(64), nullable=False, default="general")
    tags = Column(JSON, nullable=False, default=list)
    doc_metadata = Column("metadata", JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False)

    chunks = relationship(
        "ChunkRow",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ChunkRow.chunk_index",
    )

    __table_args__ = (
        Index("idx_rag_documents_owner", "owner_id"),
        Index("idx_rag_documents_created", "owner_id", "created_at"),
    )

    def __repr__(self):
        return f"<DocumentRow(id='{self.id}', owner_id='{self.owner_id}', filename='{self.filename}')>"

class ChunkRow(Base):
    __tablename__ = "rag_document_chunks"
    id = Column(String(64), primary_key=True)
    document_id = Column(String(36), ForeignKey("rag_documents.id", ondelete="CASCADE"), nullable=False)
    chunk_index = Column(Integer, nullable=False)
    chunk_text = Column(Text, nullable=False)
    word_count = Column(Integer, nullable=False)
    character_count = Column(Integer, nullable=False)
    embedding = Column(JSON(none_as_null=True), nullable=True)

    document = relationship("DocumentRow", back_populates="chunks")

    __table_args__ = (
        UniqueConstraint("document_id", "chunk_index", name="uq_rag_chunks_document_index"),
        Index("idx_rag_chunks_document_id", "document_id"),
    )

    def __repr__(self):
        return f"<ChunkRow(id='{self.id}', document_id='{self.document_id}', index={self.chunk_index})>"


# Create tables
def create_db_and_tables(bind: Engine = None):
    Base.metadata.create_all(bind=bind or engine)

if __name__ == "__main__":
    create_db_and_tables()
    print("Database and tables created/checked successfully.")
