import io
from typing import List, Optional
import logging

import pdfplumber

from acceleraqa.core.config import settings
from acceleraqa.core.errors import ValidationError
from acceleraqa.models.document import ChunkRecord
from acceleraqa.utils.text_splitters import sentence_boundary_chunking

logging.basicConfig(level=logging.INFO) # Set logging level for better visibility
logger = logging.getLogger(__name__)

SUPPORTED_CONTENT_TYPES = ("application/pdf", "text/plain")

class DocumentProcessor:
    def __init__(self, chunk_size: int = settings.CHUNK_SIZE, chunk_overlap: int = settings.CHUNK_OVERLAP):
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    def normalize_text(self, raw_text: str) -> str:
        lines = raw_text.splitlines()
        joined = " ".join(line.strip() for line in lines if line.strip())
        return ' '.join(joined.split())

    def extract_text(self, file_content: bytes, file_type: str) -> str:
        if file_type == "application/pdf":
            return self.normalize_text(self._extract_text_from_pdf(file_content))
        elif file_type == "text/plain":
            try:
                return self.normalize_text(file_content.decode('utf-8'))
            except UnicodeDecodeError:
                raise ValidationError("Text files must be UTF-8 encoded.")
        else:
            raise ValidationError(f"Unsupported file type: {file_type}. Only .pdf and .txt are allowed.")

    def _extract_text_from_pdf(self, pdf_bytes: bytes) -> str:
        try:
            text_pages = []
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                for i, page in enumerate(pdf.pages):
                    page_text = page.extract_text()
                    if page_text:
                        text_pages.append(page_text)
                    else:
                        logger.warning(f"No text found on page {i + 1} (may be scanned image).")
        except Exception as e:
            logger.error(f"PDF loading failed: {e}", exc_info=True)
            raise ValidationError("PDF parsing failed.")

        combined_text = "\n\n".join(text_pages)
        if not combined_text.strip():
            raise ValidationError("No extractable text. This may be a scanned PDF or image-only.")

        logger.info("Text extracted using pdfplumber.")
        return combined_text

    def chunk_text(self, text: str, document_id: str, chunk_size: Optional[int] = None,
                   chunk_overlap: Optional[int] = None) -> List[ChunkRecord]:
        """
        Splits text at sentence boundaries and generates ChunkRecord objects
        with gapless indices. Embeddings are filled in later.
        """
        pieces = sentence_boundary_chunking(
            text,
            max_size=chunk_size or self.chunk_size,
            overlap=self.chunk_overlap if chunk_overlap is None else chunk_overlap,
        )
        return [
            ChunkRecord(
                document_id=document_id,
                index=i,
                text=piece.text,
                word_count=piece.word_count,
                character_count=piece.character_count,
            )
            for i, piece in enumerate(pieces)
        ]
