from typing import List
from dataclasses import dataclass

SENTENCE_TERMINATORS = (".", "?", "!")


@dataclass(frozen=True)
class TextChunk:
    text: str
    word_count: int
    character_count: int
    start: int
    end: int


def sentence_boundary_chunking(text: str, max_size: int, overlap: int) -> List[TextChunk]:
    """
    Splits text into windows of at most max_size characters with the given overlap.

    Every window except the last one tries to end right after the last sentence
    terminator found past the window's midpoint; without one it cuts at max_size.
    """
    if max_size <= 0:
        raise ValueError("max_size must be positive")
    if overlap < 0 or overlap >= max_size:
        raise ValueError("overlap must be non-negative and less than max_size")

    chunks: List[TextChunk] = []
    start = 0
    length = len(text)
    while start < length:
        end = min(start + max_size, length)
        if end < length:
            window = text[start:end]
            boundary = max(window.rfind(terminator) for terminator in SENTENCE_TERMINATORS)
            if boundary > max_size * 0.5:
                end = start + boundary + 1

        piece = text[start:end].strip()
        if piece:
            chunks.append(TextChunk(
                text=piece,
                word_count=len(piece.split()),
                character_count=len(piece),
                start=start,
                end=end,
            ))

        if end >= length:
            break
        next_start = end - overlap
        # Overlap larger than the advance would loop on the same window
        start = next_start if next_start > start else end

    return chunks


# Example usage (for testing)
if __name__ == "__main__":
    text = "GMP requires traceability. Validate every batch. Document each deviation."

    print("Sentence boundary chunking:")
    for i, chunk in enumerate(sentence_boundary_chunking(text, max_size=40, overlap=5)):
        print(f"Chunk {i+1} (len {chunk.character_count}): '{chunk.text}'")
