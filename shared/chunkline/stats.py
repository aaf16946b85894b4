"""
Size statistics for a chunk sequence.
"""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class ChunkingStats:
    """Lengths of a chunk sequence.

    ``is_balanced`` is True when the spread between the longest and the
    shortest chunk is under half the average length.
    """

    chunk_count: int = 0
    total_length: int = 0
    avg_chunk_length: float = 0.0
    max_chunk_length: int = 0
    min_chunk_length: int = 0
    is_balanced: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def get_chunking_stats(chunks) -> ChunkingStats:
    """Compute statistics for a list of chunk strings.

    Empty or non-list input yields all-zero statistics.
    """
    if not isinstance(chunks, (list, tuple)) or not chunks:
        return ChunkingStats()

    lengths = [len(chunk) for chunk in chunks if isinstance(chunk, str)]
    if not lengths:
        return ChunkingStats()

    total = sum(lengths)
    average = total / len(lengths)
    longest, shortest = max(lengths), min(lengths)
    return ChunkingStats(
        chunk_count=len(lengths),
        total_length=total,
        avg_chunk_length=round(average, 2),
        max_chunk_length=longest,
        min_chunk_length=shortest,
        is_balanced=longest - shortest < average * 0.5,
    )
