"""Usage statistics over a client's stored files."""

from typing import Iterable

from app.schemas.storage import FileStatistics, FileTypeStats, StoredFileRecord

MB = 1024 * 1024

# (label, exclusive upper bound in bytes); the last bucket is open-ended
SIZE_BUCKETS: list[tuple[str, float]] = [
    ("0-1MB", 1 * MB),
    ("1-10MB", 10 * MB),
    ("10-100MB", 100 * MB),
    ("100MB+", float("inf")),
]


def size_bucket(size: int) -> str:
    for label, upper in SIZE_BUCKETS:
        if size < upper:
            return label
    return SIZE_BUCKETS[-1][0]


def compute_statistics(records: Iterable[StoredFileRecord]) -> FileStatistics:
    """
    Aggregate records into counts, bytes, per-category shares and a size histogram.
    An empty input yields the zeroed structure with empty maps.
    """
    records = list(records)
    if not records:
        return FileStatistics()

    file_types: dict[str, FileTypeStats] = {}
    size_breakdown = {label: 0 for label, _ in SIZE_BUCKETS}
    total_size = 0
    for record in records:
        stats = file_types.setdefault(record.category, FileTypeStats())
        stats.count += 1
        stats.totalSize += record.size
        size_breakdown[size_bucket(record.size)] += 1
        total_size += record.size

    total = len(records)
    for stats in file_types.values():
        stats.percentage = round(stats.count / total * 100, 2)

    return FileStatistics(
        totalFiles=total,
        totalSize=total_size,
        fileTypes=dict(sorted(file_types.items())),
        sizeBreakdown=size_breakdown,
    )
