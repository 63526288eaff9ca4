from .reading import Reading
from .bucket import BucketKind, DayBucket, Granularity, HourBucket, StoredBucket, Window

__all__ = [
    "Reading",
    "BucketKind",
    "DayBucket",
    "Granularity",
    "HourBucket",
    "StoredBucket",
    "Window",
]
