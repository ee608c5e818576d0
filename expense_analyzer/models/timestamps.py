from datetime import datetime, timezone


def to_utc_naive(value: datetime) -> datetime:
    """
    Express a timestamp as naive UTC, the form stored in the DateTime columns.

    Aware values are converted to UTC and lose their tzinfo; naive values are
    taken to be UTC already and returned unchanged.
    """
    if value.tzinfo is None or value.utcoffset() is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
