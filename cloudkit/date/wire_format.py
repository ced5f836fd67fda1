"""
Wire formats understood by the date codecs.

Each member names one externally specified date grammar. The set is closed:
adding a format means adding a member here, a format/parse pair on the
DateService and an accessor on the DateCodecFactory.
"""

from enum import Enum


class WireFormat(Enum):
    """Supported date string grammars (all rendered in UTC/GMT)"""

    RFC1123 = ("EEE, dd MMM yyyy HH:mm:ss 'GMT'", "Thu, 01 Dec 1994 16:00:00 GMT")
    RFC822 = ("EEE, dd MMM yy HH:mm:ss 'GMT'", "Thu, 01 Dec 94 16:00:00 GMT")
    ISO8601 = ("yyyy-MM-dd'T'HH:mm:ss.SSS'Z'", "1994-12-01T16:00:00.000Z")
    ISO8601_SECONDS = ("yyyy-MM-dd'T'HH:mm:ss'Z'", "1994-12-01T16:00:00Z")
    ASCTIME = ("EEE MMM ppd HH:mm:ss yyyy", "Thu Dec  1 16:00:00 1994")

    def __init__(self, pattern: str, sample: str):
        self.pattern = pattern
        self.sample = sample

    @classmethod
    def from_name(cls, name: str) -> "WireFormat":
        """
        Resolve a user supplied format name.

        Matching ignores case and treats '-' like '_', so "rfc1123",
        "ISO8601" and "iso8601-seconds" all resolve.

        Raises:
            KeyError: If no format has that name
        """
        key = name.strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise KeyError(f"Unknown date format: {name!r}") from None
