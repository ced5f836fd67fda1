"""
Date service for translating between instants and wire-format date strings.

An instant is a timezone-aware datetime in UTC with millisecond resolution.
Rendering never consults the process locale or TZ: day and month names come
from fixed English tables, and every supported grammar is pinned to GMT.

Parsing is strict. A string must match the complete grammar of the format
being parsed (no surrounding whitespace, no case folding, no guessing between
formats), and the parsed fields must form a real calendar date and time.
"""

import logging
import re
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Tuple

import ciso8601

from cloudkit.config import Config
from cloudkit.date.errors import MalformedDateError
from cloudkit.date.wire_format import WireFormat

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# English abbreviations, indexed by datetime.weekday() / month - 1
DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_MONTH_NUMBERS = {name: index + 1 for index, name in enumerate(MONTH_NAMES)}

_DAY = "(?P<wkday>" + "|".join(DAY_NAMES) + ")"
_MONTH = "(?P<month>" + "|".join(MONTH_NAMES) + ")"
_TIME = r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"

RFC1123_PATTERN = re.compile(
    _DAY + r", (?P<day>\d{2}) " + _MONTH + r" (?P<year>\d{4}) " + _TIME + " GMT",
    re.ASCII,
)
RFC822_PATTERN = re.compile(
    _DAY + r", (?P<day>\d{2}) " + _MONTH + r" (?P<year>\d{2}) " + _TIME + " GMT",
    re.ASCII,
)
ASCTIME_PATTERN = re.compile(
    _DAY + " " + _MONTH + r" (?P<day> \d|\d{2}) " + _TIME + r" (?P<year>\d{4})",
    re.ASCII,
)
ISO8601_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}T(?P<hour>\d{2}):\d{2}:\d{2}\.\d{3}Z", re.ASCII)
ISO8601_SECONDS_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}T(?P<hour>\d{2}):\d{2}:\d{2}Z", re.ASCII)


def to_utc_instant(instant: datetime) -> datetime:
    """
    Normalize a datetime to a UTC instant with millisecond resolution.

    Naive datetimes are taken to already be in UTC.

    Raises:
        TypeError: If `instant` is not a datetime
        ValueError: If the UTC equivalent falls outside years 1..9999
    """
    if not isinstance(instant, datetime):
        raise TypeError(f"Expected a datetime, got {type(instant).__name__}")

    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    else:
        try:
            instant = instant.astimezone(timezone.utc)
        except OverflowError as e:
            raise ValueError(f"{instant.isoformat()} is outside the range representable in UTC") from e

    return instant.replace(microsecond=instant.microsecond - instant.microsecond % 1000)


def instant_from_epoch_millis(millis: int) -> datetime:
    """Build the UTC instant `millis` milliseconds after the Unix epoch"""
    return EPOCH + timedelta(milliseconds=millis)


def epoch_millis(instant: datetime) -> int:
    """Milliseconds between the Unix epoch and `instant`"""
    return (to_utc_instant(instant) - EPOCH) // timedelta(milliseconds=1)


class DateService(ABC):
    """
    Abstract translator between instants and every supported wire format.

    Implementations must be safe to call from several threads at once; a
    primitive that is not should be wrapped in ThreadLocalDateService.
    """

    @abstractmethod
    def format_rfc1123(self, instant: datetime) -> str:
        """Render as 'Thu, 01 Dec 1994 16:00:00 GMT'"""
        pass

    @abstractmethod
    def parse_rfc1123(self, text: str) -> datetime:
        pass

    @abstractmethod
    def format_rfc822(self, instant: datetime) -> str:
        """Render as 'Thu, 01 Dec 94 16:00:00 GMT'"""
        pass

    @abstractmethod
    def parse_rfc822(self, text: str) -> datetime:
        pass

    @abstractmethod
    def format_iso8601(self, instant: datetime) -> str:
        """Render as '1994-12-01T16:00:00.000Z'"""
        pass

    @abstractmethod
    def parse_iso8601(self, text: str) -> datetime:
        pass

    @abstractmethod
    def format_iso8601_seconds(self, instant: datetime) -> str:
        """Render as '1994-12-01T16:00:00Z'"""
        pass

    @abstractmethod
    def parse_iso8601_seconds(self, text: str) -> datetime:
        pass

    @abstractmethod
    def format_asctime(self, instant: datetime) -> str:
        """Render as 'Thu Dec  1 16:00:00 1994'"""
        pass

    @abstractmethod
    def parse_asctime(self, text: str) -> datetime:
        pass

    def format(self, instant: datetime, wire_format: WireFormat) -> str:
        """Render `instant` in the given wire format"""
        formatter, _ = _DISPATCH[wire_format]
        return formatter(self, instant)

    def parse(self, text: str, wire_format: WireFormat) -> datetime:
        """
        Parse `text` under the given wire format.

        Raises:
            MalformedDateError: If `text` does not match the format's grammar
        """
        _, parser = _DISPATCH[wire_format]
        return parser(self, text)


_DISPATCH: Dict[WireFormat, Tuple[Callable, Callable]] = {
    WireFormat.RFC1123: (
        lambda service, instant: service.format_rfc1123(instant),
        lambda service, text: service.parse_rfc1123(text),
    ),
    WireFormat.RFC822: (
        lambda service, instant: service.format_rfc822(instant),
        lambda service, text: service.parse_rfc822(text),
    ),
    WireFormat.ISO8601: (
        lambda service, instant: service.format_iso8601(instant),
        lambda service, text: service.parse_iso8601(text),
    ),
    WireFormat.ISO8601_SECONDS: (
        lambda service, instant: service.format_iso8601_seconds(instant),
        lambda service, text: service.parse_iso8601_seconds(text),
    ),
    WireFormat.ASCTIME: (
        lambda service, instant: service.format_asctime(instant),
        lambda service, text: service.parse_asctime(text),
    ),
}


class SimpleDateService(DateService):
    """
    Locale-invariant DateService built on compiled patterns and English tables.

    Holds no mutable state, so a single instance can be shared by every
    thread in the process.
    """

    def __init__(self, century_pivot: Optional[int] = None):
        """
        Args:
            century_pivot: RFC 822 two digit years >= pivot are 19yy, the rest
                20yy (defaults to Config.RFC822_CENTURY_PIVOT)
        """
        if century_pivot is None:
            century_pivot = Config.RFC822_CENTURY_PIVOT
        if not 0 <= century_pivot <= 99:
            raise ValueError(f"century_pivot must be between 0 and 99, got {century_pivot}")
        self.century_pivot = century_pivot

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------
    def format_rfc1123(self, instant: datetime) -> str:
        dt = to_utc_instant(instant)
        return (f"{DAY_NAMES[dt.weekday()]}, {dt.day:02d} {MONTH_NAMES[dt.month - 1]} "
                f"{dt.year:04d} {dt:%H:%M:%S} GMT")

    def format_rfc822(self, instant: datetime) -> str:
        dt = to_utc_instant(instant)
        return (f"{DAY_NAMES[dt.weekday()]}, {dt.day:02d} {MONTH_NAMES[dt.month - 1]} "
                f"{dt.year % 100:02d} {dt:%H:%M:%S} GMT")

    def format_iso8601(self, instant: datetime) -> str:
        dt = to_utc_instant(instant)
        return (f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}T{dt:%H:%M:%S}"
                f".{dt.microsecond // 1000:03d}Z")

    def format_iso8601_seconds(self, instant: datetime) -> str:
        dt = to_utc_instant(instant)
        return f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}T{dt:%H:%M:%S}Z"

    def format_asctime(self, instant: datetime) -> str:
        dt = to_utc_instant(instant)
        return (f"{DAY_NAMES[dt.weekday()]} {MONTH_NAMES[dt.month - 1]} {dt.day:2d} "
                f"{dt:%H:%M:%S} {dt.year:04d}")

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------
    def parse_rfc1123(self, text: str) -> datetime:
        fields = self._match(RFC1123_PATTERN, text, WireFormat.RFC1123)
        return self._build(fields, int(fields["year"]), text, WireFormat.RFC1123)

    def parse_rfc822(self, text: str) -> datetime:
        fields = self._match(RFC822_PATTERN, text, WireFormat.RFC822)
        year = int(fields["year"])
        year += 1900 if year >= self.century_pivot else 2000
        return self._build(fields, year, text, WireFormat.RFC822)

    def parse_asctime(self, text: str) -> datetime:
        fields = self._match(ASCTIME_PATTERN, text, WireFormat.ASCTIME)
        return self._build(fields, int(fields["year"]), text, WireFormat.ASCTIME)

    def parse_iso8601(self, text: str) -> datetime:
        return self._parse_iso(ISO8601_PATTERN, text, WireFormat.ISO8601)

    def parse_iso8601_seconds(self, text: str) -> datetime:
        return self._parse_iso(ISO8601_SECONDS_PATTERN, text, WireFormat.ISO8601_SECONDS)

    def _match(self, pattern: re.Pattern, text: str, wire_format: WireFormat) -> Dict[str, str]:
        if not isinstance(text, str):
            raise MalformedDateError(text, wire_format, f"expected str, got {type(text).__name__}")

        match = pattern.fullmatch(text)
        if match is None:
            logger.debug(f"{wire_format.name} grammar mismatch: {text!r}")
            raise MalformedDateError(text, wire_format, f"expected {wire_format.pattern}")
        return match.groupdict()

    def _build(self, fields: Dict[str, str], year: int, text: str,
               wire_format: WireFormat) -> datetime:
        try:
            return datetime(
                year,
                _MONTH_NUMBERS[fields["month"]],
                int(fields["day"]),
                int(fields["hour"]),
                int(fields["minute"]),
                int(fields["second"]),
                tzinfo=timezone.utc,
            )
        except ValueError as e:
            logger.debug(f"{wire_format.name} field out of range: {text!r}: {e}")
            raise MalformedDateError(text, wire_format, str(e)) from e

    def _parse_iso(self, pattern: re.Pattern, text: str, wire_format: WireFormat) -> datetime:
        fields = self._match(pattern, text, wire_format)
        # ciso8601 reads 24:00:00 as midnight of the next day
        if int(fields["hour"]) > 23:
            raise MalformedDateError(text, wire_format, "hour must be in 0..23")
        try:
            parsed = ciso8601.parse_datetime(text)
        except ValueError as e:
            logger.debug(f"{wire_format.name} field out of range: {text!r}: {e}")
            raise MalformedDateError(text, wire_format, str(e)) from e
        return parsed.replace(tzinfo=timezone.utc)


class ThreadLocalDateService(DateService):
    """
    DateService that gives every thread its own delegate.

    Wrap a DateService whose formatting primitive keeps mutable state so that
    concurrent callers never share one instance. Delegates are created lazily
    from `factory`, once per thread.
    """

    def __init__(self, factory: Callable[[], DateService]):
        self._factory = factory
        self._local = threading.local()

    def _delegate(self) -> DateService:
        service = getattr(self._local, "service", None)
        if service is None:
            service = self._factory()
            self._local.service = service
            logger.debug(f"Created {type(service).__name__} for thread "
                         f"{threading.current_thread().name}")
        return service

    def format_rfc1123(self, instant: datetime) -> str:
        return self._delegate().format_rfc1123(instant)

    def parse_rfc1123(self, text: str) -> datetime:
        return self._delegate().parse_rfc1123(text)

    def format_rfc822(self, instant: datetime) -> str:
        return self._delegate().format_rfc822(instant)

    def parse_rfc822(self, text: str) -> datetime:
        return self._delegate().parse_rfc822(text)

    def format_iso8601(self, instant: datetime) -> str:
        return self._delegate().format_iso8601(instant)

    def parse_iso8601(self, text: str) -> datetime:
        return self._delegate().parse_iso8601(text)

    def format_iso8601_seconds(self, instant: datetime) -> str:
        return self._delegate().format_iso8601_seconds(instant)

    def parse_iso8601_seconds(self, text: str) -> datetime:
        return self._delegate().parse_iso8601_seconds(text)

    def format_asctime(self, instant: datetime) -> str:
        return self._delegate().format_asctime(instant)

    def parse_asctime(self, text: str) -> datetime:
        return self._delegate().parse_asctime(text)
