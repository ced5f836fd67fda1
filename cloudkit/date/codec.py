"""
Date codecs: the two-operation contract callers use to cross a wire format.

A codec is bound to one WireFormat and one DateService at construction and
is read-only afterwards, so one instance can be shared by every caller.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Dict, Optional

from cloudkit.date.date_service import DateService
from cloudkit.date.wire_format import WireFormat


class DateCodec(ABC):
    """Abstract encode/decode capability for one date wire format"""

    @abstractmethod
    def to_string(self, instant: datetime) -> str:
        """
        Render an instant in this codec's format.

        Args:
            instant: Datetime to render (naive values are read as UTC)

        Returns:
            Well-formed date string

        Raises:
            ValueError: If the instant has no UTC equivalent in years 1..9999
        """
        pass

    @abstractmethod
    def to_date(self, text: str) -> datetime:
        """
        Parse a string produced in this codec's format.

        Args:
            text: Wire-format date string

        Returns:
            Timezone-aware UTC datetime

        Raises:
            MalformedDateError: If `text` is malformed, out of range, or in
                a different format
        """
        pass


class DateServiceCodec(DateCodec):
    """DateCodec that delegates to one format pair of a DateService"""

    wire_format: Optional[WireFormat] = None

    def __init__(self, date_service: DateService, wire_format: Optional[WireFormat] = None):
        if date_service is None:
            raise TypeError("date_service is required")
        wire_format = wire_format or self.wire_format
        if wire_format is None:
            raise TypeError(f"{type(self).__name__} needs a wire_format")

        self.date_service = date_service
        self.wire_format = wire_format

    def to_string(self, instant: datetime) -> str:
        return self.date_service.format(instant, self.wire_format)

    def to_date(self, text: str) -> datetime:
        return self.date_service.parse(text, self.wire_format)

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(wire_format={self.wire_format.name}, "
                f"date_service={type(self.date_service).__name__})")


class DateServiceRfc1123Codec(DateServiceCodec):
    wire_format = WireFormat.RFC1123

    def __init__(self, date_service: DateService):
        super().__init__(date_service)


class DateServiceRfc822Codec(DateServiceCodec):
    wire_format = WireFormat.RFC822

    def __init__(self, date_service: DateService):
        super().__init__(date_service)


class DateServiceIso8601Codec(DateServiceCodec):
    wire_format = WireFormat.ISO8601

    def __init__(self, date_service: DateService):
        super().__init__(date_service)


class DateServiceIso8601SecondsCodec(DateServiceCodec):
    wire_format = WireFormat.ISO8601_SECONDS

    def __init__(self, date_service: DateService):
        super().__init__(date_service)


class DateServiceAsctimeCodec(DateServiceCodec):
    wire_format = WireFormat.ASCTIME

    def __init__(self, date_service: DateService):
        super().__init__(date_service)


# One constructor per format, built once at import
CODEC_CONSTRUCTORS: Dict[WireFormat, Callable[[DateService], DateCodec]] = {
    WireFormat.RFC1123: DateServiceRfc1123Codec,
    WireFormat.RFC822: DateServiceRfc822Codec,
    WireFormat.ISO8601: DateServiceIso8601Codec,
    WireFormat.ISO8601_SECONDS: DateServiceIso8601SecondsCodec,
    WireFormat.ASCTIME: DateServiceAsctimeCodec,
}
