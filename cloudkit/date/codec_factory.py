"""
Factory handing out one shared DateCodec per wire format.

Codecs are built lazily on first request and cached. The cache is guarded
by a lock so that, even when several threads ask for the same format at
once, exactly one codec is published for it.
"""

import logging
import threading
from typing import Dict, Mapping, Optional

from cloudkit.date.codec import CODEC_CONSTRUCTORS, DateCodec
from cloudkit.date.date_service import DateService, SimpleDateService
from cloudkit.date.wire_format import WireFormat

logger = logging.getLogger(__name__)


class DateCodecFactory:
    """Registry of DateCodec instances, one per WireFormat"""

    def __init__(
        self,
        date_service: Optional[DateService] = None,
        codecs: Optional[Mapping[WireFormat, DateCodec]] = None
    ):
        """
        Initialize the factory.

        Args:
            date_service: Service new codecs are bound to (default: SimpleDateService)
            codecs: Pre-built codecs to serve instead of constructing them.
                Each must be bound to the format it is registered under.
        """
        self.date_service = date_service if date_service is not None else SimpleDateService()
        self._lock = threading.Lock()
        self._codecs: Dict[WireFormat, DateCodec] = {}

        for wire_format, codec in (codecs or {}).items():
            bound_format = getattr(codec, "wire_format", wire_format)
            if bound_format is not wire_format:
                raise ValueError(
                    f"Codec {codec!r} is bound to {bound_format.name}, "
                    f"not {wire_format.name}"
                )
            self._codecs[wire_format] = codec

    def codec_for(self, wire_format: WireFormat) -> DateCodec:
        """
        Get the codec for a wire format, building it on first use.

        Args:
            wire_format: Format the codec should speak

        Returns:
            The shared DateCodec for that format
        """
        # Fast path: dict reads are atomic, and codecs are only published
        # fully constructed
        codec = self._codecs.get(wire_format)
        if codec is not None:
            return codec

        with self._lock:
            codec = self._codecs.get(wire_format)
            if codec is None:
                codec = CODEC_CONSTRUCTORS[wire_format](self.date_service)
                self._codecs[wire_format] = codec
                logger.info(f"Created {wire_format.name} codec: {codec!r}")
            return codec

    def rfc1123(self) -> DateCodec:
        """Codec for 'Thu, 01 Dec 1994 16:00:00 GMT'"""
        return self.codec_for(WireFormat.RFC1123)

    def rfc822(self) -> DateCodec:
        """Codec for 'Thu, 01 Dec 94 16:00:00 GMT'"""
        return self.codec_for(WireFormat.RFC822)

    def iso8601(self) -> DateCodec:
        """Codec for '1994-12-01T16:00:00.000Z'"""
        return self.codec_for(WireFormat.ISO8601)

    def iso8601_seconds(self) -> DateCodec:
        """Codec for '1994-12-01T16:00:00Z'"""
        return self.codec_for(WireFormat.ISO8601_SECONDS)

    def asctime(self) -> DateCodec:
        """Codec for 'Thu Dec  1 16:00:00 1994'"""
        return self.codec_for(WireFormat.ASCTIME)


# Global instance (singleton)
_date_codec_factory_instance = None
_date_codec_factory_lock = threading.Lock()


def get_date_codec_factory() -> DateCodecFactory:
    """
    Get global DateCodecFactory instance (singleton).

    Returns:
        DateCodecFactory backed by a SimpleDateService
    """
    global _date_codec_factory_instance
    if _date_codec_factory_instance is None:
        with _date_codec_factory_lock:
            if _date_codec_factory_instance is None:
                _date_codec_factory_instance = DateCodecFactory()
    return _date_codec_factory_instance
