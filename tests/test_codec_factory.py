"""
Tests for the DateCodecFactory.

Tests lazy construction, caching, injected codecs, and the at-most-one codec
per format guarantee under racing first use.
"""

import threading
from unittest.mock import Mock, patch

import pytest

from cloudkit.date import codec_factory
from cloudkit.date.codec import (
    DateServiceIso8601Codec,
    DateServiceRfc1123Codec,
)
from cloudkit.date.codec_factory import DateCodecFactory, get_date_codec_factory
from cloudkit.date.date_service import (
    SimpleDateService,
    ThreadLocalDateService,
    instant_from_epoch_millis,
)
from cloudkit.date.errors import MalformedInputError
from cloudkit.date.wire_format import WireFormat


class TestDateCodecFactory:
    """Test suite for DateCodecFactory accessors"""

    @pytest.fixture
    def factory(self):
        """Create a factory over a fresh SimpleDateService"""
        return DateCodecFactory(SimpleDateService())

    def test_rfc1123_codec(self, factory):
        """Test the RFC 1123 accessor end to end"""
        codec = factory.rfc1123()
        instant = instant_from_epoch_millis(1000)

        assert codec.to_date(codec.to_string(instant)) == instant
        assert codec.to_date("Thu, 01 Dec 1994 16:00:00 GMT") == instant_from_epoch_millis(786297600000)

    def test_rfc1123_codec_rejects_malformed(self, factory):
        with pytest.raises(MalformedInputError):
            factory.rfc1123().to_date("wrong")

    @pytest.mark.parametrize("accessor,wire_format", [
        ("rfc1123", WireFormat.RFC1123),
        ("rfc822", WireFormat.RFC822),
        ("iso8601", WireFormat.ISO8601),
        ("iso8601_seconds", WireFormat.ISO8601_SECONDS),
        ("asctime", WireFormat.ASCTIME),
    ])
    def test_accessor_binds_matching_format(self, factory, accessor, wire_format):
        codec = getattr(factory, accessor)()

        assert codec.wire_format is wire_format
        assert codec is factory.codec_for(wire_format)
        assert codec.to_date(wire_format.sample) == instant_from_epoch_millis(786297600000)

    def test_codecs_are_cached(self, factory):
        """Test that repeated calls return the same instance"""
        assert factory.rfc1123() is factory.rfc1123()
        assert factory.iso8601() is factory.iso8601()
        assert factory.rfc1123() is not factory.iso8601()

    def test_separate_factories_behave_identically(self):
        """Test that codecs from two factories agree on every input"""
        first = DateCodecFactory().rfc1123()
        second = DateCodecFactory().rfc1123()
        instant = instant_from_epoch_millis(1000000000000)

        assert first is not second
        assert first.to_string(instant) == second.to_string(instant)
        assert first.to_date("Thu, 01 Dec 1994 16:00:00 GMT") == second.to_date("Thu, 01 Dec 1994 16:00:00 GMT")

    def test_codec_uses_injected_service(self):
        service = Mock(spec=SimpleDateService)
        service.format.return_value = "formatted"

        factory = DateCodecFactory(service)
        assert factory.rfc1123().to_string(instant_from_epoch_millis(0)) == "formatted"
        service.format.assert_called_once_with(instant_from_epoch_millis(0), WireFormat.RFC1123)

    def test_default_service_is_simple(self):
        assert isinstance(DateCodecFactory().date_service, SimpleDateService)

    def test_thread_local_service(self):
        factory = DateCodecFactory(ThreadLocalDateService(SimpleDateService))
        assert factory.rfc1123().to_date("Thu, 01 Dec 1994 16:00:00 GMT") == instant_from_epoch_millis(786297600000)

    def test_construction_is_lazy(self):
        """Test that no codec is built before it is requested"""
        with patch.dict(codec_factory.CODEC_CONSTRUCTORS,
                        {WireFormat.RFC1123: Mock(side_effect=DateServiceRfc1123Codec)}) as constructors:
            factory = DateCodecFactory()
            constructors[WireFormat.RFC1123].assert_not_called()

            factory.rfc1123()
            factory.rfc1123()
            constructors[WireFormat.RFC1123].assert_called_once_with(factory.date_service)


class TestInjectedCodecs:
    """Test suite for pre-built codecs passed to the factory"""

    def test_injected_codec_is_served(self):
        codec = DateServiceRfc1123Codec(SimpleDateService())
        factory = DateCodecFactory(codecs={WireFormat.RFC1123: codec})

        assert factory.rfc1123() is codec

    def test_other_formats_still_built(self):
        codec = DateServiceRfc1123Codec(SimpleDateService())
        factory = DateCodecFactory(codecs={WireFormat.RFC1123: codec})

        assert isinstance(factory.iso8601(), DateServiceIso8601Codec)

    def test_mismatched_codec_rejected(self):
        """Test that a codec cannot be registered under another format"""
        codec = DateServiceIso8601Codec(SimpleDateService())
        with pytest.raises(ValueError):
            DateCodecFactory(codecs={WireFormat.RFC1123: codec})


class TestConcurrentFirstUse:
    """Racing first requests must publish exactly one codec"""

    def test_single_codec_published(self):
        factory = DateCodecFactory()
        num_threads = 16
        barrier = threading.Barrier(num_threads)
        results = []
        results_lock = threading.Lock()

        def worker():
            barrier.wait()
            codec = factory.rfc1123()
            with results_lock:
                results.append(codec)

        with patch.dict(codec_factory.CODEC_CONSTRUCTORS,
                        {WireFormat.RFC1123: Mock(side_effect=DateServiceRfc1123Codec)}) as constructors:
            threads = [threading.Thread(target=worker) for _ in range(num_threads)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

            constructors[WireFormat.RFC1123].assert_called_once()

        assert len(results) == num_threads
        assert all(codec is results[0] for codec in results)


class TestGlobalFactory:
    """Test suite for the process-wide factory"""

    def test_singleton(self):
        assert get_date_codec_factory() is get_date_codec_factory()

    def test_singleton_codecs_shared(self):
        assert get_date_codec_factory().rfc1123() is get_date_codec_factory().rfc1123()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
