"""
Tests for the hash id codec.
"""
import pytest

from hashlink_app.config import settings
from hashlink_app.services.hashid_codec import HashIdCodec, get_hashid_codec


class TestHashIdCodec:
    """Test encoding and decoding of link ids"""

    def test_respects_min_length(self, codec):
        """Test hash ids are never shorter than the custom hash minimum"""
        for link_id in (1, 2, 10, 999):
            assert len(codec.encode(link_id)) >= settings.hash_min_length

    def test_decodes_back_to_id(self, codec):
        """Test a hash id decodes to the id it was made from"""
        token = codec.encode(42)
        assert codec.decode(token) == (42,)
        assert codec.decode_id(token) == 42
        assert codec.is_hash_id(token)

    def test_same_id_same_token(self, codec):
        """Test encoding is deterministic"""
        assert codec.encode(123) == codec.encode(123)

    def test_different_ids_different_tokens(self, codec):
        """Test distinct ids never share a hash id"""
        tokens = {codec.encode(link_id) for link_id in range(1, 101)}
        assert len(tokens) == 100

    @pytest.mark.parametrize("token", ["", "Hello-World!", "not a token"])
    def test_foreign_tokens_decode_to_nothing(self, codec, token):
        """Test strings the codec could not produce decode to an empty tuple"""
        assert codec.decode(token) == ()
        assert codec.decode_id(token) is None
        assert not codec.is_hash_id(token)

    def test_salt_changes_encoding(self):
        """Test the salt obfuscates the sequence"""
        a = HashIdCodec(salt="one.example", min_length=5)
        b = HashIdCodec(salt="two.example", min_length=5)
        assert a.encode(1) != b.encode(1)
        assert b.decode(a.encode(1)) != (1,)

    def test_rejects_negative_ids(self, codec):
        """Test only non-negative ids can be encoded"""
        with pytest.raises(ValueError):
            codec.encode(-1)


class TestGetHashIdCodec:
    """Test the process-wide codec"""

    def test_singleton(self):
        """Test the same codec is returned every time"""
        assert get_hashid_codec() is get_hashid_codec()

    def test_salted_with_service_host(self):
        """Test the codec is keyed by the service host"""
        codec = get_hashid_codec()
        assert codec.salt == "sho.rt"
        assert codec.min_length == settings.hash_min_length
