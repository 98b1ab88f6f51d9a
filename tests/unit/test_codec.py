"""Unit tests for the composite ID codec."""

import base64

import pytest

from prismatf.core.exceptions import MalformedIdentifierError
from prismatf.ids.codec import (
    CompositeIdCodec,
    build_rql_search_id,
    decode,
    encode,
    parse_rql_search_id,
)


class TestCompositeIdCodec:
    """Test encode/decode behavior."""

    def test_rql_search_parts_round_trip(self):
        """Test embedded '=' and spaces survive the round trip."""
        parts = ["config", "instances = 1", "abc-123"]

        token = encode(parts)

        assert decode(token) == parts

    @pytest.mark.parametrize(
        "parts",
        [
            [],
            [""],
            ["", "", ""],
            ["config", "", "abc"],
            ["a:b", "3:xyz", "::"],
            ["line1\nline2", "tab\there", "nul\x00byte"],
            ["config from cloud.resource where api.name = 'aws-ec2'", "héllo ☃", "🚀"],
            ["x" * 10_000, "12", "0"],
        ],
    )
    def test_round_trip(self, parts):
        """Test decode(encode(parts)) reproduces the parts exactly."""
        assert decode(encode(parts)) == parts

    def test_token_is_single_url_safe_string(self):
        """Test the token has no separators that could clash with other formats."""
        token = encode(["event", "a/b+c?d", "\n"])

        assert "\n" not in token
        assert all(c.isalnum() or c in "-_=" for c in token)

    def test_arity_preserved(self):
        """Test the number of parts is preserved."""
        assert len(decode(encode(["a", "b"]))) == 2
        assert len(decode(encode(["a", "b", "c"]))) == 3

    def test_rejects_non_string_parts(self):
        """Test encoding non-string parts fails loudly."""
        with pytest.raises(TypeError):
            encode(["config", 1, "abc"])

    def test_expected_parts_mismatch(self):
        """Test decode enforces the caller's arity."""
        token = encode(["a", "b"])

        with pytest.raises(MalformedIdentifierError) as exc_info:
            decode(token, expected_parts=3)

        assert "expected 3 parts, found 2" in str(exc_info.value)

    def test_codec_instance(self):
        """Test the codec class matches the module-level functions."""
        codec = CompositeIdCodec()

        assert codec.encode(["a"]) == encode(["a"])
        assert codec.decode(encode(["a"])) == ["a"]


class TestMalformedIdentifiers:
    """Test decode failures."""

    def test_truncated_token(self):
        """Test a token with its tail cut off is rejected."""
        token = encode(["config", "instances = 1", "abc-123"])

        with pytest.raises(MalformedIdentifierError):
            decode(token[:-4])
        with pytest.raises(MalformedIdentifierError):
            decode(token[:-1])

    @pytest.mark.parametrize(
        "parts",
        [
            ["a", "bc"],
            ["config", "instances = 1", "abc-123"],
            ["", "", ""],
            ["x", "", "yz", "0"],
        ],
    )
    def test_every_prefix_rejected(self, parts):
        """Test no proper prefix of a token decodes, including part boundaries."""
        token = encode(parts)

        for end in range(len(token)):
            with pytest.raises(MalformedIdentifierError):
                decode(token[:end])

    def test_prefix_on_part_boundary(self):
        """Test a prefix ending exactly after the first part is rejected."""
        token = encode(["a", "bc"])

        assert token == "MjoxOmEyOmJj"
        with pytest.raises(MalformedIdentifierError):
            decode(token[:8])

    def test_empty_token(self):
        """Test the empty string is not a valid identifier."""
        with pytest.raises(MalformedIdentifierError) as exc_info:
            decode("")

        assert "missing part count" in str(exc_info.value)

    def test_standard_alphabet_rejected(self):
        """Test '+' and '/' are not accepted in place of '-' and '_'."""
        assert encode(["ÿ"]) == "MToyOsO_"

        with pytest.raises(MalformedIdentifierError) as exc_info:
            decode("MToyOsO/")

        assert "non-canonical" in str(exc_info.value)
        with pytest.raises(MalformedIdentifierError):
            decode("MTp+")

    def test_nonzero_padding_bits_rejected(self):
        """Test only the canonical spelling of a payload is accepted."""
        assert encode(["a"]) == "MToxOmE="

        with pytest.raises(MalformedIdentifierError):
            decode("MToxOmF=")

    def test_trailing_data(self):
        """Test bytes after the declared parts are rejected."""
        token = base64.urlsafe_b64encode(b"1:1:ab").decode("ascii")

        with pytest.raises(MalformedIdentifierError) as exc_info:
            decode(token)

        assert "trailing data" in str(exc_info.value)

    def test_part_count_mismatch(self):
        """Test a header promising more parts than the payload holds."""
        token = base64.urlsafe_b64encode(b"2:1:a").decode("ascii")

        with pytest.raises(MalformedIdentifierError) as exc_info:
            decode(token)

        assert "expected 2 parts" in str(exc_info.value)

    def test_bad_part_count(self):
        """Test a zero-padded part count is rejected."""
        token = base64.urlsafe_b64encode(b"01:1:a").decode("ascii")

        with pytest.raises(MalformedIdentifierError) as exc_info:
            decode(token)

        assert "bad part count" in str(exc_info.value)

    @pytest.mark.parametrize(
        "token",
        ["not-a-token!", "hello", "abcd", "plain text id", "Ω"],
    )
    def test_freeform_strings(self, token):
        """Test strings not produced by encode are rejected."""
        with pytest.raises(MalformedIdentifierError):
            decode(token)

    def test_bad_length_prefix(self):
        """Test a payload with a non-numeric prefix is rejected."""
        token = base64.urlsafe_b64encode(b"1:x:abc").decode("ascii")

        with pytest.raises(MalformedIdentifierError) as exc_info:
            decode(token)

        assert "bad length prefix" in str(exc_info.value)

    def test_leading_zero_prefix(self):
        """Test zero-padded lengths are not accepted."""
        token = base64.urlsafe_b64encode(b"1:03:abc").decode("ascii")

        with pytest.raises(MalformedIdentifierError):
            decode(token)

    def test_overlong_length_prefix(self):
        """Test a declared length past the payload end is rejected."""
        token = base64.urlsafe_b64encode(b"1:9:abc").decode("ascii")

        with pytest.raises(MalformedIdentifierError) as exc_info:
            decode(token)

        assert "truncated" in str(exc_info.value)

    def test_invalid_utf8(self):
        """Test a part that is not UTF-8 is rejected."""
        token = base64.urlsafe_b64encode(b"1:2:\xff\xfe").decode("ascii")

        with pytest.raises(MalformedIdentifierError):
            decode(token)

    def test_error_is_value_error(self):
        """Test MalformedIdentifierError can be caught as ValueError."""
        with pytest.raises(ValueError):
            decode("???")

    def test_error_carries_token(self):
        """Test the failing token is attached to the error."""
        with pytest.raises(MalformedIdentifierError) as exc_info:
            decode("hello")

        assert exc_info.value.token == "hello"


class TestRqlSearchId:
    """Test RQL search id helpers."""

    def test_build_and_parse(self):
        """Test the three parts come back in order."""
        token = build_rql_search_id("network", "network from vpc.flow_record", "id-9")

        assert parse_rql_search_id(token) == (
            "network",
            "network from vpc.flow_record",
            "id-9",
        )

    def test_parse_wrong_arity(self):
        """Test a two-part token is not a valid RQL search id."""
        with pytest.raises(MalformedIdentifierError):
            parse_rql_search_id(encode(["config", "query"]))
