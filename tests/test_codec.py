"""Tests for the round/version codec."""

import pytest

from roundkeeper.checkpoint.codec import (
    MODEL_SUFFIX,
    checkpoint_path,
    decode,
    encode,
    parse_version,
)


class TestEncodeDecode:
    """Tests for round <-> version mapping."""

    @pytest.mark.parametrize("round_num", [0, 1, 3, 17, 10_000])
    def test_decode_inverts_encode(self, round_num):
        """Test decode(encode(r)) == r."""
        assert decode(encode(round_num)) == round_num

    def test_encode_is_strictly_increasing(self):
        """Test that later rounds always get higher versions."""
        versions = [encode(r) for r in range(50)]
        assert versions == sorted(set(versions))

    def test_decode_truncates_foreign_versions(self):
        """Test that odd versions decode by truncation instead of failing."""
        assert decode(7) == 3
        assert decode(1) == 0

    def test_negative_round_rejected(self):
        """Test that negative rounds cannot be encoded."""
        with pytest.raises(ValueError, match="non-negative"):
            encode(-1)


class TestPaths:
    """Tests for entry path construction and parsing."""

    def test_checkpoint_path(self):
        """Test path layout <root>/<version>.model."""
        assert checkpoint_path("/ckpt/job", 10) == "/ckpt/job/10.model"

    def test_checkpoint_path_trailing_slash(self):
        """Test that a trailing slash on the root is not doubled."""
        assert checkpoint_path("/ckpt/job/", 4) == "/ckpt/job/4.model"

    def test_parse_version(self):
        """Test parsing a valid entry name."""
        assert parse_version(f"12{MODEL_SUFFIX}") == 12

    @pytest.mark.parametrize(
        "name", ["notes.txt", "abc.model", "-2.model", ".model", "1.5.model", "10"]
    )
    def test_parse_version_rejects_foreign_names(self, name):
        """Test that unrelated names parse to None."""
        assert parse_version(name) is None
