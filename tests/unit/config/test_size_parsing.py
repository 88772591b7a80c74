"""Unit tests for size parsing."""

import pytest

from fsbench.config.validators import parse_size


class TestParseSize:
    """Tests for parse_size."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("4k", 4096),
            ("4K", 4096),
            ("64KiB", 65536),
            ("1M", 1024**2),
            ("512MB", 512 * 1024**2),
            ("1G", 1024**3),
            ("4096", 4096),
            (" 8 k ", 8192),
        ],
    )
    def test_valid_sizes(self, text: str, expected: int) -> None:
        """Test that binary units are recognized case-insensitively."""
        assert parse_size(text) == expected

    @pytest.mark.parametrize("text", ["", "k", "4x", "-4k", "0", "1T"])
    def test_invalid_sizes(self, text: str) -> None:
        """Test that malformed, unknown or non-positive sizes are rejected."""
        with pytest.raises(ValueError):
            parse_size(text)
