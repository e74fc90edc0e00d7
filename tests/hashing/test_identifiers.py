"""Check identifier tests — XC-001 through XC-003.

Identifiers are baked into instrumented code as literals, so the values
below are pinned: changing them breaks comparison against every build
made before the change.
"""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from xcheck.hashing import djb2, derive, DJB2_SEED


class TestXC001:
    """XC-001: djb2 matches the reference table."""

    @pytest.mark.parametrize("text, expected", [
        ("", 5381),
        ("a", 177670),
        ("x", 177693),
        ("foo", 193491849),
        ("add", 193486030),
        ("hello", 261238937),
    ])
    def test_reference_values(self, text, expected):
        assert djb2(text) == expected

    def test_wraps_at_32_bits(self):
        # 5381 * 33**6 overflows u32 well before the last byte
        assert djb2("foobar") == 4259602622

    def test_empty_string_is_seed(self):
        assert djb2("") == DJB2_SEED

    def test_derive_is_djb2(self):
        assert derive is djb2

    def test_hashes_utf8_bytes(self):
        # "é" is two bytes in UTF-8: 0xC3 0xA9
        expected = ((5381 * 33 + 0xC3) * 33 + 0xA9) & 0xFFFFFFFF
        assert djb2("é") == expected


class TestXC002:
    """XC-002: djb2 is deterministic and stays inside the u32 range."""

    @settings(max_examples=200)
    @given(st.text())
    def test_deterministic(self, s):
        assert djb2(s) == djb2(s)

    @settings(max_examples=200)
    @given(st.text())
    def test_in_u32_range(self, s):
        assert 0 <= djb2(s) <= 0xFFFFFFFF

    @settings(max_examples=200)
    @given(st.text(), st.characters())
    def test_rolling(self, prefix, ch):
        # One more byte is one more multiply-then-add step
        h = djb2(prefix)
        for b in ch.encode("utf-8"):
            h = (h * 33 + b) & 0xFFFFFFFF
        assert djb2(prefix + ch) == h


class TestXC003:
    """XC-003: no uniqueness is promised, only reproducibility."""

    def test_known_collision_is_tolerated(self):
        # "Ez" and "FY" collide under djb2 (69*33+122 == 70*33+89)
        assert djb2("Ez") == djb2("FY")
