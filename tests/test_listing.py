"""Tests for listing module."""

import pytest

from rpcshell.listing import Listing


class TestListingRendering:
    def test_renders_aligned_table(self):
        listing = Listing(("service", "rpc"), (("Greeter", "SayHello"), ("Admin", "")))

        assert str(listing) == "\n".join(
            [
                "+---------+----------+",
                "| SERVICE | RPC      |",
                "+---------+----------+",
                "| Greeter | SayHello |",
                "| Admin   |          |",
                "+---------+----------+",
            ]
        )

    def test_empty_listing_renders_header_only(self):
        assert str(Listing(("package",))) == "\n".join(
            ["+---------+", "| PACKAGE |", "+---------+"]
        )

    def test_rendering_is_deterministic(self):
        listing = Listing(("message",), (("B",), ("A",)))
        lines = str(listing).splitlines()

        assert str(listing) == str(listing)
        assert lines[3:5] == ["| B       |", "| A       |"]

    def test_row_width_mismatch(self):
        with pytest.raises(ValueError, match="expected 2"):
            Listing(("a", "b"), (("only",),))
