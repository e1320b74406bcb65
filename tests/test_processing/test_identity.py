"""Tests for fldrs_report.processing.identity."""

from __future__ import annotations

from fldrs_report.processing.identity import vessel_identity


class TestVesselIdentity:
    def test_uppercases_and_strips_spaces(self):
        assert vessel_identity("Sea Star", "ME 1234") == "SEASTARME1234"

    def test_removes_all_whitespace(self):
        assert vessel_identity(" Sea\tStar ", "ME\n1234") == "SEASTARME1234"

    def test_case_and_spacing_variants_collide(self):
        a = vessel_identity("SEA STAR", "ME1234")
        b = vessel_identity("sea  star", "me 1234")
        assert a == b

    def test_pure_function_of_name_and_hull(self):
        assert vessel_identity("Miss Lily", "NH 77") == vessel_identity("Miss Lily", "NH 77")
        assert vessel_identity("Miss Lily", "NH 77") != vessel_identity("Miss Lily", "NH 78")
