"""Tests for fldrs_report.processing.trip_summary.

Covers the trailing window, the upload-preferring most-recent selection,
the ``trip_id`` tie-break, and the all-null summary of a vessel without trips.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from fldrs_report.models.trip import TripEvent
from fldrs_report.models.vessel import VesselRecord
from fldrs_report.processing.trip_summary import (
    filter_trip_window,
    latest_evtr_upload,
    select_most_recent,
    summarize_trips,
    summarize_vessel,
    window_start,
)

AS_OF = date(2021, 2, 9)


def _trip(
    trip_id: int,
    sail: Optional[datetime] = None,
    upload: Optional[datetime] = None,
    hull: str = "ME 1",
    **flags: bool,
) -> TripEvent:
    return TripEvent(trip_id=trip_id, hull_id=hull, sail_date=sail, upload_date=upload, **flags)


def _vessel(name: str = "Sea Star", hull: str = "ME 1") -> VesselRecord:
    return VesselRecord(
        identity=f"{name}{hull}".replace(" ", "").upper(),
        vessel_name=name,
        hull_number=hull,
        program_codes=("STFLT",),
    )


# ── Window ─────────────────────────────────────────────────────────────────────

class TestWindow:
    def test_window_start_is_midnight_twelve_months_back(self):
        assert window_start(AS_OF) == datetime(2020, 2, 9)

    def test_window_start_clamps_leap_day(self):
        assert window_start(date(2024, 2, 29)) == datetime(2023, 2, 28)

    def test_sail_inside_window_kept(self):
        t = _trip(1, sail=datetime(2020, 2, 9))
        assert filter_trip_window([t], AS_OF) == [t]

    def test_only_upload_inside_window_kept(self):
        t = _trip(1, sail=datetime(2019, 12, 1), upload=datetime(2020, 3, 1))
        assert filter_trip_window([t], AS_OF) == [t]

    def test_both_before_window_dropped(self):
        t = _trip(1, sail=datetime(2020, 2, 8, 23, 59), upload=datetime(2020, 2, 8, 23, 59))
        assert filter_trip_window([t], AS_OF) == []

    def test_null_timestamps_never_match(self):
        t = _trip(1)
        assert filter_trip_window([t], AS_OF) == []

    def test_custom_window_length(self):
        t = _trip(1, sail=datetime(2020, 10, 1))
        assert filter_trip_window([t], AS_OF, window_months=3) == []
        assert filter_trip_window([t], AS_OF, window_months=6) == [t]


# ── Most recent selection ─────────────────────────────────────────────────────

class TestSelectMostRecent:
    def test_empty(self):
        assert select_most_recent([]) is None

    def test_all_null_timestamps(self):
        assert select_most_recent([_trip(1), _trip(2)]) is None

    def test_upload_wins_tie_with_sail(self):
        t = datetime(2021, 1, 15, 12, 0)
        a = _trip(1, sail=t, upload=datetime(2021, 1, 14), study_fleet=True)
        b = _trip(2, sail=datetime(2021, 1, 10), upload=t, em=True)
        chosen = select_most_recent([a, b])
        assert chosen is b

    def test_upload_wins_tie_regardless_of_order(self):
        t = datetime(2021, 1, 15, 12, 0)
        a = _trip(1, sail=t, upload=datetime(2021, 1, 14), study_fleet=True)
        b = _trip(2, sail=datetime(2021, 1, 10), upload=t, em=True)
        assert select_most_recent([b, a]) is b

    def test_latest_sail_selected_when_sail_is_max(self):
        a = _trip(1, sail=datetime(2021, 1, 20), upload=None, ncrp=True)
        b = _trip(2, sail=datetime(2021, 1, 5), upload=datetime(2021, 1, 6))
        assert select_most_recent([a, b]) is a

    def test_equal_uploads_lowest_trip_id_wins(self):
        t = datetime(2021, 1, 15)
        late = _trip(7, upload=t, em=True)
        early = _trip(3, upload=t, eclams=True)
        assert select_most_recent([late, early]) is early

    def test_equal_sails_lowest_trip_id_wins(self):
        t = datetime(2021, 1, 15)
        assert select_most_recent([_trip(9, sail=t), _trip(4, sail=t)]).trip_id == 4


class TestLatestEvtrUpload:
    def test_only_evtr_trips_counted(self):
        trips = [
            _trip(1, upload=datetime(2021, 1, 1), evtr=True),
            _trip(2, upload=datetime(2021, 1, 20), evtr=False),
            _trip(3, upload=datetime(2021, 1, 10), evtr=True),
        ]
        assert latest_evtr_upload(trips) == datetime(2021, 1, 10)

    def test_no_evtr(self):
        assert latest_evtr_upload([_trip(1, upload=datetime(2021, 1, 1))]) is None

    def test_evtr_without_upload(self):
        assert latest_evtr_upload([_trip(1, sail=datetime(2021, 1, 1), evtr=True)]) is None


# ── summarize_vessel / summarize_trips ────────────────────────────────────────

class TestSummarizeVessel:
    def test_no_trips_all_null(self):
        s = summarize_vessel(_vessel(), [])
        assert s.most_recent is None
        assert s.most_recent_evtr is None
        assert s.evtr is None and s.sector_trip is None and s.study_fleet is None
        assert s.ncrp is None and s.eclams is None and s.em is None
        assert s.has_recent_trip is False
        assert s.flag_sum() == 0

    def test_flags_come_from_selected_trip_only(self):
        t = datetime(2021, 1, 15, 12, 0)
        a = _trip(1, sail=t, upload=datetime(2021, 1, 14), study_fleet=True)
        b = _trip(2, sail=datetime(2021, 1, 10), upload=t, em=True)
        s = summarize_vessel(_vessel(), [a, b])
        assert s.em is True
        assert s.study_fleet is False
        assert s.most_recent == t

    def test_most_recent_is_max_of_sail_and_upload(self, sample_trip):
        s = summarize_vessel(_vessel(hull="ME 1234"), [sample_trip])
        assert s.most_recent == sample_trip.upload_date
        assert s.most_recent_evtr == sample_trip.upload_date
        assert s.evtr is True

    def test_record_fields_carried(self, sample_vessel_record, sample_trip):
        s = summarize_vessel(sample_vessel_record, [sample_trip])
        assert s.identity == sample_vessel_record.identity
        assert s.program_codes == sample_vessel_record.program_codes
        assert s.sector_name == sample_vessel_record.sector_name


class TestSummarizeTrips:
    def test_one_summary_per_vessel_in_input_order(self):
        vessels = [_vessel("Bravo", "H2"), _vessel("Alpha", "H1")]
        trips = [
            _trip(1, hull="H1", upload=datetime(2021, 1, 1), evtr=True),
            _trip(2, hull="H3", upload=datetime(2021, 1, 2), evtr=True),
        ]
        summaries = summarize_trips(vessels, trips, as_of=AS_OF)
        assert [s.vessel_name for s in summaries] == ["Bravo", "Alpha"]
        assert summaries[0].most_recent is None
        assert summaries[1].evtr is True

    def test_trips_outside_window_ignored(self):
        trips = [_trip(1, sail=datetime(2019, 5, 1), upload=datetime(2019, 5, 2), evtr=True)]
        (summary,) = summarize_trips([_vessel()], trips, as_of=AS_OF)
        assert summary.most_recent is None
        assert summary.evtr is None

    def test_hull_match_is_exact(self):
        trips = [_trip(1, hull="ME1", upload=datetime(2021, 1, 1), evtr=True)]
        (summary,) = summarize_trips([_vessel(hull="ME 1")], trips, as_of=AS_OF)
        assert summary.has_recent_trip is False
