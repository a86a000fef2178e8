"""Tests for hotel data service."""

import io

import pytest

from services.hotel_data.config import HotelDataConfig
from services.hotel_data.service import IService, Service
from services.hotel_data.store import ReportWriteError


@pytest.fixture
def reviews_dir(tmp_path, write_json, make_batch, make_review):
    """Review tree: two files for hotel 1, one for hotel 2, one unknown hotel."""
    root = tmp_path / "reviews"
    write_json(
        root / "a" / "batch1.json",
        make_batch(
            make_review("1", "r2", rating=3, date="2016-02-01T00:00:00Z"),
            make_review("9", "orphan"),
        ),
    )
    write_json(
        root / "b" / "batch2.json",
        make_batch(make_review("1", "r1", rating=5, date="2016-01-01T00:00:00Z", nickname="")),
    )
    write_json(root / "batch3.json", make_batch(make_review("2", "x1", recommended="NO")))
    return root


class TestService:
    """Tests for Service class."""

    def test_implements_interface(self):
        assert isinstance(Service(HotelDataConfig()), IService)

    def test_defaults_to_env_config(self, monkeypatch):
        monkeypatch.setenv("HOTEL_DATA_THREADS", "3")

        assert Service().config.num_threads == 3

    def test_build_report_end_to_end(self, hotels_file, reviews_dir, tmp_path):
        out = tmp_path / "results.txt"

        stats = Service(HotelDataConfig(num_threads=2)).build_report(hotels_file, reviews_dir, out)

        assert stats.files_processed == 3
        assert stats.reviews_added == 3
        assert stats.unknown_hotel == 1
        assert not stats.timed_out
        assert out.read_text(encoding="utf-8") == (
            "********************\n"
            "Alpha: 2\n"
            "1 Market St\n"
            "San Francisco, CA\n"
            "--------------------\n"
            "Review by traveler on 2016-06-29T17:50:29Z\n"
            "Rating: 4\n"
            "ReviewId: x1\n"
            "Title x1\n"
            "Text of review x1\n"
            "\n"
            "********************\n"
            "Zeta: 1\n"
            "1 Market St\n"
            "San Francisco, CA\n"
            "--------------------\n"
            "Review by Anonymous on 2016-01-01T00:00:00Z\n"
            "Rating: 5\n"
            "ReviewId: r1\n"
            "Title r1\n"
            "Text of review r1\n"
            "--------------------\n"
            "Review by traveler on 2016-02-01T00:00:00Z\n"
            "Rating: 3\n"
            "ReviewId: r2\n"
            "Title r2\n"
            "Text of review r2\n"
        )

    @pytest.mark.parametrize("threads", [1, 4, 16])
    def test_output_independent_of_thread_count(self, hotels_file, reviews_dir, threads):
        baseline = io.StringIO()
        Service(HotelDataConfig(num_threads=1)).build_report(hotels_file, reviews_dir, baseline)

        buffer = io.StringIO()
        Service(HotelDataConfig(num_threads=threads)).build_report(hotels_file, reviews_dir, buffer)

        assert buffer.getvalue() == baseline.getvalue()

    def test_load_returns_drained_store(self, hotels_file, reviews_dir):
        service = Service(HotelDataConfig(num_threads=2))

        store = service.load(hotels_file, reviews_dir)

        assert store.hotel_count == 2
        assert store.review_count() == 3
        assert store.get_reviews_sorted("2")[0].recommended is False
        assert service.last_stats.files_processed == 3

    def test_missing_hotels_file_still_reports(self, tmp_path, reviews_dir, log_records):
        """No hotels loaded: every review is dropped and an empty report is written."""
        out = tmp_path / "results.txt"

        stats = Service(HotelDataConfig()).build_report(tmp_path / "nope.json", reviews_dir, out)

        assert out.read_text(encoding="utf-8") == ""
        assert stats.reviews_added == 0
        assert stats.unknown_hotel == 4
        assert any(r["level"] == "WARNING" and "Continuing with 0 hotels" in r["message"]
                   for r in log_records)

    def test_missing_reviews_dir_reports_hotels(self, hotels_file, tmp_path):
        out = tmp_path / "results.txt"

        stats = Service(HotelDataConfig()).build_report(hotels_file, tmp_path / "none", out)

        assert stats.files_submitted == 0
        assert out.read_text(encoding="utf-8").count("********************") == 2

    def test_custom_marker_from_config(self, hotels_file, tmp_path, write_json,
                                       make_batch, make_review):
        root = tmp_path / "reviews"
        write_json(root / "a.reviews", make_batch(make_review("1", "r1")))
        write_json(root / "b.json", make_batch(make_review("1", "r2")))

        store = Service(HotelDataConfig(review_marker=".reviews")).load(hotels_file, root)

        assert [r.review_id for r in store.get_reviews_sorted("1")] == ["r1"]

    def test_unwritable_output_raises(self, hotels_file, reviews_dir, tmp_path):
        with pytest.raises(ReportWriteError):
            Service(HotelDataConfig()).build_report(
                hotels_file, reviews_dir, tmp_path / "missing" / "results.txt"
            )
