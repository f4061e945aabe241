"""
Unit tests for playlist command builders and start time formatting
"""
from datetime import datetime, timedelta, timezone

import pytest

from i2client.playlist.commands import (
    cancel_command,
    format_number,
    format_start,
    has_logo,
    load_command,
    load_run_command,
    run_command,
)


class TestFormatStart:
    """Test device start time format"""

    def test_reference_instant(self):
        """2025-02-05T14:15:00Z formats as 02/05/2025 14:15:00:00"""
        time = datetime(2025, 2, 5, 14, 15, 0, tzinfo=timezone.utc)
        assert format_start(time) == "02/05/2025 14:15:00:00"

    def test_zero_padding(self):
        time = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert format_start(time) == "01/02/2025 03:04:05:00"

    def test_naive_datetime_is_utc(self):
        assert format_start(datetime(2025, 2, 5, 14, 15)) == "02/05/2025 14:15:00:00"

    def test_aware_datetime_converted_to_utc(self):
        eastern = timezone(timedelta(hours=-5))
        time = datetime(2025, 2, 5, 9, 15, 0, tzinfo=eastern)
        assert format_start(time) == "02/05/2025 14:15:00:00"

    def test_epoch_seconds(self):
        assert format_start(1738764900) == "02/05/2025 14:15:00:00"

    def test_sub_second_truncated(self):
        time = datetime(2025, 2, 5, 14, 15, 0, 999000, tzinfo=timezone.utc)
        assert format_start(time) == "02/05/2025 14:15:00:00"


class TestLogoTag:
    """Test logo tag inclusion rules"""

    @pytest.mark.parametrize("tag", [None, 0, "0", ""])
    def test_tag_omitted(self, tag):
        assert has_logo(tag) is False
        assert "Logo" not in load_command("domestic/V", 1950, "4", tag)

    def test_tag_included(self):
        command = load_command("domestic/V", 1950, "4", "domesticAds/TAG3631")
        assert command.endswith(',Logo=domesticAds/TAG3631")')

    def test_nonzero_number_included(self):
        assert has_logo(5) is True


class TestCommandGrammar:
    """Test exact command strings"""

    def test_load(self):
        assert load_command("domestic/Azul", 1800, "4") == (
            'loadPres("Flavor=domestic/Azul,Duration=1800,PresentationId=4")'
        )

    def test_load_with_logo(self):
        assert load_command("domestic/V", 1950, "4", "domesticAds/TAG3631") == (
            'loadPres("Flavor=domestic/V,Duration=1950,PresentationId=4,'
            'Logo=domesticAds/TAG3631")'
        )

    def test_load_run(self):
        assert load_run_command("domestic/Azul", 1800, "4") == (
            'loadRunPres("Flavor=domestic/Azul,Duration=1800,PresentationId=4")'
        )

    def test_run_without_start_time(self):
        assert run_command("4") == 'runPres("PresentationId=4")'

    def test_run_with_start_time(self):
        assert run_command("ldl3", "02/05/2025 14:15:12:00") == (
            'runPres("PresentationId=ldl3,StartTime=02/05/2025 14:15:12:00")'
        )

    def test_cancel_without_start_time(self):
        assert cancel_command(4) == 'cancelPres("PresentationId=4")'

    def test_cancel_with_start_time(self):
        assert cancel_command("sidebar2", "02/05/2025 14:15:12:00") == (
            'cancelPres("PresentationId=sidebar2,StartTime=02/05/2025 14:15:12:00")'
        )

    def test_integral_float_duration(self):
        assert format_number(1950.0) == "1950"
        assert "Duration=1950," in load_command("domestic/V", 1950.0, "4")

    def test_fractional_duration(self):
        assert format_number(72.5) == "72.5"
