from datetime import datetime, timezone
from unittest.mock import mock_open, patch

from gym_occupancy import persist
from gym_occupancy.errors import UnexpectedResponse
from gym_occupancy.models import Endpoint, FetchOutcome, GymData


def _outcomes():
    ok = Endpoint(name="Working", url="u", id="w", gyms=[{"shortcode": "LDS"}])
    ok.gyms[0].data = GymData(capacity=120, count=34, last_update=datetime(2024, 1, 15, 14, 30, tzinfo=timezone.utc))
    failed = Endpoint(name="Broken", url="u", id="b")
    return [FetchOutcome(endpoint=ok), FetchOutcome(endpoint=failed, error=UnexpectedResponse(500))]


def test_ensure_parent_dir():
    with patch("os.path.exists") as mock_exists, patch("os.makedirs") as mock_makedirs:
        # Case 1: Exists
        mock_exists.return_value = True
        persist.ensure_parent_dir("public/data/report.json")
        mock_makedirs.assert_not_called()

        # Case 2: Does not exist
        mock_exists.return_value = False
        persist.ensure_parent_dir("public/data/report.json")
        mock_makedirs.assert_called_with("public/data")


def test_ensure_parent_dir_bare_filename():
    with patch("os.makedirs") as mock_makedirs:
        persist.ensure_parent_dir("report.json")
        mock_makedirs.assert_not_called()


@patch("gym_occupancy.persist.json.dump")
def test_save_report_structure(mock_dump):
    with patch("gym_occupancy.persist.ensure_parent_dir"), patch("builtins.open", mock_open()):
        persist.save_report(_outcomes(), "/tmp/report.json")

        args, _ = mock_dump.call_args
        data = args[0]
        datetime.fromisoformat(data["last_updated"])
        assert [e["name"] for e in data["endpoints"]] == ["Working"]
        gym = data["endpoints"][0]["gyms"][0]
        assert gym["data"]["count"] == 34
        assert gym["data"]["last_update"].startswith("2024-01-15T14:30:00")
        assert data["errors"][0]["endpoint"] == "Broken"
        assert "500" in data["errors"][0]["error"]


def test_save_report_io_error_is_logged(caplog):
    with patch("gym_occupancy.persist.ensure_parent_dir"), patch("builtins.open", side_effect=IOError("disk full")):
        persist.save_report(_outcomes(), "/tmp/report.json")
    assert "Failed to save report" in caplog.text
