from unittest.mock import MagicMock

import pytest

from gym_occupancy.models import Endpoint

OCCUPANCY_BODY = """
<script>
    var data = {
        'LDS' : {'capacity' : 120, 'count' : 34, 'lastUpdate' : 'Last updated: 2:30 PM'},
        'MCR' : {'capacity' : 80, 'count' : 7, 'lastUpdate' : 'Last updated: 9:05 AM'},
    };
</script>
"""


def make_response(status_code=200, text=OCCUPANCY_BODY):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    return response


@pytest.fixture
def endpoint():
    return Endpoint(
        name="North",
        brand="Climb Co",
        url="https://portal.example.com",
        id="abc123",
        headers=[{"key": "X-Api-Key", "value": "first"}, {"key": "Accept", "value": "text/html"}],
        timezone="Europe/London",
        gyms=[
            {"shortcode": "LDS", "brand": "Old Brand", "location": "Leeds"},
            {"shortcode": "MCR", "location": "Manchester"},
            {"shortcode": "SHF", "location": "Sheffield", "data": {"capacity": 60, "count": 5}},
        ],
    )


@pytest.fixture
def mock_session():
    session = MagicMock()
    session.get.return_value = make_response()
    return session
