import csv
import io

from routegrid.models.domain import Coordinates, Point, RouteResult
from routegrid.services.outputs.results_formatter import route_results_to_csv, route_results_to_json


def _results() -> list[RouteResult]:
    origin = Point(id="o1", address="Warehouse", coords=Coordinates(52.5, 13.4))
    first = Point(id="d1", address="", coords=Coordinates(52.4, 13.3))
    second = Point(id="d2", address="Shop", coords=Coordinates(48.1, 11.6))
    return [
        RouteResult(origin=origin, destination=first, distance=14.2, path=[(52.5, 13.4), (52.4, 13.3)], is_road=True),
        RouteResult(
            origin=origin,
            destination=second,
            distance=504.0,
            path=[(52.5, 13.4), (48.1, 11.6)],
            is_road=False,
            error_reason="NoRoute",
        ),
    ]


def test_route_results_to_csv_writes_one_row_per_result():
    rows = list(csv.DictReader(io.StringIO(route_results_to_csv(_results()))))

    assert len(rows) == 2
    assert rows[0]["index"] == "1"
    assert rows[0]["destination_address"] == "Destination"
    assert rows[0]["distance_km"] == "14.20"
    assert rows[0]["is_road"] == "True"
    assert rows[1]["error_reason"] == "NoRoute"
    assert rows[1]["destination_lat"] == "48.1"


def test_route_results_to_json_keeps_paths():
    payload = route_results_to_json(_results())

    assert payload[0]["origin"]["id"] == "o1"
    assert payload[0]["path"] == [(52.5, 13.4), (52.4, 13.3)]
    assert payload[1]["is_road"] is False
