import io
import json
from datetime import date

import pytest

from ingest import hotspot_overlay
from ingest.config import HotspotSourceSettings
from ingest.hotspot_overlay import parse_args, run_hotspot_overlay

CSV_TEXT = (
    "name,latitude,longitude,value,category\n"
    "Dubbo,-32.25,148.60,80,Grasslands\n"
    "Orange,-33.28,149.10,20,Croplands\n"
    "Broken,not-a-number,150.00,55,Croplands\n"
)


@pytest.fixture
def export(tmp_path):
    path = tmp_path / "hotspots20250630.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    return path


def test_dot_overlay_is_written_as_json(export):
    out = io.StringIO()
    code = run_hotspot_overlay(None, "dot", source=str(export), bucket_count=2, out=out)

    assert code == 0
    payload = json.loads(out.getvalue())
    assert payload["mode"] == "dot"
    assert payload["source"] == str(export)
    assert [(b["lo"], b["hi"]) for b in payload["buckets"]] == [(20.0, 50.0), (50.0, 80.0)]
    assert payload["rows"] == {
        "total": 3,
        "parsed": 2,
        "dropped": {"non_numeric_coordinate": 1},
        "value_defaulted": 0,
    }


def test_date_is_resolved_against_data_dir(export, monkeypatch):
    monkeypatch.setenv("FIREWATCH_DATA_DIR", str(export.parent))
    monkeypatch.delenv("FIREWATCH_SOURCE_URL", raising=False)
    monkeypatch.setattr(hotspot_overlay, "source_settings", HotspotSourceSettings())
    out = io.StringIO()

    code = run_hotspot_overlay(date(2025, 6, 30), "choropleth", out=out)

    assert code == 0
    payload = json.loads(out.getvalue())
    assert {row["category"] for row in payload["categories"]} == {"Croplands", "Grasslands"}


def test_missing_source_exits_with_1(tmp_path):
    out = io.StringIO()
    assert run_hotspot_overlay(None, "heatmap", source=str(tmp_path / "absent.csv"), out=out) == 1
    assert out.getvalue() == ""


def test_no_date_and_no_source_exits_with_2():
    assert run_hotspot_overlay(None, "heatmap", out=io.StringIO()) == 2


@pytest.mark.parametrize(("buckets", "cell_size"), [(0, None), (None, 1e-300)])
def test_invalid_overlay_options_exit_with_2(export, buckets, cell_size):
    out = io.StringIO()
    code = run_hotspot_overlay(
        None, "heatmap", source=str(export), bucket_count=buckets, cell_size_deg=cell_size, out=out
    )
    assert code == 2
    assert out.getvalue() == ""


def test_parse_args():
    args = parse_args(["--date", "2025-06-30", "--mode", "dot", "--buckets", "3", "--cell-size", "0.25"])
    assert args.date == date(2025, 6, 30)
    assert args.mode == "dot"
    assert args.buckets == 3
    assert args.cell_size == 0.25
    assert args.source is None


def test_parse_args_rejects_unknown_mode():
    with pytest.raises(SystemExit):
        parse_args(["--mode", "contour"])
