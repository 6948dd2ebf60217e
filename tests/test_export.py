"""
Tests for the CSV/YAML export and the write-then-share step.
"""

import csv
from io import StringIO

import pytest

from canvass.errors import ExportError
from canvass.export import CSV_HEADER, Exporter, render_csv, render_yaml
from canvass.model import SurveyRecord
from canvass.serialization import records_from_yaml

HEADER_LINE = "Fecha,Dirección,SI,NO,CT,Interés,Información adicional"


class TestRenderCsv:
    def test_header_matches_export_format(self):
        assert ",".join(CSV_HEADER) == HEADER_LINE

    def test_empty_list_is_header_only(self):
        assert render_csv([]) == HEADER_LINE + "\n"

    def test_comma_in_notes_becomes_space(self):
        text = render_csv([SurveyRecord(notes="a,b", recorded_at="t")])
        row = text.splitlines()[1]
        assert row == "t,,0,0,0,0,a b"

    def test_rows_in_list_order(self):
        records = [
            SurveyRecord(address="Calle 1", si=2, ct=1, interest=3, notes="ok", recorded_at="19/10/2026, 10:00:00"),
            SurveyRecord(address="Calle 2", no=-1, recorded_at="19/10/2026, 10:05:00"),
        ]
        rows = list(csv.reader(StringIO(render_csv(records))))
        assert rows[0] == CSV_HEADER
        assert rows[1] == ["19/10/2026, 10:00:00", "Calle 1", "2", "0", "1", "3", "ok"]
        assert rows[2] == ["19/10/2026, 10:05:00", "Calle 2", "0", "-1", "0", "0", ""]

    def test_line_breaks_and_quotes_stay_parseable(self):
        """Every field is quoted as needed, so one record is one CSV row."""
        record = SurveyRecord(address="Calle 1\n2ºB", notes='dijo "no"\nvolver', recorded_at="t")
        rows = list(csv.reader(StringIO(render_csv([record]))))
        assert len(rows) == 2
        assert rows[1][1] == "Calle 1\n2ºB"
        assert rows[1][6] == 'dijo "no"\nvolver'

    def test_comma_in_address_is_quoted_not_replaced(self):
        rows = list(csv.reader(StringIO(render_csv([SurveyRecord(address="Calle 1, 2ºB")]))))
        assert rows[1][1] == "Calle 1, 2ºB"


def test_render_yaml_roundtrip():
    records = [SurveyRecord(address="Calle 1", si=1, notes="a,b", recorded_at="t", id="r1")]
    assert records_from_yaml(render_yaml(records)) == records


class TestExporter:
    def test_writes_utf8_and_shares_path(self, tmp_path):
        shared = []
        exporter = Exporter(tmp_path, share=shared.append)
        path = exporter.export([SurveyRecord(address="Peñón", recorded_at="t")])
        assert path == tmp_path / "encuestas.csv"
        assert shared == [path]
        content = path.read_text(encoding="utf-8")
        assert content.startswith(HEADER_LINE + "\n")
        assert "Peñón" in content

    def test_overwrites_previous_export(self, tmp_path):
        exporter = Exporter(tmp_path)
        exporter.export([SurveyRecord(), SurveyRecord()])
        exporter.export([])
        assert exporter.path.read_text(encoding="utf-8") == HEADER_LINE + "\n"

    def test_share_return_value_ignored(self, tmp_path):
        """A cancelled share is not an error."""
        exporter = Exporter(tmp_path, share=lambda path: False)
        assert exporter.export([]) == tmp_path / "encuestas.csv"

    def test_share_failure(self, tmp_path):
        def broken_share(path):
            raise RuntimeError("no share target")

        with pytest.raises(ExportError):
            Exporter(tmp_path, share=broken_share).export([])

    def test_write_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(ExportError):
            Exporter(blocker / "out").export([])

    def test_yaml_format(self, tmp_path):
        exporter = Exporter(tmp_path, filename="encuestas.yaml", fmt="yaml")
        path = exporter.export([SurveyRecord(address="Calle 1", id="r1")])
        assert records_from_yaml(path.read_text(encoding="utf-8"))[0].address == "Calle 1"

    def test_unknown_format(self, tmp_path):
        with pytest.raises(ValueError):
            Exporter(tmp_path, fmt="xlsx")
