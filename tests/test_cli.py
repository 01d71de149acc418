"""Tests for featurelayer.cli: argument handling and output formats."""

import csv
import io
import json

import pytest

from featurelayer import cli

from .conftest import LAYER_URL, FakeSession

QUERY_PAYLOAD = {
    "features": [
        {"attributes": {"OBJECTID": 1, "NAME": "Alpha"}, "geometry": {"x": 1, "y": 2}},
        {"attributes": {"OBJECTID": 2, "STATUS": "open"}},
    ],
    "exceededTransferLimit": False,
}


class TestParseArgs:

    @pytest.mark.unit
    def test_query_defaults(self):
        args = cli.parse_args(["query", LAYER_URL])
        assert args.command == "query"
        assert args.where is None
        assert args.return_geometry is None
        assert args.format == "json"

    @pytest.mark.unit
    def test_env_token(self, monkeypatch):
        monkeypatch.setenv("ARCGIS_TOKEN", "from-env")
        args = cli.parse_args(["get", LAYER_URL, "3"])
        assert args.token == "from-env"
        assert args.id == 3

    @pytest.mark.unit
    def test_delete_ids(self):
        args = cli.parse_args(["delete", LAYER_URL, "1", "2", "--rollback"])
        assert args.ids == [1, 2]
        assert args.rollback is True


class TestRun:

    @pytest.mark.unit
    def test_query_params(self, capsys):
        session = FakeSession(QUERY_PAYLOAD)
        args = cli.parse_args(["query", LAYER_URL, "--where", "A = 1", "--no-geometry", "--limit", "10"])
        cli.run(args, session=session)

        sent = session.last["params"]
        assert session.last["url"] == f"{LAYER_URL}/query"
        assert sent == {
            "where": "A = 1",
            "returnGeometry": False,
            "resultRecordCount": 10,
            "outFields": "*",
        }
        assert json.loads(capsys.readouterr().out) == QUERY_PAYLOAD

    @pytest.mark.unit
    def test_query_near(self):
        session = FakeSession(QUERY_PAYLOAD)
        args = cli.parse_args(["query", LAYER_URL, "--near", "39.5", "-106.0", "400", "--format", "csv"])
        cli.run(args, session=session)
        sent = session.last["params"]
        assert sent["geometryType"] == "esriGeometryEnvelope"
        assert sent["spatialRel"] == "esriSpatialRelIntersects"
        assert sent["inSR"] == {"wkid": 4326}

    @pytest.mark.unit
    def test_query_csv(self, capsys):
        args = cli.parse_args(["query", LAYER_URL, "--format", "csv"])
        cli.run(args, session=FakeSession(QUERY_PAYLOAD))
        rows = list(csv.DictReader(io.StringIO(capsys.readouterr().out)))
        assert [row["OBJECTID"] for row in rows] == ["1", "2"]
        assert rows[0]["NAME"] == "Alpha"
        assert rows[1]["STATUS"] == "open"

    @pytest.mark.unit
    def test_query_xlsx(self, tmp_path):
        openpyxl = pytest.importorskip("openpyxl")
        path = tmp_path / "features.xlsx"
        args = cli.parse_args(["query", LAYER_URL, "--format", "xlsx", "--output", str(path)])
        cli.run(args, session=FakeSession(QUERY_PAYLOAD))

        ws = openpyxl.load_workbook(path)["Features"]
        values = list(ws.iter_rows(values_only=True))
        assert values[0] == ("OBJECTID", "NAME", "STATUS")
        assert values[1] == (1, "Alpha", None)

    @pytest.mark.unit
    def test_xlsx_requires_output(self):
        args = cli.parse_args(["query", LAYER_URL, "--format", "xlsx"])
        with pytest.raises(RuntimeError):
            cli.run(args, session=FakeSession(QUERY_PAYLOAD))

    @pytest.mark.unit
    def test_add_from_file(self, tmp_path, capsys):
        features = [{"attributes": {"NAME": "Beta"}}]
        path = tmp_path / "adds.json"
        path.write_text(json.dumps({"features": features}), encoding="utf-8")
        session = FakeSession({"addResults": [{"objectId": 9, "success": True}]})

        cli.run(cli.parse_args(["add", LAYER_URL, str(path), "--rollback"]), session=session)

        assert session.last["url"] == f"{LAYER_URL}/addFeatures"
        assert session.last["params"] == {"rollbackOnFailure": True, "features": features}
        assert json.loads(capsys.readouterr().out)["addResults"][0]["objectId"] == 9

    @pytest.mark.unit
    def test_delete(self):
        session = FakeSession({"deleteResults": []})
        cli.run(cli.parse_args(["delete", LAYER_URL, "4", "5"]), session=session)
        assert session.last["url"] == f"{LAYER_URL}/deleteFeatures"
        assert session.last["params"] == {"objectIds": [4, 5]}


class TestMain:

    @pytest.mark.unit
    def test_failure_exits_with_message(self, monkeypatch, capsys):
        def boom(args, session=None):
            raise RuntimeError("service unavailable")

        monkeypatch.setattr(cli, "run", boom)
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["get", LAYER_URL, "1"])
        assert excinfo.value.code == 1
        assert "Error: service unavailable" in capsys.readouterr().err

    @pytest.mark.unit
    def test_bad_env_timeout_reported(self, monkeypatch, capsys):
        monkeypatch.setenv("ARCGIS_TIMEOUT", "soon")
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["get", LAYER_URL, "1"])
        assert excinfo.value.code == 1
        assert "Error:" in capsys.readouterr().err


class TestCreateSession:

    @pytest.mark.unit
    def test_timeout_from_env(self, monkeypatch):
        monkeypatch.setenv("ARCGIS_TIMEOUT", "7.5")
        assert cli.create_session(None, None, None).timeout == 7.5

    @pytest.mark.unit
    def test_explicit_timeout_wins(self, monkeypatch):
        monkeypatch.setenv("ARCGIS_TIMEOUT", "7.5")
        assert cli.create_session(None, None, 3.0).timeout == 3.0

    @pytest.mark.unit
    def test_default_timeout(self, monkeypatch):
        monkeypatch.delenv("ARCGIS_TIMEOUT", raising=False)
        assert cli.create_session(None, None, None).timeout == 60.0
