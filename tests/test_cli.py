"""
Tests for the command-line front end.

Each test runs main() against a temporary data directory.
"""

import csv
import json

import pytest

from canvass.cli import main
from canvass.config import ENV_OVERRIDES, ENV_CONFIG


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in list(ENV_OVERRIDES) + [ENV_CONFIG]:
        monkeypatch.delenv(var, raising=False)


def run(tmp_path, *argv, answer="eliminar"):
    return main(["--data-dir", str(tmp_path), *argv], input_fn=lambda prompt: answer)


def stored(tmp_path):
    slots = json.loads((tmp_path / "canvass.json").read_text(encoding="utf-8"))
    return json.loads(slots["surveys"])


def test_list_empty(tmp_path, capsys):
    assert run(tmp_path, "list") == 0
    assert "No hay encuestas guardadas." in capsys.readouterr().out


def test_add_then_list(tmp_path, capsys):
    assert run(tmp_path, "add", "--address", "Calle 1", "--si", "2", "--ct", "1",
               "--interest", "3", "--notes", "ok") == 0
    assert "Guardado: Encuesta guardada exitosamente" in capsys.readouterr().out

    assert run(tmp_path, "list") == 0
    out = capsys.readouterr().out
    assert "Encuestas Guardadas:" in out
    assert "- Calle 1" in out

    record = stored(tmp_path)[0]
    assert (record["si"], record["no"], record["ct"], record["interest"]) == (2, 0, 1, 3)
    assert record["additionalInfo"] == "ok"


def test_add_negative_tally(tmp_path):
    assert run(tmp_path, "add", "--no", "-2") == 0
    assert stored(tmp_path)[0]["no"] == -2


def test_edit_taps_and_saves_in_place(tmp_path):
    run(tmp_path, "add", "--address", "Calle 1", "--si", "2")
    run(tmp_path, "add", "--address", "Calle 2")
    first_id = stored(tmp_path)[0]["id"]

    assert run(tmp_path, "edit", "0", "--inc", "si", "--dec", "ct", "--notes", "volver") == 0
    records = stored(tmp_path)
    assert len(records) == 2
    assert records[0]["id"] == first_id
    assert records[0]["si"] == 3
    assert records[0]["ct"] == -1
    assert records[0]["additionalInfo"] == "volver"
    assert records[0]["address"] == "Calle 1"
    assert records[1]["address"] == "Calle 2"


def test_delete_confirmed(tmp_path, capsys):
    run(tmp_path, "add", "--address", "Calle 1")
    assert run(tmp_path, "delete", "0", answer="Eliminar") == 0
    assert "Eliminado: Encuesta eliminada exitosamente" in capsys.readouterr().out
    assert stored(tmp_path) == []


def test_delete_cancelled(tmp_path, capsys):
    run(tmp_path, "add", "--address", "Calle 1")
    assert run(tmp_path, "delete", "0", answer="cancelar") == 0
    assert "Cancelado." in capsys.readouterr().out
    assert len(stored(tmp_path)) == 1


def test_delete_yes_skips_prompt(tmp_path):
    run(tmp_path, "add", "--address", "Calle 1")

    def no_prompt(prompt):
        raise AssertionError("prompted")

    assert main(["--data-dir", str(tmp_path), "delete", "0", "--yes"], input_fn=no_prompt) == 0
    assert stored(tmp_path) == []


def test_bad_index(tmp_path, capsys):
    assert run(tmp_path, "edit", "4") == 2
    assert "No survey record at index 4" in capsys.readouterr().err


def test_export_csv(tmp_path, capsys):
    run(tmp_path, "add", "--address", "Calle 1", "--notes", "a,b")
    out_dir = tmp_path / "out"
    assert run(tmp_path, "export", "--output-dir", str(out_dir)) == 0
    assert "Exportado:" in capsys.readouterr().out
    with open(out_dir / "encuestas.csv", encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0][1] == "Dirección"
    assert rows[1][1] == "Calle 1"
    assert rows[1][6] == "a b"


def test_export_yaml(tmp_path):
    run(tmp_path, "add", "--address", "Calle 1")
    assert run(tmp_path, "export", "--format", "yaml") == 0
    assert (tmp_path / "encuestas.yaml").exists()


def test_corrupted_store_exits_1(tmp_path, capsys):
    (tmp_path / "canvass.json").write_text("{broken", encoding="utf-8")
    assert run(tmp_path, "list") == 1
    assert "error:" in capsys.readouterr().err


def test_add_recovers_from_corrupted_store(tmp_path, capsys):
    (tmp_path / "canvass.json").write_text("{broken", encoding="utf-8")
    assert run(tmp_path, "add", "--address", "Calle 1") == 0
    assert "Guardado" in capsys.readouterr().out
    assert [r["address"] for r in stored(tmp_path)] == ["Calle 1"]
    assert (tmp_path / "canvass.json.corrupt").read_text(encoding="utf-8") == "{broken"
    assert run(tmp_path, "list") == 0


def test_bad_config_exits_2(tmp_path, capsys):
    config = tmp_path / "bad.yaml"
    config.write_text("colour: green\n", encoding="utf-8")
    assert main(["--config", str(config), "list"]) == 2


def test_clock_ticks(tmp_path, capsys, monkeypatch):
    monkeypatch.setattr("canvass.clock.time.sleep", lambda seconds: None)
    assert main(["clock", "--ticks", "2"]) == 0
    assert len(capsys.readouterr().out.strip().splitlines()) == 2


def test_usage_error_exits_2():
    with pytest.raises(SystemExit) as exc:
        main(["frobnicate"])
    assert exc.value.code == 2
