import json

from schedule_merge.cli import main

CASE = {
    "events": [
        {"id": "low", "start": "01/01/2024 - 08:00", "end": "01/01/2024 - 18:00", "desirability": 0},
        {"id": "high", "start": "01/01/2024 - 10:00", "end": "01/01/2024 - 16:00", "desirability": 1},
    ]
}


def write_case(tmp_path) -> str:
    path = tmp_path / "case.json"
    path.write_text(json.dumps(CASE), encoding="utf-8")
    return str(path)


def test_discard_by_default(tmp_path, capsys) -> None:
    assert main(["--input", write_case(tmp_path)]) == 0

    out = capsys.readouterr().out
    assert "Policy: discard" in out
    assert "id=high" in out
    assert "id=low" not in out


def test_trim_with_output_and_explain(tmp_path, capsys) -> None:
    output = tmp_path / "timeline.json"

    assert main(["--input", write_case(tmp_path), "--trim", "--explain", "--output", str(output)]) == 0

    out = capsys.readouterr().out
    assert "Policy: trim" in out
    assert "=== Explain / Evidence ===" in out
    assert "00 d 06 h 00 m  id=high" in out

    data = json.loads(output.read_text(encoding="utf-8"))
    assert [t["id"] for t in data["timeline"]] == ["low", "high", "low"]
    assert "explain" in data


def test_bad_input_exits_with_error(tmp_path, capsys) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"events": [{"start": "x", "end": "y"}]}), encoding="utf-8")

    assert main(["--input", str(path)]) == 2
    assert "error:" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys) -> None:
    assert main(["--input", str(tmp_path / "nope.json")]) == 2
    assert "error:" in capsys.readouterr().err


def test_non_object_event_exits_with_error(tmp_path, capsys) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"events": ["not-an-object"]}), encoding="utf-8")

    assert main(["--input", str(path)]) == 2
    assert "expected an object" in capsys.readouterr().err


def test_mixed_desirability_exits_with_error(tmp_path, capsys) -> None:
    events = [dict(CASE["events"][0]), dict(CASE["events"][1], desirability="01/01/2024 - 00:00")]
    path = tmp_path / "mixed.json"
    path.write_text(json.dumps({"events": events}), encoding="utf-8")

    assert main(["--input", str(path)]) == 2
    assert "mix numbers and dates" in capsys.readouterr().err


def test_non_utf8_input_exits_with_error(tmp_path, capsys) -> None:
    path = tmp_path / "latin.json"
    path.write_bytes(b'{"events": ["\xff\xfe"]}')

    assert main(["--input", str(path)]) == 2
    assert "invalid JSON" in capsys.readouterr().err
