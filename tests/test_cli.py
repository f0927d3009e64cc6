from __future__ import annotations

import json

from app_cli.score_evaluation import main

from tests.conftest import build_payload


def test_cli_prints_summary_and_writes_outputs(tmp_path, capsys):
    current = tmp_path / "current.json"
    previous = tmp_path / "previous.json"
    current.write_text(json.dumps({"success": True, "data": build_payload(wrapped=True)}), encoding="utf-8")
    previous.write_text(
        json.dumps(build_payload(eval_id="ev-0", scores={"físico": [("percentage", 50)]})),
        encoding="utf-8",
    )
    out_json = tmp_path / "out" / "report.json"
    out_html = tmp_path / "out" / "report.html"
    out_csv = tmp_path / "out" / "items.csv"

    code = main([
        str(current),
        "--previous", str(previous),
        "--json", str(out_json),
        "--html", str(out_html),
        "--audit-csv", str(out_csv),
    ])
    assert code == 0

    printed = capsys.readouterr().out
    assert "Strengths: Táctico (5.0), Técnico (4.5)" in printed
    assert "Weaknesses: Físico (2.0)" in printed
    assert "-1.0" in printed
    assert "Items used: 6/6" in printed

    report = json.loads(out_json.read_text(encoding="utf-8"))
    assert report["averages"]["cognitivo"] == 3.7
    assert "Promedios por categoría" in out_html.read_text(encoding="utf-8")
    assert out_csv.read_text(encoding="utf-8").startswith("category,")


def test_cli_rejects_bad_payload(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"items": "nope"}), encoding="utf-8")
    assert main([str(bad)]) == 2
    assert main([str(tmp_path / "missing.json")]) == 2
