import io
import json

import pytest

from jsminer.cli import VERSION, is_url, main

JWT = "eyJabc.def.ghi"


@pytest.fixture
def js_file(tmp_path):
    path = tmp_path / "app.js"
    path.write_text(f"const t = '{JWT}';\n")
    return path


@pytest.mark.parametrize(
    "value, expected",
    [
        ("http://example.com", True),
        ("https://example.com/a.js", True),
        ("ftp://example.com", False),
        ("app.js", False),
        ("-", False),
        ("http", False),
    ],
)
def test_is_url(value, expected):
    assert is_url(value) is expected


def test_no_targets_prints_usage_and_banner(capsys):
    assert main([]) == 2
    err = capsys.readouterr().err
    assert "usage: jsminer [URL|PATH|-] [flags]" in err
    assert "v" + VERSION in err


def test_no_targets_quiet_hides_banner(capsys):
    assert main(["-quiet"]) == 2
    err = capsys.readouterr().err
    assert "usage: jsminer" in err
    assert "Kurdistan" not in err


def test_unknown_flag_is_usage_error(capsys):
    assert main(["-nosuchflag", "x.js"]) == 2
    assert "nosuchflag" in capsys.readouterr().err


def test_help_returns_zero(capsys):
    assert main(["-h"]) == 0
    assert "-endpoints" in capsys.readouterr().err


def test_scan_js_file_reports_jwt(js_file, capsys):
    assert main(["-quiet", str(js_file)]) == 1
    records = json.loads(capsys.readouterr().out)
    assert records == [{"pattern": "jwt", "value": JWT, "severity": "info"}]


def test_flags_after_positional_are_honoured(js_file, capsys):
    assert main([str(js_file), "-quiet", "-format", "pretty"]) == 1
    out = capsys.readouterr().out
    assert out == f"[jwt] (info) {JWT}\n"


def test_no_matches_returns_zero(tmp_path, capsys):
    path = tmp_path / "empty.js"
    path.write_text("let x = 1;\n")
    assert main(["-quiet", str(path)]) == 0
    assert json.loads(capsys.readouterr().out) == []


def test_safe_mode_skips_non_js(tmp_path, capsys):
    path = tmp_path / "notes.txt"
    path.write_text("mail admin@example.com\n")
    assert main(["-quiet", str(path)]) == 0
    assert json.loads(capsys.readouterr().out) == []


def test_unsafe_mode_scans_all_rules(tmp_path, capsys):
    path = tmp_path / "notes.txt"
    path.write_text("mail admin@example.com\n")
    assert main(["-safe=false", "-quiet", str(path)]) == 1
    records = json.loads(capsys.readouterr().out)
    assert {"pattern": "email", "value": "admin@example.com", "severity": "info"} in records


def test_endpoints_from_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("fetch('/v2/data');\n"))
    assert main(["-quiet", "-endpoints", "-"]) == 1
    records = json.loads(capsys.readouterr().out)
    assert records == [{"pattern": "endpoint_path", "value": "/v2/data", "severity": "info"}]


def test_targets_file_and_show_source(tmp_path, js_file, capsys):
    other = tmp_path / "b.js"
    other.write_text(f"var k = '{JWT}';\n")
    listing = tmp_path / "targets.txt"
    listing.write_text(f"# comment\n\n{js_file}\n{other}\n")
    assert main(["-quiet", "-targets", str(listing)]) == 1
    records = json.loads(capsys.readouterr().out)
    assert sorted(r["source"] for r in records) == ["app.js", "b.js"]


def test_allowlist_suppresses_source(tmp_path, js_file, capsys):
    allow = tmp_path / "allow.txt"
    allow.write_text("app.js\n")
    assert main(["-quiet", "-allow", str(allow), str(js_file)]) == 0
    assert json.loads(capsys.readouterr().out) == []


def test_rules_file_adds_rule(tmp_path, capsys):
    path = tmp_path / "x.txt"
    path.write_text("marker ZZTOPZZ here\n")
    rules = tmp_path / "rules.yaml"
    rules.write_text("custom: 'ZZ[A-Z]+ZZ'\n")
    assert main(["-safe=false", "-quiet", "-rules", str(rules), str(path)]) == 1
    records = json.loads(capsys.readouterr().out)
    assert {"pattern": "custom", "value": "ZZTOPZZ", "severity": "info"} in records


def test_output_file(tmp_path, js_file, capsys):
    dest = tmp_path / "out.json"
    assert main(["-quiet", "-output", str(dest), str(js_file)]) == 1
    assert capsys.readouterr().out == ""
    assert json.loads(dest.read_text())[0]["value"] == JWT


def test_missing_file_is_error(tmp_path, capsys):
    assert main(["-quiet", str(tmp_path / "missing.js")]) == 1
    assert "jsminer:" in capsys.readouterr().err


def test_unknown_plugin_is_error(js_file, capsys):
    assert main(["-quiet", "-plugins", "nothere.so", str(js_file)]) == 1
    assert "nothere.so" in capsys.readouterr().err


def test_banner_printed_before_results(js_file, capsys):
    assert main(["-format", "pretty", str(js_file)]) == 1
    out = capsys.readouterr().out
    assert out.index("Kurdistan") < out.index(f"[jwt] (info) {JWT}")