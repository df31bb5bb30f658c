from infracheck.linter import LinterOutput
from infracheck.result import ScanResult
from infracheck.rules.puppet import PuppetRule, check_trailing_whitespace, linter_findings
from infracheck.severity import Severity
from infracheck.units.puppet import Manifest


class FakeLinter:
    """Stand-in for puppet-lint that returns canned output."""

    def __init__(self, output=None):
        self.output = output or LinterOutput()
        self.calls = []

    def run(self, path):
        self.calls.append(str(path))
        return self.output


def run_rule(tmp_path, source, linter=None, name="init.pp"):
    path = tmp_path / name
    path.write_text(source, encoding="utf-8")
    result = ScanResult()
    PuppetRule(linter=linter or FakeLinter()).scan_file(path, result)
    return result


def messages(result):
    return [finding.message for finding in result.findings]


def test_password_without_class_declaration(tmp_path):
    result = run_rule(
        tmp_path,
        "user { 'deploy':\n  password => 'supersecret',\n}\n",
    )

    errors = [f for f in result.findings if f.severity is Severity.ERROR]
    warnings = [f for f in result.findings if f.severity is Severity.WARN]
    assert [f.message for f in errors] == ["Possible hardcoded password detected on line 2"]
    assert "No class declaration found in manifest" in [f.message for f in warnings]
    assert "Disallowed parameter 'password' used" in [f.message for f in warnings]


def test_clean_class_has_no_findings(tmp_path):
    result = run_rule(
        tmp_path,
        "class profile::web {\n  file { '/etc/motd':\n    ensure => file,\n  }\n}\n",
    )

    assert result.findings == []


def test_trailing_whitespace_reports_line_numbers():
    manifest = Manifest(path="m.pp", text="a \nb\nc\t")

    findings = check_trailing_whitespace("m.pp", manifest)

    assert [finding.message for finding in findings] == [
        "Trailing whitespace on line 1",
        "Trailing whitespace on line 3",
    ]
    assert all(finding.severity is Severity.WARN for finding in findings)


def test_substring_matches_are_reported_per_entry(tmp_path):
    result = run_rule(
        tmp_path,
        "class db {\n  mysql::db { 'app':\n    admin_password => $pw,\n  }\n}\n",
    )

    assert messages(result) == [
        "Deprecated resource type 'mysql::db' used",
        "Disallowed parameter 'password' used",
        "Disallowed parameter 'admin_password' used",
    ]


def test_linter_lines_become_warnings_before_static_checks(tmp_path):
    linter = FakeLinter(LinterOutput(lines=("WARNING: double quoted string on line 3", "ERROR: tab character on line 4")))

    result = run_rule(tmp_path, "include base\n", linter=linter)

    assert linter.calls == [str(tmp_path / "init.pp")]
    assert messages(result)[:3] == [
        "WARNING: double quoted string on line 3",
        "ERROR: tab character on line 4",
        "No class declaration found in manifest",
    ]
    assert result.findings[1].severity is Severity.WARN


def test_linter_failure_is_recorded_and_static_checks_continue(tmp_path):
    linter = FakeLinter(LinterOutput(error="executable 'puppet-lint' not found"))

    result = run_rule(tmp_path, "include base\n", linter=linter)

    assert messages(result) == [
        "puppet-lint error: executable 'puppet-lint' not found",
        "No class declaration found in manifest",
    ]
    assert result.findings[0].severity is Severity.ERROR


def test_linter_output_wins_over_error():
    findings = linter_findings("m.pp", LinterOutput(lines=("problem",), error="exit status 1"))

    assert [(f.severity, f.message) for f in findings] == [(Severity.WARN, "problem")]


def test_only_first_password_is_reported(tmp_path):
    result = run_rule(
        tmp_path,
        "class a {\n  x { 'one': password => 'a' }\n  y { 'two': PASSWORD => \"b\" }\n}\n",
    )

    assert result.summary.error == 1


def test_manifest_exposes_text_and_lines():
    manifest = Manifest(path="m.pp", text="class a {\n}")

    assert manifest.attribute_names() == ["text", "lines"]
    assert manifest.get("lines") == ["class a {", "}"]
    assert manifest.get("missing", "fallback") == "fallback"


def test_unreadable_manifest_keeps_linter_findings_and_skips_static_checks(tmp_path, monkeypatch):
    def deny(path):
        raise OSError(f"Permission denied: '{path}'")

    monkeypatch.setattr("infracheck.rules.puppet.load_manifest", deny)
    linter = FakeLinter(LinterOutput(lines=("WARNING: quoted boolean on line 1",)))

    result = run_rule(tmp_path, "user { 'x':\n  password => 'hunter2',\n}\n", linter=linter)

    assert messages(result) == [
        "WARNING: quoted boolean on line 1",
        f"Failed to read file: Permission denied: '{tmp_path / 'init.pp'}'",
    ]
    assert [finding.severity for finding in result.findings] == [Severity.WARN, Severity.ERROR]
