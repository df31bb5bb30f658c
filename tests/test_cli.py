import json

from infracheck import cli

BUCKET = """
resource "aws_s3_bucket" "site" {
  acl = "public-read"
  tags = {
    Environment = "prod"
  }
}
"""


def test_cli_generates_json_report(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "infra").mkdir()
    (tmp_path / "infra" / "main.tf").write_text(BUCKET, encoding="utf-8")
    output_path = tmp_path / "out" / "scan.json"

    exit_code = cli.main(["scan", "terraform", "infra", "--format", "json", "--out", str(output_path)])

    captured = capsys.readouterr()
    assert "Report written to" in captured.out
    assert exit_code == 0
    data = json.loads(output_path.read_text(encoding="utf-8"))
    assert [record["Severity"] for record in data] == ["WARN", "WARN", "WARN"]


def test_cli_fail_on_warn(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "main.tf").write_text(BUCKET, encoding="utf-8")

    exit_code = cli.main(["scan", "terraform", ".", "--fail-on", "warn"])

    captured = capsys.readouterr()
    assert exit_code == 1
    assert "[WARN] main.tf: S3 bucket ACL is set to public-read (publicly readable)" in captured.out
    assert "Scan Summary" in captured.out


def test_cli_missing_path_is_fatal(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)

    exit_code = cli.main(["scan", "ansible", "nowhere"])

    captured = capsys.readouterr()
    assert exit_code == cli.EXIT_FATAL
    assert "infra-check:" in captured.err


def test_cli_puppet_records_missing_linter(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "init.pp").write_text("class base {\n}\n", encoding="utf-8")

    exit_code = cli.main(
        ["scan", "puppet", ".", "--format", "gha", "--linter-command", str(tmp_path / "missing-lint")]
    )

    captured = capsys.readouterr()
    assert exit_code == 1
    assert captured.out.startswith("::error file=init.pp::puppet-lint error%3A executable")


def test_cli_clean_ansible_tree(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "site.yaml").write_text(
        "- hosts: all\n  tasks:\n    - name: ping\n      become: true\n      ping: {}\n", encoding="utf-8"
    )

    exit_code = cli.main(["scan", "ansible", ".", "-f", "markdown"])

    captured = capsys.readouterr()
    assert exit_code == 0
    assert "No issues found." in captured.out
