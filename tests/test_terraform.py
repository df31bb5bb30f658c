import pytest

from infracheck.result import ScanResult
from infracheck.rules.terraform import (
    TerraformRule,
    check_public_bucket,
    check_required_tags,
    check_secret_attributes,
    check_variable_default,
)
from infracheck.severity import Severity
from infracheck.units.terraform import Block, Unresolved, parse_terraform, resolve_literal


def run_rule(tmp_path, source, name="main.tf"):
    path = tmp_path / name
    path.write_text(source, encoding="utf-8")
    result = ScanResult()
    TerraformRule().scan_file(path, result)
    return result


def messages(result):
    return [finding.message for finding in result.findings]


def test_public_bucket_missing_owner_and_project(tmp_path):
    result = run_rule(
        tmp_path,
        """
resource "aws_s3_bucket" "site" {
  bucket = "my-site"
  acl    = "public-read"
  tags = {
    Environment = "prod"
  }
}
""",
    )

    assert messages(result) == [
        "S3 bucket ACL is set to public-read (publicly readable)",
        "Resource missing required tag 'Owner'",
        "Resource missing required tag 'Project'",
    ]
    assert result.summary.warn == 3
    assert result.summary.error == 0
    assert all(finding.file == str(tmp_path / "main.tf") for finding in result.findings)


def test_fully_tagged_private_bucket_is_clean(tmp_path):
    result = run_rule(
        tmp_path,
        """
resource "aws_s3_bucket" "logs" {
  bucket = "logs"
  acl    = "private"
  tags = {
    Environment = "prod"
    Owner       = "platform"
    Project     = "audit"
  }
}
""",
    )

    assert result.findings == []


def test_missing_tags_attribute_entirely(tmp_path):
    result = run_rule(
        tmp_path,
        """
resource "aws_instance" "web" {
  ami = "ami-123456"
}
""",
    )

    assert messages(result) == ["Resource missing 'tags' attribute entirely"]


def test_deprecated_resource_and_hardcoded_password(tmp_path):
    result = run_rule(
        tmp_path,
        """
resource "aws_db_instance" "db" {
  password = "hunter2"
  tags = {
    Environment = "prod"
    Owner       = "data"
    Project     = "billing"
  }
}
""",
    )

    assert len(result.findings) == 2
    deprecated, secret = result.findings
    assert deprecated.severity is Severity.WARN
    assert "Resource type 'aws_db_instance' is deprecated" in deprecated.message
    assert "aws_rds_instance" in deprecated.message
    assert secret.severity is Severity.ERROR
    assert secret.message == "Resource attribute 'password' may contain hardcoded secret"


def test_referenced_or_empty_secret_is_not_flagged(tmp_path):
    result = run_rule(
        tmp_path,
        """
resource "aws_db_instance" "db" {
  password        = var.db_password
  master_password = ""
  tags = {
    Environment = "prod"
    Owner       = "data"
    Project     = "billing"
  }
}
""",
    )

    assert result.summary.error == 0


def test_variable_with_secret_default(tmp_path):
    result = run_rule(
        tmp_path,
        """
variable "api_token" {
  default = "abc123"
}

variable "region" {
  default = "us-east-1"
}

variable "db_password" {
  default = ""
}
""",
    )

    assert messages(result) == ["Variable 'api_token' has a hardcoded default secret"]
    assert result.findings[0].severity is Severity.ERROR


def test_unparsable_file_yields_single_error(tmp_path):
    result = run_rule(tmp_path, 'resource "aws_s3_bucket" "broken" {\n  acl = \n')

    assert len(result.findings) == 1
    assert result.findings[0].severity is Severity.ERROR
    assert result.findings[0].message.startswith("Failed to parse HCL file:")


def test_parse_keeps_only_resource_and_variable_blocks():
    blocks = parse_terraform(
        """
provider "aws" {
  region = "us-east-1"
}

resource "aws_s3_bucket" "b" {
  acl = "private"
}

variable "name" {
  default = "x"
}
"""
    )

    assert sorted((block.kind, block.labels) for block in blocks) == [
        ("resource", ("aws_s3_bucket", "b")),
        ("variable", ("name",)),
    ]


# ----------------------------------------------------------------------
# Block-level checks without the parser
# ----------------------------------------------------------------------
def test_public_bucket_ignores_other_resource_types():
    block = Block(kind="resource", labels=("aws_s3_object", "o"), attributes={"acl": "public-read"}, names=("acl",))

    assert check_public_bucket("f.tf", block) == []


def test_public_bucket_unresolved_acl_is_skipped():
    block = Block(kind="resource", labels=("aws_s3_bucket", "b"), unresolved=("acl",), names=("acl",))

    assert check_public_bucket("f.tf", block) == []


def test_unresolved_tags_produce_no_tag_findings():
    block = Block(kind="resource", labels=("aws_s3_bucket", "b"), unresolved=("tags",), names=("tags",))

    assert check_required_tags("f.tf", block) == []


def test_secret_keyword_match_is_case_insensitive():
    block = Block(
        kind="resource",
        labels=("aws_iam_access_key", "k"),
        attributes={"Secret_Value": "s3cr3t", "pgp_key": None, "user": "bob"},
        names=("Secret_Value", "pgp_key", "user"),
    )

    findings = check_secret_attributes("f.tf", block)

    assert [finding.message for finding in findings] == [
        "Resource attribute 'Secret_Value' may contain hardcoded secret"
    ]


def test_variable_default_requires_secret_name():
    block = Block(kind="variable", labels=("region",), attributes={"default": "secret-looking"}, names=("default",))

    assert check_variable_default("f.tf", block) == []


def test_resolve_literal_rejects_interpolation():
    assert resolve_literal({"Name": "web", "Count": 2}) == {"Name": "web", "Count": 2}
    assert resolve_literal('"quoted"') == "quoted"
    with pytest.raises(Unresolved):
        resolve_literal("${var.name}")
    with pytest.raises(Unresolved):
        resolve_literal({"Name": "${local.name}"})


def test_resolve_literal_unescapes_doubled_dollar():
    assert resolve_literal("$${literal}") == "${literal}"
    assert resolve_literal('"prefix-$${name}"') == "prefix-${name}"
    with pytest.raises(Unresolved):
        resolve_literal("$${literal}-${var.name}")


def test_escaped_interpolation_is_a_hardcoded_secret():
    block = Block(
        kind="resource",
        labels=("aws_db_instance", "db"),
        attributes={"password": resolve_literal("$${not_a_reference}")},
        names=("password",),
    )

    findings = check_secret_attributes("f.tf", block)

    assert [finding.message for finding in findings] == [
        "Resource attribute 'password' may contain hardcoded secret"
    ]


def test_resource_with_missing_label_is_skipped(tmp_path):
    source = """
resource "aws_s3_bucket" {
  acl = "public-read"
  tags = {
    Environment = "prod"
  }
}
"""

    assert parse_terraform(source) == []
    assert run_rule(tmp_path, source).findings == []


def test_unreadable_file_yields_single_error(tmp_path, monkeypatch):
    def deny(path):
        raise OSError(f"Permission denied: '{path}'")

    monkeypatch.setattr("infracheck.rules.terraform.read_text_file", deny)

    result = run_rule(tmp_path, 'resource "aws_s3_bucket" "b" {\n  acl = "public-read"\n}\n')

    assert len(result.findings) == 1
    assert result.findings[0].severity is Severity.ERROR
    assert result.findings[0].message.startswith("Failed to read file: Permission denied")
