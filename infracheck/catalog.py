"""Static rule tables consulted by the checks.

The tables are built once at import time and exposed read-only. Matching
against them is plain substring or key lookup, never tokenized, so an entry
that happens to be part of an unrelated identifier will still match.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

# ----------------------------------------------------------------------
# Shared
# ----------------------------------------------------------------------
SECRET_KEYWORDS: Tuple[str, ...] = ("password", "secret", "token", "key", "pwd", "access")

# ----------------------------------------------------------------------
# Terraform
# ----------------------------------------------------------------------
STORAGE_BUCKET_TYPE = "aws_s3_bucket"
PUBLIC_READ_ACL = "public-read"
REQUIRED_TAGS: Tuple[str, ...] = ("Environment", "Owner", "Project")

TERRAFORM_DEPRECATED_RESOURCES: Mapping[str, str] = MappingProxyType(
    {
        "aws_db_instance": "This resource is deprecated, use aws_rds_instance instead.",
        "aws_elb": "This resource is deprecated, use aws_lb instead.",
        "aws_elasticsearch_domain": "This resource is deprecated, use aws_opensearch_domain instead.",
        "aws_iam_policy_attachment": (
            "This resource is deprecated, use aws_iam_role_policy_attachment "
            "or aws_iam_user_policy_attachment instead."
        ),
        "aws_launch_configuration": (
            "This resource is deprecated, use aws_autoscaling_group with launch template instead."
        ),
        "aws_acm_certificate_validation": "Deprecated in favor of aws_acm_certificate with validation blocks.",
        "aws_cloudwatch_event_rule": (
            "This resource is deprecated, use aws_cloudwatch_event_rule (newer schema) or aws_eventbridge_rule."
        ),
        "aws_route53_record": (
            "Use caution, certain types or configurations may be deprecated; check latest provider docs."
        ),
        "aws_sns_topic_subscription": "Deprecated in favor of aws_sns_subscription.",
        "aws_spot_instance_request": (
            "This resource is deprecated, use aws_spot_fleet_request or aws_ec2_spot_fleet instead."
        ),
        "aws_elastic_beanstalk_environment": (
            "Check if using legacy configs; aws_elastic_beanstalk_environment is still supported "
            "but monitor provider updates."
        ),
        "aws_iam_group_policy_attachment": "Deprecated, prefer aws_iam_group_policy.",
    }
)

# ----------------------------------------------------------------------
# Ansible
# ----------------------------------------------------------------------
ANSIBLE_RESERVED_TASK_KEYS: Tuple[str, ...] = ("name", "become", "vars")
REQUIRED_TASK_FIELDS: Tuple[str, ...] = ("name",)

ANSIBLE_DEPRECATED_MODULES: Mapping[str, str] = MappingProxyType(
    {
        "raw": "The 'raw' module is deprecated; consider using 'command' or other modules.",
        "command": "The 'command' module is sometimes discouraged in favor of more specific modules.",
        "shell": "The 'shell' module can be risky and is discouraged for idempotency reasons.",
        "ec2": "The 'ec2' module is deprecated; use 'amazon.aws.ec2_instance' from the Amazon AWS Collection instead.",
        "docker": "The 'docker' module is deprecated; use 'community.docker.docker_container' instead.",
        "git": "Older 'git' module versions might be deprecated; ensure you use the latest from 'community.general.git'.",
        "service": (
            "The 'service' module is discouraged in favor of OS-specific modules like 'systemd' or 'service_facts'."
        ),
        "yum": "The 'yum' module is discouraged for newer systems; use 'dnf' module on Fedora/RHEL 8+.",
        "apt": (
            "The 'apt' module should be replaced with 'apt_key' and 'apt_repository' for finer control "
            "where applicable."
        ),
        "setup": (
            "Some facts gathered by 'setup' module may be deprecated; use 'ansible_facts' with targeted filters."
        ),
        "iptables": "Deprecated in favor of 'community.general.iptables' or 'ufw' modules depending on your firewall system.",
        "firewalld": "Legacy 'firewalld' module replaced by 'community.general.firewalld'.",
        "user": "Deprecated options in 'user' module replaced with improved parameters in latest versions.",
    }
)

# ----------------------------------------------------------------------
# Puppet
# ----------------------------------------------------------------------
PUPPET_DEPRECATED_RESOURCES: Tuple[str, ...] = (
    "execpipe",
    "database",
    "concat::fragment",
    "filebucket",
    "nagios_service",
    "package",
    "resources",
    "vcsrepo",
    "apache::vhost",
    "mysql::db",
    "ssh_authorized_key",
)

PUPPET_DISALLOWED_PARAMETERS: Tuple[str, ...] = (
    "force_destroy",
    "skip_final_snapshot",
    "public_ip",
    "allow_remote_access",
    "password",
    "secret_key",
    "access_key",
    "enable_http_access",
    "insecure_ssl",
    "admin_password",
)


def contains_secret_keyword(name: str) -> bool:
    """Return True when ``name`` contains any secret keyword, ignoring case."""

    lowered = name.lower()
    return any(keyword in lowered for keyword in SECRET_KEYWORDS)
