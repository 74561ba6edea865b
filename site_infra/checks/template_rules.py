"""
Configuration checks over a synthesized CloudFormation template.

Each rule takes the template as a dict (the content of
cdk.out/<stack>.template.json) and returns a list of findings; an empty
list means the rule holds. The rules cover the wiring mistakes that a
static site behind CloudFront typically ships with: implicit public access
defaults, overbroad bucket policies, ACLs without ownership controls, origins
pointing at the website endpoint and logs written into the site bucket.
"""

from __future__ import annotations
import fnmatch
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

BUCKET = "AWS::S3::Bucket"
BUCKET_POLICY = "AWS::S3::BucketPolicy"
DISTRIBUTION = "AWS::CloudFront::Distribution"

PUBLIC_ACCESS_FLAGS = (
    "BlockPublicAcls",
    "BlockPublicPolicy",
    "IgnorePublicAcls",
    "RestrictPublicBuckets",
)
ACL_COMPATIBLE_OWNERSHIP = ("BucketOwnerPreferred", "ObjectWriter")


@dataclass(frozen=True)
class Finding:
    """A rule violation on one template resource."""
    rule: str
    resource: str
    message: str

    def __str__(self) -> str:
        return f"{self.rule} [{self.resource}]: {self.message}"


# -----------------------------
# Template helpers
# -----------------------------

def load_template(path: str | Path) -> dict:
    """Read a template JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)

def _resources(template: dict, resource_type: str) -> Dict[str, dict]:
    return {
        logical_id: res
        for logical_id, res in (template.get("Resources") or {}).items()
        if res.get("Type") == resource_type
    }

def _props(resource: dict) -> dict:
    return resource.get("Properties") or {}

def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    return value if isinstance(value, list) else [value]

def _get_att(value: Any) -> Optional[Tuple[str, str]]:
    """Return (logical id, attribute) for an Fn::GetAtt, else None."""
    if not isinstance(value, dict) or set(value) != {"Fn::GetAtt"}:
        return None
    att = value["Fn::GetAtt"]
    if isinstance(att, str) and "." in att:
        logical_id, attribute = att.split(".", 1)
        return logical_id, attribute
    if isinstance(att, list) and len(att) == 2:
        return att[0], att[1]
    return None

def _ref(value: Any) -> Optional[str]:
    if isinstance(value, dict) and set(value) == {"Ref"}:
        return value["Ref"]
    return None

def _walk(value: Any) -> Iterator[Any]:
    """Yield value and every nested value."""
    yield value
    if isinstance(value, dict):
        for v in value.values():
            yield from _walk(v)
    elif isinstance(value, list):
        for v in value:
            yield from _walk(v)

def _mentions_website_endpoint(value: Any) -> bool:
    for node in _walk(value):
        att = _get_att(node)
        if att and att[1] == "WebsiteURL":
            return True
        if isinstance(node, str) and "s3-website" in node:
            return True
    return False

def _bucket_refs(template: dict, value: Any) -> List[str]:
    """Logical ids of buckets referenced anywhere inside value."""
    buckets = _resources(template, BUCKET)
    found = []
    for node in _walk(value):
        target = None
        att = _get_att(node)
        if att:
            target = att[0]
        else:
            target = _ref(node)
        if target in buckets and target not in found:
            found.append(target)
    return found

def _origins(template: dict) -> Iterator[Tuple[str, dict]]:
    for logical_id, dist in _resources(template, DISTRIBUTION).items():
        config = _props(dist).get("DistributionConfig") or {}
        for origin in _as_list(config.get("Origins")):
            yield logical_id, origin

def site_buckets(template: dict) -> List[str]:
    """
    Logical ids of buckets serving site content.

    A bucket counts as a site bucket when it has a website configuration or
    is referenced by a distribution origin.
    """
    result = [
        logical_id
        for logical_id, bucket in _resources(template, BUCKET).items()
        if "WebsiteConfiguration" in _props(bucket)
    ]
    for _, origin in _origins(template):
        for logical_id in _bucket_refs(template, origin.get("DomainName")):
            if logical_id not in result:
                result.append(logical_id)
    return result


# -----------------------------
# Rules
# -----------------------------

def check_public_access_block(template: dict) -> List[Finding]:
    """Site buckets set all four public access block flags explicitly."""
    rule = "public-access-block-explicit"
    buckets = _resources(template, BUCKET)
    findings = []
    for logical_id in site_buckets(template):
        block = _props(buckets[logical_id]).get("PublicAccessBlockConfiguration")
        if not isinstance(block, dict):
            findings.append(Finding(rule, logical_id, "no PublicAccessBlockConfiguration declared"))
            continue
        missing = [flag for flag in PUBLIC_ACCESS_FLAGS if not isinstance(block.get(flag), bool)]
        if missing:
            findings.append(Finding(
                rule,
                logical_id,
                f"flags left to their defaults: {', '.join(missing)}",
            ))
    return findings

def _is_object_arn_of(template: dict, value: Any, bucket_id: str) -> bool:
    # {"Fn::Join": ["", [{"Fn::GetAtt": [bucket, "Arn"]}, "/*"]]}
    if isinstance(value, dict) and set(value) == {"Fn::Join"}:
        join = value["Fn::Join"]
        if isinstance(join, list) and len(join) == 2 and join[0] == "":
            parts = join[1]
            if isinstance(parts, list) and len(parts) == 2 and parts[1] == "/*":
                return _get_att(parts[0]) == (bucket_id, "Arn")
        return False
    if isinstance(value, str):
        name = _props(_resources(template, BUCKET)[bucket_id]).get("BucketName")
        return isinstance(name, str) and value.endswith(f":s3:::{name}/*")
    return False

def _matches_get_object(action: Any) -> bool:
    # IAM action names are case-insensitive and allow * and ? wildcards
    return isinstance(action, str) and fnmatch.fnmatchcase("s3:getobject", action.lower())

def _grants_object_read(statement: dict) -> bool:
    if "NotAction" in statement:
        return not any(_matches_get_object(a) for a in _as_list(statement["NotAction"]))
    return any(_matches_get_object(a) for a in _as_list(statement.get("Action")))

def _policy_bucket(template: dict, value: Any) -> Optional[str]:
    """Logical id of the bucket a policy is attached to, by Ref or by literal name."""
    buckets = _resources(template, BUCKET)
    ref = _ref(value)
    if ref in buckets:
        return ref
    if isinstance(value, str):
        for logical_id, bucket in buckets.items():
            if _props(bucket).get("BucketName") == value:
                return logical_id
    return None

def check_policy_resource_scope(template: dict) -> List[Finding]:
    """Object reads on a site bucket are granted on exactly <bucket-arn>/*."""
    rule = "policy-resource-scope"
    sites = site_buckets(template)
    findings = []
    for logical_id, policy in _resources(template, BUCKET_POLICY).items():
        props = _props(policy)
        bucket_id = _policy_bucket(template, props.get("Bucket"))
        if bucket_id not in sites:
            continue
        document = props.get("PolicyDocument") or {}
        for i, statement in enumerate(_as_list(document.get("Statement"))):
            if not isinstance(statement, dict) or statement.get("Effect") != "Allow":
                continue
            if not _grants_object_read(statement):
                continue
            resources = _as_list(statement.get("Resource"))
            if len(resources) != 1 or not _is_object_arn_of(template, resources[0], bucket_id):
                findings.append(Finding(
                    rule,
                    logical_id,
                    f"statement #{i} grants s3:GetObject on {json.dumps(resources)}, "
                    f"expected only the objects of {bucket_id}",
                ))
    return findings

def check_acl_after_ownership(template: dict) -> List[Finding]:
    """Every bucket with an ACL declares ownership controls that keep ACLs enabled."""
    rule = "acl-after-ownership"
    findings = []
    for logical_id, bucket in _resources(template, BUCKET).items():
        props = _props(bucket)
        if "AccessControl" not in props:
            continue
        rules = (props.get("OwnershipControls") or {}).get("Rules") or []
        modes = [r.get("ObjectOwnership") for r in rules if isinstance(r, dict)]
        if not modes:
            findings.append(Finding(
                rule,
                logical_id,
                f"AccessControl {props['AccessControl']} set without OwnershipControls",
            ))
        elif not any(mode in ACL_COMPATIBLE_OWNERSHIP for mode in modes):
            findings.append(Finding(
                rule,
                logical_id,
                f"AccessControl {props['AccessControl']} set but ObjectOwnership "
                f"{', '.join(map(str, modes))} disables ACLs",
            ))
    return findings

def check_origin_regional_domain(template: dict) -> List[Finding]:
    """S3 origins use the bucket's regional domain name, not the website endpoint."""
    rule = "origin-regional-domain"
    buckets = _resources(template, BUCKET)
    findings = []
    for logical_id, origin in _origins(template):
        domain = origin.get("DomainName")
        origin_id = origin.get("Id", "?")
        if _mentions_website_endpoint(domain):
            findings.append(Finding(
                rule,
                logical_id,
                f"origin {origin_id} points at the website endpoint",
            ))
            continue
        is_s3 = "S3OriginConfig" in origin or bool(_bucket_refs(template, domain))
        if not is_s3:
            continue
        att = _get_att(domain)
        if not att or att[0] not in buckets or att[1] != "RegionalDomainName":
            findings.append(Finding(
                rule,
                logical_id,
                f"origin {origin_id} does not reference a bucket's RegionalDomainName",
            ))
    return findings

def check_logging_target(template: dict) -> List[Finding]:
    """Distribution access logs go to a bucket other than the site bucket."""
    rule = "logging-target-log-bucket"
    buckets = _resources(template, BUCKET)
    sites = site_buckets(template)
    findings = []
    for logical_id, dist in _resources(template, DISTRIBUTION).items():
        config = _props(dist).get("DistributionConfig") or {}
        logging_conf = config.get("Logging")
        if not logging_conf:
            findings.append(Finding(rule, logical_id, "no access logging configured"))
            continue
        att = _get_att(logging_conf.get("Bucket"))
        if not att or att[0] not in buckets:
            findings.append(Finding(
                rule,
                logical_id,
                "logging bucket does not resolve to a bucket in this template",
            ))
        elif att[0] in sites:
            findings.append(Finding(
                rule,
                logical_id,
                f"access logs are written into site bucket {att[0]}",
            ))
    return findings


RULES: Dict[str, Callable[[dict], List[Finding]]] = {
    "public-access-block-explicit": check_public_access_block,
    "policy-resource-scope": check_policy_resource_scope,
    "acl-after-ownership": check_acl_after_ownership,
    "origin-regional-domain": check_origin_regional_domain,
    "logging-target-log-bucket": check_logging_target,
}

def run_all(template: dict) -> List[Finding]:
    """Run every rule and return all findings, in rule order."""
    findings: List[Finding] = []
    for check in RULES.values():
        findings.extend(check(template))
    return findings
