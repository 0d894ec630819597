import re
from dataclasses import dataclass, field
from typing import Dict, List

import yaml

from operatorhub.errors import DecodeError
from operatorhub.log import log

OPERATOR_NAME = "elastic-operator"

APIEXTENSIONS_V1BETA1 = "apiextensions.k8s.io/v1beta1"
APIEXTENSIONS_V1 = "apiextensions.k8s.io/v1"
RBAC_V1 = "rbac.authorization.k8s.io/v1"
ADMISSIONREGISTRATION_V1 = "admissionregistration.k8s.io/v1"

# API group/versions we know how to decode. A document outside of these cannot
# be trusted to be a well formed installation manifest.
KNOWN_API_VERSIONS = frozenset([
    "v1",
    "apps/v1",
    "batch/v1",
    "policy/v1",
    "autoscaling/v1",
    "autoscaling/v2",
    "networking.k8s.io/v1",
    "scheduling.k8s.io/v1",
    "coordination.k8s.io/v1",
    "storage.k8s.io/v1",
    "certificates.k8s.io/v1",
    "discovery.k8s.io/v1",
    RBAC_V1,
    ADMISSIONREGISTRATION_V1,
    APIEXTENSIONS_V1BETA1,
    APIEXTENSIONS_V1,
])

# a "---" line, optionally followed by whitespace or a comment
SEPARATOR_RE = re.compile(rb"^---\s*(#.*)?$")


@dataclass
class CRD:
    name: str
    group: str
    kind: str
    version: str
    definition: bytes
    display_name: str = ""
    description: str = ""


@dataclass
class YAMLExtracts:
    crds: Dict[str, CRD] = field(default_factory=dict)
    operator_rbac: List[dict] = field(default_factory=list)
    operator_webhooks: List[dict] = field(default_factory=list)


def read_documents(stream):
    """Split a multi-document YAML byte stream into its documents.

    Empty documents are dropped. Each returned document keeps its original
    bytes, separators excluded.
    """
    buf = []
    for line in stream.splitlines(keepends=True):
        if SEPARATOR_RE.match(line.rstrip(b"\r\n")):
            if buf:
                yield b"".join(buf)
            buf = []
            continue
        buf.append(line)
    if buf:
        yield b"".join(buf)


def normalize_trailing_newlines(doc):
    # yamllint wants exactly one newline at the end of a file
    return doc.rstrip(b"\n") + b"\n"


def decode(doc):
    try:
        obj = yaml.load(doc, Loader=yaml.SafeLoader)
    except yaml.YAMLError as err:
        raise DecodeError("failed to decode YAML: %s" % err) from err

    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise DecodeError("failed to decode YAML: document is not an object")

    api_version = obj.get("apiVersion")
    kind = obj.get("kind")
    if not kind:
        raise DecodeError("failed to decode YAML: Object 'Kind' is missing in %r" % _preview(doc))
    if not api_version:
        raise DecodeError("failed to decode YAML: Object 'apiVersion' is missing in %r" % _preview(doc))
    if api_version not in KNOWN_API_VERSIONS:
        raise DecodeError(
            'failed to decode YAML: no kind "%s" is registered for version "%s"' % (kind, api_version)
        )
    return obj


def _preview(doc):
    return doc[:80].decode("utf-8", errors="replace")


def _name(obj):
    return (obj.get("metadata") or {}).get("name", "")


def crd_from_object(obj, definition):
    spec = obj.get("spec") or {}
    names = spec.get("names") or {}
    versions = spec.get("versions") or []

    if obj["apiVersion"] == APIEXTENSIONS_V1BETA1 and spec.get("version"):
        version = spec["version"]
    elif versions:
        version = versions[0].get("name", "")
    else:
        raise DecodeError("CustomResourceDefinition %s has no versions" % _name(obj))

    return CRD(
        name=_name(obj),
        group=spec.get("group", ""),
        kind=names.get("kind", ""),
        version=version,
        definition=definition,
    )


def extract_yaml_parts(stream):
    """Pull the CRDs, operator RBAC rules and webhook configurations out of a manifest stream.

    :param stream (bytes): Multi-document YAML.
    :return extracts (YAMLExtracts): Everything of interest found in the stream.
    :raises DecodeError: If any document cannot be decoded. Nothing is returned
        in that case.
    """
    parts = YAMLExtracts()

    for doc in read_documents(stream):
        doc = normalize_trailing_newlines(doc)
        obj = decode(doc)
        if obj is None:
            continue

        kind = obj["kind"]
        api_version = obj["apiVersion"]

        if kind == "CustomResourceDefinition" and api_version in (APIEXTENSIONS_V1BETA1, APIEXTENSIONS_V1):
            crd = crd_from_object(obj, doc)
            log("Found CRD %s" % crd.name, level="debug")
            parts.crds[crd.name] = crd
        elif kind == "ClusterRole" and api_version == RBAC_V1:
            if _name(obj) == OPERATOR_NAME:
                parts.operator_rbac = obj.get("rules") or []
        elif kind == "ValidatingWebhookConfiguration" and api_version == ADMISSIONREGISTRATION_V1:
            parts.operator_webhooks.append(obj)

    return parts
