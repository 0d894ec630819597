import datetime
from dataclasses import dataclass, fields
from typing import Optional, Tuple

import yaml

from operatorhub.errors import ConfigError
from operatorhub.extract import CRD, OPERATOR_NAME

WEBHOOK_TYPE = "ValidatingAdmissionWebhook"
WEBHOOK_CONTAINER_PORT = 443
WEBHOOK_TARGET_PORT = 9443
WEBHOOK_MATCH_POLICY = "Exact"


@dataclass(frozen=True)
class RenderParams:
    new_version: str
    short_version: str
    prev_version: str
    stack_version: str
    operator_repo: str
    operator_rbac: str
    additional_args: Tuple[str, ...]
    crd_list: Tuple[CRD, ...]
    operator_webhooks: str
    package_name: str
    tag: str
    ubi_only: bool
    created_at: str

    def template_vars(self):
        """Expose the fields by name to the templates."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


def webhook_definitions(webhook_configuration):
    """Convert a ValidatingWebhookConfiguration into OLM webhook definitions.

    See https://olm.operatorframework.io/docs/advanced-tasks/adding-admission-and-conversion-webhooks/
    """
    definitions = []
    for webhook in webhook_configuration.get("webhooks") or []:
        service = (webhook.get("clientConfig") or {}).get("service") or {}
        definition = {
            "type": WEBHOOK_TYPE,
            "admissionReviewVersions": webhook.get("admissionReviewVersions") or [],
            "containerPort": WEBHOOK_CONTAINER_PORT,
            "targetPort": WEBHOOK_TARGET_PORT,
            "deploymentName": OPERATOR_NAME,
            "failurePolicy": webhook.get("failurePolicy"),
            "matchPolicy": WEBHOOK_MATCH_POLICY,
            "generateName": webhook.get("name", ""),
            "rules": webhook.get("rules") or [],
            "sideEffects": webhook.get("sideEffects"),
            "webhookPath": service.get("path"),
        }
        definitions.append({k: v for k, v in definition.items() if v is not None})
    return definitions


def short_version(version):
    parts = version.split(".")
    if len(parts) < 2:
        raise ConfigError("newVersion in config file appears to be invalid [%s]" % version)
    return ".".join(parts[:2])


def _dump(data):
    return yaml.safe_dump(data, default_flow_style=False)


def build_render_params(conf, package_index, extracts, image_digest: Optional[str] = None) -> RenderParams:
    """Assemble everything the templates need to render one package.

    Display names and descriptions from the config are copied onto the
    extracted CRDs, so the extracts are updated in place.
    """
    for c in conf.crds:
        crd = extracts.crds.get(c.name)
        if crd is not None:
            crd.display_name = c.display_name
            crd.description = c.description

    missing = [
        crd.name for crd in extracts.crds.values()
        if not crd.description.strip() or not crd.display_name.strip()
    ]
    if missing:
        raise ConfigError(
            "config file does not contain descriptions for some CRDs: %s" % sorted(missing)
        )

    crd_list = tuple(sorted(extracts.crds.values(), key=lambda crd: crd.name))

    webhooks = []
    for webhook_configuration in extracts.operator_webhooks:
        webhooks.extend(webhook_definitions(webhook_configuration))

    short = short_version(conf.new_version)

    pkg = conf.packages[package_index]

    additional_args = []
    if pkg.ubi_only:
        additional_args.append("--ubi-only")
    additional_args.append("--distribution-channel=" + pkg.distribution_channel)

    tag = ":" + conf.new_version
    if pkg.digest_pinning:
        if not image_digest:
            raise ConfigError("package %s requires digest pinning but no image digest was resolved" % pkg.package_name)
        tag = "@" + image_digest

    return RenderParams(
        new_version=conf.new_version,
        short_version=short,
        prev_version=conf.prev_version,
        stack_version=conf.stack_version,
        operator_repo=pkg.operator_repo,
        operator_rbac=_dump(extracts.operator_rbac),
        additional_args=tuple(additional_args),
        crd_list=crd_list,
        operator_webhooks=_dump(webhooks),
        package_name=pkg.package_name,
        tag=tag,
        ubi_only=pkg.ubi_only,
        created_at=datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
    )
