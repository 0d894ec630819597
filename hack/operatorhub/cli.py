import argparse
import os
import sys

from operatorhub import __version__
from operatorhub.catalog import CatalogClient
from operatorhub.config import load_config
from operatorhub.errors import ConfigError, OperatorHubError
from operatorhub.extract import extract_yaml_parts
from operatorhub.log import log, set_verbose
from operatorhub.manifests import get_install_manifest_stream
from operatorhub.params import build_render_params
from operatorhub.render import render

REDHAT_API_TOKEN_FLAG = "redhat-api-token"
REDHAT_PROJECT_ID_FLAG = "redhat-project-id"


def flag_env(flag):
    """Environment variable backing a flag: dashes become underscores."""
    return flag.replace("-", "_").upper()


def split_manifests(values):
    paths = []
    for value in values or []:
        paths.extend(p for p in value.split(",") if p)
    return paths


def get_params(argv=None):
    parser = argparse.ArgumentParser(
        prog="operatorhub",
        description="Generate Operator Lifecycle Manager format files",
        epilog="Example: ./operatorhub --conf=config.yaml",
    )
    parser.add_argument("--version", action="version", version="%(prog)s " + __version__)
    parser.add_argument(
        "--conf",
        default="config.yaml",
        help="Path to config file",
    )
    parser.add_argument(
        "--yaml-manifest",
        dest="yaml_manifest",
        action="append",
        metavar="PATH",
        help="""Path to installation manifests. May be repeated or comma separated.
                If omitted, the manifests of newVersion are downloaded.""",
    )
    parser.add_argument(
        "--templates",
        default="./templates",
        help="Path to the templates directory",
    )
    parser.add_argument(
        "--" + REDHAT_API_TOKEN_FLAG,
        dest="redhat_api_token",
        default=os.getenv(flag_env(REDHAT_API_TOKEN_FLAG), ""),
        help="RedHat API key. Defaults to $%s." % flag_env(REDHAT_API_TOKEN_FLAG),
    )
    parser.add_argument(
        "--" + REDHAT_PROJECT_ID_FLAG,
        dest="redhat_project_id",
        default=os.getenv(flag_env(REDHAT_PROJECT_ID_FLAG), ""),
        help="RedHat project id. Defaults to $%s." % flag_env(REDHAT_PROJECT_ID_FLAG),
    )
    parser.add_argument(
        "--verbose",
        default=False,
        help="Show more details while running",
        action="store_true",
    )
    args = parser.parse_args(argv)
    args.yaml_manifest = split_manifests(args.yaml_manifest)
    return args


def resolve_digest(conf, api_key, project_id):
    # without these the certified bundle cannot be generated
    if not api_key:
        raise ConfigError("RedHat API key is required to get image digest")
    if not project_id:
        raise ConfigError("RedHat project ID is required to get image digest")

    digest = CatalogClient(api_key).get_image_digest(project_id, conf.new_version)
    log("Resolved image digest for %s: %s" % (conf.new_version, digest))
    return digest


def run(args):
    try:
        conf = load_config(args.conf)
    except ConfigError as err:
        raise ConfigError("when loading config: %s" % err) from err

    image_digest = ""
    if conf.has_digest_pinning():
        image_digest = resolve_digest(conf, args.redhat_api_token, args.redhat_project_id)

    try:
        stream = get_install_manifest_stream(conf.new_version, args.yaml_manifest)
    except OperatorHubError as err:
        raise type(err)("when getting install manifest stream: %s" % err) from err

    try:
        extracts = extract_yaml_parts(stream)
    except OperatorHubError as err:
        raise type(err)("when extracting YAML parts: %s" % err) from err

    for i, pkg in enumerate(conf.packages):
        log("Generating bundle for package %s version %s" % (pkg.package_name, conf.new_version))
        try:
            params = build_render_params(conf, i, extracts, image_digest)
        except OperatorHubError as err:
            raise type(err)("when building render params: %s" % err) from err

        try:
            render(params, args.templates, pkg.output_path)
        except OperatorHubError as err:
            raise type(err)("when rendering: %s" % err) from err


def main(argv=None):
    args = get_params(argv)
    set_verbose(args.verbose)
    try:
        run(args)
    except OperatorHubError as err:
        log("Error: %s" % err, level="error")
        sys.exit(1)


if __name__ == "__main__":
    main()
