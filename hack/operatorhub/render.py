import os
import shutil

import jinja2
import yaml
from jinja2.filters import do_indent

from operatorhub.errors import RenderError
from operatorhub.log import log

CSV_TEMPLATE_FILE = "csv.tpl"
PACKAGE_TEMPLATE_FILE = "package.tpl"

CRD_FILE_SUFFIX = "crd.yaml"
CSV_FILE_SUFFIX = "clusterserviceversion.yaml"
PACKAGE_FILE_SUFFIX = "package.yaml"


def nindent(value, width):
    return "\n" + do_indent(str(value).rstrip("\n"), width, first=True)


def quote(value):
    return '"%s"' % str(value).replace("\\", "\\\\").replace('"', '\\"')


def toyaml(value):
    return yaml.safe_dump(value, default_flow_style=False).rstrip("\n")


def template_environment(templates_dir):
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(templates_dir),
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
    )
    env.filters["nindent"] = nindent
    env.filters["quote"] = quote
    env.filters["toyaml"] = toyaml
    return env


def render(params, templates_dir, out_dir):
    """Write the bundle for one package.

    The version directory is replaced wholesale so no stale files from an
    earlier run survive. The package file is shared between versions and is
    written to out_dir itself.
    """
    version_dir = os.path.join(out_dir, params.new_version)

    if os.path.exists(version_dir):
        log("Removing existing directory %s" % version_dir)
        try:
            shutil.rmtree(version_dir)
        except OSError as err:
            raise RenderError("failed to remove existing directory %s: %s" % (version_dir, err)) from err

    try:
        os.makedirs(version_dir)
    except OSError as err:
        raise RenderError("failed to create directory %s: %s" % (version_dir, err)) from err

    env = template_environment(templates_dir)

    csv_file = os.path.join(
        version_dir, "%s.v%s.%s" % (params.package_name, params.new_version, CSV_FILE_SUFFIX)
    )
    render_template(env, params, CSV_TEMPLATE_FILE, csv_file)
    log("Wrote ClusterServiceVersion: %s" % csv_file)

    render_crds(params, version_dir)

    package_file = os.path.join(out_dir, "%s.%s" % (params.package_name, PACKAGE_FILE_SUFFIX))
    render_template(env, params, PACKAGE_TEMPLATE_FILE, package_file)
    log("Wrote package: %s" % package_file)


def render_template(env, params, template_name, out_path):
    try:
        template = env.get_template(template_name)
        content = template.render(**params.template_vars())
    except jinja2.TemplateError as err:
        raise RenderError("failed to render template %s: %s" % (template_name, err)) from err

    try:
        with open(out_path, "w", encoding="utf-8") as outfile:
            outfile.write(content)
    except OSError as err:
        raise RenderError("failed to open file for writing [%s]: %s" % (out_path, err)) from err


def render_crds(params, out_dir):
    for crd in params.crd_list:
        crd_path = os.path.join(out_dir, "%s.%s" % (crd.name.lower(), CRD_FILE_SUFFIX))
        # written as is to keep the original formatting and comments
        try:
            with open(crd_path, "wb") as outfile:
                outfile.write(crd.definition)
        except OSError as err:
            raise RenderError("failed to write to %s: %s" % (crd_path, err)) from err
        log("Wrote CRD: %s" % crd_path, level="debug")
