import requests

from operatorhub.errors import ManifestError, NotFoundError
from operatorhub.log import log

ALL_IN_ONE_URL = "https://download.elastic.co/downloads/eck/%s/all-in-one.yaml"
CRD_MANIFEST_URL = "https://download.elastic.co/downloads/eck/%s/crds.yaml"
OPERATOR_MANIFEST_URL = "https://download.elastic.co/downloads/eck/%s/operator.yaml"

YAML_SEPARATOR = b"---\n"

REQUEST_TIMEOUT = 10


def get_install_manifest_stream(version, manifest_paths=None):
    """Return the installation manifests as one multi-document YAML stream.

    :param version: Operator version used to build the download URLs when no
        local manifests are given.
    :param manifest_paths: Local manifest files. When empty, the manifests are
        downloaded instead.
    :return stream (bytes): The concatenated documents.
    """
    if not manifest_paths:
        return install_manifest_from_web(version)

    parts = []
    for path in manifest_paths:
        try:
            with open(path, "rb") as stream:
                content = stream.read()
        except OSError as err:
            raise ManifestError("failed to open %s: %s" % (path, err)) from err
        parts.append(_terminated(content))
        log("Read manifest %s" % path, level="debug")
        # local files may not end with a document marker, so add one between them
        parts.append(YAML_SEPARATOR)
    return b"".join(parts)


def install_manifest_from_web(version):
    # the all-in-one manifest only exists for older releases
    try:
        return make_request(ALL_IN_ONE_URL % version)
    except NotFoundError:
        log("No all-in-one manifest for %s, fetching CRDs and operator manifests" % version)

    crd_url = CRD_MANIFEST_URL % version
    try:
        crds = make_request(crd_url)
    except ManifestError as err:
        raise ManifestError("when getting %s: %s" % (crd_url, err)) from err

    operator_url = OPERATOR_MANIFEST_URL % version
    try:
        operator = make_request(operator_url)
    except ManifestError as err:
        raise ManifestError("when getting %s: %s" % (operator_url, err)) from err

    return _terminated(crds) + YAML_SEPARATOR + operator


def _terminated(content):
    if content and not content.endswith(b"\n"):
        return content + b"\n"
    return content


def make_request(url):
    log("Downloading %s" % url, level="debug")
    try:
        resp = requests.get(url, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as err:
        raise ManifestError("failed to GET %s: %s" % (url, err)) from err

    if resp.status_code == 404:
        raise NotFoundError("not found: %s" % url)
    if resp.status_code != 200:
        raise ManifestError("request error %s: %s %s" % (url, resp.status_code, resp.reason))

    return resp.content
