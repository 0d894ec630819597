import sys

import requests

from operatorhub.errors import DigestError

IMAGES_ENDPOINT = "https://catalog.redhat.com/api/containers/v1/projects/certification/id/%s/images"

REQUEST_TIMEOUT = 30


class CatalogClient:
    """Client for the Red Hat container certification catalog."""

    def __init__(self, api_key):
        if not api_key:
            raise DigestError("RedHat API key is required to get image digest")

        self.headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "X-API-KEY": api_key,
        }

    def _images_url(self, project_id):
        return IMAGES_ENDPOINT % project_id

    def list_images(self, project_id, tag):
        url = self._images_url(project_id)
        query = {"filter": "repositories.tags.name==%s;deleted==false" % tag}
        try:
            resp = requests.get(url, headers=self.headers, params=query, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as err:
            raise DigestError("failed to GET %s: %s" % (url, err)) from err

        if resp.status_code != 200:
            raise DigestError("request error %s: %s %s" % (url, resp.status_code, resp.reason))

        try:
            body = resp.json()
        except ValueError as err:
            raise DigestError("failed to decode response from %s: %s" % (url, err)) from err

        if not isinstance(body, dict):
            raise DigestError("unexpected response from %s" % url)
        return body.get("data") or []

    def get_image_digest(self, project_id, version):
        """Get the digest of the certified operator image tagged with version.

        :param project_id: The certification project of the operator image.
        :param version: The image tag.
        :return digest (str): The image digest as exposed by the Red Hat registry.
        :raises DigestError: Unless exactly one image with a digest matches.
        """
        images = self.list_images(project_id, version)

        if len(images) > 1:
            print("\nid                       creation_date                    docker_image_digest", file=sys.stderr)
            for image in images:
                print(
                    "%s %s %s" % (image.get("_id"), image.get("creation_date"), image.get("docker_image_digest")),
                    file=sys.stderr,
                )
            raise DigestError(
                "found %d images with tag %s in RedHat catalog while only one is expected" % (len(images), version)
            )
        if not images:
            raise DigestError("no image with tag %s in RedHat catalog" % version)

        digest = images[0].get("docker_image_digest")
        if not digest:
            raise DigestError("image digest for %s is empty" % version)
        return digest
