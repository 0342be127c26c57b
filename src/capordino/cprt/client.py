"""
capordino.cprt.client - Thin client for the CPRT JSON API.

Fetches the framework metadata listing and framework exports. Responses are
returned as parsed JSON; turning them into graphs is left to the loader.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from typing import Any

from capordino.cprt.graph import ElementGraph
from capordino.cprt.loader import select_version, unwrap_export
from capordino.cprt.models import CprtMetadataVersion

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://csrc.nist.gov/extensions/nudp/services/json/nudp"
TIMEOUT_SECONDS = 60


class CprtApiError(RuntimeError):
    """The CPRT API could not be reached or returned an unusable response."""


class CprtApiClient:
    """Client for the CPRT export and metadata endpoints.

    Example:
        client = CprtApiClient()
        version = client.get_version("SP_800_171_3_0_0")
        graph = client.export_graph(version.framework_version_identifier)
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = TIMEOUT_SECONDS) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _get_json(self, url: str) -> Any:
        logger.info("GET %s", url)
        req = urllib.request.Request(url, headers={"Accept": "application/json"})
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                return json.loads(resp.read())
        except (urllib.error.URLError, OSError) as e:
            raise CprtApiError(f"Request to {url} failed: {e}") from e
        except json.JSONDecodeError as e:
            raise CprtApiError(f"Response from {url} is not valid JSON: {e}") from e

    def metadata_url(self) -> str:
        return f"{self.base_url}/metadata"

    def export_url(self, framework_version_identifier: str) -> str:
        return (
            f"{self.base_url}/framework/version/{framework_version_identifier}"
            "/export/json?element=all"
        )

    def get_metadata(self) -> dict[str, Any]:
        """Fetch the metadata listing of all published framework versions."""
        return self._get_json(self.metadata_url())

    def get_version(self, framework_version_identifier: str) -> CprtMetadataVersion:
        """Fetch metadata and select one framework version.

        Raises:
            CprtApiError: If the request fails.
            ValueError: If the version is not listed.
        """
        return select_version(self.get_metadata(), framework_version_identifier)

    def export(self, framework_version_identifier: str) -> dict[str, Any]:
        """Fetch the raw export response of a framework version."""
        return self._get_json(self.export_url(framework_version_identifier))

    def export_graph(self, framework_version_identifier: str) -> ElementGraph:
        """Fetch an export and index it."""
        return ElementGraph.from_export(unwrap_export(self.export(framework_version_identifier)))
