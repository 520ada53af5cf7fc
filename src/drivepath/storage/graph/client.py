from __future__ import annotations

import logging
import os
import random
import time
from datetime import datetime
from typing import TYPE_CHECKING, BinaryIO, Iterator

import requests
from pydantic import TypeAdapter

from drivepath.storage.errors import ConfigurationError, InvalidArgumentError
from drivepath.storage.models import Node, NodeKind
from drivepath.storage.settings import GRAPH_BASE_URL

from .utils import encode_segment, quote_odata_string, site_path_from_url

if TYPE_CHECKING:
    from drivepath.auth.token_provider import TokenProvider

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES = {429, 503, 504}
MAX_RETRIES = 5
BASE_DELAY = 1.0
SIMPLE_UPLOAD_LIMIT = 250 * 1024 * 1024
DOWNLOAD_CHUNK_SIZE = 1024 * 1024

_TIMESTAMP = TypeAdapter(datetime)


class GraphDriveClient:
    """Graph implementation of RemoteGraphClient over a single drive."""

    def __init__(
        self,
        token_provider: "TokenProvider",
        *,
        drive_id: str | None = None,
        site_url: str | None = None,
        base_url: str = GRAPH_BASE_URL,
        page_size: int = 500,
        timeout: float = 60,
        session: requests.Session | None = None,
    ):
        """Initialize the graph drive client.

        Args:
            token_provider: Source of the bearer token sent with every request.
            drive_id: Id of the drive to work in.
            site_url: URL of a SharePoint site whose default drive is used
                when ``drive_id`` is not given.
            base_url: Graph endpoint, including the API version.
            page_size: Number of children requested per page.
            timeout: Seconds to wait for each HTTP request.
            session: HTTP session, a new one is created if omitted.
        """
        self._token_provider = token_provider
        self._base_url = base_url.rstrip("/")
        self.page_size = page_size
        self._timeout = timeout
        self._session = session or requests.Session()

        if drive_id:
            self._drive_id = drive_id
        elif site_url:
            self._drive_id = self.get_site_drive_id(site_url)
        else:
            raise ConfigurationError(
                "Either drive_id or site_url is required to select a drive."
            )

    @property
    def drive_id(self) -> str:
        return self._drive_id

    def _drive_url(self, suffix: str) -> str:
        return f"{self._base_url}/drives/{self._drive_id}/{suffix}"

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self._token_provider.get_token()}"}

    def _request(
        self, method: str, url: str, *, retry: bool = False, **kwargs
    ) -> requests.Response:
        """Send a request, retrying throttled or unavailable responses if allowed.

        Only idempotent requests should pass ``retry=True``: a request body
        streamed from a file cannot be sent twice. A 401 response drops the
        cached token and, unless the body is such a stream, the request is
        sent once more with a fresh token.
        """
        attempts = MAX_RETRIES if retry else 1
        attempt = 1
        reauthenticated = False
        while True:
            response = self._session.request(
                method, url, headers=self._headers(), timeout=self._timeout, **kwargs
            )
            if response.status_code < 400:
                return response

            if response.status_code == 401 and not reauthenticated:
                self._token_provider.invalidate()
                reauthenticated = True
                if _is_replayable(kwargs.get("data")):
                    logger.info("Graph API rejected the token; retrying with a new one")
                    response.close()
                    continue

            if response.status_code not in RETRY_STATUS_CODES or attempt == attempts:
                response.raise_for_status()

            # Retry logic
            retry_after = response.headers.get("Retry-After")
            if retry_after:
                delay = int(retry_after)
            else:
                delay = BASE_DELAY * (2 ** (attempt - 1))
                delay += random.uniform(0, 0.5)  # jitter
            logger.warning(
                "Graph API %s error. Retrying in %.1f seconds (attempt %d/%d)",
                response.status_code,
                delay,
                attempt,
                attempts,
            )
            response.close()
            time.sleep(delay)
            attempt += 1

    def _paged_fetch(self, request_url: str, **params) -> Iterator[dict]:
        """Yield every item of a collection, following ``@odata.nextLink``."""
        page = self._request("GET", request_url, retry=True, params=params).json()
        page_number = 1
        while True:
            for item in page.get("value", []):
                yield item

            next_link: str | None = page.get("@odata.nextLink", None)
            if not next_link:
                break

            # nextLink already contains all query params
            page = self._request("GET", next_link, retry=True).json()
            page_number += 1
            logger.debug("Fetched page %s of %s", page_number, request_url)

    @staticmethod
    def _map_node(item: dict, keep_metadata: bool = True) -> Node:
        parent_id = item.get("parentReference", {}).get("id")
        return Node(
            id=item["id"],
            name=item.get("name"),
            kind=NodeKind.FOLDER if "folder" in item else NodeKind.FILE,
            parents=(parent_id,) if parent_id else (),
            trashed="deleted" in item,
            time_created=_parse_timestamp(item.get("createdDateTime")),
            time_last_modified=_parse_timestamp(item.get("lastModifiedDateTime")),
            extra=item if keep_metadata else None,
        )

    def get_site_drive_id(self, site_url: str) -> str:
        """Return the id of the default document library of a site."""
        site_path = site_path_from_url(site_url)
        site = self._request(
            "GET", f"{self._base_url}/sites/{site_path}", retry=True
        ).json()
        drive = self._request(
            "GET", f"{self._base_url}/sites/{site['id']}/drive", retry=True
        ).json()
        if not drive.get("id"):
            raise ConfigurationError(f"Site {site_url} has no default drive.")
        return drive["id"]

    def search_by_name_and_parent(
        self,
        name: str,
        parent_id: str | None,
        kind: NodeKind | None = None,
    ) -> list[Node]:
        """Return the live items named exactly ``name``.

        With a parent, the parent's children are listed; without one the
        drive-wide search endpoint is used. Both are filtered locally on
        the exact name because Graph search matches loosely.
        """
        if parent_id is None:
            query = encode_segment(quote_odata_string(name))
            url = self._drive_url(f"root/search(q='{query}')")
            items = self._paged_fetch(url)
        else:
            url = self._drive_url(f"items/{parent_id}/children")
            items = self._paged_fetch(url, **{"$top": self.page_size})

        nodes: list[Node] = []
        for item in items:
            if item.get("name") != name:
                continue
            node = self._map_node(item)
            if node.trashed or (kind is not None and node.kind is not kind):
                continue
            nodes.append(node)

        logger.debug(
            "Found %d item(s) named %s under %s", len(nodes), name, parent_id or "drive"
        )
        return nodes

    def create_folder(self, name: str, parent_id: str) -> Node:
        body = {
            "name": name,
            "folder": {},
            "@microsoft.graph.conflictBehavior": "fail",
        }
        response = self._request(
            "POST", self._drive_url(f"items/{parent_id}/children"), json=body
        )
        return self._map_node(response.json())

    def create_file_with_content(
        self, name: str, parent_id: str, content: BinaryIO
    ) -> Node:
        """Upload a file with a single request.

        Files up to 250MB are accepted. An empty file is sent as an empty
        body so that the request carries a zero Content-Length.
        """
        size = _content_length(content)
        if size is not None and size > SIMPLE_UPLOAD_LIMIT:
            raise InvalidArgumentError(
                "File size exceeds 250MB limit for this upload method."
            )

        url = self._drive_url(f"items/{parent_id}:/{encode_segment(name)}:/content")
        body = b"" if size == 0 else content
        response = self._request("PUT", url, data=body)
        item = response.json()

        logger.debug("Uploaded %s to %s", name, parent_id)
        return self._map_node(item)

    def delete_node(self, node_id: str) -> None:
        self._request("DELETE", self._drive_url(f"items/{node_id}"), retry=True)

    def download_content(self, node_id: str) -> Iterator[bytes]:
        """Yield the content of a file; the request is sent on first iteration."""
        response = self._request(
            "GET", self._drive_url(f"items/{node_id}/content"), retry=True, stream=True
        )
        try:
            for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                if chunk:
                    yield chunk
        finally:
            response.close()


def _content_length(content: BinaryIO) -> int | None:
    try:
        return os.fstat(content.fileno()).st_size
    except (AttributeError, OSError):
        return None


def _is_replayable(data) -> bool:
    return data is None or isinstance(data, (bytes, str))


def _parse_timestamp(value: str | None) -> datetime | None:
    if value is None:
        return None
    return _TIMESTAMP.validate_python(value)
