import logging
from typing import Any

import requests
from pydantic import ValidationError

from retention.models import Asset, Component, Repository

logger = logging.getLogger(__name__)

API_PREFIX = "/service/rest/v1"
BODY_EXCERPT_LENGTH = 500


class RegistryError(Exception):
    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code: int | None = status_code
        self.body: str = body[:BODY_EXCERPT_LENGTH]

    def __str__(self) -> str:
        message = super().__str__()
        if self.status_code is not None:
            message = f"{message} (status {self.status_code})"
        if self.body:
            message = f"{message}: {self.body}"
        return message


class NexusClient:
    """Authenticated access to the Nexus repository manager REST API.

    Every request carries the credentials given at construction. Failures of any
    kind are raised as RegistryError and never retried.
    """

    def __init__(self, base_url: str, username: str, password: str, timeout: int = 30):
        self.base_url: str = base_url.rstrip("/")
        self.timeout: int = timeout
        self.session: requests.Session = requests.Session()
        self.session.auth = (username, password)
        self.session.headers.update({"Accept": "application/json"})

    def get_docker_repositories(self) -> list[Repository]:
        repositories = [
            self._to_repository(item)
            for item in self._get_all_pages(f"{API_PREFIX}/repositories")
        ]
        hosted = [r for r in repositories if r.is_docker_hosted()]
        logger.debug(f"{len(hosted)} of {len(repositories)} repositories are docker hosted")
        return hosted

    def get_components(self, repository: str) -> list[Component]:
        items = self._get_all_pages(f"{API_PREFIX}/components", {"repository": repository})
        return [self._to_component(item) for item in items]

    def delete_component(self, component_id: str) -> None:
        self._request("DELETE", f"{API_PREFIX}/components/{component_id}")

    def _get_all_pages(self, path: str, params: dict[str, str] | None = None) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        params = dict(params or {})
        while True:
            page = self._decode(self._request("GET", path, params), path)
            # the repositories endpoint answers with a bare list instead of a page
            if isinstance(page, list):
                items.extend(page)
                return items
            if not isinstance(page, dict):
                raise RegistryError(f"Unexpected response shape from {path}")
            items.extend(page.get("items") or [])
            token = page.get("continuationToken")
            if not token:
                return items
            logger.debug(f"Fetching next page of {path} ({len(items)} items so far)")
            params["continuationToken"] = token

    def _request(self, method: str, path: str, params: dict[str, str] | None = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise RegistryError(f"{method} {url} failed: {e}") from e
        if not 200 <= response.status_code < 300:
            raise RegistryError(f"{method} {url} failed", response.status_code, response.text)
        return response

    def _decode(self, response: requests.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise RegistryError(
                f"Failed to decode response from {path}", response.status_code, response.text
            ) from e

    def _to_repository(self, item: dict[str, Any]) -> Repository:
        try:
            return Repository(name=item["name"], format=item["format"], type=item["type"])
        except (KeyError, TypeError, ValidationError) as e:
            raise RegistryError(f"Invalid repository entry {item!r}: {e}") from e

    def _to_component(self, item: dict[str, Any]) -> Component:
        try:
            return Component(
                id=item["id"],
                repository=item["repository"],
                name=item["name"],
                version=item["version"],
                assets=[
                    Asset(
                        id=asset.get("id", ""),
                        path=asset.get("path", ""),
                        last_modified=asset.get("lastModified"),
                    )
                    for asset in item.get("assets") or []
                ],
            )
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            raise RegistryError(f"Invalid component entry {item!r}: {e}") from e
