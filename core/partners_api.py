"""Thin client for the Shopify Partner GraphQL API.

Only the two queries the sync needs are implemented: the app display name
and the paginated ``events`` connection of one app.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

import config

from .app_events import AppEvent, UnknownEventTypeError, event_from_edge
from .logging_utils import debug, info, warn

ENDPOINT_TEMPLATE = "https://partners.shopify.com/{partner_id}/api/{version}/graphql.json"
TOKEN_HEADER = "X-Shopify-Access-Token"

APP_NAME_QUERY = """
query AppName($appId: ID!) {
  app(id: $appId) {
    name
  }
}
"""

APP_EVENTS_QUERY = """
query AppEvents($appId: ID!, $first: Int!, $endCursor: String, $occurredAtMin: DateTime) {
  app(id: $appId) {
    name
    events(first: $first, after: $endCursor, occurredAtMin: $occurredAtMin) {
      edges {
        cursor
        node {
          type
          occurredAt
        }
      }
      pageInfo {
        hasNextPage
      }
    }
  }
}
"""


class PartnersAPIError(RuntimeError):
    """Request to the Partner API failed or returned GraphQL errors."""


class StalledPaginationError(PartnersAPIError):
    """An empty page claimed more results, so the cursor cannot advance."""


@dataclass
class FetchResult:
    events: List[AppEvent] = field(default_factory=list)
    pages: int = 0
    complete: bool = True
    error: Optional[str] = None
    skipped: int = 0


class PartnersClient:
    def __init__(
        self,
        access_token: str,
        partner_id: str,
        api_version: str = config.PARTNER_API_VERSION,
        session: Optional[requests.Session] = None,
        timeout: float = config.HTTP_TIMEOUT,
    ):
        self.url = ENDPOINT_TEMPLATE.format(partner_id=partner_id, version=api_version)
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                TOKEN_HEADER: access_token,
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    def execute(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        """POST a GraphQL document and return its ``data`` object."""

        try:
            r = self.session.post(
                self.url,
                json={"query": query, "variables": variables},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise PartnersAPIError(f"request failed: {e}") from e
        if r.status_code != 200:
            raise PartnersAPIError(f"HTTP {r.status_code}: {r.text[:200]}")
        try:
            body = r.json()
        except ValueError as e:
            raise PartnersAPIError(f"non-JSON response: {r.text[:200]}") from e
        errors = body.get("errors") or []
        if errors:
            msgs = "; ".join(str(err.get("message", err)) for err in errors)
            raise PartnersAPIError(f"GraphQL errors: {msgs}")
        return body.get("data") or {}

    def fetch_app_name(self, app_id: str) -> str:
        data = self.execute(APP_NAME_QUERY, {"appId": app_id})
        app = data.get("app")
        if not app or not app.get("name"):
            raise PartnersAPIError(f"App {app_id} not found")
        return app["name"]

    def fetch_page(
        self,
        app_id: str,
        occurred_at_min: str,
        end_cursor: Optional[str],
        page_size: int,
    ) -> Dict[str, Any]:
        data = self.execute(
            APP_EVENTS_QUERY,
            {
                "appId": app_id,
                "first": page_size,
                "endCursor": end_cursor,
                "occurredAtMin": occurred_at_min,
            },
        )
        app = data.get("app")
        if not app:
            raise PartnersAPIError(f"App {app_id} not found")
        return app.get("events") or {}

    def fetch_events(
        self,
        app_id: str,
        occurred_at_min: str,
        page_size: int = config.EVENTS_PAGE_SIZE,
    ) -> FetchResult:
        """Collect every event at or after ``occurred_at_min``.

        A failed page ends the loop early; whatever was collected so far is
        returned with ``complete=False`` and the reason in ``error``.
        """

        result = FetchResult()
        end_cursor: Optional[str] = None
        while True:
            debug(f"query app events, occurredAtMin: {occurred_at_min}, endCursor: {end_cursor}")
            try:
                page = self.fetch_page(app_id, occurred_at_min, end_cursor, page_size)
                edges = page.get("edges") or []
                has_next = bool((page.get("pageInfo") or {}).get("hasNextPage"))
                if has_next and not edges:
                    raise StalledPaginationError(
                        f"empty page reported hasNextPage after cursor {end_cursor}"
                    )
            except PartnersAPIError as e:
                warn(f"Error querying app events (page {result.pages + 1}): {e}")
                result.complete = False
                result.error = str(e)
                break

            result.pages += 1
            for edge in edges:
                try:
                    result.events.append(event_from_edge(edge))
                except UnknownEventTypeError as e:
                    warn(f"Skipping event: {e}")
                    result.skipped += 1
                except ValueError as e:
                    warn(f"Skipping event with bad occurredAt: {e}")
                    result.skipped += 1

            if not has_next:
                break
            end_cursor = edges[-1].get("cursor")
            if not end_cursor:
                warn("Page without an end cursor; stopping pagination.")
                result.complete = False
                result.error = "missing cursor on last edge"
                break

        info(f"Fetched {len(result.events)} events in {result.pages} page(s).")
        return result


__all__ = [
    "FetchResult",
    "PartnersAPIError",
    "PartnersClient",
    "StalledPaginationError",
]
