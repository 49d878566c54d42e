"""Thin async client for the Supabase REST (PostgREST) API.

Rows are plain dicts keyed by column name. Filters are passed as
PostgREST query parameters, e.g. ``("ciudad", "eq.Cali")``.
"""

import logging
from collections.abc import Callable
from typing import Any

import httpx

from core.exceptions import ServiceError

logger = logging.getLogger(__name__)

Params = list[tuple[str, str]]


def eq(column: str, value: Any) -> tuple[str, str]:
    return column, f"eq.{value}"


def in_(column: str, values: list[Any]) -> tuple[str, str]:
    return column, f"in.({','.join(str(v) for v in values)})"


class SupabaseClient:
    """PostgREST table access with the project's API key.

    ``access_token`` returns the signed-in user's JWT when there is one, so
    row level security policies see the right user. Without it requests
    are made with the anonymous key.
    """

    def __init__(
        self,
        rest_url: str,
        api_key: str,
        timeout: float = 10.0,
        access_token: Callable[[], str | None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._rest_url = rest_url.rstrip("/")
        self._api_key = api_key
        self._access_token = access_token
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def http(self) -> httpx.AsyncClient:
        return self._http

    def auth_headers(self) -> dict[str, str]:
        """Headers identifying the project and, if signed in, the user."""
        token = self._access_token() if self._access_token else None
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {token or self._api_key}",
        }

    async def select(
        self,
        table: str,
        params: Params | None = None,
        columns: str = "*",
        order: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[dict[str, Any]]:
        """Rows of ``table`` matching ``params``."""
        query: Params = [("select", columns), *(params or [])]
        if order:
            query.append(("order", order))
        if limit is not None:
            query.append(("limit", str(limit)))
        if offset:
            query.append(("offset", str(offset)))
        return await self._request("GET", table, params=query)

    async def insert(
        self,
        table: str,
        rows: list[dict[str, Any]],
        columns: str = "*",
        ignore_duplicates: bool = False,
    ) -> list[dict[str, Any]]:
        """Insert rows and return what was stored.

        With ``ignore_duplicates`` rows that hit a unique constraint are
        skipped and left out of the result.
        """
        prefer = ["return=representation"]
        if ignore_duplicates:
            prefer.append("resolution=ignore-duplicates")
        return await self._request(
            "POST",
            table,
            params=[("select", columns)],
            json=rows,
            prefer=",".join(prefer),
        )

    async def update(
        self,
        table: str,
        values: dict[str, Any],
        params: Params,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        """Update matching rows and return them."""
        return await self._request(
            "PATCH",
            table,
            params=[("select", columns), *params],
            json=values,
            prefer="return=representation",
        )

    async def delete(self, table: str, params: Params) -> list[dict[str, Any]]:
        """Delete matching rows and return them."""
        return await self._request(
            "DELETE",
            table,
            params=params,
            prefer="return=representation",
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        table: str,
        params: Params | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> list[dict[str, Any]]:
        headers = self.auth_headers()
        if prefer:
            headers["Prefer"] = prefer

        try:
            response = await self._http.request(
                method,
                f"{self._rest_url}/{table}",
                params=params,
                json=json,
                headers=headers,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            message = _error_message(exc.response)
            logger.warning(
                "Supabase %s %s failed with %s: %s",
                method,
                table,
                exc.response.status_code,
                message,
            )
            raise ServiceError(message, details={"status": exc.response.status_code}) from exc
        except httpx.HTTPError as exc:
            logger.warning("Supabase %s %s failed: %s", method, table, exc)
            raise ServiceError("Could not reach the server") from exc

        if not response.content:
            return []
        data = response.json()
        return data if isinstance(data, list) else [data]


def _error_message(response: httpx.Response) -> str:
    """Human readable message from a PostgREST error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Request failed with status {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)
