"""
Async client for the JobMindr JSON API.

Reads are cached per filter/sort combination; every successful mutation
drops the whole cache so the next read goes back to the server.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Tuple

import httpx

from .schemas import ApplicationFilters, field_messages

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, Tuple[Tuple[str, str], ...]]


class ApiError(Exception):
    """Non-2xx answer from the API, carrying its {message, errors} body."""

    def __init__(self, status_code: int, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.errors = errors or []

    @classmethod
    def from_response(cls, resp: httpx.Response) -> "ApiError":
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        return cls(resp.status_code, body.get("message") or resp.reason_phrase, body.get("errors"))

    def field_errors(self) -> Dict[str, str]:
        return field_messages(self.errors)


class JobTrackerClient:
    def __init__(
        self,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        cache_ttl: float = 30.0,
        cache_size: int = 64,
        timeout: float = 20.0,
    ):
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self.cache_ttl = cache_ttl
        self.cache_size = cache_size
        # insertion-ordered, oldest first
        self._cache: Dict[CacheKey, Tuple[float, Any]] = {}

    # ---------- cache ----------

    def _cached(self, key: CacheKey) -> Optional[Any]:
        hit = self._cache.get(key)
        if hit is None:
            return None
        stored_at, data = hit
        if time.monotonic() - stored_at > self.cache_ttl:
            del self._cache[key]
            return None
        return data

    def _store(self, key: CacheKey, data: Any) -> None:
        """Drop expired entries, then keep at most cache_size of the newest."""
        now = time.monotonic()
        expired = [k for k, (stored_at, _) in self._cache.items() if now - stored_at > self.cache_ttl]
        for k in expired:
            del self._cache[k]
        self._cache.pop(key, None)
        self._cache[key] = (now, data)
        while len(self._cache) > self.cache_size:
            del self._cache[next(iter(self._cache))]

    def invalidate(self) -> None:
        self._cache.clear()

    async def _get_cached(self, path: str, params: Dict[str, str]) -> Any:
        key: CacheKey = (path, tuple(sorted(params.items())))
        data = self._cached(key)
        if data is not None:
            return data
        data = await self._request("GET", path, params=params)
        self._store(key, data)
        return data

    # ---------- transport ----------

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        resp = await self._http.request(method, path, **kwargs)
        if not resp.is_success:
            err = ApiError.from_response(resp)
            logger.warning("%s %s failed: %s", method, path, err)
            raise err
        return resp.json()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ---------- reads ----------

    async def list_applications(self, filters: Optional[ApplicationFilters] = None) -> List[Dict[str, Any]]:
        params = filters.query_params() if filters else {}
        return await self._get_cached("/job-applications", params)

    async def list_companies(self) -> List[str]:
        return await self._get_cached("/job-applications/companies", {})

    # ---------- mutations ----------

    async def create_application(self, data: Dict[str, Any]) -> Dict[str, Any]:
        created = await self._request("POST", "/job-applications", json=data)
        self.invalidate()
        return created

    async def update_application(self, application_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        updated = await self._request("PUT", f"/job-applications/{application_id}", json=data)
        self.invalidate()
        return updated

    async def delete_applications(self, ids: List[int]) -> Dict[str, Any]:
        result = await self._request("DELETE", "/job-applications", json={"ids": ids})
        self.invalidate()
        return result

    # ---------- login ----------

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """Returns the {email} user record; raises ApiError on a 400."""
        body = await self._request("POST", "/login", json={"email": email, "password": password})
        return body["user"]
