from __future__ import annotations

from typing import Any, Dict, List

import requests
from loguru import logger

from config import Configuration
from models import QuerySpec


SERVICE_ERROR_MESSAGE = "Overpass API error, try a smaller radius"


class ServiceError(RuntimeError):
    def __init__(self, detail: str) -> None:
        super().__init__(SERVICE_ERROR_MESSAGE)
        self.detail = detail
        self.user_message = SERVICE_ERROR_MESSAGE


class OverpassClient:
    """Sends compiled queries to an Overpass interpreter. No retries, no cache."""

    def __init__(self, cfg: Configuration, session: requests.Session | None = None) -> None:
        self.cfg = cfg
        self.url = cfg.interpreter_url
        self.session = session or requests.Session()

    def _post(self, query: str) -> dict:
        headers = {"Accept": "application/json", "User-Agent": self.cfg.overpass_user_agent}
        try:
            resp = self.session.post(
                self.url,
                data={"data": query},
                headers=headers,
                timeout=self.cfg.overpass_timeout,
            )
        except requests.RequestException as exc:  # network error
            raise ServiceError(f"request error: {exc}")

        if not resp.ok:
            snippet = resp.text[:300]
            raise ServiceError(f"upstream {resp.status_code}: {snippet}")

        try:
            payload = resp.json()
        except ValueError:
            raise ServiceError("invalid json response")
        if not isinstance(payload, dict):
            raise ServiceError("unexpected payload shape")
        return payload

    def fetch(self, spec: QuerySpec) -> List[Dict[str, Any]]:
        payload = self._post(spec.overpass_ql)
        remark = payload.get("remark")
        # Overpass reports query timeouts and memory exhaustion as a 200 with a remark
        if isinstance(remark, str) and "error" in remark.lower():
            raise ServiceError(f"upstream remark: {remark[:300]}")
        elements = payload.get("elements") or []
        if not isinstance(elements, list):
            raise ServiceError("elements is not a list")
        logger.debug("overpass returned {} elements", len(elements))
        return elements

    def ping(self) -> bool:
        try:
            resp = self.session.get(
                f"{self.cfg.overpass_base_url.rstrip('/')}/api/status",
                headers={"User-Agent": self.cfg.overpass_user_agent},
                timeout=5,
            )
        except requests.RequestException:
            return False
        return resp.ok
