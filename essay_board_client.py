"""Essay Board API client.

A thin wrapper around the Essay Board REST API built on ``requests``.
It is what scripts, bots and other non-browser frontends use to browse
the feed and to submit, edit or remove recommendations.

Every public method returns a tuple ``(data, error)``.  On success
``error`` is ``None``; on failure ``data`` is empty and ``error`` is a
dictionary with ``status_code`` and ``message`` keys, plus ``errors``
holding the field-level details when the server rejected the payload.

The client never raises for HTTP or network failures; callers decide
how to surface them.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from essay_board.app.services.source_service import describe_source


logger = logging.getLogger(__name__)

ApiError = Dict[str, Any]


class EssayBoardAPI:
    """Client for the ``/api/essays`` endpoints."""

    ESSAYS_PATH = "/api/essays"

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:5000``.
            api_key: Optional token sent as ``Authorization: Bearer <api_key>``
                (useful behind an authenticating proxy; the API itself
                does not check it).
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[ApiError]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path relative to :attr:`base_url`.
            params: Query parameters to include in the request.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)`` as described in the module docstring.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            return None, self._http_error(exc)
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}
        except ValueError as exc:
            # Successful status but a body that is not JSON.
            logger.error("API returned an unreadable response: %s", exc)
            return None, {"status_code": None, "message": "Invalid JSON in response"}

    @staticmethod
    def _http_error(exc: requests.HTTPError) -> ApiError:
        response = exc.response
        status = response.status_code if response is not None else None
        message = ""
        error: ApiError = {"status_code": status}
        if response is not None:
            try:
                err_json = response.json()
            except ValueError:
                message = response.text
            else:
                if isinstance(err_json, dict):
                    message = err_json.get("detail") or err_json.get("message") or str(err_json)
                    if isinstance(err_json.get("errors"), list):
                        error["errors"] = err_json["errors"]
                else:
                    message = str(err_json)
        if not message:
            message = str(exc)
        logger.error("API request failed (%s): %s", status, message)
        error["message"] = message
        return error

    def _essay_path(self, essay_id: Any) -> str:
        return f"{self.ESSAYS_PATH}/{essay_id}"

    # ------------------------------------------------------------------
    # Essay operations
    # ------------------------------------------------------------------
    def list_essays(self, page: int = 1, limit: int = 20) -> Tuple[List[Dict[str, Any]], int, Optional[ApiError]]:
        """Retrieve one page of the feed.

        Returns:
            A tuple ``(essays, total, error)``.  ``essays`` is empty and
            ``total`` is ``0`` on failure.
        """
        data, error = self._request("GET", self.ESSAYS_PATH, params={"page": page, "limit": limit})
        if error:
            return [], 0, error
        if not isinstance(data, dict):
            return [], 0, {"status_code": None, "message": "Unexpected response shape"}
        essays = data.get("essays") or []
        return essays, int(data.get("total", len(essays))), None

    def get_essay(self, essay_id: Any) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        """Retrieve a single essay by ID."""
        return self._request("GET", self._essay_path(essay_id))

    def create_essay(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        """Submit a new essay.

        Args:
            payload: ``title``, ``author`` and ``why`` plus the optional
                ``source`` and ``pseudonym``.
        """
        return self._request("POST", self.ESSAYS_PATH, json_body=payload)

    def update_essay(self, essay_id: Any, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        """Edit an essay; only the keys present in ``payload`` change."""
        return self._request("PUT", self._essay_path(essay_id), json_body=payload)

    def delete_essay(self, essay_id: Any) -> Tuple[bool, Optional[ApiError]]:
        """Delete an essay.

        Returns:
            A tuple ``(success, error)``.
        """
        _, error = self._request("DELETE", self._essay_path(essay_id))
        if error:
            return False, error
        return True, None

    # ------------------------------------------------------------------
    # Presentation helpers
    # ------------------------------------------------------------------
    @staticmethod
    def describe_source(essay: Dict[str, Any]) -> Tuple[str, Optional[str]]:
        """Return ``(kind, href)`` for an essay's source.

        ``kind`` is ``"none"``, ``"link"`` or ``"text"``; ``href`` is the
        URL to open for links and ``None`` otherwise.
        """
        return describe_source(essay.get("source"))
