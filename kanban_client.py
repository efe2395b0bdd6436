"""Kanban API client.

A thin wrapper around the Kanban REST API built on ``requests``.  It is
what the board state helpers in :mod:`board_state` talk to, and it can
be used on its own from scripts.

Every method returns a tuple ``(data, error)``.  On success ``data`` is
the decoded JSON body (``None`` for empty responses) and ``error`` is
``None``.  On failure ``data`` is ``None`` and ``error`` is a dictionary
with the keys ``status_code`` and ``message``; ``status_code`` is
``None`` when the server could not be reached at all.

Authentication is optional: pass the Supabase access token as
``access_token`` (or set it later with :meth:`KanbanAPI.set_token`) and
it is sent as ``Authorization: Bearer <token>``.
"""

from __future__ import annotations

import logging
from typing import Any, BinaryIO, Dict, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]
Result = Tuple[Optional[Any], Optional[Error]]


class KanbanAPI:
    """Client for the Kanban REST API."""

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the API, e.g. ``http://localhost:3000``.
            access_token: Optional Supabase access token.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.session = session or requests.Session()
        self.timeout = timeout

    def set_token(self, access_token: Optional[str]) -> None:
        self.access_token = access_token

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Result:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PATCH``, ``DELETE``, etc.).
            path: Path relative to :attr:`base_url` (e.g. ``/boards``).
            params: Query parameters; ``None`` values are dropped.
            json_body: JSON body to send with the request.
            files: Multipart files, as accepted by ``requests``.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if params:
            params = {key: value for key, value in params.items() if value is not None}
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params or None,
                json=json_body,
                files=files,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                except ValueError:
                    message = exc.response.text
                else:
                    if isinstance(err_json, dict):
                        message = err_json.get("detail") or err_json.get("message") or str(err_json)
                    else:
                        message = str(err_json)
            if not isinstance(message, str):
                # FastAPI validation errors carry a list of problems.
                message = str(message)
            if not message:
                message = str(exc)
            logger.error("API request %s %s failed (%s): %s", method, path, status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request %s %s failed: %s", method, path, exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------
    def signup(self, email: str, username: str, password: str) -> Result:
        return self._request(
            "POST", "/auth/signup", json_body={"email": email, "username": username, "password": password}
        )

    def login(self, identifier: str, password: str) -> Result:
        """Log in and keep the returned access token for later calls."""
        data, error = self._request(
            "POST", "/auth/login", json_body={"identifier": identifier, "password": password}
        )
        if error:
            return None, error
        session = (data or {}).get("session") or {}
        if session.get("access_token"):
            self.set_token(session["access_token"])
        return data, None

    def logout(self) -> Result:
        data, error = self._request("POST", "/auth/logout")
        if not error:
            self.set_token(None)
        return data, error

    def me(self) -> Result:
        return self._request("GET", "/auth/me")

    def update_profile(
        self,
        user_id: str,
        *,
        username: Optional[str] = None,
        full_name: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> Result:
        body = {"username": username, "fullName": full_name, "avatarUrl": avatar_url}
        return self._request(
            "PATCH", f"/auth/profile/{user_id}", json_body={k: v for k, v in body.items() if v is not None}
        )

    def update_password(self, user_id: str, password: str) -> Result:
        return self._request("PATCH", f"/auth/password/{user_id}", json_body={"password": password})

    def upload_avatar(
        self, user_id: str, filename: str, content: BinaryIO | bytes, content_type: str = "image/png"
    ) -> Result:
        return self._request(
            "POST", f"/auth/avatar/{user_id}", files={"avatar": (filename, content, content_type)}
        )

    # ------------------------------------------------------------------
    # Boards
    # ------------------------------------------------------------------
    def list_boards(self, user_id: Optional[str] = None) -> Result:
        return self._request("GET", "/boards", params={"userId": user_id})

    def get_board(self, board_id: str) -> Result:
        return self._request("GET", f"/boards/{board_id}")

    def create_board(self, payload: Dict[str, Any]) -> Result:
        return self._request("POST", "/boards", json_body=payload)

    def create_default_board(self, user_id: str) -> Result:
        return self._request("POST", "/boards/default", json_body={"userId": user_id})

    def update_board(self, board_id: str, updates: Dict[str, Any]) -> Result:
        return self._request("PUT", f"/boards/{board_id}", json_body=updates)

    def delete_board(self, board_id: str) -> Result:
        return self._request("DELETE", f"/boards/{board_id}")

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------
    def list_collaborators(self, board_id: str) -> Result:
        return self._request("GET", f"/boards/{board_id}/collaborators")

    def add_collaborator(self, board_id: str, user_id: str, invited_by: str, role: str = "editor") -> Result:
        return self._request(
            "POST",
            f"/boards/{board_id}/collaborators",
            json_body={"userId": user_id, "invitedBy": invited_by, "role": role},
        )

    def respond_to_invitation(self, board_id: str, user_id: str, accept: bool) -> Result:
        return self._request(
            "POST",
            f"/boards/{board_id}/collaborators/respond",
            json_body={"userId": user_id, "accept": accept},
        )

    def update_collaborator_role(self, board_id: str, user_id: str, role: str, requester_id: str) -> Result:
        return self._request(
            "PATCH",
            f"/boards/{board_id}/collaborators/{user_id}/role",
            json_body={"role": role, "requesterId": requester_id},
        )

    def remove_collaborator(self, board_id: str, user_id: str, requester_id: str) -> Result:
        return self._request(
            "DELETE",
            f"/boards/{board_id}/collaborators/{user_id}",
            json_body={"requesterId": requester_id},
        )

    def shared_boards(self, user_id: str) -> Result:
        return self._request("GET", f"/boards/shared/{user_id}")

    def has_access(self, board_id: str, user_id: str) -> Result:
        data, error = self._request("GET", f"/boards/{board_id}/access/{user_id}")
        if error:
            return None, error
        return bool((data or {}).get("has_access")), None

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------
    def list_lists(self, board_id: Optional[str] = None) -> Result:
        return self._request("GET", "/lists", params={"boardId": board_id})

    def create_list(self, payload: Dict[str, Any]) -> Result:
        return self._request("POST", "/lists", json_body=payload)

    def update_list(self, list_id: str, updates: Dict[str, Any]) -> Result:
        return self._request("PUT", f"/lists/{list_id}", json_body=updates)

    def delete_list(self, list_id: str) -> Result:
        return self._request("DELETE", f"/lists/{list_id}")

    # ------------------------------------------------------------------
    # Cards
    # ------------------------------------------------------------------
    def list_cards(self, list_id: Optional[str] = None) -> Result:
        return self._request("GET", "/cards", params={"listId": list_id})

    def get_card(self, card_id: str) -> Result:
        return self._request("GET", f"/cards/{card_id}")

    def create_card(self, payload: Dict[str, Any]) -> Result:
        return self._request("POST", "/cards", json_body=payload)

    def update_card(self, card_id: str, updates: Dict[str, Any]) -> Result:
        return self._request("PUT", f"/cards/{card_id}", json_body=updates)

    def delete_card(self, card_id: str) -> Result:
        return self._request("DELETE", f"/cards/{card_id}")

    def card_labels(self, card_id: str) -> Result:
        return self._request("GET", f"/cards/{card_id}/labels")

    def card_members(self, card_id: str) -> Result:
        return self._request("GET", f"/cards/{card_id}/members")

    def list_attachments(self, card_id: str) -> Result:
        return self._request("GET", f"/cards/{card_id}/attachments")

    def upload_attachment(
        self,
        card_id: str,
        filename: str,
        content: BinaryIO | bytes,
        content_type: str = "application/octet-stream",
    ) -> Result:
        return self._request(
            "POST", f"/cards/{card_id}/attachments", files={"file": (filename, content, content_type)}
        )

    def delete_attachment(self, attachment_id: str) -> Result:
        return self._request("DELETE", f"/cards/attachments/{attachment_id}")

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------
    def list_labels(self, board_id: Optional[str] = None) -> Result:
        return self._request("GET", "/labels", params={"boardId": board_id})

    def create_label(self, board_id: str, name: str, color: str) -> Result:
        return self._request("POST", "/labels", json_body={"boardId": board_id, "name": name, "color": color})

    def update_label(self, label_id: str, updates: Dict[str, Any]) -> Result:
        return self._request("PUT", f"/labels/{label_id}", json_body=updates)

    def delete_label(self, label_id: str) -> Result:
        return self._request("DELETE", f"/labels/{label_id}")

    # ------------------------------------------------------------------
    # Friends and users
    # ------------------------------------------------------------------
    def search_users(self, query: str, exclude_user_id: Optional[str] = None) -> Result:
        data, error = self._request(
            "GET", "/friends/search", params={"q": query, "excludeUserId": exclude_user_id}
        )
        if error:
            return [], error
        return data or [], None

    def get_profile(self, user_id: str) -> Result:
        return self._request("GET", f"/friends/profile/{user_id}")

    def list_friends(self, user_id: str) -> Result:
        return self._request("GET", f"/friends/{user_id}")

    def send_friend_request(self, from_user_id: str, to_user_id: str) -> Result:
        return self._request(
            "POST", "/friends/request", json_body={"fromUserId": from_user_id, "toUserId": to_user_id}
        )

    def respond_to_friend_request(self, request_id: str, status: str, user_id: Optional[str] = None) -> Result:
        body: Dict[str, Any] = {"status": status}
        if user_id:
            body["userId"] = user_id
        return self._request("PATCH", f"/friends/request/{request_id}", json_body=body)

    def incoming_requests(self, user_id: str) -> Result:
        return self._request("GET", f"/friends/requests/{user_id}/incoming")

    def outgoing_requests(self, user_id: str) -> Result:
        return self._request("GET", f"/friends/requests/{user_id}/outgoing")

    def remove_friend(self, user_id: str, friend_id: str) -> Result:
        return self._request("DELETE", f"/friends/{user_id}/{friend_id}")

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def list_notifications(self, user_id: str) -> Result:
        return self._request("GET", f"/notifications/{user_id}")

    def unread_count(self, user_id: str) -> Tuple[int, Optional[Error]]:
        data, error = self._request("GET", f"/notifications/{user_id}/unread-count")
        if error:
            return 0, error
        return int((data or {}).get("count", 0)), None

    def mark_notification_read(self, notification_id: str) -> Result:
        return self._request("PATCH", f"/notifications/{notification_id}/read")

    def mark_all_notifications_read(self, user_id: str) -> Result:
        return self._request("PATCH", f"/notifications/{user_id}/read-all")

    def delete_notification(self, notification_id: str) -> Result:
        return self._request("DELETE", f"/notifications/{notification_id}")

