"""HTTP client for the loan API"""
import json
import logging
import os
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx answer from the loan API"""

    def __init__(self, status: int, message: str):
        super().__init__(f'{status}: {message}')
        self.status = status
        self.message = message


class SessionExpired(ApiError):
    """401 answer; the stored credential has been cleared"""


class TokenStore:
    """Keeps the login credential in a small JSON file."""

    def __init__(self, path: Optional[str] = None):
        self.path = path

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path or not os.path.exists(self.path):
            return None
        try:
            with open(self.path, encoding='utf-8') as fh:
                data = json.load(fh)
        except (OSError, ValueError):
            logger.warning('Ignoring unreadable token file %s', self.path)
            return None
        if not isinstance(data, dict) or not data.get('token'):
            return None
        return data

    def save(self, credential: Dict[str, Any]) -> None:
        if not self.path:
            return
        with open(self.path, 'w', encoding='utf-8') as fh:
            json.dump(credential, fh)

    def clear(self) -> None:
        if self.path and os.path.exists(self.path):
            os.remove(self.path)


class LoanApiClient:
    """Thin wrapper around the loan API endpoints.

    The bearer token is attached to every request once known. Any 401 answer
    clears the token (in memory and in the store) and raises SessionExpired so
    the caller can ask for a new login.
    """

    def __init__(
        self,
        base_url: str,
        store: Optional[TokenStore] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip('/')
        self.store = store or TokenStore()
        self.session = session or requests.Session()
        self.timeout = timeout

        credential = self.store.load() or {}
        self.token: Optional[str] = credential.get('token')
        self.username: Optional[str] = credential.get('username')
        self.role: Optional[str] = credential.get('role')

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    @property
    def can_edit(self) -> bool:
        return self.role == 'editor'

    def logout(self) -> None:
        self.token = None
        self.username = None
        self.role = None
        self.store.clear()

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        headers = {}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'

        try:
            response = self.session.request(
                method, f'{self.base_url}{path}', json=payload, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise ApiError(0, f'Could not reach the loan API at {self.base_url}') from exc

        if response.status_code == 401:
            message = _message(response, 'Session expired, please log in again')
            if self.token:
                logger.info('Token rejected, clearing stored credential')
                self.logout()
            raise SessionExpired(401, message)

        if not response.ok:
            raise ApiError(response.status_code, _message(response, response.reason or 'Request failed'))

        return response.json()

    def login(self, username: str, password: str) -> Dict[str, Any]:
        data = self._request('POST', '/auth/login', {'username': username, 'password': password})
        self.token = data['token']
        self.username = data.get('username', username)
        self.role = data.get('role')
        self.store.save({'token': self.token, 'username': self.username, 'role': self.role})
        return data

    def fetch_loan(self) -> Dict[str, Any]:
        return self._request('GET', '/loan')

    def fetch_payments(self) -> List[Dict[str, Any]]:
        return self._request('GET', '/payments')

    def update_payment(
        self,
        month: int,
        status: str,
        paid_at: Optional[str] = None,
        note: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {'status': status}
        if paid_at is not None:
            payload['paidAt'] = paid_at
        if note is not None:
            payload['note'] = note
        return self._request('POST', f'/payments/{month}', payload)


def _message(response: requests.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict) and body.get('message'):
        return str(body['message'])
    return default
