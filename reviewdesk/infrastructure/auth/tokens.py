"""
Token Managers - Bearer Credentials for the Store APIs
=======================================================

Each store authenticates with a short-lived bearer token derived from signing
key material:

- App Store Connect: an ES256 JWT signed locally with the .p8 API key.
- Google Play: an OAuth access token obtained by exchanging a JWT assertion
  signed with the service-account key.

A credential is never handed out within REFRESH_MARGIN of its expiry; a new one
is generated transparently instead. Generation failures are reported as
CredentialUnavailableError and are never retried here - the caller decides.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional

import requests
from google.auth import jwt as google_jwt
from google.auth.crypt import es256
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CredentialUnavailableError(Exception):
    """Key material is missing, unreadable or cannot produce a token."""
    pass


@dataclass(frozen=True)
class Credential:
    """Opaque bearer token plus the instant after which it must not be used."""
    token: str
    expires_at: datetime

    def needs_refresh(self, now: datetime, margin: timedelta) -> bool:
        return now >= self.expires_at - margin

    def __repr__(self) -> str:
        return f"Credential(token='{self.token[:8]}...', expires_at={self.expires_at.isoformat()})"


class TokenManager(ABC):
    """
    Caches one credential and regenerates it before it expires.

    Subclasses implement _generate(); ensure_valid() decides when to call it.
    """

    REFRESH_MARGIN = timedelta(minutes=5)

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or utc_now
        self._credential: Optional[Credential] = None

    @property
    def credential(self) -> Optional[Credential]:
        return self._credential

    def ensure_valid(self) -> Credential:
        """Return a usable credential, generating a new one if needed."""
        now = self._clock()
        if self._credential is None or self._credential.needs_refresh(now, self.REFRESH_MARGIN):
            self._credential = self._generate(now)
            logger.info(
                f"{type(self).__name__}: new credential valid until "
                f"{self._credential.expires_at.isoformat()}"
            )
        return self._credential

    def invalidate(self) -> None:
        """Forget the cached credential so the next call generates a fresh one."""
        self._credential = None

    @abstractmethod
    def _generate(self, now: datetime) -> Credential:
        """Synthesize a new credential. Raise CredentialUnavailableError on failure."""
        ...


class AppStoreTokenManager(TokenManager):
    """
    Signs App Store Connect API tokens.

    Apple rejects tokens that live longer than 20 minutes, so the JWT is issued
    for 20 and cached for 15.
    """

    AUDIENCE = "appstoreconnect-v1"
    TOKEN_LIFETIME = timedelta(minutes=20)
    CACHE_LIFETIME = timedelta(minutes=15)

    def __init__(
        self,
        key_id: str,
        issuer_id: str,
        private_key_path: Optional[Path],
        clock: Optional[Clock] = None,
    ):
        super().__init__(clock)
        self._key_id = key_id
        self._issuer_id = issuer_id
        self._private_key_path = private_key_path

    def _load_signer(self) -> es256.ES256Signer:
        if self._private_key_path is None:
            raise CredentialUnavailableError("No App Store Connect private key configured")
        try:
            pem = Path(self._private_key_path).read_text()
        except OSError as e:
            raise CredentialUnavailableError(f"Failed to read private key file: {e}") from e
        try:
            return es256.ES256Signer.from_string(pem, key_id=self._key_id)
        except (ValueError, TypeError) as e:
            raise CredentialUnavailableError(
                f"Failed to create signing key from EC private key: {e}"
            ) from e

    def _generate(self, now: datetime) -> Credential:
        signer = self._load_signer()
        claims = {
            "iss": self._issuer_id,
            "iat": int(now.timestamp()),
            "exp": int((now + self.TOKEN_LIFETIME).timestamp()),
            "aud": self.AUDIENCE,
        }
        try:
            token = google_jwt.encode(signer, claims)
        except (ValueError, TypeError) as e:
            raise CredentialUnavailableError(f"Failed to encode JWT: {e}") from e
        if isinstance(token, bytes):
            token = token.decode("utf-8")
        return Credential(token=token, expires_at=now + self.CACHE_LIFETIME)


class GooglePlayTokenManager(TokenManager):
    """
    Exchanges a service-account key for Android Publisher access tokens.

    The service-account JSON must contain client_email, private_key and token_uri.
    """

    SCOPE = "https://www.googleapis.com/auth/androidpublisher"
    MAX_CACHE_LIFETIME = timedelta(minutes=55)

    def __init__(
        self,
        service_account_path: Optional[Path],
        session: Optional[requests.Session] = None,
        clock: Optional[Clock] = None,
    ):
        super().__init__(clock)
        self._service_account_path = service_account_path
        self._session = session

    def _load_credentials(self) -> service_account.Credentials:
        if self._service_account_path is None:
            raise CredentialUnavailableError("No Google Play service account configured")
        try:
            info = json.loads(Path(self._service_account_path).read_text())
        except OSError as e:
            raise CredentialUnavailableError(f"Failed to read service account file: {e}") from e
        except json.JSONDecodeError as e:
            raise CredentialUnavailableError(f"Service account file is not valid JSON: {e}") from e
        try:
            return service_account.Credentials.from_service_account_info(
                info, scopes=[self.SCOPE]
            )
        except (ValueError, TypeError) as e:
            raise CredentialUnavailableError(f"Invalid service account key: {e}") from e

    def _generate(self, now: datetime) -> Credential:
        credentials = self._load_credentials()
        try:
            credentials.refresh(GoogleAuthRequest(session=self._session))
        except GoogleAuthError as e:
            raise CredentialUnavailableError(f"Failed to obtain access token: {e}") from e

        expires_at = now + self.MAX_CACHE_LIFETIME
        if credentials.expiry is not None:
            # google-auth reports expiry as naive UTC
            upstream = credentials.expiry.replace(tzinfo=timezone.utc)
            expires_at = min(expires_at, upstream)
        return Credential(token=credentials.token, expires_at=expires_at)
