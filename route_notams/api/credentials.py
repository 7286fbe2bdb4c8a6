import os
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Tuple

from route_notams.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credential:
    """A client_id/client_secret pair for the NOTAM API."""

    client_id: str
    client_secret: str

    def __post_init__(self):
        if not self.client_id or not self.client_id.strip():
            raise ConfigurationError("Credential client_id is empty")
        if not self.client_secret or not self.client_secret.strip():
            raise ConfigurationError(f"Credential {self.masked_id} has an empty client_secret")

    @property
    def masked_id(self) -> str:
        """Client id safe for logs."""
        return f"{self.client_id[:4]}..." if len(self.client_id) > 4 else "****"

    def headers(self) -> Dict[str, str]:
        """Headers authenticating a request with this credential."""
        return {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }

    def __repr__(self) -> str:
        return f"Credential(client_id={self.masked_id!r})"


class CredentialPool:
    """
    Ordered, immutable set of API credentials.

    Waypoints are striped across credentials so request load, and therefore
    upstream rate limiting, is spread evenly.

    Example:
        pool = CredentialPool([
            Credential("id-1", "secret-1"),
            Credential("id-2", "secret-2"),
        ])
        pool.for_index(3)  # -> second credential
    """

    ENV_ID = "FAA_CLIENT_ID"
    ENV_SECRET = "FAA_CLIENT_SECRET"

    def __init__(self, credentials: Iterable[Credential]):
        self._credentials: Tuple[Credential, ...] = tuple(credentials)
        if not self._credentials:
            raise ConfigurationError("Credential pool is empty")

    def for_index(self, index: int) -> Credential:
        """Credential assigned to the index-th waypoint (round-robin)."""
        return self._credentials[index % len(self._credentials)]

    @property
    def credentials(self) -> Tuple[Credential, ...]:
        return self._credentials

    def __len__(self) -> int:
        return len(self._credentials)

    def __iter__(self) -> Iterator[Credential]:
        return iter(self._credentials)

    def __repr__(self) -> str:
        return f"CredentialPool(size={len(self._credentials)})"

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> 'CredentialPool':
        """
        Load credentials from environment variables.

        Reads FAA_CLIENT_ID/FAA_CLIENT_SECRET, then numbered extras
        FAA_CLIENT_ID_2/FAA_CLIENT_SECRET_2, FAA_CLIENT_ID_3/... until the
        first missing number.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            CredentialPool with every pair found

        Raises:
            ConfigurationError: If no pair is set or a pair is incomplete
        """
        env = os.environ if environ is None else environ
        credentials = []

        suffixes = [""] + [f"_{n}" for n in range(2, 100)]
        for suffix in suffixes:
            client_id = env.get(f"{cls.ENV_ID}{suffix}")
            client_secret = env.get(f"{cls.ENV_SECRET}{suffix}")
            if client_id is None and client_secret is None:
                if suffix:
                    break
                continue
            if not client_id or not client_secret:
                raise ConfigurationError(
                    f"{cls.ENV_ID}{suffix} and {cls.ENV_SECRET}{suffix} must both be set"
                )
            credentials.append(Credential(client_id, client_secret))

        if not credentials:
            logger.error("FAA API credentials not found in environment variables")
            raise ConfigurationError(f"{cls.ENV_ID} or {cls.ENV_SECRET} not set in environment")

        logger.debug(f"Loaded {len(credentials)} API credential(s) from environment")
        return cls(credentials)
