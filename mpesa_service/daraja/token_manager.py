from datetime import datetime, timedelta
from typing import Callable, Optional

from mpesa_service.errors import ErrorCode, Outcome
from mpesa_service.models.credential_set import CredentialSet
from mpesa_service.utils.logger import get_logger

logger = get_logger(__name__)

# Daraja access tokens live for one hour
PROVIDER_TOKEN_LIFETIME = timedelta(hours=1)
DEFAULT_CACHE_DURATION = timedelta(minutes=55)


class TokenManager:
    """
    Obtains OAuth bearer tokens per credential set, reusing cached ones.

    Args:
        gateway: DarajaGateway used for the client-credentials exchange
        cache: TokenCache or RedisTokenCache owned by the application
        cache_duration: how long a fresh token is reused; must be shorter
            than the provider's one-hour token lifetime
        clock: returns the current time (injectable for tests)
    """

    def __init__(
        self,
        gateway,
        cache,
        cache_duration: timedelta = DEFAULT_CACHE_DURATION,
        clock: Callable[[], datetime] = datetime.now,
    ):
        if not timedelta(0) < cache_duration < PROVIDER_TOKEN_LIFETIME:
            raise ValueError(
                f"cache_duration must be positive and shorter than {PROVIDER_TOKEN_LIFETIME}, "
                f"got {cache_duration}"
            )
        self.gateway = gateway
        self.cache = cache
        self.cache_duration = cache_duration
        self._clock = clock

    @staticmethod
    def cache_key(credential: CredentialSet) -> str:
        return str(credential.id)

    def cache_lifetime(self, advertised: timedelta) -> timedelta:
        """
        How long to reuse a token the provider says lives for `advertised`.

        The refresh margin of the configured duration (5 minutes by default)
        is kept for short-lived tokens too; a token shorter than the margin
        is reused for half its lifetime.
        """
        margin = PROVIDER_TOKEN_LIFETIME - self.cache_duration
        lifetime = min(self.cache_duration, advertised - margin)
        if lifetime <= timedelta(0):
            lifetime = advertised / 2
        return lifetime

    def get_access_token(self, credential: CredentialSet) -> Outcome:
        """Return Outcome[str] holding a bearer token, or an AUTH_FAILURE."""
        key = self.cache_key(credential)
        now = self._clock()

        cached = self.cache.get(key, now=now)
        if cached is not None:
            logger.debug("Using cached token for shortcode %s", credential.id)
            return Outcome.success(cached.token)

        outcome = self.gateway.authenticate(
            credential.environment, credential.api_key, credential.api_secret
        )

        if not outcome.ok or not outcome.value.is_valid():
            reason = outcome.error.message if not outcome.ok else "invalid token response"
            logger.error("Failed to get access token for shortcode %s: %s", credential.id, reason)
            self.cache.invalidate(key)
            return Outcome.failure(ErrorCode.AUTH_FAILURE, "Failed to obtain access token")

        token_response = outcome.value
        lifetime = self.cache_lifetime(timedelta(seconds=token_response.expires_in))
        self.cache.put(key, token_response.access_token, now + lifetime, now=now)

        logger.debug("Retrieved and cached new token for shortcode %s", credential.id)
        return Outcome.success(token_response.access_token)

    def invalidate(self, credential: CredentialSet) -> None:
        self.cache.invalidate(self.cache_key(credential))
