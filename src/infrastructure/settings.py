"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os

from src.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class TransferSettings:
    """Settings for the transfer processor.

    Attributes:
        max_attempts: Attempts made before lock contention is surfaced.
        retry_backoff_seconds: Base delay between attempts.
    """

    max_attempts: int = 3
    retry_backoff_seconds: float = 0.05

    @classmethod
    def from_env(cls) -> "TransferSettings":
        """Build settings from environment variables.

        Returns:
            TransferSettings: Settings sourced from environment variables.
        """
        logger = get_app_logger()
        max_attempts = cls._read_number(
            "TRANSFER_MAX_ATTEMPTS",
            cls.max_attempts,
            int,
            logger,
        )
        backoff = cls._read_number(
            "TRANSFER_RETRY_BACKOFF_SECONDS",
            cls.retry_backoff_seconds,
            float,
            logger,
        )
        return cls(max_attempts=max_attempts, retry_backoff_seconds=backoff)

    @staticmethod
    def _read_number(name: str, default, cast, logger):
        """Read a non-negative number, falling back to the default.

        Args:
            name: Environment variable name.
            default: Value used when missing or invalid.
            cast: Conversion callable (int or float).
            logger: Logger used for warnings.

        Returns:
            The parsed value or the default.
        """
        raw_value = os.getenv(name)
        if raw_value is None or not raw_value.strip():
            return default
        try:
            value = cast(raw_value.strip())
        except ValueError:
            logger.warning(
                f"Invalid {name}={raw_value!r}; using default {default}"
            )
            return default
        if value < 0:
            logger.warning(
                f"Negative {name}={raw_value!r}; using default {default}"
            )
            return default
        return value


__all__ = ["TransferSettings"]
