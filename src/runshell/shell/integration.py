"""Shell integration mode validation."""

import logging

from runshell.config import get_config
from runshell.constants import ALLOWED_SHELL_INTEGRATION_VALUES
from runshell.models import Decision

log = logging.getLogger(__name__)


def _tokens(mode: str) -> set[str]:
    """Split on single spaces; doubled spaces leave an empty, invalid token."""
    normalized = mode.strip().lower()
    if not normalized:
        return set()
    return set(normalized.split(" "))


def decide_integration_mode(requested: str) -> Decision[str]:
    """Return the effective integration mode and which branch produced it.

    An empty request means "use the configured default". A mode containing
    `disabled` yields the empty string. A mode with any unknown token is
    replaced wholesale by the configured default.
    """
    source = "requested"
    if not requested:
        requested = get_config().shell_integration
        source = "config"

    tokens = _tokens(requested)
    if "disabled" in tokens:
        return Decision("", "disabled")
    if tokens <= ALLOWED_SHELL_INTEGRATION_VALUES:
        return Decision(requested, source)

    fallback = get_config().shell_integration
    log.debug(
        "invalid shell integration %r (unknown: %s), using %r",
        requested,
        ", ".join(sorted(tokens - ALLOWED_SHELL_INTEGRATION_VALUES)),
        fallback,
    )
    return Decision(fallback, "config-fallback", fallback=True)


def effective_integration_mode(requested: str) -> str:
    return decide_integration_mode(requested).value


def rc_modification_allowed(mode: str) -> bool:
    """Return whether the shell's startup files may be rewired for integration."""
    tokens = _tokens(mode)
    return bool(tokens) and not tokens & {"disabled", "no-rc"}
