"""
Host Allow-List.

Decides whether a target hostname may be rendered. A policy is either the
wildcard (any host) or a non-empty set of domains; a domain also covers all of
its subdomains.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from ..errors import AllowListNotConfigured

WILDCARD = "*"

NOT_CONFIGURED_MESSAGE = (
    "ALLOWED_DOMAINS is not configured; set a comma-separated list of domains or '*'"
)


@dataclass(frozen=True)
class AllowListPolicy:
    """Immutable host policy. Use ``wildcard()`` or ``for_domains()`` to build one."""

    allow_all: bool = False
    domains: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if not self.allow_all and not self.domains:
            raise AllowListNotConfigured(NOT_CONFIGURED_MESSAGE)

    @classmethod
    def wildcard(cls) -> "AllowListPolicy":
        return cls(allow_all=True)

    @classmethod
    def for_domains(cls, domains: Iterable[str]) -> "AllowListPolicy":
        cleaned = frozenset(d.strip().lower() for d in domains if d and d.strip())
        return cls(allow_all=False, domains=cleaned)

    @classmethod
    def from_string(cls, value: Optional[str]) -> "AllowListPolicy":
        """
        Parse an ALLOWED_DOMAINS value.

        Args:
            value: "*" or a comma-separated domain list, e.g. "example.com,sample.org"

        Returns:
            AllowListPolicy

        Raises:
            AllowListNotConfigured: If no usable domain is present
        """
        value = (value or "").strip()
        if value == WILDCARD:
            return cls.wildcard()
        return cls.for_domains(value.split(","))


def is_host_allowed(hostname: Optional[str], policy: AllowListPolicy) -> bool:
    """Return True if ``hostname`` equals an allowed domain or is one of its subdomains."""
    if policy.allow_all:
        return True

    host = (hostname or "").lower()
    if not host:
        return False

    return any(host == domain or host.endswith(f".{domain}") for domain in policy.domains)
