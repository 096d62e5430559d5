"""Named store of performance profile configurations.

A :class:`ProfileRegistry` is filled once at startup, by
:func:`bootstrap_registry` and any explicit :meth:`ProfileRegistry.register`
calls, and only read afterwards.  Registration is not thread-safe; lookups
from many threads are fine once registration is over.

Entries are never overwritten: registering a taken name raises
:class:`DuplicateNameError`, and looking up an unknown name raises
:class:`NotFoundError` instead of falling back to a default.
"""

from __future__ import annotations

from perfprofile.config import DEFAULT_PROFILES, ProfileConfig, config_from_profile
from perfprofile.logging import get_logger

log = get_logger("registry")


class ProfileRegistryError(LookupError):
    """Base class for registry errors."""


class DuplicateNameError(ProfileRegistryError):
    """A profile name is already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Profile '{name}' is already registered.")
        self.name = name


class NotFoundError(ProfileRegistryError, KeyError):
    """No profile is registered under the requested name."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        msg = f"Profile '{name}' not found in registry."
        if available:
            msg += f" Available: {', '.join(available)}"
        super().__init__(msg)
        self.name = name

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])


class ProfileRegistry:
    """Mapping of profile names to :class:`ProfileConfig` objects."""

    def __init__(self) -> None:
        self._configs: dict[str, ProfileConfig] = {}

    def register(self, name: str, config: ProfileConfig) -> None:
        """Store *config* under *name*.

        Raises:
            DuplicateNameError: If *name* is already registered.
        """
        if name in self._configs:
            raise DuplicateNameError(name)
        self._configs[name] = config
        log.debug("Registered profile %s", name)

    def get(self, name: str) -> ProfileConfig:
        """Return the configuration registered under *name*.

        Raises:
            NotFoundError: If *name* is not registered.
        """
        try:
            return self._configs[name]
        except KeyError:
            raise NotFoundError(name, self.names()) from None

    def names(self) -> list[str]:
        """Registered names, in registration order."""
        return list(self._configs)

    def __contains__(self, name: object) -> bool:
        return name in self._configs

    def __len__(self) -> int:
        return len(self._configs)


# ---------------------------------------------------------------------------
# Bootstrap
# ---------------------------------------------------------------------------


DEFAULT_CONFIGS: dict[str, ProfileConfig] = {
    name: config_from_profile(data, name=name) for name, data in DEFAULT_PROFILES.items()
}


def bootstrap_registry(registry: ProfileRegistry | None = None) -> ProfileRegistry:
    """Register the default profiles and return the registry.

    Running it again on the same registry is a no-op for defaults that are
    already in place.  On a conflict nothing is registered.

    Args:
        registry: Registry to fill.  A new one is created when omitted.

    Raises:
        DuplicateNameError: If a default name is taken by another config.
    """
    if registry is None:
        registry = ProfileRegistry()

    # Check every name first so a conflict leaves the registry untouched.
    pending: dict[str, ProfileConfig] = {}
    for name, config in DEFAULT_CONFIGS.items():
        if name not in registry:
            pending[name] = config
        elif registry.get(name) is not config:
            raise DuplicateNameError(name)

    for name, config in pending.items():
        registry.register(name, config)
    return registry


_default_registry: ProfileRegistry | None = None


def default_registry() -> ProfileRegistry:
    """Return the process-wide registry, bootstrapping it on first use.

    The first call must happen before any concurrent use.
    """
    global _default_registry
    if _default_registry is None:
        _default_registry = bootstrap_registry()
    return _default_registry
