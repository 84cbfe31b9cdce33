"""Read-only capability registry.

The registry is built once from the available capability instances, keyed by
each instance's `name`. Lookups are case-sensitive exact matches. Changing the
capability set means building a new registry.
"""

from types import MappingProxyType
from typing import Iterable

from career_agents.agents.base import Capability
from career_agents.core.errors import CapabilityNotFoundError


class CapabilityRegistry:
    """Immutable name -> capability mapping used by routing and orchestration."""

    def __init__(self, capabilities: Iterable[Capability]):
        entries: dict[str, Capability] = {}
        for capability in capabilities:
            name = capability.name
            if name in entries:
                raise ValueError(f"Duplicate capability name: {name!r}")
            entries[name] = capability
        self._entries = MappingProxyType(entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def names(self) -> list[str]:
        return list(self._entries)

    def resolve(self, name: str) -> Capability:
        """Return the capability registered under `name`.

        Raises:
            CapabilityNotFoundError: With the full registry listing attached.
        """
        try:
            return self._entries[name]
        except KeyError:
            raise CapabilityNotFoundError(name, self.names()) from None

    def describe(self) -> dict[str, str]:
        """Return each registered name with its current system prompt."""
        return {
            name: capability.get_system_prompt()
            for name, capability in self._entries.items()
        }
