"""Base marker for ports (interfaces implemented by infrastructure adapters)."""

from typing import Protocol


class Port(Protocol):
    """Marker base for all ports.

    Ports live in the domain layer; adapters in infrastructure/ implement them.
    """
