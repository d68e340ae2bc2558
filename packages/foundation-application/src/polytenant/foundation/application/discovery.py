"""Entry-point-based auto-discovery utilities.

Contributions (routers, middleware, error handlers, lifespan hooks and
capability variants) are declared by installed packages as entry points and
loaded at startup with ``importlib.metadata.entry_points()``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib.metadata import entry_points
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class DiscoveredContribution:
    """A single discovered entry point contribution.

    Attributes:
        name: Entry point name (e.g., ``"orders"``).
        group: Entry point group (e.g., ``"polytenant.variants"``).
        value: The loaded Python object.
    """

    name: str
    group: str
    value: Any


def discover(
    group: str,
    *,
    exclude_names: frozenset[str] = frozenset(),
) -> list[DiscoveredContribution]:
    """Discover and load all entry points for a given group.

    Iterates over installed packages' entry points in the specified group,
    loads each one, and returns them as :class:`DiscoveredContribution` instances.
    Entry points that fail to load are logged and skipped (fail-soft).

    Args:
        group: The entry point group name (e.g., ``"polytenant.variants"``).
        exclude_names: Set of entry point names to skip.

    Returns:
        List of successfully loaded contributions.
    """
    contributions: list[DiscoveredContribution] = []
    eps = entry_points(group=group)

    for ep in eps:
        if ep.name in exclude_names:
            logger.debug("Skipping excluded entry point %s:%s", group, ep.name)
            continue
        try:
            loaded = ep.load()
            contributions.append(DiscoveredContribution(name=ep.name, group=group, value=loaded))
            logger.debug("Loaded entry point %s:%s", group, ep.name)
        except Exception:
            logger.exception("Failed to load entry point %s:%s", group, ep.name)

    logger.info("Discovered %d contributions in group %r", len(contributions), group)
    return contributions


def iter_contributions(
    group: str,
    expected: type[T],
    *,
    exclude_names: frozenset[str] = frozenset(),
) -> list[T]:
    """Discover a group and flatten its values into typed contributions.

    An entry point may resolve to a single contribution or to a list/tuple
    of them (one package contributing several capability variants). Values
    of any other type are logged and skipped.

    Args:
        group: The entry point group name.
        expected: Contribution type to keep (e.g., ``VariantContribution``).
        exclude_names: Set of entry point names to skip.

    Returns:
        Contributions in discovery order.
    """
    found: list[T] = []
    for contribution in discover(group, exclude_names=exclude_names):
        values = (
            contribution.value
            if isinstance(contribution.value, (list, tuple))
            else [contribution.value]
        )
        for value in values:
            if isinstance(value, expected):
                found.append(value)
            else:
                logger.warning(
                    "Entry point %s:%s has unexpected type %s, expected %s",
                    group,
                    contribution.name,
                    type(value).__name__,
                    expected.__name__,
                )
    return found
