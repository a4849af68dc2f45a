"""Proxy lifecycle states."""

from enum import Enum


class ProxyLifecycleState(str, Enum):
    """
    A proxy is either freshly deployed (authority held by its transient
    controller, nothing registered) or operable (features registered,
    owner fixed). There is no observable state in between.
    """
    DEPLOYED = "deployed"
    OPERABLE = "operable"
