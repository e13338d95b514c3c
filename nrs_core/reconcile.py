"""Align the profile's ``current`` pointer with the live .npmrc registry line."""

from __future__ import annotations

import logging
from typing import Container

from .profile import RegistryProfile

log = logging.getLogger(__name__)


def derive_registry_name(url: str, taken: Container[str]) -> str:
    """Build a name from the host of ``url`` that is not in ``taken``.

    ``https://npm.example.com:8080/path`` becomes ``npm-example-com-8080``;
    collisions get ``-1``, ``-2``, ... appended.
    """
    host = url
    for scheme in ("http://", "https://"):
        if host.startswith(scheme):
            host = host[len(scheme):]
    host = host.split("/", 1)[0].replace(".", "-").replace(":", "-")
    if host not in taken:
        return host
    counter = 1
    while f"{host}-{counter}" in taken:
        counter += 1
    return f"{host}-{counter}"


def reconcile(profile: RegistryProfile, live_url: str | None) -> bool:
    """Point ``profile.current`` at the registry serving ``live_url``.

    Built-in registries are matched before custom ones; within a mapping the
    first entry in insertion order wins. An unknown URL is recorded as a new
    custom registry and selected. With no live line ``current`` is kept.
    Returns True when a registry was discovered.
    """
    if live_url is None:
        return False
    name = profile.find_by_url(live_url)
    if name is not None:
        profile.current = name
        return False
    if not live_url:
        return False
    name = derive_registry_name(live_url, set(profile.names()))
    profile.add_discovered(name, live_url)
    log.info("discovered registry %s (%s) in .npmrc", name, live_url)
    return True
