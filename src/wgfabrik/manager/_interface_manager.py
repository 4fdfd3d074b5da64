# Copyright (C) 2026 Linuxfabrik <info@linuxfabrik.ch>
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# On Debian systems, the complete text of the GNU General Public License
# version 2 can be found in /usr/share/common-licenses/GPL-2.
#
# SPDX-License-Identifier: GPL-2.0-or-later

"""Interface lifecycle.

An interface moves through ``absent -> provisioned -> policy-applied ->
(enabled | disabled) -> removed``. Provisioning and policy application
validate everything before the first write; removal is best effort on the
service side.
"""

from __future__ import annotations

import dataclasses
import logging

import jinja2

from wgfabrik.compiler import InterfaceProperties, Policy, PolicyCompiler
from wgfabrik.core import (
    CLIENT_TAG_PREFIX,
    RULE_TAG,
    AlreadyExists,
    Anchor,
    CommandError,
    DocumentStore,
    Incomplete,
    InterfaceNotFound,
    KeyRegistry,
    MarkedDocument,
    NotFound,
    OutOfRange,
    validate_network,
)
from wgfabrik.core.options import Settings
from wgfabrik.driver import (
    FirewallChains,
    KeyGenerator,
    ServiceManager,
    SystemdServiceManager,
    TemplateRenderer,
)

logger = logging.getLogger(__name__)

MIN_INDEX = 0
MAX_INDEX = 100
MIN_PORT = 1
MAX_PORT = 65535


@dataclasses.dataclass
class Interface:
    index: int
    port: int
    address: str
    public_key: str
    clients: list[str] = dataclasses.field(default_factory=list)

    @property
    def name(self) -> str:
        return InterfaceProperties.wireguard_name(self.index)


def client_names(doc: MarkedDocument) -> list[str]:
    """Names of all clients with a peer block in *doc*."""
    return [
        tag.removeprefix(CLIENT_TAG_PREFIX)
        for tag in doc.tags()
        if tag.startswith(CLIENT_TAG_PREFIX)
    ]


class InterfaceManager:
    """Provisions, configures and removes WireGuard interfaces."""

    def __init__(
        self,
        settings: Settings,
        keys: KeyRegistry,
        store: DocumentStore,
        services: ServiceManager,
        compiler: PolicyCompiler | None = None,
        renderer: TemplateRenderer | None = None,
        chains: FirewallChains | None = None,
    ) -> None:
        self.settings = settings
        self.keys = keys
        self.store = store
        self.services = services
        self.compiler = compiler or PolicyCompiler(settings)
        self.renderer = renderer or TemplateRenderer()
        self.chains = chains or FirewallChains(settings.paths.iptables)

    @classmethod
    def from_settings(cls, settings: Settings) -> InterfaceManager:
        """Wire the manager to the real ``wg``, ``systemctl`` and ``iptables``."""
        return cls(
            settings,
            KeyRegistry(settings.key_path, KeyGenerator(settings.paths.wg)),
            DocumentStore(settings),
            SystemdServiceManager(settings.paths.systemctl, settings.unit_template),
        )

    def _require(self, index: int) -> None:
        if not self.store.exists(index):
            msg = f'Interface wg{index} does not exist'
            raise InterfaceNotFound(msg)

    # -- Provisioning --

    def provision(self, index: int, port: int, address: str) -> Interface:
        if not MIN_INDEX <= index <= MAX_INDEX:
            msg = f'Interface index {index} is outside {MIN_INDEX}-{MAX_INDEX}'
            raise OutOfRange(msg)
        if not MIN_PORT <= port <= MAX_PORT:
            msg = f'Port {port} is outside {MIN_PORT}-{MAX_PORT}'
            raise OutOfRange(msg)
        if self.store.exists(index):
            msg = f'Interface wg{index} already exists'
            raise AlreadyExists(msg)
        if self.keys.exists(index):
            msg = f'Key pair for interface wg{index} already exists'
            raise AlreadyExists(msg)
        network = validate_network(address)
        port_rules = self.compiler.compile_listen_port(port)

        pair = self.keys.create(index)
        try:
            text = self.renderer.interface({
                'address': str(network),
                'port': port,
                'private_key': pair.private_key,
                'port_rules': port_rules,
            })
            self.store.create(index, MarkedDocument.parse(text))
        except (OSError, jinja2.TemplateError) as e:
            msg = (
                f'Key pair for wg{index} was stored in {self.keys.path} '
                f'but the interface document could not be written: {e}'
            )
            raise Incomplete(msg, artifact=str(self.keys.path)) from e

        logger.info('Provisioned wg%d on port %d with address %s', index, port, network)
        return Interface(index, port, str(network), pair.public_key)

    # -- Policy --

    def apply_policy(self, index: int, policy: Policy) -> list[str]:
        """Replace the rule set of *index* with the one compiled from *policy*.

        The interface is stopped and disabled first. Re-enabling is left to
        the caller. Returns the inserted lines.
        """
        address = self.store.load(index).value('Address')
        if address is None:
            msg = f'Interface wg{index} has no Address line'
            raise NotFound(msg)
        # Compile everything before touching the host.
        lines = self.compiler.compile_policy(index, address, policy)

        self.disable(index)
        with self.store.edit(index) as doc:
            removed = doc.delete_by_tag(RULE_TAG)
            doc.insert_after(Anchor.FIREWALL, lines)
        logger.info(
            'Applied policy to wg%d (%d lines removed, %d inserted)',
            index,
            removed,
            len(lines),
        )
        return lines

    # -- Service --

    def enable(self, index: int) -> None:
        self._require(index)
        self.services.enable(index)
        self.services.start(index)
        logger.info('Enabled wg%d', index)

    def disable(self, index: int) -> None:
        self._require(index)
        self.services.stop(index)
        self.services.disable(index)
        logger.info('Disabled wg%d', index)

    def restart(self, index: int) -> None:
        self._require(index)
        self.services.enable(index)
        self.services.restart(index)
        logger.info('Restarted wg%d', index)

    # -- Queries --

    def list(self) -> list[int]:
        return self.store.interface_indices()

    def get(self, index: int) -> Interface:
        doc = self.store.load(index)
        try:
            public_key = self.keys.get(index).public_key
        except NotFound:
            logger.warning('No key pair recorded for wg%d', index)
            public_key = ''
        return Interface(
            index=index,
            port=int(doc.value('ListenPort') or 0),
            address=doc.value('Address') or '',
            public_key=public_key,
            clients=client_names(doc),
        )

    # -- Removal --

    def remove(self, index: int) -> None:
        """Remove the key pair, unit, client documents and interface document."""
        doc = self.store.load(index)

        try:
            self.keys.delete(index)
        except NotFound:
            logger.debug('No key pair to delete for wg%d', index)

        for action in (self.services.stop, self.services.disable):
            try:
                action(index)
            except CommandError as e:
                logger.warning('%s', e)

        for name in client_names(doc):
            if not self.store.delete_client(name):
                logger.debug('No client document for %s', name)

        self.store.delete(index)
        logger.info('Removed wg%d', index)

    def remove_all(self) -> list[int]:
        """Remove every interface, then the WIREGUARD chains."""
        removed = []
        for index in self.list():
            self.remove(index)
            removed.append(index)
        self.chains.teardown()
        return removed
