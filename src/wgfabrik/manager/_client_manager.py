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

"""Client membership of an interface.

A client exists twice: as a standalone document below the client
directory and as a ``#!CLIENT-<name>`` tagged ``[Peer]`` block in the
interface document. Adding writes the standalone document first; if the
peer block cannot be inserted afterwards, ``Incomplete`` names the
orphaned document instead of deleting it.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from collections.abc import Iterable

import jinja2

from wgfabrik.core import (
    Anchor,
    ClientNotFound,
    DocumentLine,
    DocumentStore,
    DuplicateClientName,
    Incomplete,
    InvalidFormat,
    InvalidName,
    KeyRegistry,
    KeySource,
    Network,
    NotFound,
    RenderError,
    SettingsError,
    client_tag,
    validate_network,
)
from wgfabrik.core.options import Settings
from wgfabrik.driver import KeyGenerator, TemplateRenderer

from ._interface_manager import client_names

logger = logging.getLogger(__name__)

_CLIENT_NAME_RE = re.compile(r'^[^\s/:]+$')
_ALLOWED_IPS_RE = re.compile(r'^AllowedIPs\s*=\s*(?P<value>.*?)\s*$')


@dataclasses.dataclass
class Client:
    name: str
    index: int
    address: str
    public_key: str
    config_path: str


@dataclasses.dataclass
class ClientSummary:
    name: str
    allowed_ips: str


def validate_client_name(name: str) -> str:
    """Return *name* if it is usable as a file name and as a tag."""
    if not name or not _CLIENT_NAME_RE.match(name) or name in ('.', '..'):
        msg = f'Client name {name!r} must be non-empty without whitespace, "/" or ":"'
        raise InvalidName(msg)
    return name


def _networks(entries: Iterable[str], what: str) -> list[Network]:
    """Validate a list of networks, accepting comma-separated items."""
    items = [
        part.strip()
        for entry in entries
        for part in entry.split(',')
        if part.strip()
    ]
    if not items:
        msg = f'Client needs at least one entry for {what}'
        raise InvalidFormat(msg)
    return [validate_network(item) for item in items]


class ClientManager:
    """Adds and removes peers of a server interface."""

    def __init__(
        self,
        settings: Settings,
        keys: KeyRegistry,
        store: DocumentStore,
        generator: KeySource,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.settings = settings
        self.keys = keys
        self.store = store
        self.generator = generator
        self.renderer = renderer or TemplateRenderer()

    @classmethod
    def from_settings(cls, settings: Settings) -> ClientManager:
        generator = KeyGenerator(settings.paths.wg)
        return cls(
            settings,
            KeyRegistry(settings.key_path, generator),
            DocumentStore(settings),
            generator,
        )

    def add_client(
        self,
        index: int,
        name: str,
        address: str,
        routes: Iterable[str],
        allowed_ips: Iterable[str],
    ) -> Client:
        """Create the client document and the server-side peer block."""
        doc = self.store.load(index)
        validate_client_name(name)
        tag = client_tag(name)
        if self.store.client_exists(name):
            msg = f'Configuration for client {name} already exists in {self.store.client_root}'
            raise DuplicateClientName(msg)
        if doc.tag_exists(tag):
            msg = f'Interface wg{index} already contains {name} client'
            raise DuplicateClientName(msg)

        network = validate_network(address)
        route_nets = _networks(routes, 'routes')
        allowed_nets = _networks(allowed_ips, 'allowed IPs')

        if not self.settings.default_endpoint:
            msg = 'No endpoint configured (settings key "default_endpoint")'
            raise SettingsError(msg)
        port = doc.value('ListenPort')
        if not port:
            msg = f'Interface wg{index} has no ListenPort line'
            raise NotFound(msg)
        if not doc.anchor_exists(Anchor.CLIENTS):
            msg = f'Interface wg{index} has no #!{Anchor.CLIENTS} anchor'
            raise NotFound(msg)
        server_public_key = self.keys.get(index).public_key

        pair = self.generator.generate()
        try:
            text = self.renderer.client({
                'private_key': pair.private_key,
                'address': str(network),
                'dns': self.settings.client_dns,
                'server_public_key': server_public_key,
                'routes': [str(n) for n in route_nets],
                'endpoint': self.settings.default_endpoint,
                'port': port,
                'keepalive': self.settings.persistent_keepalive,
            })
        except jinja2.TemplateError as e:
            msg = f'Cannot render the document of client {name}: {e}'
            raise RenderError(msg) from e
        path = self.store.write_client(name, text)

        allowed = ', '.join(str(n) for n in allowed_nets)
        peer = [
            DocumentLine(line, tag)
            for line in (
                '[Peer]',
                f'PublicKey = {pair.public_key}',
                f'AllowedIPs = {allowed}',
            )
        ]
        try:
            with self.store.edit(index) as server:
                server.insert_after(Anchor.CLIENTS, peer)
        except (OSError, NotFound) as e:
            msg = (
                f'Client document {path} was written but the peer block '
                f'could not be added to wg{index}: {e}'
            )
            raise Incomplete(msg, artifact=str(path)) from e

        logger.info('Added client %s to wg%d', name, index)
        return Client(name, index, str(network), pair.public_key, str(path))

    def remove_client(self, index: int, name: str) -> None:
        """Delete the peer block, then the client document.

        The peer block is authoritative; a missing client document is
        tolerated.
        """
        tag = client_tag(name)
        with self.store.edit(index) as doc:
            if not doc.delete_by_tag(tag):
                msg = f'Interface wg{index} has no client {name}'
                raise ClientNotFound(msg)
        if not self.store.delete_client(name):
            logger.debug('No client document for %s', name)
        logger.info('Removed client %s from wg%d', name, index)

    def list_clients(self, index: int) -> list[ClientSummary]:
        doc = self.store.load(index)
        summaries = []
        for name in client_names(doc):
            allowed = ''
            for line in doc.lines_with_tag(client_tag(name)):
                m = _ALLOWED_IPS_RE.match(line.text)
                if m:
                    allowed = m.group('value')
            summaries.append(ClientSummary(name, allowed))
        return summaries

    def client_config(self, name: str) -> str:
        """The standalone document of *name*, as fed to a QR renderer."""
        validate_client_name(name)
        return self.store.read_client(name)
