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

"""Shared pytest fixtures: a temporary deployment root and fake host tools."""

import pytest

from wgfabrik.core import CommandError, DocumentStore, KeyPair, KeyRegistry
from wgfabrik.core.options import Settings
from wgfabrik.driver import FirewallChains, TemplateRenderer
from wgfabrik.manager import ClientManager, InterfaceManager


class FakeKeyGenerator:
    """Deterministic stand-in for ``wg genkey`` / ``wg pubkey``."""

    def __init__(self):
        self.count = 0

    def generate(self):
        self.count += 1
        return KeyPair(f'priv{self.count}=', f'pub{self.count}=')


class FakeServiceManager:
    """Records every call as ``(action, index)``.

    Actions listed in *failing* raise ``CommandError``.
    """

    def __init__(self, failing=()):
        self.calls = []
        self.failing = set(failing)
        self.active = set()

    def _record(self, action, index):
        self.calls.append((action, index))
        if action in self.failing:
            raise CommandError(['systemctl', action, f'wg-quick@wg{index}.service'], 5)

    def enable(self, index):
        self._record('enable', index)

    def disable(self, index):
        self._record('disable', index)

    def start(self, index):
        self._record('start', index)
        self.active.add(index)

    def stop(self, index):
        self._record('stop', index)
        self.active.discard(index)

    def restart(self, index):
        self._record('restart', index)
        self.active.add(index)

    def is_active(self, index):
        return index in self.active


class RecordingRunner:
    """Collects argv lists instead of running them."""

    def __init__(self, failing=False):
        self.commands = []
        self.failing = failing

    def __call__(self, cmd):
        self.commands.append(cmd)
        if self.failing:
            raise CommandError(cmd, 1, 'No chain/target/match by that name.')
        return ''


@pytest.fixture
def settings(tmp_path):
    return Settings(
        config_dir=str(tmp_path / 'wireguard'),
        client_dns='1.1.1.1',
        default_endpoint='vpn.example.com',
    )


@pytest.fixture
def generator():
    return FakeKeyGenerator()


@pytest.fixture
def services():
    return FakeServiceManager()


@pytest.fixture
def runner():
    return RecordingRunner()


@pytest.fixture
def renderer(tmp_path):
    # Point the override directory somewhere empty so host templates never leak in.
    return TemplateRenderer(user_dir=tmp_path / 'no-overrides')


@pytest.fixture
def keys(settings, generator):
    return KeyRegistry(settings.key_path, generator)


@pytest.fixture
def store(settings):
    return DocumentStore(settings)


@pytest.fixture
def interfaces(settings, keys, store, services, renderer, runner):
    return InterfaceManager(
        settings,
        keys,
        store,
        services,
        renderer=renderer,
        chains=FirewallChains(settings.paths.iptables, runner=runner),
    )


@pytest.fixture
def clients(settings, keys, store, generator, renderer):
    return ClientManager(settings, keys, store, generator, renderer=renderer)


@pytest.fixture
def wg0(interfaces):
    """Interface 0 on port 51820 with address 10.0.0.1/24."""
    return interfaces.provision(0, 51820, '10.0.0.1/24')
