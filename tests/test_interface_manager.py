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

"""Interface lifecycle tests against a temporary deployment root."""

import pytest

from wgfabrik.compiler import AcceptAll, InterfaceAddressOnly, Policy, SpecificNetworks
from wgfabrik.core import (
    AlreadyExists,
    InterfaceNotFound,
    InvalidAddress,
    InvalidFormat,
    InvalidRange,
    OutOfRange,
)

BASE_DOC = """# ============================================== #
# DO NOT MODIFY OR REMOVE LINE MARKERS (!MARKER) #
# ============================================== #
[Interface]
Address = 10.0.0.1/24
ListenPort = 51820
PrivateKey = priv1=
#!IPTABLES
#Open port for this network
PostUp = iptables -A WIREGUARD_INPUT -i eth0 -p udp --dport 51820 -j ACCEPT
PostDown = iptables -D WIREGUARD_INPUT -i eth0 -p udp --dport 51820 -j ACCEPT
#!CLIENTS
"""


def _rule_lines(store, index=0):
    return [line.render() for line in store.load(index).lines_with_tag('RULE')]


class TestProvision:
    def test_base_document(self, wg0, store, settings):
        assert store.interface_path(0).read_text() == BASE_DOC
        assert wg0.name == 'wg0'
        assert wg0.public_key == 'pub1='
        assert settings.key_path.read_text() == '0:priv1=:pub1=\n'

    @pytest.mark.parametrize(('index', 'port'), [(-1, 51820), (101, 51820), (0, 0), (0, 65536)])
    def test_bounds(self, interfaces, store, keys, index, port):
        with pytest.raises(OutOfRange):
            interfaces.provision(index, port, '10.0.0.1/24')
        assert store.interface_indices() == []
        assert keys.identities() == []

    def test_upper_bounds_accepted(self, interfaces):
        interfaces.provision(100, 65535, '10.0.0.1/24')
        assert interfaces.list() == [100]

    @pytest.mark.parametrize(
        ('address', 'error'),
        [('10.0.0.1', InvalidFormat), ('10.0.0.1/40', InvalidRange)],
    )
    def test_bad_address_mutates_nothing(self, interfaces, keys, generator, address, error):
        with pytest.raises(error):
            interfaces.provision(0, 51820, address)
        assert keys.identities() == []
        assert generator.count == 0

    def test_twice(self, wg0, interfaces, settings):
        before = settings.key_path.read_text()
        with pytest.raises(AlreadyExists):
            interfaces.provision(0, 51821, '10.1.0.1/24')
        assert settings.key_path.read_text() == before

    def test_leftover_key_pair_blocks(self, interfaces, keys, store):
        keys.create(4)
        with pytest.raises(AlreadyExists):
            interfaces.provision(4, 51820, '10.0.0.1/24')
        assert not store.exists(4)


class TestApplyPolicy:
    def test_unknown_interface(self, interfaces):
        with pytest.raises(InterfaceNotFound):
            interfaces.apply_policy(3, Policy())

    def test_quiesces_first(self, wg0, interfaces, services):
        interfaces.apply_policy(0, Policy(input=AcceptAll()))
        assert services.calls == [('stop', 0), ('disable', 0)]

    def test_replaces_previous_rules(self, wg0, interfaces, store):
        interfaces.apply_policy(0, Policy(input=AcceptAll()))
        assert _rule_lines(store) == [
            '#INPUT: Accepting all regardless of the target. #!RULE',
            'PostUp = iptables -A WIREGUARD_INPUT -i wg0 -j ACCEPT #!RULE',
            'PostDown = iptables -D WIREGUARD_INPUT -i wg0 -j ACCEPT #!RULE',
        ]
        interfaces.apply_policy(0, Policy(input=InterfaceAddressOnly()))
        assert _rule_lines(store) == [
            '#INPUT: Accepting only to wg0 address. #!RULE',
            'PostUp = iptables -A WIREGUARD_INPUT -i wg0 -d 10.0.0.1/32 -j ACCEPT #!RULE',
            'PostDown = iptables -D WIREGUARD_INPUT -i wg0 -d 10.0.0.1/32 -j ACCEPT #!RULE',
        ]

    def test_rules_follow_anchor(self, wg0, interfaces, store):
        interfaces.apply_policy(0, Policy(output=AcceptAll()))
        texts = [line.render() for line in store.load(0).lines]
        pos = texts.index('#!IPTABLES')
        assert texts[pos + 1] == '#OUTPUT: Accepting all regardless of the target. #!RULE'

    def test_idempotent(self, wg0, interfaces, store):
        policy = Policy(
            input=SpecificNetworks(('10.5.0.0/16',)),
            output=AcceptAll(),
            internet_sharing=True,
        )
        interfaces.apply_policy(0, policy)
        once = store.interface_path(0).read_text()
        interfaces.apply_policy(0, policy)
        assert store.interface_path(0).read_text() == once

    def test_default_policy_clears_rules(self, wg0, interfaces, store):
        interfaces.apply_policy(0, Policy(input=AcceptAll(), internet_sharing=True))
        interfaces.apply_policy(0, Policy())
        assert store.interface_path(0).read_text() == BASE_DOC

    def test_fail_closed(self, wg0, interfaces, store, services):
        interfaces.apply_policy(0, Policy(input=AcceptAll()))
        before = store.interface_path(0).read_text()
        services.calls.clear()
        with pytest.raises(InvalidAddress):
            interfaces.apply_policy(
                0, Policy(output=SpecificNetworks(('10.1.0.0/16', '300.1.0.0/16')))
            )
        assert store.interface_path(0).read_text() == before
        assert services.calls == []


class TestService:
    def test_enable(self, wg0, interfaces, services):
        interfaces.enable(0)
        assert services.calls == [('enable', 0), ('start', 0)]
        assert services.is_active(0)

    def test_disable(self, wg0, interfaces, services):
        interfaces.disable(0)
        assert services.calls == [('stop', 0), ('disable', 0)]

    def test_restart(self, wg0, interfaces, services):
        interfaces.restart(0)
        assert services.calls == [('enable', 0), ('restart', 0)]

    @pytest.mark.parametrize('action', ['enable', 'disable', 'restart'])
    def test_unknown(self, interfaces, services, action):
        with pytest.raises(InterfaceNotFound):
            getattr(interfaces, action)(9)
        assert services.calls == []


class TestQueries:
    def test_get(self, wg0, interfaces, clients):
        clients.add_client(0, 'alice', '10.0.0.2/32', ['0.0.0.0/0'], ['10.0.0.2/32'])
        iface = interfaces.get(0)
        assert (iface.index, iface.port, iface.address) == (0, 51820, '10.0.0.1/24')
        assert iface.public_key == 'pub1='
        assert iface.clients == ['alice']

    def test_get_unknown(self, interfaces):
        with pytest.raises(InterfaceNotFound):
            interfaces.get(1)

    def test_list(self, interfaces):
        interfaces.provision(2, 51822, '10.2.0.1/24')
        interfaces.provision(1, 51821, '10.1.0.1/24')
        assert interfaces.list() == [1, 2]


class TestRemove:
    def test_removes_everything(self, wg0, interfaces, clients, keys, store, services):
        clients.add_client(0, 'alice', '10.0.0.2/32', ['10.0.0.0/24'], ['10.0.0.2/32'])
        clients.add_client(0, 'bob', '10.0.0.3/32', ['10.0.0.0/24'], ['10.0.0.3/32'])
        interfaces.remove(0)
        assert not store.exists(0)
        assert not keys.exists(0)
        assert not store.client_exists('alice')
        assert not store.client_exists('bob')
        assert services.calls == [('stop', 0), ('disable', 0)]

    def test_unknown(self, interfaces, services):
        with pytest.raises(InterfaceNotFound):
            interfaces.remove(0)
        assert services.calls == []

    def test_service_errors_are_tolerated(self, wg0, interfaces, services, store, caplog):
        services.failing = {'stop', 'disable'}
        interfaces.remove(0)
        assert not store.exists(0)
        assert 'failed with exit code 5' in caplog.text

    def test_missing_key_pair_is_tolerated(self, wg0, interfaces, keys, store):
        keys.delete(0)
        interfaces.remove(0)
        assert not store.exists(0)

    def test_other_interfaces_untouched(self, wg0, interfaces, keys):
        interfaces.provision(1, 51821, '10.1.0.1/24')
        interfaces.remove(0)
        assert interfaces.list() == [1]
        assert keys.identities() == ['1']

    def test_remove_all(self, wg0, interfaces, keys, runner):
        interfaces.provision(1, 51821, '10.1.0.1/24')
        assert interfaces.remove_all() == [0, 1]
        assert interfaces.list() == []
        assert keys.identities() == []
        assert ['iptables', '-X', 'WIREGUARD_INPUT'] in runner.commands
