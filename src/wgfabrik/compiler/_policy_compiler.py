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

"""Policy compiler: maps policy selections to tagged ``PostUp``/``PostDown`` lines.

Option table per direction:

========  ======================  =========================================
INPUT     ChainDefault            no rule
INPUT     InterfaceAddressOnly    accept to the interface's own address
INPUT     SpecificNetworks        one accept per network
INPUT     AcceptAll               unconditional accept
OUTPUT    ChainDefault            no rule
OUTPUT    SpecificNetworks        one accept per network
OUTPUT    AcceptAll               unconditional accept
FORWARD   ChainDefault            no rule
FORWARD   SameInterfaceOnly       accept forwarding back into the interface
FORWARD   SpecificInterfaces      one accept per target device
FORWARD   AcceptAll               unconditional accept
========  ======================  =========================================

Every line produced carries the ``RULE`` tag, so re-applying a policy
clears the whole previous set with one tag delete.
"""

from __future__ import annotations

from wgfabrik.core import RULE_TAG, InvalidPolicy, Network, validate_network
from wgfabrik.core.options import Settings

from ._chains import FILTER_CHAINS, NAT_TABLE, POSTROUTING_CHAIN
from ._interface_properties import InterfaceProperties, check_interface_names
from ._policy import (
    AcceptAll,
    ChainDefault,
    Direction,
    InterfaceAddressOnly,
    Policy,
    PolicyOption,
    SameInterfaceOnly,
    SpecificInterfaces,
    SpecificNetworks,
    check_option,
)
from ._rule import Rule, RuleBlock


def _as_network(address: Network | str) -> Network:
    if isinstance(address, Network):
        return address
    return validate_network(address)


class PolicyCompiler:
    """Compiles policy selections for one host.

    Compilation has no side effects. Parameter lists are validated as a
    whole before the first rule is built.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or Settings()
        self.iptables = settings.paths.iptables
        [self.outbound_device] = check_interface_names([settings.outbound_device])
        self.tag = RULE_TAG

    # -- Blocks --

    def blocks(
        self,
        direction: Direction,
        index: int,
        option: PolicyOption,
        address: Network | str | None = None,
    ) -> list[RuleBlock]:
        """Build the rule blocks of one direction."""
        check_option(direction, option)
        wg = InterfaceProperties.wireguard_name(index)
        chain = FILTER_CHAINS[direction]
        # INPUT and FORWARD match the packet's ingress, OUTPUT its egress.
        side = '-o' if direction == Direction.OUTPUT else '-i'

        match option:
            case ChainDefault():
                return []

            case InterfaceAddressOnly():
                if address is None:
                    msg = f'{direction} policy needs the address of {wg}'
                    raise ValueError(msg)
                host = _as_network(address).host_cidr
                return [
                    RuleBlock(
                        f'{direction}: Accepting only to {wg} address.',
                        (Rule(chain, (side, wg, '-d', host)),),
                    ),
                ]

            case SpecificNetworks(networks=networks):
                if not networks:
                    msg = f'{direction} policy needs at least one network'
                    raise InvalidPolicy(msg)
                # Validate all before building any.
                checked = [validate_network(n) for n in networks]
                return [
                    RuleBlock(
                        f'{direction}: Accepting to {net}.',
                        (Rule(chain, (side, wg, '-d', str(net))),),
                    )
                    for net in checked
                ]

            case SameInterfaceOnly():
                return [
                    RuleBlock(
                        f'{direction}: Accepting only to {wg}.',
                        (Rule(chain, ('-i', wg, '-o', wg)),),
                    ),
                ]

            case SpecificInterfaces(interfaces=interfaces):
                if not interfaces:
                    msg = f'{direction} policy needs at least one interface'
                    raise InvalidPolicy(msg)
                checked = check_interface_names(interfaces)
                return [
                    RuleBlock(
                        f'{direction}: Accepting to {name} interface.',
                        (Rule(chain, ('-i', wg, '-o', name)),),
                    )
                    for name in checked
                ]

            case AcceptAll():
                return [
                    RuleBlock(
                        f'{direction}: Accepting all regardless of the target.',
                        (Rule(chain, (side, wg)),),
                    ),
                ]

        msg = f'Unhandled policy option: {option!r}'
        raise ValueError(msg)

    def internet_sharing_blocks(self, index: int, address: Network | str) -> list[RuleBlock]:
        wg = InterfaceProperties.wireguard_name(index)
        out = self.outbound_device
        network = _as_network(address).network_cidr
        forward = FILTER_CHAINS[Direction.FORWARD]
        return [
            RuleBlock(
                'Allow internet access',
                (
                    Rule(forward, ('-i', wg, '-o', out)),
                    Rule(
                        forward,
                        (
                            '-i', out, '-o', wg,
                            '-m', 'conntrack', '--ctstate', 'RELATED,ESTABLISHED',
                        ),
                    ),
                    Rule(
                        POSTROUTING_CHAIN,
                        ('-s', network, '-o', out),
                        target='MASQUERADE',
                        table=NAT_TABLE,
                    ),
                ),
            ),
        ]

    def listen_port_block(self, port: int) -> RuleBlock:
        """Untagged rule that opens the listen port on the outbound device."""
        return RuleBlock(
            'Open port for this network',
            (
                Rule(
                    FILTER_CHAINS[Direction.INPUT],
                    ('-i', self.outbound_device, '-p', 'udp', '--dport', str(port)),
                ),
            ),
        )

    # -- Tagged lines --

    def _render(self, blocks: list[RuleBlock], tag: str | None = None) -> list[str]:
        tag = self.tag if tag is None else tag
        lines: list[str] = []
        for block in blocks:
            lines += block.render(tag, self.iptables)
        return lines

    def compile(
        self,
        direction: Direction,
        index: int,
        option: PolicyOption,
        address: Network | str | None = None,
    ) -> list[str]:
        """Return the tagged lines for one direction."""
        return self._render(self.blocks(direction, index, option, address))

    def compile_internet_sharing(self, index: int, address: Network | str) -> list[str]:
        return self._render(self.internet_sharing_blocks(index, address))

    def compile_listen_port(self, port: int) -> list[str]:
        return self._render([self.listen_port_block(port)], tag='')

    def compile_policy(self, index: int, address: Network | str, policy: Policy) -> list[str]:
        """Return the full tagged rule set: INPUT, OUTPUT, FORWARD, then sharing."""
        network = _as_network(address)
        blocks: list[RuleBlock] = []
        for direction in Direction:
            blocks += self.blocks(direction, index, policy.option(direction), network)
        if policy.internet_sharing:
            blocks += self.internet_sharing_blocks(index, network)
        return self._render(blocks)
