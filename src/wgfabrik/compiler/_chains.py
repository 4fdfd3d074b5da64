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

"""Dedicated iptables chains that hold all per-interface rules.

The built-in chains jump into these once; interface rules only ever
touch the dedicated chains, so tearing them down never disturbs rules
owned by anything else on the host.
"""

from __future__ import annotations

from ._policy import Direction
from ._rule import Rule, Verb

CHAIN_PREFIX = 'WIREGUARD_'

FILTER_CHAINS: dict[Direction, str] = {
    Direction.INPUT: f'{CHAIN_PREFIX}INPUT',
    Direction.OUTPUT: f'{CHAIN_PREFIX}OUTPUT',
    Direction.FORWARD: f'{CHAIN_PREFIX}FORWARD',
}
NAT_TABLE = 'nat'
POSTROUTING_CHAIN = f'{CHAIN_PREFIX}POSTROUTING'

# (table, built-in chain, dedicated chain)
_HOOKS: list[tuple[str, str, str]] = [
    *(('', str(d), chain) for d, chain in FILTER_CHAINS.items()),
    (NAT_TABLE, 'POSTROUTING', POSTROUTING_CHAIN),
]


def _table_args(table: str) -> list[str]:
    return ['-t', table] if table else []


def _jump(table: str, builtin: str, chain: str) -> Rule:
    return Rule(chain=builtin, target=chain, table=table)


def compile_chain_setup(iptables: str = 'iptables') -> list[list[str]]:
    """Commands that create the dedicated chains and hook them in."""
    commands = [
        [iptables, *_table_args(table), '-N', chain] for table, _builtin, chain in _HOOKS
    ]
    commands += [_jump(*hook).argv(Verb.APPEND, iptables) for hook in _HOOKS]
    return commands


def compile_chain_teardown(iptables: str = 'iptables') -> list[list[str]]:
    """Commands that unhook, flush and delete the dedicated chains."""
    commands = [_jump(*hook).argv(Verb.DELETE, iptables) for hook in _HOOKS]
    commands += [
        [iptables, *_table_args(table), '-F', chain] for table, _builtin, chain in _HOOKS
    ]
    commands += [
        [iptables, *_table_args(table), '-X', chain] for table, _builtin, chain in _HOOKS
    ]
    return commands
