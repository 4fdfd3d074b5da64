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

"""Rule model for wg-quick ``PostUp``/``PostDown`` hooks.

A ``Rule`` is verb-less. Printing it once with ``-A`` and once with
``-D`` gives the activation and deactivation commands, so every
inserted rule has an exact inverse.
"""

from __future__ import annotations

import dataclasses
from enum import StrEnum

from wgfabrik.core import DocumentLine


class Verb(StrEnum):
    APPEND = '-A'
    DELETE = '-D'


class Hook(StrEnum):
    POST_UP = 'PostUp'
    POST_DOWN = 'PostDown'


@dataclasses.dataclass(frozen=True)
class Rule:
    """One iptables rule without its verb."""

    chain: str
    matches: tuple[str, ...] = ()
    target: str = 'ACCEPT'
    table: str = ''  # '' = filter

    def command(self, verb: Verb, iptables: str = 'iptables') -> str:
        parts = [iptables]
        if self.table:
            parts += ['-t', self.table]
        parts += [str(verb), self.chain, *self.matches, '-j', self.target]
        return ' '.join(parts)

    def argv(self, verb: Verb, iptables: str = 'iptables') -> list[str]:
        return self.command(verb, iptables).split(' ')


@dataclasses.dataclass(frozen=True)
class RulePair:
    """Activation and deactivation hook lines of one ``Rule``."""

    activation: str
    deactivation: str

    @classmethod
    def of(cls, rule: Rule, iptables: str = 'iptables') -> RulePair:
        return cls(
            activation=f'{Hook.POST_UP} = {rule.command(Verb.APPEND, iptables)}',
            deactivation=f'{Hook.POST_DOWN} = {rule.command(Verb.DELETE, iptables)}',
        )


@dataclasses.dataclass(frozen=True)
class RuleBlock:
    """A comment line followed by the hook pairs of its rules."""

    comment: str
    rules: tuple[Rule, ...]

    def pairs(self, iptables: str = 'iptables') -> list[RulePair]:
        return [RulePair.of(rule, iptables) for rule in self.rules]

    def render(self, tag: str = '', iptables: str = 'iptables') -> list[str]:
        """Return the block as document lines, tagged with *tag* if given."""
        texts = [f'#{self.comment}']
        for pair in self.pairs(iptables):
            texts += [pair.activation, pair.deactivation]
        return [DocumentLine(text, tag).render() for text in texts]
