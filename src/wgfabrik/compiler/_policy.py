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

"""Policy selections as tagged variants.

Each option the operator can pick for a traffic direction is its own
frozen dataclass, carrying its parameter list where it has one. Which
options a direction accepts is listed in ``ALLOWED_OPTIONS``.
"""

from __future__ import annotations

import dataclasses
from enum import StrEnum

from wgfabrik.core import InvalidPolicy


class Direction(StrEnum):
    """Traffic direction, relative to the host."""

    INPUT = 'INPUT'
    OUTPUT = 'OUTPUT'
    FORWARD = 'FORWARD'


@dataclasses.dataclass(frozen=True)
class ChainDefault:
    """Emit no rule, rely on the chain policy."""


@dataclasses.dataclass(frozen=True)
class InterfaceAddressOnly:
    """Accept traffic to the interface's own address."""


@dataclasses.dataclass(frozen=True)
class SpecificNetworks:
    networks: tuple[str, ...]


@dataclasses.dataclass(frozen=True)
class SameInterfaceOnly:
    """Accept traffic routed back into the same interface."""


@dataclasses.dataclass(frozen=True)
class SpecificInterfaces:
    interfaces: tuple[str, ...]


@dataclasses.dataclass(frozen=True)
class AcceptAll:
    """Accept regardless of the target."""


PolicyOption = (
    ChainDefault
    | InterfaceAddressOnly
    | SpecificNetworks
    | SameInterfaceOnly
    | SpecificInterfaces
    | AcceptAll
)

ALLOWED_OPTIONS: dict[Direction, tuple[type, ...]] = {
    Direction.INPUT: (ChainDefault, InterfaceAddressOnly, SpecificNetworks, AcceptAll),
    Direction.OUTPUT: (ChainDefault, SpecificNetworks, AcceptAll),
    Direction.FORWARD: (ChainDefault, SameInterfaceOnly, SpecificInterfaces, AcceptAll),
}


@dataclasses.dataclass(frozen=True)
class Policy:
    """One complete policy application for an interface."""

    input: PolicyOption = ChainDefault()
    output: PolicyOption = ChainDefault()
    forward: PolicyOption = ChainDefault()
    internet_sharing: bool = False

    def option(self, direction: Direction) -> PolicyOption:
        match direction:
            case Direction.INPUT:
                return self.input
            case Direction.OUTPUT:
                return self.output
            case Direction.FORWARD:
                return self.forward
        msg = f'Unknown direction: {direction}'
        raise ValueError(msg)


def check_option(direction: Direction, option) -> None:
    """Raise ``InvalidPolicy`` if *option* is not defined for *direction*."""
    if not isinstance(option, ALLOWED_OPTIONS[direction]):
        msg = f'{type(option).__name__} is not a valid {direction} policy'
        raise InvalidPolicy(msg)


# Operator-facing option names, as offered by the menus.
CHOICES: dict[str, type] = {
    'default': ChainDefault,
    'address': InterfaceAddressOnly,
    'networks': SpecificNetworks,
    'same': SameInterfaceOnly,
    'interfaces': SpecificInterfaces,
    'all': AcceptAll,
}


def choices_for(direction: Direction) -> list[str]:
    return [name for name, cls in CHOICES.items() if cls in ALLOWED_OPTIONS[direction]]


def parse_option(direction: Direction, choice: str, params=()) -> PolicyOption:
    """Map an operator choice and its parameters to a policy variant.

    Parameters are only checked for presence here; the compiler validates
    their content.
    """
    cls = CHOICES.get(choice)
    if cls is None or cls not in ALLOWED_OPTIONS[direction]:
        msg = (
            f'Unknown {direction} policy {choice!r}, '
            f'expected one of: {", ".join(choices_for(direction))}'
        )
        raise InvalidPolicy(msg)

    params = tuple(p for p in (params or ()) if p)
    if cls is SpecificNetworks:
        if not params:
            msg = f'{direction} policy "networks" needs at least one network'
            raise InvalidPolicy(msg)
        return SpecificNetworks(params)
    if cls is SpecificInterfaces:
        if not params:
            msg = f'{direction} policy "interfaces" needs at least one interface'
            raise InvalidPolicy(msg)
        return SpecificInterfaces(params)
    if params:
        msg = f'{direction} policy {choice!r} takes no parameters'
        raise InvalidPolicy(msg)
    return cls()
