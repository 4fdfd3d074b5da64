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

"""IPv4 network validation in prefix notation (``a.b.c.d/n``)."""

from __future__ import annotations

import dataclasses
import ipaddress
import re

from ._errors import InvalidFormat, InvalidRange

_NETWORK_RE = re.compile(
    r'^([0-9]{1,3})\.([0-9]{1,3})\.([0-9]{1,3})\.([0-9]{1,3})/([0-9]{1,2})$',
)

# RFC 1918 ranges, informational only.
_PRIVATE_NETWORKS = (
    ipaddress.IPv4Network('10.0.0.0/8'),
    ipaddress.IPv4Network('172.16.0.0/12'),
    ipaddress.IPv4Network('192.168.0.0/16'),
)


@dataclasses.dataclass(frozen=True)
class Network:
    """A validated address with its prefix length.

    ``address`` keeps host bits as typed (``10.0.0.1/24`` stays
    ``10.0.0.1``), since interface addresses are written that way.
    """

    address: str
    prefix_length: int

    def __str__(self) -> str:
        return f'{self.address}/{self.prefix_length}'

    @property
    def host_cidr(self) -> str:
        """The address alone, as a /32."""
        return f'{self.address}/32'

    @property
    def network_cidr(self) -> str:
        """The address with host bits cleared, e.g. ``10.0.0.0/24``."""
        net = ipaddress.IPv4Network(str(self), strict=False)
        return str(net)

    @property
    def is_private(self) -> bool:
        addr = ipaddress.IPv4Address(self.address)
        return any(addr in net for net in _PRIVATE_NETWORKS)


def validate_network(text: str) -> Network:
    """Parse and range-check *text*.

    Raises ``InvalidFormat`` if the grammar does not match and
    ``InvalidRange`` if an octet exceeds 255 or the prefix exceeds 32.
    Public and private networks are both accepted.
    """
    m = _NETWORK_RE.match(text.strip()) if isinstance(text, str) else None
    if m is None:
        msg = f'Invalid network format: {text!r}'
        raise InvalidFormat(msg)

    octets = [int(g) for g in m.groups()[:4]]
    prefix_length = int(m.group(5))

    if any(o > 255 for o in octets):
        msg = f'Invalid network: {text} (octets out of range)'
        raise InvalidRange(msg)
    if prefix_length > 32:
        msg = f'Invalid network: {text} (prefix length out of range)'
        raise InvalidRange(msg)

    return Network(
        address='.'.join(str(o) for o in octets),
        prefix_length=prefix_length,
    )


def is_valid_network(text: str) -> bool:
    try:
        validate_network(text)
    except (InvalidFormat, InvalidRange):
        return False
    return True
