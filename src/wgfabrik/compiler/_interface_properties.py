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

"""Network device name validation."""

from __future__ import annotations

import re

from wgfabrik.core import InvalidName

# Kernel IFNAMSIZ is 16 including the terminating NUL.
MAX_INTERFACE_NAME_LENGTH = 15

# Rules end up in PostUp/PostDown, which wg-quick hands to bash.
_INTERFACE_NAME_RE = re.compile(r'^[A-Za-z0-9_.@+-]+$', re.ASCII)


class InterfaceProperties:
    """Linux network device name checks."""

    def validate_interface_name(self, name: str) -> tuple[bool, str]:
        """Check if interface name is valid. Returns (ok, error_msg)."""
        if not name:
            return False, 'Interface name is empty'
        if re.search(r'\s', name):
            return False, f"Interface name '{name}' contains spaces"
        if '/' in name:
            return False, f"Interface name '{name}' contains '/'"
        if name in ('.', '..'):
            return False, f"'{name}' is not an interface name"
        if len(name) > MAX_INTERFACE_NAME_LENGTH:
            return False, (
                f"Interface name '{name}' is longer than "
                f'{MAX_INTERFACE_NAME_LENGTH} characters'
            )
        if not _INTERFACE_NAME_RE.match(name):
            return False, (
                f"Interface name '{name}' may only contain letters, digits "
                f"and '_.@+-'"
            )
        return True, ''

    @staticmethod
    def wireguard_name(index: int) -> str:
        return f'wg{index}'


def check_interface_names(names) -> list[str]:
    """Validate every name before returning any of them.

    Raises ``InvalidName`` for the first bad entry, so a partly invalid
    list never yields rules.
    """
    props = InterfaceProperties()
    checked = []
    for name in names:
        ok, err = props.validate_interface_name(name)
        if not ok:
            raise InvalidName(err)
        checked.append(name)
    return checked
