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

"""Interface and client orchestration."""

from ._client_manager import (
    Client,
    ClientManager,
    ClientSummary,
    validate_client_name,
)
from ._interface_manager import (
    MAX_INDEX,
    MAX_PORT,
    MIN_INDEX,
    MIN_PORT,
    Interface,
    InterfaceManager,
    client_names,
)

__all__ = [
    'MAX_INDEX',
    'MAX_PORT',
    'MIN_INDEX',
    'MIN_PORT',
    'Client',
    'ClientManager',
    'ClientSummary',
    'Interface',
    'InterfaceManager',
    'client_names',
    'validate_client_name',
]
