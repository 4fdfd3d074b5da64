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

from ._address import Network, is_valid_network, validate_network
from ._document import (
    CLIENT_TAG_PREFIX,
    RULE_TAG,
    Anchor,
    DocumentLine,
    MarkedDocument,
    client_tag,
)
from ._errors import (
    AlreadyExists,
    ClientNotFound,
    CommandError,
    DuplicateClientName,
    Incomplete,
    InterfaceNotFound,
    InvalidAddress,
    InvalidFormat,
    InvalidName,
    InvalidPolicy,
    InvalidRange,
    NotFound,
    OutOfRange,
    RenderError,
    SettingsError,
    WgFabrikError,
)
from ._keys import KeyPair, KeyRegistry, KeySource
from ._store import DocumentStore

__all__ = [
    'CLIENT_TAG_PREFIX',
    'RULE_TAG',
    'AlreadyExists',
    'Anchor',
    'ClientNotFound',
    'CommandError',
    'DocumentLine',
    'DocumentStore',
    'DuplicateClientName',
    'Incomplete',
    'InterfaceNotFound',
    'InvalidAddress',
    'InvalidFormat',
    'InvalidName',
    'InvalidPolicy',
    'InvalidRange',
    'KeyPair',
    'KeyRegistry',
    'KeySource',
    'MarkedDocument',
    'Network',
    'NotFound',
    'OutOfRange',
    'RenderError',
    'SettingsError',
    'WgFabrikError',
    'client_tag',
    'is_valid_network',
    'validate_network',
]
