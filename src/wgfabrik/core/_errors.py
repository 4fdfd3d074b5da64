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

"""Exception hierarchy shared by all wgfabrik modules.

Validation errors (``InvalidAddress``, ``InvalidName``, ``InvalidPolicy``,
``OutOfRange``) are recoverable: the caller may ask the operator again.
``Incomplete`` means a multi-step write stopped halfway and the named
artifact needs manual attention.
"""


class WgFabrikError(Exception):
    """Base class for all wgfabrik errors."""


class InvalidAddress(WgFabrikError):
    """A network address in prefix notation was rejected."""


class InvalidFormat(InvalidAddress):
    """The text does not match the ``a.b.c.d/n`` grammar."""


class InvalidRange(InvalidAddress):
    """An octet is above 255 or the prefix length is above 32."""


class InvalidName(WgFabrikError):
    """A client or network device name cannot be used."""


class InvalidPolicy(WgFabrikError):
    """A policy option is not defined for a direction or lacks parameters."""


class OutOfRange(WgFabrikError):
    """An interface index or port is outside its allowed bounds."""


class AlreadyExists(WgFabrikError):
    """The identity is already in use."""


class DuplicateClientName(AlreadyExists):
    """A client with this name already has a document or a peer block."""


class NotFound(WgFabrikError):
    """The requested record or artifact does not exist."""


class InterfaceNotFound(NotFound):
    """No configuration document exists for the interface."""


class ClientNotFound(NotFound):
    """The interface document holds no peer block for the client."""


class Incomplete(WgFabrikError):
    """A multi-step write stopped after its first step.

    ``artifact`` is the path that now exists without its counterpart.
    """

    def __init__(self, msg: str, artifact: str = '') -> None:
        super().__init__(msg)
        self.artifact = artifact


class SettingsError(WgFabrikError):
    """The settings file is unreadable or lacks a required value."""


class CommandError(WgFabrikError):
    """An external tool (wg, systemctl, iptables) failed."""

    def __init__(self, cmd: list[str], returncode: int, stderr: str = '') -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        msg = f"'{' '.join(cmd)}' failed with exit code {returncode}"
        if stderr:
            msg += f': {stderr.strip()}'
        super().__init__(msg)


class RenderError(WgFabrikError):
    """A document template could not be rendered."""
