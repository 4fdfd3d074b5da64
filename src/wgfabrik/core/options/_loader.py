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

"""YAML reader for the settings file."""

import dataclasses
import logging
import pathlib

import yaml

from .._errors import SettingsError
from ._schemas import Settings, ToolPaths

logger = logging.getLogger(__name__)


def _known_fields(cls, data, context):
    names = {f.name for f in dataclasses.fields(cls)}
    known = {}
    for key, value in data.items():
        if key in names:
            known[key] = value
        else:
            logger.warning('Unknown settings key: %s%s', context, key)
    return known


def _check_types(obj, context):
    """Reject values whose YAML type does not match the declared field type."""
    for f in dataclasses.fields(obj):
        if f.type not in (str, int):
            continue
        value = getattr(obj, f.name)
        # bool is an int subclass.
        if isinstance(value, bool) or not isinstance(value, f.type):
            kind = 'a string' if f.type is str else 'an integer'
            msg = f'Settings key "{context}{f.name}" must be {kind}, got {value!r}'
            raise SettingsError(msg)


def settings_from_dict(data) -> Settings:
    """Build a ``Settings`` from a parsed YAML mapping."""
    if data is None:
        return Settings()
    if not isinstance(data, dict):
        msg = f'Settings must be a mapping, got {type(data).__name__}'
        raise SettingsError(msg)

    data = dict(data)
    paths_data = data.pop('paths', None) or {}
    if not isinstance(paths_data, dict):
        msg = 'Settings key "paths" must be a mapping'
        raise SettingsError(msg)

    kwargs = _known_fields(Settings, data, '')
    try:
        settings = Settings(**kwargs)
    except TypeError as e:
        raise SettingsError(str(e)) from e
    settings.paths = ToolPaths(**_known_fields(ToolPaths, paths_data, 'paths.'))

    _check_types(settings, '')
    _check_types(settings.paths, 'paths.')
    return settings


def load_settings(path, missing_ok: bool = False) -> Settings:
    """Load settings from the YAML file at *path*.

    With *missing_ok*, a file that does not exist yields the defaults.
    """
    path = pathlib.Path(path)
    if not path.exists():
        if missing_ok:
            logger.debug('No settings file at %s, using defaults', path)
            return Settings()
        msg = f'Settings file not found: {path}'
        raise SettingsError(msg)

    try:
        with path.open(encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        msg = f'Cannot parse settings file {path}: {e}'
        raise SettingsError(msg) from e

    settings = settings_from_dict(data)
    logger.debug('Loaded settings from %s', path)
    return settings
