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

"""Settings loading tests."""

import pytest

from wgfabrik.core import SettingsError
from wgfabrik.core.options import DEFAULT_SETTINGS, load_settings, settings_from_dict


def test_defaults():
    assert DEFAULT_SETTINGS.config_dir == '/etc/wireguard'
    assert str(DEFAULT_SETTINGS.key_path) == '/etc/wireguard/keys.txt'
    assert str(DEFAULT_SETTINGS.client_root) == '/etc/wireguard/client_configs'
    assert DEFAULT_SETTINGS.persistent_keepalive == 25
    assert DEFAULT_SETTINGS.outbound_device == 'eth0'
    assert DEFAULT_SETTINGS.paths.iptables == 'iptables'


def test_load(tmp_path):
    path = tmp_path / 'wgfabrik.yml'
    path.write_text(
        'config_dir: /srv/wg\n'
        'client_dns: 9.9.9.9\n'
        'default_endpoint: 203.0.113.7\n'
        'outbound_device: ens3\n'
        'paths:\n'
        '  wg: /usr/bin/wg\n',
        encoding='utf-8',
    )
    settings = load_settings(path)
    assert settings.root.as_posix() == '/srv/wg'
    assert settings.client_dns == '9.9.9.9'
    assert settings.default_endpoint == '203.0.113.7'
    assert settings.outbound_device == 'ens3'
    assert settings.paths.wg == '/usr/bin/wg'
    assert settings.paths.systemctl == 'systemctl'


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / 'wgfabrik.yml'
    path.write_text('', encoding='utf-8')
    assert load_settings(path) == settings_from_dict(None)


def test_unknown_keys_are_ignored(caplog):
    settings = settings_from_dict({'client_dns': '1.1.1.1', 'colour': 'blue', 'paths': {'ip': 'x'}})
    assert settings.client_dns == '1.1.1.1'
    assert 'Unknown settings key: colour' in caplog.text
    assert 'Unknown settings key: paths.ip' in caplog.text


def test_quoted_bools_stay_strings():
    settings = settings_from_dict({'client_dns': 'true', 'outbound_device': 'False'})
    assert settings.client_dns == 'true'
    assert settings.outbound_device == 'False'


@pytest.mark.parametrize(
    'data',
    [
        {'client_dns': True},
        {'outbound_device': False},
        {'default_endpoint': 8.8},
        {'persistent_keepalive': True},
        {'persistent_keepalive': '25'},
        {'paths': {'iptables': None}},
    ],
    ids=['dns-bool', 'device-bool', 'endpoint-float', 'keepalive-bool', 'keepalive-str', 'path-null'],
)
def test_wrong_value_types(data):
    with pytest.raises(SettingsError, match='must be'):
        settings_from_dict(data)


def test_input_mapping_is_not_modified():
    data = {'paths': {'wg': '/usr/bin/wg'}}
    settings_from_dict(data)
    assert data == {'paths': {'wg': '/usr/bin/wg'}}


@pytest.mark.parametrize(
    'text',
    ['- a\n- b\n', 'just a string\n', 'paths: [1, 2]\n', 'persistent_keepalive: often\n'],
)
def test_invalid_documents(tmp_path, text):
    path = tmp_path / 'wgfabrik.yml'
    path.write_text(text, encoding='utf-8')
    with pytest.raises(SettingsError):
        load_settings(path)


def test_unparsable_yaml(tmp_path):
    path = tmp_path / 'wgfabrik.yml'
    path.write_text('a: [unclosed\n', encoding='utf-8')
    with pytest.raises(SettingsError, match='Cannot parse'):
        load_settings(path)


def test_missing_file(tmp_path):
    with pytest.raises(SettingsError):
        load_settings(tmp_path / 'nope.yml')
    assert load_settings(tmp_path / 'nope.yml', missing_ok=True) == settings_from_dict({})
