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

"""Unit tests for the marked document model and the document store."""

import pytest

from wgfabrik.core import (
    AlreadyExists,
    Anchor,
    ClientNotFound,
    DocumentLine,
    InterfaceNotFound,
    MarkedDocument,
    NotFound,
)

BASE = """[Interface]
Address = 10.0.0.1/24
ListenPort = 51820
#!IPTABLES
#Open port for this network
PostUp = iptables -A WIREGUARD_INPUT -i eth0 -p udp --dport 51820 -j ACCEPT
#!CLIENTS
"""


@pytest.fixture
def doc():
    return MarkedDocument.parse(BASE)


class TestDocumentLine:
    def test_tagged(self):
        line = DocumentLine.parse('PublicKey = abc= #!CLIENT-alice')
        assert line == DocumentLine('PublicKey = abc=', 'CLIENT-alice')
        assert line.render() == 'PublicKey = abc= #!CLIENT-alice'

    def test_anchor_is_not_tagged(self):
        line = DocumentLine.parse('#!IPTABLES')
        assert line.tag == ''
        assert line.anchor == 'IPTABLES'

    def test_plain_comment(self):
        line = DocumentLine.parse('#Open port for this network')
        assert line.tag == ''
        assert line.anchor == ''


class TestMarkedDocument:
    def test_render_round_trips_text(self, doc):
        assert doc.render() == BASE

    def test_missing_trailing_newline_is_kept(self):
        assert MarkedDocument.parse('a\nb').render() == 'a\nb'

    @pytest.mark.parametrize(
        'text',
        [
            '',
            '\n',
            'a\n\n',
            'x  #!RULE\ny\t#!CLIENT-a\n',
            '[Interface]\r\n#!IPTABLES\r\nx #!RULE\r\n#!CLIENTS\r\n',
            'mixed\r\nendings\n',
            'a\x0cb c\n',
        ],
        ids=['empty', 'newline', 'blank-line', 'tag-separators', 'crlf', 'mixed', 'separators'],
    )
    def test_render_keeps_bytes(self, text):
        assert MarkedDocument.parse(text).render() == text

    def test_crlf_anchors_and_inserts(self):
        doc = MarkedDocument.parse('#!IPTABLES\r\n#!CLIENTS\r\n')
        assert doc.anchor_exists(Anchor.CLIENTS)
        doc.insert_after(Anchor.FIREWALL, ['x #!RULE'])
        assert doc.render() == '#!IPTABLES\r\nx #!RULE\r\n#!CLIENTS\r\n'

    def test_anchor_exists(self, doc):
        assert doc.anchor_exists(Anchor.FIREWALL)
        assert doc.anchor_exists(Anchor.CLIENTS)
        assert not doc.anchor_exists('NOPE')

    def test_value_ignores_tagged_lines(self, doc):
        doc.insert_after(Anchor.CLIENTS, ['Address = 10.9.9.9/32 #!CLIENT-x'])
        assert doc.value('Address') == '10.0.0.1/24'
        assert doc.value('ListenPort') == '51820'
        assert doc.value('DNS') is None

    def test_insert_keeps_given_order(self, doc):
        doc.insert_after(Anchor.FIREWALL, ['#first #!RULE', 'second #!RULE', 'third #!RULE'])
        texts = [line.text for line in doc.lines]
        pos = texts.index('#!IPTABLES')
        assert texts[pos + 1 : pos + 4] == ['#first', 'second', 'third']

    def test_insert_after_every_occurrence(self):
        doc = MarkedDocument.parse('#!X\na\n#!X\n')
        doc.insert_after('X', ['n #!T'])
        assert doc.render() == '#!X\nn #!T\na\n#!X\nn #!T\n'

    def test_insert_missing_anchor(self, doc):
        with pytest.raises(NotFound):
            doc.insert_after('NOPE', ['x #!RULE'])

    def test_insert_refuses_anchor_lines(self, doc):
        with pytest.raises(ValueError):
            doc.insert_after(Anchor.CLIENTS, ['#!CLIENTS'])

    def test_delete_by_tag_everywhere(self, doc):
        doc.insert_after(Anchor.FIREWALL, ['a #!RULE'])
        doc.insert_after(Anchor.CLIENTS, ['b #!RULE', 'c #!CLIENT-x'])
        assert doc.delete_by_tag('RULE') == 2
        assert not doc.tag_exists('RULE')
        assert doc.tag_exists('CLIENT-x')

    def test_delete_never_touches_anchors(self, doc):
        doc.delete_by_tag('IPTABLES')
        doc.delete_by_tag('CLIENTS')
        assert doc.render() == BASE

    def test_delete_refuses_empty_tag(self, doc):
        doc.insert_after(Anchor.FIREWALL, ['x #!RULE'])
        with pytest.raises(ValueError):
            doc.delete_by_tag('')
        assert doc.anchor_exists(Anchor.FIREWALL)
        assert doc.anchor_exists(Anchor.CLIENTS)
        assert doc.value('Address') == '10.0.0.1/24'

    def test_delete_then_insert_is_idempotent(self, doc):
        lines = ['#INPUT #!RULE', 'PostUp = x #!RULE', 'PostDown = y #!RULE']
        for _ in range(3):
            doc.delete_by_tag('RULE')
            doc.insert_after(Anchor.FIREWALL, lines)
        once = MarkedDocument.parse(BASE)
        once.insert_after(Anchor.FIREWALL, lines)
        assert doc.render() == once.render()

    def test_tags_in_order_of_first_appearance(self, doc):
        doc.insert_after(Anchor.CLIENTS, ['b #!CLIENT-b', 'a #!CLIENT-a'])
        doc.insert_after(Anchor.FIREWALL, ['r #!RULE'])
        assert doc.tags() == ['RULE', 'CLIENT-b', 'CLIENT-a']
        assert [line.text for line in doc.lines_with_tag('CLIENT-a')] == ['a']


class TestDocumentStore:
    def test_create_load(self, store, doc):
        store.create(3, doc)
        assert store.exists(3)
        assert store.load(3).render() == BASE
        assert store.interface_indices() == [3]

    def test_create_twice(self, store, doc):
        store.create(0, doc)
        with pytest.raises(AlreadyExists):
            store.create(0, doc)

    def test_file_mode(self, store, doc):
        store.create(0, doc)
        assert store.interface_path(0).stat().st_mode & 0o777 == 0o600

    def test_indices_sorted_and_filtered(self, store, doc, settings):
        for index in (10, 2):
            store.create(index, doc)
        (settings.root / 'wgx.conf').write_text('')
        (settings.root / 'keys.txt').write_text('')
        assert store.interface_indices() == [2, 10]

    def test_load_missing(self, store):
        with pytest.raises(InterfaceNotFound):
            store.load(7)

    def test_edit_saves_on_success(self, store, doc):
        store.create(0, doc)
        with store.edit(0) as d:
            d.insert_after(Anchor.FIREWALL, ['x #!RULE'])
        assert store.load(0).tag_exists('RULE')

    def test_edit_discards_on_error(self, store, doc):
        store.create(0, doc)
        with pytest.raises(RuntimeError), store.edit(0) as d:
            d.insert_after(Anchor.FIREWALL, ['x #!RULE'])
            raise RuntimeError
        assert store.load(0).render() == BASE

    def test_delete(self, store, doc):
        store.create(0, doc)
        store.delete(0)
        assert not store.exists(0)
        with pytest.raises(InterfaceNotFound):
            store.delete(0)

    def test_client_documents(self, store):
        path = store.write_client('alice', '[Interface]\n')
        assert path.parent == store.client_root
        assert store.read_client('alice') == '[Interface]\n'
        with pytest.raises(AlreadyExists):
            store.write_client('alice', '')
        assert store.delete_client('alice')
        assert not store.delete_client('alice')
        with pytest.raises(ClientNotFound):
            store.read_client('alice')
