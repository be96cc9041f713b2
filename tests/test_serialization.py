# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for tree serialization and import payloads."""

import json
from datetime import datetime, timezone

import pytest

from debugconfigs import (
    ConfigNode,
    InvalidFormatError,
    InvalidLabelError,
    deserialize_nodes,
    serialize_nodes,
)
from debugconfigs.serialization import (
    FORMAT_VERSION,
    build_envelope,
    dumps,
    loads,
    parse_payload,
)


@pytest.fixture
def tree():
    dev = ConfigNode.create_parent('Development', [
        ConfigNode.create_leaf('port', '3000'),
        ConfigNode.create_leaf('host', 'localhost'),
    ])
    return [
        ConfigNode.create_parent('Environment', [dev, ConfigNode('Empty')]),
        ConfigNode.create_leaf('flag', True),
    ]


class TestSerialize:
    """Tests for serialize_nodes."""

    def test_shape(self, tree):
        assert serialize_nodes(tree) == [
            {'label': 'Environment', 'children': [
                {'label': 'Development', 'children': [
                    {'label': 'port', 'value': '3000'},
                    {'label': 'host', 'value': 'localhost'},
                ]},
                {'label': 'Empty'},
            ]},
            {'label': 'flag', 'value': 'true'},
        ]

    def test_json_compatible(self, tree):
        assert json.loads(dumps(serialize_nodes(tree))) == serialize_nodes(tree)

    def test_round_trip(self, tree):
        """Test labels, values and child order survive a round trip."""
        data = serialize_nodes(tree)
        assert serialize_nodes(deserialize_nodes(data)) == data

    def test_round_trip_builds_new_nodes(self, tree):
        rebuilt = deserialize_nodes(serialize_nodes(tree))
        assert rebuilt[0] is not tree[0]
        assert rebuilt[0].children[0].children[1].value == 'localhost'


class TestDeserialize:
    """Tests for deserialize_nodes."""

    def test_dotted_label(self):
        with pytest.raises(InvalidLabelError):
            deserialize_nodes([{'label': 'ok'}, {'label': 'a.b', 'value': '1'}])

    def test_nested_dotted_label(self):
        with pytest.raises(InvalidLabelError):
            deserialize_nodes([{'label': 'p', 'children': [{'label': 'x.y'}]}])

    def test_ignores_legacy_keys(self):
        nodes = deserialize_nodes([{'label': 'a', 'value': '1', 'collapsibleState': 0}])
        assert nodes[0].value == '1'

    def test_null_value_and_empty_children(self):
        nodes = deserialize_nodes([{'label': 'a', 'value': None, 'children': []}])
        assert nodes[0].value is None
        assert nodes[0].children is None

    def test_scalar_values_stringified(self):
        nodes = deserialize_nodes([{'label': 'n', 'value': 5}])
        assert nodes[0].value == '5'

    @pytest.mark.parametrize('data', [
        {'label': 'a'},
        ['not a node'],
        [{'value': '1'}],
        [{'label': 'a', 'children': 'nope'}],
        [{'label': 'a', 'value': '1', 'children': [{'label': 'b'}]}],
        [{'label': 'a', 'value': {'nested': 1}}],
    ])
    def test_malformed(self, data):
        with pytest.raises(InvalidFormatError):
            deserialize_nodes(data)


class TestEnvelope:
    """Tests for the export envelope and import payloads."""

    def test_envelope(self, tree):
        moment = datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
        envelope = build_envelope(tree, moment)
        assert envelope['version'] == FORMAT_VERSION == '1.0'
        assert envelope['exportedAt'] == '2025-01-02T03:04:05.678Z'
        assert envelope['treeState'] == serialize_nodes(tree)

    def test_envelope_default_timestamp(self, tree):
        assert build_envelope(tree)['exportedAt'].endswith('Z')

    def test_parse_envelope(self, tree):
        nodes = parse_payload(build_envelope(tree))
        assert serialize_nodes(nodes) == serialize_nodes(tree)

    def test_parse_bare_array(self, tree):
        nodes = parse_payload(serialize_nodes(tree))
        assert serialize_nodes(nodes) == serialize_nodes(tree)

    @pytest.mark.parametrize('data', [
        {'version': '1.0'},
        {'treeState': 'x'},
        'text',
        42,
        None,
    ])
    def test_parse_invalid_shape(self, data):
        with pytest.raises(InvalidFormatError):
            parse_payload(data)

    def test_parse_invalid_label_reports_format_error(self):
        payload = {'treeState': [{'label': 'ok', 'value': '1'}, {'label': 'b.ad'}]}
        with pytest.raises(InvalidFormatError, match='Invalid tree data') as excinfo:
            parse_payload(payload)
        assert isinstance(excinfo.value.__cause__, InvalidLabelError)

    def test_loads_invalid_json(self):
        with pytest.raises(InvalidFormatError, match='Invalid JSON'):
            loads('{')
        assert loads('[]') == []
