# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures."""

import logging

import pytest

from debugconfigs import ConfigTreeStore, MemoryState


@pytest.fixture
def state():
    return MemoryState()


@pytest.fixture
def store(state):
    """Store with Environment > Development > (port, host)."""
    store = ConfigTreeStore(state=state)
    env = store.add_root_item('Environment')
    dev = store.add_child_to_item(env, 'Development')
    store.add_child_to_item(dev, 'port', '3000')
    store.add_child_to_item(dev, 'host', 'localhost')
    return store


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger('debugconfigs')
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
