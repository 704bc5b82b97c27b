"""Shared fixtures: an initialized plugin home under tmp_path."""

import pytest

from pluginctl.commands import init_plugin_system
from pluginctl.core.config import Config
from pluginctl.plugins import LifecycleController


@pytest.fixture
def config(tmp_path):
    return Config(home=tmp_path, lock_timeout=5.0)


@pytest.fixture
def initialized(config):
    init_plugin_system(config)
    return config


@pytest.fixture
def controller(initialized):
    return LifecycleController(initialized)
