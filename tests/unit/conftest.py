"""Shared fixtures for unit tests."""

from __future__ import annotations

import pytest

from tenantforms.core.config import AppSettings
from tenantforms.resolver.registry import build_default_registry
from tests.fakes import MemoryCacheBackend, MemoryDataSource


@pytest.fixture
def registry():
    return build_default_registry(AppSettings())


@pytest.fixture
def data_source():
    return MemoryDataSource()


@pytest.fixture
def cache():
    return MemoryCacheBackend()
