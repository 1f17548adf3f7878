# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from helpers.fakes import FakeBackend, RecordingProvisioner

from gointel.tools import ContainerToolResolver, ToolRunner


@pytest.fixture
def backend() -> Iterator[FakeBackend]:
    """Return a fake backend whose worker pool is closed after the test."""
    fake = FakeBackend()
    yield fake
    fake.close()


@pytest.fixture
def provisioner() -> RecordingProvisioner:
    return RecordingProvisioner()


@pytest.fixture
def runner(backend: FakeBackend, provisioner: RecordingProvisioner) -> ToolRunner:
    """Return a runner resolving tools by bare name against the fake backend."""
    return ToolRunner(backend, ContainerToolResolver(), provisioner)
