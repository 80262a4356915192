from __future__ import annotations

from datetime import UTC, datetime

import pytest

from repoaudit.models import RepositorySnapshot
from tests._fixtures.snapshot_builder import SnapshotBuilder


@pytest.fixture
def builder() -> SnapshotBuilder:
    """Provide a fresh snapshot builder seeded with a healthy repository."""
    return SnapshotBuilder()


@pytest.fixture
def snapshot(builder: SnapshotBuilder) -> RepositorySnapshot:
    return builder.build()


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation time a few days after the seeded last commit."""
    return datetime(2026, 2, 14, tzinfo=UTC)
