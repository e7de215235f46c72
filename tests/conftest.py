"""Shared test fixtures for vs-provenance."""

from __future__ import annotations

import os

import pytest

from core.config import AppSettings
from core.domain.models import CandidateSource
from tests.fakes import PRIMARY_ORG, SECONDARY_ORG


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Keep developer env vars and .env files out of AppSettings."""
    for key in list(os.environ):
        if key.upper().startswith("VS_PROVENANCE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def sources() -> list[CandidateSource]:
    return [
        CandidateSource(organization=PRIMARY_ORG, project="DevDiv", definition="Roslyn-Signed"),
        CandidateSource(organization=SECONDARY_ORG, project="internal", definition="roslyn-official"),
    ]


@pytest.fixture
def settings(sources) -> AppSettings:
    return AppSettings(
        _env_file=None,
        organization_url=PRIMARY_ORG,
        candidate_sources=sources,
        access_token="test-pat",
        branches=["main"],
    )
