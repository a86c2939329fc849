"""Pytest configuration and shared fixtures."""

import pytest

from chatextract.config import CommandConfig, ExtractorSettings
from chatextract.extraction import GroupStateStore, ResponseIngestor
from chatextract.plugin import ExtractorPlugin


SAMPLE_RESPONSE = """<think>嗯？新人？</think>
欢迎欢迎～
<memory>1.[临时] 群友打招呼</memory>
<relationship>
  刚认识
</relationship>"""


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep CHATEXTRACT_* variables and stray .env files out of tests."""
    import os
    for key in list(os.environ):
        if key.startswith("CHATEXTRACT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def sample_response():
    return SAMPLE_RESPONSE


@pytest.fixture
def settings():
    """Settings with the default tags and two simple commands."""
    return ExtractorSettings(
        character_name="syn",
        tags=["think", "memory", "relationship"],
        commands=[
            CommandConfig(name="think", format="{name}在想：{think}"),
            CommandConfig(name="memory", format="{name}的记忆：{memory}"),
        ],
    )


@pytest.fixture
def store():
    return GroupStateStore()


@pytest.fixture
def ingestor(store, settings):
    return ResponseIngestor(store, tags=settings.tags)


@pytest.fixture
def plugin(settings):
    p = ExtractorPlugin(settings)
    yield p
    p.dispose()
