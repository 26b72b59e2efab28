"""Pytest configuration and shared fixtures for the mdmermaid test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Generator

import pytest
from hypothesis import Phase, Verbosity, settings
from utils import FakeRenderer, InMemoryFileAccess, cleanup_test_dir, create_test_temp_dir

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "documents"


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "mmdc: Tests that run the real Mermaid CLI")


def pytest_collection_modifyitems(config, items):
    """Skip tests that need the real Mermaid CLI when it is not installed."""
    if shutil.which("mmdc") is not None:
        return
    skip_mmdc = pytest.mark.skip(reason="mmdc (@mermaid-js/mermaid-cli) not found on PATH")
    for item in items:
        if "mmdc" in item.keywords:
            item.add_marker(skip_mmdc)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for test files.

    Yields
    ------
    Path
        Temporary directory path that will be cleaned up after test.

    """
    temp_path = create_test_temp_dir()
    try:
        yield temp_path
    finally:
        cleanup_test_dir(temp_path)


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    """Provide a renderer that records calls and returns content-addressed names."""
    return FakeRenderer()


@pytest.fixture
def failing_renderer() -> FakeRenderer:
    """Provide a renderer that fails on any diagram containing ``BROKEN``."""
    return FakeRenderer(fail_on=("BROKEN",))


@pytest.fixture
def memory_files() -> InMemoryFileAccess:
    """Provide an empty in-memory file store."""
    return InMemoryFileAccess()


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the markdown fixture documents."""
    return FIXTURES_DIR


@pytest.fixture
def sample_markdown() -> str:
    """Provide a document with one of every diagram form.

    Returns
    -------
    str
        Markdown with a plain diagram, a comment-mode diagram, an ordinary
        code block and a diagram link.

    """
    return """# Architecture

Some text before.

```mermaid
graph TD; A-->B
```

```python
print("not a diagram")
```

```mermaid comment
sequenceDiagram
    Alice->>Bob: Hello
```

See the [flow](flow.mmd "mermaid:") for details.
"""


@pytest.fixture
def restore_root_logger() -> Generator[None, None, None]:
    """Undo handler and level changes made to the root logger."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
