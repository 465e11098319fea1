# conftest.py
"""
Pytest configuration for the stepwise test suite.

Registers custom markers and tags tests by the area they exercise.
"""


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "cli: marks tests that invoke the command line interface")
    config.addinivalue_line("markers", "config: marks tests that load pipeline files")


def pytest_collection_modifyitems(config, items):
    """Add markers to tests based on the module they live in."""
    for item in items:
        module = getattr(getattr(item, "module", None), "__name__", "")

        if module.endswith("test_cli"):
            item.add_marker("cli")

        if module.endswith("test_loader"):
            item.add_marker("config")
