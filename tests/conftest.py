"""
Pytest configuration for pagequill
"""

import logging
import sys

import pytest
from PIL import Image

from pagequill import DocumentOptions, LayoutDocument, ScratchPool


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    # Clear all existing handlers
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    # Set up console-only logging for tests
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)  # Only show warnings and errors during tests

    formatter = logging.Formatter(
        '%(name)s - %(levelname)s - %(message)s'
    )
    console_handler.setFormatter(formatter)

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    # Cleanup after test
    root_logger.handlers.clear()


@pytest.fixture
def options():
    """400x800 pages with 50pt margins: a 300x700 margin box."""
    return DocumentOptions(page_size=(400, 800), margins=50)


@pytest.fixture
def document(options):
    """Document on page 1 with a captured scratch prototype."""
    doc = LayoutDocument(options)
    doc.capture_prototype()
    return doc


@pytest.fixture
def pool():
    """Scratch pool private to one test."""
    return ScratchPool()


@pytest.fixture
def png_path(tmp_path):
    """A 40x20 RGB PNG file."""
    path = tmp_path / "swatch.png"
    Image.new("RGB", (40, 20), (200, 30, 30)).save(path)
    return path


@pytest.fixture
def rgba_png_path(tmp_path):
    """A 10x10 PNG with transparency."""
    path = tmp_path / "overlay.png"
    Image.new("RGBA", (10, 10), (0, 120, 255, 128)).save(path)
    return path


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    # Ignore logging errors during tests
    logging.raiseExceptions = False
