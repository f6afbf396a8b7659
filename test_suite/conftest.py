"""
Pytest configuration for nscert tests.

This module provides shared fixtures and configuration for all tests.
"""
import sys
from pathlib import Path
import pytest

# Add parent directory to path so we can import nscert.py
sys.path.insert(0, str(Path(__file__).parent.parent))

import mock_data


@pytest.fixture
def mock_home_dir(tmp_path, monkeypatch):
    """Mock home directory for testing."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def cert_dir(tmp_path):
    """Directory that receives the bundle."""
    path = tmp_path / "netskope"
    path.mkdir()
    return path


@pytest.fixture
def profile_path(tmp_path):
    """Shell startup file the tool appends export lines to."""
    return tmp_path / ".zshenv"


@pytest.fixture
def existing_bundle(cert_dir):
    """A bundle left behind by an earlier run."""
    bundle = cert_dir / "netskope-cert-bundle.pem"
    bundle.write_bytes(mock_data.OLD_BUNDLE)
    return bundle


@pytest.fixture
def tenant_presets(cert_dir):
    """Presets that make a run fully non-interactive."""
    return {
        'tenant_name': mock_data.TENANT_NAME,
        'org_key': mock_data.ORG_KEY,
        'cert_name': 'netskope-cert-bundle.pem',
        'cert_dir': str(cert_dir),
        'recreate_cert': False,
        'tenant_bundle': False,
    }


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests that run the whole pipeline"
    )
