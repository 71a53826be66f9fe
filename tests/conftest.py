# Path: tests/conftest.py
"""
Pytest Configuration and Shared Fixtures for ban_extractor

Provides common test fixtures used across all test modules.
"""

import gzip
import logging
import os
import sys
import tempfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


# ==============================================================================
# SAMPLE DOCUMENTS
# ==============================================================================

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

RECORD_A = (
    '<att:MixedBillService id="A">'
    '<TITAN_BAN>1001</TITAN_BAN>'
    '<Name>Alpha &amp; Sons</Name>'
    '</att:MixedBillService>'
)

RECORD_B = (
    '<att:MixedBillService id="B">'
    '<TITAN_BAN>1002</TITAN_BAN>'
    '<Name>Beta</Name>'
    '<Charge amount="10.50" currency="USD">Monthly</Charge>'
    '</att:MixedBillService>'
)

TWO_RECORD_DOCUMENT = (
    f'{XML_DECLARATION}\n'
    '<att:BillExtract xmlns:att="http://www.att.com/billing">'
    f'{RECORD_A}{RECORD_B}'
    '</att:BillExtract>'
)


@pytest.fixture
def two_record_xml() -> str:
    """Extract with record A (BAN 1001) followed by record B (BAN 1002)."""
    return TWO_RECORD_DOCUMENT


@pytest.fixture
def two_record_bytes(two_record_xml) -> bytes:
    return two_record_xml.encode('utf-8')


@pytest.fixture
def record_a() -> str:
    return RECORD_A


@pytest.fixture
def record_b() -> str:
    return RECORD_B


@pytest.fixture
def indented_xml() -> str:
    """Pretty-printed extract; whitespace must survive extraction."""
    return (
        f'{XML_DECLARATION}\n'
        '<att:BillExtract xmlns:att="http://www.att.com/billing">\n'
        '  <att:MixedBillService seq="1">\n'
        '    <TITAN_BAN>2001</TITAN_BAN>\n'
        '    <Account>\n'
        '      <Status>Active</Status>\n'
        '    </Account>\n'
        '  </att:MixedBillService>\n'
        '  <att:MixedBillService seq="2">\n'
        '    <TITAN_BAN>2002</TITAN_BAN>\n'
        '    <Account>\n'
        '      <Status>Closed</Status>\n'
        '    </Account>\n'
        '  </att:MixedBillService>\n'
        '</att:BillExtract>\n'
    )


@pytest.fixture
def duplicate_ban_xml() -> str:
    """Two records carrying the same BAN; only the first may be extracted."""
    return (
        '<att:BillExtract xmlns:att="http://www.att.com/billing">'
        '<att:MixedBillService id="first"><TITAN_BAN>3003</TITAN_BAN><Total>1</Total></att:MixedBillService>'
        '<att:MixedBillService id="second"><TITAN_BAN>3003</TITAN_BAN><Total>2</Total></att:MixedBillService>'
        '</att:BillExtract>'
    )


# ==============================================================================
# FILE FIXTURES
# ==============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def extract_file(temp_dir, two_record_bytes) -> Path:
    """Plain XML extract on disk."""
    path = temp_dir / 'bills.xml'
    path.write_bytes(two_record_bytes)
    return path


@pytest.fixture
def gzip_extract_file(temp_dir, two_record_bytes) -> Path:
    """Gzipped XML extract on disk."""
    path = temp_dir / 'bills.xml.gz'
    path.write_bytes(gzip.compress(two_record_bytes))
    return path


# ==============================================================================
# CONFIG FIXTURES
# ==============================================================================

DEFAULT_TEST_CONFIG = {
    'environment': 'test',
    'record_tag': 'att:MixedBillService',
    'identifier_tag': 'TITAN_BAN',
    'read_chunk_size': 64,
    'zip_compression_level': 9,
    'ssh_port': 22,
    'ssh_timeout': 5,
    'ssh_max_retries': 3,
    'log_dir': None,
    'log_level': 'DEBUG',
    'log_console': False,
}


@pytest.fixture
def mock_config():
    """Create a mock ConfigLoader for testing."""
    config = MagicMock()
    config.get.side_effect = lambda key, default=None: DEFAULT_TEST_CONFIG.get(key, default)
    return config


@pytest.fixture
def mock_env_vars():
    """Provide mock environment variables for testing."""
    env_vars = {
        'BAN_EXTRACTOR_ENVIRONMENT': 'test',
        'BAN_EXTRACTOR_RECORD_TAG': 'bill:Record',
        'BAN_EXTRACTOR_IDENTIFIER_TAG': 'AccountNo',
        'BAN_EXTRACTOR_READ_CHUNK_SIZE': '4096',
        'BAN_EXTRACTOR_SSH_PORT': '2222',
        'BAN_EXTRACTOR_LOG_CONSOLE': 'false',
    }

    with patch.dict(os.environ, env_vars, clear=False):
        yield env_vars


@pytest.fixture
def reset_singletons():
    """Reset ConfigLoader singleton between tests."""
    from ban_extractor.config_loader import ConfigLoader
    ConfigLoader._instance = None
    ConfigLoader._initialized = False

    yield

    ConfigLoader._instance = None
    ConfigLoader._initialized = False


# ==============================================================================
# UTILITY FIXTURES
# ==============================================================================

@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after a test reconfigures logging."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level

    yield root_logger

    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
