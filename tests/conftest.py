"""Root pytest configuration for all tests."""

import logging

# urllib3 logs every retry and connection at DEBUG/WARNING; keep test output readable.
logging.getLogger("urllib3").setLevel(logging.WARNING)
