"""Root conftest — shared test configuration."""

import os

# Keep test output readable and make every dispatch visible to caplog
os.environ.setdefault("THROWRES_LOG_FORMAT", "text")
os.environ.setdefault("THROWRES_SIGNAL_LOG_LEVEL", "INFO")
