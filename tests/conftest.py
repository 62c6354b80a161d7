"""Keep tests away from the real home directory and OS keychain."""

import os
import sys
import tempfile
from pathlib import Path

_test_home = tempfile.mkdtemp(prefix="bank-client-tests-")
os.environ["BANK_CLIENT_HOME"] = _test_home
os.environ["SECURE_STORE_ENABLED"] = "false"

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
