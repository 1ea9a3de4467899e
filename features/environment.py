"""
Behave environment configuration

This file is run before and after test scenarios to set up and tear down
the test environment.
"""

import os
import shutil
import sys
import tempfile
from pathlib import Path

# Add project root to Python path so we can import the readit package
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from readit.logging_config import reset_indent  # noqa: E402


def before_scenario(context, scenario):
    """Run before each scenario"""
    reset_indent()
    context.work_dir = Path(tempfile.mkdtemp(prefix="readit-behave-"))
    context.comments_root = context.work_dir / "comments"
    for name in ("document", "comments", "resolved", "error"):
        if hasattr(context, name):
            delattr(context, name)


def after_scenario(context, scenario):
    """Run after each scenario"""
    shutil.rmtree(context.work_dir, ignore_errors=True)
