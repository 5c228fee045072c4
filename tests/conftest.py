"""
Pytest configuration for local imports and shared fixtures.
"""

# Standard Library
import os
import sys

# PIP3 modules
import pytest

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()

import paginated_report.config  # noqa: E402


#============================================
@pytest.fixture
def geometry_750() -> "paginated_report.config.PageGeometry":
	"""
	Page geometry with a 750pt usable height.
	"""
	return paginated_report.config.PageGeometry(width=612.0, height=850.0, margin=50.0)
