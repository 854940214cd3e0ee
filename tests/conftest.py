"""
Pytest configuration for local imports and shared row fixtures.
"""

# Standard Library
import os
import pathlib
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


#============================================
@pytest.fixture
def sample_csv(tmp_path: pathlib.Path) -> pathlib.Path:
	"""
	Write a small two-set row table.

	Returns:
		Path to the CSV file.
	"""
	path = tmp_path / "rows.csv"
	lines = ["Count,Unit Serial Number,QR Code Text"]
	for count in (1, 2, 3, 1, 2):
		lines.append(f"{count},SN-{count:04d},https://example.com/u/{count}")
	path.write_text("\n".join(lines) + "\n", encoding="utf-8")
	return path
