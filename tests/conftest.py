"""
Pytest configuration for local imports and sample calendars.
"""

# Standard Library
import os
import pathlib
import sys

# PIP3 modules
import PIL.Image
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


SAMPLE_CONFIG = """\
name: Sample calendar
settings:
  url-base: https://cal.example.org
  output:
    quality: 80
    height: {height}
holidays:
  2024-01-01: New Year
birthdays:
  1990-01-17: Alex
pages:
  - year: 2024
    month: 0
    source: photos/title.jpg
    target: pages/title.jpg
    page-title: Our year
    title: Family 2024
    subtitle: Photos of the year
  - year: 2024
    month: 1
    source: photos/january.jpg
    target: pages/january.png
    page-title: Snow
    coordinate: "47.5, 8.25"
  - year: 2024
    month: 2
    target: pages/february.jpg
    page-title: Quote
    design:
      type: text
      config:
        text: First line<br>second line
        author: Someone
  - year: 2024
    month: 3
    target: pages/march.jpg
    page-title: Colors
    design:
      type: default-jtac
      config:
        color: [200, 100, 50]
"""


#============================================
def write_sample_calendar(data_dir: pathlib.Path, identifier: str = "sample", height: int = 400) -> pathlib.Path:
	"""
	Write a sample calendar with generated photos.

	Args:
		data_dir: Data root.
		identifier: Calendar directory name.
		height: Output page height.

	Returns:
		Calendar directory.
	"""
	calendar_dir = data_dir / "calendar" / identifier
	photo_dir = calendar_dir / "photos"
	photo_dir.mkdir(parents=True, exist_ok=True)
	PIL.Image.new("RGB", (300, 200), (30, 120, 200)).save(photo_dir / "title.jpg")
	PIL.Image.new("RGB", (300, 200), (220, 220, 220)).save(photo_dir / "january.jpg")
	(calendar_dir / "config.yml").write_text(SAMPLE_CONFIG.format(height=height), encoding="utf-8")
	return calendar_dir


@pytest.fixture
def sample_calendar(tmp_path: pathlib.Path) -> pathlib.Path:
	return write_sample_calendar(tmp_path)


@pytest.fixture
def full_size_calendar(tmp_path: pathlib.Path) -> pathlib.Path:
	# 4000 px high pages keep every design size unscaled
	return write_sample_calendar(tmp_path, height=4000)
