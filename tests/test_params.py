import pathlib

import PIL.Image
import pytest

import photo_calendar as pcal
import photo_calendar.config
import photo_calendar.params

from test_config import QUOTE_CONFIG_TEXT, write_config


#============================================
def make_config(tmp_path: pathlib.Path, pages: list[dict], settings: dict | None = None) -> pcal.config.CalendarConfig:
	"""
	Build a calendar config from plain dicts.

	Args:
		tmp_path: Calendar directory.
		pages: Page mappings.
		settings: Optional settings block.

	Returns:
		CalendarConfig.
	"""
	data = {"name": "Test", "pages": pages}
	if settings is not None:
		data["settings"] = settings
	return pcal.config.parse_calendar_config(data, tmp_path)


#============================================
def test_find_page_by_number_and_month(tmp_path: pathlib.Path) -> None:
	"""
	Pages are found by number or by year and month.
	"""
	config = make_config(tmp_path, [
		{"year": 2024, "month": 0},
		{"year": 2024, "month": 1},
		{"year": 2024, "month": 2},
	])
	assert pcal.params.find_page(config, number=2).month == 2
	assert pcal.params.find_page(config, 2024, 1).number == 1
	with pytest.raises(KeyError):
		pcal.params.find_page(config, number=3)
	with pytest.raises(KeyError):
		pcal.params.find_page(config, 2025, 1)
	with pytest.raises(ValueError):
		pcal.params.find_page(config)


#============================================
def test_find_page_uses_defaults(tmp_path: pathlib.Path) -> None:
	"""
	Year and month fall back to settings.defaults.
	"""
	config = make_config(
		tmp_path,
		[{"year": 2024, "month": 0}, {"year": 2024, "month": 5}],
		{"defaults": {"year": 2024, "month": 5}},
	)
	assert pcal.params.find_page(config).number == 1


#============================================
def test_auto_url(tmp_path: pathlib.Path) -> None:
	"""
	The auto URL points to the page, or to the calendar on the title page.
	"""
	config = make_config(
		tmp_path,
		[{"year": 2024, "month": 0}, {"year": 2024, "month": 1}, {"year": 2024, "month": 2, "url": "https://example.org"}],
		{"url-base": "https://cal.example.org"},
	)
	identifier = tmp_path.name
	assert pcal.params.resolve_url(config, config.pages[0]) == f"https://cal.example.org/v/{identifier}.json"
	assert pcal.params.resolve_url(config, config.pages[1]) == f"https://cal.example.org/v/{identifier}/1"
	assert pcal.params.resolve_url(config, config.pages[2]) == "https://example.org"


#============================================
def test_target_path_default(tmp_path: pathlib.Path) -> None:
	"""
	Targets default to year-month with the source extension.
	"""
	config = make_config(tmp_path, [
		{"year": 2024, "month": 3, "source": "photos/march.png"},
		{"year": 2024, "month": 4},
		{"year": 2024, "month": 5, "target": "out/may.jpg"},
	])
	assert pcal.params.resolve_target_path(config, config.pages[0]) == tmp_path / "2024-3.png"
	assert pcal.params.resolve_target_path(config, config.pages[1]) == tmp_path / "2024-4.jpg"
	assert pcal.params.resolve_target_path(config, config.pages[2]) == tmp_path / "out" / "may.jpg"


#============================================
def test_coordinate_from_config_and_missing_exif(tmp_path: pathlib.Path) -> None:
	"""
	Decimal coordinates become DMS; photos without GPS give an empty string.
	"""
	source = tmp_path / "plain.jpg"
	PIL.Image.new("RGB", (30, 20), (10, 20, 30)).save(source)
	config = make_config(tmp_path, [
		{"year": 2024, "month": 1, "source": "plain.jpg", "coordinate": "Zurich, Switzerland"},
		{"year": 2024, "month": 2, "source": "plain.jpg"},
		{"year": 2024, "month": 3, "coordinate": "-33.5, 151.25"},
	])
	assert pcal.params.resolve_coordinate(config.pages[0], source) == "Zurich, Switzerland"
	assert pcal.params.resolve_coordinate(config.pages[1], source) == ""
	assert pcal.params.resolve_coordinate(config.pages[2], None) == "33°30′0.0000″S, 151°15′0.0000″E"


#============================================
def test_build_page_parameters(tmp_path: pathlib.Path) -> None:
	"""
	Title and subtitle only survive on the title page.
	"""
	config = make_config(
		tmp_path,
		[
			{"year": 2024, "month": 0, "title": "Our year", "subtitle": "Photos"},
			{"year": 2024, "month": 1, "title": "Ignored", "page-title": "Snow"},
		],
		{"output": {"height": 400, "quality": 70}},
	)
	title_page = pcal.params.build_page_parameters(config, number=0)
	assert title_page.is_title_page
	assert (title_page.title, title_page.subtitle) == ("Our year", "Photos")
	assert (title_page.output_width, title_page.output_height) == (600, 400)
	assert title_page.output_quality == 70

	january = pcal.params.build_page_parameters(config, 2024, 1)
	assert not january.is_title_page
	assert (january.title, january.subtitle) == (None, None)
	assert january.page_title == "Snow"
	assert january.output_format == "jpg"
	assert january.calendar_page.month == 1
	assert january.source_path is None


#============================================
def test_page_parameters_with_generated_source(tmp_path: pathlib.Path) -> None:
	"""
	Pages whose source is a design have no source path.
	"""
	write_config(tmp_path / "quote", QUOTE_CONFIG_TEXT)
	config = pcal.config.load_calendar_config(tmp_path / "quote")
	page = pcal.params.build_page_parameters(config, number=0)
	assert page.source_path is None
	assert page.source_design.design.config["author"] == "Abraham Lincoln"
	assert page.target_path == config.path / "ready" / "2024-00.jpg"
	assert page.coordinate.startswith("55°57′")
	assert page.title == "2024"
	assert page.url == "http://localhost:5000/v/quote.json"

	# default target takes the output format
	page = pcal.params.build_page_parameters(config, number=1)
	assert page.target_path == config.path / "2024-1.jpg"
	assert page.output_format == "jpg"
