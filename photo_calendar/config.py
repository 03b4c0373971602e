"""
Shared configuration, constants and YAML calendar loading.
"""

# Standard Library
import dataclasses
import datetime
import math
import pathlib

# PIP3 modules
import yaml


CONFIG_FILENAME = "config.yml"
CALENDAR_DIRECTORY = "calendar"

TARGET_HEIGHT = 4000
ASPECT_RATIO = 3 / 2
DEFAULT_COLOR = (47, 141, 171)
EXPECTED_COLOR_VALUES = 3
BIRTHDAY_YEAR_NOT_GIVEN = 2100

DAY_SUNDAY = 0
DAY_MONDAY = 1

IMAGE_PNG = "png"
IMAGE_JPG = "jpg"
IMAGE_JPEG = "jpeg"

ENGINE_PILLOW = "gdimage"
ENGINE_WAND = "imagick"
ENGINE_ALIASES = {
	"gdimage": ENGINE_PILLOW,
	"pillow": ENGINE_PILLOW,
	"imagick": ENGINE_WAND,
	"wand": ENGINE_WAND,
}

DESIGN_DEFAULT = "default"
DESIGN_DEFAULT_JTAC = "default-jtac"
DESIGN_BLANK = "blank"
DESIGN_BLANK_JTAC = "blank-jtac"
DESIGN_IMAGE = "image"
DESIGN_TEXT = "text"

DEFAULT_ENGINE = ENGINE_PILLOW
DEFAULT_DESIGN_TYPE = DESIGN_DEFAULT
DEFAULT_OUTPUT_QUALITY = 100
DEFAULT_OUTPUT_FORMAT = IMAGE_JPG
DEFAULT_PAGE_TITLE = "Page Title"
DEFAULT_TITLE = "Title"
DEFAULT_SUBTITLE = "Subtitle"
DEFAULT_URL = "auto"
DEFAULT_URL_BASE = "http://localhost:5000"
URL_CALENDAR = "{base}/v/{identifier}.json"
URL_PAGE = "{base}/v/{identifier}/{number}"

QR_CODE_VERSION = 5
# GD points at 96 dpi rendered as pixels
POINT_TO_PIXEL = 1 + 1 / 3

ERROR_BACKGROUND_COLOR = (47, 141, 171)
ERROR_TEXT_COLOR = (255, 255, 255)
ERROR_FONT_SIZE_FACTOR = 40
ERROR_WIDTH = 6000
ERROR_HEIGHT = 4000

OVERVIEW_WIDTH = 5656
OVERVIEW_HEIGHT = 4000
OVERVIEW_TILE_WIDTH = 1414
OVERVIEW_TILE_HEIGHT = 1000
OVERVIEW_FILENAME = "overview/overview.png"
OVERVIEW_BACKGROUND_COLOR = (255, 255, 255)
# tile column/row per page index, the first page covers 2x2 tiles
OVERVIEW_POSITIONS = (
	(0, 0),
	(2, 0), (3, 0),
	(2, 1), (3, 1),
	(0, 2), (1, 2),
	(2, 2), (3, 2),
	(0, 3), (1, 3),
	(2, 3), (3, 3),
)

PDF_FILENAME = "print/calendar.pdf"
PDF_MARGIN_POINTS = 18.0

PROGRESS_BAR_WIDTH = 20


@dataclasses.dataclass
class OutputSettings:
	quality: int = DEFAULT_OUTPUT_QUALITY
	format: str = DEFAULT_OUTPUT_FORMAT
	width: int | None = None
	height: int | None = None


@dataclasses.dataclass
class DesignSettings:
	engine: str = DEFAULT_ENGINE
	type: str = DEFAULT_DESIGN_TYPE
	config: dict = dataclasses.field(default_factory=dict)


@dataclasses.dataclass
class SourceDesign:
	"""
	A source image generated from a design instead of read from a photo.
	"""
	design: DesignSettings
	width: int
	height: int
	format: str = IMAGE_PNG


@dataclasses.dataclass
class CalendarEvent:
	date: datetime.date
	title: str


@dataclasses.dataclass
class PageConfig:
	number: int
	year: int
	month: int
	source: str | SourceDesign | None = None
	target: str | None = None
	page_title: str = DEFAULT_PAGE_TITLE
	title: str | None = DEFAULT_TITLE
	subtitle: str | None = DEFAULT_SUBTITLE
	url: str = DEFAULT_URL
	coordinate: str | None = None
	design: DesignSettings | None = None


@dataclasses.dataclass
class CalendarConfig:
	identifier: str
	path: pathlib.Path
	name: str
	public: bool
	url_base: str
	output: OutputSettings
	default_year: int | None
	default_month: int | None
	design: DesignSettings
	holidays: list[CalendarEvent]
	birthdays: list[CalendarEvent]
	pages: list[PageConfig]


@dataclasses.dataclass
class PdfExportResult:
	total_pages: int
	printed_pages: int
	missing_pages: list[int]
	page_width: float
	page_height: float


#============================================
def target_dimensions(output: OutputSettings) -> tuple[int, int]:
	"""
	Compute the target image size from output settings.

	Args:
		output: Output settings.

	Returns:
		Tuple of (width, height) in pixels.
	"""
	height = output.height or TARGET_HEIGHT
	width = output.width or int(math.floor(height * ASPECT_RATIO))
	return (width, height)


#============================================
def parse_date(value) -> datetime.date:
	"""
	Parse a YAML date key into a date.

	Args:
		value: A date, datetime or ISO date string.

	Returns:
		datetime.date.
	"""
	if isinstance(value, datetime.datetime):
		return value.date()
	if isinstance(value, datetime.date):
		return value
	return datetime.date.fromisoformat(str(value).strip())


#============================================
def parse_events(raw: dict | None) -> list[CalendarEvent]:
	"""
	Parse a `date: title` mapping into events.

	Args:
		raw: Mapping from YAML.

	Returns:
		List of CalendarEvent sorted by date.
	"""
	if not raw:
		return []
	if not isinstance(raw, dict):
		raise ValueError("Events must be a mapping of date to title.")
	events = [CalendarEvent(date=parse_date(key), title=str(value)) for key, value in raw.items()]
	events.sort(key=lambda event: event.date)
	return events


#============================================
def parse_design(raw: dict | None, fallback: DesignSettings | None = None) -> DesignSettings:
	"""
	Parse a design block, filling gaps from a fallback.

	Args:
		raw: The `design` mapping.
		fallback: Settings used for missing keys.

	Returns:
		DesignSettings.
	"""
	if fallback is None:
		fallback = DesignSettings()
	if not raw:
		return DesignSettings(engine=fallback.engine, type=fallback.type, config=dict(fallback.config))
	engine = str(raw.get("engine") or fallback.engine).lower()
	if engine not in ENGINE_ALIASES:
		raise ValueError(f"Unsupported design engine \"{engine}\" was given.")
	config = dict(fallback.config)
	config.update(raw.get("config") or {})
	return DesignSettings(
		engine=ENGINE_ALIASES[engine],
		type=str(raw.get("type") or fallback.type),
		config=config,
	)


#============================================
def _require_int(page: dict, key: str, index: int) -> int:
	value = page.get(key)
	if value is None:
		raise ValueError(f"Missing {key} in page {index}.")
	if not isinstance(value, int) or isinstance(value, bool):
		raise ValueError(f"The {key} in page {index} must be an integer.")
	return value


#============================================
def _text_value(page: dict, key: str, default: str) -> str:
	# an empty YAML key (`title:`) reads as None and means no text
	if key not in page:
		return default
	value = page[key]
	if value is None:
		return ""
	return str(value)


#============================================
def parse_source(raw, index: int, design: DesignSettings) -> str | SourceDesign | None:
	"""
	Parse the `source` of a page: a photo path or a design to render.

	A mapping names engine, type and config of the design that generates
	the source image. Its config carries `width`, `height` and an optional
	`format`. Only the text design can generate a source image.

	Args:
		raw: The `source` value from YAML.
		index: Page number.
		design: Calendar-wide design settings, for the engine.

	Returns:
		Path string, SourceDesign or None.
	"""
	if raw is None:
		return None
	if isinstance(raw, str):
		return raw
	if not isinstance(raw, dict):
		raise ValueError(f"Unable to read image source of page {index}.")
	source_design = parse_design(raw, DesignSettings(engine=design.engine, type=DESIGN_TEXT))
	if source_design.type != DESIGN_TEXT:
		raise ValueError(
			f"Only the text design can generate a source image, \"{source_design.type}\" given in page {index}."
		)
	output_format = str(source_design.config.get("format", IMAGE_PNG)).lower()
	if output_format not in (IMAGE_JPG, IMAGE_JPEG, IMAGE_PNG):
		raise ValueError(f"Unsupported source image format \"{output_format}\" in page {index}.")
	return SourceDesign(
		design=source_design,
		width=_require_int(source_design.config, "width", index),
		height=_require_int(source_design.config, "height", index),
		format=output_format,
	)


#============================================
def parse_page(raw: dict, index: int, design: DesignSettings) -> PageConfig:
	"""
	Parse one entry of the `pages` list.

	Args:
		raw: Page mapping.
		index: Page number (list index).
		design: Calendar-wide design settings.

	Returns:
		PageConfig.
	"""
	if not isinstance(raw, dict):
		raise ValueError("Invalid configuration given (page must be a mapping).")
	month = _require_int(raw, "month", index)
	if not 0 <= month <= 12:
		raise ValueError(f"Month {month} in page {index} is out of range (0-12).")
	page_design = None
	if raw.get("design"):
		page_design = parse_design(raw.get("design"), design)
	coordinate = raw.get("coordinate")
	return PageConfig(
		number=index,
		year=_require_int(raw, "year", index),
		month=month,
		source=parse_source(raw.get("source"), index, design),
		target=raw.get("target"),
		page_title=_text_value(raw, "page-title", DEFAULT_PAGE_TITLE),
		title=_text_value(raw, "title", DEFAULT_TITLE),
		subtitle=_text_value(raw, "subtitle", DEFAULT_SUBTITLE),
		url=str(raw.get("url", DEFAULT_URL)),
		coordinate=None if coordinate is None else str(coordinate),
		design=page_design,
	)


#============================================
def parse_calendar_config(data: dict, path: pathlib.Path) -> CalendarConfig:
	"""
	Build a CalendarConfig from parsed YAML.

	Args:
		data: Parsed YAML document.
		path: Calendar directory.

	Returns:
		CalendarConfig.
	"""
	if not isinstance(data, dict):
		raise ValueError(f"Config file in \"{path}\" is not a valid YAML mapping.")
	settings = data.get("settings") or {}
	defaults = settings.get("defaults") or {}
	output_raw = settings.get("output") or {}
	output = OutputSettings(
		quality=int(output_raw.get("quality", DEFAULT_OUTPUT_QUALITY)),
		format=str(output_raw.get("format", DEFAULT_OUTPUT_FORMAT)).lower(),
		width=output_raw.get("width"),
		height=output_raw.get("height"),
	)
	design = parse_design(defaults.get("design"))
	pages = [parse_page(page, index, design) for index, page in enumerate(data.get("pages") or [])]
	return CalendarConfig(
		identifier=path.name,
		path=path,
		name=str(data.get("name", path.name)),
		public=bool(settings.get("public", True)),
		url_base=str(settings.get("url-base", DEFAULT_URL_BASE)).rstrip("/"),
		output=output,
		default_year=defaults.get("year"),
		default_month=defaults.get("month"),
		design=design,
		holidays=parse_events(data.get("holidays")),
		birthdays=parse_events(data.get("birthdays")),
		pages=pages,
	)


#============================================
def load_calendar_config(config_path: pathlib.Path) -> CalendarConfig:
	"""
	Load a calendar config.yml.

	Args:
		config_path: Path to the YAML file or to its calendar directory.

	Returns:
		CalendarConfig.
	"""
	config_path = pathlib.Path(config_path)
	if config_path.is_dir():
		config_path = config_path / CONFIG_FILENAME
	if not config_path.is_file():
		raise FileNotFoundError(f"Config file \"{config_path}\" does not exist.")
	with config_path.open("r", encoding="utf-8") as handle:
		data = yaml.safe_load(handle)
	return parse_calendar_config(data, config_path.parent.resolve())


#============================================
def calendar_directory(data_dir: pathlib.Path, identifier: str) -> pathlib.Path:
	"""
	Resolve the directory of a calendar below the data directory.

	Args:
		data_dir: Data root.
		identifier: Calendar identifier.

	Returns:
		Calendar directory path.
	"""
	if not identifier or "/" in identifier or "\\" in identifier or identifier.startswith("."):
		raise ValueError(f"Invalid calendar identifier \"{identifier}\".")
	return pathlib.Path(data_dir) / CALENDAR_DIRECTORY / identifier
