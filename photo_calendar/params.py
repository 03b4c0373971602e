"""
Resolution of the page to build: year/month/page number, source and target
paths, texts and design settings.
"""

# Standard Library
import dataclasses
import logging
import pathlib

# local repo modules
import photo_calendar as pcal
import photo_calendar.calendar_page
import photo_calendar.config
import photo_calendar.exif_coordinate


CalendarConfig = pcal.config.CalendarConfig
PageConfig = pcal.config.PageConfig
DesignSettings = pcal.config.DesignSettings
SourceDesign = pcal.config.SourceDesign
CalendarPage = pcal.calendar_page.CalendarPage

DEFAULT_URL = pcal.config.DEFAULT_URL
URL_CALENDAR = pcal.config.URL_CALENDAR
URL_PAGE = pcal.config.URL_PAGE
IMAGE_JPG = pcal.config.IMAGE_JPG

_LOGGER = logging.getLogger(__name__)


@dataclasses.dataclass
class PageParameters:
	identifier: str
	number: int
	year: int
	month: int
	source_path: pathlib.Path | None
	target_path: pathlib.Path
	page_title: str
	title: str | None
	subtitle: str | None
	url: str
	coordinate: str
	output_quality: int
	output_format: str
	output_width: int
	output_height: int
	design: DesignSettings
	calendar_page: CalendarPage
	source_design: SourceDesign | None = None

	@property
	def is_title_page(self) -> bool:
		return self.month == 0


#============================================
def find_page(
	config: CalendarConfig,
	year: int | None = None,
	month: int | None = None,
	number: int | None = None,
) -> PageConfig:
	"""
	Look up a page by number or by year and month.

	Year and month default to `settings.defaults`.

	Args:
		config: Calendar config.
		year: Page year.
		month: Page month (0 = title page).
		number: Page number (index in `pages`).

	Returns:
		PageConfig.
	"""
	if number is not None:
		if number < 0 or number >= len(config.pages):
			raise KeyError(f"Page with number \"{number}\" does not exist")
		return config.pages[number]
	if year is None:
		year = config.default_year
	if month is None:
		month = config.default_month
	if year is None or month is None:
		raise ValueError("Year and month are required to select a page.")
	for page in config.pages:
		if page.year == year and page.month == month:
			return page
	raise KeyError(f"Page for {year:04d}-{month:02d} does not exist")


#============================================
def resolve_url(config: CalendarConfig, page: PageConfig) -> str:
	"""
	Expand `auto` into the page (or calendar) URL.
	"""
	if page.url != DEFAULT_URL:
		return page.url
	if page.month == 0:
		return URL_CALENDAR.format(base=config.url_base, identifier=config.identifier)
	return URL_PAGE.format(base=config.url_base, identifier=config.identifier, number=page.number)


#============================================
def resolve_coordinate(page: PageConfig, source_path: pathlib.Path | None) -> str:
	"""
	Coordinate text from config, or from the photo's EXIF GPS data.

	Args:
		page: Page config.
		source_path: Source photo.

	Returns:
		Coordinate text, empty when unknown.
	"""
	if page.coordinate:
		return pcal.exif_coordinate.parse_coordinate(page.coordinate)
	if source_path is None or not source_path.is_file():
		return ""
	coordinate = pcal.exif_coordinate.read_exif_coordinate(source_path)
	if coordinate is None:
		_LOGGER.debug("No GPS data in %s", source_path)
		return ""
	return coordinate


#============================================
def resolve_target_path(config: CalendarConfig, page: PageConfig) -> pathlib.Path:
	"""
	Target image path, `{year}-{month}.{ext}` next to the source by default.
	"""
	if page.target:
		return config.path / page.target
	extension = config.output.format or IMAGE_JPG
	if isinstance(page.source, str):
		extension = pathlib.Path(page.source).suffix.lstrip(".") or extension
	return config.path / f"{page.year}-{page.month}.{extension}"


#============================================
def build_page_parameters(
	config: CalendarConfig,
	year: int | None = None,
	month: int | None = None,
	number: int | None = None,
) -> PageParameters:
	"""
	Resolve everything needed to build one page.

	Args:
		config: Calendar config.
		year: Optional page year.
		month: Optional page month.
		number: Optional page number.

	Returns:
		PageParameters.
	"""
	page = find_page(config, year, month, number)
	source_path = None
	source_design = None
	if isinstance(page.source, SourceDesign):
		source_design = page.source
	if isinstance(page.source, str):
		source_path = config.path / page.source
	target_path = resolve_target_path(config, page)
	output_format = target_path.suffix.lstrip(".").lower() or config.output.format
	width, height = pcal.config.target_dimensions(config.output)

	title = page.title
	subtitle = page.subtitle
	# title and subtitle are only printed on the title page
	if page.month != 0:
		title = None
		subtitle = None

	calendar_page = CalendarPage(page.year, page.month, config.holidays, config.birthdays)
	return PageParameters(
		identifier=config.identifier,
		number=page.number,
		year=page.year,
		month=page.month,
		source_path=source_path,
		target_path=target_path,
		page_title=page.page_title,
		title=title,
		subtitle=subtitle,
		url=resolve_url(config, page),
		coordinate=resolve_coordinate(page, source_path),
		output_quality=config.output.quality,
		output_format=output_format,
		output_width=width,
		output_height=height,
		design=page.design or config.design,
		calendar_page=calendar_page,
		source_design=source_design,
	)
