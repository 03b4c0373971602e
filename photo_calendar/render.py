"""
Page building, calendar scans, overview image, print PDF and error images.
"""

# Standard Library
import hashlib
import io
import json
import logging
import pathlib

# PIP3 modules
import PIL.Image
import PIL.ImageDraw
import PIL.ImageFont
import pypdf
import reportlab.lib.pagesizes
import reportlab.lib.utils
import reportlab.pdfgen.canvas
import yaml

# local repo modules
import photo_calendar as pcal
import photo_calendar.config
import photo_calendar.factory
import photo_calendar.image_builder
import photo_calendar.params


CalendarConfig = pcal.config.CalendarConfig
PdfExportResult = pcal.config.PdfExportResult
SourceDesign = pcal.config.SourceDesign
ImageContainer = pcal.image_builder.ImageContainer

CALENDAR_DIRECTORY = pcal.config.CALENDAR_DIRECTORY
CONFIG_FILENAME = pcal.config.CONFIG_FILENAME
OVERVIEW_WIDTH = pcal.config.OVERVIEW_WIDTH
OVERVIEW_HEIGHT = pcal.config.OVERVIEW_HEIGHT
OVERVIEW_TILE_WIDTH = pcal.config.OVERVIEW_TILE_WIDTH
OVERVIEW_TILE_HEIGHT = pcal.config.OVERVIEW_TILE_HEIGHT
OVERVIEW_POSITIONS = pcal.config.OVERVIEW_POSITIONS
OVERVIEW_BACKGROUND_COLOR = pcal.config.OVERVIEW_BACKGROUND_COLOR
ERROR_WIDTH = pcal.config.ERROR_WIDTH
ERROR_HEIGHT = pcal.config.ERROR_HEIGHT
ERROR_BACKGROUND_COLOR = pcal.config.ERROR_BACKGROUND_COLOR
ERROR_TEXT_COLOR = pcal.config.ERROR_TEXT_COLOR
ERROR_FONT_SIZE_FACTOR = pcal.config.ERROR_FONT_SIZE_FACTOR
PDF_MARGIN_POINTS = pcal.config.PDF_MARGIN_POINTS
PROGRESS_BAR_WIDTH = pcal.config.PROGRESS_BAR_WIDTH

_LOGGER = logging.getLogger(__name__)


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def build_page(
	config: CalendarConfig,
	year: int | None = None,
	month: int | None = None,
	number: int | None = None,
	font_path: str | None = None,
) -> ImageContainer:
	"""
	Build one calendar page and write its target image.

	Args:
		config: Calendar config.
		year: Page year.
		month: Page month.
		number: Page number, takes precedence over year and month.
		font_path: TrueType font for all texts.

	Returns:
		ImageContainer of the written page.
	"""
	page = pcal.params.build_page_parameters(config, year, month, number)
	builder = pcal.factory.create_image_builder(
		page.design.engine,
		page.design.type,
		page.design.config,
		font_path,
	)
	if page.source_design is not None:
		builder.set_source_blob(render_source_image(page.source_design, font_path))
	builder.init(page)
	return builder.build()


#============================================
def render_source_image(source: SourceDesign, font_path: str | None = None) -> bytes:
	"""
	Render the design of a generated source image.

	Args:
		source: Source design with its size and format.
		font_path: TrueType font for all texts.

	Returns:
		Encoded image bytes.
	"""
	builder = pcal.factory.create_image_builder(
		source.design.engine,
		source.design.type,
		source.design.config,
		font_path,
	)
	builder.init_without_page(source.width, source.height, source.format)
	_LOGGER.debug("Source image %dx%d rendered with %s", source.width, source.height, source.design.type)
	return builder.render_bytes()


#============================================
def build_calendar(
	config: CalendarConfig,
	font_path: str | None = None,
	show_progress: bool = False,
) -> list[ImageContainer]:
	"""
	Build every page of a calendar in page order.

	Args:
		config: Calendar config.
		font_path: TrueType font for all texts.
		show_progress: Print a progress bar.

	Returns:
		List of ImageContainer, one per page.
	"""
	containers: list[ImageContainer] = []
	total = len(config.pages)
	if show_progress and total > 0:
		print_progress("Pages", 0, total)
	for index, page in enumerate(config.pages, start=1):
		containers.append(build_page(config, number=page.number, font_path=font_path))
		if show_progress:
			print_progress("Pages", index, total)
	if show_progress and total > 0:
		print()
	return containers


#============================================
def list_calendars(data_dir: pathlib.Path) -> list[CalendarConfig]:
	"""
	Scan `<data_dir>/calendar/*/config.yml` for calendars.

	Directories without a config file are skipped, so are configs that do
	not parse (logged as warning).

	Args:
		data_dir: Data root.

	Returns:
		Calendar configs sorted by identifier.
	"""
	calendar_root = pathlib.Path(data_dir) / CALENDAR_DIRECTORY
	if not calendar_root.is_dir():
		return []
	calendars: list[CalendarConfig] = []
	for path in sorted(calendar_root.iterdir()):
		if not path.is_dir() or not (path / CONFIG_FILENAME).is_file():
			continue
		try:
			calendars.append(pcal.config.load_calendar_config(path))
		except (ValueError, yaml.YAMLError) as error:
			_LOGGER.warning("Skipping calendar %s: %s", path.name, error)
	return calendars


#============================================
def page_image_paths(config: CalendarConfig) -> list[pathlib.Path]:
	return [pcal.params.resolve_target_path(config, page) for page in config.pages]


#============================================
def create_overview_image(config: CalendarConfig, output_path: pathlib.Path | None = None) -> pathlib.Path:
	"""
	Combine the built pages into one overview image.

	The first page fills the top left quarter, up to twelve more pages go
	into the remaining tiles.

	Args:
		config: Calendar config.
		output_path: Target PNG, `overview/overview.png` in the calendar
			directory by default.

	Returns:
		Path of the written overview.
	"""
	if output_path is None:
		output_path = config.path / pcal.config.OVERVIEW_FILENAME
	output_path = pathlib.Path(output_path)
	image_paths = page_image_paths(config)[:len(OVERVIEW_POSITIONS)]
	for path in image_paths:
		if not path.is_file():
			raise FileNotFoundError(f"Page image \"{path}\" is missing, build the calendar first.")

	canvas = PIL.Image.new("RGB", (OVERVIEW_WIDTH, OVERVIEW_HEIGHT), OVERVIEW_BACKGROUND_COLOR)
	for index, path in enumerate(image_paths):
		column, row = OVERVIEW_POSITIONS[index]
		size_multiplier = 2 if index == 0 else 1
		size = (OVERVIEW_TILE_WIDTH * size_multiplier, OVERVIEW_TILE_HEIGHT * size_multiplier)
		with PIL.Image.open(path) as image:
			tile = image.convert("RGB").resize(size, PIL.Image.Resampling.LANCZOS)
		canvas.paste(tile, (column * OVERVIEW_TILE_WIDTH, row * OVERVIEW_TILE_HEIGHT))
		tile.close()

	output_path.parent.mkdir(parents=True, exist_ok=True)
	canvas.save(output_path, format="PNG")
	canvas.close()
	_LOGGER.info("Overview of %s written to %s", config.identifier, output_path)
	return output_path


#============================================
def compute_sha256(path: pathlib.Path) -> str:
	"""
	Compute SHA256 hash for a file.

	Args:
		path: File path.

	Returns:
		Hex digest.
	"""
	hasher = hashlib.sha256()
	with path.open("rb") as handle:
		for chunk in iter(lambda: handle.read(1024 * 1024), b""):
			hasher.update(chunk)
	return hasher.hexdigest()


#============================================
def build_image_page(
	image_path: pathlib.Path,
	page_size: tuple[float, float],
	margin: float = PDF_MARGIN_POINTS,
) -> pypdf.PageObject:
	"""
	Build a PDF page with one image centered inside the margins.

	Args:
		image_path: Page image.
		page_size: (width, height) in points.
		margin: Margin in points on every side.

	Returns:
		PDF page object.
	"""
	page_width, page_height = page_size
	image_reader = reportlab.lib.utils.ImageReader(str(image_path))
	image_width, image_height = image_reader.getSize()
	scale = min((page_width - 2 * margin) / image_width, (page_height - 2 * margin) / image_height)
	draw_width = image_width * scale
	draw_height = image_height * scale

	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(page_width, page_height))
	pdf.drawImage(
		image_reader,
		(page_width - draw_width) / 2.0,
		(page_height - draw_height) / 2.0,
		width=draw_width,
		height=draw_height,
	)
	pdf.save()
	buffer.seek(0)
	reader = pypdf.PdfReader(buffer)
	return reader.pages[0]


#============================================
def export_pdf(
	config: CalendarConfig,
	output_path: pathlib.Path,
	page_size: tuple[float, float] | None = None,
) -> PdfExportResult:
	"""
	Collect the built page images into one print PDF, one image per page.

	Pages without a built image are left out and reported.

	Args:
		config: Calendar config.
		output_path: Output PDF path.
		page_size: (width, height) in points, landscape A4 by default.

	Returns:
		PdfExportResult.
	"""
	if page_size is None:
		page_size = reportlab.lib.pagesizes.landscape(reportlab.lib.pagesizes.A4)
	writer = pypdf.PdfWriter()
	missing_pages: list[int] = []
	image_paths = page_image_paths(config)
	for page, image_path in zip(config.pages, image_paths):
		if not image_path.is_file():
			missing_pages.append(page.number)
			continue
		writer.add_page(build_image_page(image_path, page_size))

	output_path = pathlib.Path(output_path)
	output_path.parent.mkdir(parents=True, exist_ok=True)
	writer.write(str(output_path))

	return PdfExportResult(
		total_pages=len(config.pages),
		printed_pages=len(config.pages) - len(missing_pages),
		missing_pages=missing_pages,
		page_width=float(page_size[0]),
		page_height=float(page_size[1]),
	)


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	config: CalendarConfig,
	result: PdfExportResult,
) -> None:
	"""
	Write a manifest JSON file.

	Args:
		manifest_path: Output path.
		config: Calendar config.
		result: PDF export result.
	"""
	pages = []
	for page, image_path in zip(config.pages, page_image_paths(config)):
		entry = {
			"number": page.number,
			"year": page.year,
			"month": page.month,
			"page_title": page.page_title,
			"image": str(image_path),
			"sha256": None,
		}
		if image_path.is_file():
			entry["sha256"] = compute_sha256(image_path)
		pages.append(entry)
	data = {
		"identifier": config.identifier,
		"name": config.name,
		"total_pages": result.total_pages,
		"printed_pages": result.printed_pages,
		"missing_pages": result.missing_pages,
		"page_size": {
			"width": result.page_width,
			"height": result.page_height,
		},
		"pages": pages,
	}
	manifest_path = pathlib.Path(manifest_path)
	manifest_path.parent.mkdir(parents=True, exist_ok=True)
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)


#============================================
def render_error_image(
	message: str,
	width: int = ERROR_WIDTH,
	height: int = ERROR_HEIGHT,
	font_path: str | None = None,
) -> bytes:
	"""
	Render an error message centered on a plain PNG.

	Args:
		message: Error text.
		width: Image width.
		height: Image height.
		font_path: TrueType font, Pillow's bundled font when None.

	Returns:
		PNG bytes.
	"""
	font_size = max(1, width // ERROR_FONT_SIZE_FACTOR)
	if font_path:
		font = PIL.ImageFont.truetype(font_path, font_size)
	else:
		font = PIL.ImageFont.load_default(size=font_size)
	image = PIL.Image.new("RGB", (width, height), ERROR_BACKGROUND_COLOR)
	draw = PIL.ImageDraw.Draw(image)
	# anchors are not supported for multiline text
	message = " ".join(message.split())
	draw.text((width / 2, height / 2), message, fill=ERROR_TEXT_COLOR, font=font, anchor="mm")
	buffer = io.BytesIO()
	image.save(buffer, format="PNG")
	image.close()
	return buffer.getvalue()
