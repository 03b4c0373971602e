"""
Backend-independent image builder: cursor, sizes, colors and text layout.

Concrete backends implement the drawing primitives.
"""

# Standard Library
import dataclasses
import io
import logging
import math
import pathlib

# PIP3 modules
import PIL.Image

# local repo modules
import photo_calendar as pcal
import photo_calendar.config
import photo_calendar.text_layout


Align = pcal.text_layout.Align
Valign = pcal.text_layout.Valign
round_half_up = pcal.text_layout.round_half_up

TARGET_HEIGHT = pcal.config.TARGET_HEIGHT
DEFAULT_COLOR = pcal.config.DEFAULT_COLOR
EXPECTED_COLOR_VALUES = pcal.config.EXPECTED_COLOR_VALUES
POINT_TO_PIXEL = pcal.config.POINT_TO_PIXEL
IMAGE_PNG = pcal.config.IMAGE_PNG
IMAGE_JPG = pcal.config.IMAGE_JPG
IMAGE_JPEG = pcal.config.IMAGE_JPEG

COLOR_BLACK = "black"
COLOR_BLACK_TRANSPARENCY = "black-transparency"
COLOR_RED = "red"
COLOR_RED_TRANSPARENCY = "red-transparency"
COLOR_WHITE = "white"
COLOR_WHITE_TRANSPARENCY = "white-transparency"
COLOR_CUSTOM = "custom"
COLOR_BACKGROUND = "background-color"

ROW_SEPARATOR = "<br>"
ROW_DISTANCE_FACTOR = 0.25

_LOGGER = logging.getLogger(__name__)


@dataclasses.dataclass
class ImageProperties:
	path: pathlib.Path | None
	width: int
	height: int
	mime_type: str
	size_byte: int


@dataclasses.dataclass
class ImageContainer:
	source: ImageProperties | None
	target: ImageProperties


#============================================
def read_image_properties(path: pathlib.Path) -> ImageProperties:
	"""
	Read size, mime type and byte size of an image file.

	Args:
		path: Image path.

	Returns:
		ImageProperties.
	"""
	path = pathlib.Path(path)
	if not path.is_file():
		raise FileNotFoundError(f"Missing file \"{path}\".")
	with PIL.Image.open(path) as image:
		width, height = image.size
		mime_type = image.get_format_mimetype() or "application/octet-stream"
	return ImageProperties(
		path=path,
		width=width,
		height=height,
		mime_type=mime_type,
		size_byte=path.stat().st_size,
	)


#============================================
def read_blob_properties(blob: bytes) -> ImageProperties:
	"""
	Image properties of an encoded image held in memory.
	"""
	with PIL.Image.open(io.BytesIO(blob)) as image:
		width, height = image.size
		mime_type = image.get_format_mimetype() or "application/octet-stream"
	return ImageProperties(path=None, width=width, height=height, mime_type=mime_type, size_byte=len(blob))


#============================================
def rotated_box(width: int, height: int, angle: int) -> tuple[int, int]:
	"""
	Size of the axis-aligned box around a rotated rectangle.

	Args:
		width: Unrotated width.
		height: Unrotated height.
		angle: Rotation in degrees.

	Returns:
		Tuple of (width, height).
	"""
	if angle % 360 == 0:
		return (width, height)
	radians = math.radians(angle)
	cos_value = abs(math.cos(radians))
	sin_value = abs(math.sin(radians))
	return (
		round_half_up(width * cos_value + height * sin_value),
		round_half_up(width * sin_value + height * cos_value),
	)


class BuilderMetrics(pcal.text_layout.Metrics):
	"""
	Measures texts with the builder's real font; height is the font size.
	"""

	def __init__(self, builder: "BaseImageBuilder"):
		self.builder = builder

	def get_metrics(self, text: str, font: str, font_size: int, angle: int = 0) -> tuple[int, int]:
		width, _height = self.builder.get_dimension(text, font_size)
		return (width, font_size)


class BaseImageBuilder:
	engine = ""

	def __init__(self, design, config: dict | None = None, font_path: str | None = None):
		self.design = design
		self.font_path = font_path
		self.colors: dict[str, tuple[int, int, int, int]] = {}
		self.page = None
		self.zoom_target = 1.0
		self.width_target = 0
		self.height_target = 0
		self.width_source = 0
		self.height_source = 0
		self.position_x = 0
		self.position_y = 0
		self.image_target = None
		self.image_source = None
		self.source_blob: bytes | None = None
		self.format_target = IMAGE_JPG
		self.quality_target = pcal.config.DEFAULT_OUTPUT_QUALITY
		self.metrics = BuilderMetrics(self)
		design.set_image_builder(self)
		if config is not None:
			design.set_config(config)

	#============================================
	def init(self, page) -> None:
		"""
		Prepare dimensions and run the design initialization.

		Args:
			page: PageParameters of the page to build.
		"""
		self.page = page
		if self.design.uses_source_image:
			self._set_source_dimensions()
		self.format_target = page.output_format
		self.quality_target = page.output_quality
		self._set_target_dimensions(page.output_width, page.output_height)
		self.design.do_init()

	def init_without_page(
		self,
		width: int,
		height: int,
		output_format: str,
		quality: int = pcal.config.DEFAULT_OUTPUT_QUALITY,
	) -> None:
		"""
		Prepare a design that needs no page, e.g. a generated source image.

		Args:
			width: Target width.
			height: Target height.
			output_format: `png`, `jpg` or `jpeg`.
			quality: JPEG quality.
		"""
		if self.design.uses_source_image:
			raise ValueError(f"Design {type(self.design).__name__} needs a page with a source image.")
		self.page = None
		self.format_target = output_format
		self.quality_target = quality
		self._set_target_dimensions(width, height)
		self.design.do_init()

	def _set_target_dimensions(self, width: int, height: int) -> None:
		self.width_target = width
		self.height_target = height
		self.zoom_target = self.height_target / TARGET_HEIGHT

	def set_source_blob(self, blob: bytes) -> None:
		"""
		Use an encoded image in memory as source instead of the page photo.
		"""
		self.source_blob = blob

	def _set_source_dimensions(self) -> None:
		if self.source_blob is not None:
			with PIL.Image.open(io.BytesIO(self.source_blob)) as image:
				self.width_source, self.height_source = image.size
			return
		source_path = self.page.source_path
		if source_path is None or not source_path.is_file():
			raise FileNotFoundError(f"Given source image was not found: \"{source_path}\"")
		with PIL.Image.open(source_path) as image:
			self.width_source, self.height_source = image.size

	#============================================
	def build(self) -> ImageContainer:
		"""
		Render the page and write the target image.

		Returns:
			ImageContainer with source and target properties.
		"""
		target_path = self.page.target_path
		data = self.render_bytes()
		target_path.parent.mkdir(parents=True, exist_ok=True)
		target_path.write_bytes(data)
		_LOGGER.info("Page %d of %s written to %s", self.page.number, self.page.identifier, target_path)
		source = None
		if self.source_blob is not None:
			source = read_blob_properties(self.source_blob)
		elif self.design.uses_source_image:
			source = read_image_properties(self.page.source_path)
		return ImageContainer(source=source, target=read_image_properties(target_path))

	def render_bytes(self) -> bytes:
		"""
		Render and encode the image without writing it.
		"""
		try:
			self.render()
			return self.get_image_bytes()
		finally:
			self.destroy_images()

	def render(self) -> None:
		"""
		Create the images and run the design, without writing.
		"""
		self.create_images()
		self.design.do_build()

	#============================================
	# cursor
	def init_xy(self, position_x: int = 0, position_y: int = 0) -> None:
		self.position_x = position_x
		self.position_y = position_y

	def set_position_x(self, position_x: int) -> None:
		self.position_x = position_x

	def set_position_y(self, position_y: int) -> None:
		self.position_y = position_y

	def get_position_x(self) -> int:
		return self.position_x

	def get_position_y(self) -> int:
		return self.position_y

	def add_x(self, value: int) -> None:
		self.position_x += value

	def add_y(self, value: int) -> None:
		self.position_y += value

	def remove_x(self, value: int) -> None:
		self.position_x -= value

	def remove_y(self, value: int) -> None:
		self.position_y -= value

	def get_size(self, size: int) -> int:
		"""
		Scale a size given for a 4000 px high page to the target.
		"""
		return round_half_up(size * self.zoom_target)

	def get_corrected_value(self, value: float) -> float:
		"""
		Font points to pixels.
		"""
		return value * POINT_TO_PIXEL

	def font_pixel_size(self, font_size: int) -> int:
		return max(1, round_half_up(self.get_corrected_value(font_size)))

	#============================================
	# colors
	def reset_colors(self) -> None:
		self.colors = {}

	def create_color(self, key_color: str, red: int, green: int, blue: int, alpha: int | None = None) -> None:
		"""
		Register a color.

		Args:
			key_color: Color key.
			red: Red 0-255.
			green: Green 0-255.
			blue: Blue 0-255.
			alpha: Opacity in percent, None for opaque.
		"""
		for value in (red, green, blue):
			if not isinstance(value, int) or not 0 <= value <= 255:
				raise ValueError(f"Invalid color value \"{value}\" for color \"{key_color}\".")
		opacity = 255
		if alpha is not None:
			opacity = round_half_up(255 * max(0, min(100, alpha)) / 100)
		self.colors[key_color] = (red, green, blue, opacity)

	def get_color(self, key_color: str) -> tuple[int, int, int, int]:
		if key_color not in self.colors:
			raise KeyError(f"Color \"{key_color}\" is not defined.")
		return self.colors[key_color]

	def create_color_from_config(self, key_color: str, key_config: str) -> None:
		"""
		Register a color from the design config, with the default color as fallback.
		"""
		color = self.design.config.get(key_config)
		if not isinstance(color, (list, tuple)) or len(color) < EXPECTED_COLOR_VALUES:
			color = DEFAULT_COLOR
		red, green, blue = color[0], color[1], color[2]
		if not all(isinstance(value, int) for value in (red, green, blue)):
			raise ValueError("Invalid color value given.")
		self.create_color(key_color, red, green, blue)

	#============================================
	# text
	def add_text(
		self,
		text: str,
		font_size: int,
		key_color: str | None = None,
		padding_top: int = 0,
		align: Align = Align.LEFT,
		valign: Valign = Valign.BOTTOM,
		angle: int = 0,
	) -> dict[str, int]:
		"""
		Draw text at the cursor. `<br>` starts a new row.

		Args:
			text: Text to draw.
			font_size: Font size.
			key_color: Color key, white by default.
			padding_top: Extra offset below the cursor.
			align: Horizontal alignment.
			valign: Vertical alignment.
			angle: Angle as returned by get_angle.

		Returns:
			Dict with width and height of the drawn block.
		"""
		if key_color is None:
			key_color = COLOR_WHITE
		row_distance = round_half_up(font_size * ROW_DISTANCE_FACTOR)
		rows = pcal.text_layout.build_rows(
			text,
			self.font_path or "",
			font_size,
			angle,
			self.metrics,
			row_distance,
			ROW_SEPARATOR,
		)
		layout = rows.get_metrics(self.position_x, self.position_y + padding_top, align, valign)
		for row in layout.rows:
			for word in row.row:
				if not word.text:
					continue
				self.add_text_raw(word.text, font_size, key_color, word.x, word.y, angle)
		height = font_size
		if len(layout.rows) > 1:
			height = layout.height
		return {"width": layout.width, "height": height}

	#============================================
	# backend primitives
	def get_dimension(self, text: str, font_size: int, angle: int = 0) -> tuple[int, int]:
		raise NotImplementedError

	def get_angle(self, angle: int) -> int:
		raise NotImplementedError

	def create_images(self) -> None:
		raise NotImplementedError

	def destroy_images(self) -> None:
		raise NotImplementedError

	def add_text_raw(
		self,
		text: str,
		font_size: int,
		key_color: str,
		position_x: int,
		position_y: int,
		angle: int = 0,
	) -> None:
		raise NotImplementedError

	def draw_line(self, x1: int, y1: int, x2: int, y2: int, key_color: str) -> None:
		raise NotImplementedError

	def add_rectangle(self, x1: int, y1: int, x2: int, y2: int, key_color: str) -> None:
		raise NotImplementedError

	def add_image(self, position_x: int, position_y: int, width: int, height: int) -> None:
		raise NotImplementedError

	def add_image_blob(
		self,
		blob: bytes,
		position_x: int,
		position_y: int,
		width: int,
		height: int,
		background_color: tuple[int, int, int],
	) -> None:
		raise NotImplementedError

	def get_image_bytes(self) -> bytes:
		raise NotImplementedError

	def output_format(self) -> str:
		"""
		Normalized output format of the page.
		"""
		output_format = (self.format_target or IMAGE_JPG).lower()
		if output_format == IMAGE_JPEG:
			output_format = IMAGE_JPG
		if output_format not in (IMAGE_JPG, IMAGE_PNG):
			raise ValueError(f"Unsupported given image extension \"{output_format}\"")
		return output_format
