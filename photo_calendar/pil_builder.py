"""
Bitmap backend built on Pillow.
"""

# Standard Library
import functools
import io
import math

# PIP3 modules
import PIL.Image
import PIL.ImageChops
import PIL.ImageDraw
import PIL.ImageFont
import PIL.ImageOps

# local repo modules
import photo_calendar as pcal
import photo_calendar.image_builder


BaseImageBuilder = pcal.image_builder.BaseImageBuilder
IMAGE_PNG = pcal.image_builder.IMAGE_PNG

LINE_WIDTH = 1


#============================================
@functools.lru_cache(maxsize=64)
def load_font(font_path: str | None, pixel_size: int) -> PIL.ImageFont.FreeTypeFont:
	"""
	Load a TrueType font, or Pillow's bundled font without a path.

	Args:
		font_path: Font file path or None.
		pixel_size: Font size in pixels.

	Returns:
		Font object.
	"""
	if font_path:
		return PIL.ImageFont.truetype(font_path, pixel_size)
	return PIL.ImageFont.load_default(size=pixel_size)


class PilImageBuilder(BaseImageBuilder):
	engine = "gdimage"

	def get_font(self, font_size: int) -> PIL.ImageFont.FreeTypeFont:
		return load_font(self.font_path, self.font_pixel_size(font_size))

	def get_dimension(self, text: str, font_size: int, angle: int = 0) -> tuple[int, int]:
		"""
		Ink box of a text drawn from its baseline.

		Args:
			text: Text.
			font_size: Font size.
			angle: Rotation in degrees.

		Returns:
			Tuple of (width, height).
		"""
		if not text:
			return (0, 0)
		left, top, right, bottom = self.get_font(font_size).getbbox(text, anchor="ls")
		return pcal.image_builder.rotated_box(int(right - left), int(bottom - top), angle)

	def get_angle(self, angle: int) -> int:
		# counter-clockwise, like the GD API
		return angle

	def create_images(self) -> None:
		self.image_target = PIL.Image.new("RGB", (self.width_target, self.height_target), (0, 0, 0))
		self.draw = PIL.ImageDraw.Draw(self.image_target, "RGBA")
		self.image_source = None
		if self.design.uses_source_image:
			source = self.page.source_path
			if self.source_blob is not None:
				source = io.BytesIO(self.source_blob)
			with PIL.Image.open(source) as image:
				self.image_source = PIL.ImageOps.exif_transpose(image).convert("RGB")

	def destroy_images(self) -> None:
		for image in (self.image_target, self.image_source):
			if image is not None:
				image.close()
		self.image_target = None
		self.image_source = None

	def add_text_raw(
		self,
		text: str,
		font_size: int,
		key_color: str,
		position_x: int,
		position_y: int,
		angle: int = 0,
	) -> None:
		"""
		Draw a single line with its baseline start at the given position.
		"""
		font = self.get_font(font_size)
		color = self.get_color(key_color)
		if angle % 360 == 0:
			self.draw.text((position_x, position_y), text, fill=color, font=font, anchor="ls")
			return

		# draw on a square layer centered on the baseline start, rotate around it
		left, top, right, bottom = font.getbbox(text, anchor="ls")
		radius = int(math.ceil(math.hypot(max(abs(left), abs(right)), max(abs(top), abs(bottom))))) + 1
		layer = PIL.Image.new("RGBA", (2 * radius, 2 * radius), (0, 0, 0, 0))
		PIL.ImageDraw.Draw(layer).text((radius, radius), text, fill=color, font=font, anchor="ls")
		layer = layer.rotate(angle, resample=PIL.Image.Resampling.BICUBIC)
		self.image_target.paste(layer, (position_x - radius, position_y - radius), layer)
		layer.close()

	def draw_line(self, x1: int, y1: int, x2: int, y2: int, key_color: str) -> None:
		self.draw.line([(x1, y1), (x2, y2)], fill=self.get_color(key_color), width=LINE_WIDTH)

	def add_rectangle(self, x1: int, y1: int, x2: int, y2: int, key_color: str) -> None:
		self.draw.rectangle([x1, y1, x2, y2], fill=self.get_color(key_color))

	def add_image(self, position_x: int, position_y: int, width: int, height: int) -> None:
		if self.image_source is None:
			raise FileNotFoundError("No source image loaded.")
		resized = self.image_source.resize((width, height), PIL.Image.Resampling.LANCZOS)
		self.image_target.paste(resized, (position_x, position_y))
		resized.close()

	def add_image_blob(
		self,
		blob: bytes,
		position_x: int,
		position_y: int,
		width: int,
		height: int,
		background_color: tuple[int, int, int],
	) -> None:
		"""
		Paste an encoded image with its background color keyed out.
		"""
		with PIL.Image.open(io.BytesIO(blob)) as image:
			resized = image.convert("RGB").resize((width, height), PIL.Image.Resampling.NEAREST)
		background = PIL.Image.new("RGB", resized.size, tuple(background_color))
		mask = PIL.ImageChops.difference(resized, background).convert("L").point(lambda value: 255 if value else 0)
		self.image_target.paste(resized, (position_x, position_y), mask)
		resized.close()
		background.close()

	def get_image_bytes(self) -> bytes:
		buffer = io.BytesIO()
		if self.output_format() == IMAGE_PNG:
			self.image_target.save(buffer, format="PNG")
		else:
			self.image_target.save(buffer, format="JPEG", quality=self.quality_target)
		return buffer.getvalue()
