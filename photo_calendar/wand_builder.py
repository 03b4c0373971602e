"""
ImageMagick backend built on Wand.
"""

# PIP3 modules
import wand.color
import wand.drawing
import wand.image

# local repo modules
import photo_calendar as pcal
import photo_calendar.image_builder


BaseImageBuilder = pcal.image_builder.BaseImageBuilder
IMAGE_PNG = pcal.image_builder.IMAGE_PNG


#============================================
def to_wand_color(color: tuple[int, int, int, int]) -> wand.color.Color:
	"""
	Convert an RGBA tuple into a Wand color.

	Args:
		color: (red, green, blue, alpha) with alpha 0-255.

	Returns:
		wand.color.Color.
	"""
	red, green, blue, alpha = color
	if alpha >= 255:
		return wand.color.Color(f"rgb({red}, {green}, {blue})")
	return wand.color.Color(f"rgba({red}, {green}, {blue}, {alpha / 255:.2f})")


class WandImageBuilder(BaseImageBuilder):
	engine = "imagick"

	def _drawing(self, font_size: int) -> wand.drawing.Drawing:
		draw = wand.drawing.Drawing()
		if self.font_path:
			draw.font = str(self.font_path)
		draw.font_size = self.font_pixel_size(font_size)
		draw.text_antialias = True
		return draw

	def get_dimension(self, text: str, font_size: int, angle: int = 0) -> tuple[int, int]:
		"""
		Text width and ascender height from ImageMagick font metrics.

		Args:
			text: Text.
			font_size: Font size.
			angle: Rotation in degrees.

		Returns:
			Tuple of (width, height).
		"""
		if not text:
			return (0, 0)
		with self._drawing(font_size) as draw:
			if self.image_target is not None:
				metrics = draw.get_font_metrics(self.image_target, text, multiline=False)
			else:
				with wand.image.Image(width=1, height=1) as scratch:
					metrics = draw.get_font_metrics(scratch, text, multiline=False)
		width = int(round(metrics.text_width))
		height = int(round(metrics.ascender))
		return pcal.image_builder.rotated_box(width, height, angle)

	def get_angle(self, angle: int) -> int:
		# ImageMagick rotates clockwise
		return 360 - angle

	def create_images(self) -> None:
		self.image_target = wand.image.Image(
			width=self.width_target,
			height=self.height_target,
			background=wand.color.Color("rgb(0, 0, 0)"),
		)
		self.image_source = None
		if self.design.uses_source_image:
			if self.source_blob is not None:
				self.image_source = wand.image.Image(blob=self.source_blob)
			else:
				self.image_source = wand.image.Image(filename=str(self.page.source_path))
			self.image_source.auto_orient()

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
		with self._drawing(font_size) as draw:
			draw.fill_color = to_wand_color(self.get_color(key_color))
			self.image_target.annotate(text, draw, left=position_x, baseline=position_y, angle=angle % 360)

	def draw_line(self, x1: int, y1: int, x2: int, y2: int, key_color: str) -> None:
		with wand.drawing.Drawing() as draw:
			draw.stroke_color = to_wand_color(self.get_color(key_color))
			draw.line((x1, y1), (x2, y2))
			draw(self.image_target)

	def add_rectangle(self, x1: int, y1: int, x2: int, y2: int, key_color: str) -> None:
		with wand.drawing.Drawing() as draw:
			draw.fill_color = to_wand_color(self.get_color(key_color))
			draw.rectangle(left=x1, top=y1, right=x2, bottom=y2)
			draw(self.image_target)

	def add_image(self, position_x: int, position_y: int, width: int, height: int) -> None:
		if self.image_source is None:
			raise FileNotFoundError("No source image loaded.")
		with self.image_source.clone() as source:
			source.resize(width, height)
			self.image_target.composite(source, left=position_x, top=position_y, operator="over")

	def add_image_blob(
		self,
		blob: bytes,
		position_x: int,
		position_y: int,
		width: int,
		height: int,
		background_color: tuple[int, int, int],
	) -> None:
		red, green, blue = background_color[:3]
		with wand.image.Image(blob=blob) as image:
			image.transparent_color(wand.color.Color(f"rgb({red}, {green}, {blue})"), alpha=0.0)
			image.resize(width, height, filter="point")
			self.image_target.composite(image, left=position_x, top=position_y, operator="over")

	def get_image_bytes(self) -> bytes:
		with self.image_target.clone() as image:
			image.background_color = wand.color.Color("rgb(0, 0, 0)")
			image.alpha_channel = "remove"
			if self.output_format() == IMAGE_PNG:
				image.format = "png"
			else:
				image.format = "jpeg"
				image.compression_quality = self.quality_target
			return image.make_blob()
