"""
Text metrics and positioning for single texts, rows and stacked rows.

All positions are baseline based: `y` is the baseline of the text, `x` its
left edge after alignment.
"""

# Standard Library
import dataclasses
import enum
import math


class Align(enum.IntEnum):
	LEFT = 1
	CENTER = 2
	RIGHT = 3


class Valign(enum.IntEnum):
	TOP = 1
	MIDDLE = 2
	BOTTOM = 3


#============================================
def round_half_up(value: float) -> int:
	"""
	Round half away from zero to an integer.

	Args:
		value: Value to round.

	Returns:
		Rounded integer.
	"""
	if value < 0:
		return -int(math.floor(-value + 0.5))
	return int(math.floor(value + 0.5))


#============================================
def parse_align(value) -> Align:
	"""
	Parse an alignment given as enum, int or name.

	Args:
		value: Align, int or string like "center".

	Returns:
		Align.
	"""
	if isinstance(value, str):
		try:
			return Align[value.strip().upper()]
		except KeyError:
			raise ValueError(f"Invalid alignment \"{value}\"") from None
	try:
		return Align(value)
	except ValueError:
		raise ValueError(f"Invalid alignment \"{value}\"") from None


#============================================
def parse_valign(value) -> Valign:
	"""
	Parse a vertical alignment given as enum, int or name.

	Args:
		value: Valign, int or string like "top".

	Returns:
		Valign.
	"""
	if isinstance(value, str):
		try:
			return Valign[value.strip().upper()]
		except KeyError:
			raise ValueError(f"Invalid vertical alignment \"{value}\"") from None
	try:
		return Valign(value)
	except ValueError:
		raise ValueError(f"Invalid vertical alignment \"{value}\"") from None


@dataclasses.dataclass(frozen=True)
class Position:
	position_x: int = 0
	position_y: int = 0
	align: Align = Align.LEFT
	valign: Valign = Valign.BOTTOM

	def get_position_x(self, width: int) -> int:
		"""
		Left edge for a text of the given width.
		"""
		align = parse_align(self.align)
		if align == Align.LEFT:
			return self.position_x
		if align == Align.CENTER:
			return self.position_x - round_half_up(width / 2)
		return self.position_x - width

	def get_position_y(self, height: int) -> int:
		"""
		Baseline for a text of the given height.
		"""
		valign = parse_valign(self.valign)
		if valign == Valign.TOP:
			return self.position_y + height
		if valign == Valign.MIDDLE:
			return self.position_y + round_half_up(height / 2)
		return self.position_y


class Metrics:
	"""
	Font-independent estimate: every character is one font size wide.
	"""

	def get_metrics(self, text: str, font: str, font_size: int, angle: int = 0) -> tuple[int, int]:
		height = round_half_up(font_size)
		width = round_half_up(font_size * len(text))
		return (width, height)


@dataclasses.dataclass
class TextMetrics:
	width: int
	height: int
	x: int
	y: int
	text: str
	font: str
	font_size: int
	angle: int


@dataclasses.dataclass
class RowMetrics:
	width: int
	height: int
	x: int
	y: int
	row: list[TextMetrics]


@dataclasses.dataclass
class RowsMetrics:
	width: int
	height: int
	x: int
	y: int
	rows: list[RowMetrics]


class Text:
	def __init__(
		self,
		text: str,
		font: str,
		font_size: int,
		angle: int = 0,
		metrics: Metrics | None = None,
	):
		self.text = text
		self.font = font
		self.font_size = font_size
		self.angle = angle
		self.metrics = metrics if metrics is not None else Metrics()

	def __repr__(self) -> str:
		return f"Text({self.text!r}, {self.font!r}, {self.font_size}, {self.angle})"

	@property
	def text_length(self) -> int:
		return len(self.text)

	def get_metrics(
		self,
		position_x: int = 0,
		position_y: int = 0,
		align: Align = Align.LEFT,
		valign: Valign = Valign.BOTTOM,
	) -> TextMetrics:
		"""
		Measure the text and place it relative to the anchor.

		Args:
			position_x: Anchor x.
			position_y: Anchor y.
			align: Horizontal alignment.
			valign: Vertical alignment.

		Returns:
			TextMetrics.
		"""
		width, height = self.metrics.get_metrics(self.text, self.font, self.font_size, self.angle)
		position = Position(position_x, position_y, align, valign)
		return TextMetrics(
			width=width,
			height=height,
			x=position.get_position_x(width),
			y=position.get_position_y(height),
			text=self.text,
			font=self.font,
			font_size=self.font_size,
			angle=self.angle,
		)


class Row:
	def __init__(self, row: list[Text]):
		self.row = list(row)

	def get_metrics(
		self,
		position_x: int = 0,
		position_y: int = 0,
		align: Align = Align.LEFT,
		valign: Valign = Valign.BOTTOM,
	) -> RowMetrics:
		"""
		Lay out the texts of this row side by side.

		The row is aligned as a whole; every word shares the lowest baseline
		any single word would get on its own.

		Args:
			position_x: Anchor x.
			position_y: Anchor y.
			align: Horizontal alignment of the whole row.
			valign: Vertical alignment.

		Returns:
			RowMetrics.
		"""
		measured = [text.get_metrics(position_x, position_y, align, valign) for text in self.row]
		width = sum(item.width for item in measured)
		height = max((item.height for item in measured), default=0)
		position = Position(position_x, position_y, align, valign)

		# baselines never go above the top edge
		position_y_overall = max([0, *(item.y for item in measured)])
		position_x_overall = position.get_position_x(width)

		row: list[TextMetrics] = []
		for item in measured:
			# alignment already applied through position_x_overall
			current = Position(position_x_overall, position_y, Align.LEFT, valign)
			row.append(
				TextMetrics(
					width=item.width,
					height=item.height,
					x=current.get_position_x(item.width),
					y=position_y_overall,
					text=item.text,
					font=item.font,
					font_size=item.font_size,
					angle=item.angle,
				)
			)
			position_x_overall += item.width

		return RowMetrics(
			width=width,
			height=height,
			x=position.get_position_x(width),
			y=position.get_position_y(height),
			row=row,
		)


class Rows:
	def __init__(self, rows: list[Row], row_distance: int = 0):
		self.rows = list(rows)
		self.row_distance = row_distance

	def get_metrics(
		self,
		position_x: int = 0,
		position_y: int = 0,
		align: Align = Align.LEFT,
		valign: Valign = Valign.BOTTOM,
	) -> RowsMetrics:
		"""
		Stack the rows from top to bottom.

		Args:
			position_x: Anchor x.
			position_y: Anchor y of the first row.
			align: Horizontal alignment of every row.
			valign: Vertical alignment of every row.

		Returns:
			RowsMetrics.
		"""
		width = 0
		height = 0
		rows: list[RowMetrics] = []
		position_y_overall = position_y
		for row in self.rows:
			dimension = row.get_metrics(position_x, position_y_overall, align, valign)
			position_y_overall += dimension.height + self.row_distance
			width = max(width, dimension.width)
			height += dimension.height
			rows.append(dimension)

		if len(self.rows) > 1:
			height += (len(self.rows) - 1) * self.row_distance

		return RowsMetrics(
			width=width,
			height=height,
			x=position_x,
			y=position_y,
			rows=rows,
		)


#============================================
def build_rows(
	text: str,
	font: str,
	font_size: int,
	angle: int = 0,
	metrics: Metrics | None = None,
	row_distance: int = 0,
	separator: str = "<br>",
) -> Rows:
	"""
	Split a text into rows at the separator, one Text per row.

	Args:
		text: Text with optional row separators.
		font: Font name or path.
		font_size: Font size.
		angle: Text angle.
		metrics: Measurement provider.
		row_distance: Extra space between rows.
		separator: Row separator token.

	Returns:
		Rows.
	"""
	lines = text.split(separator)
	return Rows(
		[Row([Text(line, font, font_size, angle, metrics)]) for line in lines],
		row_distance,
	)
