"""
Page designs: the drawing order and layout of a calendar page.

A design receives an image builder and only talks to it through the cursor,
color, text and primitive methods of BaseImageBuilder.
"""

# Standard Library
import copy
import math

# local repo modules
import photo_calendar as pcal
import photo_calendar.config
import photo_calendar.image_builder
import photo_calendar.qr_code
import photo_calendar.text_layout


Align = pcal.text_layout.Align
Valign = pcal.text_layout.Valign
round_half_up = pcal.text_layout.round_half_up

COLOR_BLACK = pcal.image_builder.COLOR_BLACK
COLOR_BLACK_TRANSPARENCY = pcal.image_builder.COLOR_BLACK_TRANSPARENCY
COLOR_RED = pcal.image_builder.COLOR_RED
COLOR_RED_TRANSPARENCY = pcal.image_builder.COLOR_RED_TRANSPARENCY
COLOR_WHITE = pcal.image_builder.COLOR_WHITE
COLOR_WHITE_TRANSPARENCY = pcal.image_builder.COLOR_WHITE_TRANSPARENCY
COLOR_CUSTOM = pcal.image_builder.COLOR_CUSTOM
COLOR_BACKGROUND = pcal.image_builder.COLOR_BACKGROUND

CALENDAR_BOX_BOTTOM_SIZE = 9 / 48
MAX_LENGTH_EVENT_CAPTION = 28
MAX_LENGTH_ADD = "..."
DEFAULT_TRANSPARENCY = 60
FONT_SIZE_IMAGE = 400

CONFIG_TRANSPARENCY = "transparency"
CONFIG_COLOR = "color"
CONFIG_BACKGROUND_COLOR = "background-color"
CONFIG_BOX_BOTTOM_RATIO = "box-bottom-ratio"
CONFIG_TEXT = "text"
CONFIG_TEXT_FONT_SIZE = "text-font-size"
CONFIG_AUTHOR = "author"
CONFIG_AUTHOR_FONT_SIZE = "author-font-size"
CONFIG_AUTHOR_DISTANCE = "author-distance"


#============================================
def truncate_caption(name: str, max_length: int = MAX_LENGTH_EVENT_CAPTION) -> str:
	"""
	Shorten an event caption to max_length characters, ending in "...".

	Args:
		name: Caption.
		max_length: Maximum length including the ellipsis.

	Returns:
		Caption that fits.
	"""
	if len(name) <= max_length:
		return name
	return name[:max_length - len(MAX_LENGTH_ADD)] + MAX_LENGTH_ADD


class DesignBase:
	"""
	Design configuration and hooks; subclasses implement do_init/do_build.
	"""

	default_config: dict = {}
	uses_source_image = True

	def __init__(self):
		self.image_builder = None
		self.config = copy.deepcopy(self.default_config)

	def set_image_builder(self, image_builder) -> None:
		self.image_builder = image_builder

	def set_config(self, config: dict) -> None:
		"""
		Merge a config over the design defaults.
		"""
		self.config = copy.deepcopy(self.default_config)
		self.config.update(config or {})

	@property
	def page(self):
		return self.image_builder.page

	def get_config_value(self, key: str):
		if key not in self.config:
			raise KeyError(f"Given key \"{key}\" not found in design configuration.")
		return self.config[key]

	def get_config_string(self, key: str) -> str:
		value = self.get_config_value(key)
		if isinstance(value, bool) or not isinstance(value, (int, str)):
			raise ValueError(f"Invalid value type \"{type(value).__name__}\" for \"{key}\", string expected.")
		return str(value)

	def get_config_int(self, key: str) -> int:
		value = self.get_config_value(key)
		if isinstance(value, bool) or not isinstance(value, int):
			raise ValueError(f"Invalid value type \"{type(value).__name__}\" for \"{key}\", int expected.")
		return value

	def get_config_float(self, key: str) -> float:
		# YAML writes 0.25 as float but 1 as int
		value = self.get_config_value(key)
		if isinstance(value, bool) or not isinstance(value, (int, float)):
			raise ValueError(f"Invalid value type \"{type(value).__name__}\" for \"{key}\", float expected.")
		return float(value)

	def get_config_list(self, key: str) -> list:
		value = self.get_config_value(key)
		if not isinstance(value, (list, tuple)):
			raise ValueError(f"Invalid value type \"{type(value).__name__}\" for \"{key}\", list expected.")
		return list(value)

	def do_init(self) -> None:
		raise NotImplementedError

	def do_build(self) -> None:
		raise NotImplementedError


class DesignDefault(DesignBase):
	"""
	Photo on top, translucent calendar box at the bottom.

	The box holds the page title, the rotated coordinate, month and year in
	the middle of the right half, the days of the month running out to both
	sides, calendar week markers, event captions and a QR code.
	"""

	font_size_title = 60
	font_size_position = 30
	font_size_year = 100
	font_size_month = 220
	font_size_day = 60
	font_size_title_page = 200
	font_size_title_page_subtext = 70
	font_size_title_page_author = 40
	day_distance = 40
	padding_calendar_days = 160
	width_qr_code = 250
	height_qr_code = 250

	def __init__(self):
		super().__init__()
		self.position_days: dict[str, dict] = {}
		self.y_calendar_box_bottom = 0
		self.url = ""

	def do_init(self) -> None:
		builder = self.image_builder
		self.position_days = {}
		self.qr_code_version = pcal.qr_code.QR_CODE_VERSION

		# sizes are given for a 4000 px high page
		self.font_size_title = builder.get_size(type(self).font_size_title)
		self.font_size_position = builder.get_size(type(self).font_size_position)
		self.font_size_year = builder.get_size(type(self).font_size_year)
		self.font_size_month = builder.get_size(type(self).font_size_month)
		self.font_size_day = builder.get_size(type(self).font_size_day)
		self.font_size_title_page = builder.get_size(type(self).font_size_title_page)
		self.font_size_title_page_subtext = builder.get_size(type(self).font_size_title_page_subtext)
		self.font_size_title_page_author = builder.get_size(type(self).font_size_title_page_author)
		self.padding_calendar_days = builder.get_size(type(self).padding_calendar_days)
		self.height_qr_code = builder.get_size(type(self).height_qr_code)
		self.width_qr_code = builder.get_size(type(self).width_qr_code)
		self.day_distance = builder.get_size(type(self).day_distance)

		self.y_calendar_box_bottom = int(math.floor(builder.height_target * (1 - CALENDAR_BOX_BOTTOM_SIZE)))
		self.url = self.page.url

	def do_build(self) -> None:
		self.page.calendar_page.create_events_and_holidays()
		self.create_colors()
		self.add_image()
		self.add_rectangle()
		self.add_image_description_and_position()

		if self.page.month == 0:
			self.add_title_on_title_page()
		else:
			self.add_year_month_and_days()
			self.add_calendar_weeks()
			self.add_holidays_and_events()

		self.add_qr_code()

	#============================================
	def get_transparency(self) -> int:
		"""
		Opacity of the translucent colors in percent.
		"""
		for key in (CONFIG_TRANSPARENCY, "calendar-box-background-transparency"):
			if key in self.config:
				return self.get_config_int(key)
		return DEFAULT_TRANSPARENCY

	def create_colors(self) -> None:
		builder = self.image_builder
		transparency = self.get_transparency()
		builder.reset_colors()
		builder.create_color(COLOR_BLACK, 0, 0, 0)
		builder.create_color(COLOR_BLACK_TRANSPARENCY, 0, 0, 0, transparency)
		builder.create_color(COLOR_RED, 255, 0, 0)
		builder.create_color(COLOR_RED_TRANSPARENCY, 255, 0, 0, transparency)
		builder.create_color(COLOR_WHITE, 255, 255, 255)
		builder.create_color(COLOR_WHITE_TRANSPARENCY, 255, 255, 255, transparency)

	def get_day_color_key(self, day: int) -> str:
		if self.page.calendar_page.is_red_day(day):
			return COLOR_RED
		return COLOR_WHITE

	#============================================
	def add_image(self) -> None:
		builder = self.image_builder
		builder.add_image(0, 0, builder.width_target, builder.height_target)

	def add_rectangle(self) -> None:
		builder = self.image_builder
		builder.add_rectangle(
			0,
			self.y_calendar_box_bottom,
			builder.width_target,
			builder.height_target,
			COLOR_BLACK_TRANSPARENCY,
		)

	def add_image_description_and_position(self) -> None:
		"""
		Page title inside the box, coordinate rotated along the left edge.
		"""
		builder = self.image_builder
		position_x = self.padding_calendar_days
		position_y = self.y_calendar_box_bottom + self.padding_calendar_days

		builder.add_text_raw(
			self.page.page_title,
			self.font_size_title,
			COLOR_WHITE,
			position_x,
			position_y + self.font_size_title,
		)

		if not self.page.coordinate:
			return
		builder.add_text_raw(
			self.page.coordinate,
			self.font_size_position,
			COLOR_WHITE,
			self.padding_calendar_days + self.font_size_position,
			self.y_calendar_box_bottom - self.padding_calendar_days,
			builder.get_angle(90),
		)

	def add_title_on_title_page(self) -> None:
		builder = self.image_builder
		x_center_calendar = round_half_up(builder.width_target / 2)
		builder.init_xy(x_center_calendar, self.y_calendar_box_bottom + self.padding_calendar_days)

		padding_top = builder.get_size(0)
		dimension = builder.add_text(
			self.page.title or "",
			self.font_size_title_page,
			COLOR_WHITE,
			padding_top,
			Align.CENTER,
			Valign.TOP,
		)
		builder.add_y(dimension["height"] + padding_top)

		padding_top = builder.get_size(40)
		dimension = builder.add_text(
			self.page.subtitle or "",
			self.font_size_title_page_subtext,
			COLOR_WHITE,
			padding_top,
			Align.CENTER,
			Valign.TOP,
		)
		builder.add_y(dimension["height"] + padding_top)

	#============================================
	def add_day(self, day: int, align: Align = Align.LEFT) -> None:
		"""
		Draw one day number and move the cursor to the next one.

		Mondays get an extra gap in front so weeks stand apart.

		Args:
			day: Day of month.
			align: LEFT for the right half (growing to the right),
				RIGHT for the left half (growing to the left).
		"""
		builder = self.image_builder
		calendar_page = self.page.calendar_page
		week_distance = 0
		if calendar_page.get_day_of_week(day) == pcal.config.DAY_MONDAY:
			week_distance = self.day_distance

		if align == Align.LEFT:
			builder.add_x(self.day_distance + week_distance)
		else:
			builder.add_x(-self.day_distance)

		dimension = builder.add_text(f"{day:02d}", self.font_size_day, self.get_day_color_key(day), align=align)

		self.position_days[calendar_page.get_day_key(day)] = {
			"x": builder.get_position_x(),
			"y": builder.get_position_y(),
			"align": align,
			"dimension": dimension,
			"day": day,
		}

		if align == Align.LEFT:
			builder.add_x(dimension["width"])
		else:
			builder.add_x(-(dimension["width"] + week_distance))

	def add_year_month_and_days(self) -> None:
		builder = self.image_builder
		x_center_calendar = round_half_up(builder.width_target / 2) + round_half_up(builder.width_target / 8)
		builder.init_xy(x_center_calendar, self.y_calendar_box_bottom + self.padding_calendar_days)

		padding_top = builder.get_size(0)
		dimension_month = builder.add_text(
			f"{self.page.month:02d}",
			self.font_size_month,
			COLOR_WHITE,
			padding_top,
			Align.CENTER,
			Valign.TOP,
		)
		builder.add_y(dimension_month["height"] + padding_top)

		padding_top = builder.get_size(20)
		dimension_year = builder.add_text(
			f"{self.page.year}",
			self.font_size_year,
			COLOR_WHITE,
			padding_top,
			Align.CENTER,
			Valign.TOP,
		)
		builder.add_y(dimension_year["height"] + padding_top)

		days = self.page.calendar_page.get_days()
		half_year_width = round_half_up(dimension_year["width"] / 2)

		# left half runs from the middle outwards
		builder.set_position_x(x_center_calendar - half_year_width)
		builder.add_x(-self.day_distance)
		for day in range(days.left_to, days.left_from - 1, -1):
			self.add_day(day, Align.RIGHT)

		builder.set_position_x(x_center_calendar + half_year_width)
		builder.add_x(self.day_distance)
		for day in range(days.right_from, days.right_to + 1):
			self.add_day(day, Align.LEFT)

	#============================================
	def add_calendar_week(self, day_key: str) -> None:
		"""
		"KW nn >" below a Monday plus a line in front of the day.
		"""
		builder = self.image_builder
		position_day = self.position_days[day_key]
		week_number = self.page.calendar_page.get_calendar_week_if_monday(position_day["day"])
		if week_number is None:
			return

		builder.set_position_x(position_day["x"])
		builder.set_position_y(position_day["y"])
		if position_day["align"] != Align.LEFT:
			builder.remove_x(position_day["dimension"]["width"])
		builder.add_y(round_half_up(1.0 * self.font_size_day))

		builder.add_text(f"KW {week_number:02d} >", int(math.ceil(self.font_size_day * 0.5)), COLOR_WHITE)

		line_x = builder.get_position_x() - round_half_up(self.day_distance)
		builder.draw_line(
			line_x,
			builder.get_position_y(),
			line_x,
			position_day["y"] - self.font_size_day,
			COLOR_WHITE,
		)

	def add_calendar_weeks(self) -> None:
		for day_key in self.position_days:
			self.add_calendar_week(day_key)

	def add_holiday_or_event(self, day_key: str) -> None:
		"""
		Rotated caption above a day with a holiday or event.
		"""
		builder = self.image_builder
		events_and_holidays = self.page.calendar_page.events_and_holidays
		if day_key not in events_and_holidays:
			return
		position_day = self.position_days[day_key]
		width_day = position_day["dimension"]["width"]

		builder.set_position_x(position_day["x"])
		builder.set_position_y(position_day["y"])

		angle_event = builder.get_angle(80)
		font_size_event = int(math.ceil(self.font_size_day * 0.6))
		name = truncate_caption(events_and_holidays[day_key])
		x_event = font_size_event + round_half_up((width_day - font_size_event) / 2)

		if position_day["align"] != Align.LEFT:
			builder.remove_x(width_day)
		builder.add_x(x_event)
		builder.remove_y(round_half_up(1.5 * self.font_size_day))

		builder.add_text(name, font_size_event, COLOR_WHITE, angle=angle_event)

	def add_holidays_and_events(self) -> None:
		for day_key in self.position_days:
			self.add_holiday_or_event(day_key)

	#============================================
	def add_qr_code(self) -> None:
		builder = self.image_builder
		if not self.url:
			return
		blob = pcal.qr_code.render_qr_code(self.url, self.qr_code_version)
		builder.add_image_blob(
			blob,
			self.padding_calendar_days,
			builder.height_target - self.padding_calendar_days - self.height_qr_code,
			self.width_qr_code,
			self.height_qr_code,
			pcal.qr_code.QR_LIGHT_COLOR,
		)


class DesignDefaultJTAC(DesignDefault):
	"""
	Default layout with a solid color and the page title instead of the photo.
	"""

	uses_source_image = False
	font_size_image = FONT_SIZE_IMAGE

	def do_init(self) -> None:
		super().do_init()
		self.font_size_image = self.image_builder.get_size(type(self).font_size_image)

	def create_colors(self) -> None:
		super().create_colors()
		self.image_builder.create_color_from_config(COLOR_CUSTOM, CONFIG_COLOR)

	def add_image(self) -> None:
		builder = self.image_builder
		builder.add_rectangle(0, 0, builder.width_target, builder.height_target, COLOR_CUSTOM)
		builder.init_xy(round_half_up(builder.width_target / 2), round_half_up(builder.height_target / 2))
		builder.add_text(self.page.page_title, self.font_size_image, COLOR_WHITE, align=Align.CENTER)


class DesignText(DesignBase):
	"""
	Quote page: colored background, centered text and its author.
	"""

	default_config = {
		CONFIG_BACKGROUND_COLOR: [255, 0, 0],
		CONFIG_BOX_BOTTOM_RATIO: 9 / 48,
		CONFIG_TEXT: "Some nice text.",
		CONFIG_TEXT_FONT_SIZE: 300,
		CONFIG_AUTHOR: "Author name",
		CONFIG_AUTHOR_FONT_SIZE: 100,
		CONFIG_AUTHOR_DISTANCE: 400,
	}
	uses_source_image = False

	def do_init(self) -> None:
		builder = self.image_builder
		self.text = self.get_config_string(CONFIG_TEXT)
		self.text_font_size = builder.get_size(self.get_config_int(CONFIG_TEXT_FONT_SIZE))
		self.author = self.get_config_string(CONFIG_AUTHOR)
		self.author_font_size = builder.get_size(self.get_config_int(CONFIG_AUTHOR_FONT_SIZE))
		self.author_distance = builder.get_size(self.get_config_int(CONFIG_AUTHOR_DISTANCE))
		self.create_colors()

	def create_colors(self) -> None:
		builder = self.image_builder
		builder.reset_colors()
		builder.create_color(COLOR_WHITE, 255, 255, 255)
		background_color = self.get_config_list(CONFIG_BACKGROUND_COLOR)
		if len(background_color) < 3:
			raise ValueError("Background color needs three values.")
		red, green, blue = background_color[:3]
		if not all(isinstance(value, int) for value in (red, green, blue)):
			raise ValueError("Invalid value type for background color, int expected.")
		builder.create_color(COLOR_BACKGROUND, red, green, blue)

	def do_build(self) -> None:
		builder = self.image_builder
		builder.add_rectangle(0, 0, builder.width_target, builder.height_target, COLOR_BACKGROUND)

		box_bottom_ratio = self.get_config_float(CONFIG_BOX_BOTTOM_RATIO)
		x_center = round_half_up(builder.width_target / 2)
		y_center = round_half_up((builder.height_target - builder.height_target * box_bottom_ratio) / 2)
		builder.init_xy(x_center, y_center)

		dimension = builder.add_text(
			self.text,
			self.text_font_size,
			COLOR_WHITE,
			align=Align.CENTER,
			valign=Valign.MIDDLE,
		)
		builder.add_y(round_half_up(dimension["height"] / 2) + self.author_distance + self.author_font_size)
		builder.add_text(
			f"- {self.author} -",
			self.author_font_size,
			COLOR_WHITE,
			align=Align.CENTER,
			valign=Valign.MIDDLE,
		)


class DesignImage(DesignBase):
	"""
	The photo alone, scaled to the page. Used for `image` and `blank`.
	"""

	def do_init(self) -> None:
		pass

	def do_build(self) -> None:
		builder = self.image_builder
		builder.add_image(0, 0, builder.width_target, builder.height_target)


class DesignBlankJTAC(DesignBase):
	font_size_image = FONT_SIZE_IMAGE

	def do_init(self) -> None:
		self.font_size_image = self.image_builder.get_size(type(self).font_size_image)

	def do_build(self) -> None:
		builder = self.image_builder
		builder.reset_colors()
		builder.create_color(COLOR_WHITE, 255, 255, 255)
		builder.create_color_from_config(COLOR_CUSTOM, CONFIG_COLOR)
		builder.add_image(0, 0, builder.width_target, builder.height_target)
		builder.init_xy(round_half_up(builder.width_target / 2), round_half_up(builder.height_target / 2))
		builder.add_text(self.page.page_title, self.font_size_image, COLOR_WHITE, align=Align.CENTER)
