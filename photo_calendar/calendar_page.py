"""
Date logic of one calendar page: day split, weekdays, calendar weeks,
holidays and birthday events.
"""

# Standard Library
import calendar
import dataclasses
import datetime
import math

# local repo modules
import photo_calendar as pcal
import photo_calendar.config


CalendarEvent = pcal.config.CalendarEvent

BIRTHDAY_YEAR_NOT_GIVEN = pcal.config.BIRTHDAY_YEAR_NOT_GIVEN
DAY_SUNDAY = pcal.config.DAY_SUNDAY
DAY_MONDAY = pcal.config.DAY_MONDAY


@dataclasses.dataclass
class DaySplit:
	left_from: int
	left_to: int
	right_from: int
	right_to: int


#============================================
def get_days(year: int, month: int) -> DaySplit:
	"""
	Split the days of a month into a left and a right half.

	Args:
		year: Year.
		month: Month 1-12.

	Returns:
		DaySplit, left half gets the extra day for odd month lengths.
	"""
	days = calendar.monthrange(year, month)[1]
	day_to_left = int(math.ceil(days / 2))
	return DaySplit(
		left_from=1,
		left_to=day_to_left,
		right_from=day_to_left + 1,
		right_to=days,
	)


#============================================
def get_day_of_week(year: int, month: int, day: int) -> int:
	"""
	Day of week with 0 = Sunday and 6 = Saturday.
	"""
	return datetime.date(year, month, day).isoweekday() % 7


#============================================
def get_week_number(year: int, month: int, day: int) -> int:
	"""
	ISO-8601 week number.
	"""
	return datetime.date(year, month, day).isocalendar()[1]


#============================================
def get_calendar_week_if_monday(year: int, month: int, day: int) -> int | None:
	"""
	Return the ISO week number when the day is a Monday.

	Args:
		year: Year.
		month: Month.
		day: Day of month.

	Returns:
		Week number or None.
	"""
	if get_day_of_week(year, month, day) != DAY_MONDAY:
		return None
	return get_week_number(year, month, day)


#============================================
def get_year_month_key(year: int, month: int) -> str:
	return f"{year:04d}-{month:02d}"


class CalendarPage:
	"""
	Year/month of one page plus its merged holidays and events.
	"""

	def __init__(
		self,
		year: int,
		month: int,
		holidays: list[CalendarEvent] | None = None,
		birthdays: list[CalendarEvent] | None = None,
	):
		self.year = year
		self.month = month
		self.holidays_raw = list(holidays or [])
		self.birthdays_raw = list(birthdays or [])
		self.events_and_holidays: dict[str, str] = {}
		self.holidays: dict[str, bool] = {}
		self._names: dict[str, list[str]] = {}

	def get_day_key(self, day: int) -> str:
		return f"{self.year:04d}-{self.month:02d}-{day:02d}"

	def get_days(self) -> DaySplit:
		return get_days(self.year, self.month)

	def get_day_of_week(self, day: int) -> int:
		return get_day_of_week(self.year, self.month, day)

	def get_calendar_week_if_monday(self, day: int) -> int | None:
		return get_calendar_week_if_monday(self.year, self.month, day)

	def is_red_day(self, day: int) -> bool:
		"""
		Sundays and holidays are printed red.
		"""
		if self.get_day_of_week(day) == DAY_SUNDAY:
			return True
		return self.holidays.get(self.get_day_key(day), False) is True

	def _add_event_or_holiday(self, key: str, name: str, holiday: bool = False) -> None:
		self._names.setdefault(key, []).append(name)
		self.holidays[key] = holiday

	def _add_events(self) -> None:
		year_month_page = get_year_month_key(self.year, self.month)
		for birthday in self.birthdays_raw:
			if get_year_month_key(self.year, birthday.date.month) != year_month_page:
				continue
			event_key = self.get_day_key(birthday.date.day)
			if birthday.date.year == BIRTHDAY_YEAR_NOT_GIVEN:
				self._add_event_or_holiday(event_key, birthday.title)
				continue
			age = self.year - birthday.date.year
			if age <= 0:
				self._add_event_or_holiday(event_key, birthday.title)
				continue
			self._add_event_or_holiday(event_key, f"{birthday.title} ({age})")

	def _add_holidays(self) -> None:
		for holiday in self.holidays_raw:
			if holiday.date.month != self.month:
				continue
			self._add_event_or_holiday(self.get_day_key(holiday.date.day), holiday.title, True)

	def create_events_and_holidays(self) -> dict[str, str]:
		"""
		Collect birthdays and holidays of this month keyed by day.

		Returns:
			Mapping of day key to the joined caption.
		"""
		self._names = {}
		self.holidays = {}
		if self.month == 0:
			self.events_and_holidays = {}
			return self.events_and_holidays
		self._add_events()
		self._add_holidays()
		self.events_and_holidays = {key: ", ".join(names) for key, names in self._names.items()}
		return self.events_and_holidays
