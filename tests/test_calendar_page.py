import datetime

import photo_calendar as pcal
import photo_calendar.calendar_page
import photo_calendar.config


CalendarEvent = pcal.config.CalendarEvent
CalendarPage = pcal.calendar_page.CalendarPage


#============================================
def test_get_days_splits_month() -> None:
	"""
	The left half gets the extra day of odd month lengths.
	"""
	days = pcal.calendar_page.get_days(2024, 1)
	assert (days.left_from, days.left_to, days.right_from, days.right_to) == (1, 16, 17, 31)
	days = pcal.calendar_page.get_days(2024, 2)
	assert (days.left_from, days.left_to, days.right_from, days.right_to) == (1, 15, 16, 29)
	days = pcal.calendar_page.get_days(2023, 2)
	assert (days.left_to, days.right_from, days.right_to) == (14, 15, 28)


#============================================
def test_day_of_week_sunday_is_zero() -> None:
	"""
	2024-01-07 is a Sunday, 2024-01-08 a Monday.
	"""
	assert pcal.calendar_page.get_day_of_week(2024, 1, 7) == 0
	assert pcal.calendar_page.get_day_of_week(2024, 1, 8) == 1
	assert pcal.calendar_page.get_day_of_week(2024, 1, 6) == 6


#============================================
def test_calendar_week_only_on_mondays() -> None:
	"""
	ISO week numbers are returned for Mondays only.
	"""
	assert pcal.calendar_page.get_calendar_week_if_monday(2024, 1, 1) == 1
	assert pcal.calendar_page.get_calendar_week_if_monday(2024, 1, 2) is None
	# 2021-01-04 is the first Monday of ISO week 1
	assert pcal.calendar_page.get_calendar_week_if_monday(2021, 1, 4) == 1
	assert pcal.calendar_page.get_calendar_week_if_monday(2024, 12, 30) == 1


#============================================
def test_day_key() -> None:
	"""
	Day keys are zero padded ISO dates.
	"""
	assert CalendarPage(2024, 3).get_day_key(5) == "2024-03-05"


#============================================
def test_events_and_holidays() -> None:
	"""
	Birthdays get the age, unknown birth years do not, same days are joined.
	"""
	birthdays = [
		CalendarEvent(datetime.date(1990, 5, 3), "Alex"),
		CalendarEvent(datetime.date(2100, 5, 10), "Sam"),
		CalendarEvent(datetime.date(2024, 5, 20), "Newborn"),
		CalendarEvent(datetime.date(1985, 6, 1), "Other month"),
	]
	holidays = [
		CalendarEvent(datetime.date(2024, 5, 1), "Labour Day"),
		CalendarEvent(datetime.date(2023, 5, 3), "Local Holiday"),
		CalendarEvent(datetime.date(2024, 12, 25), "Christmas"),
	]
	page = CalendarPage(2024, 5, holidays, birthdays)
	events = page.create_events_and_holidays()
	assert events == {
		"2024-05-03": "Alex (34), Local Holiday",
		"2024-05-10": "Sam",
		"2024-05-20": "Newborn",
		"2024-05-01": "Labour Day",
	}
	assert page.holidays["2024-05-01"] is True
	assert page.holidays["2024-05-03"] is True
	assert page.holidays["2024-05-10"] is False


#============================================
def test_red_days() -> None:
	"""
	Sundays and holidays are red, birthdays are not.
	"""
	holidays = [CalendarEvent(datetime.date(2024, 5, 1), "Labour Day")]
	birthdays = [CalendarEvent(datetime.date(1990, 5, 2), "Alex")]
	page = CalendarPage(2024, 5, holidays, birthdays)
	page.create_events_and_holidays()
	assert page.is_red_day(1) is True
	assert page.is_red_day(2) is False
	# 2024-05-05 is a Sunday
	assert page.is_red_day(5) is True


#============================================
def test_title_page_has_no_events() -> None:
	"""
	Month 0 is the title page without days.
	"""
	birthdays = [CalendarEvent(datetime.date(1990, 1, 2), "Alex")]
	page = CalendarPage(2024, 0, [], birthdays)
	assert page.create_events_and_holidays() == {}
