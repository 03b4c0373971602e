"""
GPS coordinates from EXIF data and DMS formatting.
"""

# Standard Library
import math
import pathlib
import re

# PIP3 modules
import PIL.Image


GPS_IFD = 0x8825
GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4

DECIMAL_PATTERN = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*$")


#============================================
def format_dms(degrees: int, minutes: int, seconds: float, ref: str) -> str:
	return f"{degrees:d}°{minutes:d}′{seconds:.4f}″{ref}"


#============================================
def decimal_to_dms(value: float, positive_ref: str, negative_ref: str) -> str:
	"""
	Format a decimal degree value as degrees, minutes and seconds.

	Args:
		value: Decimal degrees.
		positive_ref: Hemisphere for values >= 0 (N or E).
		negative_ref: Hemisphere for negative values (S or W).

	Returns:
		DMS string like 40°41′21.2892″N.
	"""
	ref = positive_ref if value >= 0 else negative_ref
	value = abs(value)
	degrees = int(math.floor(value))
	minutes_float = (value - degrees) * 60
	minutes = int(math.floor(minutes_float))
	seconds = (minutes_float - minutes) * 60
	# avoid 60.0000″ from float noise
	if round(seconds, 4) >= 60.0:
		seconds = 0.0
		minutes += 1
	if minutes >= 60:
		minutes = 0
		degrees += 1
	return format_dms(degrees, minutes, seconds, ref)


#============================================
def parse_coordinate(value: str) -> str:
	"""
	Turn a decimal "lat, lon" string into DMS; other strings pass through.

	Args:
		value: Coordinate string.

	Returns:
		Display string.
	"""
	match = DECIMAL_PATTERN.match(value)
	if match is None:
		return value.strip()
	latitude = float(match.group(1))
	longitude = float(match.group(2))
	if abs(latitude) > 90 or abs(longitude) > 180:
		return value.strip()
	return f"{decimal_to_dms(latitude, 'N', 'S')}, {decimal_to_dms(longitude, 'E', 'W')}"


#============================================
def _rational_to_number(value) -> float:
	if isinstance(value, tuple) and len(value) == 2:
		numerator, denominator = value
		return numerator / (denominator or 1)
	return float(value)


#============================================
def extract_coordinate(values, ref: str) -> str:
	"""
	Format an EXIF (degrees, minutes, seconds) triple.

	Fractional minutes are carried over into seconds.

	Args:
		values: Three EXIF rationals.
		ref: Hemisphere reference.

	Returns:
		DMS string.
	"""
	degrees = _rational_to_number(values[0])
	minutes = _rational_to_number(values[1])
	seconds = _rational_to_number(values[2])
	if minutes != math.floor(minutes):
		seconds += 60 * (minutes - math.floor(minutes))
	return format_dms(int(degrees), int(minutes), seconds, ref)


#============================================
def read_exif_coordinate(path: pathlib.Path) -> str | None:
	"""
	Read the GPS position from an image.

	Args:
		path: Image path.

	Returns:
		"lat, lon" in DMS or None without GPS data.
	"""
	with PIL.Image.open(path) as image:
		gps = image.getexif().get_ifd(GPS_IFD)
	if GPS_LATITUDE not in gps or GPS_LONGITUDE not in gps:
		return None
	latitude = extract_coordinate(gps[GPS_LATITUDE], str(gps.get(GPS_LATITUDE_REF, "N")))
	longitude = extract_coordinate(gps[GPS_LONGITUDE], str(gps.get(GPS_LONGITUDE_REF, "E")))
	return f"{latitude}, {longitude}"
