import pathlib

import PIL.Image

import photo_calendar as pcal
import photo_calendar.exif_coordinate


#============================================
def test_decimal_to_dms() -> None:
	"""
	Decimal degrees with hemisphere letters.
	"""
	assert pcal.exif_coordinate.decimal_to_dms(40.68924, "N", "S") == "40°41′21.2640″N"
	assert pcal.exif_coordinate.decimal_to_dms(-74.0445, "E", "W") == "74°2′40.2000″W"


#============================================
def test_parse_coordinate() -> None:
	"""
	Decimal pairs are converted, anything else is kept.
	"""
	assert pcal.exif_coordinate.parse_coordinate("0.5, -0.5") == "0°30′0.0000″N, 0°30′0.0000″W"
	assert pcal.exif_coordinate.parse_coordinate(" Lisbon ") == "Lisbon"
	# out of range stays as given
	assert pcal.exif_coordinate.parse_coordinate("95, 10") == "95, 10"


#============================================
def test_extract_coordinate_from_rationals() -> None:
	"""
	EXIF rationals, including fractional minutes.
	"""
	values = ((47, 1), (30, 1), (1500, 100))
	assert pcal.exif_coordinate.extract_coordinate(values, "N") == "47°30′15.0000″N"
	values = (8.0, 15.5, 0.0)
	assert pcal.exif_coordinate.extract_coordinate(values, "E") == "8°15′30.0000″E"


#============================================
def test_read_exif_coordinate_without_gps(tmp_path: pathlib.Path) -> None:
	"""
	Images without GPS data give None.
	"""
	path = tmp_path / "photo.jpg"
	PIL.Image.new("RGB", (10, 10), (255, 255, 255)).save(path)
	assert pcal.exif_coordinate.read_exif_coordinate(path) is None
