import io

import PIL.Image
import pytest

import photo_calendar as pcal
import photo_calendar.qr_code


#============================================
def test_matrix_length() -> None:
	"""
	Version 5 has 37 modules per side.
	"""
	assert pcal.qr_code.matrix_length(5) == 37
	assert pcal.qr_code.matrix_length(1) == 21


#============================================
def test_render_qr_code_png() -> None:
	"""
	The QR code is a square PNG without quiet zone in red and white.
	"""
	data = pcal.qr_code.render_qr_code("https://example.org/v/family/1")
	assert data[:8] == b"\x89PNG\r\n\x1a\n"
	with PIL.Image.open(io.BytesIO(data)) as image:
		image = image.convert("RGB")
		width, height = image.size
		# 37 modules of ceil(800 / 37) pixels
		assert width == height == 37 * 22
		# finder pattern corner is a dark module
		assert image.getpixel((0, 0)) == pcal.qr_code.QR_DARK_COLOR
		colors = {color for _count, color in image.getcolors(maxcolors=16)}
	assert colors == {pcal.qr_code.QR_DARK_COLOR, pcal.qr_code.QR_LIGHT_COLOR}


#============================================
def test_render_qr_code_empty_url() -> None:
	"""
	Empty payloads are rejected.
	"""
	with pytest.raises(ValueError):
		pcal.qr_code.render_qr_code("")
