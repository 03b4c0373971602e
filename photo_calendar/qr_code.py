"""
QR code rendering for calendar pages.
"""

# Standard Library
import io
import logging

# PIP3 modules
import qrcode
import qrcode.constants

# local repo modules
import photo_calendar as pcal
import photo_calendar.config


QR_CODE_VERSION = pcal.config.QR_CODE_VERSION

# white modules on a red background that the builders key out
QR_DARK_COLOR = (255, 255, 255)
QR_LIGHT_COLOR = (255, 0, 0)
QR_TARGET_WIDTH = 800

_LOGGER = logging.getLogger(__name__)


#============================================
def matrix_length(version: int) -> int:
	"""
	Number of modules per side for a QR version.
	"""
	return 17 + 4 * version


#============================================
def render_qr_code(
	url: str,
	version: int = QR_CODE_VERSION,
	width: int = QR_TARGET_WIDTH,
	dark_color: tuple[int, int, int] = QR_DARK_COLOR,
	light_color: tuple[int, int, int] = QR_LIGHT_COLOR,
) -> bytes:
	"""
	Render a QR code as PNG bytes.

	Args:
		url: Encoded payload.
		version: Minimum QR version, grown when the payload needs more room.
		width: Wanted edge length in pixels, rounded up to whole modules.
		dark_color: Module color.
		light_color: Background color.

	Returns:
		PNG image bytes.
	"""
	if not url:
		raise ValueError("Unable to render a QR code for an empty url.")
	scale = -(-width // matrix_length(version))
	qr = qrcode.QRCode(
		version=version,
		error_correction=qrcode.constants.ERROR_CORRECT_H,
		box_size=scale,
		border=0,
	)
	qr.add_data(url)
	qr.make(fit=True)
	if qr.version != version:
		_LOGGER.debug("QR code version grown from %d to %d for %s", version, qr.version, url)
	image = qr.make_image(fill_color=dark_color, back_color=light_color)
	buffer = io.BytesIO()
	image.save(buffer)
	return buffer.getvalue()
