"""
Flask app serving calendar pages and calendar listings.
"""

# Standard Library
import io
import logging
import pathlib

# PIP3 modules
import flask
import yaml

# local repo modules
import photo_calendar as pcal
import photo_calendar.config
import photo_calendar.params
import photo_calendar.render


CalendarConfig = pcal.config.CalendarConfig

IMAGE_MIME_TYPES = {
	"jpg": "image/jpeg",
	"jpeg": "image/jpeg",
	"png": "image/png",
}

# OSError covers missing files and photos Pillow cannot identify
CONFIG_ERRORS = (OSError, ValueError, yaml.YAMLError)
PAGE_ERRORS = CONFIG_ERRORS + (KeyError,)

_LOGGER = logging.getLogger(__name__)


#============================================
def page_to_dict(config: CalendarConfig, page) -> dict:
	return {
		"number": page.number,
		"year": page.year,
		"month": page.month,
		"page_title": page.page_title,
		"url": pcal.params.resolve_url(config, page),
		"image": pcal.config.URL_PAGE.format(base=config.url_base, identifier=config.identifier, number=page.number),
	}


#============================================
def calendar_to_dict(config: CalendarConfig, with_pages: bool = True) -> dict:
	"""
	JSON view of a calendar.

	Args:
		config: Calendar config.
		with_pages: Include the page list.

	Returns:
		JSON serializable dict.
	"""
	data = {
		"identifier": config.identifier,
		"name": config.name,
		"page_count": len(config.pages),
		"url": pcal.config.URL_CALENDAR.format(base=config.url_base, identifier=config.identifier),
	}
	if with_pages:
		data["pages"] = [page_to_dict(config, page) for page in config.pages]
	return data


#============================================
def error_response(message: str, status: int = 404) -> flask.Response:
	"""
	PNG response showing the error message.
	"""
	data = pcal.render.render_error_image(message, font_path=flask.current_app.config.get("FONT_PATH"))
	return flask.Response(data, status=status, mimetype="image/png")


#============================================
def create_app(data_dir: pathlib.Path, font_path: str | None = None, build_missing: bool = True) -> flask.Flask:
	"""
	Create the web app.

	Args:
		data_dir: Data root holding `calendar/<identifier>/config.yml`.
		font_path: TrueType font used for built pages and error images.
		build_missing: Build page images that do not exist yet on request.

	Returns:
		Flask app.
	"""
	app = flask.Flask(__name__)
	app.config["DATA_DIR"] = pathlib.Path(data_dir)
	app.config["FONT_PATH"] = font_path
	app.config["BUILD_MISSING"] = build_missing

	def load_config(identifier: str) -> CalendarConfig:
		directory = pcal.config.calendar_directory(app.config["DATA_DIR"], identifier)
		return pcal.config.load_calendar_config(directory)

	@app.route("/v/<identifier>/<int:number>")
	def page_image(identifier: str, number: int):
		try:
			config = load_config(identifier)
			page = pcal.params.find_page(config, number=number)
			target_path = pcal.params.resolve_target_path(config, page)
			if not target_path.is_file():
				if not app.config["BUILD_MISSING"]:
					raise FileNotFoundError(f"Image of page {number} was not built yet.")
				pcal.render.build_page(config, number=number, font_path=app.config["FONT_PATH"])
		except PAGE_ERRORS as error:
			_LOGGER.warning("Page %s/%s not available: %s", identifier, number, error)
			message = error.args[0] if error.args else str(error)
			return error_response(str(message))
		extension = target_path.suffix.lstrip(".").lower()
		return flask.send_file(
			io.BytesIO(target_path.read_bytes()),
			mimetype=IMAGE_MIME_TYPES.get(extension, "application/octet-stream"),
			as_attachment=False,
			download_name=target_path.name,
		)

	@app.route("/v/<identifier>.json")
	def calendar_json(identifier: str):
		try:
			config = load_config(identifier)
		except CONFIG_ERRORS as error:
			return {"error": str(error)}, 404
		return calendar_to_dict(config)

	@app.route("/calendars.json")
	def calendars_json():
		calendars = pcal.render.list_calendars(app.config["DATA_DIR"])
		return {
			"calendars": [calendar_to_dict(config, with_pages=False) for config in calendars if config.public],
		}

	return app
