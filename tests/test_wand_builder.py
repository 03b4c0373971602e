import pathlib

import PIL.Image
import pytest

# wand raises a plain ImportError when the MagickWand library is missing
wand_image = pytest.importorskip("wand.image", exc_type=ImportError)

import photo_calendar as pcal
import photo_calendar.config
import photo_calendar.design
import photo_calendar.factory
import photo_calendar.params
import photo_calendar.wand_builder


#============================================
def test_factory_aliases() -> None:
	for engine in ("imagick", "wand"):
		builder_class = pcal.factory.get_builder_class(engine)
		assert builder_class is pcal.wand_builder.WandImageBuilder


#============================================
def test_to_wand_color() -> None:
	color = pcal.wand_builder.to_wand_color((255, 0, 0, 255))
	assert (color.red_int8, color.green_int8, color.blue_int8) == (255, 0, 0)
	color = pcal.wand_builder.to_wand_color((0, 0, 0, 153))
	assert color.alpha == pytest.approx(0.6, abs=0.01)


#============================================
def test_angle_is_clockwise() -> None:
	builder = pcal.wand_builder.WandImageBuilder(pcal.design.DesignImage())
	assert builder.get_angle(80) == 280


#============================================
def test_build_month_page(sample_calendar: pathlib.Path) -> None:
	"""
	The ImageMagick backend renders the default design.
	"""
	config = pcal.config.load_calendar_config(sample_calendar)
	page = pcal.params.build_page_parameters(config, number=1)
	builder = pcal.factory.create_image_builder("imagick", page.design.type, page.design.config)
	builder.init(page)
	container = builder.build()
	assert container.target.mime_type == "image/png"
	assert (container.target.width, container.target.height) == (600, 400)
	with PIL.Image.open(container.target.path) as image:
		red, _green, _blue = image.convert("RGB").getpixel((590, 10))
		assert red >= 215
