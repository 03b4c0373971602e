"""
Pick the image builder and design for an engine and design type.
"""

# Standard Library
import importlib

# local repo modules
import photo_calendar as pcal
import photo_calendar.config
import photo_calendar.design


ENGINE_ALIASES = pcal.config.ENGINE_ALIASES
ENGINE_PILLOW = pcal.config.ENGINE_PILLOW
ENGINE_WAND = pcal.config.ENGINE_WAND

# wand needs the ImageMagick shared library, so it is only loaded on request
BUILDER_CLASSES = {
	ENGINE_PILLOW: ("photo_calendar.pil_builder", "PilImageBuilder"),
	ENGINE_WAND: ("photo_calendar.wand_builder", "WandImageBuilder"),
}

DESIGN_CLASSES = {
	pcal.config.DESIGN_DEFAULT: pcal.design.DesignDefault,
	pcal.config.DESIGN_DEFAULT_JTAC: pcal.design.DesignDefaultJTAC,
	pcal.config.DESIGN_BLANK: pcal.design.DesignImage,
	pcal.config.DESIGN_BLANK_JTAC: pcal.design.DesignBlankJTAC,
	pcal.config.DESIGN_IMAGE: pcal.design.DesignImage,
	pcal.config.DESIGN_TEXT: pcal.design.DesignText,
}


#============================================
def get_builder_class(engine: str):
	"""
	Resolve the builder class of an engine name or alias.

	Args:
		engine: Engine name, e.g. "gdimage" or "imagick".

	Returns:
		BaseImageBuilder subclass.
	"""
	normalized = ENGINE_ALIASES.get(str(engine).lower())
	if normalized is None:
		raise ValueError(f"Unsupported design engine \"{engine}\" was given.")
	module_name, class_name = BUILDER_CLASSES[normalized]
	module = importlib.import_module(module_name)
	return getattr(module, class_name)


#============================================
def create_design(design_type: str) -> pcal.design.DesignBase:
	if design_type not in DESIGN_CLASSES:
		raise ValueError(f"Unsupported design type \"{design_type}\" was given.")
	return DESIGN_CLASSES[design_type]()


#============================================
def create_image_builder(
	engine: str,
	design_type: str,
	config: dict | None = None,
	font_path: str | None = None,
):
	"""
	Create an image builder wired to a fresh design.

	Args:
		engine: Engine name or alias.
		design_type: Design type name.
		config: Design config merged over the design defaults.
		font_path: TrueType font, None for the backend default.

	Returns:
		Image builder instance.
	"""
	builder_class = get_builder_class(engine)
	design = create_design(design_type)
	return builder_class(design, config or {}, font_path)
