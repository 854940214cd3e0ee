"""
Shared configuration and constants.
"""

# Standard Library
import dataclasses
import json
import pathlib

# local repo modules
import qr_label_sheets as qls
import qr_label_sheets.errors


ConfigurationError = qls.errors.ConfigurationError

MM_TO_POINTS = 2.83465
PAGE_SIZES = {
	"A4": (210.0, 297.0),
	"A3": (297.0, 420.0),
	"LETTER": (215.9, 279.4),
}
ORIENTATIONS = ("portrait", "landscape")
SYMBOLOGIES = ("qr", "ean13", "code128")
ERROR_TOLERANCES = ("L", "M", "Q", "H")

DEFAULT_BOX_WIDTH = 50.0
DEFAULT_BOX_HEIGHT = 30.0
DEFAULT_BOX_SPACING = 10.0
DEFAULT_CODE_SIZE = 0.6
DEFAULT_FONT_FAMILY = "helvetica"
DEFAULT_FONT_SIZE = 9.0
DEFAULT_FOOTER_FONT_SIZE = 12.0
DEFAULT_FOOTER_HEIGHT = 15.0
DEFAULT_SERIAL_TO_BOX_GAP = 3.0
DEFAULT_SERIAL_TO_QR_GAP = 26.0
DEFAULT_QR_TO_BOX_GAP = 3.0
DEFAULT_BORDER_WIDTH = 0.3

MIN_MARGIN = 5.0
COUNT_OUTSIDE_OFFSET = 1.5
COUNT_INSIDE_PADDING = 1.5
COUNT_PAGE_INSET = 1.0
BARCODE_CAPTION_GAP = 0.5
DESCRIPTION_MAX_CHARS = 25
FOOTER_TEXT_INSET = 10.0
TEXT_BASELINE_RATIO = 0.35
LINE_LEADING = 1.2
CODE_IMAGE_DPI = 300
ENCODE_WORKERS = 4
PROGRESS_BAR_WIDTH = 20
PROGRESS_UPDATE_EVERY = 10

DEFAULT_FONT_REGULAR = "Helvetica"
STANDARD_FONTS = {
	"helvetica": "Helvetica",
	"helvetica-bold": "Helvetica-Bold",
	"times": "Times-Roman",
	"times-bold": "Times-Bold",
	"courier": "Courier",
	"courier-bold": "Courier-Bold",
}


@dataclasses.dataclass
class Palette:
	border: str = "#FF0000"
	count: str = "#FF0000"
	serial: str = "#000000"
	code: str = "#000000"
	background: str = "#FFFFFF"
	footer_qty: str = "#FF0000"
	footer_info: str = "#00AA50"


@dataclasses.dataclass
class LayoutOptions:
	box_width: float = DEFAULT_BOX_WIDTH
	box_height: float = DEFAULT_BOX_HEIGHT
	box_spacing: float = DEFAULT_BOX_SPACING
	row_spacing: float | None = None
	code_size: float = DEFAULT_CODE_SIZE
	code_width: float | None = None
	code_height: float | None = None
	orientation: str = "portrait"
	page_size: str | tuple[float, float] | dict = "A4"
	font_family: str = DEFAULT_FONT_FAMILY
	font_size: float = DEFAULT_FONT_SIZE
	boxes_per_row: int | None = None
	boxes_per_column: int | None = None
	count_outside_box: bool = True
	show_footer: bool = True
	footer_qty_text: str | None = None
	footer_info_text: str | None = None
	footer_font_size: float = DEFAULT_FOOTER_FONT_SIZE
	footer_height: float = DEFAULT_FOOTER_HEIGHT
	palette: Palette = dataclasses.field(default_factory=Palette)
	code_transparent_bg: bool = True
	serial_to_box_gap: float = DEFAULT_SERIAL_TO_BOX_GAP
	serial_to_qr_gap: float = DEFAULT_SERIAL_TO_QR_GAP
	qr_to_box_gap: float = DEFAULT_QR_TO_BOX_GAP
	symbology: str = "qr"
	error_tolerance: str = "M"
	quantity_repeat: bool = False
	repeat_count: int = 1
	detect_sets: bool = True
	border_width: float = DEFAULT_BORDER_WIDTH

	@property
	def vertical_spacing(self) -> float:
		if self.row_spacing is None:
			return self.box_spacing
		return self.row_spacing

	@property
	def effective_repeat(self) -> int:
		if not self.quantity_repeat:
			return 1
		return self.repeat_count


#============================================
def merge_options(overrides: dict | None = None, base: LayoutOptions | None = None) -> LayoutOptions:
	"""
	Merge a partial set of option values over the defaults.

	Args:
		overrides: Mapping of LayoutOptions field names to values. A nested
			"palette" mapping is merged over the base palette.
		base: Options to merge over. Defaults to LayoutOptions().

	Returns:
		Validated LayoutOptions.
	"""
	if base is None:
		base = LayoutOptions()
	if not overrides:
		validate_options(base)
		return base

	known = {field.name for field in dataclasses.fields(LayoutOptions)}
	values: dict = {}
	for key, value in overrides.items():
		if key not in known:
			raise ConfigurationError(f"Unknown layout option: {key}", parameter=key)
		values[key] = value

	palette_values = values.pop("palette", None)
	palette = base.palette
	if palette_values is not None:
		if isinstance(palette_values, Palette):
			palette = palette_values
		else:
			palette_known = {field.name for field in dataclasses.fields(Palette)}
			for key in palette_values:
				if key not in palette_known:
					raise ConfigurationError(f"Unknown palette color: {key}", parameter=f"palette.{key}")
			palette = dataclasses.replace(base.palette, **palette_values)

	page_size = values.get("page_size")
	if isinstance(page_size, list):
		values["page_size"] = tuple(page_size)

	options = dataclasses.replace(base, palette=palette, **values)
	validate_options(options)
	return options


#============================================
def load_options_file(path: pathlib.Path) -> dict:
	"""
	Load option overrides from a JSON file.

	Args:
		path: JSON file path.

	Returns:
		Dict of overrides.
	"""
	text = path.read_text(encoding="utf-8")
	try:
		data = json.loads(text)
	except json.JSONDecodeError as error:
		raise ConfigurationError(f"Options file {path} is not valid JSON: {error}", parameter="options") from error
	if not isinstance(data, dict):
		raise ConfigurationError(f"Options file {path} must contain a JSON object", parameter="options")
	return data


#============================================
def _require_positive(name: str, value: float | None) -> None:
	"""
	Raise ConfigurationError unless value is a positive number.

	Args:
		name: Option name for the error message.
		value: Option value.
	"""
	if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
		raise ConfigurationError(f"{name} must be a number, got {value!r}", parameter=name)
	if value <= 0:
		raise ConfigurationError(f"{name} must be positive, got {value}", parameter=name)


#============================================
def validate_options(options: LayoutOptions) -> None:
	"""
	Validate layout options before any layout work.

	Page size resolution is validated by the unit converter.

	Args:
		options: Layout options.
	"""
	_require_positive("box_width", options.box_width)
	_require_positive("box_height", options.box_height)
	_require_positive("box_spacing", options.box_spacing)
	if options.row_spacing is not None:
		_require_positive("row_spacing", options.row_spacing)
	_require_positive("font_size", options.font_size)
	_require_positive("footer_font_size", options.footer_font_size)
	_require_positive("footer_height", options.footer_height)

	if options.code_width is not None or options.code_height is not None:
		_require_positive("code_width", options.code_width)
		_require_positive("code_height", options.code_height)
	else:
		_require_positive("code_size", options.code_size)
		if options.code_size > 1.0:
			raise ConfigurationError(
				f"code_size is a ratio of box height and must be at most 1, got {options.code_size}",
				parameter="code_size",
			)

	for name in ("serial_to_box_gap", "serial_to_qr_gap", "qr_to_box_gap"):
		value = getattr(options, name)
		if value < 0:
			raise ConfigurationError(f"{name} must not be negative, got {value}", parameter=name)

	for name in ("boxes_per_row", "boxes_per_column"):
		value = getattr(options, name)
		if value is not None and (not isinstance(value, int) or value <= 0):
			raise ConfigurationError(f"{name} must be a positive integer, got {value!r}", parameter=name)

	if options.orientation not in ORIENTATIONS:
		raise ConfigurationError(
			f"orientation must be one of {', '.join(ORIENTATIONS)}, got {options.orientation!r}",
			parameter="orientation",
		)
	if options.symbology not in SYMBOLOGIES:
		raise ConfigurationError(
			f"symbology must be one of {', '.join(SYMBOLOGIES)}, got {options.symbology!r}",
			parameter="symbology",
		)
	if options.error_tolerance not in ERROR_TOLERANCES:
		raise ConfigurationError(
			f"error_tolerance must be one of {', '.join(ERROR_TOLERANCES)}, got {options.error_tolerance!r}",
			parameter="error_tolerance",
		)
	if not isinstance(options.repeat_count, int) or options.repeat_count < 1:
		raise ConfigurationError(
			f"repeat_count must be an integer of at least 1, got {options.repeat_count!r}",
			parameter="repeat_count",
		)
	for field in dataclasses.fields(Palette):
		color = getattr(options.palette, field.name)
		if not is_hex_color(color):
			raise ConfigurationError(f"palette.{field.name} must be a #RRGGBB color, got {color!r}", parameter=f"palette.{field.name}")


#============================================
def is_hex_color(value: str) -> bool:
	"""
	Check for a #RRGGBB color string.

	Args:
		value: Color string.

	Returns:
		True if the string is a 7 character hex color.
	"""
	if not isinstance(value, str) or len(value) != 7 or not value.startswith("#"):
		return False
	try:
		int(value[1:], 16)
	except ValueError:
		return False
	return True


#============================================
def options_to_dict(options: LayoutOptions) -> dict:
	"""
	Convert options to a JSON-friendly dict.

	Args:
		options: Layout options.

	Returns:
		Dict of option values.
	"""
	data = dataclasses.asdict(options)
	if isinstance(options.page_size, tuple):
		data["page_size"] = list(options.page_size)
	return data
