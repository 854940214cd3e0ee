"""
Unit conversion and page size resolution.
"""

# local repo modules
import qr_label_sheets as qls
import qr_label_sheets.config
import qr_label_sheets.errors


ConfigurationError = qls.errors.ConfigurationError

MM_TO_POINTS = qls.config.MM_TO_POINTS
PAGE_SIZES = qls.config.PAGE_SIZES
ORIENTATIONS = qls.config.ORIENTATIONS


#============================================
def mm_to_points(value: float) -> float:
	"""
	Convert millimeters to points.

	Args:
		value: Millimeters value.

	Returns:
		Points value.
	"""
	return value * MM_TO_POINTS


#============================================
def points_to_mm(value: float) -> float:
	"""
	Convert points to millimeters.

	Args:
		value: Points value.

	Returns:
		Millimeters value.
	"""
	return value / MM_TO_POINTS


#============================================
def percent_of(value: float, total: float) -> float:
	"""
	Express a length as a percentage of a containing length.

	Args:
		value: Length.
		total: Containing length.

	Returns:
		Percentage in the 0-100 range for values within total.
	"""
	if total <= 0:
		raise ValueError(f"total must be positive, got {total}")
	return value / total * 100.0


#============================================
def flip_y(y_top: float, height: float, page_height: float) -> float:
	"""
	Convert a top-left origin y into a bottom-left origin y.

	Args:
		y_top: Distance from the page top to the top edge of the item.
		height: Item height.
		page_height: Page height in the same unit.

	Returns:
		Distance from the page bottom to the bottom edge of the item.
	"""
	return page_height - y_top - height


#============================================
def _explicit_dimensions(page_size) -> tuple[float, float]:
	if isinstance(page_size, dict):
		if "width" not in page_size or "height" not in page_size:
			raise ConfigurationError(
				"Custom page size needs both width and height",
				parameter="page_size",
			)
		width = page_size["width"]
		height = page_size["height"]
	else:
		if len(page_size) != 2:
			raise ConfigurationError(
				f"Custom page size needs two values, got {len(page_size)}",
				parameter="page_size",
			)
		width, height = page_size
	try:
		width = float(width)
		height = float(height)
	except (TypeError, ValueError) as error:
		raise ConfigurationError(f"Custom page size is not numeric: {page_size!r}", parameter="page_size") from error
	if width <= 0 or height <= 0:
		raise ConfigurationError(
			f"Custom page size must be positive, got {width} x {height}",
			parameter="page_size",
		)
	return (width, height)


#============================================
def resolve_page_dimensions(page_size, orientation: str) -> tuple[float, float]:
	"""
	Resolve a named or explicit page size into millimeters.

	Args:
		page_size: Preset name (A4, A3, Letter), a (width, height) pair,
			or a dict with width and height keys. Millimeters.
		orientation: "portrait" or "landscape".

	Returns:
		Tuple of (width_mm, height_mm) after orientation.
	"""
	if orientation not in ORIENTATIONS:
		raise ConfigurationError(
			f"orientation must be one of {', '.join(ORIENTATIONS)}, got {orientation!r}",
			parameter="orientation",
		)
	if isinstance(page_size, str):
		key = page_size.strip().upper()
		if key not in PAGE_SIZES:
			names = ", ".join(sorted(PAGE_SIZES))
			raise ConfigurationError(
				f"Unknown page size {page_size!r}; expected one of {names} or width x height",
				parameter="page_size",
			)
		width, height = PAGE_SIZES[key]
	else:
		width, height = _explicit_dimensions(page_size)
	if orientation == "landscape":
		return (height, width)
	return (width, height)


#============================================
def parse_page_size(value: str) -> str | tuple[float, float]:
	"""
	Parse a page size argument such as "A4" or "100x150".

	Args:
		value: Command line value.

	Returns:
		Preset name or (width, height) tuple in millimeters.
	"""
	lowered = value.lower()
	if "x" in lowered:
		parts = lowered.split("x")
		if len(parts) != 2:
			raise ConfigurationError(f"Bad page size {value!r}", parameter="page_size")
		try:
			return (float(parts[0]), float(parts[1]))
		except ValueError as error:
			raise ConfigurationError(f"Bad page size {value!r}", parameter="page_size") from error
	return value
