"""
Font resolution for the renderers.
"""

# Standard Library
import dataclasses
import pathlib

# PIP3 modules
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfbase.ttfonts

# local repo modules
import qr_label_sheets as qls
import qr_label_sheets.config


DEFAULT_FONT_REGULAR = qls.config.DEFAULT_FONT_REGULAR
STANDARD_FONTS = qls.config.STANDARD_FONTS

CSS_FAMILIES = {
	"Helvetica": "Helvetica, Arial, sans-serif",
	"Times": "'Times New Roman', Times, serif",
	"Courier": "'Courier New', Courier, monospace",
}


@dataclasses.dataclass(frozen=True)
class ResolvedFont:
	name: str
	css_family: str
	css_weight: str
	embedded: bool


#============================================
def css_for_standard(name: str) -> tuple[str, str]:
	"""
	Map a standard PDF font name to CSS family and weight.

	Args:
		name: ReportLab standard font name.

	Returns:
		Tuple of (css_family, css_weight).
	"""
	base = name.split("-")[0]
	family = CSS_FAMILIES.get(base, CSS_FAMILIES["Helvetica"])
	weight = "bold" if name.endswith("-Bold") else "normal"
	return (family, weight)


class FontResolver:
	"""
	Resolve logical font identifiers to fonts usable by the renderers.

	Identifiers are standard names such as "helvetica-bold", names given
	in font_paths, or paths to TrueType files. Anything that cannot be
	loaded falls back to Helvetica.
	"""

	def __init__(self, font_paths: dict[str, pathlib.Path] | None = None) -> None:
		self.font_paths = dict(font_paths or {})
		self.warnings: list[str] = []
		self._cache: dict[str, ResolvedFont] = {}

	def default_font(self) -> ResolvedFont:
		family, weight = css_for_standard(DEFAULT_FONT_REGULAR)
		return ResolvedFont(DEFAULT_FONT_REGULAR, family, weight, False)

	def resolve(self, identifier: str) -> ResolvedFont:
		"""
		Resolve a font identifier.

		Args:
			identifier: Logical font name or font file path.

		Returns:
			ResolvedFont.
		"""
		if identifier in self._cache:
			return self._cache[identifier]
		resolved = self._resolve_uncached(identifier)
		self._cache[identifier] = resolved
		return resolved

	def _resolve_uncached(self, identifier: str) -> ResolvedFont:
		key = (identifier or "").strip()
		if key.lower() in STANDARD_FONTS:
			name = STANDARD_FONTS[key.lower()]
			family, weight = css_for_standard(name)
			return ResolvedFont(name, family, weight, False)

		path = self.font_paths.get(key)
		if path is None and key.lower().endswith((".ttf", ".otf")):
			path = pathlib.Path(key)
		if path is None:
			self._warn(f"Unknown font {identifier!r}, using {DEFAULT_FONT_REGULAR}")
			return self.default_font()
		if not path.exists():
			self._warn(f"Font file not found: {path}, using {DEFAULT_FONT_REGULAR}")
			return self.default_font()

		name = path.stem.replace(" ", "-")
		try:
			font = reportlab.pdfbase.ttfonts.TTFont(name, str(path))
			reportlab.pdfbase.pdfmetrics.registerFont(font)
		except (reportlab.pdfbase.ttfonts.TTFError, OSError) as error:
			self._warn(f"Could not load font {path}: {error}, using {DEFAULT_FONT_REGULAR}")
			return self.default_font()
		family = f"'{name}', {CSS_FAMILIES['Helvetica']}"
		return ResolvedFont(name, family, "normal", True)

	def _warn(self, message: str) -> None:
		self.warnings.append(message)
		print(f"Warning: {message}")
