"""
Renderer-independent drawing geometry.

Everything here is in millimeters with a top-left page origin. Each
renderer converts units and flips the y axis in its own draw step.
"""

# Standard Library
import dataclasses

# PIP3 modules
import reportlab.pdfbase.pdfmetrics

# local repo modules
import qr_label_sheets as qls
import qr_label_sheets.config
import qr_label_sheets.encode
import qr_label_sheets.fonts
import qr_label_sheets.paginate
import qr_label_sheets.units


Pagination = qls.paginate.Pagination
PlacedBox = qls.paginate.PlacedBox
Footer = qls.paginate.Footer
ResolvedFont = qls.fonts.ResolvedFont

COUNT_OUTSIDE_OFFSET = qls.config.COUNT_OUTSIDE_OFFSET
COUNT_INSIDE_PADDING = qls.config.COUNT_INSIDE_PADDING
COUNT_PAGE_INSET = qls.config.COUNT_PAGE_INSET
BARCODE_CAPTION_GAP = qls.config.BARCODE_CAPTION_GAP
DESCRIPTION_MAX_CHARS = qls.config.DESCRIPTION_MAX_CHARS
DEFAULT_BOLD_FONT = qls.config.STANDARD_FONTS["helvetica-bold"]
FOOTER_TEXT_INSET = qls.config.FOOTER_TEXT_INSET
TEXT_BASELINE_RATIO = qls.config.TEXT_BASELINE_RATIO
LINE_LEADING = qls.config.LINE_LEADING


@dataclasses.dataclass(frozen=True)
class Rect:
	x: float
	y: float
	width: float
	height: float


@dataclasses.dataclass(frozen=True)
class TextItem:
	x: float
	baseline: float
	text: str
	size: float
	color: str
	anchor: str
	bold: bool = False


@dataclasses.dataclass(frozen=True)
class BoxDrawing:
	box: PlacedBox
	border: Rect
	count: TextItem
	serial: TextItem
	code: Rect
	# human-readable code text, drawn under linear barcodes
	caption: TextItem | None = None


@dataclasses.dataclass(frozen=True)
class RenderFonts:
	label: ResolvedFont
	bold: ResolvedFont


#============================================
def parse_hex_color(value: str) -> tuple[float, float, float]:
	"""
	Scale a validated #RRGGBB palette color to unit floats.

	Args:
		value: Palette color.

	Returns:
		Tuple of (r, g, b) in 0.0-1.0 range.
	"""
	return tuple(channel / 255.0 for channel in qls.encode.hex_to_rgb(value))


#============================================
def font_size_mm(size_points: float) -> float:
	"""
	Font size in millimeters.

	Args:
		size_points: Font size in points.

	Returns:
		Font size in millimeters.
	"""
	return qls.units.points_to_mm(size_points)


#============================================
def centered_baseline(top: float, height: float, size_points: float) -> float:
	"""
	Baseline that vertically centers one line of text in a band.

	Args:
		top: Band top in mm.
		height: Band height in mm.
		size_points: Font size in points.

	Returns:
		Baseline y in mm, top-left origin.
	"""
	return top + height / 2.0 + font_size_mm(size_points) * TEXT_BASELINE_RATIO


#============================================
def text_width_mm(text: str, font_name: str, size_points: float) -> float:
	"""
	Measured width of one line of text.

	Args:
		text: Text to measure.
		font_name: Registered ReportLab font name.
		size_points: Font size in points.

	Returns:
		Width in mm.
	"""
	width = reportlab.pdfbase.pdfmetrics.stringWidth(text, font_name, size_points)
	return qls.units.points_to_mm(width)


#============================================
def truncate_description(text: str, limit: int = DESCRIPTION_MAX_CHARS) -> str:
	"""
	Shorten a long description with an ellipsis.

	Args:
		text: Description text.
		limit: Maximum characters kept.

	Returns:
		Text of at most limit characters plus "...".
	"""
	if len(text) <= limit:
		return text
	return text[:limit] + "..."


#============================================
def layout_count_label(box: PlacedBox, pagination: Pagination, fonts: RenderFonts | None) -> TextItem:
	"""
	Place the "{count}." label left of the box or in its top-left corner.

	An outside label that would cross the left page edge is pushed right
	until it starts COUNT_PAGE_INSET from the edge.

	Args:
		box: Placed box.
		pagination: Pagination holding options.
		fonts: Resolved fonts used to measure the label, or None for Helvetica.

	Returns:
		TextItem in mm.
	"""
	options = pagination.options
	text = f"{box.row.count}."
	if not options.count_outside_box:
		return TextItem(
			x=box.x + COUNT_INSIDE_PADDING,
			baseline=box.y + COUNT_INSIDE_PADDING + font_size_mm(options.font_size),
			text=text,
			size=options.font_size,
			color=options.palette.count,
			anchor="start",
			bold=True,
		)
	font_name = fonts.bold.name if fonts is not None else DEFAULT_BOLD_FONT
	width = text_width_mm(text, font_name, options.font_size)
	right = max(box.x - COUNT_OUTSIDE_OFFSET, COUNT_PAGE_INSET + width)
	return TextItem(
		x=right,
		baseline=centered_baseline(box.y, pagination.plan.box_height, options.font_size),
		text=text,
		size=options.font_size,
		color=options.palette.count,
		anchor="end",
		bold=True,
	)


#============================================
def layout_barcode_box(box: PlacedBox, pagination: Pagination) -> BoxDrawing:
	"""
	Stack item number, description, barcode and code digits in one box.

	The stack is centered both ways; each text line is centered on the
	box midline.

	Args:
		box: Placed box.
		pagination: Pagination holding options, plan and content.

	Returns:
		BoxDrawing in mm with a caption.
	"""
	options = pagination.options
	plan = pagination.plan
	content = pagination.content
	palette = options.palette
	size = options.font_size
	line_height = font_size_mm(size) * LINE_LEADING
	center_x = box.x + plan.box_width / 2.0

	stack_height = 3 * line_height + content.code_height + BARCODE_CAPTION_GAP
	top = box.y + (plan.box_height - stack_height) / 2.0
	code = Rect(
		x=box.x + (plan.box_width - content.code_width) / 2.0,
		y=top + 2 * line_height,
		width=content.code_width,
		height=content.code_height,
	)
	item_number = TextItem(
		x=center_x,
		baseline=centered_baseline(top, line_height, size),
		text=box.row.count,
		size=size,
		color=palette.count,
		anchor="middle",
	)
	description = TextItem(
		x=center_x,
		baseline=centered_baseline(top + line_height, line_height, size),
		text=truncate_description(box.row.serial),
		size=size,
		color=palette.serial,
		anchor="middle",
	)
	caption = TextItem(
		x=center_x,
		baseline=centered_baseline(code.y + code.height + BARCODE_CAPTION_GAP, line_height, size),
		text=box.row.code_text,
		size=size,
		color=palette.code,
		anchor="middle",
	)
	border = Rect(box.x, box.y, plan.box_width, plan.box_height)
	return BoxDrawing(box=box, border=border, count=item_number, serial=description, code=code, caption=caption)


#============================================
def layout_box(box: PlacedBox, pagination: Pagination, fonts: RenderFonts | None = None) -> BoxDrawing:
	"""
	Compute every drawn element of one placed box.

	QR boxes put the serial at the left and the code at the right. Linear
	barcodes use the stacked layout from layout_barcode_box.

	Args:
		box: Placed box.
		pagination: Pagination holding options, plan and content.
		fonts: Resolved fonts for measuring the count label.

	Returns:
		BoxDrawing in mm.
	"""
	options = pagination.options
	if options.symbology != "qr":
		return layout_barcode_box(box, pagination)
	plan = pagination.plan
	content = pagination.content

	serial = TextItem(
		x=box.x + content.serial_x,
		baseline=centered_baseline(box.y, plan.box_height, options.font_size),
		text=box.row.serial,
		size=options.font_size,
		color=options.palette.serial,
		anchor="start",
	)
	code = Rect(
		x=box.x + content.code_x,
		y=box.y + (plan.box_height - content.code_height) / 2.0,
		width=content.code_width,
		height=content.code_height,
	)
	return BoxDrawing(
		box=box,
		border=Rect(box.x, box.y, plan.box_width, plan.box_height),
		count=layout_count_label(box, pagination, fonts),
		serial=serial,
		code=code,
	)


#============================================
def layout_footer(footer: Footer, pagination: Pagination) -> list[TextItem]:
	"""
	Place footer text inside the reserved band at the page bottom.

	The quantity text sits at the left; info lines stack at the right.

	Args:
		footer: Footer annotation.
		pagination: Pagination holding options and plan.

	Returns:
		List of TextItems in mm.
	"""
	options = pagination.options
	plan = pagination.plan
	size = options.footer_font_size
	band_top = plan.page_height - plan.footer_height

	items = [
		TextItem(
			x=FOOTER_TEXT_INSET,
			baseline=centered_baseline(band_top, plan.footer_height, size),
			text=footer.quantity_text,
			size=size,
			color=options.palette.footer_qty,
			anchor="start",
			bold=True,
		)
	]
	line_height = font_size_mm(size) * LINE_LEADING
	lines = footer.info_lines
	block_height = line_height * len(lines)
	first_top = band_top + (plan.footer_height - block_height) / 2.0
	for index, line in enumerate(lines):
		items.append(
			TextItem(
				x=plan.page_width - FOOTER_TEXT_INSET,
				baseline=centered_baseline(first_top + index * line_height, line_height, size),
				text=line,
				size=size,
				color=options.palette.footer_info,
				anchor="end",
				bold=True,
			)
		)
	return items


#============================================
def pick_font(item: TextItem, fonts: RenderFonts) -> ResolvedFont:
	"""
	Choose the font for a text item.

	Args:
		item: Text item.
		fonts: Resolved fonts.

	Returns:
		ResolvedFont.
	"""
	if item.bold:
		return fonts.bold
	return fonts.label


#============================================
def resolve_render_fonts(font_family: str, resolver: qls.fonts.FontResolver) -> RenderFonts:
	"""
	Resolve the regular and bold fonts for a font family.

	Standard families get their bold face. A custom font file is used
	for both.

	Args:
		font_family: Font family option.
		resolver: Font resolver.

	Returns:
		RenderFonts.
	"""
	label = resolver.resolve(font_family)
	bold_key = f"{font_family.lower()}-bold"
	if bold_key in qls.config.STANDARD_FONTS:
		bold = resolver.resolve(bold_key)
	else:
		bold = label
	return RenderFonts(label=label, bold=bold)
