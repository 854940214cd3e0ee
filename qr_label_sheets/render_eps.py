"""
EPS output through reportlab.graphics, one file per page.
"""

# PIP3 modules
import reportlab.graphics.renderPS
import reportlab.graphics.shapes
import reportlab.lib.colors

# local repo modules
import qr_label_sheets as qls
import qr_label_sheets.config
import qr_label_sheets.encode
import qr_label_sheets.paginate
import qr_label_sheets.render_common
import qr_label_sheets.units


Pagination = qls.paginate.Pagination
Page = qls.paginate.Page
Rect = qls.render_common.Rect
TextItem = qls.render_common.TextItem
RenderFonts = qls.render_common.RenderFonts

DEFAULT_FONT_REGULAR = qls.config.DEFAULT_FONT_REGULAR
mm_to_points = qls.units.mm_to_points


#============================================
def build_string(item: TextItem, fonts: RenderFonts, page_height: float) -> reportlab.graphics.shapes.String:
	"""
	Build a positioned string shape.

	PostScript output only references the standard fonts, so an
	embedded TrueType face is replaced by Helvetica.

	Args:
		item: Text item in mm.
		fonts: Resolved fonts.
		page_height: Page height in mm.

	Returns:
		ReportLab String shape.
	"""
	font = qls.render_common.pick_font(item, fonts)
	font_name = DEFAULT_FONT_REGULAR if font.embedded else font.name
	return reportlab.graphics.shapes.String(
		mm_to_points(item.x),
		mm_to_points(page_height - item.baseline),
		item.text,
		fontName=font_name,
		fontSize=item.size,
		fillColor=reportlab.lib.colors.HexColor(item.color),
		textAnchor=item.anchor,
	)


#============================================
def rect_origin(rect: Rect, page_height: float) -> tuple[float, float, float, float]:
	"""
	Convert a top-left mm rectangle to bottom-left points.

	Args:
		rect: Rectangle in mm.
		page_height: Page height in mm.

	Returns:
		Tuple of (x, y, width, height) in points.
	"""
	y_bottom = qls.units.flip_y(rect.y, rect.height, page_height)
	return (
		mm_to_points(rect.x),
		mm_to_points(y_bottom),
		mm_to_points(rect.width),
		mm_to_points(rect.height),
	)


class EpsRenderer:
	"""
	Draw each page into its own Encapsulated PostScript file.
	"""

	extension = "eps"

	def __init__(self, pagination: Pagination, fonts: RenderFonts, stem: str = "labels") -> None:
		self.pagination = pagination
		self.fonts = fonts
		self.stem = stem
		self._outputs: list[tuple[str, bytes]] = []

	def build_drawing(self, page: Page, images: dict[int, bytes]) -> reportlab.graphics.shapes.Drawing:
		"""
		Build the drawing for one page.

		Args:
			page: Page to draw.
			images: PNG bytes by box index.

		Returns:
			ReportLab Drawing sized to the page.
		"""
		options = self.pagination.options
		plan = self.pagination.plan
		page_height = plan.page_height
		drawing = reportlab.graphics.shapes.Drawing(
			mm_to_points(plan.page_width),
			mm_to_points(plan.page_height),
		)
		border_color = reportlab.lib.colors.HexColor(options.palette.border)
		for box in page.boxes:
			layout = qls.render_common.layout_box(box, self.pagination, self.fonts)
			x, y, width, height = rect_origin(layout.border, page_height)
			drawing.add(
				reportlab.graphics.shapes.Rect(
					x, y, width, height,
					strokeColor=border_color,
					strokeWidth=mm_to_points(options.border_width),
					fillColor=None,
				)
			)
			for item in (layout.count, layout.serial, layout.caption):
				if item is not None and item.text:
					drawing.add(build_string(item, self.fonts, page_height))
			data = images.get(box.box_index)
			if data is None:
				continue
			x, y, width, height = rect_origin(layout.code, page_height)
			# PostScript has no alpha channel; transparent pixels print white
			drawing.add(
				reportlab.graphics.shapes.Image(
					x, y, width, height, qls.encode.png_to_image(data)
				)
			)
		if page.footer is not None:
			for item in qls.render_common.layout_footer(page.footer, self.pagination):
				if item.text:
					drawing.add(build_string(item, self.fonts, page_height))
		return drawing

	def draw_page(self, page: Page, images: dict[int, bytes]) -> None:
		drawing = self.build_drawing(page, images)
		data = reportlab.graphics.renderPS.drawToString(drawing)
		if isinstance(data, str):
			data = data.encode("latin-1")
		name = f"{self.stem}_page_{page.index + 1:03d}.eps"
		self._outputs.append((name, data))

	def finish(self) -> list[tuple[str, bytes]]:
		return list(self._outputs)
