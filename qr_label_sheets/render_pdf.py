"""
PDF output through the reportlab canvas.
"""

# Standard Library
import io

# PIP3 modules
import reportlab.lib.utils
import reportlab.pdfgen.canvas

# local repo modules
import qr_label_sheets as qls
import qr_label_sheets.encode
import qr_label_sheets.paginate
import qr_label_sheets.render_common
import qr_label_sheets.units


Pagination = qls.paginate.Pagination
Page = qls.paginate.Page
Rect = qls.render_common.Rect
TextItem = qls.render_common.TextItem
RenderFonts = qls.render_common.RenderFonts

mm_to_points = qls.units.mm_to_points
parse_hex_color = qls.render_common.parse_hex_color


#============================================
def draw_text_item(
	pdf: reportlab.pdfgen.canvas.Canvas,
	item: TextItem,
	fonts: RenderFonts,
	page_height: float,
) -> None:
	"""
	Draw one text item.

	Args:
		pdf: ReportLab canvas.
		item: Text item in mm.
		fonts: Resolved fonts.
		page_height: Page height in mm.
	"""
	if not item.text:
		return
	font = qls.render_common.pick_font(item, fonts)
	x = mm_to_points(item.x)
	y = mm_to_points(page_height - item.baseline)
	pdf.setFont(font.name, item.size)
	pdf.setFillColorRGB(*parse_hex_color(item.color))
	if item.anchor == "end":
		pdf.drawRightString(x, y, item.text)
	elif item.anchor == "middle":
		pdf.drawCentredString(x, y, item.text)
	else:
		pdf.drawString(x, y, item.text)


#============================================
def rect_to_points(rect: Rect, page_height: float) -> tuple[float, float, float, float]:
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


class PdfRenderer:
	"""
	Draw pages into a single multi-page PDF.
	"""

	extension = "pdf"

	def __init__(self, pagination: Pagination, fonts: RenderFonts, stem: str = "labels") -> None:
		self.pagination = pagination
		self.fonts = fonts
		self.stem = stem
		self.pages_drawn = 0
		self._buffer = io.BytesIO()
		plan = pagination.plan
		self._pdf = reportlab.pdfgen.canvas.Canvas(
			self._buffer,
			pagesize=(mm_to_points(plan.page_width), mm_to_points(plan.page_height)),
			invariant=1,
		)
		self._pdf.setTitle(stem)
		self._pdf.setCreator("qr-label-sheets")

	def draw_page(self, page: Page, images: dict[int, bytes]) -> None:
		"""
		Draw one page.

		Args:
			page: Page to draw.
			images: PNG bytes by box index; missing boxes get no code.
		"""
		pdf = self._pdf
		options = self.pagination.options
		page_height = self.pagination.plan.page_height
		for box in page.boxes:
			drawing = qls.render_common.layout_box(box, self.pagination, self.fonts)
			pdf.setStrokeColorRGB(*parse_hex_color(options.palette.border))
			pdf.setLineWidth(mm_to_points(options.border_width))
			pdf.rect(*rect_to_points(drawing.border, page_height), stroke=1, fill=0)
			draw_text_item(pdf, drawing.count, self.fonts, page_height)
			draw_text_item(pdf, drawing.serial, self.fonts, page_height)
			if drawing.caption is not None:
				draw_text_item(pdf, drawing.caption, self.fonts, page_height)
			data = images.get(box.box_index)
			if data is None:
				continue
			reader = reportlab.lib.utils.ImageReader(qls.encode.png_to_image(data))
			x, y, width, height = rect_to_points(drawing.code, page_height)
			pdf.drawImage(reader, x, y, width=width, height=height, mask="auto")
		if page.footer is not None:
			for item in qls.render_common.layout_footer(page.footer, self.pagination):
				draw_text_item(pdf, item, self.fonts, page_height)
		pdf.showPage()
		self.pages_drawn += 1

	def finish(self) -> list[tuple[str, bytes]]:
		"""
		Close the document.

		Returns:
			List with one (name, bytes) entry, or empty when nothing was drawn.
		"""
		if self.pages_drawn == 0:
			return []
		self._pdf.save()
		return [(f"{self.stem}.pdf", self._buffer.getvalue())]
