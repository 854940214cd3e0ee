"""
SVG output through svgwrite, one file per page.

SVG keeps the top-left origin, so coordinates are written in mm user
units without flipping. Each box is a nested viewport and its serial
and code positions are percentages of the box width.
"""

# Standard Library
import base64

# PIP3 modules
import svgwrite

# local repo modules
import qr_label_sheets as qls
import qr_label_sheets.paginate
import qr_label_sheets.render_common
import qr_label_sheets.units


Pagination = qls.paginate.Pagination
Page = qls.paginate.Page
TextItem = qls.render_common.TextItem
RenderFonts = qls.render_common.RenderFonts

COORD_DIGITS = 4


#============================================
def coord(value: float) -> float:
	"""
	Round a coordinate for stable output.

	Args:
		value: Coordinate in mm.

	Returns:
		Rounded value.
	"""
	return round(value, COORD_DIGITS)


#============================================
def percent(value: float, total: float) -> str:
	"""
	Format a percentage attribute.

	Args:
		value: Offset in mm.
		total: Reference length in mm.

	Returns:
		String like "6%".
	"""
	return f"{coord(qls.units.percent_of(value, total)):g}%"


#============================================
def png_data_uri(data: bytes) -> str:
	"""
	Embed PNG bytes as a data URI.

	Args:
		data: PNG bytes.

	Returns:
		data:image/png;base64 URI.
	"""
	return "data:image/png;base64," + base64.b64encode(data).decode("ascii")


#============================================
def build_text(
	dwg: svgwrite.Drawing,
	item: TextItem,
	fonts: RenderFonts,
	x,
	baseline: float,
):
	"""
	Build a text element.

	Args:
		dwg: Drawing that owns the element.
		item: Text item.
		fonts: Resolved fonts.
		x: X position, a number or a percentage string.
		baseline: Baseline y in user units.

	Returns:
		svgwrite Text element.
	"""
	font = qls.render_common.pick_font(item, fonts)
	return dwg.text(
		item.text,
		insert=(x, coord(baseline)),
		fill=item.color,
		font_family=font.css_family,
		font_weight=font.css_weight,
		font_size=coord(qls.render_common.font_size_mm(item.size)),
		text_anchor=item.anchor,
	)


class SvgRenderer:
	"""
	Draw each page into its own SVG document.
	"""

	extension = "svg"

	def __init__(self, pagination: Pagination, fonts: RenderFonts, stem: str = "labels") -> None:
		self.pagination = pagination
		self.fonts = fonts
		self.stem = stem
		self._outputs: list[tuple[str, bytes]] = []

	def build_drawing(self, page: Page, images: dict[int, bytes]) -> svgwrite.Drawing:
		"""
		Build the SVG document for one page.

		Args:
			page: Page to draw.
			images: PNG bytes by box index.

		Returns:
			svgwrite Drawing.
		"""
		options = self.pagination.options
		plan = self.pagination.plan
		width = coord(plan.page_width)
		height = coord(plan.page_height)
		dwg = svgwrite.Drawing(
			size=(f"{width:g}mm", f"{height:g}mm"),
			viewBox=f"0 0 {width:g} {height:g}",
			profile="full",
			debug=False,
		)

		boxes_group = dwg.g(id="boxes")
		counts_group = dwg.g(id="counts")
		for box in page.boxes:
			layout = qls.render_common.layout_box(box, self.pagination, self.fonts)
			border = layout.border
			viewport = dwg.svg(
				insert=(coord(border.x), coord(border.y)),
				size=(coord(border.width), coord(border.height)),
				id=f"box-{box.box_index + 1}",
			)
			viewport.add(
				dwg.rect(
					insert=(0, 0),
					size=(coord(border.width), coord(border.height)),
					fill="none",
					stroke=options.palette.border,
					stroke_width=coord(options.border_width),
				)
			)
			serial = layout.serial
			if serial.text:
				viewport.add(
					build_text(
						dwg,
						serial,
						self.fonts,
						percent(serial.x - border.x, border.width),
						serial.baseline - border.y,
					)
				)
			data = images.get(box.box_index)
			if data is not None:
				code = layout.code
				viewport.add(
					dwg.image(
						href=png_data_uri(data),
						insert=(percent(code.x - border.x, border.width), coord(code.y - border.y)),
						size=(coord(code.width), coord(code.height)),
					)
				)
			caption = layout.caption
			if caption is not None and caption.text:
				viewport.add(
					build_text(
						dwg,
						caption,
						self.fonts,
						percent(caption.x - border.x, border.width),
						caption.baseline - border.y,
					)
				)
			boxes_group.add(viewport)

			# count labels may sit outside the box viewport
			count = layout.count
			counts_group.add(build_text(dwg, count, self.fonts, coord(count.x), count.baseline))
		dwg.add(boxes_group)
		dwg.add(counts_group)

		if page.footer is not None:
			footer_group = dwg.g(id="footer")
			for item in qls.render_common.layout_footer(page.footer, self.pagination):
				if item.text:
					footer_group.add(build_text(dwg, item, self.fonts, coord(item.x), item.baseline))
			dwg.add(footer_group)
		return dwg

	def draw_page(self, page: Page, images: dict[int, bytes]) -> None:
		dwg = self.build_drawing(page, images)
		name = f"{self.stem}_page_{page.index + 1:03d}.svg"
		self._outputs.append((name, dwg.tostring().encode("utf-8")))

	def finish(self) -> list[tuple[str, bytes]]:
		return list(self._outputs)
