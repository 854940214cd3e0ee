"""
Grid capacity and margin planning for one page.
"""

# Standard Library
import dataclasses
import math

# local repo modules
import qr_label_sheets as qls
import qr_label_sheets.config
import qr_label_sheets.errors
import qr_label_sheets.units


LayoutError = qls.errors.LayoutError

MIN_MARGIN = qls.config.MIN_MARGIN


@dataclasses.dataclass(frozen=True)
class GridPlan:
	page_width: float
	page_height: float
	box_width: float
	box_height: float
	h_spacing: float
	v_spacing: float
	boxes_per_row: int
	boxes_per_column: int
	boxes_per_page: int
	margin_x: float
	margin_y: float
	footer_height: float
	manual: bool

	def cell_origin(self, col: int, row: int) -> tuple[float, float]:
		"""
		Top-left corner of a grid cell, top-left page origin.

		Args:
			col: Column index.
			row: Row index.

		Returns:
			Tuple of (x, y) in mm.
		"""
		x = self.margin_x + col * (self.box_width + self.h_spacing)
		y = self.margin_y + row * (self.box_height + self.v_spacing)
		return (x, y)


#============================================
def compute_block_size(count: int, size: float, spacing: float) -> float:
	"""
	Extent of a run of boxes along one axis.

	Args:
		count: Number of boxes.
		size: Box size along the axis.
		spacing: Spacing between boxes.

	Returns:
		Block extent.
	"""
	if count <= 0:
		return 0.0
	return count * size + (count - 1) * spacing


#============================================
def plan_grid(
	page_width: float,
	page_height: float,
	box_width: float,
	box_height: float,
	h_spacing: float,
	v_spacing: float | None = None,
	boxes_per_row: int | None = None,
	boxes_per_column: int | None = None,
	footer_height: float = 0.0,
) -> GridPlan:
	"""
	Plan the box grid for a page.

	Both manual counts must be given to override the automatic fit.
	The footer band, when non-zero, is removed from the bottom of the
	usable height.

	Args:
		page_width: Page width in mm.
		page_height: Page height in mm.
		box_width: Box width in mm.
		box_height: Box height in mm.
		h_spacing: Horizontal spacing between boxes.
		v_spacing: Vertical spacing; defaults to h_spacing.
		boxes_per_row: Manual column count.
		boxes_per_column: Manual row count.
		footer_height: Reserved footer band height.

	Returns:
		GridPlan.
	"""
	if v_spacing is None:
		v_spacing = h_spacing
	available_height = page_height - footer_height
	manual = boxes_per_row is not None and boxes_per_column is not None

	if manual:
		columns = int(boxes_per_row)
		rows = int(boxes_per_column)
	else:
		columns = math.floor((page_width - h_spacing) / (box_width + h_spacing))
		rows = math.floor((available_height - v_spacing) / (box_height + v_spacing))

	if columns <= 0:
		raise LayoutError(
			f"Box width {box_width}mm with spacing {h_spacing}mm does not fit on a {page_width}mm wide page",
			axis="width",
		)
	if rows <= 0:
		raise LayoutError(
			f"Box height {box_height}mm with spacing {v_spacing}mm does not fit in {available_height}mm of usable page height",
			axis="height",
		)

	block_width = compute_block_size(columns, box_width, h_spacing)
	block_height = compute_block_size(rows, box_height, v_spacing)
	margin_x = (page_width - block_width) / 2.0
	margin_y = (available_height - block_height) / 2.0
	if manual:
		margin_x = max(MIN_MARGIN, margin_x)
		margin_y = max(MIN_MARGIN, margin_y)

	return GridPlan(
		page_width=page_width,
		page_height=page_height,
		box_width=box_width,
		box_height=box_height,
		h_spacing=h_spacing,
		v_spacing=v_spacing,
		boxes_per_row=columns,
		boxes_per_column=rows,
		boxes_per_page=columns * rows,
		margin_x=margin_x,
		margin_y=margin_y,
		footer_height=footer_height,
		manual=manual,
	)


#============================================
def plan_for_options(options) -> GridPlan:
	"""
	Plan the grid from LayoutOptions.

	Args:
		options: LayoutOptions instance.

	Returns:
		GridPlan.
	"""
	page_width, page_height = qls.units.resolve_page_dimensions(options.page_size, options.orientation)
	footer_height = options.footer_height if options.show_footer else 0.0
	return plan_grid(
		page_width,
		page_height,
		options.box_width,
		options.box_height,
		options.box_spacing,
		options.vertical_spacing,
		boxes_per_row=options.boxes_per_row,
		boxes_per_column=options.boxes_per_column,
		footer_height=footer_height,
	)
