"""
Pagination of rows into placed boxes.
"""

# Standard Library
import dataclasses
import math

# local repo modules
import qr_label_sheets as qls
import qr_label_sheets.config
import qr_label_sheets.content
import qr_label_sheets.grid
import qr_label_sheets.rows
import qr_label_sheets.sets


Row = qls.rows.Row
GridPlan = qls.grid.GridPlan
ContentPosition = qls.content.ContentPosition
LayoutOptions = qls.config.LayoutOptions


@dataclasses.dataclass(frozen=True)
class PlacedBox:
	row: Row
	page_index: int
	box_index: int
	grid_row: int
	grid_col: int
	x: float
	y: float
	set_index: int
	repeat_index: int


@dataclasses.dataclass(frozen=True)
class Footer:
	quantity_text: str
	info_lines: tuple[str, ...]


@dataclasses.dataclass
class Page:
	index: int
	set_index: int
	boxes: list[PlacedBox] = dataclasses.field(default_factory=list)
	footer: Footer | None = None


@dataclasses.dataclass
class Pagination:
	options: LayoutOptions
	plan: GridPlan
	content: ContentPosition
	pages: list[Page]
	set_page_counts: list[int]
	total_rows: int
	total_boxes: int

	@property
	def page_count(self) -> int:
		return len(self.pages)

	def placed_boxes(self) -> list[PlacedBox]:
		"""
		Flatten all pages into one box sequence.

		Returns:
			PlacedBoxes in page order.
		"""
		return [box for page in self.pages for box in page.boxes]


#============================================
def format_millimeters(value: float) -> str:
	"""
	Format a millimeter value without trailing zeros.

	Args:
		value: Millimeters.

	Returns:
		Short string like "50" or "36.6".
	"""
	return f"{value:g}"


#============================================
def build_footer(options: LayoutOptions, total_rows: int) -> Footer:
	"""
	Build the footer annotation shared by every page.

	Args:
		options: Layout options.
		total_rows: Row count across all sets.

	Returns:
		Footer.
	"""
	quantity = options.footer_qty_text if options.footer_qty_text else str(total_rows)
	quantity_text = f"Qty. - {quantity} each"
	if options.footer_info_text:
		info_lines = tuple(options.footer_info_text.splitlines())
	else:
		kind = "Serial Number+QR code" if options.symbology == "qr" else "GTIN barcode"
		size = f"Sticker Size - {format_millimeters(options.box_width)} x {format_millimeters(options.box_height)}mm"
		info_lines = (kind, size)
	return Footer(quantity_text=quantity_text, info_lines=info_lines)


#============================================
def paginate_sets(
	sets: list[list[Row]],
	plan: GridPlan,
	repeat_count: int = 1,
	footer: Footer | None = None,
) -> tuple[list[Page], list[int]]:
	"""
	Place every expanded row of every set onto pages.

	Each set starts on a fresh page. Within a set, box i shows row
	i // repeat_count.

	Args:
		sets: Row sets in order.
		plan: Grid plan with positive capacity.
		repeat_count: Copies per row.
		footer: Footer attached to every page, or None.

	Returns:
		Tuple of (pages, pages per set).
	"""
	per_page = plan.boxes_per_page
	pages: list[Page] = []
	set_page_counts: list[int] = []
	for set_index, set_rows in enumerate(sets):
		total_boxes = len(set_rows) * repeat_count
		pages_for_set = math.ceil(total_boxes / per_page)
		set_page_counts.append(pages_for_set)
		for set_page in range(pages_for_set):
			page = Page(index=len(pages), set_index=set_index)
			start = set_page * per_page
			slots = min(per_page, total_boxes - start)
			for local_index in range(slots):
				box_index = start + local_index
				data_index = box_index // repeat_count
				grid_col = local_index % plan.boxes_per_row
				grid_row = local_index // plan.boxes_per_row
				x, y = plan.cell_origin(grid_col, grid_row)
				page.boxes.append(
					PlacedBox(
						row=set_rows[data_index],
						page_index=page.index,
						box_index=local_index,
						grid_row=grid_row,
						grid_col=grid_col,
						x=x,
						y=y,
						set_index=set_index,
						repeat_index=box_index % repeat_count,
					)
				)
			page.footer = footer
			pages.append(page)
	return (pages, set_page_counts)


#============================================
def paginate(rows: list[Row], options: LayoutOptions) -> Pagination:
	"""
	Run set partitioning, grid planning and pagination.

	Configuration and layout errors are raised before any page is built.

	Args:
		rows: Input rows.
		options: Layout options.

	Returns:
		Pagination.
	"""
	qls.config.validate_options(options)
	plan = qls.grid.plan_for_options(options)
	content = qls.content.content_for_options(options)
	sets = qls.sets.partition_sets(rows, detect=options.detect_sets)
	repeat_count = options.effective_repeat
	footer = None
	if options.show_footer:
		footer = build_footer(options, len(rows))
	pages, set_page_counts = paginate_sets(sets, plan, repeat_count, footer)
	return Pagination(
		options=options,
		plan=plan,
		content=content,
		pages=pages,
		set_page_counts=set_page_counts,
		total_rows=len(rows),
		total_boxes=len(rows) * repeat_count,
	)
