"""
Content placement inside a single box.
"""

# Standard Library
import dataclasses


@dataclasses.dataclass(frozen=True)
class ContentPosition:
	serial_x: float
	code_x: float
	code_width: float
	code_height: float
	total_content_width: float
	is_valid_layout: bool


#============================================
def compute_content_position(
	box_width: float,
	box_height: float,
	code_size: float,
	serial_to_box_gap: float,
	serial_to_qr_gap: float,
	qr_to_box_gap: float,
	code_width: float | None = None,
	code_height: float | None = None,
) -> ContentPosition:
	"""
	Compute serial and code offsets inside one box.

	Explicit code dimensions win over the ratio. Content wider than the
	box is flagged, not rejected; it overflows the box when drawn.

	Args:
		box_width: Box width in mm.
		box_height: Box height in mm.
		code_size: Code size as a ratio of box height.
		serial_to_box_gap: Gap from the box left edge to the serial text.
		serial_to_qr_gap: Gap from the serial text start to the code.
		qr_to_box_gap: Gap from the code right edge to the box edge.
		code_width: Explicit code width in mm.
		code_height: Explicit code height in mm.

	Returns:
		ContentPosition in mm relative to the box top-left corner.
	"""
	if code_width is not None and code_height is not None:
		width = code_width
		height = code_height
	else:
		width = box_height * code_size
		height = box_height * code_size

	serial_x = serial_to_box_gap
	code_x = serial_x + serial_to_qr_gap
	total = serial_x + serial_to_qr_gap + width + qr_to_box_gap
	return ContentPosition(
		serial_x=serial_x,
		code_x=code_x,
		code_width=width,
		code_height=height,
		total_content_width=total,
		is_valid_layout=total <= box_width,
	)


#============================================
def content_for_options(options) -> ContentPosition:
	"""
	Compute content placement from LayoutOptions.

	Args:
		options: LayoutOptions instance.

	Returns:
		ContentPosition.
	"""
	return compute_content_position(
		options.box_width,
		options.box_height,
		options.code_size,
		options.serial_to_box_gap,
		options.serial_to_qr_gap,
		options.qr_to_box_gap,
		code_width=options.code_width,
		code_height=options.code_height,
	)
