"""
Render dispatch, output bundling and manifest writing.
"""

# Standard Library
import dataclasses
import io
import json
import pathlib
import zipfile

# local repo modules
import qr_label_sheets as qls
import qr_label_sheets.config
import qr_label_sheets.encode
import qr_label_sheets.errors
import qr_label_sheets.fonts
import qr_label_sheets.paginate
import qr_label_sheets.render_common
import qr_label_sheets.render_eps
import qr_label_sheets.render_pdf
import qr_label_sheets.render_svg


Pagination = qls.paginate.Pagination
EncodingFailure = qls.errors.EncodingFailure
ConfigurationError = qls.errors.ConfigurationError

PROGRESS_BAR_WIDTH = qls.config.PROGRESS_BAR_WIDTH
PROGRESS_UPDATE_EVERY = qls.config.PROGRESS_UPDATE_EVERY
ENCODE_WORKERS = qls.config.ENCODE_WORKERS
# fixed archive timestamp keeps bundles byte-identical between runs
ZIP_DATE_TIME = (1980, 1, 1, 0, 0, 0)

RENDERERS = {
	"pdf": qls.render_pdf.PdfRenderer,
	"eps": qls.render_eps.EpsRenderer,
	"svg": qls.render_svg.SvgRenderer,
}
FORMATS = tuple(RENDERERS)


@dataclasses.dataclass
class RenderResult:
	format: str
	outputs: list[tuple[str, bytes]]
	failures: list[EncodingFailure]
	font_warnings: list[str]
	page_count: int
	code_files: list[tuple[str, bytes]] = dataclasses.field(default_factory=list)

	@property
	def needs_archive(self) -> bool:
		return len(self.outputs) > 1 or bool(self.code_files)


#============================================
def print_progress(prefix: str, current: int, total: int, every: int = PROGRESS_UPDATE_EVERY) -> None:
	"""
	Redraw a one-line progress bar on every Nth step and the last one.

	Args:
		prefix: Label text.
		current: Steps done.
		total: Total steps.
		every: Redraw interval in steps.
	"""
	if total <= 0:
		return
	if current != total and current % every != 0:
		return
	fraction = current / total
	filled = int(round(PROGRESS_BAR_WIDTH * fraction))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] page {current} of {total} ({fraction:.0%})", end="\r")


#============================================
def sanitize_token(value: str) -> str:
	"""
	Sanitize a string for filenames.

	Args:
		value: Input string.

	Returns:
		Sanitized string.
	"""
	result: list[str] = []
	for char in value:
		if char.isalnum() or char in "-.":
			result.append(char)
		else:
			result.append("_")
	sanitized = "".join(result).strip("_.")
	if not sanitized:
		return "label"
	return sanitized


#============================================
def code_file_prefix(symbology: str) -> str:
	"""
	Filename prefix for exported code images.

	Args:
		symbology: Code symbology.

	Returns:
		"QR" or "BARCODE".
	"""
	if symbology == "qr":
		return "QR"
	return "BARCODE"


#============================================
def render_document(
	pagination: Pagination,
	fmt: str = "pdf",
	encoder=None,
	font_resolver: qls.fonts.FontResolver | None = None,
	stem: str = "labels",
	include_codes: bool = False,
	workers: int = ENCODE_WORKERS,
	show_progress: bool = False,
) -> RenderResult:
	"""
	Encode codes page by page and draw every page in one format.

	Encoding failures are collected and the affected boxes are drawn
	without a code image.

	Args:
		pagination: Pagination to draw.
		fmt: "pdf", "eps" or "svg".
		encoder: Encoder with an encode() method, or None for the default.
		font_resolver: Font resolver, or None for a fresh one.
		stem: Output file name stem.
		include_codes: Also export one PNG per row.
		workers: Encoder thread pool size.
		show_progress: Print a progress bar.

	Returns:
		RenderResult.
	"""
	fmt = fmt.lower()
	if fmt not in RENDERERS:
		raise ConfigurationError(f"Unknown output format {fmt!r}, expected one of {', '.join(FORMATS)}", parameter="format")
	options = pagination.options
	if encoder is None:
		encoder = qls.encode.build_encoder(options.symbology)
	if font_resolver is None:
		font_resolver = qls.fonts.FontResolver()
	fonts = qls.render_common.resolve_render_fonts(options.font_family, font_resolver)
	content = pagination.content
	request = qls.encode.build_request(options, content.code_width, content.code_height)
	renderer = RENDERERS[fmt](pagination, fonts, stem=stem)

	failures: list[EncodingFailure] = []
	failed_rows: set[int] = set()
	code_images: dict[int, tuple[str, bytes]] = {}
	total = pagination.page_count
	for page in pagination.pages:
		images, page_failures = qls.encode.encode_page_codes(page, encoder, request, workers)
		for failure in page_failures:
			if failure.row_index in failed_rows:
				continue
			failed_rows.add(failure.row_index)
			failures.append(failure)
		if include_codes:
			for box in page.boxes:
				if box.box_index in images and box.row.index not in code_images:
					code_images[box.row.index] = (box.row.serial, images[box.box_index])
		renderer.draw_page(page, images)
		if show_progress:
			print_progress("Rendering pages", page.index + 1, total)
	if show_progress and total > 0:
		print("")

	code_files = []
	if include_codes:
		prefix = code_file_prefix(options.symbology)
		used_names: set[str] = set()
		for row_index in sorted(code_images):
			serial, data = code_images[row_index]
			name = f"codes/{prefix}_{sanitize_token(serial)}.png"
			if name in used_names:
				name = f"codes/{prefix}_{sanitize_token(serial)}_{row_index + 1}.png"
			used_names.add(name)
			code_files.append((name, data))

	return RenderResult(
		format=fmt,
		outputs=renderer.finish(),
		failures=failures,
		font_warnings=list(font_resolver.warnings),
		page_count=total,
		code_files=code_files,
	)


#============================================
def build_archive(entries: list[tuple[str, bytes]]) -> bytes:
	"""
	Bundle named files into ZIP bytes.

	Args:
		entries: List of (archive name, bytes).

	Returns:
		ZIP archive bytes.
	"""
	buffer = io.BytesIO()
	with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
		for name, data in entries:
			info = zipfile.ZipInfo(name, date_time=ZIP_DATE_TIME)
			info.compress_type = zipfile.ZIP_DEFLATED
			archive.writestr(info, data)
	return buffer.getvalue()


#============================================
def write_outputs(result: RenderResult, output_path: pathlib.Path) -> list[pathlib.Path]:
	"""
	Write a render result to disk.

	A single document is written as-is. Several documents, or any
	exported code images, go into a ZIP archive next to output_path.

	Args:
		result: Render result.
		output_path: Requested output path.

	Returns:
		List of written paths, empty when there was nothing to write.
	"""
	if not result.outputs:
		return []
	output_path.parent.mkdir(parents=True, exist_ok=True)
	if not result.needs_archive:
		_, data = result.outputs[0]
		output_path.write_bytes(data)
		return [output_path]
	archive_path = output_path
	if archive_path.suffix.lower() != ".zip":
		archive_path = output_path.with_suffix(".zip")
	archive_path.write_bytes(build_archive(result.outputs + result.code_files))
	return [archive_path]


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	inputs: list[pathlib.Path],
	outputs: list[pathlib.Path],
	pagination: Pagination,
	result: RenderResult,
) -> None:
	"""
	Write a manifest JSON file.

	Args:
		manifest_path: Output path.
		inputs: Input row files.
		outputs: Written output files.
		pagination: Pagination that was drawn.
		result: Render result.
	"""
	plan = pagination.plan
	content = pagination.content
	data = {
		"inputs": [str(path) for path in inputs],
		"outputs": [str(path) for path in outputs],
		"format": result.format,
		"total_rows": pagination.total_rows,
		"total_boxes": pagination.total_boxes,
		"pages": pagination.page_count,
		"set_page_counts": pagination.set_page_counts,
		"layout": {
			"page_width": plan.page_width,
			"page_height": plan.page_height,
			"box_width": plan.box_width,
			"box_height": plan.box_height,
			"h_spacing": plan.h_spacing,
			"v_spacing": plan.v_spacing,
			"boxes_per_row": plan.boxes_per_row,
			"boxes_per_column": plan.boxes_per_column,
			"boxes_per_page": plan.boxes_per_page,
			"margin_x": plan.margin_x,
			"margin_y": plan.margin_y,
			"footer_height": plan.footer_height,
			"manual_grid": plan.manual,
		},
		"content": {
			"serial_x": content.serial_x,
			"code_x": content.code_x,
			"code_width": content.code_width,
			"code_height": content.code_height,
			"total_content_width": content.total_content_width,
			"is_valid_layout": content.is_valid_layout,
		},
		"failures": [
			{"row_index": failure.row_index, "text": failure.text, "reason": failure.reason}
			for failure in result.failures
		],
		"font_warnings": result.font_warnings,
		"options": qls.config.options_to_dict(pagination.options),
	}
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)
