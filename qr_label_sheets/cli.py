"""
CLI entry points for row tables to QR label sheets.
"""

# Standard Library
import argparse
import pathlib
import time

# local repo modules
import qr_label_sheets as qls
import qr_label_sheets.config
import qr_label_sheets.errors
import qr_label_sheets.fonts
import qr_label_sheets.paginate
import qr_label_sheets.render
import qr_label_sheets.rows
import qr_label_sheets.units


LayoutOptions = qls.config.LayoutOptions
ConfigurationError = qls.errors.ConfigurationError
LayoutError = qls.errors.LayoutError

FORMATS = qls.render.FORMATS
SYMBOLOGIES = qls.config.SYMBOLOGIES
ERROR_TOLERANCES = qls.config.ERROR_TOLERANCES
ORIENTATIONS = qls.config.ORIENTATIONS

# argparse dests named after LayoutOptions fields; None means not given
VALUE_FIELDS = (
	"page_size",
	"orientation",
	"box_width",
	"box_height",
	"box_spacing",
	"row_spacing",
	"code_size",
	"code_width",
	"code_height",
	"boxes_per_row",
	"boxes_per_column",
	"font_family",
	"font_size",
	"border_width",
	"footer_qty_text",
	"footer_info_text",
	"footer_font_size",
	"footer_height",
	"symbology",
	"error_tolerance",
	"detect_sets",
	"count_outside_box",
	"show_footer",
	"code_transparent_bg",
)


#============================================
def build_options(args: argparse.Namespace) -> LayoutOptions:
	"""
	Build layout options from CLI args.

	Values from --options are applied first, then any flag given on the
	command line.

	Args:
		args: Parsed argparse namespace.

	Returns:
		Validated LayoutOptions.
	"""
	overrides: dict = {}
	if args.options_path:
		overrides.update(qls.config.load_options_file(pathlib.Path(args.options_path)))
	for field_name in VALUE_FIELDS:
		value = getattr(args, field_name)
		if value is not None:
			overrides[field_name] = value
	if isinstance(overrides.get("page_size"), str):
		overrides["page_size"] = qls.units.parse_page_size(overrides["page_size"])
	if args.footer_info_text is not None:
		overrides["footer_info_text"] = args.footer_info_text.replace("\\n", "\n")
	if args.repeat_count is not None:
		overrides["quantity_repeat"] = args.repeat_count > 1
		overrides["repeat_count"] = args.repeat_count
	return qls.config.merge_options(overrides)


#============================================
def build_parser() -> argparse.ArgumentParser:
	"""
	Build the argument parser.

	Returns:
		ArgumentParser.
	"""
	parser = argparse.ArgumentParser(description="Lay out QR code or barcode labels on printable sheets.")
	parser.add_argument("inputs", nargs="+", help="CSV, XLSX or JSON row tables, or directories of them.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", required=True, help="Output file path.")
	output_group.add_argument("-f", "--format", dest="output_format", choices=FORMATS, default="pdf", help="Output format.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")
	output_group.add_argument("-k", "--include-codes", dest="include_codes", action="store_true", help="Also export one code image per row.")
	output_group.add_argument("-K", "--no-include-codes", dest="include_codes", action="store_false", help="Do not export code images.")
	output_group.add_argument("--font-file", dest="font_files", action="append", default=[], metavar="NAME=PATH", help="Register a TrueType font under a name.")

	page_group = parser.add_argument_group("Page")
	page_group.add_argument("--options", dest="options_path", default=None, help="JSON file of layout option overrides.")
	page_group.add_argument("--page-size", dest="page_size", default=None, help="A4, A3, LETTER or WIDTHxHEIGHT in mm.")
	page_group.add_argument("--orientation", dest="orientation", choices=ORIENTATIONS, default=None, help="Page orientation.")
	page_group.add_argument("--boxes-per-row", dest="boxes_per_row", type=int, default=None, help="Manual grid columns.")
	page_group.add_argument("--boxes-per-column", dest="boxes_per_column", type=int, default=None, help="Manual grid rows.")

	box_group = parser.add_argument_group("Box")
	box_group.add_argument("--box-width", dest="box_width", type=float, default=None, help="Box width in mm.")
	box_group.add_argument("--box-height", dest="box_height", type=float, default=None, help="Box height in mm.")
	box_group.add_argument("--box-spacing", dest="box_spacing", type=float, default=None, help="Gap between boxes in mm.")
	box_group.add_argument("--row-spacing", dest="row_spacing", type=float, default=None, help="Gap between rows in mm.")
	box_group.add_argument("--border-width", dest="border_width", type=float, default=None, help="Border line width in mm.")
	box_group.add_argument("--font", dest="font_family", default=None, help="Font name or TrueType file.")
	box_group.add_argument("--font-size", dest="font_size", type=float, default=None, help="Label font size in points.")
	box_group.add_argument("-t", "--count-outside", dest="count_outside_box", action="store_true", help="Draw the count left of the box.")
	box_group.add_argument("-T", "--count-inside", dest="count_outside_box", action="store_false", help="Draw the count inside the box.")

	code_group = parser.add_argument_group("Code")
	code_group.add_argument("--symbology", dest="symbology", choices=SYMBOLOGIES, default=None, help="Code type.")
	code_group.add_argument("--error-tolerance", dest="error_tolerance", choices=ERROR_TOLERANCES, default=None, help="QR error correction level.")
	code_group.add_argument("--code-size", dest="code_size", type=float, default=None, help="Code size as a ratio of box height.")
	code_group.add_argument("--code-width", dest="code_width", type=float, default=None, help="Code width in mm.")
	code_group.add_argument("--code-height", dest="code_height", type=float, default=None, help="Code height in mm.")
	code_group.add_argument("-b", "--transparent-bg", dest="code_transparent_bg", action="store_true", help="Leave the code background transparent.")
	code_group.add_argument("-B", "--no-transparent-bg", dest="code_transparent_bg", action="store_false", help="Fill the code background.")

	behavior_group = parser.add_argument_group("Behavior")
	behavior_group.add_argument("-s", "--sets", dest="detect_sets", action="store_true", help="Start a new page at each counter reset.")
	behavior_group.add_argument("-S", "--no-sets", dest="detect_sets", action="store_false", help="Treat all rows as one set.")
	behavior_group.add_argument("-r", "--footer", dest="show_footer", action="store_true", help="Draw the page footer.")
	behavior_group.add_argument("-R", "--no-footer", dest="show_footer", action="store_false", help="Omit the page footer.")
	behavior_group.add_argument("--repeat", dest="repeat_count", type=int, default=None, help="Copies of each row.")
	behavior_group.add_argument("--footer-qty", dest="footer_qty_text", default=None, help="Footer quantity text.")
	behavior_group.add_argument("--footer-info", dest="footer_info_text", default=None, help="Footer info lines, separated by \\n.")
	behavior_group.add_argument("--footer-font-size", dest="footer_font_size", type=float, default=None, help="Footer font size in points.")
	behavior_group.add_argument("--footer-height", dest="footer_height", type=float, default=None, help="Footer band height in mm.")

	parser.set_defaults(
		include_codes=False,
		count_outside_box=None,
		code_transparent_bg=None,
		detect_sets=None,
		show_footer=None,
	)
	return parser


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Argument list, or None for sys.argv.

	Returns:
		Parsed argparse namespace.
	"""
	parser = build_parser()
	args = parser.parse_args(argv)
	return args


#============================================
def parse_font_files(entries: list[str]) -> dict[str, pathlib.Path]:
	"""
	Parse NAME=PATH font registrations.

	Args:
		entries: Raw --font-file values.

	Returns:
		Dict of font name to path.
	"""
	font_paths: dict[str, pathlib.Path] = {}
	for entry in entries:
		name, sep, path = entry.partition("=")
		if not sep or not name.strip() or not path.strip():
			raise ConfigurationError(f"--font-file expects NAME=PATH, got {entry!r}", parameter="font_file")
		font_paths[name.strip()] = pathlib.Path(path.strip()).expanduser()
	return font_paths


#============================================
def run_pipeline(args: argparse.Namespace) -> qls.render.RenderResult | None:
	"""
	Run the full pipeline from row tables to written label sheets.

	Args:
		args: Parsed argparse namespace.

	Returns:
		RenderResult, or None when there were no rows.
	"""
	print("Rows to label sheets pipeline")
	print(f"Output: {args.output_path}")
	print(f"Format: {args.output_format}")
	if args.manifest_path:
		print(f"Manifest: {args.manifest_path}")
	if args.options_path:
		print(f"Options file: {args.options_path}")

	start_time = time.perf_counter()
	options = build_options(args)
	paths = qls.rows.gather_row_paths(args.inputs)
	print(f"Row files found: {len(paths)}")
	rows = qls.rows.load_rows(paths)
	print(f"Rows loaded: {len(rows)}")
	load_end = time.perf_counter()

	pagination = qls.paginate.paginate(rows, options)
	plan = pagination.plan
	content = pagination.content
	print(f"Page: {plan.page_width:g} x {plan.page_height:g} mm")
	print(f"Grid: {plan.boxes_per_row} x {plan.boxes_per_column} ({plan.boxes_per_page} per page)")
	if not content.is_valid_layout:
		print(
			f"Warning: box content is {content.total_content_width:g} mm wide "
			f"but the box is {plan.box_width:g} mm"
		)
	print(f"Sets: {len(pagination.set_page_counts)}")
	if pagination.page_count == 0:
		print("No rows to place; nothing written.")
		return None

	output_path = pathlib.Path(args.output_path)
	font_resolver = qls.fonts.FontResolver(parse_font_files(args.font_files))
	render_start = time.perf_counter()
	result = qls.render.render_document(
		pagination,
		args.output_format,
		font_resolver=font_resolver,
		stem=qls.render.sanitize_token(output_path.stem),
		include_codes=args.include_codes,
		show_progress=True,
	)
	written = qls.render.write_outputs(result, output_path)
	render_end = time.perf_counter()
	print(f"Pages written: {result.page_count}")
	print(f"Boxes placed: {pagination.total_boxes}")
	for path in written:
		print(f"Wrote: {path}")
	if result.failures:
		print(f"Encoding failures: {len(result.failures)}")
		for failure in result.failures:
			print(f"  row {failure.row_index + 1}: {failure.text!r}: {failure.reason}")

	manifest_path = args.manifest_path
	if manifest_path is None:
		manifest_path = f"{written[0]}.json"
	qls.render.write_manifest(pathlib.Path(manifest_path), paths, written, pagination, result)

	total_time = time.perf_counter() - start_time
	print(
		"Timing: load={:.2f}s render={:.2f}s total={:.2f}s".format(
			load_end - start_time,
			render_end - render_start,
			total_time,
		)
	)
	print(f"Manifest written: {manifest_path}")
	return result


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.

	Args:
		argv: Argument list, or None for sys.argv.
	"""
	args = parse_args(argv)
	try:
		run_pipeline(args)
	except (ConfigurationError, LayoutError) as error:
		print(f"Error: {error}")
		raise SystemExit(1) from error
