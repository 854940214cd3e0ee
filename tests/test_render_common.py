import pathlib

import pytest

import qr_label_sheets.config
import qr_label_sheets.fonts
import qr_label_sheets.paginate
import qr_label_sheets.render_common
import qr_label_sheets.rows


#============================================
def _first_box(row=None, **overrides):
	if row is None:
		row = qr_label_sheets.rows.Row(index=0, count="7", serial="SN-7", code_text="QR-7")
	rows = [row]
	values = {"show_footer": False}
	values.update(overrides)
	pagination = qr_label_sheets.paginate.paginate(rows, qr_label_sheets.config.merge_options(values))
	return pagination, pagination.pages[0].boxes[0]


#============================================
def test_box_layout_positions() -> None:
	"""
	Verify border, serial and code positions inside the first box.
	"""
	pagination, box = _first_box()
	drawing = qr_label_sheets.render_common.layout_box(box, pagination)
	assert (drawing.border.x, drawing.border.y) == pytest.approx((20.0, 13.5))
	assert drawing.serial.x == pytest.approx(23.0)
	assert drawing.code.x == pytest.approx(49.0)
	# code is vertically centered: (30 - 18) / 2
	assert drawing.code.y == pytest.approx(13.5 + 6.0)
	assert drawing.serial.baseline > 13.5 + 15.0


#============================================
def test_count_label_outside_and_inside() -> None:
	"""
	Verify the count label anchors left of the box or inside its corner.
	"""
	pagination, box = _first_box()
	outside = qr_label_sheets.render_common.layout_box(box, pagination).count
	assert outside.text == "7."
	assert outside.anchor == "end"
	assert outside.x < box.x

	pagination, box = _first_box(count_outside_box=False)
	inside = qr_label_sheets.render_common.layout_box(box, pagination).count
	assert inside.anchor == "start"
	assert box.x < inside.x < box.x + 10.0
	assert box.y < inside.baseline < box.y + 10.0


#============================================
def test_outside_count_stays_on_page_with_narrow_margin() -> None:
	"""
	Verify a wide outside count is pushed right of the page edge.
	"""
	row = qr_label_sheets.rows.Row(index=0, count="100", serial="SN-100", code_text="QR-100")
	pagination, box = _first_box(row, box_spacing=1.0)
	assert pagination.plan.margin_x < 5.0
	count = qr_label_sheets.render_common.layout_box(box, pagination).count
	width = qr_label_sheets.render_common.text_width_mm(count.text, "Helvetica-Bold", count.size)
	assert count.text == "100."
	assert count.x - width >= qr_label_sheets.config.COUNT_PAGE_INSET - 1e-9


#============================================
def test_barcode_box_stacks_text_around_code() -> None:
	"""
	Verify barcode boxes center item number, description and code digits.
	"""
	row = qr_label_sheets.rows.Row(index=0, count="A-100", serial="Widget", code_text="4006381333931")
	pagination, box = _first_box(row, symbology="ean13")
	drawing = qr_label_sheets.render_common.layout_box(box, pagination)
	center_x = box.x + pagination.plan.box_width / 2.0

	assert drawing.count.text == "A-100"
	assert drawing.serial.text == "Widget"
	assert drawing.caption.text == "4006381333931"
	for item in (drawing.count, drawing.serial, drawing.caption):
		assert item.anchor == "middle"
		assert item.x == pytest.approx(center_x)
	assert drawing.code.x + drawing.code.width / 2.0 == pytest.approx(center_x)
	assert drawing.count.baseline < drawing.serial.baseline < drawing.code.y
	assert drawing.caption.baseline > drawing.code.y + drawing.code.height
	assert box.y < drawing.count.baseline
	assert drawing.caption.baseline <= box.y + pagination.plan.box_height


#============================================
def test_qr_box_has_no_caption() -> None:
	"""
	Verify QR boxes carry their text in the serial only.
	"""
	pagination, box = _first_box()
	assert qr_label_sheets.render_common.layout_box(box, pagination).caption is None


#============================================
def test_truncate_description() -> None:
	"""
	Verify long descriptions keep 25 characters plus an ellipsis.
	"""
	truncate = qr_label_sheets.render_common.truncate_description
	assert truncate("Widget") == "Widget"
	assert truncate("x" * 25) == "x" * 25
	assert truncate("abcdefghijklmnopqrstuvwxyz0123") == "abcdefghijklmnopqrstuvwxy..."


#============================================
def test_footer_lines_inside_band() -> None:
	"""
	Verify footer baselines sit inside the reserved band.
	"""
	pagination, box = _first_box(show_footer=True)
	items = qr_label_sheets.render_common.layout_footer(pagination.pages[0].footer, pagination)
	band_top = pagination.plan.page_height - pagination.plan.footer_height
	assert [item.anchor for item in items] == ["start", "end", "end"]
	for item in items:
		assert band_top < item.baseline < pagination.plan.page_height


#============================================
def test_parse_hex_color() -> None:
	"""
	Verify hex colors become unit floats.
	"""
	assert qr_label_sheets.render_common.parse_hex_color("#FF0000") == (1.0, 0.0, 0.0)
	assert qr_label_sheets.render_common.parse_hex_color("#00AA50") == pytest.approx((0.0, 170 / 255.0, 80 / 255.0))


#============================================
def test_font_resolver_fallbacks(tmp_path: pathlib.Path, capsys) -> None:
	"""
	Verify standard fonts resolve and bad fonts fall back to Helvetica.
	"""
	resolver = qr_label_sheets.fonts.FontResolver({"broken": tmp_path / "broken.ttf"})
	fonts = qr_label_sheets.render_common.resolve_render_fonts("times", resolver)
	assert fonts.label.name == "Times-Roman"
	assert fonts.bold.name == "Times-Bold"
	assert fonts.label.css_family.endswith("serif")

	assert resolver.resolve("broken").name == "Helvetica"
	bad_file = tmp_path / "bad.ttf"
	bad_file.write_bytes(b"not a font")
	assert resolver.resolve(str(bad_file)).name == "Helvetica"
	assert resolver.resolve("Comic Sans").name == "Helvetica"
	assert len(resolver.warnings) == 3
	assert "Warning:" in capsys.readouterr().out
