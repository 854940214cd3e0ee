import pytest

import qr_label_sheets.config
import qr_label_sheets.errors
import qr_label_sheets.grid


#============================================
def test_a4_portrait_auto_grid() -> None:
	"""
	Verify a 50x30 box with 10mm spacing fits 3 x 7 on A4 portrait.
	"""
	plan = qr_label_sheets.grid.plan_grid(210.0, 297.0, 50.0, 30.0, 10.0)
	assert plan.boxes_per_row == 3
	assert plan.boxes_per_column == 7
	assert plan.boxes_per_page == 21
	assert plan.margin_x == pytest.approx(20.0)
	assert plan.margin_y == pytest.approx(13.5)
	assert not plan.manual


#============================================
def test_boxes_stay_on_page() -> None:
	"""
	Verify every cell of an automatic grid lies inside the page.
	"""
	plan = qr_label_sheets.grid.plan_grid(210.0, 297.0, 50.0, 30.0, 10.0, footer_height=15.0)
	for row in range(plan.boxes_per_column):
		for col in range(plan.boxes_per_row):
			x, y = plan.cell_origin(col, row)
			assert x >= 0.0
			assert y >= 0.0
			assert x + plan.box_width <= plan.page_width
			assert y + plan.box_height <= plan.page_height - plan.footer_height


#============================================
def test_footer_band_reduces_rows() -> None:
	"""
	Verify the reserved footer band removes a row on A4.
	"""
	plan = qr_label_sheets.grid.plan_grid(210.0, 297.0, 50.0, 30.0, 10.0, footer_height=15.0)
	assert plan.boxes_per_column == 6
	assert plan.boxes_per_page == 18


#============================================
def test_manual_grid_overrides_and_clamps_margins() -> None:
	"""
	Verify manual counts win and margins never drop below the minimum.
	"""
	plan = qr_label_sheets.grid.plan_grid(
		210.0, 297.0, 50.0, 30.0, 10.0, boxes_per_row=4, boxes_per_column=2
	)
	assert plan.manual
	assert plan.boxes_per_page == 8
	assert plan.margin_x == pytest.approx(qr_label_sheets.config.MIN_MARGIN)
	assert plan.margin_y == pytest.approx((297.0 - 70.0) / 2.0)


#============================================
def test_single_manual_count_is_ignored() -> None:
	"""
	Verify one manual count alone keeps the automatic fit.
	"""
	plan = qr_label_sheets.grid.plan_grid(210.0, 297.0, 50.0, 30.0, 10.0, boxes_per_row=5)
	assert not plan.manual
	assert plan.boxes_per_row == 3


#============================================
def test_box_too_large_raises_layout_error() -> None:
	"""
	Verify oversized boxes raise LayoutError on the failing axis.
	"""
	with pytest.raises(qr_label_sheets.errors.LayoutError) as info:
		qr_label_sheets.grid.plan_grid(210.0, 297.0, 250.0, 30.0, 10.0)
	assert info.value.axis == "width"
	with pytest.raises(qr_label_sheets.errors.LayoutError) as info:
		qr_label_sheets.grid.plan_grid(210.0, 297.0, 50.0, 300.0, 10.0)
	assert info.value.axis == "height"


#============================================
def test_plan_for_options_uses_row_spacing_and_orientation() -> None:
	"""
	Verify options feed orientation, row spacing and the footer band.
	"""
	options = qr_label_sheets.config.merge_options(
		{"orientation": "landscape", "row_spacing": 5.0, "show_footer": False}
	)
	plan = qr_label_sheets.grid.plan_for_options(options)
	assert (plan.page_width, plan.page_height) == (297, 210)
	assert plan.v_spacing == 5.0
	assert plan.footer_height == 0.0
	assert plan.boxes_per_row == 4
	assert plan.boxes_per_column == 5
