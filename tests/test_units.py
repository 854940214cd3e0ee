import pytest

import qr_label_sheets.errors
import qr_label_sheets.units


#============================================
def test_mm_points_round_trip() -> None:
	"""
	Verify mm to points and back returns the input.
	"""
	for value in (0.0, 1.0, 25.4, 210.0, 297.0):
		points = qr_label_sheets.units.mm_to_points(value)
		assert qr_label_sheets.units.points_to_mm(points) == pytest.approx(value)
	assert qr_label_sheets.units.mm_to_points(10.0) == pytest.approx(28.3465)


#============================================
def test_named_presets_and_orientation() -> None:
	"""
	Verify preset lookup is case insensitive and landscape swaps axes.
	"""
	resolve = qr_label_sheets.units.resolve_page_dimensions
	assert resolve("A4", "portrait") == (210, 297)
	assert resolve("a4", "landscape") == (297, 210)
	assert resolve("Letter", "portrait") == (215.9, 279.4)
	assert resolve((100, 150), "portrait") == (100.0, 150.0)
	assert resolve({"width": 100, "height": 150}, "landscape") == (150.0, 100.0)


#============================================
def test_unknown_preset_fails_fast() -> None:
	"""
	Verify an unknown preset raises instead of defaulting to A4.
	"""
	with pytest.raises(qr_label_sheets.errors.ConfigurationError) as info:
		qr_label_sheets.units.resolve_page_dimensions("A5", "portrait")
	assert info.value.parameter == "page_size"
	with pytest.raises(qr_label_sheets.errors.ConfigurationError):
		qr_label_sheets.units.resolve_page_dimensions((0, 100), "portrait")
	with pytest.raises(qr_label_sheets.errors.ConfigurationError):
		qr_label_sheets.units.resolve_page_dimensions("A4", "sideways")


#============================================
def test_parse_page_size() -> None:
	"""
	Verify command line page sizes.
	"""
	assert qr_label_sheets.units.parse_page_size("100x150") == (100.0, 150.0)
	assert qr_label_sheets.units.parse_page_size("A3") == "A3"
	with pytest.raises(qr_label_sheets.errors.ConfigurationError):
		qr_label_sheets.units.parse_page_size("100xabc")


#============================================
def test_flip_y_and_percent() -> None:
	"""
	Verify the bottom-left flip and percentage helpers.
	"""
	assert qr_label_sheets.units.flip_y(13.5, 30.0, 297.0) == pytest.approx(253.5)
	assert qr_label_sheets.units.percent_of(3.0, 50.0) == pytest.approx(6.0)
