import json
import pathlib

import openpyxl
import pytest

import qr_label_sheets.errors
import qr_label_sheets.rows


#============================================
def test_header_aliases_and_fallbacks() -> None:
	"""
	Verify header aliases and missing value fallbacks.
	"""
	rows = qr_label_sheets.rows.rows_from_records(
		[
			{"Count": "1", "Unit Serial Number": "SN-1", "QR Code Text": "https://x/1"},
			{"count": 2, "serialNumber": "SN-2"},
			{"No.": 3.0, "Description": "Widget", "GTIN": "4006381333931"},
			{},
		]
	)
	assert rows[0].code_text == "https://x/1"
	assert (rows[1].count, rows[1].serial, rows[1].code_text) == ("2", "SN-2", "SN-2")
	assert (rows[2].count, rows[2].serial, rows[2].code_text) == ("3", "Widget", "4006381333931")
	assert (rows[3].count, rows[3].serial) == ("4", "unknown-3")


#============================================
def test_csv_loading(sample_csv: pathlib.Path) -> None:
	"""
	Verify CSV rows keep their order and values.
	"""
	rows = qr_label_sheets.rows.load_rows([sample_csv])
	assert [row.count for row in rows] == ["1", "2", "3", "1", "2"]
	assert rows[0].serial == "SN-0001"
	assert rows[4].index == 4


#============================================
def test_xlsx_and_json_loading(tmp_path: pathlib.Path) -> None:
	"""
	Verify XLSX and JSON tables load and concatenate with global indexes.
	"""
	workbook = openpyxl.Workbook()
	sheet = workbook.active
	sheet.append(["Count", "Serial Number", "QR Text"])
	sheet.append([1, "A-1", "code-a1"])
	sheet.append([None, None, None])
	sheet.append([2, "A-2", "code-a2"])
	xlsx_path = tmp_path / "rows.xlsx"
	workbook.save(xlsx_path)

	json_path = tmp_path / "rows.json"
	json_path.write_text(json.dumps([{"count": 1, "serial": "B-1"}]), encoding="utf-8")

	rows = qr_label_sheets.rows.load_rows([xlsx_path, json_path])
	assert [row.serial for row in rows] == ["A-1", "A-2", "B-1"]
	assert rows[0].count == "1"
	assert rows[1].code_text == "code-a2"
	assert rows[2].index == 2


#============================================
def test_bad_inputs_raise_configuration_error(tmp_path: pathlib.Path) -> None:
	"""
	Verify unsupported, missing and malformed inputs.
	"""
	text_path = tmp_path / "rows.txt"
	text_path.write_text("x", encoding="utf-8")
	with pytest.raises(qr_label_sheets.errors.ConfigurationError):
		qr_label_sheets.rows.load_rows([text_path])
	json_path = tmp_path / "rows.json"
	json_path.write_text('{"count": 1}', encoding="utf-8")
	with pytest.raises(qr_label_sheets.errors.ConfigurationError):
		qr_label_sheets.rows.load_rows([json_path])
	with pytest.raises(qr_label_sheets.errors.ConfigurationError):
		qr_label_sheets.rows.gather_row_paths([str(tmp_path / "missing.csv")])


#============================================
def test_gather_row_paths_from_directory(tmp_path: pathlib.Path) -> None:
	"""
	Verify directories contribute supported tables in name order.
	"""
	for name in ("b.csv", "a.json", "notes.txt"):
		(tmp_path / name).write_text("", encoding="utf-8")
	paths = qr_label_sheets.rows.gather_row_paths([str(tmp_path)])
	assert [path.name for path in paths] == ["a.json", "b.csv"]
