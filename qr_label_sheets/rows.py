"""
Row records and table loading.
"""

# Standard Library
import csv
import dataclasses
import json
import pathlib

# PIP3 modules
import openpyxl

# local repo modules
import qr_label_sheets as qls
import qr_label_sheets.errors


ConfigurationError = qls.errors.ConfigurationError

COUNT_KEYS = ("Count", "count", "No.", "No", "no")
SERIAL_KEYS = ("Unit Serial Number", "Serial Number", "serialNumber", "serial", "Description", "description")
CODE_KEYS = ("QR Code Text", "QR Text", "qrCodeText", "qr_code_text", "GTIN", "gtin")
TABLE_SUFFIXES = (".csv", ".xlsx", ".xlsm", ".json")


@dataclasses.dataclass(frozen=True)
class Row:
	index: int
	count: str
	serial: str
	code_text: str


#============================================
def _first_value(record: dict, keys: tuple[str, ...]) -> str | None:
	"""
	Find the first non-empty value among header aliases.

	Args:
		record: Input record.
		keys: Candidate keys in priority order.

	Returns:
		Stripped string value or None.
	"""
	for key in keys:
		value = record.get(key)
		if value is None:
			continue
		if isinstance(value, float) and value.is_integer():
			value = int(value)
		text = str(value).strip()
		if text:
			return text
	return None


#============================================
def row_from_record(record: dict, index: int) -> Row:
	"""
	Build a Row from a key/value record.

	Args:
		record: Input record keyed by column header.
		index: Zero-based position of the record.

	Returns:
		Row with fallbacks applied.
	"""
	count = _first_value(record, COUNT_KEYS)
	if count is None:
		count = str(index + 1)
	serial = _first_value(record, SERIAL_KEYS)
	if serial is None:
		serial = f"unknown-{index}"
	code_text = _first_value(record, CODE_KEYS)
	if code_text is None:
		code_text = serial
	return Row(index=index, count=count, serial=serial, code_text=code_text)


#============================================
def rows_from_records(records: list[dict]) -> list[Row]:
	"""
	Build Rows from records in order.

	Args:
		records: Input records.

	Returns:
		List of Rows.
	"""
	return [row_from_record(record, index) for index, record in enumerate(records)]


#============================================
def read_csv_records(path: pathlib.Path) -> list[dict]:
	"""
	Read records from a CSV file with a header row.

	Args:
		path: CSV path.

	Returns:
		List of dict records.
	"""
	with path.open("r", encoding="utf-8-sig", newline="") as handle:
		reader = csv.DictReader(handle)
		return [dict(record) for record in reader]


#============================================
def read_xlsx_records(path: pathlib.Path) -> list[dict]:
	"""
	Read records from the first sheet of an XLSX workbook.

	Args:
		path: XLSX path.

	Returns:
		List of dict records.
	"""
	workbook = openpyxl.load_workbook(path, read_only=True, data_only=True)
	try:
		sheet = workbook.worksheets[0]
		values = sheet.iter_rows(values_only=True)
		header = next(values, None)
		if header is None:
			return []
		keys = [str(cell).strip() if cell is not None else "" for cell in header]
		records: list[dict] = []
		for values_row in values:
			if all(cell is None for cell in values_row):
				continue
			record = {}
			for key, cell in zip(keys, values_row):
				if key:
					record[key] = cell
			records.append(record)
		return records
	finally:
		workbook.close()


#============================================
def read_json_records(path: pathlib.Path) -> list[dict]:
	"""
	Read records from a JSON list of objects.

	Args:
		path: JSON path.

	Returns:
		List of dict records.
	"""
	data = json.loads(path.read_text(encoding="utf-8"))
	if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
		raise ConfigurationError(f"{path} must contain a JSON list of objects", parameter="inputs")
	return data


#============================================
def load_rows(paths: list[pathlib.Path]) -> list[Row]:
	"""
	Load and concatenate rows from CSV, XLSX or JSON files.

	Args:
		paths: Input file paths.

	Returns:
		List of Rows indexed across all inputs.
	"""
	records: list[dict] = []
	for path in paths:
		suffix = path.suffix.lower()
		if suffix == ".csv":
			records.extend(read_csv_records(path))
		elif suffix in (".xlsx", ".xlsm"):
			records.extend(read_xlsx_records(path))
		elif suffix == ".json":
			records.extend(read_json_records(path))
		else:
			raise ConfigurationError(f"Unsupported input file type: {path}", parameter="inputs")
	return rows_from_records(records)


#============================================
def gather_row_paths(inputs: list[str]) -> list[pathlib.Path]:
	"""
	Gather row table paths from input paths.

	Directories contribute their supported tables in sorted name order.
	Files keep the order they were given in.

	Args:
		inputs: Input files or directories.

	Returns:
		List of table paths.
	"""
	paths: list[pathlib.Path] = []
	for entry in inputs:
		path = pathlib.Path(entry).expanduser()
		if path.is_dir():
			found = [child for child in path.iterdir() if child.suffix.lower() in TABLE_SUFFIXES]
			paths.extend(sorted(found, key=lambda child: child.name.lower()))
			continue
		if not path.is_file():
			raise ConfigurationError(f"Input not found: {path}", parameter="inputs")
		paths.append(path)
	return paths
