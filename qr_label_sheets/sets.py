"""
Split rows into sets at counter resets.
"""

# local repo modules
import qr_label_sheets as qls
import qr_label_sheets.rows


Row = qls.rows.Row


#============================================
def parse_count(value) -> float:
	"""
	Interpret a count label as a number.

	Args:
		value: Count label.

	Returns:
		Numeric value, or 0.0 when not numeric.
	"""
	try:
		return float(str(value).strip().rstrip("."))
	except ValueError:
		return 0.0


#============================================
def partition_sets(rows: list[Row], detect: bool = True) -> list[list[Row]]:
	"""
	Partition rows into contiguous sets.

	A set ends when the next count is 1 or drops below the previous
	count. Sequences without a reset stay in one set, and a run of
	equal counts (including all 1s) is never split.

	Args:
		rows: Rows in input order.
		detect: False keeps all rows in a single set.

	Returns:
		List of non-empty sets.
	"""
	if not rows:
		return []
	if not detect:
		return [list(rows)]

	sets: list[list[Row]] = []
	current: list[Row] = []
	previous_count = None
	for row in rows:
		count = parse_count(row.count)
		if previous_count is not None and count != previous_count and (count == 1 or count < previous_count):
			sets.append(current)
			current = []
		current.append(row)
		previous_count = count
	if current:
		sets.append(current)
	return sets
