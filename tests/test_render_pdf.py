import io
import pathlib

import fitz
import PIL.Image
import pypdf
import pytest

import qr_label_sheets.config
import qr_label_sheets.errors
import qr_label_sheets.paginate
import qr_label_sheets.render
import qr_label_sheets.rows


DPI = 150


class RejectingEncoder:
	"""
	Encoder that rejects one code text and draws a black square otherwise.
	"""

	def __init__(self, rejected: str) -> None:
		self.rejected = rejected

	def encode(self, text, error_tolerance, size_pixels, foreground, background) -> bytes:
		if text == self.rejected:
			raise qr_label_sheets.errors.EncodingFailure(text, "rejected")
		buffer = io.BytesIO()
		PIL.Image.new("RGBA", size_pixels, (0, 0, 0, 255)).save(buffer, format="PNG")
		return buffer.getvalue()


#============================================
def _pagination(count: int, **overrides) -> qr_label_sheets.paginate.Pagination:
	"""
	Paginate numbered rows with footer disabled unless overridden.
	"""
	rows = [
		qr_label_sheets.rows.Row(index=index, count=str(index + 1), serial=f"SN{index:03d}", code_text=f"QR{index}")
		for index in range(count)
	]
	values = {"show_footer": False}
	values.update(overrides)
	return qr_label_sheets.paginate.paginate(rows, qr_label_sheets.config.merge_options(values))


#============================================
def _render_first_page(data: bytes) -> PIL.Image.Image:
	"""
	Render the first page of PDF bytes to an image.

	Args:
		data: PDF bytes.

	Returns:
		PIL image.
	"""
	document = fitz.open(stream=data, filetype="pdf")
	page = document[0]
	scale = DPI / 72.0
	matrix = fitz.Matrix(scale, scale)
	pixmap = page.get_pixmap(matrix=matrix, alpha=False)
	image = PIL.Image.frombytes("RGB", [pixmap.width, pixmap.height], pixmap.samples)
	document.close()
	return image


#============================================
def test_pdf_page_count_and_size() -> None:
	"""
	Verify 47 rows render as a three page A4 PDF.
	"""
	result = qr_label_sheets.render.render_document(_pagination(47), "pdf")
	assert len(result.outputs) == 1
	name, data = result.outputs[0]
	assert name == "labels.pdf"
	reader = pypdf.PdfReader(io.BytesIO(data))
	assert len(reader.pages) == 3
	box = reader.pages[0].mediabox
	assert float(box.width) == pytest.approx(595.28, abs=0.1)
	assert float(box.height) == pytest.approx(841.89, abs=0.1)
	assert result.failures == []


#============================================
def test_pdf_output_is_deterministic() -> None:
	"""
	Verify identical inputs give identical PDF bytes.
	"""
	first = qr_label_sheets.render.render_document(_pagination(5), "pdf").outputs[0][1]
	second = qr_label_sheets.render.render_document(_pagination(5), "pdf").outputs[0][1]
	assert first == second


#============================================
def test_pdf_first_page_draws_border_and_code() -> None:
	"""
	Verify the first box shows a red border and a dark code area.
	"""
	pagination = _pagination(1)
	result = qr_label_sheets.render.render_document(pagination, "pdf", encoder=RejectingEncoder("none"))
	image = _render_first_page(result.outputs[0][1])
	scale = DPI / 25.4
	box = pagination.pages[0].boxes[0]
	content = pagination.content

	border = image.crop((
		int((box.x - 1) * scale), int(box.y * scale),
		int((box.x + 1) * scale), int((box.y + 30) * scale),
	))
	assert any(r > 200 and g < 80 and b < 80 for r, g, b in border.getdata())

	center_x = (box.x + content.code_x + content.code_width / 2.0) * scale
	center_y = (box.y + 15.0) * scale
	assert image.getpixel((int(center_x), int(center_y))) == (0, 0, 0)


#============================================
def test_encoding_failure_skips_only_that_box() -> None:
	"""
	Verify a rejected row is reported and the document still renders.
	"""
	result = qr_label_sheets.render.render_document(_pagination(4), "pdf", encoder=RejectingEncoder("QR2"))
	assert len(result.failures) == 1
	assert result.failures[0].row_index == 2
	reader = pypdf.PdfReader(io.BytesIO(result.outputs[0][1]))
	assert len(reader.pages) == 1


#============================================
def test_footer_text_in_pdf() -> None:
	"""
	Verify the footer quantity and info lines reach the page text.
	"""
	pagination = _pagination(3, show_footer=True)
	result = qr_label_sheets.render.render_document(pagination, "pdf", encoder=RejectingEncoder("none"))
	reader = pypdf.PdfReader(io.BytesIO(result.outputs[0][1]))
	text = reader.pages[0].extract_text()
	assert "Qty. - 3 each" in text
	assert "Sticker Size - 50 x 30mm" in text
	assert "SN000" in text


#============================================
def test_empty_pagination_writes_nothing(tmp_path: pathlib.Path) -> None:
	"""
	Verify zero pages produce no output files.
	"""
	result = qr_label_sheets.render.render_document(_pagination(0), "pdf")
	assert result.outputs == []
	assert qr_label_sheets.render.write_outputs(result, tmp_path / "out.pdf") == []
	assert not (tmp_path / "out.pdf").exists()


#============================================
def test_unknown_format_is_rejected() -> None:
	"""
	Verify an unknown format raises ConfigurationError.
	"""
	with pytest.raises(qr_label_sheets.errors.ConfigurationError):
		qr_label_sheets.render.render_document(_pagination(1), "png")


#============================================
def test_barcode_label_text_in_pdf() -> None:
	"""
	Verify barcode labels print the item number, description and GTIN digits.
	"""
	rows = [qr_label_sheets.rows.Row(index=0, count="A-100", serial="Widget", code_text="4006381333931")]
	options = qr_label_sheets.config.merge_options({"show_footer": False, "symbology": "ean13"})
	pagination = qr_label_sheets.paginate.paginate(rows, options)
	result = qr_label_sheets.render.render_document(pagination, "pdf")
	assert result.failures == []
	reader = pypdf.PdfReader(io.BytesIO(result.outputs[0][1]))
	text = reader.pages[0].extract_text()
	assert "4006381333931" in text
	assert "Widget" in text
	assert "A-100" in text
	assert "A-100." not in text


#============================================
def test_progress_bar_redraws_on_interval_and_last_page(capsys) -> None:
	"""
	Verify the progress bar skips pages between redraw steps.
	"""
	for current in range(1, 24):
		qr_label_sheets.render.print_progress("Rendering pages", current, 23, every=10)
	lines = [line for line in capsys.readouterr().out.split("\r") if line]
	assert len(lines) == 3
	assert "page 10 of 23" in lines[0]
	assert "page 23 of 23 (100%)" in lines[2]
