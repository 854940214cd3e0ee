"""
Code image encoding for QR codes and linear barcodes.
"""

# Standard Library
import concurrent.futures
import dataclasses
import io

# PIP3 modules
import barcode
import barcode.errors
import barcode.writer
import PIL.Image
import qrcode
import qrcode.constants
import qrcode.exceptions

# local repo modules
import qr_label_sheets as qls
import qr_label_sheets.config
import qr_label_sheets.errors
import qr_label_sheets.paginate


EncodingFailure = qls.errors.EncodingFailure
LayoutOptions = qls.config.LayoutOptions
Page = qls.paginate.Page

CODE_IMAGE_DPI = qls.config.CODE_IMAGE_DPI
ENCODE_WORKERS = qls.config.ENCODE_WORKERS
MM_PER_INCH = 25.4

ERROR_LEVELS = {
	"L": qrcode.constants.ERROR_CORRECT_L,
	"M": qrcode.constants.ERROR_CORRECT_M,
	"Q": qrcode.constants.ERROR_CORRECT_Q,
	"H": qrcode.constants.ERROR_CORRECT_H,
}


@dataclasses.dataclass(frozen=True)
class EncodeRequest:
	error_tolerance: str
	size_pixels: tuple[int, int]
	foreground: str
	background: str | None


#============================================
def hex_to_rgb(value: str) -> tuple[int, int, int]:
	"""
	Parse a #RRGGBB color into 0-255 channels.

	Args:
		value: Color string.

	Returns:
		Tuple of (r, g, b).
	"""
	return (int(value[1:3], 16), int(value[3:5], 16), int(value[5:7], 16))


#============================================
def colorize(mask_source: PIL.Image.Image, size: tuple[int, int], foreground: str, background: str | None) -> PIL.Image.Image:
	"""
	Recolor a black-on-white symbol image.

	Args:
		mask_source: Symbol image with dark modules.
		size: Output size in pixels.
		foreground: Module color.
		background: Background color, or None for transparent.

	Returns:
		RGBA image.
	"""
	gray = mask_source.convert("L").resize(size, PIL.Image.Resampling.NEAREST)
	mask = gray.point(lambda value: 255 if value < 128 else 0)
	if background is None:
		fill = (255, 255, 255, 0)
	else:
		fill = hex_to_rgb(background) + (255,)
	image = PIL.Image.new("RGBA", size, fill)
	image.paste(hex_to_rgb(foreground) + (255,), (0, 0, size[0], size[1]), mask)
	return image


#============================================
def image_to_png(image: PIL.Image.Image) -> bytes:
	"""
	Serialize an image as PNG bytes.

	Args:
		image: PIL image.

	Returns:
		PNG bytes.
	"""
	buffer = io.BytesIO()
	image.save(buffer, format="PNG")
	return buffer.getvalue()


#============================================
def png_to_image(data: bytes) -> PIL.Image.Image:
	"""
	Decode PNG bytes into a loaded PIL image.

	Args:
		data: PNG bytes.

	Returns:
		PIL image.
	"""
	image = PIL.Image.open(io.BytesIO(data))
	image.load()
	return image


class QrEncoder:
	"""
	QR code encoder backed by the qrcode package.
	"""

	def encode(
		self,
		text: str,
		error_tolerance: str,
		size_pixels: tuple[int, int],
		foreground: str,
		background: str | None,
	) -> bytes:
		if not text:
			raise EncodingFailure(text, "empty code text")
		qr = qrcode.QRCode(
			version=None,
			error_correction=ERROR_LEVELS[error_tolerance],
			box_size=10,
			border=0,
		)
		try:
			qr.add_data(text)
			qr.make(fit=True)
		except (qrcode.exceptions.DataOverflowError, ValueError) as error:
			raise EncodingFailure(text, str(error) or type(error).__name__) from error
		symbol = qr.make_image(fill_color="black", back_color="white").convert("RGB")
		return image_to_png(colorize(symbol, size_pixels, foreground, background))


class BarcodeEncoder:
	"""
	Linear barcode encoder backed by python-barcode.
	"""

	def __init__(self, symbology: str = "ean13") -> None:
		self.symbology = symbology

	def encode(
		self,
		text: str,
		error_tolerance: str,
		size_pixels: tuple[int, int],
		foreground: str,
		background: str | None,
	) -> bytes:
		# error_tolerance only applies to QR symbols
		if not text:
			raise EncodingFailure(text, "empty code text")
		try:
			symbol_class = barcode.get_barcode_class(self.symbology)
			symbol = symbol_class(text, writer=barcode.writer.ImageWriter())
			buffer = io.BytesIO()
			symbol.write(
				buffer,
				options={
					"write_text": False,
					"quiet_zone": 0,
					"module_width": 0.2,
					"module_height": 10.0,
					"background": "white",
					"foreground": "black",
				},
			)
		except (barcode.errors.BarcodeError, ValueError) as error:
			raise EncodingFailure(text, str(error) or type(error).__name__) from error
		symbol_image = png_to_image(buffer.getvalue())
		return image_to_png(colorize(symbol_image, size_pixels, foreground, background))


#============================================
def build_encoder(symbology: str):
	"""
	Build the encoder for a symbology.

	Args:
		symbology: "qr", "ean13" or "code128".

	Returns:
		Encoder with an encode() method.
	"""
	if symbology == "qr":
		return QrEncoder()
	return BarcodeEncoder(symbology)


#============================================
def mm_to_pixels(value: float, dpi: int = CODE_IMAGE_DPI) -> int:
	"""
	Convert millimeters to a pixel count at a DPI.

	Args:
		value: Millimeters.
		dpi: Dots per inch.

	Returns:
		Pixel count, at least 1.
	"""
	return max(1, int(round(value / MM_PER_INCH * dpi)))


#============================================
def build_request(options: LayoutOptions, code_width: float, code_height: float) -> EncodeRequest:
	"""
	Build encoder parameters from layout options.

	Args:
		options: Layout options.
		code_width: Code width in mm.
		code_height: Code height in mm.

	Returns:
		EncodeRequest.
	"""
	background = None if options.code_transparent_bg else options.palette.background
	return EncodeRequest(
		error_tolerance=options.error_tolerance,
		size_pixels=(mm_to_pixels(code_width), mm_to_pixels(code_height)),
		foreground=options.palette.code,
		background=background,
	)


#============================================
def encode_page_codes(
	page: Page,
	encoder,
	request: EncodeRequest,
	workers: int = ENCODE_WORKERS,
) -> tuple[dict[int, bytes], list[EncodingFailure]]:
	"""
	Encode every code on a page concurrently.

	Identical code texts are encoded once. Results are keyed by box index
	so placement never depends on completion order.

	Args:
		page: Page to encode.
		encoder: Encoder with an encode() method.
		request: Encoder parameters.
		workers: Thread pool size.

	Returns:
		Tuple of (PNG bytes by box index, failures in box order).
	"""
	images: dict[int, bytes] = {}
	failures: list[EncodingFailure] = []
	if not page.boxes:
		return (images, failures)

	texts = []
	for box in page.boxes:
		if box.row.code_text not in texts:
			texts.append(box.row.code_text)

	with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
		futures = {
			text: executor.submit(
				encoder.encode,
				text,
				request.error_tolerance,
				request.size_pixels,
				request.foreground,
				request.background,
			)
			for text in texts
		}
		concurrent.futures.wait(list(futures.values()))

	reported: set[int] = set()
	for box in page.boxes:
		future = futures[box.row.code_text]
		error = future.exception()
		if error is None:
			images[box.box_index] = future.result()
			continue
		if not isinstance(error, EncodingFailure):
			raise error
		if box.row.index in reported:
			continue
		reported.add(box.row.index)
		failures.append(error.with_row(box.row.index))
	return (images, failures)
