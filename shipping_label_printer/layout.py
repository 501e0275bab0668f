"""
Single label layout drawn onto a shared ReportLab canvas.

Layout offsets are top-down from the label's top-left corner; they are
converted to PDF (bottom-up) coordinates inside the translated label frame.
"""

# Standard Library
import contextlib
import typing

# PIP3 modules
import reportlab.lib.utils
import reportlab.pdfbase.pdfmetrics

# local repo modules
import shipping_label_printer as slp
import shipping_label_printer.config
import shipping_label_printer.errors
import shipping_label_printer.payload
import shipping_label_printer.variants


LabelPayload = slp.payload.LabelPayload
PlacementOrigin = slp.payload.PlacementOrigin
VariantTable = slp.config.VariantTable
RenderError = slp.errors.RenderError

LABEL_HEIGHT = slp.config.LABEL_HEIGHT
FONT_REGULAR = slp.config.FONT_REGULAR
FONT_BOLD = slp.config.FONT_BOLD
LEADING_FACTOR = slp.config.LEADING_FACTOR
MARGIN_X = slp.config.MARGIN_X
CONTENT_WIDTH = slp.config.CONTENT_WIDTH


#============================================
@contextlib.contextmanager
def saved_state(canvas: typing.Any) -> typing.Iterator[None]:
	"""
	Save the canvas graphics state and restore it on every exit path.

	Args:
		canvas: ReportLab canvas.
	"""
	canvas.saveState()
	try:
		yield
	finally:
		canvas.restoreState()


#============================================
def baseline_y(y_top: float, font_name: str, font_size: float) -> float:
	"""
	Convert a top-down text top into a bottom-up baseline in the label frame.

	Args:
		y_top: Distance of the text top from the label top.
		font_name: ReportLab font name.
		font_size: Font size in points.

	Returns:
		Baseline y in label coordinates.
	"""
	ascent = reportlab.pdfbase.pdfmetrics.getAscent(font_name) * font_size / 1000.0
	return LABEL_HEIGHT - y_top - ascent


#============================================
def box_y(y_top: float, height: float) -> float:
	return LABEL_HEIGHT - y_top - height


#============================================
def wrap_lines(text: str, font_name: str, font_size: float, width: float | None) -> list[str]:
	"""
	Split text into drawable lines, wrapping to a width when given.

	Args:
		text: Text, may contain newlines.
		font_name: ReportLab font name.
		font_size: Font size in points.
		width: Wrap width in points, or None for no wrapping.

	Returns:
		List of lines.
	"""
	if width is None:
		return text.splitlines() or [text]
	return reportlab.lib.utils.simpleSplit(text, font_name, font_size, width)


#============================================
def draw_text(
	canvas: typing.Any,
	text: str,
	x: float,
	y_top: float,
	font_name: str,
	font_size: float,
	width: float | None = None,
) -> int:
	"""
	Draw text with its top at y_top.

	Args:
		canvas: ReportLab canvas.
		text: Text to draw.
		x: Left edge.
		y_top: Top of the first line, top-down.
		font_name: ReportLab font name.
		font_size: Font size in points.
		width: Optional wrap width.

	Returns:
		Number of lines drawn.
	"""
	lines = wrap_lines(text, font_name, font_size, width)
	leading = font_size * LEADING_FACTOR
	base = baseline_y(y_top, font_name, font_size)
	canvas.setFont(font_name, font_size)
	for index, line in enumerate(lines):
		canvas.drawString(x, base - index * leading, line)
	return len(lines)


#============================================
def tile_text(value: object) -> str:
	if value is None:
		return ""
	return str(value)


#============================================
def draw_tile(canvas: typing.Any, x: float, y_top: float, value: object) -> None:
	"""
	Draw one routing tile: a black rounded box with a centred white digit.

	Args:
		canvas: ReportLab canvas.
		x: Left edge.
		y_top: Top edge, top-down.
		value: Tile value; None draws an empty box.
	"""
	width = slp.config.TILE_WIDTH
	height = slp.config.TILE_HEIGHT
	with saved_state(canvas):
		canvas.setFillColorRGB(0.0, 0.0, 0.0)
		canvas.roundRect(x, box_y(y_top, height), width, height, slp.config.TILE_RADIUS, stroke=0, fill=1)
		canvas.setFillColorRGB(1.0, 1.0, 1.0)
		canvas.setFont(FONT_BOLD, slp.config.TILE_FONT_SIZE)
		text_top = y_top + slp.config.TILE_TEXT_INSET_Y
		canvas.drawCentredString(
			x + width / 2.0,
			baseline_y(text_top, FONT_BOLD, slp.config.TILE_FONT_SIZE),
			tile_text(value),
		)


#============================================
def draw_address(canvas: typing.Any, lines: typing.Sequence[str]) -> None:
	"""
	Draw the recipient address block.

	All lines but the last are regular wrapped text; the last line is bold
	and sits below every wrapped body line.

	Args:
		canvas: ReportLab canvas.
		lines: Address lines, last line is the primary line.
	"""
	lines = [str(line) for line in lines if line]
	if not lines:
		return
	body = "\n".join(lines[:-1])
	body_count = 0
	if body:
		body_count = draw_text(canvas, body, MARGIN_X, slp.config.ADDRESS_Y, FONT_REGULAR, 10, CONTENT_WIDTH)
	last_top = slp.config.ADDRESS_Y + slp.config.ADDRESS_LINE_HEIGHT * body_count
	draw_text(canvas, lines[-1], MARGIN_X, last_top, FONT_BOLD, 12, CONTENT_WIDTH)


#============================================
def draw_footer(canvas: typing.Any, payload: LabelPayload) -> None:
	entries = []
	if payload.customer_ref:
		entries.append(f"Customer Ref: {payload.customer_ref}")
	if payload.price_text:
		entries.append(f"Postage Cost {payload.price_text}")
	if payload.post_by_date:
		entries.append(f"Post by the end of {payload.post_by_date}")
	y_top = slp.config.FOOTER_Y
	for entry in entries:
		draw_text(canvas, entry, MARGIN_X, y_top, FONT_REGULAR, 9)
		y_top += slp.config.FOOTER_LINE_HEIGHT


#============================================
def draw_label_into(
	canvas: typing.Any,
	payload: LabelPayload,
	origin: PlacementOrigin = PlacementOrigin(0.0, 0.0),
	page_height: float = LABEL_HEIGHT,
	table: VariantTable | None = None,
) -> None:
	"""
	Draw one complete label onto a caller-owned canvas.

	The variant is validated before any canvas call. Drawing happens inside a
	saved graphics state so sibling placements are unaffected.

	Args:
		canvas: ReportLab canvas (or any object with the same drawing calls).
		payload: Label payload carrying a canonical variant id.
		origin: Top-left corner of the label, top-down page coordinates.
		page_height: Height of the canvas page in points.
		table: Variant table.

	Raises:
		InvalidVariantError: If the payload variant is not canonical.
		RenderError: If drawing fails.
	"""
	variant = slp.variants.require_variant(payload.variant, table)
	try:
		with saved_state(canvas):
			canvas.translate(origin.x, page_height - origin.y - LABEL_HEIGHT)
			canvas.setFillColorRGB(0.0, 0.0, 0.0)
			canvas.setStrokeColorRGB(0.0, 0.0, 0.0)
			canvas.setLineWidth(1.0)

			# header
			draw_text(canvas, slp.config.HEADER_TITLE, MARGIN_X, 10, FONT_BOLD, 11)
			draw_text(canvas, slp.config.HEADER_CAPTION, MARGIN_X, 26, FONT_REGULAR, 9)
			draw_text(canvas, variant.badge, MARGIN_X, 44, FONT_BOLD, 12, CONTENT_WIDTH)

			tiles = payload.tiles
			draw_tile(canvas, slp.config.TILE_LEFT_X, slp.config.TILE_Y, tiles.left if tiles else None)
			draw_tile(canvas, slp.config.TILE_RIGHT_X, slp.config.TILE_Y, tiles.right if tiles else None)

			if payload.top_ref_text:
				draw_text(canvas, payload.top_ref_text, MARGIN_X, slp.config.TOP_REF_Y, FONT_REGULAR, 10, CONTENT_WIDTH)

			draw_address(canvas, payload.recipient_lines)

			if payload.mid_ref_text:
				draw_text(canvas, payload.mid_ref_text, MARGIN_X, slp.config.MID_REF_Y, FONT_REGULAR, 10, CONTENT_WIDTH)

			bx, by, bw, bh = slp.config.BARCODE_BOX
			canvas.rect(bx, box_y(by, bh), bw, bh, stroke=1, fill=0)
			cx, cy = slp.config.BARCODE_CAPTION_POS
			draw_text(canvas, slp.config.BARCODE_CAPTION, cx, cy, FONT_REGULAR, 9)

			qx, qy, qw, qh = slp.config.QR_BOX
			canvas.rect(qx, box_y(qy, qh), qw, qh, stroke=1, fill=0)
			cx, cy = slp.config.QR_CAPTION_POS
			draw_text(canvas, slp.config.QR_CAPTION, cx, cy, FONT_REGULAR, 8)

			draw_footer(canvas, payload)
	except Exception as error:
		raise RenderError(f"{RenderError.code}: {error}") from error
