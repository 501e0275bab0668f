"""
QR symbol overlay for the square reserved on each label.
"""

# Standard Library
import json
import typing

# PIP3 modules
import reportlab.graphics.barcode.qr
import reportlab.graphics.renderPDF
import reportlab.graphics.shapes

# local repo modules
import shipping_label_printer as slp
import shipping_label_printer.config
import shipping_label_printer.payload


PlacementOrigin = slp.payload.PlacementOrigin

LABEL_HEIGHT = slp.config.LABEL_HEIGHT
QR_BOX = slp.config.QR_BOX


#============================================
def qr_text(data: object) -> str:
	"""
	Encode QR content; mappings and lists become compact JSON.

	Args:
		data: String or JSON-serializable object.

	Returns:
		Text to encode.
	"""
	if isinstance(data, str):
		return data
	return json.dumps(data, sort_keys=True, separators=(",", ":"))


#============================================
def qr_box_on_page(origin: PlacementOrigin, page_height: float) -> tuple[float, float, float]:
	"""
	Locate the reserved QR square of a placement in PDF coordinates.

	Args:
		origin: Label origin, top-down.
		page_height: Page height.

	Returns:
		Tuple of (x, y, size) with y at the square's bottom edge.
	"""
	box_x, box_top, box_width, box_height = QR_BOX
	x = origin.x + box_x
	y = page_height - origin.y - box_top - box_height
	return (x, y, box_width)


#============================================
def draw_qr_code(
	canvas: typing.Any,
	data: object,
	origin: PlacementOrigin,
	page_height: float,
) -> None:
	"""
	Draw a QR symbol scaled into the reserved square of one placement.

	Args:
		canvas: ReportLab canvas.
		data: QR content.
		origin: Label origin, top-down.
		page_height: Page height.
	"""
	widget = reportlab.graphics.barcode.qr.QrCodeWidget(qr_text(data), barLevel="M", barBorder=0)
	x0, y0, x1, y1 = widget.getBounds()
	x, y, size = qr_box_on_page(origin, page_height)
	drawing = reportlab.graphics.shapes.Drawing(
		size,
		size,
		transform=[size / (x1 - x0), 0, 0, size / (y1 - y0), 0, 0],
	)
	drawing.add(widget)
	reportlab.graphics.renderPDF.draw(drawing, canvas, x, y)


#============================================
def make_qr_overlay(data: object) -> typing.Callable[[typing.Any, PlacementOrigin, float], None]:
	"""
	Build a per-placement overlay that stamps the same QR on every label.

	Args:
		data: QR content.

	Returns:
		Callable taking (canvas, origin, page_height).
	"""
	def overlay(canvas: typing.Any, origin: PlacementOrigin, page_height: float) -> None:
		draw_qr_code(canvas, data, origin, page_height)
	return overlay
