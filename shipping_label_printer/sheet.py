"""
Sheet composition and PDF document rendering.
"""

# Standard Library
import io
import logging
import typing

# PIP3 modules
import reportlab.pdfgen.canvas

# local repo modules
import shipping_label_printer as slp
import shipping_label_printer.config
import shipping_label_printer.errors
import shipping_label_printer.layout
import shipping_label_printer.payload
import shipping_label_printer.variants


LabelPayload = slp.payload.LabelPayload
PlacementOrigin = slp.payload.PlacementOrigin
VariantTable = slp.config.VariantTable
RenderError = slp.errors.RenderError

LABEL_WIDTH = slp.config.LABEL_WIDTH
LABEL_HEIGHT = slp.config.LABEL_HEIGHT
A6_PAGE_SIZE = slp.config.A6_PAGE_SIZE
A4_PAGE_SIZE = slp.config.A4_PAGE_SIZE
LABELS_PER_SHEET = slp.config.LABELS_PER_SHEET

Overlay = typing.Callable[[typing.Any, PlacementOrigin, float], None]

logger = logging.getLogger(__name__)


#============================================
def quadrant_origins() -> list[PlacementOrigin]:
	"""
	Quadrant origins in fill order: top-left, top-right, bottom-left,
	bottom-right.

	Returns:
		List of four PlacementOrigin values.
	"""
	return [
		PlacementOrigin(0.0, 0.0),
		PlacementOrigin(LABEL_WIDTH, 0.0),
		PlacementOrigin(0.0, LABEL_HEIGHT),
		PlacementOrigin(LABEL_WIDTH, LABEL_HEIGHT),
	]


#============================================
def clamp_count(count: object) -> int:
	"""
	Clamp a requested label count into 1..4.

	Args:
		count: Requested count, any type.

	Returns:
		Clamped integer count.
	"""
	try:
		value = int(float(count))
	except (TypeError, ValueError):
		return 1
	return max(1, min(LABELS_PER_SHEET, value))


#============================================
def new_canvas(buffer: io.BytesIO, pagesize: tuple[float, float]) -> reportlab.pdfgen.canvas.Canvas:
	# invariant output: fixed creation date and document id
	return reportlab.pdfgen.canvas.Canvas(buffer, pagesize=pagesize, invariant=1)


#============================================
def compose_sheet(
	canvas: typing.Any,
	payload: LabelPayload,
	count: object,
	page_height: float = A4_PAGE_SIZE[1],
	table: VariantTable | None = None,
) -> list[PlacementOrigin]:
	"""
	Tile copies of one label onto a sheet in quadrant order.

	Unused quadrants are left blank.

	Args:
		canvas: ReportLab canvas.
		payload: Label payload, identical for every copy.
		count: Number of copies, clamped to 1..4.
		page_height: Canvas page height.
		table: Variant table.

	Returns:
		Origins used, in drawing order.
	"""
	placements = quadrant_origins()[:clamp_count(count)]
	for origin in placements:
		slp.layout.draw_label_into(canvas, payload, origin, page_height, table)
	return placements


#============================================
def _finish(canvas: reportlab.pdfgen.canvas.Canvas, buffer: io.BytesIO) -> bytes:
	try:
		canvas.showPage()
		canvas.save()
	except Exception as error:
		raise RenderError(f"{RenderError.code}: {error}") from error
	return buffer.getvalue()


#============================================
def _apply_overlay(
	canvas: reportlab.pdfgen.canvas.Canvas,
	overlay: Overlay | None,
	placements: list[PlacementOrigin],
	page_height: float,
) -> None:
	if overlay is None:
		return
	for origin in placements:
		try:
			overlay(canvas, origin, page_height)
		except Exception as error:
			raise RenderError(f"{RenderError.code}: {error}") from error


#============================================
def render_a6(
	payload: LabelPayload,
	table: VariantTable | None = None,
	overlay: Overlay | None = None,
) -> bytes:
	"""
	Render a single label as an A6 PDF.

	Args:
		payload: Label payload.
		table: Variant table.
		overlay: Optional callable drawn over the finished label.

	Returns:
		Finished PDF bytes.
	"""
	buffer = io.BytesIO()
	canvas = new_canvas(buffer, A6_PAGE_SIZE)
	origin = PlacementOrigin(0.0, 0.0)
	slp.layout.draw_label_into(canvas, payload, origin, A6_PAGE_SIZE[1], table)
	_apply_overlay(canvas, overlay, [origin], A6_PAGE_SIZE[1])
	return _finish(canvas, buffer)


#============================================
def render_a4_sheet(
	payload: LabelPayload,
	count: object,
	table: VariantTable | None = None,
	overlay: Overlay | None = None,
) -> bytes:
	"""
	Render up to four copies of a label on one A4 sheet.

	Args:
		payload: Label payload.
		count: Number of copies, clamped to 1..4.
		table: Variant table.
		overlay: Optional callable drawn over each placed label.

	Returns:
		Finished PDF bytes.
	"""
	buffer = io.BytesIO()
	canvas = new_canvas(buffer, A4_PAGE_SIZE)
	placements = compose_sheet(canvas, payload, count, A4_PAGE_SIZE[1], table)
	_apply_overlay(canvas, overlay, placements, A4_PAGE_SIZE[1])
	logger.debug("A4 sheet with %d placements", len(placements))
	return _finish(canvas, buffer)


#============================================
def render_a4_batch(payloads: typing.Sequence[LabelPayload], table: VariantTable | None = None) -> bytes:
	"""
	Render different labels across as many A4 sheets as needed.

	Labels fill quadrants in order and a new page starts every four labels.
	Every variant is validated before anything is drawn.

	Args:
		payloads: Label payloads.
		table: Variant table.

	Returns:
		Finished PDF bytes.
	"""
	if not payloads:
		raise ValueError("no labels to render")
	for payload in payloads:
		slp.variants.require_variant(payload.variant, table)

	buffer = io.BytesIO()
	canvas = new_canvas(buffer, A4_PAGE_SIZE)
	origins = quadrant_origins()
	for index, payload in enumerate(payloads):
		if index > 0 and index % LABELS_PER_SHEET == 0:
			canvas.showPage()
		origin = origins[index % LABELS_PER_SHEET]
		slp.layout.draw_label_into(canvas, payload, origin, A4_PAGE_SIZE[1], table)
	pages = (len(payloads) + LABELS_PER_SHEET - 1) // LABELS_PER_SHEET
	logger.debug("A4 batch: %d labels on %d pages", len(payloads), pages)
	return _finish(canvas, buffer)
