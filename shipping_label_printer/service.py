"""
End-to-end label rendering for a client request body.

resolve variant -> build payload -> enrich tiles -> render -> fingerprint.
Storage, database writes and HTTP responses stay with the caller.
"""

# Standard Library
import dataclasses
import logging

# local repo modules
import shipping_label_printer as slp
import shipping_label_printer.audit
import shipping_label_printer.config
import shipping_label_printer.errors
import shipping_label_printer.payload
import shipping_label_printer.qr
import shipping_label_printer.sheet
import shipping_label_printer.tiles
import shipping_label_printer.variants


InvalidVariantError = slp.errors.InvalidVariantError
LabelPayload = slp.payload.LabelPayload
ArtifactFingerprint = slp.audit.ArtifactFingerprint
OrderIdentity = slp.audit.OrderIdentity
VariantResolution = slp.variants.VariantResolution

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class RenderedLabel:
	document: bytes
	fingerprint: ArtifactFingerprint
	resolution: VariantResolution
	order: OrderIdentity
	payload: LabelPayload
	sheet_count: int | None
	audit_record: dict[str, object]


#============================================
def rejection_body(error: InvalidVariantError) -> dict[str, object]:
	"""
	Build the client-facing rejection for an invalid variant.

	Args:
		error: The raised InvalidVariantError.

	Returns:
		Dictionary with the echoed request and the accepted values.
	"""
	return {
		"ok": False,
		"error": error.code,
		"requested": error.requested,
		"resolved": None,
		"allowed": list(error.allowed),
	}


#============================================
def render_label_request(
	body: dict,
	sheet_count: object = None,
	lookup: slp.tiles.TileLookup | None = None,
	review_queue: slp.tiles.ReviewQueue | None = None,
	table: slp.config.VariantTable | None = None,
	qr_data: object = None,
	lookup_timeout: float = slp.config.DEFAULT_LOOKUP_TIMEOUT,
) -> RenderedLabel:
	"""
	Render a label document for a client request body.

	Args:
		body: Client payload (variant or service, recipient.lines, tiles, ...).
		sheet_count: None for a single A6 label, else copies on an A4 sheet.
		lookup: Optional authoritative tile lookup.
		review_queue: Optional review queue for postcodes with no tiles.
		table: Variant table.
		qr_data: Optional QR content stamped into the reserved square.
		lookup_timeout: Tile lookup time bound in seconds.

	Returns:
		RenderedLabel with document bytes and audit record.

	Raises:
		InvalidVariantError: Before anything is drawn, if the variant does not
			resolve.
		RenderError: If drawing fails.
	"""
	if table is None:
		table = slp.config.DEFAULT_VARIANT_TABLE
	body = body or {}
	resolution = slp.variants.resolve_request_variant(body, table)
	if resolution.resolved is None:
		raise InvalidVariantError(resolution.requested, table.allowed())

	order = slp.audit.normalize_order_id(body.get("orderId"))
	payload = slp.payload.payload_from_mapping(body, resolution.resolved)
	payload = slp.tiles.enrich_tiles(payload, lookup, review_queue, lookup_timeout)

	overlay = None
	if qr_data is not None:
		overlay = slp.qr.make_qr_overlay(qr_data)

	count = None
	if sheet_count is None:
		document = slp.sheet.render_a6(payload, table, overlay)
	else:
		count = slp.sheet.clamp_count(sheet_count)
		document = slp.sheet.render_a4_sheet(payload, count, table, overlay)

	artifact = slp.audit.fingerprint(document)
	info = slp.audit.describe_document(document)
	record = slp.audit.build_audit_record(order, artifact, resolution.resolved, pages=info.pages)
	logger.info(
		"Rendered %s as %s: %d bytes sha256=%s",
		order.raw_id,
		resolution.resolved,
		artifact.byte_length,
		artifact.sha256,
	)
	return RenderedLabel(
		document=document,
		fingerprint=artifact,
		resolution=resolution,
		order=order,
		payload=payload,
		sheet_count=count,
		audit_record=record,
	)
