import pytest

import shipping_label_printer.audit
import shipping_label_printer.config
import shipping_label_printer.errors
import shipping_label_printer.layout
import shipping_label_printer.service
import shipping_label_printer.tiles


config = shipping_label_printer.config
service = shipping_label_printer.service
audit = shipping_label_printer.audit


#============================================
def build_body(**overrides: object) -> dict:
	body = {
		"orderId": "ord-5001",
		"variant": "sd",
		"recipient": {"lines": ["Jane Doe", "10 Downing Street", "London", "SW1A 2AA"]},
		"top_ref_text": "REF-A",
		"price_text": "£8.95",
		"post_by_date": "21/10/2026",
	}
	body.update(overrides)
	return body


#============================================
def test_alias_request_renders_a6() -> None:
	"""
	An aliased variant renders an A6 PDF whose fingerprint matches its bytes.
	"""
	rendered = service.render_label_request(build_body())
	assert rendered.resolution.requested == "sd"
	assert rendered.resolution.resolved == config.DEFAULT_VARIANT_SD
	assert rendered.payload.variant == config.DEFAULT_VARIANT_SD
	assert rendered.document.startswith(b"%PDF")
	assert rendered.fingerprint == audit.fingerprint(rendered.document)
	assert rendered.sheet_count is None
	assert rendered.order.raw_id == "ORD-5001"
	assert rendered.order.filename == "RM-ORD-5001.pdf"

	record = rendered.audit_record
	assert record["sha256"] == rendered.fingerprint.sha256
	assert record["bytes"] == len(rendered.document)
	assert record["variant"] == config.DEFAULT_VARIANT_SD
	assert record["pages"] == 1


#============================================
def test_invalid_variant_rejected_before_drawing(monkeypatch: pytest.MonkeyPatch) -> None:
	"""
	A bogus variant is rejected without touching the layout engine.
	"""
	def fail_draw(*args: object, **kwargs: object) -> None:
		raise AssertionError("layout must not be reached")

	monkeypatch.setattr(shipping_label_printer.layout, "draw_label_into", fail_draw)
	with pytest.raises(shipping_label_printer.errors.InvalidVariantError) as excinfo:
		service.render_label_request(build_body(variant="bogus"))
	body = service.rejection_body(excinfo.value)
	assert body == {
		"ok": False,
		"error": "INVALID_VARIANT",
		"requested": "bogus",
		"resolved": None,
		"allowed": [config.DEFAULT_VARIANT_SD, config.DEFAULT_VARIANT_TRK],
	}


#============================================
def test_service_field_used_when_variant_missing() -> None:
	"""
	The service field resolves when no variant is given.
	"""
	body = build_body(service="tracked24")
	del body["variant"]
	rendered = service.render_label_request(body)
	assert rendered.resolution.resolved == config.DEFAULT_VARIANT_TRK


#============================================
def test_a4_sheet_count_is_clamped() -> None:
	"""
	Oversized sheet counts clamp to four copies on one A4 page.
	"""
	rendered = service.render_label_request(build_body(), sheet_count=6)
	assert rendered.sheet_count == 4
	info = audit.describe_document(rendered.document)
	assert info.pages == 1
	assert info.width == pytest.approx(config.A4_PAGE_SIZE[0])
	same = service.render_label_request(build_body(), sheet_count=4)
	assert same.fingerprint == rendered.fingerprint


#============================================
def test_tiles_from_lookup_and_fallback() -> None:
	"""
	Tiles come from the lookup when it answers, else from the postcode hash.
	"""
	rendered = service.render_label_request(
		build_body(),
		lookup=lambda key: {"tile_left": 2, "tile_right": 9},
	)
	assert rendered.payload.tiles == shipping_label_printer.tiles.TilePair(2, 9, "db")

	fallback = service.render_label_request(build_body(), lookup=lambda key: None)
	assert fallback.payload.tiles == shipping_label_printer.tiles.hash_tile_codes("SW1A2AA")


#============================================
def test_client_tiles_are_kept() -> None:
	"""
	Tiles supplied by the client skip the lookup.
	"""
	def lookup(key: str) -> object:
		raise AssertionError("lookup must not be called")

	rendered = service.render_label_request(build_body(tiles={"left": 7, "right": 1}), lookup=lookup)
	assert (rendered.payload.tiles.left, rendered.payload.tiles.right) == (7, 1)
	assert rendered.payload.tiles.source == "client"


#============================================
def test_render_is_reproducible() -> None:
	"""
	Identical requests give byte-identical documents.
	"""
	first = service.render_label_request(build_body(), qr_data={"order": "ORD-5001"})
	second = service.render_label_request(build_body(), qr_data={"order": "ORD-5001"})
	assert first.document == second.document
	assert first.fingerprint.sha256 == second.fingerprint.sha256


#============================================
def test_single_string_address_is_one_line() -> None:
	"""
	A lone string for recipient lines is one address line, not characters.
	"""
	rendered = service.render_label_request({"variant": "sd", "recipient": {"lines": "SW1A 1AA"}})
	assert rendered.payload.recipient_lines == ("SW1A 1AA",)
	assert rendered.payload.tiles == shipping_label_printer.tiles.hash_tile_codes("SW1A1AA")


#============================================
def test_non_list_address_is_rejected() -> None:
	with pytest.raises(ValueError, match="recipient.lines"):
		service.render_label_request({"variant": "sd", "recipient": {"lines": {"0": "SW1A 1AA"}}})


#============================================
@pytest.mark.parametrize(
	"client_tiles",
	[
		{"left": "x" * 50, "right": 1},
		{"left": 12, "right": 1},
		{"left": 3, "right": -1},
	],
)
def test_bad_client_tiles_use_derived_tiles(client_tiles: dict) -> None:
	"""
	Client tiles that are not single digits are replaced by derived tiles.
	"""
	rendered = service.render_label_request(build_body(tiles=client_tiles))
	assert rendered.payload.tiles == shipping_label_printer.tiles.hash_tile_codes("SW1A2AA")


#============================================
def test_client_tile_strings_become_digits() -> None:
	rendered = service.render_label_request(build_body(tiles={"left": "7", "right": ""}))
	assert rendered.payload.tiles == shipping_label_printer.tiles.TilePair(7, None, "client")
