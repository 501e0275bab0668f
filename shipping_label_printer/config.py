"""
Shared configuration and constants.
"""

# Standard Library
import dataclasses
import logging
import os
import types

# PIP3 modules
import reportlab.lib.pagesizes


LABEL_WIDTH = 298.0
LABEL_HEIGHT = 420.0
A6_PAGE_SIZE = (LABEL_WIDTH, LABEL_HEIGHT)
A4_PAGE_SIZE = reportlab.lib.pagesizes.A4
LABELS_PER_SHEET = 4

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
LEADING_FACTOR = 1.2

MARGIN_X = 12.0
CONTENT_WIDTH = LABEL_WIDTH - 2 * MARGIN_X

TILE_WIDTH = 42.0
TILE_HEIGHT = 18.0
TILE_RADIUS = 3.0
TILE_Y = 66.0
TILE_LEFT_X = 12.0
TILE_RIGHT_X = 60.0
TILE_FONT_SIZE = 10.0
TILE_TEXT_INSET_Y = 4.0

TOP_REF_Y = 90.0
ADDRESS_Y = 108.0
ADDRESS_LINE_HEIGHT = 14.0
MID_REF_Y = 260.0
BARCODE_BOX = (12.0, 276.0, CONTENT_WIDTH, 32.0)
BARCODE_CAPTION = "1D BARCODE (placeholder)"
BARCODE_CAPTION_POS = (16.0, 288.0)
QR_BOX = (12.0, 316.0, 38.0, 38.0)
QR_CAPTION = "2D"
QR_CAPTION_POS = (26.0, 330.0)
FOOTER_Y = 360.0
FOOTER_LINE_HEIGHT = 12.0

HEADER_TITLE = "Delivered By"
HEADER_CAPTION = "Postage Paid GB"

DEFAULT_LOOKUP_TIMEOUT = 2.0
DEFAULT_ORDER_ID = "ORD-0000"
AUDIT_SERVICE = "api"

ENV_VARIANT_SD = "A6_VARIANT_SD_1PM"
ENV_VARIANT_TRK = "A6_VARIANT_TRK24_NOSIG"
DEFAULT_VARIANT_SD = "a6_sd_1pm_v1"
DEFAULT_VARIANT_TRK = "a6_trk24_nosig_v1"

SERVICE_SD = "sd_1pm"
SERVICE_TRK = "trk24_nosig"

BADGES = {
	SERVICE_SD: "Special Delivery — Guaranteed by 1pm",
	SERVICE_TRK: "Tracked — No Signature 24",
}

# nickname -> semantic service; keep in sync with the published API enum
ALIASES = {
	"sd_1pm": SERVICE_SD,
	"sd": SERVICE_SD,
	"special": SERVICE_SD,
	"special_delivery": SERVICE_SD,
	"a6_sd": SERVICE_SD,
	"trk24_nosig": SERVICE_TRK,
	"tracked24": SERVICE_TRK,
	"tracked": SERVICE_TRK,
	"a6_trk24": SERVICE_TRK,
	"trk": SERVICE_TRK,
}

PREFIXES = (
	("a6_sd", SERVICE_SD),
	("a6_trk", SERVICE_TRK),
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclasses.dataclass(frozen=True)
class LabelVariant:
	variant_id: str
	service: str
	badge: str


@dataclasses.dataclass(frozen=True)
class VariantTable:
	variants: tuple[LabelVariant, ...]
	aliases: types.MappingProxyType
	prefixes: tuple[tuple[str, str], ...]

	def allowed(self) -> list[str]:
		return [variant.variant_id for variant in self.variants]

	def get(self, variant_id: str) -> LabelVariant | None:
		for variant in self.variants:
			if variant.variant_id == variant_id:
				return variant
		return None


#============================================
def load_variant_table(environ: dict[str, str] | None = None) -> VariantTable:
	"""
	Build the closed variant set and alias table.

	Canonical ids may be overridden through the environment so that they
	match the externally published variant enumeration.

	Args:
		environ: Environment mapping, defaults to os.environ.

	Returns:
		Read-only VariantTable.
	"""
	if environ is None:
		environ = os.environ
	ids = {
		SERVICE_SD: (environ.get(ENV_VARIANT_SD) or DEFAULT_VARIANT_SD).strip().lower(),
		SERVICE_TRK: (environ.get(ENV_VARIANT_TRK) or DEFAULT_VARIANT_TRK).strip().lower(),
	}
	variants = tuple(
		LabelVariant(variant_id=ids[service], service=service, badge=BADGES[service])
		for service in (SERVICE_SD, SERVICE_TRK)
	)
	aliases = types.MappingProxyType(
		{alias: ids[service] for alias, service in ALIASES.items()}
	)
	prefixes = tuple((prefix, ids[service]) for prefix, service in PREFIXES)
	return VariantTable(variants=variants, aliases=aliases, prefixes=prefixes)


DEFAULT_VARIANT_TABLE = load_variant_table()


#============================================
def setup_logging(verbose: bool = False) -> None:
	"""
	Configure console logging for command line use.

	Args:
		verbose: Enable DEBUG output.
	"""
	level = logging.DEBUG if verbose else logging.INFO
	logger = logging.getLogger("shipping_label_printer")
	logger.setLevel(level)
	if logger.handlers:
		return
	handler = logging.StreamHandler()
	handler.setFormatter(logging.Formatter(LOG_FORMAT))
	logger.addHandler(handler)
