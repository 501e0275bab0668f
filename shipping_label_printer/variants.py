"""
Variant resolution from free-form client input to canonical label variants.
"""

# Standard Library
import dataclasses
import logging

# local repo modules
import shipping_label_printer as slp
import shipping_label_printer.config
import shipping_label_printer.errors


LabelVariant = slp.config.LabelVariant
VariantTable = slp.config.VariantTable
InvalidVariantError = slp.errors.InvalidVariantError

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class VariantResolution:
	requested: str
	resolved: str | None
	method: str | None = None


#============================================
def _as_text(value: object) -> str:
	if value is None:
		return ""
	return str(value).strip()


#============================================
def resolve_variant(raw: object, table: VariantTable | None = None) -> VariantResolution:
	"""
	Map raw client text onto a canonical variant id.

	Resolution order is canonical id, alias table, then family prefix.
	No match yields resolved=None, which callers must treat as a rejection.

	Args:
		raw: Raw variant or service text.
		table: Variant table, defaults to the process-wide table.

	Returns:
		VariantResolution echoing the trimmed raw text.
	"""
	if table is None:
		table = slp.config.DEFAULT_VARIANT_TABLE
	requested = _as_text(raw)
	needle = requested.lower()
	if not needle:
		return VariantResolution(requested=requested, resolved=None)
	if needle in table.allowed():
		return VariantResolution(requested=requested, resolved=needle, method="canonical")
	if needle in table.aliases:
		return VariantResolution(requested=requested, resolved=table.aliases[needle], method="alias")
	for prefix, variant_id in table.prefixes:
		if needle.startswith(prefix):
			logger.warning(
				"Variant %r accepted by prefix %r as %s", requested, prefix, variant_id,
			)
			return VariantResolution(requested=requested, resolved=variant_id, method="prefix")
	return VariantResolution(requested=requested, resolved=None)


#============================================
def resolve_request_variant(body: dict, table: VariantTable | None = None) -> VariantResolution:
	"""
	Resolve the variant of a client request body.

	The "variant" field wins over "service" when both are present.

	Args:
		body: Client payload mapping.
		table: Variant table.

	Returns:
		VariantResolution.
	"""
	raw = _as_text(body.get("variant"))
	if not raw:
		raw = _as_text(body.get("service"))
	return resolve_variant(raw, table)


#============================================
def require_variant(value: object, table: VariantTable | None = None) -> LabelVariant:
	"""
	Validate an already resolved variant id against the closed set.

	Args:
		value: Canonical variant id.
		table: Variant table.

	Returns:
		Matching LabelVariant.

	Raises:
		InvalidVariantError: If value is not a canonical id.
	"""
	if table is None:
		table = slp.config.DEFAULT_VARIANT_TABLE
	variant_id = _as_text(value)
	variant = table.get(variant_id)
	if variant is None:
		raise InvalidVariantError(variant_id, table.allowed())
	return variant
