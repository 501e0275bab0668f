import logging

import pytest

import shipping_label_printer.config
import shipping_label_printer.errors
import shipping_label_printer.variants


config = shipping_label_printer.config
variants = shipping_label_printer.variants

SD = config.DEFAULT_VARIANT_SD
TRK = config.DEFAULT_VARIANT_TRK


#============================================
def test_canonical_ids_resolve_to_themselves() -> None:
	"""
	Canonical ids resolve directly, case and surrounding space ignored.
	"""
	result = variants.resolve_variant(SD)
	assert result.resolved == SD
	assert result.method == "canonical"

	result = variants.resolve_variant("  A6_TRK24_NOSIG_V1 ")
	assert result.resolved == TRK
	assert result.requested == "A6_TRK24_NOSIG_V1"


#============================================
@pytest.mark.parametrize("alias", sorted(config.ALIASES))
def test_aliases_match_canonical_resolution(alias: str) -> None:
	"""
	Every alias resolves to the same id as its canonical variant.
	"""
	result = variants.resolve_variant(alias)
	service = config.ALIASES[alias]
	canonical_id = {config.SERVICE_SD: SD, config.SERVICE_TRK: TRK}[service]
	assert result.resolved == variants.resolve_variant(canonical_id).resolved
	assert result.method == "alias"


#============================================
def test_sd_alias_scenario() -> None:
	"""
	The "sd" nickname resolves to the guaranteed-by-time variant.
	"""
	assert variants.resolve_variant("sd").resolved == SD
	assert variants.resolve_variant("Tracked").resolved == TRK


#============================================
@pytest.mark.parametrize("raw", ["bogus", "", None, "special-delivery", "a6", "trk_48", 42])
def test_unknown_values_do_not_resolve(raw: object) -> None:
	"""
	Values outside the canonical set, alias table and prefixes stay unresolved.
	"""
	result = variants.resolve_variant(raw)
	assert result.resolved is None
	assert result.method is None


#============================================
def test_bogus_echoes_requested_value() -> None:
	"""
	The raw requested value is preserved for diagnostics.
	"""
	result = variants.resolve_variant(" Bogus ")
	assert result.requested == "Bogus"
	assert result.resolved is None


#============================================
def test_prefix_match_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
	"""
	Near-miss spellings in a canonical family resolve by prefix and are logged.
	"""
	with caplog.at_level(logging.WARNING, logger="shipping_label_printer.variants"):
		result = variants.resolve_variant("a6_sd_2pm_v9")
	assert result.resolved == SD
	assert result.method == "prefix"
	assert "a6_sd_2pm_v9" in caplog.text

	assert variants.resolve_variant("A6_TRK48").resolved == TRK


#============================================
def test_request_variant_wins_over_service() -> None:
	"""
	The variant field takes precedence over service.
	"""
	body = {"variant": "tracked", "service": "sd"}
	assert variants.resolve_request_variant(body).resolved == TRK

	body = {"variant": "", "service": "special"}
	assert variants.resolve_request_variant(body).resolved == SD

	assert variants.resolve_request_variant({}).resolved is None


#============================================
def test_require_variant_rejects_unresolved_values() -> None:
	"""
	Only exact canonical ids pass the render-side check.
	"""
	assert variants.require_variant(SD).badge == config.BADGES[config.SERVICE_SD]
	with pytest.raises(shipping_label_printer.errors.InvalidVariantError) as excinfo:
		variants.require_variant("sd")
	assert excinfo.value.requested == "sd"
	assert excinfo.value.allowed == [SD, TRK]
	with pytest.raises(ValueError):
		variants.require_variant(None)


#============================================
def test_env_override_changes_canonical_ids() -> None:
	"""
	Environment overrides rename canonical ids and carry the aliases along.
	"""
	table = config.load_variant_table({config.ENV_VARIANT_SD: "A6_SD_1PM_V2"})
	assert table.allowed() == ["a6_sd_1pm_v2", TRK]
	assert variants.resolve_variant("sd", table).resolved == "a6_sd_1pm_v2"
	assert variants.resolve_variant(SD, table).resolved == "a6_sd_1pm_v2"
	assert variants.resolve_variant(SD, table).method == "prefix"


#============================================
def test_alias_table_is_read_only() -> None:
	"""
	The alias table cannot be mutated at runtime.
	"""
	table = config.load_variant_table({})
	with pytest.raises(TypeError):
		table.aliases["fast"] = SD
