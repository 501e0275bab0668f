"""
Label payload data model.
"""

# Standard Library
import dataclasses
import logging
import typing


logger = logging.getLogger(__name__)


class PlacementOrigin(typing.NamedTuple):
	"""
	Top-left corner of a label placement, in top-down page points.
	"""
	x: float
	y: float


@dataclasses.dataclass(frozen=True)
class TilePair:
	left: int | None
	right: int | None
	source: str


@dataclasses.dataclass(frozen=True)
class LabelPayload:
	variant: str
	recipient_lines: tuple[str, ...] = ()
	tiles: TilePair | None = None
	postcode: str | None = None
	top_ref_text: str | None = None
	mid_ref_text: str | None = None
	customer_ref: str | None = None
	price_text: str | None = None
	post_by_date: str | None = None
	order_id: str | None = None

	def with_tiles(self, tiles: TilePair) -> "LabelPayload":
		return dataclasses.replace(self, tiles=tiles)


#============================================
def _optional_text(value: object) -> str | None:
	if value is None:
		return None
	text = str(value)
	if not text:
		return None
	return text


#============================================
def tile_digit(value: object) -> int | None:
	"""
	Parse one tile value as a single routing digit.

	Args:
		value: int, float or numeric string.

	Returns:
		The digit 0..9, or None when the value is not a whole number in range.
	"""
	if isinstance(value, bool):
		return None
	if isinstance(value, str):
		value = value.strip()
	try:
		number = float(value)
	except (TypeError, ValueError):
		return None
	if not number.is_integer() or number < 0 or number > 9:
		return None
	return int(number)


#============================================
def _tiles_from_mapping(value: object) -> TilePair | None:
	"""
	Read client supplied tiles, if any.

	A missing side is drawn blank. Any present value that is not a single
	digit discards the client tiles so derived tiles are used instead.

	Args:
		value: The "tiles" entry of a client payload.

	Returns:
		TilePair tagged "client", or None when no usable tile value is present.
	"""
	if not isinstance(value, dict):
		return None
	digits = []
	for side in ("left", "right"):
		raw = value.get(side)
		if raw is None or raw == "":
			digits.append(None)
			continue
		digit = tile_digit(raw)
		if digit is None:
			logger.warning("Ignoring client %s tile %r, not a single digit", side, raw)
			return None
		digits.append(digit)
	if digits == [None, None]:
		return None
	return TilePair(left=digits[0], right=digits[1], source="client")


#============================================
def _recipient_lines(recipient: object) -> tuple[str, ...]:
	"""
	Read recipient address lines; a lone string counts as one line.
	"""
	if not isinstance(recipient, dict):
		return ()
	raw_lines = recipient.get("lines")
	if raw_lines is None:
		return ()
	if isinstance(raw_lines, str):
		raw_lines = [raw_lines]
	elif not isinstance(raw_lines, (list, tuple)):
		raise ValueError(f"recipient.lines must be a list of strings, got {type(raw_lines).__name__}")
	return tuple(str(line) for line in raw_lines if line)


#============================================
def payload_from_mapping(data: dict, variant: str) -> LabelPayload:
	"""
	Build a LabelPayload from a client request body.

	Args:
		data: Client payload mapping (recipient.lines, tiles, references).
		variant: Resolved canonical variant id.

	Returns:
		LabelPayload.
	"""
	recipient = data.get("recipient") or {}
	lines = _recipient_lines(recipient)
	postcode = None
	if isinstance(recipient, dict):
		postcode = _optional_text(recipient.get("postcode"))
	if postcode is None:
		postcode = _optional_text(data.get("postcode"))
	return LabelPayload(
		variant=variant,
		recipient_lines=lines,
		tiles=_tiles_from_mapping(data.get("tiles")),
		postcode=postcode,
		top_ref_text=_optional_text(data.get("top_ref_text")),
		mid_ref_text=_optional_text(data.get("mid_ref_text")),
		customer_ref=_optional_text(data.get("customer_ref")),
		price_text=_optional_text(data.get("price_text")),
		post_by_date=_optional_text(data.get("post_by_date")),
		order_id=_optional_text(data.get("orderId")),
	)
