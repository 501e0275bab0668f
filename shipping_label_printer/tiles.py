"""
Routing tile codes for postcodes.

Tiles come from an authoritative lookup when one answers in time, and
otherwise from a SHA-256 of the postcode key, so rendering never blocks on
data availability and stays reproducible for a given postcode.
"""

# Standard Library
import collections.abc
import dataclasses
import hashlib
import logging
import re
import threading
import typing

# local repo modules
import shipping_label_printer as slp
import shipping_label_printer.config
import shipping_label_printer.payload


TilePair = slp.payload.TilePair
LabelPayload = slp.payload.LabelPayload
tile_digit = slp.payload.tile_digit

DEFAULT_LOOKUP_TIMEOUT = slp.config.DEFAULT_LOOKUP_TIMEOUT

SOURCE_DB = "db"
SOURCE_HASH = "hash"
SOURCE_EMPTY = "fallback-empty"

# accepted (left, right) column names of a lookup row
ROW_FIELDS = (
	("tile_left", "tile_right"),
	("left_code", "right_code"),
)

TileLookup = typing.Callable[[str], object]
ReviewQueue = typing.Callable[[str], object]

_NON_ALNUM = re.compile(r"[^A-Z0-9]")

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class LookupResult:
	"""
	Outcome of an authoritative lookup.

	status is "hit", "absent" (no usable row) or "unavailable" (error or
	timeout). Only a hit carries codes.
	"""
	status: str
	left: int | None = None
	right: int | None = None


LOOKUP_ABSENT = LookupResult(status="absent")
LOOKUP_UNAVAILABLE = LookupResult(status="unavailable")


#============================================
def normalize_postcode_key(raw: object) -> str | None:
	"""
	Normalize postcode text to an uppercase alphanumeric key.

	Args:
		raw: Postcode text, any type.

	Returns:
		Key string, or None when nothing usable remains.
	"""
	if raw is None:
		return None
	key = _NON_ALNUM.sub("", str(raw).upper())
	if not key:
		return None
	return key


#============================================
def postcode_key_from_address(lines: typing.Iterable[object], postcode: object = None) -> str | None:
	"""
	Derive the postcode key for an address.

	An explicit postcode wins; otherwise the last non-empty address line is
	used.

	Args:
		lines: Recipient address lines.
		postcode: Optional explicit postcode field.

	Returns:
		Postcode key or None.
	"""
	key = normalize_postcode_key(postcode)
	if key is not None:
		return key
	non_empty = [str(line).strip() for line in (lines or []) if line is not None]
	non_empty = [line for line in non_empty if line]
	if not non_empty:
		return None
	return normalize_postcode_key(non_empty[-1])


#============================================
def hash_tile_codes(key: str) -> TilePair:
	"""
	Compute the deterministic fallback tiles for a postcode key.

	Args:
		key: Normalized postcode key.

	Returns:
		TilePair from the first two SHA-256 digest bytes, each modulo 10.
	"""
	digest = hashlib.sha256(key.encode("utf-8")).digest()
	return TilePair(left=digest[0] % 10, right=digest[1] % 10, source=SOURCE_HASH)


#============================================
def _row_codes(row: object) -> tuple[int, int] | None:
	"""
	Extract tile codes from a lookup response.

	Anything but exactly one row with both fields present and each a whole
	number in 0..9 is treated as absence.
	"""
	if isinstance(row, (list, tuple)):
		if len(row) != 1:
			return None
		row = row[0]
	if not isinstance(row, collections.abc.Mapping):
		return None
	for left_field, right_field in ROW_FIELDS:
		left = row.get(left_field)
		right = row.get(right_field)
		if left is None or right is None:
			continue
		left_digit = tile_digit(left)
		right_digit = tile_digit(right)
		if left_digit is None or right_digit is None:
			return None
		return (left_digit, right_digit)
	return None


#============================================
def query_lookup(lookup: TileLookup, key: str, timeout: float = DEFAULT_LOOKUP_TIMEOUT) -> LookupResult:
	"""
	Query the authoritative tile source with a time bound.

	The lookup runs on a daemon worker thread; a hang, an exception or a
	malformed response all come back as a non-hit result.

	Args:
		lookup: Callable taking the postcode key.
		key: Normalized postcode key.
		timeout: Seconds to wait for an answer.

	Returns:
		LookupResult.
	"""
	outcome: dict[str, object] = {}

	def worker() -> None:
		try:
			outcome["row"] = lookup(key)
		except Exception as error:
			outcome["error"] = error

	thread = threading.Thread(target=worker, name=f"tile-lookup-{key}", daemon=True)
	thread.start()
	thread.join(timeout)
	if thread.is_alive():
		logger.debug("Tile lookup for %s timed out after %.2fs", key, timeout)
		return LOOKUP_UNAVAILABLE
	if "error" in outcome:
		logger.debug("Tile lookup for %s failed: %s", key, outcome["error"])
		return LOOKUP_UNAVAILABLE
	codes = _row_codes(outcome.get("row"))
	if codes is None:
		return LOOKUP_ABSENT
	return LookupResult(status="hit", left=codes[0], right=codes[1])


#============================================
def offer_for_review(review_queue: ReviewQueue, key: str) -> threading.Thread:
	"""
	Offer a postcode key to the review queue without waiting for it.

	Args:
		review_queue: Callable taking the postcode key.
		key: Postcode key with no authoritative tiles.

	Returns:
		The started daemon thread.
	"""
	def worker() -> None:
		try:
			review_queue(key)
		except Exception as error:
			logger.warning("Review queue insert for %s failed: %s", key, error)

	thread = threading.Thread(target=worker, name=f"tile-review-{key}", daemon=True)
	thread.start()
	return thread


#============================================
def get_tile_codes(
	postcode_raw: object,
	lookup: TileLookup | None = None,
	review_queue: ReviewQueue | None = None,
	timeout: float = DEFAULT_LOOKUP_TIMEOUT,
) -> TilePair:
	"""
	Get the routing tile codes for a postcode.

	Args:
		postcode_raw: Postcode text.
		lookup: Optional authoritative lookup.
		review_queue: Optional review queue for keys with no row.
		timeout: Lookup time bound in seconds.

	Returns:
		TilePair tagged with its provenance.
	"""
	key = normalize_postcode_key(postcode_raw)
	if key is None:
		return TilePair(left=0, right=0, source=SOURCE_EMPTY)

	if lookup is not None:
		result = query_lookup(lookup, key, timeout)
		if result.status == "hit":
			return TilePair(left=result.left, right=result.right, source=SOURCE_DB)
		if result.status == "absent" and review_queue is not None:
			offer_for_review(review_queue, key)

	return hash_tile_codes(key)


#============================================
def enrich_tiles(
	payload: LabelPayload,
	lookup: TileLookup | None = None,
	review_queue: ReviewQueue | None = None,
	timeout: float = DEFAULT_LOOKUP_TIMEOUT,
) -> LabelPayload:
	"""
	Fill in tiles for a payload that does not carry any.

	Args:
		payload: Label payload.
		lookup: Optional authoritative lookup.
		review_queue: Optional review queue.
		timeout: Lookup time bound in seconds.

	Returns:
		The payload itself when tiles are present, else a copy with tiles.
	"""
	if payload.tiles is not None:
		return payload
	key = postcode_key_from_address(payload.recipient_lines, payload.postcode)
	tiles = get_tile_codes(key, lookup=lookup, review_queue=review_queue, timeout=timeout)
	logger.info("Tiles for %s: %s/%s (%s)", key, tiles.left, tiles.right, tiles.source)
	return payload.with_tiles(tiles)
