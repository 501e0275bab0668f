"""
Artifact fingerprints and audit records for rendered label documents.
"""

# Standard Library
import dataclasses
import hashlib
import io
import json
import pathlib
import re

# PIP3 modules
import pypdf

# local repo modules
import shipping_label_printer as slp
import shipping_label_printer.config


DEFAULT_ORDER_ID = slp.config.DEFAULT_ORDER_ID
AUDIT_SERVICE = slp.config.AUDIT_SERVICE


@dataclasses.dataclass(frozen=True)
class ArtifactFingerprint:
	sha256: str
	byte_length: int


@dataclasses.dataclass(frozen=True)
class DocumentInfo:
	pages: int
	width: float
	height: float


@dataclasses.dataclass(frozen=True)
class OrderIdentity:
	raw_id: str
	safe_id: str

	@property
	def filename(self) -> str:
		return f"RM-ORD-{self.safe_id}.pdf"

	@property
	def storage_path(self) -> str:
		return f"orders/{self.filename}"


#============================================
def fingerprint(data: bytes) -> ArtifactFingerprint:
	"""
	Fingerprint the exact bytes of a finished document.

	Args:
		data: Serialized document bytes.

	Returns:
		ArtifactFingerprint with SHA-256 hex digest and byte length.
	"""
	data = bytes(data)
	return ArtifactFingerprint(sha256=hashlib.sha256(data).hexdigest(), byte_length=len(data))


#============================================
def describe_document(data: bytes) -> DocumentInfo:
	"""
	Read page count and first page size of a PDF.

	Args:
		data: PDF bytes.

	Returns:
		DocumentInfo.
	"""
	reader = pypdf.PdfReader(io.BytesIO(data))
	pages = len(reader.pages)
	width = 0.0
	height = 0.0
	if pages > 0:
		box = reader.pages[0].mediabox
		width = float(box.width)
		height = float(box.height)
	return DocumentInfo(pages=pages, width=width, height=height)


#============================================
def normalize_order_id(raw: object) -> OrderIdentity:
	"""
	Normalize a client order id.

	Args:
		raw: Order id as supplied, may be empty.

	Returns:
		OrderIdentity with the upper-cased id and a filename-safe core.
	"""
	raw_id = str(raw or DEFAULT_ORDER_ID).upper()
	core = re.sub(r"^ORD-?", "", raw_id)
	safe_id = re.sub(r"[^A-Z0-9-]", "", core)
	return OrderIdentity(raw_id=raw_id, safe_id=safe_id)


#============================================
def build_audit_record(
	order: OrderIdentity,
	artifact: ArtifactFingerprint,
	variant: str,
	pages: int | None = None,
	saved_url: str | None = None,
	service: str = AUDIT_SERVICE,
) -> dict[str, object]:
	"""
	Package a fingerprint with order metadata for external persistence.

	Args:
		order: Normalized order identity.
		artifact: Fingerprint of the returned document.
		variant: Canonical variant id or sheet tag.
		pages: Page count, if known.
		saved_url: Signed storage URL, if any.
		service: Producing service tag.

	Returns:
		Audit record dictionary.
	"""
	return {
		"order_id": order.raw_id,
		"sha256": artifact.sha256,
		"bytes": artifact.byte_length,
		"variant": variant,
		"service": service,
		"saved_url": saved_url,
		"pages": pages,
		"storage_path": order.storage_path,
	}


#============================================
def write_audit_manifest(manifest_path: pathlib.Path, record: dict[str, object]) -> None:
	"""
	Write an audit record as a JSON manifest.

	Args:
		manifest_path: Output path.
		record: Audit record.
	"""
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(record, handle, indent=2, sort_keys=True)
