"""
CLI entry points for shipping label rendering.
"""

# Standard Library
import argparse
import json
import pathlib
import sys
import time

# local repo modules
import shipping_label_printer as slp
import shipping_label_printer.audit
import shipping_label_printer.config
import shipping_label_printer.errors
import shipping_label_printer.service


InvalidVariantError = slp.errors.InvalidVariantError


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Argument list, defaults to sys.argv.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Render a shipping label PDF from a JSON payload.")
	parser.add_argument("payload_path", help="Label payload JSON file.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", required=True, help="Output PDF path.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output audit manifest JSON path.")

	layout_group = parser.add_argument_group("Layout")
	layout_group.add_argument(
		"-c", "--count", dest="count", type=int, default=None,
		help="Render COUNT copies (1-4) on an A4 sheet instead of a single A6 label.",
	)
	layout_group.add_argument("-q", "--qr", dest="qr_data", default=None, help="Text to encode in the QR square.")

	parser.add_argument("-v", "--verbose", dest="verbose", action="store_true", help="Debug logging.")
	parser.set_defaults(verbose=False)

	args = parser.parse_args(argv)
	return args


#============================================
def load_payload(path: pathlib.Path) -> dict:
	"""
	Load a payload JSON file.

	Args:
		path: JSON file path.

	Returns:
		Payload mapping.
	"""
	with path.open("r", encoding="utf-8") as handle:
		data = json.load(handle)
	if not isinstance(data, dict):
		raise ValueError(f"payload must be a JSON object: {path}")
	return data


#============================================
def run_pipeline(args: argparse.Namespace) -> int:
	"""
	Render one label request to disk.

	Args:
		args: Parsed argparse namespace.

	Returns:
		Process exit status.
	"""
	print("Shipping label render")
	print(f"Payload: {args.payload_path}")
	print(f"Output PDF: {args.output_path}")
	if args.count is not None:
		print(f"A4 copies: {args.count}")

	start_time = time.perf_counter()
	body = load_payload(pathlib.Path(args.payload_path))
	try:
		rendered = slp.service.render_label_request(body, sheet_count=args.count, qr_data=args.qr_data)
	except InvalidVariantError as error:
		print(json.dumps(slp.service.rejection_body(error), indent=2))
		return 2

	output_path = pathlib.Path(args.output_path)
	output_path.write_bytes(rendered.document)

	manifest_path = args.manifest_path
	if manifest_path is None:
		manifest_path = f"{output_path}.json"
	slp.audit.write_audit_manifest(pathlib.Path(manifest_path), rendered.audit_record)

	tiles = rendered.payload.tiles
	print(f"Variant: {rendered.resolution.requested!r} -> {rendered.resolution.resolved}")
	print(f"Tiles: {tiles.left}/{tiles.right} ({tiles.source})")
	print(f"Order: {rendered.order.raw_id} ({rendered.order.filename})")
	print(f"Bytes: {rendered.fingerprint.byte_length}")
	print(f"SHA256: {rendered.fingerprint.sha256}")
	print(f"Manifest written: {manifest_path}")
	print(f"Timing: total={time.perf_counter() - start_time:.2f}s")
	return 0


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	slp.config.setup_logging(args.verbose)
	sys.exit(run_pipeline(args))
