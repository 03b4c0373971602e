"""
CLI entry points for building calendar pages.
"""

# Standard Library
import argparse
import logging
import pathlib
import time

# local repo modules
import photo_calendar as pcal
import photo_calendar.config
import photo_calendar.render


DEFAULT_DATA_DIR = "data"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5000


#============================================
def load_config(args: argparse.Namespace) -> pcal.config.CalendarConfig:
	"""
	Load the calendar named on the command line.

	Args:
		args: Parsed argparse namespace.

	Returns:
		CalendarConfig.
	"""
	directory = pcal.config.calendar_directory(pathlib.Path(args.data_dir), args.identifier)
	return pcal.config.load_calendar_config(directory)


#============================================
def add_common_arguments(parser: argparse.ArgumentParser, with_identifier: bool = True) -> None:
	source_group = parser.add_argument_group("Source")
	if with_identifier:
		source_group.add_argument("identifier", help="Calendar identifier (directory below data/calendar).")
	source_group.add_argument("-d", "--data-dir", dest="data_dir", default=DEFAULT_DATA_DIR, help="Data directory.")
	source_group.add_argument("-f", "--font", dest="font_path", default=None, help="TrueType font file.")


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Arguments, sys.argv when None.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Build photo calendar pages.")
	parser.add_argument("-v", "--verbose", dest="verbose", action="store_true", help="Show debug logging.")
	subparsers = parser.add_subparsers(dest="command", required=True)

	build_parser = subparsers.add_parser("build", help="Build all pages of a calendar.")
	add_common_arguments(build_parser)

	page_parser = subparsers.add_parser("page-build", help="Build one page of a calendar.")
	add_common_arguments(page_parser)
	page_group = page_parser.add_argument_group("Page")
	page_group.add_argument("-y", "--year", dest="year", type=int, default=None, help="Page year.")
	page_group.add_argument("-m", "--month", dest="month", type=int, default=None, help="Page month, 0 for the title page.")
	page_group.add_argument("-n", "--number", dest="number", type=int, default=None, help="Page number.")

	overview_parser = subparsers.add_parser("overview", help="Create the overview image of built pages.")
	add_common_arguments(overview_parser)
	overview_parser.add_argument("-o", "--output", dest="output_path", default=None, help="Output PNG path.")

	pdf_parser = subparsers.add_parser("pdf", help="Collect built pages into a print PDF.")
	add_common_arguments(pdf_parser)
	output_group = pdf_parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	output_group.add_argument("-M", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")

	serve_parser = subparsers.add_parser("serve", help="Serve calendar pages over HTTP.")
	add_common_arguments(serve_parser, with_identifier=False)
	server_group = serve_parser.add_argument_group("Server")
	server_group.add_argument("--host", dest="host", default=DEFAULT_HOST, help="Bind address.")
	server_group.add_argument("-p", "--port", dest="port", type=int, default=DEFAULT_PORT, help="Port.")
	server_group.add_argument(
		"--no-build-missing",
		dest="build_missing",
		action="store_false",
		help="Do not build missing page images on request.",
	)

	parser.set_defaults(verbose=False, build_missing=True)
	args = parser.parse_args(argv)
	return args


#============================================
def print_container(container) -> None:
	target = container.target
	print(f"Target: {target.path} ({target.width}x{target.height}, {target.mime_type}, {target.size_byte} bytes)")


#============================================
def run_build(args: argparse.Namespace) -> None:
	config = load_config(args)
	print(f"Calendar: {config.name} ({config.identifier})")
	print(f"Pages: {len(config.pages)}")
	start_time = time.perf_counter()
	containers = pcal.render.build_calendar(config, args.font_path, show_progress=True)
	total_time = time.perf_counter() - start_time
	print(f"Pages written: {len(containers)}")
	print(f"Timing: total={total_time:.2f}s")


#============================================
def run_page_build(args: argparse.Namespace) -> None:
	config = load_config(args)
	start_time = time.perf_counter()
	container = pcal.render.build_page(config, args.year, args.month, args.number, args.font_path)
	total_time = time.perf_counter() - start_time
	if container.source is not None:
		source_name = container.source.path or "generated"
		print(f"Source: {source_name} ({container.source.width}x{container.source.height})")
	print_container(container)
	print(f"Timing: total={total_time:.2f}s")


#============================================
def run_overview(args: argparse.Namespace) -> None:
	config = load_config(args)
	output_path = pcal.render.create_overview_image(config, args.output_path)
	print(f"Overview image written: {output_path}")


#============================================
def run_pdf(args: argparse.Namespace) -> None:
	"""
	Impose the built pages into a PDF and write its manifest.

	Args:
		args: Parsed argparse namespace.
	"""
	config = load_config(args)
	output_path = args.output_path
	if output_path is None:
		output_path = config.path / pcal.config.PDF_FILENAME
	output_path = pathlib.Path(output_path)
	print(f"Output PDF: {output_path}")

	start_time = time.perf_counter()
	result = pcal.render.export_pdf(config, output_path)
	print(f"Pages written: {result.printed_pages}")
	if result.missing_pages:
		missing = ", ".join(str(number) for number in result.missing_pages)
		print(f"Pages missing (not built): {missing}")

	manifest_path = args.manifest_path
	if manifest_path is None:
		manifest_path = f"{output_path}.json"
	pcal.render.write_manifest(pathlib.Path(manifest_path), config, result)
	total_time = time.perf_counter() - start_time
	print(f"Timing: total={total_time:.2f}s")
	print(f"Manifest written: {manifest_path}")


#============================================
def run_serve(args: argparse.Namespace) -> None:
	# flask is only needed for this command
	import photo_calendar.web

	app = pcal.web.create_app(pathlib.Path(args.data_dir), args.font_path, args.build_missing)
	print(f"Serving {args.data_dir} on http://{args.host}:{args.port}")
	app.run(host=args.host, port=args.port)


COMMANDS = {
	"build": run_build,
	"page-build": run_page_build,
	"overview": run_overview,
	"pdf": run_pdf,
	"serve": run_serve,
}


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
	COMMANDS[args.command](args)
