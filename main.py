"""
ZipDB — Postal Code Record Store
================================
Entry point for the command line.

Usage:
    python main.py [options]

Options:
    --help              Show help
    -z<zip>, --zip ZIP  Look up one zip code through the index and exit
    --header            Show the store file header and exit
    --dump              Print every stored record and exit
    --data-dir DIR      Directory holding the CSV, store and index files
    --csv FILE          Input CSV file name
    --verbose           Debug logging

Default:
    Full rebuild: load CSV, write boundary report, store file and index
"""

import logging
import os
import sys


def print_help():
    print("""
ZipDB — Postal Code Record Store

Usage:
    python main.py                      Rebuild report, store and index from CSV
    python main.py -z<zip>              Look up a zip code via the index
    python main.py --zip ZIP            Same as -z<zip>
    python main.py --header             Show store header info
    python main.py --dump               Print all stored records

Options:
    --help            Show this help
    --data-dir DIR    Directory for all files (default: current directory)
    --csv FILE        Input CSV (default: us_postal_codes_ROWS_RANDOMIZED.csv)
    --verbose         Debug logging
""")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv=None) -> int:
    """Parse CLI arguments and dispatch. Returns the exit status."""
    from cli.commands import dump_store, run_pipeline, search_zip, show_header
    from cli.config import ZipDBConfig
    from cli.renderer import Renderer
    from storage.errors import ZipDBError

    args = sys.argv[1:] if argv is None else list(argv)

    if "--help" in args or "-h" in args:
        print_help()
        return 0

    data_dir = None
    csv_file = None
    zip_code = None
    command = "pipeline"
    verbose = False

    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--zip" and i + 1 < len(args):
            zip_code = args[i + 1]
            command = "search"
            i += 2
        elif arg.startswith("-z") and len(arg) > 2:
            zip_code = arg[2:]
            command = "search"
            i += 1
        elif arg == "--data-dir" and i + 1 < len(args):
            data_dir = args[i + 1]
            i += 2
        elif arg == "--csv" and i + 1 < len(args):
            csv_file = args[i + 1]
            i += 2
        elif arg == "--header":
            command = "header"
            i += 1
        elif arg == "--dump":
            command = "dump"
            i += 1
        elif arg == "--verbose":
            verbose = True
            i += 1
        else:
            print(f"Unknown option: {arg}", file=sys.stderr)
            print_help()
            return 1

    configure_logging(verbose)

    config = ZipDBConfig(data_dir=os.path.abspath(data_dir or os.getcwd()))
    if csv_file:
        config.csv_file = csv_file

    renderer = Renderer()
    try:
        if command == "search":
            search_zip(config, renderer, zip_code)
        elif command == "header":
            show_header(config, renderer)
        elif command == "dump":
            dump_store(config, renderer)
        else:
            run_pipeline(config, renderer)
    except (ZipDBError, OSError, ValueError) as e:
        renderer.render_error(e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
