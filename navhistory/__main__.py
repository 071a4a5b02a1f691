import argparse

from navhistory.boot import run_web
from navhistory.config import HistoryOptions


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(
        prog="navhistory", description="Serve a browser-driven navigation history."
    )
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--basename", default=None, help="overrides NAVHISTORY_BASENAME")
    parser.add_argument("--log-level", default="info")
    args = parser.parse_args(argv)

    options = HistoryOptions.from_env()
    if args.basename is not None:
        options = options.merged(basename=args.basename)
    run_web(host=args.host, port=args.port, options=options, log_level=args.log_level)


if __name__ == "__main__":
    main()
