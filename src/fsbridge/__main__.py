import sys
import argparse

from fsbridge.config.config import load_config, normalize_base_path
from fsbridge.gateway.server import start_server


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="fsbridge: filesystem syscall forwarding over HTTP")
    parser.add_argument("--host", type=str, help="Interface to bind")
    parser.add_argument("--port", type=int, help="Port to listen on")
    parser.add_argument("--base-path", type=str, help="URL prefix for operation endpoints (default /fs)")
    parser.add_argument("--log-level", type=str, help="DEBUG, INFO, WARNING or ERROR")
    return parser.parse_args(argv)


def build_config(args):
    config = load_config()
    overrides = {}
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.base_path is not None:
        overrides["base_path"] = normalize_base_path(args.base_path)
    if args.log_level is not None:
        overrides["log_level"] = args.log_level.upper()
    return config.model_copy(update=overrides)


def main():
    try:
        start_server(build_config(parse_args()))
    except KeyboardInterrupt:
        sys.stderr.write("\n")
        sys.exit(1)
    except Exception as e:
        sys.stderr.write(f"Fatal: {e}\n")
        sys.exit(1)

if __name__ == "__main__":
    main()
