"""
Main entry point for the registrar.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import RegistrarConfig, load_config, configure_logging
from .core.exceptions import ConfigurationError
from .persistence import CsvRowStore
from .services import Registrar


logger = logging.getLogger(__name__)


def build_registrar(config: RegistrarConfig) -> Registrar:
    """Create a Registrar over the configured data directory."""
    store = CsvRowStore(config.data_dir)
    return Registrar(store, config)


def serve(registrar: Registrar, host: str, port: int) -> None:
    """Run the REST API with uvicorn until interrupted."""
    import uvicorn
    from .api import RegistrarRestAPI

    api = RegistrarRestAPI(registrar)
    logger.info("Starting REST server on %s:%d", host, port)
    uvicorn.run(api.app, host=host, port=port, log_level="info")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Campus course registration")
    parser.add_argument("--config", type=str, help="Configuration file path (JSON)")
    parser.add_argument("--data-dir", type=str, help="Directory holding the CSV files")
    parser.add_argument("--serve", action="store_true", help="Run the REST API instead of the menu")
    parser.add_argument("--host", type=str, help="REST server host")
    parser.add_argument("--port", type=int, help="REST server port")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = load_config(
            args.config,
            data_dir=args.data_dir,
            rest_host=args.host,
            rest_port=args.port
        )
        configure_logging(config.log_level, config.log_file)
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 2

    registrar = build_registrar(config)

    if args.serve:
        serve(registrar, config.rest_host, config.rest_port)
    else:
        from .cli import RegistrarConsole
        RegistrarConsole(registrar).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
