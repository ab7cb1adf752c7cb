"""
Command Line Interface for batch media ingestion.
"""

import argparse
import getpass
import logging
import os
from typing import List, Optional

from .catalog_client import CatalogClient
from .classifier import CLASSIFIERS, get_classifier
from .config import DEFAULT_CONFIG_PATH, IngestConfig
from .context import IngestContext
from .errors import AuthError, ConfigError
from .ingest_progress import IngestProgress
from .ipfs_client import IpfsClient
from .models import Credentials
from .pipeline import IngestPipeline
from .thumbnail_generator import THUMB_SIZE, ThumbnailGenerator


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('PIL').setLevel(logging.WARNING)
    logging.getLogger('sh').setLevel(logging.WARNING)
    
    return logging.getLogger('addmedia')


def prompt_credentials(username: Optional[str] = None) -> Credentials:
    """Ask for username (unless given) and password on the terminal."""
    try:
        if not username:
            username = input('Username: ').strip()
        password = getpass.getpass('Password: ')
    except EOFError as e:
        raise AuthError("An error occurred while reading the credentials") from e
    return Credentials(username=username, password=password)


def build_pipeline(args: argparse.Namespace, context: IngestContext, logger: logging.Logger) -> IngestPipeline:
    """Wire the clients for one run."""
    return IngestPipeline(
        context=context,
        store=IpfsClient(context, logger=logger),
        thumbnail_generator=ThumbnailGenerator(size=args.thumb_size, logger=logger),
        classifier=get_classifier(args.classifier),
        catalog=CatalogClient(context, logger=logger),
        fail_fast=not args.keep_going,
        logger=logger,
    )


def cmd_ingest(args: argparse.Namespace) -> int:
    """Execute an ingestion run."""
    logger = setup_logging(args.verbose)
    
    try:
        config = IngestConfig.from_file(args.config)
    except ConfigError as e:
        logger.error(str(e))
        return 1
    
    if not os.path.exists(args.path):
        logger.error(f"The passed path is not valid: {args.path}")
        return 1
    
    logger.info(f"Catalog: {config.primboard_host}")
    logger.info(f"IPFS node: {config.node_api_url}")
    logger.info(f"Classifier: {args.classifier}")
    if args.keep_going:
        logger.info("Keep-going mode: failing files are skipped")
    
    context = IngestContext(config=config)
    try:
        pipeline = build_pipeline(args, context, logger)
        
        progress = None
        if not args.quiet:
            progress = IngestProgress(show_files=args.show_files, logger=logger)
        
        stats = pipeline.run(
            args.path,
            credentials_provider=lambda: prompt_credentials(args.username),
            progress=progress,
        )
        
        if not args.quiet:
            print()
            print(f"Added: {stats.processed}/{stats.total_files}")
            print(f"Errors: {stats.errors}")
            print(f"Time: {stats.elapsed_seconds:.1f}s")
        
        return 0 if stats.succeeded else 1
        
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    finally:
        context.close()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='addmedia',
        description='Add media files to IPFS and register them with a PrImBoard catalog',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Every file below PATH is uploaded to IPFS together with a square JPEG
thumbnail, classified as image/video/audio and registered with the catalog.
The first failing file stops the run unless --keep-going is given.

Config file (JSON):
  {"ipfs_gateway": "...", "ipfs_node_api": "...", "primboard_host": "..."}
"""
    )
    
    parser.add_argument('path', help='Directory (or file) to add')
    parser.add_argument('config', nargs='?', default=DEFAULT_CONFIG_PATH,
                        help=f'Config file (default: {DEFAULT_CONFIG_PATH})')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    parser.add_argument('-q', '--quiet', action='store_true', help='Suppress progress output')
    parser.add_argument('--show-files', action='store_true',
                        help='Print each file as processed with result')
    parser.add_argument('--classifier', choices=sorted(CLASSIFIERS), default='auto',
                        help='How to pick the media type (default: auto)')
    parser.add_argument('--keep-going', action='store_true',
                        help='Skip failing files instead of stopping')
    parser.add_argument('-s', '--thumb-size', type=int, default=THUMB_SIZE,
                        help=f'Thumbnail side in pixels (default: {THUMB_SIZE})')
    parser.add_argument('-u', '--username', help='Catalog username (prompted when omitted)')
    
    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)
    
    if parsed_args.thumb_size <= 0:
        parser.error('--thumb-size must be positive')
    
    return cmd_ingest(parsed_args)
