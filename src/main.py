import argparse
import asyncio
import json
import sys
import logging
from dotenv import load_dotenv

from src.config import DatabaseSettings, get_log_level
from src.domain.exceptions import EntityServiceException
from src.infrastructure.acl import EntityInfoTranslator
from src.infrastructure.database import PostgresEntityRepository
from src.application.reconciler_service import EntityReconciler

logger = logging.getLogger(__name__)

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile entity backup rows against a desired state file.")
    parser.add_argument("input", help="JSON file holding a list of desired entity states")
    parser.add_argument("--apply", action="store_true", help="Write the differences (default is a dry run)")
    return parser.parse_args(argv)

def load_states(path: str):
    with open(path) as f:
        raw_states = json.load(f)
    if not isinstance(raw_states, list):
        raise ValueError(f"Expected a JSON list of desired states, got {type(raw_states).__name__}.")
    return [EntityInfoTranslator.to_domain(raw) for raw in raw_states]

async def main(argv=None):
    args = parse_args(argv)

    # Load environment variables from .env file
    load_dotenv()

    # Configure logging
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    try:
        settings = DatabaseSettings.from_env()
    except ValueError as e:
        logger.error(f"Invalid database configuration: {e}")
        sys.exit(1)

    try:
        states = load_states(args.input)
    except (OSError, ValueError, EntityServiceException) as e:
        logger.error(f"Could not read desired state file {args.input}: {e}")
        sys.exit(1)

    # Initialize the repository and reconciler
    repository = PostgresEntityRepository.from_url(settings.url)
    reconciler = EntityReconciler(repository=repository, dry_run=not args.apply)

    try:
        await reconciler.reconcile(states)
    except KeyboardInterrupt:
        logger.info("Reconciliation interrupted by user. Exiting gracefully.")
    except Exception as e:
        logger.exception(f"An unexpected error occurred: {e}")
        sys.exit(1)
    finally:
        await repository.dispose()

if __name__ == "__main__":
    asyncio.run(main())
