"""Geo Query Module Entry Point

Command-line interface for planning and running rectangle or radius queries
against the configured DynamoDB geo index. The coarse geohash covering is
supplied with ``--ranges`` (computed by an external covering service).
"""

import argparse
import json
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from pydantic import ValidationError

from dynamo_geo.config import ConfigLoader
from dynamo_geo.connection import DynamoDBConnector
from dynamo_geo.exceptions import GeoQueryBaseException, InvalidRangeError
from dynamo_geo.utils import get_logger, setup_logging

from .coverage import FixedRangeCoverer
from .execution import DynamoDBQueryExecutor, ParallelQueryExecutor
from .filters import GeoPoint, GeoRectangle
from .models import GeoConfig, GeohashRange, QueryFlavor, QueryTemplate
from .processor import GeoQueryService

logger = get_logger(__name__)


def parse_ranges(value: str) -> List[GeohashRange]:
    """Parse ``"min:max,min:max"`` into geohash ranges."""
    ranges = []
    for chunk in value.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        try:
            low, high = chunk.split(":")
            ranges.append(GeohashRange(min=int(low), max=int(high)))
        except (ValueError, InvalidRangeError):
            raise argparse.ArgumentTypeError(f"Invalid geohash range '{chunk}', expected min:max")
    return ranges


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="DynamoDB Geo Query - fan a rectangle or radius query out over geohash partitions"
    )
    parser.add_argument(
        "--environment",
        choices=["development", "production"],
        default="development",
        help="Environment to run against (default: development)"
    )
    parser.add_argument("--config-dir", default=None, help="Directory holding environment_config.json")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the generated partition queries without running them"
    )
    parser.add_argument("--ranges", type=parse_ranges, required=True,
                        help="Coarse geohash covering as min:max pairs separated by commas")
    parser.add_argument("--discriminator", default=None, help="Composite hash key discriminator")
    parser.add_argument("--projection", default=None, help="ProjectionExpression for returned items")
    parser.add_argument("--flavor", choices=[flavor.value for flavor in QueryFlavor],
                        default=QueryFlavor.REQUEST.value,
                        help="request: query the configured geo index; spec: query the index given by --index")
    parser.add_argument("--index", default=None, help="Index name for the spec flavor")

    shape = parser.add_mutually_exclusive_group(required=True)
    shape.add_argument("--bbox", nargs=4, type=float,
                       metavar=("MIN_LAT", "MIN_LNG", "MAX_LAT", "MAX_LNG"))
    shape.add_argument("--center", nargs=2, type=float, metavar=("LAT", "LNG"))
    parser.add_argument("--radius", type=float, help="Radius in meters (with --center)")
    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point for the geo query module.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    parsed_args = parser.parse_args(args)
    if parsed_args.center and parsed_args.radius is None:
        parser.error("--radius is required with --center")
    if parsed_args.flavor == QueryFlavor.SPEC.value and not parsed_args.index:
        parser.error("--index is required with --flavor spec")

    config_loader = ConfigLoader(parsed_args.config_dir)
    try:
        env_config = config_loader.load_environment_config(parsed_args.environment)
        logging_settings = env_config.get("logging", {})
        setup_logging(parsed_args.environment, logging_settings.get("level", "INFO"),
                      logging_settings.get("log_dir"))

        geo_config = GeoConfig.from_settings(config_loader.get_geo_settings(parsed_args.environment))
        service = GeoQueryService(geo_config, FixedRangeCoverer(parsed_args.ranges),
                                  flavor=QueryFlavor(parsed_args.flavor))
        template = QueryTemplate(
            table_name=config_loader.get_dynamodb_settings(parsed_args.environment)["table_name"],
            index_name=parsed_args.index,
            projection_expression=parsed_args.projection,
        )

        if parsed_args.bbox:
            min_lat, min_lng, max_lat, max_lng = parsed_args.bbox
            rectangle = GeoRectangle(min_latitude=min_lat, min_longitude=min_lng,
                                     max_latitude=max_lat, max_longitude=max_lng)
            plan = service.rectangle_query(template, rectangle, parsed_args.discriminator)
        else:
            center = GeoPoint(latitude=parsed_args.center[0], longitude=parsed_args.center[1])
            plan = service.radius_query(template, center, parsed_args.radius, parsed_args.discriminator)

        if parsed_args.dry_run:
            print(json.dumps([query.describe() for query in plan.queries], indent=2, default=str))
            return 0

        config_loader.validate_environment_variables(parsed_args.environment)
        processing = config_loader.get_processing_settings(parsed_args.environment)
        connector = DynamoDBConnector(config_loader, parsed_args.environment)
        table = connector.connect()
        try:
            with ThreadPoolExecutor(max_workers=processing.get("max_workers", 8),
                                    thread_name_prefix="geo-query") as pool:
                executor = ParallelQueryExecutor(DynamoDBQueryExecutor(table), pool)
                items = executor.execute(plan)
        finally:
            connector.disconnect()

        print(json.dumps(items, indent=2, default=str))
        return 0

    except GeoQueryBaseException as e:
        logger.error(f"Geo query failed: {e}")
        return 1

    except ValidationError as e:
        logger.error(f"Invalid geo query input: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
