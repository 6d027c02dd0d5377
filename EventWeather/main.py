"""Command-line weather suitability check for an outdoor event."""
import argparse
import logging
import os
import sys
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from event import Event, parse_date
from event_requirements import EventType
from event_planner import LOOKUP_FAILURES, WeatherStatus, analyze_event, find_alternatives
from openweather_provider import OpenWeatherProvider
from report import format_alternatives, format_analysis, format_forecast, format_status
from suitability import Rating
from weather_cache import WeatherCache, DEFAULT_TTL_SECONDS, DEFAULT_SWEEP_INTERVAL_SECONDS
from weather_service import WeatherService


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("Outdoor event weather suitability")
    parser.add_argument("--name", default="Outdoor event")
    parser.add_argument("--location", required=True, help='City query, e.g. "London,GB"')
    parser.add_argument("--date", required=True, type=parse_date, help="Event date (YYYY-MM-DD)")
    parser.add_argument("--event-type", default=EventType.GENERAL.value,
                        help=f"One of: {', '.join(t.value for t in EventType)}")
    parser.add_argument("--alternatives", type=int, default=0, metavar="DAYS",
                        help="Also rank the DAYS following the event date")
    parser.add_argument("--forecast", type=int, default=0, metavar="DAYS",
                        help="Also print the daily forecast for the next DAYS days (1-5)")
    parser.add_argument("--max-workers", type=int, default=4)
    parser.add_argument("--units", choices=["metric", "imperial", "standard"], default="metric")
    parser.add_argument("--cache-ttl", type=int, default=DEFAULT_TTL_SECONDS)
    parser.add_argument("--sweep-interval", type=int, default=DEFAULT_SWEEP_INTERVAL_SECONDS)
    parser.add_argument("--timeout", type=int, default=10, help="HTTP timeout in seconds")
    parser.add_argument("--cache-stats", action="store_true", help="Print cache statistics at the end")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers
    )


def load_config() -> Tuple[str, str, str]:
    load_dotenv()
    api_key = os.getenv("WEATHER_API_KEY")
    lang = os.getenv("WEATHER_LANG", "en")
    tz_name = os.getenv("EVENT_WEATHER_TZ", "UTC")

    if not api_key:
        raise SystemExit("Missing WEATHER_API_KEY in environment")

    try:
        ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise SystemExit(f"Invalid EVENT_WEATHER_TZ: {exc}") from exc

    logging.info("Configuration loaded: lang=%s tz=%s", lang, tz_name)
    return api_key, lang, tz_name


def build_weather_service(api_key: str, lang: str, tz_name: str, args: argparse.Namespace) -> WeatherService:
    provider = OpenWeatherProvider(
        api_key=api_key,
        units=args.units,
        lang=lang,
        timeout=args.timeout,
    )
    cache = WeatherCache(ttl_seconds=args.cache_ttl, sweep_interval_seconds=args.sweep_interval)
    cache.start_sweeper()
    service = WeatherService(provider=provider, cache=cache, tz_name=tz_name)
    logging.info("Weather service ready (cache ttl=%ss)", args.cache_ttl)
    return service


def run(event: Event, service: WeatherService, args: argparse.Namespace) -> int:
    exit_code = 0
    try:
        analysis = analyze_event(event, service)
        print("\n".join(format_analysis(analysis)))
    except LOOKUP_FAILURES as err:
        logging.error("Weather analysis failed for %s on %s: %s", event.location, event.date, err)
        print(format_status(WeatherStatus(rating=Rating.UNKNOWN, error="Weather data unavailable")))
        exit_code = 1

    if args.forecast:
        try:
            forecast = service.get_forecast(event.location, args.forecast)
            print("\n".join(format_forecast(forecast)))
        except LOOKUP_FAILURES as err:
            logging.error("Forecast lookup failed for %s: %s", event.location, err)
            print(f"Forecast unavailable: {err}")
            exit_code = 1

    if args.alternatives > 0:
        alternatives = find_alternatives(event, service, args.alternatives, max_workers=args.max_workers)
        print("\n".join(format_alternatives(alternatives)))

    if args.cache_stats:
        stats = service.cache_stats()
        print(f"Cache: {stats['keys']} keys, {stats['hits']} hits, {stats['misses']} misses")
    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    api_key, lang, tz_name = load_config()
    service = build_weather_service(api_key, lang, tz_name, args)

    event = Event(name=args.name, location=args.location, date=args.date, event_type=args.event_type)
    try:
        return run(event, service, args)
    finally:
        service.cache.stop()


if __name__ == "__main__":
    sys.exit(main())
