import argparse
import getpass
import logging
import sys

from bookagame_client import commands, config
from bookagame_client.api import ApiClient
from bookagame_client.bookings import BOOKING_FILTERS
from bookagame_client.errors import BookAGameError, get_error_message
from bookagame_client.session import AuthSession
from bookagame_client.tokens import TokenStore

# --- Logging Setup ---

logger = logging.getLogger(__name__)

# Commands that must not try to restore a stored session first.
NO_SESSION_COMMANDS = {"login", "register"}


def setup_logging(verbose: bool):
    """Configures logging to stderr with local time."""
    import time

    level = logging.DEBUG if verbose else logging.INFO
    handler = logging.StreamHandler(sys.stderr)
    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s]: %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    formatter.converter = time.localtime
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=level,
        handlers=[handler],
    )


def _add_owner_parsers(owner: argparse.ArgumentParser):
    sub = owner.add_subparsers(dest="owner_command", required=True)

    sub.add_parser("venues", help="List your venues.").set_defaults(
        func=lambda s, a: commands.owner_venues(s)
    )

    for name, help_text in (("create-venue", "Create a venue."), ("update-venue", "Update a venue.")):
        p = sub.add_parser(name, help=help_text)
        if name == "update-venue":
            p.add_argument("venue_id")
        p.add_argument("--name", required=True)
        p.add_argument("--address", required=True)
        p.add_argument("--sport", action="append", default=[], dest="sport_types", help="Repeat for each sport.")
        p.add_argument("--description", default="")
        p.add_argument("--phone", default="")
        p.add_argument("--lat", dest="latitude")
        p.add_argument("--lng", dest="longitude")
        p.add_argument("--opens", dest="opening_time", default="06:00")
        p.add_argument("--closes", dest="closing_time", default="22:00")
        p.set_defaults(
            func=lambda s, a: commands.save_venue(
                s,
                venue_id=getattr(a, "venue_id", None),
                name=a.name,
                address=a.address,
                sport_types=a.sport_types,
                description=a.description,
                phone=a.phone,
                latitude=a.latitude,
                longitude=a.longitude,
                opening_time=a.opening_time,
                closing_time=a.closing_time,
            )
        )

    p = sub.add_parser("delete-venue", help="Delete a venue.")
    p.add_argument("venue_id")
    p.set_defaults(func=lambda s, a: commands.delete_venue(s, a.venue_id))

    p = sub.add_parser("courts", help="List the courts of a venue.")
    p.add_argument("venue_id")
    p.set_defaults(func=lambda s, a: commands.owner_courts(s, a.venue_id))

    p = sub.add_parser("add-court", help="Add a court to a venue, or update one with --id.")
    p.add_argument("venue_id")
    p.add_argument("--name", required=True)
    p.add_argument("--sport", required=True, dest="sport_type", help=f"One of: {', '.join(config.SPORT_TYPES)}")
    p.add_argument("--price", required=True, dest="base_price", help="Hourly rate.")
    p.add_argument("--id", dest="court_id", help="Court to update.")
    p.set_defaults(
        func=lambda s, a: commands.save_court(s, a.venue_id, a.name, a.sport_type, a.base_price, a.court_id)
    )

    p = sub.add_parser("bookings", help="List bookings at your venues.")
    p.add_argument("--date", help="YYYY-MM-DD")
    p.add_argument("--court", dest="court_id")
    p.set_defaults(func=lambda s, a: commands.owner_bookings(s, a.date, a.court_id))

    p = sub.add_parser("walk-in", help="Book a court for a walk-in guest.")
    p.add_argument("court_id")
    p.add_argument("--date", default=None, help="YYYY-MM-DD. Defaults to today.")
    p.add_argument("--slot", action="append", default=[], dest="slots", help="Slot start HH:MM; repeat to extend.")
    p.add_argument("--guest-name", required=True)
    p.add_argument("--guest-phone", required=True)
    p.set_defaults(
        func=lambda s, a: commands.walk_in(
            s, a.court_id, a.date or commands.today(), a.slots, a.guest_name, a.guest_phone
        )
    )

    p = sub.add_parser("block", help="Block a time range on a court.")
    p.add_argument("court_id")
    p.add_argument("--date", default=None, help="YYYY-MM-DD. Defaults to today.")
    p.add_argument("--start", required=True, help="HH:MM")
    p.add_argument("--end", required=True, help="HH:MM")
    p.add_argument("--reason")
    p.set_defaults(
        func=lambda s, a: commands.block_slot(s, a.court_id, a.date or commands.today(), a.start, a.end, a.reason)
    )

    p = sub.add_parser("blocked", help="List blocked slots of a court.")
    p.add_argument("court_id")
    p.set_defaults(func=lambda s, a: commands.list_blocked(s, a.court_id))

    p = sub.add_parser("unblock", help="Remove a blocked slot.")
    p.add_argument("slot_id")
    p.set_defaults(func=lambda s, a: commands.unblock_slot(s, a.slot_id))

    sub.add_parser("earnings", help="Show the earnings summary.").set_defaults(
        func=lambda s, a: commands.earnings(s)
    )
    sub.add_parser("dashboard", help="Show dashboard stats.").set_defaults(
        func=lambda s, a: commands.dashboard(s)
    )

    p = sub.add_parser("schedule", help="Show one day's bookings and blocked slots.")
    p.add_argument("--date", help="YYYY-MM-DD. Defaults to today.")
    p.add_argument("--venue", dest="venue_id")
    p.set_defaults(func=lambda s, a: commands.schedule(s, a.date, a.venue_id))

    p = sub.add_parser("week", help="Count bookings per day around today.")
    p.add_argument("--venue", dest="venue_id")
    p.set_defaults(func=lambda s, a: commands.week(s, a.venue_id))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bookagame", description="Book courts from the command line.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging.")
    parser.add_argument("--api-url", default=config.API_URL, help=f"API base URL. Defaults to {config.API_URL}.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login", help="Sign in.")
    p.add_argument("email")
    p.add_argument("password", nargs="?", help="Prompted for when omitted.")
    p.set_defaults(func=lambda s, a: commands.login(s, a.email, a.password or getpass.getpass()))

    sub.add_parser("logout", help="Sign out.").set_defaults(func=lambda s, a: commands.logout(s))

    p = sub.add_parser("register", help="Create an account.")
    p.add_argument("--name", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--password", required=True)
    p.add_argument("--confirm-password", required=True)
    p.add_argument("--phone")
    p.add_argument("--owner", action="store_true", help="Register as a venue owner.")
    p.set_defaults(
        func=lambda s, a: commands.register(
            s, a.name, a.email, a.password, a.confirm_password, a.phone, "owner" if a.owner else "user"
        )
    )

    sub.add_parser("me", help="Show your profile.").set_defaults(func=lambda s, a: commands.show_profile(s))

    p = sub.add_parser("profile", help="Update your profile.")
    p.add_argument("--name")
    p.add_argument("--phone")
    p.set_defaults(func=lambda s, a: commands.update_profile(s, a.name, a.phone))

    p = sub.add_parser("venues", help="Browse venues.")
    p.add_argument("--sport", dest="sport_type")
    p.add_argument("--lat", type=float)
    p.add_argument("--lng", type=float)
    p.add_argument("--radius", type=float)
    p.add_argument("--limit", type=int)
    p.add_argument("--offset", type=int)
    p.set_defaults(
        func=lambda s, a: commands.list_venues(s, a.sport_type, a.lat, a.lng, a.radius, a.limit, a.offset)
    )

    p = sub.add_parser("venue", help="Show one venue and its courts.")
    p.add_argument("venue_id")
    p.set_defaults(func=lambda s, a: commands.show_venue(s, a.venue_id))

    p = sub.add_parser("availability", help="Show a venue's availability summary.")
    p.add_argument("venue_id")
    p.set_defaults(func=lambda s, a: commands.venue_availability(s, a.venue_id))

    sub.add_parser("sports", help="List sport types.").set_defaults(func=lambda s, a: commands.list_sports(s))

    p = sub.add_parser("reviews", help="Show a venue's reviews.")
    p.add_argument("venue_id")
    p.add_argument("--limit", type=int)
    p.add_argument("--offset", type=int)
    p.set_defaults(func=lambda s, a: commands.venue_reviews(s, a.venue_id, a.limit, a.offset))

    p = sub.add_parser("slots", help="Show a court's slots for a date.")
    p.add_argument("court_id")
    p.add_argument("--date", help="YYYY-MM-DD. Defaults to today.")
    p.add_argument("--slot", action="append", default=[], dest="slots", help="Preview a selection; repeatable.")
    p.set_defaults(func=lambda s, a: commands.show_slots(s, a.court_id, a.date, a.slots))

    p = sub.add_parser("book", help="Book consecutive slots on a court.")
    p.add_argument("court_id")
    p.add_argument("--date", default=None, help="YYYY-MM-DD. Defaults to today.")
    p.add_argument(
        "--slot",
        action="append",
        default=[],
        dest="slots",
        required=True,
        help=f"Slot start HH:MM; repeat for up to {config.MAX_SLOTS} consecutive hours.",
    )
    p.set_defaults(func=lambda s, a: commands.book(s, a.court_id, a.date or commands.today(), a.slots))

    p = sub.add_parser("bookings", help="List your bookings.")
    p.add_argument("--filter", choices=BOOKING_FILTERS, default="upcoming", dest="which")
    p.set_defaults(func=lambda s, a: commands.list_bookings(s, a.which))

    p = sub.add_parser("cancel", help="Cancel an upcoming booking.")
    p.add_argument("booking_id")
    p.add_argument("--reason")
    p.set_defaults(func=lambda s, a: commands.cancel_booking(s, a.booking_id, a.reason))

    p = sub.add_parser("review", help="Review a completed booking.")
    p.add_argument("booking_id")
    p.add_argument("--rating", type=int, default=5, help="1-5. Defaults to 5.")
    p.add_argument("--comment")
    p.set_defaults(func=lambda s, a: commands.review_booking(s, a.booking_id, a.rating, a.comment))

    sub.add_parser("my-reviews", help="List reviews you wrote.").set_defaults(
        func=lambda s, a: commands.my_reviews(s)
    )

    sub.add_parser("favorites", help="List favorite venues.").set_defaults(
        func=lambda s, a: commands.list_favorites(s)
    )

    p = sub.add_parser("favorite", help="Add a venue to favorites.")
    p.add_argument("venue_id")
    p.set_defaults(func=lambda s, a: commands.add_favorite(s, a.venue_id))

    p = sub.add_parser("unfavorite", help="Remove a venue from favorites.")
    p.add_argument("venue_id")
    p.set_defaults(func=lambda s, a: commands.remove_favorite(s, a.venue_id))

    _add_owner_parsers(sub.add_parser("owner", help="Venue owner commands."))
    return parser


def parse_arguments(argv=None):
    """Parses command line arguments."""
    return build_parser().parse_args(argv)


def build_session(api_url: str) -> AuthSession:
    return AuthSession(ApiClient(base_url=api_url, tokens=TokenStore()))


def main(argv=None):
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    session = build_session(args.api_url)
    if args.command not in NO_SESSION_COMMANDS:
        session.initialize()

    try:
        args.func(session, args)
    except BookAGameError as e:
        logger.debug(f"Command {args.command} failed", exc_info=True)
        print(f"Error: {get_error_message(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
