"""
storeadmin - Store administration client

CLI entry point for review moderation and checkout calls.
"""

import argparse
import logging
import sys

from storeadmin.errors import StoreAdminError
from storeadmin.models.checkout import ProductType
from storeadmin.models.filter_state import DateBucket, SortOrder
from storeadmin.models.review import format_date
from storeadmin.moderation import LoadState, ReviewModerationController
from storeadmin.services.auth import StaticTokenAuth
from storeadmin.services.checkout_service import CheckoutService
from storeadmin.services.http_client import ApiClient
from storeadmin.services.reviews_service import ReviewsService
from storeadmin.utils.export import export_reviews_csv
import config.settings as settings

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def positive_int(value: str) -> int:
    """argparse type for 1-based page numbers."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="storeadmin - review moderation and checkout client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Newest 2023 reviews mentioning "alice"
  python main.py reviews list --query alice --bucket 2023

  # Delete review 42
  python main.py reviews delete 42

  # Start a checkout for game 7 and poll it
  python main.py checkout start juego 7
  python main.py checkout status <session-id>

Note: Set STOREADMIN_TOKEN (or pass --token) before running authenticated calls.
        """
    )
    parser.add_argument("--api-url", default=settings.API_BASE_URL,
                        help=f"API base URL (default: {settings.API_BASE_URL})")
    parser.add_argument("--token", default=settings.API_TOKEN,
                        help="Bearer token (default: $STOREADMIN_TOKEN)")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help=f"Logging level (default: {settings.LOG_LEVEL})")

    commands = parser.add_subparsers(dest="command", required=True)

    # Reviews
    reviews = commands.add_parser("reviews", help="Moderate reviews")
    review_commands = reviews.add_subparsers(dest="action", required=True)

    def add_filter_args(sub):
        sub.add_argument("--query", default="", help="Case-insensitive text search")
        sub.add_argument("--bucket", default=DateBucket.ALL.value,
                         choices=[b.value for b in DateBucket], help="Date filter")
        sub.add_argument("--sort", default=SortOrder.DESC.value,
                         choices=[s.value for s in SortOrder], help="Order by date")

    list_cmd = review_commands.add_parser("list", help="Show one page of reviews")
    add_filter_args(list_cmd)
    list_cmd.add_argument("--page-size", type=int, default=settings.DEFAULT_PAGE_SIZE,
                          choices=settings.PAGE_SIZE_OPTIONS)
    list_cmd.add_argument("--page", type=positive_int, default=1)

    delete_cmd = review_commands.add_parser("delete", help="Delete a review by id")
    delete_cmd.add_argument("review_id", type=int)

    export_cmd = review_commands.add_parser("export", help="Export filtered reviews to CSV")
    add_filter_args(export_cmd)
    export_cmd.add_argument("--output-dir", default=str(settings.OUTPUT_ROOT))

    # Checkout
    checkout = commands.add_parser("checkout", help="Checkout calls")
    checkout_commands = checkout.add_subparsers(dest="action", required=True)

    for name, help_text in (("start", "Start a checkout session"),
                            ("mp-start", "Create a Mercado Pago preference")):
        sub = checkout_commands.add_parser(name, help=help_text)
        sub.add_argument("product_type", choices=[p.value for p in ProductType])
        sub.add_argument("product_id", type=int)

    for name, arg, help_text in (("simulate", "session_id", "Simulate a successful payment"),
                                 ("status", "session_id", "Poll a checkout session"),
                                 ("mp-confirm", "payment_id", "Confirm a Mercado Pago payment"),
                                 ("mp-result", "payment_id", "Look up a Mercado Pago payment")):
        sub = checkout_commands.add_parser(name, help=help_text)
        sub.add_argument(arg)

    sale_cmd = checkout_commands.add_parser("sale", help="Fetch a sale by id")
    sale_cmd.add_argument("sale_id", type=int)

    return parser


def print_view(controller: ReviewModerationController) -> None:
    view = controller.view()
    print(f"Showing {len(view.items)} of {view.filtered_count} reviews "
          f"({view.total_count} total) - page {view.page}/{view.total_pages}")
    print("-" * 60)
    for review in view.items:
        print(f"#{review.id} [{review.rating}/5 {review.rating_tier}] "
              f"{format_date(review.created_at)} {review.product_name}")
        name = f" ({review.user.name})" if review.user.name else ""
        print(f"    @{review.user.username}{name}: {review.comment}")


def run_reviews(args, auth: StaticTokenAuth, client: ApiClient) -> int:
    controller = ReviewModerationController(auth=auth, reviews_service=ReviewsService(client))

    if controller.load() is not LoadState.READY:
        print(f"❌ {controller.error}")
        return 1

    if args.action == "delete":
        controller.request_delete(args.review_id)
        if not controller.confirm_delete():
            print(f"❌ {controller.delete_error or controller.error}")
            return 1
        print(f"✅ {controller.success_notice}")
        return 0

    controller.search(args.query)
    controller.set_date_bucket(DateBucket(args.bucket))
    if SortOrder(args.sort) is not controller.filter_state.sort_order:
        controller.toggle_sort()

    if args.action == "export":
        reviews = controller.processor.filter_and_sort(controller.reviews, controller.filter_state)
        path = export_reviews_csv(
            reviews, controller.filter_state, len(controller.reviews), args.output_dir
        )
        print(f"✅ Exported {len(reviews)} reviews to {path}")
        return 0

    controller.set_page_size(args.page_size)
    controller.go_to_page(args.page)
    print_view(controller)
    return 0


def run_checkout(args, auth: StaticTokenAuth, client: ApiClient) -> int:
    service = CheckoutService(client, auth)

    if args.action == "start":
        result = service.start_checkout(ProductType(args.product_type), args.product_id)
    elif args.action == "mp-start":
        result = service.mp_start_preference(ProductType(args.product_type), args.product_id)
    elif args.action == "simulate":
        result = service.simulate_success(args.session_id)
    elif args.action == "status":
        result = service.get_status(args.session_id)
    elif args.action == "mp-confirm":
        result = service.mp_confirm(args.payment_id)
    elif args.action == "mp-result":
        result = service.mp_result(args.payment_id)
    else:
        result = service.get_sale(args.sale_id)

    print(result)
    return 0


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level)

    auth = StaticTokenAuth(args.token)
    client = ApiClient(base_url=args.api_url)

    try:
        if args.command == "reviews":
            code = run_reviews(args, auth, client)
        else:
            code = run_checkout(args, auth, client)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        code = 1
    except StoreAdminError as e:
        logger.error(f"Command failed: {e}", exc_info=True)
        print(f"\n❌ {e}")
        code = 1
    except Exception as e:
        logger.error(f"Unexpected failure: {e}", exc_info=True)
        print(f"\n❌ Unexpected failure: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        code = 1

    sys.exit(code)


if __name__ == "__main__":
    main()
