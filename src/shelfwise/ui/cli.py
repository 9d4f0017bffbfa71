# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from dotenv import load_dotenv

from shelfwise.app import (
    browse_catalog,
    check_store,
    contribute_availability,
    contribute_product,
    contribute_review,
    contribute_store,
    create_contributor,
    get_moderation_summary,
    moderate,
    set_contributor_trust,
    set_product_archived,
    show_product,
    store_availability_counts,
    suggest_edit,
)
from shelfwise.config import configure_logging
from shelfwise.domain.catalog import SortKey
from shelfwise.domain.edits import EditTargetRef
from shelfwise.domain.errors import ConflictError, DomainError
from shelfwise.domain.model import EntityKind, Role
from shelfwise.domain.ports import CatalogFilter
from shelfwise.ui.schema import PayloadModel, ProductDraftPayload, StoreCandidatePayload

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

log = logging.getLogger(__name__)

_EDIT_TARGETS: dict[str, Callable[[str], EditTargetRef]] = {
    "city": EditTargetRef.city,
    "brand": EditTargetRef.brand,
    "store": EditTargetRef.store,
    "product": EditTargetRef.product,
}


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:  # noqa: PLR0915
    parser = argparse.ArgumentParser(description="Moderate the Shelfwise product directory")
    parser.add_argument(
        "--as-user",
        type=_parse_uuid,
        help="Contributor id acting for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    user = subparsers.add_parser("user", help="Contributor management commands")
    user_sub = user.add_subparsers(dest="subcommand", required=True)
    user_create = user_sub.add_parser("create", help="Create a contributor")
    user_create.add_argument("--display-name", type=str, required=True)
    user_create.add_argument("--email", type=str, help="Optional email address")
    user_create.add_argument(
        "--role",
        type=Role,
        choices=list(Role),
        default=Role.USER,
        help="Role granted to the contributor (default: %(default)s)",
    )
    user_trust = user_sub.add_parser("trust", help="Set or clear the trusted-contributor flag")
    user_trust.add_argument("contributor_id", type=_parse_uuid)
    user_trust.add_argument("--revoke", action="store_true", help="Clear the flag instead")

    edit = subparsers.add_parser("edit", help="Suggest (or apply) a content edit")
    edit.add_argument("target", choices=sorted(_EDIT_TARGETS))
    edit.add_argument("key", help="City slug, brand name, store id or product id")
    edit.add_argument("field", help="Field to change")
    edit.add_argument("value", nargs="?", default=None, help="New value; omit with --clear")
    edit.add_argument("--clear", action="store_true", help="Clear an optional field")
    edit.add_argument("--reason", type=str, help="Why the change is needed")

    product = subparsers.add_parser("product", help="Catalog product commands")
    product_sub = product.add_subparsers(dest="subcommand", required=True)
    product_show = product_sub.add_parser("show", help="Show the authoritative product record")
    product_show.add_argument("product_id", type=_parse_uuid)
    product_submit = product_sub.add_parser("submit", help="Contribute a new product")
    product_submit.add_argument("payload", help="Product JSON object")
    for name, help_text in (("archive", "Archive a product"), ("unarchive", "Restore a product")):
        archive = product_sub.add_parser(name, help=help_text)
        archive.add_argument("product_id", type=_parse_uuid)

    catalog = subparsers.add_parser("catalog", help="Catalog listing commands")
    catalog_sub = catalog.add_subparsers(dest="subcommand", required=True)
    catalog_list = catalog_sub.add_parser("list", help="List the merged catalog")
    catalog_list.add_argument("--query", type=str)
    catalog_list.add_argument("--brand", type=str)
    catalog_list.add_argument("--category", type=str)
    catalog_list.add_argument("--tag", type=str)
    catalog_list.add_argument("--page", type=int, default=1)
    catalog_list.add_argument(
        "--page-size",
        type=int,
        default=None,
        help="Items per page (defaults to config)",
    )
    catalog_list.add_argument("--sort", type=SortKey, choices=list(SortKey), default=SortKey.NAME)

    store = subparsers.add_parser("store", help="Store commands")
    store_sub = store.add_subparsers(dest="subcommand", required=True)
    store_check = store_sub.add_parser("check", help="Look for duplicates of a store")
    store_check.add_argument("payload", help="Store JSON object")
    store_submit = store_sub.add_parser("submit", help="Contribute a new store")
    store_submit.add_argument("payload", help="Store JSON object")
    store_submit.add_argument(
        "--allow-similar",
        action="store_true",
        help="Create the store even if similar stores exist",
    )

    availability = subparsers.add_parser("availability", help="Availability commands")
    availability_sub = availability.add_subparsers(dest="subcommand", required=True)
    availability_report = availability_sub.add_parser(
        "report", help="Report a product as stocked at a store"
    )
    availability_report.add_argument("product_id", type=_parse_uuid)
    availability_report.add_argument("store_id", type=_parse_uuid)
    availability_report.add_argument("--price-range", type=str)
    availability_counts = availability_sub.add_parser(
        "counts", help="Count availability records per store and status"
    )
    availability_counts.add_argument("store_ids", type=_parse_uuid, nargs="+")

    review = subparsers.add_parser("review", help="Review a product")
    review.add_argument("product_id", type=_parse_uuid)
    review.add_argument("--rating", type=int, required=True)
    review.add_argument("--comment", type=str, required=True)
    review.add_argument("--title", type=str)

    moderation = subparsers.add_parser("moderation", help="Administrator moderation commands")
    moderation_sub = moderation.add_subparsers(dest="subcommand", required=True)
    moderation_sub.add_parser("summary", help="Show review-queue sizes")
    for decision in ("approve", "reject", "reviewed"):
        action = moderation_sub.add_parser(decision, help=f"{decision.capitalize()} an item")
        action.add_argument("kind", type=EntityKind, choices=list(EntityKind))
        action.add_argument("entity_id", type=_parse_uuid)

    return parser.parse_args(list(argv))


def _load_payload(args: argparse.Namespace) -> PayloadModel | None:
    """Validate JSON payload arguments up front so bad input exits with code 2."""

    raw = getattr(args, "payload", None)
    if raw is None:
        return None
    if args.command == "store":
        return StoreCandidatePayload.model_validate_json(raw)
    return ProductDraftPayload.model_validate_json(raw)


def _edit_value(args: argparse.Namespace) -> str | None:
    if args.clear:
        if args.value is not None:
            raise ValueError("Pass either a value or --clear, not both")
        return None
    if args.value is None:
        raise ValueError("Missing value (use --clear to clear a field)")
    return args.value


def _run_user(args: argparse.Namespace) -> Any:
    if args.subcommand == "create":
        contributor = create_contributor(
            display_name=args.display_name, email=args.email, role=args.role
        )
        return {
            "id": contributor.id,
            "display_name": contributor.display_name,
            "role": contributor.role,
        }
    set_contributor_trust(args.contributor_id, trusted=not args.revoke, user_id=args.as_user)
    return {"id": args.contributor_id, "trusted_contributor": not args.revoke}


def _run_edit(args: argparse.Namespace) -> Any:
    target = _EDIT_TARGETS[args.target](args.key)
    result = suggest_edit(
        target, args.field, _edit_value(args), user_id=args.as_user, reason=args.reason
    )
    return asdict(result)


def _run_product(args: argparse.Namespace, payload: PayloadModel | None) -> Any:
    if args.subcommand == "show":
        view = show_product(args.product_id, user_id=args.as_user)
        return {
            "logical_id": view.entry.logical_id,
            "source": view.entry.source,
            "product": asdict(view.entry.product),
            "rating": asdict(view.rating),
            "availability": [asdict(record) for record in view.availability],
        }
    if args.subcommand == "submit":
        if not isinstance(payload, ProductDraftPayload):
            raise TypeError("Product submission requires a product payload")
        return asdict(contribute_product(payload.to_draft(), user_id=args.as_user))
    archived = args.subcommand == "archive"
    set_product_archived(args.product_id, archived=archived, user_id=args.as_user)
    return {"id": args.product_id, "archived": archived}


def _run_catalog(args: argparse.Namespace) -> Any:
    page = browse_catalog(
        CatalogFilter(query=args.query, brand=args.brand, category=args.category, tag=args.tag),
        page=args.page,
        page_size=args.page_size,
        sort=args.sort,
        user_id=args.as_user,
    )
    return {
        "page": page.page,
        "page_size": page.page_size,
        "total_count": page.total_count,
        "total_pages": page.total_pages,
        "items": [asdict(item) for item in page.items],
    }


def _run_store(args: argparse.Namespace, payload: PayloadModel | None) -> Any:
    if not isinstance(payload, StoreCandidatePayload):
        raise TypeError("Store commands require a store payload")
    candidate = payload.to_candidate()
    if args.subcommand == "check":
        check = check_store(candidate)
        return {
            "exact_match": check.exact_match.id if check.exact_match else None,
            "similar_stores": [
                {"id": store.id, "name": store.name} for store in check.similar_stores
            ],
        }
    try:
        result = contribute_store(candidate, user_id=args.as_user, allow_similar=args.allow_similar)
    except ConflictError as exc:
        for store in exc.similar:
            print(f"similar: {store.id} {store.name}", file=sys.stderr)
        raise
    return asdict(result)


def _run_availability(args: argparse.Namespace) -> Any:
    if args.subcommand == "report":
        return asdict(
            contribute_availability(
                args.product_id,
                args.store_id,
                user_id=args.as_user,
                price_range=args.price_range,
            )
        )
    counts = store_availability_counts(args.store_ids)
    return {
        str(store_id): {**asdict(status_counts), "total": status_counts.total}
        for store_id, status_counts in counts.items()
    }


def _run_review(args: argparse.Namespace) -> Any:
    return asdict(
        contribute_review(
            args.product_id,
            user_id=args.as_user,
            rating=args.rating,
            comment=args.comment,
            title=args.title,
        )
    )


def _run_moderation(args: argparse.Namespace) -> Any:
    if args.subcommand == "summary":
        summary = get_moderation_summary(user_id=args.as_user)
        return {
            "by_kind": {str(kind): asdict(counts) for kind, counts in summary.by_kind.items()},
            "total_pending": summary.total_pending,
            "total_needs_review": summary.total_needs_review,
        }
    return asdict(moderate(args.subcommand, args.kind, args.entity_id, user_id=args.as_user))


def _dispatch(args: argparse.Namespace, payload: PayloadModel | None) -> Any:
    match args.command:
        case "user":
            return _run_user(args)
        case "edit":
            return _run_edit(args)
        case "product":
            return _run_product(args, payload)
        case "catalog":
            return _run_catalog(args)
        case "store":
            return _run_store(args, payload)
        case "availability":
            return _run_availability(args)
        case "review":
            return _run_review(args)
        case "moderation":
            return _run_moderation(args)
        case _:
            raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        payload = _load_payload(parsed_args)
        if parsed_args.command == "edit":
            _edit_value(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        output = _dispatch(parsed_args, payload)
    except DomainError as exc:
        log.error("%s: %s", type(exc).__name__, exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)

    print(json.dumps(output, indent=2, default=str))


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
