"""Command-line interface for the margin calculator."""

import argparse
import json
import logging
import sys

from showroom.config import get_settings
from showroom.pricing import (
    VehicleMarginInput,
    calculate_transport_cost_per_car_eur,
    calculate_transport_cost_total_eur,
    calculate_vehicle_margin_breakdown,
    decompose_transport_bundles,
    format_price_precise,
    normalize_transport_tiers,
)

logger = logging.getLogger(__name__)


def create_example_input() -> VehicleMarginInput:
    """Example: a 123 000 PLN car resold in the Netherlands."""
    return VehicleMarginInput(
        purchase_gross_pln=123000,
        exchange_rate_pln_per_eur=4.3,
        financing_cost_percent=2.5,
        additional_cost_items=[
            {"description": "Registration", "mode": "fixed_eur", "valueEurNet": 350},
            {
                "description": "Warranty",
                "mode": "percent_of_net_plus_financing",
                "percentValue": 1.5,
            },
        ],
        transport_cost_eur=450,
        sale_gross_eur=33000,
    )


def margin_command(args: argparse.Namespace) -> None:
    """Print a margin breakdown from JSON or the example input."""
    if args.json:
        data = VehicleMarginInput.model_validate(json.loads(args.json))
    else:
        data = create_example_input()
        print("Using example vehicle (use --json to provide your own)\n")

    if args.rate is not None:
        data = data.model_copy(update={"exchange_rate_pln_per_eur": args.rate})

    if data.exchange_rate_pln_per_eur <= 0:
        logger.warning("Exchange rate is not positive - EUR purchase costs will be 0")

    result = calculate_vehicle_margin_breakdown(data)

    print(f"{'=' * 50}")
    print("Purchase:")
    print(f"  Gross PLN:      {format_price_precise(data.purchase_gross_pln, 'PLN')}")
    print(f"  Net PLN:        {format_price_precise(result.purchase_net_pln, 'PLN')}")
    print(f"  VAT PLN:        {format_price_precise(result.vat_pln, 'PLN')}")
    print(f"\nCosts (EUR):")
    print(f"  Net purchase:   {format_price_precise(result.purchase_net_eur, 'EUR')}")
    print(f"  Financing:      {format_price_precise(result.financing_cost_eur, 'EUR')}")
    print(f"  Additional:     {format_price_precise(result.additional_costs_eur, 'EUR')}")
    print(f"  Transport:      {format_price_precise(result.transport_cost_eur, 'EUR')}")
    print(f"  Total:          {format_price_precise(result.total_cost_eur, 'EUR')}")
    print(f"\nSale (EUR):")
    print(f"  Gross:          {format_price_precise(result.sale_gross_eur, 'EUR')}")
    print(f"  Net:            {format_price_precise(result.sale_net_eur, 'EUR')}")
    print(f"\n{'=' * 50}")
    print(f"Margin: {format_price_precise(result.margin_eur, 'EUR')} ({result.margin_percent:.2f}%)")


def transport_command(args: argparse.Namespace) -> None:
    """Print bundle decomposition and costs for a vehicle count."""
    tiers = normalize_transport_tiers(json.loads(args.tiers) if args.tiers else None)

    bundles = decompose_transport_bundles(args.count, tiers)
    total = calculate_transport_cost_total_eur(args.count, tiers)
    per_car = calculate_transport_cost_per_car_eur(args.count, tiers)

    print(f"Vehicles: {args.count}")
    print(f"Bundles:  {' + '.join(str(b) for b in bundles) or '-'}")
    print(f"Total:    {format_price_precise(total, 'EUR')}")
    print(f"Per car:  {format_price_precise(per_car, 'EUR')}")


def main() -> int:
    """Main CLI entry point."""
    logging.basicConfig(level=get_settings().log_level.upper())

    parser = argparse.ArgumentParser(
        prog="showroom",
        description="Partner vehicle margin calculator",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Margin command
    margin_parser = subparsers.add_parser("margin", help="Calculate a margin breakdown")
    margin_parser.add_argument(
        "--json",
        type=str,
        help="Calculation input as JSON (snake_case or camelCase keys)",
    )
    margin_parser.add_argument(
        "--rate",
        type=float,
        help="Override exchange rate (PLN per EUR)",
    )

    # Transport command
    transport_parser = subparsers.add_parser("transport", help="Price a transport bundle")
    transport_parser.add_argument("count", type=int, help="Vehicles shipped together")
    transport_parser.add_argument(
        "--tiers",
        type=str,
        help='Tier prices as JSON, e.g. \'{"1": 900, "2": 1500, "4": 2600}\'',
    )

    # Example command
    example_parser = subparsers.add_parser(
        "example",
        help="Show example margin input JSON",
    )
    example_parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty print JSON",
    )

    args = parser.parse_args()

    if args.command == "margin":
        margin_command(args)
    elif args.command == "transport":
        transport_command(args)
    elif args.command == "example":
        data = create_example_input().model_dump(by_alias=True, exclude_none=True)
        if args.pretty:
            print(json.dumps(data, indent=2))
        else:
            print(json.dumps(data))
    else:
        parser.print_help()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
