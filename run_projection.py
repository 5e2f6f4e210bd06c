#!/usr/bin/env python3
"""
run_projection.py - Retirement Income Projection Runner

Runs a complete projection for one member profile:
1. Load and validate the member profile (JSON)
2. Load plan rules (optional JSON override of the statutory defaults)
3. Calculate the pension, Social Security and year-by-year income
4. Print the summary and projection table
5. Optionally export an Excel workbook

Usage:
    python run_projection.py --profile profile.json

    python run_projection.py \\
        --profile profile.json \\
        --horizon 85 \\
        --rules rules.json \\
        --excel projection.xlsx

Author: Retirement Income Project
License: MIT
"""

import argparse
import json
import sys
import logging
from pathlib import Path

import pandas as pd
from pydantic import ValidationError

from pension_projection import (
    DEFAULT_PLAN_RULES,
    MemberProfile,
    PensionInputError,
    ProjectionParameters,
    export_projection_excel,
    generate_projection,
    load_plan_rules,
    projection_to_frame,
    summarize_projection,
)

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def load_profile(path: str) -> MemberProfile:
    """Load a MemberProfile from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return MemberProfile(**data)


def print_projection(result) -> None:
    pension = result.pension
    ratio = result.replacement_ratio
    summary = summarize_projection(result.rows)

    print("=" * 70)
    print("RETIREMENT INCOME PROJECTION")
    print("=" * 70)
    print(f"Start age:        {result.start_age:g}")
    print(f"Salary basis:     ${result.salary_basis:,.2f}")
    print(f"Service:          {pension.years_of_service:g} years")
    print(f"Benefit factor:   {pension.multiplier:.2%}")
    print(f"Base pension:     ${pension.base_pension_annual:,.2f}/yr"
          + (" (80% maximum applied)" if pension.capped else ""))
    print(f"Option:           {pension.option_description}")
    print(f"Pension:          ${pension.option_adjusted_monthly:,.2f}/mo")
    if pension.survivor_monthly is not None:
        print(f"Survivor pension: ${pension.survivor_monthly:,.2f}/mo")
    print(f"Social Security:  ${result.social_security_monthly:,.2f}/mo")
    if not pension.eligible:
        print(f"  {pension.eligibility_message}")
    if ratio.defined:
        print(f"Replacement:      {ratio.value:.1%} at age {ratio.reference_age:g}")
    else:
        print(f"Replacement:      {ratio.reason}")
    if summary is not None:
        print(f"Total COLA gain:  ${summary.total_cola_gain_annual:,.2f}/yr "
              f"by age {summary.end_age:g}")
        print(f"Cumulative:       ${summary.cumulative_total:,.2f}")
    print()

    frame = projection_to_frame(result.rows)
    columns = ["Label", "Pension (Monthly)", "Social Security (Monthly)",
               "Total (Monthly)", "Cumulative Total"]
    with pd.option_context("display.max_rows", None, "display.width", 120,
                           "display.float_format", "{:,.2f}".format):
        print(frame[columns].to_string(index=False))
    print()


def main():
    parser = argparse.ArgumentParser(
        description='Project retirement income (pension + Social Security)',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_projection.py --profile profile.json
  python run_projection.py --profile profile.json --horizon 90 --excel out.xlsx
"""
    )

    parser.add_argument('--profile', type=str, required=True, help='Member profile (JSON)')
    parser.add_argument('--horizon', type=float, default=80, help='Last projected age (default 80)')
    parser.add_argument('--rules', type=str, help='Plan rules override (JSON)')
    parser.add_argument('--excel', type=str, help='Write projection workbook to this path')
    parser.add_argument('--no-cola', action='store_true', help='Project without COLA')
    parser.add_argument('--projected-salary', action='store_true',
                        help='Use the salary projected to the start age')
    parser.add_argument('--reference-age', type=float,
                        help='Age for the replacement ratio')

    args = parser.parse_args()

    for path in (args.profile, args.rules):
        if path and not Path(path).exists():
            print(f"ERROR: File not found: {path}")
            sys.exit(1)

    try:
        profile = load_profile(args.profile)
        rules = load_plan_rules(args.rules) if args.rules else DEFAULT_PLAN_RULES
        params = ProjectionParameters(
            profile=profile,
            horizon_age=args.horizon,
            include_cola=not args.no_cola,
            replacement_reference_age=args.reference_age,
            use_projected_salary=args.projected_salary,
            rules=rules,
        )
        result = generate_projection(params)
    except (ValidationError, PensionInputError) as e:
        logger.error(f"Invalid input: {e}")
        sys.exit(1)

    print_projection(result)

    if args.excel:
        output = export_projection_excel(result, args.excel)
        print(f"Output saved to: {output}")


if __name__ == '__main__':
    main()
