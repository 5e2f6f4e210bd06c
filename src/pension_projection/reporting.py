"""
pension_projection/reporting.py - Projection Tables and Excel Export

Consumes ProjectionRow lists as produced by the engine; no plan rule is
recomputed here.

Workbook layout:
1. Projection - one row per projected year
2. Summary    - pension, Social Security and replacement-ratio headline

Author: Retirement Income Project
License: MIT
"""

from pathlib import Path
from typing import List, Union
import logging

import pandas as pd
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from .models import ProjectionRow
from .projection import ProjectionResult, summarize_projection

logger = logging.getLogger(__name__)

CURRENCY_FORMAT = '$#,##0.00'
PERCENT_FORMAT = '0.00%'

PROJECTION_COLUMNS = {
    "age": "Age",
    "age_label": "Label",
    "years_of_service": "Years of Service",
    "pension_monthly": "Pension (Monthly)",
    "pension_annual": "Pension (Annual)",
    "cola_increase_annual": "COLA Increase",
    "social_security_monthly": "Social Security (Monthly)",
    "social_security_annual": "Social Security (Annual)",
    "other_monthly": "Other Income (Monthly)",
    "total_monthly": "Total (Monthly)",
    "total_annual": "Total (Annual)",
    "cumulative_total": "Cumulative Total",
    "error": "Error",
}

CURRENCY_COLUMNS = [
    "Pension (Monthly)", "Pension (Annual)", "COLA Increase",
    "Social Security (Monthly)", "Social Security (Annual)",
    "Other Income (Monthly)", "Total (Monthly)", "Total (Annual)",
    "Cumulative Total",
]


def projection_to_frame(rows: List[ProjectionRow]) -> pd.DataFrame:
    """
    Projection rows as a DataFrame with display column names.

    Failed rows keep their NaN amounts and carry the message in "Error".
    """
    records = [{key: getattr(row, key) for key in PROJECTION_COLUMNS} for row in rows]
    df = pd.DataFrame.from_records(records, columns=list(PROJECTION_COLUMNS))
    return df.rename(columns=PROJECTION_COLUMNS)


def summary_frame(result: ProjectionResult) -> pd.DataFrame:
    """Two-column (Item, Value) headline table for a projection."""
    pension = result.pension
    ratio = result.replacement_ratio
    items = [
        ("Start Age", result.start_age),
        ("Salary Basis", result.salary_basis),
        ("Years of Service", pension.years_of_service),
        ("Benefit Factor", pension.multiplier),
        ("Base Pension (Annual)", pension.base_pension_annual),
        ("Capped Pension (Annual)", pension.capped_pension_annual),
        ("Maximum Benefit Applied", "Yes" if pension.capped else "No"),
        ("Retirement Option", pension.option_description),
        ("Pension (Monthly)", pension.option_adjusted_monthly),
        ("Survivor Pension (Monthly)", pension.survivor_monthly),
        ("Social Security (Monthly)", result.social_security_monthly),
        ("Replacement Ratio", ratio.value if ratio.defined else ratio.reason),
    ]

    summary = summarize_projection(result.rows)
    if summary is not None:
        items += [
            ("End Age", summary.end_age),
            ("Final Pension (Monthly)", summary.final_pension_monthly),
            ("Peak Total Income (Monthly)", summary.peak_total_monthly),
            ("Total COLA Gain (Annual)", summary.total_cola_gain_annual),
            ("Years with Social Security", summary.years_with_social_security),
            ("Cumulative Income", summary.cumulative_total),
        ]
    if not pension.eligible:
        items.append(("Eligibility", pension.eligibility_message))

    return pd.DataFrame(items, columns=["Item", "Value"])


def _style_sheet(sheet, currency_columns: List[int], widths: List[int]) -> None:
    header_font = Font(bold=True, size=11, color="FFFFFF")
    header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
    for cell in sheet[1]:
        cell.font = header_font
        cell.fill = header_fill

    for idx in currency_columns:
        for (cell,) in sheet.iter_rows(min_row=2, min_col=idx, max_col=idx):
            cell.number_format = CURRENCY_FORMAT

    for idx, width in enumerate(widths, start=1):
        sheet.column_dimensions[get_column_letter(idx)].width = width


def export_projection_excel(result: ProjectionResult,
                            output_path: Union[str, Path]) -> Path:
    """
    Write the projection to an xlsx workbook.

    Args:
        result: Output of generate_projection()
        output_path: Destination .xlsx path

    Returns:
        Path to the saved file
    """
    output_path = Path(output_path)
    projection = projection_to_frame(result.rows)
    summary = summary_frame(result)

    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        projection.to_excel(writer, sheet_name="Projection", index=False)
        summary.to_excel(writer, sheet_name="Summary", index=False)

        currency_idx = [list(projection.columns).index(c) + 1 for c in CURRENCY_COLUMNS]
        _style_sheet(writer.sheets["Projection"], currency_idx,
                     [8, 36] + [18] * (len(projection.columns) - 2))

        summary_sheet = writer.sheets["Summary"]
        _style_sheet(summary_sheet, [], [32, 48])
        ratio = result.replacement_ratio
        if ratio.defined:
            ratio_row = list(summary["Item"]).index("Replacement Ratio") + 2
            summary_sheet.cell(row=ratio_row, column=2).number_format = PERCENT_FORMAT

    logger.info(f"Saved projection report to: {output_path}")
    return output_path
