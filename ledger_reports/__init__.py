"""GST return and balance sheet report engine."""

from ledger_reports.domain.services.balance_sheet import (
    BalanceSheetError,
    generate_balance_sheet,
    validate_accounting_equation,
)
from ledger_reports.domain.services.gst_export import (
    export_gstr1_to_json,
    export_gstr3b_to_json,
)
from ledger_reports.domain.services.gst_generators import (
    generate_gstr1,
    generate_gstr2,
    generate_gstr3b,
)
from ledger_reports.domain.services.gst_utils import (
    calculate_gst_from_line_items,
    create_empty_gst_summary,
)

__all__ = [
    "BalanceSheetError",
    "calculate_gst_from_line_items",
    "create_empty_gst_summary",
    "export_gstr1_to_json",
    "export_gstr3b_to_json",
    "generate_balance_sheet",
    "generate_gstr1",
    "generate_gstr2",
    "generate_gstr3b",
    "validate_accounting_equation",
]
