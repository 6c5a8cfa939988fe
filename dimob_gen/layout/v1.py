"""Layout v1 of the annual rental declaration file.

Positions are 1-based. Amounts carry two implied decimal places.
Every record, including the trailer, is followed by CRLF.
"""

from dimob_gen.layout.fields import (
    LayoutVersion,
    RecordLayout,
    date_field,
    filler,
    numeric,
    text,
)
from dimob_gen.models import RecordType

HEADER = RecordLayout(
    RecordType.HEADER,
    374,
    (
        text("system_tag", 1, 5, constant="DIMOB"),
        filler("reserved", 6, 369),
    ),
)

OWNER_DETAIL = RecordLayout(
    RecordType.OWNER_DETAIL,
    472,
    (
        text("record_type", 1, 3, constant="R01"),
        numeric("declarant_tax_id", 4, 14),
        numeric("fiscal_year", 18, 4),
        numeric("rectifying", 22, 1, constant="0"),
        numeric("receipt_number", 23, 10, constant="0"),
        numeric("special_situation", 33, 1, constant="0"),
        numeric("event_date", 34, 8, constant="0"),
        numeric("situation_code", 42, 2, constant="0"),
        text("declarant_name", 44, 60),
        numeric("responsible_tax_id", 104, 11),
        text("declarant_address", 115, 120, truncatable=True),
        text("declarant_state", 235, 2),
        numeric("municipality_code", 237, 7),
        text("municipal_registration", 244, 15),
        text("owner_tax_id", 259, 14),
        text("owner_name", 273, 60),
        text("owner_address", 333, 120, truncatable=True),
        filler("reserved", 453, 20),
    ),
)

TRANSACTION_DETAIL = RecordLayout(
    RecordType.TRANSACTION_DETAIL,
    613,
    (
        text("record_type", 1, 3, constant="R02"),
        numeric("declarant_tax_id", 4, 14),
        numeric("fiscal_year", 18, 4),
        numeric("sequence", 22, 5),
        text("owner_tax_id", 27, 14),
        text("owner_name", 41, 60),
        text("tenant_tax_id", 101, 14),
        text("tenant_name", 115, 60),
        text("contract_id", 175, 36),
        date_field("contract_start_date", 211),
        numeric("gross_income", 219, 12, decimals=2),
        numeric("commission_total", 231, 12, decimals=2),
        numeric("deduction_total", 243, 12, decimals=2),
        numeric("net_amount", 255, 12, decimals=2),
        numeric("projected_amount", 267, 12, decimals=2),
        *(
            numeric(f"income_{month:02d}", 279 + (month - 1) * 12, 12, decimals=2)
            for month in range(1, 13)
        ),
        numeric("property_type", 423, 1),
        text("property_address", 424, 120, truncatable=True),
        numeric("property_postal_code", 544, 8),
        text("property_city", 552, 40, truncatable=True),
        text("property_state", 592, 2),
        filler("reserved", 594, 20),
    ),
)

TRAILER = RecordLayout(
    RecordType.TRAILER,
    100,
    (
        text("record_type", 1, 2, constant="T9"),
        numeric("declarant_tax_id", 3, 14),
        numeric("fiscal_year", 17, 4),
        numeric("detail_count", 21, 8),
        numeric("total_gross", 29, 15, decimals=2),
        numeric("total_net", 44, 15, decimals=2),
        filler("reserved", 59, 42),
    ),
)

LAYOUT_V1 = LayoutVersion(
    version="v1",
    line_terminator="\r\n",
    trailing_terminator=True,
    records={
        RecordType.HEADER: HEADER,
        RecordType.OWNER_DETAIL: OWNER_DETAIL,
        RecordType.TRANSACTION_DETAIL: TRANSACTION_DETAIL,
        RecordType.TRAILER: TRAILER,
    },
)
