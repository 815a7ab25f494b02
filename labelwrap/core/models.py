from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Dict, Any

DEFAULT_BARCODE = 5

# Font B at double width/height on an 80mm head
DEFAULT_LABEL_COLUMNS = 27


@dataclass
class LabelJob:
    message: str
    barcode: int = DEFAULT_BARCODE
    header: Optional[str] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "LabelJob":
        try:
            barcode = int(str(data.get("barcode", DEFAULT_BARCODE)).strip())
        except (TypeError, ValueError):
            barcode = DEFAULT_BARCODE
        header = str(data.get("header") or "").strip()
        return LabelJob(
            message=str(data.get("message") or ""),
            barcode=barcode,
            header=header or None,
        )
