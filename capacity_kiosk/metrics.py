"""Headline metric formatting for the results screen (SoH / RUL / OCV)."""

from dataclasses import dataclass
from typing import List, Optional

from capacity_kiosk.chart_data import CellResult
from capacity_kiosk.config import (
    HEADLINE_LABEL_SIZE, HEADLINE_METRIC_LABELS,
    METRIC_BASE_FONT_SIZES, METRIC_SIZE_MULTIPLIER,
    OCV_COLOR, RUL_COLOR, SOH_COLOR, SOH_TOLERANCE_TEXT,
)


@dataclass(frozen=True)
class MetricDisplay:
    label: str
    value: str
    color: str
    sub_value: Optional[str] = None
    size: str = "xlarge"

    @property
    def is_headline(self) -> bool:
        return self.label in HEADLINE_METRIC_LABELS

    @property
    def label_font_size(self) -> int:
        if self.is_headline:
            return HEADLINE_LABEL_SIZE
        return scaled_font_size(self.size, "label")

    @property
    def value_font_size(self) -> int:
        return scaled_font_size(self.size, "value")

    @property
    def sub_value_font_size(self) -> int:
        return scaled_font_size(self.size, "sub_value")


def scaled_font_size(size: str, part: str, multiplier: float = METRIC_SIZE_MULTIPLIER) -> int:
    if size not in METRIC_BASE_FONT_SIZES:
        raise ValueError(f"Unknown metric size '{size}'")
    return round(METRIC_BASE_FONT_SIZES[size][part] * multiplier)


def cell_metrics(result: CellResult, size: str = "xlarge") -> List[MetricDisplay]:
    """The three headline metrics, in display order."""
    return [
        MetricDisplay("SoH:", f"{result.soh:.1f}%", SOH_COLOR,
                      sub_value=SOH_TOLERANCE_TEXT, size=size),
        MetricDisplay("RUL:", str(int(result.rul)), RUL_COLOR, size=size),
        MetricDisplay("OCV:", f"{result.ocv}V", OCV_COLOR, size=size),
    ]
