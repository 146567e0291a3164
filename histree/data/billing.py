"""Token usage totals and cost estimates."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from histree.data.models import Session, Usage

JPY_PER_USD = 150.0
NOT_AVAILABLE = "n/a"


class Currency(str, Enum):
    USD = "USD"
    JPY = "JPY"

    def toggle(self) -> "Currency":
        return Currency.JPY if self is Currency.USD else Currency.USD

    @property
    def label(self) -> str:
        return self.value

    def format_cost(self, usd: float) -> str:
        if self is Currency.JPY:
            return f"¥{usd * JPY_PER_USD:.0f}"
        return f"${usd:.4f}"


@dataclass(frozen=True)
class CostRate:
    input_per_million: float
    output_per_million: float


# More specific variants must come before the family names they contain.
_RATE_TABLE: Tuple[Tuple[Tuple[str, ...], CostRate], ...] = (
    (("claude-4-5-opus", "claude-4-opus", "opus-4-5", "opus-4"), CostRate(5.0, 25.0)),
    (("claude-3-5-sonnet", "claude-3-7-sonnet"), CostRate(3.0, 15.0)),
    (("claude-3-5-haiku", "claude-3-haiku"), CostRate(0.25, 1.25)),
    (("claude-3-opus",), CostRate(15.0, 75.0)),
    (("claude-3-sonnet",), CostRate(3.0, 15.0)),
    (("gpt-5.2-pro",), CostRate(21.0, 168.0)),
    (("gpt-5-pro",), CostRate(15.0, 120.0)),
    (("gpt-5.2", "gpt-5-2"), CostRate(1.75, 14.0)),
    (("gpt-5-mini",), CostRate(0.25, 2.0)),
    (("gpt-5-nano",), CostRate(0.05, 0.4)),
    (("gpt-5",), CostRate(1.25, 10.0)),
)


def cost_rate_for_model(model: str) -> Optional[CostRate]:
    """First rate whose key is a case-insensitive substring of ``model``."""
    lowered = model.lower()
    for keys, rate in _RATE_TABLE:
        if any(key in lowered for key in keys):
            return rate
    return None


def estimate_cost_usd(model: Optional[str], usage: Usage) -> Optional[float]:
    """USD cost of one message. None (never 0.0) when the model has no known rate."""
    if not model:
        return None
    rate = cost_rate_for_model(model)
    if rate is None:
        return None
    input_cost = usage.total_input_tokens() * rate.input_per_million / 1_000_000
    output_cost = usage.total_output_tokens() * rate.output_per_million / 1_000_000
    return input_cost + output_cost


@dataclass
class UsageSummary:
    input_tokens: int = 0
    output_tokens: int = 0
    has_unknown: bool = False
    has_data: bool = False

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass
class CostSummary:
    usd: Optional[float] = None
    has_unknown: bool = False
    has_data: bool = False


def summarize_usage(session: Session) -> UsageSummary:
    summary = UsageSummary()
    for entry in session.assistant_messages():
        usage = entry.message.usage if entry.message is not None else None
        if usage is None:
            summary.has_unknown = True
            continue
        summary.has_data = True
        summary.input_tokens += usage.total_input_tokens()
        summary.output_tokens += usage.total_output_tokens()
    return summary


def summarize_cost(session: Session) -> CostSummary:
    summary = CostSummary()
    for entry in session.assistant_messages():
        message = entry.message
        if message is None or message.usage is None:
            continue
        summary.has_data = True
        cost = estimate_cost_usd(message.model, message.usage)
        if cost is None:
            summary.has_unknown = True
            continue
        summary.usd = (summary.usd or 0.0) + cost
    return summary


def format_cost(cost: Optional[float], currency: Currency) -> str:
    """Render a cost; a missing rate reads "n/a", never "$0.0000"."""
    if cost is None:
        return NOT_AVAILABLE
    return currency.format_cost(cost)


def format_cost_summary(summary: CostSummary, currency: Currency) -> str:
    if not summary.has_data:
        return "-"
    text = format_cost(summary.usd, currency)
    if summary.usd is not None and summary.has_unknown:
        text += "+"
    return text
