from typing import List, Optional

from retail.domain import CheckoutResult, Manifest, Receipt


def format_money(amount: float) -> str:
    return f"{amount:.2f}"


def format_weight(weight: float) -> str:
    return f"{weight:.1f}kg"


# ============ Текстовые блоки ============


def render_manifest(manifest: Optional[Manifest]) -> List[str]:
    """Блок доставки. Без доставляемых товаров - пусто."""
    if manifest is None or not manifest.entries:
        return []

    return (
        ["** Shipping **"]
        + [f"{e.name} - {format_weight(e.weight)}" for e in manifest.entries]
        + [f"Total: {format_weight(manifest.total_weight)}", ""]
    )


def render_receipt(receipt: Receipt) -> List[str]:
    return (
        ["** Receipt **"]
        + [
            f"{line.quantity} x {line.name} = {format_money(line.line_total)}"
            for line in receipt.lines
        ]
        + [
            f"Subtotal: {format_money(receipt.subtotal)}",
            f"Shipping: {format_money(receipt.shipping_fee)}",
            f"Total: {format_money(receipt.total)}",
            f"Remaining: {format_money(receipt.remaining)}",
        ]
    )


def render_checkout(result: CheckoutResult) -> str:
    """Манифест (если есть), затем чек"""
    return "\n".join(render_manifest(result.manifest) + render_receipt(result.receipt))


# ============ Сводка для UI ============


def receipt_summary(receipt: Receipt) -> dict:
    return {
        "lines": [
            {"quantity": l.quantity, "name": l.name, "total": l.line_total}
            for l in receipt.lines
        ],
        "subtotal": receipt.subtotal,
        "shipping_fee": receipt.shipping_fee,
        "total": receipt.total,
        "remaining": receipt.remaining,
    }
