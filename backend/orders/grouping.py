"""
Line aggregation: collapse line items that are indistinguishable to the
kitchen and the guest into display groups.

Two line items are indistinguishable when they share a product, the same
set of add-ons and the same note after trimming and lower-casing. The
output order depends only on the groups themselves, never on the order the
rows arrived in.
"""
import unicodedata
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, NamedTuple, Tuple

from .exceptions import OrderValidationError
from .records import AddOnRow, LineItemRow


class LineSignature(NamedTuple):
    product_id: int
    add_on_ids: Tuple[int, ...]
    note: str


@dataclass
class DisplayGroup:
    signature: LineSignature
    product_id: int
    product_name: str
    quantity: int = 0
    item_ids: List[int] = field(default_factory=list)
    add_ons: List[AddOnRow] = field(default_factory=list)
    note: str = ""
    amount: Decimal = Decimal("0")

    @property
    def add_on_names(self) -> List[str]:
        return [a.name for a in self.add_ons]


def normalize_note(text) -> str:
    if text is None:
        return ""
    return str(text).strip().lower()


def normalize_ids(values: Iterable) -> Tuple[int, ...]:
    """Sorted distinct integer ids; values that are not whole numbers are dropped."""
    ids = set()
    for value in values or ():
        if isinstance(value, bool):
            continue
        try:
            number = int(value)
        except (TypeError, ValueError):
            continue
        if isinstance(value, float) and number != value:
            continue
        ids.add(number)
    return tuple(sorted(ids))


def collation_key(name: str) -> str:
    """
    Accent- and case-insensitive sort key for Spanish product names.
    'ñ' sorts after 'n'.
    """
    text = unicodedata.normalize("NFC", name or "").casefold().replace("ñ", "n\uffff")
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def signature_for(row: LineItemRow) -> LineSignature:
    if row.product_id is None:
        raise OrderValidationError(f"Line item {row.item_id} has no product")
    if row.quantity is None or row.quantity < 1:
        raise OrderValidationError(
            f"Line item {row.item_id} has invalid quantity {row.quantity}"
        )
    return LineSignature(
        product_id=row.product_id,
        add_on_ids=normalize_ids(a.add_on_id for a in row.add_ons),
        note=normalize_note(row.note),
    )


def group_sort_key(group: DisplayGroup):
    return (
        collation_key(group.product_name),
        group.signature.note,
        group.product_id,
        group.signature.add_on_ids,
    )


def group_line_items(rows: Iterable[LineItemRow]) -> List[DisplayGroup]:
    """
    Collapse rows into display groups.

    Each group sums the quantities and amounts of its rows and lists their
    item ids in encounter order. Add-ons and the displayed note come from the
    first row seen.
    """
    groups: Dict[LineSignature, DisplayGroup] = {}

    for row in rows:
        signature = signature_for(row)
        group = groups.get(signature)
        if group is None:
            group = DisplayGroup(
                signature=signature,
                product_id=row.product_id,
                product_name=row.product_name,
                add_ons=sorted(row.add_ons, key=lambda a: a.add_on_id),
                note=(row.note or "").strip(),
            )
            groups[signature] = group
        group.quantity += row.quantity
        group.item_ids.append(row.item_id)
        group.amount += row.line_total

    return sorted(groups.values(), key=group_sort_key)


def partition_by_channel(rows: Iterable[LineItemRow]) -> Dict[str, List[LineItemRow]]:
    """Split rows by destination channel, keeping their relative order."""
    channels: Dict[str, List[LineItemRow]] = {}
    for row in rows:
        channels.setdefault(row.channel, []).append(row)
    return channels
