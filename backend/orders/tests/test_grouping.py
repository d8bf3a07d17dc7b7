"""
Line aggregation tests.

These run on plain LineItemRow records, without a database.
"""
import itertools
from decimal import Decimal

import pytest

from orders.exceptions import OrderValidationError
from orders.grouping import (
    collation_key,
    group_line_items,
    normalize_ids,
    normalize_note,
    partition_by_channel,
    signature_for,
)
from orders.records import AddOnRow, LineItemRow

CHEESE = AddOnRow(add_on_id=7, name='Queso', extra_price=Decimal('500'))
FRIES = AddOnRow(add_on_id=3, name='Papas fritas', extra_price=Decimal('1500'))


def row(item_id, product_id=1, name='Burger', quantity=1, price='5000', note='', add_ons=(), channel='COCINA'):
    return LineItemRow(
        item_id=item_id,
        product_id=product_id,
        product_name=name,
        quantity=quantity,
        unit_price=Decimal(price),
        note=note,
        add_ons=list(add_ons),
        channel=channel,
    )


def group_contents(groups):
    return [(g.product_id, g.signature.add_on_ids, g.signature.note, g.quantity, g.amount) for g in groups]


class TestSignature:
    def test_note_is_trimmed_and_lowercased(self):
        assert normalize_note('  Sin Cebolla ') == 'sin cebolla'
        assert normalize_note(None) == ''

    def test_add_on_order_does_not_matter(self):
        a = signature_for(row(1, add_ons=[CHEESE, FRIES]))
        b = signature_for(row(2, add_ons=[FRIES, CHEESE]))
        assert a == b
        assert a.add_on_ids == (3, 7)

    def test_signature_is_hashable_key(self):
        groups = {signature_for(row(1, note='Sin sal')): 'x'}
        assert signature_for(row(2, note='sin sal ')) in groups

    def test_missing_product_is_rejected(self):
        with pytest.raises(OrderValidationError):
            signature_for(row(1, product_id=None))

    def test_zero_quantity_is_rejected(self):
        with pytest.raises(OrderValidationError):
            signature_for(row(1, quantity=0))

    def test_normalize_ids_drops_junk_and_duplicates(self):
        assert normalize_ids(['4', 2, 2, 'abc', None, 3.5, 1.0, True]) == (1, 2, 4)
        assert normalize_ids(None) == ()


class TestGroupLineItems:
    def test_worked_example(self):
        """
        Two "Burger + cheese" of quantity 1 and one "Burger, no onions" of
        quantity 2 collapse into two groups of quantity 2.
        """
        rows = [
            row(1, add_ons=[CHEESE]),
            row(2, add_ons=[CHEESE]),
            row(3, quantity=2, note='no onions'),
        ]

        groups = group_line_items(rows)

        assert len(groups) == 2
        with_cheese, no_onions = groups
        assert with_cheese.quantity == 2
        assert with_cheese.item_ids == [1, 2]
        assert with_cheese.add_on_names == ['Queso']
        assert with_cheese.amount == Decimal('11000')
        assert no_onions.quantity == 2
        assert no_onions.note == 'no onions'
        assert no_onions.add_ons == []
        assert no_onions.amount == Decimal('10000')

    def test_different_add_ons_or_notes_are_kept_apart(self):
        rows = [
            row(1, add_ons=[CHEESE]),
            row(2, add_ons=[CHEESE, FRIES]),
            row(3, note='bien cocido'),
            row(4),
        ]
        assert len(group_line_items(rows)) == 4

    def test_note_case_and_whitespace_merge(self):
        groups = group_line_items([row(1, note='Sin Cebolla'), row(2, note=' sin cebolla  ')])
        assert len(groups) == 1
        # Displayed note comes from the first row seen, trimmed
        assert groups[0].note == 'Sin Cebolla'
        assert groups[0].item_ids == [1, 2]

    def test_every_permutation_gives_the_same_groups(self):
        rows = [
            row(1, add_ons=[CHEESE]),
            row(2, note='no onions', quantity=2),
            row(3, product_id=2, name='Ñoquis', price='7000'),
            row(4, add_ons=[CHEESE]),
            row(5, product_id=3, name='Empanada', price='2500', note='Pino'),
            row(6, product_id=2, name='Ñoquis', price='7000'),
        ]
        expected = group_contents(group_line_items(rows))

        for permutation in itertools.permutations(rows):
            assert group_contents(group_line_items(permutation)) == expected

    def test_sorted_by_name_ignoring_accents_and_case(self):
        rows = [
            row(1, product_id=1, name='Ñoquis'),
            row(2, product_id=2, name='nachos'),
            row(3, product_id=3, name='Ensalada'),
            row(4, product_id=4, name='Ávila sour'),
            row(5, product_id=5, name='Oreja'),
        ]
        names = [g.product_name for g in group_line_items(rows)]
        assert names == ['Ávila sour', 'Ensalada', 'nachos', 'Ñoquis', 'Oreja']

    def test_enye_sorts_after_n(self):
        assert collation_key('nube') < collation_key('ñandú') < collation_key('oso')

    def test_empty_input(self):
        assert group_line_items([]) == []


class TestPartitionByChannel:
    def test_rows_split_by_channel_keep_relative_order(self):
        rows = [
            row(1, channel='COCINA'),
            row(2, channel='BAR'),
            row(3, channel='COCINA'),
        ]
        channels = partition_by_channel(rows)
        assert set(channels) == {'COCINA', 'BAR'}
        assert [r.item_id for r in channels['COCINA']] == [1, 3]

    def test_same_signature_on_two_channels_stays_separate(self):
        channels = partition_by_channel([row(1, channel='COCINA'), row(2, channel='BAR')])
        for rows in channels.values():
            assert group_line_items(rows)[0].quantity == 1
