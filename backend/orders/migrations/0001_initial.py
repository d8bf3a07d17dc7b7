from decimal import Decimal
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('products', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Table',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('number', models.PositiveIntegerField(unique=True)),
                ('status', models.CharField(choices=[('FREE', 'Free'), ('OCCUPIED', 'Occupied')], default='FREE', max_length=10)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('server', models.ForeignKey(blank=True, help_text='Server currently attending the table. Cleared when the table is freed.', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='tables', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Table',
                'verbose_name_plural': 'Tables',
                'ordering': ['number'],
            },
        ),
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('number', models.PositiveIntegerField(unique=True, help_text='Human-facing sequential order number.')),
                ('status', models.CharField(choices=[('OPEN', 'Open'), ('SENT', 'Sent'), ('PAID', 'Paid'), ('VOIDED', 'Voided')], default='OPEN', max_length=10)),
                ('service_percentage', models.DecimalField(blank=True, decimal_places=2, default=Decimal('10'), help_text='Service charge percentage between 0 and 100.', max_digits=5, null=True)),
                ('subtotal', models.DecimalField(decimal_places=0, default=0, max_digits=12)),
                ('service_charge', models.DecimalField(decimal_places=0, default=0, max_digits=12)),
                ('total', models.DecimalField(decimal_places=0, default=0, max_digits=12)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('sent_at', models.DateTimeField(blank=True, null=True)),
                ('closed_at', models.DateTimeField(blank=True, null=True)),
                ('server', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders_as_server', to=settings.AUTH_USER_MODEL)),
                ('table', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='orders', to='orders.table')),
            ],
            options={
                'verbose_name': 'Order',
                'verbose_name_plural': 'Orders',
                'ordering': ['-created_at', 'number'],
                'indexes': [
                    models.Index(fields=['table', 'status'], name='order_table_stat_idx'),
                    models.Index(fields=['status', 'created_at'], name='order_stat_created_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status__in', ['OPEN', 'SENT'])), fields=('table',), name='unique_active_order_per_table'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OrderItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.PositiveIntegerField(default=1)),
                ('unit_price', models.DecimalField(decimal_places=0, help_text='Price of the product at the time it was added.', max_digits=12)),
                ('note', models.CharField(blank=True, default='', help_text="Kitchen note, e.g. 'sin cebolla'", max_length=160)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='orders.order')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='order_items', to='products.product')),
            ],
            options={
                'verbose_name': 'Order Item',
                'verbose_name_plural': 'Order Items',
                'ordering': ['id'],
                'indexes': [models.Index(fields=['order', 'product'], name='item_order_product_idx')],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity__gte', 1)), name='order_item_quantity_positive'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OrderItemAddOn',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('extra_price', models.DecimalField(decimal_places=0, default=0, max_digits=12)),
                ('add_on', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='order_item_add_ons', to='products.addon')),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='add_ons', to='orders.orderitem')),
            ],
            options={
                'ordering': ['add_on_id'],
                'constraints': [
                    models.UniqueConstraint(fields=('item', 'add_on'), name='unique_add_on_per_item'),
                ],
            },
        ),
    ]
