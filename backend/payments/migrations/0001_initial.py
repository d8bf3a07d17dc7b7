from decimal import Decimal
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('orders', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('method', models.CharField(choices=[('CASH', 'Cash'), ('CARD', 'Card'), ('MIXED', 'Cash and card')], max_length=10)),
                ('amount_due', models.DecimalField(decimal_places=0, help_text='Order total at the time of payment.', max_digits=12)),
                ('cash_amount', models.DecimalField(decimal_places=0, default=Decimal('0'), max_digits=12)),
                ('card_amount', models.DecimalField(decimal_places=0, default=Decimal('0'), max_digits=12)),
                ('tendered', models.DecimalField(decimal_places=0, max_digits=12)),
                ('change', models.DecimalField(decimal_places=0, default=Decimal('0'), help_text='Amount returned to the guest (vuelto).', max_digits=12)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('cashier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='payments_taken', to=settings.AUTH_USER_MODEL)),
                ('order', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='payment', to='orders.order')),
            ],
            options={
                'verbose_name': 'Payment',
                'verbose_name_plural': 'Payments',
                'ordering': ['-created_at'],
            },
        ),
    ]
