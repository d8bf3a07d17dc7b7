from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Printer',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text="Queue name the print agent polls (e.g., 'XPrinter 80mm')", max_length=100, unique=True)),
                ('printer_type', models.CharField(choices=[('receipt', 'Receipt Printer'), ('kitchen', 'Kitchen Printer')], default='kitchen', help_text='Type of printer: receipt or kitchen', max_length=20)),
                ('ip_address', models.GenericIPAddressField(blank=True, help_text='IP address of the network printer', null=True)),
                ('port', models.IntegerField(default=9100, help_text='Port number for printer communication')),
                ('is_active', models.BooleanField(default=True, help_text='Whether this printer is currently active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['printer_type', 'name'],
                'indexes': [models.Index(fields=['printer_type', 'is_active'], name='printer_type_active_idx')],
            },
        ),
        migrations.CreateModel(
            name='KitchenZone',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text="Sector name (e.g., 'Cocina', 'Parrilla'). Tickets use it upper-cased.", max_length=100, unique=True)),
                ('is_active', models.BooleanField(default=True, help_text='Whether this kitchen zone is currently active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('printer', models.ForeignKey(blank=True, help_text='Printer assigned to this zone', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='kitchen_zones', to='settings.printer')),
            ],
            options={
                'ordering': ['name'],
            },
        ),
    ]
