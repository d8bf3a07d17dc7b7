from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('orders', '0001_initial'),
        ('settings', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PrintJob',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('kind', models.CharField(choices=[('bill', 'Bill'), ('kitchen', 'Kitchen ticket')], max_length=10)),
                ('channel', models.CharField(max_length=100)),
                ('body', models.JSONField(help_text='Ticket payload as built for this channel.')),
                ('fingerprint', models.CharField(db_index=True, max_length=40)),
                ('trigger', models.CharField(default='manual', max_length=20)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('PRINTED', 'Printed'), ('ERROR', 'Error')], default='PENDING', max_length=10)),
                ('error', models.TextField(blank=True, default='')),
                ('attempts', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='print_jobs', to='orders.order')),
                ('printer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='jobs', to='settings.printer')),
            ],
            options={
                'ordering': ['created_at', 'id'],
                'indexes': [
                    models.Index(fields=['printer', 'status', 'created_at'], name='printjob_queue_idx'),
                    models.Index(fields=['order', 'channel', 'fingerprint'], name='printjob_dedup_idx'),
                ],
            },
        ),
    ]
