from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('settings', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='AddOn',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True)),
                ('extra_price', models.DecimalField(decimal_places=0, default=0, help_text='Amount added per unit of the line item it is attached to.', max_digits=12)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
            ],
            options={
                'verbose_name': 'Add-on',
                'verbose_name_plural': 'Add-ons',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Name of the product category.', max_length=100, unique=True)),
                ('order', models.IntegerField(default=0, help_text='Display order for this category. Lower numbers appear first.')),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('kitchen_zone', models.ForeignKey(blank=True, help_text='Sector that prepares this category. Blank routes to the general ticket.', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='categories', to='settings.kitchenzone')),
            ],
            options={
                'verbose_name': 'Category',
                'verbose_name_plural': 'Categories',
                'ordering': ['order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Name of the product.', max_length=200)),
                ('price', models.DecimalField(decimal_places=0, help_text='The selling price of the product.', max_digits=12)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('allowed_add_ons', models.ManyToManyField(blank=True, help_text='Add-ons a server may attach to this product.', related_name='products', to='products.addon')),
                ('category', models.ForeignKey(blank=True, help_text='Product category. Leave blank for uncategorized products.', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='products', to='products.category')),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['category', 'is_active'], name='product_cat_active_idx')],
            },
        ),
    ]
