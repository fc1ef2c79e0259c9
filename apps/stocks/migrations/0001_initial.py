# Generated manually for the stocks app

from decimal import Decimal
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('shops', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='StockItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_code', models.CharField(max_length=20)),
                ('item_name', models.CharField(max_length=100)),
                ('item_name_hindi', models.CharField(blank=True, max_length=100)),
                ('unit', models.CharField(default='kg', max_length=10)),
                ('quantity', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('government_allocated', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('last_restocked', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('allocated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='stock_allocations', to=settings.AUTH_USER_MODEL)),
                ('shop', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stock_items', to='shops.shop')),
            ],
            options={
                'db_table': 'stock_items',
                'ordering': ['item_code'],
            },
        ),
        migrations.CreateModel(
            name='StockAuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_code', models.CharField(max_length=20)),
                ('changed_by_role', models.CharField(max_length=20)),
                ('change_type', models.CharField(choices=[('shopkeeper_update', 'Shopkeeper update'), ('admin_correction', 'Admin correction'), ('government_allocation', 'Government allocation'), ('delta_update', 'Delta update')], max_length=30)),
                ('old_quantity', models.DecimalField(decimal_places=2, max_digits=12)),
                ('new_quantity', models.DecimalField(decimal_places=2, max_digits=12)),
                ('quantity_difference', models.DecimalField(decimal_places=2, max_digits=12)),
                ('reason', models.CharField(blank=True, max_length=255)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('changed_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='stock_changes_made', to=settings.AUTH_USER_MODEL)),
                ('shop', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stock_audit_logs', to='shops.shop')),
                ('stock_item', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='audit_logs', to='stocks.stockitem')),
            ],
            options={
                'db_table': 'stock_audit_log',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.AddConstraint(
            model_name='stockitem',
            constraint=models.UniqueConstraint(fields=('shop', 'item_code'), name='uniq_stock_shop_item'),
        ),
        migrations.AddIndex(
            model_name='stockauditlog',
            index=models.Index(fields=['shop', 'created_at'], name='stock_audit_shop_created_idx'),
        ),
    ]
