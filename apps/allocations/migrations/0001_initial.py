# Generated manually for the allocations app

from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='MonthlyAllocation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_code', models.CharField(max_length=20)),
                ('month', models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(12)])),
                ('year', models.PositiveSmallIntegerField()),
                ('eligible_quantity', models.DecimalField(decimal_places=2, max_digits=10, validators=[MinValueValidator(Decimal('0'))])),
                ('collected_quantity', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=10, validators=[MinValueValidator(Decimal('0'))])),
                ('collection_date', models.DateTimeField(blank=True, null=True)),
                ('modification_reason', models.CharField(blank=True, max_length=255, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('last_modified_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='modified_allocations', to=settings.AUTH_USER_MODEL)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='allocations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'monthly_allocations',
                'ordering': ['item_code'],
            },
        ),
        migrations.CreateModel(
            name='QuotaChangeLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_code', models.CharField(max_length=20)),
                ('month', models.PositiveSmallIntegerField()),
                ('year', models.PositiveSmallIntegerField()),
                ('old_quantity', models.DecimalField(decimal_places=2, max_digits=10)),
                ('new_quantity', models.DecimalField(decimal_places=2, max_digits=10)),
                ('change_amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('changed_by_role', models.CharField(max_length=20)),
                ('reason', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('allocation', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='change_logs', to='allocations.monthlyallocation')),
                ('changed_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='quota_changes_made', to=settings.AUTH_USER_MODEL)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='quota_change_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'quota_change_log',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.AddConstraint(
            model_name='monthlyallocation',
            constraint=models.UniqueConstraint(fields=('user', 'item_code', 'month', 'year'), name='uniq_allocation_user_item_period'),
        ),
        migrations.AddConstraint(
            model_name='monthlyallocation',
            constraint=models.CheckConstraint(condition=models.Q(collected_quantity__lte=models.F('eligible_quantity')), name='allocation_collected_lte_eligible'),
        ),
        migrations.AddIndex(
            model_name='monthlyallocation',
            index=models.Index(fields=['user', 'year', 'month'], name='alloc_user_period_idx'),
        ),
        migrations.AddIndex(
            model_name='quotachangelog',
            index=models.Index(fields=['user', 'created_at'], name='qcl_user_created_idx'),
        ),
    ]
