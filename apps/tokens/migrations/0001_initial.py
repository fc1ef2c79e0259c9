# Generated manually for the tokens app

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
            name='Token',
            fields=[
                ('id', models.CharField(max_length=32, primary_key=True, serialize=False)),
                ('token_date', models.DateField()),
                ('time_slot', models.CharField(max_length=20)),
                ('queue_position', models.PositiveIntegerField()),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('active', 'Active'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='pending', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('shop', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tokens', to='shops.shop')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tokens', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'tokens',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='QueueCounter',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('last_position', models.PositiveIntegerField(default=0)),
                ('shop', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='queue_counters', to='shops.shop')),
            ],
            options={
                'db_table': 'token_queue_counters',
            },
        ),
        migrations.AddIndex(
            model_name='token',
            index=models.Index(fields=['shop', 'token_date'], name='tokens_shop_date_idx'),
        ),
        migrations.AddIndex(
            model_name='token',
            index=models.Index(fields=['user', 'token_date'], name='tokens_user_date_idx'),
        ),
        migrations.AddConstraint(
            model_name='queuecounter',
            constraint=models.UniqueConstraint(fields=('shop', 'date'), name='uniq_queue_counter_shop_date'),
        ),
    ]
