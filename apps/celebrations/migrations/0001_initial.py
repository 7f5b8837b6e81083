# Generated manually for celebrations, Gift Leader history and contributions

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('groups', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Celebration',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('event_date', models.DateField()),
                ('year', models.PositiveIntegerField()),
                ('status', models.CharField(choices=[('upcoming', 'Upcoming'), ('active', 'Active'), ('completed', 'Completed')], default='upcoming', max_length=20)),
                ('target_amount', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, validators=[MinValueValidator(Decimal('0.01'))])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('celebrant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='celebrations_as_celebrant', to=settings.AUTH_USER_MODEL)),
                ('gift_leader', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='celebrations_as_leader', to=settings.AUTH_USER_MODEL)),
                ('group', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='celebrations', to='groups.group')),
            ],
            options={
                'db_table': 'celebrations',
                'ordering': ['event_date', 'created_at'],
                'indexes': [
                    models.Index(fields=['group', 'event_date'], name='celeb_group_date_idx'),
                    models.Index(fields=['celebrant', 'event_date'], name='celeb_celebrant_date_idx'),
                    models.Index(fields=['status'], name='celeb_status_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(('gift_leader__isnull', True), models.Q(('gift_leader', models.F('celebrant')), _negated=True), _connector='OR'),
                        name='celebration_leader_not_celebrant',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='GiftLeaderHistory',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('reason', models.CharField(choices=[('auto_rotation', 'Automatic rotation'), ('manual_reassign', 'Manual reassignment'), ('member_left', 'Leader left the group')], max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('assigned_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='leader_assignments_made', to=settings.AUTH_USER_MODEL)),
                ('assigned_to', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='leader_assignments', to=settings.AUTH_USER_MODEL)),
                ('celebration', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='leader_history', to='celebrations.celebration')),
            ],
            options={
                'db_table': 'gift_leader_history',
                'ordering': ['-created_at'],
                'verbose_name_plural': 'gift leader history',
                'indexes': [
                    models.Index(fields=['celebration', 'created_at'], name='leader_history_celeb_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CelebrationContribution',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[MinValueValidator(Decimal('0.01'))])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('celebration', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='contributions', to='celebrations.celebration')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='celebration_contributions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'celebration_contributions',
                'ordering': ['-amount', 'created_at'],
                'indexes': [
                    models.Index(fields=['celebration', 'amount'], name='contrib_celeb_amount_idx'),
                ],
                'unique_together': {('celebration', 'user')},
            },
        ),
    ]
