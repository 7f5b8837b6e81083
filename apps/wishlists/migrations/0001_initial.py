# Generated manually for wishlist items, claims and split pledges

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
            name='WishlistItem',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200)),
                ('price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, validators=[MinValueValidator(Decimal('0.01'))])),
                ('item_type', models.CharField(choices=[('standard', 'Standard'), ('surprise_me', 'Surprise me'), ('mystery_box', 'Mystery box')], default='standard', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('group', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='wishlist_items', to='groups.group')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='wishlist_items', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'wishlist_items',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['owner', 'created_at'], name='wishlist_owner_created_idx'),
                    models.Index(fields=['group'], name='wishlist_group_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='GiftClaim',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('claim_type', models.CharField(choices=[('full', 'Full'), ('split', 'Split')], max_length=10)),
                ('status', models.CharField(choices=[('full_claimed', 'Claimed'), ('split_open', 'Split open'), ('split_funded', 'Split funded')], max_length=20)),
                ('additional_costs', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, validators=[MinValueValidator(Decimal('0.01'))])),
                ('target_amount', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, validators=[MinValueValidator(Decimal('0.01'))])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('claimed_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='gift_claims', to=settings.AUTH_USER_MODEL)),
                ('item', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='claim', to='wishlists.wishlistitem')),
            ],
            options={
                'db_table': 'gift_claims',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['claimed_by', 'created_at'], name='claims_claimant_created_idx'),
                    models.Index(fields=['status'], name='claims_status_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(('claim_type', 'full'), ('status', 'full_claimed')),
                            models.Q(('claim_type', 'split'), ('status__in', ['split_open', 'split_funded']), ('target_amount__isnull', False)),
                            _connector='OR',
                        ),
                        name='gift_claim_type_matches_status',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='SplitPledge',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[MinValueValidator(Decimal('0.01'))])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('claim', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='pledges', to='wishlists.giftclaim')),
                ('contributor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='split_pledges', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'split_pledges',
                'ordering': ['-amount', 'created_at'],
                'indexes': [
                    models.Index(fields=['contributor', 'created_at'], name='pledges_contributor_idx'),
                ],
                'unique_together': {('claim', 'contributor')},
            },
        ),
    ]
