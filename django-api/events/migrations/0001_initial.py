import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Event',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200)),
                ('slug', models.SlugField(max_length=200)),
                ('description', models.TextField(max_length=2000)),
                ('overview', models.CharField(max_length=500)),
                ('image', models.CharField(max_length=500)),
                ('venue', models.CharField(max_length=255)),
                ('location', models.CharField(max_length=255)),
                ('date', models.DateField()),
                ('time', models.CharField(max_length=8)),
                ('mode', models.CharField(choices=[('online', 'Online'), ('offline', 'Offline'), ('hybrid', 'Hybrid')], max_length=10)),
                ('audience', models.CharField(max_length=255)),
                ('organizer', models.CharField(max_length=255)),
                ('agenda', models.JSONField(default=list)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['date', '-created_at'], name='event_date_created_idx'),
                    models.Index(fields=['mode'], name='event_mode_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('slug',), name='unique_event_slug'),
                ],
            },
        ),
        migrations.CreateModel(
            name='EventTag',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('position', models.PositiveSmallIntegerField(default=0)),
                ('event', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tag_links', to='events.event')),
            ],
            options={
                'ordering': ['position'],
                'indexes': [
                    models.Index(fields=['name'], name='event_tag_name_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('event', 'name'), name='unique_event_tag'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Booking',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('email', models.EmailField(max_length=254)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('event', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bookings', to='events.event')),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['email'], name='booking_email_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('event', 'email'), name='unique_booking_event_email'),
                ],
            },
        ),
    ]
