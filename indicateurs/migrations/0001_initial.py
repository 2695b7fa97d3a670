# Generated manually for the Qualiopi indicator catalog

import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import indicateurs.models
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('parametre', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Indicator',
            fields=[
                ('uuid', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('number', models.PositiveSmallIntegerField(help_text="Numéro de l'indicateur (1 à 32)", validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(32)])),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, default='')),
                ('category', models.CharField(blank=True, default='', help_text='Critère Qualiopi', max_length=150)),
                ('status', models.CharField(choices=[('not_started', 'Non commencé'), ('in_progress', 'En cours'), ('completed', 'Terminé')], default='not_started', max_length=20)),
                ('completion_rate', models.PositiveSmallIntegerField(default=0, help_text='Taux de complétion calculé (0 à 100)', validators=[django.core.validators.MaxValueValidator(100)])),
                ('document_counts', models.JSONField(default=indicateurs.models.default_document_counts)),
                ('has_documents', models.BooleanField(default=False)),
                ('requirements', models.JSONField(blank=True, default=list, help_text="Exigences de l'indicateur")),
                ('notes', models.TextField(blank=True, default='')),
                ('is_applicable', models.BooleanField(default=True, help_text="Indique si l'indicateur s'applique à l'organisme")),
                ('last_updated', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='indicators', to='parametre.organization')),
            ],
            options={
                'verbose_name': 'Indicateur',
                'verbose_name_plural': 'Indicateurs',
                'db_table': 'quality_indicator',
                'ordering': ['number'],
            },
        ),
        migrations.AddConstraint(
            model_name='indicator',
            constraint=models.UniqueConstraint(fields=('organization', 'number'), name='unique_indicator_number_per_organization'),
        ),
        migrations.AddConstraint(
            model_name='indicator',
            constraint=models.CheckConstraint(check=models.Q(('completion_rate__lte', 100)), name='indicator_completion_rate_max_100'),
        ),
    ]
