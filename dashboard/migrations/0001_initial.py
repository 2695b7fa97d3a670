# Generated manually for daily quality statistics snapshots

from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('parametre', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Statistic',
            fields=[
                ('uuid', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateField()),
                ('indicators_total', models.PositiveIntegerField(default=0)),
                ('indicators_completed', models.PositiveIntegerField(default=0)),
                ('indicators_in_progress', models.PositiveIntegerField(default=0)),
                ('indicators_not_started', models.PositiveIntegerField(default=0)),
                ('completion_percentage', models.DecimalField(decimal_places=2, default=0, help_text='Taux de complétion moyen des indicateurs applicables', max_digits=5)),
                ('documents_total', models.PositiveIntegerField(default=0)),
                ('documents_procedures', models.PositiveIntegerField(default=0)),
                ('documents_models', models.PositiveIntegerField(default=0)),
                ('documents_evidences', models.PositiveIntegerField(default=0)),
                ('actions_total', models.PositiveIntegerField(default=0)),
                ('actions_pending', models.PositiveIntegerField(default=0)),
                ('actions_completed', models.PositiveIntegerField(default=0)),
                ('actions_overdue', models.PositiveIntegerField(default=0)),
                ('tasks_total', models.PositiveIntegerField(default=0)),
                ('tasks_completed', models.PositiveIntegerField(default=0)),
                ('tasks_pending', models.PositiveIntegerField(default=0)),
                ('tasks_overdue', models.PositiveIntegerField(default=0)),
                ('generated_at', models.DateTimeField()),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='quality_statistics', to='parametre.organization')),
            ],
            options={
                'verbose_name': 'Statistique qualité',
                'verbose_name_plural': 'Statistiques qualité',
                'db_table': 'quality_statistic',
                'ordering': ['-date'],
            },
        ),
        migrations.AddConstraint(
            model_name='statistic',
            constraint=models.UniqueConstraint(fields=('organization', 'date'), name='unique_statistic_per_organization_date'),
        ),
    ]
