# Generated manually for annual BPF reports

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('parametre', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Bpf',
            fields=[
                ('uuid', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('year', models.PositiveSmallIntegerField(help_text='Exercice comptable déclaré', validators=[django.core.validators.MinValueValidator(2020), django.core.validators.MaxValueValidator(2100)])),
                ('data', models.JSONField(blank=True, default=dict, help_text='Contenu du formulaire BPF')),
                ('status', models.CharField(choices=[('draft', 'Brouillon'), ('submitted', 'Transmis')], default='draft', max_length=20)),
                ('submitted_date', models.DateTimeField(blank=True, null=True)),
                ('submitted_to', models.CharField(blank=True, default='', help_text='Destinataire (DREETS, ...)', max_length=200)),
                ('submission_method', models.CharField(blank=True, default='', max_length=100)),
                ('notes', models.TextField(blank=True, default='')),
                ('export_reference', models.CharField(blank=True, default='', help_text='Dernier export généré', max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_bpfs', to=settings.AUTH_USER_MODEL)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bpfs', to='parametre.organization')),
            ],
            options={
                'verbose_name': 'BPF',
                'verbose_name_plural': 'BPF',
                'db_table': 'quality_bpf',
                'ordering': ['-year'],
            },
        ),
        migrations.AddConstraint(
            model_name='bpf',
            constraint=models.UniqueConstraint(fields=('organization', 'year'), name='unique_bpf_year_per_organization'),
        ),
    ]
