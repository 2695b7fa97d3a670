# Generated manually for Qualiopi certification audits

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
            name='Audit',
            fields=[
                ('uuid', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('type', models.CharField(choices=[('initial', 'Audit initial'), ('surveillance', 'Audit de surveillance'), ('renewal', 'Audit de renouvellement')], max_length=20)),
                ('date', models.DateField(help_text="Date prévue de l'audit")),
                ('auditor_name', models.CharField(max_length=200)),
                ('auditor_contact', models.CharField(blank=True, default='', max_length=200)),
                ('auditor_phone', models.CharField(blank=True, default='', max_length=30)),
                ('location', models.CharField(blank=True, default='', max_length=255)),
                ('notes', models.TextField(blank=True, default='')),
                ('status', models.CharField(choices=[('scheduled', 'Planifié'), ('completed', 'Réalisé')], default='scheduled', max_length=20)),
                ('completion_date', models.DateField(blank=True, help_text="Date effective de l'audit", null=True)),
                ('result', models.CharField(blank=True, choices=[('passed', 'Certifié'), ('failed', 'Non certifié'), ('conditional', 'Certifié sous réserve')], default='', max_length=20)),
                ('score', models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MaxValueValidator(100)])),
                ('report_reference', models.CharField(blank=True, default='', max_length=255)),
                ('observations', models.JSONField(blank=True, default=list)),
                ('recommendations', models.JSONField(blank=True, default=list)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_quality_audits', to=settings.AUTH_USER_MODEL)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='audits', to='parametre.organization')),
            ],
            options={
                'verbose_name': 'Audit',
                'verbose_name_plural': 'Audits',
                'db_table': 'quality_audit',
                'ordering': ['date'],
                'indexes': [
                    models.Index(fields=['organization', 'status', 'date'], name='quality_audit_org_status_idx'),
                ],
            },
        ),
        migrations.AddConstraint(
            model_name='audit',
            constraint=models.CheckConstraint(check=models.Q(('score__isnull', True), ('score__lte', 100), _connector='OR'), name='audit_score_max_100'),
        ),
    ]
