# Generated manually for the quality settings and tenancy models

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Organization',
            fields=[
                ('uuid', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text="Raison sociale de l'organisme", max_length=200)),
                ('slug', models.SlugField(max_length=100, unique=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Organisme',
                'verbose_name_plural': 'Organismes',
                'db_table': 'organization',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='OrganizationMembership',
            fields=[
                ('uuid', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('role', models.CharField(choices=[('admin', 'Administrateur'), ('member', 'Membre'), ('external_collaborator', 'Collaborateur externe')], default='member', max_length=30)),
                ('indicator_access', models.JSONField(blank=True, default=list, help_text='Indicateurs consultables par un collaborateur externe')),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='memberships', to='parametre.organization')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='memberships', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': "Membre d'organisme",
                'verbose_name_plural': "Membres d'organisme",
                'db_table': 'organization_membership',
            },
        ),
        migrations.AddConstraint(
            model_name='organizationmembership',
            constraint=models.UniqueConstraint(fields=('user', 'organization'), name='unique_membership_user_organization'),
        ),
        migrations.CreateModel(
            name='QualitySettings',
            fields=[
                ('uuid', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('evidence_weight', models.PositiveSmallIntegerField(default=50, help_text='Part du taux de complétion apportée par les preuves (1 à 99)')),
                ('reference_weight', models.PositiveSmallIntegerField(default=50, help_text='Part du taux de complétion apportée par les procédures et modèles (1 à 99)')),
                ('invitation_validity_days', models.PositiveSmallIntegerField(default=7, help_text="Durée de validité d'une invitation en jours")),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='quality_settings', to='parametre.organization')),
            ],
            options={
                'verbose_name': 'Paramètres qualité',
                'verbose_name_plural': 'Paramètres qualité',
                'db_table': 'quality_settings',
            },
        ),
        migrations.AddConstraint(
            model_name='qualitysettings',
            constraint=models.CheckConstraint(check=models.Q(('evidence_weight__gte', 1), ('evidence_weight__lte', 99), ('reference_weight__gte', 1), ('reference_weight__lte', 99)), name='quality_settings_weights_range'),
        ),
        migrations.CreateModel(
            name='ActivityLog',
            fields=[
                ('uuid', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('action', models.CharField(choices=[('create', 'Création'), ('update', 'Modification'), ('delete', 'Suppression'), ('export', 'Export'), ('submit', 'Soumission'), ('complete', 'Clôture'), ('invite', 'Invitation'), ('revoke', 'Révocation'), ('accept', 'Acceptation'), ('initialize', 'Initialisation')], max_length=20)),
                ('entity_type', models.CharField(choices=[('indicator', 'Indicateur'), ('document', 'Document'), ('action', 'Action'), ('action_category', "Catégorie d'action"), ('task', 'Tâche'), ('task_category', 'Catégorie de tâche'), ('audit', 'Audit'), ('bpf', 'BPF'), ('statistic', 'Statistique'), ('invitation', 'Invitation'), ('settings', 'Paramètres')], max_length=20)),
                ('entity_id', models.CharField(blank=True, max_length=100, null=True)),
                ('entity_name', models.CharField(blank=True, max_length=200, null=True)),
                ('description', models.TextField()),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('user_agent', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='activity_logs', to='parametre.organization')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='activity_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': "Log d'activité",
                'verbose_name_plural': "Logs d'activité",
                'db_table': 'activity_log',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['organization', '-created_at'], name='activity_log_org_created_idx'),
                    models.Index(fields=['entity_type', '-created_at'], name='activity_log_entity_idx'),
                ],
            },
        ),
    ]
