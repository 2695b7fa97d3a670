# Generated manually for the quality action board

from django.conf import settings
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
            name='ActionCategory',
            fields=[
                ('uuid', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('label', models.CharField(help_text='Libellé de la catégorie', max_length=150)),
                ('color', models.CharField(default='#3f5ea9', help_text='Couleur hexadécimale', max_length=7)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='action_categories', to='parametre.organization')),
            ],
            options={
                'verbose_name': "Catégorie d'action",
                'verbose_name_plural': "Catégories d'actions",
                'db_table': 'quality_action_category',
                'ordering': ['created_at'],
            },
        ),
        migrations.AddConstraint(
            model_name='actioncategory',
            constraint=models.UniqueConstraint(fields=('organization', 'label'), name='unique_action_category_label_per_organization'),
        ),
        migrations.CreateModel(
            name='Action',
            fields=[
                ('uuid', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('subcategory', models.CharField(blank=True, default='', max_length=150)),
                ('priority', models.CharField(choices=[('Low', 'Basse'), ('Medium', 'Moyenne'), ('High', 'Haute')], default='Medium', max_length=10)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, default='')),
                ('status', models.CharField(choices=[('pending', 'En attente'), ('in_progress', 'En cours'), ('completed', 'Terminée'), ('cancelled', 'Annulée')], default='pending', max_length=20)),
                ('due_date', models.DateField(blank=True, help_text="Date d'échéance", null=True)),
                ('tags', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('assigned_to', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assigned_quality_actions', to=settings.AUTH_USER_MODEL)),
                ('category', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='actions', to='pac.actioncategory')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_quality_actions', to=settings.AUTH_USER_MODEL)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='actions', to='parametre.organization')),
            ],
            options={
                'verbose_name': 'Action',
                'verbose_name_plural': 'Actions',
                'db_table': 'quality_action',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['organization', 'status'], name='quality_action_org_status_idx'),
                    models.Index(fields=['organization', 'due_date'], name='quality_action_org_due_idx'),
                ],
            },
        ),
    ]
