# Generated manually for the quality task board

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('parametre', '0001_initial'),
        ('indicateurs', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='TaskCategory',
            fields=[
                ('uuid', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=150)),
                ('slug', models.SlugField(max_length=160)),
                ('description', models.TextField(blank=True, default='')),
                ('type', models.CharField(choices=[('veille', 'Veille'), ('competence', 'Compétences'), ('dysfonctionnement', 'Dysfonctionnements'), ('amelioration', 'Amélioration continue'), ('handicap', 'Handicap'), ('custom', 'Personnalisée')], default='custom', max_length=20)),
                ('color', models.CharField(default='#3f5ea9', max_length=7)),
                ('icon', models.CharField(blank=True, default='', max_length=50)),
                ('is_system', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('indicator', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='task_categories', to='indicateurs.indicator')),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='task_categories', to='parametre.organization')),
            ],
            options={
                'verbose_name': 'Catégorie de tâches',
                'verbose_name_plural': 'Catégories de tâches',
                'db_table': 'quality_task_category',
                'ordering': ['-is_system', 'created_at'],
            },
        ),
        migrations.AddConstraint(
            model_name='taskcategory',
            constraint=models.UniqueConstraint(fields=('organization', 'slug'), name='unique_task_category_slug_per_organization'),
        ),
        migrations.AddConstraint(
            model_name='taskcategory',
            constraint=models.UniqueConstraint(condition=models.Q(('is_system', True)), fields=('organization', 'type'), name='unique_system_task_category_type'),
        ),
        migrations.CreateModel(
            name='Task',
            fields=[
                ('uuid', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, default='')),
                ('status', models.CharField(choices=[('todo', 'À faire'), ('in_progress', 'En cours'), ('done', 'Terminée'), ('archived', 'Archivée')], default='todo', max_length=20)),
                ('priority', models.CharField(choices=[('low', 'Basse'), ('medium', 'Moyenne'), ('high', 'Haute'), ('urgent', 'Urgente')], default='medium', max_length=10)),
                ('start_date', models.DateField(blank=True, null=True)),
                ('due_date', models.DateField(blank=True, null=True)),
                ('attachments', models.JSONField(blank=True, default=list, help_text='Pièces jointes [{name, url}]')),
                ('checklist', models.JSONField(blank=True, default=list, help_text='Liste de contrôle [{text, completed}]')),
                ('notes', models.TextField(blank=True, default='')),
                ('position', models.IntegerField(default=0, help_text='Ordre manuel dans la catégorie')),
                ('position_order', models.PositiveIntegerField(default=0, help_text='Rang de soumission lors du dernier réordonnancement (départage des positions égales)')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('assigned_to', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assigned_quality_tasks', to=settings.AUTH_USER_MODEL)),
                ('category', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='tasks', to='taches.taskcategory')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_quality_tasks', to=settings.AUTH_USER_MODEL)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tasks', to='parametre.organization')),
            ],
            options={
                'verbose_name': 'Tâche',
                'verbose_name_plural': 'Tâches',
                'db_table': 'quality_task',
                'ordering': ['position', 'position_order', 'created_at'],
                'indexes': [
                    models.Index(fields=['organization', 'category', 'position'], name='quality_task_position_idx'),
                ],
            },
        ),
    ]
