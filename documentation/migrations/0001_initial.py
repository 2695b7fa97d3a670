# Generated manually for quality documents and their indicator links

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
            name='Document',
            fields=[
                ('uuid', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text='Nom du document', max_length=255)),
                ('type', models.CharField(choices=[('procedure', 'Procédure'), ('model', 'Modèle'), ('evidence', 'Preuve')], max_length=20)),
                ('source', models.CharField(choices=[('upload', 'Fichier téléversé'), ('url', 'Lien externe')], default='url', max_length=10)),
                ('file_reference', models.CharField(help_text='Chemin dans le stockage ou URL externe', max_length=500)),
                ('file_type', models.CharField(blank=True, default='', max_length=20)),
                ('size_bytes', models.PositiveBigIntegerField(blank=True, null=True)),
                ('description', models.TextField(blank=True, default='')),
                ('category', models.CharField(blank=True, default='', max_length=150)),
                ('status', models.CharField(choices=[('active', 'Actif'), ('inactive', 'Inactif'), ('archived', 'Archivé')], default='active', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='quality_documents', to=settings.AUTH_USER_MODEL)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='quality_documents', to='parametre.organization')),
            ],
            options={
                'verbose_name': 'Document qualité',
                'verbose_name_plural': 'Documents qualité',
                'db_table': 'quality_document',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['organization', 'type'], name='quality_document_org_type_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DocumentIndicator',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('document', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='indicator_links', to='documentation.document')),
                ('indicator', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='document_links', to='indicateurs.indicator')),
            ],
            options={
                'verbose_name': 'Association document / indicateur',
                'verbose_name_plural': 'Associations documents / indicateurs',
                'db_table': 'document_indicator',
            },
        ),
        migrations.AddConstraint(
            model_name='documentindicator',
            constraint=models.UniqueConstraint(fields=('document', 'indicator'), name='unique_document_indicator'),
        ),
        migrations.AddField(
            model_name='document',
            name='indicators',
            field=models.ManyToManyField(blank=True, related_name='documents', through='documentation.DocumentIndicator', to='indicateurs.indicator'),
        ),
    ]
