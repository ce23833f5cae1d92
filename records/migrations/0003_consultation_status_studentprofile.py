import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def normalize_status(apps, schema_editor):
    Consultation = apps.get_model('records', 'Consultation')
    Consultation.objects.exclude(status__in=['in-progress', 'completed']).update(status='completed')


class Migration(migrations.Migration):

    dependencies = [
        ('records', '0002_seed_roles'),
    ]

    operations = [
        migrations.RunPython(normalize_status, migrations.RunPython.noop),
        migrations.AlterField(
            model_name='consultation',
            name='status',
            field=models.CharField(choices=[('in-progress', 'In progress'), ('completed', 'Completed')], db_index=True, default='completed', max_length=16),
        ),
        migrations.CreateModel(
            name='StudentProfile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('first_name', models.CharField(max_length=255)),
                ('last_name', models.CharField(max_length=255)),
                ('middle_initial', models.CharField(blank=True, max_length=1)),
                ('suffix', models.CharField(blank=True, max_length=10)),
                ('date_of_birth', models.DateField()),
                ('nationality', models.CharField(blank=True, max_length=255)),
                ('civil_status', models.CharField(blank=True, choices=[('Single', 'Single'), ('Married', 'Married'), ('Divorced', 'Divorced'), ('Widowed', 'Widowed')], max_length=16)),
                ('address', models.TextField(blank=True)),
                ('guardian_name', models.CharField(blank=True, max_length=255)),
                ('guardian_contact', models.CharField(max_length=255)),
                ('blood_type', models.CharField(blank=True, choices=[('A+', 'A+'), ('A-', 'A-'), ('B+', 'B+'), ('B-', 'B-'), ('AB+', 'AB+'), ('AB-', 'AB-'), ('O+', 'O+'), ('O-', 'O-')], max_length=3)),
                ('height', models.CharField(blank=True, max_length=10)),
                ('religion', models.CharField(blank=True, max_length=255)),
                ('eye_color', models.CharField(blank=True, choices=[('Brown', 'Brown'), ('Black', 'Black'), ('Blue', 'Blue'), ('Green', 'Green'), ('Gray', 'Gray'), ('Hazel', 'Hazel')], max_length=16)),
                ('chronic_conditions', models.TextField(blank=True)),
                ('known_allergies', models.TextField(blank=True)),
                ('disabilities', models.TextField(blank=True)),
                ('immunization_history', models.TextField(blank=True)),
                ('genetic_conditions', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='student_profile', to=settings.AUTH_USER_MODEL)),
            ],
        ),
    ]
