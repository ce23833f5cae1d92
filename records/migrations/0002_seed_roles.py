from django.db import migrations

# Frozen copy of the role table at the time of this migration.
ROLES = [
    ('nurse', 'Nurse users with full access to all features', 1),
    ('doctor', 'Medical doctors with restricted access (no inventory/reports)', 2),
    ('student', 'Student users with restricted access (level 3 restrictions)', 3),
    ('employee', 'Employee users with restricted access (level 3 restrictions)', 3),
]


def seed_roles(apps, schema_editor):
    Role = apps.get_model('records', 'Role')
    for name, description, level in ROLES:
        Role.objects.get_or_create(name=name, defaults={'description': description, 'level': level})


def unseed_roles(apps, schema_editor):
    Role = apps.get_model('records', 'Role')
    Role.objects.filter(name__in=[name for name, _, _ in ROLES]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('records', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_roles, unseed_roles),
    ]
