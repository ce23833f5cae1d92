"""
Create the four clinic roles and bring existing accounts in line.

Idempotent: roles are upserted from ``ROLE_DEFINITIONS``; accounts listed in
``EMAIL_ROLE_MAPPING`` and accounts without any role go through the same
role resolver as a sign-in, so nurses are left alone.
"""
from django.core.management.base import BaseCommand
from django.db.models import Q

from records.models import Role, User
from records.roles import ROLE_DEFINITIONS
from records.services.roles import OUTCOME_ASSIGNED, email_role_mapping, resolve_role


class Command(BaseCommand):
    help = "Create/update the nurse, doctor, student and employee roles and assign roles to existing users."

    def handle(self, *args, **opts):
        for name, (description, level) in ROLE_DEFINITIONS.items():
            _, created = Role.objects.update_or_create(
                name=name.value, defaults={'description': description, 'level': level},
            )
            self.stdout.write(self.style.SUCCESS(f"{'created' if created else 'ok'}: {name.value} (level {level})"))

        mapping = email_role_mapping()
        mapped = Q()
        for email in mapping:
            mapped |= Q(email__iexact=email)
        users = User.objects.select_related('role').filter(Q(role__isnull=True) | mapped)

        assigned = 0
        for user in users.order_by('id'):
            result = resolve_role(user, user.email, mapping=mapping, source='seed_roles')
            if result.outcome == OUTCOME_ASSIGNED:
                assigned += 1
                self.stdout.write(f"{user.email} -> {result.role.name}")
        self.stdout.write(self.style.SUCCESS(f"Roles seeded, {assigned} user(s) updated."))
