"""
Assign a role to one account by hand.

This is how nurses are promoted; the sign-in flow never assigns or
removes the nurse role on its own.
"""
import logging

from django.core.management.base import BaseCommand, CommandError

from records.models import User
from records.roles import RoleName
from records.services.audit import log_action
from records.services.roles import find_role

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Set the role of the user with the given email (default role: nurse)."

    def add_arguments(self, parser):
        parser.add_argument('email')
        parser.add_argument('--role', default=RoleName.NURSE.value, choices=RoleName.values)

    def handle(self, *args, **opts):
        email = opts['email'].strip()
        user = User.objects.select_related('role').filter(email__iexact=email).first()
        if user is None:
            raise CommandError(f"No user with email {email}")
        role = find_role(opts['role'])
        if role is None:
            raise CommandError(f"Role '{opts['role']}' does not exist; run seed_roles first")

        previous = user.role.name if user.role else None
        if previous == role.name:
            self.stdout.write(f"{user.email} already has role {role.name}")
            return
        user.role = role
        user.save(update_fields=['role'])
        logger.info("Role of %s set manually: %s -> %s", user.email, previous, role.name)
        log_action(user=user, action='role_change', object_type='user', object_id=user.id,
                   detail={'from': previous, 'to': role.name, 'source': 'command'})
        self.stdout.write(self.style.SUCCESS(f"{user.email}: {previous or '(none)'} -> {role.name}"))
