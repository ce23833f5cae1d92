from django.core.management.base import BaseCommand

from records.models import Role, User


class Command(BaseCommand):
    help = "List the roles and the role held by every user."

    def handle(self, *args, **opts):
        self.stdout.write("Roles:")
        for role in Role.objects.all():
            self.stdout.write(f"  {role.name:<10} level={role.level}  users={role.users.count()}")

        self.stdout.write("Users:")
        missing = 0
        for user in User.objects.select_related('role').order_by('email'):
            if user.role is None:
                missing += 1
            self.stdout.write(f"  {user.email:<40} {user.role.name if user.role else '(none)'}")
        if missing:
            self.stdout.write(self.style.WARNING(f"{missing} user(s) without a role"))
        else:
            self.stdout.write(self.style.SUCCESS("All users have a role."))
