# users/management/commands/ensure_superuser.py

"""
Idempotent superuser bootstrap for deployments without a shell.

- Reads AUTO_ADMIN_EMAIL + AUTO_ADMIN_PASSWORD through django-environ.
- Creates the superuser if missing; otherwise re-asserts its flags and password.
- Never prints the password.
"""

from __future__ import annotations

import environ
from django.core.management.base import BaseCommand
from django.db import transaction

from users.models import User

env = environ.Env()


class Command(BaseCommand):
    help = "Create/update an initial superuser from env vars (idempotent)."

    def handle(self, *args, **options):
        email = env.str("AUTO_ADMIN_EMAIL", default="").strip()
        password = env.str("AUTO_ADMIN_PASSWORD", default="").strip()

        if not email or not password:
            self.stdout.write(self.style.WARNING("AUTO_ADMIN_* env vars not set. Skipping."))
            return

        with transaction.atomic():
            user = User.objects.filter(email__iexact=email).first()

            if user is None:
                User.objects.create_superuser(email=email, password=password)
                self.stdout.write(self.style.SUCCESS(f"Superuser ensured: {email} (created)"))
                return

            user.is_active = True
            user.is_staff = True
            user.is_superuser = True
            user.role = User.Role.ADMIN
            user.set_password(password)
            user.save()

        self.stdout.write(self.style.SUCCESS(f"Superuser ensured: {email} (updated)"))
