# dental_core/iam/management/commands/ensure_system_owner.py

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from dental_core.iam.capabilities import ROLE_SYSTEM_OWNER
from dental_core.iam.models import PrincipalKind, UserProfile


class Command(BaseCommand):
    help = "Ensure a platform system-owner profile exists for the given user (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("username", type=str)
        parser.add_argument("--email", type=str, default="")
        parser.add_argument("--password", type=str, default=None, help="Only used when the user is created.")

    @transaction.atomic
    def handle(self, *args, **opts):
        User = get_user_model()
        user, user_created = User.objects.get_or_create(
            username=opts["username"],
            defaults={"email": opts["email"]},
        )
        if user_created:
            if opts["password"]:
                user.set_password(opts["password"])
            else:
                user.set_unusable_password()
            user.save()

        profile = UserProfile.objects.filter(user=user).first()
        if profile is not None and profile.kind != PrincipalKind.SYSTEM_OWNER:
            raise CommandError(f"User {user.username} already has a {profile.kind} profile.")

        if profile is None:
            UserProfile.objects.create(
                user=user,
                tenant=None,
                kind=PrincipalKind.SYSTEM_OWNER,
                roles=[ROLE_SYSTEM_OWNER],
            )
            self.stdout.write(self.style.SUCCESS(f"System owner profile created for {user.username}."))
        else:
            self.stdout.write(self.style.SUCCESS(f"System owner profile already present for {user.username}."))
