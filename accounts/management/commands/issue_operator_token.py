# accounts/management/commands/issue_operator_token.py
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from accounts.identity import issue_operator_token


class Command(BaseCommand):
    help = (
        "Issue a signed operator token granting admin access to the API.\n\n"
        "Send it in the X-Operator-Token header. Tokens expire after "
        "OPERATOR_TOKEN_MAX_AGE seconds; changing HIRENEST_OPERATOR_SECRET "
        "revokes every token issued so far."
    )

    def add_arguments(self, parser):
        parser.add_argument('name', type=str, help='Operator name, recorded on every status change they make.')

    def handle(self, *args, **options):
        name = options['name'].strip()
        if not name:
            raise CommandError("Operator name must not be empty.")
        if not settings.OPERATOR_TOKEN_SECRET:
            raise CommandError("Set HIRENEST_OPERATOR_SECRET before issuing operator tokens.")

        token = issue_operator_token(name)
        hours = settings.OPERATOR_TOKEN_MAX_AGE / 3600
        self.stderr.write(f"Token for operator '{name}', valid for {hours:g}h:")
        self.stdout.write(token)
