from django.core.management.base import BaseCommand, CommandError

from portal.upstream.base import ApiError
from portal.views.emergency import build_bed_board


class Command(BaseCommand):
    help = "Print the emergency bed board (occupied and free beds) from live upstream data."

    def add_arguments(self, parser):
        parser.add_argument(
            "--transfers-release",
            action="store_true",
            help="Treat patients transferred to IPD, OT or ICU as having left their bed.",
        )

    def handle(self, *args, **options):
        try:
            board = build_bed_board(transfers_release=options["transfers_release"])
        except ApiError as e:
            raise CommandError(f"Could not load emergency beds: {e.message}") from e

        counts = board["counts"]
        self.stdout.write(f"Occupied {counts['occupied']} / {counts['total']} beds")
        for bed in board["occupied"]:
            who = bed["occupant"]
            self.stdout.write(
                f"  {bed['emergencyBedNo'] or bed['id']:<12} {who['patientName']} "
                f"({who['patientNo'] or '-'}) {who['emergencyStatus']}"
            )
        self.stdout.write(f"Free {counts['unoccupied']} beds")
        for bed in board["unoccupied"]:
            self.stdout.write(f"  {bed['emergencyBedNo'] or bed['id']}")
        self.stdout.write(self.style.SUCCESS("done"))
