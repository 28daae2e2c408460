"""Run the scheduled-delivery and digest sweeps in this process."""

import asyncio
import signal

from django.core.management.base import BaseCommand

from engine.jobs.delivery_jobs import schedule_periodic_jobs
from engine.services.smart_notification_engine import get_engine


class Command(BaseCommand):
    """Start the batch scheduler loop until interrupted.

    With ``--once`` both sweeps run a single time. With ``--rq`` the sweeps
    are registered as periodic RQ jobs instead of running here.
    """

    help = "Run the smart notification batch scheduler"

    def add_arguments(self, parser):
        """Register command options."""
        parser.add_argument(
            "--once",
            action="store_true",
            help="Run the scheduled and digest sweeps once and exit",
        )
        parser.add_argument(
            "--rq",
            action="store_true",
            help="Register the sweeps as periodic RQ jobs and exit",
        )

    def handle(self, *_args, **options):
        """Run the command."""
        if options["rq"]:
            job_ids = schedule_periodic_jobs()
            self.stdout.write(
                self.style.SUCCESS(f"Scheduled {len(job_ids)} periodic jobs")
            )
            return

        asyncio.run(self._run(once=options["once"]))

    async def _run(self, once: bool) -> None:
        engine = get_engine()
        if not await engine.initialize():
            self.stdout.write(
                self.style.WARNING("Engine state not loaded, running degraded")
            )

        if once:
            delivered = await engine.scheduler.run_scheduled_sweep()
            digests = await engine.scheduler.run_batch_sweep()
            self.stdout.write(
                self.style.SUCCESS(
                    f"Delivered {delivered} scheduled notifications, "
                    f"created {digests} digests"
                )
            )
            return

        loop = asyncio.get_running_loop()
        for signum in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(signum, engine.scheduler.stop)

        self.stdout.write(self.style.SUCCESS("Batch scheduler running"))
        await engine.scheduler.run()
