from django.core.management.base import BaseCommand, CommandError

from trivia.board import FetchError, InsufficientPoolError, get_header_text, load_board
from trivia.conf import get_board_config, get_trivia_client


class Command(BaseCommand):
    help = "Fetch the category pool from the trivia source and optionally load a full board."

    def add_arguments(self, parser):
        parser.add_argument(
            "--load",
            action="store_true",
            help="Also load a complete board and list its category headers.",
        )

    def handle(self, *args, **options):
        # PUBLIC_INTERFACE
        # Read-only against the source; nothing is stored.
        with get_trivia_client() as client:
            self._check(client, load=options["load"])

    def _check(self, client, load):
        config = get_board_config()
        try:
            pool = client.get_category_pool(
                config.category_pool_size, min_clues=config.clues_per_category
            )
        except FetchError as e:
            raise CommandError(f"Trivia source unavailable: {e}") from e

        if len(pool) < config.category_count:
            self.stdout.write(
                self.style.WARNING(
                    f"Only {len(pool)} usable categories; {config.category_count} needed."
                )
            )
        else:
            self.stdout.write(self.style.SUCCESS(f"{len(pool)} usable categories available."))

        if not load:
            return

        try:
            board = load_board(
                config.category_count,
                pool=pool,
                client=client,
                clues_per_category=config.clues_per_category,
            )
        except (FetchError, InsufficientPoolError) as e:
            raise CommandError(f"Board load failed: {e}") from e

        for category in board.categories:
            self.stdout.write(f"- {get_header_text(category)} ({len(category.clues)} clues)")
        self.stdout.write(self.style.SUCCESS(f"Loaded {board.category_count} categories."))
