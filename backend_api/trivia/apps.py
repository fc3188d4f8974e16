from django.apps import AppConfig


class TriviaConfig(AppConfig):
    name = "trivia"
    verbose_name = "Trivia board"

    def ready(self):
        # Registers the TRIVIA_BOARD setting_changed receiver.
        from . import conf  # noqa: F401
